# routeinfo/formats/gpx.py
"""
GPX helpers for routeinfo

This module is intentionally format-focused:
- GPX namespace handling (1.0, 1.1 or none)
- safely reading ElementTree
- turning the first track (or route) into an ordered point sequence

Analysis works on one flat point sequence, so only the first <trk> is read;
its <trkseg> blocks are concatenated in document order. A document without
tracks falls back to its first <rte>.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from routeinfo.analyze.models import TrackPoint
from routeinfo.errors import InvalidGpxError, MalformedPointError

logger = logging.getLogger(__name__)

GPX_NAMESPACES = (
    "http://www.topografix.com/GPX/1/1",
    "http://www.topografix.com/GPX/1/0",
)

STAGE = "gpx"


def _namespace(root: ET.Element) -> str:
    """Return the root's namespace URI, or "" for an un-namespaced document."""
    if root.tag.startswith("{"):
        return root.tag[1:].split("}", 1)[0]
    return ""


def qn(tag: str, ns: str) -> str:
    """
    Build an ElementTree-qualified name for a GPX tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return f"{{{ns}}}{tag}" if ns else tag


def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      ET.ParseError, OSError
    """
    return ET.parse(path)


def parse_gpx(text: str) -> ET.Element:
    """
    Parse GPX text and return the root element.

    Raises:
      ET.ParseError
    """
    return ET.fromstring(text)


def _parse_float(text: Optional[str], name: str, index: int) -> float:
    if text is None or not text.strip():
        raise MalformedPointError(f"missing {name}", stage=STAGE, index=index)
    try:
        return float(text)
    except ValueError:
        raise MalformedPointError(
            f"{name} is not a number: {text!r}", stage=STAGE, index=index
        ) from None


def extract_trackpoints(root: ET.Element) -> list[TrackPoint]:
    """
    Extract the ordered points of the first track (or route) in a GPX document.

    Raises:
      InvalidGpxError if the root is not <gpx> or holds no track or route
      MalformedPointError if a point lacks lat, lon or ele
    """
    ns = _namespace(root)
    if root.tag != qn("gpx", ns):
        raise InvalidGpxError(f"not a GPX document (root element {root.tag!r})")
    if ns and ns not in GPX_NAMESPACES:
        logger.warning("unknown GPX namespace %s, reading anyway", ns)

    trks = root.findall(qn("trk", ns))
    if trks:
        if len(trks) > 1:
            logger.warning("GPX has %d tracks; only the first is analysed", len(trks))
        nodes = trks[0].iter(qn("trkpt", ns))
    else:
        rte = root.find(qn("rte", ns))
        if rte is None:
            raise InvalidGpxError("GPX document contains no track or route")
        nodes = rte.iter(qn("rtept", ns))

    pts: list[TrackPoint] = []
    for index, node in enumerate(nodes):
        lat = _parse_float(node.get("lat"), "lat", index)
        lon = _parse_float(node.get("lon"), "lon", index)
        ele = _parse_float(node.findtext(qn("ele", ns)), "ele", index)
        pts.append(TrackPoint(lon=lon, lat=lat, ele=ele))

    return pts


def load_track_points(path: Path) -> list[TrackPoint]:
    """Read a GPX file and return its point sequence."""
    try:
        tree = read_gpx(path)
    except ET.ParseError as e:
        raise InvalidGpxError(f"Failed to parse GPX: {path} ({e})") from e
    return extract_trackpoints(tree.getroot())


def load_track_points_text(text: str) -> list[TrackPoint]:
    """Parse GPX text and return its point sequence."""
    try:
        root = parse_gpx(text)
    except ET.ParseError as e:
        raise InvalidGpxError(f"Failed to parse GPX text ({e})") from e
    return extract_trackpoints(root)
