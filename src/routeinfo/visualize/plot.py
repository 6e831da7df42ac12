# routeinfo/visualize/plot.py
"""
Plotting routines for routeinfo
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt

from routeinfo.analyze.models import RouteSummary, SteepnessCategory


def plot_slope_histogram(
        summary: RouteSummary, *,
        title: Optional[str] = None,
        out_path: Optional[Path] = None,
):
    """Bar chart of ascent/descent segment length (km) per steepness category."""
    labels = [c.label for c in SteepnessCategory]
    ascent_km = [summary.ascent_segments[c].total_length_m / 1000 for c in SteepnessCategory]
    descent_km = [summary.descent_segments[c].total_length_m / 1000 for c in SteepnessCategory]

    xs = range(len(labels))
    width = 0.4

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar([x - width / 2 for x in xs], ascent_km, width, label="Ascent", color="tab:red")
    ax.bar([x + width / 2 for x in xs], descent_km, width, label="Descent", color="tab:blue")
    ax.set_xticks(list(xs))
    ax.set_xticklabels(labels)
    ax.set_xlabel("Grade (%)")
    ax.set_ylabel("Length (km)")
    ax.set_title(title or f"Slope segments ({summary.distance_km:.2f} km)")
    ax.legend()
    fig.tight_layout()

    if out_path is not None:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path)
        plt.close(fig)
    else:
        plt.show()
    return fig
