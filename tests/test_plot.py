from routeinfo.analyze.analyzer import RouteAnalyzer
from routeinfo.config import AnalyzerConfig
from routeinfo.visualize.plot import plot_slope_histogram


def test_plot_slope_histogram_writes_png(sample_gpx_path, tmp_path):
    summary = RouteAnalyzer(AnalyzerConfig(distance_threshold=50)).analyze_gpx(sample_gpx_path)
    out = tmp_path / "plots" / "sample.png"

    fig = plot_slope_histogram(summary, title="sample", out_path=out)

    assert out.is_file()
    ax = fig.axes[0]
    assert ax.get_title() == "sample"
    assert [t.get_text() for t in ax.get_xticklabels()] == [
        "0-5", "5-10", "10-15", "15-20", "20-25", "25-30", "30+"
    ]
    # 7 ascent bars + 7 descent bars
    assert len(ax.patches) == 14
