"""Matplotlib static PNG renderer."""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.figure import Figure

from rainbowradar.models import EvaluationResult, ObserverContext
from rainbowradar.sun import antisolar_azimuth

_ROOT = Path(__file__).parent.parent.parent.parent

# Heat gradient: blue → cyan → green → yellow → red over scores 0 → 1
HEAT_COLORS = ["#0000ff", "#00ffff", "#00ff00", "#ffff00", "#ff0000"]
_HEAT_CMAP = LinearSegmentedColormap.from_list("rainbow_heat", HEAT_COLORS)


def render_static_chart(
    context: ObserverContext, result: EvaluationResult, chart_size: int = 8
) -> Figure:
    """Render an EvaluationResult as a static matplotlib image.

    Cells are drawn in longitude/latitude with the observer at the center
    and an arrow towards the antisolar bearing.

    Args:
        context: Observer location and time.
        result: Evaluated grid.
        chart_size: Output image size in inches.

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(figsize=(chart_size, chart_size))
    fig.patch.set_facecolor("#1b1b1b")
    ax.set_facecolor("#1b1b1b")

    center = context.center
    lngs = np.array([c.point.lng for c in result.cells])
    lats = np.array([c.point.lat for c in result.cells])
    scores = np.array([c.score for c in result.cells])

    if len(result.cells):
        sc = ax.scatter(
            lngs, lats, c=scores, cmap=_HEAT_CMAP, vmin=0, vmax=1, s=60, marker="s", zorder=2
        )
        cbar = fig.colorbar(sc, ax=ax, fraction=0.046, pad=0.04)
        cbar.set_label("Rainbow likelihood", color="white")
        cbar.ax.yaxis.set_tick_params(color="white", labelcolor="white")

        # Arrow length: a quarter of the plotted extent
        extent = max(np.ptp(lats), 1e-3) / 4
        theta = np.radians(antisolar_azimuth(result.sun))
        ax.annotate(
            "",
            xy=(
                center.lng + extent * np.sin(theta) / np.cos(np.radians(center.lat)),
                center.lat + extent * np.cos(theta),
            ),
            xytext=(center.lng, center.lat),
            arrowprops=dict(arrowstyle="->", color="white", linewidth=1.2),
            zorder=3,
        )

    ax.scatter([center.lng], [center.lat], color="white", marker="o", s=40, zorder=4)
    ax.set_aspect(1 / np.cos(np.radians(center.lat)))
    ax.set_title(
        f"{context.address_display}\n{context.utc_dt:%Y-%m-%d %H:%M} UTC · {result.status.value}",
        color="white",
        fontsize=10,
    )
    ax.axis("off")

    return fig


def save_static_chart(
    context: ObserverContext, result: EvaluationResult, output_path: Path | None = None
) -> Path:
    """Save an EvaluationResult as a PNG file.

    Args:
        context: Observer location and time.
        result: Evaluated grid.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        when_str = context.utc_dt.strftime("%Y_%m_%d_%H_%M")
        filename = f"{context.address_display}__{when_str}.png".replace(" ", "_")
        output_path = _ROOT / "results" / filename.replace(",", "")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(context, result)
    fig.savefig(output_path, facecolor=fig.get_facecolor())
    plt.close(fig)
    return output_path
