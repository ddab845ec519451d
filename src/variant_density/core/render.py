"""
Drawing and compositing of the chart descriptions with matplotlib.
"""

from pathlib import Path
from typing import Sequence, Tuple
import logging
import matplotlib
matplotlib.use('Agg')
# Supress font messages
logging.getLogger('matplotlib.font_manager').setLevel(logging.WARNING)
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
from matplotlib.ticker import FixedFormatter, FixedLocator
import seaborn as sns
import structlog

from .charts import AnnotationChart, DensityChart, GenomeAxis


def _apply_genome_axis(ax, axis: GenomeAxis, show_label: bool = True) -> None:
    """Set limits, kilobase ticks and grid lines on the x axis."""
    ax.set_xlim(*axis.limits)
    ax.xaxis.set_major_locator(FixedLocator(axis.major_ticks))
    ax.xaxis.set_major_formatter(FixedFormatter(axis.tick_labels))
    ax.xaxis.set_minor_locator(FixedLocator(axis.minor_ticks))
    ax.grid(which="major", axis="x", color="0.7", linewidth=0.6)
    ax.grid(which="minor", axis="x", color="0.85", linewidth=0.3)
    ax.set_xlabel(axis.label if show_label else "")


def _draw_spans(ax, spans) -> None:
    for span in spans:
        ax.axvspan(span.start, span.end, color=span.color,
                   alpha=span.alpha, linewidth=0, zorder=0)


def draw_density_chart(ax, chart: DensityChart, show_x_label: bool = True) -> None:
    """Draw the density panel onto an axes."""
    _draw_spans(ax, chart.spans)
    if chart.bars:
        ax.bar(
            [bar.x for bar in chart.bars],
            [bar.height for bar in chart.bars],
            width=[bar.width for bar in chart.bars],
            color=[bar.color for bar in chart.bars],
            align="center",
            linewidth=0,
            zorder=2,
        )
    for line in chart.reference_lines:
        ax.axhline(line.y, color=line.color, linestyle=line.linestyle,
                   alpha=line.alpha, linewidth=line.linewidth,
                   label=line.label, zorder=3)
    for label in chart.labels:
        ax.text(label.x, label.y, label.text, color=label.color,
                fontweight=label.fontweight, fontsize=label.fontsize,
                ha="center", va="center", clip_on=True, zorder=4)
    _apply_genome_axis(ax, chart.x_axis, show_label=show_x_label)
    ax.grid(which="major", axis="y", color="0.9", linewidth=0.6)
    ax.set_ylabel(chart.y_label)
    ax.set_ylim(bottom=0)


def draw_annotation_chart(ax, chart: AnnotationChart) -> None:
    """Draw the CDS panel onto an axes."""
    _draw_spans(ax, chart.spans)
    for interval in chart.intervals:
        ax.add_patch(Rectangle(
            (interval.xmin, interval.ymin),
            interval.xmax - interval.xmin,
            interval.ymax - interval.ymin,
            facecolor=interval.fill,
            edgecolor=interval.edgecolor,
            linewidth=interval.linewidth,
            zorder=2,
        ))
    ax.axhline(chart.separator_y, color="black", linewidth=0.4, zorder=3)
    _apply_genome_axis(ax, chart.x_axis)
    ax.set_ylim(min(chart.y_ticks) * 1.1, max(chart.y_ticks) * 1.1)
    ax.set_yticks(chart.y_ticks)
    ax.set_yticklabels(chart.y_tick_labels)
    ax.tick_params(axis="y", length=0)
    ax.set_ylabel("")


def render_figure(
    density: DensityChart,
    annotation: AnnotationChart,
    output_file: Path,
    logger: structlog.BoundLogger,
    figsize: Tuple[float, float] = (16, 5),
    height_ratios: Sequence[float] = (4, 1)
) -> Path:
    """
    Stack the density panel above the CDS panel and save the figure.

    The output format follows the file suffix.
    """
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Rendering figure to {output_file}",
                output_file=str(output_file),
                n_bars=len(density.bars),
                n_intervals=len(annotation.intervals))

    sns.set_theme(style="white")
    fig, (ax_density, ax_cds) = plt.subplots(
        2, 1,
        figsize=figsize,
        sharex=True,
        gridspec_kw={"height_ratios": list(height_ratios)},
    )
    try:
        draw_density_chart(ax_density, density, show_x_label=False)
        draw_annotation_chart(ax_cds, annotation)
        sns.despine(fig=fig, left=True, bottom=True)
        fig.tight_layout()
        fig.savefig(output_file)
    finally:
        plt.close(fig)

    logger.info(f"Figure saved to {output_file}", output_file=str(output_file))
    return output_file
