"""
Declarative chart descriptions for the density and CDS panels.

Builders here only map data to drawable elements. Drawing happens in
``render``.
"""

from typing import Iterable, List, Tuple
from pydantic import BaseModel, Field

from ..models.features import (
    BinCount,
    BinSummary,
    CDSFeature,
    HighlightRegion,
    RegionDefinition
)


BAR_COLOR = "steelblue"
MEDIAN_COLOR = "red"
QUANTILE_COLOR = "black"
REFERENCE_ALPHA = 0.5
REGION_ALPHA = 0.3
LABEL_COLOR = "darkorange"
HIGHLIGHT_FILL = "orange"
NEUTRAL_FILL = "#7F7F7F"  # grey50
MAJOR_TICK_STEP = 5000
MINOR_TICK_STEP = 2500


class Bar(BaseModel):
    x: float
    height: float
    width: float
    color: str = BAR_COLOR


class Span(BaseModel):
    """Background rectangle covering the full vertical extent."""
    start: float
    end: float
    color: str
    alpha: float = REGION_ALPHA


class TextLabel(BaseModel):
    x: float
    y: float
    text: str
    color: str = LABEL_COLOR
    fontweight: str = "bold"
    fontsize: float = 14.0


class ReferenceLine(BaseModel):
    """Full-width horizontal line."""
    y: float
    label: str
    color: str
    linestyle: str = "--"
    alpha: float = REFERENCE_ALPHA
    linewidth: float = 1.0


class Interval(BaseModel):
    """Filled rectangle for one CDS feature."""
    xmin: float
    xmax: float
    ymin: float
    ymax: float
    fill: str
    edgecolor: str = "black"
    linewidth: float = 0.2
    gene_name: str = ""


class GenomeAxis(BaseModel):
    """Horizontal genome axis in kilobases."""
    limits: Tuple[float, float]
    major_ticks: List[float]
    minor_ticks: List[float]
    tick_labels: List[str]
    label: str = "Genome Position (Kb)"


class DensityChart(BaseModel):
    bars: List[Bar] = Field(default_factory=list)
    spans: List[Span] = Field(default_factory=list)
    labels: List[TextLabel] = Field(default_factory=list)
    reference_lines: List[ReferenceLine] = Field(default_factory=list)
    x_axis: GenomeAxis
    y_label: str = "Mutations per Kb"


class AnnotationChart(BaseModel):
    intervals: List[Interval] = Field(default_factory=list)
    spans: List[Span] = Field(default_factory=list)
    x_axis: GenomeAxis
    y_ticks: List[float] = Field(default_factory=lambda: [-1.0, 1.0])
    y_tick_labels: List[str] = Field(default_factory=lambda: ["-", "+"])
    separator_y: float = 0.0


def genome_axis(
    genome_length: int,
    major_step: int = MAJOR_TICK_STEP,
    minor_step: int = MINOR_TICK_STEP
) -> GenomeAxis:
    """Kilobase axis over [0, genome_length] with major and minor ticks."""
    major = list(range(0, genome_length + 1, major_step))
    minor = list(range(0, genome_length + 1, minor_step))
    return GenomeAxis(
        limits=(0, genome_length),
        major_ticks=major,
        minor_ticks=minor,
        tick_labels=[f"{tick / 1000:g}" for tick in major],
    )


def place_region_labels(
    definitions: Iterable[RegionDefinition],
    max_count: int
) -> List[HighlightRegion]:
    """Anchor each region label at its fraction of the largest window count."""
    return [HighlightRegion.from_definition(d, max_count) for d in definitions]


def region_spans(regions: Iterable[HighlightRegion]) -> List[Span]:
    return [Span(start=r.start, end=r.end, color=r.color) for r in regions]


def build_density_chart(
    bins: List[BinCount],
    regions: List[HighlightRegion],
    summary: BinSummary,
    genome_length: int,
    window_size: int
) -> DensityChart:
    """
    Describe the variant density panel.

    One bar per window at its midpoint, a background span and a label per
    region, and dashed reference lines at the median and upper quantile.
    """
    return DensityChart(
        bars=[Bar(x=b.midpoint, height=b.count, width=window_size) for b in bins],
        spans=region_spans(regions),
        labels=[TextLabel(x=r.label_x, y=r.label_y, text=r.label) for r in regions],
        reference_lines=[
            ReferenceLine(y=summary.median, label="median", color=MEDIAN_COLOR),
            ReferenceLine(y=summary.top_quantile,
                          label=f"q{summary.quantile:g}",
                          color=QUANTILE_COLOR),
        ],
        x_axis=genome_axis(genome_length),
    )


def build_annotation_chart(
    features: List[CDSFeature],
    regions: List[HighlightRegion],
    genome_length: int
) -> AnnotationChart:
    """
    Describe the CDS panel.

    Each feature is a rectangle from 0 to +1 (forward strand) or -1
    (reverse strand), filled by whether its gene is highlighted.
    """
    return AnnotationChart(
        intervals=[
            Interval(
                xmin=f.start,
                xmax=f.end,
                ymin=0,
                ymax=f.y,
                fill=HIGHLIGHT_FILL if f.highlight else NEUTRAL_FILL,
                gene_name=f.gene_name or "",
            )
            for f in features
        ],
        spans=region_spans(regions),
        x_axis=genome_axis(genome_length),
    )
