"""
Data models for variants, genome windows and CDS annotations.
"""

from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


SNV_BASES = {"A", "C", "G", "T", "N"}


class VariantRecord(BaseModel):
    """A single variant call from a VCF file."""

    chrom: str = Field(description="Chromosome or contig name")
    position: int = Field(description="VCF POS column (1-based)")
    ref: str = Field(description="Reference allele")
    alt: List[str] = Field(default_factory=list, description="Alternate alleles")

    model_config = {"frozen": True}

    @property
    def is_snv(self) -> bool:
        """True when the reference and every alternate allele are one base."""
        if len(self.ref) != 1 or not self.alt:
            return False
        return all(
            len(allele) == 1 and allele.upper() in SNV_BASES
            for allele in self.alt
        )


class BinCount(BaseModel):
    """Variant count for one half-open genome window [start, end)."""

    window_label: str = Field(description="Window label, e.g. '[0,400)'")
    start: int = Field(description="Window start (inclusive)")
    end: int = Field(description="Window end (exclusive)")
    midpoint: float = Field(description="start + window_size / 2")
    count: int = Field(description="Number of positions in the window")

    @field_validator('start', 'end')
    @classmethod
    def validate_positions(cls, v):
        """Validate that positions are non-negative."""
        if v < 0:
            raise ValueError("Window positions must be non-negative")
        return v

    @field_validator('count')
    @classmethod
    def validate_count(cls, v):
        """Validate that the count is non-negative."""
        if v < 0:
            raise ValueError("Window count must be non-negative")
        return v

    @model_validator(mode='after')
    def validate_end_after_start(self):
        """Validate that end position is after start position."""
        if self.end <= self.start:
            raise ValueError("Window end must be after window start")
        return self


class BinSummary(BaseModel):
    """Summary statistics over the per-window counts."""

    median: float = Field(description="Median count per window")
    top_quantile: float = Field(description="Upper quantile of counts per window")
    quantile: float = Field(default=0.95, description="Quantile used for top_quantile")
    max_count: int = Field(default=0, description="Largest count in any window")
    total: int = Field(default=0, description="Sum of all window counts")


class RegionDefinition(BaseModel):
    """A user supplied region of interest to highlight on both charts."""

    label: str = Field(description="Text drawn next to the region")
    start: int = Field(description="Region start (bp)")
    end: int = Field(description="Region end (bp)")
    color: str = Field(default="#FFA500", description="Background color")
    label_x: float = Field(description="Label x position (bp)")
    label_y_fraction: float = Field(
        default=0.95,
        description="Label y position as a fraction of the largest window count"
    )

    @model_validator(mode='after')
    def validate_span(self):
        """Validate that the region spans at least one base."""
        if self.end <= self.start:
            raise ValueError(
                f"Region '{self.label}' must have start < end "
                f"(got {self.start}-{self.end})"
            )
        return self

    @field_validator('label_y_fraction')
    @classmethod
    def validate_fraction(cls, v):
        if v < 0:
            raise ValueError("Label fraction must be non-negative")
        return v


class HighlightRegion(BaseModel):
    """A region definition with its label placed against the observed data."""

    label: str
    start: int
    end: int
    color: str
    label_x: float
    label_y: float

    @classmethod
    def from_definition(cls, definition: RegionDefinition, max_count: int) -> "HighlightRegion":
        """Place the label at a fraction of the largest window count."""
        return cls(
            label=definition.label,
            start=definition.start,
            end=definition.end,
            color=definition.color,
            label_x=definition.label_x,
            label_y=max_count * definition.label_y_fraction,
        )


class CDSFeature(BaseModel):
    """A coding sequence feature from a GenBank annotation."""

    start: int = Field(description="First base (1-based, inclusive)")
    end: int = Field(description="Last base (inclusive)")
    strand: str = Field(description="'+', '-' or '.' when unstranded")
    gene_name: Optional[str] = Field(default=None, description="Gene name")
    highlight: bool = Field(default=False, description="Gene is in the highlighted set")

    @property
    def y(self) -> int:
        """Vertical extent encoding the strand: +1, -1 or 0 for unstranded."""
        if self.strand == "+":
            return 1
        if self.strand == "-":
            return -1
        return 0


class DensityResult(BaseModel):
    """Everything a pipeline run produced."""

    bins: List[BinCount] = Field(default_factory=list, description="Per-window counts")
    summary: BinSummary = Field(description="Summary statistics over the bins")
    variants_loaded: int = Field(default=0, description="Records read from the VCF")
    variants_counted: int = Field(default=0, description="Positions inside the genome")
    variants_dropped: int = Field(default=0, description="Positions outside the genome")
    cds_features: int = Field(default=0, description="CDS features drawn")
    highlighted_features: int = Field(default=0, description="CDS features highlighted")
    summary_file: Optional[Path] = Field(default=None, description="Summary CSV path")
    figure_file: Optional[Path] = Field(default=None, description="Figure path")
    processing_time: float = Field(default=0.0, description="Run time in seconds")

    def get_summary_stats(self) -> dict:
        """Get summary statistics for display."""
        return {
            "windows": len(self.bins),
            "variants_loaded": self.variants_loaded,
            "variants_counted": self.variants_counted,
            "variants_dropped": self.variants_dropped,
            "median": self.summary.median,
            "top_quantile": self.summary.top_quantile,
            "max_count": self.summary.max_count,
            "cds_features": self.cds_features,
            "highlighted_features": self.highlighted_features,
        }
