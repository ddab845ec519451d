"""
Data models for the variant density figure.
"""

from .features import (
    VariantRecord,
    BinCount,
    BinSummary,
    RegionDefinition,
    HighlightRegion,
    CDSFeature,
    DensityResult
)

__all__ = [
    "VariantRecord",
    "BinCount",
    "BinSummary",
    "RegionDefinition",
    "HighlightRegion",
    "CDSFeature",
    "DensityResult"
]
