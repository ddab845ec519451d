"""
Core modules for the variant density figure.
"""

from .pipeline import DensityPipeline

# Import submodules
from . import variants
from . import binning
from . import annotation
from . import charts
from . import render

__all__ = [
    "DensityPipeline",
    "variants",
    "binning",
    "annotation",
    "charts",
    "render",
]
