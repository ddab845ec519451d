"""
Variant Density

Binned variant density along a genome, overlaid on CDS annotations.
"""

__version__ = "1.0.0"
__author__ = "Bioinformatics Team"
__email__ = "team@example.com"

# Lazy imports to keep plotting dependencies out of light-weight imports
def get_pipeline():
    """Get the DensityPipeline class."""
    from .core.pipeline import DensityPipeline
    return DensityPipeline

def get_density_config():
    """Get the DensityConfig class."""
    from .config.settings import DensityConfig
    return DensityConfig

def get_bin_count():
    """Get the BinCount class."""
    from .models.features import BinCount
    return BinCount

__all__ = ["get_pipeline", "get_density_config", "get_bin_count"]
