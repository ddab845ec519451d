"""
Configuration management for the variant density figure.
"""

from .settings import DensityConfig, load_density_config

__all__ = ["DensityConfig", "load_density_config"]
