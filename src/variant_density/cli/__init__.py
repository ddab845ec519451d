"""
Command-line interface for the variant density figure.
"""

from .main import cli, main

__all__ = ["cli", "main"]
