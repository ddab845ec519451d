"""
Utility modules for the variant density figure.
"""

from .logging import (
    setup_logging,
    PipelineLogger,
    log_file_operation,
    log_error,
)

__all__ = [
    "setup_logging",
    "PipelineLogger",
    "log_file_operation",
    "log_error",
]
