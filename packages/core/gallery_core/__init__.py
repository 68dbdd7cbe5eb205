"""
Gallery Core Package.

This package contains the publishing services, configuration and storage
adapters for the extension gallery feed.
"""

__version__ = "0.1.0"

from .logging_config import init_logging, get_logger

__all__ = ["init_logging", "get_logger"]
