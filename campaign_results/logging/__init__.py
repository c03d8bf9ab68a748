"""
Logging configuration and utilities for campaign result tracking.
"""
from .config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
