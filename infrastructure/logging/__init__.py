"""Infrastructure Logging - Structured Logger"""
from .structured_logger import StructuredLogger, configure_logging, get_logger

__all__ = ["StructuredLogger", "configure_logging", "get_logger"]
