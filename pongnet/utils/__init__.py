"""Utility modules for PongNet."""

from .logger import get_logger, setup_logging, log_fit_result, LogLevel

__all__ = ['get_logger', 'setup_logging', 'log_fit_result', 'LogLevel']
