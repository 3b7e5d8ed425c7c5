"""
PeakForm Utils Package
"""
from .core import LoggingConfig, setup_peakform_logging, get_logger

__all__ = ['LoggingConfig', 'setup_peakform_logging', 'get_logger']
