#!/usr/bin/env python3
"""
PeakForm logging utilities

Handlers are attached to the ``peakform`` package logger rather than the root
logger, so an application embedding the library keeps control of its own
logging. Module loggers are children of it and propagate their records up.
"""
import sys
import logging
from pathlib import Path
from typing import List, Optional

PACKAGE_LOGGER = "peakform"
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = "peakform.log"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("elasticsearch", "elastic_transport")


class LoggingConfig:
    """Centralized logging configuration for the peakform package logger"""

    _initialized = False

    @classmethod
    def setup_logging(cls,
                      log_level: str = "INFO",
                      log_file: Optional[str] = None,
                      enable_console: bool = True) -> None:
        """
        Configure the package logger once; later calls are ignored

        Args:
            log_level: Logging level name, unknown names fall back to INFO
            log_file: Also write records to this file (optional)
            enable_console: Write records to stdout
        """
        if cls._initialized:
            return

        level = getattr(logging, log_level.upper(), logging.INFO)
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(level)
        for handler in cls._build_handlers(level, log_file, enable_console):
            package_logger.addHandler(handler)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

        cls._initialized = True
        package_logger.debug(f"🔧 Logging initialized - Level: {log_level}, file: {log_file}")

    @staticmethod
    def _build_handlers(level: int, log_file: Optional[str], enable_console: bool) -> List[logging.Handler]:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        handlers: List[logging.Handler] = []
        if enable_console:
            handlers.append(logging.StreamHandler(sys.stdout))
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))
        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
        return handlers

    @classmethod
    def get_logger(cls, name: Optional[str] = None) -> logging.Logger:
        if not cls._initialized:
            cls.setup_logging()
        return logging.getLogger(name or PACKAGE_LOGGER)


def setup_peakform_logging(log_level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """Configure package logging, writing peakform.log into log_dir when given"""
    log_file = str(Path(log_dir) / LOG_FILE_NAME) if log_dir else None
    LoggingConfig.setup_logging(log_level=log_level, log_file=log_file)


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for a specific module"""
    return LoggingConfig.get_logger(module_name)
