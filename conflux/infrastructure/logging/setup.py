"""
Logging setup and configuration utilities.

Engine modules log through the standard ``logging`` module; this module
configures loguru sinks (console and rotating file) and forwards standard
library records into loguru.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

from loguru import logger as loguru_logger

from ...core.interfaces.lifecycle import IComponent
from ..config.models import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Any = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(config: LoggingConfig) -> None:
    """
    Setup logging with the given configuration.

    Args:
        config: Logging configuration
    """
    loguru_logger.remove()

    if config.console_enabled:
        loguru_logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=config.level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=False
        )

    if config.file_enabled:
        log_dir = Path(config.log_directory)
        log_dir.mkdir(parents=True, exist_ok=True)

        loguru_logger.add(
            log_dir / "conflux.log",
            format=FILE_FORMAT,
            level=config.level.upper(),
            rotation=config.max_file_size,
            retention=config.backup_count,
            compression="zip",
            backtrace=True,
            diagnose=False
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


class LoggingManager(IComponent):
    """Logging manager exposing logging configuration as a component."""

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = LoggingConfig(**config)
        self._started = False
        self._logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        """Get component name."""
        return "LoggingManager"

    @property
    def version(self) -> str:
        """Get component version."""
        return "1.0.0"

    @property
    def config(self) -> LoggingConfig:
        return self._config

    async def start(self) -> None:
        """Start the logging manager."""
        if self._started:
            return

        setup_logging(self._config)
        self._started = True

        self._logger.info("Logging manager started")
        self._logger.info(f"Log level: {self._config.level}")

    async def stop(self) -> None:
        """Stop the logging manager."""
        if not self._started:
            return

        self._logger.info("Logging manager stopped")
        self._started = False

    async def configure(self, config: Dict[str, Any]) -> None:
        """Configure the logging manager."""
        self._config = LoggingConfig(**config)
        if self._started:
            setup_logging(self._config)
            self._logger.info("Logging configuration updated")

    async def check_health(self) -> Dict[str, Any]:
        """Check logging manager health."""
        log_dir = Path(self._config.log_directory)

        return {
            'healthy': True,
            'status': 'running' if self._started else 'stopped',
            'details': {
                'log_level': self._config.level,
                'log_directory': str(log_dir),
                'log_directory_exists': log_dir.exists(),
                'console_enabled': self._config.console_enabled,
                'file_enabled': self._config.file_enabled,
            }
        }
