import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional
from .config import Config
from .exceptions import LoggerError

LOGGER_NAME = "network_utils"
CONTEXT_FIELDS = ("method", "endpoint")

class RequestContextFilter(logging.Filter):
    """Fill in request context for records logged without it"""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, '-')
        return True

class Logger:
    """
    Opt-in handler setup for the ``network_utils`` logger.

    Library modules log through ``logging.getLogger(__name__)``; this class
    attaches a rotating file handler and an optional console handler, both
    formatted with the request method and endpoint of each record.
    """
    _loggers: Dict[str, logging.Logger] = {}

    def __init__(self, config: Config):
        """Initialize logger with configuration"""
        self.config = config

        if LOGGER_NAME in self._loggers:
            self.logger = self._loggers[LOGGER_NAME]
            for handler in self.logger.handlers[:]:
                self.logger.removeHandler(handler)
                handler.close()
        else:
            self.logger = logging.getLogger(LOGGER_NAME)
            self._loggers[LOGGER_NAME] = self.logger

        self.logger.setLevel(self._get_log_level())

        base_format = self.config.get(
            "logging.format",
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        self.formatter = logging.Formatter(
            f"{base_format} - method:%(method)s - endpoint:%(endpoint)s"
        )
        self.context_filter = RequestContextFilter()

        log_file = self.config.get("logging.file")
        if log_file:
            self._add_file_handler(Path(log_file))

        if self.config.get("logging.console_output", False):
            console_handler = logging.StreamHandler()
            self._attach(console_handler)

    def _add_file_handler(self, path: Path) -> None:
        """Attach a rotating file handler, creating the directory if needed"""
        try:
            if not path.parent.exists() and str(path.parent) != ".":
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                except (OSError, PermissionError):
                    raise LoggerError(f"Cannot create log directory: {path.parent}")

            handler = RotatingFileHandler(
                str(path),
                maxBytes=self.config.get("logging.max_size", 1024 * 1024),
                backupCount=self.config.get("logging.backup_count", 3)
            )
        except LoggerError:
            raise
        except Exception as e:
            raise LoggerError(f"Failed to setup log file: {str(e)}")
        self._attach(handler)

    def _attach(self, handler: logging.Handler) -> None:
        handler.setFormatter(self.formatter)
        handler.addFilter(self.context_filter)
        self.logger.addHandler(handler)

    def _get_log_level(self) -> int:
        """Convert string log level to logging constant"""
        level_name = str(self.config.get("logging.level", "INFO")).upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise LoggerError(f"Invalid log level: {level_name}")
        return level

    def _prepare_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        extra_context = {field: '-' for field in CONTEXT_FIELDS}
        if extra:
            extra_context.update(extra)
        return extra_context

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message"""
        self.logger.debug(message, extra=self._prepare_extra(kwargs.get('extra')))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message"""
        self.logger.info(message, extra=self._prepare_extra(kwargs.get('extra')))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message"""
        self.logger.warning(message, extra=self._prepare_extra(kwargs.get('extra')))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message"""
        self.logger.error(message, extra=self._prepare_extra(kwargs.get('extra')))
