"""Centralized logging utilities for rbacgraph.

This module provides:
- Logging configuration from SharedConfig
- Safe preview utilities for large permission sets
- Structured logging with graph_id correlation
- ``LoggingBuildObserver``, a build observer that forwards engine
  construction events to a logger
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Optional

from .config import LogLevel, SharedConfig

# Callback receiving engine construction events: (event name, details)
BuildObserver = Callable[[str, Mapping[str, Any]], None]

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "graph_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Permission sets can run to thousands of entries; this keeps log lines
    bounded.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A single-line, truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (set, frozenset)):
        s = json.dumps(sorted(value, key=str), default=str, ensure_ascii=False)
    elif isinstance(value, (dict, list, tuple)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    # Normalize whitespace
    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class GraphLogFormatter(logging.Formatter):
    """Formatter that includes graph_id and optional structured JSON output.

    This formatter:
    - Extracts graph_id from log records (if available)
    - Formats logs as JSON for structured logging
    - Includes safe previews of extra fields
    """

    def __init__(
        self,
        include_graph_id: bool = True,
        json_format: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        """Initialize the formatter.

        Args:
            include_graph_id: Whether to include graph_id in logs
            json_format: Whether to output JSON (True) or plain text (False)
        """
        super().__init__(*args, **kwargs)
        self.include_graph_id = include_graph_id
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        graph_id = getattr(record, "graph_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_graph_id and graph_id:
            log_data["graph_id"] = graph_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_data[key] = safe_preview(value)

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if self.include_graph_id and graph_id:
            parts.append(f"graph_id={graph_id}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class GraphLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps graph_id on every record.

    Usage:
        logger = get_graph_logger(__name__, graph_id=engine.graph_id)
        logger.info("Rebuilt permissions")
    """

    def __init__(self, logger: logging.Logger, graph_id: Optional[str] = None):
        super().__init__(logger, {})
        self.graph_id = graph_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        """Process log message and add graph context."""
        graph_id = kwargs.pop("graph_id", self.graph_id)

        extra = kwargs.get("extra", {})
        if graph_id:
            extra["graph_id"] = graph_id
        kwargs["extra"] = extra

        return msg, kwargs


class LoggingBuildObserver:
    """Build observer that logs each construction event.

    Pass an instance as ``observer=`` to
    :class:`~rbacgraph.permissions.engine.PermissionEngine`::

        engine = PermissionEngine(config, observer=LoggingBuildObserver())

    Event details are attached to the record as ``extra`` fields.
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter | None = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger("rbacgraph.build")
        self.level = level

    def __call__(self, event: str, details: Mapping[str, Any]) -> None:
        self.logger.log(self.level, "rbac build: %s", event, extra={"event": event, **details})


def setup_logging(
    config: Optional[SharedConfig] = None,
    json_format: Optional[bool] = None,
    service_name: Optional[str] = None,
) -> None:
    """Configure logging for a process embedding rbacgraph.

    This function:
    - Sets up logging level from SharedConfig
    - Configures the graph formatter (JSON or plain text)
    - Sets up root logger with a single console handler

    Args:
        config: SharedConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
        service_name: Optional service name for logger identification
    """
    if config is None:
        from .config import load_shared_config_from_env

        config = load_shared_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        GraphLogFormatter(
            include_graph_id=True,
            json_format=config.log_json if json_format is None else json_format,
        )
    )
    root_logger.addHandler(console_handler)

    service_name = service_name or config.service_name
    if service_name:
        logging.getLogger(service_name).setLevel(log_level)


def get_graph_logger(name: str, graph_id: Optional[str] = None) -> GraphLoggerAdapter:
    """Get a logger adapter with graph_id support.

    Args:
        name: Logger name (typically __name__)
        graph_id: Optional graph_id to include in all logs

    Returns:
        GraphLoggerAdapter instance
    """
    return GraphLoggerAdapter(logging.getLogger(name), graph_id=graph_id)


__all__ = [
    "BuildObserver",
    "GraphLogFormatter",
    "GraphLoggerAdapter",
    "LoggingBuildObserver",
    "get_graph_logger",
    "safe_preview",
    "setup_logging",
]
