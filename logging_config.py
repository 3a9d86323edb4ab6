"""Structured JSON logging for the Render tools server.

Every record is emitted as one JSON object. Tool invocations are logged
per node item with their duration; parameter values (env var values,
secret file contents, webhook secrets) never reach the log.
"""

import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

# Context keys that may carry credentials or user data
SENSITIVE_MARKERS = ("secret", "password", "token", "key", "contents", "value", "body")

QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


class RenderJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level, logger and source location."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }


def setup_logging(level: str = "INFO", use_stderr: bool = False) -> None:
    """Install the JSON handler on the root logger.

    Repeated calls replace the handler rather than adding another one.

    Args:
        level: Logging level name
        use_stderr: Log to stderr; the MCP stdio server keeps stdout for
            protocol messages
    """
    handler = logging.StreamHandler(sys.stderr if use_stderr else sys.stdout)
    handler.setFormatter(RenderJsonFormatter(fmt="%(timestamp)s %(level)s %(name)s %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def is_sensitive(key: str) -> bool:
    key = key.lower()
    return any(marker in key for marker in SENSITIVE_MARKERS)


class ToolInvocationLogger:
    """Logs one tool run for one node item: start, then success or failure.

    Usage:
        invocation = ToolInvocationLogger(logger).start("render_service_get", item=0)
        ...
        invocation.success(result_count=1)
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._tool_name: Optional[str] = None
        self._context: Dict[str, Any] = {}
        self._started: Optional[float] = None

    def start(self, tool_name: str, **context) -> "ToolInvocationLogger":
        self._tool_name = tool_name
        self._context = self._safe(context)
        self._started = time.monotonic()
        self.logger.info("Tool invocation started", extra=self._fields("tool_start"))
        return self

    def success(self, **result_info) -> None:
        self.logger.info(
            "Tool invocation succeeded",
            extra={**self._fields("tool_success"), **self._safe(result_info)},
        )

    def failure(self, error: str) -> None:
        self.logger.error(
            "Tool invocation failed",
            extra={**self._fields("tool_failure"), "error": error},
        )

    def _fields(self, event: str) -> Dict[str, Any]:
        fields = {"tool_name": self._tool_name, "event": event, **self._context}
        if event != "tool_start":
            fields["duration_ms"] = self._elapsed_ms()
        return fields

    def _elapsed_ms(self) -> int:
        if self._started is None:
            return 0
        return int((time.monotonic() - self._started) * 1000)

    @staticmethod
    def _safe(values: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if not is_sensitive(k)}
