"""
Per-request structured logging.

``RequestLogger`` wraps a standard library logger and stamps every record
with the invocation id and operation name, so log lines from one request can
be correlated. Payloads are sanitised before they reach any handler.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, MutableMapping, Optional, Tuple

from rich.logging import RichHandler

SENSITIVE_FIELDS = ("password", "token", "secret", "apikey", "authorization")
REDACTED = "***REDACTED***"


def sanitize_data(data: Any) -> Any:
    """
    Redact values whose key looks sensitive, recursing into mappings and lists.
    """
    if isinstance(data, Mapping):
        sanitized = {}
        for key, value in data.items():
            if any(field in str(key).lower() for field in SENSITIVE_FIELDS):
                sanitized[key] = REDACTED
            else:
                sanitized[key] = sanitize_data(value)
        return sanitized
    if isinstance(data, (list, tuple)):
        return [sanitize_data(item) for item in data]
    return data


class RequestLogger(logging.LoggerAdapter):
    """Logger adapter carrying request metadata."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        function_name: str = "unknown",
        invocation_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            logger or logging.getLogger("barberbooking.request"),
            {
                "invocation_id": invocation_id or uuid.uuid4().hex,
                "function_name": function_name,
            },
        )

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra)
        data = kwargs.pop("data", None)
        if data is not None:
            extra["data"] = sanitize_data(data)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        prefix = f"[{self.extra['function_name']}:{self.extra['invocation_id'][:8]}]"
        if data is not None:
            rendered = str(extra["data"]).replace("%", "%%")
            return f"{prefix} {msg} {rendered}", kwargs
        return f"{prefix} {msg}", kwargs

    def log_input(self, operation: str, input_data: Any) -> None:
        self.info("Input received for %s", operation, data={"operation": operation, "input": input_data})

    def log_before_db_operation(self, operation: str, data: Any) -> None:
        self.debug("Before %s", operation, data={"operation": operation, "data": data})

    def log_after_db_operation(self, operation: str, result: Any) -> None:
        self.info("After %s", operation, data={"operation": operation, "result": result})

    def log_catalog_read(self, name: str, record_count: int) -> None:
        self.debug("Read catalog %s", name, data={"operation": "read_catalog", "recordCount": record_count})


def configure_logging(level: str = "INFO") -> None:
    """Install a rich console handler on the package logger."""
    package_logger = logging.getLogger("barberbooking")
    package_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(show_path=False, rich_tracebacks=True))
