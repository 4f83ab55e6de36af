"""
Structured logging for the starter service.

Every event is rendered by structlog with the service name and, while a
request is in flight, its request id. Once a bearer token has been verified
the token subject and key id are attached as well.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

import structlog

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
subject_var: ContextVar[Optional[str]] = ContextVar("subject", default=None)
key_id_var: ContextVar[Optional[str]] = ContextVar("key_id", default=None)

_service_name: Optional[str] = None


def _processors(log_format: str) -> List[Any]:
    renderer = (
        structlog.processors.KeyValueRenderer(key_order=["event"])
        if log_format == "keyvalue"
        else structlog.processors.JSONRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_service_name,
        add_request_context,
        renderer,
    ]


def configure_logging(service_name: str, log_level: str = "info", log_format: str = "json") -> None:
    """Configure structlog and the stdlib root logger for ``service_name``.

    ``log_format`` is ``json`` (the default) or ``keyvalue`` for
    key=value lines during local development.
    """
    global _service_name
    _service_name = service_name

    structlog.configure(
        processors=_processors(log_format),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def add_service_name(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events with the configured service, falling back to the logger prefix."""
    service = _service_name or event_dict.get("logger", "").split(".")[0]
    if service:
        event_dict.setdefault("service", service)
    return event_dict


def add_request_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Attach the request id and verified token identity, when known."""
    for key, var in (("request_id", request_id_var), ("sub", subject_var), ("kid", key_id_var)):
        value = var.get()
        if value is not None:
            event_dict.setdefault(key, value)
    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Use the caller's request id, or mint one."""
    request_id = request_id or str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def set_token_context(subject: Optional[str], kid: Optional[str] = None) -> None:
    """Record who the current request is authenticated as."""
    subject_var.set(subject)
    key_id_var.set(kid)


def clear_context() -> None:
    for var in (request_id_var, subject_var, key_id_var):
        var.set(None)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
