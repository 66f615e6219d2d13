"""
Structured logging for the auth backend.

Usage:
    from core.logging import get_logger
    logger = get_logger("auth.service")
    logger.info("login_succeeded", provider="local", user_id=user.id)

Events are snake_case names with keyword fields. Fields named like secrets
(see ``REDACTED_KEYS``) are masked before rendering, so a stray
``password=...`` never reaches a sink.
"""

import logging
import sys
import time
from collections.abc import MutableMapping
from functools import lru_cache
from typing import Any

import structlog
from structlog.types import Processor

REDACTED_KEYS = frozenset({"password", "passwd", "plaintext", "token", "authorization", "code", "cookie"})

# Probes hit these every few seconds; keep them out of INFO.
_QUIET_PATHS = frozenset({"/health", "/health/ready"})


def _json_output() -> bool:
    from .config import get_settings

    settings = get_settings()
    return settings.is_production and not settings.debug


def _add_service(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    event_dict.setdefault("service", "memories_auth")
    return event_dict


def _redact_secrets(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    for key in list(event_dict):
        if key.lower() in REDACTED_KEYS:
            event_dict[key] = "***"
    return event_dict


def get_processors(json_output: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _redact_secrets,
        _add_service,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback))
    return processors


@lru_cache(maxsize=1)
def configure_logging(level: str = "INFO") -> None:
    """Configure structlog on top of stdlib logging. Idempotent."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    # SQL echo is controlled by DEBUG through the engine, not by this level.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.configure(
        processors=get_processors(_json_output()),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: Any) -> None:
    """Bind fields included in every log entry of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class RequestLoggingMiddleware:
    """
    ASGI middleware logging one ``request_complete`` event per HTTP request.

    Expects the request ID to be bound already (RequestIDMiddleware runs
    outside this one) and clears the logging context when the request ends.
    Query strings are not logged: the OAuth callback carries the
    authorization code there.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        path = scope.get("path", "")
        method = scope.get("method", "")
        client = scope.get("client")
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if status_code >= 500:
                log_method = self.logger.error
            elif status_code >= 400:
                log_method = self.logger.warning
            elif path in _QUIET_PATHS:
                log_method = self.logger.debug
            else:
                log_method = self.logger.info

            log_method(
                "request_complete",
                method=method,
                path=path,
                status_code=status_code,
                client_ip=client[0] if client else None,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
            )
            clear_context()


__all__ = [
    "REDACTED_KEYS",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "RequestLoggingMiddleware",
]
