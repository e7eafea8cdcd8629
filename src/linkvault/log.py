"""structlog configuration.

Every module logs with ``structlog.get_logger()`` and event-style names
(``auth.login_failed``, ``links.deleted``). configure_logging() wires the
processor chain once at app startup: request-scoped contextvars (request id,
user id), level, timestamp, credential redaction, then a renderer.
"""

import logging

import structlog

# Keys whose values must never reach a log sink.
REDACTED_KEYS = frozenset({"password", "password_hash", "token", "authorization"})


def redact_credentials(logger, method_name, event_dict):
    """Mask credential values anywhere in the top-level event dict."""
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog, plus the stdlib root logger used by uvicorn and SQLAlchemy."""
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(format="%(message)s", level=log_level)

    if json_logs:
        # JSON lines need tracebacks flattened into a string field.
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_credentials,
            structlog.processors.StackInfoRenderer(),
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
