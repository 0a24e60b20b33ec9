"""Structured logging configuration.

JSON lines in production, colored console otherwise. Both the API
process and the ARQ worker call ``configure_logging`` once at startup;
the ``service`` name is stamped on every event so the two streams can
be told apart after aggregation.
"""

import logging
import sys

import structlog

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"api_key", "api-key", "password", "secret", "token", "authorization"}
)

REDACTED = "***REDACTED***"

# Third-party loggers that are too chatty at DEBUG/INFO.
LIBRARY_LOG_LEVELS: dict[str, int] = {
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "google_genai": logging.WARNING,
    "arq.worker": logging.INFO,
}


def _redact_sensitive_keys(
    logger: logging.Logger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Redact values of sensitive keys in log events."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
    return event_dict


def _add_service(service: str) -> structlog.types.Processor:
    def processor(
        logger: logging.Logger,
        method_name: str,
        event_dict: structlog.types.EventDict,
    ) -> structlog.types.EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return processor


def configure_logging(
    environment: str = "development",
    log_level: str = "INFO",
    *,
    service: str = "api",
) -> None:
    """Configure the structlog processor chain and the stdlib root logger.

    Args:
        environment: 'production' for JSON output, anything else
            for colored console output.
        log_level: Python log level name (DEBUG, INFO, WARNING, etc.).
        service: Process name added to every event ("api", "worker").
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service(service),
        _redact_sensitive_keys,
    ]

    renderer: structlog.types.Processor
    if environment == "production":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Records from stdlib loggers (uvicorn, sqlalchemy, arq) pass
    # through the same chain before rendering.
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name, level in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(level)
