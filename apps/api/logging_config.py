"""Structured logging setup for the ISP gateway.

structlog renders both its own events and stdlib ``logging`` records, so
module loggers created with ``logging.getLogger(__name__)`` end up in the
same stream as ``structlog.get_logger()`` events.
"""

# flake8: noqa: E501


import logging
import sys

import structlog

_SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def setup_logging(app) -> None:
    """
    Configure stdlib logging and structlog from app config.

    Args:
        app: Flask application (reads LOG_LEVEL and LOG_FORMAT)
    """
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    if app.config.get("LOG_FORMAT", "json") == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_isp_gateway_handler", False):
            root.removeHandler(existing)
    handler._isp_gateway_handler = True
    root.addHandler(handler)
    root.setLevel(level)

    app.logger.setLevel(level)
