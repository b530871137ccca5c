"""
structlog setup shared by the API and the two functions.

Each entry point calls ``configure_logging()`` before serving; repeated
calls are no-ops. With ENVIRONMENT=production every event is one JSON line:

    {"event": "Post created", "post_id": "6f1c...", "slug": "hello-world-417",
     "request_id": "req_3f9a...", "module": "publishing", "level": "info",
     "timestamp": "2024-01-01T12:00:00Z"}

Anywhere else the console renderer is used (no colours under pytest).
"""

import logging
import sys
from typing import Any, Optional

import structlog

from folio.core.config import settings

# Libraries whose INFO output drowns ours (one line per HTTP call or S3 request)
QUIET_LOGGERS = ("httpx", "httpcore", "botocore", "boto3", "urllib3", "PIL", "multipart")

_configured = False


def configure_logging(json_logs: Optional[bool] = None) -> None:
    global _configured
    if _configured:
        return
    if json_logs is None:
        json_logs = settings.ENVIRONMENT == "production"

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder({structlog.processors.CallsiteParameter.MODULE}),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors="pytest" not in sys.modules))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and sqlalchemy log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=logging.INFO)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
