"""Structured logging setup: JSON lines to file, human-readable to stderr."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog


def setup_logging(
    log_dir: str | None,
    log_name: str = "threadtree",
    console_level: int = logging.WARNING,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog for CLI use.

    Console output goes to stderr so that parsed trees printed on stdout stay
    machine-readable. The JSON file is skipped when *log_dir* is None.
    """
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    handlers: list[logging.Handler] = [console_handler]

    file_handler = None
    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        # 5 MB per file, keep 3 backups
        file_handler = RotatingFileHandler(
            log_path / f"{log_name}.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
        )
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Repeated CLI invocations in one process must not stack handlers
    root_logger.handlers.clear()
    for handler in handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
        )
    )
    if file_handler is not None:
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
            )
        )

    return structlog.get_logger(log_name)
