"""
Logging configuration for challenge-roulette.
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import structlog
from structlog.typing import FilteringBoundLogger


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> FilteringBoundLogger:
    """Setup structured logging for the application.

    The TUI owns the terminal, so it logs JSON lines to ``log_file``.
    Headless commands pass ``log_file=None`` and get console output on stderr.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        processors.append(structlog.processors.JSONRenderer())
    else:
        handler = logging.StreamHandler(sys.stderr)
        processors.append(structlog.dev.ConsoleRenderer())

    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("challenge_roulette")
    logger.info("logging_configured", level=level, to_file=log_file is not None)

    return logger
