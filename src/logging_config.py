"""
Logging Configuration for the Contract Negotiation core

Provides:
- Rotating file handlers (main, debug and error logs)
- Colored console output
- Per-module level control for the negotiation components

Usage Example:
    from logging_config import setup_logging, get_logger

    setup_logging(level="INFO", log_dir="logs")

    logger = get_logger(__name__)
    logger.info("Negotiation window opened")

Log Files Created:
- logs/contract_negotiation.log: Main log (INFO+)
- logs/contract_negotiation_debug.log: Per-round detail (DEBUG+)
- logs/contract_negotiation_error.log: Errors (ERROR+)

Each file rotates at 10MB with 5 backups.
"""

import copy
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional


LOG_FILE_PREFIX = "contract_negotiation"

DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
)

SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

CONSOLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that make up the negotiation core
NEGOTIATION_MODULES = (
    "contract_negotiation",
    "contract_negotiation.engine",
    "contract_negotiation.evaluator",
    "contract_negotiation.leverage",
    "contract_negotiation.agent_profiles",
    "contract_negotiation.events",
)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name with ANSI codes."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        levelname = record.levelname
        if levelname not in self.COLORS:
            return super().format(record)
        # Color a copy so file handlers see the plain level name
        colored = copy.copy(record)
        colored.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        return super().format(colored)


def _rotating_handler(
    log_dir: str,
    suffix: str,
    level: int,
    log_format: str,
    max_bytes: int,
    backup_count: int,
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, f"{LOG_FILE_PREFIX}{suffix}.log"),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_dir: str = "logs",
    enable_console: bool = True,
    enable_file: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    format_style: str = "detailed"
) -> None:
    """
    Configure root logging. Call once at startup.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files
        enable_console: Whether to log to the console
        enable_file: Whether to write rotating log files
        max_bytes: Size per log file before rotation
        backup_count: Rotated files to keep
        format_style: "detailed" or "simple" for the main log

    Raises:
        ValueError: Unknown level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    log_format = DETAILED_FORMAT if format_style == "detailed" else SIMPLE_FORMAT

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if enable_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(
            _rotating_handler(log_dir, "", logging.INFO, log_format, max_bytes, backup_count)
        )
        root_logger.addHandler(
            _rotating_handler(log_dir, "_debug", logging.DEBUG, DETAILED_FORMAT, max_bytes, backup_count)
        )
        root_logger.addHandler(
            _rotating_handler(log_dir, "_error", logging.ERROR, DETAILED_FORMAT, max_bytes, backup_count)
        )

    root_logger.info(
        f"Logging initialized - Level: {level}, "
        f"Console: {enable_console}, File: {enable_file}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module (typically __name__)."""
    return logging.getLogger(name)


def log_exception(
    logger: logging.Logger,
    exception: Exception,
    context: Optional[dict] = None,
    level: str = "ERROR"
) -> None:
    """
    Log an exception with traceback and context.

    NegotiationException subclasses already carry a context dict; it is
    merged with any context passed here.

    Example:
        >>> try:
        ...     engine.submit_offer(player_id, offer)
        ... except SessionNotFoundError as e:
        ...     log_exception(logger, e, context={"screen": "negotiation"})
    """
    merged = dict(getattr(exception, "context_dict", None) or {})
    if context:
        merged.update(context)

    context_str = ""
    if merged:
        context_str = f" [{', '.join(f'{k}={v}' for k, v in merged.items())}]"

    logger.log(
        getattr(logging, level.upper()),
        f"Exception occurred{context_str}: {type(exception).__name__}: {exception}",
        exc_info=exception,
    )


def configure_module_logger(
    module_name: str,
    level: Optional[str] = None,
    propagate: bool = True
) -> logging.Logger:
    """
    Set the level and propagation of one module's logger.

    Example:
        >>> configure_module_logger("contract_negotiation.evaluator", level="DEBUG")
    """
    logger = logging.getLogger(module_name)
    if level:
        logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = propagate
    return logger


def setup_negotiation_logging(level: str = "INFO") -> None:
    """Set one level for every negotiation core logger."""
    for module_name in NEGOTIATION_MODULES:
        configure_module_logger(module_name, level=level)


class LogContext:
    """
    Context manager for a temporary log level.

    Example:
        >>> with LogContext(get_logger("contract_negotiation"), "DEBUG"):
        ...     engine.submit_offer(player_id, offer)
    """

    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.new_level = getattr(logging, level.upper())
        self.original_level = logger.level

    def __enter__(self):
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.original_level)


def setup_development_logging(log_dir: str = "logs") -> None:
    """DEBUG level, colored console and detailed log files."""
    setup_logging(
        level="DEBUG",
        log_dir=log_dir,
        enable_console=True,
        enable_file=True,
        format_style="detailed"
    )


def setup_testing_logging() -> None:
    """WARNING level, console only."""
    setup_logging(
        level="WARNING",
        enable_console=True,
        enable_file=False,
        format_style="simple"
    )
