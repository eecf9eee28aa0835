"""
Logging utilities for the decider framework.

Library modules log through the package logger (`decider`); only scripts
attach handlers.
"""
import logging
import sys
import time
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

LOGGER_NAME = 'decider'
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    log_dir: Optional[Path] = None,
    run_id: Optional[str] = None,
    level: int = logging.INFO,
    console: bool = True
) -> logging.Logger:
    """
    Configure the package logger for a run.

    Handlers from an earlier call are closed and replaced, so scripts can
    call this once per run without duplicating output.

    Args:
        log_dir: Directory for the run's log file
        run_id: Run identifier, used as the log file name
        level: Logging level (DEBUG shows per-step engine output)
        console: Whether to log to stdout

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{run_id or datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.info(f"Logging to: {log_file}")

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get the package logger, or a child of it."""
    return logging.getLogger(name)


def log_validation(logger: logging.Logger, validation: Dict[str, Any]) -> bool:
    """
    Log the warnings and errors of validate_problem().

    Returns:
        True when the problem can be evaluated
    """
    for warning in validation.get('warnings', []):
        logger.warning(warning)
    for error in validation.get('errors', []):
        logger.error(error)
    return bool(validation.get('valid', False))


def log_ranking(logger: logging.Logger, results: Sequence[Any], label: str = "score"):
    """Log one line per ranked option, best first."""
    for pos, r in enumerate(results):
        logger.info(f"  #{pos + 1} {r.name} ({label}: {r.total:.4f}, "
                    f"S+ {r.s_plus:.3f}, S- {r.s_minus:.3f})")


class LogContext:
    """Context manager that brackets a pipeline section in the log."""

    def __init__(self, logger: logging.Logger, section: str):
        self.logger = logger
        self.section = section
        self.start = None

    def __enter__(self):
        self.start = time.perf_counter()
        self.logger.info("=" * 60)
        self.logger.info(f"Starting: {self.section}")
        self.logger.info("=" * 60)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - self.start
        if exc_type is None:
            self.logger.info(f"Completed: {self.section} ({elapsed:.2f}s)")
        else:
            self.logger.error(f"Failed: {self.section} - {exc_val}")
        self.logger.info("-" * 60)
        return False
