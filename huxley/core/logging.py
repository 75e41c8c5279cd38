"""Logging setup for Huxley.

Everything goes to the console and a rotating ``huxley.log``. Interrupt
classifications are also written to ``decisions.log`` through the
``huxley.decisions`` logger, so a session's mid-task verdicts can be
reviewed without the rest of the noise.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from huxley.core.config.models import LoggingConfig

DECISION_LOGGER = "huxley.decisions"
LOG_FILE = "huxley.log"
DECISION_LOG_FILE = "decisions.log"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DECISION_FORMAT = "%(asctime)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: str) -> int:
    """Resolve a level name such as ``"debug"`` to its numeric value.

    Raises:
        ValueError: If the name is not a standard logging level.
    """
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def _rotating_handler(path: Path, config: LoggingConfig, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=config.max_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
    return handler


def setup_logging(config: LoggingConfig | None = None, verbose: bool = False) -> Path:
    """Configure the root logger and the decision log.

    Safe to call more than once; previous handlers are replaced.

    Args:
        config: Logging settings (defaults apply when None).
        verbose: Force DEBUG regardless of the configured level.

    Returns:
        The directory the log files are written to.
    """
    config = config or LoggingConfig()
    level = logging.DEBUG if verbose else parse_level(config.level)

    log_dir = Path(config.directory)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)
    root_logger.addHandler(_rotating_handler(log_dir / LOG_FILE, config, LOG_FORMAT))

    # Decisions still propagate to the root handlers.
    decision_logger = get_decision_logger()
    decision_logger.handlers.clear()
    decision_logger.setLevel(logging.INFO)
    decision_logger.addHandler(_rotating_handler(log_dir / DECISION_LOG_FILE, config, DECISION_FORMAT))

    logging.info(f"Logging initialized: level={logging.getLevelName(level)}, directory={log_dir}")
    return log_dir


def get_decision_logger() -> logging.Logger:
    """Logger that receives one line per interrupt classification."""
    return logging.getLogger(DECISION_LOGGER)
