"""Core functionality for Huxley: configuration, logging, paths, and prompts."""

from huxley.core.config import Config, load_config
from huxley.core.logging import get_decision_logger, setup_logging

__all__ = [
    "Config",
    "load_config",
    "get_decision_logger",
    "setup_logging",
]
