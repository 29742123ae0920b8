"""
Utility modules.

Common helpers for configuration loading and logging.
"""

from lifecare.utils.config_loader import AppConfig, load_config, load_env
from lifecare.utils.logging_config import LogContext, setup_logging

__all__ = [
    "load_config",
    "load_env",
    "AppConfig",
    "setup_logging",
    "LogContext",
]
