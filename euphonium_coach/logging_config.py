"""Centralized logging configuration for Euphonium Coach.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "euphonium_coach": logging.INFO,
    "euphonium_coach.api": logging.INFO,
    "euphonium_coach.fingering": logging.INFO,
    "euphonium_coach.scales": logging.INFO,
    "euphonium_coach.instrument": logging.INFO,
    "euphonium_coach.note_matcher": logging.INFO,  # Set to DEBUG for per-frame cents
    "euphonium_coach.practice": logging.INFO,
    # Signal processing is chatty at DEBUG (every gated window is logged)
    "euphonium_coach.audio": logging.INFO,
    "euphonium_coach.audio.pitch_estimator": logging.INFO,
    "euphonium_coach.services": logging.INFO,
    "euphonium_coach.core": logging.INFO,
    "euphonium_coach.cli": logging.WARNING,  # CLI prints its own output
    "euphonium_coach.logger": logging.WARNING,  # Logger module itself should be quiet
    # Libraries/third-party
    "sounddevice": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'euphonium_coach' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("euphonium_coach"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Apply module-specific levels
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        # Clear existing handlers and add the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        if _console_handler not in logger.handlers:
            logger.addHandler(_console_handler)
        logger.propagate = False

    logging.getLogger("euphonium_coach").info("Logging configuration complete")

