"""
Configuration constants for the TMI event parser

This module contains all configurable constants used throughout the package.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    """Retrieve a non-empty string from an environment variable."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _get_env_bool(name: str, default: bool) -> bool:
    """Retrieve a boolean flag ('true', '1', 'yes') from an environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


# Server host used for synthesized user URIs (nick!user@nick.<host>)
TMI_HOST = _get_env_str("TMI_HOST", "tmi.twitch.tv")

# Tag added to locally built chat events so consumers can tell them apart
SYNTHETIC_TAG = _get_env_str("SYNTHETIC_TAG", "client-synthesized")

# Failed lines kept by the default metrics sink
FAILURE_HISTORY_LIMIT = _get_env_int("FAILURE_HISTORY_LIMIT", 100)

# Log every inbound line at DEBUG level (credentials are stripped first)
LOG_RAW_LINES = _get_env_bool("LOG_RAW_LINES", False)
