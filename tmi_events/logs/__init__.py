"""Event logging for the package: templated (domain, action) records."""

from .event_catalog import event_templates, template_for  # noqa: F401
from .logger import EventLogger, enable_console_logging, logger  # noqa: F401

__all__ = [
    "EventLogger",
    "enable_console_logging",
    "event_templates",
    "logger",
    "template_for",
]
