"""Event logger used by the parser, classifier and dispatcher.

The package only emits records on the ``tmi_events`` logger. Output is the
host application's choice; ``enable_console_logging`` attaches a colorlog
console handler for hosts that want one.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import colorlog

from .event_catalog import template_for

LOGGER_NAME = "tmi_events"
EVENT_NAME_WIDTH = 32
PREFIX_WIDTH = 24

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


def _debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


class EventLogger:
    """Logs named (domain, action) events with a human readable text.

    The text comes from the event template for the pair, an explicit
    ``human`` argument, or is derived as ``"domain: action"``. With DEBUG
    set in the environment the event name leads the message and the keyword
    context trails it as ``key=value`` pairs.
    """

    def __init__(self, name: str = LOGGER_NAME) -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **context: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        channel = context.pop("channel", None)
        text = human if human is not None else self._render(domain, action, context)
        prefix = f"[{str(channel or 'tmi').ljust(PREFIX_WIDTH)[:PREFIX_WIDTH]}]"
        if _debug_enabled():
            event_name = f"{domain}_{action}".lower()
            if len(event_name) > EVENT_NAME_WIDTH:
                event_name = event_name[: EVENT_NAME_WIDTH - 1] + "…"
            message = f"{event_name.ljust(EVENT_NAME_WIDTH)} {prefix} {text}"
            if context:
                message += " (" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")"
        else:
            message = f"{prefix} {text}"
        self.logger.log(level, message, exc_info=exc_info)

    @staticmethod
    def _render(domain: str, action: str, context: dict[str, object]) -> str:
        template = template_for(domain, action)
        if template is None:
            context.setdefault("derived", True)
            return f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
        try:
            return template.format(**context)
        except (KeyError, IndexError, ValueError):
            return template


def enable_console_logging(
    level: int | None = None, stream: TextIO | None = None
) -> logging.Handler:
    """Attach a colored console handler to the package logger.

    Calling it again replaces the handler installed by the previous call.
    The level defaults to DEBUG when the DEBUG environment flag is set and
    INFO otherwise.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_tmi_console", False):
            package_logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)-8s%(reset)s %(message)s",
            log_colors=LOG_COLORS,
            reset=True,
        )
    )
    handler._tmi_console = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    if level is None:
        level = logging.DEBUG if _debug_enabled() else logging.INFO
    package_logger.setLevel(level)
    return handler


logger = EventLogger()
