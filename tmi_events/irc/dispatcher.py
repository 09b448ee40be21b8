"""Frame dispatch: split, route, build events, fan out to handlers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..constants import LOG_RAW_LINES
from ..logs.logger import logger
from .events import TwitchEvent, events_for
from .fields import strip_credentials
from .metrics import MetricsSink
from .models import CommandKind, ParseFailure
from .parser import route, split_frame

EventHandler = Callable[[TwitchEvent], Any]


class FrameDispatcher:
    """Turns incoming frames into events and hands them to registered handlers.

    Handlers are registered per CommandKind or for every event. A handler that
    raises is logged and the remaining handlers and lines still run.
    """

    def __init__(self, metrics: MetricsSink | None = None, log_raw: bool = LOG_RAW_LINES):
        self.metrics = metrics
        self.log_raw = log_raw
        self._handlers: dict[CommandKind, list[EventHandler]] = {}
        self._catch_all: list[EventHandler] = []

    def add_handler(self, command: CommandKind, handler: EventHandler) -> None:
        self._handlers.setdefault(command, []).append(handler)

    def add_catch_all(self, handler: EventHandler) -> None:
        self._catch_all.append(handler)

    def remove_handler(self, command: CommandKind, handler: EventHandler) -> bool:
        handlers = self._handlers.get(command, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def process_incoming_data(self, buffer: str, new_data: str) -> tuple[str, list[TwitchEvent]]:
        """Append ``new_data`` to ``buffer`` and dispatch every complete line.

        Returns:
            The unconsumed partial line and the events that were dispatched.
        """
        buffer += new_data
        complete, sep, rest = buffer.rpartition("\n")
        if not sep:
            return buffer, []
        return rest, self.process_frame(complete)

    def process_frame(self, data: str) -> list[TwitchEvent]:
        dispatched: list[TwitchEvent] = []
        lines = split_frame(data)
        failures = 0
        for line in lines:
            if self.log_raw:
                logger.log_event(
                    "irc", "raw", level=logging.DEBUG, raw=strip_credentials(line)
                )
            result = route(line, self.metrics)
            if result is None:
                continue
            if isinstance(result, ParseFailure):
                failures += 1
                continue
            for event in events_for(line, result):
                self.dispatch(event)
                dispatched.append(event)
        logger.log_event(
            "irc",
            "frame_processed",
            level=logging.DEBUG,
            lines=len(lines),
            failures=failures,
        )
        return dispatched

    def dispatch(self, event: TwitchEvent) -> None:
        handlers = [*self._handlers.get(event.command, ()), *self._catch_all]
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "irc",
                    "handler_error",
                    level=logging.ERROR,
                    channel=event.channel.name if event.channel else None,
                    handler=getattr(handler, "__name__", repr(handler)),
                    command=event.command.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
