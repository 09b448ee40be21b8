"""Optional metrics sink for observed tags, commands and failures.

Callers pass a sink into the router; nothing here is module-level state.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Protocol

from ..constants import FAILURE_HISTORY_LIMIT


class MetricsSink(Protocol):  # minimal structural typing
    def record_tag(self, key: str, value: object) -> None: ...
    def record_command(self, command: str) -> None: ...
    def record_failure(self, reason: str, line: str) -> None: ...


class TagFrequencyCounter:
    """Counts how often each tag key, tag value, and command is seen."""

    def __init__(self, keep_failed_lines: int = FAILURE_HISTORY_LIMIT) -> None:
        self.tags: Counter[str] = Counter()
        self.tag_values: defaultdict[str, Counter[str]] = defaultdict(Counter)
        self.commands: Counter[str] = Counter()
        self.failures: Counter[str] = Counter()
        self.failed_lines: list[str] = []
        self._keep_failed_lines = keep_failed_lines

    def record_tag(self, key: str, value: object) -> None:
        self.tags[key] += 1
        # Structured values are counted by their repr
        self.tag_values[key][value if isinstance(value, str) else repr(value)] += 1

    def record_command(self, command: str) -> None:
        self.commands[command] += 1

    def record_failure(self, reason: str, line: str) -> None:
        self.failures[reason] += 1
        self.failed_lines.append(line)
        if len(self.failed_lines) > self._keep_failed_lines:
            del self.failed_lines[: -self._keep_failed_lines]

    def seen_keys(self) -> list[str]:
        return sorted(self.tags)

    def snapshot(self) -> dict[str, dict[str, int]]:
        return {
            "tags": dict(self.tags),
            "commands": dict(self.commands),
            "failures": dict(self.failures),
        }
