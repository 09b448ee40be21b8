"""Human readable text for logged (domain, action) events.

Templates ship as package data in ``event_templates.json``, grouped by domain.
"""

from __future__ import annotations

import json
from functools import cache
from importlib import resources

_RESOURCE = "event_templates.json"


@cache
def event_templates() -> dict[tuple[str, str], str]:
    raw = json.loads(
        resources.files(__package__).joinpath(_RESOURCE).read_text(encoding="utf-8")
    )
    return {
        (domain, action): text
        for domain, actions in raw.items()
        for action, text in actions.items()
    }


def template_for(domain: str, action: str) -> str | None:
    return event_templates().get((domain, action))


__all__ = ["event_templates", "template_for"]
