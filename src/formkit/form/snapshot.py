"""Form content collection and serialization.

:func:`collect` mirrors what a browser submits: named, enabled controls,
checkables only when checked, never buttons. :func:`serialize` turns those
pairs into the JSON snapshot used for dirty tracking; names ending in
``[]`` are grouped into lists, other repeated names keep the last value.
"""

from __future__ import annotations

import json

from formkit.domain.types import is_list_name
from formkit.infrastructure.dom import CHECKABLE_TYPES, Element

_NON_DATA_TYPES = frozenset({"submit", "button", "reset", "image", "file"})


def collect(form: Element) -> list[tuple[str, str]]:
    """Ordered ``(name, value)`` pairs of the successful controls in *form*."""
    pairs: list[tuple[str, str]] = []
    for control in form.elements:
        name = control.name
        if not name or control.disabled or control.type in _NON_DATA_TYPES:
            continue
        if control.type in CHECKABLE_TYPES:
            if not control.checked:
                continue
            pairs.append((name, control.value or "on"))
            continue
        pairs.append((name, control.value))
    return pairs


def serialize(pairs: list[tuple[str, str]]) -> str:
    """JSON snapshot of *pairs*."""
    snapshot: dict[str, str | list[str]] = {}
    for name, value in pairs:
        if is_list_name(name):
            grouped = snapshot.setdefault(name, [])
            assert isinstance(grouped, list)
            grouped.append(value)
        else:
            snapshot[name] = value
    return json.dumps(snapshot, ensure_ascii=False)
