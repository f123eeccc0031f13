"""Input masking — the formatting collaborator behind phone and digit inputs.

Pattern syntax:

- ``0`` — a digit placeholder;
- ``{...}`` — fixed characters that are part of the unmasked value
  (``+{7}`` keeps the country code when reading the raw number);
- anything else — a literal shown only in the formatted value.

Formatting is lazy: literals and fixed characters after the last consumed
input character are not shown, so ``"7999"`` formats as ``+7 (999``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from formkit.infrastructure.dom import Element, Event

logger = logging.getLogger(__name__)

DIGIT_PLACEHOLDER = "0"


@dataclass(frozen=True)
class MaskState:
    """Result of pushing raw text through a mask."""

    value: str
    unmasked_value: str
    is_complete: bool


@dataclass(frozen=True)
class _Slot:
    kind: str  # "digit" | "fixed" | "literal"
    char: str


def compile_pattern(pattern: str) -> tuple[_Slot, ...]:
    """Split a mask pattern into slots.

    Raises:
        ValueError: If a ``{`` block is never closed.
    """
    slots: list[_Slot] = []
    in_fixed = False
    for char in pattern:
        if char == "{" and not in_fixed:
            in_fixed = True
        elif char == "}" and in_fixed:
            in_fixed = False
        elif in_fixed:
            slots.append(_Slot("fixed", char))
        elif char == DIGIT_PLACEHOLDER:
            slots.append(_Slot("digit", char))
        else:
            slots.append(_Slot("literal", char))
    if in_fixed:
        msg = f"Unclosed '{{' in mask pattern {pattern!r}"
        raise ValueError(msg)
    return tuple(slots)


class Mask(Protocol):
    """Anything that turns raw text into a :class:`MaskState`."""

    def resolve(self, appended: str, *, value: str = "") -> MaskState: ...


class PatternMask:
    """A single compiled mask pattern.

    Parameters:
        pattern: Mask pattern (see module docstring).
        starts_with: Numeric prefix used by dynamic dispatch.
        country: Human label for the format.
        default: Preferred by :class:`DynamicMask` before anything is typed.
    """

    def __init__(
        self,
        pattern: str,
        *,
        starts_with: str = "",
        country: str = "",
        default: bool = False,
    ) -> None:
        self.pattern = pattern
        self.starts_with = starts_with
        self.country = country
        self.default = default
        self._slots = compile_pattern(pattern)

    def __repr__(self) -> str:
        return f"PatternMask({self.pattern!r}, starts_with={self.starts_with!r})"

    @property
    def size(self) -> int:
        """Number of digit placeholders."""
        return sum(1 for slot in self._slots if slot.kind == "digit")

    def resolve(self, appended: str, *, value: str = "") -> MaskState:
        raw = value + appended
        formatted: list[str] = []
        unmasked: list[str] = []
        # Non-digit slots wait here until an input character proves they are reached.
        pending: list[tuple[_Slot, bool]] = []
        filled = 0
        pos = 0

        def flush(upto: int) -> None:
            for slot, _ in pending[:upto]:
                formatted.append(slot.char)
                if slot.kind == "fixed":
                    unmasked.append(slot.char)
            del pending[:upto]

        for slot in self._slots:
            if slot.kind == "digit":
                while pos < len(raw) and not raw[pos].isdigit():
                    pos += 1
                if pos >= len(raw):
                    break
                flush(len(pending))
                formatted.append(raw[pos])
                unmasked.append(raw[pos])
                filled += 1
                pos += 1
            else:
                consumed = pos < len(raw) and raw[pos] == slot.char
                if consumed:
                    pos += 1
                pending.append((slot, consumed))

        last_consumed = max(
            (index + 1 for index, (_, consumed) in enumerate(pending) if consumed),
            default=0,
        )
        flush(last_consumed)

        return MaskState(
            value="".join(formatted),
            unmasked_value="".join(unmasked),
            is_complete=filled == self.size,
        )


Dispatch = Callable[[str, "DynamicMask"], PatternMask]


def _dispatch_default(appended: str, dynamic: DynamicMask) -> PatternMask:
    return dynamic.default_mask


class DynamicMask:
    """A set of compiled masks, one of which is chosen on every change.

    The *dispatch* callback receives the appended text and this object (whose
    ``value`` holds the formatted text before the append) and returns the
    mask to apply.
    """

    def __init__(self, masks: Sequence[PatternMask], dispatch: Dispatch | None = None) -> None:
        if not masks:
            msg = "DynamicMask needs at least one mask"
            raise ValueError(msg)
        self.compiled_masks: list[PatternMask] = list(masks)
        self._dispatch = dispatch or _dispatch_default
        self.current: PatternMask = self.default_mask
        self.value = ""

    @property
    def default_mask(self) -> PatternMask:
        for mask in self.compiled_masks:
            if mask.default:
                return mask
        return self.compiled_masks[0]

    def resolve(self, appended: str, *, value: str = "") -> MaskState:
        self.value = value
        chosen = self._dispatch(appended, self)
        if chosen is not self.current:
            logger.debug("Mask switched from %r to %r", self.current, chosen)
        self.current = chosen
        state = chosen.resolve(appended, value=value)
        self.value = state.value
        return state


class InputMask:
    """Binds a mask to an element, re-masking on every ``input``/``change``.

    Writes through :attr:`value` or :attr:`unmasked_value` are masked too;
    direct writes to ``element.value`` bypass the mask until the next event.
    """

    def __init__(self, element: Element, mask: Mask) -> None:
        self.element = element
        self.mask = mask
        self._state = MaskState(value="", unmasked_value="", is_complete=False)
        self._apply(element.value)
        element.add_event_listener("input", self._on_event)
        element.add_event_listener("change", self._on_event)

    @property
    def value(self) -> str:
        """Formatted value as displayed."""
        return self.element.value

    @value.setter
    def value(self, value: str) -> None:
        self._apply(value)

    @property
    def unmasked_value(self) -> str:
        return self._state.unmasked_value

    @unmasked_value.setter
    def unmasked_value(self, value: str) -> None:
        self._apply(value)

    @property
    def is_complete(self) -> bool:
        return self._state.is_complete

    def append(self, text: str) -> None:
        """Append typed or pasted text to the current value."""
        self._apply(text, value=self.element.value)

    def _on_event(self, event: Event) -> None:
        self._apply(self.element.value)

    def _apply(self, appended: str, *, value: str = "") -> None:
        self._state = self.mask.resolve(appended, value=value)
        if self.element.value != self._state.value:
            self.element.value = self._state.value
