"""Validation rules addressed by opaque handles.

A rule is a zero-argument predicate. Rules run in insertion order and the
set is valid only if every rule passes. Removal goes through the handle
returned at add time, so it never depends on a rule's position.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

Rule = Callable[[], bool]


class RuleHandle:
    """Opaque token identifying one installed rule."""

    __slots__ = ("_release",)

    def __init__(self, release: Callable[[RuleHandle], bool]) -> None:
        self._release = release

    def remove(self) -> bool:
        """Uninstall the rule. Returns False if it was already removed."""
        return self._release(self)


class RuleSet:
    """Ordered collection of validation rules."""

    def __init__(self) -> None:
        self._rules: dict[RuleHandle, Rule] = {}

    def add(self, rule: Rule, release: Callable[[RuleHandle], bool]) -> RuleHandle:
        """Append *rule*; *release* is what ``handle.remove()`` calls."""
        handle = RuleHandle(release)
        self._rules[handle] = rule
        return handle

    def remove(self, handle: RuleHandle) -> bool:
        return self._rules.pop(handle, None) is not None

    def evaluate(self) -> bool:
        """AND of all rules, stopping at the first failure.

        A rule that raises counts as failed; the exception is logged, never
        propagated.
        """
        for rule in list(self._rules.values()):
            try:
                passed = bool(rule())
            except Exception:
                logger.warning("Validation rule %r raised; treating as failed", rule, exc_info=True)
                return False
            if not passed:
                return False
        return True

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, handle: object) -> bool:
        return handle in self._rules
