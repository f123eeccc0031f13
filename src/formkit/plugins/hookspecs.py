"""Pluggy hook specifications for form lifecycle notifications.

The three submission hooks are ``firstresult``: the first implementation
returning anything other than None stops dispatch, and that non-None result
means "handled": it cancels a submission in ``form_before_submit`` and
suppresses the default resolution or error mapping in ``form_submit`` and
``form_error``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from formkit.domain.reply import SubmissionReply
    from formkit.form.engine import Form

hookspec = pluggy.HookspecMarker("formkit")
hookimpl = pluggy.HookimplMarker("formkit")


class FormHookSpec:
    """Hook specifications for the formkit plugin system."""

    @hookspec(firstresult=True)
    def form_before_submit(self, form: Form) -> Any | None:
        """Called after validation passed, before anything is locked."""

    @hookspec(firstresult=True)
    def form_submit(
        self,
        form: Form,
        reply: SubmissionReply,
        data: list[tuple[str, str]],
    ) -> Any | None:
        """Called when the server answered ``status == "ok"``."""

    @hookspec(firstresult=True)
    def form_error(self, form: Form, reply: SubmissionReply) -> Any | None:
        """Called when the server answered with any other status."""

    @hookspec
    def register_input_modules(self) -> dict[str, Any] | None:
        """Return input type -> controller factory (or ModuleSpec) mappings."""
