"""Form — binds input controllers to one logical form.

Construction discovers the inputs once, in document order:

- elements carrying ``data-form-input="<type>"`` are registered under
  that type;
- remaining text-like inputs (``text``/``tel``/``password``/``email`` and
  ``textarea``) outside any tagged element are registered as ``text``.

A registration whose type has no module keeps its element but gets no
controller; it takes no part in validation, lookup, or error mapping.

Validation is the AND of the installed rules (the first rule checks every
enabled controller) and gates the submit buttons. Dirty state compares the
current serialization against a sticky baseline. :meth:`Form.submit` runs
the guarded lock → send → unlock lifecycle.

INVARIANT: Every path that acquires the lock releases it exactly once.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from formkit.config.settings import FormSettings
from formkit.domain.errors import (
    ALREADY_SUBMITTING,
    VALIDATION_FAILED,
    FormError,
    ServerFieldError,
    SubmissionGuardError,
    TransportError,
)
from formkit.domain.reply import SubmissionReply
from formkit.domain.types import (
    SUBMIT_TRANSITIONS,
    InputKind,
    SubmitPhase,
    is_list_name,
    is_valid_transition,
)
from formkit.form.registry import ModuleRegistry, default_registry
from formkit.form.rules import Rule, RuleHandle, RuleSet
from formkit.form.snapshot import collect, serialize
from formkit.infrastructure.dom import Element, Event, is_text_like
from formkit.infrastructure.transport import HttpxTransport, Transport
from formkit.inputs.base import InputController
from formkit.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

TYPE_ATTRIBUTE = "data-form-input"


@dataclass
class InputRegistration:
    """One discovered input: its type, element, and controller (if any)."""

    type: str
    element: Element
    controller: InputController | None = None


def _is_tagged(element: Element) -> bool:
    return element.has_attribute(TYPE_ATTRIBUTE)


class Form:
    """Form engine bound to a ``<form>`` element.

    Parameters:
        element: The form element.
        use: Local input modules layered over the registry for this form.
        rules: Extra validation rules, installed after the default one.
        registry: Process-wide module registry to start from.
        settings: Runtime settings; read from the environment when omitted.
        transport: Network collaborator; an :class:`HttpxTransport` by default.
        plugins: Hook implementations to register on this form.
    """

    def __init__(
        self,
        element: Element,
        *,
        use: Mapping[str, Any] | None = None,
        rules: Iterable[Rule] = (),
        registry: ModuleRegistry = default_registry,
        settings: FormSettings | None = None,
        transport: Transport | None = None,
        plugins: Iterable[object] = (),
    ) -> None:
        self.element = element
        self.settings = settings or FormSettings()
        self.transport: Transport = transport or HttpxTransport(self.settings)

        self.plugins = PluginManager()
        if self.settings.load_plugins:
            self.plugins.discover_and_load()
        for plugin in plugins:
            self.plugins.register_plugin(plugin)

        self.rules = RuleSet()
        self.inputs: list[InputRegistration] = []
        self.modules = ModuleRegistry(registry.snapshot())
        self.modules.use(self.plugins.collect_input_modules())
        self.use(use or {})

        self._phase = SubmitPhase.IDLE
        self._baseline = ""
        self._dirty = False
        self._disabled_elements: list[Element] = []
        self._last_active_element: Element | None = None
        self._pending: set[asyncio.Task[Any]] = set()

        self.element.add_event_listener("input", self._on_input_event)
        self.element.add_event_listener("change", self._on_change_event)
        self.element.add_event_listener("submit", self._on_submit_event)
        self.element.add_event_listener("reset", self._on_reset_event)
        self.element.add_event_listener("focusin", self._on_focus_in_event)
        self.element.add_event_listener("keydown", self._on_key_down_event)

        self._discover()
        self._init_controllers()

        for rule in [self._inputs_valid, *rules]:
            self.add_rule(rule, run_now=False)

        self.set_changed(False)
        self.validate()

    # ------------------------------------------------------------------
    # Modules and discovery
    # ------------------------------------------------------------------

    def use(self, modules: Mapping[str, Any]) -> None:
        """Register input modules for this form only.

        Only affects inputs discovered after the call, so it is meant for
        construction time (``use=``).
        """
        self.modules.use(modules)

    def _discover(self) -> None:
        for element in self.element.query_all(_is_tagged):
            self.inputs.append(
                InputRegistration(type=element.get_attribute(TYPE_ATTRIBUTE) or "", element=element)
            )

        for element in self.element.query_all(is_text_like):
            if element.closest(_is_tagged) is not None:
                continue
            self.inputs.append(InputRegistration(type=InputKind.TEXT, element=element))

    def _init_controllers(self) -> None:
        for registration in self.inputs:
            spec = self.modules.get(registration.type)
            if spec is None:
                logger.debug(
                    "No input module for type %r; %r stays unmanaged",
                    registration.type,
                    registration.element,
                )
                continue

            controller = spec.create(registration.element)
            registration.controller = controller
            controller.on_state("disabled", self._on_controller_disabled)
            controller.on("change", self._on_controller_change)

    @property
    def controllers(self) -> list[InputController]:
        """Controllers of all managed inputs, in discovery order."""
        return [reg.controller for reg in self.inputs if reg.controller is not None]

    def get(self, name: str) -> InputController | list[InputController] | None:
        """Controller answering to *name*.

        Names ending in ``[]`` return the (possibly empty) list of all
        matching controllers.
        """
        matches = [c for c in self.controllers if c.get_name() == name]
        if is_list_name(name):
            return matches
        return matches[0] if matches else None

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a hook implementation on this form."""
        self.plugins.register_plugin(plugin, name=name)

    def unregister_plugin(self, plugin: object) -> None:
        """Stop dispatching this form's hooks to *plugin*."""
        self.plugins.unregister(plugin)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _inputs_valid(self) -> bool:
        return all(c.get_disabled() or c.validate() for c in self.controllers)

    def add_rule(self, rule: Rule, run_now: bool = True) -> RuleHandle:
        """Install a validation rule; returns its removal handle."""
        handle = self.rules.add(rule, release=self.remove_rule)
        if run_now:
            self.validate()
        return handle

    def remove_rule(self, handle: RuleHandle) -> bool:
        """Uninstall a rule by handle and re-validate.

        Returns False if the handle was already removed.
        """
        removed = self.rules.remove(handle)
        if removed:
            self.validate()
        return removed

    def validate(self) -> bool:
        """Run all rules; enable the submit buttons iff they pass."""
        valid = self.rules.evaluate()
        for button in self.get_submit_buttons():
            button.disabled = not valid
        return valid

    def get_submit_buttons(self) -> list[Element]:
        return [el for el in self.element.elements if el.type == "submit"]

    # ------------------------------------------------------------------
    # Data and dirty state
    # ------------------------------------------------------------------

    def get_data(self) -> list[tuple[str, str]]:
        """Ordered ``(name, value)`` pairs that a submission would send."""
        return collect(self.element)

    def serialize(self) -> str:
        """JSON snapshot of the form content; used only for dirty tracking."""
        return serialize(self.get_data())

    def get_changed(self) -> bool:
        """Whether the content diverged from the baseline since it was last set.

        Sticky: reverting an edit does not clear it, only
        ``set_changed(False)`` does.
        """
        self._track_changes()
        return self._dirty

    def set_changed(self, state: bool) -> None:
        """Force dirty (True) or take the current content as the baseline (False)."""
        self._dirty = state
        self._baseline = "" if state else self.serialize()

    def _track_changes(self) -> None:
        # Locked controls drop out of the snapshot.
        if self.locked:
            return
        if not self._dirty and self._baseline != self.serialize():
            self._dirty = True

    changed = property(get_changed, set_changed)

    def reset(self) -> None:
        """Restore every control to its default and announce the reset."""
        self.element.reset()
        self.element.dispatch_event(Event("reset"))

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    async def reset_errors(self) -> None:
        await asyncio.gather(*(c.reset_error() for c in self.controllers))

    async def handle_fields_errors(self, reply: SubmissionReply) -> None:
        """Show each ``reply.fields`` message on the controller of that name.

        Names without a controller are skipped.
        """
        pending = []
        for name, message in reply.fields.items():
            target = self.get(name)
            if not target:
                logger.debug("Server error for unknown field %r ignored", name)
                continue
            targets = target if isinstance(target, list) else [target]
            pending.extend(controller.set_error(message) for controller in targets)
        await asyncio.gather(*pending)

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    @property
    def locked(self) -> bool:
        return self.element.has_attribute("disabled")

    @property
    def phase(self) -> SubmitPhase:
        return self._phase

    def lock(self) -> bool:
        """Disable every enabled non-submit control.

        Returns False, changing nothing, if the form is already locked.
        """
        if self.locked:
            return False

        self._disabled_elements = []
        self.element.set_attribute("disabled", "disabled")
        for control in self.element.elements:
            if control.has_attribute("disabled") or control.type == "submit":
                continue
            control.disabled = True
            self._disabled_elements.append(control)

        logger.debug("Form locked (%d controls disabled)", len(self._disabled_elements))
        return True

    def unlock(self) -> bool:
        """Re-enable exactly the controls :meth:`lock` disabled.

        Focus returns to the element focused last. Returns False if the form
        was not locked.
        """
        if not self.locked:
            return False

        for control in self._disabled_elements:
            control.disabled = False
        self._disabled_elements = []
        self.element.remove_attribute("disabled")

        if self._last_active_element is not None:
            self._last_active_element.focus()

        logger.debug("Form unlocked")
        return True

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _transition(self, target: SubmitPhase) -> None:
        if not is_valid_transition(self._phase, target, SUBMIT_TRANSITIONS):
            msg = f"Invalid submit transition {self._phase} -> {target}"
            raise RuntimeError(msg)
        logger.debug("Submit phase %s -> %s", self._phase, target)
        self._phase = target

    async def submit(self) -> SubmissionReply | None:
        """Validate, lock, send, and unlock.

        Returns the server reply on success. Returns None when a
        ``form_before_submit`` hook cancelled the attempt or a ``form_submit``
        / ``form_error`` hook handled the reply.

        Raises:
            SubmissionGuardError: Already submitting, or validation failed.
            ServerFieldError: Non-``ok`` reply not handled by a hook; field
                errors have been shown on the matching controllers.
            TransportError: The request itself failed.
        """
        if self.locked or self._phase is not SubmitPhase.IDLE:
            raise SubmissionGuardError(ALREADY_SUBMITTING)

        method, action = self._target()
        with structlog.contextvars.bound_contextvars(form_action=action, form_method=method):
            self._transition(SubmitPhase.VALIDATING)
            try:
                return await self._run_submission()
            finally:
                self._transition(SubmitPhase.IDLE)

    async def _run_submission(self) -> SubmissionReply | None:
        if not self.validate():
            logger.info("Submission refused: form is invalid")
            raise SubmissionGuardError(VALIDATION_FAILED)

        if self.plugins.hook.form_before_submit(form=self) is not None:
            logger.debug("Submission cancelled by form_before_submit hook")
            return None

        await self.reset_errors()
        self.set_changed(False)
        data = self.get_data()

        self.lock()
        self._transition(SubmitPhase.SUBMITTING)
        try:
            reply = await self._send(data)

            if reply.ok:
                if self.plugins.hook.form_submit(form=self, reply=reply, data=data) is None:
                    return reply
                return None

            if self.plugins.hook.form_error(form=self, reply=reply) is None:
                await self.handle_fields_errors(reply)
                raise ServerFieldError(reply)
            return None
        finally:
            self.unlock()

    def _target(self) -> tuple[str, str]:
        """The ``(method, action)`` pair a submission goes to."""
        method = self.element.get_attribute("method") or self.settings.default_method
        action = self.element.get_attribute("action") or self.settings.default_action
        return method, action

    async def _send(self, data: list[tuple[str, str]]) -> SubmissionReply:
        method, action = self._target()
        try:
            return await self.transport.send(method, action, data)
        except FormError:
            raise
        except Exception as exc:
            msg = f"Transport failed: {exc}"
            raise TransportError(msg) from exc

    async def drain(self) -> None:
        """Wait for submissions started from element events to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule_submit(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Submit requested outside a running event loop; ignored")
            return
        task = loop.create_task(self.submit())
        self._pending.add(task)
        task.add_done_callback(self._on_submit_done)

    def _on_submit_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.info("Form submission rejected: %s", exc)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_controller_disabled(self, disabled: bool) -> None:
        self.validate()

    def _on_controller_change(self, *args: Any) -> None:
        self._track_changes()
        self.validate()

    def _on_input_event(self, event: Event) -> None:
        self._track_changes()
        self.validate()

    def _on_change_event(self, event: Event) -> None:
        self._track_changes()
        self.validate()

    def _on_submit_event(self, event: Event) -> None:
        event.prevent_default()
        self._schedule_submit()

    def _on_key_down_event(self, event: Event) -> None:
        if event.ctrl_key and event.key == "Enter":
            self._on_submit_event(event)

    def _on_reset_event(self, event: Event) -> None:
        for control in self.element.elements:
            control.dispatch_event(Event("change"))

    def _on_focus_in_event(self, event: Event) -> None:
        self._last_active_element = event.target
