"""InputController protocol and the shared element-backed implementation.

Every variant (text, digit-code, phone, radio, radio-group) implements
:class:`InputController`. :class:`BaseInput` supplies the common behaviour (value
passthrough, required-field validation, disabled state and the animated
inline error message); each variant overrides what differs.

INVARIANT: ``set_disabled`` always goes through ``set_state("disabled", ...)``
so the owning form re-validates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel

from formkit.config.models import InputOptions
from formkit.domain.types import InputKind
from formkit.infrastructure.dom import Element

logger = logging.getLogger(__name__)

ERROR_CLASS = "is-error"
ACTIVE_CLASS = "is-active"
ERROR_MESSAGE_CLASS = "Form__input-error"

Handler = Callable[..., Any]


@runtime_checkable
class InputController(Protocol):
    """Capability set every input variant provides."""

    kind: ClassVar[InputKind]
    element: Element

    def get_value(self) -> Any: ...

    def set_value(self, value: Any) -> Any: ...

    def get_disabled(self) -> bool: ...

    def set_disabled(self, disabled: bool) -> bool: ...

    def validate(self) -> bool: ...

    def get_name(self) -> str: ...

    async def set_error(self, text: str) -> None: ...

    async def reset_error(self) -> None: ...

    def on(self, event: str, handler: Handler) -> None: ...

    def on_state(self, key: str, handler: Handler) -> None: ...


class Emitter:
    """Named events plus observable state keys."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}
        self._state: dict[str, Any] = {}
        self._state_handlers: dict[str, list[Handler]] = {}

    def on(self, event: str, handler: Handler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, *args: Any) -> None:
        for handler in list(self._handlers.get(event, ())):
            handler(*args)

    def on_state(self, key: str, handler: Handler) -> None:
        self._state_handlers.setdefault(key, []).append(handler)

    def get_state(self, key: str, default: Any = None) -> Any:
        return self._state.get(key, default)

    def set_state(self, key: str, value: Any) -> None:
        """Store *value* and notify ``on_state`` handlers when it changed."""
        if key in self._state and self._state[key] == value:
            return
        self._state[key] = value
        for handler in list(self._state_handlers.get(key, ())):
            handler(value)


class BaseInput(Emitter):
    """Element-backed controller with the default behaviour.

    Parameters:
        element: The element this controller wraps.
        options: Mapping (or already-validated model) of controller options.
    """

    kind: ClassVar[InputKind]
    options_model: ClassVar[type[InputOptions]] = InputOptions

    def __init__(
        self,
        element: Element,
        options: Mapping[str, Any] | BaseModel | None = None,
    ) -> None:
        super().__init__()
        self.element = element
        self.options = self.coerce_options(options)
        self.error_element: Element | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.get_name()!r})"

    @classmethod
    def coerce_options(cls, options: Mapping[str, Any] | BaseModel | None) -> Any:
        if isinstance(options, cls.options_model):
            return options
        if isinstance(options, BaseModel):
            options = options.model_dump()
        return cls.options_model.model_validate(dict(options or {}))

    # ------------------------------------------------------------------
    # Value
    # ------------------------------------------------------------------

    def get_value(self) -> Any:
        return self.element.value

    def set_value(self, value: Any) -> Any:
        self.element.value = value
        self.emit("change", self.element.value)
        return self.element.value

    def get_name(self) -> str:
        return self.element.name

    def validate(self) -> bool:
        """Fail only when the element is required and blank."""
        if self.element.required and not str(self.get_value() or "").strip():
            return False
        return True

    # ------------------------------------------------------------------
    # Disabled state
    # ------------------------------------------------------------------

    def get_disabled(self) -> bool:
        return self.element.disabled

    def set_disabled(self, disabled: bool) -> bool:
        self.set_state("disabled", disabled)
        self.element.disabled = disabled
        return disabled

    # ------------------------------------------------------------------
    # Inline error
    # ------------------------------------------------------------------

    @property
    def error_message(self) -> str | None:
        """Text of the visible error message, or None when hidden."""
        if self.error_element is None or ACTIVE_CLASS not in self.error_element.class_list:
            return None
        return self.error_element.text_content

    @property
    def has_error(self) -> bool:
        return ERROR_CLASS in self.element.class_list

    async def set_error(self, text: str) -> None:
        """Mark the input as erroneous and show *text* below it.

        An empty *text* still marks the input but leaves the message hidden.
        Completes once the message transition has finished.
        """
        self.element.class_list.add(ERROR_CLASS)
        await self.reset_error_message()
        await self.set_error_message(text)

    async def set_error_message(self, text: str) -> None:
        if self.error_element is None:
            self.error_element = Element("span", {"class": ERROR_MESSAGE_CLASS})
            self.element.insert_after(self.error_element)

        if not text:
            return

        self.error_element.text_content = text
        if ACTIVE_CLASS in self.error_element.class_list:
            return

        # next frame, so the transition sees the class change
        await asyncio.sleep(0)
        self.error_element.class_list.add(ACTIVE_CLASS)

    async def reset_error(self) -> None:
        """Clear the error state and hide the message."""
        self.element.class_list.remove(ERROR_CLASS)
        await self.reset_error_message()

    async def reset_error_message(self) -> None:
        if self.error_element is None:
            return
        self.error_element.class_list.remove(ACTIVE_CLASS)
        await self.error_element.transition_end()
