"""Headless element tree — the rendering collaborator.

A deliberately small model of the browser element tree: attributes and
properties, predicate queries, bubbling events, focus tracking, caret
selection, CSS class toggling, and a transition-completion awaitable.
Controllers and the form engine only ever talk to this surface, so an
embedding application can bridge it to a real renderer.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

FORM_CONTROL_TAGS = frozenset({"input", "button", "select", "textarea"})
TEXT_INPUT_TYPES = frozenset({"text", "tel", "password", "email"})
CHECKABLE_TYPES = frozenset({"checkbox", "radio"})

Listener = Callable[["Event"], Any]
Predicate = Callable[["Element"], bool]


@dataclass
class Event:
    """A dispatched event.

    Only the fields relevant to a given event type are populated:
    ``data`` for ``input``, ``key``/``ctrl_key`` for ``keydown``,
    ``clipboard_text`` for ``paste``.
    """

    type: str
    bubbles: bool = True
    cancelable: bool = True
    data: str | None = None
    key: str | None = None
    ctrl_key: bool = False
    clipboard_text: str | None = None
    target: Element | None = field(default=None, repr=False)
    current_target: Element | None = field(default=None, repr=False)
    default_prevented: bool = False
    propagation_stopped: bool = False

    def prevent_default(self) -> None:
        if self.cancelable:
            self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class ClassList:
    """Ordered set of CSS class names."""

    def __init__(self, names: str = "") -> None:
        self._names: list[str] = []
        self.add(*names.split())

    def add(self, *names: str) -> None:
        for name in names:
            if name not in self._names:
                self._names.append(name)

    def remove(self, *names: str) -> None:
        for name in names:
            if name in self._names:
                self._names.remove(name)

    def contains(self, name: str) -> bool:
        return name in self._names

    def toggle(self, name: str, force: bool | None = None) -> bool:
        present = self.contains(name) if force is None else not force
        if present:
            self.remove(name)
        else:
            self.add(name)
        return not present

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __str__(self) -> str:
        return " ".join(self._names)


class Element:
    """One node of the element tree.

    Boolean attributes (``disabled``, ``required``, ``checked``) are present
    or absent; pass ``True`` in *attrs* to set one. ``value`` and ``checked``
    are live properties seeded from the attributes, which stay the defaults
    restored by :meth:`reset`.
    """

    def __init__(
        self,
        tag: str,
        attrs: Mapping[str, str | bool | int | None] | None = None,
        *children: Element,
        text: str = "",
    ) -> None:
        self.tag = tag.lower()
        self.class_list = ClassList()
        self.children: list[Element] = []
        self.parent: Element | None = None
        self.text_content = text
        self.transition_duration = 0.0
        self._attributes: dict[str, str] = {}
        self._listeners: dict[str, list[Listener]] = {}

        for key, raw in (attrs or {}).items():
            if raw is None or raw is False:
                continue
            self.set_attribute(key, "" if raw is True else str(raw))

        self._value = self._default_value()
        self._checked = self.has_attribute("checked")
        self.selection_start = len(self._value)
        self.selection_end = len(self._value)

        for child in children:
            self.append_child(child)

    def __repr__(self) -> str:
        name = self.get_attribute("name")
        suffix = f" name={name!r}" if name else ""
        return f"<{self.tag}{suffix}>"

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def get_attribute(self, name: str) -> str | None:
        if name == "class":
            return str(self.class_list) if len(self.class_list) else None
        return self._attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        if name == "class":
            self.class_list = ClassList(value)
            return
        self._attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        if name == "class":
            return len(self.class_list) > 0
        return name in self._attributes

    def remove_attribute(self, name: str) -> None:
        if name == "class":
            self.class_list = ClassList()
            return
        self._attributes.pop(name, None)

    def data(self, key: str) -> str | None:
        """Read a ``data-*`` attribute."""
        return self.get_attribute(f"data-{key}")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._attributes.get("name", "")

    @name.setter
    def name(self, value: str) -> None:
        self.set_attribute("name", value)

    @property
    def type(self) -> str:
        declared = self._attributes.get("type", "").lower()
        if self.tag == "input":
            return declared or "text"
        if self.tag == "button":
            return declared or "submit"
        if self.tag == "select":
            return "select-one"
        return self.tag

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: object) -> None:
        self._value = "" if value is None else str(value)
        self.selection_start = self.selection_end = len(self._value)

    @property
    def checked(self) -> bool:
        return self._checked

    @checked.setter
    def checked(self, value: bool) -> None:
        self._checked = bool(value)
        if self._checked and self.type == "radio" and self.name:
            scope = self.closest(lambda el: el.tag == "form") or self.root()
            for other in scope.query_all(
                lambda el: el is not self and el.type == "radio" and el.name == self.name
            ):
                other._checked = False

    @property
    def disabled(self) -> bool:
        return self.has_attribute("disabled")

    @disabled.setter
    def disabled(self, value: bool) -> None:
        if value:
            self.set_attribute("disabled", "disabled")
        else:
            self.remove_attribute("disabled")

    @property
    def required(self) -> bool:
        return self.has_attribute("required")

    @property
    def is_form_control(self) -> bool:
        return self.tag in FORM_CONTROL_TAGS

    @property
    def elements(self) -> list[Element]:
        """Form controls below this element, in document order."""
        return self.query_all(lambda el: el.is_form_control)

    def _default_value(self) -> str:
        if self.tag == "textarea":
            return self.text_content
        return self._attributes.get("value", "")

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def append_child(self, child: Element) -> Element:
        child.remove()
        child.parent = self
        self.children.append(child)
        return child

    def insert_after(self, sibling: Element) -> Element:
        """Insert *sibling* right after this element (``afterend``).

        A detached element has nowhere to put it; *sibling* stays detached.
        """
        sibling.remove()
        if self.parent is None:
            return sibling
        index = self.parent.children.index(self)
        sibling.parent = self.parent
        self.parent.children.insert(index + 1, sibling)
        return sibling

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def iter(self) -> Iterator[Element]:
        """This element and all descendants, depth-first in document order."""
        yield self
        for child in list(self.children):
            yield from child.iter()

    def query_all(self, predicate: Predicate) -> list[Element]:
        """Descendants (excluding self) matching *predicate*."""
        return [el for el in self.iter() if el is not self and predicate(el)]

    def query(self, predicate: Predicate) -> Element | None:
        for el in self.iter():
            if el is not self and predicate(el):
                return el
        return None

    def closest(self, predicate: Predicate) -> Element | None:
        """Nearest of self and its ancestors matching *predicate*."""
        node: Element | None = self
        while node is not None:
            if predicate(node):
                return node
            node = node.parent
        return None

    def root(self) -> Element:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event: Event) -> bool:
        """Run listeners on this element, then bubble up the ancestors.

        Returns False if a listener called ``prevent_default()``.
        """
        if event.target is None:
            event.target = self
        node: Element | None = self
        while node is not None:
            event.current_target = node
            for listener in list(node._listeners.get(event.type, ())):
                listener(event)
            if not event.bubbles or event.propagation_stopped:
                break
            node = node.parent
        event.current_target = None
        return not event.default_prevented

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def focus(self) -> bool:
        """Make this element the document's active element.

        Disabled elements refuse focus. Fires ``focus`` then a bubbling
        ``focusin``.
        """
        if self.disabled:
            return False
        document = self.root()
        if isinstance(document, Document):
            document.active_element = self
        self.dispatch_event(Event("focus", bubbles=False, cancelable=False))
        self.dispatch_event(Event("focusin", cancelable=False))
        return True

    def select(self) -> None:
        """Select the entire content."""
        self.selection_start = 0
        self.selection_end = len(self._value)

    def click(self) -> None:
        """Activate the element the way a pointer click would."""
        if self.disabled:
            return
        if self.tag == "input" and self.type in CHECKABLE_TYPES:
            if self.type == "radio" and self.checked:
                return
            self.checked = not self.checked if self.type == "checkbox" else True
            self.dispatch_event(Event("input", cancelable=False))
            self.dispatch_event(Event("change", cancelable=False))
            return
        if self.tag in ("input", "button") and self.type == "submit":
            form = self.closest(lambda el: el.tag == "form")
            if form is not None:
                form.dispatch_event(Event("submit"))

    def reset(self) -> None:
        """Restore every form control below this element to its defaults."""
        for control in self.elements:
            control.value = control._default_value()
            control._checked = control.has_attribute("checked")

    async def transition_end(self) -> None:
        """Wait until the current visual transition finishes.

        Resolves on a ``transitionend`` event targeting this element, or once
        ``transition_duration`` seconds elapse, whichever comes first.
        Elements without a transition resolve immediately.
        """
        if self.transition_duration <= 0:
            return

        done: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def _on_end(event: Event) -> None:
            if event.target is self and not done.done():
                done.set_result(None)

        self.add_event_listener("transitionend", _on_end)
        try:
            await asyncio.wait_for(done, timeout=self.transition_duration)
        except TimeoutError:
            logger.debug("No transitionend for %r within %.3fs", self, self.transition_duration)
        finally:
            self.remove_event_listener("transitionend", _on_end)


class Document(Element):
    """Tree root that tracks the focused element."""

    def __init__(self, *children: Element) -> None:
        super().__init__("#document", None, *children)
        self.active_element: Element | None = None


def is_text_like(element: Element) -> bool:
    """Untagged inputs that default to the ``text`` controller."""
    if element.tag == "textarea":
        return True
    return element.tag == "input" and element.type in TEXT_INPUT_TYPES
