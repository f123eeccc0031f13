"""Input module registry — input type name -> controller factory.

Two levels: the process-wide :data:`default_registry` and the per-form copy
a :class:`~formkit.form.engine.Form` takes of it at construction, onto which
plugin and local modules are layered.

Built-in controllers are keyed by their ``kind`` (an :class:`InputKind`
value, which is also the ``data-form-input`` marker), so
``registry.register(PhoneInput)`` handles ``data-form-input="phone"``.

INVARIANT: Registries are append/override only. ``use`` replaces an existing
type (last writer wins); nothing is ever removed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from formkit.infrastructure.dom import Element
from formkit.inputs.base import InputController
from formkit.inputs.text import TextInput

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[Element, Mapping[str, Any]], InputController]


@dataclass(frozen=True)
class ModuleSpec:
    """A controller factory plus the options it is constructed with."""

    factory: ControllerFactory
    options: Mapping[str, Any] = field(default_factory=dict)

    def create(self, element: Element) -> InputController:
        return self.factory(element, dict(self.options))


def to_module_spec(name: str, module: Any) -> ModuleSpec:
    """Normalize a registration value.

    Accepts a :class:`ModuleSpec`, a ``{"module": factory, "options": {...}}``
    mapping, or a bare factory (usually a controller class).

    Raises:
        TypeError: If *module* is none of these.
    """
    if isinstance(module, ModuleSpec):
        return module
    if isinstance(module, Mapping):
        factory = module.get("module")
        if not callable(factory):
            msg = f"Input module {name!r} mapping needs a callable 'module'"
            raise TypeError(msg)
        return ModuleSpec(factory=factory, options=dict(module.get("options") or {}))
    if callable(module):
        return ModuleSpec(factory=module)
    msg = f"Input module {name!r} must be a factory, mapping, or ModuleSpec"
    raise TypeError(msg)


class ModuleRegistry:
    """Append/override-only mapping of input type names to modules."""

    def __init__(self, modules: Mapping[str, Any] | None = None) -> None:
        self._modules: dict[str, ModuleSpec] = {}
        if modules:
            self.use(modules)

    def use(self, modules: Mapping[str, Any]) -> None:
        """Register or override modules by type name."""
        for name, module in modules.items():
            spec = to_module_spec(name, module)
            if name in self._modules:
                logger.debug("Overriding input module %r", name)
            self._modules[name] = spec

    def register(self, *controllers: type[InputController]) -> None:
        """Register controller classes under their own ``kind``."""
        self.use({controller.kind: controller for controller in controllers})

    def get(self, name: str) -> ModuleSpec | None:
        return self._modules.get(name)

    def snapshot(self) -> dict[str, ModuleSpec]:
        """Copy of the current registrations."""
        return dict(self._modules)

    def names(self) -> list[str]:
        return list(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._modules))

    def __len__(self) -> int:
        return len(self._modules)


default_registry = ModuleRegistry()
default_registry.register(TextInput)
