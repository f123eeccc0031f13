"""formkit — form orchestration engine.

Binds input controllers to a single logical form, composes validation rules,
tracks dirty state against a baseline snapshot, and runs the asynchronous
lock → submit → unlock lifecycle.
"""

from formkit.form.engine import Form
from formkit.form.registry import ModuleRegistry, ModuleSpec, default_registry
from formkit.form.rules import RuleHandle

__all__ = ["Form", "ModuleRegistry", "ModuleSpec", "RuleHandle", "default_registry"]
