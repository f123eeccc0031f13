"""Extension layer — form lifecycle hooks via pluggy.

Plugins are registered per form (``Form(plugins=...)`` or
``form.register_plugin``) or discovered from the ``formkit.plugins`` entry
point group when ``FormSettings.load_plugins`` is set.
"""

from formkit.plugins.hookspecs import hookimpl
from formkit.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
