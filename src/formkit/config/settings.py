"""Runtime settings — init kwargs and env vars in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — passed by the embedding application
  2. Env vars     — ``FORMKIT_*`` prefix
  3. Code defaults

Uses Pydantic Settings v2. The settings object is frozen and shared by
reference between a form and its transport.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class FormSettings(BaseSettings):
    """Unified runtime settings for forms and the default transport.

    Attributes:
        request_timeout: Seconds before the HTTP transport gives up.
        requested_with: Value of the ``X-Requested-With`` request header.
        default_method: HTTP verb used when the form declares none.
        default_action: URL used when the form declares no ``action``.
        load_plugins: Discover ``formkit.plugins`` entry points per form.
        verbose: DEBUG output from ``configure_logging``.
        log_json: JSON lines from ``configure_logging``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FORMKIT_",
        "env_nested_delimiter": "__",
    }

    request_timeout: float = Field(default=30.0, gt=0)
    requested_with: str = "XMLHttpRequest"
    default_method: str = "post"
    default_action: str = ""
    load_plugins: bool = False
    verbose: bool = False
    log_json: bool = False
