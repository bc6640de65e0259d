"""
Jinja2 environment for themes.

The byline helpers are available both as globals (``{{ experts(post) }}``)
and as filters (``{{ post|experts }}``).
"""

from __future__ import annotations

from importlib.resources import files
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .expert import expert
from .experts import experts
from .truncate import truncate

HELPERS = {
    "expert": expert,
    "experts": experts,
    "truncate": truncate,
}


def default_theme_dir() -> Path:
    return Path(str(files("expertpress.frontend").joinpath("theme")))


def register_helpers(env: Environment) -> Environment:
    """Register the theme helpers on an existing environment."""
    env.filters.update(HELPERS)
    env.globals.update(HELPERS)
    return env


def create_environment(theme_dir: Optional[Union[str, Path]] = None) -> Environment:
    """Create the environment used to render themes.

    Args:
        theme_dir: Directory holding the theme templates; the bundled theme by default

    Returns:
        Environment with HTML autoescaping and the helpers registered
    """
    env = Environment(
        loader=FileSystemLoader(str(theme_dir or default_theme_dir())),
        autoescape=select_autoescape(["html"], default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    return register_helpers(env)
