"""
Template rendering helpers for HTML reports.

Report templates use ``{{ NAME }}`` placeholders and ship as package data
next to the performance package.  Rendering goes through Jinja2 with
HTML autoescaping, so values taken from test names or failure reasons
cannot inject markup; pre-rendered fragments are passed in wrapped with
:class:`markupsafe.Markup`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateNotFound, select_autoescape
from markupsafe import Markup

logger = logging.getLogger(__name__)

_string_env = Environment(autoescape=True, keep_trailing_newline=True)


def render(template: str, variables: Mapping[str, Any]) -> str:
    """
    Substitute ``{{ NAME }}`` placeholders in *template*.

    Placeholders without a matching variable render as empty strings.
    """
    return _string_env.from_string(template).render(**variables)


class TemplateLoader:
    """Loads and renders named templates from a package's ``templates/`` folder."""

    def __init__(self, package: str, folder: str = "templates") -> None:
        self.env = Environment(
            loader=PackageLoader(package, folder),
            autoescape=select_autoescape(["html"]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def render(self, name: str, variables: Mapping[str, Any]) -> str:
        try:
            template = self.env.get_template(name)
        except TemplateNotFound as exc:
            raise ValueError(f"Template not found: {name}") from exc
        logger.debug("Rendering template %s with %d variables", name, len(variables))
        return template.render(**variables)


def safe(fragment: str) -> Markup:
    """Mark an already-rendered HTML fragment as safe for insertion."""
    return Markup(fragment)


def format_number(number: int) -> str:
    """Format an integer with thousands separators (``12345`` -> ``"12,345"``)."""
    return f"{number:,d}"


def format_decimal(number: float, places: int) -> str:
    return f"{number:.{places}f}"
