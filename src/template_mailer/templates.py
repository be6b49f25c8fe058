# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Template loading and rendering.

Templates are plain text files using jinja2 syntax; ``{{ name }}`` placeholders
are replaced with values from the email's ``data`` mapping, and ``{% if %}`` /
``{% for %}`` blocks are available for richer layouts. Missing values render
as an empty string, including attribute lookups on them.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import ChainableUndefined, Environment, Template, TemplateError

from .errors import TemplateNotFoundError, TemplateRenderError

DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent / "default_templates" / "base.html"


async def read_template(path: str | Path) -> str:
    """Read a template file as UTF-8 text.

    Raises:
        TemplateNotFoundError: If the file is missing or unreadable.
    """
    try:
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateNotFoundError(str(path)) from exc


class TemplateRenderer:
    """Compile template text and substitute data into it."""

    def __init__(self, environment: Environment | None = None):
        self._environment = environment or Environment(
            autoescape=True,
            undefined=ChainableUndefined,
            keep_trailing_newline=True,
        )

    def compile(self, text: str) -> Template:
        try:
            return self._environment.from_string(text)
        except TemplateError as exc:
            raise TemplateRenderError(f"Invalid template: {exc}") from exc

    def render(self, text: str, data: Mapping[str, Any] | None = None) -> str:
        template = self.compile(text)
        try:
            return template.render(dict(data or {}))
        except TemplateError as exc:
            raise TemplateRenderError(f"Template rendering failed: {exc}") from exc
