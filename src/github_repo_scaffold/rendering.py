"""Template rendering into the destination tree.

Templates are Jinja2 files shipped inside the package under `templates/`.
Rendering is strict: a variable missing from the context is an error rather
than an empty string.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import jinja2

logger = logging.getLogger(__name__)

TEMPLATES_ROOT = Path(__file__).parent / "templates"


class TemplateRenderError(RuntimeError):
    pass


class TemplateNotFound(TemplateRenderError):
    pass


class DestinationWriteError(TemplateRenderError):
    pass


class TemplateRenderer(Protocol):
    def render(
        self, template_path: str, destination_path: Path, context: Mapping[str, Any]
    ) -> None: ...


class JinjaTemplateRenderer:
    """Render packaged Jinja2 templates to files."""

    def __init__(self, templates_root: Path = TEMPLATES_ROOT) -> None:
        self._templates_root = templates_root
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(templates_root)),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    @property
    def templates_root(self) -> Path:
        return self._templates_root

    def render_string(self, template_path: str, context: Mapping[str, Any]) -> str:
        try:
            template = self._env.get_template(template_path)
        except jinja2.TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found: {template_path} (under {self._templates_root})"
            ) from e

        try:
            return template.render(**context)
        except jinja2.TemplateError as e:
            raise TemplateRenderError(f"Failed to render {template_path}: {e}") from e

    def render(
        self, template_path: str, destination_path: Path, context: Mapping[str, Any]
    ) -> None:
        text = self.render_string(template_path, context)

        try:
            destination_path.parent.mkdir(parents=True, exist_ok=True)
            destination_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise DestinationWriteError(f"Cannot write {destination_path}: {e}") from e

        logger.info(
            "Rendered template",
            extra={"template": template_path, "destination": str(destination_path)},
        )
