"""Render node data through named Jinja2 templates."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import jinja2
from loguru import logger

from doxytree.config import Config
from doxytree.core.render.text_utils import date, strip_namespace, title
from doxytree.errors import RenderFailed, TemplateLoadFailed, TemplateNotFound


def _is_empty(value: Any) -> bool:
    return not value


def count_property(items: Sequence[Mapping[str, Any]], key: str, value: Any) -> int:
    """Count entries of items whose key equals value."""
    return sum(1 for item in items if item.get(key) == value)


def count_property2(
    items: Sequence[Mapping[str, Any]], key0: str, value0: Any, key1: str, value1: Any
) -> int:
    return sum(1 for item in items if item.get(key0) == value0 and item.get(key1) == value1)


def query_property(
    items: Sequence[Mapping[str, Any]], key: str, value: Any
) -> list[Mapping[str, Any]]:
    """Entries of items whose key equals value, in order."""
    return [item for item in items if item.get(key) == value]


def query_property2(
    items: Sequence[Mapping[str, Any]], key0: str, value0: Any, key1: str, value1: Any
) -> list[Mapping[str, Any]]:
    return [item for item in items if item.get(key0) == value0 and item.get(key1) == value1]


class Renderer:
    """Named-template renderer.

    Templates are registered by name (from strings or a directory) and can
    render each other through the `render` template global.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self._sources: dict[str, str] = {}
        self.env = jinja2.Environment(
            loader=jinja2.DictLoader(self._sources),
            autoescape=False,
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=False,
            lstrip_blocks=False,
        )
        self.env.globals.update(
            isEmpty=_is_empty,
            title=title,
            date=date,
            stripNamespace=strip_namespace,
            countProperty=count_property,
            countProperty2=count_property2,
            queryProperty=query_property,
            queryProperty2=query_property2,
            render=self.render,
        )

    @property
    def template_names(self) -> list[str]:
        return sorted(self._sources)

    def add_template(self, name: str, source: str) -> None:
        """Parse and register a template under name.

        Raises:
            TemplateLoadFailed: The source is not a valid template.
        """
        try:
            self.env.parse(source, name=name)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateLoadFailed(name, e) from e
        self._sources[name] = source
        logger.debug("Registered template {}", name)

    def load_templates(self, directory: Path) -> int:
        """Register every template file in directory; return how many were added."""
        if not directory.is_dir():
            msg = f"Template directory {str(directory)!r} not found"
            raise ValueError(msg)
        suffix = self.config.template_suffix
        count = 0
        for path in sorted(directory.glob(f"*{suffix}")):
            self.add_template(path.name.removesuffix(suffix), path.read_text(encoding="utf-8"))
            count += 1
        logger.debug("Loaded {} templates from {}", count, directory)
        return count

    def render(self, name: str, data: Mapping[str, Any]) -> str:
        """Render template name with data as its context.

        Raises:
            TemplateNotFound: No template is registered under name.
            RenderFailed: The template raised while rendering.
        """
        if name not in self._sources:
            raise TemplateNotFound(name)
        try:
            return self.env.get_template(name).render(data)
        except Exception as e:
            raise RenderFailed(name, e) from e

    def render_to_file(self, name: str, path: str | Path, data: Mapping[str, Any]) -> Path:
        """Render template name into path, relative to the configured output dir."""
        output_dir = Path(self.config.output_dir).resolve()
        abs_path = (output_dir / path).resolve()
        if not abs_path.is_relative_to(output_dir):
            msg = f"Path escapes output dir: {str(abs_path)!r}"
            raise ValueError(msg)

        text = self.render(name, data)
        logger.info("Rendering {}", abs_path)
        try:
            abs_path.parent.mkdir(parents=True, exist_ok=True)
            abs_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise RenderFailed(name, e) from e
        return abs_path
