"""Jinja2 template rendering and the closed template registry.

Provides the :class:`TemplateRenderer`, which loads Jinja2 templates from the
``appgen/scaffolder/templates/`` directory, and the :class:`TemplateRegistry`,
which maps every ``(TemplateKind, framework)`` pair the planner can request to
exactly one template file.  A pair with no registration fails planning with
:class:`TemplateNotFoundError` rather than silently dropping the artifact.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from appgen.errors import TemplateNotFoundError
from appgen.scaffolder.type_maps import (
    DRIZZLE_CORE_MODULE,
    DRIZZLE_TABLE_FUNCTION,
    drizzle_column,
    mongoose_type,
    prisma_type,
    ts_type,
)
from appgen.spec.models import BackendFramework, FrontendFramework, Orm


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated projects.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined variables are errors, so a template that
    references context the planner did not supply fails loudly.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter
        self.env.filters["kebab_case"] = _kebab_case_filter
        self.env.filters["js_string"] = _js_string_filter
        self.env.filters["ts_type"] = ts_type
        self.env.filters["prisma_type"] = prisma_type
        self.env.filters["mongoose_type"] = mongoose_type
        self.env.filters["drizzle_column"] = drizzle_column
        self.env.globals["drizzle_core_module"] = DRIZZLE_CORE_MODULE
        self.env.globals["drizzle_table_function"] = DRIZZLE_TABLE_FUNCTION

    def render(self, template_path: str, context: Mapping[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"component/react.j2"``).
            context: Variables available inside the template.

        Returns:
            The rendered template content.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def has_template(self, template_path: str) -> bool:
        """Whether *template_path* exists under the template directory."""
        return (self.template_dir / template_path).is_file()


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TemplateKind(str, Enum):
    """Kinds of framework-specific templates."""
    COMPONENT = "component"
    PAGE = "page"
    ROUTE = "route"
    MODEL = "model"
    SERVER_ENTRY = "server_entry"
    CLIENT_ENTRY = "client_entry"
    ORM_SCHEMA = "orm_schema"


_FRONTEND = [f.value for f in FrontendFramework]
_BACKEND = [b.value for b in BackendFramework]
_ORMS = [o.value for o in Orm]

# Every (kind, framework) pair the planner can produce for some valid stack.
REACHABLE_PAIRS: tuple[tuple[TemplateKind, str], ...] = (
    *((TemplateKind.COMPONENT, f) for f in _FRONTEND),
    *((TemplateKind.PAGE, f) for f in _FRONTEND),
    *((TemplateKind.CLIENT_ENTRY, f) for f in _FRONTEND),
    *((TemplateKind.ROUTE, b) for b in _BACKEND),
    *((TemplateKind.SERVER_ENTRY, b) for b in _BACKEND),
    *((TemplateKind.MODEL, o) for o in _ORMS),
    (TemplateKind.ORM_SCHEMA, Orm.PRISMA.value),
)

DEFAULT_REGISTRATIONS: dict[tuple[TemplateKind, str], str] = {
    (kind, framework): f"{kind.value}/{framework}.j2" for kind, framework in REACHABLE_PAIRS
}


class Template:
    """A resolved template bound to a renderer."""

    def __init__(
        self,
        kind: TemplateKind,
        framework: str,
        template_path: str,
        renderer: TemplateRenderer,
    ) -> None:
        self.kind = kind
        self.framework = framework
        self.template_path = template_path
        self.renderer = renderer

    def render(
        self,
        element: Mapping[str, Any] | None,
        global_context: Mapping[str, Any],
        **extra: Any,
    ) -> str:
        """Render for one spec element with the cross-cutting context."""
        context = {**global_context, "element": dict(element or {}), **extra}
        return self.renderer.render(self.template_path, context)

    def __repr__(self) -> str:
        return f"Template({self.kind.value!r}, {self.framework!r}, {self.template_path!r})"


class TemplateRegistry:
    """Closed mapping ``(TemplateKind, framework) -> template file``."""

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        registrations: Mapping[tuple[TemplateKind, str], str] | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self._registrations = dict(
            DEFAULT_REGISTRATIONS if registrations is None else registrations
        )

    def resolve(self, kind: TemplateKind, framework: str | Enum) -> Template:
        """Return the template for *(kind, framework)*.

        Raises:
            TemplateNotFoundError: If nothing is registered for the pair or
                the registered file is missing.
        """
        key = framework.value if isinstance(framework, Enum) else framework
        template_path = self._registrations.get((kind, key))
        if template_path is None or not self.renderer.has_template(template_path):
            raise TemplateNotFoundError(kind.value, key)
        return Template(kind, key, template_path, self.renderer)

    def missing_pairs(self) -> list[tuple[TemplateKind, str]]:
        """Reachable pairs that do not resolve, in registry order."""
        missing = []
        for kind, framework in REACHABLE_PAIRS:
            try:
                self.resolve(kind, framework)
            except TemplateNotFoundError:
                missing.append((kind, framework))
        return missing

    def check_coverage(self) -> None:
        """Raise for the first reachable pair that does not resolve."""
        for kind, framework in self.missing_pairs():
            raise TemplateNotFoundError(kind.value, framework)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _split_words(value: str) -> list[str]:
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value)
    return [w for w in re.split(r"[-_\s/]+", spaced) if w]


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing``, ``some_thing`` or ``someThing`` to ``SomeThing``."""
    return "".join(word[:1].upper() + word[1:] for word in _split_words(value))


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    return "_".join(word.lower() for word in _split_words(value))


def _kebab_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some_thing`` to ``some-thing``."""
    return "-".join(word.lower() for word in _split_words(value))


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def _js_string_filter(value: Any) -> str:
    """Quote a value as a JavaScript/JSON string literal."""
    return json.dumps(value if isinstance(value, str) else str(value))
