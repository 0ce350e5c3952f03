"""Unit tests for the template renderer and registry (appgen.scaffolder.templates)."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from appgen.errors import TemplateNotFoundError
from appgen.scaffolder.templates import (
    DEFAULT_REGISTRATIONS,
    REACHABLE_PAIRS,
    TemplateKind,
    TemplateRegistry,
    TemplateRenderer,
)
from appgen.spec.models import BackendFramework, FrontendFramework, Orm


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    @pytest.fixture
    def renderer(self) -> TemplateRenderer:
        return TemplateRenderer()

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("{{ 'TaskList'|kebab_case }}", "task-list"),
            ("{{ 'TaskList'|snake_case }}", "task_list"),
            ("{{ 'task-list'|pascal_case }}", "TaskList"),
            ("{{ 'TaskList'|camel_case }}", "taskList"),
            ("{{ 'My App!'|slugify }}", "my-app"),
            ("{{ 'say \"hi\"'|js_string }}", '"say \\"hi\\""'),
            ("{{ 'integer[]'|ts_type }}", "number[]"),
            ("{{ 'float'|drizzle_column('sqlite') }}", "real"),
        ],
    )
    def test_filter(self, renderer, expression, expected):
        assert renderer.env.from_string(expression).render() == expected

    @pytest.mark.unit
    def test_undefined_variable_is_an_error(self, renderer):
        with pytest.raises(UndefinedError):
            renderer.env.from_string("{{ missing }}").render()


# ---------------------------------------------------------------------------
# Renderer discovery
# ---------------------------------------------------------------------------


class TestTemplateRenderer:
    @pytest.mark.unit
    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.j2").write_text("Hello {{ name }}!\n", encoding="utf-8")
        renderer = TemplateRenderer(tmp_path)
        assert renderer.has_template("hello.j2")
        assert renderer.render("hello.j2", {"name": "World"}) == "Hello World!\n"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestTemplateRegistry:
    @pytest.mark.unit
    def test_every_reachable_pair_resolves(self):
        registry = TemplateRegistry()
        assert registry.missing_pairs() == []
        registry.check_coverage()

    @pytest.mark.unit
    def test_reachable_pairs_cover_every_choice(self):
        pairs = set(REACHABLE_PAIRS)
        for framework in FrontendFramework:
            for kind in (TemplateKind.COMPONENT, TemplateKind.PAGE, TemplateKind.CLIENT_ENTRY):
                assert (kind, framework.value) in pairs
        for framework in BackendFramework:
            assert (TemplateKind.ROUTE, framework.value) in pairs
            assert (TemplateKind.SERVER_ENTRY, framework.value) in pairs
        for orm in Orm:
            assert (TemplateKind.MODEL, orm.value) in pairs

    @pytest.mark.unit
    def test_resolve_accepts_enum_or_string(self):
        registry = TemplateRegistry()
        by_enum = registry.resolve(TemplateKind.ROUTE, BackendFramework.FASTIFY)
        by_str = registry.resolve(TemplateKind.ROUTE, "fastify")
        assert by_enum.template_path == by_str.template_path == "route/fastify.j2"

    @pytest.mark.unit
    def test_unregistered_pair_raises(self):
        registrations = dict(DEFAULT_REGISTRATIONS)
        del registrations[(TemplateKind.COMPONENT, "svelte")]
        registry = TemplateRegistry(registrations=registrations)

        with pytest.raises(TemplateNotFoundError) as exc_info:
            registry.resolve(TemplateKind.COMPONENT, FrontendFramework.SVELTE)
        assert exc_info.value.kind == "component"
        assert exc_info.value.framework == "svelte"
        assert registry.missing_pairs() == [(TemplateKind.COMPONENT, "svelte")]

    @pytest.mark.unit
    def test_registered_but_missing_file_raises(self, tmp_path: Path):
        registry = TemplateRegistry(renderer=TemplateRenderer(tmp_path))
        with pytest.raises(TemplateNotFoundError):
            registry.check_coverage()

    @pytest.mark.unit
    def test_template_render_passes_element_and_context(self):
        template = TemplateRegistry().resolve(TemplateKind.ROUTE, "express")
        content = template.render(
            {"path": "/tasks", "method": "GET", "handler": "listTasks", "description": "", "auth": False},
            {},
            ts=True,
        )
        assert "export async function listTasks(req: Request, res: Response)" in content
        assert "export const path = '/tasks';" in content
