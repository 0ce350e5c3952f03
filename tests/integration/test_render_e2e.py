"""End-to-end render tests.

These tests run the real loader, planner and synchronizer against a
temporary destination and check the outcomes recorded for each artifact
across repeated runs.

No external services are required; design-system enrichment is disabled.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from appgen.errors import FilesystemError
from appgen.pipeline import render
from appgen.scaffolder.models import ArtifactCategory, OutcomeKind, RenderMode
from appgen.spec import load

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

ROUTE_PATH = "src/server/routes/listTasks.ts"


def _with_list_route(data: dict[str, Any]) -> dict[str, Any]:
    doc = copy.deepcopy(data)
    doc["routes"] = [{"path": "/tasks", "method": "GET", "handler": "listTasks"}]
    return doc


def _kinds(report) -> dict[str, OutcomeKind]:
    return {o.path: o.kind for o in report.outcomes}


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    async def test_empty_spec_into_empty_destination(self, minimal_spec, tmp_project_dir: Path):
        report = await render(minimal_spec, tmp_project_dir, RenderMode.NEW)

        categories = {o.category for o in report.outcomes}
        assert ArtifactCategory.COMPONENT not in categories
        assert ArtifactCategory.PAGE not in categories
        assert ArtifactCategory.ROUTE not in categories
        assert {ArtifactCategory.CONFIG, ArtifactCategory.DOC, ArtifactCategory.ENTRY} <= categories
        assert all(o.kind == OutcomeKind.CREATED for o in report.outcomes)
        assert (tmp_project_dir / "package.json").is_file()

    async def test_adding_a_route(self, minimal_spec_data, tmp_project_dir: Path):
        first = await render(load(minimal_spec_data), tmp_project_dir, RenderMode.NEW)

        spec = load(_with_list_route(minimal_spec_data))
        second = await render(spec, tmp_project_dir, RenderMode.INCREMENTAL)

        added = set(_kinds(second)) - set(_kinds(first))
        assert ROUTE_PATH in added
        assert _kinds(second)[ROUTE_PATH] == OutcomeKind.CREATED
        assert [o.path for o in second.outcomes if o.category == ArtifactCategory.ROUTE] == [ROUTE_PATH]

        third = await render(spec, tmp_project_dir, RenderMode.INCREMENTAL)
        assert _kinds(third)[ROUTE_PATH] == OutcomeKind.SKIPPED_IDENTICAL

    async def test_edited_file_is_restored(self, minimal_spec_data, tmp_project_dir: Path):
        spec = load(_with_list_route(minimal_spec_data))
        await render(spec, tmp_project_dir, RenderMode.NEW)
        route_file = tmp_project_dir / ROUTE_PATH
        original = route_file.read_bytes()

        route_file.write_text("// hand edit\n", encoding="utf-8")
        report = await render(spec, tmp_project_dir, RenderMode.INCREMENTAL)

        kinds = _kinds(report)
        assert kinds[ROUTE_PATH] == OutcomeKind.UPDATED
        assert [p for p, k in kinds.items() if k == OutcomeKind.UPDATED] == [ROUTE_PATH]
        assert route_file.read_bytes() == original


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestProperties:
    async def test_second_run_changes_nothing(self, full_spec, tmp_project_dir: Path):
        await render(full_spec, tmp_project_dir, RenderMode.NEW)
        before = _snapshot(tmp_project_dir)
        mtimes = {p: (tmp_project_dir / p).stat().st_mtime_ns for p in before}

        report = await render(full_spec, tmp_project_dir, RenderMode.NEW)

        assert all(o.kind.is_skip for o in report.outcomes)
        assert _snapshot(tmp_project_dir) == before
        assert {p: (tmp_project_dir / p).stat().st_mtime_ns for p in before} == mtimes

    async def test_output_is_deterministic(self, full_spec, tmp_path: Path):
        await render(full_spec, tmp_path / "a", RenderMode.NEW)
        await render(full_spec, tmp_path / "b", RenderMode.NEW)
        assert _snapshot(tmp_path / "a") == _snapshot(tmp_path / "b")

    async def test_dry_run_matches_real_run(self, full_spec, tmp_project_dir: Path):
        dry = await render(full_spec, tmp_project_dir, RenderMode.NEW, dry_run=True)
        assert not tmp_project_dir.exists()

        real = await render(full_spec, tmp_project_dir, RenderMode.NEW)
        assert dry.dry_run is True
        assert _kinds(dry) == _kinds(real)

    async def test_incremental_leaves_env_alone(self, full_spec, tmp_project_dir: Path):
        await render(full_spec, tmp_project_dir, RenderMode.NEW)
        env_file = tmp_project_dir / ".env"
        env_file.write_text("DATABASE_URL=postgres://real\n", encoding="utf-8")

        report = await render(full_spec, tmp_project_dir, RenderMode.INCREMENTAL)

        assert ".env" not in _kinds(report)
        assert env_file.read_text(encoding="utf-8") == "DATABASE_URL=postgres://real\n"

    async def test_unplanned_files_survive(self, full_spec, tmp_project_dir: Path):
        tmp_project_dir.mkdir()
        (tmp_project_dir / "NOTES.md").write_text("mine", encoding="utf-8")

        await render(full_spec, tmp_project_dir, RenderMode.NEW)

        assert (tmp_project_dir / "NOTES.md").read_text(encoding="utf-8") == "mine"

    async def test_incremental_over_symlinked_directory(self, full_spec, tmp_path: Path):
        root = tmp_path / "my-app"
        await render(full_spec, root, RenderMode.NEW)
        shared = tmp_path / "shared-public"
        (root / "public").rename(shared)
        (root / "public").symlink_to(shared, target_is_directory=True)

        report = await render(full_spec, root, RenderMode.INCREMENTAL)

        assert _kinds(report)["public"] == OutcomeKind.SKIPPED_NOOP
        assert all(o.kind.is_skip for o in report.outcomes)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    async def test_partial_report_on_write_failure(self, full_spec, tmp_project_dir: Path):
        (tmp_project_dir / "README.md").mkdir(parents=True)

        with pytest.raises(FilesystemError) as exc_info:
            await render(full_spec, tmp_project_dir, RenderMode.NEW)

        err = exc_info.value
        assert err.path == "README.md"
        assert err.report is not None
        completed = [o.path for o in err.report.outcomes]
        assert "package.json" in completed
        assert "README.md" not in completed
        assert (tmp_project_dir / "package.json").is_file()
