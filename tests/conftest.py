"""Shared pytest fixtures for the appgen test suite.

Provides reusable fixtures for:
- Temporary destination directories
- Minimal and fully-featured specification documents
- Validated ``Specification`` instances
- A mocked design-system client
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from appgen.scaffolder.design_system import DesignSystemClient, DesignSystemResponse
from appgen.spec import Specification, load


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Destination root for generated projects (not created up front)."""
    return tmp_path / "my-app"


# ---------------------------------------------------------------------------
# Specification documents
# ---------------------------------------------------------------------------

MINIMAL_SPEC: dict[str, Any] = {
    "app": {"name": "todo"},
    "stack": {
        "frontend": {"framework": "react", "language": "typescript"},
        "backend": {"framework": "express", "language": "typescript"},
        "database": {"type": "sqlite"},
    },
    "components": [],
    "pages": [],
    "routes": [],
}

FULL_SPEC: dict[str, Any] = {
    "app": {
        "name": "task-board",
        "description": "Team task tracking",
        "version": "0.2.0",
        "author": "Task Team",
    },
    "stack": {
        "frontend": {
            "framework": "react",
            "language": "typescript",
            "styling": "tailwind",
            "router": "react-router",
            "stateManagement": "zustand",
        },
        "backend": {
            "framework": "express",
            "language": "typescript",
            "validation": "zod",
        },
        "database": {"type": "postgresql", "orm": "prisma"},
    },
    "components": [
        {"name": "TaskCard", "type": "display", "props": {"title": "string", "done": "boolean"}},
        {"name": "TaskForm", "type": "form", "description": "Create a task"},
    ],
    "pages": [
        {"name": "Home", "path": "/", "title": "Tasks", "components": ["TaskCard"]},
        {"name": "NewTask", "components": ["TaskForm"], "auth": True},
    ],
    "routes": [
        {"path": "/tasks", "method": "GET", "handler": "listTasks"},
        {"path": "/tasks", "method": "POST", "handler": "createTask", "auth": True},
        {"path": "/tasks/:id", "method": "delete", "handler": "deleteTask", "auth": True},
    ],
    "database": {
        "models": [
            {
                "name": "Task",
                "fields": [
                    {"name": "title", "type": "string"},
                    {"name": "notes", "type": "text", "required": False},
                    {"name": "done", "type": "boolean"},
                    {"name": "owner", "type": "User"},
                ],
            },
            {
                "name": "User",
                "fields": [
                    {"name": "email", "type": "string"},
                    {"name": "tasks", "type": "Task[]"},
                ],
            },
        ]
    },
    "styling": {"colors": {"primary": "#3b82f6", "surface": "#ffffff"}},
    "features": {"authentication": True},
}


@pytest.fixture
def minimal_spec_data() -> dict[str, Any]:
    """Scenario-1 document: react/express/sqlite with no elements."""
    return copy.deepcopy(MINIMAL_SPEC)


@pytest.fixture
def full_spec_data() -> dict[str, Any]:
    """Document exercising every section of the specification."""
    return copy.deepcopy(FULL_SPEC)


@pytest.fixture
def minimal_spec(minimal_spec_data: dict[str, Any]) -> Specification:
    return load(minimal_spec_data)


@pytest.fixture
def full_spec(full_spec_data: dict[str, Any]) -> Specification:
    return load(full_spec_data)


@pytest.fixture
def spec_file(tmp_path: Path, full_spec_data: dict[str, Any]) -> Path:
    """The full specification written to ``app.json``."""
    path = tmp_path / "app.json"
    path.write_text(json.dumps(full_spec_data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def make_spec():
    """Factory: load a document after merging per-layer stack overrides.

    Usage::

        spec = make_spec(FULL_SPEC, frontend={"framework": "vue", "router": "none"})
    """

    def _make(data: dict[str, Any], **stack_overrides: dict[str, Any]) -> Specification:
        doc = copy.deepcopy(data)
        for layer, values in stack_overrides.items():
            doc["stack"][layer].update(values)
        return load(doc)

    return _make


# ---------------------------------------------------------------------------
# Design system
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_design_system() -> DesignSystemClient:
    """Design-system client whose ``enrich`` prefixes a marker comment."""
    client = DesignSystemClient("http://design.test")

    async def _enrich(category, name, framework, content, styling=None):
        return DesignSystemResponse(content=f"// enriched {category} {name}\n{content}")

    client.enrich = AsyncMock(side_effect=_enrich)
    return client
