"""Scaffolder -- plans artifacts for a specification and syncs them to disk.

Planning is pure: it renders every template and returns an ordered list of
``ArtifactRequest`` values.  The synchronizer then applies that list to a
destination directory, writing only what differs.

Quick usage::

    from appgen.scaffolder import RenderMode, plan, synchronize

    requests = plan(spec, RenderMode.NEW)
    report = await synchronize(requests, "/tmp/my-app", RenderMode.NEW)
"""

from appgen.scaffolder.design_system import (
    DesignSystemClient,
    DesignSystemResponse,
    enrich_requests,
)
from appgen.scaffolder.models import (
    ArtifactCategory,
    ArtifactOutcome,
    ArtifactRequest,
    OutcomeKind,
    RenderMode,
    RenderReport,
)
from appgen.scaffolder.planner import ArtifactPlanner, plan
from appgen.scaffolder.synchronizer import synchronize
from appgen.scaffolder.templates import TemplateKind, TemplateRegistry, TemplateRenderer

__all__ = [
    "ArtifactPlanner",
    "plan",
    "synchronize",
    "enrich_requests",
    "DesignSystemClient",
    "DesignSystemResponse",
    "TemplateKind",
    "TemplateRegistry",
    "TemplateRenderer",
    "ArtifactCategory",
    "ArtifactOutcome",
    "ArtifactRequest",
    "OutcomeKind",
    "RenderMode",
    "RenderReport",
]
