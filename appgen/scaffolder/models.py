"""Pydantic models shared by the planner, synchronizer and reporter."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RenderMode(str, Enum):
    """Whether a run targets an empty directory or an existing project."""
    NEW = "new"
    INCREMENTAL = "incremental"


class ArtifactCategory(str, Enum):
    """Informational category of an artifact, used for reporting."""
    DIRECTORY = "directory"
    CONFIG = "config"
    COMPONENT = "component"
    PAGE = "page"
    ROUTE = "route"
    MODEL = "model"
    STYLE = "style"
    ENTRY = "entry"
    DOC = "doc"
    SCRIPT = "script"


class ArtifactRequest(BaseModel):
    """One file (or directory) a run must consider."""

    model_config = ConfigDict(frozen=True)

    target_path: str = Field(..., description="POSIX path relative to the project root")
    content: Optional[str] = Field(default=None, description="Rendered text; None for directories")
    category: ArtifactCategory
    source: str = Field(default="", description="Spec element that produced this artifact")
    executable: bool = Field(default=False)

    @property
    def is_directory(self) -> bool:
        return self.category == ArtifactCategory.DIRECTORY


class OutcomeKind(str, Enum):
    """What the synchronizer did with one request."""
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED_IDENTICAL = "skipped_identical"
    SKIPPED_NOOP = "skipped_noop"

    @property
    def is_skip(self) -> bool:
        return self in (OutcomeKind.SKIPPED_IDENTICAL, OutcomeKind.SKIPPED_NOOP)


class ArtifactOutcome(BaseModel):
    """The recorded result for a single artifact."""

    model_config = ConfigDict(frozen=True)

    path: str
    category: ArtifactCategory
    kind: OutcomeKind


class RenderReport(BaseModel):
    """Ordered outcomes of one synchronization pass."""

    root: str = Field(..., description="Absolute destination root")
    mode: RenderMode
    dry_run: bool = Field(default=False)
    outcomes: list[ArtifactOutcome] = Field(default_factory=list)

    def kinds(self) -> dict[str, OutcomeKind]:
        """Map of ``path -> outcome kind`` in artifact order."""
        return {o.path: o.kind for o in self.outcomes}

    def paths(self, kind: OutcomeKind) -> list[str]:
        """Paths with the given outcome, preserving artifact order."""
        return [o.path for o in self.outcomes if o.kind == kind]
