"""Exception hierarchy for the render pipeline.

Every failure the pipeline can raise derives from :class:`AppGenError` so the
CLI can report it uniformly.  Schema and planning errors are raised before any
filesystem access; :class:`FilesystemError` is raised mid-pass and carries the
partial report of what was completed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from appgen.scaffolder.models import RenderReport


class AppGenError(Exception):
    """Base class for all render pipeline errors."""


class SchemaError(AppGenError):
    """Raised when a specification document fails validation."""

    def __init__(self, field_path: str, message: str) -> None:
        self.field_path = field_path
        self.message = message
        super().__init__(f"{field_path}: {message}")


class PlanningError(AppGenError):
    """Raised when the artifact plan cannot be built."""


class TemplateNotFoundError(PlanningError):
    """No template is registered for a ``(kind, framework)`` pair."""

    def __init__(self, kind: str, framework: str) -> None:
        self.kind = kind
        self.framework = framework
        super().__init__(f"No '{kind}' template registered for framework '{framework}'")


class DuplicateArtifactError(PlanningError):
    """Two spec elements resolved to the same target path."""

    def __init__(self, path: str, first_source: str, second_source: str) -> None:
        self.path = path
        self.first_source = first_source
        self.second_source = second_source
        super().__init__(
            f"Target path '{path}' is produced by both {first_source} and {second_source}"
        )


class DependencyConflictError(PlanningError):
    """Two stack choices request different version ranges for one package."""

    def __init__(self, package: str, ranges: dict[str, str]) -> None:
        self.package = package
        self.ranges = dict(ranges)
        detail = ", ".join(f"{source} wants {rng}" for source, rng in self.ranges.items())
        super().__init__(f"Conflicting version ranges for '{package}': {detail}")


class DesignSystemError(AppGenError):
    """The design-system collaborator failed to enrich an artifact."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Design-system enrichment failed for {path}: {reason}")


class FilesystemError(AppGenError):
    """An I/O failure aborted synchronization.

    ``report`` holds the outcomes recorded before the failing artifact; files
    already written stay on disk.
    """

    def __init__(self, path: str, reason: str, report: "RenderReport | None" = None) -> None:
        self.path = path
        self.reason = reason
        self.report = report
        super().__init__(f"Failed to write {path}: {reason}")
