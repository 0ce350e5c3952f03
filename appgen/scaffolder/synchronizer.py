"""File synchronizer.

Applies a planned artifact list to a destination directory one artifact at a
time, in plan order.  A file whose bytes already equal the planned content is
left alone (mtime included); any other existing file is replaced in full.
Blocking I/O runs in worker threads via :func:`asyncio.to_thread` so the
pass can be awaited from the async pipeline, but writes are never issued
concurrently.
"""

from __future__ import annotations

import asyncio
import errno
import os
import stat
from collections.abc import Callable, Iterable
from pathlib import Path, PurePosixPath

from appgen.errors import FilesystemError
from appgen.scaffolder.models import (
    ArtifactOutcome,
    ArtifactRequest,
    OutcomeKind,
    RenderMode,
    RenderReport,
)

OutcomeCallback = Callable[[ArtifactOutcome], None]


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def resolve_destination(root: Path, target_path: str) -> Path:
    """Join *target_path* onto *root*, refusing anything that leaves it.

    Containment is checked on the path text, not on the filesystem, so a
    planned directory the user has replaced with a symlink is still usable.

    Raises:
        FilesystemError: If the path is absolute or has a ``..`` segment.
    """
    relative = PurePosixPath(target_path)
    if relative.is_absolute() or target_path.startswith("\\"):
        raise FilesystemError(target_path, "target path must be relative to the project root")
    if ".." in relative.parts:
        raise FilesystemError(target_path, "target path escapes the project root")
    return root.joinpath(*relative.parts)


def _check_parents(path: Path, root: Path) -> None:
    """Fail like ``mkdir`` would when an existing ancestor is not a directory."""
    for parent in path.parents:
        if parent == root:
            return
        if parent.exists() and not parent.is_dir():
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(parent))


# ---------------------------------------------------------------------------
# Blocking helpers (run in worker threads)
# ---------------------------------------------------------------------------


def _sync_directory(path: Path, root: Path, dry_run: bool) -> OutcomeKind:
    if path.is_dir():
        return OutcomeKind.SKIPPED_NOOP
    if path.exists():
        raise NotADirectoryError(f"{path} exists and is not a directory")
    _check_parents(path, root)
    if not dry_run:
        path.mkdir(parents=True, exist_ok=True)
    return OutcomeKind.CREATED


def _sync_file(
    path: Path, root: Path, data: bytes, executable: bool, dry_run: bool
) -> OutcomeKind:
    if path.is_dir():
        raise IsADirectoryError(f"{path} is a directory")

    if path.exists():
        if path.read_bytes() == data:
            return OutcomeKind.SKIPPED_IDENTICAL
        kind = OutcomeKind.UPDATED
    else:
        _check_parents(path, root)
        kind = OutcomeKind.CREATED

    if dry_run:
        return kind

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    if executable:
        _make_executable(path)
    return kind


def _make_executable(path: Path) -> None:
    """Set the executable bit on a file."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def is_empty_directory(path: Path) -> bool:
    """Whether *path* is missing or an empty directory."""
    if not path.exists():
        return True
    return path.is_dir() and not any(path.iterdir())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def synchronize(
    requests: Iterable[ArtifactRequest],
    root: str | Path,
    mode: RenderMode = RenderMode.NEW,
    *,
    dry_run: bool = False,
    on_outcome: OutcomeCallback | None = None,
) -> RenderReport:
    """Bring *root* in line with *requests*.

    Args:
        requests: Planned artifacts, applied strictly in order.
        root: Destination project root; created when missing.
        mode: Recorded on the report; both modes use the same algorithm.
        dry_run: Compute outcomes without touching the filesystem.
        on_outcome: Called once per recorded outcome, in order.

    Returns:
        The report with one outcome per request.

    Raises:
        FilesystemError: On the first I/O failure.  ``report`` holds the
            outcomes completed before it; nothing is rolled back.
    """
    root_path = Path(root).resolve()
    report = RenderReport(root=str(root_path), mode=mode, dry_run=dry_run)

    try:
        if dry_run:
            if root_path.exists() and not root_path.is_dir():
                raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(root_path))
        else:
            await asyncio.to_thread(root_path.mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(str(root_path), str(exc), report) from exc

    for request in requests:
        try:
            destination = resolve_destination(root_path, request.target_path)
        except FilesystemError as exc:
            exc.report = report
            raise

        try:
            if request.is_directory:
                kind = await asyncio.to_thread(_sync_directory, destination, root_path, dry_run)
            else:
                data = (request.content or "").encode("utf-8")
                kind = await asyncio.to_thread(
                    _sync_file, destination, root_path, data, request.executable, dry_run
                )
        except OSError as exc:
            reason = exc.strerror or str(exc)
            raise FilesystemError(request.target_path, reason, report) from exc

        outcome = ArtifactOutcome(path=request.target_path, category=request.category, kind=kind)
        report.outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)

    return report
