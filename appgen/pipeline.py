"""appgen render pipeline.

Runs the four stages of a render, strictly one after another:

LOAD        -- Validate the specification document.
PLAN        -- Resolve every artifact and render its content (no I/O).
ENRICH      -- Optionally pass component and page sources through the
               design-system service.
SYNCHRONIZE -- Write what differs to the destination, in plan order.

Usage::

    appgen --spec app.json --output ./my-app
    appgen --spec app.json --target ./my-app --dry-run
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from appgen.config import Config
from appgen.errors import AppGenError, FilesystemError
from appgen.reporter import print_report
from appgen.scaffolder import (
    ArtifactOutcome,
    DesignSystemClient,
    RenderMode,
    RenderReport,
    TemplateRegistry,
    enrich_requests,
    plan,
    synchronize,
)
from appgen.scaffolder.synchronizer import OutcomeCallback, is_empty_directory
from appgen.spec import Specification, load_file
from appgen.utils import (
    console,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)


# ---------------------------------------------------------------------------
# Entry contract
# ---------------------------------------------------------------------------


async def render(
    spec: Specification,
    dest_root: str | Path,
    mode: RenderMode = RenderMode.NEW,
    *,
    dry_run: bool = False,
    design_system: DesignSystemClient | None = None,
    registry: TemplateRegistry | None = None,
    on_outcome: OutcomeCallback | None = None,
) -> RenderReport:
    """Render *spec* into *dest_root*.

    Every schema, planning and enrichment failure is raised before the
    destination is touched.

    Raises:
        PlanningError: The artifact plan could not be built.
        DesignSystemError: Enrichment failed for a component or page.
        FilesystemError: An I/O failure aborted synchronization; its
            ``report`` lists what was completed.
    """
    requests = plan(spec, mode, registry)
    if design_system is not None:
        requests = await enrich_requests(requests, design_system, spec)
    return await synchronize(requests, dest_root, mode, dry_run=dry_run, on_outcome=on_outcome)


# ---------------------------------------------------------------------------
# CLI run
# ---------------------------------------------------------------------------


def _echo_outcome(outcome: ArtifactOutcome) -> None:
    if outcome.kind.is_skip:
        return
    style = "green" if outcome.kind.value == "created" else "yellow"
    console.print(f"  [{style}]{outcome.kind.value:>8}[/{style}] {outcome.path}")


async def run(config: Config) -> RenderReport:
    """Execute one configured render with console output.

    Raises:
        AppGenError: Any pipeline failure, after it has been reported.
    """
    if config.spec_path is None:
        raise AppGenError("No specification given (use --spec or APPGEN_SPEC)")

    root = config.resolved_output_dir

    print_stage_header("LOAD")
    spec = load_file(config.spec_path)
    print_summary_table(
        {
            "App": f"{spec.app.name} {spec.app.version}",
            "Frontend": f"{spec.stack.frontend.framework.value} ({spec.stack.frontend.language.value})",
            "Backend": f"{spec.stack.backend.framework.value} ({spec.stack.backend.language.value})",
            "Database": f"{spec.stack.database.type.value} / {spec.stack.database.orm.value}",
            "Components": len(spec.components),
            "Pages": len(spec.pages),
            "Routes": len(spec.routes),
            "Models": len(spec.models),
            "Output": str(root),
            "Mode": config.mode.value + (" (dry run)" if config.dry_run else ""),
        },
        title="Specification",
    )

    if config.mode == RenderMode.NEW and not is_empty_directory(root):
        print_warning(
            f"{root} is not empty; existing files that differ from the plan will be replaced."
        )

    design_system = None
    if config.design_system.enabled:
        design_system = DesignSystemClient(
            config.design_system.url,
            api_key=config.design_system.api_key,
            timeout=config.design_system.timeout,
        )

    print_stage_header("PLAN", color="bright_blue")
    requests = plan(spec, config.mode)
    console.print(f"  {len(requests)} artifacts planned")

    if design_system is not None:
        print_stage_header("ENRICH", color="bright_magenta")
        requests = await enrich_requests(requests, design_system, spec)
        console.print(f"  Enriched via {design_system.base_url}")

    print_stage_header("SYNCHRONIZE", color="bright_green")
    try:
        report = await synchronize(
            requests,
            root,
            config.mode,
            dry_run=config.dry_run,
            on_outcome=_echo_outcome,
        )
    except FilesystemError as exc:
        if exc.report is not None:
            print_report(exc.report)
        print_warning("Files written before the failure were kept; re-run once the problem is fixed.")
        raise

    print_report(report)
    return report


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``appgen``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="appgen",
        description="appgen -- scaffold a full-stack project from a JSON specification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  appgen --spec app.json --output ./my-app\n"
            "  appgen --spec app.json --output ./my-app --incremental\n"
            "  appgen --spec app.json --target ./my-app --dry-run\n"
        ),
    )
    parser.add_argument(
        "--spec", "-s",
        default=None,
        help="Path to the specification JSON file (default: $APPGEN_SPEC)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Destination directory (default: $APPGEN_OUTPUT_DIR or ./my-app)",
    )
    parser.add_argument(
        "--incremental",
        action="store_true",
        help="Update an existing project in place",
    )
    parser.add_argument(
        "--target",
        default=None,
        metavar="DIR",
        help="Existing project to update; implies --incremental",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing anything",
    )

    args = parser.parse_args(argv)

    config = Config.from_env()
    if args.spec:
        config.spec_path = Path(args.spec)
    if args.target:
        config.output_dir = Path(args.target)
        config.incremental = True
    elif args.output:
        config.output_dir = Path(args.output)
    if args.incremental:
        config.incremental = True
    if args.dry_run:
        config.dry_run = True

    if config.spec_path is not None and not config.spec_path.exists():
        print_error(f"Error: Specification file not found: {config.spec_path}")
        sys.exit(1)

    try:
        asyncio.run(run(config))
    except AppGenError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    print_success("Done.")


if __name__ == "__main__":
    main()
