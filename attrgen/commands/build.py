"""Build and diff command implementations."""

import difflib
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.syntax import Syntax

from ..catalogue import load_catalogue
from ..emitters import generate
from ..errors import GenerationError
from ..models import CODE_BEARING
from ..planning import BuildPlan, BuildResult

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Compute (pure, buffered) / execute (publish) split
# -----------------------------------------------------------------------------


def compute_build_plan(catalogue_path: Path, out: Path | None = None) -> BuildPlan:
    """
    Generate the full artifact in memory without writing anything.

    Raises GenerationError if the catalogue is malformed or violates a
    property constraint.
    """
    catalogue = load_catalogue(catalogue_path)
    content = generate(catalogue)

    existing = None
    if out is not None and out.exists():
        try:
            existing = out.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            # Unreadable targets are treated as stale and replaced.
            logger.warning("cannot read existing %s: %s", out, e)

    return BuildPlan(
        catalogue_path=catalogue_path,
        catalogue_id=catalogue.catalogue_id,
        version=catalogue.version,
        content=content,
        target_path=out,
        existing_content=existing,
        attribute_count=len(catalogue.attributes),
        table_entries=sum(len(catalogue.by_category(c)) for c in CODE_BEARING),
        compat_rules=len(catalogue.compat_rules),
        merge_rules=len(catalogue.merge_rules),
    )


def execute_build_plan(plan: BuildPlan) -> BuildResult:
    """
    Publish a computed plan.

    File targets are replaced atomically; an identical target is left alone.
    """
    if plan.target_path is None:
        sys.stdout.write(plan.content)
        return BuildResult(success=True)

    if plan.unchanged:
        logger.info("%s is up to date", plan.target_path)
        return BuildResult(success=True, output_path=plan.target_path)

    target = plan.target_path
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".tmp")
    try:
        tmp.write_text(plan.content, encoding="utf-8")
        os.replace(tmp, target)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        return BuildResult(success=False, error=f"Failed to write {target}: {e}")

    logger.info("wrote %s", target)
    return BuildResult(
        success=True,
        output_path=target,
        bytes_written=len(plan.content.encode("utf-8")),
    )


def run_build(catalogue_path: Path, out: Path | None = None, dry_run: bool = False) -> int:
    """Generate attribute tables from a catalogue.

    Args:
        catalogue_path: Path to the TOML catalogue
        out: Output file path (None = stdout)
        dry_run: If True, show what would be done without writing

    Returns:
        Exit code
    """
    console = Console(stderr=True)

    # Phase 1: compute - nothing is published if this fails
    try:
        plan = compute_build_plan(catalogue_path, out=out)
    except GenerationError as e:
        console.print(f"error: {e}", style="bold red", markup=False)
        return 1

    if dry_run:
        console.print("\n[bold]DRY RUN[/bold] - No changes will be made\n")
        console.print(plan.summary(), markup=False)
        return 0

    # Phase 2: publish
    result = execute_build_plan(plan)

    if not result.success:
        console.print(str(result.error), style="red", markup=False)
        return 1

    if result.output_path and result.bytes_written:
        console.print(f"Attribute tables written to {result.output_path}", style="green", markup=False)
    elif result.output_path:
        console.print(f"{result.output_path} is up to date", style="dim", markup=False)

    return 0


def run_diff(catalogue_path: Path, existing_path: Path) -> int:
    """Compare freshly generated output with an existing artifact.

    Returns:
        Exit code (0 = in sync, 1 = differences found or generation failed)
    """
    console = Console(stderr=True)

    try:
        plan = compute_build_plan(catalogue_path)
    except GenerationError as e:
        console.print(f"error: {e}", style="bold red", markup=False)
        return 1

    try:
        existing_content = existing_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"error: cannot read {existing_path}: {e}", style="bold red", markup=False)
        return 1

    diff = list(
        difflib.unified_diff(
            existing_content.splitlines(keepends=True),
            plan.content.splitlines(keepends=True),
            fromfile=str(existing_path),
            tofile="generated",
        )
    )

    if diff:
        console.print("Differences found:", style="yellow")
        console.print(Syntax("".join(diff), "diff", theme="monokai"))
        return 1

    console.print(f"{existing_path} is in sync with {catalogue_path.name}", style="green", markup=False)
    return 0
