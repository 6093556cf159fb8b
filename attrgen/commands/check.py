"""Check command implementation."""

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..catalogue import load_catalogue
from ..emitters import assign_codes, check_property_constraints
from ..errors import CatalogueError
from ..models import Category, Diagnostic


def run_check(catalogue_path: Path, output_json: bool = False) -> int:
    """Validate a catalogue and report every constraint violation.

    Args:
        catalogue_path: Path to the TOML catalogue
        output_json: Output results as JSON instead of human-readable

    Returns:
        Exit code (0 = clean, 1 = violations or malformed catalogue)
    """
    console = Console(stderr=True)

    try:
        catalogue = load_catalogue(catalogue_path)
    except CatalogueError as e:
        if output_json:
            _output_json([Diagnostic(level="error", rule="catalogue", attribute=e.entry or "", message=e.detail)], {})
        else:
            console.print(f"error: {e}", style="bold red", markup=False)
        return 1

    results = check_property_constraints(catalogue)
    assignment = assign_codes(catalogue)

    counts: dict[str, int] = {}
    for r in assignment.ranges:
        counts[r.category.value] = len(r.names)
    for category in (Category.STR_BOOL, Category.COMPLEX_STR):
        counts[category.value] = len(catalogue.by_category(category))

    if output_json:
        _output_json(results, counts)
    else:
        _print_human_output(console, results, counts)

    return 1 if results else 0


def _output_json(results: list[Diagnostic], counts: dict[str, int]) -> None:
    output = {
        "errors": [
            {"level": r.level, "rule": r.rule, "attribute": r.attribute, "message": r.message}
            for r in results
        ],
        "summary": {
            "attributes": counts,
            "errors": len(results),
        },
    }
    print(json.dumps(output, indent=2))


def _print_human_output(console: Console, results: list[Diagnostic], counts: dict[str, int]) -> None:
    table = Table(title="Attributes by category")
    table.add_column("Category")
    table.add_column("Count", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)

    for r in results:
        console.print(str(r), style="red", markup=False)

    if results:
        console.print(f"\n✗ {len(results)} violation(s) found", style="bold red")
    else:
        console.print("\n✓ No violations found", style="bold green")
