"""CLI entrypoint for attrgen."""

import logging
import sys
from pathlib import Path

import click

from . import __version__

CATALOGUE_FILENAME = "attributes.toml"


def _auto_detect_catalogue(start: Path) -> Path | None:
    """Find an attributes.toml by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CATALOGUE_FILENAME
        if candidate.is_file():
            return candidate
    return None


@click.group()
@click.version_option(__version__, prog_name="attrgen")
@click.option(
    "--catalogue",
    "-c",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f"Path to the attribute catalogue (defaults to the nearest ./{CATALOGUE_FILENAME})",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Log generation details to stderr",
)
@click.pass_context
def cli(ctx: click.Context, catalogue: Path | None, verbose: bool) -> None:
    """attrgen - Generate compiler attribute tables from a catalogue.

    Emits enum codes, name tables, a property table and the caller/callee
    compatibility and merge functions as one include file.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    if catalogue is None:
        detected = _auto_detect_catalogue(Path.cwd())
        if detected is None:
            raise click.ClickException(
                f"Catalogue not found. Pass --catalogue /path/to/{CATALOGUE_FILENAME} or run from its directory."
            )
        catalogue = detected

    if not catalogue.is_file():
        raise click.BadParameter(f"File '{catalogue}' does not exist.", param_hint="--catalogue / -c")

    ctx.obj["catalogue"] = catalogue.resolve()


@cli.command()
@click.option(
    "--out",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file path (default: stdout)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without writing (diagnostic only)",
)
@click.pass_context
def build(ctx: click.Context, out: Path | None, dry_run: bool) -> None:
    """Generate the attribute include file.

    Output is written only if every section generated successfully; an
    existing file is replaced atomically.

    Examples:

        attrgen build

        attrgen -c attributes.toml build --out Attributes.inc
    """
    from .commands.build import run_build

    exit_code = run_build(ctx.obj["catalogue"], out=out, dry_run=dry_run)
    sys.exit(exit_code)


@cli.command()
@click.argument(
    "existing",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def diff(ctx: click.Context, existing: Path) -> None:
    """Compare a previously generated file with fresh output.

    Exits with status 1 when the file is stale.
    """
    from .commands.build import run_diff

    exit_code = run_diff(ctx.obj["catalogue"], existing)
    sys.exit(exit_code)


@cli.command()
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON",
)
@click.pass_context
def check(ctx: click.Context, output_json: bool) -> None:
    """Check the catalogue for property/category violations.

    Reports every violation rather than stopping at the first one.
    """
    from .commands.check import run_check

    exit_code = run_check(ctx.obj["catalogue"], output_json=output_json)
    sys.exit(exit_code)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
