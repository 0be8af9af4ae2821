"""
imagemanifest CLI.

Command-line interface for inspecting and checking image manifests.
"""

import json

import click
import yaml

from imagemanifest import __version__


def _load_options(
    config: str | None,
    delimiter: str | None,
    comment: str | None,
    no_comment: bool = False,
):
    """Build parse options from an optional YAML file plus flag overrides."""
    from pydantic import ValidationError

    from imagemanifest.core.options import ParseOptions

    if comment is not None and no_comment:
        click.echo("Error loading options: --comment and --no-comment conflict", err=True)
        raise SystemExit(1)

    try:
        options = ParseOptions.from_yaml(config) if config else ParseOptions()
        options = options.with_overrides(delimiter=delimiter, comment=comment)
        if no_comment:
            options = options.without_comments()
        return options
    except (OSError, yaml.YAMLError, ValueError, ValidationError) as e:
        click.echo(f"Error loading options: {e}", err=True)
        raise SystemExit(1)


def _read(manifest: str, options):
    """Read a manifest, exiting with status 1 on a fatal error."""
    from imagemanifest.core.issues import ManifestError
    from imagemanifest.io.manifest_rw import read_manifest

    try:
        return read_manifest(manifest, options)
    except ManifestError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


def _echo_warnings(result) -> None:
    if not result.warnings:
        return
    click.echo(f"warnings for image CSV file {result.source}", err=True)
    for warning in result.warnings:
        click.echo(f"  {warning}", err=True)


def _dialect_options(func):
    func = click.option(
        "--no-comment", is_flag=True,
        help="Treat ';' lines as ordinary records (disables comment handling)",
    )(func)
    func = click.option("--comment", help="Comment leader character (default ';')")(func)
    func = click.option("--delimiter", "-d", help="Field separator (default ',')")(func)
    func = click.option(
        "--config", "-c", type=click.Path(exists=True, dir_okay=False),
        help="YAML file with parse options",
    )(func)
    return func


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """imagemanifest: read CSV manifests of full and partial images."""
    pass


@main.command()
@click.argument("manifest")
@_dialect_options
@click.option("--format", "-f", "output_format",
              type=click.Choice(["table", "json", "yaml"]), default="table",
              help="Output format")
def show(
    manifest: str,
    config: str | None,
    delimiter: str | None,
    comment: str | None,
    no_comment: bool,
    output_format: str,
) -> None:
    """Print the images and partial images defined in MANIFEST."""
    options = _load_options(config, delimiter, comment, no_comment)
    result = _read(manifest, options)

    _echo_warnings(result)

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if output_format == "yaml":
        click.echo(yaml.safe_dump(result.to_dict(), default_flow_style=False, sort_keys=False))
        return

    from rich.console import Console
    from rich.table import Table

    console = Console()

    images = Table(title="Images")
    images.add_column("Name", style="cyan")
    images.add_column("Path")
    for image in result.images:
        images.add_row(image.name, image.path)
    console.print(images)

    partials = Table(title="Partial images")
    partials.add_column("Name", style="cyan")
    partials.add_column("Path")
    for column in ("ax", "ay", "bx", "by"):
        partials.add_column(column, justify="right")
    for image in result.partial_images:
        partials.add_row(image.name, image.path, *(str(v) for v in image.box))
    console.print(partials)


@main.command()
@click.argument("manifest")
@_dialect_options
@click.option("--strict", is_flag=True, help="Exit with status 1 if any warning is reported")
@click.option("--format", "-f", "output_format",
              type=click.Choice(["text", "json"]), default="text",
              help="Output format")
def check(
    manifest: str,
    config: str | None,
    delimiter: str | None,
    comment: str | None,
    no_comment: bool,
    strict: bool,
    output_format: str,
) -> None:
    """Validate MANIFEST and summarize what it contains."""
    options = _load_options(config, delimiter, comment, no_comment)
    result = _read(manifest, options)

    if output_format == "json":
        summary = {
            "source": result.source,
            "images": len(result.images),
            "partial_images": len(result.partial_images),
            "warnings": [warning.to_dict() for warning in result.warnings],
        }
        click.echo(json.dumps(summary, indent=2))
    else:
        click.echo(
            f"{result.source}: {len(result.images)} images, "
            f"{len(result.partial_images)} partial images, "
            f"{len(result.warnings)} warnings"
        )
        _echo_warnings(result)

    if strict and result.has_warnings:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
