"""CLI entry point for spec-shaver."""

import functools
from pathlib import Path

import click

from spec_shaver.config import DEFAULT_OUTPUT, create_default_config, load_config, merge_config
from spec_shaver.console import Console, LogLevel, format_bytes, format_operation
from spec_shaver.errors import SpecShaverError, WizardCancelled
from spec_shaver.fetcher import DEFAULT_TIMEOUT, fetch_document, parse_header
from spec_shaver.parser.base import ELIGIBLE_METHODS, ReducerOptions, ReductionResult
from spec_shaver.parser.swagger import load_document
from spec_shaver.reducer.engine import OpenAPIReducer
from spec_shaver.reducer.optimizer import calculate_size, to_json
from spec_shaver.reducer.validator import validate_document, validate_document_or_raise
from spec_shaver.wizard.machine import run_wizard


def reducer_options(func):
    """Options shared by every command that produces a reduced schema."""
    options = [
        click.option("-o", "--output", default=None, help=f"Output file path. [default: {DEFAULT_OUTPUT}]"),
        click.option("-a", "--actions", "max_actions", type=click.IntRange(min=0), default=None, help="Maximum number of operations to keep. [default: 30]"),
        click.option("-s", "--size", "max_size_bytes", type=click.IntRange(min=0), default=None, help="Maximum size in bytes. [default: 1048576]"),
        click.option("--include-examples/--no-include-examples", default=None, help="Keep example/examples fields."),
        click.option("--max-description-length", type=click.IntRange(min=0), default=None, help="Truncate longer descriptions when over budget. [default: 200]"),
        click.option("-m", "--method", "methods", multiple=True, type=click.Choice(ELIGIBLE_METHODS, case_sensitive=False), help="Only consider these HTTP methods (repeatable)."),
        click.option("--core-entity", "core_entities", multiple=True, help="Path segment that marks a high-priority resource (repeatable)."),
        click.option("--resolve-refs/--no-resolve-refs", default=None, help="Inline $ref references in the output."),
        click.option("-c", "--config", "config_path", type=click.Path(path_type=Path), default=None, help="Config file path. Defaults to ./.spec-shaver.json if present."),
        click.option("-q", "--quiet", is_flag=True, help="Only print errors."),
        click.option("-v", "--verbose", is_flag=True, help="Print progress details."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _handle_errors(func):
    """Turn spec-shaver errors into clean CLI failures."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except WizardCancelled as e:
            click.echo(str(e))
        except SpecShaverError as e:
            raise click.ClickException(str(e)) from e

    return wrapper


def _make_console(quiet: bool, verbose: bool) -> Console:
    if quiet:
        return Console(LogLevel.QUIET)
    if verbose:
        return Console(LogLevel.VERBOSE)
    return Console(LogLevel.NORMAL)


def _resolve_options(
    console: Console,
    config_path: Path | None,
    output: str | None,
    methods: tuple[str, ...],
    core_entities: tuple[str, ...],
    **cli_values,
) -> tuple[ReducerOptions, Path]:
    """Merge config file and CLI values; CLI wins on collisions."""
    config = load_config(config_path, console=console)
    cli_values.update(
        output=output,
        method_filter=list(methods) or None,
        core_entities=list(core_entities) or None,
    )
    merged = merge_config(cli_values, config)
    output_path = Path(merged.pop("output", None) or DEFAULT_OUTPUT)
    return ReducerOptions.model_validate(merged), output_path


def _parse_headers(headers: tuple[str, ...]) -> dict[str, str]:
    parsed = {}
    for header in headers:
        pair = parse_header(header)
        if pair is None:
            raise click.BadParameter(f"Expected 'Key: Value', got '{header}'", param_hint="--header")
        parsed[pair[0]] = pair[1]
    return parsed


def _warn_if_invalid(document: dict, console: Console) -> None:
    result = validate_document(document)
    if not result.valid:
        console.warn(f"Input schema has {len(result.errors)} validation issue(s); reducing anyway.")
        for error in result.errors:
            console.verbose(error)


def _save_and_report(result: ReductionResult, output: Path, max_size_bytes: int, console: Console) -> None:
    """Validate the reduced schema, then write it and print the summary."""
    validate_document_or_raise(result.document, context="Reduced schema")

    output_path = output.resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(to_json(result.document, indent=2) + "\n", encoding="utf-8")

    console.log(f"Original operation count: {result.original_operation_count}")
    console.log(f"Reduced operation count: {result.reduced_operation_count}")
    console.log(f"\nFinal schema size: {format_bytes(result.size_bytes)} ({result.size_bytes:,} bytes)")
    if result.size_bytes > max_size_bytes:
        console.warn("Warning: Schema exceeds size limit!")
    else:
        console.success("Schema is within size limit!")
    console.success(f"Reduced schema saved to: {output_path}")

    console.log("")
    console.header("OPERATIONS INCLUDED IN REDUCED SCHEMA")
    for op in result.operations:
        console.log(format_operation(op.method, op.path, op.summary))
    console.separator()


def _reduce_and_save(
    document: dict,
    options: ReducerOptions,
    output: Path,
    console: Console,
    endpoints: tuple[str, ...] = (),
) -> None:
    _warn_if_invalid(document, console)

    reducer = OpenAPIReducer(options, console=console)
    if endpoints:
        console.info(f"Reducing schema to {len(endpoints)} selected endpoint(s)...")
        result = reducer.reduce_endpoints(document, endpoints)
    else:
        console.info(f"Reducing schema to {options.max_actions} actions...")
        result = reducer.reduce(document)

    _save_and_report(result, output, options.max_size_bytes, console)


@click.group()
@click.version_option(package_name="spec-shaver")
def main():
    """Spec Shaver: reduce OpenAPI schemas to a bounded number of operations and bytes."""
    pass


@main.command()
@click.option("-i", "--input", "input_path", required=True, type=click.Path(path_type=Path), help="Input schema file (JSON or YAML).")
@click.option("-e", "--endpoint", "endpoints", multiple=True, help="Keep exactly this endpoint, e.g. GET:/users or /users (repeatable).")
@reducer_options
@_handle_errors
def reduce(input_path: Path, endpoints: tuple[str, ...], quiet: bool, verbose: bool, **option_values):
    """Reduce a local OpenAPI schema file."""
    console = _make_console(quiet, verbose)
    options, output = _resolve_options(console, **option_values)

    console.info(f"Reading schema from {input_path}...")
    document = load_document(input_path)
    console.info(f"Original schema size: {format_bytes(input_path.stat().st_size)}")

    _reduce_and_save(document, options, output, console, endpoints)


@main.command()
@click.option("-u", "--url", required=True, help="URL to fetch the OpenAPI schema from.")
@click.option("-H", "--header", "headers", multiple=True, help='HTTP header, format "Key: Value" (repeatable).')
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=DEFAULT_TIMEOUT, show_default=True, help="Request timeout in seconds.")
@click.option("-e", "--endpoint", "endpoints", multiple=True, help="Keep exactly this endpoint, e.g. GET:/users or /users (repeatable).")
@reducer_options
@_handle_errors
def fetch(url: str, headers: tuple[str, ...], timeout: float, endpoints: tuple[str, ...], quiet: bool, verbose: bool, **option_values):
    """Fetch and reduce an OpenAPI schema from a URL."""
    console = _make_console(quiet, verbose)
    options, output = _resolve_options(console, **option_values)

    console.info(f"Fetching schema from {url}...")
    document = fetch_document(url, headers=_parse_headers(headers), timeout=timeout)
    console.info(f"Fetched schema: {format_bytes(calculate_size(document))}")

    _reduce_and_save(document, options, output, console, endpoints)


@main.command()
@click.option("-i", "--input", "input_path", type=click.Path(path_type=Path), default=None, help="Input schema file (JSON or YAML).")
@click.option("-u", "--url", default=None, help="URL to fetch the OpenAPI schema from (alternative to --input).")
@click.option("-H", "--header", "headers", multiple=True, help='HTTP header for --url, format "Key: Value" (repeatable).')
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=DEFAULT_TIMEOUT, show_default=True, help="Request timeout in seconds.")
@reducer_options
@_handle_errors
def wizard(input_path: Path | None, url: str | None, headers: tuple[str, ...], timeout: float, quiet: bool, verbose: bool, **option_values):
    """Interactive wizard to select which operations to keep."""
    if not input_path and not url:
        raise click.UsageError("Either --input or --url is required.")

    console = _make_console(quiet, verbose)
    options, output = _resolve_options(console, **option_values)

    if url:
        console.info(f"Fetching schema from {url}...")
        document = fetch_document(url, headers=_parse_headers(headers), timeout=timeout)
    else:
        console.info(f"Reading schema from {input_path}...")
        document = load_document(input_path)
    console.info(f"Schema size: {format_bytes(calculate_size(document))}")

    _warn_if_invalid(document, console)
    result = run_wizard(document, options, console=console)
    _save_and_report(result, output, options.max_size_bytes, console)


@main.command()
@click.option("-o", "--output", type=click.Path(path_type=Path), default=Path(".spec-shaver.json"), show_default=True, help="Where to write the config file.")
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def init(output: Path, force: bool):
    """Create a config file with the default options."""
    if output.exists() and not force:
        raise click.ClickException(f"{output} already exists (use --force to overwrite).")
    create_default_config(output)
    click.echo(f"Config written to {output}")
