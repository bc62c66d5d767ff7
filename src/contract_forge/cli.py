"""CLI entry point for contract-forge."""

from pathlib import Path

import click

from contract_forge.config import load_config
from contract_forge.errors import ConfigError, ParserError
from contract_forge.generator.project import ENDPOINTS_DIR, generate_server_files
from contract_forge.parser.base import Api
from contract_forge.parser.contract import parse_contract


def _report(errors: list[ParserError]) -> None:
    """Print diagnostics as ``file:line:column: error: message``."""
    for error in errors:
        click.echo(f"{error.location}: error: {error.message}", err=True)
        for note, location in error.related:
            click.echo(f"{location}: note: {note}", err=True)


def _load_api(contract_path: Path) -> Api:
    """Parse a contract, exiting with status 1 when it has errors."""
    result = parse_contract(contract_path)
    if not result.ok:
        _report(result.errors)
        click.echo(f"Found {len(result.errors)} error(s) in {contract_path}.", err=True)
        raise SystemExit(1)
    return result.api


@click.group()
def main():
    """Compile annotated API contracts into validated Express servers."""
    pass


@main.command()
@click.argument("contract_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(contract_path: Path):
    """Parse and verify a contract without generating anything."""
    click.echo(f"Checking {contract_path}...")
    api = _load_api(contract_path)
    click.echo(f"Found {len(api.endpoints)} endpoints and {len(api.types)} types, no errors.")


@main.command()
@click.argument("contract_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(file_okay=False, path_type=Path), help="Output directory for the generated server.")
@click.option("--port", default=None, type=int, help="Port the generated server listens on.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML configuration file.")
@click.option("--overwrite", is_flag=True, default=False, help="Overwrite existing endpoint implementations.")
def generate(contract_path: Path, output: Path | None, port: int | None, config_path: Path | None, overwrite: bool):
    """Generate an Express server, types, validators and endpoint stubs."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))
    overrides = {"output": output, "port": port, "overwrite_endpoints": overwrite or None}
    config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    click.echo(f"Parsing {contract_path}...")
    api = _load_api(contract_path)
    click.echo(f"Found {len(api.endpoints)} endpoints.")
    for endpoint_name, endpoint in api.endpoints.items():
        click.echo(f"  {endpoint.method} {endpoint.path_template()} -> {endpoint_name}")

    files = generate_server_files(api, config)

    written = 0
    for filename, content in files.items():
        file_path = config.output / filename
        if filename.startswith(f"{ENDPOINTS_DIR}/") and file_path.exists() and not config.overwrite_endpoints:
            click.echo(f"  Kept existing {file_path}")
            continue
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        click.echo(f"  Created {file_path}")
        written += 1

    click.echo(f"Generated {written} files in {config.output}")
