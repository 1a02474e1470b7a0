"""CLI entry point for api-doc-gen."""

import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from api_doc_gen.config import GeneratorConfig, load_config
from api_doc_gen.generator import GeneratedDocs, generate_from_config
from api_doc_gen.parser.errors import ApiDocError
from api_doc_gen.serializer import render_module, write_module


def _source_options(f):
    """Options shared by every command that parses a source tree."""
    f = click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML configuration file.")(f)
    f = click.option("--base-path", default=None, help="Web service base path, overrides @BasePath.")(f)
    f = click.option("--main-api-file", default=None, type=click.Path(exists=True, path_type=Path), help="File with the general API annotations.")(f)
    f = click.option("--api-package", default=None, type=click.Path(exists=True, path_type=Path), help="Directory with the API handlers.")(f)
    return f


def _resolve_config(config_path: Path | None, **overrides) -> GeneratorConfig:
    try:
        config = load_config(config_path)
    except (yaml.YAMLError, ValidationError) as e:
        raise click.ClickException(f"Invalid config {config_path}: {e}") from e
    return config.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def _generate(config: GeneratorConfig) -> GeneratedDocs:
    try:
        return generate_from_config(config)
    except (ApiDocError, OSError, SyntaxError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every parsed and skipped function.")
def main(verbose: bool):
    """API Doc Gen: build Swagger documents from handler comment annotations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@_source_options
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Generated module path.")
@click.pass_context
def generate(ctx: click.Context, config_path: Path | None, api_package: Path | None, main_api_file: Path | None, base_path: str | None, output: Path | None):
    """Generate a Python module with RESOURCE_LISTING and API_DESCRIPTIONS."""
    config = _resolve_config(
        config_path, api_package=api_package, main_api_file=main_api_file, base_path=base_path, output=output
    )
    if config.api_package is None or config.main_api_file is None:
        click.echo(ctx.get_help())
        return

    click.echo(f"Parsing {config.api_package}...")
    docs = _generate(config)
    click.echo(f"Found {docs.operations} operations in {len(docs.api_descriptions)} resources.")

    try:
        write_module(config.output, render_module(docs.resource_listing, docs.api_descriptions))
    except OSError as e:
        raise click.ClickException(f"Can not write {config.output}: {e}") from e
    click.echo(f"Documentation saved to {config.output}")


@main.command()
@_source_options
@click.pass_context
def show(ctx: click.Context, config_path: Path | None, api_package: Path | None, main_api_file: Path | None, base_path: str | None):
    """Print the resource listing and every API declaration."""
    config = _resolve_config(config_path, api_package=api_package, main_api_file=main_api_file, base_path=base_path)
    if config.api_package is None or config.main_api_file is None:
        click.echo(ctx.get_help())
        return

    docs = _generate(config)
    click.echo(docs.resource_listing)
    for key, description in docs.api_descriptions.items():
        click.echo(f"\n## {key}\n")
        click.echo(description)
