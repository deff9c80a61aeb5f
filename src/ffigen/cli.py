"""
ffigen - Command line interface
"""
import sys
import logging
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .core.type_resolver import TypeResolver, TYPE_MAP
from .errors import InvalidArgumentError
from .orchestrator.generation_orchestrator import GenerationOrchestrator

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)

logger = logging.getLogger(__name__)
console = Console()

# Resolved against the working directory
DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"✓ Loaded configuration from: {config_path}")
        return config
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}")
        return {}


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    ffigen - Dart FFI bindings generator

    Reads YAML descriptions of native libraries and writes Dart source
    files declaring their structs and functions through dart:ffi.
    """
    pass


@cli.command()
@click.option(
    '--input', '-i',
    required=True,
    type=click.Path(exists=True),
    help='Description file or directory of description files'
)
@click.option(
    '--output', '-o',
    type=click.Path(),
    default=None,
    help='Output directory for generated files'
)
@click.option(
    '--config', '-c',
    type=click.Path(exists=True),
    help='Path to configuration YAML file'
)
@click.option(
    '--dry-run',
    is_flag=True,
    help='Generate without writing files'
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable verbose logging'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode with detailed logging'
)
def generate(
    input: str,
    output: Optional[str],
    config: Optional[str],
    dry_run: bool,
    verbose: bool,
    debug: bool
):
    """
    Generate Dart bindings from library descriptions.

    Example:
        ffigen generate -i descriptions/ -o lib/src/generated
    """
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose:
        logging.getLogger().setLevel(logging.INFO)

    console.print("\n[bold cyan]FFI Bindings Generator[/bold cyan]")
    console.print(f"[dim]Input: {escape(input)}[/dim]\n")

    try:
        if config:
            yaml_config = load_config_file(config)
        elif DEFAULT_CONFIG_PATH.exists():
            yaml_config = load_config_file(str(DEFAULT_CONFIG_PATH))
        else:
            yaml_config = {}

        generation_config = dict(yaml_config.get('generator', {}))
        if output:
            generation_config['output_dir'] = output
        if dry_run:
            generation_config['dry_run'] = True

        orchestrator = GenerationOrchestrator(config=generation_config)
        report = orchestrator.generate_all(input_path=input)

        console.print("\n[bold green]Generation Complete![/bold green]")
        console.print(report.get_summary())

        if report.failed_files == 0:
            sys.exit(0)
        else:
            console.print(f"\n[yellow]Warning: {report.failed_files} files failed to generate[/yellow]")
            for result in orchestrator.get_failed_results():
                for issue in result.issues:
                    console.print(f"  {escape(str(issue))}")
            sys.exit(1)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if debug:
            console.print_exception()
        sys.exit(1)


@cli.command()
def types():
    """Display the built-in type table."""
    table = Table(title="Description Types")
    table.add_column("Name", style="cyan")
    table.add_column("Native type", style="green")
    table.add_column("Dart type", style="magenta")

    for name, entry in TYPE_MAP.items():
        table.add_row(name, entry.native, entry.host)

    console.print(table)
    console.print("[dim]Prefix any type with '*' for a pointer; other names pass through unchanged.[/dim]")


@cli.command()
@click.argument('name')
def resolve(name: str):
    """
    Show how a description type NAME resolves.

    Example:
        ffigen resolve '**uint8'
    """
    resolver = TypeResolver()
    try:
        console.print(f"[green]Dart type:[/green] {resolver.resolve_host_type(name)}")
        console.print(f"[green]Native type:[/green] {resolver.resolve_native_type(name)}")
    except InvalidArgumentError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    annotation = resolver.resolve_annotation_type(name)
    console.print(f"[green]Annotation:[/green] {annotation if annotation else '(none)'}")

    for spec in sorted(resolver.imports, key=lambda item: item.sort_key):
        console.print(f"[green]Requires:[/green] {spec.to_directive()}")


@cli.command()
def info():
    """Display system information."""
    console.print("\n[bold cyan]System Information[/bold cyan]\n")

    console.print(f"[green]ffigen Version:[/green] {__version__}")
    console.print(f"[green]Python Version:[/green] {sys.version}")
    console.print(f"[green]Platform:[/green] {sys.platform}")
    console.print(f"[green]Known types:[/green] {len(TYPE_MAP)}")
    console.print(f"[green]Default config:[/green] {DEFAULT_CONFIG_PATH} "
                  f"({'found' if DEFAULT_CONFIG_PATH.exists() else 'not found'})")
    console.print("\n")


if __name__ == '__main__':
    cli()
