"""
Command-line interface for the SBOM Analyzer.
"""

import copy
import json
import sys
from pathlib import Path
from typing import List, Optional, Dict, Any

import click
import yaml

from . import __version__
from .config import get_config_manager, AppConfig
from .error_handling import SBOMAnalyzerError, SelectionLimitError
from .logging import setup_logging, close_logging, LoggerConfig
from .orchestrator import OrchestrationManager

VERBOSITY_LEVELS = {1: "INFO"}


@click.group()
@click.version_option(version=__version__)
@click.option(
    '--config', '-c',
    type=click.Path(exists=True, path_type=Path),
    help='Path to configuration file'
)
@click.option(
    '--verbose', '-v',
    count=True,
    help='Increase verbosity (use -v or -vv)'
)
@click.option(
    '--json-logs/--no-json-logs',
    default=False,
    help='Emit structured JSON log lines'
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: int, json_logs: bool) -> None:
    """
    SBOM Analyzer - Compare simulated Syft and OWASP SBOMs for GitHub repositories.

    Repository metadata and manifests are fetched from the GitHub REST API;
    SBOMs are generated in CycloneDX and SPDX formats.
    """
    ctx.ensure_object(dict)

    config_manager = get_config_manager(config)
    app_config = config_manager.get_config()

    setup_cli_logging(app_config, verbose, json_logs)
    ctx.call_on_close(close_logging)

    ctx.obj['config_manager'] = config_manager
    ctx.obj['verbose'] = verbose

    if verbose > 0:
        click.echo(f"SBOM Analyzer v{__version__}")


@cli.command()
@click.option(
    '--repos', '-r',
    multiple=True,
    required=True,
    help='GitHub repository URL or owner/repo slug (repeatable)'
)
@click.option(
    '--token',
    envvar='GITHUB_TOKEN',
    help='GitHub personal access token'
)
@click.option(
    '--tool', '-t',
    type=click.Choice(['syft', 'owasp'], case_sensitive=False),
    multiple=True,
    help='Scanner(s) to run (defaults to config)'
)
@click.option(
    '--format', '-f',
    type=click.Choice(['cyclonedx', 'spdx'], case_sensitive=False),
    multiple=True,
    help='SBOM format(s) to export (defaults to config)'
)
@click.option(
    '--output', '-o',
    type=click.Path(file_okay=False, path_type=Path),
    help='Output directory for SBOMs and reports'
)
@click.option(
    '--report/--no-report',
    default=True,
    help='Write the JSON and text analysis report'
)
@click.option(
    '--pacing/--no-pacing',
    default=None,
    help='Pause between repositories while scanning'
)
@click.option(
    '--strict/--no-strict',
    default=False,
    help='Fail instead of substituting mock data when GitHub cannot be reached'
)
@click.pass_context
def analyze(
    ctx: click.Context,
    repos: List[str],
    token: Optional[str],
    tool: List[str],
    format: List[str],
    output: Optional[Path],
    report: bool,
    pacing: Optional[bool],
    strict: bool
) -> None:
    """
    Fetch repositories, run the simulated scanners and export the results.

    Examples:

        # Analyze two repositories with both scanners
        sbom-analyzer analyze -r facebook/react -r https://github.com/vuejs/vue

        # Syft only, SPDX only, no pauses
        sbom-analyzer analyze -r expressjs/express -t syft -f spdx --no-pacing
    """
    verbose = ctx.obj.get('verbose', 0)
    config = build_run_config(ctx.obj['config_manager'].get_config(), output, pacing, strict)

    orchestrator = OrchestrationManager(config)
    if token:
        orchestrator.set_token(token)

    tools = list(tool) or list(config.scanning.tools)
    formats = list(format) or list(config.output.formats)
    errors: List[str] = []
    output_files: List[Path] = []

    orchestrator.start_rate_limit_monitor()
    try:
        for url in repos:
            try:
                record = orchestrator.add_repository(url)
            except SBOMAnalyzerError as e:
                errors.append(f"{url}: {e.message}")
                continue

            if record is None:
                click.echo(f"Repository already added: {url}")
                continue

            suffix = " (mock data)" if record.is_mock else ""
            click.echo(f"Added {record.full_name}{suffix}")

            try:
                orchestrator.toggle_selection(record.id)
            except SelectionLimitError as e:
                click.echo(f"Skipping {record.full_name}: {e.message}", err=True)

        if not orchestrator.catalog.selected_ids:
            errors.append("No repositories selected")
        else:
            for tool_name in tools:
                scanned = orchestrator.run_tool(tool_name)
                click.echo(f"{tool_name.upper()}: scanned {scanned} repositories")

                for sbom_format in formats:
                    output_files.extend(orchestrator.download_all_sboms(tool_name, sbom_format))

            if report:
                output_files.extend(orchestrator.generate_report().values())

    except SBOMAnalyzerError as e:
        errors.append(e.message)
    finally:
        orchestrator.stop_rate_limit_monitor()

    display_results(orchestrator.get_summary(), output_files, errors, verbose)
    sys.exit(1 if errors else 0)


@cli.command()
@click.option(
    '--format', '-f',
    type=click.Choice(['table', 'json', 'yaml'], case_sensitive=False),
    default='table',
    help='Output format for configuration display'
)
@click.pass_context
def config(ctx: click.Context, format: str) -> None:
    """
    Display current configuration settings.

    Shows the effective configuration including defaults, file settings
    and environment variable overrides. The GitHub token is masked.
    """
    config_dict = ctx.obj['config_manager'].get_config().to_dict(mask_secrets=True)

    if format == 'json':
        click.echo(json.dumps(config_dict, indent=2, default=str))
    elif format == 'yaml':
        click.echo(yaml.dump(config_dict, default_flow_style=False))
    else:
        display_config_table(config_dict)


def setup_cli_logging(app_config: AppConfig, verbose: int, json_logs: bool) -> None:
    """Set up logging from config, with -v raising the console level."""
    level = app_config.logging.level if verbose == 0 else VERBOSITY_LEVELS.get(verbose, "DEBUG")

    setup_logging(LoggerConfig(
        level=level,
        file_path=app_config.logging.file,
        format_string=app_config.logging.format,
        max_file_size=app_config.logging.max_file_size,
        backup_count=app_config.logging.backup_count,
        enable_structured=json_logs
    ))


def build_run_config(
    base_config: AppConfig,
    output: Optional[Path],
    pacing: Optional[bool],
    strict: bool
) -> AppConfig:
    """Copy the loaded configuration and apply CLI overrides to the copy."""
    config = copy.deepcopy(base_config)

    if output:
        config.output.directory = str(output)
    if pacing is not None:
        config.scanning.pacing_enabled = pacing
    if strict:
        config.catalog.mock_fallback = False

    return config


def display_results(summary: Dict[str, Any], output_files: List[Path], errors: List[str], verbose: int) -> None:
    """Display analysis results."""
    click.echo("\n" + "=" * 60)
    click.echo("SBOM ANALYSIS RESULTS")
    click.echo("=" * 60)

    click.echo(f"Repositories added: {summary['repositories']}")
    click.echo(f"Repositories selected: {summary['selected']}")
    for tool_name, status in summary['tool_statuses'].items():
        click.echo(f"{tool_name.upper()}: {status} ({summary['artifacts'][tool_name]} repositories with SBOMs)")

    comparison = summary.get('comparison')
    if comparison:
        click.echo("\nTool Comparison:")
        click.echo(f"  - Syft dependencies: {comparison['syftTotal']}")
        click.echo(f"  - OWASP dependencies: {comparison['owaspTotal']}")
        click.echo(f"  - Common: {len(comparison['common'])}")
        click.echo(f"  - Missing: {len(comparison['missing'])}")

    if verbose > 0:
        click.echo(f"\nRate limit: {summary['rate_limit']['formatted']}")

    if errors:
        click.echo(f"\nErrors encountered: {len(errors)}")
        for error in errors[:5]:
            click.echo(f"  - {error}")
        if len(errors) > 5:
            click.echo(f"  ... and {len(errors) - 5} more errors")
    else:
        click.echo("Errors: None")

    if output_files:
        click.echo("\nOutput files generated:")
        for file_path in output_files:
            click.echo(f"  - {file_path}")

    click.echo("=" * 60)


def display_config_table(config_dict: Dict[str, Any]) -> None:
    """Display configuration in table format."""
    click.echo("\nCurrent Configuration:")
    click.echo("-" * 50)

    for section_name, section in config_dict.items():
        click.echo(f"\n[{section_name}]")
        for key, value in section.items():
            click.echo(f"  {key}: {value}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
