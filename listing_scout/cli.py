# === FILE: listing_scout/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of ListingScout.

Commands:
  harvest   Discover the page count, fetch every page and save the dataset
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

harvest options:
  --output PATH       CSV dataset path (overrides config.output)
  --json PATH         Also save a JSON report
  --html PATH         Also save an HTML report
  --template DIR      Directory with a custom dataset.html.j2
  --concurrency INT   Cap on in-flight page fetches
  --retries INT       Retry budget per request

Example:
  listing-scout --config configs/default.yaml harvest --output pages.csv --json pages.json
"""
import asyncio
import sys
from pathlib import Path

import click

from listing_scout import __version__
from listing_scout.config import load_config
from listing_scout.engine import start_harvest
from listing_scout.logger import init_logging, logger
from listing_scout.report.csv_report import render_csv
from listing_scout.report.html_report import render_html
from listing_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='ListingScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Log file path (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """ListingScout command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('harvest', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--output', '-o', 'csv_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='CSV dataset path (overrides config output)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Also save a JSON report'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Also save an HTML report'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with a custom dataset.html.j2'
)
@click.option(
    '--concurrency', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Cap on in-flight page fetches'
)
@click.option(
    '--retries', 'retries',
    type=click.IntRange(min=0),
    default=None,
    help='Retry budget per request'
)
@click.pass_context
def harvest(ctx, csv_output, json_output, html_output, template_dir, concurrency, retries):
    """Harvest the whole listing and save the dataset."""
    cfg = ctx.obj['config']
    overrides = {}
    if csv_output is not None:
        overrides['output'] = csv_output
    if concurrency is not None:
        overrides['concurrency'] = concurrency
    if retries is not None:
        overrides['retry_times'] = retries
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    click.echo(f'Harvesting {cfg.base_url}')
    try:
        dataset = asyncio.run(start_harvest(cfg))
    except Exception as e:
        logger.error("Harvest aborted: %s", e)
        print_error(f'Harvest failed: {e}')

    click.echo(f'{dataset.last_page} pages found')
    if dataset.failed_pages:
        click.echo(f'Failed pages: {", ".join(map(str, dataset.failed_pages))}')

    try:
        saved_csv = render_csv(dataset, cfg.output)
        click.echo(f'CSV dataset: {saved_csv} ({len(dataset)} records)')
    except OSError as e:
        print_error(f'Failed to save CSV: {e}')

    if json_output:
        try:
            saved_json = render_json(dataset, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Failed to save JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(dataset, html_output, template_dir)
            click.echo(f'HTML report: {saved_html}')
        except OSError as e:
            print_error(f'Failed to save HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
