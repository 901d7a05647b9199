# === FILE: site_mirror/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for SiteMirror.

Commands:
  mirror    Mirror the site into the target directory
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config file (optional)
  --url URL           Seed URL (overrides start_url)
  --path DIR          Mirror directory (overrides directory_path)
  --workers INT       Max concurrent fetches (default: CPU count)
  --timeout SEC       Per-request timeout
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)
  --log-format FORMAT Logging format string

mirror options:
  --report PATH       Save the crawl summary as JSON

Example:
  site-mirror --url https://example.com/ --path ./mirror --workers 8 mirror
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from site_mirror import __version__
from site_mirror.config import build_config
from site_mirror.crawler.models import CrawlOutcome
from site_mirror.engine import start_mirror
from site_mirror.errors import ConfigError
from site_mirror.logger import DEFAULT_FORMAT, configure
from site_mirror.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

#: exit status when the run was stopped by SIGINT/SIGTERM
EXIT_CANCELLED = 130


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMirror, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML/JSON config file.'
)
@click.option('--url', '-u', 'start_url', default=None, help='Seed URL to mirror.')
@click.option(
    '--path', '-p', 'directory_path',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory the mirror is written to.'
)
@click.option(
    '--workers', '-w', 'num_workers',
    type=click.IntRange(min=1),
    default=None,
    help='Maximum number of concurrent requests (default: CPU count).'
)
@click.option(
    '--timeout', 'fetch_timeout',
    type=float,
    default=None,
    help='Per-request timeout in seconds.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Log file (stdout only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, start_url, directory_path, num_workers, fetch_timeout, log_level, log_file, log_format):
    """SiteMirror command group."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = build_config(
            config_path,
            start_url=start_url,
            directory_path=directory_path,
            num_workers=num_workers,
            fetch_timeout=fetch_timeout,
        )
    except ConfigError as e:
        print_error(f'Configuration error: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('mirror', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--report', '-r', 'report_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Save the crawl summary as JSON'
)
@click.pass_context
def mirror(ctx, report_output):
    """Mirror the configured site."""
    cfg = ctx.obj['config']
    click.echo(f'Mirroring {cfg.start_url} into {cfg.directory_path}')
    try:
        report = asyncio.run(start_mirror(cfg))
    except Exception as e:
        print_error(f'Mirroring failed: {e}')

    click.echo(
        f'{report.outcome.value}: {report.visited} visited, {report.stored} written, '
        f'{report.unchanged} unchanged, {report.failed} failed in {report.rounds} round(s)'
    )

    if report_output:
        try:
            saved = render_json(report, report_output)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Cannot save JSON report: {e}')

    if report.outcome is CrawlOutcome.CANCELLED:
        sys.exit(EXIT_CANCELLED)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(json.dumps(cfg.model_dump(mode='json'), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
