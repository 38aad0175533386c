#!/usr/bin/env python3
"""
sqlmask CLI Tool
Command-line interface for literal formatting, alias inspection, obfuscation and sensitive data scans.
"""

import logging
import sys
from typing import Optional

import click
from tabulate import tabulate

from sqlmask import __version__
from sqlmask.core.alias_resolver import resolve_aliases
from sqlmask.core.config import ConfigManager, MaskingConfig, create_default_config_file
from sqlmask.core.datasource import SqlAlchemyDataSource
from sqlmask.core.dialects import get_dialect, supported_dialects
from sqlmask.core.manager import SecurityManager
from sqlmask.core.obfuscation import ObfuscationMethod, ObfuscationRule, apply_obfuscation
from sqlmask.core.scanner import DEFAULT_SENSITIVE_PATTERNS
from sqlmask.core.settings import SettingsStore


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _load_config(ctx) -> MaskingConfig:
    """The --config file when given, otherwise SQLMASK_* environment variables."""
    return ConfigManager(ctx.obj.get('config_path')).load_config()


def _database_url(config: MaskingConfig, database_url: Optional[str]) -> str:
    url = database_url or config.database_url
    if not url:
        click.echo("❌ No database URL: pass --url or set database_url in the configuration", err=True)
        sys.exit(1)
    return url


def _settings_for(config: MaskingConfig, sample_size: Optional[int] = None) -> SettingsStore:
    store = SettingsStore()
    config.apply(store)
    if sample_size is not None:
        store.sample_size = sample_size
    return store


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """sqlmask - Dialect-aware SQL literals and column masking."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config


@cli.command('format')
@click.argument('value', required=False)
@click.option('--dialect', '-d', type=click.Choice(supported_dialects(), case_sensitive=False),
              help='Target database type (default: configured dialect)')
@click.option('--type', 'type_name', help='Declared column type, e.g. VARCHAR(20)')
@click.option('--null', 'is_null', is_flag=True, help='Format a NULL value')
@click.pass_context
def format_value(ctx, value, dialect, type_name, is_null):
    """Render VALUE as a SQL literal for a column type."""
    try:
        dialect = dialect or _load_config(ctx).dialect
        if not dialect:
            click.echo("❌ No dialect: pass --dialect or set dialect in the configuration", err=True)
            sys.exit(1)

        data = None if is_null or value is None else value
        click.echo(get_dialect(dialect).format_data(data, type_name))
    except Exception as e:
        click.echo(f"❌ Error formatting value: {e}", err=True)
        sys.exit(1)


@cli.command('aliases')
@click.argument('sql')
def show_aliases(sql):
    """Show the alias graph of a SELECT statement."""
    graph = resolve_aliases(sql)
    if not graph:
        click.echo("No aliases found")
        return

    table_data = [[alias, ", ".join(graph.lineage(alias))] for alias in sorted(graph)]
    click.echo(tabulate(table_data, headers=['Alias', 'Origins (nearest first)'], tablefmt='grid'))


@cli.command('obfuscate')
@click.argument('value')
@click.option('--method', '-m', required=True,
              type=click.Choice([method.value for method in ObfuscationMethod], case_sensitive=False),
              help='Obfuscation method')
@click.option('--start', default=0, help='Start index (MASK, TRUNCATE)')
@click.option('--end', default=0, help='End index (MASK, TRUNCATE)')
@click.option('--mask-char', default='*', help='Mask character (MASK)')
@click.option('--regex', help='Pattern to replace (REPLACE)')
@click.option('--replacement', help='Replacement text (REPLACE)')
@click.option('--range', 'bucket', default=0, help='Bucket width (GENERALIZE)')
@click.option('--noise-range', default=0.0, help='Noise range (ADD_NOISE)')
def obfuscate_value(value, method, start, end, mask_char, regex, replacement, bucket, noise_range):
    """Apply one obfuscation rule to VALUE."""
    try:
        rule = ObfuscationRule(
            method=method,
            start=start,
            end=end,
            mask_char=mask_char,
            regex=regex,
            replacement=replacement,
            range=bucket,
            noise_range=noise_range
        )
        click.echo(apply_obfuscation(value, rule))
    except Exception as e:
        click.echo(f"❌ Error applying obfuscation: {e}", err=True)
        sys.exit(1)


@cli.command('scan')
@click.argument('table_name')
@click.option('--url', '-u', 'database_url', help='SQLAlchemy database URL (default: configured database_url)')
@click.option('--schema', help='Schema name')
@click.option('--regex', '-r', 'regex_list', multiple=True, help='Sensitive data pattern (repeatable)')
@click.option('--column', 'columns', multiple=True, help='Column to scan (repeatable, default all)')
@click.option('--sample-size', type=int, help='Values sampled per column')
@click.pass_context
def scan_table(ctx, table_name, database_url, schema, regex_list, columns, sample_size):
    """Scan a table for sensitive values."""
    try:
        config = _load_config(ctx)
        url = _database_url(config, database_url)
        patterns = list(regex_list) or config.sensitive_patterns or list(DEFAULT_SENSITIVE_PATTERNS.values())

        manager = SecurityManager(SqlAlchemyDataSource(url), _settings_for(config, sample_size))
        findings = manager.scan_table_data(schema, table_name, patterns, list(columns) or None)

        if not findings:
            click.echo("✅ No sensitive data found")
            return

        table_data = [
            [finding.column_name, finding.regex, len(finding.match_data),
             ", ".join(str(value) for value in finding.match_data)]
            for finding in findings
        ]
        click.echo(tabulate(table_data, headers=['Column', 'Pattern', 'Matches', 'Samples'], tablefmt='grid'))

    except Exception as e:
        click.echo(f"❌ Error scanning table: {e}", err=True)
        sys.exit(1)


@cli.command('query')
@click.argument('sql')
@click.option('--url', '-u', 'database_url', help='SQLAlchemy database URL (default: configured database_url)')
@click.option('--limit', type=int, help='Maximum rows to show')
@click.option('--no-rename', is_flag=True, help='Match rules on output column names only')
@click.pass_context
def query_with_mask(ctx, sql, database_url, limit, no_rename):
    """Run SQL and show masked rows using the configured obfuscation rules."""
    try:
        config = _load_config(ctx)
        if not config.obfuscation_rules:
            click.echo("❌ No obfuscation_rules configured (--config)", err=True)
            sys.exit(1)
        url = _database_url(config, database_url)

        store = _settings_for(config)
        if no_rename:
            store.handle_rename = False

        manager = SecurityManager(SqlAlchemyDataSource(url), store)
        rows = manager.query_with_mask(sql, config.obfuscation_rules, limit)
        if not rows:
            click.echo("No rows returned")
            return
        click.echo(tabulate(rows, headers='keys', tablefmt='grid'))

    except Exception as e:
        click.echo(f"❌ Error running query: {e}", err=True)
        sys.exit(1)


# Configuration Commands
@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command('create-default')
@click.option('--output', '-o', default='sqlmask_config.yaml', help='Output file path')
def create_default_config(output):
    """Create default configuration file."""
    try:
        create_default_config_file(output)
        click.echo(f"✅ Default configuration created: {output}")
    except Exception as e:
        click.echo(f"❌ Error creating configuration: {e}", err=True)
        sys.exit(1)


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def validate_config(config_file):
    """Validate configuration file."""
    try:
        masking_config = ConfigManager(config_file).load_config()
        click.echo(f"✅ Configuration is valid: {config_file}")
        click.echo(f"   Rules: {len(masking_config.obfuscation_rules)}")
        click.echo(f"   Patterns: {len(masking_config.sensitive_patterns)}")
    except Exception as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)


@cli.command('dialects')
def list_dialects():
    """List supported database types."""
    for name in supported_dialects():
        click.echo(name)


@cli.command('version')
def version():
    """Show version information."""
    click.echo(f"sqlmask v{__version__}")


if __name__ == '__main__':
    cli()
