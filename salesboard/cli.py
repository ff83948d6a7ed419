# salesboard/cli.py
import json
import logging

import click
from dotenv import load_dotenv

from salesboard.config import load_config
from salesboard.errors import ConfigError, SalesboardError
from salesboard.initializer import initialize_database
from salesboard.loaders import get_loader
from salesboard.metrics import combined_report

config_option = click.option(
    '--config', 'config_path',
    default='config.yaml',
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults are used when it does not exist)'
)
env_file_option = click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with SALESBOARD_* settings'
)
db_option = click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides config)'
)


def _setup(config_path, env_file, db_path):
    if env_file:
        load_dotenv(env_file)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))
    if db_path:
        cfg['db_path'] = db_path
    logging.basicConfig(
        level=str(cfg.get('log_level', 'INFO')).upper(),
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
    )
    return cfg


@click.group()
def main():
    """
    Product transaction dashboard: load a JSON snapshot into SQLite and
    serve monthly listings, statistics and chart data over HTTP.
    """


@main.command()
@config_option
@env_file_option
@db_option
@click.option('--host', default=None, help='Host to bind (overrides config)')
@click.option('--port', default=None, type=int, help='Port to bind (overrides config)')
def serve(config_path, env_file, db_path, host, port):
    """Run the dashboard API."""
    import uvicorn
    from salesboard.web import create_app

    cfg = _setup(config_path, env_file, db_path)
    host = host or cfg['host']
    port = port or int(cfg['port'])
    click.echo(f"Salesboard API running at http://{host}:{port}/api (db: {cfg['db_path']})")
    uvicorn.run(create_app(cfg), host=host, port=port, log_level=str(cfg['log_level']).lower())


@main.command('init-db')
@config_option
@env_file_option
@db_option
@click.option('--source', default=None, help='Snapshot URL or JSON file (overrides config)')
def init_db(config_path, env_file, db_path, source):
    """Replace the database contents with a fresh snapshot."""
    cfg = _setup(config_path, env_file, db_path)
    source = source or cfg['source_url']
    try:
        loader = get_loader(cfg['loader'], cfg)
        count = initialize_database(cfg['db_path'], source, loader)
    except SalesboardError as e:
        raise click.ClickException(f"Error initializing database: {e}")
    click.echo(f"Stored {count} transaction(s) in {cfg['db_path']}.")


@main.command()
@click.argument('month')
@config_option
@env_file_option
@db_option
def stats(month, config_path, env_file, db_path):
    """Print statistics and chart data for MONTH (1-12) as JSON."""
    cfg = _setup(config_path, env_file, db_path)
    click.echo(json.dumps(combined_report(cfg['db_path'], month), indent=2))
