"""
Flask CLI commands for database setup.

Commands:
- flask init-db: Create the services and orders tables
- flask seed-catalog: Upsert the bundled catalog into the services table
- flask setup-sql: Print the PostgreSQL DDL
"""

import click
from storefront.database import create_tables, get_session
from storefront.exceptions import PersistenceError
from storefront.services import catalog_service


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create missing tables."""
        create_tables()
        click.echo(click.style('✅ Tables created (existing tables left untouched).', fg='green'))

    @app.cli.command('seed-catalog')
    def seed_catalog_command():
        """Sync the bundled catalog into the database."""
        try:
            count = catalog_service.upsert(get_session(), catalog_service.seed_offerings())
        except PersistenceError as e:
            click.echo(click.style(f'❌ {e.message}', fg='red'))
            raise SystemExit(1)

        click.echo(click.style(f'✅ {count} services synced.', fg='green', bold=True))

    @app.cli.command('setup-sql')
    def setup_sql_command():
        """Print the DDL for the services and orders tables."""
        click.echo(catalog_service.setup_sql())
