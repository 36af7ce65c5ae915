"""
Flask CLI commands for platform maintenance.

Commands:
- flask cleanup-database: Delete all non-demo data (requires a superadmin email)
"""

import click
from flask import current_app
from scims.database import get_session
from scims.exceptions import ProtectedSetResolutionError
from scims.models import AppUser


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('cleanup-database')
    @click.option('--email', prompt=True, help='Email of the superadmin running the cleanup')
    @click.option('--yes', is_flag=True, default=False, help='Skip the confirmation prompt')
    def cleanup_database(email, yes):
        """Delete all non-demo businesses, stores, users and their data."""
        from scims.services import audit_service
        from scims.services.cleanup_service import run_database_cleanup
        from scims.blueprints.metrics import record_cleanup_metrics

        db_session = get_session()
        superadmin_role = current_app.config.get('SUPERADMIN_ROLE', 'superadmin')
        user = db_session.query(AppUser).filter_by(email=email, is_active=True).first()
        if not user or user.role != superadmin_role:
            click.echo(click.style('❌ Only an active superadmin can run the database cleanup.', fg='red'))
            raise SystemExit(1)

        if not yes:
            click.confirm(
                'This permanently deletes ALL non-demo data. Continue?',
                abort=True
            )

        try:
            report = run_database_cleanup(db_session, current_app.config)
        except ProtectedSetResolutionError as e:
            click.echo(click.style(f'❌ {e.message}', fg='red'))
            raise SystemExit(1)

        record_cleanup_metrics(report)
        audit_service.log_cleanup(db_session, user.id, report)

        for step, result in report['results'].items():
            if result.get('error'):
                click.echo(click.style(f'   {step}: ERROR {result["error"]}', fg='red'))
            else:
                click.echo(f'   {step}: {result["deleted"]}')

        color = 'yellow' if report['summary']['hasErrors'] else 'green'
        click.echo(click.style(f'\n{report["message"]}', fg=color, bold=True))

        if report['summary']['hasErrors']:
            raise SystemExit(1)
