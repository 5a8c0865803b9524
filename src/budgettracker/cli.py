"""Flask CLI commands for Budget Tracker."""

from __future__ import annotations

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("budgettracker-init-db")
    def budgettracker_init_db() -> None:
        """Create any missing tables."""

        from .extensions import get_services
        from .infra.database import init_database

        with app.app_context():
            services = get_services()
            init_database(services.engine)
        click.echo(f"Database ready: {services.config.DATABASE_URL}")

    @app.cli.command("budgettracker-check-mail")
    def budgettracker_check_mail() -> None:
        """Open an SMTP connection with the configured credentials."""

        from .extensions import get_services

        with app.app_context():
            result = get_services().mailer.verify_connection()
        if result.success:
            click.echo(f"Mail OK: {result.message}")
        else:
            raise click.ClickException(f"Mail check failed: {result.message}")

    @app.cli.command("budgettracker-logout-user")
    @click.argument("email")
    def budgettracker_logout_user(email: str) -> None:
        """End every active session of the account with EMAIL."""

        from .extensions import get_services
        from .services.users import normalize_email

        with app.app_context():
            services = get_services()
            user = services.users.get_by_email(normalize_email(email))
            if user is None:
                raise click.ClickException(f"No account registered with {email}")
            count = services.authenticator.logout_all(user.id)
        click.echo(f"Ended {count} session(s) for {user.email}")
