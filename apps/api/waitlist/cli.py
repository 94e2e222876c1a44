"""CLI tools for waitlist administration."""

import click

from waitlist.core.exceptions import ValidationError
from waitlist.db.session import SessionLocal
from waitlist.services import account_service


@click.group()
def cli():
    """Waitlist CLI tools."""
    pass


@cli.command()
@click.option("--username", required=True, help="Login handle")
@click.option("--email", required=True, help="Account email address")
@click.option("--password", required=True, prompt=True, hide_input=True, help="Account password")
@click.option("--name", default=None, help="Display name")
@click.option("--company-name", default=None, help="Company name")
def create_account(username: str, email: str, password: str, name: str | None, company_name: str | None):
    """
    Create an account without going through the registration endpoint.

    Example:
        python -m waitlist.cli create-account --username acme --email "owner@acme.com"
    """
    db = SessionLocal()
    try:
        account = account_service.create_account(
            db,
            username=username,
            email=email,
            password=password,
            name=name,
            company_name=company_name,
        )
        click.echo(f"✓ Created account: {account.username}")
        click.echo(f"  ID: {account.id}")
        click.echo(f"  Email: {account.email}")
    except ValidationError as e:
        db.rollback()
        click.echo(f"❌ {e.detail}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--username", required=True, help="Account to revoke sessions for")
def revoke_sessions(username: str):
    """
    Revoke all sessions for an account by bumping its token_version.

    Example:
        python -m waitlist.cli revoke-sessions --username acme
    """
    db = SessionLocal()
    try:
        account = account_service.get_account_by_username(db, username)
        if not account:
            click.echo(f"❌ Account not found: {username}")
            raise SystemExit(1)

        old_version = account.token_version
        account_service.revoke_sessions(db, account)

        click.echo(f"✓ Revoked all sessions for {username}")
        click.echo(f"  Token version: {old_version} → {account.token_version}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
