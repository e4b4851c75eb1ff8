# Overview: Flask CLI command groups for bootstrap, seeding, inspection, and staff accounts.

# backend/khadi_store/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to khadi_store (PowerShell: $env:FLASK_APP="khadi_store").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init [--demo]
#   Migrate to head, seed reference rows, optionally add the demonstration sale.
# - python -m flask system seed
#   Seed reference rows only (categories, admin user, settings, products, customers).
# - python -m flask system seed-demo
#   Add the demonstration sale KHD000001 if no sale exists.
# - python -m flask system status
#   Show pending migrations and row counts.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
# - python -m flask users create --username staff1 --email staff1@khadistore.com --full-name "Staff One" --role Staff

import click
import sqlalchemy as sa
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .errors import SchemaError
from .models import Category, Customer, Product, Return, Sale, Setting, User, ROLE_ADMIN, ROLE_STAFF
from .services import bootstrap_service
from .services.auth_service import create_user, PasswordValidationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--demo/--no-demo', default=None, help='Insert the demonstration sale (defaults to SEED_DEMO_SALE config)')
@with_appcontext
def init_system(demo):
    """
    Initialize the store database.

    - Applies pending migrations (no-op when current)
    - Ensures the reference rows exist (idempotent)
    - Optionally inserts the demonstration sale

    SECURITY: The seeded admin password is Admin@123. Change it immediately!
    """
    click.echo("START Initializing Khadi Store database...")

    try:
        applied = bootstrap_service.initialize_database(current_app._get_current_object())
    except SchemaError as exc:
        raise click.ClickException(str(exc))

    if applied:
        click.echo(f"PASS Applied migrations: {', '.join(applied)}")
    else:
        click.echo("PASS Schema already at latest version")

    summary = bootstrap_service.seed_reference_data()
    _echo_seed_summary(summary)

    if demo is None:
        demo = current_app.config.get("SEED_DEMO_SALE", False)
    if demo:
        _seed_demo()

    click.echo("\nDONE Database initialization completed")


@system_group.command('seed')
@with_appcontext
def seed_reference():
    """Ensure the reference rows exist (safe to run repeatedly)."""
    summary = bootstrap_service.seed_reference_data()
    _echo_seed_summary(summary)


@system_group.command('seed-demo')
@with_appcontext
def seed_demo():
    """Insert the demonstration sale if the sales table is empty."""
    _seed_demo()


def _seed_demo():
    try:
        sale = bootstrap_service.seed_demo_sale()
    except SchemaError as exc:
        raise click.ClickException(f"Demonstration sale not created: {exc}")
    if sale is None:
        click.echo("SKIP Sales already exist; demonstration sale not added")
    else:
        click.echo(f"PASS Created demonstration sale {sale.invoice_number} (total {sale.total_amount})")


def _echo_seed_summary(summary: dict) -> None:
    inserted = {table: count for table, count in summary.items() if count}
    if not inserted:
        click.echo("PASS Reference data already present")
        return
    for table, count in inserted.items():
        click.echo(f"PASS Seeded {count} row(s) into {table}")


@system_group.command('status')
@with_appcontext
def status():
    """Show schema version and table row counts."""
    pending = bootstrap_service.pending_migrations(current_app._get_current_object())
    click.echo("\n" + "="*60)
    if pending:
        click.echo(f"WARN Pending migrations: {', '.join(pending)}")
    else:
        click.echo("PASS Schema at latest version")
    click.echo("="*60)
    existing = set(sa.inspect(db.engine).get_table_names())
    for label, model in (
        ("Categories", Category),
        ("Products", Product),
        ("Customers", Customer),
        ("Sales", Sale),
        ("Returns", Return),
        ("Users", User),
        ("Settings", Setting),
    ):
        if model.__tablename__ not in existing:
            click.echo(f"{label:<12} {'missing':>8}")
            continue
        click.echo(f"{label:<12} {db.session.query(model).count():>8}")
    click.echo("="*60 + "\n")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User management commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--email', prompt=True, help='Email address')
@click.option('--full-name', prompt=True, help='Full name')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice([ROLE_ADMIN, ROLE_STAFF]), default=ROLE_STAFF, show_default=True, help='Role')
@with_appcontext
def create_user_cli(username, email, full_name, password, role):
    """Create a staff account."""
    try:
        user = create_user(username=username, email=email, password=password, full_name=full_name, role=role)
    except PasswordValidationError as exc:
        raise click.ClickException(f"Password validation failed: {exc}")
    except SchemaError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"PASS Created user {user.username} (ID: {user.id}, Role: {user.role})")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with role and active status."""
    users = db.session.query(User).order_by(User.id.asc()).all()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Username':<20} {'Email':<30} {'Role':<8} {'Active'}")
    click.echo("="*90)
    for user in users:
        active_str = "Yes" if user.is_active else "No"
        click.echo(f"{user.id:<5} {user.username:<20} {user.email:<30} {user.role:<8} {active_str}")
    click.echo("="*90 + "\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
