"""flask system / flask users commands."""

import sqlalchemy as sa

from khadi_store.extensions import db
from khadi_store.models import Sale, User


def test_system_init_migrates_and_seeds(make_app):
    app = make_app()
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "init"])

    assert result.exit_code == 0, result.output
    assert "PASS Applied migrations: 0001_initial_schema, 0002_seed_reference_data" in result.output
    assert "PASS Reference data already present" in result.output
    assert "DONE" in result.output
    with app.app_context():
        assert db.session.query(Sale).count() == 0


def test_system_init_twice_is_noop(make_app):
    app = make_app()
    runner = app.test_cli_runner()
    runner.invoke(args=["system", "init"])

    result = runner.invoke(args=["system", "init"])

    assert result.exit_code == 0, result.output
    assert "PASS Schema already at latest version" in result.output


def test_system_init_with_demo(make_app):
    app = make_app()
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "init", "--demo"])

    assert result.exit_code == 0, result.output
    assert "PASS Created demonstration sale KHD000001" in result.output
    with app.app_context():
        assert db.session.query(Sale).count() == 1


def test_demo_flag_defaults_from_config(make_app):
    app = make_app(SEED_DEMO_SALE=True)
    result = app.test_cli_runner().invoke(args=["system", "init"])

    assert result.exit_code == 0, result.output
    assert "KHD000001" in result.output


def test_seed_demo_skips_when_sales_exist(make_app):
    app = make_app()
    runner = app.test_cli_runner()
    runner.invoke(args=["system", "init", "--demo"])

    result = runner.invoke(args=["system", "seed-demo"])

    assert result.exit_code == 0, result.output
    assert "SKIP" in result.output


def test_system_init_reports_bootstrap_failure(make_app, tmp_path):
    blocker = tmp_path / "occupied"
    blocker.write_text("x")
    app = make_app(SQLALCHEMY_DATABASE_URI=f"sqlite:///{blocker / 'store.sqlite3'}")

    result = app.test_cli_runner().invoke(args=["system", "init"])

    assert result.exit_code != 0
    assert "Database initialization failed" in result.output


def test_status_lists_pending_migrations(make_app):
    app = make_app()
    result = app.test_cli_runner().invoke(args=["system", "status"])

    assert result.exit_code == 0, result.output
    assert "WARN Pending migrations: 0001_initial_schema" in result.output


def test_users_create_and_list(make_app):
    app = make_app()
    runner = app.test_cli_runner()
    runner.invoke(args=["system", "init"])

    result = runner.invoke(args=[
        "users", "create",
        "--username", "staff1",
        "--email", "Staff1@KhadiStore.com",
        "--full-name", "Staff One",
        "--password", "Counter#2024",
    ])
    assert result.exit_code == 0, result.output
    assert "Role: Staff" in result.output

    listing = runner.invoke(args=["users", "list"])
    assert "admin" in listing.output
    assert "staff1@khadistore.com" in listing.output


def test_users_create_duplicate_username(make_app):
    app = make_app()
    runner = app.test_cli_runner()
    runner.invoke(args=["system", "init"])

    result = runner.invoke(args=[
        "users", "create",
        "--username", "admin",
        "--email", "other@khadistore.com",
        "--full-name", "Other Admin",
        "--password", "Counter#2024",
        "--role", "Admin",
    ])

    assert result.exit_code != 0
    assert "Username is already taken" in result.output
    with app.app_context():
        assert db.session.query(User).count() == 1


def test_users_create_weak_password(make_app):
    app = make_app()
    runner = app.test_cli_runner()
    runner.invoke(args=["system", "init"])

    result = runner.invoke(args=[
        "users", "create",
        "--username", "staff2",
        "--email", "staff2@khadistore.com",
        "--full-name", "Staff Two",
        "--password", "short",
    ])

    assert result.exit_code != 0
    assert "Password validation failed" in result.output


def test_system_init_targets_its_own_app(app, make_app):
    file_app = make_app()
    result = file_app.test_cli_runner().invoke(args=["system", "init"])

    assert result.exit_code == 0, result.output
    with file_app.app_context():
        assert "users" in sa.inspect(db.engine).get_table_names()
        assert db.session.query(User).count() == 1
    # the in-memory session database was neither stamped nor seeded
    with app.app_context():
        assert "alembic_version" not in sa.inspect(db.engine).get_table_names()
