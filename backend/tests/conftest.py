"""
Pytest fixtures for Khadi Store backend tests.

Provides an in-memory database built with create_all(), per-test cleanup,
seeded reference data, and a factory for file-backed apps that go through
the real Alembic migrations.
"""

from decimal import Decimal

import pytest
from khadi_store import create_app
from khadi_store.extensions import db
from khadi_store.models import Return, ReturnItem, Sale, SaleItem
from khadi_store.services.bootstrap_service import seed_reference_data


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()

    # No context stays pushed between tests: CLI runners and make_app() apps
    # must resolve their own current_app.
    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def seeded(db_session):
    """Reference rows (categories, admin, settings, products, customers)."""
    seed_reference_data()
    return db_session


@pytest.fixture
def make_app(tmp_path):
    """
    Factory for apps backed by a SQLite file under tmp_path.

    These start with an empty database so Alembic migrations can be exercised.
    """
    def _make(name="store.sqlite3", **overrides):
        config = {
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / name}",
        }
        config.update(overrides)
        return create_app(config)

    return _make


@pytest.fixture
def make_sale(seeded):
    """Create a sale with one line per (product_id, quantity) pair."""
    counter = {"n": 0}

    def _make(lines=((1, "1"),), invoice_number=None, customer_id=None):
        counter["n"] += 1
        sale = Sale(
            invoice_number=invoice_number or f"TST{counter['n']:06d}",
            customer_id=customer_id,
            payment_method="Cash",
        )
        for product_id, qty in lines:
            sale.items.append(SaleItem(
                product_id=product_id,
                product_name=f"Product {product_id}",
                quantity=Decimal(qty),
                unit_price=Decimal("100.00"),
                gst_rate=Decimal("5.00"),
            ))
        for item in sale.items:
            item.clear_discount()
        sale.recalculate_totals()
        db.session.add(sale)
        db.session.commit()
        return sale

    return _make


@pytest.fixture
def make_return(seeded):
    """Create a return covering the given sale items (full quantity)."""
    counter = {"n": 0}

    def _make(sale, items=None, return_number=None):
        counter["n"] += 1
        ret = Return(
            return_number=return_number or f"RET{counter['n']:06d}",
            sale_id=sale.id,
            reason="Size exchange",
        )
        for item in items if items is not None else sale.items:
            ret.items.append(ReturnItem(
                sale_item_id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                return_quantity=item.quantity,
                unit_price=item.unit_price,
                gst_rate=item.gst_rate,
                gst_amount=item.gst_amount,
                line_total=item.line_total,
            ))
        db.session.add(ret)
        db.session.commit()
        return ret

    return _make
