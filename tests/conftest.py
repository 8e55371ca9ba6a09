"""
Pytest fixtures for Messe tests.

Data is created inside short app contexts and handed to tests as ids, so no
app context stays pushed while the test client issues requests (Flask-Login
caches the user on the app context).
"""

import pytest

from config import TestingConfig
from messe import create_app
from messe.extensions import db
from messe.models import Sector, StockItem, User

ADMIN_EMAIL = TestingConfig.ADMIN_EMAIL
ADMIN_PASSWORD = TestingConfig.ADMIN_PASSWORD
OPERATOR_EMAIL = "operador@messe.com"
OPERATOR_PASSWORD = "operador123"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Pushed app context, for tests that call services directly."""
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email, password):
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


@pytest.fixture
def admin_id(app):
    with app.app_context():
        return User.query.filter_by(email=ADMIN_EMAIL).first().id


@pytest.fixture
def admin_client(app):
    c = app.test_client()
    _login(c, ADMIN_EMAIL, ADMIN_PASSWORD)
    return c


@pytest.fixture
def operator_id(app):
    with app.app_context():
        u = User(name="Operador Teste", email=OPERATOR_EMAIL, role="OPERATOR")
        u.set_password(OPERATOR_PASSWORD)
        db.session.add(u)
        db.session.commit()
        return u.id


@pytest.fixture
def operator_client(app, operator_id):
    c = app.test_client()
    _login(c, OPERATOR_EMAIL, OPERATOR_PASSWORD)
    return c


@pytest.fixture
def make_item(app):
    """Create a StockItem directly (no ledger entry) and return its id."""

    def _make(name="Arroz", quantity=10, min_level=5, category="Mercearia", unit="kg"):
        with app.app_context():
            item = StockItem(name=name, category=category, unit=unit, quantity=quantity, min_level=min_level)
            db.session.add(item)
            db.session.commit()
            return item.id

    return _make


@pytest.fixture
def quantity_of(app):
    def _quantity(item_id):
        with app.app_context():
            return db.session.get(StockItem, item_id).quantity

    return _quantity


@pytest.fixture
def sector_id(app):
    with app.app_context():
        return Sector.query.filter_by(name="Cozinha").first().id
