import pytest
from flask.testing import FlaskClient

from shopcart import create_app


@pytest.fixture
def app():
    """Fresh application with its own in-memory database and empty cart."""
    app = create_app("testing")
    yield app


@pytest.fixture
def test_client(app) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield


@pytest.fixture
def catalog(app):
    return app.extensions["shopcart"]["catalog"]


@pytest.fixture
def store(app, app_context):
    return app.extensions["shopcart"]["store"]


@pytest.fixture
def cart_service(app, app_context):
    return app.extensions["shopcart"]["cart"]


@pytest.fixture
def checkout_service(app, app_context):
    return app.extensions["shopcart"]["checkout"]
