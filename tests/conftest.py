import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from food_service.config import Settings
from food_service.database import create_tables
from food_service.errors import PaymentGatewayError
from food_service.main import create_app
from food_service.models import Food, User
from food_service.payments import CheckoutSession


class FakeGateway:
    """Records checkout session requests instead of calling the provider."""

    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def create_checkout_session(self, line_items, success_url, cancel_url):
        self.calls.append({"line_items": line_items, "success_url": success_url, "cancel_url": cancel_url})
        if self.fail:
            raise PaymentGatewayError("Payment provider unavailable")
        return CheckoutSession(id=f"cs_test_{len(self.calls)}", url=f"https://checkout.test/pay/cs_test_{len(self.calls)}")


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", frontend_url="http://shop.test", stripe_secret_key="sk_test")


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    create_tables(factory)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def failing_gateway():
    return FakeGateway(fail=True)


@pytest.fixture
def app(settings, gateway, session_factory):
    return create_app(settings=settings, gateway=gateway, session_factory=session_factory)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_food(db):
    def _make(name="Greek Salad", price=12.0, category="Salad"):
        food = Food(name=name, description=f"{name} description", price=price, category=category)
        db.add(food)
        db.commit()
        db.refresh(food)
        return food
    return _make


@pytest.fixture
def make_user(db):
    def _make(name="Asha", email="asha@example.com", cart_data=None):
        user = User(name=name, email=email, cart_data=cart_data or {})
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def address():
    return {
        "firstName": "Asha",
        "lastName": "Rao",
        "email": "asha@example.com",
        "street": "12 MG Road",
        "city": "Bengaluru",
        "state": "KA",
        "zipcode": "560001",
        "country": "India",
        "phone": "9999999999",
    }
