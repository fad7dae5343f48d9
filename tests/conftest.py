"""Pytest fixtures: one app on an in-memory mongomock database, wiped after every test."""
import itertools
import os
from datetime import datetime, timedelta

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import mongomock
import pytest
from mongoengine import disconnect

from app import create_app
from Models.orderModel import Order, OrderStatus
from Models.storeItemModel import StoreItem
from Models.userModel import User, Role
from Utils.jwt_utils import create_access_token


@pytest.fixture(scope="session")
def app(tmp_path_factory):
    app = create_app({
        "TESTING": True,
        "MONGODB_URI": "mongodb://localhost:27017/tbucks_test",
        "MONGO_CLIENT_CLASS": mongomock.MongoClient,
        "LOG_DIR": str(tmp_path_factory.mktemp("logs")),
        "JWT_SECRET": "test-secret-key-for-the-tbucks-store-suite",
        "RATELIMIT_ENABLED": False,
        "STREAM_HEARTBEAT_SECONDS": 0.05,
    })
    yield app
    disconnect(alias="default")


@pytest.fixture(autouse=True)
def clean_db(app):
    yield
    for model in (User, StoreItem, Order):
        model.drop_collection()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(username=None, t_bucks=0, role=Role.USER, password="password123"):
        username = username or f"user{next(counter)}"
        user = User(
            username=username,
            email=f"{username}@example.com",
            password=password,
            role=role,
            t_bucks=t_bucks,
        )
        user.save()
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user("lachlan", role=Role.ADMIN)


@pytest.fixture
def make_item(app):
    def _make(name="Mystery Box", price=60, description="Could be anything.", image_url="https://img.example/box.png"):
        item = StoreItem(name=name, description=description, price=price, image_url=image_url)
        item.save()
        return item

    return _make


@pytest.fixture
def make_order(app):
    """Insert an order directly, ``minutes_ago`` controls its created_at."""
    def _make(user, item, status=OrderStatus.PLACED, fulfillment_text=None, minutes_ago=0):
        order = Order(
            user=user,
            username=user.username,
            item_id=str(item.id),
            item_name=item.name,
            price=item.price,
            status=status,
            fulfillment_text=fulfillment_text,
            created_at=datetime.utcnow() - timedelta(minutes=minutes_ago),
        )
        order.save()
        return order

    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        with app.app_context():
            token = create_access_token(user.id, user.role_value)
        return {"Authorization": f"Bearer {token}"}

    return _headers
