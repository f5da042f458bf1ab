import pytest

from app import create_app
from config import TestingConfig
from models import db
from models.user import User
from services import category_service, order_service, product_service, user_service
from services.token_service import generate_token

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'admin-secret'
USER_EMAIL = 'user@example.com'
USER_PASSWORD = 'user-secret'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seed(app):
    """Two users, one category, two products with 100 in stock and an empty order."""
    with app.app_context():
        admin = user_service.create_user({
            'name': 'Admin', 'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD, 'role': 'admin',
        })
        user = user_service.create_user({
            'name': 'Clerk', 'email': USER_EMAIL, 'password': USER_PASSWORD,
        })
        category = category_service.create_category({'name': 'Electronics'})
        laptop = product_service.create_product({
            'name': 'Laptop', 'price': 100000, 'quantity_in_stock': 100, 'category_id': category.id,
        }, user_id=admin.id)
        mouse = product_service.create_product({
            'name': 'Mouse', 'price': 250, 'quantity_in_stock': 100, 'category_id': category.id,
        }, user_id=admin.id)
        order = order_service.create_order({
            'date': '2024-05-01T10:00:00Z', 'customer_name': 'Budi', 'customer_email': 'budi@example.com',
        }, user_id=admin.id)
        return {
            'admin_id': admin.id,
            'user_id': user.id,
            'category_id': category.id,
            'laptop_id': laptop.id,
            'mouse_id': mouse.id,
            'order_id': order.id,
        }


@pytest.fixture
def ctx(app, seed):
    with app.app_context():
        yield app


def _bearer(app, user_id):
    with app.app_context():
        token = generate_token(db.session.get(User, user_id))
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(app, seed):
    return _bearer(app, seed['admin_id'])


@pytest.fixture
def user_headers(app, seed):
    return _bearer(app, seed['user_id'])


@pytest.fixture
def login(client):
    def do_login(email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
        return client.post('/auth/login', data={'email': email, 'password': password})
    return do_login
