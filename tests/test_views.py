from models import db
from models.order import Order, OrderItem
from models.product import Product
from services import order_item_service
from tests.conftest import USER_EMAIL, USER_PASSWORD


def add_mouse_item(app, seed, quantity=2):
    with app.app_context():
        return order_item_service.create_order_item({
            'order_id': seed['order_id'], 'product_id': seed['mouse_id'],
            'quantity': quantity, 'unit_price': 250,
        }).id


def mouse_stock(app, seed):
    with app.app_context():
        return db.session.get(Product, seed['mouse_id']).quantity_in_stock


def test_pages_require_login(client, seed):
    response = client.get('/products/')
    assert response.status_code == 302
    assert '/auth/login' in response.headers['Location']


def test_login_shows_dashboard(client, seed, login):
    response = login()
    assert response.status_code == 302

    response = client.get('/')
    assert response.status_code == 200
    assert b'Dashboard' in response.data


def test_wrong_password_flashes_error(client, seed, login):
    response = login(password='wrong-password')
    assert response.status_code == 200
    assert b'Incorrect email or password' in response.data


def test_add_category(client, seed, login):
    login()
    response = client.post('/categories/add', data={'name': 'Garden'}, follow_redirects=True)
    assert response.status_code == 200
    assert b'Category added successfully' in response.data
    assert b'Garden' in response.data


def test_add_order_item_with_insufficient_stock_flashes(client, seed, login):
    login(USER_EMAIL, USER_PASSWORD)
    response = client.post('/order-items/add', data={
        'order': seed['order_id'],
        'product': seed['laptop_id'],
        'quantity': '1000',
        'unit_price': '100000',
    }, follow_redirects=True)
    assert response.status_code == 200
    assert b'Insufficient stock' in response.data


def test_add_order_item(client, seed, login):
    login(USER_EMAIL, USER_PASSWORD)
    response = client.post('/order-items/add', data={
        'order': seed['order_id'],
        'product': seed['mouse_id'],
        'quantity': '2',
        'unit_price': '250',
    }, follow_redirects=True)
    assert b'New order item has been added!' in response.data


def test_orders_are_admin_only(client, seed, login):
    login(USER_EMAIL, USER_PASSWORD)
    response = client.get('/orders/', follow_redirects=True)
    assert b'You do not have permission to access this page' in response.data


def test_order_detail_and_exports(client, seed, login):
    login()
    response = client.get(f"/orders/detail/{seed['order_id']}")
    assert response.status_code == 200
    assert b'Budi' in response.data

    response = client.get('/orders/export?format=csv')
    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    lines = response.data.decode('utf-8').splitlines()
    assert lines[0] == 'id,date,customer_name,customer_email,total_price,items'
    assert 'Budi' in lines[1]

    response = client.get('/orders/export')
    assert response.status_code == 200
    assert response.headers['Content-Disposition'].endswith('orders.xlsx')
    assert response.data[:2] == b'PK'


def test_unknown_page_renders_404(client, seed, login):
    login()
    response = client.get("/products/detail/missing")
    assert response.status_code == 404


def test_edit_order_item(app, client, seed, login):
    item_id = add_mouse_item(app, seed)
    login(USER_EMAIL, USER_PASSWORD)

    response = client.post(f'/order-items/edit/{item_id}', data={
        'order': seed['order_id'],
        'product': seed['mouse_id'],
        'quantity': '5',
        'unit_price': '300',
    }, follow_redirects=True)

    assert b'Order item has been updated!' in response.data
    assert mouse_stock(app, seed) == 95
    with app.app_context():
        assert db.session.get(Order, seed['order_id']).total_price == 1500


def test_delete_order_item(app, client, seed, login):
    item_id = add_mouse_item(app, seed)
    login(USER_EMAIL, USER_PASSWORD)

    response = client.post(f'/order-items/delete/{item_id}', follow_redirects=True)

    assert b'Order item has been deleted!' in response.data
    assert mouse_stock(app, seed) == 100


def test_delete_order_releases_its_items(app, client, seed, login):
    add_mouse_item(app, seed, quantity=7)
    assert mouse_stock(app, seed) == 93
    login()

    response = client.post(f"/orders/delete/{seed['order_id']}", follow_redirects=True)

    assert b'Order has been deleted!' in response.data
    assert mouse_stock(app, seed) == 100
    with app.app_context():
        assert db.session.get(Order, seed['order_id']) is None
        assert OrderItem.query.count() == 0
