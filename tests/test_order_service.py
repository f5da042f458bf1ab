from datetime import datetime

import pytest

from models import db
from models.order import Order, OrderItem
from models.product import Product
from services import order_item_service, order_service
from services.errors import InvalidRequestError, NotFoundError


def test_create_order_coerces_iso_date(ctx, seed):
    order = order_service.create_order({
        'date': '2024-06-01T12:30:00+02:00',
        'customer_name': 'Sari',
        'customer_email': 'sari@example.com',
        'total_price': 999,
    }, user_id=seed['admin_id'])

    assert order.date == datetime(2024, 6, 1, 10, 30)
    # the total follows the items, so a supplied value is ignored
    assert order.total_price == 0


@pytest.mark.parametrize('body', [
    {'customer_name': 'A', 'customer_email': 'a@example.com'},
    {'date': 'yesterday', 'customer_name': 'A', 'customer_email': 'a@example.com'},
    {'date': '2024-01-01', 'customer_email': 'a@example.com'},
])
def test_create_order_validates_fields(ctx, seed, body):
    with pytest.raises(InvalidRequestError):
        order_service.create_order(body, user_id=seed['admin_id'])


def test_create_order_unknown_user(ctx, seed):
    with pytest.raises(NotFoundError, match='User not found'):
        order_service.create_order({
            'date': '2024-01-01', 'customer_name': 'A', 'customer_email': 'a@example.com',
            'user_id': 'missing',
        })


def test_update_order_keeps_derived_total(ctx, seed):
    order_item_service.create_order_item({
        'order_id': seed['order_id'], 'product_id': seed['mouse_id'], 'quantity': 2, 'unit_price': 250,
    })

    order = order_service.update_order_by_id(seed['order_id'], {
        'customer_name': 'Budi Santoso', 'total_price': 1,
    })

    assert order.customer_name == 'Budi Santoso'
    assert order.total_price == 500


def test_update_unknown_order(ctx, seed):
    with pytest.raises(NotFoundError, match='Order not found'):
        order_service.update_order_by_id('missing', {'customer_name': 'X'})


def test_delete_order_releases_every_item(ctx, seed):
    for product, quantity in (('laptop_id', 3), ('mouse_id', 5)):
        order_item_service.create_order_item({
            'order_id': seed['order_id'], 'product_id': seed[product], 'quantity': quantity, 'unit_price': 10,
        })

    order_service.delete_order_by_id(seed['order_id'])

    db.session.expire_all()
    assert db.session.get(Order, seed['order_id']) is None
    assert OrderItem.query.count() == 0
    assert db.session.get(Product, seed['laptop_id']).quantity_in_stock == 100
    assert db.session.get(Product, seed['mouse_id']).quantity_in_stock == 100


def test_delete_unknown_order(ctx, seed):
    with pytest.raises(NotFoundError):
        order_service.delete_order_by_id('missing')


def test_listing_search_and_pagination(ctx, seed):
    for day, name in ((2, 'Sari'), (3, 'Sarah')):
        order_service.create_order({
            'date': f'2024-05-0{day}', 'customer_name': name, 'customer_email': 'x@example.com',
        }, user_id=seed['admin_id'])

    assert order_service.get_order_count() == 3
    assert [o.customer_name for o in order_service.get_all_orders(take=2)] == ['Sarah', 'Sari']
    assert [o.customer_name for o in order_service.get_all_orders(skip=2)] == ['Budi']
    assert {o.customer_name for o in order_service.get_orders_by_customer_name('Sar')} == {'Sari', 'Sarah'}
    assert order_service.get_order_by_id(seed['order_id']).user.email == 'admin@example.com'

    with pytest.raises(InvalidRequestError):
        order_service.get_all_orders(skip=-1)


def test_utc_designator_and_non_finite_total(ctx, seed):
    assert order_service.get_order_by_id(seed['order_id']).date == datetime(2024, 5, 1, 10, 0)

    ctx.config['ORDER_TOTAL_STRATEGY'] = 'accumulate'
    with pytest.raises(InvalidRequestError, match='"total_price" must be a number'):
        order_service.create_order({
            'date': '2024-01-01', 'customer_name': 'A', 'customer_email': 'a@example.com',
            'total_price': 'inf',
        }, user_id=seed['admin_id'])
