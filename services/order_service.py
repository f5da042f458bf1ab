from flask import current_app
from sqlalchemy.orm import joinedload

from logging_config import get_logger
from models import db
from models.order import Order
from models.user import User
from services import atomic, get_for_update, page_window, parse_date, to_float
from services import order_item_service
from services.errors import InvalidRequestError, NotFoundError

logger = get_logger(__name__)


def _total_is_derived():
    return current_app.config.get('ORDER_TOTAL_STRATEGY', 'recompute') == 'recompute'


def _order_fields(order_body, partial=False):
    fields = {}
    if not partial or 'date' in order_body:
        fields['date'] = parse_date(order_body.get('date'))
    for name in ('customer_name', 'customer_email'):
        if not partial or name in order_body:
            value = (order_body.get(name) or '').strip()
            if not value:
                raise InvalidRequestError(f'"{name}" is required')
            fields[name] = value
    if order_body.get('total_price') not in (None, ''):
        fields['total_price'] = to_float(order_body.get('total_price'), 'total_price')
    if order_body.get('user_id'):
        if db.session.get(User, order_body['user_id']) is None:
            raise NotFoundError('User not found')
        fields['user_id'] = order_body['user_id']
    return fields


def create_order(order_body, user_id=None):
    fields = _order_fields(order_body)
    fields.setdefault('user_id', user_id)
    if not fields['user_id']:
        raise InvalidRequestError('"user_id" is required')
    if _total_is_derived():
        # a new order has no items yet
        fields['total_price'] = 0.0
    fields.setdefault('total_price', 0.0)

    with atomic():
        order = Order(**fields)
        db.session.add(order)
    logger.info('order_created', extra={'order_id': order.id, 'user_id': order.user_id})
    return order


def query_orders():
    return Order.query.order_by(Order.date.desc()).all()


def get_order_by_id(order_id):
    return Order.query.options(joinedload(Order.user)).filter_by(id=order_id).first()


def update_order_by_id(order_id, update_body):
    fields = _order_fields(update_body, partial=True)
    with atomic():
        order = get_for_update(Order, order_id)
        if order is None:
            raise NotFoundError('Order not found')
        if _total_is_derived():
            fields.pop('total_price', None)
        for key, value in fields.items():
            setattr(order, key, value)
    return order


def delete_order_by_id(order_id):
    """Release every item of the order, then remove the order itself."""
    with atomic():
        order = get_for_update(Order, order_id)
        if order is None:
            raise NotFoundError('Order not found')
        released = order_item_service.release_order_items(order)
        db.session.delete(order)
    logger.info('order_deleted', extra={'order_id': order_id, 'released_items': released})


def get_all_orders(skip=None, take=None):
    skip, take = page_window(skip, take)
    return (
        Order.query.options(joinedload(Order.user))
        .order_by(Order.date.desc(), Order.id)
        .offset(skip)
        .limit(take)
        .all()
    )


def get_order_count():
    return Order.query.count()


def get_orders_by_customer_name(customer_name):
    return (
        Order.query.options(joinedload(Order.user))
        .filter(Order.customer_name.contains(customer_name or '', autoescape=True))
        .order_by(Order.date.desc())
        .all()
    )
