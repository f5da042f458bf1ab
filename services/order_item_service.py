"""
Order item lifecycle and stock / order total reconciliation.

Creating, updating or deleting an order item moves stock on the referenced
product and changes the total price of the owning order. Each public
mutation below runs as a single transaction:

    - the order item, product and order rows are read with
      ``SELECT ... FOR UPDATE`` so concurrent mutations of the same rows
      are serialized on databases that support row locks;
    - stock is taken with a guarded update
      (``quantity_in_stock - q WHERE quantity_in_stock >= q``), so two
      reservations whose sum exceeds the stock can never both succeed;
    - any error rolls back every step already applied.

How the order total follows its items is controlled by the
``ORDER_TOTAL_STRATEGY`` config key:

    recompute   total = SUM(quantity * unit_price) over the current items
    accumulate  the line delta is applied to the stored total
"""

from flask import current_app
from sqlalchemy import func, select, update
from sqlalchemy.orm import joinedload

from logging_config import get_logger
from models import db
from models.order import Order, OrderItem
from models.product import Product
from services import atomic, get_for_update, page_window, to_float, to_int
from services.errors import InternalError, InvalidRequestError, NotFoundError

logger = get_logger(__name__)

TOTAL_STRATEGIES = ('recompute', 'accumulate')


def _coerce_line(body):
    quantity = to_int(body.get('quantity'), 'quantity')
    unit_price = to_float(body.get('unit_price'), 'unit_price')
    if quantity < 1:
        raise InvalidRequestError('"quantity" must be greater than 0')
    if unit_price < 0:
        raise InvalidRequestError('"unit_price" must not be negative')
    return quantity, unit_price


def _take_stock(product, quantity):
    result = db.session.execute(
        update(Product)
        .where(Product.id == product.id, Product.quantity_in_stock >= quantity)
        .values(quantity_in_stock=Product.quantity_in_stock - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning(
            'stock_reservation_rejected',
            extra={'product_id': product.id, 'quantity': quantity},
        )
        raise InvalidRequestError('Insufficient stock')
    db.session.expire(product, ['quantity_in_stock'])


def _release_stock(product, quantity):
    if product is None:
        raise InternalError('Failed to update product stock')
    result = db.session.execute(
        update(Product)
        .where(Product.id == product.id)
        .values(quantity_in_stock=Product.quantity_in_stock + quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InternalError('Failed to update product stock')
    db.session.expire(product, ['quantity_in_stock'])


def _line_sum(order_id):
    db.session.flush()
    return db.session.execute(
        select(func.coalesce(func.sum(OrderItem.quantity * OrderItem.unit_price), 0.0))
        .where(OrderItem.order_id == order_id)
    ).scalar_one()


def _refresh_total(order, delta):
    if order is None:
        raise InternalError('Failed to update order total price')
    strategy = current_app.config.get('ORDER_TOTAL_STRATEGY', 'recompute')
    if strategy == 'recompute':
        total = _line_sum(order.id)
    elif strategy == 'accumulate':
        total = (order.total_price or 0) + delta
    else:
        raise InternalError(f'Unknown order total strategy "{strategy}"')
    order.total_price = round(total, 2)


def _remove_order_item(order_item):
    product = get_for_update(Product, order_item.product_id)
    order = get_for_update(Order, order_item.order_id)
    line_total = order_item.line_total

    _release_stock(product, order_item.quantity)
    db.session.delete(order_item)
    _refresh_total(order, -line_total)

    logger.info(
        'order_item_deleted',
        extra={
            'order_item_id': order_item.id,
            'order_id': order_item.order_id,
            'product_id': order_item.product_id,
            'released': order_item.quantity,
        },
    )


def create_order_item(order_item_body):
    """Reserve stock for a new line and add it to its order.

    Raises NotFoundError when the product or the order does not exist and
    InvalidRequestError when the product does not hold enough stock.
    """
    quantity, unit_price = _coerce_line(order_item_body)

    with atomic():
        product = get_for_update(Product, order_item_body.get('product_id'))
        if product is None:
            raise NotFoundError('Product not found')
        order = get_for_update(Order, order_item_body.get('order_id'))
        if order is None:
            raise NotFoundError('Order not found')

        if quantity > product.quantity_in_stock:
            logger.warning(
                'insufficient_stock',
                extra={'product_id': product.id, 'requested': quantity,
                       'available': product.quantity_in_stock},
            )
            raise InvalidRequestError('Insufficient stock')

        _take_stock(product, quantity)

        order_item = OrderItem(
            order_id=order.id,
            product_id=product.id,
            quantity=quantity,
            unit_price=unit_price,
        )
        db.session.add(order_item)
        _refresh_total(order, order_item.line_total)

    logger.info(
        'order_item_created',
        extra={'order_item_id': order_item.id, 'order_id': order.id,
               'product_id': product.id, 'reserved': quantity},
    )
    return order_item


def update_order_item_by_id(order_item_id, update_body):
    """Move an existing line to new quantity, price, product or order.

    The reservation already held by the line counts as available when the
    product is unchanged: a line holding 5 of a product with 0 left in
    stock may be changed to any quantity up to 5.
    """
    quantity, unit_price = _coerce_line(update_body)

    with atomic():
        order_item = get_for_update(OrderItem, order_item_id)
        if order_item is None:
            raise NotFoundError('Order item not found')

        product = get_for_update(Product, update_body.get('product_id') or order_item.product_id)
        if product is None:
            raise NotFoundError('Product not found')
        order = get_for_update(Order, update_body.get('order_id') or order_item.order_id)
        if order is None:
            raise NotFoundError('Order not found')

        same_product = product.id == order_item.product_id
        available = product.quantity_in_stock
        if same_product:
            available += order_item.quantity
        if quantity > available:
            logger.warning(
                'insufficient_stock',
                extra={'product_id': product.id, 'requested': quantity, 'available': available},
            )
            raise InvalidRequestError('Insufficient stock')

        previous_product = product if same_product else get_for_update(Product, order_item.product_id)
        previous_order = order if order.id == order_item.order_id else get_for_update(Order, order_item.order_id)
        previous_line = order_item.line_total
        previous_quantity = order_item.quantity

        _release_stock(previous_product, previous_quantity)
        _take_stock(product, quantity)

        order_item.order_id = order.id
        order_item.product_id = product.id
        order_item.quantity = quantity
        order_item.unit_price = unit_price

        if previous_order is order:
            _refresh_total(order, order_item.line_total - previous_line)
        else:
            _refresh_total(previous_order, -previous_line)
            _refresh_total(order, order_item.line_total)

    logger.info(
        'order_item_updated',
        extra={'order_item_id': order_item.id, 'order_id': order.id, 'product_id': product.id,
               'previous_quantity': previous_quantity, 'quantity': quantity},
    )
    return order_item


def delete_order_item_by_id(order_item_id):
    with atomic():
        order_item = get_for_update(OrderItem, order_item_id)
        if order_item is None:
            raise NotFoundError('Order item not found')
        _remove_order_item(order_item)


def release_order_items(order):
    """Delete every item of ``order`` through the reconciliation path.

    Runs inside the caller's transaction; the caller commits.
    """
    order_items = (
        OrderItem.query.filter_by(order_id=order.id)
        .order_by(OrderItem.created_at, OrderItem.id)
        .all()
    )
    for order_item in order_items:
        _remove_order_item(order_item)
    return len(order_items)


def query_order_items():
    return OrderItem.query.order_by(OrderItem.created_at).all()


def get_order_item_by_id(order_item_id):
    return (
        OrderItem.query.options(joinedload(OrderItem.order), joinedload(OrderItem.product))
        .filter_by(id=order_item_id)
        .first()
    )


def get_all_order_items(skip=None, take=None):
    skip, take = page_window(skip, take)
    return (
        OrderItem.query.options(joinedload(OrderItem.order), joinedload(OrderItem.product))
        .order_by(OrderItem.created_at, OrderItem.id)
        .offset(skip)
        .limit(take)
        .all()
    )


def get_order_item_count():
    return OrderItem.query.count()


def search_order_items(term):
    return (
        OrderItem.query.options(joinedload(OrderItem.order), joinedload(OrderItem.product))
        .filter(OrderItem.id.contains(term or '', autoescape=True))
        .order_by(OrderItem.created_at)
        .all()
    )
