from sqlalchemy.orm import joinedload

from logging_config import get_logger
from models import db
from models.category import Category
from models.order import OrderItem
from models.product import Product
from models.user import User
from services import atomic, get_for_update, page_window, to_float, to_int
from services.errors import InvalidRequestError, NotFoundError

logger = get_logger(__name__)


def _product_fields(product_body, partial=False):
    fields = {}
    if not partial or 'name' in product_body:
        name = (product_body.get('name') or '').strip()
        if not name:
            raise InvalidRequestError('"name" is required')
        fields['name'] = name
    if 'description' in product_body:
        fields['description'] = product_body.get('description')
    if not partial or 'price' in product_body:
        fields['price'] = to_float(product_body.get('price'), 'price')
        if fields['price'] < 0:
            raise InvalidRequestError('"price" must not be negative')
    if not partial or 'quantity_in_stock' in product_body:
        fields['quantity_in_stock'] = to_int(product_body.get('quantity_in_stock'), 'quantity_in_stock')
        if fields['quantity_in_stock'] < 0:
            raise InvalidRequestError('"quantity_in_stock" must not be negative')
    if product_body.get('category_id'):
        if db.session.get(Category, product_body['category_id']) is None:
            raise NotFoundError('Category not found')
        fields['category_id'] = product_body['category_id']
    if product_body.get('user_id'):
        if db.session.get(User, product_body['user_id']) is None:
            raise NotFoundError('User not found')
        fields['user_id'] = product_body['user_id']
    return fields


def create_product(product_body, user_id=None):
    fields = _product_fields(product_body)
    fields.setdefault('user_id', user_id)
    if not fields.get('category_id'):
        raise InvalidRequestError('"category_id" is required')
    if not fields['user_id']:
        raise InvalidRequestError('"user_id" is required')
    with atomic():
        product = Product(**fields)
        db.session.add(product)
    logger.info('product_created', extra={'product_id': product.id, 'stock': product.quantity_in_stock})
    return product


def query_products():
    return Product.query.order_by(Product.name).all()


def get_product_by_id(product_id):
    return (
        Product.query.options(joinedload(Product.category), joinedload(Product.user))
        .filter_by(id=product_id)
        .first()
    )


def update_product_by_id(product_id, update_body):
    fields = _product_fields(update_body, partial=True)
    with atomic():
        product = get_for_update(Product, product_id)
        if product is None:
            raise NotFoundError('Product not found')
        for key, value in fields.items():
            setattr(product, key, value)
    return product


def delete_product_by_id(product_id):
    with atomic():
        product = get_for_update(Product, product_id)
        if product is None:
            raise NotFoundError('Product not found')
        if OrderItem.query.filter_by(product_id=product_id).count() > 0:
            raise InvalidRequestError('Product is referenced by order items')
        db.session.delete(product)
    logger.info('product_deleted', extra={'product_id': product_id})


def get_all_products(skip=None, take=None, category=None):
    skip, take = page_window(skip, take)
    query = Product.query.options(joinedload(Product.category), joinedload(Product.user))
    if category:
        query = query.join(Product.category).filter(Category.name == category)
    return query.order_by(Product.name, Product.id).offset(skip).limit(take).all()


def get_product_count():
    return Product.query.count()


def get_products_by_name(name):
    return (
        Product.query.options(joinedload(Product.category))
        .filter(Product.name.contains(name or '', autoescape=True))
        .order_by(Product.name)
        .all()
    )


def get_low_stock_products(threshold):
    return Product.query.filter(Product.quantity_in_stock < threshold).order_by(Product.quantity_in_stock).all()
