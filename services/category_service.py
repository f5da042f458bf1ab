from models import db
from models.category import Category
from models.product import Product
from services import atomic, get_for_update, page_window
from services.errors import InvalidRequestError, NotFoundError


def _name(category_body):
    name = (category_body.get('name') or '').strip()
    if not name:
        raise InvalidRequestError('"name" is required')
    return name


def create_category(category_body):
    with atomic():
        category = Category(name=_name(category_body))
        db.session.add(category)
    return category


def query_categories():
    return Category.query.order_by(Category.name).all()


def get_category_by_id(category_id):
    return Category.query.filter_by(id=category_id).first()


def update_category_by_id(category_id, update_body):
    name = _name(update_body)
    with atomic():
        category = get_for_update(Category, category_id)
        if category is None:
            raise NotFoundError('Category not found')
        category.name = name
    return category


def delete_category_by_id(category_id):
    with atomic():
        category = get_for_update(Category, category_id)
        if category is None:
            raise NotFoundError('Category not found')
        if Product.query.filter_by(category_id=category_id).count() > 0:
            raise InvalidRequestError('Category still has products')
        db.session.delete(category)


def get_all_categories(skip=None, take=None):
    skip, take = page_window(skip, take)
    return Category.query.order_by(Category.name, Category.id).offset(skip).limit(take).all()


def get_category_count():
    return Category.query.count()


def get_categories_by_name(name):
    return Category.query.filter(Category.name.contains(name or '', autoescape=True)).order_by(Category.name).all()
