from logging_config import get_logger
from models import db
from models.order import Order
from models.product import Product
from models.user import ROLES, User
from services import atomic, get_for_update, page_window
from services.errors import InvalidRequestError, NotFoundError, UnauthorizedError

logger = get_logger(__name__)


def _user_fields(user_body, partial=False):
    fields = {}
    for name in ('name', 'email'):
        if not partial or name in user_body:
            value = (user_body.get(name) or '').strip()
            if not value:
                raise InvalidRequestError(f'"{name}" is required')
            fields[name] = value.lower() if name == 'email' else value
    if 'role' in user_body and user_body['role']:
        if user_body['role'] not in ROLES:
            raise InvalidRequestError('"role" must be one of admin, user')
        fields['role'] = user_body['role']
    if 'is_email_verified' in user_body:
        fields['is_email_verified'] = bool(user_body['is_email_verified'])
    return fields


def _email_taken(email, exclude_id=None):
    query = User.query.filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def create_user(user_body):
    fields = _user_fields(user_body)
    password = user_body.get('password')
    if not password:
        raise InvalidRequestError('"password" is required')
    if _email_taken(fields['email']):
        raise InvalidRequestError('Email already taken')
    with atomic():
        user = User(**fields)
        user.set_password(password)
        db.session.add(user)
    logger.info('user_created', extra={'user_id': user.id, 'role': user.role})
    return user


def get_user_by_email(email):
    return User.query.filter_by(email=(email or '').strip().lower()).first()


def get_user_by_id(user_id):
    return db.session.get(User, user_id)


def authenticate(email, password):
    user = get_user_by_email(email)
    if user is None or not user.check_password(password or ''):
        raise UnauthorizedError('Incorrect email or password')
    return user


def update_user_by_id(user_id, update_body):
    fields = _user_fields(update_body, partial=True)
    with atomic():
        user = get_for_update(User, user_id)
        if user is None:
            raise NotFoundError('User not found')
        if 'email' in fields and _email_taken(fields['email'], exclude_id=user.id):
            raise InvalidRequestError('Email already taken')
        for key, value in fields.items():
            setattr(user, key, value)
        if update_body.get('password'):
            user.set_password(update_body['password'])
    return user


def delete_user_by_id(user_id):
    with atomic():
        user = get_for_update(User, user_id)
        if user is None:
            raise NotFoundError('User not found')
        owns_products = Product.query.filter_by(user_id=user_id).count() > 0
        owns_orders = Order.query.filter_by(user_id=user_id).count() > 0
        if owns_products or owns_orders:
            raise InvalidRequestError('User still owns products or orders')
        db.session.delete(user)
    logger.info('user_deleted', extra={'user_id': user_id})


def query_users():
    return User.query.order_by(User.name).all()


def get_all_users(skip=None, take=None):
    skip, take = page_window(skip, take)
    return User.query.order_by(User.created_at, User.id).offset(skip).limit(take).all()


def get_user_count():
    return User.query.count()


def get_users_by_name(name):
    return User.query.filter(User.name.contains(name or '', autoescape=True)).order_by(User.name).all()
