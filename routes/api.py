from functools import wraps
from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from services import category_service, product_service, order_service, order_item_service, user_service
from services.errors import ServiceError, InvalidRequestError, NotFoundError, ForbiddenError
from services.token_service import generate_token
from logging_config import get_logger

api_bp = Blueprint('api', __name__, url_prefix='/v1')
logger = get_logger(__name__)

@api_bp.errorhandler(ServiceError)
def handle_service_error(error):
    if error.status_code >= 500:
        logger.error('api_error', extra={'path': request.path, 'error': error.message})
    return jsonify(error.to_dict()), error.status_code

def respond(status, message, data=None):
    return jsonify({'status': status, 'message': message, 'data': data}), status

def admin_api_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return current_app.login_manager.unauthorized()
        if not current_user.is_admin():
            raise ForbiddenError('Forbidden')
        return f(*args, **kwargs)
    return decorated_function

def json_body(require_keys=True):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequestError('Request body must be a JSON object')
    if require_keys and not data:
        raise InvalidRequestError('"body" must have at least 1 key')
    return data

def found(entity, message):
    if entity is None:
        raise NotFoundError(message)
    return entity

# ---------------------------------------------------------------- auth

@api_bp.route('/auth/register', methods=['POST'])
def register():
    body = json_body()
    body['role'] = 'user'
    user = user_service.create_user(body)
    return respond(201, 'Register Success', {'user': user.to_dict(), 'token': generate_token(user)})

@api_bp.route('/auth/login', methods=['POST'])
def login():
    body = json_body()
    user = user_service.authenticate(body.get('email'), body.get('password'))
    return respond(200, 'Login Success', {'user': user.to_dict(), 'token': generate_token(user)})

# ---------------------------------------------------------------- category

@api_bp.route('/category', methods=['POST'])
@login_required
def create_category():
    category = category_service.create_category(json_body())
    return respond(201, 'Create Category Success', category.to_dict())

@api_bp.route('/category', methods=['GET'])
@login_required
def get_categories():
    categories = category_service.get_all_categories(request.args.get('skip'), request.args.get('take'))
    return respond(200, 'Get Categories Success', [c.to_dict() for c in categories])

@api_bp.route('/category/<category_id>', methods=['GET'])
@login_required
def get_category(category_id):
    category = found(category_service.get_category_by_id(category_id), 'Category not found')
    return respond(200, 'Get Category Success', category.to_dict())

@api_bp.route('/category/<category_id>', methods=['PATCH'])
@login_required
def update_category(category_id):
    category = category_service.update_category_by_id(category_id, json_body())
    return respond(200, 'Update Category Success', category.to_dict())

@api_bp.route('/category/<category_id>', methods=['DELETE'])
@login_required
def delete_category(category_id):
    category_service.delete_category_by_id(category_id)
    return respond(200, 'Delete Category Success')

# ---------------------------------------------------------------- product

@api_bp.route('/product', methods=['POST'])
@login_required
def create_product():
    product = product_service.create_product(json_body(), user_id=current_user.id)
    return respond(201, 'Create Product Success', product.to_dict())

@api_bp.route('/product', methods=['GET'])
@login_required
def get_products():
    products = product_service.get_all_products(
        request.args.get('skip'), request.args.get('take'), category=request.args.get('category'))
    return respond(200, 'Get Products Success', [p.to_dict(include_relations=True) for p in products])

@api_bp.route('/product/<product_id>', methods=['GET'])
@login_required
def get_product(product_id):
    product = found(product_service.get_product_by_id(product_id), 'Product not found')
    return respond(200, 'Get Product Success', product.to_dict(include_relations=True))

@api_bp.route('/product/<product_id>', methods=['PATCH'])
@login_required
def update_product(product_id):
    product = product_service.update_product_by_id(product_id, json_body())
    return respond(200, 'Update Product Success', product.to_dict())

@api_bp.route('/product/<product_id>', methods=['DELETE'])
@login_required
def delete_product(product_id):
    product_service.delete_product_by_id(product_id)
    return respond(200, 'Delete Product Success')

# ---------------------------------------------------------------- order

@api_bp.route('/order', methods=['POST'])
@admin_api_required
def create_order():
    order = order_service.create_order(json_body(), user_id=current_user.id)
    return respond(201, 'Create Order Success', order.to_dict())

@api_bp.route('/order', methods=['GET'])
@admin_api_required
def get_orders():
    orders = order_service.get_all_orders(request.args.get('skip'), request.args.get('take'))
    return respond(200, 'Get Orders Success', [o.to_dict(include_relations=True) for o in orders])

@api_bp.route('/order/<order_id>', methods=['GET'])
@admin_api_required
def get_order(order_id):
    order = found(order_service.get_order_by_id(order_id), 'Order not found')
    return respond(200, 'Get Order Success', order.to_dict(include_relations=True))

@api_bp.route('/order/<order_id>', methods=['PATCH'])
@admin_api_required
def update_order(order_id):
    order = order_service.update_order_by_id(order_id, json_body())
    return respond(200, 'Update Order Success', order.to_dict())

@api_bp.route('/order/<order_id>', methods=['DELETE'])
@admin_api_required
def delete_order(order_id):
    order_service.delete_order_by_id(order_id)
    return respond(200, 'Delete Order Success')

# ---------------------------------------------------------------- order item

@api_bp.route('/order-item', methods=['POST'])
@login_required
def create_order_item():
    order_item = order_item_service.create_order_item(json_body())
    return respond(201, 'Create OrderItem Success', order_item.to_dict())

@api_bp.route('/order-item', methods=['GET'])
@login_required
def get_order_items():
    order_items = order_item_service.get_all_order_items(request.args.get('skip'), request.args.get('take'))
    return respond(200, 'Get OrderItems Success', [i.to_dict(include_relations=True) for i in order_items])

@api_bp.route('/order-item/<order_item_id>', methods=['GET'])
@login_required
def get_order_item(order_item_id):
    order_item = found(order_item_service.get_order_item_by_id(order_item_id), 'OrderItem not found')
    return respond(200, 'Get OrderItem Success', order_item.to_dict(include_relations=True))

@api_bp.route('/order-item/<order_item_id>', methods=['PATCH'])
@login_required
def update_order_item(order_item_id):
    order_item = order_item_service.update_order_item_by_id(order_item_id, json_body())
    return respond(200, 'Update OrderItem Success', order_item.to_dict())

@api_bp.route('/order-item/<order_item_id>', methods=['DELETE'])
@login_required
def delete_order_item(order_item_id):
    order_item_service.delete_order_item_by_id(order_item_id)
    return respond(200, 'Delete OrderItem Success')

# ---------------------------------------------------------------- user

@api_bp.route('/user', methods=['POST'])
@admin_api_required
def create_user():
    user = user_service.create_user(json_body())
    return respond(201, 'Create User Success', user.to_dict())

@api_bp.route('/user', methods=['GET'])
@admin_api_required
def get_users():
    users = user_service.get_all_users(request.args.get('skip'), request.args.get('take'))
    return respond(200, 'Get Users Success', [u.to_dict() for u in users])

@api_bp.route('/user/<user_id>', methods=['GET'])
@admin_api_required
def get_user(user_id):
    user = found(user_service.get_user_by_id(user_id), 'User not found')
    return respond(200, 'Get User Success', user.to_dict())

@api_bp.route('/user/<user_id>', methods=['PATCH'])
@admin_api_required
def update_user(user_id):
    user = user_service.update_user_by_id(user_id, json_body())
    return respond(200, 'Update User Success', user.to_dict())

@api_bp.route('/user/<user_id>', methods=['DELETE'])
@admin_api_required
def delete_user(user_id):
    if user_id == current_user.id:
        raise InvalidRequestError('You cannot delete yourself')
    user_service.delete_user_by_id(user_id)
    return respond(200, 'Delete User Success')
