from flask import Flask, render_template, request, jsonify, flash, redirect, url_for
from flask_login import LoginManager, login_required
from flask_babel import Babel, gettext as _
from flask_wtf.csrf import CSRFProtect
from config import Config
from logging_config import configure_logging, get_logger
from models import db
from models.user import User

# Initialize extensions
login_manager = LoginManager()
babel = Babel()
csrf = CSRFProtect()
logger = get_logger(__name__)

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    csrf.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'

    def get_locale():
        return app.config.get('BABEL_DEFAULT_LOCALE', 'en')
    babel.init_app(app, locale_selector=get_locale)

    # Flask-Login user loader
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    # API clients authenticate with "Authorization: Bearer <token>"
    @login_manager.request_loader
    def load_user_from_request(req):
        from services.token_service import load_user_from_token
        header = req.headers.get('Authorization', '')
        if not header.startswith('Bearer '):
            return None
        return load_user_from_token(header[len('Bearer '):].strip())

    @login_manager.unauthorized_handler
    def unauthorized():
        if request.blueprint == 'api':
            return jsonify({'status': 401, 'message': 'Please authenticate', 'data': None}), 401
        flash(_('Please log in to access this page'), 'danger')
        return redirect(url_for('auth.login', next=request.path))

    # Register Blueprints
    from routes.auth import auth_bp
    app.register_blueprint(auth_bp)
    from routes.categories import categories_bp
    app.register_blueprint(categories_bp)
    from routes.products import products_bp
    app.register_blueprint(products_bp)
    from routes.orders import orders_bp
    app.register_blueprint(orders_bp)
    from routes.order_items import order_items_bp
    app.register_blueprint(order_items_bp)
    from routes.users import users_bp
    app.register_blueprint(users_bp)
    from routes.api import api_bp
    app.register_blueprint(api_bp)
    # token-authenticated JSON clients carry no form token
    csrf.exempt(api_bp)

    @app.errorhandler(404)
    def not_found(error):
        if request.path.startswith('/v1'):
            return jsonify({'status': 404, 'message': 'Not found', 'data': None}), 404
        return render_template('errors/404.html', title=_('Not found')), 404

    # Dashboard route
    @app.route("/")
    @login_required
    def dashboard():
        from services import category_service, product_service, order_service, order_item_service, user_service
        threshold = app.config.get('LOW_STOCK_THRESHOLD', 10)
        low_stock_products = product_service.get_low_stock_products(threshold)
        notifications = [
            _('Product "%(name)s" has only %(count)s left in stock!', name=p.name, count=p.quantity_in_stock)
            for p in low_stock_products
        ]
        return render_template('dashboard.html',
                               title=_('Dashboard'),
                               users_count=user_service.get_user_count(),
                               categories_count=category_service.get_category_count(),
                               products_count=product_service.get_product_count(),
                               orders_count=order_service.get_order_count(),
                               order_items_count=order_item_service.get_order_item_count(),
                               notifications=notifications)

    logger.info('app_created', extra={'database': app.config['SQLALCHEMY_DATABASE_URI'].split('://')[0]})
    return app

if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
