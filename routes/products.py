from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required, current_user
from flask_babel import gettext as _
from forms.product_forms import ProductForm
from routes.pagination import page_args, last_page
from services import category_service, product_service
from services.errors import ServiceError

products_bp = Blueprint('products', __name__, url_prefix='/products')

def _product_body(form):
    return {
        'name': form.name.data,
        'description': form.description.data,
        'category_id': form.category.data,
        'quantity_in_stock': form.quantity_in_stock.data,
        'price': form.price.data,
    }

@products_bp.route('/')
@login_required
def list_products():
    page, limit, skip = page_args()
    category = request.args.get('category', '').strip() or None
    products = product_service.get_all_products(skip, limit, category=category)
    total = product_service.get_product_count()
    return render_template('products/list.html', title=_('Products'), products=products,
                           page=page, limit=limit, last_page=last_page(total, limit))

@products_bp.route('/search')
@login_required
def search_products():
    name = request.args.get('name', '').strip()
    products = product_service.get_products_by_name(name)
    return render_template('products/list.html', title=_('Products'), products=products, q=name)

@products_bp.route('/detail/<product_id>')
@login_required
def detail_product(product_id):
    product = product_service.get_product_by_id(product_id)
    if product is None:
        abort(404)
    return render_template('products/detail.html', title=product.name, product=product)

@products_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_product():
    form = ProductForm()
    form.category.choices = [(c.id, c.name) for c in category_service.query_categories()]
    if form.validate_on_submit():
        try:
            product_service.create_product(_product_body(form), user_id=current_user.id)
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('Product added successfully'), 'success')
            return redirect(url_for('products.list_products'))
    return render_template('products/form.html', title=_('Add product'), form=form)

@products_bp.route('/edit/<product_id>', methods=['GET', 'POST'])
@login_required
def edit_product(product_id):
    product = product_service.get_product_by_id(product_id)
    if product is None:
        abort(404)
    form = ProductForm(obj=product)
    form.category.choices = [(c.id, c.name) for c in category_service.query_categories()]
    if request.method == 'GET':
        form.category.data = product.category_id
    if form.validate_on_submit():
        try:
            product_service.update_product_by_id(product_id, _product_body(form))
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('Product updated successfully'), 'success')
            return redirect(url_for('products.list_products'))
    return render_template('products/form.html', title=_('Edit product'), form=form, edit=True)

@products_bp.route('/delete/<product_id>', methods=['POST'])
@login_required
def delete_product(product_id):
    try:
        product_service.delete_product_by_id(product_id)
    except ServiceError as error:
        flash(error.message, 'danger')
    else:
        flash(_('Product deleted successfully'), 'success')
    return redirect(url_for('products.list_products'))
