from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required
from flask_babel import gettext as _
from forms.order_forms import OrderItemForm
from routes.pagination import page_args, last_page
from services import order_service, order_item_service, product_service
from services.errors import ServiceError

order_items_bp = Blueprint('order_items', __name__, url_prefix='/order-items')

def _set_choices(form):
    form.order.choices = [(o.id, f'{o.customer_name} ({o.date:%Y-%m-%d})') for o in order_service.query_orders()]
    form.product.choices = [(p.id, f'{p.name} ({p.quantity_in_stock})') for p in product_service.query_products()]

def _order_item_body(form):
    return {
        'order_id': form.order.data,
        'product_id': form.product.data,
        'quantity': form.quantity.data,
        'unit_price': form.unit_price.data,
    }

@order_items_bp.route('/')
@login_required
def list_order_items():
    page, limit, skip = page_args()
    order_items = order_item_service.get_all_order_items(skip, limit)
    total = order_item_service.get_order_item_count()
    return render_template('order_items/list.html', title=_('Order items'), order_items=order_items,
                           page=page, limit=limit, last_page=last_page(total, limit))

@order_items_bp.route('/search')
@login_required
def search_order_items():
    term = request.args.get('name', '').strip()
    order_items = order_item_service.search_order_items(term)
    return render_template('order_items/list.html', title=_('Order items'), order_items=order_items, q=term)

@order_items_bp.route('/detail/<order_item_id>')
@login_required
def detail_order_item(order_item_id):
    order_item = order_item_service.get_order_item_by_id(order_item_id)
    if order_item is None:
        abort(404)
    return render_template('order_items/detail.html', title=_('Order item'), order_item=order_item)

@order_items_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_order_item():
    form = OrderItemForm()
    _set_choices(form)
    if request.method == 'GET' and request.args.get('order'):
        form.order.data = request.args['order']
    if form.validate_on_submit():
        try:
            order_item_service.create_order_item(_order_item_body(form))
        except ServiceError as error:
            flash(error.message, 'danger')
            return redirect(url_for('order_items.add_order_item'))
        flash(_('New order item has been added!'), 'success')
        return redirect(url_for('order_items.list_order_items'))
    return render_template('order_items/form.html', title=_('Add order item'), form=form)

@order_items_bp.route('/edit/<order_item_id>', methods=['GET', 'POST'])
@login_required
def edit_order_item(order_item_id):
    order_item = order_item_service.get_order_item_by_id(order_item_id)
    if order_item is None:
        abort(404)
    form = OrderItemForm(obj=order_item)
    _set_choices(form)
    if request.method == 'GET':
        form.order.data = order_item.order_id
        form.product.data = order_item.product_id
    if form.validate_on_submit():
        try:
            order_item_service.update_order_item_by_id(order_item_id, _order_item_body(form))
        except ServiceError as error:
            flash(error.message, 'danger')
            return redirect(url_for('order_items.edit_order_item', order_item_id=order_item_id))
        flash(_('Order item has been updated!'), 'success')
        return redirect(url_for('order_items.list_order_items'))
    return render_template('order_items/form.html', title=_('Edit order item'), form=form, edit=True)

@order_items_bp.route('/delete/<order_item_id>', methods=['POST'])
@login_required
def delete_order_item(order_item_id):
    try:
        order_item_service.delete_order_item_by_id(order_item_id)
    except ServiceError as error:
        flash(error.message, 'danger')
    else:
        flash(_('Order item has been deleted!'), 'success')
    return redirect(url_for('order_items.list_order_items'))
