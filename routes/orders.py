import io
from flask import Blueprint, render_template, redirect, url_for, flash, request, abort, send_file
from flask_login import login_required, current_user
from flask_babel import gettext as _
import pandas as pd
from forms.order_forms import OrderForm
from routes.auth import admin_required
from routes.pagination import page_args, last_page
from services import order_service
from services.errors import ServiceError

orders_bp = Blueprint('orders', __name__, url_prefix='/orders')

EXPORT_COLUMNS = ['id', 'date', 'customer_name', 'customer_email', 'total_price', 'items']

def _order_body(form):
    body = {
        'date': form.date.data.isoformat() if form.date.data else None,
        'customer_name': form.customer_name.data,
        'customer_email': form.customer_email.data,
    }
    if form.total_price.data is not None:
        body['total_price'] = form.total_price.data
    return body

@orders_bp.route('/')
@login_required
@admin_required
def list_orders():
    page, limit, skip = page_args()
    orders = order_service.get_all_orders(skip, limit)
    total = order_service.get_order_count()
    return render_template('orders/list.html', title=_('Orders'), orders=orders,
                           page=page, limit=limit, last_page=last_page(total, limit))

@orders_bp.route('/search')
@login_required
@admin_required
def search_orders():
    name = request.args.get('name', '').strip()
    orders = order_service.get_orders_by_customer_name(name)
    return render_template('orders/list.html', title=_('Orders'), orders=orders, q=name)

@orders_bp.route('/detail/<order_id>')
@login_required
@admin_required
def detail_order(order_id):
    order = order_service.get_order_by_id(order_id)
    if order is None:
        abort(404)
    return render_template('orders/detail.html', title=_('Order'), order=order, order_items=order.items.all())

@orders_bp.route('/add', methods=['GET', 'POST'])
@login_required
@admin_required
def add_order():
    form = OrderForm()
    if form.validate_on_submit():
        try:
            order = order_service.create_order(_order_body(form), user_id=current_user.id)
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('New order has been added!'), 'success')
            return redirect(url_for('orders.detail_order', order_id=order.id))
    return render_template('orders/form.html', title=_('Add order'), form=form)

@orders_bp.route('/edit/<order_id>', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_order(order_id):
    order = order_service.get_order_by_id(order_id)
    if order is None:
        abort(404)
    form = OrderForm(obj=order)
    if form.validate_on_submit():
        try:
            order_service.update_order_by_id(order_id, _order_body(form))
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('Order has been updated!'), 'success')
            return redirect(url_for('orders.list_orders'))
    return render_template('orders/form.html', title=_('Edit order'), form=form, edit=True)

@orders_bp.route('/delete/<order_id>', methods=['POST'])
@login_required
@admin_required
def delete_order(order_id):
    try:
        order_service.delete_order_by_id(order_id)
    except ServiceError as error:
        flash(error.message, 'danger')
    else:
        flash(_('Order has been deleted!'), 'success')
    return redirect(url_for('orders.list_orders'))

@orders_bp.route('/export')
@login_required
@admin_required
def export_orders():
    orders = order_service.query_orders()
    data = [{
        'id': o.id,
        'date': o.date.strftime('%Y-%m-%d'),
        'customer_name': o.customer_name,
        'customer_email': o.customer_email,
        'total_price': o.total_price,
        'items': o.items.count(),
    } for o in orders]
    df = pd.DataFrame(data, columns=EXPORT_COLUMNS)

    if request.args.get('format') == 'csv':
        buffer = io.BytesIO(df.to_csv(index=False).encode('utf-8'))
        return send_file(buffer, mimetype='text/csv', as_attachment=True, download_name='orders.csv')

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        df.to_excel(writer, sheet_name='Orders', index=False)
        worksheet = writer.sheets['Orders']
        header_format = writer.book.add_format({
            'bold': True,
            'fg_color': '#D7E4BC',
            'border': 1,
            'align': 'center'
        })
        for col_num, value in enumerate(df.columns.values):
            worksheet.write(0, col_num, value, header_format)
        worksheet.set_column(0, len(EXPORT_COLUMNS) - 1, 20)
    output.seek(0)
    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name='orders.xlsx'
    )
