from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required
from flask_babel import gettext as _
from forms.category_forms import CategoryForm
from routes.pagination import page_args, last_page
from services import category_service
from services.errors import ServiceError

categories_bp = Blueprint('categories', __name__, url_prefix='/categories')

@categories_bp.route('/')
@login_required
def list_categories():
    page, limit, skip = page_args()
    categories = category_service.get_all_categories(skip, limit)
    total = category_service.get_category_count()
    return render_template('categories/list.html', title=_('Categories'), categories=categories,
                           page=page, limit=limit, last_page=last_page(total, limit))

@categories_bp.route('/search')
@login_required
def search_categories():
    name = request.args.get('name', '').strip()
    categories = category_service.get_categories_by_name(name)
    return render_template('categories/list.html', title=_('Categories'), categories=categories, q=name)

@categories_bp.route('/detail/<category_id>')
@login_required
def detail_category(category_id):
    category = category_service.get_category_by_id(category_id)
    if category is None:
        abort(404)
    return render_template('categories/detail.html', title=category.name, category=category)

@categories_bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_category():
    form = CategoryForm()
    if form.validate_on_submit():
        try:
            category_service.create_category({'name': form.name.data})
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('Category added successfully'), 'success')
            return redirect(url_for('categories.list_categories'))
    return render_template('categories/form.html', title=_('Add category'), form=form)

@categories_bp.route('/edit/<category_id>', methods=['GET', 'POST'])
@login_required
def edit_category(category_id):
    category = category_service.get_category_by_id(category_id)
    if category is None:
        abort(404)
    form = CategoryForm(obj=category)
    if form.validate_on_submit():
        try:
            category_service.update_category_by_id(category_id, {'name': form.name.data})
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('Category updated successfully'), 'success')
            return redirect(url_for('categories.list_categories'))
    return render_template('categories/form.html', title=_('Edit category'), form=form, edit=True)

@categories_bp.route('/delete/<category_id>', methods=['POST'])
@login_required
def delete_category(category_id):
    try:
        category_service.delete_category_by_id(category_id)
    except ServiceError as error:
        flash(error.message, 'danger')
    else:
        flash(_('Category deleted successfully'), 'success')
    return redirect(url_for('categories.list_categories'))
