from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from flask_login import login_required, current_user
from flask_babel import gettext as _
from forms.user_forms import UserForm
from routes.auth import admin_required
from routes.pagination import page_args, last_page
from services import user_service
from services.errors import ServiceError

users_bp = Blueprint('users', __name__, url_prefix='/users')

def _user_body(form):
    body = {
        'name': form.name.data,
        'email': form.email.data,
        'role': form.role.data,
        'is_email_verified': form.is_email_verified.data,
    }
    if form.password.data:
        body['password'] = form.password.data
    return body

@users_bp.route('/')
@login_required
@admin_required
def list_users():
    page, limit, skip = page_args()
    users = user_service.get_all_users(skip, limit)
    total = user_service.get_user_count()
    return render_template('users/list.html', title=_('Users'), users=users,
                           page=page, limit=limit, last_page=last_page(total, limit))

@users_bp.route('/search')
@login_required
@admin_required
def search_users():
    name = request.args.get('name', '').strip()
    users = user_service.get_users_by_name(name)
    return render_template('users/list.html', title=_('Users'), users=users, q=name)

@users_bp.route('/detail/<user_id>')
@login_required
@admin_required
def detail_user(user_id):
    user = user_service.get_user_by_id(user_id)
    if user is None:
        abort(404)
    return render_template('users/detail.html', title=user.name, user=user)

@users_bp.route('/add', methods=['GET', 'POST'])
@login_required
@admin_required
def add_user():
    form = UserForm()
    if form.validate_on_submit():
        try:
            user_service.create_user(_user_body(form))
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('User added successfully'), 'success')
            return redirect(url_for('users.list_users'))
    return render_template('users/form.html', title=_('Add user'), form=form)

@users_bp.route('/edit/<user_id>', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_user(user_id):
    user = user_service.get_user_by_id(user_id)
    if user is None:
        abort(404)
    form = UserForm(obj=user)
    if form.validate_on_submit():
        if user.id == current_user.id and form.role.data != user.role:
            flash(_('You cannot change your own role!'), 'danger')
            return redirect(url_for('users.edit_user', user_id=user_id))
        try:
            user_service.update_user_by_id(user_id, _user_body(form))
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('User updated successfully'), 'success')
            return redirect(url_for('users.list_users'))
    return render_template('users/form.html', title=_('Edit user'), form=form, edit=True)

@users_bp.route('/delete/<user_id>', methods=['POST'])
@login_required
@admin_required
def delete_user(user_id):
    if user_id == current_user.id:
        flash(_('You cannot delete yourself!'), 'danger')
        return redirect(url_for('users.list_users'))
    try:
        user_service.delete_user_by_id(user_id)
    except ServiceError as error:
        flash(error.message, 'danger')
    else:
        flash(_('User deleted successfully'), 'success')
    return redirect(url_for('users.list_users'))
