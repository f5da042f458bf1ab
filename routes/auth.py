from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_user, logout_user, login_required, current_user
from flask_babel import gettext as _
from functools import wraps
from forms.auth_forms import LoginForm, RegisterForm
from services import user_service
from services.errors import ServiceError

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

# decorator checking the admin role
def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin():
            flash(_('You do not have permission to access this page'), 'danger')
            return redirect(url_for('dashboard'))
        return f(*args, **kwargs)
    return decorated_function

def _safe_next(target):
    # only follow local paths
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return url_for('dashboard')

@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard'))
    form = LoginForm()
    if form.validate_on_submit():
        try:
            user = user_service.authenticate(form.email.data, form.password.data)
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            login_user(user)
            flash(_('Logged in successfully'), 'success')
            return redirect(_safe_next(request.args.get('next')))
    return render_template('auth/login.html', title=_('Log in'), form=form)

@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard'))
    form = RegisterForm()
    if form.validate_on_submit():
        try:
            user_service.create_user({
                'name': form.name.data,
                'email': form.email.data,
                'password': form.password.data,
                'role': 'user',
            })
        except ServiceError as error:
            flash(error.message, 'danger')
        else:
            flash(_('Account created, you can now log in'), 'success')
            return redirect(url_for('auth.login'))
    return render_template('auth/register.html', title=_('Register'), form=form)

@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    flash(_('Logged out successfully'), 'success')
    return redirect(url_for('auth.login'))
