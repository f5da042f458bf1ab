from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField, BooleanField, SubmitField
from wtforms.validators import DataRequired, Email, Length, Optional

class UserForm(FlaskForm):
    name = StringField(_l('Name'), validators=[DataRequired(), Length(max=128)])
    email = StringField(_l('Email'), validators=[DataRequired(), Email(), Length(max=255)])
    # required on create, optional on edit (blank keeps the current password)
    password = PasswordField(_l('Password'), validators=[Optional(), Length(min=8)])
    role = SelectField(_l('Role'), choices=[('user', _l('User')), ('admin', _l('Admin'))], validators=[DataRequired()])
    is_email_verified = BooleanField(_l('Email verified'))
    submit = SubmitField(_l('Save'))
