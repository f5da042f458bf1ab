from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length

class CategoryForm(FlaskForm):
    name = StringField(_l('Name'), validators=[DataRequired(), Length(max=128)])
    submit = SubmitField(_l('Save'))
