from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, IntegerField, FloatField, SubmitField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional

class ProductForm(FlaskForm):
    name = StringField(_l('Name'), validators=[DataRequired()])
    description = TextAreaField(_l('Description'), validators=[Optional()])
    category = SelectField(_l('Category'), validators=[DataRequired()])
    quantity_in_stock = IntegerField(_l('Quantity in stock'), validators=[InputRequired(), NumberRange(min=0)])
    price = FloatField(_l('Price'), validators=[InputRequired(), NumberRange(min=0)])
    submit = SubmitField(_l('Save'))
