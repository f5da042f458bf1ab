from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, IntegerField, FloatField, DateField, SubmitField
from wtforms.validators import DataRequired, Email, InputRequired, NumberRange, Optional

class OrderForm(FlaskForm):
    date = DateField(_l('Date'), validators=[DataRequired()])
    customer_name = StringField(_l('Customer name'), validators=[DataRequired()])
    customer_email = StringField(_l('Customer email'), validators=[DataRequired(), Email()])
    total_price = FloatField(_l('Total price'), validators=[Optional(), NumberRange(min=0)])
    submit = SubmitField(_l('Save'))

class OrderItemForm(FlaskForm):
    order = SelectField(_l('Order'), validators=[DataRequired()])
    product = SelectField(_l('Product'), validators=[DataRequired()])
    quantity = IntegerField(_l('Quantity'), validators=[InputRequired(), NumberRange(min=1)])
    unit_price = FloatField(_l('Unit price'), validators=[InputRequired(), NumberRange(min=0)])
    submit = SubmitField(_l('Save'))
