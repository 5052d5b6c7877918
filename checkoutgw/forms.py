from flask_wtf import FlaskForm
from wtforms import IntegerField, SelectField, StringField, SubmitField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from checkoutgw.payment.constants import MAX_TRIAL_DAYS, Gateway

GATEWAY_CHOICES = [
    (Gateway.PAYFAST.value, 'PayFast (ZAR)'),
    (Gateway.STRIPE.value, 'Stripe (Cards)'),
]


class CheckoutForm(FlaskForm):
    trial_days = IntegerField(
        'Trial Days',
        validators=[Optional(), NumberRange(min=0, max=MAX_TRIAL_DAYS)]
    )
    gateway = SelectField('Payment Method', choices=GATEWAY_CHOICES, default=Gateway.PAYFAST.value)
    submit = SubmitField('Continue to Payment')


class ApiCheckoutForm(CheckoutForm):
    """JSON variant; the plan tier comes from the body instead of the URL."""
    plan_tier = StringField('Plan', validators=[DataRequired(), Length(max=32)])
