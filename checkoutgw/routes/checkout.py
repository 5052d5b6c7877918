"""
Checkout endpoints.

``checkout_bp`` serves the browser form post and answers with the
auto-submitting PayFast page or a redirect to Stripe. ``checkout_api``
serves the same flow as JSON for single-page clients.
"""
import logging

from flask import Blueprint, current_app, jsonify, redirect, render_template, request
from flask_login import current_user, login_required
from werkzeug.datastructures import MultiDict

from checkoutgw.api.errors import checkout_error_response, internal_error
from checkoutgw.forms import ApiCheckoutForm, CheckoutForm
from checkoutgw.payment.builder import PayloadBuilder
from checkoutgw.payment.config import GatewayConfig, GatewayUrls, StripeConfig
from checkoutgw.payment.constants import CURRENCY
from checkoutgw.payment.exceptions import (
    CheckoutError,
    EncodingInvariantViolation,
    ValidationError
)
from checkoutgw.payment.hosted import HostedCheckoutClient
from checkoutgw.payment.plans import list_plans
from checkoutgw.payment.selector import CheckoutResult, GatewaySelector
from checkoutgw.payment.submission import SubmissionChannel
from checkoutgw.utils.flow_logging import log_checkout_rejected

logger = logging.getLogger(__name__)

checkout_bp = Blueprint('checkout', __name__)
checkout_api = Blueprint('checkout_api', __name__, url_prefix='/api/v1')

submission = SubmissionChannel()


def _origin():
    return (current_app.config.get('CHECKOUT_HOST') or request.host_url).rstrip('/')


def _build_payload_builder():
    config = current_app.config
    return PayloadBuilder(
        GatewayConfig.from_mapping(config),
        GatewayUrls.from_mapping(config, host_url=request.host_url),
        product_name=config.get('PRODUCT_NAME', 'EngageHub'),
        reference_prefix=config.get('PAYMENT_REFERENCE_PREFIX', 'EH'),
    )


def _build_hosted_client():
    return HostedCheckoutClient(
        StripeConfig.from_mapping(current_app.config),
        timeout=current_app.config.get('STRIPE_TIMEOUT', 10),
    )


def get_selector():
    return GatewaySelector(_build_payload_builder, _build_hosted_client)


def _run_checkout(form, plan_tier) -> CheckoutResult:
    trial_days = form.trial_days.data
    if trial_days is None:
        trial_days = current_app.config.get('DEFAULT_TRIAL_DAYS', 14)
    return get_selector().checkout(
        form.gateway.data,
        current_user._get_current_object(),
        plan_tier,
        trial_days,
        origin=_origin(),
    )


def _rejected(error):
    log_checkout_rejected(
        error.message,
        error.code,
        path=request.path,
        principal_id=getattr(current_user, 'id', None),
    )


@checkout_bp.route('/checkout/<plan_tier>', methods=['POST'])
@login_required
def checkout(plan_tier):
    form = CheckoutForm()
    if not form.validate_on_submit():
        raise ValidationError('Invalid checkout request', list(form.errors))

    result = _run_checkout(form, plan_tier)
    if result.payload is not None:
        return submission.submit(result.payload, result.endpoint)
    return redirect(result.redirect_url, code=303)


@checkout_bp.errorhandler(CheckoutError)
def handle_checkout_page_error(error):
    if isinstance(error, EncodingInvariantViolation):
        logger.exception(f"Checkout invariant violated: {error.message}")
        return render_template('payment/error.html', message='Payment is temporarily unavailable.'), 500
    _rejected(error)
    return render_template('payment/error.html', message=error.message), error.status_code


@checkout_api.route('/plans', methods=['GET'])
def plans():
    return jsonify({
        'currency': CURRENCY,
        'data': [plan.to_dict() for plan in list_plans()]
    })


@checkout_api.route('/checkout', methods=['POST'])
@login_required
def create_checkout():
    """
    Start a checkout for the authenticated principal.

    Request body:
        {
            "plan_tier": "professional",
            "trial_days": 14,       // optional
            "gateway": "payfast"    // or "stripe", optional
        }

    Returns (PayFast):
        {
            "gateway": "payfast",
            "payment_reference": "EH-u1-1760000000000000",
            "action": "https://www.payfast.co.za/eng/process",
            "method": "POST",
            "fields": [["merchant_id", "..."], ..., ["signature", "..."]]
        }

    Returns (Stripe):
        {"gateway": "stripe", "redirect_url": "https://checkout.stripe.com/...", "session_id": "cs_..."}
    """
    body = request.get_json(silent=True) if request.is_json else None
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')

    # null means "use the default"; everything else is parsed like a form post
    formdata = MultiDict({key: str(value) for key, value in body.items() if value is not None})
    form = ApiCheckoutForm(formdata=formdata, meta={'csrf': False})
    if not form.validate():
        raise ValidationError('Invalid checkout request', list(form.errors))

    result = _run_checkout(form, form.plan_tier.data)
    return jsonify(result.to_dict(submission))


@checkout_api.errorhandler(CheckoutError)
def handle_checkout_api_error(error):
    if isinstance(error, EncodingInvariantViolation):
        logger.exception(f"Checkout invariant violated: {error.message}")
        return internal_error()
    _rejected(error)
    return checkout_error_response(error)
