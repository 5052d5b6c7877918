"""
Builds the gateway payload for a subscription checkout attempt.
"""
import json
import threading
import time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .config import GatewayConfig, GatewayUrls
from .constants import DEFAULT_TRIAL_DAYS, MAX_TRIAL_DAYS, Frequency, SubscriptionType, UNBOUNDED_CYCLES
from .exceptions import ValidationError
from .plans import PlanDefinition, lookup
from ..models.payload import PaymentPayload
from ..security.signing import sign_payload
from ..utils.flow_logging import log_checkout_event
from ..utils.timezone import billing_date, now_sast

TWO_PLACES = Decimal('0.01')


def format_amount(value):
    """
    Format a price as the exact two-decimal string the gateway receives.

    ``1499``, ``1499.0``, ``"1499"`` and ``Decimal("1499")`` all give
    ``"1499.00"``.
    """
    if isinstance(value, bool):
        raise ValidationError('Amount must be a number', ['amount'])
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError('Invalid amount format', ['amount']) from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError('Amount must be a non-negative number', ['amount'])
    return f'{amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP):.2f}'


def validate_trial_days(trial_days):
    """Return trial days as an int between 0 and MAX_TRIAL_DAYS."""
    if isinstance(trial_days, bool):
        raise ValidationError('Trial days must be an integer', ['trial_days'])
    if isinstance(trial_days, str):
        try:
            trial_days = int(trial_days.strip())
        except ValueError:
            raise ValidationError('Trial days must be an integer', ['trial_days']) from None
    if not isinstance(trial_days, int) or not 0 <= trial_days <= MAX_TRIAL_DAYS:
        raise ValidationError(
            f'Trial days must be an integer between 0 and {MAX_TRIAL_DAYS}', ['trial_days']
        )
    return trial_days


def validate_principal(principal):
    """Require a non-blank id and email on the paying principal."""
    missing = []
    if not principal or not str(getattr(principal, 'id', '') or '').strip():
        missing.append('id')
    if not principal or not (getattr(principal, 'email', '') or '').strip():
        missing.append('email')
    if missing:
        raise ValidationError('Missing required principal fields', missing)


class ReferenceGenerator:
    """Strictly increasing microsecond stamps for payment references.

    Two calls in the same microsecond (or after a wall-clock step back)
    still get distinct values.
    """

    def __init__(self, clock_ns=time.time_ns):
        self._clock_ns = clock_ns
        self._last = 0
        self._lock = threading.Lock()

    def next_stamp(self):
        with self._lock:
            stamp = max(self._clock_ns() // 1000, self._last + 1)
            self._last = stamp
            return stamp

    def reference(self, prefix, principal_id):
        return f'{prefix}-{principal_id[:8]}-{self.next_stamp()}'


# Process-wide so concurrent builders never hand out the same reference
reference_generator = ReferenceGenerator()


class PayloadBuilder:
    """Assembles and signs PayFast subscription payloads."""

    def __init__(self, config: GatewayConfig, urls: GatewayUrls, clock=None,
                 product_name='EngageHub', reference_prefix='EH', references=None):
        self.config = config
        self.urls = urls
        self.clock = clock or now_sast
        self.product_name = product_name
        self.reference_prefix = reference_prefix
        self.references = references or reference_generator

    def item_description(self, plan: PlanDefinition):
        return (
            f'Monthly subscription: {plan.monthly_posts} AI posts, '
            f'{plan.crm_contacts:,} CRM contacts'
        )

    def build(self, principal, plan, trial_days=DEFAULT_TRIAL_DAYS) -> PaymentPayload:
        """
        Build the unsigned payload for one checkout attempt.

        Args:
            principal (Principal): Authenticated payer
            plan (PlanDefinition, PlanTier or str): Plan being purchased
            trial_days (int): Free trial length; 0 bills immediately

        Returns:
            PaymentPayload: Unsigned payload

        Raises:
            UnknownPlanError: unknown tier
            ValidationError: missing principal id/email or bad trial days
        """
        if not isinstance(plan, PlanDefinition):
            plan = lookup(plan)
        trial_days = validate_trial_days(trial_days)
        validate_principal(principal)

        first_name, last_name = principal.split_name()
        amount = format_amount(plan.price)
        principal_id = str(principal.id)

        payload = PaymentPayload(
            merchant_id=self.config.merchant_id,
            merchant_key=self.config.merchant_key,
            return_url=self.urls.return_url,
            cancel_url=self.urls.cancel_url,
            notify_url=self.urls.notify_url,
            name_first=first_name,
            name_last=last_name,
            email_address=principal.email.strip(),
            cell_number=principal.phone or None,
            m_payment_id=self.references.reference(self.reference_prefix, principal_id),
            amount=amount,
            item_name=f'{plan.name} Plan - {self.product_name}',
            item_description=self.item_description(plan),
            subscription_type=SubscriptionType.SUBSCRIPTION.value,
            billing_date=billing_date(trial_days, now=self.clock()),
            recurring_amount=amount,
            frequency=Frequency.MONTHLY.value,
            cycles=UNBOUNDED_CYCLES,
            custom_str1=principal_id,
            custom_str2=str(principal.workspace_id) if principal.workspace_id else None,
            custom_str3=plan.tier.value,
            custom_str4=str(trial_days),
            custom_str5=json.dumps(plan.quota_summary(), separators=(',', ':')),
        )
        log_checkout_event('checkout.payload_built', payload, trial_days=trial_days)
        return payload

    def build_and_sign(self, principal, plan_tier, trial_days=DEFAULT_TRIAL_DAYS) -> PaymentPayload:
        """Build the payload and attach its signature."""
        payload = self.build(principal, plan_tier, trial_days)
        sign_payload(payload, self.config.passphrase)
        log_checkout_event('checkout.signed', payload)
        return payload
