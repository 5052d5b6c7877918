"""
Routes a checkout to the locally signed PayFast flow or to Stripe's hosted
checkout. Keeps the signing path isolated from the hosted provider.
"""
from dataclasses import dataclass
from typing import Optional

from flask import current_app, has_app_context

from .constants import DEFAULT_TRIAL_DAYS, Gateway
from .exceptions import ValidationError
from .plans import lookup
from .signals import checkout_intent
from .builder import validate_principal, validate_trial_days
from ..models.payload import PaymentPayload
from ..utils.flow_logging import log_hosted_session


@dataclass
class CheckoutResult:
    """Outcome of a checkout: a signed payload to post, or a URL to redirect to."""
    gateway: Gateway
    payload: Optional[PaymentPayload] = None
    endpoint: Optional[str] = None
    redirect_url: Optional[str] = None
    session_id: Optional[str] = None

    def to_dict(self, submission=None):
        if self.gateway is Gateway.PAYFAST:
            data = {'gateway': self.gateway.value, 'payment_reference': self.payload['m_payment_id']}
            data.update(submission.describe(self.payload, self.endpoint))
            return data
        return {
            'gateway': self.gateway.value,
            'redirect_url': self.redirect_url,
            'session_id': self.session_id,
        }


def resolve_gateway(gateway):
    if isinstance(gateway, Gateway):
        return gateway
    try:
        return Gateway(str(gateway or '').strip().lower())
    except ValueError:
        raise ValidationError(
            f'Unsupported gateway: {gateway!r}', ['gateway']
        ) from None


class GatewaySelector:
    """Strategy switch between the signed PayFast flow and hosted Stripe checkout."""

    def __init__(self, builder_factory, hosted_client_factory):
        """
        Args:
            builder_factory: Callable returning a PayloadBuilder; only invoked
                for PayFast so a missing PayFast config does not block Stripe
            hosted_client_factory: Callable returning a HostedCheckoutClient
        """
        self.builder_factory = builder_factory
        self.hosted_client_factory = hosted_client_factory

    def checkout(self, gateway, principal, plan_tier, trial_days=DEFAULT_TRIAL_DAYS, origin=None):
        """
        Run the checkout for the chosen gateway.

        Raises:
            ValidationError: unsupported gateway, bad trial days or principal
            UnknownPlanError: unknown plan tier
            ConfigurationError: the chosen gateway is not configured
            HostedCheckoutError: Stripe session creation failed
        """
        gateway = resolve_gateway(gateway)
        plan = lookup(plan_tier)
        trial_days = validate_trial_days(trial_days)

        if gateway is Gateway.PAYFAST:
            return self._payfast(principal, plan, trial_days)
        return self._stripe(principal, plan, trial_days, origin)

    def _payfast(self, principal, plan, trial_days):
        builder = self.builder_factory()
        payload = builder.build_and_sign(principal, plan, trial_days)
        self._announce(Gateway.PAYFAST, {
            'payment_reference': payload['m_payment_id'],
            'plan_tier': plan.tier.value,
            'amount': payload['amount'],
            'principal_id': payload['custom_str1'],
            'workspace_id': payload['custom_str2'],
            'trial_days': trial_days,
        })
        return CheckoutResult(
            gateway=Gateway.PAYFAST,
            payload=payload,
            endpoint=builder.config.process_url,
        )

    def _stripe(self, principal, plan, trial_days, origin):
        validate_principal(principal)
        if not origin:
            raise ValidationError('Missing origin for hosted checkout', ['origin'])
        client = self.hosted_client_factory()
        session = client.create_session(principal, plan, trial_days, origin)
        log_hosted_session(Gateway.STRIPE.value, session.session_id, plan.tier.value, principal.id)
        self._announce(Gateway.STRIPE, {
            'session_id': session.session_id,
            'plan_tier': plan.tier.value,
            'principal_id': str(principal.id),
            'workspace_id': principal.workspace_id,
            'trial_days': trial_days,
        })
        return CheckoutResult(
            gateway=Gateway.STRIPE,
            redirect_url=session.url,
            session_id=session.session_id,
        )

    @staticmethod
    def _announce(gateway, intent):
        sender = current_app._get_current_object() if has_app_context() else None
        checkout_intent.send(sender, gateway=gateway.value, intent=intent)
