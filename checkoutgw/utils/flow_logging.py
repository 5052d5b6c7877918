"""
Flow logging utilities for checkout attempts.
Structured event logging for payload building, signing and hand-off.
"""
import logging
from flask import g, has_app_context

logger = logging.getLogger(__name__)


def _request_id():
    if has_app_context():
        return getattr(g, 'request_id', 'background')
    return 'background'


def log_checkout_event(event_type, payload=None, **kwargs):
    """
    Log checkout events with structured data.

    Never logs the merchant key, the passphrase or the signature input.

    Args:
        event_type (str): Event type (e.g., 'checkout.payload_built', 'checkout.signed')
        payload: PaymentPayload instance
        **kwargs: Additional context
    """
    request_id = _request_id()

    log_data = {
        'request_id': request_id,
        'event': event_type,
        'payment_reference': payload.get('m_payment_id') if payload else None,
        'amount': payload.get('amount') if payload else None,
        'plan_tier': payload.get('custom_str3') if payload else None,
        'principal_id': payload.get('custom_str1') if payload else None,
        'signed': payload.is_signed if payload else None,
    }
    log_data.update(kwargs)

    logger.info(
        f"[{request_id}] {event_type}: ref={log_data.get('payment_reference')} "
        f"amount={log_data.get('amount')} ZAR tier={log_data.get('plan_tier')} "
        f"signed={log_data.get('signed')}",
        extra=log_data
    )


def log_hosted_session(gateway, session_id, plan_tier, principal_id, **kwargs):
    """
    Log creation of a delegated hosted-checkout session.

    Args:
        gateway (str): Gateway identifier
        session_id (str): Session id returned by the gateway
        plan_tier (str): Plan tier key
        principal_id (str): Authenticated principal id
        **kwargs: Additional context
    """
    request_id = _request_id()

    log_data = {
        'request_id': request_id,
        'event': 'checkout.hosted_session',
        'gateway': gateway,
        'session_id': session_id,
        'plan_tier': plan_tier,
        'principal_id': principal_id,
    }
    log_data.update(kwargs)

    logger.info(
        f"[{request_id}] checkout.hosted_session: {gateway} session={session_id} "
        f"tier={plan_tier} principal={principal_id}",
        extra=log_data
    )


def log_checkout_rejected(reason, code, **kwargs):
    """
    Log a checkout attempt that failed before any redirect.

    Args:
        reason (str): Human-readable reason
        code (str): Error code of the raised CheckoutError
        **kwargs: Additional context
    """
    request_id = _request_id()

    log_data = {
        'request_id': request_id,
        'event': 'checkout.rejected',
        'code': code,
        'reason': reason,
    }
    log_data.update(kwargs)

    logger.warning(
        f"[{request_id}] checkout.rejected: code={code} reason={reason}",
        extra=log_data
    )
