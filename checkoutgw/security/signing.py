"""
Signature utilities for gateway payment payloads.
"""
import hmac
import logging

from . import md5
from .canonical import canonical_string
from ..payment.exceptions import EncodingInvariantViolation

logger = logging.getLogger(__name__)


def generate_signature(fields, passphrase=None):
    """
    Generate the gateway signature for a set of payload fields.

    Args:
        fields: PaymentPayload, mapping, or iterable of (name, value) pairs
        passphrase (str, optional): Merchant passphrase configured on the gateway

    Returns:
        str: Lowercase hex MD5 of the canonical string
    """
    return md5.hexdigest(canonical_string(fields, passphrase))


def sign_payload(payload, passphrase=None):
    """
    Compute and attach the signature to a payload.

    Args:
        payload (PaymentPayload): Fully populated payload
        passphrase (str, optional): Merchant passphrase

    Returns:
        PaymentPayload: The same payload, now signed
    """
    signature = generate_signature(payload, passphrase)
    return payload.attach_signature(signature)


def verify_signature(fields, passphrase, provided_signature):
    """
    Verify a signature against the given fields.

    Args:
        fields: PaymentPayload, mapping, or iterable of pairs (``signature`` is ignored)
        passphrase (str): Merchant passphrase, or None
        provided_signature (str): Signature to check

    Returns:
        bool: True if signature is valid
    """
    if not provided_signature:
        return False

    try:
        expected_signature = generate_signature(fields, passphrase)
    except EncodingInvariantViolation as exc:
        logger.warning(f"Signature verification could not canonicalize fields: {exc}")
        return False
    return hmac.compare_digest(expected_signature, provided_signature.lower())
