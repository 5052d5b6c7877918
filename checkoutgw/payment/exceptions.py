"""
Exceptions raised while building, signing and handing off a checkout.

None of these are retried: a malformed request fails identically on retry.
"""
from .constants import APIErrorCode


class CheckoutError(Exception):
    """Base class for checkout failures surfaced to the caller."""
    code = APIErrorCode.INTERNAL_ERROR
    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CheckoutError):
    """Merchant credentials or gateway settings are missing or invalid."""
    code = APIErrorCode.PAYMENT_UNAVAILABLE
    status_code = 503


class UnknownPlanError(CheckoutError):
    """Plan tier is not in the catalog."""
    code = APIErrorCode.UNKNOWN_PLAN
    status_code = 404

    def __init__(self, tier, valid_tiers=None):
        details = {'valid_tiers': list(valid_tiers)} if valid_tiers else None
        super().__init__(f'Unknown plan tier: {tier!r}', details)
        self.tier = tier


class ValidationError(CheckoutError):
    """Required principal or request fields are missing or malformed."""
    code = APIErrorCode.INVALID_REQUEST
    status_code = 400

    def __init__(self, message, fields=None):
        super().__init__(message, {'fields': list(fields)} if fields else None)
        self.fields = list(fields or [])


class EncodingInvariantViolation(CheckoutError):
    """A payload value cannot be canonically encoded. Indicates a logic bug."""


class UnsignedPayloadError(EncodingInvariantViolation):
    """A payload reached the submission step without a valid signature."""


class HostedCheckoutError(CheckoutError):
    """The delegated hosted-checkout gateway call failed."""
    code = APIErrorCode.GATEWAY_ERROR
    status_code = 502

    def __init__(self, message, status=None):
        super().__init__(message, {'upstream_status': status} if status else None)
        self.status = status
