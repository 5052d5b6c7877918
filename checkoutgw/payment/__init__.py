"""Checkout payment package."""
from .constants import (
    Gateway,
    PlanTier,
    Frequency,
    SubscriptionType,
    APIErrorCode
)
from .exceptions import (
    CheckoutError,
    ConfigurationError,
    UnknownPlanError,
    ValidationError,
    EncodingInvariantViolation,
    UnsignedPayloadError,
    HostedCheckoutError
)

__all__ = [
    'Gateway',
    'PlanTier',
    'Frequency',
    'SubscriptionType',
    'APIErrorCode',
    'CheckoutError',
    'ConfigurationError',
    'UnknownPlanError',
    'ValidationError',
    'EncodingInvariantViolation',
    'UnsignedPayloadError',
    'HostedCheckoutError'
]
