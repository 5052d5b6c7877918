"""
Checkout constants and enums.
"""
from enum import Enum


class Gateway(Enum):
    """Gateways a checkout can be routed to."""
    PAYFAST = 'payfast'
    STRIPE = 'stripe'


class PlanTier(Enum):
    """Subscription tiers offered by the product."""
    STARTER = 'starter'
    PROFESSIONAL = 'professional'
    BUSINESS = 'business'


class SubscriptionType(Enum):
    """PayFast ``subscription_type`` codes."""
    ONE_TIME = '0'
    SUBSCRIPTION = '1'


class Frequency(Enum):
    """Recurring billing frequency codes sent to the gateway."""
    MONTHLY = 'M'


# PayFast process endpoints
PAYFAST_LIVE_URL = 'https://www.payfast.co.za/eng/process'
PAYFAST_SANDBOX_URL = 'https://sandbox.payfast.co.za/eng/process'

CURRENCY = 'ZAR'
DEFAULT_TRIAL_DAYS = 14
MAX_TRIAL_DAYS = 90

# Cycles value meaning "bill until cancelled"
UNBOUNDED_CYCLES = '0'


class APIErrorCode:
    """Standardized API error codes."""
    INVALID_REQUEST = 'invalid_request'
    AUTHENTICATION_FAILED = 'authentication_failed'
    UNKNOWN_PLAN = 'unknown_plan'
    PAYMENT_UNAVAILABLE = 'payment_unavailable'
    GATEWAY_ERROR = 'gateway_error'
    INTERNAL_ERROR = 'internal_error'
