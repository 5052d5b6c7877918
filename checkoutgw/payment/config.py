"""
Gateway configuration.

Values come from ``app.config``, which ``create_app`` fills from the
environment (and ``.env``) exactly once at startup.
"""
from dataclasses import dataclass
from typing import Optional

from .constants import PAYFAST_LIVE_URL, PAYFAST_SANDBOX_URL, PlanTier
from .exceptions import ConfigurationError

_TRUTHY = ('1', 'true', 'yes', 'on')


def _flag(value):
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in _TRUTHY


@dataclass(frozen=True)
class GatewayConfig:
    """PayFast merchant credentials."""
    merchant_id: str
    merchant_key: str
    passphrase: Optional[str] = None
    sandbox: bool = False

    def __post_init__(self):
        missing = [name for name in ('merchant_id', 'merchant_key') if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                'PayFast is not configured',
                {'missing': [f'PAYFAST_{name.upper()}' for name in missing]},
            )

    def __repr__(self):
        # merchant key and passphrase stay out of logs and tracebacks
        return f'<GatewayConfig merchant_id={self.merchant_id} sandbox={self.sandbox}>'

    @property
    def process_url(self):
        return PAYFAST_SANDBOX_URL if self.sandbox else PAYFAST_LIVE_URL

    @classmethod
    def from_mapping(cls, config):
        """
        Build from a config mapping such as ``app.config``.

        Raises:
            ConfigurationError: if the merchant id or key is missing
        """
        return cls(
            merchant_id=(config.get('PAYFAST_MERCHANT_ID') or '').strip(),
            merchant_key=(config.get('PAYFAST_MERCHANT_KEY') or '').strip(),
            passphrase=config.get('PAYFAST_PASSPHRASE') or None,
            sandbox=_flag(config.get('PAYFAST_SANDBOX')),
        )


@dataclass(frozen=True)
class GatewayUrls:
    """Return, cancel and notify URLs handed to the gateway."""
    return_url: str
    cancel_url: str
    notify_url: str

    @classmethod
    def from_mapping(cls, config, host_url=None):
        """
        Build from config, defaulting each URL to a path on ``host_url``.

        Args:
            config: mapping such as ``app.config``
            host_url (str, optional): Public origin, e.g. ``request.host_url``
        """
        host = (config.get('CHECKOUT_HOST') or host_url or '').rstrip('/')
        urls = {
            'return_url': config.get('PAYFAST_RETURN_URL') or (host and f'{host}/payment/success'),
            'cancel_url': config.get('PAYFAST_CANCEL_URL') or (host and f'{host}/payment/cancel'),
            'notify_url': config.get('PAYFAST_NOTIFY_URL') or (host and f'{host}/api/payfast/notify'),
        }
        missing = [name for name, value in urls.items() if not value]
        if missing:
            raise ConfigurationError(
                'Gateway callback URLs are not configured',
                {'missing': [f'PAYFAST_{name.upper()}' for name in missing]},
            )
        return cls(**urls)


@dataclass(frozen=True)
class StripeConfig:
    """Credentials for the delegated Stripe Checkout flow."""
    secret_key: str
    price_ids: dict
    api_base: str = 'https://api.stripe.com'

    def __repr__(self):
        return f'<StripeConfig api_base={self.api_base}>'

    @property
    def enabled(self):
        return bool(self.secret_key)

    def price_id_for(self, tier):
        """
        Return the Stripe price id for a plan tier.

        Raises:
            ConfigurationError: if Stripe or the tier's price is not configured
        """
        if not self.enabled:
            raise ConfigurationError('Stripe is not configured', {'missing': ['STRIPE_SECRET_KEY']})
        tier = tier.value if isinstance(tier, PlanTier) else tier
        price_id = self.price_ids.get(tier)
        if not price_id:
            raise ConfigurationError(
                f'Stripe price ID is not configured for plan tier "{tier}"',
                {'missing': [f'STRIPE_PRICE_ID_{tier.upper()}']},
            )
        return price_id

    @classmethod
    def from_mapping(cls, config):
        return cls(
            secret_key=config.get('STRIPE_SECRET_KEY') or '',
            price_ids={
                tier.value: config.get(f'STRIPE_PRICE_ID_{tier.name}') or None
                for tier in PlanTier
            },
            api_base=(config.get('STRIPE_API_BASE') or 'https://api.stripe.com').rstrip('/'),
        )
