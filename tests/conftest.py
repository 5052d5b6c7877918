"""
Pytest configuration and fixtures.
"""
from datetime import datetime, timezone

import pytest

from checkoutgw import create_app
from checkoutgw.models.principal import Principal
from checkoutgw.payment.builder import PayloadBuilder, ReferenceGenerator
from checkoutgw.payment.config import GatewayConfig, GatewayUrls

# PayFast sandbox merchant credentials
MERCHANT_ID = '10000100'
MERCHANT_KEY = '46f0cd694581a'
PASSPHRASE = 'jt7NOE43FZPn'

CHECKOUT_HOST = 'https://app.example.com'

# 2025-01-31 23:00 UTC is already 2025-02-01 in Johannesburg
FROZEN_NOW = datetime(2025, 1, 31, 23, 0, tzinfo=timezone.utc)

PRINCIPALS = {
    'u1': Principal(id='u1', email='a@b.com', full_name='Jane Roe', workspace_id='ws-42'),
    'u2': Principal(id='u2', email='solo@example.com', full_name='Cher', phone='0821234567'),
}

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret',
    'WTF_CSRF_ENABLED': False,
    'PAYFAST_MERCHANT_ID': MERCHANT_ID,
    'PAYFAST_MERCHANT_KEY': MERCHANT_KEY,
    'PAYFAST_PASSPHRASE': PASSPHRASE,
    'PAYFAST_SANDBOX': 'true',
    'PAYFAST_RETURN_URL': None,
    'PAYFAST_CANCEL_URL': None,
    'PAYFAST_NOTIFY_URL': None,
    'CHECKOUT_HOST': CHECKOUT_HOST,
    'STRIPE_SECRET_KEY': 'sk_test_123',
    'STRIPE_PRICE_ID_STARTER': 'price_starter',
    'STRIPE_PRICE_ID_PROFESSIONAL': 'price_professional',
    'STRIPE_PRICE_ID_BUSINESS': 'price_business',
    'STRIPE_API_BASE': 'https://api.stripe.test',
}


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app(config=TEST_CONFIG, principal_loader=PRINCIPALS.get)
    ctx = app.app_context()
    ctx.push()
    yield app
    ctx.pop()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def auth_client(client):
    """Test client with principal ``u1`` logged in."""
    with client.session_transaction() as sess:
        sess['_user_id'] = 'u1'
        sess['_fresh'] = True
    return client


@pytest.fixture
def principal():
    return PRINCIPALS['u1']


@pytest.fixture
def gateway_config():
    return GatewayConfig(
        merchant_id=MERCHANT_ID,
        merchant_key=MERCHANT_KEY,
        passphrase=PASSPHRASE,
        sandbox=True,
    )


@pytest.fixture
def gateway_urls():
    return GatewayUrls.from_mapping({'CHECKOUT_HOST': CHECKOUT_HOST})


@pytest.fixture
def frozen_clock():
    """Clock that always returns FROZEN_NOW."""
    return lambda: FROZEN_NOW


@pytest.fixture
def builder(gateway_config, gateway_urls, frozen_clock):
    """PayloadBuilder with a frozen clock and its own reference counter."""
    return PayloadBuilder(
        gateway_config,
        gateway_urls,
        clock=frozen_clock,
        references=ReferenceGenerator(),
    )
