"""
Delegated hosted checkout (Stripe Checkout).

None of the local signing applies here: Stripe hosts the payment page and
only needs a session created server-side. This is the one outbound call in
the checkout flow, so it is the only place with a timeout and retries.
"""
import logging
import time
import uuid
from dataclasses import dataclass

import requests

from .config import StripeConfig
from .exceptions import HostedCheckoutError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = (409, 429, 500, 502, 503, 504)


@dataclass(frozen=True)
class HostedSession:
    session_id: str
    url: str


class HostedCheckoutClient:
    """Stripe Checkout session client"""

    def __init__(self, config: StripeConfig, timeout=10, max_attempts=3,
                 backoff_seconds=0.5, session=None, sleep=time.sleep):
        """
        Args:
            config: Stripe credentials and per-tier price ids
            timeout: HTTP request timeout in seconds
            max_attempts: Attempts for connection errors and retryable statuses
            backoff_seconds: Base delay, doubled after each failed attempt
            session: Optional ``requests.Session`` (injected in tests)
            sleep: Sleep function (injected in tests)
        """
        self.config = config
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self.session = session or requests.Session()
        self.sleep = sleep

    def _session_params(self, principal, plan, trial_days, origin):
        tier = plan.tier.value
        origin = origin.rstrip('/')
        params = {
            'mode': 'subscription',
            'payment_method_types[0]': 'card',
            'line_items[0][price]': self.config.price_id_for(tier),
            'line_items[0][quantity]': '1',
            'customer_email': principal.email,
            'client_reference_id': str(principal.id),
            'success_url': f'{origin}/payment/success?gateway=stripe&session_id={{CHECKOUT_SESSION_ID}}',
            'cancel_url': f'{origin}/payment/cancel',
            'metadata[userId]': str(principal.id),
            'metadata[planTier]': tier,
            'subscription_data[metadata][userId]': str(principal.id),
            'subscription_data[metadata][planTier]': tier,
        }
        if trial_days > 0:
            params['subscription_data[trial_period_days]'] = str(trial_days)
        return params

    @staticmethod
    def _error_message(response):
        try:
            return response.json()['error']['message']
        except (ValueError, KeyError, TypeError):
            return response.text[:200] if response.text else f'HTTP {response.status_code}'

    def create_session(self, principal, plan, trial_days, origin) -> HostedSession:
        """
        Create a subscription Checkout Session and return its redirect target.

        Args:
            principal (Principal): Authenticated payer
            plan (PlanDefinition): Plan being purchased
            trial_days (int): Trial length; omitted from the request when 0
            origin (str): Public origin used for success/cancel URLs

        Returns:
            HostedSession: Session id and hosted checkout URL

        Raises:
            ConfigurationError: Stripe or the plan's price id is not configured
            HostedCheckoutError: Stripe rejected the request or was unreachable
        """
        params = self._session_params(principal, plan, trial_days, origin)
        url = f'{self.config.api_base}/v1/checkout/sessions'
        # Reused across retries so Stripe never creates two sessions
        headers = {'Idempotency-Key': f'checkout-{uuid.uuid4().hex}'}

        last_error = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self.session.post(
                    url,
                    data=params,
                    headers=headers,
                    auth=(self.config.secret_key, ''),
                    timeout=self.timeout,
                )
            except requests.exceptions.Timeout:
                last_error = HostedCheckoutError(f'Stripe request timeout after {self.timeout}s')
            except requests.exceptions.ConnectionError as e:
                last_error = HostedCheckoutError(f'Stripe connection error: {str(e)[:200]}')
            except requests.exceptions.RequestException as e:
                raise HostedCheckoutError(f'Stripe request error: {str(e)[:200]}') from e
            else:
                if 200 <= response.status_code < 300:
                    return self._parse_session(response)
                message = self._error_message(response)
                last_error = HostedCheckoutError(
                    f'Stripe rejected checkout session: {message}', response.status_code
                )
                if response.status_code not in RETRYABLE_STATUS:
                    raise last_error

            if attempt < self.max_attempts:
                delay = self.backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    f"Stripe checkout attempt {attempt}/{self.max_attempts} failed: "
                    f"{last_error.message}; retrying in {delay:.1f}s"
                )
                self.sleep(delay)

        raise last_error

    @staticmethod
    def _parse_session(response):
        try:
            data = response.json()
        except ValueError:
            raise HostedCheckoutError('Stripe returned a non-JSON response', response.status_code) from None
        if not data.get('id') or not data.get('url'):
            raise HostedCheckoutError('Stripe session response is missing id or url', response.status_code)
        return HostedSession(session_id=data['id'], url=data['url'])
