"""
Hands a signed payload to the gateway as an auto-submitting form post.
"""
from flask import make_response, render_template

from .exceptions import UnsignedPayloadError
from ..utils.flow_logging import log_checkout_event

REDIRECT_TEMPLATE = 'payment/redirect.html'


class SubmissionChannel:
    """Pure transport: values are emitted exactly as signed, never re-encoded."""

    def __init__(self, template=REDIRECT_TEMPLATE):
        self.template = template

    @staticmethod
    def _require_signed(payload):
        if payload is None or not payload.is_signed:
            raise UnsignedPayloadError('Refusing to submit an unsigned payload')

    def render(self, payload, endpoint):
        """Render the hidden auto-submitting form as HTML."""
        self._require_signed(payload)
        return render_template(
            self.template,
            action=endpoint,
            fields=list(payload.fields()),
        )

    def submit(self, payload, endpoint):
        """
        Build the response that hands control to the browser.

        Args:
            payload (PaymentPayload): Signed payload
            endpoint (str): Gateway process URL

        Returns:
            flask.Response: HTML page that posts the form on load
        """
        response = make_response(self.render(payload, endpoint))
        response.headers['Cache-Control'] = 'no-store'
        log_checkout_event('checkout.submitted', payload, endpoint=endpoint)
        return response

    def describe(self, payload, endpoint):
        """Form description for API clients that post the form themselves."""
        self._require_signed(payload)
        log_checkout_event('checkout.submitted', payload, endpoint=endpoint, transport='json')
        return {
            'action': endpoint,
            'method': 'POST',
            'fields': [[name, value] for name, value in payload.fields()],
        }
