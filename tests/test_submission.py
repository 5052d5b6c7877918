"""
Tests for handing signed payloads to the gateway.
"""
import re

import pytest

from checkoutgw.models.payload import PaymentPayload
from checkoutgw.payment.constants import PAYFAST_SANDBOX_URL
from checkoutgw.payment.exceptions import UnsignedPayloadError
from checkoutgw.payment.submission import SubmissionChannel


@pytest.fixture
def signed_payload(builder, principal):
    return builder.build_and_sign(principal, 'professional', 14)


@pytest.mark.unit
class TestSubmissionChannel:

    def test_render_posts_to_endpoint(self, app, signed_payload):
        with app.test_request_context():
            html = SubmissionChannel().render(signed_payload, PAYFAST_SANDBOX_URL)
        assert f'action="{PAYFAST_SANDBOX_URL}"' in html
        assert 'method="post"' in html
        assert '<noscript>' in html

    def test_render_field_order_with_signature_last(self, app, signed_payload):
        with app.test_request_context():
            html = SubmissionChannel().render(signed_payload, PAYFAST_SANDBOX_URL)
        names = re.findall(r'<input type="hidden" name="([a-z0-9_]+)"', html)
        assert names == [name for name, _ in signed_payload.fields()]
        assert names[-1] == 'signature'
        assert f'value="{signed_payload.signature}"' in html

    def test_render_escapes_without_reencoding(self, app, signed_payload):
        with app.test_request_context():
            html = SubmissionChannel().render(signed_payload, PAYFAST_SANDBOX_URL)
        # Jinja escapes quotes; the browser decodes them back to the signed value
        assert 'value="{&#34;monthlyPosts&#34;:250,&#34;crmContacts&#34;:10000}"' in html
        assert 'value="Professional Plan - EngageHub"' in html

    def test_submit_response(self, app, signed_payload):
        with app.test_request_context():
            response = SubmissionChannel().submit(signed_payload, PAYFAST_SANDBOX_URL)
        assert response.status_code == 200
        assert response.headers['Cache-Control'] == 'no-store'
        assert b'gateway-form' in response.data

    def test_describe(self, signed_payload):
        description = SubmissionChannel().describe(signed_payload, PAYFAST_SANDBOX_URL)
        assert description['action'] == PAYFAST_SANDBOX_URL
        assert description['method'] == 'POST'
        assert description['fields'][-1] == ['signature', signed_payload.signature]
        assert dict(description['fields'])['amount'] == '1499.00'

    def test_unsigned_payload_is_refused(self, app):
        channel = SubmissionChannel()
        payload = PaymentPayload(amount='1.00')
        with app.test_request_context():
            with pytest.raises(UnsignedPayloadError):
                channel.render(payload, PAYFAST_SANDBOX_URL)
            with pytest.raises(UnsignedPayloadError):
                channel.submit(payload, PAYFAST_SANDBOX_URL)
        with pytest.raises(UnsignedPayloadError):
            channel.describe(payload, PAYFAST_SANDBOX_URL)

    def test_mutated_payload_is_refused(self, signed_payload):
        signed_payload['amount'] = '1.00'
        with pytest.raises(UnsignedPayloadError):
            SubmissionChannel().describe(signed_payload, PAYFAST_SANDBOX_URL)
