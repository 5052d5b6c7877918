"""
Tests for PaymentPayload and Principal.
"""
import pytest

from checkoutgw.models import FIELD_ORDER, PaymentPayload, Principal, SIGNATURE_FIELD
from checkoutgw.payment.exceptions import EncodingInvariantViolation
from checkoutgw.security import sign_payload


@pytest.mark.unit
class TestPaymentPayload:

    def test_fields_follow_transmission_order(self):
        payload = PaymentPayload(amount='5.00', merchant_id='1', cycles='0')
        assert [name for name, _ in payload.fields()] == ['merchant_id', 'amount', 'cycles']

    def test_signature_is_emitted_last(self):
        payload = sign_payload(PaymentPayload(custom_str5='{}', merchant_id='1'))
        names = [name for name, _ in payload.fields()]
        assert names[-1] == SIGNATURE_FIELD
        assert SIGNATURE_FIELD not in dict(payload.fields(include_signature=False))

    def test_unknown_field_is_rejected(self):
        with pytest.raises(EncodingInvariantViolation):
            PaymentPayload(amount_cents='100')

    def test_non_string_value_is_rejected(self):
        payload = PaymentPayload()
        with pytest.raises(EncodingInvariantViolation):
            payload['amount'] = 1499

    def test_signature_cannot_be_assigned(self):
        payload = PaymentPayload()
        with pytest.raises(EncodingInvariantViolation):
            payload['signature'] = 'a' * 32

    def test_mutation_discards_signature(self):
        payload = sign_payload(PaymentPayload(amount='1499.00'))
        assert payload.is_signed
        payload['amount'] = '1.00'
        assert not payload.is_signed
        assert payload.signature is None

    def test_same_value_keeps_signature(self):
        payload = sign_payload(PaymentPayload(amount='1499.00'))
        payload['amount'] = '1499.00'
        assert payload.is_signed

    def test_attach_signature_requires_hex_digest_length(self):
        with pytest.raises(EncodingInvariantViolation):
            PaymentPayload().attach_signature('abc')

    def test_contains_ignores_empty_values(self):
        payload = PaymentPayload(name_first='Cher', name_last='')
        assert 'name_first' in payload
        assert 'name_last' not in payload
        assert 'cell_number' not in payload

    def test_without_signature_returns_unsigned_copy(self):
        payload = sign_payload(PaymentPayload(amount='1499.00', merchant_id='1'))
        copy = payload.without_signature()
        assert not copy.is_signed
        assert copy.as_dict() == payload.as_dict(include_signature=False)
        assert payload.is_signed

    def test_get_returns_default_for_absent_field(self):
        assert PaymentPayload().get('custom_str2', 'none') == 'none'

    def test_field_order_covers_subscription_fields(self):
        for name in ('subscription_type', 'billing_date', 'recurring_amount', 'frequency', 'cycles'):
            assert name in FIELD_ORDER


@pytest.mark.unit
class TestPrincipal:

    def test_split_name_at_first_whitespace(self):
        assert Principal(id='u1', email='a@b.com', full_name='Jane van der Roe').split_name() == (
            'Jane', 'van der Roe'
        )

    def test_split_name_collapses_line_breaks(self):
        principal = Principal(id='u1', email='a@b.com', full_name='Jane\r\nvan  der\nRoe ')
        assert principal.split_name() == ('Jane', 'van der Roe')

    def test_single_name(self):
        assert Principal(id='u1', email='a@b.com', full_name='Cher').split_name() == ('Cher', '')

    def test_missing_name(self):
        assert Principal(id='u1', email='a@b.com').split_name() == ('', '')
        assert Principal(id='u1', email='a@b.com', full_name='   ').split_name() == ('', '')

    def test_from_dict(self):
        principal = Principal.from_dict({'id': 7, 'email': 'x@y.z', 'workspace_id': 'w1'})
        assert principal.id == '7'
        assert principal.workspace_id == 'w1'
        assert principal.get_id() == '7'

    def test_is_immutable(self):
        principal = Principal(id='u1', email='a@b.com')
        with pytest.raises(AttributeError):
            principal.email = 'other@b.com'
