"""
Tests for the canonical string and signature engine.
"""
import hashlib

import pytest

from checkoutgw.models.payload import PaymentPayload
from checkoutgw.payment.exceptions import EncodingInvariantViolation
from checkoutgw.security import (
    canonical_string,
    encode_value,
    generate_signature,
    sign_payload,
    verify_signature
)


def _md5(text):
    return hashlib.md5(text.encode('utf-8')).hexdigest()


@pytest.mark.signing
class TestEncodeValue:

    def test_space_becomes_plus(self):
        assert encode_value('Professional Plan - EngageHub') == 'Professional+Plan+-+EngageHub'

    def test_reserved_characters_are_percent_encoded(self):
        assert encode_value('https://a.b/c?d=e&f') == 'https%3A%2F%2Fa.b%2Fc%3Fd%3De%26f'

    def test_hex_is_uppercase_utf8(self):
        assert encode_value('Zoë') == 'Zo%C3%AB'

    def test_unreserved_characters_pass_through(self):
        assert encode_value('a-b_c.d~e') == 'a-b_c.d~e'

    def test_json_passthrough_value(self):
        assert encode_value('{"monthlyPosts":250}') == '%7B%22monthlyPosts%22%3A250%7D'

    def test_non_string_is_rejected(self):
        with pytest.raises(EncodingInvariantViolation):
            encode_value(549)

    @pytest.mark.parametrize('value', ['Jane\nRoe', 'line\r\nbreak', 'tab\there', 'nul\x00', 'del\x7f'])
    def test_control_characters_are_rejected(self, value):
        with pytest.raises(EncodingInvariantViolation):
            encode_value(value)

    def test_unencodable_text_is_rejected(self):
        with pytest.raises(EncodingInvariantViolation):
            encode_value('bad \ud800 surrogate')


@pytest.mark.signing
class TestCanonicalString:

    def test_fields_are_sorted_by_name(self):
        fields = {'merchant_key': 'k', 'amount': '1.00', 'merchant_id': '1', 'cycles': '0'}
        assert canonical_string(fields) == 'amount=1.00&cycles=0&merchant_id=1&merchant_key=k'

    def test_sort_is_by_code_point(self):
        fields = [('custom_str10', 'b'), ('custom_str1', 'a'), ('custom_str2', 'c')]
        assert canonical_string(fields) == 'custom_str1=a&custom_str10=b&custom_str2=c'

    def test_empty_and_missing_values_are_dropped(self):
        fields = {'name_first': 'Cher', 'name_last': '', 'cell_number': None}
        assert canonical_string(fields) == 'name_first=Cher'

    def test_signature_field_is_ignored(self):
        fields = {'amount': '5.00', 'signature': 'f' * 32}
        assert canonical_string(fields) == 'amount=5.00'

    def test_passphrase_is_appended_last(self):
        fields = {'zeta': 'z', 'amount': '5.00'}
        assert canonical_string(fields, 'my secret') == 'amount=5.00&zeta=z&passphrase=my+secret'

    def test_empty_passphrase_is_not_appended(self):
        assert canonical_string({'amount': '5.00'}, '') == 'amount=5.00'

    def test_zero_string_is_kept(self):
        assert canonical_string({'cycles': '0'}) == 'cycles=0'

    def test_invalid_field_name_is_rejected(self):
        with pytest.raises(EncodingInvariantViolation):
            canonical_string({'Amount': '5.00'})

    def test_duplicate_field_is_rejected(self):
        with pytest.raises(EncodingInvariantViolation):
            canonical_string([('amount', '5.00'), ('amount', '6.00')])

    def test_unformatted_number_is_rejected(self):
        with pytest.raises(EncodingInvariantViolation):
            canonical_string({'amount': 549})

    def test_payload_uses_transmitted_values(self):
        payload = PaymentPayload(merchant_id='10000100', amount='549.00', name_last='')
        assert canonical_string(payload) == 'amount=549.00&merchant_id=10000100'


@pytest.mark.signing
class TestSignatureEngine:

    def test_signature_is_md5_of_canonical_string(self):
        fields = {'merchant_id': '10000100', 'item_name': 'Starter Plan', 'amount': '549.00'}
        expected = _md5('amount=549.00&item_name=Starter+Plan&merchant_id=10000100')
        assert generate_signature(fields) == expected

    def test_passphrase_changes_signature(self):
        fields = {'amount': '549.00'}
        assert generate_signature(fields, 'secret') == _md5('amount=549.00&passphrase=secret')
        assert generate_signature(fields, 'secret') != generate_signature(fields)

    def test_insertion_order_does_not_matter(self):
        forward = {'a': '1', 'b': '2', 'c': '3'}
        backward = dict(reversed(list(forward.items())))
        assert generate_signature(forward) == generate_signature(backward)

    def test_signing_is_deterministic(self):
        fields = {'amount': '1499.00', 'email_address': 'a@b.com'}
        assert generate_signature(fields, 'p') == generate_signature(fields, 'p')

    def test_sign_payload_is_idempotent(self):
        payload = PaymentPayload(merchant_id='10000100', amount='1499.00')
        first = sign_payload(payload, 'p').signature
        second = sign_payload(payload, 'p').signature
        assert first == second
        assert payload.is_signed

    def test_verify_accepts_own_signature(self):
        payload = sign_payload(PaymentPayload(merchant_id='10000100', amount='1499.00'), 'p')
        assert verify_signature(payload, 'p', payload.signature)
        assert verify_signature(payload.as_dict(), 'p', payload.signature.upper())

    def test_verify_rejects_tampered_fields(self):
        payload = sign_payload(PaymentPayload(merchant_id='10000100', amount='1499.00'), 'p')
        tampered = payload.as_dict()
        tampered['amount'] = '1.00'
        assert not verify_signature(tampered, 'p', payload.signature)

    def test_verify_rejects_wrong_passphrase(self):
        payload = sign_payload(PaymentPayload(amount='1499.00'), 'p')
        assert not verify_signature(payload, 'other', payload.signature)

    def test_verify_rejects_missing_signature(self):
        assert not verify_signature({'amount': '1.00'}, None, None)
        assert not verify_signature({'amount': '1.00'}, None, '')

    def test_verify_returns_false_for_uncanonical_fields(self):
        assert not verify_signature({'amount': 1}, None, 'a' * 32)
