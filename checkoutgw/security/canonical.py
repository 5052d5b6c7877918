"""
Canonical string construction for gateway signatures.

The gateway rebuilds this exact string on its side, so ordering and
encoding are owned here explicitly and never left to mapping iteration
order.
"""
import re
from collections.abc import Mapping
from urllib.parse import quote_plus, unquote_plus

from ..models.payload import PaymentPayload, SIGNATURE_FIELD
from ..payment.exceptions import EncodingInvariantViolation

PASSPHRASE_FIELD = 'passphrase'

_FIELD_NAME = re.compile(r'^[a-z0-9_]+$')

# Not transmitted byte-for-byte by a browser form post (CR/LF are normalised)
_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')


def encode_value(value):
    """
    Encode a single value the way the gateway does: spaces become ``+`` and
    every other reserved character is percent-encoded from its UTF-8 bytes.

    Raises:
        EncodingInvariantViolation: if the value is not a string, contains
            control characters, or does not survive an encode/decode round trip.
    """
    if not isinstance(value, str):
        raise EncodingInvariantViolation(
            f'Cannot canonicalize non-string value of type {type(value).__name__}'
        )
    if _CONTROL_CHARS.search(value):
        raise EncodingInvariantViolation('Value contains control characters')
    try:
        encoded = quote_plus(value, safe='', encoding='utf-8', errors='strict')
    except UnicodeEncodeError as exc:
        raise EncodingInvariantViolation(f'Value is not valid UTF-8 text: {exc}') from exc
    if unquote_plus(encoded, encoding='utf-8', errors='strict') != value:
        raise EncodingInvariantViolation('Value does not round-trip through the canonical encoding')
    return encoded


def _iter_pairs(fields):
    if isinstance(fields, PaymentPayload):
        return fields.fields(include_signature=False)
    if isinstance(fields, Mapping):
        return fields.items()
    return iter(fields)


def _collect(fields):
    """Filter out empty values and the signature, rejecting duplicates."""
    collected = {}
    for name, value in _iter_pairs(fields):
        if name == SIGNATURE_FIELD or value is None or value == '':
            continue
        if not isinstance(name, str) or not _FIELD_NAME.match(name):
            raise EncodingInvariantViolation(f'Invalid field name: {name!r}')
        if name in collected:
            raise EncodingInvariantViolation(f'Duplicate field: {name!r}')
        collected[name] = value
    return collected


def canonical_string(fields, passphrase=None):
    """
    Build the string the signature is computed over.

    Args:
        fields: PaymentPayload, mapping, or iterable of (name, value) pairs
        passphrase (str, optional): Shared secret appended as a final segment

    Returns:
        str: ``a=1&b=2...`` sorted by field name, optionally ending with
        ``&passphrase=...``
    """
    collected = _collect(fields)
    parts = [f'{name}={encode_value(collected[name])}' for name in sorted(collected)]
    if passphrase:
        parts.append(f'{PASSPHRASE_FIELD}={encode_value(passphrase)}')
    return '&'.join(parts)
