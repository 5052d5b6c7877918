"""Signing primitives: MD5, canonical string and signature engine."""
from .canonical import canonical_string, encode_value
from .signing import generate_signature, sign_payload, verify_signature

__all__ = [
    'canonical_string',
    'encode_value',
    'generate_signature',
    'sign_payload',
    'verify_signature'
]
