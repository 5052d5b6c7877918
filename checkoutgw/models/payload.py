"""
PaymentPayload: the work object for a single checkout attempt.
"""
from ..payment.exceptions import EncodingInvariantViolation

# Transmission order of the PayFast form fields; ``signature`` is always last.
FIELD_ORDER = (
    'merchant_id',
    'merchant_key',
    'return_url',
    'cancel_url',
    'notify_url',
    'name_first',
    'name_last',
    'email_address',
    'cell_number',
    'm_payment_id',
    'amount',
    'item_name',
    'item_description',
    'subscription_type',
    'billing_date',
    'recurring_amount',
    'frequency',
    'cycles',
    'custom_str1',
    'custom_str2',
    'custom_str3',
    'custom_str4',
    'custom_str5',
)

SIGNATURE_FIELD = 'signature'


class PaymentPayload:
    """Ordered container over the fixed gateway field set.

    Values are strings exactly as they will be transmitted; ``None`` marks
    an absent field. Assigning a field after signing discards the
    signature, so a mutated payload cannot be submitted until re-signed.
    """

    __slots__ = ('_values', '_signature')

    def __init__(self, **fields):
        self._values = dict.fromkeys(FIELD_ORDER)
        self._signature = None
        for name, value in fields.items():
            self[name] = value

    def __getitem__(self, name):
        if name == SIGNATURE_FIELD:
            return self._signature
        self._check_name(name)
        return self._values[name]

    def __setitem__(self, name, value):
        if name == SIGNATURE_FIELD:
            raise EncodingInvariantViolation(
                'The signature is attached by the signing engine, not assigned'
            )
        self._check_name(name)
        if value is not None and not isinstance(value, str):
            raise EncodingInvariantViolation(
                f'Field {name!r} must be pre-formatted as a string, got {type(value).__name__}',
                {'field': name},
            )
        if self._values[name] != value:
            self._signature = None
        self._values[name] = value

    def __contains__(self, name):
        return self.get(name) not in (None, '')

    def __eq__(self, other):
        if not isinstance(other, PaymentPayload):
            return NotImplemented
        return self._values == other._values and self._signature == other._signature

    def __repr__(self):
        return (
            f"<PaymentPayload ref={self._values['m_payment_id']} "
            f"amount={self._values['amount']} signed={self.is_signed}>"
        )

    @staticmethod
    def _check_name(name):
        if name not in FIELD_ORDER:
            raise EncodingInvariantViolation(f'Unknown payload field: {name!r}', {'field': name})

    def get(self, name, default=None):
        value = self[name]
        return default if value is None else value

    @property
    def signature(self):
        return self._signature

    @property
    def is_signed(self):
        return self._signature is not None

    def attach_signature(self, signature):
        """Attach a computed signature. Called by the signing engine only."""
        if not isinstance(signature, str) or len(signature) != 32:
            raise EncodingInvariantViolation('Signature must be a 32-character hex digest')
        self._signature = signature
        return self

    def fields(self, include_signature=True):
        """Yield (name, value) pairs in transmission order, skipping absent fields."""
        for name in FIELD_ORDER:
            value = self._values[name]
            if value is not None:
                yield name, value
        if include_signature and self._signature is not None:
            yield SIGNATURE_FIELD, self._signature

    def as_dict(self, include_signature=True):
        return dict(self.fields(include_signature))

    def without_signature(self):
        """Return an unsigned copy with the same field values."""
        return PaymentPayload(**self.as_dict(include_signature=False))
