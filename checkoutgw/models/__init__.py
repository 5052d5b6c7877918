from .principal import Principal
from .payload import PaymentPayload, FIELD_ORDER, SIGNATURE_FIELD

__all__ = ['Principal', 'PaymentPayload', 'FIELD_ORDER', 'SIGNATURE_FIELD']
