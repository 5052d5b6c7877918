from .checkout import checkout_bp, checkout_api

__all__ = ['checkout_bp', 'checkout_api']
