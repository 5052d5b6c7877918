"""
Checkout signals.

Receivers are the integration point for the surrounding application, e.g.
to record the pending payment reference before the browser leaves.
"""
from blinker import Namespace

_signals = Namespace()

# Sent with sender=current_app, gateway=..., and intent=dict of reference fields
checkout_intent = _signals.signal('checkout-intent')
