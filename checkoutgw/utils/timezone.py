"""
Timezone utilities for the checkout service.
PayFast bills in South African Standard Time (UTC+2), so billing dates are
computed in that zone rather than in server-local time.
"""

from datetime import datetime, timezone, timedelta
import pytz

SAST = pytz.timezone('Africa/Johannesburg')


def now_sast():
    """Get current datetime in SAST"""
    return datetime.now(SAST)


def utc_to_sast(utc_dt):
    """Convert UTC datetime to SAST"""
    if utc_dt.tzinfo is None:
        # Assume UTC if no timezone info
        utc_dt = utc_dt.replace(tzinfo=timezone.utc)
    return utc_dt.astimezone(SAST)


def billing_date(trial_days, now=None):
    """
    Return the first billing date as a ``YYYY-MM-DD`` string.

    Args:
        trial_days (int): Days of free trial before the first charge
        now (datetime, optional): Reference time, defaults to now in SAST

    Returns:
        str: Date in the format the gateway expects
    """
    now = utc_to_sast(now) if now is not None else now_sast()
    return (now.date() + timedelta(days=trial_days)).isoformat()
