"""
Time window arithmetic for exam sessions.

The exam window end is an outer bound for every session; the per-attempt
duration only starts counting once the session has been started.
"""
from datetime import timedelta

ONE_MINUTE = timedelta(minutes=1)


def session_expiry(scheduled_end, started_at, duration_minutes):
    """
    Instant at which a session stops accepting work, or None if it never expires.

    - no window end, not started: None
    - window end, not started: the window end
    - started: started_at + duration, capped by the window end when there is one
    """
    if started_at is None:
        return scheduled_end

    duration_end = started_at + timedelta(minutes=duration_minutes)
    if scheduled_end is None:
        return duration_end
    return min(scheduled_end, duration_end)


def is_expired(expiry, now):
    return expiry is not None and now >= expiry


def minutes_remaining(expiry, now):
    """Whole minutes left (floored), or None when there is no expiry or it has passed."""
    if expiry is None or expiry <= now:
        return None
    return (expiry - now) // ONE_MINUTE
