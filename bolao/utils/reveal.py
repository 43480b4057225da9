"""
Reveal gate

A round is revealed once the clock reaches the earliest kickoff among its
matches. Before that picks are writable and hidden; from then on they are
locked and visible. Nothing is scheduled, every caller recomputes it.
"""

from datetime import datetime, timezone


def as_utc(dt):
    """Timezone-aware copy of ``dt``, naive values are taken as UTC"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now():
    return datetime.now(timezone.utc)


def earliest_kickoff(kickoffs):
    """Earliest of the given kickoff times, None for an empty round"""
    kickoffs = [as_utc(k) for k in kickoffs if k is not None]
    return min(kickoffs) if kickoffs else None


def is_revealed(kickoff_min, now=None):
    """True when ``now`` is at or past the round's first kickoff"""
    if kickoff_min is None:
        return False
    if now is None:
        now = utc_now()
    return as_utc(now) >= as_utc(kickoff_min)
