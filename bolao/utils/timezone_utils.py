"""
Timezone utility functions for the bolão
"""

from datetime import datetime, timezone

import pytz
from flask import current_app

from bolao.errors import ValidationError


def get_app_timezone():
    """Get the application's configured timezone"""
    try:
        timezone_name = current_app.config.get("TIMEZONE", "America/Sao_Paulo")
        return pytz.timezone(timezone_name)
    except pytz.UnknownTimeZoneError:
        # Fallback to UTC if timezone is invalid
        return pytz.UTC


def convert_to_app_timezone(dt):
    """Convert a datetime to the application's timezone"""
    if dt is None:
        return None

    app_tz = get_app_timezone()

    # If datetime is naive, assume it's UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(app_tz)


def convert_to_utc(dt):
    """Convert a datetime to UTC"""
    if dt is None:
        return None

    # If datetime is naive, assume it's in the application timezone
    if dt.tzinfo is None:
        app_tz = get_app_timezone()
        dt = app_tz.localize(dt)

    return dt.astimezone(timezone.utc)


def parse_kickoff(value):
    """Parse an ISO-8601 kickoff (as sent by the admin form) into UTC.

    Values without an offset, like ``2025-05-10T16:00`` from a
    datetime-local input, are read in the application timezone.
    """
    if isinstance(value, datetime):
        return convert_to_utc(value)

    text = (value or "").strip()
    if not text:
        raise ValidationError("Jogo com campos vazios")

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Data/hora inválida: {value}")

    return convert_to_utc(parsed)


def isoformat_utc(dt):
    """ISO-8601 string in UTC, None passes through"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def format_kickoff(dt, format_str="%d/%m %H:%M"):
    """Format a kickoff in the application's timezone"""
    if dt is None:
        return "A definir"

    return convert_to_app_timezone(dt).strftime(format_str)
