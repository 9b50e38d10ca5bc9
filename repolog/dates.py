"""
Date handling for repolog.

The cutoff date arrives as a string in the configured strftime pattern.
A value that cannot be parsed never stops generation: the whole history
is included instead, with a warning.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timespec(spec: str, now: Optional[datetime] = None) -> datetime:
    """
    Parse a relative or ISO time specification.

    Supports:
        - Relative: "30m", "1h", "2d", "1w", "3M" (months are 30 days)
        - ISO format: "2024-01-15", "2024-01-15T10:30:00+01:00"

    Naive results are taken as UTC.

    Raises:
        ValueError: If spec cannot be parsed
    """
    spec = spec.strip()
    now = now or datetime.now(timezone.utc)

    relative_match = re.match(r'^(\d+)([mhdwM])$', spec)
    if relative_match:
        amount = int(relative_match.group(1))
        units = {
            'm': timedelta(minutes=amount),
            'h': timedelta(hours=amount),
            'd': timedelta(days=amount),
            'w': timedelta(weeks=amount),
            'M': timedelta(days=amount * 30),
        }
        return now - units[relative_match.group(2)]

    parsed = datetime.fromisoformat(spec)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_include_commits_after(value: Optional[str], date_format: str) -> datetime:
    """
    Parse the cutoff date.

    ``value`` is first parsed with ``date_format``; relative and ISO
    specifications (see ``parse_timespec``) are accepted as well. Naive
    dates are taken as UTC.

    Returns:
        The cutoff, or the epoch (include everything) if ``value`` is empty
        or cannot be parsed
    """
    if not value or not value.strip():
        return EPOCH

    try:
        parsed = datetime.strptime(value.strip(), date_format)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    except ValueError:
        pass

    try:
        return parse_timespec(value)
    except ValueError as e:
        logger.warning(
            f"Could not parse date {value!r} with pattern {date_format!r}. "
            f"Will retrieve all logs! ({e})"
        )
        return EPOCH
