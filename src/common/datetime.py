"""Datetime utilities."""

from datetime import datetime, timezone, timedelta
from typing import Optional

from dateutil.parser import parse as parse_date

# Timezone abbreviations seen in feed date strings
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
    "IST": timezone(timedelta(hours=5, minutes=30)),
}

# Fills date parts the string leaves out; a result still in this year had none
MISSING_DATE_DEFAULT = datetime(1, 1, 1)


def parse_feed_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a feed date string into an aware datetime.

    Returns None for missing or unparsable values, and for strings without
    a year (such as a bare time). Naive results are taken as UTC.
    """
    if not value or not value.strip():
        return None

    try:
        dt = parse_date(value.strip(), default=MISSING_DATE_DEFAULT, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None

    if dt.year == MISSING_DATE_DEFAULT.year:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
