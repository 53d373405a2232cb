"""Date utilities for divvy.

Pure functions for ledger file naming, durations and settlement cutoffs.
"""

import re
from datetime import datetime, timedelta

# Ledger files are named by creation time so they sort chronologically
LEDGER_FILE_NAME_FORMAT = "%Y-%m-%d-%H-%M-%S"

_DURATION_UNITS = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)([smhdw])")


def ledger_file_name(created: datetime) -> str:
    """Name of a ledger file created at the given time (to the second)."""
    return created.strftime(LEDGER_FILE_NAME_FORMAT)


def parse_ledger_file_name(name: str) -> datetime:
    """Recover the creation time from a ledger file name.

    Raises:
        ValueError: If the name is not a ledger file timestamp.
    """
    return datetime.strptime(name, LEDGER_FILE_NAME_FORMAT)


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as "168h", "7d" or "1h30m".

    Args:
        value: One or more <number><unit> groups, units s, m, h, d, w.
            A leading "-" makes the duration negative.

    Returns:
        Parsed duration.

    Raises:
        ValueError: If the value is not a valid duration.
    """
    text = value.strip()
    negative = text.startswith("-")
    if negative:
        text = text[1:]

    if text == "0":
        return timedelta(0)

    total = timedelta(0)
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        try:
            total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        except OverflowError:
            raise ValueError(f"Duration '{value}' is out of range") from None
        pos = match.end()

    if not text or pos != len(text):
        raise ValueError(f"Invalid duration '{value}' (expected e.g. 168h, 7d, 1h30m)")

    return -total if negative else total


def format_duration(period: timedelta) -> str:
    """Format a duration in whole hours when possible, like "168h"."""
    seconds = int(period.total_seconds())
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    return f"{seconds}s"


def settlement_cutoff(now: datetime, period: timedelta) -> datetime:
    """Transactions dated before this moment are considered settled.

    A period reaching past datetime.min clamps to it, so nothing is settled.
    """
    try:
        return now - period
    except OverflowError:
        return datetime.min
