# ABOUTME: Publish-date resolution for loosely structured sidecar metadata.
# ABOUTME: Finds date-like fields by synonym and parses heterogeneous date values to epoch ms.

import math
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from folio.metadata.types import MetaDocument

# Field names (after normalize_field_name) that may carry a publish date.
PUBLISH_DATE_KEYS: frozenset[str] = frozenset(
    {
        "created",
        "createdat",
        "date",
        "postdate",
        "posted",
        "postedat",
        "publishdate",
        "published",
        "publishedat",
        "publisheddate",
        "released",
        "releasedat",
        "releasedate",
        "release",
        "uploaddate",
        "uploadedat",
    }
)

# Epoch magnitude boundaries. Above _MS_THRESHOLD a value is already in
# milliseconds (after ~2001-09-09 in ms); above _SECONDS_THRESHOLD it is seconds.
_MS_THRESHOLD = 1_000_000_000_000
_SECONDS_THRESHOLD = 1_000_000_000

_MIN_YEAR = 1000

# 9999-12-31T23:59:59.999Z, the last instant datetime (and the catalog) can hold
_MAX_EPOCH_MS = 253_402_300_799_999

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_COMPACT_DATE_RE = re.compile(r"^\d{8}$")
_ALL_DIGITS_RE = re.compile(r"^\d+$")
_LOOSE_DATE_RE = re.compile(
    r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})"
    r"(?:[ T](\d{1,2})(?::(\d{1,2}))?(?::(\d{1,2}))?)?"
)

# English month-name layouts tried after ISO 8601 and RFC 2822.
_TEXT_DATE_FORMATS = (
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y %H:%M:%S",
    "%b %d, %Y %H:%M:%S",
    "%a %b %d %Y",
    "%a %b %d %H:%M:%S %Y",
)


def normalize_field_name(name: str) -> str:
    """Lowercase a field name and strip everything but [a-z0-9]."""
    return _NON_ALNUM_RE.sub("", name.lower())


def _to_epoch_ms(moment: datetime) -> int:
    """Convert a datetime to epoch milliseconds, reading naive values as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return round(moment.timestamp() * 1000)


def _build_utc(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
) -> int | None:
    """Build a UTC instant from components, rejecting out-of-range values."""
    if year < _MIN_YEAR or not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    try:
        moment = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    except ValueError:
        # e.g. February 30, or hour 25
        return None
    return _to_epoch_ms(moment)


def _normalize_epoch(value: float) -> int | None:
    """Interpret a bare number as epoch seconds or milliseconds by magnitude."""
    # isfinite() overflows on huge ints, so only floats go through it
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value <= 0:
        return None
    if value > _MS_THRESHOLD:
        millis = value
    elif value > _SECONDS_THRESHOLD:
        millis = value * 1000
    else:
        return None
    if millis > _MAX_EPOCH_MS:
        return None
    return round(millis)


def _parse_compact(text: str) -> int | None:
    """Parse an 8-digit YYYYMMDD string."""
    return _build_utc(int(text[0:4]), int(text[4:6]), int(text[6:8]))


def _parse_general(text: str) -> int | None:
    """Try ISO 8601, then RFC 2822, then English month-name layouts."""
    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        moment = datetime.fromisoformat(iso_text)
    except ValueError:
        pass
    else:
        return _checked(moment)

    try:
        moment = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass
    else:
        if moment is not None:
            return _checked(moment)

    for fmt in _TEXT_DATE_FORMATS:
        try:
            moment = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return _checked(moment)

    return None


def _checked(moment: datetime) -> int | None:
    """Apply the sane-year rule to a datetime produced by a general parser."""
    if moment.year < _MIN_YEAR:
        return None
    millis = _to_epoch_ms(moment)
    return millis if millis <= _MAX_EPOCH_MS else None


def _parse_loose(text: str) -> int | None:
    """Match 'YYYY<sep>M<sep>D[ H[:M[:S]]]' with '-', '/' or '.' separators."""
    m = _LOOSE_DATE_RE.match(text)
    if not m:
        return None
    year, month, day = int(m.group(1)), int(m.group(2)), int(m.group(3))
    hour = int(m.group(4)) if m.group(4) else 0
    minute = int(m.group(5)) if m.group(5) else 0
    second = int(m.group(6)) if m.group(6) else 0
    return _build_utc(year, month, day, hour, minute, second)


def parse_date_value(value: Any) -> int | None:
    """Parse one metadata value into epoch milliseconds (UTC).

    Numbers are epochs, disambiguated by magnitude, except 8-digit integers
    which read as YYYYMMDD. Strings are tried as a compact date, an epoch,
    a general date/time, and finally a permissive Y/M/D pattern.

    Returns:
        Milliseconds since the epoch, or None if the value is not a date.
    """
    # bool is an int subclass; true/false is never a date
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        if 10_000_000 <= value <= 99_999_999:
            compact = _parse_compact(str(value))
            if compact is not None:
                return compact
        return _normalize_epoch(value)

    if isinstance(value, float):
        return _normalize_epoch(value)

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if _COMPACT_DATE_RE.match(text):
        return _parse_compact(text)

    if _ALL_DIGITS_RE.match(text):
        return _normalize_epoch(int(text))

    parsed = _parse_general(text)
    if parsed is not None:
        return parsed

    return _parse_loose(text)


def _find_in_record(record: MetaDocument) -> int | None:
    """Return the first parseable date among a record's synonym fields."""
    for key, value in record.items():
        if not isinstance(key, str) or normalize_field_name(key) not in PUBLISH_DATE_KEYS:
            continue
        parsed = parse_date_value(value)
        if parsed is not None:
            return parsed
    return None


def resolve_published_at(document: MetaDocument | None) -> int | None:
    """Find the publish date in a sidecar document.

    Searches the top-level fields first, then one level into each nested
    object (lists are not descended). Fields are visited in document order
    and the first parseable match wins.
    """
    if not document:
        return None

    direct = _find_in_record(document)
    if direct is not None:
        return direct

    for value in document.values():
        if not isinstance(value, dict):
            continue
        nested = _find_in_record(value)
        if nested is not None:
            return nested

    return None
