"""Date, time and amount normalisation for raw booking cells."""

from __future__ import annotations

import re

_ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
_SLASH_DATE_RE = re.compile(r"^([0-9]{4})/([0-9]{1,2})/([0-9]{1,2})$")
_JP_DATE_RE = re.compile(r"([0-9]{4})年([0-9]{1,2})月([0-9]{1,2})日")

_HHMM_RE = re.compile(r"^[0-9]{2}:[0-9]{2}$")
_TIME_PREFIX_RE = re.compile(r"^([0-9]{1,2}):([0-9]{2})")

# Thousands separators, yen glyphs (a backslash is how Shift-JIS fonts draw
# the yen sign) and any whitespace.
_AMOUNT_NOISE_RE = re.compile(r"[,、円¥￥\\\s]")
_LEADING_INT_RE = re.compile(r"^[+-]?[0-9]+")


def _iso(year: str, month: str, day: str) -> str:
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def is_iso_date(value: str) -> bool:
    return bool(_ISO_DATE_RE.match(value))


def normalise_date(raw: str | None) -> str:
    if not raw:
        return ""
    if _ISO_DATE_RE.match(raw):
        return raw

    slash = _SLASH_DATE_RE.match(raw)
    if slash:
        return _iso(*slash.groups())

    jp = _JP_DATE_RE.search(raw)
    if jp:
        return _iso(*jp.groups())

    # Unknown shapes are kept verbatim; callers treat non-ISO as low confidence.
    return raw


def normalise_time(raw: str | None) -> str:
    if not raw:
        return ""
    if _HHMM_RE.match(raw):
        return raw

    prefix = _TIME_PREFIX_RE.match(raw)
    if prefix:
        hour, minute = prefix.groups()
        return f"{hour.zfill(2)}:{minute}"
    return raw


def parse_amount(raw: str | None) -> int:
    """Parse a currency cell into a non-negative integer.

    Non-numeric cells normalise to 0, so "genuinely zero" and "unparseable"
    can only be told apart by looking at the raw cell again.
    """
    if not raw:
        return 0
    cleaned = _AMOUNT_NOISE_RE.sub("", raw)
    match = _LEADING_INT_RE.match(cleaned)
    if not match:
        return 0
    return max(0, int(match.group(0)))


def _minutes_of_day(value: str) -> int | None:
    match = _TIME_PREFIX_RE.match(value or "")
    if not match:
        return None
    hour, minute = (int(part) for part in match.groups())
    return hour * 60 + minute


def parse_duration(start_time: str | None, end_time: str | None) -> int:
    start = _minutes_of_day(start_time or "")
    end = _minutes_of_day(end_time or "")
    if start is None or end is None:
        return 0
    if end < start:
        end += 24 * 60
    return end - start
