"""Heuristic header-to-field mapping.

Each canonical field owns an ordered list of regular expressions. Patterns
are tried in list order against the lower-cased headers and the first
header matching a pattern wins (first match, not best match). New header
vocabularies are added by extending the lists, in code or in
``config/ingest.yml``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from spaceops.common.models import BookingRow
from spaceops.ingest.normalizers import normalise_date, normalise_time, parse_amount

DEFAULT_FIELD_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("platform_property_name", ("施設", "スペース", "物件", "店舗", "room", "space", "property", "facility")),
    ("usage_date", ("利用日", "使用日", "予約日", "日付", "date")),
    ("start_time", ("開始", "start", "^from$")),
    ("end_time", ("終了", "end", "^to$")),
    ("gross_amount", ("総額", "売上", "金額", "料金", "amount", "price", "total")),
    ("net_amount", ("入金", "振込", "net", "payout")),
    ("guest_name", ("名前", "氏名", "ゲスト", "予約者", "guest", "name")),
)


@dataclass(frozen=True)
class FieldPatterns:
    field: str
    patterns: tuple[re.Pattern[str], ...]


def compile_field_patterns(entries: Sequence[tuple[str, Sequence[str]]]) -> tuple[FieldPatterns, ...]:
    return tuple(
        FieldPatterns(field=field, patterns=tuple(re.compile(pattern) for pattern in patterns))
        for field, patterns in entries
    )


def field_patterns_from_config(ingest_config: dict) -> tuple[FieldPatterns, ...]:
    entries = [(entry["field"], entry["patterns"]) for entry in ingest_config["field_patterns"]]
    return compile_field_patterns(entries)


DEFAULT_COMPILED_PATTERNS = compile_field_patterns(DEFAULT_FIELD_PATTERNS)


def _header_index(headers: Sequence[str], pattern: re.Pattern[str]) -> int | None:
    for idx, header in enumerate(headers):
        if pattern.search(header.lower()):
            return idx
    return None


def resolve_field(headers: Sequence[str], row: Sequence[str], patterns: Sequence[re.Pattern[str]]) -> str:
    for pattern in patterns:
        idx = _header_index(headers, pattern)
        if idx is not None and idx < len(row) and row[idx]:
            return row[idx]
    return ""


def detect_columns(
    headers: Sequence[str],
    field_patterns: Sequence[FieldPatterns] = DEFAULT_COMPILED_PATTERNS,
) -> dict[str, str | None]:
    detected: dict[str, str | None] = {}
    for entry in field_patterns:
        detected[entry.field] = None
        for pattern in entry.patterns:
            idx = _header_index(headers, pattern)
            if idx is not None:
                detected[entry.field] = headers[idx]
                break
    return detected


def extract_raw_fields(
    headers: Sequence[str],
    row: Sequence[str],
    field_patterns: Sequence[FieldPatterns] = DEFAULT_COMPILED_PATTERNS,
) -> dict[str, str]:
    return {entry.field: resolve_field(headers, row, entry.patterns) for entry in field_patterns}


def map_row(
    headers: Sequence[str],
    row: Sequence[str],
    field_patterns: Sequence[FieldPatterns] = DEFAULT_COMPILED_PATTERNS,
) -> BookingRow:
    raw = extract_raw_fields(headers, row, field_patterns)
    start_time = normalise_time(raw.get("start_time"))
    end_time = normalise_time(raw.get("end_time"))
    net_amount = parse_amount(raw.get("net_amount"))
    guest_name = raw.get("guest_name", "")

    return BookingRow(
        platform_property_name=raw.get("platform_property_name", ""),
        usage_date=normalise_date(raw.get("usage_date")),
        start_time=start_time or None,
        end_time=end_time or None,
        gross_amount=parse_amount(raw.get("gross_amount")),
        net_amount=net_amount or None,
        guest_name=guest_name or None,
    )
