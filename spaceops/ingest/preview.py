"""Build the operator-facing import preview from decoded CSV text."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Sequence

from spaceops.common.constants import DEFAULT_PREVIEW_LIMIT
from spaceops.common.models import BookingRow
from spaceops.ingest.column_map import (
    DEFAULT_COMPILED_PATTERNS,
    FieldPatterns,
    detect_columns,
    extract_raw_fields,
    map_row,
)
from spaceops.ingest.normalizers import is_iso_date
from spaceops.ingest.tokenizer import tokenize

# A cell that genuinely says zero, e.g. "0", "¥0", "0円", "0.00".
_ZERO_AMOUNT_RE = re.compile(r"[\s,、円¥￥\\]*0[0\s,、円¥￥\\]*(?:\.0*)?[\s円]*")


@dataclass(frozen=True)
class LowConfidenceField:
    row_number: int
    field: str
    raw_value: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowNumber": self.row_number,
            "field": self.field,
            "rawValue": self.raw_value,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class ImportPreview:
    headers: list[str]
    detected_columns: dict[str, str | None]
    rows: list[BookingRow] = field(default_factory=list)
    total_rows: int = 0
    low_confidence: list[LowConfidenceField] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "headers": list(self.headers),
            "detectedColumns": dict(self.detected_columns),
            "rows": [row.to_dict() for row in self.rows],
            "totalRows": self.total_rows,
            "lowConfidence": [item.to_dict() for item in self.low_confidence],
        }


def _low_confidence_fields(row_number: int, raw: dict[str, str], mapped: BookingRow) -> list[LowConfidenceField]:
    flagged: list[LowConfidenceField] = []
    if not mapped.platform_property_name:
        flagged.append(LowConfidenceField(row_number, "platform_property_name", "", "missing"))
    if not mapped.usage_date:
        flagged.append(LowConfidenceField(row_number, "usage_date", "", "missing"))
    elif not is_iso_date(mapped.usage_date):
        flagged.append(LowConfidenceField(row_number, "usage_date", raw.get("usage_date", ""), "unrecognised_date"))
    for amount_field in ("gross_amount", "net_amount"):
        raw_value = raw.get(amount_field, "")
        parsed = getattr(mapped, amount_field) or 0
        if raw_value and parsed == 0 and not _ZERO_AMOUNT_RE.fullmatch(raw_value):
            flagged.append(LowConfidenceField(row_number, amount_field, raw_value, "unparsed_amount"))
    return flagged


def build_preview(
    text: str,
    field_patterns: Sequence[FieldPatterns] = DEFAULT_COMPILED_PATTERNS,
    limit: int | None = DEFAULT_PREVIEW_LIMIT,
) -> ImportPreview:
    tokenized = tokenize(text)
    data_rows = tokenized.rows if limit is None else tokenized.rows[:limit]

    rows: list[BookingRow] = []
    low_confidence: list[LowConfidenceField] = []
    for idx, raw_row in enumerate(data_rows):
        # Row numbers are 1-based and count the header line.
        row_number = idx + 2
        mapped = map_row(tokenized.headers, raw_row, field_patterns)
        raw = extract_raw_fields(tokenized.headers, raw_row, field_patterns)
        rows.append(mapped)
        low_confidence.extend(_low_confidence_fields(row_number, raw, mapped))

    return ImportPreview(
        headers=tokenized.headers,
        detected_columns=detect_columns(tokenized.headers, field_patterns),
        rows=rows,
        total_rows=len(tokenized.rows),
        low_confidence=low_confidence,
    )
