"""Preview CSV export."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from spaceops.common.fs import write_csv
from spaceops.common.models import BookingRow

PREVIEW_HEADERS = [
    "platform_property_name",
    "usage_date",
    "start_time",
    "end_time",
    "gross_amount",
    "net_amount",
    "guest_name",
]


def _serialize_row(row: BookingRow) -> list[object]:
    record = row.to_record()
    return ["" if record[key] is None else record[key] for key in PREVIEW_HEADERS]


def write_preview_csv(path: Path, rows: Iterable[BookingRow]) -> Path:
    write_csv(path, PREVIEW_HEADERS, [_serialize_row(row) for row in rows])
    return path
