from pathlib import Path

from spaceops.common.models import BookingRow
from spaceops.ingest.export import PREVIEW_HEADERS, write_preview_csv


def test_write_preview_csv_blanks_missing_optionals(tmp_path: Path):
    rows = [
        BookingRow(platform_property_name="神田", usage_date="2024-03-01", gross_amount=1000),
        BookingRow(
            platform_property_name="西新宿",
            usage_date="2024-03-02",
            gross_amount=2000,
            start_time="09:00",
            end_time="10:00",
            net_amount=1800,
            guest_name="山田",
        ),
    ]

    out = write_preview_csv(tmp_path / "out" / "preview.csv", rows)
    lines = out.read_text(encoding="utf-8").splitlines()

    assert lines[0] == ",".join(PREVIEW_HEADERS)
    assert lines[1] == "神田,2024-03-01,,,1000,,"
    assert lines[2] == "西新宿,2024-03-02,09:00,10:00,2000,1800,山田"
