import pytest

from spaceops.ingest.normalizers import (
    is_iso_date,
    normalise_date,
    normalise_time,
    parse_amount,
    parse_duration,
)


@pytest.mark.parametrize(
    "raw",
    ["2024年3月1日", "2024/3/1", "2024-03-01", "予約 2024年3月1日 午後"],
)
def test_normalise_date_variants(raw):
    assert normalise_date(raw) == "2024-03-01"


def test_normalise_date_is_idempotent():
    once = normalise_date("2024/12/05")
    assert normalise_date(once) == once == "2024-12-05"


def test_normalise_date_keeps_unknown_shapes():
    assert normalise_date("03/01/2024") == "03/01/2024"
    assert not is_iso_date("03/01/2024")
    assert normalise_date("") == ""
    assert normalise_date(None) == ""


def test_normalise_time():
    assert normalise_time("09:30") == "09:30"
    assert normalise_time("9:30") == "09:30"
    assert normalise_time("9:30:00") == "09:30"
    assert normalise_time("午前") == "午前"
    assert normalise_time(None) == ""


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("¥12,000", 12000),
        ("12,000円", 12000),
        ("￥ 3 000", 3000),
        ("\\5,500", 5500),
        ("-500", 0),
        ("abc", 0),
        ("", 0),
        (None, 0),
        ("1200.50", 1200),
    ],
)
def test_parse_amount(raw, expected):
    value = parse_amount(raw)
    assert value == expected
    assert value >= 0


def test_parse_duration_wraps_past_midnight():
    assert parse_duration("09:00", "11:30") == 150
    assert parse_duration("23:00", "01:00") == 120
    assert parse_duration("", "01:00") == 0
