from spaceops.ingest.column_map import compile_field_patterns
from spaceops.ingest.preview import build_preview

SAMPLE = """施設名,利用日,開始,終了,金額,入金額,ゲスト
ブルースペース神田,2024/3/1,9:00,12:00,"¥12,000","10,800",山田
ブルースペース神田,3月2日,10:00,11:00,要確認,,佐藤
,2024-03-03,,,0円,,
"""


def test_build_preview_maps_rows_and_detects_columns():
    preview = build_preview(SAMPLE)

    assert preview.total_rows == 3
    assert preview.detected_columns["platform_property_name"] == "施設名"
    assert preview.detected_columns["gross_amount"] == "金額"
    assert preview.detected_columns["net_amount"] == "入金額"
    first = preview.rows[0]
    assert first.usage_date == "2024-03-01"
    assert first.start_time == "09:00"
    assert first.gross_amount == 12000
    assert first.net_amount == 10800


def test_build_preview_flags_low_confidence_fields():
    preview = build_preview(SAMPLE)
    flagged = {(item.row_number, item.field, item.reason) for item in preview.low_confidence}

    assert (3, "usage_date", "unrecognised_date") in flagged
    assert (3, "gross_amount", "unparsed_amount") in flagged
    assert (4, "platform_property_name", "missing") in flagged
    # "0円" is a genuine zero, not a parse failure.
    assert (4, "gross_amount", "unparsed_amount") not in flagged
    assert not any(item.row_number == 2 for item in preview.low_confidence)


def test_build_preview_limit_keeps_total_count():
    preview = build_preview(SAMPLE, limit=1)
    assert len(preview.rows) == 1
    assert preview.total_rows == 3


def test_build_preview_to_dict_contract():
    payload = build_preview(SAMPLE, limit=1).to_dict()
    assert set(payload) == {"headers", "detectedColumns", "rows", "totalRows", "lowConfidence"}
    assert payload["rows"][0]["platformPropertyName"] == "ブルースペース神田"


def test_build_preview_with_custom_patterns():
    patterns = compile_field_patterns([("usage_date", ("day",)), ("gross_amount", ("fee",))])
    preview = build_preview("day,fee\n2024/1/2,500\n", patterns)
    assert preview.rows[0].usage_date == "2024-01-02"
    assert preview.rows[0].gross_amount == 500


def test_build_preview_empty_text():
    preview = build_preview("")
    assert preview.headers == []
    assert preview.rows == []
    assert preview.total_rows == 0


def test_build_preview_accepts_decimal_zero_amounts():
    preview = build_preview("施設名,利用日,金額,入金額\nルームA,2024-03-01,0.00,¥0.0\nルームA,2024-03-02,0.5,\n")
    flagged = {(item.row_number, item.field) for item in preview.low_confidence}

    assert (2, "gross_amount") not in flagged
    assert (2, "net_amount") not in flagged
    assert (3, "gross_amount") in flagged
