from pathlib import Path

import pytest

from spaceops.common.errors import SourceReadError
from spaceops.ingest.encoding import read_text, resolve_text


def test_resolve_text_utf8_with_bom():
    decoded = resolve_text("\ufeff利用日,金額\n".encode("utf-8"))
    assert decoded.text == "利用日,金額\n"
    assert decoded.encoding == "utf-8"
    assert decoded.fallback_used is False


def test_resolve_text_falls_back_to_shift_jis():
    decoded = resolve_text("利用日,金額\n2024/3/1,1000\n".encode("shift_jis"))
    assert decoded.text.startswith("利用日,金額")
    assert decoded.encoding == "shift_jis"
    assert decoded.fallback_used is True


def test_resolve_text_uses_cp932_for_vendor_characters():
    # NEC special characters are only in the cp932 table.
    decoded = resolve_text("①号室,金額\n".encode("cp932"))
    assert decoded.text.startswith("①号室")
    assert decoded.encoding == "cp932"


def test_read_text_missing_file_raises(tmp_path: Path):
    with pytest.raises(SourceReadError):
        read_text(tmp_path / "missing.csv")


def test_read_text_reads_file(tmp_path: Path):
    path = tmp_path / "upload.csv"
    path.write_bytes("施設,日付\n".encode("shift_jis"))
    assert read_text(path).text == "施設,日付\n"
