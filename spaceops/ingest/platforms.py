"""Platform-specific export profiles.

Every booking platform exports its own column layout. A profile knows how to
recognise its headers and how to turn one tokenized row into a
``PlatformBooking``. Rows that are not bookings (summary lines, blank ids)
are skipped; rows that are bookings but incomplete become warnings (or row
errors for the generic profile, which has no reservation id to skip on).
Nothing here raises: a header mismatch is reported as a row-0 error in the
``ParseResult``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from spaceops.common.errors import UnknownPlatformError
from spaceops.common.models import BookingRow, PlatformBooking
from spaceops.ingest.column_map import DEFAULT_COMPILED_PATTERNS, compile_field_patterns, resolve_field
from spaceops.ingest.normalizers import normalise_date, normalise_time, parse_amount, parse_duration
from spaceops.ingest.tokenizer import tokenize

_NUMERIC_ID_RE = re.compile(r"^[0-9]+$")
_DATETIME_RE = re.compile(
    r"^([0-9]{4})[-/]([0-9]{1,2})[-/]([0-9]{1,2})(?:\s+([0-9]{1,2}):([0-9]{2})(?::[0-9]{2})?)?$"
)
_BRACKET_NAME_RE = re.compile(r"「(.+?)」")
MAX_PROPERTY_NAME_LENGTH = 80


@dataclass(frozen=True)
class PropertyAlias:
    contains: tuple[str, ...]
    name: str


@dataclass(frozen=True)
class ParseIssue:
    row: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"row": self.row, "message": self.message}


@dataclass
class ParseResult:
    bookings: list[PlatformBooking] = field(default_factory=list)
    errors: list[ParseIssue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "bookings": [booking.to_dict() for booking in self.bookings],
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class RowContext:
    headers: list[str]
    cells: list[str]
    row_number: int
    aliases: tuple[PropertyAlias, ...]

    def get(self, *names: str) -> str:
        """First non-empty cell among the exact header names given."""
        for name in names:
            if name in self.headers:
                idx = self.headers.index(name)
                if idx < len(self.cells) and self.cells[idx]:
                    return self.cells[idx]
        return ""

    def at(self, idx: int) -> str:
        if idx < len(self.cells):
            return self.cells[idx]
        return ""


@dataclass(frozen=True)
class PlatformProfile:
    code: str
    name: str
    validate_headers: Callable[[list[str]], bool]
    parse_row: Callable[[RowContext, ParseResult], PlatformBooking | None]
    expected_first_header: str | None = None

    def parse(self, text: str, aliases: Sequence[PropertyAlias] = ()) -> ParseResult:
        tokenized = tokenize(text)
        headers, rows = tokenized.headers, tokenized.rows
        row_offset = 2
        # Some exports put a link line above the real header row.
        if self.expected_first_header and headers and headers[0] != self.expected_first_header and rows:
            headers, rows = rows[0], rows[1:]
            row_offset = 3

        result = ParseResult()
        if not headers or not self.validate_headers(headers):
            result.errors.append(ParseIssue(row=0, message=f"CSVヘッダーが{self.name}の形式と一致しません"))
            return result

        alias_tuple = tuple(aliases)
        for idx, cells in enumerate(rows):
            ctx = RowContext(headers=headers, cells=cells, row_number=idx + row_offset, aliases=alias_tuple)
            booking = self.parse_row(ctx, result)
            if booking is not None:
                result.bookings.append(booking)
        return result


def split_datetime(raw: str) -> tuple[str, str]:
    if not raw:
        return "", ""
    match = _DATETIME_RE.match(raw)
    if not match:
        return raw, ""
    year, month, day, hour, minute = match.groups()
    date = f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    time = f"{hour.zfill(2)}:{minute}" if hour is not None else ""
    return date, time


def convert_status(raw: str) -> str:
    if not raw:
        return "confirmed"
    if raw == "CL" or "キャンセル" in raw or "期限切れ" in raw:
        return "cancelled"
    if "仮予約" in raw or "保留" in raw:
        return "pending"
    return "confirmed"


def extract_property_name(title: str, aliases: Sequence[PropertyAlias]) -> str:
    bracket = _BRACKET_NAME_RE.search(title)
    if bracket:
        return bracket.group(1)
    for alias in aliases:
        if all(fragment in title for fragment in alias.contains):
            return alias.name
    return title[:MAX_PROPERTY_NAME_LENGTH]


def aliases_from_config(ingest_config: dict) -> tuple[PropertyAlias, ...]:
    return tuple(
        PropertyAlias(contains=tuple(entry["contains"]), name=entry["name"])
        for entry in ingest_config.get("property_aliases") or []
    )


def _parse_count(raw: str) -> int | None:
    if not raw or not _NUMERIC_ID_RE.match(raw):
        return None
    return int(raw)


def _commission(gross: int, net: int) -> int | None:
    return (gross - net) or None


# --- generic -----------------------------------------------------------------

_GENERIC_REQUIRED = (
    re.compile(r"(施設|スペース|物件|店舗)", re.IGNORECASE),
    re.compile(r"(利用日|予約日|日付|date)", re.IGNORECASE),
    re.compile(r"(金額|売上|料金|amount|price)", re.IGNORECASE),
)
_GENERIC_EXTRA = {
    entry.field: entry.patterns
    for entry in compile_field_patterns(
        (
            ("booking_date", ("予約日", "申込日", "booking")),
            ("booking_id", ("予約id", "予約番号", "reservation", "booking")),
        )
    )
}
_GENERIC_FIELDS = {entry.field: entry.patterns for entry in DEFAULT_COMPILED_PATTERNS}


def _generic_headers(headers: list[str]) -> bool:
    return all(any(pattern.search(header) for header in headers) for pattern in _GENERIC_REQUIRED)


def _generic_row(ctx: RowContext, result: ParseResult) -> PlatformBooking | None:
    def cell(patterns) -> str:
        return resolve_field(ctx.headers, ctx.cells, patterns)

    property_name = cell(_GENERIC_FIELDS["platform_property_name"])
    usage_date = normalise_date(cell(_GENERIC_FIELDS["usage_date"]))
    if not property_name or not usage_date:
        result.errors.append(ParseIssue(row=ctx.row_number, message="施設名または利用日が空です"))
        return None

    start_time = normalise_time(cell(_GENERIC_FIELDS["start_time"]))
    end_time = normalise_time(cell(_GENERIC_FIELDS["end_time"]))
    gross_raw = cell(_GENERIC_FIELDS["gross_amount"])
    gross = parse_amount(gross_raw)
    net = parse_amount(cell(_GENERIC_FIELDS["net_amount"]) or gross_raw)
    guest_name = cell(_GENERIC_FIELDS["guest_name"])

    row = BookingRow(
        platform_property_name=property_name,
        usage_date=usage_date,
        start_time=start_time or None,
        end_time=end_time or None,
        gross_amount=gross,
        net_amount=net or None,
        guest_name=guest_name or None,
    )
    return PlatformBooking(
        row=row,
        platform_booking_id=cell(_GENERIC_EXTRA["booking_id"]) or None,
        booking_date=normalise_date(cell(_GENERIC_EXTRA["booking_date"])) or usage_date,
        duration_minutes=parse_duration(start_time, end_time) or None,
        commission=_commission(gross, net),
    )


# --- instabase ---------------------------------------------------------------

_INSTABASE_REQUIRED = (
    "予約ID",
    "施設名",
    "スペース名",
    "ステータス",
    "利用開始日時",
    "利用終了日時",
    "予約金額",
    "支払金額",
)


def _instabase_headers(headers: list[str]) -> bool:
    return all(any(required in header for header in headers) for required in _INSTABASE_REQUIRED)


def _guest_with_company(name: str, company: str) -> str:
    if not name:
        return company
    if not company:
        return name
    return f"{name}（{company}）"


def _instabase_row(ctx: RowContext, result: ParseResult) -> PlatformBooking | None:
    reservation_id = ctx.get("予約ID")
    facility = ctx.get("施設名")
    if not reservation_id or not facility:
        return None

    usage_date, start_time = split_datetime(ctx.get("利用開始日時"))
    _, end_time = split_datetime(ctx.get("利用終了日時"))
    booking_date, _ = split_datetime(ctx.get("申込日時"))

    gross = parse_amount(ctx.get("予約金額 (税込)", "予約金額（税込）"))
    net = parse_amount(ctx.get("支払金額 (税込)", "支払金額（税込）"))
    try:
        hours = float(ctx.get("利用時間 (時間)", "利用時間（時間）") or 0)
    except ValueError:
        hours = 0.0
    status = convert_status(ctx.get("ステータス"))
    if status == "cancelled" and gross == 0:
        result.warnings.append(f"行{ctx.row_number}: キャンセル済み予約（{reservation_id}）")

    guest_name = _guest_with_company(ctx.get("予約者名"), ctx.get("予約者会社名・屋号"))
    row = BookingRow(
        platform_property_name=facility,
        usage_date=usage_date,
        start_time=start_time or None,
        end_time=end_time or None,
        gross_amount=gross,
        net_amount=net or None,
        guest_name=guest_name or None,
    )
    return PlatformBooking(
        row=row,
        platform_booking_id=reservation_id,
        booking_date=booking_date or usage_date,
        duration_minutes=round(hours * 60) or None,
        commission=_commission(gross, net),
        status=status,
        usage_purpose=ctx.get("利用用途") or None,
        usage_detail=ctx.get("用途詳細") or None,
        guest_count=_parse_count(ctx.get("利用人数")),
        space_name=ctx.get("スペース名") or None,
    )


# --- spacemarket -------------------------------------------------------------

_SPACEMARKET_REQUIRED = ("予約ID", "成約金額", "実施日", "ステータス")
_SPACEMARKET_SHORT_NAME_COLUMN = 18
_SPACEMARKET_SPACE_NAME_COLUMN = 19


def _spacemarket_headers(headers: list[str]) -> bool:
    return all(any(required in header for header in headers) for required in _SPACEMARKET_REQUIRED)


def _spacemarket_row(ctx: RowContext, result: ParseResult) -> PlatformBooking | None:
    reservation_id = ctx.get("予約ID")
    if not _NUMERIC_ID_RE.match(reservation_id):
        return None

    short_name = ctx.at(_SPACEMARKET_SHORT_NAME_COLUMN)
    property_name = short_name or extract_property_name(ctx.get("施設名"), ctx.aliases)

    usage_date = normalise_date(ctx.get("実施日"))
    if not usage_date:
        result.warnings.append(f"行{ctx.row_number}: 実施日が空のためスキップ（予約ID: {reservation_id}）")
        return None
    booking_date = normalise_date(ctx.get("予約リクエスト日"))

    gross = parse_amount(ctx.get("成約金額"))
    net = parse_amount(ctx.get("振込予定金額"))
    commission = parse_amount(ctx.get("手数料"))
    status = convert_status(ctx.get("ステータス"))
    if status == "cancelled":
        result.warnings.append(f"行{ctx.row_number}: キャンセル済み予約（{reservation_id}）")

    row = BookingRow(
        platform_property_name=property_name,
        usage_date=usage_date,
        gross_amount=gross,
        net_amount=net or None,
        guest_name=ctx.get("ゲスト名") or None,
    )
    return PlatformBooking(
        row=row,
        platform_booking_id=reservation_id,
        booking_date=booking_date or usage_date,
        commission=commission or None,
        status=status,
        usage_purpose=ctx.get("利用目的") or None,
        space_name=ctx.at(_SPACEMARKET_SPACE_NAME_COLUMN) or ctx.get("スペース名") or None,
    )


# --- spacee ------------------------------------------------------------------

_SPACEE_REQUIRED = ("予約ID", "スペース名", "予約ステータス", "利用開始日時")


def _spacee_headers(headers: list[str]) -> bool:
    return all(any(required in header for header in headers) for required in _SPACEE_REQUIRED)


def _spacee_row(ctx: RowContext, result: ParseResult) -> PlatformBooking | None:
    reservation_id = ctx.get("予約ID")
    if not _NUMERIC_ID_RE.match(reservation_id):
        return None

    property_name = extract_property_name(ctx.get("スペース名"), ctx.aliases)
    usage_date, start_time = split_datetime(ctx.get("利用開始日時"))
    _, end_time = split_datetime(ctx.get("利用終了日時"))
    if not usage_date:
        result.warnings.append(f"行{ctx.row_number}: 利用開始日時が空のためスキップ（予約ID: {reservation_id}）")
        return None

    gross = parse_amount(ctx.get("差引合計売上金額（税込）"))
    commission = parse_amount(ctx.get("システム利用料（税抜。料率毎合計）")) + parse_amount(
        ctx.get("システム利用料消費税（合計）")
    )
    net = parse_amount(ctx.get("精算額（合計）"))
    status = convert_status(ctx.get("予約ステータス"))
    if status == "cancelled":
        result.warnings.append(f"行{ctx.row_number}: キャンセル/期限切れ予約（{reservation_id}）")

    row = BookingRow(
        platform_property_name=property_name,
        usage_date=usage_date,
        start_time=start_time or None,
        end_time=end_time or None,
        gross_amount=gross,
        net_amount=net or None,
        guest_name=ctx.get("予約者名") or None,
    )
    return PlatformBooking(
        row=row,
        platform_booking_id=reservation_id,
        booking_date=normalise_date(ctx.get("予約申込日")) or usage_date,
        duration_minutes=parse_amount(ctx.get("利用時間（分）")) or None,
        commission=commission or None,
        status=status,
        usage_purpose=ctx.get("利用目的") or None,
        guest_count=_parse_count(ctx.get("利用人数")),
    )


PLATFORMS: dict[str, PlatformProfile] = {
    "generic": PlatformProfile("generic", "汎用パーサー", _generic_headers, _generic_row),
    "instabase": PlatformProfile("instabase", "インスタベース", _instabase_headers, _instabase_row),
    "spacemarket": PlatformProfile(
        "spacemarket",
        "スペースマーケット",
        _spacemarket_headers,
        _spacemarket_row,
        expected_first_header="予約ID",
    ),
    "spacee": PlatformProfile("spacee", "スペイシー", _spacee_headers, _spacee_row),
}


def get_platform(code: str) -> PlatformProfile:
    try:
        return PLATFORMS[code]
    except KeyError as exc:
        raise UnknownPlatformError(f"Unknown platform: {code}") from exc
