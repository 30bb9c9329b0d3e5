"""Data models used across the ingestion pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class BookingRow:
    platform_property_name: str
    usage_date: str
    gross_amount: int
    start_time: str | None = None
    end_time: str | None = None
    net_amount: int | None = None
    guest_name: str | None = None

    def to_record(self) -> dict[str, Any]:
        return asdict(self)

    def to_dict(self) -> dict[str, Any]:
        """Camel-cased contract consumed by the import preview; absent optionals are omitted."""
        payload: dict[str, Any] = {
            "platformPropertyName": self.platform_property_name,
            "usageDate": self.usage_date,
            "grossAmount": self.gross_amount,
        }
        optional = {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "netAmount": self.net_amount,
            "guestName": self.guest_name,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


@dataclass(frozen=True)
class PlatformBooking:
    row: BookingRow
    platform_booking_id: str | None = None
    booking_date: str | None = None
    duration_minutes: int | None = None
    commission: int | None = None
    status: str = "confirmed"
    usage_purpose: str | None = None
    usage_detail: str | None = None
    guest_count: int | None = None
    space_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = self.row.to_dict()
        extra = {
            "platformBookingId": self.platform_booking_id,
            "bookingDate": self.booking_date,
            "durationMinutes": self.duration_minutes,
            "commission": self.commission,
            "status": self.status,
            "usagePurpose": self.usage_purpose,
            "usageDetail": self.usage_detail,
            "guestCount": self.guest_count,
            "spaceName": self.space_name,
        }
        payload.update({key: value for key, value in extra.items() if value is not None})
        return payload
