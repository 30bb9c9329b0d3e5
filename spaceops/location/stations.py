"""Reference station catalog and fuzzy station-name resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

from spaceops.common.errors import ReferenceDataError
from spaceops.common.fs import read_json
from spaceops.common.logging import log_event, log_warning

logger = logging.getLogger("spaceops.location")


@dataclass(frozen=True)
class StationRecord:
    name: str
    prefecture: str
    line: str
    passengers: int


@dataclass(frozen=True)
class ResolvedStation:
    record: StationRecord
    rank: int

    def to_station_info(self) -> dict[str, Any]:
        return {
            "name": self.record.name,
            "passengers": self.record.passengers,
            "line": self.record.line,
            "prefecture": self.record.prefecture,
            "rank": self.rank,
        }


@dataclass(frozen=True)
class UnresolvedStation:
    query: str

    def to_station_info(self) -> dict[str, Any]:
        return {
            "name": self.query,
            "passengers": None,
            "line": None,
            "prefecture": None,
            "rank": None,
        }


StationLookup = ResolvedStation | UnresolvedStation


def normalise_station_name(name: str) -> str:
    cleaned = name[:-1] if name.endswith("駅") else name
    return cleaned.replace("ヶ", "ケ").replace("　", " ").strip()


def parse_station_payload(payload: Any) -> tuple[StationRecord, ...]:
    if not isinstance(payload, dict) or not isinstance(payload.get("stations"), list):
        raise ReferenceDataError("Station dataset must be an object with a 'stations' list")
    records = []
    for idx, entry in enumerate(payload["stations"]):
        try:
            records.append(
                StationRecord(
                    name=str(entry["name"]),
                    prefecture=str(entry.get("prefecture", "")),
                    line=str(entry.get("line", "")),
                    passengers=int(entry["passengers"]),
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ReferenceDataError(f"Malformed station entry at index {idx}") from exc
    return tuple(records)


def json_station_loader(path: Path) -> Callable[[], tuple[StationRecord, ...]]:
    def _load() -> tuple[StationRecord, ...]:
        try:
            payload = read_json(path)
        except (OSError, ValueError) as exc:
            raise ReferenceDataError(f"Cannot read station dataset {path}") from exc
        return parse_station_payload(payload)

    return _load


class StationCatalog:
    """Reference stations behind a single-assignment memo.

    The loader runs until it first succeeds; from then on the cached tuple is
    returned. A failed load is logged and treated as an empty dataset, so
    every lookup degrades to "no station found".
    """

    def __init__(self, loader: Callable[[], tuple[StationRecord, ...]]) -> None:
        self._loader = loader
        self._stations: tuple[StationRecord, ...] | None = None

    @classmethod
    def from_path(cls, path: Path) -> "StationCatalog":
        return cls(json_station_loader(path))

    @classmethod
    def from_records(cls, records: Iterable[StationRecord]) -> "StationCatalog":
        frozen = tuple(records)
        return cls(lambda: frozen)

    def stations(self) -> tuple[StationRecord, ...]:
        if self._stations is not None:
            return self._stations
        try:
            loaded = self._loader()
        except ReferenceDataError as exc:
            log_warning(
                logger,
                f"station dataset unavailable: {exc}",
                stage="location",
                event="REFERENCE_LOAD_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            return ()
        self._stations = loaded
        log_event(
            logger,
            "station dataset loaded",
            stage="location",
            event="REFERENCE_LOADED",
            status="ok",
            rows_out=len(loaded),
        )
        return loaded

    def find(self, query: str) -> StationRecord | None:
        stations = self.stations()
        target = normalise_station_name(query)
        if not target:
            return None

        for station in stations:
            if normalise_station_name(station.name) == target:
                return station

        # Nested names ("新宿" / "新宿三丁目") resolve to whichever comes first.
        for station in stations:
            candidate = normalise_station_name(station.name)
            if target in candidate or candidate in target:
                return station
        return None

    def passenger_rank(self, station: StationRecord) -> int:
        ordered = sorted(self.stations(), key=lambda record: record.passengers, reverse=True)
        for idx, record in enumerate(ordered):
            if record.name == station.name:
                return idx + 1
        raise ReferenceDataError(f"Station {station.name} is not part of the catalog")

    def resolve(self, query: str) -> StationLookup:
        station = self.find(query)
        if station is None:
            return UnresolvedStation(query=query)
        return ResolvedStation(record=station, rank=self.passenger_rank(station))
