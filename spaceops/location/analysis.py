"""Station, walk time and address in; scored location report out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from spaceops.common.logging import log_event
from spaceops.location.companies import CompanyEstimator
from spaceops.location.insights import InsightContext, generate_insights
from spaceops.location.scoring import (
    LocationFactors,
    ScoringSettings,
    calculate_location_score,
    location_multiplier,
    location_rank,
)
from spaceops.location.stations import ResolvedStation, StationCatalog, StationLookup

logger = logging.getLogger("spaceops.location")


@dataclass(frozen=True)
class LocationReport:
    station: StationLookup
    nearby_companies: int
    score: int
    rank: str
    multiplier: float
    insights: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stationInfo": self.station.to_station_info(),
            "nearbyCompanies": self.nearby_companies,
            "locationScore": self.score,
            "locationRank": self.rank,
            "locationMultiplier": self.multiplier,
            "insights": list(self.insights),
        }


class LocationAnalyzer:
    def __init__(
        self,
        catalog: StationCatalog,
        estimator: CompanyEstimator | None = None,
        settings: ScoringSettings | None = None,
    ) -> None:
        self.catalog = catalog
        self.estimator = estimator or CompanyEstimator()
        self.settings = settings or ScoringSettings()

    def analyse(
        self,
        station_name: str,
        walk_minutes: float | None = None,
        address: str | None = None,
    ) -> LocationReport:
        station = self.catalog.resolve(station_name)
        passengers = station.record.passengers if isinstance(station, ResolvedStation) else None
        # Zero minutes means "not entered".
        walk = walk_minutes or None
        companies = self.estimator.estimate(address)

        factors = LocationFactors(
            station_passengers=passengers,
            walk_minutes=walk,
            nearby_companies=companies,
        )
        score = calculate_location_score(factors, self.settings)
        rank = location_rank(score, self.settings)
        multiplier = location_multiplier(score, self.settings)

        display_name = station.record.name if isinstance(station, ResolvedStation) else station.query
        insights = generate_insights(
            InsightContext(
                station_name=display_name,
                passengers=passengers,
                walk_minutes=walk,
                nearby_companies=companies,
                rank=rank,
            )
        )

        log_event(
            logger,
            "location analysed",
            stage="location",
            event="LOCATION_SCORED",
            status="ok" if isinstance(station, ResolvedStation) else "unresolved",
            score=score,
            rank=rank,
        )
        return LocationReport(
            station=station,
            nearby_companies=companies,
            score=score,
            rank=rank,
            multiplier=multiplier,
            insights=insights,
        )
