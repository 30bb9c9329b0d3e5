"""Weighted location scoring, rank banding and the price multiplier."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

Breakpoints = tuple[tuple[float, float], ...]

DEFAULT_CURVES: dict[str, Breakpoints] = {
    # Daily passengers: 10k -> 40, 50k -> 70, 100k -> 90, 300k and above -> 100.
    "passengers": ((0, 20), (10_000, 40), (50_000, 70), (100_000, 90), (300_000, 100)),
    # Walk minutes: 1 -> 100, 3 -> 90, 5 -> 80, 10 -> 50, floor of 20 from 20 minutes.
    "walk_minutes": ((1, 100), (3, 90), (5, 80), (10, 50), (20, 20)),
    # Nearby companies: 100 -> 30, 500 -> 50, 1000 -> 70, 3000 and above -> 100.
    "nearby_companies": ((0, 20), (100, 30), (500, 50), (1_000, 70), (3_000, 100)),
}
DEFAULT_WEIGHTS = {"passengers": 0.4, "walk_minutes": 0.3, "nearby_companies": 0.3}
DEFAULT_RANK_BANDS: tuple[tuple[int, str], ...] = ((80, "A"), (60, "B"), (40, "C"), (20, "D"))


@dataclass(frozen=True)
class LocationFactors:
    station_passengers: float | None = None
    walk_minutes: float | None = None
    nearby_companies: float | None = None

    def as_mapping(self) -> dict[str, float | None]:
        return {
            "passengers": self.station_passengers,
            "walk_minutes": self.walk_minutes,
            "nearby_companies": self.nearby_companies,
        }


@dataclass(frozen=True)
class ScoringSettings:
    curves: dict[str, Breakpoints] = field(default_factory=lambda: dict(DEFAULT_CURVES))
    weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    rank_bands: tuple[tuple[int, str], ...] = DEFAULT_RANK_BANDS
    floor_rank: str = "E"
    neutral_score: int = 50
    multiplier_spread: float = 0.3

    @classmethod
    def from_config(cls, location_config: dict) -> "ScoringSettings":
        return cls(
            curves={
                factor: tuple((float(x), float(y)) for x, y in points)
                for factor, points in location_config["curves"].items()
            },
            weights={factor: float(weight) for factor, weight in location_config["weights"].items()},
            rank_bands=tuple((int(threshold), str(rank)) for threshold, rank in location_config["rank_bands"]),
            floor_rank=str(location_config["floor_rank"]),
            neutral_score=int(location_config["neutral_score"]),
            multiplier_spread=float(location_config["multiplier_spread"]),
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    score: int
    sub_scores: dict[str, float]
    effective_weights: dict[str, float]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "sub_scores": dict(self.sub_scores),
            "effective_weights": dict(self.effective_weights),
        }


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def interpolate(points: Sequence[tuple[float, float]], x: float) -> float:
    """Piecewise-linear interpolation, clamped to the first and last breakpoint."""
    first_x, first_y = points[0]
    if x <= first_x:
        return first_y
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        if x <= x1:
            return y0 + (x - x0) / (x1 - x0) * (y1 - y0)
    return points[-1][1]


def sub_score(factor: str, value: float, settings: ScoringSettings | None = None) -> float:
    settings = settings or ScoringSettings()
    return interpolate(settings.curves[factor], value)


def score_breakdown(factors: LocationFactors, settings: ScoringSettings | None = None) -> ScoreBreakdown:
    settings = settings or ScoringSettings()
    weighted_total = 0.0
    weight_total = 0.0
    sub_scores: dict[str, float] = {}
    present_weights: dict[str, float] = {}

    for factor, value in factors.as_mapping().items():
        # Missing and non-positive inputs drop out of both sums.
        if value is None or value <= 0:
            continue
        weight = settings.weights[factor]
        sub_scores[factor] = sub_score(factor, value, settings)
        present_weights[factor] = weight
        weighted_total += sub_scores[factor] * weight
        weight_total += weight

    if weight_total == 0:
        return ScoreBreakdown(score=settings.neutral_score, sub_scores={}, effective_weights={})

    effective = {factor: weight / weight_total for factor, weight in present_weights.items()}
    # Trim float noise so x.5 averages always round up.
    return ScoreBreakdown(
        score=round_half_up(round(weighted_total / weight_total, 9)),
        sub_scores=sub_scores,
        effective_weights=effective,
    )


def calculate_location_score(factors: LocationFactors, settings: ScoringSettings | None = None) -> int:
    return score_breakdown(factors, settings).score


def location_rank(score: int, settings: ScoringSettings | None = None) -> str:
    settings = settings or ScoringSettings()
    for threshold, rank in settings.rank_bands:
        if score >= threshold:
            return rank
    return settings.floor_rank


def location_multiplier(score: int | None, settings: ScoringSettings | None = None) -> float:
    settings = settings or ScoringSettings()
    if score is None:
        return 1.0
    neutral = settings.neutral_score
    return 1 + ((score - neutral) / neutral) * settings.multiplier_spread
