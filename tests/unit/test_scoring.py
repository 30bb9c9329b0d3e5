import pytest

from spaceops.location.scoring import (
    LocationFactors,
    ScoringSettings,
    calculate_location_score,
    interpolate,
    location_multiplier,
    location_rank,
    round_half_up,
    score_breakdown,
    sub_score,
)


def test_missing_factors_renormalise_weights():
    factors = LocationFactors(station_passengers=80_000)

    breakdown = score_breakdown(factors)

    assert breakdown.sub_scores == {"passengers": pytest.approx(82.0)}
    assert breakdown.effective_weights == {"passengers": pytest.approx(1.0)}
    assert breakdown.score == 82
    assert calculate_location_score(factors) == round_half_up(sub_score("passengers", 80_000))


def test_neutral_defaults_when_nothing_known():
    score = calculate_location_score(LocationFactors())
    assert score == 50
    assert location_rank(score) == "C"
    assert location_multiplier(score) == pytest.approx(1.0)


def test_non_positive_factors_are_treated_as_missing():
    assert calculate_location_score(LocationFactors(station_passengers=0, walk_minutes=-1, nearby_companies=0)) == 50


def test_all_factors_weighted():
    factors = LocationFactors(station_passengers=100_000, walk_minutes=5, nearby_companies=1_000)
    # 90 * 0.4 + 80 * 0.3 + 70 * 0.3
    assert calculate_location_score(factors) == 81


@pytest.mark.parametrize(
    ("score", "rank"),
    [(100, "A"), (80, "A"), (79, "B"), (60, "B"), (59, "C"), (40, "C"), (39, "D"), (20, "D"), (19, "E"), (0, "E")],
)
def test_rank_band_boundaries(score, rank):
    assert location_rank(score) == rank


def test_multiplier_range():
    assert location_multiplier(100) == pytest.approx(1.3)
    assert location_multiplier(0) == pytest.approx(0.7)
    assert location_multiplier(None) == 1.0


def test_passenger_sub_score_is_monotone():
    values = [0, 5_000, 10_000, 30_000, 50_000, 80_000, 100_000, 200_000, 300_000, 1_000_000]
    scores = [sub_score("passengers", value) for value in values]
    assert scores == sorted(scores)
    assert scores[-1] == 100


def test_walk_sub_score_never_increases_beyond_one_minute():
    values = [1, 2, 3, 4, 5, 7, 10, 15, 20, 45]
    scores = [sub_score("walk_minutes", value) for value in values]
    assert scores == sorted(scores, reverse=True)
    assert sub_score("walk_minutes", 0.5) == 100
    assert scores[-1] == 20


def test_company_sub_score_breakpoints():
    assert sub_score("nearby_companies", 500) == 50
    assert sub_score("nearby_companies", 2_000) == pytest.approx(85.0)
    assert sub_score("nearby_companies", 10_000) == 100


def test_interpolate_clamps_both_ends():
    points = ((10, 0), (20, 100))
    assert interpolate(points, 5) == 0
    assert interpolate(points, 15) == 50
    assert interpolate(points, 25) == 100


def test_round_half_up():
    assert round_half_up(82.5) == 83
    assert round_half_up(82.4999) == 82
    assert round_half_up(2.5) == 3


def test_settings_from_config():
    settings = ScoringSettings.from_config(
        {
            "curves": {
                "passengers": [[0, 0], [10, 100]],
                "walk_minutes": [[1, 100], [2, 0]],
                "nearby_companies": [[0, 0], [10, 100]],
            },
            "weights": {"passengers": 1, "walk_minutes": 1, "nearby_companies": 2},
            "rank_bands": [[90, "S"]],
            "floor_rank": "X",
            "neutral_score": 40,
            "multiplier_spread": 0.5,
        }
    )
    factors = LocationFactors(station_passengers=5, walk_minutes=1, nearby_companies=10)
    # (50 * 1 + 100 * 1 + 100 * 2) / 4
    assert calculate_location_score(factors, settings) == 88
    assert location_rank(88, settings) == "X"
    assert location_multiplier(40, settings) == pytest.approx(1.0)
    assert calculate_location_score(LocationFactors(), settings) == 40
