import copy

import pytest

from spaceops.common.errors import ConfigError
from spaceops.common.schema import validate_ingest_config, validate_location_config

BASE_INGEST = {
    "field_patterns": [{"field": "usage_date", "patterns": ["利用日"]}],
    "preview_limit": 10,
    "fallback_encodings": ["shift_jis"],
}

BASE_LOCATION = {
    "reference_dataset": "data/reference/stations.json",
    "neutral_score": 50,
    "weights": {"passengers": 0.4, "walk_minutes": 0.3, "nearby_companies": 0.3},
    "curves": {
        "passengers": [[0, 20], [100000, 90]],
        "walk_minutes": [[1, 100], [20, 20]],
        "nearby_companies": [[0, 20], [3000, 100]],
    },
    "rank_bands": [[80, "A"], [60, "B"]],
    "floor_rank": "E",
    "multiplier_spread": 0.3,
    "companies": {"default": 1500, "variation": 0.2, "districts": {}},
}


def test_validate_ingest_config_accepts_valid_shape():
    assert validate_ingest_config(copy.deepcopy(BASE_INGEST))["preview_limit"] == 10


def test_validate_ingest_config_rejects_unknown_key_by_default():
    bad = copy.deepcopy(BASE_INGEST)
    bad["unexpected"] = True
    with pytest.raises(ConfigError):
        validate_ingest_config(bad)
    validate_ingest_config(bad, allow_unknown=True)


def test_validate_ingest_config_rejects_unknown_field_and_duplicates():
    unknown = copy.deepcopy(BASE_INGEST)
    unknown["field_patterns"].append({"field": "colour", "patterns": ["x"]})
    with pytest.raises(ConfigError):
        validate_ingest_config(unknown)

    dupes = copy.deepcopy(BASE_INGEST)
    dupes["field_patterns"].append({"field": "usage_date", "patterns": ["日付"]})
    with pytest.raises(ConfigError):
        validate_ingest_config(dupes)


def test_validate_location_config_accepts_valid_shape():
    assert validate_location_config(copy.deepcopy(BASE_LOCATION))["floor_rank"] == "E"


def test_validate_location_config_rejects_unsorted_breakpoints():
    bad = copy.deepcopy(BASE_LOCATION)
    bad["curves"]["walk_minutes"] = [[5, 80], [1, 100]]
    with pytest.raises(ConfigError):
        validate_location_config(bad)


def test_validate_location_config_rejects_ascending_bands():
    bad = copy.deepcopy(BASE_LOCATION)
    bad["rank_bands"] = [[60, "B"], [80, "A"]]
    with pytest.raises(ConfigError):
        validate_location_config(bad)


def test_validate_location_config_requires_every_weight():
    bad = copy.deepcopy(BASE_LOCATION)
    del bad["weights"]["walk_minutes"]
    with pytest.raises(ConfigError):
        validate_location_config(bad)
