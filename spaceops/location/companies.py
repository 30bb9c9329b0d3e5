"""Rough nearby-company estimates from an address string.

A proper corporate registry lookup is out of scope; the estimate is the
ward/city figure for the first district named in the address, jittered by
up to +/- ``variation``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

DEFAULT_COMPANY_COUNT = 1500
DEFAULT_VARIATION = 0.2
DEFAULT_DISTRICTS: dict[str, int] = {
    "千代田区": 8500,
    "中央区": 7200,
    "港区": 6800,
    "新宿区": 5500,
    "渋谷区": 4800,
    "文京区": 2800,
    "豊島区": 3200,
    "台東区": 2500,
    "墨田区": 2000,
    "江東区": 2800,
    "品川区": 3500,
    "目黒区": 2200,
    "大田区": 2500,
    "世田谷区": 2800,
    "杉並区": 2000,
    "中野区": 1800,
    "練馬区": 1500,
    "板橋区": 1800,
    "北区": 1600,
    "荒川区": 1200,
    "足立区": 1500,
    "葛飾区": 1200,
    "江戸川区": 1400,
    "横浜市": 3500,
    "川崎市": 2800,
    "さいたま市": 2200,
    "千葉市": 1800,
}


@dataclass
class CompanyEstimator:
    districts: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_DISTRICTS))
    default: int = DEFAULT_COMPANY_COUNT
    variation: float = DEFAULT_VARIATION
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def from_config(cls, location_config: dict, rng: random.Random | None = None) -> "CompanyEstimator":
        companies = location_config["companies"]
        return cls(
            districts={str(name): int(count) for name, count in companies["districts"].items()},
            default=int(companies["default"]),
            variation=float(companies["variation"]),
            rng=rng or random.Random(),
        )

    def district_for(self, address: str) -> str | None:
        for district in self.districts:
            if district in address:
                return district
        return None

    def estimate(self, address: str | None) -> int:
        if not address:
            return self.default
        district = self.district_for(address)
        if district is None:
            return self.default
        factor = 1.0
        if self.variation > 0:
            factor = self.rng.uniform(1 - self.variation, 1 + self.variation)
        return round(self.districts[district] * factor)
