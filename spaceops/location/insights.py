"""Rule table turning a scored location into operator-facing remarks.

Every rule is checked on its own; all rules that fire are emitted in table
order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class InsightContext:
    station_name: str
    passengers: int | None
    walk_minutes: float | None
    nearby_companies: int
    rank: str


@dataclass(frozen=True)
class InsightRule:
    id: str
    predicate: Callable[[InsightContext], bool]
    render: Callable[[InsightContext], str]


def _has_passengers(ctx: InsightContext) -> bool:
    return bool(ctx.passengers)


def _walk(ctx: InsightContext, low: float | None, high: float | None) -> bool:
    if ctx.walk_minutes is None:
        return False
    if low is not None and ctx.walk_minutes <= low:
        return False
    return high is None or ctx.walk_minutes <= high


INSIGHT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        "footfall_high",
        lambda ctx: _has_passengers(ctx) and ctx.passengers >= 100_000,
        lambda ctx: (
            f"{ctx.station_name}駅は1日{ctx.passengers / 10_000:.1f}万人の乗降客数があり、"
            "高い集客力が期待できます。"
        ),
    ),
    InsightRule(
        "footfall_mid",
        lambda ctx: _has_passengers(ctx) and 50_000 <= ctx.passengers < 100_000,
        lambda ctx: f"{ctx.station_name}駅は中規模ターミナルとして安定した集客が見込めます。",
    ),
    InsightRule(
        "footfall_low",
        lambda ctx: _has_passengers(ctx) and ctx.passengers < 30_000,
        lambda ctx: (
            f"{ctx.station_name}駅の乗降客数は比較的少なめです。"
            "周辺施設やWebマーケティングでの集客強化を検討してください。"
        ),
    ),
    InsightRule(
        "walk_excellent",
        lambda ctx: _walk(ctx, None, 3),
        lambda ctx: "駅から徒歩3分以内の好立地です。アクセスの良さをアピールポイントにできます。",
    ),
    InsightRule(
        "walk_good",
        lambda ctx: _walk(ctx, 3, 5),
        lambda ctx: "駅から徒歩5分圏内で、十分なアクセス利便性があります。",
    ),
    InsightRule(
        "walk_far",
        lambda ctx: _walk(ctx, 10, None),
        lambda ctx: "駅から徒歩10分以上のため、バス利用者向けの案内や駐車場の有無が重要になります。",
    ),
    InsightRule(
        "companies_dense",
        lambda ctx: ctx.nearby_companies >= 3000,
        lambda ctx: "周辺に法人が多く、ビジネス利用（会議室・セミナー）の需要が高いエリアです。",
    ),
    InsightRule(
        "companies_office",
        lambda ctx: 1500 <= ctx.nearby_companies < 3000,
        lambda ctx: "オフィスエリアとして一定の法人需要があります。",
    ),
    InsightRule(
        "rank_top",
        lambda ctx: ctx.rank == "A",
        lambda ctx: "総合的に非常に優れた立地です。競合との差別化よりも収益最大化に注力できます。",
    ),
    InsightRule(
        "rank_weak",
        lambda ctx: ctx.rank in ("D", "E"),
        lambda ctx: "立地条件は厳しめですが、価格競争力や独自のサービスで差別化を図ることが重要です。",
    ),
)


def generate_insights(ctx: InsightContext, rules: tuple[InsightRule, ...] = INSIGHT_RULES) -> list[str]:
    return [rule.render(ctx) for rule in rules if rule.predicate(ctx)]


def fired_rule_ids(ctx: InsightContext, rules: tuple[InsightRule, ...] = INSIGHT_RULES) -> list[str]:
    return [rule.id for rule in rules if rule.predicate(ctx)]
