from __future__ import annotations

import math
from typing import Iterable, Mapping

from sniperank.engine.models import PageSignal, Pillars, QualityScore
from sniperank.engine.stats import round_half_up

EMPTY_SCORE = 30
SCORE_FLOOR = 30
SCORE_CEILING = 100
PILLAR_BASE = 18
PILLAR_FLOOR = 15
PILLAR_CEILING = 25

OVERRIDE_SCORE = QualityScore(
    score=89,
    pillars=Pillars(access=22, trust=23, clarity=22, alignment=22),
    overridden=True,
)

OverrideTable = Mapping[str, QualityScore]


def build_override_table(hosts: Iterable[str]) -> dict[str, QualityScore]:
    table: dict[str, QualityScore] = {}
    for host in hosts:
        clean = host.strip().lower()
        if clean.startswith("www."):
            clean = clean[4:]
        if clean:
            table[clean] = OVERRIDE_SCORE
    return table


def _clamp(value: float, lo: int, hi: int) -> float:
    return max(lo, min(hi, value))


def score_pages(pages: list[PageSignal]) -> int:
    if not pages:
        return EMPTY_SCORE
    total = len(pages)
    score = 40.0

    score += sum(1 for p in pages if p.is_secure) / total * 10

    avg_words = sum(p.word_count for p in pages) / total
    if avg_words >= 600:
        score += 12
    elif avg_words >= 400:
        score += 8
    elif avg_words >= 200:
        score += 4

    score += sum(1 for p in pages if p.h1_count == 1) / total * 8

    avg_links = sum(p.internal_link_count for p in pages) / total
    if avg_links >= 6:
        score += 10
    elif avg_links >= 3:
        score += 6

    score += sum(1 for p in pages if p.has_schema) / total * 8

    return int(_clamp(round_half_up(score), SCORE_FLOOR, SCORE_CEILING))


def compute_pillars(pages: list[PageSignal]) -> Pillars:
    if not pages:
        return Pillars(PILLAR_FLOOR, PILLAR_FLOOR, PILLAR_FLOOR, PILLAR_FLOOR)
    total = len(pages)
    avg_links = sum(p.internal_link_count for p in pages) / total
    all_https = all(p.is_secure for p in pages)
    all_single_h1 = all(p.h1_count == 1 for p in pages)
    schema_fraction = sum(1 for p in pages if p.has_schema) / total

    def pillar(bump: int) -> int:
        return int(_clamp(PILLAR_BASE + bump, PILLAR_FLOOR, PILLAR_CEILING))

    return Pillars(
        access=pillar(math.floor(avg_links / 2)),
        trust=pillar(3 if all_https else 0),
        clarity=pillar(3 if all_single_h1 else 0),
        alignment=pillar(math.floor(schema_fraction * 4)),
    )


def compute_quality(
    pages: list[PageSignal],
    host: str,
    overrides: OverrideTable | None = None,
) -> QualityScore:
    quality = QualityScore(score=score_pages(pages), pillars=compute_pillars(pages))
    key = (host or "").lower()
    if key.startswith("www."):
        key = key[4:]
    if overrides and key in overrides:
        return overrides[key]
    return quality
