from __future__ import annotations

import math
from dataclasses import dataclass

from sniperank.engine.models import PageSignal


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def pct(num: int, den: int) -> int:
    return round_half_up(num / den * 100) if den else 0


def mean(values: list[int]) -> int:
    return round_half_up(sum(values) / len(values)) if values else 0


def sample_stdev(values: list[int]) -> int:
    if len(values) < 2:
        return 0
    m = sum(values) / len(values)
    variance = sum((v - m) ** 2 for v in values) / (len(values) - 1)
    return round_half_up(math.sqrt(variance))


@dataclass(frozen=True)
class AggregateStats:
    total_pages: int = 0
    https_page_count: int = 0
    titled_page_count: int = 0
    long_title_count: int = 0
    duplicate_title_count: int = 0
    meta_page_count: int = 0
    avg_word_count: int = 0
    word_count_std_dev: int = 0
    thin_page_count: int = 0
    single_h1_page_count: int = 0
    missing_h1_page_count: int = 0
    multi_h1_page_count: int = 0
    avg_internal_links: int = 0
    weak_internal_page_count: int = 0
    schema_page_count: int = 0
    avg_alt_pct: int = 0
    breadcrumb_page_count: int = 0
    nav_pct: int = 0
    footer_pct: int = 0
    avg_external_links: int = 0
    avg_social_links: int = 0
    contact_signal_count: int = 0

    @property
    def title_pct(self) -> int:
        return pct(self.titled_page_count, self.total_pages)

    @property
    def meta_pct(self) -> int:
        return pct(self.meta_page_count, self.total_pages)

    @property
    def schema_pct(self) -> int:
        return pct(self.schema_page_count, self.total_pages)

    @property
    def breadcrumb_pct(self) -> int:
        return pct(self.breadcrumb_page_count, self.total_pages)

    def fields(self) -> dict:
        """Plain values plus derived percentages, for text templates."""
        values = dict(self.__dict__)
        values.update(
            title_pct=self.title_pct,
            meta_pct=self.meta_pct,
            schema_pct=self.schema_pct,
            breadcrumb_pct=self.breadcrumb_pct,
            untitled_page_count=self.total_pages - self.titled_page_count,
        )
        return values


def _alt_pct(page: PageSignal) -> int:
    if not page.image_count:
        return 100
    return round_half_up(page.image_alt_count / page.image_count * 100)


def compute_stats(pages: list[PageSignal]) -> AggregateStats:
    if not pages:
        return AggregateStats()
    total = len(pages)
    words = [p.word_count for p in pages]
    return AggregateStats(
        total_pages=total,
        https_page_count=sum(1 for p in pages if p.is_secure),
        titled_page_count=sum(1 for p in pages if p.title),
        long_title_count=sum(1 for p in pages if len(p.title) > 60),
        duplicate_title_count=total - len({p.title for p in pages}),
        meta_page_count=sum(1 for p in pages if p.meta_description),
        avg_word_count=mean(words),
        word_count_std_dev=sample_stdev(words),
        thin_page_count=sum(1 for p in pages if p.word_count < 300),
        single_h1_page_count=sum(1 for p in pages if p.h1_count == 1),
        missing_h1_page_count=sum(1 for p in pages if p.h1_count == 0),
        multi_h1_page_count=sum(1 for p in pages if p.h1_count > 1),
        avg_internal_links=mean([p.internal_link_count for p in pages]),
        weak_internal_page_count=sum(1 for p in pages if p.internal_link_count < 3),
        schema_page_count=sum(1 for p in pages if p.has_schema),
        avg_alt_pct=mean([_alt_pct(p) for p in pages]),
        breadcrumb_page_count=sum(1 for p in pages if p.has_breadcrumbs),
        nav_pct=pct(sum(1 for p in pages if p.has_nav), total),
        footer_pct=pct(sum(1 for p in pages if p.has_footer), total),
        avg_external_links=mean([p.external_link_count for p in pages]),
        avg_social_links=mean([p.social_link_count for p in pages]),
        contact_signal_count=sum(p.contact_signals.count for p in pages),
    )
