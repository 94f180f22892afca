from __future__ import annotations

import logging
from typing import Optional

from sniperank.config import Settings, settings as default_settings
from sniperank.engine.crawler import CrawlError, crawl_site
from sniperank.engine.fetcher import PageFetcher, build_fetcher
from sniperank.engine.findings import crawl_failed_finding, synthesize
from sniperank.engine.insights import format_insights
from sniperank.engine.models import Finding, PageSignal, Pillars, Report, ReportMode
from sniperank.engine.polish import normalize_mode, polish, split_sentences
from sniperank.engine.scoring import EMPTY_SCORE, PILLAR_FLOOR, compute_quality
from sniperank.engine.urls import host_of

logger = logging.getLogger(__name__)

INCOMPLETE_SCORE = 60
INCOMPLETE_TITLE = "Analysis Incomplete"
INCOMPLETE_TEXT = (
    "{host} crawl fell short, only partial signals were observable. "
    "This reads more like access posture than content posture."
)

FLOOR_PILLARS = Pillars(PILLAR_FLOOR, PILLAR_FLOOR, PILLAR_FLOOR, PILLAR_FLOOR)


def _degraded(url: str, host: str, mode: ReportMode, score: int, finding: Finding) -> Report:
    return Report(
        url=url,
        host=host,
        mode=mode,
        working=[],
        needs_attention=[finding],
        insights=format_insights([], host, mode),
        pillars=FLOOR_PILLARS,
        score=score,
        degraded=True,
    )


def assemble_report(
    url: str,
    pages: list[PageSignal],
    mode: ReportMode,
    settings: Settings,
) -> Report:
    host = host_of(url)
    overrides = settings.overrides()
    quality = compute_quality(pages, host, overrides)
    findings = synthesize(pages, host, mode, overrides)
    return Report(
        url=url,
        host=host,
        mode=mode,
        working=findings.working,
        needs_attention=findings.needs_attention,
        insights=format_insights(pages, host, mode),
        pillars=quality.pillars,
        score=quality.score,
        pages_crawled=len(pages),
        overridden=quality.overridden,
    )


async def _crawl(url: str, mode: ReportMode, settings: Settings, fetcher: Optional[PageFetcher]) -> list[PageSignal]:
    max_pages = settings.max_pages_for(mode)
    if fetcher is not None:
        return await crawl_site(url, fetcher, max_pages, settings.max_depth)
    async with build_fetcher(settings.fetcher, settings.timeout_for(mode), settings.user_agent) as owned:
        return await crawl_site(url, owned, max_pages, settings.max_depth)


async def analyze_website(
    url: str,
    mode: str = "short",
    settings: Optional[Settings] = None,
    fetcher: Optional[PageFetcher] = None,
) -> Report:
    settings = settings or default_settings
    report_mode = normalize_mode(mode)
    host = host_of(url)

    try:
        pages = await _crawl(url, report_mode, settings, fetcher)
    except CrawlError as exc:
        logger.error("Analysis failed for %s: %s", url, exc)
        return _degraded(url, host, report_mode, EMPTY_SCORE, crawl_failed_finding(host, report_mode))

    try:
        return assemble_report(url, pages, report_mode, settings)
    except Exception:
        logger.exception("Analysis failed for %s after crawling %d pages", url, len(pages))
        finding = Finding(INCOMPLETE_TITLE, polish(INCOMPLETE_TEXT.format(host=host), report_mode, host))
        return _degraded(url, host, report_mode, INCOMPLETE_SCORE, finding)


def score_band(total: int) -> str:
    if total >= 85:
        return "Rank: Highly Visible ★★★★☆"
    if total >= 70:
        return "Rank: Partially Visible ★★★☆☆"
    if total >= 55:
        return "Rank: Needs Work ★★☆☆☆"
    return "Rank: Low Visibility ★☆☆☆☆"


def highlights(report: Report, limit: int = 4) -> list[str]:
    lines = []
    for finding in report.needs_attention[:limit]:
        sentences = split_sentences(finding.description)
        first = sentences[0] if sentences else finding.description
        lines.append(f"{finding.title} — {first}")
    return lines
