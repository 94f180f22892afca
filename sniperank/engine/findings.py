from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterator

from sniperank.engine.models import Finding, Findings, PageSignal, ReportMode
from sniperank.engine.polish import normalize_mode, polish
from sniperank.engine.scoring import OverrideTable, compute_quality
from sniperank.engine.stats import AggregateStats, compute_stats

CRAWL_FAILED_TITLE = "Site Crawl Failed"
CRAWL_FAILED_TEXT = (
    "The crawl for {host} didn’t surface analyzable pages. "
    "That usually feels like a closed door rather than a blank room."
)


@dataclass(frozen=True)
class Check:
    key: str
    passes: Callable[[AggregateStats], bool]
    working: tuple[str, str]
    needs: tuple[str, str]
    long_only: bool = False


def _share(count: int, total: int, fraction: float) -> bool:
    return count >= math.ceil(total * fraction)


CHECKS: list[Check] = [
    Check(
        "https",
        lambda s: s.https_page_count == s.total_pages,
        ("Complete HTTPS Security",
         "Every sampled page on {host} resolves over HTTPS. The floor feels solid; readers don’t step around mixed locks to get the gist."),
        ("HTTPS Gaps",
         "{https_page_count}/{total_pages} pages travel with locks on {host}. The rest step out without them, and the tone changes when they do."),
    ),
    Check(
        "title_coverage",
        lambda s: s.titled_page_count == s.total_pages,
        ("Title Coverage",
         "{title_pct}% of pages on {host} present a nameplate. Visitors meet a label at the doorway before the first line."),
        ("Missing Titles",
         "{untitled_page_count} pages publish without a nameplate. Untitled entries tend to blur at the doorway."),
    ),
    Check(
        "title_length",
        lambda s: s.long_title_count == 0,
        ("Title Length Discipline",
         "Titles on {host} stay inside roughly sixty characters. Previews hold their edges without trimming the key phrase."),
        ("Overlong Titles",
         "{long_title_count} pages let titles run long. Edges get trimmed, and the key phrase can fall outside the frame."),
    ),
    Check(
        "title_duplication",
        lambda s: s.duplicate_title_count == 0,
        ("Distinct Titles",
         "No two sampled pages on {host} share a title. Different rooms carry different labels, so previews don’t collide."),
        ("Duplicate Titles",
         "{duplicate_title_count} collisions show up across {host}. Different rooms sharing the same label invite mix-ups."),
    ),
    Check(
        "meta_description",
        lambda s: s.meta_pct >= 80,
        ("Meta Description Presence",
         "{meta_pct}% of pages bring a short preface on {host}. Most entries arrive with a hint rather than a cold open."),
        ("Thin Previews",
         "Only {meta_pct}% of pages bring a summary. Without that preface, the first line has to do extra work."),
    ),
    Check(
        "thin_sections",
        lambda s: s.thin_page_count == 0,
        ("Even Section Depth",
         "None of the {total_pages} sampled pages dip under 300 words. Threads run long enough to be followed rather than skimmed."),
        ("Thin Sections",
         "{thin_page_count}/{total_pages} pages land under 300 words. Skimming turns into skipping when the thread is that short."),
    ),
    Check(
        "content_depth",
        lambda s: s.avg_word_count >= 400,
        ("Substantial Content Depth",
         "Average depth sits near {avg_word_count} words with a spread around ~{word_count_std_dev}. Sections read like chapters, not captions."),
        ("Shallow Average Depth",
         "Coverage averages {avg_word_count} words with a spread near ~{word_count_std_dev}. Ideas arrive, but they don’t stay long."),
    ),
    Check(
        "lead_heading",
        lambda s: s.missing_h1_page_count == 0,
        ("Lead Headings Present",
         "Every sampled page on {host} opens with a lead heading. Scenes start with a title card rather than mid-conversation."),
        ("Missing H1",
         "{missing_h1_page_count} pages step onstage without a lead heading. The scene opens mid-conversation."),
    ),
    Check(
        "heading_singularity",
        lambda s: s.multi_h1_page_count == 0,
        ("Clear Heading Spine",
         "No sampled page on {host} stacks more than one H1. Primary topics stand alone instead of competing for the mic."),
        ("Multiple H1 Anchors",
         "{multi_h1_page_count} pages carry more than one lead. Two spotlights on the same stage split attention."),
    ),
    Check(
        "internal_density",
        lambda s: s.avg_internal_links >= 6,
        ("Internal Path Consistency",
         "Cross-links cluster around ~{avg_internal_links} per page on {host}. Nearby ideas don’t feel far away."),
        ("Sparse Trails",
         "Internal links average {avg_internal_links} per page. Hops between related ideas feel longer than necessary."),
    ),
    Check(
        "isolation",
        lambda s: s.weak_internal_page_count == 0,
        ("Connected Pages",
         "Every sampled page links to at least three neighbours. No section reads like a side path that never loops back."),
        ("Isolated Pages",
         "{weak_internal_page_count} pages sit with fewer than three connections. They read like side paths that don’t loop back."),
    ),
    Check(
        "schema",
        lambda s: _share(s.schema_page_count, s.total_pages, 0.7),
        ("Structured Data Footprint",
         "{schema_pct}% of pages declare typed context. Names and roles tend to keep their shape when lifted elsewhere."),
        ("Typed Context Gaps",
         "Typed signals reach {schema_pct}% of pages on {host}. Where typing thins out, names and roles can smudge."),
    ),
    Check(
        "alt_text",
        lambda s: s.avg_alt_pct >= 85,
        ("Image Alt Coverage",
         "Alt text lands on most imagery (~{avg_alt_pct}% on average). When visuals drop out, the thread usually remains intact."),
        ("Alt-Text Thin Spots",
         "Alt attributes average ~{avg_alt_pct}% across imagery. When captions go missing, pictures turn into placeholders."),
    ),
    Check(
        "breadcrumbs",
        lambda s: _share(s.breadcrumb_page_count, s.total_pages, 0.6),
        ("Breadcrumb Traces",
         "{breadcrumb_pct}% of pages expose a trail. Sections announce where they live in the larger map."),
        ("Few Breadcrumbs",
         "Only {breadcrumb_pct}% of pages show a trail. Without that line, sections float more than they stack."),
    ),
    Check(
        "template",
        lambda s: s.nav_pct >= 90 and s.footer_pct >= 90,
        ("Template Consistency",
         "Global furniture shows up reliably (nav {nav_pct}%, footer {footer_pct}%). Orientation tends to persist from page to page."),
        ("Template Drift",
         "Global elements fluctuate (nav {nav_pct}%, footer {footer_pct}%). The room changes shape more often than expected."),
    ),
    Check(
        "contact",
        lambda s: _share(s.contact_signal_count, s.total_pages, 0.6),
        ("Visible Contact Footprint",
         "Direct touchpoints surface across {host} with {contact_signal_count} phone, email or address cues. The handshake is easy to find."),
        ("Light Contact Footprint",
         "Direct touchpoints surface intermittently across {host}. When the handshake isn’t obvious, trust has to travel farther."),
        long_only=True,
    ),
    Check(
        "social",
        lambda s: s.avg_social_links > 0,
        ("Social Surface Present",
         "Social paths average ~{avg_social_links} per page. The broader footprint connects back to the site’s center of gravity."),
        ("Quiet Social Surface",
         "Social paths don’t present themselves here. The broader footprint feels thinner than the site’s center of gravity."),
        long_only=True,
    ),
    Check(
        "external_density",
        lambda s: s.avg_external_links <= 8,
        ("Measured Outbound References",
         "Outbound references average ~{avg_external_links} per page. The narrative mostly stays in the room while still pointing outward."),
        ("High External Link Density",
         "Outbound references average ~{avg_external_links} per page. The narrative steps outside the room more than it stays in it."),
        long_only=True,
    ),
]

SEEDS: list[tuple[str, str]] = [
    ("Texture Spread",
     "Depth varies (σ≈{word_count_std_dev}). A caption in one room becomes a chapter in the next."),
    ("Trail Density",
     "Trails settle around ~{avg_internal_links} links per page. Hop distance sets how quickly adjacent ideas come into view."),
    ("Caption Footing",
     "Alt coverage hovers near ~{avg_alt_pct}%. Where captions thin, lifted visuals feel more like placeholders than references."),
    ("Typing Footprint",
     "Typed context reaches {schema_pct}% of pages. Where typing fades, names and roles blur at the edges."),
    ("Preview Cadence",
     "Summaries cover {meta_pct}% of entries. Intros show up often enough to set the scene, but not always."),
    ("Heading Cadence",
     "{single_h1_page_count}/{total_pages} pages open with exactly one lead heading. The rhythm of entrances sets how quickly a topic settles."),
]


def targets_for(mode: str, score: int) -> tuple[int, int]:
    """(working, needs attention) list sizes for a report."""
    if normalize_mode(mode) == "short":
        return 5, 10
    if score < 60:
        return 5, 25
    if score < 80:
        return 7, 20
    return 10, 15


def generate_candidates(stats: AggregateStats, host: str, mode: ReportMode) -> tuple[list[Finding], list[Finding]]:
    values = stats.fields()
    values["host"] = host
    working: list[Finding] = []
    needs: list[Finding] = []
    for check in CHECKS:
        if check.long_only and mode != "long":
            continue
        if check.passes(stats):
            title, text = check.working
            working.append(Finding(title, text.format(**values)))
        else:
            title, text = check.needs
            needs.append(Finding(title, text.format(**values)))
    return working, needs


def unique_by_title(findings: list[Finding]) -> list[Finding]:
    seen: set[str] = set()
    out: list[Finding] = []
    for finding in findings:
        if not finding.key or finding.key in seen:
            continue
        seen.add(finding.key)
        out.append(finding)
    return out


def seed_findings(stats: AggregateStats) -> Iterator[Finding]:
    """Endless, position-keyed stream of neutral filler findings."""
    values = stats.fields()
    index = 0
    while True:
        title, text = SEEDS[index % len(SEEDS)]
        cycle = index // len(SEEDS)
        if cycle:
            title = f"{title} • v{cycle + 1}"
        yield Finding(title, text.format(**values))
        index += 1


def fit_to_target(findings: list[Finding], target: int, stats: AggregateStats) -> list[Finding]:
    fitted = findings[:target]
    if len(fitted) < target:
        taken = {finding.key for finding in fitted}
        for seed in seed_findings(stats):
            if len(fitted) >= target:
                break
            if seed.key in taken:
                continue
            taken.add(seed.key)
            fitted.append(seed)
    return fitted


def _polished(findings: list[Finding], mode: ReportMode, host: str) -> list[Finding]:
    return [
        Finding(finding.title, polish(finding.description, mode, host, salt))
        for salt, finding in enumerate(findings)
    ]


def crawl_failed_finding(host: str, mode: ReportMode) -> Finding:
    return Finding(CRAWL_FAILED_TITLE, polish(CRAWL_FAILED_TEXT.format(host=host), mode, host))


def synthesize(
    pages: list[PageSignal],
    host: str,
    mode: str,
    overrides: OverrideTable | None = None,
) -> Findings:
    report_mode = normalize_mode(mode)
    if not pages:
        return Findings(working=[], needs_attention=[crawl_failed_finding(host, report_mode)])

    stats = compute_stats(pages)
    score = compute_quality(pages, host, overrides).score
    working_target, needs_target = targets_for(report_mode, score)

    working, needs = generate_candidates(stats, host, report_mode)
    working = fit_to_target(unique_by_title(working), working_target, stats)
    needs = fit_to_target(unique_by_title(needs), needs_target, stats)

    return Findings(
        working=_polished(working, report_mode, host),
        needs_attention=_polished(needs, report_mode, host),
    )
