from __future__ import annotations

import pytest

from sniperank.engine.findings import (
    CHECKS,
    CRAWL_FAILED_TITLE,
    generate_candidates,
    synthesize,
    targets_for,
)
from sniperank.engine.polish import split_sentences
from sniperank.engine.scoring import build_override_table
from sniperank.engine.stats import compute_stats

LONG_ONLY_TITLES = {title for check in CHECKS if check.long_only for title in (check.working[0], check.needs[0])}


@pytest.mark.parametrize(
    "mode, score, expected",
    [
        ("short", 20, (5, 10)),
        ("short", 95, (5, 10)),
        ("long", 59, (5, 25)),
        ("long", 60, (7, 20)),
        ("long", 79, (7, 20)),
        ("long", 80, (10, 15)),
        ("full-report", 88, (10, 15)),
    ],
)
def test_targets_for(mode, score, expected):
    assert targets_for(mode, score) == expected


def test_short_report_has_fixed_sizes(page_factory, poor_page_factory):
    pages = [page_factory(), poor_page_factory("https://example.com/about")]
    findings = synthesize(pages, "example.com", "short", overrides={})

    assert len(findings.working) == 5
    assert len(findings.needs_attention) == 10
    for finding in findings.working + findings.needs_attention:
        assert len(split_sentences(finding.description)) == 3
        assert "\n" not in finding.description


def test_long_report_follows_score_band(poor_page_factory):
    findings = synthesize([poor_page_factory()], "example.com", "long", overrides={})

    # a bare http page scores 40, the low band
    assert len(findings.working) == 5
    assert len(findings.needs_attention) == 25
    for finding in findings.working + findings.needs_attention:
        paragraphs = finding.description.split("\n\n")
        assert 1 <= len(paragraphs) <= 3
        assert all(len(split_sentences(p)) >= 3 for p in paragraphs)


def test_strong_site_lands_in_high_band(page_factory):
    findings = synthesize([page_factory()], "example.com", "long", overrides={})

    assert len(findings.working) == 10
    assert len(findings.needs_attention) == 15


def test_titles_are_unique_within_each_list(page_factory, poor_page_factory):
    for mode in ("short", "long"):
        findings = synthesize([poor_page_factory()], "example.com", mode, overrides={})
        for items in (findings.working, findings.needs_attention):
            keys = [finding.title.strip().lower() for finding in items]
            assert len(keys) == len(set(keys))


def test_each_check_lands_in_exactly_one_list(page_factory, poor_page_factory):
    stats = compute_stats([page_factory(), poor_page_factory("https://example.com/x")])

    working, needs = generate_candidates(stats, "example.com", "short")
    assert len(working) + len(needs) == len([c for c in CHECKS if not c.long_only])

    working, needs = generate_candidates(stats, "example.com", "long")
    assert len(working) + len(needs) == len(CHECKS)


def test_long_only_checks_stay_out_of_short_reports(page_factory, poor_page_factory):
    for factory in (page_factory, poor_page_factory):
        findings = synthesize([factory()], "example.com", "short", overrides={})
        titles = {finding.title for finding in findings.working + findings.needs_attention}
        assert not titles & LONG_ONLY_TITLES


def test_padding_cycles_seed_titles(page_factory):
    findings = synthesize([page_factory()], "example.com", "short", overrides={})

    # every check passes, so the attention list is made of seeds only
    titles = [finding.title for finding in findings.needs_attention]
    assert titles[0] == "Texture Spread"
    assert titles[6] == "Texture Spread • v2"


def test_empty_crawl_yields_single_failure():
    findings = synthesize([], "example.com", "short")

    assert findings.working == []
    assert len(findings.needs_attention) == 1
    assert findings.needs_attention[0].title == CRAWL_FAILED_TITLE
    assert "example.com" in findings.needs_attention[0].description


def test_synthesis_is_deterministic(page_factory, poor_page_factory):
    pages = [page_factory(), poor_page_factory("https://example.com/b")]

    assert synthesize(pages, "example.com", "long", {}) == synthesize(pages, "example.com", "long", {})


def test_override_host_uses_high_band(poor_page_factory):
    overrides = build_override_table(["yoramezra.com"])
    findings = synthesize([poor_page_factory("http://yoramezra.com/")], "yoramezra.com", "long", overrides)

    assert len(findings.working) == 10
    assert len(findings.needs_attention) == 15
