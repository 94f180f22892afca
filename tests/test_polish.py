from __future__ import annotations

import pytest

from sniperank.engine.polish import FILLER_POOL, neutralize, normalize_mode, polish, split_sentences


def _paragraphs(text: str) -> list[list[str]]:
    return [split_sentences(part) for part in text.split("\n\n")]


def test_split_sentences_needs_capital_or_digit_after_punctuation():
    assert split_sentences("One. Two! three? Four") == ["One.", "Two! three?", "Four"]
    assert split_sentences("Visit example.com today. 42 pages follow.") == [
        "Visit example.com today.",
        "42 pages follow.",
    ]
    assert split_sentences("   ") == []


def test_neutralize_softens_directives_and_keeps_case():
    assert neutralize("You should add schema.") == "You tends to shape schema."
    assert neutralize("Fix the titles first.") == "Shape the titles first."
    assert neutralize("Follow the checklist.") == "Follow the pattern."
    assert neutralize("Pages hold together.") == "Pages hold together."


def test_short_mode_pads_to_three_sentences():
    text = polish("Only one sentence here.", "short", "example.com")
    sentences = split_sentences(text)

    assert len(sentences) == 3
    assert sentences[0] == "Only one sentence here."
    assert "\n" not in text


def test_short_mode_truncates_to_three_sentences():
    text = polish("A one. B two. C three. D four. E five.", "short", "example.com")
    assert split_sentences(text) == ["A one.", "B two.", "C three."]


def test_missing_terminal_punctuation_is_added():
    assert polish("No full stop", "short", "example.com").startswith("No full stop. ")


def test_long_mode_builds_paragraphs():
    text = polish("First point. Second point.", "long", "example.com")
    paragraphs = _paragraphs(text)

    assert len(paragraphs) == 2
    assert all(len(p) >= 3 for p in paragraphs)
    assert sum(len(p) for p in paragraphs) == 6


def test_long_mode_caps_sentence_count():
    text = polish(" ".join(f"Point {i}." for i in range(12)), "long", "example.com")
    paragraphs = _paragraphs(text)

    assert [len(p) for p in paragraphs] == [5, 4]
    assert paragraphs[-1][-1] == "Point 8."


def test_filler_is_deterministic_and_names_domain():
    first = polish("Hello there.", "short", "acme.io")
    second = polish("Hello there.", "short", "acme.io")

    assert first == second
    assert FILLER_POOL[1].format(domain="acme.io") in first


@pytest.mark.parametrize(
    "raw, expected",
    [("short", "short"), ("analyze", "short"), ("LONG", "long"), ("full", "long"), ("full-report", "long")],
)
def test_mode_aliases(raw, expected):
    assert normalize_mode(raw) == expected


def test_unknown_mode_is_rejected():
    with pytest.raises(ValueError, match="unknown report mode"):
        normalize_mode("medium")
