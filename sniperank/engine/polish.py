"""Sentence-level shaping of finding descriptions.

Short reports get exactly three sentences per description. Long reports get
six to nine sentences laid out as paragraphs of at least three sentences.
"""

from __future__ import annotations

import math
import re

from sniperank.engine.models import ReportMode

SHORT_SENTENCES = 3
LONG_MIN_SENTENCES = 6
LONG_MAX_SENTENCES = 9
PARAGRAPH_MIN_SENTENCES = 3

SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9])")

NEUTRAL_SUBSTITUTIONS = [
    (re.compile(r"\b(add|fix|implement|optimi[sz]e|update|improve|create|ensure|increase|decrease)\b", re.I), "shape"),
    (re.compile(r"\b(should|must|need to|have to|recommend(?:ed)?)\b", re.I), "tends to"),
    (re.compile(r"\b(best practice|checklist|steps|how to)\b", re.I), "pattern"),
]

FILLER_POOL = [
    "Treat this as directional tone rather than a verdict for {domain}.",
    "Local template choices on {domain} likely shape what you’re seeing.",
    "Signals are suggestive, not prescriptive; detail sits in the furniture.",
    "Nuance depends on context outside the crawl scope for {domain}.",
    "These sketches describe tendencies; specifics hinge on conventions.",
    "Consider this a lens on patterns, not a recipe.",
]

MODE_ALIASES = {
    "short": "short",
    "analyze": "short",
    "long": "long",
    "full": "long",
    "full-report": "long",
}


def normalize_mode(mode: str) -> ReportMode:
    try:
        return MODE_ALIASES[str(mode or "").strip().lower()]  # type: ignore[return-value]
    except KeyError:
        raise ValueError(f"unknown report mode: {mode}") from None


def split_sentences(text: str) -> list[str]:
    cleaned = " ".join(str(text or "").split())
    if not cleaned:
        return []
    return [part for part in SENTENCE_BOUNDARY.split(cleaned) if part]


def _keep_case(replacement: str):
    def repl(match: re.Match) -> str:
        if match.group(0)[:1].isupper():
            return replacement[:1].upper() + replacement[1:]
        return replacement

    return repl


def neutralize(sentence: str) -> str:
    for pattern, replacement in NEUTRAL_SUBSTITUTIONS:
        sentence = pattern.sub(_keep_case(replacement), sentence)
    return sentence


def filler(domain: str, salt: int = 0) -> str:
    return FILLER_POOL[salt % len(FILLER_POOL)].format(domain=domain)


def _terminate(sentence: str) -> str:
    return sentence if sentence[-1:] in ".!?" else f"{sentence}."


def polish(description: str, mode: ReportMode, domain: str, salt: int = 0) -> str:
    sentences = [_terminate(neutralize(s)) for s in split_sentences(description)]

    if mode == "short":
        while len(sentences) < SHORT_SENTENCES:
            sentences.append(filler(domain, salt + len(sentences)))
        return " ".join(sentences[:SHORT_SENTENCES])

    while len(sentences) < LONG_MIN_SENTENCES:
        sentences.append(filler(domain, salt + len(sentences)))
    sentences = sentences[:LONG_MAX_SENTENCES]
    chunk = max(PARAGRAPH_MIN_SENTENCES, math.ceil(len(sentences) / 2))
    paragraphs = [" ".join(sentences[i : i + chunk]) for i in range(0, len(sentences), chunk)]
    return "\n\n".join(paragraphs[:3])
