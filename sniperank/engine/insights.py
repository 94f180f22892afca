"""Per-engine commentary rendered from the same aggregate stats as the findings.

Every engine is one row of ``ENGINE_VOICES``: an opening sentence with clause
slots plus closing sentences, each picked by a threshold over the stats.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from sniperank.engine.models import Finding, PageSignal
from sniperank.engine.polish import normalize_mode, polish
from sniperank.engine.stats import AggregateStats, compute_stats

ENGINES = ["ChatGPT", "Claude", "Gemini", "Copilot", "Perplexity"]

ENGINE_LOGOS = {
    "ChatGPT": "/img/chatgpt-logo.png",
    "Claude": "/img/claude-logo.png",
    "Gemini": "/img/gemini-logo.png",
    "Copilot": "/img/copilot-logo.png",
    "Perplexity": "/img/perplexity-logo.png",
}

UNABLE_TO_ANALYZE = {
    "ChatGPT": "Unable to analyze {host} for ChatGPT, crawling failed.",
    "Claude": "{host} analysis incomplete for Claude, access restricted.",
    "Gemini": "Gemini cannot process {host} due to technical barriers.",
    "Copilot": "Copilot analysis blocked for {host}.",
    "Perplexity": "Perplexity unable to analyze {host} effectively.",
}


@dataclass(frozen=True)
class Clause:
    passes: Callable[[AggregateStats], bool]
    when_true: str
    when_false: str

    def render(self, stats: AggregateStats, values: dict) -> str:
        text = self.when_true if self.passes(stats) else self.when_false
        return text.format(**values)


@dataclass(frozen=True)
class EngineVoice:
    engine: str
    opening: str
    clauses: tuple[Clause, ...]
    closing: tuple[Clause, ...] = ()

    def render(self, stats: AggregateStats, host: str) -> str:
        values = stats.fields()
        values["host"] = host
        slots = [clause.render(stats, values) for clause in self.clauses]
        sentences = [self.opening.format(*slots, **values)]
        sentences.extend(clause.render(stats, values) for clause in self.closing)
        return " ".join(sentences)


def _all_https(s: AggregateStats) -> bool:
    return s.https_page_count == s.total_pages


def _deep(s: AggregateStats) -> bool:
    return s.avg_word_count >= 500


def _schema_share(fraction: float) -> Callable[[AggregateStats], bool]:
    return lambda s: s.schema_page_count >= s.total_pages * fraction


def _meta_share(fraction: float) -> Callable[[AggregateStats], bool]:
    return lambda s: s.meta_page_count >= s.total_pages * fraction


def _links_at_least(count: int) -> Callable[[AggregateStats], bool]:
    return lambda s: s.avg_internal_links >= count


ENGINE_VOICES: tuple[EngineVoice, ...] = (
    EngineVoice(
        "ChatGPT",
        "ChatGPT review across {total_pages} pages on {host} notes {0}, with {1}.",
        (
            Clause(lambda s: s.single_h1_page_count == s.total_pages,
                   "steady single-spine headings",
                   "{single_h1_page_count}/{total_pages} pages with single-spine headings"),
            Clause(_deep, "ample surround for context", "lean pockets that compress nuance"),
        ),
        (
            Clause(_schema_share(0.8), "Typed hints travel well.", "Typed hints are thin in spots."),
            Clause(_meta_share(0.8), "Previews show up reliably.", "Previews drift in places."),
        ),
    ),
    EngineVoice(
        "Claude",
        "Claude view of {host} observes {0} and {1}, shaping how quotes surface.",
        (
            Clause(_schema_share(0.7), "typed context present at scale", "typed context light in places"),
            Clause(_all_https, "uniform transport hygiene", "mixed transport hygiene"),
        ),
        (
            Clause(_links_at_least(6), "Trails knit sections together.", "Trails break sooner than expected."),
        ),
    ),
    EngineVoice(
        "Gemini",
        "Gemini perspective on {host} sees {0}, and {1} when stitching ideas.",
        (
            Clause(_schema_share(0.8), "broad schema coverage", "schema gaps"),
            Clause(_links_at_least(5), "cohesive trails", "fragile trails"),
        ),
        (
            Clause(_deep, "Coverage reads like chapters.", "Coverage reads closer to captions."),
        ),
    ),
    EngineVoice(
        "Copilot",
        "Copilot pass finds {0} across {total_pages} pages, with {1}.",
        (
            Clause(lambda s: s.single_h1_page_count >= s.total_pages * 0.8,
                   "clear landing spots", "competing anchors"),
            Clause(_deep, "coverage that carries", "coverage that thins under pressure"),
        ),
        (
            Clause(_meta_share(0.75), "Front matter frames the task.", "Front matter leaves the task to inference."),
        ),
    ),
    EngineVoice(
        "Perplexity",
        "Perplexity read notes {0} and {1} shaping citation appetite.",
        (
            Clause(_meta_share(0.8), "previews that frame intent", "previews that drift"),
            Clause(_all_https, "stable trust cues", "variable trust cues"),
        ),
        (
            Clause(_links_at_least(4), "Trails support quick corroboration.", "Sparse trails slow corroboration."),
        ),
    ),
)


def format_insights(pages: list[PageSignal], host: str, mode: str) -> list[Finding]:
    report_mode = normalize_mode(mode)
    if not pages:
        return [
            Finding(engine, polish(UNABLE_TO_ANALYZE[engine].format(host=host), report_mode, host, salt))
            for salt, engine in enumerate(ENGINES)
        ]
    stats = compute_stats(pages)
    return [
        Finding(voice.engine, polish(voice.render(stats, host), report_mode, host, salt))
        for salt, voice in enumerate(ENGINE_VOICES)
    ]
