from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Literal

ReportMode = Literal["short", "long"]


@dataclass(frozen=True)
class ContactSignals:
    phone: bool = False
    email: bool = False
    address: bool = False

    @property
    def count(self) -> int:
        return int(self.phone) + int(self.email) + int(self.address)


@dataclass(frozen=True)
class PageSignal:
    url: str
    title: str = ""
    meta_description: str = ""
    h1_count: int = 0
    h2_count: int = 0
    h3_count: int = 0
    word_count: int = 0
    image_count: int = 0
    image_alt_count: int = 0
    internal_link_count: int = 0
    external_link_count: int = 0
    has_schema: bool = False
    has_nav: bool = False
    has_footer: bool = False
    has_breadcrumbs: bool = False
    form_count: int = 0
    button_count: int = 0
    social_link_count: int = 0
    contact_signals: ContactSignals = field(default_factory=ContactSignals)
    is_secure: bool = False
    depth: int = 0


@dataclass(frozen=True)
class Finding:
    title: str
    description: str

    @property
    def key(self) -> str:
        return self.title.strip().lower()


@dataclass(frozen=True)
class Findings:
    working: list[Finding]
    needs_attention: list[Finding]


@dataclass(frozen=True)
class Pillars:
    access: int
    trust: int
    clarity: int
    alignment: int

    @property
    def total(self) -> int:
        return self.access + self.trust + self.clarity + self.alignment

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class QualityScore:
    score: int
    pillars: Pillars
    overridden: bool = False


@dataclass
class Report:
    url: str
    host: str
    mode: ReportMode
    working: list[Finding]
    needs_attention: list[Finding]
    insights: list[Finding]
    pillars: Pillars
    score: int
    pages_crawled: int = 0
    overridden: bool = False
    degraded: bool = False

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "host": self.host,
            "mode": self.mode,
            "score": self.score,
            "pillars": self.pillars.as_dict(),
            "workingFindings": [asdict(item) for item in self.working],
            "needsAttentionFindings": [asdict(item) for item in self.needs_attention],
            "insights": [asdict(item) for item in self.insights],
            "pagesCrawled": self.pages_crawled,
            "override": self.overridden,
            "degraded": self.degraded,
        }
