from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from rich import print

from sniperank.config import configure_logging, settings
from sniperank.engine.analyzer import analyze_website, score_band
from sniperank.engine.models import Report
from sniperank.engine.report import build_pdf_report
from sniperank.engine.urls import validate_url


def _print_findings(heading: str, findings) -> None:
    print(f"\n[bold]{heading}[/bold]")
    for finding in findings:
        print(f"- [cyan]{finding.title}[/cyan]: {finding.description}")


async def analyze_one(url: str, mode: str, out_path: str | None = None, pdf_path: str | None = None) -> Report:
    report = await analyze_website(url, mode, settings=settings)

    if out_path:
        Path(out_path).parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
    if pdf_path:
        build_pdf_report(report, pdf_path)

    status = "[red]degraded[/red]" if report.degraded else "[green]ok[/green]"
    print(f"SnipeRank {status}: {report.host} ({report.pages_crawled} pages, mode {report.mode})")
    print(f"Score: {report.score}")
    pillars = report.pillars
    print(
        f"Pillars: access {pillars.access} | trust {pillars.trust} | "
        f"clarity {pillars.clarity} | alignment {pillars.alignment}"
    )
    print(score_band(pillars.total))
    _print_findings("What's Working", report.working)
    _print_findings("Needs Attention", report.needs_attention)
    _print_findings("AI Engine Insights", report.insights)
    if out_path:
        print(f"\nSaved: {out_path}")
    if pdf_path:
        print(f"Saved: {pdf_path}")
    return report


def cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sniperank", description="Crawl a site and print its SnipeRank report.")
    parser.add_argument("url")
    parser.add_argument("--mode", default="short", choices=["short", "long", "analyze", "full", "full-report"])
    parser.add_argument("--out", help="write the report as JSON")
    parser.add_argument("--pdf", help="write the report as PDF")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    try:
        url = validate_url(args.url)
    except ValueError as exc:
        parser.error(str(exc))
    report = asyncio.run(analyze_one(url, args.mode, args.out, args.pdf))
    return 1 if report.degraded else 0


if __name__ == "__main__":
    raise SystemExit(cli())
