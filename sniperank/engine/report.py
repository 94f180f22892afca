from __future__ import annotations

from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from sniperank.engine.analyzer import score_band
from sniperank.engine.models import Finding, Report


def _pdf_safe(text: str) -> str:
    return text.encode("latin-1", "ignore").decode("latin-1")


def _paragraphs(text: str) -> list[str]:
    return [part.strip() for part in text.split("\n\n") if part.strip()]


def _section(elements: list, styles, heading: str, findings: list[Finding]) -> None:
    body_style = styles["BodyText"]
    elements.append(Paragraph(escape(heading), styles["Heading2"]))
    for finding in findings:
        elements.append(Paragraph(f"<b>{escape(_pdf_safe(finding.title))}</b>", body_style))
        for para in _paragraphs(finding.description):
            elements.append(Paragraph(escape(_pdf_safe(para)), body_style))
        elements.append(Spacer(1, 6))
    elements.append(Spacer(1, 12))


def build_pdf_report(report: Report, output_path: str) -> str:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    styles = getSampleStyleSheet()
    title_style = styles["Title"]
    body_style = styles["BodyText"]
    body_style.leading = 14

    elements = []
    elements.append(Paragraph("SnipeRank", title_style))
    elements.append(Spacer(1, 10))

    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M")
    pillars = report.pillars
    elements.append(Paragraph(f"URL: {escape(report.url)}", body_style))
    elements.append(Paragraph(f"Mode: {report.mode}", body_style))
    elements.append(Paragraph(f"Pages crawled: {report.pages_crawled}", body_style))
    elements.append(Paragraph(f"Score: {report.score}", body_style))
    elements.append(
        Paragraph(
            f"Access {pillars.access} | Trust {pillars.trust} | "
            f"Clarity {pillars.clarity} | Alignment {pillars.alignment}",
            body_style,
        )
    )
    elements.append(Paragraph(escape(_pdf_safe(score_band(pillars.total))), body_style))
    elements.append(Paragraph(f"Generated: {timestamp}", body_style))
    elements.append(Spacer(1, 12))

    _section(elements, styles, "What's Working", report.working)
    _section(elements, styles, "Needs Attention", report.needs_attention)
    _section(elements, styles, "AI Engine Insights", report.insights)

    doc = SimpleDocTemplate(str(output), pagesize=A4, rightMargin=36, leftMargin=36, topMargin=36, bottomMargin=36)
    doc.build(elements)
    return str(output)
