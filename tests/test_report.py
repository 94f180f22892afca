from __future__ import annotations

from sniperank.config import Settings
from sniperank.engine.analyzer import assemble_report
from sniperank.engine.report import build_pdf_report


def _sample_report(page_factory, poor_page_factory):
    pages = [
        page_factory("https://residencial-parque.com/", title="Residencial Parque – Lotes"),
        poor_page_factory("https://residencial-parque.com/contato"),
    ]
    return assemble_report("https://residencial-parque.com/", pages, "long", Settings(override_hosts=[]))


def test_pdf_report_is_written(tmp_path, page_factory, poor_page_factory):
    report = _sample_report(page_factory, poor_page_factory)
    output = build_pdf_report(report, str(tmp_path / "out" / "report.pdf"))

    data = (tmp_path / "out" / "report.pdf").read_bytes()
    assert output.endswith("report.pdf")
    assert data.startswith(b"%PDF")
    assert len(data) > 1000


def test_report_dict_uses_wire_keys(page_factory, poor_page_factory):
    payload = _sample_report(page_factory, poor_page_factory).to_dict()

    assert set(payload) >= {"workingFindings", "needsAttentionFindings", "insights", "pillars", "score"}
    assert payload["pagesCrawled"] == 2
    assert payload["override"] is False
    assert set(payload["pillars"]) == {"access", "trust", "clarity", "alignment"}
    assert set(payload["workingFindings"][0]) == {"title", "description"}
