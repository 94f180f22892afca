from __future__ import annotations

from typing import Literal, Optional
from xml.sax.saxutils import escape

from fastapi import FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, field_validator

from sniperank.config import configure_logging, settings
from sniperank.engine.analyzer import analyze_website, highlights, score_band
from sniperank.engine.insights import ENGINE_LOGOS
from sniperank.engine.urls import validate_url

configure_logging()


class AnalyzeRequest(BaseModel):
    url: str
    mode: Literal["short", "long", "analyze", "full", "full-report"] = "short"

    @field_validator("url")
    @classmethod
    def normalize_url(cls, value: str) -> str:
        return validate_url(value)


def _validate_api_token(x_api_token: Optional[str]) -> None:
    if settings.api_token and x_api_token != settings.api_token:
        raise HTTPException(status_code=401, detail="invalid api token")


def _checked_url(url: Optional[str]) -> str:
    if not url:
        raise HTTPException(status_code=400, detail="Missing url parameter")
    try:
        return validate_url(url)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


app = FastAPI(title="SnipeRank API", version="2.3.2")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"ok": True}


def _li(title: Optional[str], description: str) -> str:
    body = escape(description).replace("\n\n", "<br><br>")
    if title is None:
        return f"<li>{body}</li>"
    return f"<li><strong>{escape(title)}:</strong> {body}</li>"


@app.get("/report.html", response_class=HTMLResponse)
async def report_html(
    request: Request,
    url: Optional[str] = None,
    mode: Optional[str] = None,
    x_api_token: Optional[str] = Header(default=None, alias="X-API-Token"),
) -> HTMLResponse:
    _validate_api_token(x_api_token)
    target = _checked_url(url)
    if mode is None:
        mode = "long" if "full-report" in request.headers.get("referer", "") else "short"
    if mode not in {"short", "long", "analyze", "full", "full-report"}:
        raise HTTPException(status_code=400, detail="Invalid mode")

    report = await analyze_website(target, mode, settings=settings)
    html = (
        '<div class="section-title">✅ What\'s Working</div>'
        f"<ul>{''.join(_li(x.title, x.description) for x in report.working)}</ul>"
        '<div class="section-title">🚨 Needs Attention</div>'
        f"<ul>{''.join(_li(x.title, x.description) for x in report.needs_attention)}</ul>"
        '<div class="section-title">🤖 AI Engine Insights</div>'
        f"<ul>{''.join(_li(None, x.description) for x in report.insights)}</ul>"
    )
    return HTMLResponse(html)


@app.get("/api/score")
async def api_score(
    url: Optional[str] = Query(default=None),
    x_api_token: Optional[str] = Header(default=None, alias="X-API-Token"),
) -> dict:
    _validate_api_token(x_api_token)
    target = _checked_url(url)
    report = await analyze_website(target, "short", settings=settings)
    total = report.pillars.total
    return {
        "url": target,
        "host": report.host,
        "score": total,
        "pillars": report.pillars.as_dict(),
        "highlights": highlights(report),
        "band": score_band(total),
        "override": report.overridden,
        "insights": [
            {"engine": item.title, "text": item.description, "logo": ENGINE_LOGOS.get(item.title, "")}
            for item in report.insights
        ],
    }


@app.post("/analyze")
async def analyze_endpoint(
    req: AnalyzeRequest,
    x_api_token: Optional[str] = Header(default=None, alias="X-API-Token"),
) -> dict:
    _validate_api_token(x_api_token)
    report = await analyze_website(req.url, req.mode, settings=settings)
    return report.to_dict()
