"""FastAPI routes for running analyses over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from lopper import __version__
from lopper.config import parse_weights
from lopper.formatter import report_to_dict
from lopper.models import AnalysisConfig
from lopper.pipeline import AUTO_LANGUAGE, run_analysis
from lopper.scanner import detect_languages
from lopper.web.state import state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Request models ---

class AnalyseRequest(BaseModel):
    path: str
    language: str = AUTO_LANGUAGE
    dependency: str | None = None
    top: int = Field(default=0, ge=0)
    threshold: int | None = Field(default=None, ge=0, le=100)
    weights: str | None = None
    workers: int = Field(default=1, ge=1)


def _session_payload(session) -> dict:
    return {
        "id": session.id,
        "createdAt": session.created_at,
        "report": report_to_dict(session.report),
    }


def _analyse(req: AnalyseRequest):
    config = AnalysisConfig(
        repo_path=Path(req.path).expanduser(),
        language=req.language,
        dependency=req.dependency,
        top_n=req.top,
        workers=req.workers,
        min_usage_percent=req.threshold,
        weights=parse_weights(req.weights) if req.weights else None,
    )
    return run_analysis(config)


# --- Endpoints ---

@router.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@router.post("/analyse")
async def analyse(req: AnalyseRequest):
    if not req.dependency and req.top <= 0:
        raise HTTPException(400, "Specify a dependency or a positive top value")
    try:
        report = await asyncio.to_thread(_analyse, req)
    except ValueError as e:
        raise HTTPException(400, str(e))
    session = state.add_analysis(report)
    logger.info("Stored analysis %s for %s", session.id, report.repo_path)
    return _session_payload(session)


@router.get("/analyse/{analysis_id}")
async def get_analysis(analysis_id: str):
    session = state.get_analysis(analysis_id)
    if session is None:
        raise HTTPException(404, f"Unknown analysis: {analysis_id}")
    return _session_payload(session)


@router.get("/detect")
async def detect(path: str = Query(...)):
    repo = Path(path).expanduser()
    if not repo.is_dir():
        raise HTTPException(400, f"Not a directory: {repo}")
    detections = await asyncio.to_thread(detect_languages, repo)
    return {
        "path": str(repo.resolve()),
        "languages": [
            {"language": d.language.value, "confidence": d.confidence}
            for d in detections
        ],
    }
