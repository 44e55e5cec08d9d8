# app.py
from __future__ import annotations
from functools import lru_cache
from typing import Optional
import hashlib
import logging

from fastapi import FastAPI, UploadFile, File, Form, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from demo import demo_report
from evaluator import make_report, render_markdown
from extractor_factory import UnknownStrategyError, load_extractor
from info_extractor import GeneralInfoExtractor
from ingest import ExtractedText, ingest_bytes_to_text, is_usable_text
from schemas import AnalysisReport, AnalyzeTextIn, ErrorOut
from settings import settings
from telemetry import go_quiet

log = logging.getLogger("lexbaux.app")

NO_FILE_MESSAGE = "Aucun fichier reçu"
NO_TEXT_MESSAGE = "Le PDF ne contient pas de texte exploitable. S’agit-il d’un scan sans OCR ?"
TOO_LARGE_MESSAGE = "Fichier trop volumineux"
SERVER_ERROR_MESSAGE = "Erreur serveur"

app = FastAPI(title="LexBaux API", version=settings.VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --------- Error envelope: every failure is {"error": "..."} ---------
@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content=ErrorOut(error=str(exc.detail)).model_dump())


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    return JSONResponse(status_code=400, content=ErrorOut(error=first.get("msg") or "Requête invalide").model_dump())


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception):
    log.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content=ErrorOut(error=str(exc) or SERVER_ERROR_MESSAGE).model_dump())


@app.on_event("startup")
def _startup():
    go_quiet(settings.LOG_LEVEL)


# --------- Helpers ---------
async def _read_upload(file: Optional[UploadFile]) -> bytes:
    if file is None or not file.filename:
        raise HTTPException(400, NO_FILE_MESSAGE)
    raw_bytes = await file.read()
    if not raw_bytes:
        raise HTTPException(400, NO_FILE_MESSAGE)
    if len(raw_bytes) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(413, TOO_LARGE_MESSAGE)
    return raw_bytes


@lru_cache(maxsize=None)
def _extractor_for(strategy: Optional[str]) -> GeneralInfoExtractor:
    # config is read once per strategy name, not on every request
    return load_extractor(strategy)


def _resolve_extractor(strategy: Optional[str]) -> GeneralInfoExtractor:
    try:
        return _extractor_for(strategy)
    except UnknownStrategyError as e:
        raise HTTPException(400, str(e))


def _extract_or_fail(raw_bytes: bytes, filename: Optional[str]) -> ExtractedText:
    # PdfExtractionError propagates: a PDF that cannot be parsed is a 500
    extracted = ingest_bytes_to_text(raw_bytes, filename=filename)
    if not is_usable_text(extracted.text):
        raise HTTPException(400, NO_TEXT_MESSAGE)
    return extracted


async def _analyze_upload(file: Optional[UploadFile], strategy: Optional[str]) -> AnalysisReport:
    raw_bytes = await _read_upload(file)
    sha1_hash = hashlib.sha1(raw_bytes).hexdigest()

    extractor = _resolve_extractor(strategy)
    extracted = _extract_or_fail(raw_bytes, file.filename)
    report = make_report(extracted.text, filename=file.filename, pages=extracted.pages, extractor=extractor)

    log.info(
        "Analyze: filename=%s, sha1=%s, pages=%d, findings=%d, risk=%s",
        file.filename, sha1_hash, extracted.pages, len(report.findings), report.summary.risk_level,
    )
    return report


# --------- Endpoints ---------
@app.get("/health")
def health():
    return {"status": "ok", "version": settings.VERSION}


@app.post("/api/analyze")
async def analyze(
    file: Optional[UploadFile] = File(None),
    strategy: Optional[str] = Form(None),  # general-info strategy override
):
    try:
        report = await _analyze_upload(file, strategy)
        return report.to_json_dict()
    except HTTPException:
        raise
    except Exception as e:
        log.exception("Analyze failed")
        raise HTTPException(500, str(e) or SERVER_ERROR_MESSAGE)


@app.post("/api/analyze.md", response_class=PlainTextResponse)
async def analyze_markdown(
    file: Optional[UploadFile] = File(None),
    strategy: Optional[str] = Form(None),
):
    """
    Same as /api/analyze but returns the French Markdown report as text/markdown.
    """
    try:
        report = await _analyze_upload(file, strategy)
        return PlainTextResponse(content=render_markdown(report), media_type="text/markdown")
    except HTTPException:
        raise
    except Exception as e:
        log.exception("Analyze (markdown) failed")
        raise HTTPException(500, str(e) or SERVER_ERROR_MESSAGE)


@app.post("/api/analyze-text")
def analyze_text_route(payload: AnalyzeTextIn):
    """Analyse already-extracted text (same gate and output as a PDF upload)."""
    if not is_usable_text(payload.text):
        raise HTTPException(400, NO_TEXT_MESSAGE)
    extractor = _resolve_extractor(payload.strategy)
    try:
        report = make_report(payload.text, filename=payload.filename, extractor=extractor)
        return report.to_json_dict()
    except HTTPException:
        raise
    except Exception as e:
        log.exception("Analyze (text) failed")
        raise HTTPException(500, str(e) or SERVER_ERROR_MESSAGE)


@app.get("/api/demo-report")
def get_demo_report(file: Optional[str] = Query(None)):
    return demo_report(file).to_json_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level="info")
