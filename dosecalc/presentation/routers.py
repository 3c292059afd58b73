# dosecalc/presentation/routers.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Header, Query

from dosecalc.presentation.schemas import (
    DosageRequest, DosageResponse,
    ProductInfo, ProductListResponse,
    LanguageRequest, LanguageResponse,
)
from dosecalc.container import (
    get_compute_use_case, get_language_preferences, get_translator,
)
from dosecalc.application.commands import ComputeDosageCommand
from dosecalc.application.use_cases import ComputeDosageUseCase
from dosecalc.services.language_preference import LanguagePreferenceService, UnsupportedLanguage
from dosecalc.services.translator import Translator

from redis.exceptions import RedisError


# ──────────────────────────────────────────────────────────────────────
# Logging
# ──────────────────────────────────────────────────────────────────────
logger = logging.getLogger(__name__)


def _resolve_session_id(body_sid: str | None, x_session_id: str | None) -> str | None:
    """Header X-Session-Id wins over a body session_id."""
    if body_sid and x_session_id and body_sid != x_session_id:
        logger.warning("session_id mismatch: header=%s body=%s (using header)", x_session_id, body_sid)
    sid = x_session_id or body_sid
    if sid and len(sid) > 256:
        logger.warning("session_id looks too long; check client payload")
    return sid


async def _stored_language(prefs: LanguagePreferenceService, sid: str | None) -> str | None:
    if not sid:
        return None
    try:
        return await prefs.get(sid)
    except RedisError as e:
        # preference is display-only; compute without it
        logger.warning("language preference lookup failed sid=%s err=%s", sid, e)
        return None


async def _display_language(
    explicit: str | None,
    sid: str | None,
    accept_language: str | None,
    prefs: LanguagePreferenceService,
    tr: Translator,
) -> str:
    if tr.supports(explicit):
        return explicit
    stored = await _stored_language(prefs, sid)
    return tr.resolve_language(stored, accept_language=accept_language)


router = APIRouter(prefix="/v1")

# ── PRODUCTS ─────────────────────────────────────────────────────
@router.get("/products", response_model=ProductListResponse)
async def list_products(
    lang: str | None = Query(None),
    uc: ComputeDosageUseCase = Depends(get_compute_use_case),
    prefs: LanguagePreferenceService = Depends(get_language_preferences),
    tr: Translator = Depends(get_translator),
    session_id_hdr: str | None = Header(None, alias="X-Session-Id"),
    accept_language: str | None = Header(None, alias="Accept-Language"),
):
    display = await _display_language(lang, session_id_hdr, accept_language, prefs, tr)
    return ProductListResponse(items=uc.list_products(display), lang=display)


@router.get("/products/{product_id}", response_model=ProductInfo)
async def get_product(
    product_id: str,
    lang: str | None = Query(None),
    uc: ComputeDosageUseCase = Depends(get_compute_use_case),
    prefs: LanguagePreferenceService = Depends(get_language_preferences),
    tr: Translator = Depends(get_translator),
    session_id_hdr: str | None = Header(None, alias="X-Session-Id"),
    accept_language: str | None = Header(None, alias="Accept-Language"),
):
    display = await _display_language(lang, session_id_hdr, accept_language, prefs, tr)
    info = uc.get_product(product_id, display)
    if info is None:
        raise HTTPException(status_code=404, detail=tr.t("unknownProduct", display))
    return info


# ── DOSAGE ───────────────────────────────────────────────────────
@router.post("/dosage", response_model=DosageResponse)
async def compute_dosage(
    req: DosageRequest,
    uc: ComputeDosageUseCase = Depends(get_compute_use_case),
    prefs: LanguagePreferenceService = Depends(get_language_preferences),
    tr: Translator = Depends(get_translator),
    session_id_hdr: str | None = Header(None, alias="X-Session-Id"),
    accept_language: str | None = Header(None, alias="Accept-Language"),
):
    """
    Taxonomy results (out of range, unknown product, invalid input) are
    returned with 200 and a `kind`; only unexpected failures become 500.
    """
    display = await _display_language(req.lang, session_id_hdr, accept_language, prefs, tr)
    try:
        cmd = ComputeDosageCommand(**req.model_dump())
        return uc.execute(cmd, lang=display)
    except Exception as e:
        logger.exception("dosage computation failed product=%s", req.product_id)
        raise HTTPException(status_code=500, detail=str(e))


# ── LANGUAGE PREFERENCE ──────────────────────────────────────────
@router.get("/language", response_model=LanguageResponse)
async def get_language(
    prefs: LanguagePreferenceService = Depends(get_language_preferences),
    tr: Translator = Depends(get_translator),
    session_id_hdr: str | None = Header(None, alias="X-Session-Id"),
    accept_language: str | None = Header(None, alias="Accept-Language"),
):
    stored: Optional[str] = None
    if session_id_hdr:
        try:
            stored = await prefs.get(session_id_hdr)
        except RedisError as e:
            logger.exception("language preference read failed")
            raise HTTPException(status_code=503, detail=f"Preference store unavailable: {e}")
    lang = tr.resolve_language(stored, accept_language=accept_language)
    return LanguageResponse(lang=lang, label=tr.label(lang), stored=stored is not None, available=tr.languages)


@router.put("/language", response_model=LanguageResponse)
async def set_language(
    req: LanguageRequest,
    prefs: LanguagePreferenceService = Depends(get_language_preferences),
    tr: Translator = Depends(get_translator),
    session_id_hdr: str | None = Header(None, alias="X-Session-Id"),
):
    sid = _resolve_session_id(req.session_id, session_id_hdr)
    if not sid:
        raise HTTPException(400, "Missing session id. Provide body 'session_id' or header 'X-Session-Id'.")
    try:
        lang = await prefs.set(sid, req.lang)
    except UnsupportedLanguage:
        raise HTTPException(400, f"Unsupported language '{req.lang}'. Available: {', '.join(tr.languages)}")
    except RedisError as e:
        logger.exception("language preference write failed")
        raise HTTPException(status_code=503, detail=f"Preference store unavailable: {e}")

    logger.info("[language] sid=%s lang=%s", sid, lang)
    return LanguageResponse(lang=lang, label=tr.label(lang), stored=True, available=tr.languages)
