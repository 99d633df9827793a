import logging
from datetime import date

from fastapi import APIRouter, Body, Depends, HTTPException

from ..middleware.auth import current_user
from ..schemas import NarrativeMeta, NarrativeRequest, NarrativeResponse
from ..services.llm_client import LLMUnavailableError
from ..services.narrative_provider import NoEntriesError, get_provider
from ..services.record_store import STORE
from ..services.usage import USAGE, DailyLimitReachedError
from .common import STORE_ERRORS, store_http_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/narratives", tags=["narratives"])


@router.post("/generate", response_model=NarrativeResponse)
async def generate_narrative(
    req: NarrativeRequest = Body(
        ...,
        example={"type": "promotion", "tone": "results", "provider": "template"},
    ),
    user_id: str = Depends(current_user),
) -> NarrativeResponse:
    """
    Generate a first-person narrative from the caller's impact entries.

    - ``provider="template"`` runs the deterministic composer (no quota)
    - ``provider="llm"`` drafts with an external model, capped per user per day
    """
    try:
        if req.entry_ids is not None:
            entries = STORE.get_entries(user_id, req.entry_ids)
        else:
            entries = STORE.list_entries(user_id)
    except STORE_ERRORS as exc:
        raise store_http_error(exc, "ENTRY_NOT_FOUND") from exc

    provider = get_provider(req.provider)
    metered = provider.name == "llm"
    today = date.today()
    if metered:
        try:
            USAGE.reserve(user_id, today)
        except DailyLimitReachedError as exc:
            logger.info(f"DAILY_LIMIT_REACHED: used={exc.used} limit={exc.limit}")
            raise HTTPException(status_code=429, detail="DAILY_LIMIT_REACHED") from exc

    text = None
    try:
        text = await provider.generate(entries, req.type, req.tone)
    except NoEntriesError as exc:
        raise HTTPException(status_code=400, detail="NO_ENTRIES") from exc
    except LLMUnavailableError as exc:
        logger.error(f"LLM_UNAVAILABLE: {exc}")
        raise HTTPException(status_code=503, detail="PROVIDER_UNAVAILABLE") from exc
    finally:
        if metered and text is None:
            USAGE.release(user_id, today)

    remaining = None
    if metered:
        remaining = USAGE.remaining(user_id, today)

    return NarrativeResponse(
        narrative=text,
        meta=NarrativeMeta(
            type=req.type,
            tone=req.tone,
            provider=req.provider,
            entry_count=len(entries),
            remaining_today=remaining,
        ),
    )
