from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from src.narrative.insights import filter_entries

from ..middleware.auth import current_user
from ..schemas import EntryIn, EntryList, EntryOut
from ..services.record_store import STORE
from .common import STORE_ERRORS, store_http_error

router = APIRouter(prefix="/v1/entries", tags=["entries"])

_NOT_FOUND = "ENTRY_NOT_FOUND"


@router.post("", response_model=EntryOut, status_code=201)
def create_entry(
    req: EntryIn = Body(
        ...,
        example={
            "week_of": "2026-02-02",
            "what_you_did": "Led the OAuth 2.0 migration",
            "who_benefited": "Engineering team, End users",
            "problem_solved": "Reduced login failures by 40%",
            "evidence": "",
            "tags": ["efficiency"],
        },
    ),
    user_id: str = Depends(current_user),
) -> EntryOut:
    try:
        entry = STORE.create_entry(user_id, req.model_dump())
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc
    return EntryOut.from_record(entry)


@router.get("", response_model=EntryList)
def list_entries(
    q: Optional[str] = None,
    tag: Optional[List[str]] = Query(None),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    user_id: str = Depends(current_user),
) -> EntryList:
    """List the caller's entries, newest week first, with optional filters."""
    try:
        entries = STORE.list_entries(user_id)
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc
    entries = filter_entries(entries, query=q, tags=tag, date_from=date_from, date_to=date_to)
    return EntryList(entries=[EntryOut.from_record(e) for e in entries], count=len(entries))


@router.get("/{entry_id}", response_model=EntryOut)
def get_entry(entry_id: str, user_id: str = Depends(current_user)) -> EntryOut:
    try:
        return EntryOut.from_record(STORE.get_entry(user_id, entry_id))
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc


@router.put("/{entry_id}", response_model=EntryOut)
def update_entry(
    entry_id: str, req: EntryIn = Body(...), user_id: str = Depends(current_user)
) -> EntryOut:
    try:
        return EntryOut.from_record(STORE.update_entry(user_id, entry_id, req.model_dump()))
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc


@router.delete("/{entry_id}", status_code=204)
def delete_entry(entry_id: str, user_id: str = Depends(current_user)) -> Response:
    try:
        STORE.delete_entry(user_id, entry_id)
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc
    return Response(status_code=204)
