from fastapi import APIRouter, Body, Depends, Response

from ..middleware.auth import current_user
from ..schemas import StakeholderIn, StakeholderList, StakeholderOut
from ..services.record_store import STORE
from .common import STORE_ERRORS, store_http_error

router = APIRouter(prefix="/v1/stakeholders", tags=["stakeholders"])

_NOT_FOUND = "STAKEHOLDER_NOT_FOUND"


@router.post("", response_model=StakeholderOut, status_code=201)
def create_stakeholder(
    req: StakeholderIn = Body(
        ...,
        example={
            "name": "Priya Shah",
            "team": "Platform",
            "what_they_care_about": "On-call load and release cadence",
            "how_you_impacted": "Cut paging volume by automating rollbacks",
        },
    ),
    user_id: str = Depends(current_user),
) -> StakeholderOut:
    try:
        return StakeholderOut.from_record(STORE.create_stakeholder(user_id, req.model_dump()))
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc


@router.get("", response_model=StakeholderList)
def list_stakeholders(user_id: str = Depends(current_user)) -> StakeholderList:
    try:
        items = STORE.list_stakeholders(user_id)
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc
    return StakeholderList(stakeholders=[StakeholderOut.from_record(s) for s in items], count=len(items))


@router.get("/{stakeholder_id}", response_model=StakeholderOut)
def get_stakeholder(stakeholder_id: str, user_id: str = Depends(current_user)) -> StakeholderOut:
    try:
        return StakeholderOut.from_record(STORE.get_stakeholder(user_id, stakeholder_id))
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc


@router.put("/{stakeholder_id}", response_model=StakeholderOut)
def update_stakeholder(
    stakeholder_id: str, req: StakeholderIn = Body(...), user_id: str = Depends(current_user)
) -> StakeholderOut:
    try:
        updated = STORE.update_stakeholder(user_id, stakeholder_id, req.model_dump())
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc
    return StakeholderOut.from_record(updated)


@router.delete("/{stakeholder_id}", status_code=204)
def delete_stakeholder(stakeholder_id: str, user_id: str = Depends(current_user)) -> Response:
    try:
        STORE.delete_stakeholder(user_id, stakeholder_id)
    except STORE_ERRORS as exc:
        raise store_http_error(exc, _NOT_FOUND) from exc
    return Response(status_code=204)
