from fastapi import APIRouter, Body, Depends

from src.narrative.tags import IMPACT_TAGS, resolve_tag

from ..middleware.auth import current_user
from ..schemas import CustomTagIn, TagList, TagOut
from ..services.record_store import STORE
from .common import STORE_ERRORS, store_http_error

router = APIRouter(prefix="/v1/tags", tags=["tags"])


def _tag_list(custom: list) -> TagList:
    known = [TagOut(tag=tag_id, label=info.label, color=info.color) for tag_id, info in IMPACT_TAGS.items()]
    extra = []
    for name in custom:
        if name in IMPACT_TAGS:
            continue
        info = resolve_tag(name)
        extra.append(TagOut(tag=name, label=info.label, color=info.color, custom=True))
    return TagList(tags=known + extra)


@router.get("", response_model=TagList)
def list_tags(user_id: str = Depends(current_user)) -> TagList:
    try:
        return _tag_list(STORE.list_custom_tags(user_id))
    except STORE_ERRORS as exc:
        raise store_http_error(exc) from exc


@router.post("", response_model=TagList, status_code=201)
def add_custom_tag(
    req: CustomTagIn = Body(..., example={"name": "Mentoring"}),
    user_id: str = Depends(current_user),
) -> TagList:
    try:
        return _tag_list(STORE.add_custom_tag(user_id, req.name))
    except STORE_ERRORS as exc:
        raise store_http_error(exc) from exc
