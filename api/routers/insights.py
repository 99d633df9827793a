from fastapi import APIRouter, Depends

from src.narrative.insights import (
    TagCount,
    impact_stats,
    stakeholder_frequency,
    strengths_and_gaps,
    tag_distribution,
)

from ..middleware.auth import current_user
from ..schemas import InsightsResponse, StakeholderCountOut, StatsOut, TagCountOut
from ..services.record_store import STORE
from .common import STORE_ERRORS, store_http_error

router = APIRouter(prefix="/v1/insights", tags=["insights"])


def _tag_out(count: TagCount) -> TagCountOut:
    return TagCountOut(tag=count.tag, label=count.label, color=count.color, count=count.count)


@router.get("", response_model=InsightsResponse)
def get_insights(user_id: str = Depends(current_user)) -> InsightsResponse:
    try:
        entries = STORE.list_entries(user_id)
    except STORE_ERRORS as exc:
        raise store_http_error(exc) from exc

    stats = impact_stats(entries)
    split = strengths_and_gaps(entries)
    return InsightsResponse(
        stats=StatsOut(
            total_entries=stats.total_entries,
            this_month=stats.this_month,
            unique_tags=stats.unique_tags,
            top_tag=_tag_out(stats.top_tag) if stats.top_tag else None,
        ),
        tag_distribution=[_tag_out(c) for c in tag_distribution(entries)],
        stakeholders=[StakeholderCountOut(name=n, count=c) for n, c in stakeholder_frequency(entries)],
        strengths=[_tag_out(c) for c in split.strengths],
        gaps=[_tag_out(c) for c in split.gaps],
    )
