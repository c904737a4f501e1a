# hwms/api/v1/endpoints/analytics.py
import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from hwms.core.actor_context import Actor
from hwms.core.config import get_settings
from hwms.core.redis import cache_get, cache_set
from hwms.dependencies.identity import get_current_actor, get_record_store
from hwms.schemas.analytics import AnalyticsSummary
from hwms.schemas.common import DataResponse
from hwms.services.analytics_service import summarize, summary_cache_key
from hwms.services.record_store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter()

settings = get_settings()


@router.get("/summary", response_model=DataResponse[AnalyticsSummary], tags=["analytics"])
def get_summary(
    hospital_id: UUID | None = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_record_store),
) -> dict:
    """
    Record counts for the caller's scope, cached briefly in Redis when available.
    """
    cache_key = summary_cache_key(actor, hospital_id)

    cached = cache_get(cache_key)
    if cached:
        logger.debug(f"Analytics cache hit: {cache_key}")
        return {"data": AnalyticsSummary.model_validate_json(cached)}

    summary = AnalyticsSummary.model_validate(summarize(store, actor, hospital_id))
    cache_set(cache_key, summary.model_dump_json(), ttl=settings.analytics_cache_ttl_seconds)
    return {"data": summary}
