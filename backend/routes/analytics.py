"""
Usage statistics endpoints.
"""

from fastapi import APIRouter, Depends

from models.schemas import AnalyticsSummary, Stats
from routes.deps import get_engine, get_store
from services.response_service import ResponseEngine
from services.storage_service import ConversationStore, answered_rate

router = APIRouter(tags=["analytics"])


@router.get("/stats", response_model=Stats)
async def get_stats(store: ConversationStore = Depends(get_store)):
    """Locally computed statistics in the webhook ``/stats`` shape."""
    return await store.compute_statistics()


@router.get("/api/analytics/summary", response_model=AnalyticsSummary)
async def get_summary(
    store: ConversationStore = Depends(get_store),
    engine: ResponseEngine = Depends(get_engine),
):
    stats, source = await engine.get_stats(await store.compute_statistics())
    return AnalyticsSummary(
        stats=stats,
        answered_rate=answered_rate(stats),
        source=source,
    )
