"""Stored analysis retrieval endpoints."""
from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, List, Optional
import logging

from contractshield.config import settings
from contractshield.dependencies import get_analysis_store
from contractshield.services.analysis_store import AnalysisStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/recent")
async def list_recent_analyses(
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of analyses to return"),
    store: AnalysisStore = Depends(get_analysis_store)
) -> List[Dict[str, Any]]:
    """Most recent analyses, newest first."""
    records = store.list_recent(limit or settings.recent_default_limit)
    logger.info(f"/analyses/recent returning {len(records)} records")
    return [record.to_dict() for record in records]


@router.get("/{analysis_id}")
async def get_analysis(
    analysis_id: str,
    store: AnalysisStore = Depends(get_analysis_store)
) -> Dict[str, Any]:
    """Fetch one analysis by id. Unknown or evicted ids raise NotFound (404)."""
    record = store.get(analysis_id)
    return {"analysis": record.analysis}
