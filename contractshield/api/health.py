"""Health check API endpoints."""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from typing import Dict, Any
import logging

from contractshield.dependencies import get_analysis_store, get_reasoning_client
from contractshield.services.analysis_store import AnalysisStore
from contractshield.services.reasoning_client import ReasoningClient

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
async def health_check(
    store: AnalysisStore = Depends(get_analysis_store),
    reasoning_client: ReasoningClient = Depends(get_reasoning_client)
) -> Dict[str, Any]:
    """Liveness plus credential presence. Never returns the credentials themselves."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "analysesCount": len(store),
        "provider": reasoning_client.provider,
        "reasoningConfigured": reasoning_client.is_configured,
        "groq": bool(reasoning_client.settings.groq_api_key),
        "openai": bool(reasoning_client.settings.openai_api_key),
    }
