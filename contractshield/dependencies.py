"""FastAPI dependency injection functions."""
from fastapi import Request, HTTPException

from contractshield.services.analysis_store import AnalysisStore
from contractshield.services.orchestrator import ContractAnalyzer
from contractshield.services.reasoning_client import ReasoningClient


def _from_state(request: Request, name: str):
    """
    Fetch a singleton created at startup from app state.

    Raises HTTPException if the service is not available, which only happens
    when the application was not fully started.
    """
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=500,
            detail=f"{name} not initialized. Application may not be fully started."
        )
    return service


def get_analysis_store(request: Request) -> AnalysisStore:
    return _from_state(request, "analysis_store")


def get_reasoning_client(request: Request) -> ReasoningClient:
    return _from_state(request, "reasoning_client")


def get_analyzer(request: Request) -> ContractAnalyzer:
    return _from_state(request, "analyzer")
