"""API routes initialization."""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from contractshield.api import analyses, analyze, health

router = APIRouter()

# Include all API route modules
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(analyze.router, prefix="/analyze", tags=["analyze"])
router.include_router(analyses.router, prefix="/analyses", tags=["analyses"])


@router.get("", response_class=PlainTextResponse)
async def api_root() -> str:
    """API banner."""
    return "Welcome to the ContractShield AI Backend API."
