"""
ContractShield - AI contract analysis backend

Main FastAPI application entry point with startup/shutdown lifecycle management.
Provides REST API for contract upload/text analysis and retrieval of recent results.
"""
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
import logging

from contractshield.config import settings
from contractshield.api import router
from contractshield.errors import ContractShieldError, Internal
from contractshield.services.analysis_store import AnalysisStore
from contractshield.services.orchestrator import ContractAnalyzer
from contractshield.services.rate_limiter import FixedWindowRateLimiter
from contractshield.services.reasoning_client import ReasoningClient

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="ContractShield AI",
    description="Upload a contract or paste its text to get a risk score, clause findings and negotiation advice",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None
)

# CORS middleware for the mobile/web client
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

rate_limiter = FixedWindowRateLimiter(
    max_requests=settings.rate_limit_requests,
    window_seconds=settings.rate_limit_window_seconds,
)


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Reject API requests over the per-client limit instead of queueing them."""
    path = request.url.path
    if settings.rate_limit_enabled and path.startswith("/api") and not path.startswith("/api/health"):
        client_key = request.client.host if request.client else "unknown"
        if not rate_limiter.allow(client_key):
            logger.warning(f"Rate limit exceeded, client: {client_key}, path: {path}")
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests, please try again later."},
                headers={"Retry-After": str(rate_limiter.retry_after(client_key))},
            )
    return await call_next(request)


@app.exception_handler(ContractShieldError)
async def contractshield_error_handler(request: Request, exc: ContractShieldError):
    logger.warning(f"{request.method} {request.url.path} failed, {type(exc).__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    parts = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid')}")
    detail = "; ".join(parts)
    logger.warning(f"{request.method} {request.url.path} rejected, invalid request: {detail}")
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {detail}" if detail else "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} failed unexpectedly: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": Internal.default_message})


# Include API routes
app.include_router(router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """
    Initialize services on application startup.

    - Creates the bounded in-memory analysis store
    - Sets up the reasoning client for the configured provider
    - Wires both into the analysis orchestrator
    """
    logger.info("🚀 Starting ContractShield")

    analysis_store = AnalysisStore(capacity=settings.store_capacity)
    app.state.analysis_store = analysis_store
    logger.info(f"✅ Analysis store ready, capacity: {settings.store_capacity}")

    reasoning_client = ReasoningClient(settings)
    app.state.reasoning_client = reasoning_client
    if reasoning_client.is_configured:
        logger.info(f"✅ Reasoning client configured, provider: {reasoning_client.provider}")
    else:
        logger.warning(
            f"⚠️ No API key for provider '{reasoning_client.provider}', analyses will use the fallback result"
        )

    app.state.analyzer = ContractAnalyzer(analysis_store, reasoning_client, settings)
    logger.info(f"🎉 ContractShield ready at http://localhost:{settings.port}")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup resources on application shutdown."""
    logger.info("👋 Shutting down ContractShield")


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Root endpoint."""
    return "ContractShield AI Backend is running."


if __name__ == "__main__":
    uvicorn.run(
        "contractshield.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
