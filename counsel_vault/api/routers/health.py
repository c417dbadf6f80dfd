# counsel_vault/api/routers/health.py

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Health check with correlation ID from request state."""
    settings = request.app.state.settings
    return {
        "status": "ok",
        "correlation_id": request.state.correlation_id,
        "environment": settings.environment,
        "version": settings.version,
    }
