from fastapi import APIRouter

from soc_analyst.core.config import settings
from soc_analyst.services.llm.provider import is_ai_configured

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict:
    """
    Simple liveness / readiness check.
    """
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "ai_configured": is_ai_configured(),
    }
