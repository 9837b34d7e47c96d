from fastapi import FastAPI


from soc_analyst.api.v1.routes_health import router as health_router
from soc_analyst.api.v1.routes_events import router as events_router
from soc_analyst.api.v1.routes_ai import router as ai_router
from soc_analyst.api.errors import analysis_error_handler

from soc_analyst.core.errors import AnalysisError
from soc_analyst.core.logging_config import configure_logging
from soc_analyst.db.init_db import init_db
from soc_analyst.core.config import settings


configure_logging()

app = FastAPI(
    title="SOC Analyst Assistant",
    version="0.1.0",
    description="AI security-analyst conversations grounded on SIEM security events.",
)

app.add_exception_handler(AnalysisError, analysis_error_handler)


@app.on_event("startup")
def on_startup() -> None:
    # Create DB tables if they don't exist (dev only)
    init_db()


@app.get("/", tags=["root"])
async def root() -> dict:
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
    }


# API v1
app.include_router(health_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(ai_router, prefix="/api/v1")
