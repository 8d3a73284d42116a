# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Facilitation Service
====================
Attributes training-session facilitation to team members from the free-text
session descriptions, reports fairness statistics, and draws the next
facilitators with weighted random selection (fewer and older facilitations
weigh more).

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.dependencies import get_facilitation_service, get_session_repo
from app.core.logging import get_logger
from app.controllers import facilitation_controller, system_controller
from app.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    logger.info(
        "Starting %s v%s with %d roster members",
        settings.SERVICE_NAME, settings.SERVICE_VERSION,
        len(get_facilitation_service().roster),
    )
    try:
        get_session_repo().verify_connection()
    except Exception:
        logger.warning("Session store not reachable yet, readiness will report 503")
    yield
    get_session_repo().dispose()
    logger.info("Shutting down, connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Facilitation Service",
    description="Facilitation fairness statistics and weighted facilitator selection.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": str(exc)})


app.include_router(system_controller.router)
app.include_router(facilitation_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
