"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from skillmetrics.config import settings
from skillmetrics.exceptions import SkillMetricsError
from skillmetrics.routers import (
    analytics,
    auth,
    clients,
    endorsements,
    notifications,
    pending_skills,
    projects,
    skills,
    taxonomy,
    users,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Skill Metrics API",
    description="Backend API for employee skills tracking and project staffing",
    version="0.1.0",
)

# CORS middleware to allow the frontend to call the API with its session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Signed cookie sessions
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie="skillmetrics_session",
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.https_only_cookies,
)


@app.exception_handler(SkillMetricsError)
async def skill_metrics_error_handler(request: Request, exc: SkillMetricsError) -> JSONResponse:
    """Map domain exceptions to their HTTP status codes."""
    if exc.status_code >= 500:
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request data as 400 with pydantic's field-level errors."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.get("/api/health")
def health() -> dict:
    """Liveness check."""
    return {"status": "ok"}


# Mount routers
for module in (
    auth,
    users,
    skills,
    pending_skills,
    endorsements,
    notifications,
    taxonomy,
    clients,
    projects,
    analytics,
):
    app.include_router(module.router, prefix="/api")
