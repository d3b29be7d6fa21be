"""
Health check endpoints.

Provides liveness and readiness probes with database connectivity checks.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from spellseeker.api.translate import get_translation_service
from spellseeker.db.database import get_session
from spellseeker.services.translation import TranslationService

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None
    generative: str | None = None


def _generative_status(service: TranslationService) -> str:
    generative = service.generative
    if generative is None or not generative.configured:
        return "disabled"
    return generative.breaker.state.value


@router.get("/health", response_model=HealthResponse)
async def health(
    service: Annotated[TranslationService, Depends(get_translation_service)],
) -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running, with the generative
    tier's circuit state. Does not check dependencies.
    """
    return HealthResponse(status="healthy", generative=_generative_status(service))


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns ready if the service can handle requests.
    Checks database connectivity. Returns 503 if database is unavailable.
    """
    try:
        await session.execute(text("SELECT 1"))
        return HealthResponse(status="ready", database="connected")
    except SQLAlchemyError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")
