"""
Translate endpoint.

Turns a natural-language card description into a grammar query.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from spellseeker.db.database import get_session
from spellseeker.models.failure import ErrorResponse, KnownError
from spellseeker.models.translation import TranslateResponse, TranslationRequest
from spellseeker.services.cost_controls import enforce_request_limits
from spellseeker.services.generative import GenerativeTranslator
from spellseeker.services.translation import TranslationService

router = APIRouter(tags=["translate"])

_service: TranslationService | None = None


def get_translation_service() -> TranslationService:
    """Dependency that provides the process-wide translation service."""
    global _service
    if _service is None:
        _service = TranslationService(generative=GenerativeTranslator())
    return _service


@router.post(
    "/translate",
    response_model=TranslateResponse,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def translate(
    payload: TranslationRequest,
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
    service: Annotated[TranslationService, Depends(get_translation_service)],
) -> TranslateResponse | JSONResponse:
    """
    Translate a natural-language query.

    Request limits are checked before any translation work. Known
    failures return ``{"success": false, "error": ...}`` with their
    HTTP status.
    """
    client_ip = request.client.host if request.client else "unknown"
    try:
        enforce_request_limits(client_ip)
        result = await service.translate(payload, session=session)
    except KnownError as e:
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_response().model_dump(mode="json"),
        )
    return TranslateResponse.from_result(result)
