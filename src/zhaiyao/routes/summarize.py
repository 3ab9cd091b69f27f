"""Meeting summary endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from zhaiyao.dependencies import get_health_handler, get_summary_handler
from zhaiyao.exceptions import ChatServiceError, ConfigurationError, InvalidInputError
from zhaiyao.handlers import HealthHandler, SummaryHandler
from zhaiyao.response_models import SummarizeRequest, SummaryResponse

router = APIRouter(prefix="/summarize", tags=["summarize"])

SummaryDep = Annotated[SummaryHandler, Depends(get_summary_handler)]
HealthDep = Annotated[HealthHandler, Depends(get_health_handler)]


@router.post("", response_model=SummaryResponse, response_model_exclude_none=True)
def summarize(request: SummarizeRequest, handler: SummaryDep) -> SummaryResponse:
    """
    Summarizes a transcript.

    Returns a locally built summary with ``warning`` and ``source`` when the
    AI provider cannot be reached.
    """
    try:
        result = handler.summarize(request.transcript, request.prompt)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except ChatServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return SummaryResponse(**result.model_dump())


@router.get("/health")
def provider_health(handler: HealthDep, provider: str | None = None) -> JSONResponse:
    """Pings the selected chat provider with a tiny completion."""
    health = handler.provider_health(provider)
    return JSONResponse(
        status_code=health.status_code,
        content=health.model_dump(exclude_none=True),
    )
