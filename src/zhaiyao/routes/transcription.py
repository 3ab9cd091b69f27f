"""Transcription endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from zhaiyao.dependencies import (
    get_health_handler,
    get_ingestion_handler,
    get_user_identifier,
)
from zhaiyao.domain.models import MediaFile, TranscriptionHealth
from zhaiyao.exceptions import (
    AudioExtractionError,
    ConfigurationError,
    InvalidInputError,
    RemoteFetchError,
    StorageUploadError,
    TranscriptionError,
)
from zhaiyao.handlers import HealthHandler, IngestionHandler
from zhaiyao.logging import setup_logging
from zhaiyao.response_models import TranscriptionResponse

logger = setup_logging()

router = APIRouter(prefix="/transcription", tags=["transcription"])

UNEXPECTED_FAILURE_MESSAGE = "Transcription failed, retry later or contact the administrator."

IngestionDep = Annotated[IngestionHandler, Depends(get_ingestion_handler)]
HealthDep = Annotated[HealthHandler, Depends(get_health_handler)]
UserDep = Annotated[str, Depends(get_user_identifier)]


def _read_upload(file: UploadFile | None) -> MediaFile | None:
    """Returns None for an absent file or an empty part without a name."""
    if file is None:
        return None
    data = file.file.read()
    if not data and not file.filename:
        return None
    return MediaFile(
        data=data,
        filename=file.filename or "audio-file",
        content_type=file.content_type or "application/octet-stream",
    )


@router.post("", response_model=TranscriptionResponse)
def create_transcription(
    handler: IngestionDep,
    user_identifier: UserDep,
    file: UploadFile | None = File(None),
    file_url: str | None = Form(None, alias="fileUrl"),
) -> TranscriptionResponse:
    """
    Transcribes an uploaded audio/video file or a public media link.

    The upload wins when both are sent. The call is synchronous and returns
    the full transcript together with the stored audio location.
    """
    logger.info(
        "Received transcription request",
        extra={
            "file_name": file.filename if file else None,
            "has_url": bool(file_url),
            "user": user_identifier or "anonymous",
        },
    )

    try:
        result = handler.process(user_identifier, _read_upload(file), file_url)
    except (InvalidInputError, RemoteFetchError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (
        ConfigurationError,
        AudioExtractionError,
        StorageUploadError,
        TranscriptionError,
    ) as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected transcription failure: {e}")
        raise HTTPException(status_code=500, detail=str(e) or UNEXPECTED_FAILURE_MESSAGE)

    return TranscriptionResponse(
        transcript=result.transcript,
        vendor=result.vendor,
        raw=result.raw,
        audio_url=result.audio_url,
        object_key=result.object_key,
    )


@router.get("")
def poll_transcription():
    """Transcription is synchronous, there is no task status to poll."""
    raise HTTPException(
        status_code=405,
        detail="Transcription is synchronous, there is no task status to query.",
    )


@router.get(
    "/health", response_model=TranscriptionHealth, response_model_exclude_none=True
)
def transcription_health(handler: HealthDep) -> TranscriptionHealth:
    """Reports configuration, OSS and APIMart reachability. Always 200."""
    return handler.transcription_health()
