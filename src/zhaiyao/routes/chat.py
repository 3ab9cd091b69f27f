"""Assistant chat endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from zhaiyao.dependencies import get_chat_handler
from zhaiyao.exceptions import (
    ChatProviderUnavailableError,
    ChatServiceError,
    ConfigurationError,
    InvalidInputError,
)
from zhaiyao.handlers import ChatHandler
from zhaiyao.response_models import ChatRequest, ChatResponse

router = APIRouter(prefix="/chat", tags=["chat"])

ChatDep = Annotated[ChatHandler, Depends(get_chat_handler)]


@router.post("", response_model=ChatResponse)
def chat(request: ChatRequest, handler: ChatDep) -> ChatResponse:
    """Answers a question, optionally grounded on the current transcript."""
    try:
        reply = handler.reply(
            request.provider, request.messages, request.context_transcript
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except ChatServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except ChatProviderUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ChatResponse(reply=reply)
