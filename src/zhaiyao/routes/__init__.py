from .chat import router as chat_router
from .summarize import router as summarize_router
from .transcription import router as transcription_router
from .uploads import router as uploads_router

__all__ = ["chat_router", "summarize_router", "transcription_router", "uploads_router"]
