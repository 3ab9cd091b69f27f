from .chat_handler import ChatHandler
from .health_handler import HealthHandler
from .ingestion_handler import IngestionHandler
from .summary_handler import SummaryHandler

__all__ = ["ChatHandler", "HealthHandler", "IngestionHandler", "SummaryHandler"]
