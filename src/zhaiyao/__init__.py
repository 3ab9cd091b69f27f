"""ZhaiYao meeting audio ingestion, transcription and summarization service."""
