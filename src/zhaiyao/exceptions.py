"""Custom exceptions for the ingestion service."""


class InvalidInputError(Exception):
    """Raised when the request does not carry usable media or text."""

    def __init__(self, message: str):
        super().__init__(message)


class ConfigurationError(Exception):
    """Raised when required environment configuration is missing."""

    def __init__(self, missing: list[str], message: str | None = None):
        self.missing = missing
        super().__init__(
            message or f"Missing required environment variables: {', '.join(missing)}"
        )


class RemoteFetchError(Exception):
    """Raised when a remote media URL cannot be downloaded."""

    def __init__(self, url: str, reason: str, cause: Exception | None = None):
        self.url = url
        self.cause = cause
        super().__init__(f"Unable to download media link: {reason}")


class StorageUploadError(Exception):
    """Raised when uploading an object to OSS fails."""

    def __init__(
        self,
        object_key: str,
        status_code: int | None = None,
        body: str = "",
        cause: Exception | None = None,
    ):
        self.object_key = object_key
        self.status_code = status_code
        self.body = body
        self.cause = cause
        if status_code is not None:
            detail = f"{status_code} - {body}" if body else str(status_code)
        else:
            detail = str(cause) if cause else "unknown error"
        super().__init__(f"Audio upload failed: {detail}")


class TranscodeError(Exception):
    """Raised when the external transcoder cannot be run or exits non-zero."""

    def __init__(
        self,
        operation: str,
        returncode: int | None = None,
        stderr: str = "",
        cause: Exception | None = None,
    ):
        self.operation = operation
        self.returncode = returncode
        self.stderr = stderr
        self.cause = cause
        if returncode is None:
            detail = str(cause) if cause else "transcoder unavailable"
        else:
            detail = f"exit code {returncode}: {stderr.strip()}"
        super().__init__(f"ffmpeg {operation} failed ({detail})")


class AudioExtractionError(Exception):
    """Raised when audio cannot be extracted from an uploaded video."""

    def __init__(self, file_name: str, cause: Exception | None = None):
        self.file_name = file_name
        self.cause = cause
        super().__init__(
            f"Unable to extract audio from video '{file_name}', check the file format"
        )


class TranscriptionError(Exception):
    """Raised when the speech-to-text provider fails or returns no text."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)


class ChatServiceError(Exception):
    """
    Raised when a chat-completions provider answers with an error.

    ``body_readable`` is False when the error body was not JSON, as with
    the HTML pages proxies and gateways return.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        cause: Exception | None = None,
        body_readable: bool = True,
    ):
        self.status_code = status_code
        self.cause = cause
        self.body_readable = body_readable
        super().__init__(message)


class ChatProviderUnavailableError(Exception):
    """Raised when a chat-completions provider cannot be reached."""

    def __init__(self, provider: str, cause: Exception | None = None):
        self.provider = provider
        self.cause = cause
        super().__init__(f"Unable to reach {provider}. Please try again later.")


class UploadPersistenceError(Exception):
    """Raised when writing an upload history row fails."""

    def __init__(self, filename: str, cause: Exception | None = None):
        self.filename = filename
        self.cause = cause
        super().__init__(f"Failed to persist upload record for '{filename}'")
