"""httpx implementation of the MediaFetcher interface."""

import httpx

from zhaiyao.domain.media import filename_from_url
from zhaiyao.domain.models import MediaFile
from zhaiyao.exceptions import InvalidInputError, RemoteFetchError
from zhaiyao.logging import setup_logging

from .interfaces.fetcher import MediaFetcher

logger = setup_logging()


def _too_large(max_bytes: int) -> InvalidInputError:
    return InvalidInputError(
        f"File exceeds the {max_bytes // (1024 * 1024)}MB limit, compress it and retry"
    )


class HttpMediaFetcher(MediaFetcher):
    """Streams remote media into memory, stopping once it passes the cap."""

    def __init__(self, client: httpx.Client):
        self._client = client

    def fetch(self, url: str, max_bytes: int) -> MediaFile:
        try:
            with self._client.stream("GET", url, follow_redirects=True) as response:
                if not response.is_success:
                    raise RemoteFetchError(
                        url, f"{response.status_code} {response.reason_phrase}"
                    )

                declared = response.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > max_bytes:
                    raise _too_large(max_bytes)

                buffer = bytearray()
                for chunk in response.iter_bytes():
                    buffer.extend(chunk)
                    if len(buffer) > max_bytes:
                        raise _too_large(max_bytes)

                content_type = response.headers.get(
                    "content-type", "application/octet-stream"
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.exception("Remote media download failed", extra={"url": url})
            raise RemoteFetchError(url, str(e), cause=e) from e

        media = MediaFile(
            data=bytes(buffer),
            filename=filename_from_url(url),
            content_type=content_type.split(";")[0].strip(),
        )
        logger.info(
            "Remote media downloaded",
            extra={"url": url, "size": media.size, "content_type": media.content_type},
        )
        return media
