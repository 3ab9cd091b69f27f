"""Aliyun OSS implementation of the StorageClient interface."""

import base64
import hashlib
import hmac
import time
from email.utils import formatdate
from urllib.parse import quote

import httpx

from zhaiyao.config import OssConfig
from zhaiyao.domain.media import build_object_key, object_key_from_url
from zhaiyao.domain.models import LinkStatus, MediaFile, StoredObject
from zhaiyao.exceptions import StorageUploadError
from zhaiyao.logging import setup_logging

from .interfaces.storage import StorageClient

logger = setup_logging()

OSS_HEADER_PREFIX = "x-oss-"


def build_canonical_string(
    method: str,
    content_type: str,
    date: str,
    headers: dict[str, str],
    resource: str,
) -> str:
    """
    Builds the string signed by the OSS header-signature scheme.

    Layout: ``METHOD\\n<Content-MD5>\\nContent-Type\\nDate\\n`` followed by the
    lower-cased ``x-oss-*`` headers sorted by name (one ``name:value`` per
    line) and the canonical resource ``/{bucket}/{key}``. Content-MD5 is
    always sent empty.
    """
    oss_headers = sorted(
        (name.lower(), value)
        for name, value in headers.items()
        if name.lower().startswith(OSS_HEADER_PREFIX)
    )
    lines = [method.upper(), "", content_type, date]
    lines.extend(f"{name}:{value}" for name, value in oss_headers)
    lines.append(resource)
    return "\n".join(lines)


def sign(secret: str, canonical_string: str) -> str:
    """Returns base64(HMAC-SHA1(secret, canonical_string))."""
    digest = hmac.new(
        secret.encode("utf-8"), canonical_string.encode("utf-8"), hashlib.sha1
    ).digest()
    return base64.b64encode(digest).decode("ascii")


class OssStorageClient(StorageClient):
    """Uploads audio to an OSS bucket with signed PUT requests."""

    def __init__(self, client: httpx.Client, config: OssConfig):
        self._client = client
        self._config = config

    def signed_headers(
        self, key: str, content_type: str, date: str | None = None
    ) -> dict[str, str]:
        """Returns the full header set for a PUT of ``key``."""
        headers = {
            "Date": date or formatdate(usegmt=True),
            "Content-Type": content_type,
        }
        if self._config.sends_acl_header:
            headers["x-oss-object-acl"] = self._config.object_acl

        canonical_string = build_canonical_string(
            "PUT",
            content_type,
            headers["Date"],
            headers,
            f"/{self._config.bucket}/{key}",
        )
        signature = sign(self._config.access_key_secret, canonical_string)
        headers["Authorization"] = f"OSS {self._config.access_key_id}:{signature}"
        return headers

    def upload(self, media: MediaFile) -> StoredObject:
        key = build_object_key(media.filename)
        content_type = media.content_type or "application/octet-stream"
        headers = self.signed_headers(key, content_type)
        endpoint = f"{self._config.endpoint}/{quote(key)}"

        logger.info(
            "Uploading to OSS",
            extra={
                "object_key": key,
                "bucket": self._config.bucket,
                "size": media.size,
                "acl": headers.get("x-oss-object-acl", "bucket-default"),
            },
        )

        try:
            response = self._client.put(endpoint, content=media.data, headers=headers)
        except httpx.HTTPError as e:
            logger.exception("OSS upload request failed", extra={"object_key": key})
            raise StorageUploadError(key, cause=e) from e

        if not response.is_success:
            logger.error(
                "OSS rejected upload",
                extra={"object_key": key, "status_code": response.status_code},
            )
            raise StorageUploadError(key, response.status_code, response.text)

        stored = StoredObject(key=key, url=f"{self._config.public_base}/{key}")
        logger.info("File uploaded to OSS", extra={"object_key": key, "url": stored.url})
        return stored

    def link(self, url: str) -> StoredObject:
        stored = StoredObject(key=object_key_from_url(url), url=url)
        logger.info("Using remote object", extra={"object_key": stored.key})
        return stored

    def probe(self, timeout: float) -> LinkStatus:
        probe_url = (
            f"{self._config.public_base}/?x-oss-process=meta"
            f"&ts={int(time.time() * 1000)}"
        )
        start = time.monotonic()
        try:
            response = self._client.head(probe_url, timeout=timeout)
        except httpx.TimeoutException:
            logger.exception("OSS probe timed out")
            return LinkStatus(
                ok=False, issue="network", reason="OSS endpoint timed out"
            )
        except httpx.HTTPError:
            logger.exception("OSS probe failed")
            return LinkStatus(
                ok=False,
                issue="network",
                reason="Unable to reach the OSS endpoint, check network or allowlist",
            )

        latency = int((time.monotonic() - start) * 1000)
        if not response.is_success:
            return LinkStatus(
                ok=False,
                latency=latency,
                issue="service",
                reason=f"OSS responded with status {response.status_code}",
            )
        return LinkStatus(ok=True, latency=latency)
