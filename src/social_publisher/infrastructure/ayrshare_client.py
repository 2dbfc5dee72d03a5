# src/social_publisher/infrastructure/ayrshare_client.py
import json
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import httpx
import structlog

from social_publisher.models.platform import Platform

logger = structlog.get_logger(__name__)

AYRSHARE_API_KEY = os.getenv("AYRSHARE_API_KEY")
AYRSHARE_BASE_URL = os.getenv("AYRSHARE_BASE_URL", "https://api.ayrshare.com/api")
AYRSHARE_TIMEOUT = float(os.getenv("AYRSHARE_TIMEOUT", "30"))


class AyrsharePublishError(Exception):
    """Ayrshare answered but refused the post (or could not be called at all)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class PublishResult:
    external_id: Optional[str]
    raw: dict = field(default_factory=dict)


class AyrshareClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = AYRSHARE_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or AYRSHARE_API_KEY
        self.base_url = (base_url or AYRSHARE_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @staticmethod
    def build_payload(content: str, platforms: Iterable, media_urls: Optional[List[str]] = None) -> dict:
        payload = {
            "post": content,
            "platforms": [Platform(p).value for p in platforms],
        }
        if media_urls:
            payload["mediaUrls"] = list(media_urls)
        return payload

    async def publish(self, content: str, platforms: Iterable, media_urls: Optional[List[str]] = None) -> PublishResult:
        """
        Send one post to Ayrshare. A refused post raises AyrsharePublishError;
        network failures surface as httpx.HTTPError.
        """
        if not self.api_key:
            raise AyrsharePublishError("AYRSHARE_API_KEY is not configured")

        payload = self.build_payload(content, platforms, media_urls)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(f"{self.base_url}/post", json=payload, headers=headers)

        try:
            body = response.json()
        except ValueError:
            logger.warning("ayrshare_invalid_json", status_code=response.status_code)
            raise AyrsharePublishError(
                f"Invalid response from Ayrshare (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        if not isinstance(body, dict):
            body = {"data": body}

        if response.is_success:
            external_id = body.get("id")
            external_id = str(external_id) if external_id not in (None, "") else None
            logger.info("ayrshare_post_accepted", external_id=external_id, platforms=payload["platforms"])
            return PublishResult(external_id=external_id, raw=body)

        message = body.get("message") or "Failed to post"
        if not isinstance(message, str):
            message = json.dumps(message)
        logger.info("ayrshare_post_rejected", status_code=response.status_code, message=message)
        raise AyrsharePublishError(message, status_code=response.status_code)
