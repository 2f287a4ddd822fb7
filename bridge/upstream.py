"""Client for the fixed OpenAI-compatible upstream."""

import json
from typing import Any, Dict

import httpx
from loguru import logger

from .configs import Settings
from .errors import UpstreamError


class UpstreamClient:
    """Sends OpenAI chat requests to the configured upstream endpoint."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    def build_headers(self, body: bytes) -> Dict[str, str]:
        """Headers for a single outbound call carrying ``body``."""
        return {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
            "Authorization": f"Bearer {self.settings.api_key or ''}",
            "HTTP-Referer": self.settings.referer,
            "X-Title": self.settings.title,
        }

    async def chat_completion(self, payload: Dict[str, Any]) -> Any:
        """POST ``payload`` upstream and return the parsed response body.

        The whole body is read before parsing, even for ``stream`` requests.

        Raises:
            UpstreamError: On transport failure or an unparseable body.
        """
        body = json.dumps(payload).encode("utf-8")
        logger.debug("Using {} API key from environment", self.settings.provider_name)

        try:
            response = await self.client.post(
                self.settings.upstream_url,
                content=body,
                headers=self.build_headers(body),
            )
        except httpx.HTTPError as e:
            logger.error("Request error: {}", e)
            raise UpstreamError(str(e) or e.__class__.__name__) from e

        if response.is_error:
            logger.warning(
                "{} returned HTTP {}", self.settings.provider_name, response.status_code
            )

        try:
            return json.loads(response.content)
        except ValueError as e:
            logger.error("Parse error: {}", e)
            raise UpstreamError(str(e)) from e
