"""Service layer for relaying Anthropic messages upstream."""

import json
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from loguru import logger

from .translator import anthropic_to_openai, first_choice, openai_to_anthropic
from .upstream import UpstreamClient


async def relay_message(
    upstream: UpstreamClient,
    body: Mapping[str, Any],
    caller_key: Optional[str] = None,
) -> Dict[str, Any]:
    """Translate ``body``, forward it upstream and translate the reply back."""
    start_time = datetime.now()
    model = body.get("model")
    provider = upstream.settings.provider_name

    logger.info("Forwarding to {}: {}", provider, model)
    logger.debug("Caller credential supplied: {}", "yes" if caller_key else "no")

    payload = anthropic_to_openai(body)
    logger.debug("Messages: {} messages", len(payload["messages"]))
    if payload["stream"]:
        logger.debug("stream requested; upstream reply is buffered as a whole")

    response = await upstream.chat_completion(payload)

    if first_choice(response) is None:
        logger.warning(
            "No choices in response. Full response: {}", json.dumps(response)[:500]
        )

    result = openai_to_anthropic(response, model)

    duration = (datetime.now() - start_time).total_seconds()
    logger.info("Response received from {} in {:.2f}s", provider, duration)
    return result


def extract_caller_key(headers: Mapping[str, str]) -> Optional[str]:
    """Read the caller's key from ``x-api-key`` or a bearer ``authorization``.

    The key is not validated; callers are trusted at the network edge.
    """
    api_key = headers.get("x-api-key")
    if api_key:
        return api_key
    authorization = headers.get("authorization")
    if not authorization:
        return None
    if authorization[:7].lower() == "bearer ":
        return authorization[7:]
    return authorization
