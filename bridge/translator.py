"""Translation between Anthropic messages and OpenAI chat completions.

Both directions are pure and total: missing or malformed optional fields
are replaced by defaults, never raised on.
"""

from typing import Any, Dict, List, Mapping, Optional


DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 1
DEFAULT_STREAM = False

STOP_REASON_MAP: Dict[str, str] = {"stop": "end_turn"}
NO_RESPONSE_TEXT = "Error: No response from provider"
UNKNOWN_ID = "unknown"


def _default(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def resolve_request_defaults(body: Mapping[str, Any]) -> Dict[str, Any]:
    """Resolve every optional Anthropic request field to a concrete value.

    Only absent or null fields are defaulted; ``temperature: 0`` stays 0.
    """
    messages = body.get("messages")
    if not isinstance(messages, list):
        messages = []
    return {
        "model": body.get("model"),
        "system": body.get("system"),
        "messages": messages,
        "max_tokens": _default(body.get("max_tokens"), DEFAULT_MAX_TOKENS),
        "temperature": _default(body.get("temperature"), DEFAULT_TEMPERATURE),
        "stream": _default(body.get("stream"), DEFAULT_STREAM),
    }


def anthropic_to_openai(body: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert an Anthropic messages request to an OpenAI chat request."""
    resolved = resolve_request_defaults(body)

    messages: List[Dict[str, Any]] = []
    if resolved["system"]:
        messages.append({"role": "system", "content": resolved["system"]})
    for msg in resolved["messages"]:
        if not isinstance(msg, Mapping):
            msg = {}
        messages.append({"role": msg.get("role"), "content": msg.get("content")})

    return {
        "model": resolved["model"],
        "messages": messages,
        "max_tokens": resolved["max_tokens"],
        "temperature": resolved["temperature"],
        "stream": resolved["stream"],
    }


def map_stop_reason(finish_reason: Optional[str]) -> Optional[str]:
    """Map an OpenAI finish_reason onto the Anthropic stop_reason vocabulary."""
    if not isinstance(finish_reason, str):
        return finish_reason
    return STOP_REASON_MAP.get(finish_reason, finish_reason)


def first_choice(response: Any) -> Optional[Mapping[str, Any]]:
    """Return the authoritative choice of a chat response, if it has one."""
    if not isinstance(response, Mapping):
        return None
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    return choice if isinstance(choice, Mapping) else None


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def message_text(content: Any) -> str:
    """Flatten OpenAI message content to plain text.

    A list of content parts is joined from its ``text`` parts; anything
    else that is not a string becomes "".
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part["text"]
            for part in content
            if isinstance(part, Mapping) and isinstance(part.get("text"), str)
        )
    return ""


def openai_to_anthropic(response: Any, original_model: Optional[str]) -> Dict[str, Any]:
    """Convert an OpenAI chat response to an Anthropic message.

    ``model`` is always the caller's requested model, whatever the
    upstream reports.
    """
    data = _as_mapping(response)
    response_id = data.get("id") or UNKNOWN_ID
    choice = first_choice(data)

    if choice is None:
        return {
            "id": response_id,
            "type": "message",
            "role": "assistant",
            "content": [{"type": "text", "text": NO_RESPONSE_TEXT}],
            "model": original_model,
            "stop_reason": "error",
        }

    message = _as_mapping(choice.get("message"))
    usage = _as_mapping(data.get("usage"))
    return {
        "id": response_id,
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": message_text(message.get("content"))}],
        "model": original_model,
        "stop_reason": map_stop_reason(choice.get("finish_reason")),
        "usage": {
            "input_tokens": usage.get("prompt_tokens") or 0,
            "output_tokens": usage.get("completion_tokens") or 0,
        },
    }

