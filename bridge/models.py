"""Pydantic models for the bridge's HTTP responses."""

from typing import List, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str = "healthy"
    service: str
    provider: str
    mode: str


class StatusResponse(BaseModel):
    """Static configuration summary."""

    service: str
    provider: str
    endpoint: str
    mode: str


class ModelCard(BaseModel):
    """Model entry in the model list."""

    id: str
    object: str = "model"
    created: int
    owned_by: str
    context_window: int


class ModelList(BaseModel):
    """Model list response."""

    object: str = "list"
    data: List[ModelCard]


class TextBlock(BaseModel):
    """Text content block."""

    type: str = "text"
    text: str


class MessageUsage(BaseModel):
    """Token usage information."""

    input_tokens: int = 0
    output_tokens: int = 0


class MessageResponse(BaseModel):
    """Anthropic-style message returned to the caller."""

    id: str
    type: str = "message"
    role: str = "assistant"
    content: List[TextBlock]
    model: Optional[str] = None
    stop_reason: Optional[str] = None
    usage: Optional[MessageUsage] = None


class ErrorDetail(BaseModel):
    """Error type and message."""

    type: str
    message: str


class ErrorResponse(BaseModel):
    """Structured error envelope."""

    error: ErrorDetail


class NotFoundResponse(BaseModel):
    """Body for unmatched routes."""

    error: str = "Not found"


DEFAULT_MODEL = ModelCard(
    id="openrouter/default",
    created=1735948800,
    owned_by="openrouter",
    context_window=200000,
)
