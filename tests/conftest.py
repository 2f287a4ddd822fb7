"""Shared test configuration and fixtures."""

import sys
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient
from loguru import logger

from bridge.configs import Settings
from bridge.main import create_app

Handler = Callable[[httpx.Request], httpx.Response]

CHAT_RESPONSE = {
    "id": "x",
    "choices": [{"message": {"content": "hello"}, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 5, "completion_tokens": 2},
}


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="sk-test", log_file=None)


@pytest.fixture
def make_client(settings: Settings) -> Callable[[Handler], TestClient]:
    """Build a TestClient whose upstream calls are answered by ``handler``."""

    def _make(handler: Handler) -> TestClient:
        app = create_app(settings, transport=httpx.MockTransport(handler))
        return TestClient(app, raise_server_exceptions=False)

    return _make


@pytest.fixture
def log_messages():
    """Collect formatted log messages for the duration of a test."""
    messages: List[str] = []
    handler_id = logger.add(messages.append, format="{level} {message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)
