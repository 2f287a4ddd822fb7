import json
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .configs import API_KEY_ENV, Config, Settings, load_settings
from .errors import BridgeError, InvalidRequestError
from .logger import configure_logger
from .models import (
    DEFAULT_MODEL,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    ModelList,
    NotFoundResponse,
    StatusResponse,
)
from .services import extract_caller_key, relay_message
from .upstream import UpstreamClient


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the bridge application around an immutable ``settings``.

    ``transport`` replaces the network transport of the upstream client.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "{} listening on http://{}:{}", settings.service_name, settings.host, settings.port
        )
        logger.info("Target: {} ({})", settings.provider_name, settings.upstream_host)
        if not settings.api_key:
            logger.warning("{} not found in environment", API_KEY_ENV)
            logger.warning("Outbound calls will fail authentication upstream")
        app.state.client = httpx.AsyncClient(timeout=None, transport=transport)
        app.state.upstream = UpstreamClient(settings, app.state.client)
        yield
        logger.info("Shutting down, draining in-flight requests")
        await app.state.client.aclose()
        logger.info("Server closed")

    app = FastAPI(
        title=Config.APP_TITLE,
        description=Config.APP_DESCRIPTION,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(
            "{} {} from {}",
            request.method,
            request.url.path,
            request.headers.get("user-agent", "unknown"),
        )
        return await call_next(request)

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
        body = ErrorResponse(error=ErrorDetail(type=exc.error_type, message=exc.message))
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code not in (404, 405):
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
        logger.warning(
            "404 Not Found: {} {} (expected: POST /v1/messages)",
            request.method,
            request.url.path,
        )
        return JSONResponse(status_code=404, content=NotFoundResponse().model_dump())

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(
            service=settings.service_name,
            provider=settings.provider_name,
            mode=Config.HEALTH_MODE,
        )

    @app.get("/status", response_model=StatusResponse)
    async def status():
        return StatusResponse(
            service=settings.service_name,
            provider=settings.provider_name,
            endpoint=settings.upstream_url,
            mode=Config.STATUS_MODE,
        )

    @app.get("/v1/models", response_model=ModelList)
    async def list_models():
        """Return the single upstream model alias"""
        logger.info("Models list requested")
        return ModelList(data=[DEFAULT_MODEL])

    @app.post("/v1/messages", response_model=MessageResponse)
    async def create_message(request: Request):
        """Translate an Anthropic message request and relay it upstream"""
        raw = await request.body()
        try:
            body = json.loads(raw)
        except ValueError as e:
            logger.error("Request parse error: {}", e)
            raise InvalidRequestError(str(e)) from e
        if not isinstance(body, dict):
            logger.error("Request parse error: body is not a JSON object")
            raise InvalidRequestError("Request body must be a JSON object")

        logger.info("Model from settings: {}", body.get("model"))
        result = await relay_message(
            request.app.state.upstream, body, extract_caller_key(request.headers)
        )
        return JSONResponse(result)

    return app


def run() -> None:
    """Start the bridge and serve until SIGINT/SIGTERM, then drain and exit."""
    settings = load_settings()
    configure_logger(settings.log_file, settings.log_level)
    logger.info("{} starting...", settings.service_name)
    logger.info("Mode: Anthropic -> OpenAI translator for {}", settings.provider_name)

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
