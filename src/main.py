"""
Component Forge Service - Main Entry Point
Generates, previews and deploys a single Lightning web component
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Any

import orjson
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from core import LogContext, Settings, configure_logging, create_container, get_logger, get_settings
from core.errors import ForgeError, ValidationError
from handlers import DeployHandler, GenerateHandler, PreviewHandler
from storage import ArtifactStore
from monitoring import get_trace_id, metrics_collector, set_trace_context


logger = get_logger(__name__)

SERVICE_NAME = "component-forge"
VERSION = "0.1.0"
TRACE_HEADER = "x-trace-id"


async def read_payload(request: Request) -> Any:
    """
    Request body as JSON; an empty body is an empty object.

    Raises:
        ValidationError: Body is not valid JSON
    """
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return orjson.loads(body)
    except orjson.JSONDecodeError as e:
        raise ValidationError("Request body must be valid JSON.") from e


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its handlers resolved from the container."""
    settings = settings or get_settings()
    container = create_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Reset the preview to the stub bundle on startup."""
        configure_logging(settings.log_level, settings.json_logs)
        logger.info("starting", preview_dir=str(settings.preview_dir), light_dom=settings.light_dom)
        await container.get(ArtifactStore).reset()
        logger.info("ready")
        yield
        logger.info("stopped")

    app = FastAPI(
        title="Component Forge",
        description="AI generation, preview and deployment of Lightning web components",
        version=VERSION,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def trace_context(request: Request, call_next):
        """Adopt or mint a trace id and echo it back."""
        set_trace_context(request.headers.get(TRACE_HEADER) or uuid.uuid4().hex)
        async with LogContext(trace_id=get_trace_id(), path=request.url.path):
            response = await call_next(request)
        response.headers[TRACE_HEADER] = get_trace_id()
        return response

    @app.exception_handler(ForgeError)
    async def forge_error_handler(request: Request, exc: ForgeError) -> ORJSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, kind=exc.kind, error=exc.message, exc_info=exc)
        return ORJSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.post("/api/generate")
    async def generate(request: Request):
        return await container.get(GenerateHandler).generate(await read_payload(request))

    @app.post("/api/reset")
    async def reset():
        return await container.get(PreviewHandler).reset()

    @app.get("/api/preview")
    async def read_preview():
        return await container.get(PreviewHandler).read()

    @app.post("/api/preview")
    async def update_preview(request: Request):
        return await container.get(PreviewHandler).update(await read_payload(request))

    @app.post("/api/deploy")
    async def deploy(request: Request):
        return await container.get(DeployHandler).deploy(await read_payload(request))

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint"""
        return Response(content=metrics_collector.get_metrics(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": VERSION,
            "timestamp": time.time(),
        }

    return app


def main() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
