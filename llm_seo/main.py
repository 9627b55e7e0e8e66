import asyncio
import logging
import logging.config
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from llm_seo.config import LlmSeoConfig, load_config
from llm_seo.models.delivery import MarkdownRequest
from llm_seo.routers.seo import limiter, router as seo_router
from llm_seo.services.content_cache import ContentCache
from llm_seo.services.delivery import maybe_render_markdown

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)


def _config_from_env() -> LlmSeoConfig:
    config_path = os.environ.get("LLM_SEO_CONFIG")
    if config_path:
        return load_config(config_path)
    return LlmSeoConfig()


def create_app(config: Optional[LlmSeoConfig] = None) -> FastAPI:
    """Build the application; without *config* it comes from ``LLM_SEO_CONFIG``."""
    config = config or _config_from_env()
    app = FastAPI(
        title="llm-seo",
        description="Serves markdown copies of site pages and generates sitemap, robots and llms.txt files.",
        version="1.0.0",
    )
    app.state.content_cache = ContentCache(config)

    # Rate-limiting state
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception for %s", request.url)
        return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})

    @app.middleware("http")
    async def markdown_negotiation(request: Request, call_next):
        """Answer GET/HEAD requests for markdown before routing.

        Content indexes may scan the filesystem, so rendering runs in a worker
        thread.
        """
        if request.method in ("GET", "HEAD"):
            cache: ContentCache = request.app.state.content_cache
            markdown = await asyncio.to_thread(
                maybe_render_markdown,
                cache.config,
                MarkdownRequest(
                    method=request.method,
                    url=request.url.path,
                    headers={"accept": request.headers.get("accept")},
                    query=dict(request.query_params),
                ),
                is_indexable=cache.is_indexable,
                resolve_content=cache.resolve_content,
            )
            if markdown is not None:
                return Response(content=markdown.body, status_code=markdown.status, headers=markdown.headers)
        return await call_next(request)

    app.include_router(seo_router)

    @app.get("/healthz", summary="Health check")
    async def healthz() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
