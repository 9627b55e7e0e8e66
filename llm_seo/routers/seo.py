"""SEO inspection and generation endpoints."""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from llm_seo.exceptions import DuplicateRouteError
from llm_seo.models.generation import GenerateSeoArtifactsResult, ValidationIssue
from llm_seo.models.route import SeoRoute
from llm_seo.services.content_cache import ContentCache
from llm_seo.services.generator import generate_seo_artifacts
from llm_seo.services.validation import validate_pages

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/seo", tags=["seo"])


def _cache(request: Request) -> ContentCache:
    return request.app.state.content_cache


@router.get("/routes", response_model=List[SeoRoute], summary="List every known route")
def list_routes(request: Request) -> List[SeoRoute]:
    """Static, marketing and programmatic routes, deduplicated by path."""
    try:
        return _cache(request).routes()
    except DuplicateRouteError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.get("/issues", response_model=List[ValidationIssue], summary="Programmatic page warnings")
def list_issues(request: Request) -> List[ValidationIssue]:
    try:
        return validate_pages(_cache(request).programmatic_index().pages)
    except DuplicateRouteError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.post(
    "/generate",
    response_model=GenerateSeoArtifactsResult,
    summary="Regenerate SEO artifacts",
    description=(
        "Writes sitemap.xml, robots.txt, sitemap.md, llms.txt, the JSON content "
        "caches and the markdown copy of every public page, then reloads the "
        "in-process content indexes."
    ),
)
@limiter.limit("5/minute")
async def generate(request: Request) -> GenerateSeoArtifactsResult:
    cache = _cache(request)
    logger.info("Generate request received", extra={"root_dir": cache.config.root_dir})
    try:
        result = await generate_seo_artifacts(cache.config)
    except DuplicateRouteError as exc:
        logger.warning("Generation aborted: %s", exc)
        raise HTTPException(status_code=409, detail=str(exc))
    cache.refresh()
    return result
