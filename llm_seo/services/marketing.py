"""Marketing pages: content index, route projection and their JSON caches.

Marketing pages live under ``content/marketing`` and use the ``[meta]``
dialect.  Unlike static pages, two files resolving to the same route is a
hard error.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from llm_seo.config import LlmSeoConfig
from llm_seo.exceptions import DuplicateRouteError
from llm_seo.models.page import MarketingContent
from llm_seo.models.route import MarketingRoute, MarketingRouteRecord
from llm_seo.services.files import dump_models, read_json, scan_markdown_files, write_json
from llm_seo.services.git_dates import FileDates, get_git_dates_for_files
from llm_seo.services.normalizer import (
    as_boolean,
    as_number,
    as_string,
    normalize_group,
    normalize_schema_type,
)
from llm_seo.services.parser import parse_marketing_markdown
from llm_seo.services.paths import (
    build_markdown_path,
    build_route_path_from_file,
    label_from_path,
    to_posix_path,
)

logger = logging.getLogger(__name__)

MARKETING_ROUTES_FILE = "marketing_routes.json"
MARKETING_CONTENT_FILE = "marketing_content.json"


def _source_file(config: LlmSeoConfig, relative_path: str) -> str:
    """Path of a marketing file relative to the project root, as git reports it."""
    full_path = config.marketing_dir / relative_path
    return to_posix_path(os.path.relpath(full_path, config.root_dir))


def build_marketing_content_index_from_filesystem(
    config: LlmSeoConfig, include_markdown: bool = True
) -> List[MarketingContent]:
    """Parse every marketing page, sorted by path.

    Raises :class:`DuplicateRouteError` naming both files when two pages
    resolve to the same route.
    """
    index_path = config.routes.marketing_route_prefix
    results: List[MarketingContent] = []
    seen: Dict[str, str] = {}

    for relative_path in scan_markdown_files(config.marketing_dir):
        route_path = build_route_path_from_file(relative_path, index_path=index_path)
        if not route_path:
            continue

        markdown = (config.marketing_dir / relative_path).read_text(encoding="utf-8")
        parsed = parse_marketing_markdown(markdown)
        meta = parsed.meta
        route_path = as_string(meta.get("path")) or route_path

        existing = seen.get(route_path)
        if existing:
            raise DuplicateRouteError(
                f"Duplicate marketing route for path {route_path}. Files: {existing}, {relative_path}",
                path=route_path,
                sources=[existing, relative_path],
            )
        seen[route_path] = relative_path

        label = parsed.title or label_from_path(route_path)
        results.append(
            MarketingContent(
                path=route_path,
                label=label,
                group=normalize_group(meta.get("group")),
                indexable=as_boolean(meta.get("indexable")) is not False,
                llms=as_boolean(meta.get("llms")),
                nav=as_boolean(meta.get("nav")),
                nav_order=as_number(meta.get("nav-order")),
                published_at=as_string(meta.get("published")),
                updated_at=as_string(meta.get("updated")),
                markdown_path=build_markdown_path(route_path),
                eyebrow=as_string(meta.get("eyebrow")),
                title=parsed.title or label,
                heading=parsed.heading or parsed.title or label,
                description=parsed.description or None,
                seo_title=parsed.seo_title,
                seo_description=parsed.seo_description,
                schema_type=normalize_schema_type(meta.get("schema") or meta.get("schema-type")),
                og_type=as_string(meta.get("og-type")),
                og_image=as_string(meta.get("og-image")),
                steps=parsed.steps,
                pricing=parsed.pricing,
                trust=parsed.trust,
                faqs=parsed.faqs,
                cta=parsed.cta,
                related_links=parsed.related_links,
                resource_links=parsed.resource_links,
                feature_list=parsed.feature_list,
                sections=parsed.extra_sections,
                source_file=_source_file(config, relative_path),
                markdown=parsed.body if include_markdown else None,
            )
        )

    return sorted(results, key=lambda entry: entry.path)


def build_marketing_routes_from_filesystem(config: LlmSeoConfig) -> List[MarketingRouteRecord]:
    return [
        MarketingRouteRecord(
            path=entry.path,
            label=entry.label,
            group=entry.group,
            indexable=entry.indexable,
            published_at=entry.published_at,
            updated_at=entry.updated_at,
            nav=entry.nav,
            nav_order=entry.nav_order,
            llms=entry.llms,
            source_file=entry.source_file,
        )
        for entry in build_marketing_content_index_from_filesystem(config, include_markdown=False)
    ]


def read_marketing_routes_file(config: LlmSeoConfig) -> Optional[List[MarketingRoute]]:
    data = read_json(config.content_cache_dir / MARKETING_ROUTES_FILE)
    if not isinstance(data, list):
        return None
    try:
        return [MarketingRoute.model_validate(entry) for entry in data]
    except ValidationError as exc:
        logger.debug("Ignoring invalid marketing routes file: %s", exc)
        return None


def write_marketing_routes_file(config: LlmSeoConfig, routes: List[MarketingRoute]) -> Path:
    # The routes file never records where a route came from
    return write_json(
        config.content_cache_dir / MARKETING_ROUTES_FILE,
        dump_models(routes, exclude={"source_file"}),
    )


def read_marketing_content_file(config: LlmSeoConfig) -> Optional[List[MarketingContent]]:
    data = read_json(config.content_cache_dir / MARKETING_CONTENT_FILE)
    if not isinstance(data, list):
        return None
    try:
        return [MarketingContent.model_validate(entry) for entry in data]
    except ValidationError as exc:
        logger.debug("Ignoring invalid marketing content file: %s", exc)
        return None


def write_marketing_content_file(config: LlmSeoConfig, content: List[MarketingContent]) -> Path:
    return write_json(
        config.content_cache_dir / MARKETING_CONTENT_FILE,
        dump_models(content, exclude={"markdown"}),
    )


def route_dates(routes: Optional[List[MarketingRoute]]) -> Dict[str, FileDates]:
    """Dates by path from a previously written routes file."""
    return {route.path: FileDates(route.published_at, route.updated_at) for route in routes or []}


def add_marketing_route_git_dates(
    config: LlmSeoConfig,
    routes: List[MarketingRouteRecord],
    fallback_dates: Optional[Dict[str, FileDates]] = None,
) -> List[MarketingRoute]:
    """Project routes to :class:`MarketingRoute`, filling dates from git history.

    Git dates win, then *fallback_dates*, then the route's own metadata dates.
    """
    dates_index = get_git_dates_for_files(Path(config.root_dir), config.marketing_dir) or {}
    fallback_dates = fallback_dates or {}

    enriched: List[MarketingRoute] = []
    for route in routes:
        dates = dates_index.get(route.source_file)
        fallback = fallback_dates.get(route.path)
        published_at = (
            (dates and dates.published_at) or (fallback and fallback.published_at) or route.published_at
        )
        updated_at = (dates and dates.updated_at) or (fallback and fallback.updated_at) or route.updated_at
        enriched.append(
            MarketingRoute.model_validate(
                {
                    **route.model_dump(exclude={"source_file"}),
                    "published_at": published_at,
                    "updated_at": updated_at,
                }
            )
        )
    return enriched
