"""Build every SEO artifact from the content tree.

Writes, in order: the marketing routes and content caches, the programmatic
markdown files, the static content cache, the sitemap files, robots.txt,
sitemap.md, llms.txt and finally the public markdown copy of each page.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from llm_seo.config import LlmSeoConfig
from llm_seo.exceptions import DuplicateRouteError
from llm_seo.models.generation import GenerateSeoArtifactsResult, GenerationFailure
from llm_seo.models.page import Link, MarketingContent, PageContent
from llm_seo.models.route import MarketingRoute
from llm_seo.services.content_cache import dedupe_routes
from llm_seo.services.files import dump_models, write_json, write_text
from llm_seo.services.llms import build_llms_txt
from llm_seo.services.marketing import (
    add_marketing_route_git_dates,
    build_marketing_content_index_from_filesystem,
    build_marketing_routes_from_filesystem,
    read_marketing_routes_file,
    route_dates,
    write_marketing_content_file,
    write_marketing_routes_file,
)
from llm_seo.services.paths import build_markdown_path, markdown_output_name
from llm_seo.services.programmatic import (
    build_programmatic_index,
    get_programmatic_seo_routes,
    write_programmatic_markdown_files,
)
from llm_seo.services.registry import (
    SEO_CONTENT_FILE,
    build_seo_content_index_from_filesystem,
    build_seo_static_content_index_from_filesystem,
)
from llm_seo.services.renderer import render_seo_markdown
from llm_seo.services.robots import build_robots_txt
from llm_seo.services.sitemap import build_sitemap_md, write_sitemap_files
from llm_seo.services.validation import validate_pages

logger = logging.getLogger(__name__)


def _listed(entry: PageContent) -> bool:
    return entry.indexable and entry.llms is not False


def _with_route_dates(entry: MarketingContent, route: Optional[MarketingRoute]) -> MarketingContent:
    if route is None:
        return entry
    return entry.model_copy(
        update={
            "published_at": route.published_at or entry.published_at,
            "updated_at": route.updated_at or entry.updated_at,
        }
    )


def build_article_links(config: LlmSeoConfig, base_url: str, entries: List[PageContent]) -> List[Link]:
    """Links to the markdown copy of every page listed in llms.txt, sorted by label."""
    include = config.llms.include
    links = []
    for entry in entries:
        if not _listed(entry) or (include is not None and not include(entry)):
            continue
        label = getattr(entry, "label", None) or entry.title or entry.heading or entry.path
        links.append(Link(label=label, href=f"{base_url}{build_markdown_path(entry.path)}"))
    return sorted(links, key=lambda link: link.label.lower())


def select_public_markdown_targets(
    config: LlmSeoConfig,
    marketing_content: List[MarketingContent],
    static_content: List[PageContent],
    seo_content: List[PageContent],
) -> List[PageContent]:
    """Pages that get a public ``.md`` copy; the first source claiming a path wins.

    Marketing pages need a non-blank body and a title.  Programmatic pages are
    only included when ``generation.public_markdown_from_programmatic`` is set.
    """
    targets: Dict[str, PageContent] = {}
    for entry in marketing_content:
        if _listed(entry) and entry.markdown and entry.markdown.strip() and entry.title:
            targets[entry.path] = entry
    sources = [static_content]
    if config.generation.public_markdown_from_programmatic:
        sources.append(seo_content)
    for source in sources:
        for entry in source:
            if _listed(entry) and entry.path not in targets:
                targets[entry.path] = entry
    return list(targets.values())


def _write_page_markdown(output_dir: Path, content: PageContent) -> int:
    write_text(output_dir / markdown_output_name(content.path), render_seo_markdown(content))
    return 1


async def generate_seo_artifacts(config: LlmSeoConfig) -> GenerateSeoArtifactsResult:
    """Write every artifact for *config* and report what was written.

    Raises :class:`DuplicateRouteError` when marketing or programmatic content
    resolves two pages to one path.
    """
    base_url = config.resolved_base_url()
    output_dir = config.output_dir

    fallback_dates = route_dates(read_marketing_routes_file(config))
    route_records = build_marketing_routes_from_filesystem(config)
    if config.generation.use_git_dates:
        marketing_routes = add_marketing_route_git_dates(config, route_records, fallback_dates)
    else:
        marketing_routes = [
            MarketingRoute.model_validate(route.model_dump(exclude={"source_file"})) for route in route_records
        ]
    marketing_routes_path = write_marketing_routes_file(config, marketing_routes)

    routes_by_path = {route.path: route for route in marketing_routes}
    marketing_content = [
        _with_route_dates(entry, routes_by_path.get(entry.path))
        for entry in build_marketing_content_index_from_filesystem(config, include_markdown=True)
    ]
    marketing_content_path = write_marketing_content_file(config, marketing_content)

    programmatic_markdown_count = 0
    if config.generation.generate_programmatic_markdown:
        programmatic_markdown_count = await asyncio.to_thread(write_programmatic_markdown_files, config)

    seo_content = build_seo_content_index_from_filesystem(config)
    seo_content_path = write_json(config.content_cache_dir / SEO_CONTENT_FILE, dump_models(seo_content))

    programmatic_index = build_programmatic_index(config)
    routes = dedupe_routes(
        [
            *config.routes.static_routes,
            *marketing_routes,
            *get_programmatic_seo_routes(programmatic_index),
        ]
    )
    indexable_routes = [route for route in routes if route.indexable]

    sitemap_files = write_sitemap_files(output_dir, base_url, indexable_routes)
    robots_path = write_text(output_dir / "robots.txt", build_robots_txt(base_url, config.routes.disallow_paths))
    sitemap_md_path = write_text(output_dir / "sitemap.md", build_sitemap_md(base_url, indexable_routes))

    article_links = build_article_links(config, base_url, [*marketing_content, *seo_content])
    llms_path = write_text(output_dir / "llms.txt", build_llms_txt(config, base_url, article_links))

    markdown_output_count = 0
    if config.generation.generate_public_markdown:
        targets = select_public_markdown_targets(
            config,
            marketing_content,
            build_seo_static_content_index_from_filesystem(config),
            seo_content,
        )
        written = await asyncio.gather(
            *(asyncio.to_thread(_write_page_markdown, output_dir, content) for content in targets)
        )
        markdown_output_count = sum(written)

    issues = validate_pages(programmatic_index.pages)
    logger.info(
        "Generated SEO artifacts: %d routes, %d sitemap files, %d markdown files, %d issues",
        len(routes),
        len(sitemap_files),
        markdown_output_count,
        len(issues),
    )

    return GenerateSeoArtifactsResult(
        sitemap_path=str(output_dir / "sitemap.xml"),
        sitemap_files=[str(path) for path in sitemap_files],
        robots_path=str(robots_path),
        sitemap_md_path=str(sitemap_md_path),
        llms_path=str(llms_path),
        marketing_routes_path=str(marketing_routes_path),
        marketing_content_path=str(marketing_content_path),
        seo_content_path=str(seo_content_path),
        programmatic_markdown_count=programmatic_markdown_count,
        markdown_output_count=markdown_output_count,
        routes=routes,
        programmatic_issues=issues,
    )


async def try_generate_seo_artifacts(
    config: LlmSeoConfig,
) -> Union[GenerateSeoArtifactsResult, GenerationFailure]:
    """Like :func:`generate_seo_artifacts`, returning duplicate routes as a value."""
    try:
        return await generate_seo_artifacts(config)
    except DuplicateRouteError as exc:
        logger.debug("Generation stopped on duplicate route %s", exc.path)
        return GenerationFailure(path=exc.path, sources=exc.sources, message=str(exc))
