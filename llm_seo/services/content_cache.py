"""Explicit owner of the in-process content indexes.

Each index is built on first use and kept until :meth:`ContentCache.refresh`.
In production the JSON caches written by the generator are read first and the
filesystem is only scanned when they are missing or unreadable.
"""

import logging
from typing import Iterable, List, Literal, Optional

from llm_seo.config import LlmSeoConfig
from llm_seo.models.page import MarketingContent, PageContent
from llm_seo.models.programmatic import ProgrammaticIndex, ProgrammaticPage
from llm_seo.models.route import MarketingRoute, SeoRoute
from llm_seo.services.marketing import (
    build_marketing_content_index_from_filesystem,
    build_marketing_routes_from_filesystem,
    read_marketing_content_file,
    read_marketing_routes_file,
)
from llm_seo.services.paths import normalize_path
from llm_seo.services.programmatic import build_programmatic_index, get_programmatic_seo_routes
from llm_seo.services.registry import build_seo_content_index_from_filesystem, read_seo_content_cache

logger = logging.getLogger(__name__)

ContentSource = Literal["auto", "filesystem", "file"]


def dedupe_routes(routes: Iterable[SeoRoute]) -> List[SeoRoute]:
    """Keep the first route for every path."""
    seen = set()
    unique: List[SeoRoute] = []
    for route in routes:
        if route.path in seen:
            continue
        seen.add(route.path)
        unique.append(route)
    return unique


class ContentCache:
    def __init__(self, config: LlmSeoConfig) -> None:
        self.config = config
        self._seo_content: Optional[List[PageContent]] = None
        self._marketing_content: Optional[List[MarketingContent]] = None
        self._marketing_routes: Optional[List[MarketingRoute]] = None
        self._programmatic_index: Optional[ProgrammaticIndex] = None

    def refresh(self) -> None:
        """Drop every memoized index; the next access rebuilds it."""
        self._seo_content = None
        self._marketing_content = None
        self._marketing_routes = None
        self._programmatic_index = None

    def _source(self, source: Optional[ContentSource]) -> ContentSource:
        if source:
            return source
        return "auto" if self.config.production else "filesystem"

    def seo_content(self, refresh: bool = False, source: Optional[ContentSource] = None) -> List[PageContent]:
        """Static and pre-generated pages."""
        if self._seo_content is not None and not refresh:
            return self._seo_content
        source = self._source(source)
        content = read_seo_content_cache(self.config) if source in ("auto", "file") else None
        if content is None and source in ("auto", "filesystem"):
            if source == "auto":
                logger.debug("Content cache unavailable, scanning %s", self.config.pages_dir)
            content = build_seo_content_index_from_filesystem(self.config)
        self._seo_content = content or []
        return self._seo_content

    def marketing_content(
        self, refresh: bool = False, source: Optional[ContentSource] = None
    ) -> List[MarketingContent]:
        if self._marketing_content is not None and not refresh:
            return self._marketing_content
        source = self._source(source)
        content = read_marketing_content_file(self.config) if source in ("auto", "file") else None
        if content is None and source in ("auto", "filesystem"):
            content = build_marketing_content_index_from_filesystem(self.config, include_markdown=False)
        self._marketing_content = content or []
        return self._marketing_content

    def marketing_routes(self, refresh: bool = False, source: Optional[ContentSource] = None) -> List[MarketingRoute]:
        if self._marketing_routes is not None and not refresh:
            return self._marketing_routes
        source = self._source(source)
        routes = read_marketing_routes_file(self.config) if source in ("auto", "file") else None
        if routes is None and source in ("auto", "filesystem"):
            routes = [
                MarketingRoute.model_validate(route.model_dump(exclude={"source_file"}))
                for route in build_marketing_routes_from_filesystem(self.config)
            ]
        self._marketing_routes = routes or []
        return self._marketing_routes

    def programmatic_index(self, refresh: bool = False) -> ProgrammaticIndex:
        if self._programmatic_index is None or refresh:
            self._programmatic_index = build_programmatic_index(self.config)
        return self._programmatic_index

    def seo_content_by_path(self, path_value: str) -> Optional[PageContent]:
        """Content for *path_value*; when two pages share a path the later one wins."""
        normalized = normalize_path(path_value)
        matches = [entry for entry in self.seo_content() if entry.path == normalized]
        return matches[-1] if matches else None

    def marketing_content_by_path(self, path_value: str) -> Optional[MarketingContent]:
        normalized = normalize_path(path_value)
        return next((entry for entry in self.marketing_content() if entry.path == normalized), None)

    def programmatic_page_by_path(self, path_value: str) -> Optional[ProgrammaticPage]:
        return self.programmatic_index().page_map.get(normalize_path(path_value))

    def routes(self) -> List[SeoRoute]:
        """Static, marketing and programmatic routes, first occurrence per path."""
        return dedupe_routes(
            [
                *self.config.routes.static_routes,
                *self.marketing_routes(),
                *get_programmatic_seo_routes(self.programmatic_index()),
            ]
        )

    def resolve_content(self, path_value: str) -> Optional[PageContent]:
        """Marketing pages first, then static and generated pages, then programmatic ones."""
        content = self.marketing_content_by_path(path_value) or self.seo_content_by_path(path_value)
        if content is not None:
            return content
        page = self.programmatic_page_by_path(path_value)
        return page.content if page else None

    def is_indexable(self, path_value: str) -> bool:
        normalized = normalize_path(path_value)
        if normalized in {normalize_path(path) for path in self.config.routes.noindex_paths}:
            return False
        content = self.resolve_content(normalized)
        if content is not None:
            return content.indexable
        route = next((route for route in self.routes() if route.path == normalized), None)
        return route.indexable if route else False
