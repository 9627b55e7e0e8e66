"""Configuration surface for generation and markdown delivery.

Every field is optional.  Directory fields may be relative; they resolve
against ``root_dir`` through the accessor properties on :class:`LlmSeoConfig`.
"""

import json
import logging
import os
from pathlib import Path
from typing import Callable, List, Literal, Optional, Union

import yaml
from pydantic import Field

from llm_seo.models.base import CamelModel
from llm_seo.models.page import Link, PageContent
from llm_seo.models.route import SeoRoute

logger = logging.getLogger(__name__)

ArticlesPlacement = Literal[
    "after-docs",
    "after-product",
    "after-company",
    "before-legal",
    "end",
    "omit",
]

ProgrammaticSource = Literal["auto", "generated", "templates"]


def _production_from_env() -> bool:
    return os.environ.get("LLM_SEO_ENV", "").strip().lower() == "production"


class LlmsSection(CamelModel):
    heading: str
    links: List[Link] = []
    description: Optional[List[str]] = None


class LlmsConfig(CamelModel):
    title: Optional[str] = None
    summary: Optional[str] = None
    contact: Optional[str] = None
    capabilities: Optional[List[str]] = None
    sections: List[LlmsSection] = []
    articles_placement: ArticlesPlacement = "after-company"
    include: Optional[Callable[[PageContent], bool]] = Field(default=None, exclude=True)
    template: Optional[str] = None
    """Raw llms.txt template.

    Supports ``{{siteName}}``, ``{{summary}}``, ``{{contact}}``,
    ``{{articles}}``, ``{{sections}}`` and ``{{baseUrl}}``.  When set it
    replaces the generated body entirely.
    """


class ContentConfig(CamelModel):
    marketing_dir: str = os.path.join("content", "marketing")
    pages_dir: str = os.path.join("content", "pages")
    programmatic_dir: str = os.path.join("content", "seo")
    generated_dir: str = os.path.join("content", "seo", "generated")


class RoutesConfig(CamelModel):
    static_routes: List[SeoRoute] = []
    noindex_paths: List[str] = []
    marketing_route_prefix: str = "/marketing"
    disallow_paths: List[str] = ["/admin", "/admin/"]


class MarkdownConfig(CamelModel):
    enable_accept_negotiation: bool = True
    enable_query_param: bool = True
    extension: str = ".md"


class GenerationConfig(CamelModel):
    output_dir: str = "public"
    content_cache_dir: str = "config"
    generate_public_markdown: bool = True
    generate_programmatic_markdown: bool = True
    public_markdown_from_programmatic: bool = False
    use_git_dates: bool = True
    programmatic_source: ProgrammaticSource = "auto"
    """Where programmatic pages come from.

    ``"auto"`` prefers pre-generated markdown when it yields any page and
    otherwise expands templates against datasets.
    """


class LlmSeoConfig(CamelModel):
    root_dir: str = Field(default_factory=os.getcwd)
    base_url: Optional[str] = None
    site_name: Optional[str] = None
    site_summary: Optional[str] = None
    contact: Optional[str] = None
    capabilities: Optional[List[str]] = None
    content: ContentConfig = Field(default_factory=ContentConfig)
    routes: RoutesConfig = Field(default_factory=RoutesConfig)
    llms: LlmsConfig = Field(default_factory=LlmsConfig)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    production: bool = Field(default_factory=_production_from_env)

    def resolve_dir(self, value: str) -> Path:
        path = Path(value)
        if path.is_absolute():
            return path
        return Path(self.root_dir) / path

    @property
    def marketing_dir(self) -> Path:
        return self.resolve_dir(self.content.marketing_dir)

    @property
    def pages_dir(self) -> Path:
        return self.resolve_dir(self.content.pages_dir)

    @property
    def programmatic_dir(self) -> Path:
        return self.resolve_dir(self.content.programmatic_dir)

    @property
    def templates_dir(self) -> Path:
        return self.programmatic_dir / "templates"

    @property
    def datasets_dir(self) -> Path:
        return self.programmatic_dir / "datasets"

    @property
    def generated_dir(self) -> Path:
        return self.resolve_dir(self.content.generated_dir)

    @property
    def output_dir(self) -> Path:
        return self.resolve_dir(self.generation.output_dir)

    @property
    def content_cache_dir(self) -> Path:
        return self.resolve_dir(self.generation.content_cache_dir)

    def resolved_base_url(self) -> str:
        """Base URL without trailing slash; ``APP_URL`` then localhost as fallback."""
        app_url = (self.base_url or os.environ.get("APP_URL") or "").rstrip("/")
        return app_url or "http://localhost:3333"


def load_config(path: Union[str, Path]) -> LlmSeoConfig:
    """Load an :class:`LlmSeoConfig` from a YAML or JSON file.

    A relative or missing ``rootDir`` resolves against the file's directory.
    """
    config_path = Path(path).resolve()
    text = config_path.read_text(encoding="utf-8")
    if config_path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    root_value = data.get("rootDir") or data.get("root_dir")
    root_dir = config_path.parent
    if root_value:
        root_dir = (config_path.parent / root_value).resolve()
    data = {key: value for key, value in data.items() if key not in ("rootDir", "root_dir")}
    config = LlmSeoConfig.model_validate({**data, "root_dir": str(root_dir)})
    logger.debug("Loaded config from %s (root_dir=%s)", config_path, config.root_dir)
    return config
