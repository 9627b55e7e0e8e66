from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict

from llm_seo.models.base import CamelModel
from llm_seo.models.page import Cta, Faq, Link, PageContent, RouteGroup, SchemaType, Section


class TemplateContent(CamelModel):
    """Content strings of a template; each may contain ``{{token}}`` placeholders."""

    title: str
    heading: Optional[str] = None
    description: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    sections: Optional[List[Section]] = None
    faqs: Optional[List[Faq]] = None
    feature_list: Optional[List[str]] = None


class LinkingPolicy(CamelModel):
    hub: Optional[Link] = None
    related_by: Optional[Literal["tag", "hub"]] = None
    related_limit: Optional[int] = None
    include_hub_in_resources: Optional[bool] = None


class ProgrammaticTemplate(CamelModel):
    id: str
    route: str
    group: Optional[RouteGroup] = None
    indexable: Optional[bool] = None
    llms: Optional[bool] = None
    schema_type: Optional[SchemaType] = None
    og_type: Optional[str] = None
    og_image: Optional[str] = None
    eyebrow: Optional[str] = None
    cta: Optional[Cta] = None
    content: TemplateContent
    linking: Optional[LinkingPolicy] = None
    dataset: Optional[str] = None


class ProgrammaticRecord(CamelModel):
    """One dataset row.

    Keys that are not declared below are kept as extras; string extras become
    substitution tokens.
    """

    model_config = ConfigDict(extra="allow")

    slug: str
    label: Optional[str] = None
    title: Optional[str] = None
    heading: Optional[str] = None
    description: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    eyebrow: Optional[str] = None
    og_image: Optional[str] = None
    og_type: Optional[str] = None
    schema_type: Optional[SchemaType] = None
    cta: Optional[Cta] = None
    sections: Optional[List[Section]] = None
    faqs: Optional[List[Faq]] = None
    feature_list: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    related_slugs: Optional[List[str]] = None
    hub: Optional[Link] = None
    tokens: Optional[Dict[str, Any]] = None
    published_at: Optional[str] = None
    updated_at: Optional[str] = None
    indexable: Optional[bool] = None
    llms: Optional[bool] = None


class ProgrammaticPage(CamelModel):
    path: str
    label: str
    group: RouteGroup = "content"
    indexable: bool = True
    published_at: Optional[str] = None
    updated_at: Optional[str] = None
    llms: Optional[bool] = None
    template_id: str
    slug: str
    tags: Optional[List[str]] = None
    related_slugs: Optional[List[str]] = None
    hub: Optional[Link] = None
    content: PageContent


class ProgrammaticIndex(CamelModel):
    templates: List[ProgrammaticTemplate] = []
    pages: List[ProgrammaticPage] = []
    page_map: Dict[str, ProgrammaticPage] = {}
