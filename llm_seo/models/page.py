from typing import List, Literal, Optional, Union

from pydantic import model_validator

from llm_seo.models.base import CamelModel

RouteGroup = Literal["use-cases", "company", "resources", "content"]
SchemaType = Literal["software", "article", "product", "webpage"]


class Link(CamelModel):
    label: str
    href: str


class Breadcrumb(CamelModel):
    name: str
    path: str


class Cta(CamelModel):
    label: str
    href: str
    note: Optional[str] = None


class Faq(CamelModel):
    question: str
    answer: str


class Section(CamelModel):
    """Free-form section kept verbatim: heading plus raw markdown."""

    heading: str
    markdown: str


class Step(CamelModel):
    title: str
    description: str = ""


class Pricing(CamelModel):
    headline: str
    detail: str


class TrustItem(CamelModel):
    title: str
    description: str = ""


class Trust(CamelModel):
    title: str
    items: List[TrustItem] = []


class PageContent(CamelModel):
    """Unified record for one page, whichever source produced it."""

    path: str
    group: RouteGroup = "content"
    indexable: bool = True
    published_at: Optional[str] = None
    updated_at: Optional[str] = None
    llms: Optional[bool] = None
    nav: Optional[bool] = None
    nav_order: Optional[Union[int, float]] = None
    tags: Optional[List[str]] = None
    markdown_path: Optional[str] = None
    eyebrow: Optional[str] = None
    title: str = ""
    heading: str = ""
    description: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    og_image: Optional[str] = None
    og_type: Optional[str] = None
    schema_type: Optional[SchemaType] = None
    cta: Optional[Cta] = None
    steps: Optional[List[Step]] = None
    pricing: Optional[Pricing] = None
    trust: Optional[Trust] = None
    faqs: Optional[List[Faq]] = None
    feature_list: Optional[List[str]] = None
    sections: Optional[List[Section]] = None
    related_links: Optional[List[Link]] = None
    resource_links: Optional[List[Link]] = None
    breadcrumbs: Optional[List[Breadcrumb]] = None

    @model_validator(mode="after")
    def _fill_derived_fields(self) -> "PageContent":
        if not self.heading:
            self.heading = self.title
        if not self.markdown_path:
            self.markdown_path = "/index.md" if self.path == "/" else f"{self.path}.md"
        return self


class MarketingContent(PageContent):
    """Marketing page: content plus its label, source file and raw body."""

    label: str
    source_file: str
    markdown: Optional[str] = None  # body without the [meta] block
