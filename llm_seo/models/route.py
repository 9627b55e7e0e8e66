from typing import Optional, Union

from llm_seo.models.base import CamelModel
from llm_seo.models.page import RouteGroup


class SeoRoute(CamelModel):
    path: str
    label: str
    group: RouteGroup = "content"
    indexable: bool = True
    published_at: Optional[str] = None
    updated_at: Optional[str] = None
    nav: Optional[bool] = None
    nav_order: Optional[Union[int, float]] = None
    llms: Optional[bool] = None


class MarketingRoute(SeoRoute):
    """Projection of a marketing page used for listing and navigation."""

    component: str = "marketing_markdown"


class MarketingRouteRecord(MarketingRoute):
    source_file: str
