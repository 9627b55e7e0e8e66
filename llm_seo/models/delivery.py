from typing import Dict, Optional

from llm_seo.models.base import CamelModel


class MarkdownRequest(CamelModel):
    """Framework-neutral view of an incoming request."""

    method: str = "GET"
    url: str
    headers: Dict[str, Optional[str]] = {}
    query: Dict[str, Optional[str]] = {}


class MarkdownResponse(CamelModel):
    status: int = 200
    headers: Dict[str, str]
    body: str
