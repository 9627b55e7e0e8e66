from typing import List, Literal, Optional

from llm_seo.models.base import CamelModel
from llm_seo.models.route import SeoRoute


class ValidationIssue(CamelModel):
    level: Literal["warning", "error"]
    message: str
    path: Optional[str] = None


class GenerateSeoArtifactsResult(CamelModel):
    sitemap_path: str
    sitemap_files: List[str]
    robots_path: str
    sitemap_md_path: str
    llms_path: str
    marketing_routes_path: str
    marketing_content_path: str
    seo_content_path: str
    programmatic_markdown_count: int
    markdown_output_count: int
    routes: List[SeoRoute]
    programmatic_issues: List[ValidationIssue]


class GenerationFailure(CamelModel):
    """Fatal content error returned as a value instead of raised."""

    kind: Literal["duplicate-route"] = "duplicate-route"
    path: str
    sources: List[str]
    message: str
