"""Content registry for static and pre-generated pages.

Pages are read from the filesystem (front matter dialect) and turned into
:class:`PageContent` records.  The ``seo_content.json`` cache written by the
generator can stand in for the filesystem scan in production.
"""

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from llm_seo.config import LlmSeoConfig
from llm_seo.models.page import PageContent
from llm_seo.services.files import read_json, scan_markdown_files
from llm_seo.services.normalizer import (
    as_boolean,
    as_number,
    as_string,
    as_string_list,
    normalize_group,
    normalize_schema_type,
)
from llm_seo.services.parser import ParsedMarkdown, parse_markdown_content
from llm_seo.services.paths import (
    build_breadcrumbs,
    build_markdown_path,
    build_route_path_from_file,
    label_from_path,
)

logger = logging.getLogger(__name__)

SEO_CONTENT_FILE = "seo_content.json"


def build_content_record(path_value: str, parsed: ParsedMarkdown) -> PageContent:
    """Combine a derived route with the parsed page into a content record.

    A ``path`` metadata key overrides the derived route.
    """
    meta = parsed.meta
    final_path = as_string(meta.get("path")) or path_value
    label = parsed.title or label_from_path(final_path)

    return PageContent(
        path=final_path,
        group=normalize_group(meta.get("group")),
        indexable=as_boolean(meta.get("indexable")) is not False,
        llms=as_boolean(meta.get("llms")),
        nav=as_boolean(meta.get("nav")),
        nav_order=as_number(meta.get("nav-order")),
        tags=as_string_list(meta.get("tags")),
        markdown_path=build_markdown_path(final_path),
        eyebrow=as_string(meta.get("eyebrow")),
        title=parsed.title or label,
        heading=parsed.heading or parsed.title or label,
        description=parsed.description or None,
        seo_title=parsed.seo_title,
        seo_description=parsed.seo_description,
        og_image=as_string(meta.get("og-image")),
        og_type=as_string(meta.get("og-type")),
        schema_type=normalize_schema_type(meta.get("schema") or meta.get("schema-type")),
        steps=parsed.steps,
        pricing=parsed.pricing,
        trust=parsed.trust,
        faqs=parsed.faqs,
        cta=parsed.cta,
        feature_list=parsed.feature_list,
        sections=parsed.extra_sections,
        related_links=parsed.related_links,
        resource_links=parsed.resource_links,
        published_at=as_string(meta.get("published")),
        updated_at=as_string(meta.get("updated")),
        breadcrumbs=build_breadcrumbs(final_path),
    )


def build_index_from_dir(directory: Path, skip_prefix: Optional[str] = None) -> List[PageContent]:
    """Parse every markdown file under *directory* into a content record.

    Records whose path starts with *skip_prefix* are left out; they belong to
    the marketing index.
    """
    records: List[PageContent] = []
    for relative_path in scan_markdown_files(directory):
        path_value = build_route_path_from_file(relative_path)
        if not path_value:
            continue
        markdown = (directory / relative_path).read_text(encoding="utf-8")
        record = build_content_record(path_value, parse_markdown_content(markdown))
        if skip_prefix and record.path.startswith(skip_prefix):
            logger.debug("Skipping %s: %s is under the marketing prefix", relative_path, record.path)
            continue
        records.append(record)
    return records


def build_seo_static_content_index_from_filesystem(config: LlmSeoConfig) -> List[PageContent]:
    return build_index_from_dir(config.pages_dir, skip_prefix=config.routes.marketing_route_prefix)


def build_seo_content_index_from_filesystem(config: LlmSeoConfig) -> List[PageContent]:
    """Static pages followed by pre-generated programmatic pages."""
    return build_seo_static_content_index_from_filesystem(config) + build_index_from_dir(config.generated_dir)


def read_seo_content_cache(config: LlmSeoConfig) -> Optional[List[PageContent]]:
    """Records from ``seo_content.json``, or *None* when the cache is unusable."""
    cache_path = config.content_cache_dir / SEO_CONTENT_FILE
    data = read_json(cache_path)
    if not isinstance(data, list):
        return None
    try:
        return [PageContent.model_validate(entry) for entry in data]
    except ValidationError as exc:
        logger.debug("Ignoring invalid content cache %s: %s", cache_path, exc)
        return None
