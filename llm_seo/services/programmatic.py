"""Programmatic SEO pages: templates expanded against JSON datasets.

A template declares a route pattern (``/guides/{slug}``) and content strings
with ``{{token}}`` placeholders.  Each dataset record yields one page.  Pages
that were already rendered to markdown under the generated directory can be
read back instead, depending on ``generation.programmatic_source``.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from pydantic import ValidationError

from llm_seo.config import LlmSeoConfig
from llm_seo.exceptions import DuplicateRouteError
from llm_seo.models.page import Cta, Faq, Link, PageContent, Section
from llm_seo.models.programmatic import (
    ProgrammaticIndex,
    ProgrammaticPage,
    ProgrammaticRecord,
    ProgrammaticTemplate,
)
from llm_seo.models.route import SeoRoute
from llm_seo.services.files import read_json, scan_markdown_files, write_text
from llm_seo.services.parser import parse_markdown_content
from llm_seo.services.paths import (
    build_breadcrumbs,
    build_route_path_from_file,
    markdown_output_name,
    normalize_path,
    title_case,
)
from llm_seo.services.registry import build_content_record
from llm_seo.services.renderer import render_seo_markdown

logger = logging.getLogger(__name__)

TokenMap = Dict[str, str]

_TEMPLATE_TOKEN = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")
_BRACE_TOKEN = re.compile(r"\{([A-Za-z0-9_-]+)\}")
_COLON_TOKEN = re.compile(r":([A-Za-z0-9_-]+)")
_UNRESOLVED = re.compile(r"\{.+?\}|:[A-Za-z0-9_-]+")

DEFAULT_RELATED_LIMIT = 6


def render_template_string(value: str, tokens: TokenMap) -> str:
    """Replace ``{{ token }}`` placeholders; unknown tokens become empty."""
    return _TEMPLATE_TOKEN.sub(lambda match: tokens.get(match.group(1), ""), value)


def build_token_map(record: ProgrammaticRecord) -> TokenMap:
    """Tokens of a record: its ``tokens`` bag, then string extras, then ``slug``."""
    tokens = {key: str(value) for key, value in (record.tokens or {}).items()}
    for key, value in (record.model_extra or {}).items():
        if isinstance(value, str):
            tokens[key] = value
    tokens["slug"] = record.slug
    return tokens


def resolve_route(route: str, tokens: TokenMap) -> Optional[str]:
    """Fill ``{token}`` and ``:token`` segments of *route*.

    Returns *None* when the result still holds placeholders or looks like a URL
    rather than a path.
    """
    resolved = _BRACE_TOKEN.sub(lambda match: tokens.get(match.group(1), ""), route)
    resolved = _COLON_TOKEN.sub(lambda match: tokens.get(match.group(1), ""), resolved)
    resolved = normalize_path(resolved)
    if ":/" in resolved or _UNRESOLVED.search(resolved) or "//" in resolved:
        return None
    return resolved


def _render_text(value: Optional[str], tokens: TokenMap) -> str:
    return render_template_string(value or "", tokens).strip()


def _record_or_template(value: Optional[str], template_value: Optional[str], tokens: TokenMap) -> str:
    if value:
        return value.strip()
    return _render_text(template_value, tokens)


def _render_sections(sections: Optional[List[Section]], tokens: TokenMap) -> Optional[List[Section]]:
    if not sections:
        return None
    rendered = [
        Section(heading=_render_text(section.heading, tokens), markdown=_render_text(section.markdown, tokens))
        for section in sections
    ]
    return [section for section in rendered if section.heading or section.markdown]


def _render_faqs(faqs: Optional[List[Faq]], tokens: TokenMap) -> Optional[List[Faq]]:
    if not faqs:
        return None
    rendered = [
        Faq(question=_render_text(faq.question, tokens), answer=_render_text(faq.answer, tokens)) for faq in faqs
    ]
    return [faq for faq in rendered if faq.question and faq.answer]


def _render_list(items: Optional[List[str]], tokens: TokenMap) -> Optional[List[str]]:
    if not items:
        return None
    rendered = (_render_text(item, tokens) for item in items)
    return [item for item in rendered if item]


def _render_cta(cta: Optional[Cta], tokens: TokenMap) -> Optional[Cta]:
    if not cta:
        return None
    return Cta(
        label=render_template_string(cta.label, tokens),
        href=render_template_string(cta.href, tokens),
        note=render_template_string(cta.note, tokens) if cta.note else None,
    )


def read_templates(templates_dir: Path) -> List[ProgrammaticTemplate]:
    """Templates from ``*.json`` files, in file name order; files without an id are skipped."""
    if not templates_dir.is_dir():
        return []
    templates: List[ProgrammaticTemplate] = []
    for template_path in sorted(templates_dir.glob("*.json")):
        data = read_json(template_path)
        if not isinstance(data, dict) or not data.get("id"):
            continue
        try:
            templates.append(ProgrammaticTemplate.model_validate(data))
        except ValidationError as exc:
            logger.debug("Skipping invalid template %s: %s", template_path, exc)
    return templates


def read_dataset(datasets_dir: Path, template: ProgrammaticTemplate) -> List[ProgrammaticRecord]:
    data = read_json(datasets_dir / (template.dataset or f"{template.id}.json"))
    if not isinstance(data, list):
        return []
    records: List[ProgrammaticRecord] = []
    for entry in data:
        if not isinstance(entry, dict) or not isinstance(entry.get("slug"), str):
            continue
        try:
            records.append(ProgrammaticRecord.model_validate(entry))
        except ValidationError as exc:
            logger.debug("Skipping invalid record %s of %s: %s", entry.get("slug"), template.id, exc)
    return records


def build_page(template: ProgrammaticTemplate, record: ProgrammaticRecord, route_path: str) -> ProgrammaticPage:
    """Expand *template* for one record.

    Record values win verbatim; template strings are rendered with the
    record's tokens otherwise.
    """
    tokens = build_token_map(record)
    template_content = template.content

    title = record.title or _render_text(template_content.title, tokens)
    heading = record.heading or _render_text(template_content.heading or template_content.title, tokens)
    description = _record_or_template(record.description, template_content.description, tokens)
    seo_title = _record_or_template(record.seo_title, template_content.seo_title, tokens)
    seo_description = _record_or_template(record.seo_description, template_content.seo_description, tokens)

    group = template.group or "content"
    indexable = next(value for value in (record.indexable, template.indexable, True) if value is not None)
    llms = record.llms if record.llms is not None else template.llms

    content = PageContent(
        path=route_path,
        group=group,
        indexable=indexable,
        llms=llms,
        tags=record.tags,
        published_at=record.published_at,
        updated_at=record.updated_at,
        eyebrow=record.eyebrow or template.eyebrow,
        title=title,
        heading=heading or title,
        description=description or None,
        seo_title=seo_title or None,
        seo_description=seo_description or None,
        og_image=record.og_image or template.og_image,
        og_type=record.og_type or template.og_type,
        schema_type=record.schema_type or template.schema_type,
        cta=record.cta or _render_cta(template.cta, tokens),
        faqs=record.faqs or _render_faqs(template_content.faqs, tokens),
        feature_list=record.feature_list or _render_list(template_content.feature_list, tokens),
        sections=record.sections or _render_sections(template_content.sections, tokens),
        breadcrumbs=build_breadcrumbs(route_path),
    )

    return ProgrammaticPage(
        path=route_path,
        label=record.label or title or title_case(record.slug),
        group=group,
        indexable=indexable,
        llms=llms,
        published_at=record.published_at,
        updated_at=record.updated_at,
        template_id=template.id,
        slug=record.slug,
        tags=record.tags,
        related_slugs=record.related_slugs,
        hub=record.hub or (template.linking.hub if template.linking else None),
        content=content,
    )


def _related_by_tag(page: ProgrammaticPage, template_pages: List[ProgrammaticPage], limit: int) -> List[Link]:
    scores: Dict[str, int] = {}
    candidates: Dict[str, ProgrammaticPage] = {}
    for tag in page.tags or []:
        for candidate in template_pages:
            if candidate.path == page.path or tag not in (candidate.tags or []):
                continue
            scores[candidate.path] = scores.get(candidate.path, 0) + 1
            candidates[candidate.path] = candidate
    # sorted() is stable: equal scores keep first-seen order
    ranked = sorted(scores, key=lambda path_key: scores[path_key], reverse=True)
    return [Link(label=candidates[key].label, href=key) for key in ranked[:limit]]


def apply_linking(
    template: ProgrammaticTemplate,
    template_pages: List[ProgrammaticPage],
    page_map: Dict[str, ProgrammaticPage],
) -> None:
    """Fill related and resource links of one template's pages in place."""
    linking = template.linking
    limit = linking.related_limit if linking and linking.related_limit is not None else DEFAULT_RELATED_LIMIT
    include_hub = linking.include_hub_in_resources if linking else None
    include_hub = True if include_hub is None else include_hub
    by_slug = {}
    for candidate in template_pages:
        by_slug.setdefault(candidate.slug, candidate)

    for page in template_pages:
        related: List[Link] = []
        if page.related_slugs:
            for slug in page.related_slugs:
                target = page_map.get(normalize_path(slug)) if slug.startswith("/") else by_slug.get(slug)
                if target:
                    related.append(Link(label=target.label, href=target.path))
        elif linking and linking.related_by == "tag" and page.tags:
            related = _related_by_tag(page, template_pages, limit)

        if related:
            page.content.related_links = related
        if include_hub and page.hub:
            page.content.resource_links = [page.hub]


def build_programmatic_index_from_templates(
    config: LlmSeoConfig, templates: Optional[List[ProgrammaticTemplate]] = None
) -> ProgrammaticIndex:
    """Expand every template against its dataset.

    Raises :class:`DuplicateRouteError` when two records resolve to the same
    route, whichever templates they come from.
    """
    if templates is None:
        templates = read_templates(config.templates_dir)
    pages: List[ProgrammaticPage] = []
    page_map: Dict[str, ProgrammaticPage] = {}
    pages_by_template: Dict[str, List[ProgrammaticPage]] = {}

    for template in templates:
        template_pages: List[ProgrammaticPage] = []
        for record in read_dataset(config.datasets_dir, template):
            route_path = resolve_route(template.route, build_token_map(record))
            if not route_path:
                logger.debug("Skipping record %s of %s: route %s did not resolve", record.slug, template.id, template.route)
                continue
            existing = page_map.get(route_path)
            if existing:
                raise DuplicateRouteError(
                    f"Duplicate programmatic SEO path detected: {route_path} "
                    f"(templates: {existing.template_id}, {template.id})",
                    path=route_path,
                    sources=[existing.template_id, template.id],
                )
            page = build_page(template, record, route_path)
            page_map[route_path] = page
            pages.append(page)
            template_pages.append(page)
        pages_by_template[template.id] = template_pages

    for template in templates:
        apply_linking(template, pages_by_template.get(template.id, []), page_map)

    return ProgrammaticIndex(templates=templates, pages=pages, page_map=page_map)


def build_programmatic_pages_from_markdown(config: LlmSeoConfig) -> List[ProgrammaticPage]:
    """Read pre-generated pages back from the generated directory.

    The first file claiming a route wins; later ones are ignored.
    """
    pages: List[ProgrammaticPage] = []
    seen = set()
    generated_dir = config.generated_dir
    for relative_path in scan_markdown_files(generated_dir):
        parsed = parse_markdown_content((generated_dir / relative_path).read_text(encoding="utf-8"))
        meta_path = parsed.meta.get("path")
        if isinstance(meta_path, str) and meta_path.strip():
            route_path = normalize_path(meta_path.strip())
        else:
            route_path = build_route_path_from_file(relative_path) or "/"
        if route_path in seen:
            continue
        seen.add(route_path)

        content = build_content_record(route_path, parsed._replace(meta={**parsed.meta, "path": route_path}))
        segments = [segment for segment in route_path.split("/") if segment]
        pages.append(
            ProgrammaticPage(
                path=route_path,
                label=content.title,
                group=content.group,
                indexable=content.indexable,
                published_at=content.published_at,
                updated_at=content.updated_at,
                llms=content.llms,
                template_id="generated",
                slug=segments[-1] if segments else route_path,
                tags=content.tags,
                content=content,
            )
        )
    return pages


def build_programmatic_index(config: LlmSeoConfig) -> ProgrammaticIndex:
    """Programmatic pages according to ``generation.programmatic_source``.

    ``auto`` uses pre-generated markdown when it yields any page and expands
    templates otherwise; ``generated`` and ``templates`` force one source.
    """
    source = config.generation.programmatic_source
    templates = read_templates(config.templates_dir)
    if source != "templates":
        pages = build_programmatic_pages_from_markdown(config)
        if pages or source == "generated":
            return ProgrammaticIndex(templates=templates, pages=pages, page_map={page.path: page for page in pages})
    return build_programmatic_index_from_templates(config, templates)


def get_programmatic_page_by_path(index: ProgrammaticIndex, path_value: str) -> Optional[ProgrammaticPage]:
    return index.page_map.get(normalize_path(path_value))


def get_programmatic_seo_routes(index: ProgrammaticIndex) -> List[SeoRoute]:
    return [
        SeoRoute(
            path=page.path,
            label=page.label,
            group=page.group,
            indexable=page.indexable,
            published_at=page.published_at,
            updated_at=page.updated_at,
            nav=False,
            llms=page.llms,
        )
        for page in index.pages
    ]


class RoutePattern(NamedTuple):
    template_id: str
    pattern: str


def get_programmatic_route_patterns(index: ProgrammaticIndex) -> List[RoutePattern]:
    """Template routes in ``:token`` form, for routers that need patterns."""
    return [
        RoutePattern(template.id, _BRACE_TOKEN.sub(r":\1", normalize_path(template.route)))
        for template in index.templates
    ]


def write_programmatic_markdown_files(config: LlmSeoConfig) -> int:
    """Render every template-built page into the generated directory.

    Returns the number of files written.
    """
    pages = build_programmatic_index_from_templates(config).pages
    config.generated_dir.mkdir(parents=True, exist_ok=True)
    for page in pages:
        write_text(config.generated_dir / markdown_output_name(page.content.path), render_seo_markdown(page.content))
    logger.debug("Wrote %d programmatic markdown files to %s", len(pages), config.generated_dir)
    return len(pages)
