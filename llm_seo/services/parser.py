"""Page parsers for the two content dialects.

:func:`parse_markdown_content` reads static and generated pages (front matter
first, ``[meta]`` block as fallback); :func:`parse_marketing_markdown` reads
marketing pages (``[meta]`` block only).  Both share the section pipeline in
:mod:`llm_seo.services.sections`.
"""

from typing import List, NamedTuple, Optional

from llm_seo.models.page import Cta, Faq, Link, Pricing, Section, Step, Trust
from llm_seo.services.metadata import parse_front_matter, parse_meta_block
from llm_seo.services.normalizer import MetaBlock, as_string, normalize_meta
from llm_seo.services.sections import (
    MARKETING_RULES,
    PAGE_RULES,
    SectionRule,
    build_sections,
    classify_sections,
    extract_summary,
    lex_blocks,
    strip_markdown,
)


class ParsedMarkdown(NamedTuple):
    meta: MetaBlock
    body: str
    title: str
    heading: str
    description: str
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    steps: Optional[List[Step]] = None
    pricing: Optional[Pricing] = None
    trust: Optional[Trust] = None
    faqs: Optional[List[Faq]] = None
    cta: Optional[Cta] = None
    related_links: Optional[List[Link]] = None
    resource_links: Optional[List[Link]] = None
    feature_list: Optional[List[str]] = None
    extra_sections: Optional[List[Section]] = None


def _meta_text(meta: MetaBlock, *keys: str) -> str:
    for key in keys:
        value = as_string(meta.get(key))
        if value:
            return strip_markdown(value)
    return ""


def _parse(meta: MetaBlock, body: str, rules: List[SectionRule]) -> ParsedMarkdown:
    meta = normalize_meta(meta)
    blocks = lex_blocks(body)
    title, description = extract_summary(blocks)
    fields, extras = classify_sections(build_sections(blocks, body), rules)

    meta_title = _meta_text(meta, "title")
    meta_heading = _meta_text(meta, "heading")
    meta_description = _meta_text(meta, "description")
    seo_title = _meta_text(meta, "seotitle", "seo-title")
    seo_description = _meta_text(meta, "seo-description")

    # Metadata only supplies a CTA when no CTA section was found
    if "cta" not in fields:
        cta_label = _meta_text(meta, "cta-label")
        cta_href = as_string(meta.get("cta-href")) or ""
        if cta_label and cta_href:
            fields["cta"] = Cta(label=cta_label, href=cta_href, note=_meta_text(meta, "cta-note") or None)

    return ParsedMarkdown(
        meta=meta,
        body=body,
        title=meta_title or title,
        heading=meta_heading or title or meta_title,
        description=meta_description or description,
        seo_title=seo_title or None,
        seo_description=seo_description or None,
        extra_sections=extras or None,
        **fields,
    )


def parse_markdown_content(markdown: str) -> ParsedMarkdown:
    meta, body = parse_front_matter(markdown)
    if not meta:
        meta, body = parse_meta_block(markdown)
    return _parse(meta, body, PAGE_RULES)


def parse_marketing_markdown(markdown: str) -> ParsedMarkdown:
    meta, body = parse_meta_block(markdown)
    return _parse(meta, body, MARKETING_RULES)
