"""Render a :class:`PageContent` back into front matter plus markdown."""

import re
from typing import List, Optional

from llm_seo.models.page import Cta, Faq, Link, PageContent, Pricing, Section, Step, Trust


def _escape_front_matter_value(value: str) -> str:
    """Quote values that would break a ``key: value`` line."""
    if not value:
        return '""'
    if re.search(r"[:\n]", value):
        return '"' + value.replace('"', '\\"') + '"'
    return value


def _flag(value: bool) -> str:
    return "true" if value else "false"


def make_front_matter(content: PageContent) -> str:
    lines = [f"title: {_escape_front_matter_value(content.title)}"]
    if content.description:
        lines.append(f"description: {_escape_front_matter_value(content.description)}")
    if content.seo_title:
        lines.append(f"seotitle: {_escape_front_matter_value(content.seo_title)}")
    if content.seo_description:
        lines.append(f"seo-description: {_escape_front_matter_value(content.seo_description)}")
    if content.group:
        lines.append(f"group: {content.group}")
    lines.append(f"indexable: {_flag(content.indexable)}")
    if content.llms is not None:
        lines.append(f"llms: {_flag(content.llms)}")
    if content.nav is not None:
        lines.append(f"nav: {_flag(content.nav)}")
    if content.nav_order is not None:
        lines.append(f"nav-order: {content.nav_order}")
    if content.schema_type:
        lines.append(f"schema: {content.schema_type}")
    if content.og_type:
        lines.append(f"og-type: {content.og_type}")
    if content.og_image:
        lines.append(f"og-image: {_escape_front_matter_value(content.og_image)}")
    if content.eyebrow:
        lines.append(f"eyebrow: {_escape_front_matter_value(content.eyebrow)}")
    if content.published_at:
        lines.append(f"published: {content.published_at}")
    if content.updated_at:
        lines.append(f"updated: {content.updated_at}")
    if content.tags:
        lines.append("tags:")
        lines.extend(f"  - {_escape_front_matter_value(tag)}" for tag in content.tags)
    if content.path:
        lines.append(f"path: {_escape_front_matter_value(content.path)}")
    return "\n".join(["---", *lines, "---", ""])


def _section(heading: str, markdown: str) -> str:
    if not markdown.strip():
        return ""
    return f"## {heading}\n{markdown.strip()}\n"


def _link_items(links: List[Link]) -> str:
    return "\n".join(f"- [{link.label}]({link.href})" for link in links)


def _titled(title: str, description: str) -> str:
    # A dangling separator would be read back as part of the title
    return f"**{title}** - {description}" if description else f"**{title}**"


def _steps(steps: List[Step]) -> str:
    items = "\n".join(
        f"{index}. {_titled(step.title, step.description)}" for index, step in enumerate(steps, start=1)
    )
    return _section("How it works", items)


def _pricing(pricing: Pricing) -> str:
    return _section("Pricing", "\n\n".join(part for part in (pricing.headline, pricing.detail) if part))


def _trust(trust: Trust) -> str:
    if not trust.items:
        return ""
    items = "\n".join(f"- {_titled(item.title, item.description)}" for item in trust.items)
    return _section(trust.title, items)


def _extras(sections: List[Section]) -> str:
    return "\n".join(_section(section.heading, section.markdown) for section in sections)


def _faqs(faqs: List[Faq]) -> str:
    return _section("FAQs", "\n".join(f"- **{faq.question}** {faq.answer}" for faq in faqs))


def _cta(cta: Optional[Cta]) -> str:
    if not cta:
        return ""
    note = f"{cta.note}\n\n" if cta.note else ""
    return _section("Ready to send it?", f"{note}[{cta.label}]({cta.href})")


def render_seo_markdown(content: PageContent) -> str:
    """Return the markdown document for *content*.

    Sections follow a fixed order and empty blocks are omitted, so the output
    is stable for identical input.
    """
    blocks = [f"# {content.title}"]
    if content.description:
        blocks.append(content.description)
    if content.steps:
        blocks.append(_steps(content.steps))
    if content.feature_list:
        blocks.append(_section("Feature list", "\n".join(f"- {item}" for item in content.feature_list)))
    if content.pricing:
        blocks.append(_pricing(content.pricing))
    if content.trust:
        blocks.append(_trust(content.trust))
    if content.sections:
        blocks.append(_extras(content.sections))
    if content.faqs:
        blocks.append(_faqs(content.faqs))
    if content.resource_links:
        blocks.append(_section("Resources", _link_items(content.resource_links)))
    if content.related_links:
        blocks.append(_section("Related", _link_items(content.related_links)))
    blocks.append(_cta(content.cta))

    body = "\n\n".join(block for block in blocks if block).strip()
    return f"{make_front_matter(content)}{body}\n"
