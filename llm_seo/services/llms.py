"""llms.txt builder.

The file opens with the site title, summary, contact and capabilities, then
lists the configured sections.  An ``Articles`` section linking the markdown
copy of every eligible page is inserted according to
``llms.articles_placement``.
"""

import re
from typing import List, NamedTuple, Optional

from llm_seo.config import LlmSeoConfig
from llm_seo.models.page import Link

DEFAULT_FOOTER = "Human-friendly pages are the same paths without .md."

# placement -> (heading keyword, insert after the match)
_PLACEMENT_ANCHORS = {
    "after-docs": ("doc", True),
    "after-product": ("product", True),
    "after-company": ("company", True),
    "before-legal": ("legal", False),
}


class _SectionBlock(NamedTuple):
    heading: str
    lines: List[str]


def _link_line(link: Link) -> str:
    return f"- [{link.label}]({link.href})"


def _section_lines(heading: str, lines: List[str]) -> List[str]:
    if not lines:
        return []
    return [f"## {heading}", *lines, ""]


def resolve_articles_insert_index(headings: List[str], placement: str) -> int:
    """Index in *headings* before which the Articles section goes."""
    if not headings:
        return 0
    anchor = _PLACEMENT_ANCHORS.get(placement)
    if anchor is None:
        return len(headings)
    keyword, after = anchor
    for index, heading in enumerate(headings):
        if keyword in heading.lower():
            return index + 1 if after else index
    return len(headings)


def _substitute(template: str, name: str, value: str) -> str:
    return re.sub(r"\{\{\s*" + name + r"\s*\}\}", lambda _match: value, template)


def build_llms_txt(config: LlmSeoConfig, base_url: str, article_links: List[Link]) -> str:
    llms = config.llms
    title = llms.title or config.site_name or "Site"
    summary: Optional[str] = llms.summary or config.site_summary
    contact: Optional[str] = llms.contact or config.contact
    capabilities = llms.capabilities or config.capabilities
    placement = llms.articles_placement or "after-company"

    lines = [f"# {title}"]
    if summary:
        lines.append(f"> {summary}")
    lines.append("")
    if contact:
        lines.extend([f"Contact: {contact}.", ""])
    if capabilities:
        lines.append("## Capabilities")
        lines.extend(f"- {capability}" for capability in capabilities)
        lines.append("")

    blocks = [
        _SectionBlock(
            section.heading,
            _section_lines(
                section.heading,
                [*(section.description or []), *(_link_line(link) for link in section.links)],
            ),
        )
        for section in llms.sections
    ]
    articles_lines = _section_lines(
        "Articles",
        [_link_line(link) for link in article_links] or ["- (No articles listed)"],
    )

    ordered: List[str] = []
    if placement == "omit":
        for block in blocks:
            ordered.extend(block.lines)
    else:
        insert_index = resolve_articles_insert_index([block.heading for block in blocks], placement)
        for index, block in enumerate(blocks):
            if index == insert_index:
                ordered.extend(articles_lines)
            ordered.extend(block.lines)
        if insert_index >= len(blocks):
            ordered.extend(articles_lines)
    lines.extend(ordered)

    if llms.template:
        rendered = llms.template
        for name, value in (
            ("siteName", title),
            ("summary", summary or ""),
            ("contact", contact or ""),
            ("articles", "\n".join(articles_lines)),
            ("sections", "\n".join(ordered)),
            ("baseUrl", base_url),
        ):
            rendered = _substitute(rendered, name, value)
        return rendered.strip() + "\n"

    if placement != "omit":
        lines.append(DEFAULT_FOOTER)
    return "\n".join(lines).strip() + "\n"
