"""Block-level reading of markdown bodies.

The body is tokenized with markdown-it; only top-level blocks are kept.  Every
depth-2 heading opens a :class:`MarkdownSection` which carries both its blocks
(for structured extraction) and its verbatim source (for links and extras).
"""

import re
from typing import Any, Callable, Dict, FrozenSet, List, NamedTuple, Optional, Tuple

from markdown_it import MarkdownIt
from markdown_it.token import Token

from llm_seo.models.page import Cta, Faq, Link, Pricing, Section, Step, Trust, TrustItem

_MD = MarkdownIt("commonmark").enable(["table", "strikethrough"])

_TITLE_DESCRIPTION = re.compile(r"^(.+?)\s*(?:-|:)\s+(.+)$")
_BOLD_QUESTION = re.compile(r"^\s*\*\*([^*]+)\*\*\s*(.+)$", re.DOTALL)
_LINK = re.compile(r"\[(.+?)\]\((.+?)\)")


class Block(NamedTuple):
    type: str  # heading, paragraph, list or other
    depth: int
    text: str
    items: List[str]
    start: int
    end: int


class MarkdownSection(NamedTuple):
    heading: str
    blocks: List[Block]
    raw: str


def strip_markdown(value: str) -> str:
    """Plain text of an inline fragment: code spans, bold, emphasis and links removed."""
    value = re.sub(r"`([^`]+)`", r"\1", value)
    value = re.sub(r"\*\*([^*]+)\*\*", r"\1", value)
    value = re.sub(r"_([^_]+)_", r"\1", value)
    value = _LINK.sub(r"\1", value)
    return re.sub(r"\s+", " ", value).strip()


def parse_title_description(value: str) -> Tuple[str, str]:
    """Split ``Title - description`` (or ``Title: description``) at the first separator."""
    cleaned = strip_markdown(value)
    match = _TITLE_DESCRIPTION.match(cleaned)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    return cleaned, ""


def parse_question_answer(value: str) -> Optional[Faq]:
    bold = _BOLD_QUESTION.match(value)
    if bold:
        return Faq(question=strip_markdown(bold.group(1)), answer=strip_markdown(bold.group(2)))

    cleaned = strip_markdown(value)
    index = cleaned.find("?")
    if index != -1 and index < len(cleaned) - 1:
        question = cleaned[: index + 1].strip()
        answer = cleaned[index + 1 :].strip()
        if question and answer:
            return Faq(question=question, answer=answer)
    return None


def extract_links(value: str) -> List[Link]:
    """Every inline ``[label](href)`` in *value*, in order of appearance."""
    return [
        Link(label=strip_markdown(match.group(1)), href=match.group(2).strip())
        for match in _LINK.finditer(value)
    ]


def _closing_index(tokens: List[Token], start: int) -> int:
    depth = 0
    for index in range(start, len(tokens)):
        depth += tokens[index].nesting
        if depth == 0:
            return index
    return len(tokens) - 1


def _list_items(tokens: List[Token]) -> List[str]:
    items: List[str] = []
    for index, token in enumerate(tokens):
        if token.type != "list_item_open":
            continue
        close = _closing_index(tokens, index)
        parts = [
            inner.content
            for inner in tokens[index + 1 : close]
            if inner.type == "inline" and inner.level == token.level + 2
        ]
        items.append("\n".join(parts))
    return items


def lex_blocks(body: str) -> List[Block]:
    """Tokenize *body* and return its top-level blocks in document order."""
    tokens = _MD.parse(body)
    blocks: List[Block] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        close = _closing_index(tokens, index) if token.nesting == 1 else index
        start, end = token.map if token.map else (0, 0)

        if token.type == "heading_open":
            blocks.append(Block("heading", int(token.tag[1:]), tokens[index + 1].content, [], start, end))
        elif token.type == "paragraph_open":
            blocks.append(Block("paragraph", 0, tokens[index + 1].content, [], start, end))
        elif token.type in ("bullet_list_open", "ordered_list_open"):
            blocks.append(Block("list", 0, "", _list_items(tokens[index : close + 1]), start, end))
        else:
            blocks.append(Block("other", 0, token.content, [], start, end))
        index = close + 1
    return blocks


def extract_summary(blocks: List[Block]) -> Tuple[str, str]:
    """Return ``(title, description)``: the first H1 and the first paragraph after it."""
    title = ""
    description = ""
    seen_h1 = False
    for block in blocks:
        if block.type == "heading" and block.depth == 1:
            if not title:
                title = strip_markdown(block.text)
                seen_h1 = True
            continue
        if seen_h1 and not description and block.type == "paragraph":
            description = strip_markdown(block.text)
    return title, description


def build_sections(blocks: List[Block], body: str) -> List[MarkdownSection]:
    lines = body.split("\n")
    headings = [i for i, block in enumerate(blocks) if block.type == "heading" and block.depth == 2]
    sections: List[MarkdownSection] = []
    for position, block_index in enumerate(headings):
        heading = blocks[block_index]
        if position + 1 < len(headings):
            next_index = headings[position + 1]
            raw_end = blocks[next_index].start
        else:
            next_index = len(blocks)
            raw_end = len(lines)
        raw = "\n".join(lines[heading.end : raw_end])
        sections.append(MarkdownSection(heading.text, blocks[block_index + 1 : next_index], raw))
    return sections


def extract_paragraphs(blocks: List[Block]) -> List[str]:
    paragraphs = (strip_markdown(block.text) for block in blocks if block.type == "paragraph")
    return [paragraph for paragraph in paragraphs if paragraph]


def extract_list_items(blocks: List[Block]) -> List[str]:
    return [item for block in blocks if block.type == "list" for item in block.items if item]


def parse_steps(section: MarkdownSection) -> List[Step]:
    steps = []
    for item in extract_list_items(section.blocks):
        title, description = parse_title_description(item)
        if title:
            steps.append(Step(title=title, description=description))
    return steps


def parse_pricing(section: MarkdownSection) -> Optional[Pricing]:
    paragraphs = extract_paragraphs(section.blocks)
    if not paragraphs:
        return None
    if len(paragraphs) == 1:
        return Pricing(headline="Pricing", detail=paragraphs[0])
    return Pricing(headline=paragraphs[0], detail=paragraphs[1])


def parse_trust(section: MarkdownSection) -> Trust:
    items = []
    for item in extract_list_items(section.blocks):
        title, description = parse_title_description(item)
        if title:
            items.append(TrustItem(title=title, description=description))
    return Trust(title=section.heading, items=items)


def parse_faqs(section: MarkdownSection) -> List[Faq]:
    faqs = (parse_question_answer(item) for item in extract_list_items(section.blocks))
    return [faq for faq in faqs if faq is not None]


def parse_links(section: MarkdownSection) -> List[Link]:
    return extract_links(section.raw)


def parse_feature_list(section: MarkdownSection) -> List[str]:
    return [strip_markdown(item) for item in extract_list_items(section.blocks)]


def parse_cta(section: MarkdownSection) -> Optional[Cta]:
    """First link of the section; the paragraph text around it becomes the note."""
    links = extract_links(section.raw)
    if not links:
        return None
    label = links[0].label
    paragraphs = extract_paragraphs(section.blocks)
    note = paragraphs[0] if paragraphs else ""
    if note and label:
        note = re.sub(rf"\s*{re.escape(label)}\s*$", "", note).strip()
    return Cta(label=label, href=links[0].href, note=note or None)


class SectionRule(NamedTuple):
    """Maps normalized headings to the field a section fills."""

    field: str
    headings: FrozenSet[str]
    parse: Callable[[MarkdownSection], Any]


_STEP_HEADINGS = frozenset({"how it works", "step-by-step", "step by step", "steps"})
_TRUST_HEADINGS = frozenset({"trust", "what happens to your document"})
_FAQ_HEADINGS = frozenset({"faqs", "faq"})
_RELATED_HEADINGS = frozenset({"related", "related use cases", "related links"})
_FEATURE_HEADINGS = frozenset({"features", "feature list", "feature-list"})
_CTA_HEADINGS = frozenset({"ready to send it?", "ready to send", "next step", "next steps", "cta"})


def _rules(faq_headings: FrozenSet[str], feature_headings: FrozenSet[str]) -> List[SectionRule]:
    # Evaluated in order; the first rule whose headings match wins.
    return [
        SectionRule("steps", _STEP_HEADINGS, parse_steps),
        SectionRule("pricing", frozenset({"pricing"}), parse_pricing),
        SectionRule("trust", _TRUST_HEADINGS, parse_trust),
        SectionRule("faqs", faq_headings, parse_faqs),
        SectionRule("resource_links", frozenset({"resources"}), parse_links),
        SectionRule("related_links", _RELATED_HEADINGS, parse_links),
        SectionRule("feature_list", feature_headings, parse_feature_list),
        SectionRule("cta", _CTA_HEADINGS, parse_cta),
    ]


PAGE_RULES = _rules(
    _FAQ_HEADINGS | {"pricing faqs", "delivery faqs"},
    _FEATURE_HEADINGS | {"what is included", "what you get"},
)
MARKETING_RULES = _rules(_FAQ_HEADINGS, _FEATURE_HEADINGS)


def normalize_heading(value: str) -> str:
    return value.strip().lower()


def classify_sections(
    sections: List[MarkdownSection], rules: List[SectionRule]
) -> Tuple[Dict[str, Any], List[Section]]:
    """Sort sections into structured fields and verbatim extras.

    Returns the structured values keyed by field name and the list of
    unclassified sections with non-blank content.  When two sections fill the
    same field the later one wins.
    """
    fields: Dict[str, Any] = {}
    extras: List[Section] = []
    for section in sections:
        normalized = normalize_heading(section.heading)
        rule = next((rule for rule in rules if normalized in rule.headings), None)
        if rule is None:
            if section.raw.strip():
                extras.append(Section(heading=section.heading, markdown=section.raw.strip()))
            continue
        value = rule.parse(section)
        if value is not None:
            fields[rule.field] = value
    return fields, extras
