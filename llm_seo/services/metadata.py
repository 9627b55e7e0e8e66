"""Metadata dialects: ``---`` front matter and the ``[meta]`` block.

Both return ``(meta, body)`` where *meta* maps lower-cased keys to a string or
a list of strings and *body* is the markdown that follows the block.  When the
dialect is absent the metadata is empty and the body is the input unchanged.
"""

import re
from typing import List, Optional, Tuple

from llm_seo.services.normalizer import MetaBlock

_LINE_SPLIT = re.compile(r"\r?\n")
_FRONT_MATTER_LINE = re.compile(r"^([A-Za-z0-9_-]+)\s*:\s*(.*)$")
_META_LINE = re.compile(r"^\s*([A-Za-z0-9_-]+)\s*:\s*(.+?)\s*$")


def _first_content_line(lines: List[str]) -> int:
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    return index


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        inner = value[1:-1]
        if value[0] == '"':
            inner = inner.replace('\\"', '"')
        return inner
    return value


def parse_front_matter(markdown: str) -> Tuple[MetaBlock, str]:
    """Parse a YAML-like front matter block.

    Supports ``key: value``, inline lists (``tags: [a, b]``) and block lists
    where a key with an empty value is followed by ``- item`` lines.
    """
    lines = _LINE_SPLIT.split(markdown)
    index = _first_content_line(lines)
    if index >= len(lines) or lines[index].strip() != "---":
        return {}, markdown

    index += 1
    meta: MetaBlock = {}
    current_list_key: Optional[str] = None

    while index < len(lines):
        line = lines[index]
        index += 1
        trimmed = line.strip()
        if trimmed == "---":
            break
        if not trimmed:
            current_list_key = None
            continue

        if current_list_key and trimmed.startswith("-"):
            item = _unquote(trimmed.lstrip("- \t").strip())
            if item:
                meta[current_list_key].append(item)  # type: ignore[union-attr]
            continue

        match = _FRONT_MATTER_LINE.match(trimmed)
        if not match:
            continue

        key = match.group(1).strip().lower()
        value = match.group(2).strip()

        if not value:
            current_list_key = key
            meta[key] = []
            continue

        current_list_key = None
        if value.startswith("[") and value.endswith("]"):
            meta[key] = [_unquote(item.strip()) for item in value[1:-1].split(",") if item.strip()]
            continue

        meta[key] = _unquote(value)

    return meta, "\n".join(lines[index:])


def parse_meta_block(markdown: str) -> Tuple[MetaBlock, str]:
    """Parse a ``[meta]`` block: a marker line, then ``key: value`` lines.

    The block ends at the first blank line (which is consumed) or at the first
    line that is not a ``key: value`` pair (which starts the body).
    """
    lines = _LINE_SPLIT.split(markdown)
    index = _first_content_line(lines)
    if index >= len(lines) or lines[index].strip().lower() != "[meta]":
        return {}, markdown

    index += 1
    meta: MetaBlock = {}
    body_start = index
    while index < len(lines):
        line = lines[index]
        if not line.strip():
            body_start = index + 1
            break
        match = _META_LINE.match(line)
        if not match:
            body_start = index
            break
        meta[match.group(1).strip().lower()] = match.group(2).strip()
        index += 1
        body_start = index

    return meta, "\n".join(lines[body_start:])
