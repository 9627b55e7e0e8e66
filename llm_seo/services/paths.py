"""Route path and label helpers shared by every content source."""

import re
from typing import List, Optional

from llm_seo.models.page import Breadcrumb

# Words rendered fully upper-case by :func:`title_case`
_TITLE_CASE_UPPER = {"pdf", "usps", "usa", "ai", "api", "mcp", "llm", "llms", "id"}


def to_posix_path(value: str) -> str:
    return value.replace("\\", "/")


def strip_extension(value: str) -> str:
    return re.sub(r"\.[^.]+$", "", value)


def is_ignored_segment(segment: str) -> bool:
    """Segments starting with ``_`` or ``.`` are private and never routed."""
    return segment.startswith("_") or segment.startswith(".")


def is_markdown_file(file_name: str) -> bool:
    return file_name.endswith(".md") and file_name.lower() != "readme.md"


def slugify_segment(segment: str) -> str:
    """Lower-case *segment*, turning underscores and whitespace into hyphens."""
    return re.sub(r"\s+", "-", segment.replace("_", "-")).lower()


def normalize_path(value: str) -> str:
    """Return an absolute route path: leading slash, no query, no trailing slash.

    The root path ``/`` is the only path that ends with a slash.
    """
    if not value:
        return "/"
    normalized = value.split("?")[0].strip()
    if not normalized.startswith("/"):
        normalized = f"/{normalized}"
    normalized = re.sub(r"/+", "/", normalized)
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized.rstrip("/")
    return normalized or "/"


def title_case(value: str) -> str:
    """Turn a slug such as ``api-pricing`` into ``API Pricing``."""
    cleaned = re.sub(r"[-_]+", " ", value).strip()
    if not cleaned:
        return ""
    words = []
    for word in cleaned.split():
        lower = word.lower()
        if lower in _TITLE_CASE_UPPER:
            words.append(lower.upper())
        else:
            words.append(lower[:1].upper() + lower[1:])
    return " ".join(words)


def label_from_path(path_value: str) -> str:
    segments = [segment for segment in path_value.split("/") if segment]
    return title_case(segments[-1] if segments else "")


def build_markdown_path(path_value: str) -> str:
    return "/index.md" if path_value == "/" else f"{path_value}.md"


def markdown_output_name(path_value: str) -> str:
    """Relative file name of the markdown copy of *path_value*."""
    return "index.md" if path_value == "/" else f"{path_value[1:]}.md"


def build_breadcrumbs(path_value: str) -> List[Breadcrumb]:
    breadcrumbs = [Breadcrumb(name="Home", path="/")]
    current = ""
    for segment in (s for s in path_value.split("/") if s):
        current += f"/{segment}"
        breadcrumbs.append(Breadcrumb(name=title_case(segment), path=current))
    return breadcrumbs


def build_route_path_from_file(relative_path: str, index_path: str = "/") -> Optional[str]:
    """Derive the route of a content file from its path under the content root.

    ``docs/Getting_Started.md`` becomes ``/docs/getting-started`` and
    ``docs/index.md`` becomes ``/docs``.  A root-level ``index.md`` maps to
    *index_path*.  Returns *None* for files inside ignored segments.
    """
    without_ext = strip_extension(to_posix_path(relative_path))
    segments = [segment for segment in without_ext.split("/") if segment]
    if not segments:
        return None
    if any(is_ignored_segment(segment) for segment in segments):
        return None

    if segments[-1].lower() == "index":
        segments = segments[:-1]
    if not segments:
        return index_path

    return "/" + "/".join(slugify_segment(segment) for segment in segments)
