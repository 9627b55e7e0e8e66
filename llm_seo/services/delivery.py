"""Markdown content negotiation, independent of any web framework.

An adapter turns its request into a :class:`MarkdownRequest`, calls
:func:`maybe_render_markdown` and either sends the returned
:class:`MarkdownResponse` or lets the request through when it gets *None*.
"""

from typing import Callable, Dict, Optional
from urllib.parse import parse_qsl, urlsplit

from llm_seo.config import LlmSeoConfig
from llm_seo.models.delivery import MarkdownRequest, MarkdownResponse
from llm_seo.models.page import PageContent
from llm_seo.services.paths import build_markdown_path, normalize_path
from llm_seo.services.renderer import render_seo_markdown

MARKDOWN_CONTENT_TYPE = "text/markdown; charset=utf-8"

ContentResolver = Callable[[str], Optional[PageContent]]
IndexablePredicate = Callable[[str], bool]


def strip_markdown_extension(value: str, extension: str) -> str:
    if not value.endswith(extension):
        return value
    stripped = value[: -len(extension)]
    if not stripped or stripped == "/index":
        return "/"
    return stripped


def is_markdown_accept(accept: Optional[str]) -> bool:
    if not accept:
        return False
    return any(entry.strip().startswith("text/markdown") for entry in accept.split(","))


def _header(headers: Dict[str, Optional[str]], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _query(request: MarkdownRequest) -> Dict[str, Optional[str]]:
    if request.query:
        return request.query
    return dict(parse_qsl(urlsplit(request.url).query))


def is_markdown_request(config: LlmSeoConfig, request: MarkdownRequest) -> bool:
    """Whether *request* asks for markdown.

    A path ending in the markdown extension always does; the ``Accept`` header
    and ``?format=md`` only count when their negotiation is enabled.
    """
    markdown = config.markdown
    if normalize_path(request.url).endswith(markdown.extension):
        return True
    if markdown.enable_accept_negotiation and is_markdown_accept(_header(request.headers, "accept")):
        return True
    if markdown.enable_query_param and _query(request).get("format") == "md":
        return True
    return False


def resolve_markdown_alternate(path_value: str) -> str:
    """Markdown URL path of the page at *path_value*."""
    return build_markdown_path(normalize_path(path_value))


def maybe_render_markdown(
    config: LlmSeoConfig,
    request: MarkdownRequest,
    is_indexable: IndexablePredicate,
    resolve_content: ContentResolver,
) -> Optional[MarkdownResponse]:
    """Render the requested page as markdown, or return *None* to defer.

    Defers when the request does not ask for markdown, when the target path is
    not indexable, and when no content resolves for it.
    """
    if not is_markdown_request(config, request):
        return None

    target_path = strip_markdown_extension(normalize_path(request.url), config.markdown.extension)
    if not is_indexable(target_path):
        return None
    content = resolve_content(target_path)
    if content is None:
        return None

    return MarkdownResponse(
        status=200,
        headers={"Content-Type": MARKDOWN_CONTENT_TYPE, "Vary": "Accept"},
        body=render_seo_markdown(content),
    )
