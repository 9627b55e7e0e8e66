"""sitemap.xml, sitemap index and sitemap.md builders."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, TypeVar
from xml.sax.saxutils import escape

from llm_seo.models.route import SeoRoute
from llm_seo.services.files import write_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Search engines accept up to 50,000 URLs per file; stay below that
MAX_URLS_PER_SITEMAP = 45000

# Above this many routes sitemap.md only carries a summary
MAX_SITEMAP_MD_ROUTES = 5000

_XMLNS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


def normalize_lastmod(value: Optional[str]) -> Optional[str]:
    """ISO-8601 UTC timestamp with milliseconds, or *None* for invalid input.

    Naive dates and datetimes are taken as UTC.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def build_sitemap_entries(base_url: str, routes: List[SeoRoute]) -> List[str]:
    entries = []
    for route in routes:
        is_home = route.path == "/"
        lastmod = normalize_lastmod(route.updated_at or route.published_at)
        lines = ["  <url>", f"    <loc>{escape(base_url + route.path)}</loc>"]
        if lastmod:
            lines.append(f"    <lastmod>{escape(lastmod)}</lastmod>")
        lines.append(f"    <changefreq>{'daily' if is_home else 'weekly'}</changefreq>")
        lines.append(f"    <priority>{'1.0' if is_home else '0.7'}</priority>")
        lines.append("  </url>")
        entries.append("\n".join(lines))
    return entries


def build_sitemap_xml(entries: List[str]) -> str:
    return "\n".join(
        ['<?xml version="1.0" encoding="UTF-8"?>', f'<urlset xmlns="{_XMLNS}">', *entries, "</urlset>", ""]
    )


def build_sitemap_index_xml(entries: List[str]) -> str:
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<sitemapindex xmlns="{_XMLNS}">',
            *entries,
            "</sitemapindex>",
            "",
        ]
    )


def write_sitemap_files(output_dir: Path, base_url: str, routes: List[SeoRoute]) -> List[Path]:
    """Write ``sitemap.xml`` for *routes*, chunked behind an index when large.

    Returns every written file; ``sitemap.xml`` comes last.
    """
    chunks = chunk(build_sitemap_entries(base_url, routes), MAX_URLS_PER_SITEMAP)
    sitemap_path = output_dir / "sitemap.xml"
    if len(chunks) <= 1:
        return [write_text(sitemap_path, build_sitemap_xml(chunks[0] if chunks else []))]

    written: List[Path] = []
    index_entries: List[str] = []
    for number, entries in enumerate(chunks, start=1):
        chunk_name = f"sitemap-{number}.xml"
        written.append(write_text(output_dir / chunk_name, build_sitemap_xml(entries)))
        index_entries.append(f"  <sitemap>\n    <loc>{escape(f'{base_url}/{chunk_name}')}</loc>\n  </sitemap>")
    written.append(write_text(sitemap_path, build_sitemap_index_xml(index_entries)))
    logger.debug("Wrote sitemap index with %d chunks to %s", len(chunks), output_dir)
    return written


def build_sitemap_md(base_url: str, routes: List[SeoRoute]) -> str:
    """Human-readable page directory; a summary only for very large sites."""
    if len(routes) > MAX_SITEMAP_MD_ROUTES:
        return "\n".join(
            ["# Sitemap", "", f"Total pages: {len(routes)}", "", f"Sitemap index: {base_url}/sitemap.xml", ""]
        )
    return "\n".join(
        [
            "# Sitemap",
            "",
            "A simple directory of public pages.",
            "",
            "## Pages",
            *(f"- {base_url}{route.path}" for route in routes),
            "",
        ]
    )
