from typing import List, Optional

DEFAULT_DISALLOW = ["/admin", "/admin/"]


def build_robots_txt(base_url: str, disallow: Optional[List[str]] = None) -> str:
    """Allow everything except *disallow* and point crawlers at the sitemap."""
    lines = ["User-agent: *", "Allow: /"]
    lines.extend(f"Disallow: {path}" for path in (DEFAULT_DISALLOW if disallow is None else disallow))
    lines.append(f"Sitemap: {base_url}/sitemap.xml")
    lines.append("")
    return "\n".join(lines)
