import logging
from pathlib import Path
from typing import List
from xml.sax.saxutils import escape

from supaplate.config import settings

logger = logging.getLogger(__name__)

DISALLOWED_PATHS = ["/dashboard", "/account", "/settings", "/payments", "/api"]
STATIC_PATHS = ["/", "/login", "/join"]


def list_slugs(directory: str) -> List[str]:
    """Slugs of the .mdx documents in a directory (missing directory -> none)"""
    path = Path(directory)
    if not path.is_dir():
        logger.warning(f"Docs directory not found: {directory}")
        return []
    return sorted(p.stem for p in path.glob("*.mdx"))


def build_robots() -> str:
    lines = ["User-agent: *"]
    lines += [f"Disallow: {p}" for p in DISALLOWED_PATHS]
    lines.append("Allow: /")
    lines.append("")
    lines.append(f"Sitemap: {settings.site_url}/sitemap.xml")
    return "\n".join(lines) + "\n"


def sitemap_paths() -> List[str]:
    paths = [f"/blog/{slug}" for slug in list_slugs(settings.blog_docs_dir)]
    paths += [f"/legal/{slug}" for slug in list_slugs(settings.legal_docs_dir)]
    return paths + STATIC_PATHS


def build_sitemap() -> str:
    urls = "".join(
        f"  <url>\n    <loc>{escape(settings.site_url + path)}</loc>\n  </url>\n"
        for path in sitemap_paths()
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        f"{urls}"
        "</urlset>\n"
    )
