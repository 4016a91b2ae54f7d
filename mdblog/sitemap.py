from __future__ import annotations

from pathlib import Path

from .config import SiteConfig
from .posts import PostMetadata, directory_source, load_posts
from .render import write_text
from .utils import escape_xml, join_url

POST_CHANGEFREQ = "monthly"
POST_PRIORITY = "0.7"
ROOT_CHANGEFREQ = "weekly"
ROOT_PRIORITY = "1.0"


def build_url_entry(loc: str, changefreq: str, priority: str, lastmod: str = "") -> str:
    lines = ["  <url>", f"    <loc>{escape_xml(loc)}</loc>"]
    if lastmod:
        lines.append(f"    <lastmod>{escape_xml(lastmod)}</lastmod>")
    lines.extend(
        [
            f"    <changefreq>{changefreq}</changefreq>",
            f"    <priority>{priority}</priority>",
            "  </url>",
        ]
    )
    return "\n".join(lines)


def build_sitemap(posts: list[PostMetadata], site_url: str) -> str:
    entries = [build_url_entry(site_url, ROOT_CHANGEFREQ, ROOT_PRIORITY)]
    for post in posts:
        entries.append(
            build_url_entry(
                join_url(site_url, f"posts/{post.slug}"),
                POST_CHANGEFREQ,
                POST_PRIORITY,
                lastmod=post.date,
            )
        )
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            "\n".join(entries),
            "</urlset>",
            "",
        ]
    )


def generate_sitemap(config: SiteConfig) -> Path:
    print(f"Generating sitemap from {config.posts_dir}...")
    posts = load_posts(directory_source(config.posts_dir))
    print(f"Found {len(posts)} posts")
    write_text(config.sitemap_path, build_sitemap(posts, config.site_url))
    print(f"✓ Sitemap generated: {config.sitemap_path}")
    return config.sitemap_path
