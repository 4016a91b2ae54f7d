from __future__ import annotations

import asyncio
import datetime as dt
from pathlib import Path
from typing import Mapping, Optional

from .config import SiteConfig
from .content import content_after_front_matter, parse_date
from .posts import ContentSource, PostMetadata, collect_posts, directory_source, newest_date, read_post
from .render import render_markdown, write_text
from .utils import escape_xml, join_url, rfc822_date

GENERATOR = "mdblog"


def build_rss(
    posts: list[PostMetadata],
    bodies: Mapping[str, str],
    config: SiteConfig,
    now: Optional[dt.datetime] = None,
) -> str:
    """Serialize posts as an RSS 2.0 document.

    ``bodies`` maps a post slug to its markdown body. The item description is
    the body itself, or the body rendered to HTML when ``config.feed_html`` is set.
    """
    if now is None:
        now = dt.datetime.now(dt.timezone.utc)
    site_url = config.site_url.rstrip("/")
    if config.feed_limit > 0:
        posts = posts[: config.feed_limit]
    items = []
    for post in posts:
        link = join_url(site_url, f"posts/{post.slug}")
        lines = [
            "<item>",
            f"<title>{escape_xml(post.title)}</title>",
            f"<link>{escape_xml(link)}</link>",
            f'<guid isPermaLink="false">{escape_xml(link)}</guid>',
        ]
        published = parse_date(post.date)
        if published is not None:
            lines.append(f"<pubDate>{rfc822_date(published)}</pubDate>")
        description = bodies.get(post.slug, "")
        if config.feed_html:
            description = render_markdown(description)
        lines.append(f"<description>{escape_xml(description)}</description>")
        lines.append("</item>")
        items.append("\n".join(lines))
    last_build = newest_date(posts) or now
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0">',
            "<channel>",
            f"<title>{escape_xml(config.site_name)}</title>",
            f"<link>{escape_xml(site_url)}</link>",
            f"<description>{escape_xml(config.site_description)}</description>",
            f"<language>{escape_xml(config.language)}</language>",
            f"<copyright>{escape_xml(f'© {now.year} {config.copyright_holder}')}</copyright>",
            f"<lastBuildDate>{rfc822_date(last_build)}</lastBuildDate>",
            f"<generator>{GENERATOR}</generator>",
            "\n".join(items),
            "</channel>",
            "</rss>",
            "",
        ]
    )


async def collect_bodies(loaders: ContentSource, posts: list[PostMetadata]) -> dict[str, str]:
    bodies = {}
    for post in posts:
        text = await read_post(loaders, post.slug)
        bodies[post.slug] = content_after_front_matter(text) if text is not None else ""
    return bodies


async def collect_feed(loaders: ContentSource) -> tuple[list[PostMetadata], dict[str, str]]:
    posts = await collect_posts(loaders)
    return posts, await collect_bodies(loaders, posts)


def generate_rss(config: SiteConfig) -> Path:
    print(f"Generating RSS feed from {config.posts_dir}...")
    posts, bodies = asyncio.run(collect_feed(directory_source(config.posts_dir)))
    print(f"Found {len(posts)} posts")
    write_text(config.feed_path, build_rss(posts, bodies, config))
    print(f"✓ RSS feed generated: {config.feed_path}")
    return config.feed_path
