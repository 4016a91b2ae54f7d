from __future__ import annotations

import argparse
import asyncio
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from .config import SiteConfig, build_config, load_config
from .feed import generate_rss
from .listing import PostNotFoundError, list_posts, render_post
from .posts import directory_source
from .sitemap import generate_sitemap


def apply_overrides(config: SiteConfig, args: argparse.Namespace) -> SiteConfig:
    overrides = {}
    if args.site_url:
        overrides["site_url"] = args.site_url.strip()
    if args.posts:
        overrides["posts_dir"] = Path(args.posts)
    if args.output:
        overrides["output_dir"] = Path(args.output)
    return replace(config, **overrides)


def run_rss(config: SiteConfig, args: argparse.Namespace) -> int:
    if args.feed_limit is not None:
        config = replace(config, feed_limit=args.feed_limit)
    try:
        generate_rss(config)
    except Exception as exc:
        print(f"Failed to generate RSS feed: {exc}", file=sys.stderr)
        return 1
    return 0


def run_sitemap(config: SiteConfig, args: argparse.Namespace) -> int:
    try:
        generate_sitemap(config)
    except Exception as exc:
        print(f"Failed to generate sitemap: {exc}", file=sys.stderr)
        return 1
    return 0


def run_list(config: SiteConfig, args: argparse.Namespace) -> int:
    per_page = args.per_page or config.posts_per_page
    page = asyncio.run(list_posts(directory_source(config.posts_dir), args.page, per_page))
    for post in page.posts:
        print(f"{post.date}  {post.slug}  {post.title}")
    if page.total_pages > 1:
        print(f"Page {page.current_page} of {page.total_pages}")
    return 0


def run_post(config: SiteConfig, args: argparse.Namespace) -> int:
    try:
        html_text = asyncio.run(render_post(directory_source(config.posts_dir), args.slug))
    except PostNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(html_text)
    return 0


def build_parser(config_path: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Markdown blog metadata, RSS feed and sitemap tools.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--posts", default="", help="Directory containing Markdown posts.")
    parser.add_argument("--output", default="", help="Output directory for rss.xml and sitemap.xml.")
    parser.add_argument("--site-url", default="", help="Public site URL (overrides SITE_URL).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    rss_parser = subparsers.add_parser("rss", help="Generate the RSS 2.0 feed.")
    rss_parser.add_argument("--feed-limit", type=int, default=None, help="Maximum number of feed items (0 = all).")
    rss_parser.set_defaults(handler=run_rss)

    sitemap_parser = subparsers.add_parser("sitemap", help="Generate sitemap.xml.")
    sitemap_parser.set_defaults(handler=run_sitemap)

    list_parser = subparsers.add_parser("list", help="List posts newest first.")
    list_parser.add_argument("--page", default=None, help="Page number to show.")
    list_parser.add_argument("--per-page", type=int, default=0, help="Posts per page (0 = config value).")
    list_parser.set_defaults(handler=run_list)

    post_parser = subparsers.add_parser("post", help="Render one post to HTML.")
    post_parser.add_argument("slug", help="Post slug, e.g. my-post.")
    post_parser.set_defaults(handler=run_post)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)

    args = build_parser(pre_args.config).parse_args(argv)
    config = apply_overrides(build_config(load_config(Path(args.config))), args)
    start = time.perf_counter()
    status = args.handler(config, args)
    if args.command in {"rss", "sitemap"} and status == 0:
        print(f"Completed in {time.perf_counter() - start:.2f}s.")
    sys.exit(status)
