from __future__ import annotations

import math
import sys
from dataclasses import dataclass

from .content import content_after_front_matter
from .posts import ContentSource, PostMetadata, collect_posts, read_post
from .render import render_markdown
from .utils import parse_int

POSTS_PER_PAGE = 10
RENDER_ERROR_HTML = "<p>Error rendering post content.</p>"


class PostNotFoundError(LookupError):
    pass


@dataclass(frozen=True)
class Page:
    posts: list[PostMetadata]
    current_page: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def paginate(posts: list[PostMetadata], page: object = None, per_page: int = POSTS_PER_PAGE) -> Page:
    per_page = max(1, per_page)
    requested = max(1, parse_int(page, 1))
    total_pages = math.ceil(len(posts) / per_page)
    current = min(requested, total_pages or 1)
    start = (current - 1) * per_page
    return Page(posts=posts[start : start + per_page], current_page=current, total_pages=total_pages)


async def list_posts(loaders: ContentSource, page: object = None, per_page: int = POSTS_PER_PAGE) -> Page:
    return paginate(await collect_posts(loaders), page, per_page)


async def render_post(loaders: ContentSource, slug: str) -> str:
    if not slug:
        raise PostNotFoundError("Post slug is missing")
    text = await read_post(loaders, slug)
    if text is None:
        raise PostNotFoundError(f"Post not found: {slug}")
    try:
        return render_markdown(content_after_front_matter(text))
    except Exception as exc:
        print(f"Error processing markdown for {slug}: {exc}", file=sys.stderr)
        return RENDER_ERROR_HTML
