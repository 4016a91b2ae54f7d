"""Post metadata pipeline shared by the feed, the sitemap and the post listing."""

from __future__ import annotations

import asyncio
import datetime as dt
import functools
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Mapping, NamedTuple, Optional

from .content import (
    derive_slug,
    extract_front_matter,
    is_valid_front_matter,
    parse_date,
)


class RawModule(NamedTuple):
    default: str


Loader = Callable[[], Awaitable[RawModule]]
ContentSource = Mapping[str, Loader]


@dataclass(frozen=True)
class PostMetadata:
    slug: str
    title: str
    date: str


def sort_key(post: PostMetadata) -> tuple[bool, float]:
    parsed = parse_date(post.date)
    if parsed is None:
        return False, 0.0
    return True, parsed.timestamp()


def sort_posts(posts: list[PostMetadata]) -> list[PostMetadata]:
    """Order posts newest first.

    Equal dates keep their input order and unparseable dates go last.
    """
    return sorted(posts, key=sort_key, reverse=True)


def build_post(identifier: str, text: str) -> Optional[PostMetadata]:
    """Return the post for one file, or None when it is not a valid post.

    Malformed front matter raises FrontMatterError.
    """
    meta = extract_front_matter(text)
    if not is_valid_front_matter(meta):
        return None
    slug = derive_slug(identifier)
    if not slug:
        return None
    return PostMetadata(slug=slug, title=meta["title"], date=meta["date"])


async def _load_text(loader: Loader) -> str:
    module = await loader()
    return module.default


async def collect_posts(loaders: ContentSource) -> list[PostMetadata]:
    identifiers = list(loaders)
    results = await asyncio.gather(
        *(_load_text(loaders[identifier]) for identifier in identifiers),
        return_exceptions=True,
    )

    posts: list[PostMetadata] = []
    for identifier, result in zip(identifiers, results):
        if isinstance(result, BaseException):
            print(f"Failed to parse post at {identifier}: {result}", file=sys.stderr)
            continue
        try:
            post = build_post(identifier, result)
        except Exception as exc:
            print(f"Failed to parse post at {identifier}: {exc}", file=sys.stderr)
            continue
        if post is not None:
            posts.append(post)

    return sort_posts(posts)


def load_posts(loaders: ContentSource) -> list[PostMetadata]:
    return asyncio.run(collect_posts(loaders))


async def read_post(loaders: ContentSource, slug: str) -> Optional[str]:
    for identifier, loader in loaders.items():
        if derive_slug(identifier) == slug:
            return await _load_text(loader)
    return None


async def _read_module(path: Path) -> RawModule:
    text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return RawModule(text)


def directory_source(posts_dir: Path, pattern: str = "*.md") -> dict[str, Loader]:
    if not posts_dir.is_dir():
        return {}
    files = sorted((path for path in posts_dir.glob(pattern) if path.is_file()), key=lambda p: p.as_posix())
    return {path.as_posix(): functools.partial(_read_module, path) for path in files}


def newest_date(posts: list[PostMetadata]) -> Optional[dt.datetime]:
    for post in posts:
        parsed = parse_date(post.date)
        if parsed is not None:
            return parsed
    return None
