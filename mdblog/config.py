from __future__ import annotations

import json
import os
import sys
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .utils import parse_bool, parse_int

DEFAULT_SITE_URL = "https://blog.mahata.org"
SITE_URL_ENV = "SITE_URL"


@dataclass
class SiteConfig:
    site_url: str = DEFAULT_SITE_URL
    site_name: str = "mahata.org blog"
    site_description: str = "A blog about software engineering, programming, and life"
    copyright_holder: str = "mahata.org"
    language: str = "en"
    posts_dir: Path = Path("posts")
    output_dir: Path = Path("public")
    feed_file: str = "rss.xml"
    sitemap_file: str = "sitemap.xml"
    feed_limit: int = 0
    feed_html: bool = False
    posts_per_page: int = 10

    @property
    def feed_path(self) -> Path:
        return self.output_dir / self.feed_file

    @property
    def sitemap_path(self) -> Path:
        return self.output_dir / self.sitemap_file


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be a mapping: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def build_config(data: Mapping[str, object], environ: Optional[Mapping[str, str]] = None) -> SiteConfig:
    """Build a SiteConfig from config file values.

    The site URL comes from ``SITE_URL`` in ``environ`` when set, then from the
    file, then falls back to DEFAULT_SITE_URL.
    """
    if environ is None:
        environ = os.environ
    defaults = SiteConfig()
    values = {}
    for field in fields(SiteConfig):
        value = data.get(field.name)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        default = getattr(defaults, field.name)
        if isinstance(default, bool):
            values[field.name] = parse_bool(value)
        elif isinstance(default, Path):
            values[field.name] = Path(str(value))
        elif isinstance(default, int):
            values[field.name] = parse_int(value, default)
        else:
            values[field.name] = str(value)
    env_url = (environ.get(SITE_URL_ENV) or "").strip()
    if env_url:
        values["site_url"] = env_url
    return SiteConfig(**values)
