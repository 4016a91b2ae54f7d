from __future__ import annotations

import datetime as dt
import re
from email.utils import parsedate_to_datetime
from typing import Any, Optional

import yaml

FRONT_MATTER_RE = re.compile(r"\A---\r?\n(?:(.*?)\r?\n)??---(?=\r?\n|\Z)", re.DOTALL)
YAML_11_TAGS = {
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:float",
    "tag:yaml.org,2002:timestamp",
}


class FrontMatterError(ValueError):
    """Raised when a delimited front matter block is not a valid YAML mapping."""


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader resolving plain scalars with the YAML 1.2 core schema.

    ``yes``/``on``, sexagesimal numbers like ``12:30:00`` and dates stay strings.
    """


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in YAML_11_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
FrontMatterLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
# int before float: plain digits match both patterns.
FrontMatterLoader.add_implicit_resolver(
    "tag:yaml.org,2002:int",
    re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$"),
    list("-+0123456789"),
)
FrontMatterLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(
        r"^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?"
        r"|[-+]?\.(?:inf|Inf|INF)|\.(?:nan|NaN|NAN))$"
    ),
    list("-+.0123456789"),
)


def extract_front_matter(text: str) -> Optional[dict[str, Any]]:
    """Return the parsed front matter of ``text``, or None when it has no block.

    The opening ``---`` must be the first line and a later line must be exactly
    ``---``; an unterminated block counts as no block. Malformed YAML inside a
    well-delimited block raises FrontMatterError.
    """
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return None
    try:
        meta = yaml.load(match.group(1) or "", Loader=FrontMatterLoader)
    except yaml.YAMLError as exc:
        detail = " ".join(str(exc).split())
        raise FrontMatterError(f"Invalid YAML front matter: {detail}") from exc
    if meta is None:
        return {}
    if not isinstance(meta, dict):
        raise FrontMatterError(f"Invalid YAML front matter: expected a mapping, got {type(meta).__name__}")
    return meta


def content_after_front_matter(text: str) -> str:
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return text
    return text[match.end() :].strip()


def is_valid_front_matter(meta: object) -> bool:
    if not isinstance(meta, dict):
        return False
    title = meta.get("title")
    date = meta.get("date")
    return isinstance(title, str) and len(title) > 0 and isinstance(date, str) and len(date) > 0


def derive_slug(identifier: str) -> str:
    # Only the first ".md" is removed, wherever it sits in the file name.
    name = identifier.split("/")[-1]
    return name.replace(".md", "", 1)


def parse_date(value: str) -> Optional[dt.datetime]:
    """Parse an ISO-8601 or RFC 822 date string into a UTC datetime.

    Values without a zone are taken as UTC. Returns None when nothing parses
    or the instant falls outside the datetime range.
    """
    value = value.strip()
    if not value:
        return None
    try:
        parsed = dt.datetime.fromisoformat(value)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    try:
        return parsed.astimezone(dt.timezone.utc)
    except OverflowError:
        return None
