"""Unit tests for content.py"""

import datetime as dt

import pytest

from mdblog.content import (
    FrontMatterError,
    content_after_front_matter,
    derive_slug,
    extract_front_matter,
    is_valid_front_matter,
    parse_date,
)


def test_extract_front_matter_basic():
    """extract_front_matter parses the YAML block at the top of the file."""
    text = "---\ntitle: 'Test Post'\ndate: '2024-01-15'\ntags:\n  - a\n  - b\n---\n\nBody\n"
    meta = extract_front_matter(text)
    assert meta == {"title": "Test Post", "date": "2024-01-15", "tags": ["a", "b"]}


def test_extract_front_matter_keeps_unquoted_date_as_string():
    """Bare YAML dates stay strings instead of becoming datetime.date."""
    meta = extract_front_matter("---\ntitle: Simple Title\ndate: 2024-01-15\n---\nContent")
    assert meta["date"] == "2024-01-15"
    assert meta["title"] == "Simple Title"


def test_extract_front_matter_keeps_unquoted_datetime_as_string():
    meta = extract_front_matter("---\ndate: 2024-01-15 10:30:00\n---\n")
    assert meta["date"] == "2024-01-15 10:30:00"


def test_extract_front_matter_crlf_matches_lf():
    """CRLF-delimited blocks parse the same as LF-delimited ones."""
    lf = "---\ntitle: Hello\ndate: 2024-01-15\n---\nBody"
    crlf = lf.replace("\n", "\r\n")
    assert extract_front_matter(crlf) == extract_front_matter(lf)


def test_extract_front_matter_missing_opening_returns_none():
    assert extract_front_matter("# Just a heading\n\nContent.") is None


def test_extract_front_matter_leading_blank_line_returns_none():
    """The opening delimiter must be the very first line."""
    assert extract_front_matter("\n---\ntitle: x\n---\n") is None


def test_extract_front_matter_unterminated_returns_none():
    text = "---\ntitle: 'Incomplete'\ndate: '2024-01-15'\n\nContent without closing delimiter"
    assert extract_front_matter(text) is None


def test_extract_front_matter_empty_text_returns_none():
    assert extract_front_matter("") is None


def test_extract_front_matter_empty_block():
    """An empty block is present but carries no fields."""
    assert extract_front_matter("---\n---\nBody") == {}


def test_extract_front_matter_closing_line_must_be_exact():
    """A line starting with --- but carrying more text does not close the block."""
    assert extract_front_matter("---\ntitle: x\n---more\n") is None


def test_extract_front_matter_stops_at_first_closing_line():
    text = "---\ntitle: One\n---\nBody\n---\nMore\n"
    assert extract_front_matter(text) == {"title": "One"}


def test_extract_front_matter_malformed_yaml_raises():
    """Broken YAML inside a well-delimited block is an error, not None."""
    with pytest.raises(FrontMatterError, match="Invalid YAML front matter"):
        extract_front_matter('---\ntitle: "Bad YAML\ndate: 2024-01-15\n---\n\nContent')


def test_extract_front_matter_error_message_is_one_line():
    with pytest.raises(FrontMatterError) as excinfo:
        extract_front_matter('---\ntitle: "Bad YAML\ndate: 2024-01-15\n---\n')
    assert "\n" not in str(excinfo.value)
    assert "while scanning a quoted scalar" in str(excinfo.value)


@pytest.mark.parametrize("word", ["yes", "No", "on", "Off", "y", "n"])
def test_extract_front_matter_yaml_11_booleans_stay_strings(word):
    """Only true/false are booleans; yes/no/on/off remain plain text."""
    meta = extract_front_matter(f"---\ntitle: {word}\ndate: 2024-01-15\n---\n")
    assert meta["title"] == word
    assert is_valid_front_matter(meta)


def test_extract_front_matter_sexagesimal_stays_string():
    meta = extract_front_matter("---\ntitle: Clock\ndate: 12:30:00\n---\n")
    assert meta["date"] == "12:30:00"


def test_extract_front_matter_core_schema_scalars():
    text = "---\ndraft: false\npublished: True\ncount: 12\nhex: 0x1F\noctal: 0o17\nratio: 1.5\nbig: 1e3\nnothing: null\nversion: 1_000\n---\n"
    assert extract_front_matter(text) == {
        "draft": False,
        "published": True,
        "count": 12,
        "hex": 31,
        "octal": 15,
        "ratio": 1.5,
        "big": 1000.0,
        "nothing": None,
        "version": "1_000",
    }


def test_extract_front_matter_non_mapping_raises():
    with pytest.raises(FrontMatterError, match="expected a mapping"):
        extract_front_matter("---\n- one\n- two\n---\n")


def test_content_after_front_matter_trims_body():
    text = "---\ntitle: T\ndate: '2024-01-15'\n---\n\n  Post content here.\n\n"
    assert content_after_front_matter(text) == "Post content here."


def test_content_after_front_matter_crlf():
    text = "---\r\ntitle: T\r\n---\r\nBody\r\n"
    assert content_after_front_matter(text) == "Body"


def test_content_after_front_matter_without_block_is_unmodified():
    """Text without a block comes back untouched, including whitespace."""
    text = "  # Heading\n\nBody\n\n"
    assert content_after_front_matter(text) == text


def test_content_after_front_matter_unterminated_is_unmodified():
    text = "---\ntitle: x\nbody\n"
    assert content_after_front_matter(text) == text


@pytest.mark.parametrize(
    "meta",
    [
        None,
        {},
        {"title": "Only title"},
        {"date": "2024-01-15"},
        {"title": "", "date": "2024-01-15"},
        {"title": "T", "date": ""},
        {"title": 42, "date": "2024-01-15"},
        {"title": "T", "date": None},
        {"title": ["T"], "date": "2024-01-15"},
    ],
)
def test_is_valid_front_matter_rejects(meta):
    assert is_valid_front_matter(meta) is False


def test_is_valid_front_matter_accepts_any_non_empty_date_string():
    """No date-format validation happens at this stage."""
    assert is_valid_front_matter({"title": "T", "date": "not-a-date", "extra": 1}) is True


@pytest.mark.parametrize(
    "identifier, slug",
    [
        ("../../posts/my-post.md", "my-post"),
        ("../../posts/2024-01-15-new-post.md", "2024-01-15-new-post"),
        ("my-post.md", "my-post"),
        ("../../posts/my.md.file.md", "my.file.md"),
        ("../../posts/", ""),
        ("../../posts/.md", ""),
    ],
)
def test_derive_slug(identifier, slug):
    assert derive_slug(identifier) == slug


def test_parse_date_plain_date_is_utc_midnight():
    assert parse_date("2024-01-15") == dt.datetime(2024, 1, 15, tzinfo=dt.timezone.utc)


def test_parse_date_iso_with_zone():
    parsed = parse_date("2024-01-15T09:00:00+09:00")
    assert parsed == dt.datetime(2024, 1, 15, tzinfo=dt.timezone.utc)


def test_parse_date_iso_with_z_suffix():
    assert parse_date("2024-01-15T10:00:00Z") == dt.datetime(2024, 1, 15, 10, tzinfo=dt.timezone.utc)


def test_parse_date_rfc822():
    parsed = parse_date("Mon, 15 Jan 2024 10:00:00 +0000")
    assert parsed == dt.datetime(2024, 1, 15, 10, tzinfo=dt.timezone.utc)


def test_parse_date_out_of_range_after_utc_conversion():
    assert parse_date("0001-01-01T00:00:00+01:00") is None
    assert parse_date("9999-12-31T23:30:00-01:00") is None


@pytest.mark.parametrize("value", ["not-a-date", "", "   ", "2024-13-45"])
def test_parse_date_invalid_returns_none(value):
    assert parse_date(value) is None
