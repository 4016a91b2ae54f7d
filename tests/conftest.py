"""Shared fixtures: in-memory content sources for the post pipeline"""

import pytest

from mdblog.posts import RawModule


def make_loader(text):
    async def load():
        return RawModule(text)
    return load


def failing_loader(exc):
    async def load():
        raise exc
    return load


def post_text(title, date, body="Post content here."):
    return f"---\ntitle: '{title}'\ndate: '{date}'\n---\n\n{body}\n"


@pytest.fixture(name="make_source")
def make_source_fixture():
    def build(files):
        return {identifier: make_loader(text) for identifier, text in files.items()}
    return build


@pytest.fixture(name="posts_dir")
def posts_dir_fixture(tmp_path):
    root = tmp_path / "posts"
    root.mkdir()
    (root / "first-post.md").write_text(post_text("First Post", "2024-01-10", "Hello **world**"), encoding="utf-8")
    (root / "second-post.md").write_text(post_text("Second & Last", "2024-01-20"), encoding="utf-8")
    (root / "notes.md").write_text("# Just notes\n", encoding="utf-8")
    (root / "readme.txt").write_text(post_text("Ignored", "2024-02-01"), encoding="utf-8")
    return root
