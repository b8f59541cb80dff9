"""Unit tests for the front matter loader."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from hashpost.errors import FrontMatterError
from hashpost.frontmatter import load_article, parse_front_matter, slugify

DOCUMENT = """---
title: "Multi-agent development workflow"
slug: multi-agent-development-workflow
subtitle: How we ship with several agents
coverImage: https://cdn.example.com/cover.png
publishedAt: 2024-03-01T10:00:00Z
tags:
  - name: AI
    slug: ai
  - Developer Tools
metaTags:
  title: Multi-agent workflow
  description: Notes from the field
settings:
  enableTableOfContents: true
  isNewsletterActivated: false
---

# Intro

Body text.
"""


class TestParseFrontMatter:
    """Tests for parse_front_matter."""

    def test_splits_meta_and_body(self) -> None:
        meta, body = parse_front_matter(DOCUMENT)
        assert meta["slug"] == "multi-agent-development-workflow"
        assert body.startswith("\n# Intro")

    def test_missing_front_matter(self) -> None:
        with pytest.raises(FrontMatterError, match="No front matter"):
            parse_front_matter("# Just markdown\n")

    def test_non_mapping_front_matter(self) -> None:
        with pytest.raises(FrontMatterError, match="mapping"):
            parse_front_matter("---\n- a\n- b\n---\nbody\n")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(FrontMatterError, match="Invalid YAML"):
            parse_front_matter("---\ntitle: [unclosed\n---\nbody\n")


class TestLoadArticle:
    """Tests for load_article."""

    def test_loads_article(self, tmp_path: Path) -> None:
        """Should map front matter keys onto an Article."""
        path = tmp_path / "post.md"
        path.write_text(DOCUMENT, encoding="utf-8")

        article = load_article(path)

        assert article.title == "Multi-agent development workflow"
        assert article.content == "# Intro\n\nBody text."
        assert article.cover_image_url == "https://cdn.example.com/cover.png"
        assert article.published_at == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)
        assert article.is_published is True
        assert [(t.name, t.slug) for t in article.tags] == [
            ("AI", "ai"),
            ("Developer Tools", "developer-tools"),
        ]
        assert article.meta_tags is not None
        assert article.meta_tags.description == "Notes from the field"
        assert article.settings is not None
        assert article.settings.enable_table_of_contents is True
        assert article.settings.disable_comments is None

    def test_is_published_false(self, tmp_path: Path) -> None:
        path = tmp_path / "draft.md"
        path.write_text("---\ntitle: Draft\nslug: draft\nisPublished: false\n---\nBody\n")

        assert load_article(path).is_published is False

    def test_missing_slug(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.md"
        path.write_text("---\ntitle: No slug\n---\nBody\n")

        with pytest.raises(FrontMatterError, match="slug"):
            load_article(path)


def test_slugify() -> None:
    assert slugify("  Hello, World! 2024 ") == "hello-world-2024"
