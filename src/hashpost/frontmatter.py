"""Load articles from markdown files with YAML front matter."""

import re
from datetime import UTC, date, datetime, time
from pathlib import Path
from typing import Any

import yaml

from hashpost.errors import FrontMatterError
from hashpost.models import Article, MetaTags, PostSettings, Tag
from hashpost.utils.logging import get_logger

logger = get_logger(__name__)

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\n(.*?)\n---[ \t]*(?:\n|\Z)(.*)\Z", re.DOTALL)
SLUG_STRIP_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lowercase ``value`` and join its alphanumeric runs with dashes."""
    return SLUG_STRIP_PATTERN.sub("-", value.lower()).strip("-")


def parse_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into its front matter and body.

    Raises:
        FrontMatterError: If there is no front matter block or it is not a
            YAML mapping.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if not match:
        raise FrontMatterError("No front matter found in markdown file")

    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML front matter: {e}") from e

    if not isinstance(meta, dict):
        raise FrontMatterError("Front matter must be a mapping")
    return meta, match.group(2)


def _parse_tags(raw: Any) -> list[Tag]:
    tags = []
    for item in raw or []:
        if isinstance(item, str):
            tags.append(Tag(name=item, slug=slugify(item)))
        elif isinstance(item, dict) and item.get("name"):
            name = str(item["name"])
            tags.append(Tag(name=name, slug=item.get("slug") or slugify(name), id=item.get("id")))
        else:
            raise FrontMatterError(f"Unsupported tag entry: {item!r}")
    return tags


def _parse_datetime(raw: Any) -> datetime | None:
    # YAML turns unquoted timestamps into datetime/date already
    if raw is None or isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime.combine(raw, time(), tzinfo=UTC)
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError as e:
        raise FrontMatterError(f"Invalid publishedAt value: {raw!r}") from e


def article_from_front_matter(meta: dict[str, Any], body: str) -> Article:
    """Build an Article from parsed front matter and a markdown body.

    Raises:
        FrontMatterError: If ``title`` or ``slug`` is missing.
    """
    for key in ("title", "slug"):
        if not meta.get(key):
            raise FrontMatterError(f"Front matter is missing required field '{key}'")

    meta_tags = meta.get("metaTags") or {}
    settings = meta.get("settings") or {}
    return Article(
        title=str(meta["title"]),
        slug=str(meta["slug"]),
        content=body.strip(),
        subtitle=meta.get("subtitle"),
        cover_image_url=meta.get("coverImage"),
        tags=_parse_tags(meta.get("tags")),
        published_at=_parse_datetime(meta.get("publishedAt")),
        is_published=meta.get("isPublished") is not False,
        meta_tags=MetaTags(
            title=meta_tags.get("title"),
            description=meta_tags.get("description"),
            image=meta_tags.get("image"),
        )
        if meta_tags
        else None,
        settings=PostSettings(
            enable_table_of_contents=settings.get("enableTableOfContents"),
            disable_comments=settings.get("disableComments"),
            is_newsletter_activated=settings.get("isNewsletterActivated"),
        )
        if settings
        else None,
    )


def load_article(path: str | Path) -> Article:
    """Read a markdown file and return the Article it describes.

    Args:
        path: Path to a markdown file starting with a ``---`` front matter block.

    Returns:
        The parsed Article.

    Raises:
        FrontMatterError: If the front matter is missing or invalid.
    """
    path = Path(path)
    logger.info("Loading article", path=str(path))
    meta, body = parse_front_matter(path.read_text(encoding="utf-8"))
    article = article_from_front_matter(meta, body)
    logger.info(
        "Article loaded",
        title=article.title,
        slug=article.slug,
        tags=len(article.tags),
        content_length=len(article.content),
    )
    return article
