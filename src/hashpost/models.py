"""Domain models for content sent to and returned by Hashnode."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass
class Tag:
    """A post tag. Once synced remotely the slug identifies it."""

    name: str
    slug: str
    id: str | None = None

    def to_input(self) -> dict[str, Any]:
        """Serialize to the remote tag input shape."""
        return _drop_none({"id": self.id, "name": self.name, "slug": self.slug})


@dataclass
class Series:
    """Reference to a Hashnode series."""

    id: str
    name: str | None = None
    slug: str | None = None


@dataclass
class MetaTags:
    """SEO overrides for a post."""

    title: str | None = None
    description: str | None = None
    image: str | None = None

    def to_input(self) -> dict[str, Any]:
        return _drop_none(
            {"title": self.title, "description": self.description, "image": self.image}
        )


@dataclass
class PostSettings:
    """Per-post display and delivery flags."""

    enable_table_of_contents: bool | None = None
    disable_comments: bool | None = None
    is_newsletter_activated: bool | None = None

    def to_input(self) -> dict[str, Any]:
        return _drop_none(
            {
                "enableTableOfContents": self.enable_table_of_contents,
                "disableComments": self.disable_comments,
                "isNewsletterActivated": self.is_newsletter_activated,
            }
        )


@dataclass
class Article:
    """A complete article ready to be created remotely."""

    title: str
    slug: str
    content: str
    subtitle: str | None = None
    cover_image_url: str | None = None
    tags: list[Tag] = field(default_factory=list)
    series: Series | None = None
    published_at: datetime | None = None
    is_published: bool = True
    meta_tags: MetaTags | None = None
    settings: PostSettings | None = None


@dataclass
class ArticleUpdate:
    """A partial article. Fields left as None are not sent."""

    title: str | None = None
    slug: str | None = None
    content: str | None = None
    subtitle: str | None = None
    cover_image_url: str | None = None
    tags: list[Tag] | None = None
    series: Series | None = None
    published_at: datetime | None = None
    is_published: bool | None = None
    meta_tags: MetaTags | None = None
    settings: PostSettings | None = None


def build_post_input(article: Article | ArticleUpdate) -> dict[str, Any]:
    """Map article fields onto the remote post input shape.

    Unset fields are omitted so that updates only touch what the caller set.
    ``is_published`` has no counterpart in the remote input and is not sent.
    """
    tags = article.tags
    values: dict[str, Any] = {
        "title": article.title,
        "slug": article.slug,
        "contentMarkdown": article.content,
        "subtitle": article.subtitle,
        "coverImageOptions": (
            {"coverImageURL": article.cover_image_url} if article.cover_image_url else None
        ),
        "tags": [tag.to_input() for tag in tags] if tags is not None else None,
        "seriesId": article.series.id if article.series else None,
        "publishedAt": article.published_at.isoformat() if article.published_at else None,
        "metaTags": article.meta_tags.to_input() if article.meta_tags else None,
        "settings": article.settings.to_input() if article.settings else None,
    }
    return _drop_none(values)


@dataclass
class Post:
    """A post as returned by the Hashnode API."""

    id: str
    title: str
    slug: str
    url: str
    published_at: str | None = None
    updated_at: str | None = None
    brief: str | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Post":
        """Create a Post from API response data."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            slug=data.get("slug", ""),
            url=data.get("url", ""),
            published_at=data.get("publishedAt"),
            updated_at=data.get("updatedAt"),
            brief=data.get("brief"),
        )


@dataclass
class ScheduledPost:
    """A draft queued for publication at a future date."""

    id: str
    scheduled_date: str
    draft_id: str | None = None
    title: str | None = None
    slug: str | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "ScheduledPost":
        """Create a ScheduledPost from API response data."""
        draft = data.get("draft") or {}
        return cls(
            id=data["id"],
            scheduled_date=data["scheduledDate"],
            draft_id=draft.get("id"),
            title=draft.get("title"),
            slug=draft.get("slug"),
        )


@dataclass
class Publication:
    """A Hashnode publication (blog)."""

    id: str
    title: str
    url: str
    display_title: str | None = None
    post_count: int | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Publication":
        """Create a Publication from API response data."""
        posts = data.get("posts") or {}
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            url=data.get("url", ""),
            display_title=data.get("displayTitle"),
            post_count=posts.get("totalDocuments"),
        )
