"""Async client for publishing to Hashnode."""

from hashpost.clients.hashnode import HashnodeClient, create_client
from hashpost.config import ClientConfig, RetryConfig, Settings
from hashpost.errors import ClassifiedError, ConfigurationError, ErrorKind
from hashpost.models import Article, ArticleUpdate, MetaTags, Post, PostSettings, Series, Tag
from hashpost.rate_limit import RateLimitSnapshot

__version__ = "0.1.0"

__all__ = [
    "Article",
    "ArticleUpdate",
    "ClassifiedError",
    "ClientConfig",
    "ConfigurationError",
    "ErrorKind",
    "HashnodeClient",
    "MetaTags",
    "Post",
    "PostSettings",
    "RateLimitSnapshot",
    "RetryConfig",
    "Series",
    "Settings",
    "Tag",
    "create_client",
]
