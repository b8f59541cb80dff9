"""Hashnode GraphQL API client for hashpost."""

from dataclasses import replace
from datetime import datetime
from typing import Any

import httpx

from hashpost.config import ClientConfig, RetryConfig, Settings, get_settings
from hashpost.errors import (
    ClassifiedError,
    ConfigurationError,
    ErrorKind,
    GraphQLResponseError,
    classify_error,
    log_error,
)
from hashpost.models import (
    Article,
    ArticleUpdate,
    Post,
    Publication,
    ScheduledPost,
    build_post_input,
)
from hashpost.queries import (
    CREATE_POST_MUTATION,
    DELETE_POST_MUTATION,
    GET_POST_QUERY,
    GET_PUBLICATION_QUERY,
    SCHEDULE_POST_MUTATION,
    UPDATE_POST_MUTATION,
)
from hashpost.rate_limit import RateLimitSnapshot, RateLimitTracker
from hashpost.retry import RetryPolicy, Sleep
from hashpost.utils.logging import get_logger, setup_logging

# Host queried by test_connection(); always resolvable on Hashnode
CONNECTION_CHECK_HOST = "hashnode.com"


class HashnodeClient:
    """Client for publishing content through the Hashnode GraphQL API.

    The client keeps no per-operation state, so independent operations can
    run concurrently on one instance. The only shared mutable state is the
    rate-limit snapshot and the current configuration, which is swapped as a
    whole by update_token().
    """

    def __init__(
        self,
        config: ClientConfig,
        retry_config: RetryConfig | None = None,
        *,
        timeout: float = 30.0,
        sleep: Sleep | None = None,
        logger: Any = None,
    ) -> None:
        self._config = config
        self._logger = logger if logger is not None else get_logger(__name__)
        self._retry = RetryPolicy(retry_config or RetryConfig(), sleep=sleep, logger=self._logger)
        self._rate_limits = RateLimitTracker()
        self._client = httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "HashnodeClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    @property
    def config(self) -> ClientConfig:
        """The configuration used by requests started from now on."""
        return self._config

    def get_rate_limit_info(self) -> RateLimitSnapshot | None:
        """Get the rate-limit window from the latest response that reported one."""
        return self._rate_limits.current()

    def update_token(self, new_token: str) -> None:
        """Replace the API token used for subsequent requests.

        Args:
            new_token: The new Hashnode API token.

        Raises:
            ConfigurationError: If the token is malformed. The current token
                stays in use.
        """
        new_config = self._config.with_token(new_token)
        self._config = new_config
        self._logger.info("Hashnode API token updated", publication_id=new_config.publication_id)

    async def _execute(
        self, config: ClientConfig, query: str, variables: dict[str, Any]
    ) -> dict[str, Any]:
        """Send one GraphQL request and return its ``data`` object.

        Raises:
            GraphQLResponseError: If the response carries GraphQL errors.
            httpx.HTTPStatusError: If the response has a non-2xx status.
            httpx.RequestError: On transport failures.
            RuntimeError: If a successful response has no ``data``.
        """
        response = await self._client.post(
            config.api_url,
            json={"query": query, "variables": variables},
            headers={
                "Authorization": config.api_token,
                "Content-Type": "application/json",
            },
        )

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict) and payload.get("errors"):
            raise GraphQLResponseError(payload["errors"], response)

        response.raise_for_status()

        if not isinstance(payload, dict) or payload.get("data") is None:
            raise RuntimeError("Hashnode returned a response without data")

        self._rate_limits.record(response.headers)
        return payload["data"]

    async def _request(
        self, operation: str, query: str, variables: dict[str, Any], **context: Any
    ) -> dict[str, Any]:
        """Run a GraphQL operation under the retry policy.

        Raises:
            ClassifiedError: With ``operation`` and ``context`` attached.
        """
        # Retries of this call keep using the config it started with
        config = self._config
        try:
            return await self._retry.run(lambda: self._execute(config, query, variables))
        except ClassifiedError as error:
            surfaced = error.with_context(operation=operation, **context)
            log_error(surfaced, self._logger)
            raise surfaced from error

    def _unwrap(self, data: dict[str, Any], operation: str, *path: str) -> dict[str, Any]:
        """Walk ``path`` into a response ``data`` object.

        Raises:
            ClassifiedError: If any step of the path is missing.
        """
        value: Any = data
        for key in path:
            if not isinstance(value, dict) or value.get(key) is None:
                error = ClassifiedError(
                    f"Unexpected response shape: missing {'.'.join(path)}",
                    ErrorKind.UNKNOWN,
                    details=data,
                    context={"operation": operation},
                )
                log_error(error, self._logger)
                raise error
            value = value[key]
        return value

    def _parse(self, model: Any, payload: Any, operation: str) -> Any:
        """Build ``model`` from a response object.

        Raises:
            ClassifiedError: If the object lacks fields the model requires.
        """
        try:
            return model.from_api_response(payload)
        except (KeyError, TypeError, AttributeError) as e:
            error = ClassifiedError(
                f"Unexpected response shape for {model.__name__}: {e!r}",
                ErrorKind.UNKNOWN,
                details=payload,
                context={"operation": operation},
            )
            log_error(error, self._logger)
            raise error from e

    async def create_post(self, article: Article) -> Post:
        """Create and publish a new post in the configured publication.

        Args:
            article: The article to publish.

        Returns:
            The created Post.

        Raises:
            ClassifiedError: If the request fails.
        """
        self._logger.info("Creating post", title=article.title, slug=article.slug)
        post_input = {"publicationId": self._config.publication_id, **build_post_input(article)}
        data = await self._request(
            "createPost", CREATE_POST_MUTATION, {"input": post_input}, title=article.title
        )
        post: Post = self._parse(
            Post, self._unwrap(data, "createPost", "publishPost", "post"), "createPost"
        )
        self._logger.info("Post created", post_id=post.id, url=post.url)
        return post

    async def update_post(self, post_id: str, article: Article | ArticleUpdate) -> Post:
        """Update an existing post. Only the fields set on ``article`` are sent.

        Args:
            post_id: The Hashnode ID of the post.
            article: The fields to change.

        Returns:
            The updated Post.

        Raises:
            ClassifiedError: If the request fails.
        """
        self._logger.info("Updating post", post_id=post_id)
        post_input = {"id": post_id, **build_post_input(article)}
        data = await self._request(
            "updatePost", UPDATE_POST_MUTATION, {"input": post_input}, post_id=post_id
        )
        post: Post = self._parse(
            Post, self._unwrap(data, "updatePost", "updatePost", "post"), "updatePost"
        )
        self._logger.info("Post updated", post_id=post.id)
        return post

    async def delete_post(self, post_id: str) -> Post:
        """Remove a post.

        Returns:
            The removed Post as last seen by Hashnode.

        Raises:
            ClassifiedError: If the request fails.
        """
        self._logger.info("Deleting post", post_id=post_id)
        data = await self._request(
            "deletePost", DELETE_POST_MUTATION, {"input": {"id": post_id}}, post_id=post_id
        )
        post: Post = self._parse(
            Post, self._unwrap(data, "deletePost", "removePost", "post"), "deletePost"
        )
        self._logger.info("Post deleted", post_id=post.id)
        return post

    async def schedule_post(self, draft_id: str, scheduled_date: datetime) -> ScheduledPost:
        """Schedule a draft for publication.

        Args:
            draft_id: The Hashnode ID of the draft.
            scheduled_date: When to publish. Should be timezone-aware.

        Returns:
            The ScheduledPost.

        Raises:
            ClassifiedError: If the request fails.
        """
        publish_at = scheduled_date.isoformat()
        self._logger.info("Scheduling post", draft_id=draft_id, publish_at=publish_at)
        data = await self._request(
            "schedulePost",
            SCHEDULE_POST_MUTATION,
            {"input": {"draftId": draft_id, "publishAt": publish_at}},
            draft_id=draft_id,
            scheduled_date=publish_at,
        )
        scheduled: ScheduledPost = self._parse(
            ScheduledPost,
            self._unwrap(data, "schedulePost", "scheduleDraft", "scheduledPost"),
            "schedulePost",
        )
        self._logger.info("Post scheduled", draft_id=draft_id, scheduled_date=scheduled.scheduled_date)
        return scheduled

    async def get_post(self, post_id: str) -> Post | None:
        """Get a post by ID.

        Returns:
            The Post if found, None otherwise.
        """
        data = await self._request("getPost", GET_POST_QUERY, {"id": post_id}, post_id=post_id)
        post = data.get("post")
        if post is None:
            self._logger.warning("Post not found", post_id=post_id)
            return None
        return self._parse(Post, post, "getPost")

    async def get_publication(self, host: str | None = None) -> Publication | None:
        """Get a publication by host name, e.g. ``blog.example.com``.

        Args:
            host: The publication host. Defaults to the configured
                ``publication_host``.

        Returns:
            The Publication if found, None otherwise.

        Raises:
            ConfigurationError: If no host is given and none is configured.
            ClassifiedError: If the request fails.
        """
        host = host or self._config.publication_host
        if not host:
            raise ConfigurationError(
                "A publication host is required. Pass one or set HASHNODE_PUBLICATION_HOST."
            )
        data = await self._request(
            "getPublication", GET_PUBLICATION_QUERY, {"host": host}, host=host
        )
        publication = data.get("publication")
        if publication is None:
            self._logger.warning("Publication not found", host=host)
            return None
        return self._parse(Publication, publication, "getPublication")

    async def publish_post(self, article: Article) -> Post:
        """Create a post with the publish flag forced on."""
        return await self.create_post(replace(article, is_published=True))

    async def unpublish_post(self, post_id: str) -> Post:
        """Update a post with the publish flag forced off."""
        return await self.update_post(post_id, ArticleUpdate(is_published=False))

    async def sync_metadata(self, post_id: str, article: Article | ArticleUpdate) -> Post:
        """Push only the tags, series and SEO meta tags of ``article``."""
        return await self.update_post(
            post_id,
            ArticleUpdate(tags=article.tags, series=article.series, meta_tags=article.meta_tags),
        )

    async def test_connection(self) -> bool:
        """Check that the API is reachable with the current token.

        Makes a single read-only request and never retries.

        Returns:
            True if the request succeeded, False otherwise.
        """
        try:
            await self._execute(
                self._config, GET_PUBLICATION_QUERY, {"host": CONNECTION_CHECK_HOST}
            )
        except Exception as e:
            error = classify_error(e)
            self._logger.warning(
                "Hashnode connection test failed",
                kind=error.kind.value,
                status_code=error.status_code,
                error=error.message,
            )
            return False
        return True


def create_client(settings: Settings | None = None, **kwargs: Any) -> HashnodeClient:
    """Create a HashnodeClient from environment settings.

    Also configures logging at the settings' ``log_level``.

    Args:
        settings: Settings to use. Loaded from the environment if omitted.
        **kwargs: Passed through to HashnodeClient.

    Returns:
        A configured HashnodeClient.
    """
    if settings is None:
        settings = get_settings()
    setup_logging(settings.log_level)
    return HashnodeClient(settings.client_config(), settings.retry_config(), **kwargs)
