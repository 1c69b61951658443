"""Configuration management for the Webflow RSS feed."""

import os
from dataclasses import dataclass, field

DEFAULT_API_BASE = "https://api.webflow.com"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class WebflowConfig:
    """Configuration for the Webflow Data API."""

    collection_id: str = ""
    site_id: str = ""
    api_token: str = ""
    token_secret_name: str = ""
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT

    @property
    def items_url(self) -> str:
        """Item-listing endpoint of the configured collection."""
        return f"{self.api_base}/v2/collections/{self.collection_id}/items"


@dataclass(frozen=True)
class FeedConfig:
    """Channel-level metadata of the generated feed."""

    site_url: str = "https://yoursite.com"
    title: str = "Your Blog"
    description: str = "Latest blog posts"
    feed_path: str = "/api/rss"
    language: str = "en-us"

    @property
    def feed_url(self) -> str:
        """Public URL of the feed itself, used for the atom self link."""
        return f"{self.site_url}{self.feed_path}"


@dataclass(frozen=True)
class Config:
    """Main configuration, loaded once per process."""

    webflow: WebflowConfig = field(default_factory=WebflowConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    aws_region: str = "us-east-1"
    metrics_enabled: bool = False

    @property
    def feed_url(self) -> str:
        return self.feed.feed_url

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Config":
        """Build configuration from environment variables.

        Args:
            environ: Mapping to read from, defaults to ``os.environ``

        Returns:
            Immutable Config instance

        Raises:
            ValueError: If WEBFLOW_TIMEOUT is not a positive number
        """
        env = os.environ if environ is None else environ

        raw_timeout = env.get("WEBFLOW_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ValueError(f"Invalid WEBFLOW_TIMEOUT: {raw_timeout!r}") from e
        if timeout <= 0:
            raise ValueError(f"WEBFLOW_TIMEOUT must be positive: {raw_timeout!r}")

        feed_path = env.get("FEED_PATH", "/api/rss").strip() or "/api/rss"
        if not feed_path.startswith("/"):
            feed_path = f"/{feed_path}"

        webflow = WebflowConfig(
            collection_id=env.get("WEBFLOW_COLLECTION_ID", "").strip(),
            site_id=env.get("WEBFLOW_SITE_ID", "").strip(),
            api_token=env.get("WEBFLOW_API_TOKEN", "").strip(),
            token_secret_name=env.get("WEBFLOW_TOKEN_SECRET_NAME", "").strip(),
            api_base=(env.get("WEBFLOW_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
            timeout=timeout,
        )
        feed = FeedConfig(
            site_url=(env.get("SITE_URL") or "https://yoursite.com").rstrip("/"),
            title=env.get("SITE_NAME") or "Your Blog",
            description=env.get("SITE_DESCRIPTION") or "Latest blog posts",
            feed_path=feed_path,
        )

        return cls(
            webflow=webflow,
            feed=feed,
            aws_region=env.get(
                "AWS_REGION", env.get("AWS_DEFAULT_REGION", "us-east-1")
            ),
            metrics_enabled=env.get("ENABLE_CLOUDWATCH_METRICS", "false")
            .strip()
            .lower()
            in ("1", "true", "yes"),
        )
