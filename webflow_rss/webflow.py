"""Webflow Data API client for the Webflow RSS feed."""

import requests

from .config import WebflowConfig
from .logging_config import create_execution_logger
from .models import ContentRecord


class UpstreamError(RuntimeError):
    """The Webflow API answered with an error or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, reason: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class WebflowClient:
    """Fetches the items of one Webflow CMS collection."""

    def __init__(
        self,
        config: WebflowConfig,
        api_token: str | None = None,
        execution_id: str | None = None,
    ):
        """Initialize WebflowClient with configuration.

        Args:
            config: Webflow API configuration
            api_token: Bearer token, defaults to ``config.api_token``
            execution_id: Execution ID for logging context
        """
        self.config = config
        self.logger = create_execution_logger("webflow_client", execution_id)
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_token or config.api_token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "Webflow-RSS-Feed/1.0",
            }
        )

    def fetch_items(self) -> list[ContentRecord]:
        """Fetch the first page of items of the configured collection.

        Returns:
            Records in the order returned by the API

        Raises:
            UpstreamError: On transport failure, non-2xx status or a non-JSON body
        """
        url = self.config.items_url
        collection_id = self.config.collection_id
        self.logger.info("Fetching collection items", collection_id=collection_id)

        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to reach Webflow API: {e}",
                collection_id=collection_id,
                error=str(e),
            )
            raise UpstreamError(f"Webflow API request failed: {e}") from e

        if not response.ok:
            self.logger.error(
                f"Webflow API error: {response.status_code} {response.reason}",
                collection_id=collection_id,
                status_code=response.status_code,
                reason=response.reason,
            )
            raise UpstreamError(
                f"Webflow API error: {response.status_code} {response.reason}",
                status_code=response.status_code,
                reason=response.reason or "",
            )

        try:
            data = response.json()
        except ValueError as e:
            self.logger.error(
                "Webflow API returned a non-JSON body",
                collection_id=collection_id,
                status_code=response.status_code,
            )
            raise UpstreamError(
                "Webflow API returned invalid JSON",
                status_code=response.status_code,
                reason=response.reason or "",
            ) from e

        raw_items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(raw_items, list):
            raw_items = []

        records = [ContentRecord.from_api(raw) for raw in raw_items]
        self.logger.info(
            "Fetched collection items",
            collection_id=collection_id,
            status_code=response.status_code,
            items_count=len(records),
        )
        return records
