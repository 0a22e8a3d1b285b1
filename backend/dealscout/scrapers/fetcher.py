"""HTTP fetch layer supplying raw page or feed content to the dispatcher."""

import json
from dataclasses import dataclass
from typing import Any, Optional

import httpx
import structlog

from dealscout.config import Settings, settings as default_settings
from dealscout.core.exceptions import FetchError
from dealscout.scrapers.utils.retry import http_retry

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    """Raw response handed to the extraction dispatcher."""

    url: str
    final_url: str
    status_code: int
    content_type: str
    body: Any  # HTML text, or the decoded JSON value for JSON responses
    raw_length: int

    @property
    def is_json(self) -> bool:
        return not isinstance(self.body, str)


class PageFetcher:
    """Fetches retailer pages and feeds with browser-like headers.

    Retries connection errors, timeouts and 5xx responses with
    exponential backoff; anything else is raised as FetchError.
    """

    def __init__(
        self,
        settings: Settings = default_settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport  # injected in tests
        self.logger = logger.bind(component="page_fetcher")

    async def fetch(self, url: str) -> FetchedPage:
        """Fetch a URL and decode JSON bodies.

        Args:
            url: Page or feed URL

        Returns:
            FetchedPage with a str body for HTML, or a JSON value for feeds

        Raises:
            FetchError: If the request fails after retries
        """
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            self.logger.warning("fetch_failed", url=url, error=str(e))
            raise FetchError(url, str(e) or e.__class__.__name__) from e

        content_type = response.headers.get("content-type", "unknown")
        text = response.text
        body: Any = text

        if "json" in content_type.lower():
            try:
                body = json.loads(text)
            except json.JSONDecodeError:
                self.logger.warning("json_content_type_but_invalid_body", url=url)

        self.logger.info(
            "fetched_page",
            url=url,
            status_code=response.status_code,
            content_type=content_type,
            length=len(text),
        )

        return FetchedPage(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            content_type=content_type,
            body=body,
            raw_length=len(text),
        )

    @http_retry
    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            headers=self.settings.fetch_headers(),
            timeout=self.settings.FETCH_TIMEOUT_SECONDS,
            follow_redirects=True,
            max_redirects=self.settings.FETCH_MAX_REDIRECTS,
            transport=self._transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response
