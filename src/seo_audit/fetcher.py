"""
Live Page Fetcher

Retrieves rendered pages for the site's static routes so they can be analyzed
instead of the raw templates. Requests run concurrently under a semaphore;
a route that errors, times out or answers with a non-success status is logged
and skipped.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from seo_audit.constants import (
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_MAX_CONCURRENT_REQUESTS,
    DEFAULT_USER_AGENT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    """HTML served for one route."""

    url: str
    route: str
    html: str


class LivePageFetcher:
    """Fetch rendered pages with bounded concurrency and a per-request timeout."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT_REQUESTS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the fetcher.

        Args:
            base_url: Site base URL without trailing slash
            timeout: Seconds allowed per request
            max_concurrent: Maximum requests in flight
            user_agent: User-Agent header sent with every request
            transport: Optional httpx transport (used to stub the network)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.user_agent = user_agent
        self.transport = transport
        self.failed_requests = 0

    async def fetch_all(self, routes: List[str]) -> List[FetchedPage]:
        """Fetch every route.

        Args:
            routes: Route paths, each starting with "/"

        Returns:
            Pages that were fetched successfully, in route order
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,*/*",
        }

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=headers,
            transport=self.transport,
        ) as client:
            tasks = [self._fetch(client, semaphore, route) for route in routes]
            results = await asyncio.gather(*tasks)

        pages = [page for page in results if page is not None]
        logger.info(f"Fetched {len(pages)}/{len(routes)} routes from {self.base_url}")
        return pages

    async def _fetch(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        route: str,
    ) -> Optional[FetchedPage]:
        url = f"{self.base_url}{route}"
        async with semaphore:
            try:
                response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
            except asyncio.TimeoutError:
                self.failed_requests += 1
                logger.warning(f"Timeout fetching {url} (>{self.timeout}s)")
                return None
            except httpx.HTTPError as e:
                self.failed_requests += 1
                logger.warning(f"Error fetching {url}: {type(e).__name__}: {e}")
                return None

        if not response.is_success:
            logger.warning(f"Skipping {url} (status: {response.status_code})")
            return None

        logger.debug(f"Fetched {url} ({len(response.text)} chars)")
        return FetchedPage(url=url, route=route, html=response.text)


def fetch_live_pages(base_url: str, routes: List[str], **kwargs) -> List[FetchedPage]:
    """Synchronous wrapper around LivePageFetcher.fetch_all."""
    fetcher = LivePageFetcher(base_url, **kwargs)
    return asyncio.run(fetcher.fetch_all(routes))
