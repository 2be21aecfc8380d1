"""
Official Updates Scraper.

Scrapes headline links from a configured news page to surface official
updates alongside a disaster. The selector targets the page structure of
the default source and may need adjusting when the source changes.
"""

import logging
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup

from ..config import Settings, get_settings
from ..exceptions import UpdatesUnavailableError
from ..models import OfficialUpdate

logger = logging.getLogger(__name__)

HEADLINE_SELECTOR = 'a[data-testid="Heading"]'

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class OfficialUpdatesScraper:
    """Fetches and parses headline updates from the configured source."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings()
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._settings.scrape_timeout_seconds,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            )
        return self._client

    def _extract_updates(self, html_content: str) -> List[OfficialUpdate]:
        """
        Extract headline links from the page HTML.

        Args:
            html_content: Raw HTML of the source page

        Returns:
            Up to updates_limit OfficialUpdate objects
        """
        soup = BeautifulSoup(html_content, "lxml")
        updates: List[OfficialUpdate] = []

        for anchor in soup.select(HEADLINE_SELECTOR):
            if len(updates) >= self._settings.updates_limit:
                break

            title = anchor.get_text(strip=True)
            href = anchor.get("href") or ""
            if not title:
                continue

            link = href if href.startswith("http") else f"{self._settings.updates_link_base}{href}"
            updates.append(
                OfficialUpdate(
                    source=self._settings.updates_source_name,
                    update=title,
                    link=link,
                )
            )

        return updates

    async def fetch_updates(self) -> List[OfficialUpdate]:
        """
        Scrape the configured source.

        Raises:
            UpdatesUnavailableError: The page could not be fetched
        """
        url = self._settings.updates_source_url

        try:
            client = await self._get_client()
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to scrape {url}: {e}")
            raise UpdatesUnavailableError("Failed to fetch official updates") from e

        updates = self._extract_updates(response.text)
        logger.info(f"Scraped {len(updates)} updates from {url}")
        return updates

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


# Singleton instance
_scraper_instance: Optional[OfficialUpdatesScraper] = None


def get_updates_scraper() -> OfficialUpdatesScraper:
    """Get the singleton updates scraper instance."""
    global _scraper_instance
    if _scraper_instance is None:
        _scraper_instance = OfficialUpdatesScraper()
    return _scraper_instance
