"""
Web Scrapers Module.

- OfficialUpdatesScraper: Headline updates from a configured news source
"""

from .updates_scraper import OfficialUpdatesScraper, get_updates_scraper

__all__ = ["OfficialUpdatesScraper", "get_updates_scraper"]
