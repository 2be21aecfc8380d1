"""Configuration settings for the Disaster Response Coordination API."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "Disaster Response Coordination API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS Settings
    cors_origins: list = ["*"]  # Restrict in production, e.g., ["https://yourdomain.com"]

    # Gemini Settings (location extraction + image verification)
    gemini_api_key: Optional[str] = None
    gemini_text_model: str = "gemini-1.5-flash"
    gemini_vision_model: str = "gemini-1.5-flash"
    mock_location: str = "Manhattan, NYC"  # Returned when Gemini is not configured

    # Geocoding Providers (tried in this order: Google Maps, Mapbox, Nominatim)
    google_maps_api_key: Optional[str] = None
    mapbox_api_key: Optional[str] = None
    nominatim_base_url: str = "https://nominatim.openstreetmap.org/search"
    nominatim_user_agent: str = "disaster-response-api/1.0"
    geocoder_timeout_seconds: float = 15.0

    # Cache Settings
    cache_directory: str = ".cache"
    cache_size_limit: int = 2**30  # 1GB
    cache_ttl_seconds: int = 3600  # 1 hour
    updates_cache_ttl_seconds: int = 1800  # 30 minutes for scraped updates

    # Resource Matching
    resource_search_radius_km: float = 10.0

    # Official Updates Scraping
    updates_source_url: str = "https://www.reuters.com/world/"
    updates_source_name: str = "Reuters World News"
    updates_link_base: str = "https://www.reuters.com"
    updates_limit: int = 5
    scrape_timeout_seconds: float = 20.0

    # Real-time Events
    event_queue_size: int = 100  # Per-subscriber backlog before messages are dropped

    # Mock Authentication ("Authorization: Bearer <username>")
    auth_header: str = "Authorization"
    users: dict = {
        "netrunnerX": "admin",
        "reliefAdmin": "contributor",
        "citizen1": "contributor",
    }

    # Request Logging
    request_log_to_file: bool = True
    request_log_file: str = "logs/requests.jsonl"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
