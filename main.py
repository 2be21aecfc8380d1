"""
Disaster Response Coordination API - Main Application Entry Point.

Reports arrive as free text; the API extracts the place, geocodes it across
several providers, attaches nearby relief resources and urgent social
reports, and streams every change to connected WebSocket clients.

Run with: uvicorn main:app --reload
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from relief_api import __version__
from relief_api.config import get_settings
from relief_api.routes import (
    disasters_router,
    geocode_router,
    resources_router,
    social_router,
    updates_router,
    verify_router,
    realtime_router,
)
from relief_api.middleware import (
    ErrorHandlerMiddleware,
    RequestLoggingMiddleware,
    UserAuthMiddleware,
    register_exception_handlers,
)
from relief_api.clients.gemini_client import get_gemini_client
from relief_api.scrapers.updates_scraper import get_updates_scraper
from relief_api.services.cache import get_cache_service
from relief_api.services.events import get_event_bus
from relief_api.services.geocoder import get_geocoder
from relief_api.services.verification import get_image_verifier

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_settings = get_settings()
_started_at: float = None

API_DESCRIPTION = """
## Real-Time Disaster Event Resolution

Report disasters in plain language and get them located, enriched and
broadcast to every connected client.

### Pipeline
- **Location extraction**: Gemini pulls the place name out of the description
- **Geocoding**: Google Maps, then Mapbox, then OpenStreetMap Nominatim
- **Resources**: Shelters, hospitals and supplies within a radius (default 10 km)
- **Social reports**: Tagged `High` priority on urgent keywords (urgent, sos, help, emergency, asap)
- **Live updates**: Every change is pushed over `WS /ws`

### Authentication
Mutating endpoints expect `Authorization: Bearer <username>` with a configured mock user.
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the cache on startup; close outbound HTTP clients and the cache on shutdown."""
    global _started_at
    _started_at = time.time()

    cache_service = get_cache_service()
    cache_service.initialize()

    if get_gemini_client().is_configured:
        logger.info("Gemini configured for location extraction and image verification")
    else:
        logger.warning("GEMINI_API_KEY not set - using mock location and mock image verification")

    logger.info(
        f"Disaster Response API v{__version__} ready "
        f"(geocoders: {', '.join(get_geocoder().provider_names)})"
    )

    yield

    logger.info("Shutting down...")
    for closer in (get_geocoder().close, get_image_verifier().close, get_updates_scraper().close):
        await closer()
    cache_service.close()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    application = FastAPI(
        title=_settings.app_name,
        description=API_DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added = outermost: errors wrap auth, auth wraps access logging
    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(UserAuthMiddleware)
    application.add_middleware(ErrorHandlerMiddleware)

    register_exception_handlers(application)

    for router in (
        geocode_router,
        disasters_router,
        resources_router,
        social_router,
        updates_router,
        verify_router,
        realtime_router,
    ):
        application.include_router(router)

    return application


app = create_app()


@app.get("/", tags=["root"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "geocode": "POST /geocode",
            "disasters": "GET|POST /disasters",
            "resources": "GET /disasters/{id}/resources",
            "social_media": "GET /disasters/{id}/social-media",
            "official_updates": "GET /disasters/{id}/official-updates",
            "verify_image": "POST /disasters/{id}/verify-image",
            "live": "WS /ws",
        },
    }


@app.get(
    "/health",
    tags=["health"],
    summary="Health Check",
    description="Component status. `degraded` means the API works with reduced fidelity.",
)
async def health_check():
    """
    - cache: "ok", or "unavailable" (lookups bypass the cache)
    - gemini: "ok", or "mock" (mock location and mock image verification)
    """
    checks = {
        "cache": "ok" if get_cache_service().is_ready else "unavailable",
        "gemini": "ok" if get_gemini_client().is_configured else "mock",
    }

    return {
        "status": "healthy" if all(v == "ok" for v in checks.values()) else "degraded",
        "version": __version__,
        "checks": checks,
        "geocoding_providers": get_geocoder().provider_names,
        "live_subscribers": get_event_bus().subscriber_count,
        "uptime_seconds": int(time.time() - _started_at) if _started_at else 0,
    }


@app.get("/ready", tags=["health"], summary="Readiness Check")
async def readiness_check():
    # Every dependency degrades instead of failing, so the API is always ready
    return {"ready": True}


@app.get("/cache/stats", tags=["health"], summary="Cache Statistics")
async def cache_stats():
    return await get_cache_service().stats()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
    )
