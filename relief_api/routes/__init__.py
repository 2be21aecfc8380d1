"""
API Routes Module.

Contains all FastAPI router definitions:
- disasters_router: Disaster CRUD
- geocode_router: Free-text geocoding
- resources_router: Nearby resources
- social_router: Classified social reports
- updates_router: Scraped official updates
- verify_router: Image verification
- realtime_router: WebSocket event stream
"""

from .disasters import router as disasters_router
from .geocode import router as geocode_router
from .resources import router as resources_router
from .social import router as social_router
from .updates import router as updates_router
from .verify import router as verify_router
from .realtime import router as realtime_router

__all__ = [
    "disasters_router",
    "geocode_router",
    "resources_router",
    "social_router",
    "updates_router",
    "verify_router",
    "realtime_router",
]
