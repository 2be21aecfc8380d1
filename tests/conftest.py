"""Shared fixtures and fakes for the test suite."""

import os
import tempfile

# Settings are cached on first use; pin a clean environment before any import
os.environ["CACHE_DIRECTORY"] = tempfile.mkdtemp(prefix="relief-cache-")
os.environ["REQUEST_LOG_TO_FILE"] = "false"
os.environ["GEMINI_API_KEY"] = ""
os.environ["GOOGLE_MAPS_API_KEY"] = ""
os.environ["MAPBOX_API_KEY"] = ""

from typing import List, Optional  # noqa: E402

import pytest  # noqa: E402

from relief_api.config import Settings  # noqa: E402
from relief_api.exceptions import ProviderUnavailableError  # noqa: E402
from relief_api.models import AuditEntry, Disaster, GeocodeResult, Resource  # noqa: E402
from relief_api.services.cache import CacheService  # noqa: E402
from relief_api.services.events import EventBus  # noqa: E402
from relief_api.storage.repository import InMemoryDisasterRepository  # noqa: E402
from relief_api.storage.resources import ResourceIndex  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGemini:
    """Stands in for GeminiClient."""

    def __init__(self, answer: str = "", configured: bool = True, error: Optional[Exception] = None):
        self.answer = answer
        self.configured = configured
        self.error = error
        self.prompts: List[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.answer

    async def describe_image(self, prompt: str, image_data: bytes, mime_type: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.answer


class StaticProvider:
    """Geocoding provider with a canned outcome."""

    def __init__(self, name: str, result: Optional[GeocodeResult] = None, unreachable: bool = False):
        self.name = name
        self.result = result
        self.unreachable = unreachable
        self.calls: List[str] = []

    async def geocode(self, client, location_name: str) -> Optional[GeocodeResult]:
        self.calls.append(location_name)
        if self.unreachable:
            raise ProviderUnavailableError(self.name, "connection refused")
        return self.result


class RecordingIndex(ResourceIndex):
    """Spatial index that records its queries."""

    def __init__(self, resources: Optional[List[Resource]] = None):
        self.resources = resources if resources is not None else [
            Resource(id="res-1", name="Midtown Shelter", category="shelter",
                     lat=40.7505, lng=-73.9934, distance_km=0.7),
        ]
        self.calls: List[dict] = []

    async def find_resources_near(self, lat: float, lng: float, distance_km: float) -> List[Resource]:
        self.calls.append({"lat": lat, "lng": lng, "distance_km": distance_km})
        return list(self.resources)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        cache_directory=str(tmp_path / "cache"),
        request_log_to_file=False,
        gemini_api_key=None,
        google_maps_api_key=None,
        mapbox_api_key=None,
        event_queue_size=10,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(settings, clock):
    service = CacheService(settings, clock=clock)
    service.initialize()
    yield service
    service.close()


@pytest.fixture
def event_bus(settings) -> EventBus:
    return EventBus(settings)


@pytest.fixture
def repository() -> InMemoryDisasterRepository:
    return InMemoryDisasterRepository()


@pytest.fixture
def make_disaster():
    def _make(disaster_id: str = "d-1", location: str = "POINT(-73.9857 40.7484)", **overrides) -> Disaster:
        fields = {
            "id": disaster_id,
            "title": "Midtown flooding",
            "description": "Flooding near the Empire State Building",
            "tags": ["flood"],
            "owner_id": "netrunnerX",
            "location_name": "Manhattan, NYC",
            "location": location,
            "audit_trail": [AuditEntry(action="create", user_id="netrunnerX")],
        }
        fields.update(overrides)
        return Disaster(**fields)

    return _make


@pytest.fixture
def fake_gemini():
    return FakeGemini


@pytest.fixture
def static_provider():
    return StaticProvider


@pytest.fixture
def recording_index():
    return RecordingIndex
