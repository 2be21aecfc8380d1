"""
Business Logic Services Module.

Core services for the Disaster Response Coordination API:
- CacheService: Disk-based TTL cache shielding external lookups
- GeocodingProviderChain: Ordered fallback across geocoding providers
- LocationResolver: Place-name extraction from free text
- ProximityResourceMatcher: Nearby resources for a disaster
- UrgencyClassifier: Keyword-based report priority
- EventBus: Live fan-out of state changes
- DisasterService: Resolve, geocode, persist, announce
- SocialReportService / ImageVerifier: Report enrichment

These services contain the primary business logic and are used by routes.
"""

from .cache import CacheService, get_cache_service
from .geocoder import GeocodingProviderChain, get_geocoder
from .location import LocationResolver, get_location_resolver, UNKNOWN_LOCATION
from .resources import ProximityResourceMatcher, get_resource_matcher
from .urgency import UrgencyClassifier, get_classifier
from .events import EventBus, Subscription, get_event_bus
from .disasters import DisasterService, get_disaster_service
from .social import SocialReportService, get_social_service
from .verification import ImageVerifier, get_image_verifier

__all__ = [
    "CacheService",
    "get_cache_service",
    "GeocodingProviderChain",
    "get_geocoder",
    "LocationResolver",
    "get_location_resolver",
    "UNKNOWN_LOCATION",
    "ProximityResourceMatcher",
    "get_resource_matcher",
    "UrgencyClassifier",
    "get_classifier",
    "EventBus",
    "Subscription",
    "get_event_bus",
    "DisasterService",
    "get_disaster_service",
    "SocialReportService",
    "get_social_service",
    "ImageVerifier",
    "get_image_verifier",
]
