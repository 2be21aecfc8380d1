"""
Domain errors for the Disaster Response Coordination API.

Every error that should reach a client derives from APIError, which carries
a stable error code and HTTP status. The error handler middleware renders
them in the common error format.
"""

from typing import List, Optional


class APIError(Exception):
    """Custom API error with structured response."""

    code = "API_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ):
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ResolutionError(APIError):
    """The text-understanding call failed outright."""

    code = "LOCATION_RESOLUTION_FAILED"
    status_code = 502


class UnknownLocationError(APIError):
    """No place name could be determined from the description."""

    code = "UNKNOWN_LOCATION"
    status_code = 400

    def __init__(self, message: str = "Could not determine a location from the description."):
        super().__init__(message)


class GeocodeError(APIError):
    """Every geocoding provider was exhausted without a result."""

    code = "GEOCODE_FAILED"
    status_code = 422

    def __init__(
        self,
        location_name: str,
        attempted: Optional[List[str]] = None,
        unreachable: Optional[List[str]] = None,
        message: Optional[str] = None,
    ):
        self.location_name = location_name
        self.attempted = list(attempted or [])
        self.unreachable = list(unreachable or [])
        super().__init__(
            message or f"Geocoding failed for '{location_name}'",
            details={
                "location_name": location_name,
                "attempted_providers": self.attempted,
                "unreachable_providers": self.unreachable,
            },
        )


class GeocodingUnavailableError(GeocodeError):
    """Every geocoding provider failed at the transport level."""

    code = "GEOCODER_UNAVAILABLE"
    status_code = 503


class ProviderUnavailableError(Exception):
    """A single geocoding provider could not be reached or answered garbage.

    Internal to the provider chain: logged and skipped, never sent to clients.
    """

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider} unavailable: {reason}")


class ResourceLookupError(APIError):
    """Stored disaster location does not match POINT(<lng> <lat>)."""

    code = "INVALID_LOCATION_DATA"
    status_code = 500


class DisasterNotFoundError(APIError):
    code = "DISASTER_NOT_FOUND"
    status_code = 404

    def __init__(self, disaster_id: str):
        self.disaster_id = disaster_id
        super().__init__(f"Disaster not found: {disaster_id}", details={"disaster_id": disaster_id})


class VerificationError(APIError):
    code = "IMAGE_VERIFICATION_FAILED"
    status_code = 502


class UpdatesUnavailableError(APIError):
    code = "UPDATES_UNAVAILABLE"
    status_code = 502


class NoUpdatesFoundError(APIError):
    code = "NO_UPDATES_FOUND"
    status_code = 404

    def __init__(self, message: str = "No updates found from the source."):
        super().__init__(message)
