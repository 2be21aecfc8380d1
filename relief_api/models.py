"""Pydantic models for the Disaster Response Coordination API."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from .exceptions import ResourceLookupError
from .utils.common import parse_point


def _utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def _normalize_tags(tags: Optional[List[str]]) -> List[str]:
    """Trim tags and drop blanks and duplicates, keeping first-seen order."""
    if tags is None:
        return []
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


# ============== Geocoding Models ==============


class GeocodeResult(BaseModel):
    """A resolved coordinate pair. Both values are required together."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class GeocodeRequest(BaseModel):
    """Input schema for free-text geocoding."""

    description: str = Field(..., min_length=1, max_length=5000)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Description cannot be empty")
        return v


class GeocodeResponse(BaseModel):
    location_name: str
    coordinates: GeocodeResult


# ============== Disaster Models ==============


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class AuditEntry(BaseModel):
    """A single append-only audit trail record."""

    action: AuditAction
    user_id: str
    timestamp: datetime = Field(default_factory=_utc_now)


class DisasterCreate(BaseModel):
    """Input schema for reporting a disaster."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    tags: List[str] = Field(default_factory=list, examples=[["flood", "earthquake"]])

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _normalize_tags(v)


class DisasterUpdate(BaseModel):
    """
    Input schema for updating a disaster.

    Location fields are deliberately absent: coordinates are derived once at
    creation and never edited.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    tags: Optional[List[str]] = Field(default=None)

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        if v is None:
            return v
        return _normalize_tags(v)

    def changes(self) -> Dict[str, Any]:
        """Return only the fields the client actually supplied."""
        return self.model_dump(exclude_none=True)


class Disaster(BaseModel):
    """A reported disaster with its resolved location."""

    id: str
    title: str
    description: str
    tags: List[str] = Field(default_factory=list)
    owner_id: str
    location_name: str
    location: str = Field(..., description="Persisted point, POINT(<lng> <lat>)")
    audit_trail: List[AuditEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utc_now)

    @computed_field
    @property
    def coordinates(self) -> Optional[GeocodeResult]:
        """The stored point as lat/lng; None if the stored text is malformed or out of range."""
        try:
            lng, lat = parse_point(self.location)
            return GeocodeResult(lat=lat, lng=lng)
        except (ResourceLookupError, ValueError):
            return None


# ============== Resource Models ==============


class Resource(BaseModel):
    """A relief resource (shelter, hospital, ...) near a query origin."""

    id: str
    name: str
    category: str
    lat: float
    lng: float
    distance_km: float = Field(..., ge=0)


# ============== Social Media Models ==============


class Priority(str, Enum):
    """Urgency classification of a social report."""
    NORMAL = "Normal"
    HIGH = "High"


class SocialReport(BaseModel):
    text: str
    author: str
    priority: Priority = Priority.NORMAL


# ============== Image Verification Models ==============


class ImageVerificationRequest(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=2048)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str) -> str:
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("image_url must be an http(s) URL")
        return v


class ImageVerificationResult(BaseModel):
    verified: bool
    reason: str


# ============== Official Updates Models ==============


class OfficialUpdate(BaseModel):
    source: str
    update: str
    link: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: bool = True
    code: str
    message: str
    request_id: Optional[str] = None
    details: Optional[dict] = None
