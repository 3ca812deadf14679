"""
Service request schemas.

Enumerated fields accept only their fixed value sets. Server-assigned fields
(``id``, ``createdAt``) and the read-only ``partnerName`` join are dropped from
incoming payloads rather than rejected, so a record fetched from the API can be
sent back unchanged on update.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import EmailStr, field_validator, model_validator

from portal.schemas.common import NonEmptyStr, PartnerId, PortalModel

SERVER_ASSIGNED_FIELDS = {"id", "createdAt", "created_at", "partnerName", "partner_name"}


class PreferredContact(str, Enum):
    email = "email"
    phone = "phone"
    both = "both"


class Urgency(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class RequestType(str, Enum):
    support = "support"
    billing = "billing"
    feature = "feature"
    bug = "bug"
    other = "other"


class RequestBase(PortalModel):
    """
    Base properties for a service request.
    """
    partner_id: PartnerId
    preferred_contact: PreferredContact
    urgency: Urgency
    request_type: Optional[RequestType] = None
    description: NonEmptyStr

    # Recipient details
    recipient_name: Optional[NonEmptyStr] = None
    recipient_address: Optional[NonEmptyStr] = None
    recipient_email: Optional[EmailStr] = None
    recipient_phone: Optional[NonEmptyStr] = None
    description_of_need: Optional[NonEmptyStr] = None


class RequestCreate(RequestBase):
    """Schema for submitting a request."""

    @model_validator(mode="before")
    @classmethod
    def drop_server_assigned(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if k not in SERVER_ASSIGNED_FIELDS}
        return data


class RequestUpdate(RequestCreate):
    """Schema for updating a request. Every mutable field is replaced."""


class RequestRead(RequestBase):
    """Schema for reading a request, joined with its partner's display name."""
    id: str
    created_at: datetime
    partner_name: Optional[str] = None

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive timestamps
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
