"""
Service Request Model Module

This module defines the ServiceRequest table. Requests are submitted publicly
against an existing partner and managed by administrators afterwards.
"""
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
import uuid


def new_request_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ServiceRequest(SQLModel, table=True):
    """
    ServiceRequest model representing a ticket submitted against a partner.

    Attributes:
        id: Unique identifier (UUID) assigned on creation
        partner_id: Foreign key to the Partner this request belongs to
        preferred_contact: One of "email", "phone", "both"
        urgency: One of "low", "medium", "high", "urgent"
        request_type: One of "support", "billing", "feature", "bug", "other"
        description: Free-text description of the request
        recipient_name: Name of the person the request is for
        recipient_address: Postal address of the recipient
        recipient_email: Email address of the recipient
        recipient_phone: Phone number of the recipient
        description_of_need: What the recipient needs
        created_at: UTC timestamp of when the request was stored
    """
    __tablename__ = "requests"

    # Primary key - auto-generated UUID
    id: str = Field(default_factory=new_request_id, primary_key=True)

    # Relationship - must reference an existing partner (no cascade on delete)
    partner_id: str = Field(foreign_key="partners.id", index=True, nullable=False, max_length=4)

    # Request details - enumerated values are validated before they reach the table
    preferred_contact: str = Field(nullable=False)
    urgency: str = Field(nullable=False)
    request_type: Optional[str] = None
    description: str = Field(nullable=False)

    # Recipient details
    recipient_name: Optional[str] = None
    recipient_address: Optional[str] = None
    recipient_email: Optional[str] = None
    recipient_phone: Optional[str] = None
    description_of_need: Optional[str] = None

    # Audit timestamp - set once on insert
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        nullable=False,
        index=True,
    )
