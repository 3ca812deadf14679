"""
Partner Model Module

This module defines the Partner table. Partners are looked up publicly by their
4-digit id; only administrators can create, modify or delete them.
"""
from typing import Optional
from sqlmodel import SQLModel, Field


class Partner(SQLModel, table=True):
    """
    Partner model representing an organization/contact record.

    Attributes:
        id: 4-digit identifier chosen by the administrator (immutable)
        name: Partner display name
        email: Contact email address
        phone: Contact phone number
        referring_case_manager: Name of the referring case manager, if recorded
    """
    __tablename__ = "partners"

    # Primary key - exactly 4 digits, never generated
    id: str = Field(primary_key=True, max_length=4)

    # Required contact information
    name: str = Field(nullable=False)
    email: str = Field(nullable=False)
    phone: str = Field(nullable=False)

    # Optional contact details
    referring_case_manager: Optional[str] = None
