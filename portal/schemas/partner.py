from pydantic import EmailStr, Field
from typing import Optional

from portal.schemas.common import NonEmptyStr, PartnerId, PortalModel


# Shared properties
class PartnerBase(PortalModel):
    name: NonEmptyStr
    email: EmailStr
    phone: NonEmptyStr
    referring_case_manager: Optional[NonEmptyStr] = None


# Properties to receive via API on creation
class PartnerCreate(PartnerBase):
    id: PartnerId


# Properties to receive via API on update. The id comes from the path; an id
# in the body is accepted so a fetched record can be sent back, but it is
# never stored and must match the path (checked by the endpoint).
class PartnerUpdate(PartnerBase):
    id: Optional[PartnerId] = Field(default=None, exclude=True)


# Properties to return to client
class PartnerRead(PartnerBase):
    id: str
