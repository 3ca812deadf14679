"""
Storage Contract Module

Defines the operations every storage backing provides. The API layer only
talks to this interface, so backings can be swapped without any change in
behavior: both raise the same named errors from ``portal.core.errors`` and
return the same read schemas.
"""
from abc import ABC, abstractmethod
from typing import List

from portal.schemas.partner import PartnerCreate, PartnerRead, PartnerUpdate
from portal.schemas.request import RequestCreate, RequestRead, RequestUpdate


class PortalStorage(ABC):
    """
    Keyed access to the partner and request collections.

    The one invariant every backing enforces is referential integrity: a
    request always points at an existing partner, and a partner that still
    has requests cannot be deleted.
    """
    name: str = "abstract"

    @abstractmethod
    def ping(self) -> None:
        """Raise BackingUnavailableError if the backing cannot be reached."""

    def close(self) -> None:
        """Release any connections held by the backing."""

    # === Partners ===

    @abstractmethod
    def get_partner(self, partner_id: str) -> PartnerRead:
        """Return the partner or raise NotFoundError."""

    @abstractmethod
    def list_partners(self) -> List[PartnerRead]:
        """Return all partners ordered by id ascending."""

    @abstractmethod
    def create_partner(self, data: PartnerCreate) -> PartnerRead:
        """Insert a partner; ConflictError if the id is taken."""

    @abstractmethod
    def update_partner(self, partner_id: str, data: PartnerUpdate) -> PartnerRead:
        """Replace all mutable fields; NotFoundError if absent."""

    @abstractmethod
    def delete_partner(self, partner_id: str) -> None:
        """
        Delete a partner.

        Raises NotFoundError if absent and ConflictError if any request still
        references it. The reference check and the delete are atomic with
        respect to concurrent request creation.
        """

    # === Requests ===

    @abstractmethod
    def list_requests(self) -> List[RequestRead]:
        """Return all requests, newest first, joined with partner names."""

    @abstractmethod
    def get_request(self, request_id: str) -> RequestRead:
        """Return the request or raise NotFoundError."""

    @abstractmethod
    def create_request(self, data: RequestCreate) -> RequestRead:
        """
        Insert a request with a server-assigned id and timestamp.

        Raises InvalidReferenceError if the partner does not exist; nothing
        is written in that case.
        """

    @abstractmethod
    def update_request(self, request_id: str, data: RequestUpdate) -> RequestRead:
        """
        Replace all mutable fields of a request.

        Raises NotFoundError if absent and InvalidReferenceError if the
        partner is changed to one that does not exist.
        """

    @abstractmethod
    def delete_request(self, request_id: str) -> None:
        """Delete a request; NotFoundError if absent."""
