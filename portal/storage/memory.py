"""
In-memory storage backing.

Used in tests and as a degraded-availability fallback when the database is
unreachable. Data lives only as long as the process. A single lock serializes
every operation, which makes each check-then-act sequence atomic.
"""
import threading
from typing import Dict, List

from portal.core.errors import ConflictError, InvalidReferenceError, NotFoundError
from portal.models.request import new_request_id, utcnow
from portal.schemas.partner import PartnerCreate, PartnerRead, PartnerUpdate
from portal.schemas.request import RequestCreate, RequestRead, RequestUpdate
from portal.storage.base import PortalStorage


class MemoryStorage(PortalStorage):
    name = "memory"

    def __init__(self):
        self._partners: Dict[str, PartnerRead] = {}
        self._requests: Dict[str, RequestRead] = {}
        self._lock = threading.Lock()

    def ping(self) -> None:
        return None

    # === Partners ===

    def get_partner(self, partner_id: str) -> PartnerRead:
        with self._lock:
            partner = self._partners.get(partner_id)
            if partner is None:
                raise NotFoundError("Partner not found")
            return partner.model_copy()

    def list_partners(self) -> List[PartnerRead]:
        with self._lock:
            return [self._partners[key].model_copy() for key in sorted(self._partners)]

    def create_partner(self, data: PartnerCreate) -> PartnerRead:
        with self._lock:
            if data.id in self._partners:
                raise ConflictError(f"Partner {data.id} already exists")
            partner = PartnerRead(**data.model_dump())
            self._partners[partner.id] = partner
            return partner.model_copy()

    def update_partner(self, partner_id: str, data: PartnerUpdate) -> PartnerRead:
        with self._lock:
            if partner_id not in self._partners:
                raise NotFoundError("Partner not found")
            partner = PartnerRead(id=partner_id, **data.model_dump())
            self._partners[partner_id] = partner
            return partner.model_copy()

    def delete_partner(self, partner_id: str) -> None:
        with self._lock:
            if partner_id not in self._partners:
                raise NotFoundError("Partner not found")
            if any(r.partner_id == partner_id for r in self._requests.values()):
                raise ConflictError("Partner has existing requests and cannot be deleted")
            del self._partners[partner_id]

    # === Requests ===

    def _joined(self, record: RequestRead) -> RequestRead:
        partner = self._partners.get(record.partner_id)
        return record.model_copy(update={"partner_name": partner.name if partner else None})

    def list_requests(self) -> List[RequestRead]:
        with self._lock:
            # sorted() is stable, so equal timestamps keep insertion order
            records = sorted(self._requests.values(), key=lambda r: r.created_at, reverse=True)
            return [self._joined(r) for r in records]

    def get_request(self, request_id: str) -> RequestRead:
        with self._lock:
            record = self._requests.get(request_id)
            if record is None:
                raise NotFoundError("Request not found")
            return self._joined(record)

    def create_request(self, data: RequestCreate) -> RequestRead:
        with self._lock:
            if data.partner_id not in self._partners:
                raise InvalidReferenceError(f"Partner {data.partner_id} not found")
            record = RequestRead(id=new_request_id(), created_at=utcnow(), **data.model_dump())
            self._requests[record.id] = record
            return self._joined(record)

    def update_request(self, request_id: str, data: RequestUpdate) -> RequestRead:
        with self._lock:
            current = self._requests.get(request_id)
            if current is None:
                raise NotFoundError("Request not found")
            if data.partner_id != current.partner_id and data.partner_id not in self._partners:
                raise InvalidReferenceError(f"Partner {data.partner_id} not found")
            record = RequestRead(id=current.id, created_at=current.created_at, **data.model_dump())
            self._requests[request_id] = record
            return self._joined(record)

    def delete_request(self, request_id: str) -> None:
        with self._lock:
            if request_id not in self._requests:
                raise NotFoundError("Request not found")
            del self._requests[request_id]
