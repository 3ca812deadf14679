"""
Relational storage backing.

Each operation runs in its own session and commits at most once, so a write
either fully lands or leaves nothing behind. Integrity relies on the database:
the ``requests.partner_id`` foreign key rejects orphans, and the partner row is
locked (``SELECT ... FOR UPDATE``) by the operations that check for, or depend
on, its existence. On SQLite the lock clause is a no-op and the foreign key
alone keeps the tables consistent.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select, text

from portal.core.errors import (
    BackingUnavailableError,
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
    PortalError,
)
from portal.models import Partner, ServiceRequest
from portal.schemas.partner import PartnerCreate, PartnerRead, PartnerUpdate
from portal.schemas.request import RequestCreate, RequestRead, RequestUpdate
from portal.storage.base import PortalStorage

logger = logging.getLogger(__name__)


def _partner_read(row: Partner) -> PartnerRead:
    return PartnerRead.model_validate(row.model_dump())


def _request_read(row: ServiceRequest, partner_name: Optional[str]) -> RequestRead:
    return RequestRead.model_validate({**row.model_dump(), "partner_name": partner_name})


class SqlStorage(PortalStorage):
    name = "sql"

    def __init__(self, engine: Engine, tunnel: Optional[Any] = None):
        self.engine = engine
        self._tunnel = tunnel

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with Session(self.engine) as db:
                yield db
        except PortalError:
            raise
        except SQLAlchemyError as e:
            logger.exception("Database error")
            raise BackingUnavailableError() from e

    def init_schema(self) -> None:
        """Create the tables if they don't exist yet."""
        try:
            SQLModel.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise BackingUnavailableError() from e

    def ping(self) -> None:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise BackingUnavailableError() from e

    def close(self) -> None:
        self.engine.dispose()
        if self._tunnel is not None:
            self._tunnel.stop()

    def _lock_partner(self, db: Session, partner_id: str) -> Optional[Partner]:
        statement = select(Partner).where(Partner.id == partner_id).with_for_update()
        return db.exec(statement).first()

    # === Partners ===

    def get_partner(self, partner_id: str) -> PartnerRead:
        with self._session() as db:
            row = db.get(Partner, partner_id)
            if not row:
                raise NotFoundError("Partner not found")
            return _partner_read(row)

    def list_partners(self) -> List[PartnerRead]:
        with self._session() as db:
            rows = db.exec(select(Partner).order_by(Partner.id)).all()
            return [_partner_read(row) for row in rows]

    def create_partner(self, data: PartnerCreate) -> PartnerRead:
        with self._session() as db:
            if db.get(Partner, data.id) is not None:
                raise ConflictError(f"Partner {data.id} already exists")

            row = Partner(**data.model_dump(mode="json"))
            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                # Lost a race with another insert of the same id
                db.rollback()
                raise ConflictError(f"Partner {data.id} already exists") from e
            db.refresh(row)
            return _partner_read(row)

    def update_partner(self, partner_id: str, data: PartnerUpdate) -> PartnerRead:
        with self._session() as db:
            row = db.get(Partner, partner_id)
            if not row:
                raise NotFoundError("Partner not found")

            for key, value in data.model_dump(mode="json").items():
                setattr(row, key, value)

            db.add(row)
            db.commit()
            db.refresh(row)
            return _partner_read(row)

    def delete_partner(self, partner_id: str) -> None:
        with self._session() as db:
            row = self._lock_partner(db, partner_id)
            if not row:
                raise NotFoundError("Partner not found")

            statement = select(func.count()).select_from(ServiceRequest).where(
                ServiceRequest.partner_id == partner_id
            )
            if db.exec(statement).one():
                raise ConflictError("Partner has existing requests and cannot be deleted")

            db.delete(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise ConflictError("Partner has existing requests and cannot be deleted") from e

    # === Requests ===

    def _joined_select(self):
        return select(ServiceRequest, Partner.name).join(
            Partner, Partner.id == ServiceRequest.partner_id, isouter=True
        )

    def list_requests(self) -> List[RequestRead]:
        with self._session() as db:
            statement = self._joined_select().order_by(ServiceRequest.created_at.desc())
            return [_request_read(row, partner_name) for row, partner_name in db.exec(statement).all()]

    def get_request(self, request_id: str) -> RequestRead:
        with self._session() as db:
            result = db.exec(self._joined_select().where(ServiceRequest.id == request_id)).first()
            if not result:
                raise NotFoundError("Request not found")
            row, partner_name = result
            return _request_read(row, partner_name)

    def create_request(self, data: RequestCreate) -> RequestRead:
        with self._session() as db:
            partner = self._lock_partner(db, data.partner_id)
            if partner is None:
                raise InvalidReferenceError(f"Partner {data.partner_id} not found")
            partner_name = partner.name

            row = ServiceRequest(**data.model_dump(mode="json"))
            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise InvalidReferenceError(f"Partner {data.partner_id} not found") from e
            db.refresh(row)
            return _request_read(row, partner_name)

    def update_request(self, request_id: str, data: RequestUpdate) -> RequestRead:
        with self._session() as db:
            row = db.get(ServiceRequest, request_id)
            if not row:
                raise NotFoundError("Request not found")

            partner = self._lock_partner(db, data.partner_id)
            if partner is None:
                raise InvalidReferenceError(f"Partner {data.partner_id} not found")
            partner_name = partner.name

            for key, value in data.model_dump(mode="json").items():
                setattr(row, key, value)

            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise InvalidReferenceError(f"Partner {data.partner_id} not found") from e
            db.refresh(row)
            return _request_read(row, partner_name)

    def delete_request(self, request_id: str) -> None:
        with self._session() as db:
            row = db.get(ServiceRequest, request_id)
            if not row:
                raise NotFoundError("Request not found")
            db.delete(row)
            db.commit()
