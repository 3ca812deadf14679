import logging

from sqlalchemy.exc import SQLAlchemyError

from portal.core.config import Settings
from portal.core.errors import BackingUnavailableError
from portal.db.session import create_db_engine
from portal.storage.base import PortalStorage
from portal.storage.memory import MemoryStorage
from portal.storage.sql import SqlStorage

logger = logging.getLogger(__name__)

__all__ = ["PortalStorage", "MemoryStorage", "SqlStorage", "build_storage"]


def build_storage(settings: Settings) -> PortalStorage:
    """
    Select the storage backing once, at startup.

    With STORAGE_BACKEND="sql" the database is contacted and the tables are
    created. If that fails and ALLOW_MEMORY_FALLBACK is set, an empty
    in-memory backing is used instead; the database itself is left untouched.
    """
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "memory":
        logger.info("Using in-memory storage")
        return MemoryStorage()
    if backend != "sql":
        raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")

    storage = None
    try:
        engine, tunnel = create_db_engine(settings)
        storage = SqlStorage(engine, tunnel)
        storage.init_schema()
        storage.ping()
    except (BackingUnavailableError, SQLAlchemyError) as e:
        if storage is not None:
            storage.close()
        if not settings.ALLOW_MEMORY_FALLBACK:
            if isinstance(e, BackingUnavailableError):
                raise
            raise BackingUnavailableError() from e
        logger.warning("Database unreachable, falling back to in-memory storage", exc_info=True)
        return MemoryStorage()

    logger.info("Using SQL storage (%s)", storage.engine.url.render_as_string(hide_password=True))
    return storage
