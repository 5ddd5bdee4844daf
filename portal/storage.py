import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from portal.errors import PersistenceError

logger = logging.getLogger(__name__)

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class StorageItem(Base):
    """One key of device storage, holding an opaque string value"""
    __tablename__ = "local_storage"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


class LocalStorage:
    """String key/value storage with a size quota, the way a browser's localStorage behaves.

    Reads of a missing key return ``None``. Writes that would push the total
    stored characters over ``quota_chars`` raise :class:`PersistenceError`, as does
    any database failure while writing.
    """

    def __init__(self, url: str, quota_chars: Optional[int] = None):
        if _is_memory_url(url):
            # One shared connection, otherwise every session sees an empty database
            self.engine = create_engine(
                url, connect_args={"check_same_thread": False}, poolclass=StaticPool
            )
        elif url.startswith("sqlite"):
            self.engine = create_engine(url, connect_args={"check_same_thread": False})
        else:
            self.engine = create_engine(url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.quota_chars = quota_chars
        Base.metadata.create_all(bind=self.engine)

    def get_item(self, key: str) -> Optional[str]:
        session = self.SessionLocal()
        try:
            item = session.get(StorageItem, key)
            return item.value if item is not None else None
        finally:
            session.close()

    def set_item(self, key: str, value: str) -> None:
        session = self.SessionLocal()
        try:
            if self.quota_chars is not None:
                used = (
                    session.query(func.coalesce(func.sum(func.length(StorageItem.value)), 0))
                    .filter(StorageItem.key != key)
                    .scalar()
                )
                if used + len(value) > self.quota_chars:
                    raise PersistenceError(
                        f"Storage quota exceeded while saving '{key}'.", key=key
                    )
            item = session.get(StorageItem, key)
            if item is None:
                session.add(StorageItem(key=key, value=value))
            else:
                item.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Failed to write storage key %s: %s", key, e)
            raise PersistenceError(f"Could not save '{key}' to storage.", key=key) from e
        finally:
            session.close()

    def remove_item(self, key: str) -> None:
        session = self.SessionLocal()
        try:
            item = session.get(StorageItem, key)
            if item is not None:
                session.delete(item)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Failed to remove storage key %s: %s", key, e)
            raise PersistenceError(f"Could not remove '{key}' from storage.", key=key) from e
        finally:
            session.close()
