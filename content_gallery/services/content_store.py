import logging
from typing import List, Optional, Protocol, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from content_gallery.api.schemas import ContentCreate
from content_gallery.core import models

logger = logging.getLogger("contentgallery.store")


class ContentStoreError(Exception):
    pass


class DuplicateLocalPathError(ContentStoreError):
    def __init__(self, path: str):
        super().__init__(f"Content already exists for local path {path}")
        self.path = path


class ContentStore(Protocol):
    """The four operations the sync engine issues against persisted content."""

    async def get_all_content(self) -> Sequence[models.ContentRecord]: ...

    async def get_content_by_local_path(self, path: str) -> Optional[models.ContentRecord]: ...

    async def create_content(self, payload: ContentCreate) -> models.ContentRecord: ...

    async def delete_content_by_local_path(self, path: str) -> None: ...


class SqlContentStore:
    """ContentStore on top of the async SQLAlchemy session factory; one session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_all_content(self) -> List[models.ContentRecord]:
        async with self._session_factory() as session:
            result = await session.execute(select(models.ContentRecord).order_by(models.ContentRecord.id))
            return list(result.scalars().all())

    async def list_content(self, kind: Optional[str] = None) -> List[models.ContentRecord]:
        stmt = select(models.ContentRecord).order_by(models.ContentRecord.created_at.desc(), models.ContentRecord.id.desc())
        if kind:
            stmt = stmt.where(models.ContentRecord.type == kind)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_content(self, content_id: int) -> Optional[models.ContentRecord]:
        async with self._session_factory() as session:
            return await session.get(models.ContentRecord, content_id)

    async def get_content_by_local_path(self, path: str) -> Optional[models.ContentRecord]:
        async with self._session_factory() as session:
            stmt = select(models.ContentRecord).where(models.ContentRecord.local_file_path == path)
            result = await session.execute(stmt)
            return result.scalars().first()

    async def create_content(self, payload: ContentCreate) -> models.ContentRecord:
        async with self._session_factory() as session:
            if payload.local_file_path:
                stmt = select(models.ContentRecord.id).where(
                    models.ContentRecord.local_file_path == payload.local_file_path
                )
                if (await session.execute(stmt)).first() is not None:
                    raise DuplicateLocalPathError(payload.local_file_path)
            record = models.ContentRecord(**payload.model_dump())
            session.add(record)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                if payload.local_file_path:
                    raise DuplicateLocalPathError(payload.local_file_path) from exc
                raise ContentStoreError(str(exc)) from exc
            await session.refresh(record)
            logger.debug("Created content %s (%s)", record.id, record.local_file_path or record.remote_url)
            return record

    async def delete_content(self, content_id: int) -> bool:
        async with self._session_factory() as session:
            record = await session.get(models.ContentRecord, content_id)
            if record is None:
                return False
            await session.delete(record)
            await session.commit()
            logger.debug("Deleted content %s", content_id)
            return True

    async def delete_content_by_local_path(self, path: str) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(models.ContentRecord).where(models.ContentRecord.local_file_path == path))
            await session.commit()
            logger.debug("Deleted content at %s", path)
