import os
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

from sqlalchemy.ext.asyncio import async_sessionmaker

from content_gallery.core.db import database_url, init_db, make_engine
from content_gallery.services.content_store import DuplicateLocalPathError, SqlContentStore


def make_file(path: Path, size: int = 4) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as fh:
        fh.truncate(size)
    return path


async def sql_store(db_dir: Path):
    engine = make_engine(database_url(Path(db_dir) / "test.db"))
    await init_db(engine)
    factory = async_sessionmaker(engine, expire_on_commit=False)
    return SqlContentStore(factory), engine, factory


class FakeStore:
    """In-memory content store that records every call made against it."""

    def __init__(self, records=None):
        self.records = {}
        self.calls = []
        self._next_id = 1
        for rec in records or []:
            self.add(**rec)

    def add(self, title: str, local_file_path: str | None, type: str = "image", **fields):
        record = SimpleNamespace(
            id=self._next_id,
            title=title,
            type=type,
            local_file_path=local_file_path,
            mime_type=fields.get("mime_type", "application/octet-stream"),
            file_size=fields.get("file_size", 0),
            duration=fields.get("duration"),
            remote_id=fields.get("remote_id"),
            remote_url=fields.get("remote_url"),
            created_at=datetime.utcnow(),
        )
        self._next_id += 1
        self.records[local_file_path or f"remote-{record.id}"] = record
        return record

    @property
    def creates(self):
        return [args for name, args in self.calls if name == "create"]

    @property
    def deletes(self):
        return [args for name, args in self.calls if name == "delete"]

    async def get_all_content(self):
        self.calls.append(("list", None))
        return list(self.records.values())

    async def get_content_by_local_path(self, path):
        self.calls.append(("get", path))
        record = self.records.get(path)
        return record if record and record.local_file_path else None

    async def create_content(self, payload):
        self.calls.append(("create", payload))
        if payload.local_file_path in self.records:
            raise DuplicateLocalPathError(payload.local_file_path)
        return self.add(**payload.model_dump())

    async def delete_content_by_local_path(self, path):
        self.calls.append(("delete", path))
        self.records.pop(path, None)


def missing_path(base: Path, name: str) -> str:
    path = base / name
    assert not os.path.exists(path)
    return str(path)
