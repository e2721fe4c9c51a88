"""Record store for the JSON collections.

Each collection (courses, users, enrollments, ...) is one JSON document
holding an array of records under the collection's name, a persisted
``nextId`` counter, and any extra top-level fields (``categories`` for the
course catalog), which are carried through saves untouched.

Writers go through ``RecordStore.transaction``: it holds the collection's
lock across load, mutation and save so two requests touching the same
collection cannot interleave and drop each other's update. Reads use
``load`` without the lock; saves replace the whole document atomically so a
reader never sees a half-written file.
"""
from __future__ import annotations
import asyncio
import json
import logging
import os
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Iterator, List, Optional

import aiofiles
import aiofiles.os

from edule.errors import StoreUnavailable
from edule.models.entities import get_collection_spec
from edule.utils.validation import validate_collection_document

logger = logging.getLogger(__name__)

NEXT_ID_FIELD = "nextId"


class Collection:
    """In-memory snapshot of one collection document."""

    def __init__(
        self,
        name: str,
        records: Optional[List[dict]] = None,
        next_id: Optional[int] = None,
        extras: Optional[Dict[str, Any]] = None,
    ):
        self.name = name
        self.records: List[dict] = list(records or [])
        floor = max((r["id"] for r in self.records), default=0) + 1
        # Never hand out an id already present, even if the file's counter
        # was edited by hand.
        self.next_id = max(next_id or floor, floor)
        self.extras: Dict[str, Any] = dict(extras or {})

    def __iter__(self) -> Iterator[dict]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def get(self, record_id: int) -> Optional[dict]:
        for record in self.records:
            if record.get("id") == record_id:
                return record
        return None

    def insert(self, record: dict) -> dict:
        """Append ``record`` under the next id and return the stored copy."""
        stored = {"id": self.next_id}
        stored.update((k, v) for k, v in record.items() if k != "id")
        self.next_id += 1
        self.records.append(stored)
        return stored

    def remove(self, record_id: int) -> Optional[dict]:
        for index, record in enumerate(self.records):
            if record.get("id") == record_id:
                return self.records.pop(index)
        return None

    # Serialization ----------------------------------------------------------
    def to_document(self) -> dict:
        document = dict(self.extras)
        document[self.name] = self.records
        document[NEXT_ID_FIELD] = self.next_id
        return document

    @classmethod
    def from_document(cls, name: str, document: dict) -> "Collection":
        extras = {
            k: v for k, v in document.items() if k not in (name, NEXT_ID_FIELD)
        }
        return cls(
            name,
            records=document.get(name, []),
            next_id=document.get(NEXT_ID_FIELD),
            extras=extras,
        )


class RecordStore:
    """Load/save whole collections; subclasses supply raw document I/O."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, name: str) -> asyncio.Lock:
        lock = self._locks.get(name)
        if lock is None:
            lock = self._locks[name] = asyncio.Lock()
        return lock

    async def _read(self, name: str) -> Optional[str]:
        """Return the raw document text, or None when it does not exist."""
        raise NotImplementedError

    async def _write(self, name: str, text: str) -> None:
        raise NotImplementedError

    # READ -------------------------------------------------------------------
    async def load(self, name: str) -> Collection:
        spec = get_collection_spec(name)
        raw = await self._read(name)
        if raw is None:
            if spec.allow_empty:
                return Collection(name)
            logger.error(f"Collection '{name}' has no backing document")
            raise StoreUnavailable(
                f"Collection '{name}' is unavailable", error="document missing"
            )
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error(f"Collection '{name}' is not valid JSON: {exc}")
            raise StoreUnavailable(
                f"Collection '{name}' is unavailable",
                error=f"invalid JSON: {exc.msg}",
            ) from exc
        problems = validate_collection_document(name, document)
        if problems:
            logger.error(f"Collection '{name}' failed validation: {problems}")
            raise StoreUnavailable(
                f"Collection '{name}' is unavailable", error="; ".join(problems)
            )
        return Collection.from_document(name, document)

    # WRITE ------------------------------------------------------------------
    async def save(self, name: str, collection: Collection) -> None:
        """Replace the stored collection with ``collection``."""
        async with self._lock_for(name):
            await self._persist(name, collection)

    async def _persist(self, name: str, collection: Collection) -> None:
        get_collection_spec(name)
        text = json.dumps(collection.to_document(), indent=2, ensure_ascii=False)
        await self._write(name, text)

    @asynccontextmanager
    async def transaction(self, name: str) -> AsyncIterator[Collection]:
        """Serialized load-mutate-save unit of work for one collection.

        The collection is saved only when the block exits normally; an
        exception discards the in-memory changes and propagates.
        """
        async with self._lock_for(name):
            collection = await self.load(name)
            yield collection
            await self._persist(name, collection)

    async def ensure(self, name: str) -> None:
        """Create an empty document for ``name`` if none exists yet."""
        async with self._lock_for(name):
            if await self._read(name) is None:
                logger.info(f"Initializing empty collection '{name}'")
                await self._persist(name, Collection(name))


class JsonFileRecordStore(RecordStore):
    """One pretty-printed JSON file per collection inside ``data_dir``."""

    def __init__(self, data_dir: Path):
        super().__init__()
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self.data_dir / get_collection_spec(name).filename

    async def _read(self, name: str) -> Optional[str]:
        path = self.path_for(name)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                return await f.read()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.error(f"Failed to read {path}: {exc}")
            raise StoreUnavailable(
                f"Collection '{name}' is unavailable", error=exc.strerror
            ) from exc

    async def _write(self, name: str, text: str) -> None:
        path = self.path_for(name)
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(text)
                await f.flush()
                await asyncio.to_thread(os.fsync, f.fileno())
            await aiofiles.os.replace(tmp_path, path)
        except OSError as exc:
            logger.error(f"Failed to save {path}: {exc}")
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
            raise StoreUnavailable(
                f"Collection '{name}' could not be saved", error=exc.strerror
            ) from exc


class MemoryRecordStore(RecordStore):
    """Keeps serialized documents in a dict; used for tests and tooling."""

    def __init__(self, documents: Optional[Dict[str, dict]] = None):
        super().__init__()
        self._documents: Dict[str, str] = {
            name: json.dumps(doc) for name, doc in (documents or {}).items()
        }

    async def _read(self, name: str) -> Optional[str]:
        get_collection_spec(name)
        await asyncio.sleep(0)
        return self._documents.get(name)

    async def _write(self, name: str, text: str) -> None:
        await asyncio.sleep(0)
        self._documents[name] = text
