"""
EdAiVi Studio Backend: Document Store
=====================================

What:  Repository interface plus the in-memory implementation every service
       persists through, and the FastAPI dependency that hands it out.
How:   One `InMemoryRepository` per document type, grouped in a `Store`.
       The store lives on `app.state.store`; `get_store()` reads it back
       for each request.
Who:   Services receive the store as their first argument; routes obtain it
       with `Depends(get_store)`.
When:  Built (and optionally seeded) once in `create_app()`.

Architecture Decision:
    Repository methods are coroutines even though the in-memory backend
    never blocks. Services therefore always `await` persistence, so a
    driver-backed repository can replace this one without touching them,
    and the await points between a read and a write are real (see the
    credit gate's per-user lock).

Storage semantics:
    - Documents are stored by id and returned by reference. Services mutate
      the returned document, then call `update()` to stamp `updated_at`.
    - `find()` returns a snapshot list; the store itself is never exposed.
"""

import abc
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from starlette.requests import HTTPConnection

from studio.models import (
    AIModel,
    AudioProject,
    Avatar3D,
    Document,
    Scene3D,
    StreamSession,
    User,
    VideoProject,
)

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=Document)


class Repository(abc.ABC, Generic[D]):
    """Persistence contract for one document type."""

    @abc.abstractmethod
    async def find_by_id(self, doc_id: str) -> Optional[D]:
        ...

    @abc.abstractmethod
    async def find_one(self, **fields: Any) -> Optional[D]:
        """First document whose attributes equal every given keyword."""

    @abc.abstractmethod
    async def find(
        self,
        predicate: Optional[Callable[[D], bool]] = None,
        sort_key: Optional[Callable[[D], Any]] = None,
        reverse: bool = False,
    ) -> List[D]:
        ...

    @abc.abstractmethod
    async def insert(self, doc: D) -> D:
        ...

    @abc.abstractmethod
    async def update(self, doc: D) -> D:
        ...

    @abc.abstractmethod
    async def delete(self, doc_id: str) -> bool:
        ...

    @abc.abstractmethod
    async def count(self) -> int:
        ...


class InMemoryRepository(Repository[D]):
    """Dict-backed repository. Insertion order is the default listing order."""

    def __init__(self, name: str):
        self.name = name
        self._docs: Dict[str, D] = {}

    async def find_by_id(self, doc_id: str) -> Optional[D]:
        return self._docs.get(doc_id)

    async def find_one(self, **fields: Any) -> Optional[D]:
        for doc in self._docs.values():
            if all(getattr(doc, key, None) == value for key, value in fields.items()):
                return doc
        return None

    async def find(
        self,
        predicate: Optional[Callable[[D], bool]] = None,
        sort_key: Optional[Callable[[D], Any]] = None,
        reverse: bool = False,
    ) -> List[D]:
        docs = [doc for doc in self._docs.values() if predicate is None or predicate(doc)]
        if sort_key is not None:
            docs.sort(key=sort_key, reverse=reverse)
        return docs

    async def insert(self, doc: D) -> D:
        if doc.id in self._docs:
            raise ValueError(f"{self.name}: duplicate id '{doc.id}'")
        self._docs[doc.id] = doc
        logger.debug("%s: inserted %s", self.name, doc.id)
        return doc

    async def update(self, doc: D) -> D:
        if doc.id not in self._docs:
            raise KeyError(f"{self.name}: unknown id '{doc.id}'")
        doc.touch()
        self._docs[doc.id] = doc
        return doc

    async def delete(self, doc_id: str) -> bool:
        removed = self._docs.pop(doc_id, None) is not None
        if removed:
            logger.debug("%s: deleted %s", self.name, doc_id)
        return removed

    async def count(self) -> int:
        return len(self._docs)

    def preload(self, *docs: D) -> None:
        """Synchronous bulk insert for bootstrap; existing ids are kept as they are."""
        for doc in docs:
            self._docs.setdefault(doc.id, doc)

    def __len__(self) -> int:
        return len(self._docs)


class Store:
    """All repositories of the application, one attribute per document type."""

    def __init__(self) -> None:
        self.users: InMemoryRepository[User] = InMemoryRepository("users")
        self.ai_models: InMemoryRepository[AIModel] = InMemoryRepository("ai_models")
        self.audio_projects: InMemoryRepository[AudioProject] = InMemoryRepository("audio_projects")
        self.video_projects: InMemoryRepository[VideoProject] = InMemoryRepository("video_projects")
        self.scenes: InMemoryRepository[Scene3D] = InMemoryRepository("scenes")
        self.avatars: InMemoryRepository[Avatar3D] = InMemoryRepository("avatars")
        self.streams: InMemoryRepository[StreamSession] = InMemoryRepository("streams")

    def stats(self) -> Dict[str, int]:
        """Document count per repository (reported by /api/status)."""
        return {repo.name: len(repo) for repo in self.repositories()}

    def repositories(self) -> List[InMemoryRepository]:
        return [
            self.users,
            self.ai_models,
            self.audio_projects,
            self.video_projects,
            self.scenes,
            self.avatars,
            self.streams,
        ]


# ── Store Dependency ──────────────────────────────────────────────────────
def get_store(conn: HTTPConnection) -> Store:
    """
    FastAPI dependency returning the application's store.

    Works for both HTTP requests and websockets (both are HTTPConnection).
    """
    return conn.app.state.store
