"""
Common document base and helpers shared by every aggregate.

All documents carry a generated string id plus created/updated timestamps.
Timestamps are always timezone-aware UTC.
"""

import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a document or child-record id (32 hex chars)."""
    return uuid.uuid4().hex


class Document(BaseModel):
    """
    Base class for top-level documents.

    `validate_assignment` keeps field constraints enforced when services
    mutate documents in place (e.g. volume must stay within 0..2).
    """

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = {"validate_assignment": True, "protected_namespaces": ()}

    def touch(self) -> None:
        self.updated_at = utcnow()

    def apply_changes(self, changes: dict) -> None:
        """
        Assign `changes` all at once.

        The merged document is validated first; on pydantic.ValidationError
        no field has been written.
        """
        validated = type(self).model_validate({**self.model_dump(), **changes})
        for field_name in changes:
            setattr(self, field_name, getattr(validated, field_name))


class ChildRecord(BaseModel):
    """Base class for records owned by an aggregate's child list."""

    id: str = Field(default_factory=new_id)

    model_config = {"validate_assignment": True, "protected_namespaces": ()}


CollaboratorRole = Literal["editor", "viewer"]


class Collaborator(BaseModel):
    user_id: str
    role: CollaboratorRole = "viewer"
    added_at: datetime = Field(default_factory=utcnow)


class ExportedFile(BaseModel):
    url: str
    format: str
    quality: str
    duration: float = 0.0
    file_size: int = 0
    created_at: datetime = Field(default_factory=utcnow)


class Timed(BaseModel):
    """Anything placed on a timeline: a start offset plus a length (seconds)."""

    start_time: float = Field(default=0.0, ge=0)
    duration: float = Field(default=0.0, ge=0)

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


def max_end_time(children: Iterable[Timed]) -> float:
    """Total timeline length: max(start + duration) over children, 0 when empty."""
    return max((child.end_time for child in children), default=0.0)


def find_child(children: List[ChildRecord], child_id: str) -> Optional[ChildRecord]:
    for child in children:
        if child.id == child_id:
            return child
    return None


class OwnedDocument(Document):
    """A document with a single owner and a public flag."""

    owner_id: str
    is_public: bool = False

    def is_owner(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def can_view(self, user_id: str) -> bool:
        return self.is_owner(user_id) or self.is_public

    def can_edit(self, user_id: str) -> bool:
        return self.is_owner(user_id)


class SharedAggregate(OwnedDocument):
    """
    An owned aggregate with a collaborator list.

    Access rules:
        view   → owner, any collaborator, or anyone when is_public
        edit   → owner or a collaborator with role 'editor'
        manage → owner only (update/delete project, collaborators)
    """

    collaborators: List[Collaborator] = Field(default_factory=list)

    def collaborator(self, user_id: str) -> Optional[Collaborator]:
        for collab in self.collaborators:
            if collab.user_id == user_id:
                return collab
        return None

    def can_view(self, user_id: str) -> bool:
        return self.is_owner(user_id) or self.collaborator(user_id) is not None or self.is_public

    def can_edit(self, user_id: str) -> bool:
        collab = self.collaborator(user_id)
        return self.is_owner(user_id) or (collab is not None and collab.role == "editor")

    def is_member(self, user_id: str) -> bool:
        return self.is_owner(user_id) or self.collaborator(user_id) is not None

    def add_collaborator(self, user_id: str, role: CollaboratorRole = "viewer") -> Collaborator:
        collab = Collaborator(user_id=user_id, role=role)
        self.collaborators = [*self.collaborators, collab]
        self.touch()
        return collab

    def remove_collaborator(self, user_id: str) -> bool:
        remaining = [c for c in self.collaborators if c.user_id != user_id]
        removed = len(remaining) != len(self.collaborators)
        self.collaborators = remaining
        self.touch()
        return removed


def clone_document(doc: Document, **overrides):
    """
    Deep-copy a document under a fresh id and timestamps.

    Child records keep their ids; they are only unique within their parent.
    """
    now = utcnow()
    fields = {"id": new_id(), "created_at": now, "updated_at": now, **overrides}
    return doc.model_copy(update=fields, deep=True)


def patched(child: BaseModel, changes: dict):
    """Validated copy of `child` with `changes` applied. The original is untouched."""
    return type(child).model_validate({**child.model_dump(), **changes})


def epoch_ms() -> int:
    return int(utcnow().timestamp() * 1000)
