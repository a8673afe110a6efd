"""
EdAiVi Studio Backend: Project Access Rules
===========================================

What:  Load-and-authorize helpers shared by the audio, video, 3D scene,
       avatar and stream services, plus collaborator list management.
How:   Each helper loads the document (NotFoundError when missing) and then
       applies one access rule (ForbiddenError when it fails). Not-found is
       always reported before forbidden.

Rules:
    view    → owner, any collaborator, or anyone when the document is public
    edit    → owner or an 'editor' collaborator
    member  → owner or any collaborator (export)
    owner   → owner only (update, delete, collaborators, stream control)
"""

import logging
from typing import List, Optional, TypeVar

from studio.database import Repository, Store
from studio.exceptions import ForbiddenError, NotFoundError, ValidationError
from studio.models import Collaborator, User
from studio.models.base import CollaboratorRole, OwnedDocument, SharedAggregate

logger = logging.getLogger(__name__)

OwnedT = TypeVar("OwnedT", bound=OwnedDocument)
SharedT = TypeVar("SharedT", bound=SharedAggregate)


async def load(repo: Repository[OwnedT], doc_id: str, resource: str) -> OwnedT:
    doc = await repo.find_by_id(doc_id)
    if doc is None:
        raise NotFoundError(resource, doc_id)
    return doc


async def load_viewable(repo: Repository[OwnedT], doc_id: str, user: User, resource: str) -> OwnedT:
    doc = await load(repo, doc_id, resource)
    if not doc.can_view(user.id):
        raise ForbiddenError(f"You do not have access to this {resource}")
    return doc


async def load_editable(repo: Repository[OwnedT], doc_id: str, user: User, resource: str) -> OwnedT:
    doc = await load(repo, doc_id, resource)
    if not doc.can_edit(user.id):
        raise ForbiddenError(f"You do not have permission to edit this {resource}")
    return doc


async def load_for_member(repo: Repository[SharedT], doc_id: str, user: User, resource: str) -> SharedT:
    doc = await load(repo, doc_id, resource)
    if not doc.is_member(user.id):
        raise ForbiddenError(f"You do not have access to this {resource}")
    return doc


async def load_owned(repo: Repository[OwnedT], doc_id: str, user: User, resource: str) -> OwnedT:
    doc = await load(repo, doc_id, resource)
    if not doc.is_owner(user.id):
        raise ForbiddenError(f"Only the owner can do this to the {resource}")
    return doc


async def list_visible(repo: Repository[OwnedT], user: User) -> List[OwnedT]:
    """Documents the user may view, most recently updated first."""
    return await repo.find(
        lambda doc: doc.can_view(user.id),
        sort_key=lambda doc: doc.updated_at,
        reverse=True,
    )


# ── Collaborators ─────────────────────────────────────────────────────────
async def add_collaborator(
    store: Store,
    repo: Repository[SharedT],
    doc_id: str,
    owner: User,
    email: str,
    role: Optional[CollaboratorRole] = None,
    resource: str = "project",
) -> tuple:
    """
    Owner adds a collaborator by email.

    Returns (collaborator, invited user).

    Raises:
        NotFoundError:   project missing, or no user with that email
        ForbiddenError:  caller is not the owner
        ValidationError: user is already a collaborator (or is the owner)
    """
    doc = await load_owned(repo, doc_id, owner, resource)

    invited = await store.users.find_one(email=email.strip().lower())
    if invited is None:
        raise NotFoundError("user", context={"email": email})
    if doc.is_owner(invited.id):
        raise ValidationError("The owner cannot be added as a collaborator", field="email")
    if doc.collaborator(invited.id) is not None:
        raise ValidationError("User is already a collaborator on this project", field="email")

    collab: Collaborator = doc.add_collaborator(invited.id, role or "viewer")
    await repo.update(doc)
    logger.info("Collaborator added", extra={"resource_id": doc.id, "user_id": invited.id})
    return collab, invited


async def remove_collaborator(
    repo: Repository[SharedT],
    doc_id: str,
    owner: User,
    user_id: str,
    resource: str = "project",
) -> SharedT:
    doc = await load_owned(repo, doc_id, owner, resource)
    if not doc.remove_collaborator(user_id):
        raise NotFoundError("collaborator", user_id)
    await repo.update(doc)
    return doc
