"""
Artifact Service.

Stateless operations over persisted artifacts. Every function takes the
request's session; the authorized ones also take the caller principal and only
ever see that principal's live (not soft-deleted) artifacts. The shared read
path is separate: it ignores ownership and is gated by the access secret alone.
"""

import calendar
import hmac
import secrets
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.api.errors import InvalidInputException, NotFoundException
from src.database.models import AppArtifact, Artifact, ArtifactType, Message, Thread
from src.utils.delete import create_delete_response
from src.utils.pagination import SortOrder, create_paginated_response, get_list_cursor
from src.utils.structured_logging import get_logger
from src.utils.update import UNSET, get_updated_value

logger = get_logger("artifacts")

SECRET_BYTES = 24


def _unix(value: datetime) -> int:
    # Naive values come back from SQLite and are UTC.
    return calendar.timegm(value.utctimetuple())


def _share_url(artifact: Artifact) -> str:
    if not artifact.access_secret:
        return ""
    return f"{settings.share_url_prefix}/{artifact.id}/shared?secret={artifact.access_secret}"


# Fields each artifact type adds on top of the common shape. Every ArtifactType
# needs an entry here.
_TYPE_FIELDS: Dict[str, Callable[[Any], Dict[str, Any]]] = {
    ArtifactType.APP.value: lambda artifact: {"source_code": artifact.source_code},
}


def to_shared_dto(artifact: Artifact) -> Dict[str, Any]:
    """Public shape of an artifact, as served through its share link."""
    type_fields = _TYPE_FIELDS.get(artifact.type)
    if type_fields is None:
        raise NotImplementedError(f"No serializer for artifact type '{artifact.type}'")

    return {
        "id": artifact.id,
        "object": "artifact.shared",
        "type": artifact.type,
        "metadata": artifact.artifact_metadata or {},
        "created_at": _unix(artifact.created_at),
        "share_url": _share_url(artifact),
        "name": artifact.name,
        "description": artifact.description or "",
        **type_fields(artifact),
    }


def to_dto(artifact: Artifact) -> Dict[str, Any]:
    """Full shape of an artifact for its owner."""
    return {
        **to_shared_dto(artifact),
        "object": "artifact",
        "thread_id": artifact.thread_id,
        "message_id": artifact.message_id,
    }


def generate_secret() -> str:
    """24 random bytes, URL-safe base64 without padding."""
    return secrets.token_urlsafe(SECRET_BYTES)


def _owned_by(principal: str):
    return [Artifact.created_by == principal, Artifact.deleted_at.is_(None)]


async def _get_owned_artifact(
    session: AsyncSession, artifact_id: str, principal: str
) -> Artifact:
    artifact = await session.scalar(
        select(Artifact).where(Artifact.id == artifact_id, *_owned_by(principal))
    )
    if artifact is None:
        raise NotFoundException("Artifact", artifact_id)
    return artifact


async def create_artifact(
    session: AsyncSession,
    principal: str,
    *,
    thread_id: str,
    message_id: str,
    type: str,
    source_code: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    shared: Optional[bool] = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create an artifact attached to a message of one of the principal's threads.

    Raises:
        NotFoundException: thread or message does not exist
        InvalidInputException: message belongs to another thread, or the
            artifact type is not supported
    """
    thread = await session.scalar(
        select(Thread).where(Thread.id == thread_id, Thread.created_by == principal)
    )
    if thread is None:
        raise NotFoundException("Thread", thread_id)

    message = await session.get(Message, message_id)
    if message is None:
        raise NotFoundException("Message", message_id)

    if message.thread_id != thread.id:
        raise InvalidInputException(
            "Thread message mismatch",
            details={"thread_id": thread_id, "message_id": message_id},
        )

    if type == ArtifactType.APP:
        artifact = AppArtifact(
            thread_id=thread.id,
            message_id=message.id,
            source_code=source_code,
            artifact_metadata=metadata,
            access_secret=generate_secret() if shared is True else None,
            name=name,
            description=description,
            created_by=principal,
        )
    else:
        raise InvalidInputException(
            "Artifact type not supported", details={"type": str(type)}
        )

    session.add(artifact)
    await session.commit()

    logger.info(
        "Artifact created",
        artifact_id=artifact.id,
        artifact_type=artifact.type,
        thread_id=thread.id,
        shared=artifact.access_secret is not None,
    )
    return to_dto(artifact)


async def read_artifact(
    session: AsyncSession, principal: str, artifact_id: str
) -> Dict[str, Any]:
    artifact = await _get_owned_artifact(session, artifact_id, principal)
    return to_dto(artifact)


async def read_shared_artifact(
    session: AsyncSession, artifact_id: str, secret: Optional[str]
) -> Dict[str, Any]:
    """
    Read an artifact through its share link.

    Unknown id, unshared artifact and wrong secret all raise the same
    NotFoundException.
    """
    artifact = await session.scalar(
        select(Artifact).where(
            Artifact.id == artifact_id,
            Artifact.deleted_at.is_(None),
            Artifact.access_secret.is_not(None),
        )
    )
    if (
        artifact is None
        or not secret
        or not hmac.compare_digest(artifact.access_secret.encode(), secret.encode())
    ):
        raise NotFoundException("Artifact", artifact_id)
    return to_shared_dto(artifact)


async def update_artifact(
    session: AsyncSession,
    principal: str,
    artifact_id: str,
    *,
    metadata: Any = UNSET,
    name: Any = UNSET,
    description: Any = UNSET,
    shared: Any = UNSET,
) -> Dict[str, Any]:
    """
    Partially update an artifact.

    Fields left as UNSET keep their value; None clears them. `shared=True`
    always issues a fresh secret, `shared=False` revokes it, anything else
    leaves sharing as it was.
    """
    artifact = await _get_owned_artifact(session, artifact_id, principal)

    artifact.artifact_metadata = get_updated_value(metadata, artifact.artifact_metadata)
    artifact.name = get_updated_value(name, artifact.name)
    artifact.description = get_updated_value(description, artifact.description)
    if shared is True:
        artifact.access_secret = generate_secret()
    elif shared is False:
        artifact.access_secret = None

    await session.commit()

    logger.info(
        "Artifact updated",
        artifact_id=artifact.id,
        shared=artifact.access_secret is not None,
    )
    return to_dto(artifact)


async def list_artifacts(
    session: AsyncSession,
    principal: str,
    *,
    limit: int = settings.default_page_limit,
    after: Optional[str] = None,
    before: Optional[str] = None,
    order: SortOrder = SortOrder.DESC,
    order_by: str = "created_at",
) -> Dict[str, Any]:
    page = await get_list_cursor(
        session,
        Artifact,
        _owned_by(principal),
        limit=limit,
        order=order,
        order_by=order_by,
        after=after,
        before=before,
    )
    return create_paginated_response(page, to_dto)


async def delete_artifact(
    session: AsyncSession, principal: str, artifact_id: str
) -> Dict[str, Any]:
    artifact = await _get_owned_artifact(session, artifact_id, principal)

    artifact.delete()
    await session.commit()

    logger.info("Artifact deleted", artifact_id=artifact_id)
    return create_delete_response(artifact_id, "artifact")
