"""
Artifact API Routes.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.errors import UnauthorizedException
from src.artifacts import service
from src.artifacts.schemas import (
    Artifact,
    ArtifactCreateBody,
    ArtifactDeleteResponse,
    ArtifactShared,
    ArtifactsListQuery,
    ArtifactsListResponse,
    ArtifactUpdateBody,
)
from src.database.connection import get_session

router = APIRouter()


def get_principal(x_principal_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity, set by the gateway in front of this service."""
    if not x_principal_id:
        raise UnauthorizedException("Missing X-Principal-ID header")
    return x_principal_id


@router.post("", response_model=Artifact)
async def create_artifact(
    body: ArtifactCreateBody,
    principal: str = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    """Create an artifact for a message in one of the caller's threads."""
    return await service.create_artifact(session, principal, **body.model_dump())


@router.get("", response_model=ArtifactsListResponse)
async def list_artifacts(
    query: Annotated[ArtifactsListQuery, Query()],
    principal: str = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    return await service.list_artifacts(session, principal, **query.model_dump())


@router.get("/{artifact_id}", response_model=Artifact)
async def read_artifact(
    artifact_id: str,
    principal: str = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    return await service.read_artifact(session, principal, artifact_id)


@router.get("/{artifact_id}/shared", response_model=ArtifactShared)
async def read_shared_artifact(
    artifact_id: str,
    secret: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    """Public read through a share link. No principal required."""
    return await service.read_shared_artifact(session, artifact_id, secret)


@router.patch("/{artifact_id}", response_model=Artifact)
async def update_artifact(
    artifact_id: str,
    body: ArtifactUpdateBody,
    principal: str = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    """Only fields present in the body are changed."""
    return await service.update_artifact(
        session, principal, artifact_id, **body.model_dump(exclude_unset=True)
    )


@router.delete("/{artifact_id}", response_model=ArtifactDeleteResponse)
async def delete_artifact(
    artifact_id: str,
    principal: str = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    return await service.delete_artifact(session, principal, artifact_id)
