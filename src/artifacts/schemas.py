"""
Artifact transfer objects.

Request bodies are validated at the HTTP boundary; response shapes document
what the service returns.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from config.settings import settings
from src.database.models import ArtifactType
from src.utils.pagination import SortOrder


class ArtifactCreateBody(BaseModel):
    thread_id: str
    message_id: str
    # Unsupported types are rejected by the service as invalid input
    type: str
    source_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    shared: Optional[bool] = None
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None


class ArtifactUpdateBody(BaseModel):
    """
    Every field is optional. Fields left out of the request body are left
    unchanged; fields sent as null are cleared.
    """
    metadata: Optional[Dict[str, Any]] = None
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    shared: Optional[bool] = None


class ArtifactsListQuery(BaseModel):
    limit: int = Field(default=settings.default_page_limit, ge=1, le=settings.max_page_limit)
    after: Optional[str] = None
    before: Optional[str] = None
    order: SortOrder = SortOrder.DESC
    order_by: Literal["created_at"] = "created_at"


class ArtifactShared(BaseModel):
    """Public view served through a share link. Carries no thread linkage."""
    id: str
    object: Literal["artifact.shared"] = "artifact.shared"
    type: ArtifactType
    metadata: Dict[str, Any]
    created_at: int
    share_url: str
    name: Optional[str] = None
    description: str = ""
    source_code: Optional[str] = None


class Artifact(ArtifactShared):
    object: Literal["artifact"] = "artifact"
    thread_id: str
    message_id: str


class ArtifactsListResponse(BaseModel):
    object: Literal["list"] = "list"
    data: List[Artifact]
    first_id: Optional[str] = None
    last_id: Optional[str] = None
    has_more: bool
    total_count: int


class ArtifactDeleteResponse(BaseModel):
    id: str
    object: Literal["artifact.deleted"] = "artifact.deleted"
    deleted: bool
