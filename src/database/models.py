from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Text
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone
from uuid import uuid4
import enum

# Base class for all SQLAlchemy models
Base = declarative_base()


def generate_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArtifactType(str, enum.Enum):
    """Discriminator for the artifact family. Stored as its value."""
    APP = "app"  # Generated application source code


class Thread(Base):
    """
    A conversation thread. Artifacts attach to a thread and one of its messages
    but never own their lifecycle.
    """
    __tablename__ = "threads"

    id = Column(String(36), primary_key=True, default=generate_id)
    created_by = Column(String(100), nullable=False, index=True)
    # Renamed thread_metadata to avoid conflict with Base.metadata
    thread_metadata = Column('metadata', JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Message(Base):
    """A single message within a thread."""
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_id)
    thread_id = Column(String(36), ForeignKey("threads.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="assistant")  # user, assistant, system
    content = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Artifact(Base):
    """
    Persisted output object attached to a message within a thread.

    Subtypes share this table and are told apart by `type`. Rows are never
    removed through the API: deletion sets `deleted_at`.
    """
    __tablename__ = "artifacts"

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(String(20), nullable=False)

    thread_id = Column(String(36), ForeignKey("threads.id"), nullable=False, index=True)
    message_id = Column(String(36), ForeignKey("messages.id"), nullable=False, index=True)

    # Renamed artifact_metadata to avoid conflict with Base.metadata
    artifact_metadata = Column('metadata', JSON, nullable=True)
    name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    # Present only while the artifact is shared by link
    access_secret = Column(String(64), nullable=True, index=True)

    created_by = Column(String(100), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Subclass columns are loaded with the base row so async reads never lazy-load.
    __mapper_args__ = {
        "polymorphic_on": type,
        "with_polymorphic": "*",
    }

    def delete(self):
        """Mark as deleted; the row stays for audit."""
        self.deleted_at = utcnow()


class AppArtifact(Artifact):
    """An artifact carrying generated application code."""

    source_code = Column(Text, nullable=True)

    __mapper_args__ = {
        "polymorphic_identity": ArtifactType.APP.value,
    }
