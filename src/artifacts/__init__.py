"""
Artifacts.

Persisted outputs (such as generated apps) attached to a message within a
thread, with owner access and optional public share links.
"""

from src.artifacts.service import (
    create_artifact,
    read_artifact,
    read_shared_artifact,
    update_artifact,
    list_artifacts,
    delete_artifact,
    to_dto,
    to_shared_dto,
)

__all__ = [
    "create_artifact",
    "read_artifact",
    "read_shared_artifact",
    "update_artifact",
    "list_artifacts",
    "delete_artifact",
    "to_dto",
    "to_shared_dto",
]
