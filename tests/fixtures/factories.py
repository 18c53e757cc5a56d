"""
Test Data Factories.
Factory classes for building thread and message rows.
"""

import random
import uuid
from typing import Optional

from src.database.models import Message, Thread


# Principals used across tests
OWNER = "user_1"
OTHER = "user_2"


def random_uuid() -> str:
    """Generate a random UUID."""
    return str(uuid.uuid4())


class Factory:
    """Base factory class."""

    _counter = 0

    @classmethod
    def _next_id(cls) -> int:
        cls._counter += 1
        return cls._counter


class ThreadFactory(Factory):
    """Factory for Thread rows."""

    @classmethod
    def create(
        cls,
        created_by: str = OWNER,
        id: Optional[str] = None,
        **kwargs,
    ) -> Thread:
        cls._next_id()
        return Thread(
            id=id or random_uuid(),
            created_by=created_by,
            thread_metadata=kwargs.get("metadata", {}),
        )


class MessageFactory(Factory):
    """Factory for Message rows."""

    ROLES = ["user", "assistant"]

    @classmethod
    def create(
        cls,
        thread: Thread,
        id: Optional[str] = None,
        role: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Message:
        n = cls._next_id()
        return Message(
            id=id or random_uuid(),
            thread_id=thread.id,
            role=role or random.choice(cls.ROLES),
            content=content or f"Message {n}",
        )
