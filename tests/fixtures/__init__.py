"""
Test Fixtures Package.
Provides data factories for the rows artifacts hang off.
"""

from tests.fixtures.factories import (
    ThreadFactory,
    MessageFactory,
    random_uuid,
    OWNER,
    OTHER,
)

__all__ = [
    "ThreadFactory",
    "MessageFactory",
    "random_uuid",
    "OWNER",
    "OTHER",
]
