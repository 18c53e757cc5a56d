"""
Tool Usage Value Objects.

A tool usage records which tool a conversational turn invoked and with what
configuration. Usages have no identity of their own; they are embedded in the
aggregate that owns them and live and die with it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from sqlalchemy.types import JSON, TypeDecorator


class ToolType(str, Enum):
    """Kinds of tools a usage can refer to."""
    SYSTEM = "system"
    USER = "user"
    CODE_INTERPRETER = "code_interpreter"
    FILE_SEARCH = "file_search"
    FUNCTION = "function"


class SystemTools(str, Enum):
    """Built-in tools provided by the platform."""
    WEB_SEARCH = "web_search"
    WIKIPEDIA = "wikipedia"
    WEATHER = "weather"
    ARXIV = "arxiv"
    READ_FILE = "read_file"
    LLM = "llm"


@dataclass
class ToolUsage:
    """Base for all usage kinds; `type` is the discriminator."""
    type: ToolType = field(init=False)

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass
class SystemUsage(ToolUsage):
    """Usage of a built-in system tool."""
    tool_id: SystemTools
    config: Optional[Any] = None

    def __post_init__(self):
        self.type = ToolType.SYSTEM
        self.tool_id = SystemTools(self.tool_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "tool_id": self.tool_id.value,
            "config": self.config,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SystemUsage":
        return cls(tool_id=data["tool_id"], config=data.get("config"))


_USAGE_LOADERS: Dict[ToolType, Callable[[Dict[str, Any]], ToolUsage]] = {
    ToolType.SYSTEM: SystemUsage.from_dict,
}


def tool_usage_from_dict(data: Dict[str, Any]) -> ToolUsage:
    """Rebuild a usage from its stored form, dispatching on `type`."""
    try:
        usage_type = ToolType(data["type"])
        loader = _USAGE_LOADERS[usage_type]
    except (KeyError, ValueError):
        raise ValueError(f"Unsupported tool usage type: {data.get('type')!r}")
    return loader(data)


class ToolUsageType(TypeDecorator):
    """
    Column type that embeds a ToolUsage in its owner's row as JSON.

    Usage:
        usage = Column(ToolUsageType, nullable=True)
    """

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return value.to_dict()

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return tool_usage_from_dict(value)
