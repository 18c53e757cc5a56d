"""Tests for tool usage value objects."""
import pytest
from sqlalchemy import Column, Integer, MetaData, Table, insert, select
from sqlalchemy.ext.asyncio import create_async_engine

from src.tools.usages import (
    SystemTools,
    SystemUsage,
    ToolType,
    ToolUsageType,
    tool_usage_from_dict,
)


class TestSystemUsage:
    def test_construction(self):
        usage = SystemUsage(tool_id=SystemTools.WEB_SEARCH, config={"max_results": 5})

        assert usage.type == ToolType.SYSTEM
        assert usage.tool_id == SystemTools.WEB_SEARCH
        assert usage.config == {"max_results": 5}

    def test_tool_id_from_string(self):
        usage = SystemUsage(tool_id="wikipedia")
        assert usage.tool_id is SystemTools.WIKIPEDIA
        assert usage.config is None

    def test_unknown_tool_id(self):
        with pytest.raises(ValueError):
            SystemUsage(tool_id="teleporter")

    def test_to_dict(self):
        usage = SystemUsage(tool_id=SystemTools.LLM, config={"model": "granite"})

        assert usage.to_dict() == {
            "type": "system",
            "tool_id": "llm",
            "config": {"model": "granite"},
        }

    def test_from_dict_dispatches_on_type(self):
        usage = tool_usage_from_dict({"type": "system", "tool_id": "arxiv", "config": None})

        assert isinstance(usage, SystemUsage)
        assert usage == SystemUsage(tool_id=SystemTools.ARXIV)

    @pytest.mark.parametrize("data", [{"type": "function"}, {"type": "bogus"}, {}])
    def test_from_dict_unsupported(self, data):
        with pytest.raises(ValueError):
            tool_usage_from_dict(data)


class TestToolUsageColumn:
    @pytest.mark.asyncio
    async def test_embedded_in_owner_row(self):
        metadata = MetaData()
        runs = Table(
            "runs",
            metadata,
            Column("id", Integer, primary_key=True),
            Column("usage", ToolUsageType, nullable=True),
        )
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        try:
            async with engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
                await conn.execute(insert(runs), [
                    {"id": 1, "usage": SystemUsage(tool_id="weather", config={"units": "metric"})},
                    {"id": 2, "usage": None},
                ])
                rows = (await conn.execute(select(runs).order_by(runs.c.id))).all()
        finally:
            await engine.dispose()

        assert rows[0].usage == SystemUsage(tool_id=SystemTools.WEATHER, config={"units": "metric"})
        assert rows[1].usage is None
