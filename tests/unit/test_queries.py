"""Tests for full scans, index queries and read filtering."""

from __future__ import annotations

import pytest
from sample_types import PrivateTodoItem, TodoItem, User

from goatdb import IndexOperation, IndexQuery, UnsupportedQueryError
from goatdb.query import GraphIDQuery, GraphIndexQuery, GraphSelectAllQuery


async def _titles(query) -> list[str]:
    return sorted(item.get("title") for item in await query)


class TestIndexQueryModel:
    """Test IndexQuery construction."""

    def test_constructors(self):
        """Convenience constructors set operation and value."""
        assert IndexQuery.equals(True).operation == IndexOperation.EQUALS
        assert IndexQuery.in_array(["a", "b"]).value == ["a", "b"]
        assert IndexQuery.in_range(1, 5).value == [1, 5]
        assert IndexQuery.like("a%").operation == IndexOperation.LIKE

    def test_keys_are_text(self):
        """Values are compared as index keys."""
        assert IndexQuery.equals(True).index_keys() == ["true"]
        assert IndexQuery.equals(None).index_keys() == [None]
        assert IndexQuery.in_array([1, "x"]).index_keys() == ["1", "x"]

    def test_value_shape_is_checked(self):
        """Malformed values are rejected by pydantic."""
        with pytest.raises(ValueError):
            IndexQuery(operation=IndexOperation.IN_ARRAY, value="abc")
        with pytest.raises(ValueError):
            IndexQuery(operation=IndexOperation.IN_RANGE, value=[1, 2, 3])
        with pytest.raises(ValueError):
            IndexQuery(operation=IndexOperation.LIKE, value=5)


class TestQueryAll:
    """Test full scans."""

    @pytest.mark.asyncio
    async def test_query_all_returns_every_readable_entity(self, db, viewer):
        """Every row of the type is returned, and only of that type."""
        for title in ("a", "b", "c"):
            await TodoItem.create(db, {"title": title}, viewer)
        await User.create(db, {"name": "not a todo"})

        query = TodoItem.query_all(db, viewer)
        assert isinstance(query, GraphSelectAllQuery)
        assert await _titles(query) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_query_all_filters_unreadable_rows(self, db, viewer, other_viewer):
        """Read rules drop rows silently."""
        await PrivateTodoItem.create(db, {"title": "mine"}, viewer)
        await PrivateTodoItem.create(db, {"title": "theirs"}, other_viewer)

        assert await _titles(PrivateTodoItem.query_all(db, viewer)) == ["mine"]
        assert await _titles(PrivateTodoItem.query_all(db, other_viewer)) == ["theirs"]
        assert await PrivateTodoItem.query_all(db) == []

    @pytest.mark.asyncio
    async def test_query_by_id_filters_unreadable_row(self, db, viewer, other_viewer):
        """An unreadable row looks missing."""
        item = await PrivateTodoItem.create(db, {"title": "secret"}, viewer)
        query = PrivateTodoItem.query_by_id(db, item.get_id(), other_viewer)
        assert isinstance(query, GraphIDQuery)
        assert await query is None
        assert (await PrivateTodoItem.query_by_id(db, item.get_id(), viewer)) is not None

    @pytest.mark.asyncio
    async def test_queries_are_lazy_and_reusable(self, db):
        """A query runs when awaited and can be awaited again."""
        query = User.query_all(db)
        assert await query == []
        await User.create(db, {"name": "Ada"})
        assert len(await query.fetch()) == 1


class TestIndexQueries:
    """Test querying through secondary indexes."""

    @pytest.mark.asyncio
    async def test_equals(self, db):
        """Equality matches the stored key."""
        done = await TodoItem.create(db, {"title": "done", "completed": True})
        await TodoItem.create(db, {"title": "open"})

        query = TodoItem.query_by(db, "completed", IndexQuery.equals(True))
        assert isinstance(query, GraphIndexQuery)
        results = await query
        assert [r.get_id() for r in results] == [done.get_id()]

    @pytest.mark.asyncio
    async def test_in_array(self, db):
        """Membership matches any listed key."""
        for title in ("apple", "banana", "cherry"):
            await TodoItem.create(db, {"title": title})
        query = TodoItem.query_by(db, "title", IndexQuery.in_array(["apple", "cherry", "kiwi"]))
        assert await _titles(query) == ["apple", "cherry"]

    @pytest.mark.asyncio
    async def test_in_range(self, db):
        """Range bounds are inclusive and compare as text."""
        for title in ("apple", "banana", "cherry", "date"):
            await TodoItem.create(db, {"title": title})
        query = TodoItem.query_by(db, "title", IndexQuery.in_range("b", "cz"))
        assert await _titles(query) == ["banana", "cherry"]

    @pytest.mark.asyncio
    async def test_like(self, db):
        """Pattern matching uses SQL LIKE syntax."""
        for title in ("write docs", "write tests", "read mail"):
            await TodoItem.create(db, {"title": title})
        query = TodoItem.query_by(db, "title", IndexQuery.like("write%"))
        assert await _titles(query) == ["write docs", "write tests"]

    @pytest.mark.asyncio
    async def test_index_follows_updates(self, db):
        """Queries see the value of the latest save only."""
        item = await TodoItem.create(db, {"title": "old"})
        await item.set("title", "new").save()

        assert await TodoItem.query_by(db, "title", IndexQuery.equals("old")) == []
        assert len(await TodoItem.query_by(db, "title", IndexQuery.equals("new"))) == 1

    @pytest.mark.asyncio
    async def test_index_query_filters_unreadable_rows(self, db, viewer, other_viewer):
        """Index results go through the read filter too."""
        await PrivateTodoItem.create(db, {"title": "mine"}, viewer)
        await PrivateTodoItem.create(db, {"title": "theirs"}, other_viewer)
        query = PrivateTodoItem.query_by(db, "completed", IndexQuery.equals(False), viewer)
        assert await _titles(query) == ["mine"]

    @pytest.mark.asyncio
    async def test_unindexed_field_is_unsupported(self, db):
        """Querying a field without an index raises immediately."""
        with pytest.raises(UnsupportedQueryError) as exc_info:
            TodoItem.query_by(db, "priority", IndexQuery.equals(1))
        assert exc_info.value.indexed_fields == ["completed", "title"]


class TestIndexRows:
    """Test the index row lifecycle."""

    @pytest.mark.asyncio
    async def test_index_rows_are_rebuilt_and_removed(self, db):
        """One row per save, replaced on update, gone after delete."""
        item = await TodoItem.create(db, {"title": "t"})
        keys = db.storage.fetch_index_keys

        assert await keys("TodoItem", "completed", item.get_id()) == ["false"]
        assert await keys("TodoItem", "title", item.get_id()) == ["t"]

        await item.set("completed", True).save()
        assert await keys("TodoItem", "completed", item.get_id()) == ["true"]

        await item.delete()
        assert await keys("TodoItem", "completed", item.get_id()) == []
        assert await keys("TodoItem", "title", item.get_id()) == []
