"""In-memory document store: queries, index rules, transactions."""

from datetime import datetime

import pytest

from learnhub.entities import LESSONS, Lesson
from learnhub.store import (
    SERVER_TIMESTAMP,
    DocumentNotFoundError,
    Filter,
    IndexSpec,
    MemoryDocumentStore,
    MissingIndexError,
    OrderBy,
    Repository,
)


class TestIndexSpec:
    def test_parse_sorts_fields(self):
        spec = IndexSpec.parse("progress:userId,completed:completedAt")
        assert spec == IndexSpec("progress", ("completed", "userId"), "completedAt")

    def test_parse_rejects_malformed(self):
        with pytest.raises(ValueError, match="Invalid index spec"):
            IndexSpec.parse("progress:userId")


class TestQueries:
    @pytest.mark.asyncio
    async def test_add_get_update_delete(self):
        store = MemoryDocumentStore()
        doc_id = await store.add("things", {"name": "a", "count": 1})
        await store.update("things", doc_id, {"count": 2})
        doc = await store.get("things", doc_id)
        assert doc.data == {"name": "a", "count": 2}

        await store.delete("things", doc_id)
        assert await store.get("things", doc_id) is None
        await store.delete("things", doc_id)  # absent ids are ignored

    @pytest.mark.asyncio
    async def test_update_missing_raises(self):
        store = MemoryDocumentStore()
        with pytest.raises(DocumentNotFoundError):
            await store.update("things", "nope", {"count": 1})

    @pytest.mark.asyncio
    async def test_set_merge(self):
        store = MemoryDocumentStore()
        await store.set("things", "t1", {"a": 1, "b": 2})
        await store.set("things", "t1", {"b": 3}, merge=True)
        assert (await store.get("things", "t1")).data == {"a": 1, "b": 3}
        await store.set("things", "t1", {"c": 4})
        assert (await store.get("things", "t1")).data == {"c": 4}

    @pytest.mark.asyncio
    async def test_none_filter_matches_missing_field(self):
        store = MemoryDocumentStore()
        await store.add("badges", {"title": "catalog"})
        await store.add("badges", {"title": "claim", "userId": "u1"})
        docs = await store.query("badges", [Filter("userId", None)])
        assert [d.data["title"] for d in docs] == ["catalog"]
        docs = await store.query("badges", [Filter("userId", None, op="!=")])
        assert [d.data["title"] for d in docs] == ["claim"]

    @pytest.mark.asyncio
    async def test_server_timestamp_resolved(self):
        store = MemoryDocumentStore()
        doc_id = await store.add("things", {"createdAt": SERVER_TIMESTAMP})
        stamp = (await store.get("things", doc_id)).data["createdAt"]
        assert isinstance(stamp, str)
        assert datetime.fromisoformat(stamp).tzinfo is not None

    @pytest.mark.asyncio
    async def test_order_puts_missing_values_last(self):
        store = MemoryDocumentStore()
        for value in (3, None, 1):
            await store.add("things", {"rank": value} if value is not None else {})
        docs = await store.query("things", order_by=OrderBy("rank"))
        assert [d.data.get("rank") for d in docs] == [1, 3, None]


class TestIndexes:
    @pytest.mark.asyncio
    async def test_undeclared_composite_index_raises(self):
        store = MemoryDocumentStore()
        with pytest.raises(MissingIndexError):
            await store.query(LESSONS, [Filter("courseId", "c1")], order_by=OrderBy("order"))

    @pytest.mark.asyncio
    async def test_declared_index_serves_query(self):
        store = MemoryDocumentStore([IndexSpec.parse("lessons:courseId:order")])
        await store.query(LESSONS, [Filter("courseId", "c1")], order_by=OrderBy("order"))

    @pytest.mark.asyncio
    async def test_order_on_filtered_field_needs_no_index(self):
        store = MemoryDocumentStore()
        await store.query(LESSONS, [Filter("order", 1)], order_by=OrderBy("order"))

    @pytest.mark.asyncio
    async def test_find_ordered_falls_back_to_in_memory_sort(self):
        store = MemoryDocumentStore()
        lessons = Repository(store, LESSONS, Lesson)
        for order in (3, 1, 2):
            await lessons.create(Lesson(title=f"L{order}", course_id="c1", order=order))
        await lessons.create(Lesson(title="unordered", course_id="c1"))
        await lessons.create(Lesson(title="other course", course_id="c2", order=0))
        store.fail_ordered_queries = True

        result = await lessons.find_ordered("order", courseId="c1")
        assert [lesson.title for lesson in result] == ["L1", "L2", "L3", "unordered"]

        newest = await lessons.find_ordered("order", descending=True, limit=2, courseId="c1")
        assert [lesson.order for lesson in newest] == [3, 2]


class TestTransactions:
    @pytest.mark.asyncio
    async def test_rollback_restores_last_commit(self):
        store = MemoryDocumentStore()
        kept = await store.add("things", {"n": 1})
        await store.commit()
        dropped = await store.add("things", {"n": 2})
        await store.rollback()
        assert await store.get("things", kept) is not None
        assert await store.get("things", dropped) is None

    @pytest.mark.asyncio
    async def test_transaction_discards_writes_on_error(self):
        store = MemoryDocumentStore()
        with pytest.raises(RuntimeError):
            async with store.transaction():
                await store.add("things", {"n": 1})
                raise RuntimeError("boom")
        assert await store.query("things") == []

    @pytest.mark.asyncio
    async def test_transaction_commits_on_success(self):
        store = MemoryDocumentStore()
        async with store.transaction():
            doc_id = await store.add("things", {"n": 1})
        await store.rollback()
        assert await store.get("things", doc_id) is not None


class TestSessions:
    @pytest.mark.asyncio
    async def test_rollback_keeps_other_session_pending_writes(self):
        root = MemoryDocumentStore()
        first, second = root.session(), root.session()
        doc_id = await first.add("things", {"n": 1})
        await second.add("things", {"n": 2})
        await second.rollback()
        await first.commit()
        assert (await root.session().get("things", doc_id)).data == {"n": 1}

    @pytest.mark.asyncio
    async def test_commit_applies_only_touched_documents(self):
        root = MemoryDocumentStore()
        seed = root.session()
        a = await seed.add("things", {"n": 1})
        b = await seed.add("things", {"n": 2})
        await seed.commit()

        first, second = root.session(), root.session()
        await first.update("things", a, {"n": 10})
        await second.update("things", b, {"n": 20})
        await first.commit()
        await second.commit()

        view = root.session()
        assert (await view.get("things", a)).data == {"n": 10}
        assert (await view.get("things", b)).data == {"n": 20}

    @pytest.mark.asyncio
    async def test_committed_delete_reaches_shared_state(self):
        root = MemoryDocumentStore()
        seed = root.session()
        doc_id = await seed.add("things", {"n": 1})
        await seed.commit()

        remover = root.session()
        await remover.delete("things", doc_id)
        await remover.commit()
        assert await root.session().get("things", doc_id) is None
