import pytest

from src.application.services.snippet_gateway import SnippetGateway
from src.domain.entities.snippet import Snippet
from src.domain.errors import NotAuthenticatedError, StoreError
from src.domain.interfaces.snippet_store_interface import ISnippetStore


def _clock():
    return "2024-05-01T00:00:00+00:00"


@pytest.mark.asyncio
async def test_list_requires_owner(store):
    gw = SnippetGateway(store)
    with pytest.raises(NotAuthenticatedError):
        await gw.list_by_owner("")
    assert store.calls == []


@pytest.mark.asyncio
async def test_list_migrates_legacy_documents(store):
    store.seed({"userId": "u1", "title": "old", "category": "Work", "content": "ls"}, "d1")
    store.seed({"userId": "u2", "title": "someone else"}, "d2")
    gw = SnippetGateway(store)

    items = await gw.list_by_owner("u1")

    assert len(items) == 1
    assert items[0].id == "d1"
    assert items[0].categories == ["Work"]
    assert items[0].code == "ls"


@pytest.mark.asyncio
async def test_create_stamps_owner_and_timestamps(store):
    gw = SnippetGateway(store, clock=_clock)
    new_id = await gw.create({"id": "ignored", "title": "t", "code": "x", "tags": "a, A"}, "u1")

    doc = store.docs[new_id]
    assert "id" not in doc
    assert doc["userId"] == "u1"
    assert doc["createdAt"] == doc["updatedAt"] == _clock()
    assert doc["tags"] == ["a"]
    assert doc["category"] == "Uncategorized"


@pytest.mark.asyncio
async def test_create_keeps_existing_created_at(store):
    gw = SnippetGateway(store, clock=_clock)
    new_id = await gw.create(Snippet(title="t", created_at="2020-01-01T00:00:00Z"), "u1")
    assert store.docs[new_id]["createdAt"] == "2020-01-01T00:00:00Z"


@pytest.mark.asyncio
async def test_update_never_rewrites_created_at(store):
    store.seed({"userId": "u1", "title": "t", "createdAt": "2020-01-01"}, "d1")
    gw = SnippetGateway(store, clock=_clock)

    await gw.update("d1", Snippet(title="t2", created_at="1999-01-01"), "u1")

    assert store.docs["d1"]["createdAt"] == "2020-01-01"
    assert store.docs["d1"]["updatedAt"] == _clock()
    assert store.docs["d1"]["title"] == "t2"


@pytest.mark.asyncio
async def test_remove_absent_id_is_not_an_error(store):
    gw = SnippetGateway(store)
    await gw.remove("missing", "u1")
    assert store.count("delete") == 1


@pytest.mark.asyncio
async def test_store_errors_propagate_without_retry(store):
    store.fail_find = True
    gw = SnippetGateway(store)
    with pytest.raises(StoreError):
        await gw.list_by_owner("u1")
    assert store.count("find") == 1


@pytest.mark.asyncio
async def test_foreign_exceptions_are_wrapped():
    class Broken(ISnippetStore):
        async def find_by_owner(self, owner_id):
            raise ConnectionError("socket closed")

        async def insert(self, document):
            raise NotImplementedError

        async def update(self, doc_id, document):
            raise NotImplementedError

        async def delete(self, doc_id):
            raise NotImplementedError

    with pytest.raises(StoreError) as exc:
        await SnippetGateway(Broken()).list_by_owner("u1")
    assert isinstance(exc.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_import_many_collects_per_item_outcomes(store):
    gw = SnippetGateway(store)
    calls = {"n": 0}
    original_insert = store.insert

    async def flaky_insert(document):
        calls["n"] += 1
        if calls["n"] == 2:
            raise StoreError("boom")
        return await original_insert(document)

    store.insert = flaky_insert
    result = await gw.import_many([{"title": "a"}, {"title": "b"}, {"title": "c"}], "u1")

    assert len(result) == 3
    assert len(result.succeeded) == 2
    assert [o.item_id for o in result.failed] == ["#1"]
    assert sorted(d["title"] for d in store.docs.values()) == ["a", "c"]
