from types import SimpleNamespace

from database.manager import DatabaseManager, NoOpCollection, get_db, reset_db_for_tests


def test_disabled_db_uses_noop_collections(monkeypatch):
    monkeypatch.setenv("DISABLE_DB", "1")
    mgr = DatabaseManager()
    assert mgr.is_noop
    assert isinstance(mgr.snippets_collection, NoOpCollection)
    assert mgr.snippets_collection.find({"userId": "u"}) == []
    assert mgr.snippets_collection.insert_one({}).inserted_id is not None


def test_get_db_is_a_lazy_singleton(monkeypatch):
    monkeypatch.setenv("DISABLE_DB", "1")
    reset_db_for_tests()
    try:
        assert get_db() is get_db()
    finally:
        reset_db_for_tests()


def test_connect_builds_collections_and_indexes(monkeypatch):
    import database.manager as manager_mod

    created = {}

    class FakeCollection:
        def __init__(self, name):
            self.name = name

        def create_indexes(self, models):
            created[self.name] = [m.document["name"] for m in models]

    class FakeDb(dict):
        def __missing__(self, key):
            self[key] = FakeCollection(key)
            return self[key]

    class FakeClient:
        def __init__(self, url, **kwargs):
            self.url = url
            self.kwargs = kwargs
            self.admin = SimpleNamespace(command=lambda *_a, **_k: {"ok": 1})
            self._dbs = {}

        def __getitem__(self, name):
            return self._dbs.setdefault(name, FakeDb())

        def close(self):
            pass

    monkeypatch.delenv("DISABLE_DB", raising=False)
    monkeypatch.setattr(manager_mod, "MongoClient", FakeClient)
    settings = SimpleNamespace(
        MONGODB_URL="mongodb://localhost:27017",
        MONGODB_MAX_POOL_SIZE=5,
        MONGODB_MIN_POOL_SIZE=0,
        MONGODB_SERVER_SELECTION_TIMEOUT_MS=100,
        MONGODB_SOCKET_TIMEOUT_MS=100,
        MONGODB_CONNECT_TIMEOUT_MS=100,
        MONGODB_APPNAME=None,
        DATABASE_NAME="vault",
        SNIPPETS_COLLECTION="snippets",
        USERS_COLLECTION="users",
        OWNER_FIELD="userId",
    )

    mgr = DatabaseManager(settings)

    assert not mgr.is_noop
    assert mgr.client.kwargs["maxPoolSize"] == 5
    assert created["snippets"] == ["owner_idx", "owner_created_idx"]
    assert created["users"] == ["uid_unique", "email_idx"]
    mgr.close()
    assert mgr.is_noop
