from types import SimpleNamespace

import pytest
from pymongo.errors import PyMongoError

from src.domain.entities.user_profile import UserProfile
from src.domain.errors import StoreError
from src.infrastructure.database.mongodb.repositories.user_directory import MongoUserDirectory


class FakeUsers:
    def __init__(self):
        self.docs = {}
        self.fail = False

    def find_one(self, query):
        doc = self.docs.get(query["uid"])
        return dict(doc) if doc else None

    def find(self, query):
        if self.fail:
            raise PyMongoError("down")
        return [dict(d) for d in self.docs.values()]

    def update_one(self, query, update, upsert=False):
        if self.fail:
            raise PyMongoError("down")
        uid = query["uid"]
        if uid not in self.docs and not upsert:
            return SimpleNamespace(matched_count=0)
        self.docs.setdefault(uid, {"uid": uid}).update(update["$set"])
        return SimpleNamespace(matched_count=1)


@pytest.fixture
def users():
    return FakeUsers()


@pytest.fixture
def user_dir(users):
    return MongoUserDirectory(SimpleNamespace(users_collection=users))


@pytest.mark.asyncio
async def test_create_get_update_list(user_dir):
    await user_dir.create(UserProfile(uid="u1", email="a@b.co", display_name="A"))
    got = await user_dir.get("u1")
    assert got.email == "a@b.co"
    assert got.role == "user"

    await user_dir.update("u1", {"isActive": False})
    assert (await user_dir.get("u1")).is_active is False
    assert [p.uid for p in await user_dir.list_all()] == ["u1"]


@pytest.mark.asyncio
async def test_get_missing_returns_none(user_dir):
    assert await user_dir.get("ghost") is None


@pytest.mark.asyncio
async def test_driver_errors_become_store_errors(user_dir, users):
    users.fail = True
    with pytest.raises(StoreError):
        await user_dir.list_all()
    with pytest.raises(StoreError):
        await user_dir.update("u1", {"isActive": True})
