"""
tests/conftest.py

Safe, isolated env defaults (no external IO) and the shared fakes as fixtures.
"""

import os

# Ensure safe, isolated test environment variables (no external IO)
os.environ.setdefault('DISABLE_DB', '1')
os.environ.setdefault('MONGODB_URL', 'mongodb://localhost:27017/test')
os.environ.setdefault('LOG_FORMAT', 'json')

import pytest  # noqa: E402

from tests.unit._fakes import (  # noqa: E402
    FakeIdentityProvider,
    FakeSnippetStore,
    FakeUserDirectory,
    MemoryPreferences,
)


@pytest.fixture
def store():
    return FakeSnippetStore()


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def directory():
    return FakeUserDirectory()


@pytest.fixture
def preferences():
    return MemoryPreferences()
