from __future__ import annotations

import pytest

from notes_core.io.keys import Namespace, build_namespace
from notes_core.testing.memory_store import InMemoryObjectStore


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def namespace() -> Namespace:
    return build_namespace(bucket="notes-bucket", user_id="user-1")
