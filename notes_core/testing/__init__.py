"""Test doubles for code built on notes_core."""

from notes_core.testing.memory_store import InMemoryObjectStore, StoreOp

__all__ = ["InMemoryObjectStore", "StoreOp"]
