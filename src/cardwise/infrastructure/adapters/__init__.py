from .json_store import InMemoryStore, JsonFileStore

__all__ = ["InMemoryStore", "JsonFileStore"]
