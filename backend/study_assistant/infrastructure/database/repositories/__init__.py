from .kv_store_repository import SQLAlchemyKeyValueStore

__all__ = [
    "SQLAlchemyKeyValueStore",
]
