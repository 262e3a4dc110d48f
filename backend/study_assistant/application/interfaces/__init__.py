from .chat_provider import ChatProvider
from .key_value_store import KeyValueStore

__all__ = [
    "ChatProvider",
    "KeyValueStore",
]
