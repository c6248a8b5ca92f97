from wishrift.storage.base import Storage
from wishrift.storage.memory import MemoryStorage
from wishrift.storage.sql import SqlStorage

__all__ = ["Storage", "MemoryStorage", "SqlStorage"]
