from ttl_storage.storage.snapshot import SnapshotCodec
from ttl_storage.storage.store import Store

__all__ = ["SnapshotCodec", "Store"]
