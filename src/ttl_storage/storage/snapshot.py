"""
Snapshot codec: dump/load the whole Store to a single JSON file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from ttl_storage.core.errors import SnapshotError
from ttl_storage.core.logging import get_logger
from ttl_storage.core.schemas import SnapshotDocument, records_to_wire
from ttl_storage.storage.store import Store

logger = get_logger(__name__)

DEFAULT_SNAPSHOT_PATH = "storage-state.json"


class SnapshotCodec:
    """Reads and writes Store snapshots at a fixed path."""

    def __init__(self, path: Union[str, Path] = DEFAULT_SNAPSHOT_PATH):
        self.path = Path(path)

    def dump(self, store: Store) -> Path:
        """Write the live records of store to the snapshot file.

        The file is written to a temp file next to the target and renamed
        over it, so a reader never sees a half-written snapshot.

        Args:
            store: Store to serialise

        Returns:
            Path of the written snapshot

        Raises:
            SnapshotError: If the file cannot be written
        """
        payload = records_to_wire(store.get_all())
        try:
            data = json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")
        except UnicodeError as e:
            logger.error(f"Failed to encode snapshot for {self.path}: {e}")
            raise SnapshotError(f"Cannot encode snapshot {self.path}: {e}") from e

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"Failed to write snapshot to {self.path}: {e}")
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SnapshotError(f"Cannot write snapshot {self.path}: {e}") from e

        logger.info(f"Snapshot with {len(payload)} records saved to {self.path}")
        return self.path

    def load(self, store: Store) -> int:
        """Replace the contents of store with the snapshot file.

        Records keep their original savedTime, so entries older than their
        TTL are loaded already expired.

        Args:
            store: Store whose record set is replaced

        Returns:
            Number of records loaded

        Raises:
            SnapshotError: If the file is missing, unreadable or malformed;
                the store is left unchanged
        """
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read snapshot {self.path}: {e}")
            raise SnapshotError(f"Cannot read snapshot {self.path}: {e}") from e

        try:
            document = SnapshotDocument.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Rejected snapshot {self.path}: {e.error_count()} validation errors")
            raise SnapshotError(f"Invalid snapshot {self.path}: {e}") from e

        records = {key: entry.to_record() for key, entry in document.items()}
        store.replace_all(records)
        logger.info(f"Snapshot with {len(records)} records loaded from {self.path}")
        return len(records)
