from __future__ import annotations
from typing import List, Optional
import os, sqlite3, threading

from keyset_core.logger import get_logger
from keyset_core.serialization import ProtoKeySerialization
from keyset_core.storage.models import SerializationRecord
from keyset_core.storage.provider import StorageProvider

log = get_logger("keyset.storage.sqlite")

_COLUMNS = ("object_id", "type_url", "value_b64", "key_material_type", "output_prefix_type", "id_requirement")


class SQLiteStorage(StorageProvider):
    def __init__(self, path="db/keyset_state.db"):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.db = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.Lock()
        self._init()

    def _init(self) -> None:
        self.db.execute("""CREATE TABLE IF NOT EXISTS key_serializations(
            object_id TEXT PRIMARY KEY,
            type_url TEXT NOT NULL,
            value_b64 TEXT NOT NULL,
            key_material_type TEXT NOT NULL,
            output_prefix_type TEXT NOT NULL,
            id_requirement INTEGER
        )""")
        self.db.commit()

    def put(self, serialization: ProtoKeySerialization) -> str:
        rec = SerializationRecord.from_serialization(serialization)
        row = tuple(getattr(rec, col) for col in _COLUMNS)
        with self._lock:
            self.db.execute(
                f"INSERT OR REPLACE INTO key_serializations ({', '.join(_COLUMNS)}) "
                f"VALUES ({', '.join('?' * len(_COLUMNS))})",
                row,
            )
            self.db.commit()
        log.debug(f"[SQLITE] stored {rec.type_url} as {rec.object_id}")
        return rec.object_id

    def get(self, object_identifier: bytes) -> Optional[ProtoKeySerialization]:
        with self._lock:
            row = self.db.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM key_serializations WHERE object_id = ?",
                (object_identifier.hex(),),
            ).fetchone()
        if row is None:
            return None
        return SerializationRecord(*row).to_serialization()

    def delete(self, object_identifier: bytes) -> bool:
        with self._lock:
            cur = self.db.execute(
                "DELETE FROM key_serializations WHERE object_id = ?",
                (object_identifier.hex(),),
            )
            self.db.commit()
        return cur.rowcount > 0

    def list_serializations(self) -> List[ProtoKeySerialization]:
        with self._lock:
            rows = self.db.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM key_serializations ORDER BY object_id"
            ).fetchall()
        return [SerializationRecord(*row).to_serialization() for row in rows]

    def close(self) -> None:
        self.db.close()
