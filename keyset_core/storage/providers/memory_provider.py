from typing import Dict, List, Optional
import threading

from keyset_core.serialization import ProtoKeySerialization
from keyset_core.storage.models import SerializationRecord
from keyset_core.storage.provider import StorageProvider


class InMemoryStorage(StorageProvider):
    def __init__(self):
        self.records: Dict[str, SerializationRecord] = {}
        self._lock = threading.Lock()

    def put(self, serialization: ProtoKeySerialization) -> str:
        rec = SerializationRecord.from_serialization(serialization)
        with self._lock:
            self.records[rec.object_id] = rec
        return rec.object_id

    def get(self, object_identifier: bytes) -> Optional[ProtoKeySerialization]:
        rec = self.records.get(object_identifier.hex())
        return rec.to_serialization() if rec else None

    def delete(self, object_identifier: bytes) -> bool:
        with self._lock:
            return self.records.pop(object_identifier.hex(), None) is not None

    def list_serializations(self) -> List[ProtoKeySerialization]:
        return [rec.to_serialization() for rec in list(self.records.values())]
