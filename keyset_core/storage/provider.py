# keyset_core/storage/provider.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional

from ..serialization import ProtoKeySerialization


class StorageProvider(ABC):
    """Interface for serialization stores keyed by object identifier."""

    @abstractmethod
    def put(self, serialization: ProtoKeySerialization) -> str:
        ...

    @abstractmethod
    def get(self, object_identifier: bytes) -> Optional[ProtoKeySerialization]:
        ...

    @abstractmethod
    def delete(self, object_identifier: bytes) -> bool:
        ...

    @abstractmethod
    def list_serializations(self) -> List[ProtoKeySerialization]:
        ...

    def close(self) -> None:
        return
