# keyset_core/storage/models.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from ..serialization import ProtoKeySerialization


@dataclass
class SerializationRecord:
    """
    Storage-level row for a ProtoKeySerialization.

    Storage-agnostic and usable by any provider (SQLite, memory, ...).
    object_id is the hex form of the envelope's object identifier.
    """
    object_id: str
    type_url: str
    value_b64: str
    key_material_type: str
    output_prefix_type: str
    id_requirement: Optional[int] = None

    @classmethod
    def from_serialization(cls, s: ProtoKeySerialization) -> "SerializationRecord":
        d = s.to_dict()
        return cls(
            object_id=s.object_identifier.hex(),
            type_url=d["type_url"],
            value_b64=d["value"],
            key_material_type=d["key_material_type"],
            output_prefix_type=d["output_prefix_type"],
            id_requirement=d["id_requirement"],
        )

    def to_serialization(self) -> ProtoKeySerialization:
        # Goes back through the validating factory.
        return ProtoKeySerialization.from_dict({
            "type_url": self.type_url,
            "value": self.value_b64,
            "key_material_type": self.key_material_type,
            "output_prefix_type": self.output_prefix_type,
            "id_requirement": self.id_requirement,
        })

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
