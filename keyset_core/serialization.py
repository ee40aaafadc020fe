"""
keyset_core.serialization
-------------------------
Defines ProtoKeySerialization — the provider-agnostic envelope that carries a
serialized key between the key layer and storage / transmission.

Key features:
- Opaque payload: the value bytes are never interpreted here
- Cross-field invariant: an id is present exactly when the output prefix
  type needs one, checked before any instance exists
- Stable object identifier for lookup and de-duplication
- JSON-safe dict form for wire and storage layers (to_dict / from_dict)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import json
import struct

from .errors import InvalidParameter, KeysetError
from .logger import get_logger
from .result import Result
from .types import (
    KeyMaterialType,
    OutputPrefixType,
    check_id_presence,
    check_id_requirement,
    ensure_material_type,
    ensure_prefix_type,
)
from .utils import b64d, b64e, canonical_json

log = get_logger("keyset.serialization")

# 0xFF never appears in UTF-8, so it cleanly separates the type URL from the id.
_ID_MARKER = b"\xff"


@dataclass(frozen=True)
class ProtoKeySerialization:
    type_url: str
    value: bytes
    key_material_type: KeyMaterialType
    output_prefix_type: OutputPrefixType
    id_requirement: Optional[int] = None
    object_identifier: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.type_url, str) or not self.type_url:
            raise InvalidParameter(f"type_url must be a non-empty string, got {self.type_url!r}")
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise InvalidParameter(f"value must be bytes, got {type(self.value).__name__}")
        ensure_material_type(self.key_material_type)
        ensure_prefix_type(self.output_prefix_type)
        check_id_requirement(self.id_requirement)
        check_id_presence(self.output_prefix_type, self.id_requirement)

        # Freeze the payload; a caller-held bytearray must not alias it.
        object.__setattr__(self, "value", bytes(self.value))
        object.__setattr__(self, "object_identifier", self._compute_object_identifier())

    def _compute_object_identifier(self) -> bytes:
        url = self.type_url.encode("utf-8")
        if self.id_requirement is None:
            return url
        return url + _ID_MARKER + struct.pack(">I", self.id_requirement)

    @staticmethod
    def create(
        type_url: str,
        value: bytes,
        key_material_type: KeyMaterialType,
        output_prefix_type: OutputPrefixType,
        id_requirement: Optional[int],
    ) -> "ProtoKeySerialization":
        """Validating factory; raises instead of returning a half-valid envelope."""
        return ProtoKeySerialization(
            type_url=type_url,
            value=value,
            key_material_type=key_material_type,
            output_prefix_type=output_prefix_type,
            id_requirement=id_requirement,
        )

    @staticmethod
    def try_create(
        type_url: str,
        value: bytes,
        key_material_type: KeyMaterialType,
        output_prefix_type: OutputPrefixType,
        id_requirement: Optional[int],
    ) -> Result["ProtoKeySerialization"]:
        return Result.capture(
            lambda: ProtoKeySerialization.create(
                type_url, value, key_material_type, output_prefix_type, id_requirement
            )
        )

    def has_id_requirement(self) -> bool:
        return self.id_requirement is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type_url": self.type_url,
            "value": b64e(self.value),
            "key_material_type": self.key_material_type.name,
            "output_prefix_type": self.output_prefix_type.name,
            "id_requirement": self.id_requirement,
        }

    def to_json(self) -> str:
        return canonical_json(self.to_dict()).decode("utf-8")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProtoKeySerialization":
        """Rebuild from to_dict() output. The invariant is re-checked, so a
        tampered record is rejected rather than half-loaded."""
        try:
            serialization = cls.create(
                type_url=data["type_url"],
                value=b64d(data["value"]),
                key_material_type=KeyMaterialType.parse(data["key_material_type"]),
                output_prefix_type=OutputPrefixType.parse(data["output_prefix_type"]),
                id_requirement=data.get("id_requirement"),
            )
        except KeyError as e:
            log.warning(f"[SERIALIZATION] rejected record, missing field {e}")
            raise InvalidParameter(f"serialized key is missing field {e}") from e
        except KeysetError as e:
            log.warning(f"[SERIALIZATION] rejected record: {e}")
            raise
        log.debug(f"[SERIALIZATION] loaded {serialization.type_url}")
        return serialization

    @classmethod
    def from_json(cls, raw: str | bytes) -> "ProtoKeySerialization":
        try:
            data = json.loads(raw)
        except ValueError as e:
            log.warning("[SERIALIZATION] rejected record, not valid JSON")
            raise InvalidParameter(f"serialized key is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            log.warning("[SERIALIZATION] rejected record, not a JSON object")
            raise InvalidParameter("serialized key must be a JSON object")
        return cls.from_dict(data)
