"""
keyset_core.types
-----------------
Closed vocabularies shared by parameter objects and key serializations:

- OutputPrefixType: whether (and how) an id-derived prefix is attached to
  primitive output. RAW is the wire spelling of NO_PREFIX.
- KeyMaterialType: what kind of secret a serialized payload carries.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional
import struct

from .errors import InvalidParameter, InvariantViolation, UnknownVariant

OUTPUT_PREFIX_SIZE = 5
TINK_START_BYTE = 0x01
LEGACY_START_BYTE = 0x00
MAX_ID_REQUIREMENT = 2**32 - 1


class _ClosedEnum(Enum):
    @classmethod
    def parse(cls, name: str):
        """Look a member up by name (case-insensitive, aliases included)."""
        if isinstance(name, cls):
            return name
        member = cls.__members__.get(str(name).strip().upper())
        if member is None:
            raise UnknownVariant(f"unknown {cls.__name__}: {name!r}")
        return member

    def __str__(self) -> str:
        return self.name


class OutputPrefixType(_ClosedEnum):
    NO_PREFIX = "NO_PREFIX"
    TINK = "TINK"
    CRUNCHY = "CRUNCHY"
    LEGACY = "LEGACY"
    RAW = "NO_PREFIX"  # alias

    def requires_id(self) -> bool:
        return self is not OutputPrefixType.NO_PREFIX

    def prefix_size(self) -> int:
        return OUTPUT_PREFIX_SIZE if self.requires_id() else 0

    def output_prefix(self, id_requirement: Optional[int] = None) -> bytes:
        """
        Bytes prepended to every output of a key with this prefix type.

        TINK keys use a 0x01 start byte, CRUNCHY and LEGACY keys 0x00, each
        followed by the big-endian 32-bit key id. NO_PREFIX keys get nothing.
        """
        check_id_presence(self, id_requirement)
        if self is OutputPrefixType.NO_PREFIX:
            return b""
        if self is OutputPrefixType.TINK:
            return struct.pack(">BI", TINK_START_BYTE, id_requirement)
        if self in (OutputPrefixType.CRUNCHY, OutputPrefixType.LEGACY):
            return struct.pack(">BI", LEGACY_START_BYTE, id_requirement)
        raise UnknownVariant(f"unknown output prefix type: {self!r}")


class KeyMaterialType(_ClosedEnum):
    SYMMETRIC = "SYMMETRIC"
    ASYMMETRIC_PRIVATE = "ASYMMETRIC_PRIVATE"
    ASYMMETRIC_PUBLIC = "ASYMMETRIC_PUBLIC"
    REMOTE = "REMOTE"


def ensure_prefix_type(value) -> OutputPrefixType:
    if not isinstance(value, OutputPrefixType):
        raise UnknownVariant(f"not an OutputPrefixType: {value!r}")
    return value


def ensure_material_type(value) -> KeyMaterialType:
    if not isinstance(value, KeyMaterialType):
        raise UnknownVariant(f"not a KeyMaterialType: {value!r}")
    return value


def check_id_requirement(id_requirement: Optional[int]) -> Optional[int]:
    if id_requirement is None:
        return None
    # bool is an int subclass; True is not a key id
    if isinstance(id_requirement, bool) or not isinstance(id_requirement, int):
        raise InvalidParameter(f"id requirement must be an int, got {id_requirement!r}")
    if not 0 <= id_requirement <= MAX_ID_REQUIREMENT:
        raise InvalidParameter(
            f"id requirement {id_requirement} out of range; must fit in an unsigned 32-bit integer"
        )
    return id_requirement


def check_id_presence(prefix_type: OutputPrefixType, id_requirement: Optional[int]) -> None:
    """Raise InvariantViolation unless an id is present exactly when the prefix type needs one."""
    needs_id = ensure_prefix_type(prefix_type).requires_id()
    has_id = id_requirement is not None
    if needs_id != has_id:
        raise InvariantViolation(
            f"id requirement mismatch: (output_prefix_type={prefix_type}, id_present={has_id}); "
            f"{prefix_type} {'requires' if needs_id else 'forbids'} an id"
        )
