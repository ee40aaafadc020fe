"""
keyset-core
===========
Key parameter and key serialization contracts shared by every primitive.

Provides:
- Output prefix and key material vocabularies
- Validated, immutable parameter objects (AES-CMAC)
- ProtoKeySerialization envelope with id / prefix invariant enforcement
- Serialization registry and pluggable serialization stores
"""

from .errors import (
    IncompleteConfiguration,
    InvalidParameter,
    InvariantViolation,
    KeysetError,
    UnknownVariant,
)
from .result import Result
from .serialization import ProtoKeySerialization
from .types import KeyMaterialType, OutputPrefixType

__all__ = [
    "IncompleteConfiguration",
    "InvalidParameter",
    "InvariantViolation",
    "KeyMaterialType",
    "KeysetError",
    "OutputPrefixType",
    "ProtoKeySerialization",
    "Result",
    "UnknownVariant",
]
