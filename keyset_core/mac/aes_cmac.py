"""
keyset_core.mac.aes_cmac
------------------------
AES-CMAC parameters and keys.

AesCmacParameters is built through a validating builder: every setter checks
its field immediately, and build() only checks completeness. The resulting
object is frozen, so any holder can trust its fields without re-validating.
AesCmacKey binds parameters to key bytes and an optional id.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import os

from cryptography.hazmat.primitives import constant_time

from ..errors import IncompleteConfiguration, InvalidParameter
from ..parameters import MacParameters
from ..result import Result
from ..types import OutputPrefixType, check_id_presence, check_id_requirement, ensure_prefix_type

Variant = OutputPrefixType

KEY_SIZES = (16, 32)
MIN_TAG_SIZE = 10
MAX_TAG_SIZE = 16


def _check_key_size(key_size_bytes: int) -> int:
    if (
        isinstance(key_size_bytes, bool)
        or not isinstance(key_size_bytes, int)
        or key_size_bytes not in KEY_SIZES
    ):
        raise InvalidParameter(
            f"Invalid key size {key_size_bytes!r}; allowed sizes are {KEY_SIZES} bytes "
            "(only 128-bit and 256-bit AES keys are supported)"
        )
    return key_size_bytes


def _check_tag_size(tag_size_bytes: int) -> int:
    if (
        isinstance(tag_size_bytes, bool)
        or not isinstance(tag_size_bytes, int)
        or not MIN_TAG_SIZE <= tag_size_bytes <= MAX_TAG_SIZE
    ):
        raise InvalidParameter(
            f"Invalid tag size {tag_size_bytes!r} for AesCmacParameters; "
            f"must be in [{MIN_TAG_SIZE}, {MAX_TAG_SIZE}]"
        )
    return tag_size_bytes


@dataclass(frozen=True, eq=False)
class AesCmacParameters(MacParameters):
    key_size_bytes: int
    tag_size_bytes: int
    variant: OutputPrefixType = OutputPrefixType.NO_PREFIX

    Variant = OutputPrefixType

    def __post_init__(self):
        # Direct construction goes through the same checks as the builder.
        _check_key_size(self.key_size_bytes)
        _check_tag_size(self.tag_size_bytes)
        ensure_prefix_type(self.variant)

    class Builder:
        def __init__(self):
            self._key_size_bytes: Optional[int] = None
            self._tag_size_bytes: Optional[int] = None
            self._variant = OutputPrefixType.NO_PREFIX

        def set_key_size_bytes(self, key_size_bytes: int) -> "AesCmacParameters.Builder":
            self._key_size_bytes = _check_key_size(key_size_bytes)
            return self

        def set_tag_size_bytes(self, tag_size_bytes: int) -> "AesCmacParameters.Builder":
            self._tag_size_bytes = _check_tag_size(tag_size_bytes)
            return self

        def set_variant(self, variant: OutputPrefixType) -> "AesCmacParameters.Builder":
            self._variant = ensure_prefix_type(variant)
            return self

        def build(self) -> "AesCmacParameters":
            missing = [
                name for name, value in (
                    ("key_size_bytes", self._key_size_bytes),
                    ("tag_size_bytes", self._tag_size_bytes),
                ) if value is None
            ]
            if missing:
                raise IncompleteConfiguration(f"AesCmacParameters not fully configured; missing {missing}")
            return AesCmacParameters(self._key_size_bytes, self._tag_size_bytes, self._variant)

        def try_build(self) -> Result["AesCmacParameters"]:
            return Result.capture(self.build)

    @staticmethod
    def builder() -> "AesCmacParameters.Builder":
        return AesCmacParameters.Builder()

    @staticmethod
    def create(key_size_bytes: int, tag_size_bytes: int,
               variant: OutputPrefixType = OutputPrefixType.NO_PREFIX) -> "AesCmacParameters":
        return (
            AesCmacParameters.builder()
            .set_key_size_bytes(key_size_bytes)
            .set_tag_size_bytes(tag_size_bytes)
            .set_variant(variant)
            .build()
        )

    @property
    def cryptographic_tag_size_bytes(self) -> int:
        """Size of the tag computed from the message, without any prefix."""
        return self.tag_size_bytes

    @property
    def total_tag_size_bytes(self) -> int:
        return self.tag_size_bytes + self.variant.prefix_size()

    def has_id_requirement(self) -> bool:
        return self.variant.requires_id()

    # Equality is on the effective wire tag size, not the raw tag size.
    def _identity(self):
        return (self.key_size_bytes, self.total_tag_size_bytes, self.variant)

    def __eq__(self, other):
        if not isinstance(other, AesCmacParameters):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self):
        return hash(self._identity())

    def __str__(self) -> str:
        return (
            f"AES-CMAC Parameters (variant: {self.variant}, {self.tag_size_bytes}-byte tags, "
            f"and {self.key_size_bytes}-byte key)"
        )


@dataclass(frozen=True, eq=False)
class AesCmacKey:
    parameters: AesCmacParameters
    key_bytes: bytes = field(repr=False)
    id_requirement: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.parameters, AesCmacParameters):
            raise InvalidParameter(f"expected AesCmacParameters, got {type(self.parameters).__name__}")
        if not isinstance(self.key_bytes, (bytes, bytearray, memoryview)):
            raise InvalidParameter("key_bytes must be bytes")
        # Own an immutable copy; callers may hold a mutable alias.
        object.__setattr__(self, "key_bytes", bytes(self.key_bytes))
        if len(self.key_bytes) != self.parameters.key_size_bytes:
            raise InvalidParameter(
                f"key has {len(self.key_bytes)} bytes; parameters require {self.parameters.key_size_bytes}"
            )
        check_id_requirement(self.id_requirement)
        check_id_presence(self.parameters.variant, self.id_requirement)

    @staticmethod
    def create(parameters: AesCmacParameters, key_bytes: bytes,
               id_requirement: Optional[int] = None) -> "AesCmacKey":
        return AesCmacKey(parameters, key_bytes, id_requirement)

    @staticmethod
    def generate(parameters: AesCmacParameters, id_requirement: Optional[int] = None) -> "AesCmacKey":
        return AesCmacKey(parameters, os.urandom(parameters.key_size_bytes), id_requirement)

    @property
    def output_prefix(self) -> bytes:
        return self.parameters.variant.output_prefix(self.id_requirement)

    def equal_key(self, other: "AesCmacKey") -> bool:
        if not isinstance(other, AesCmacKey):
            return False
        return (
            self.parameters == other.parameters
            and self.id_requirement == other.id_requirement
            and constant_time.bytes_eq(self.key_bytes, other.key_bytes)
        )
