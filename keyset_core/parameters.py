"""
keyset_core.parameters
----------------------
Base classes for parameter objects: immutable, already-validated descriptions
of how a key of some primitive is configured.

has_id_requirement() is the contract the serialization layer relies on: a key
described by parameters that return True must be serialized with an id, and
one that returns False must not.
"""

from __future__ import annotations
from abc import ABC, abstractmethod


class Parameters(ABC):
    @abstractmethod
    def has_id_requirement(self) -> bool:
        ...


class MacParameters(Parameters):
    @property
    @abstractmethod
    def cryptographic_tag_size_bytes(self) -> int:
        ...

    @property
    @abstractmethod
    def total_tag_size_bytes(self) -> int:
        """Security-relevant tag size plus any output prefix."""
