"""
keyset_core.errors
------------------
Error taxonomy for parameter and serialization validation.

Every error is raised at the point of violation and propagated to the caller;
nothing in keyset_core catches and downgrades them.
"""

from __future__ import annotations


class KeysetError(Exception):
    pass


class InvalidParameter(KeysetError):
    """A single field value is outside its allowed domain."""


class IncompleteConfiguration(KeysetError):
    """A required field was never set before build()."""


class InvariantViolation(KeysetError):
    """Two fields disagree, e.g. id presence vs. output prefix type."""


class UnknownVariant(KeysetError):
    """A value outside a closed enumeration reached an exhaustive handler."""
