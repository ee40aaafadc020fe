"""
keyset_core.utils
-----------------
Base64 and canonical JSON helpers used by the key payload and wire encodings.
Canonical JSON keeps serialized payloads byte-for-byte deterministic.
"""

from __future__ import annotations
import base64, binascii, json
from typing import Any, Dict

from .errors import InvalidParameter


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def b64d(s: str) -> bytes:
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, AttributeError) as e:
        raise InvalidParameter(f"invalid base64 value: {s!r}") from e


def canonical_json(obj: Dict[str, Any]) -> bytes:
    # Deterministic, minimal JSON
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")
