"""
keyset_core.registry
--------------------
Dispatch between key objects and their ProtoKeySerialization form.

Serializers are looked up by key class, parsers by type URL. The registry only
routes; each primitive's module owns its payload format.
"""

from __future__ import annotations
from typing import Callable, Dict, Optional, Type
import threading

from .errors import KeysetError
from .logger import get_logger
from .serialization import ProtoKeySerialization

log = get_logger("keyset.registry")

Serializer = Callable[[object], ProtoKeySerialization]
Parser = Callable[[ProtoKeySerialization], object]


class SerializationRegistry:
    def __init__(self):
        self._serializers: Dict[Type, Serializer] = {}
        self._parsers: Dict[str, Parser] = {}
        self._lock = threading.Lock()

    def register_serializer(self, key_class: Type, serializer: Serializer) -> None:
        with self._lock:
            existing = self._serializers.get(key_class)
            if existing is not None and existing is not serializer:
                raise KeysetError(f"a different serializer is already registered for {key_class.__name__}")
            self._serializers[key_class] = serializer
        log.debug(f"[REGISTRY] serializer registered for {key_class.__name__}")

    def register_parser(self, type_url: str, parser: Parser) -> None:
        with self._lock:
            existing = self._parsers.get(type_url)
            if existing is not None and existing is not parser:
                raise KeysetError(f"a different parser is already registered for {type_url}")
            self._parsers[type_url] = parser
        log.debug(f"[REGISTRY] parser registered for {type_url}")

    def has_parser(self, type_url: str) -> bool:
        return type_url in self._parsers

    def serialize_key(self, key) -> ProtoKeySerialization:
        serializer = self._serializers.get(type(key))
        if serializer is None:
            raise KeysetError(f"no serializer registered for {type(key).__name__}")
        return serializer(key)

    def parse_key(self, serialization: ProtoKeySerialization):
        parser = self._parsers.get(serialization.type_url)
        if parser is None:
            log.warning(f"[REGISTRY] no parser for {serialization.type_url}")
            raise KeysetError(f"no parser registered for {serialization.type_url}")
        return parser(serialization)


_default: Optional[SerializationRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> SerializationRegistry:
    """Process-wide registry with the built-in key types registered."""
    global _default
    with _default_lock:
        if _default is None:
            from .mac import aes_cmac_serialization
            from .mac.aes_cmac import AesCmacKey

            reg = SerializationRegistry()
            reg.register_serializer(AesCmacKey, aes_cmac_serialization.serialize_key)
            reg.register_parser(aes_cmac_serialization.TYPE_URL, aes_cmac_serialization.parse_key)
            _default = reg
        return _default
