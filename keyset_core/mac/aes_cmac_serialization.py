"""
keyset_core.mac.aes_cmac_serialization
--------------------------------------
Maps AesCmacKey <-> ProtoKeySerialization.

Payload format (canonical JSON, UTF-8):
    {"key_value": <base64 key bytes>, "tag_size": <int>, "version": 0}

The key size is implied by the decoded key length; the variant travels as the
envelope's output prefix type.
"""

from __future__ import annotations
import json

from ..errors import InvalidParameter, KeysetError
from ..logger import get_logger
from ..serialization import ProtoKeySerialization
from ..types import KeyMaterialType
from ..utils import b64d, b64e, canonical_json
from .aes_cmac import AesCmacKey, AesCmacParameters

TYPE_URL = "type.googleapis.com/google.crypto.tink.AesCmacKey"
KEY_VERSION = 0

log = get_logger("keyset.mac.aes_cmac")


def serialize_key(key: AesCmacKey) -> ProtoKeySerialization:
    payload = canonical_json({
        "version": KEY_VERSION,
        "tag_size": key.parameters.cryptographic_tag_size_bytes,
        "key_value": b64e(key.key_bytes),
    })
    serialization = ProtoKeySerialization.create(
        TYPE_URL,
        payload,
        KeyMaterialType.SYMMETRIC,
        key.parameters.variant,
        key.id_requirement,
    )
    log.debug(f"[AES-CMAC SERIALIZE] serialized key id={key.id_requirement}")
    return serialization


def _reject(reason: str) -> InvalidParameter:
    return InvalidParameter(f"cannot parse AES-CMAC key: {reason}")


def parse_key(serialization: ProtoKeySerialization) -> AesCmacKey:
    try:
        key = _parse(serialization)
    except KeysetError as e:
        log.warning(f"[AES-CMAC PARSE] rejected {serialization.type_url}: {e}")
        raise
    log.debug(f"[AES-CMAC PARSE] parsed key id={serialization.id_requirement}")
    return key


def _parse(serialization: ProtoKeySerialization) -> AesCmacKey:
    if serialization.type_url != TYPE_URL:
        raise _reject(f"wrong type URL {serialization.type_url!r}")
    if serialization.key_material_type is not KeyMaterialType.SYMMETRIC:
        raise _reject(f"wrong key material type {serialization.key_material_type}")

    try:
        payload = json.loads(serialization.value.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise _reject("payload is not valid JSON") from e
    if not isinstance(payload, dict):
        raise _reject("payload must be a JSON object")
    version = payload.get("version")
    if isinstance(version, bool) or not isinstance(version, int) or version != KEY_VERSION:
        raise _reject(f"unsupported key version {version!r}")
    if "tag_size" not in payload or "key_value" not in payload:
        raise _reject("payload is missing tag_size or key_value")

    key_bytes = b64d(payload["key_value"])
    parameters = (
        AesCmacParameters.builder()
        .set_key_size_bytes(len(key_bytes))
        .set_tag_size_bytes(payload["tag_size"])
        .set_variant(serialization.output_prefix_type)
        .build()
    )
    return AesCmacKey.create(parameters, key_bytes, serialization.id_requirement)
