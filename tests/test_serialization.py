import json
import pytest
from keyset_core import (
    InvalidParameter,
    InvariantViolation,
    KeysetError,
    KeyMaterialType,
    OutputPrefixType,
    ProtoKeySerialization,
    UnknownVariant,
)

TYPE_URL = "myTypeUrl"
VALUE = bytes([10, 11, 12])


def test_creation_and_values_basic():
    s = ProtoKeySerialization.create(
        TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.RAW, None
    )
    assert s.value == VALUE
    assert s.key_material_type is KeyMaterialType.SYMMETRIC
    assert s.output_prefix_type is OutputPrefixType.RAW
    assert s.type_url == TYPE_URL
    assert s.id_requirement is None
    assert not s.has_id_requirement()
    assert s.object_identifier == "myTypeUrl".encode("utf-8")


def test_id_requirement_present():
    s = ProtoKeySerialization.create(
        TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 123
    )
    assert s.output_prefix_type is OutputPrefixType.TINK
    assert s.id_requirement == 123


def test_id_requirement_must_match_output_prefix_type():
    create = ProtoKeySerialization.create
    create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.RAW, None)
    create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 123)
    create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.CRUNCHY, 123)
    create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.LEGACY, 123)

    with pytest.raises(InvariantViolation):
        create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.RAW, 123)
    for kind in (OutputPrefixType.TINK, OutputPrefixType.CRUNCHY, OutputPrefixType.LEGACY):
        with pytest.raises(InvariantViolation):
            create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, kind, None)


def test_invariant_message_names_offending_pair():
    with pytest.raises(InvariantViolation) as exc:
        ProtoKeySerialization.create(
            TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, None
        )
    assert "TINK" in str(exc.value)
    assert "id_present=False" in str(exc.value)


@pytest.mark.parametrize("bad_url", ["", None, 42])
def test_type_url_must_be_non_empty_string(bad_url):
    with pytest.raises(InvalidParameter):
        ProtoKeySerialization.create(
            bad_url, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.RAW, None
        )


def test_value_must_be_bytes():
    with pytest.raises(InvalidParameter):
        ProtoKeySerialization.create(
            TYPE_URL, "abc", KeyMaterialType.SYMMETRIC, OutputPrefixType.RAW, None
        )


def test_enum_fields_must_be_members():
    with pytest.raises(UnknownVariant):
        ProtoKeySerialization.create(TYPE_URL, VALUE, "SYMMETRIC", OutputPrefixType.RAW, None)
    with pytest.raises(UnknownVariant):
        ProtoKeySerialization.create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, "RAW", None)


def test_id_requirement_must_fit_uint32():
    with pytest.raises(InvalidParameter):
        ProtoKeySerialization.create(
            TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 2**32
        )


def test_payload_is_frozen_copy():
    buf = bytearray(VALUE)
    s = ProtoKeySerialization.create(
        TYPE_URL, buf, KeyMaterialType.SYMMETRIC, OutputPrefixType.RAW, None
    )
    buf[0] = 99
    assert s.value == VALUE
    assert isinstance(s.value, bytes)
    with pytest.raises(AttributeError):
        s.value = b"other"


def test_object_identifier_includes_id_without_collisions():
    def oid(url, kind, id_):
        return ProtoKeySerialization.create(
            url, VALUE, KeyMaterialType.SYMMETRIC, kind, id_
        ).object_identifier

    a = oid(TYPE_URL, OutputPrefixType.TINK, 1)
    assert a == oid(TYPE_URL, OutputPrefixType.TINK, 1)
    assert a.startswith(TYPE_URL.encode("utf-8"))
    idents = {
        oid(TYPE_URL, OutputPrefixType.RAW, None),
        a,
        oid(TYPE_URL, OutputPrefixType.TINK, 2),
        oid(TYPE_URL, OutputPrefixType.TINK, 256),
        oid(TYPE_URL + "x", OutputPrefixType.TINK, 1),
        oid(TYPE_URL + "ÿ", OutputPrefixType.RAW, None),
    }
    assert len(idents) == 6


def test_equality_over_all_fields():
    args = (TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 5)
    a = ProtoKeySerialization.create(*args)
    b = ProtoKeySerialization.create(*args)
    assert a == b
    assert hash(a) == hash(b)
    assert a != ProtoKeySerialization.create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 6)
    assert a != ProtoKeySerialization.create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.LEGACY, 5)
    assert a != ProtoKeySerialization.create(TYPE_URL, VALUE, KeyMaterialType.REMOTE, OutputPrefixType.TINK, 5)
    assert a != ProtoKeySerialization.create(TYPE_URL, b"\x00", KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 5)
    assert a != ProtoKeySerialization.create("other", VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 5)


def test_try_create():
    ok = ProtoKeySerialization.try_create(
        TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 123
    )
    assert ok.ok and ok.unwrap().id_requirement == 123

    err = ProtoKeySerialization.try_create(
        TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, None
    )
    assert not err.ok
    assert isinstance(err.unwrap_err(), InvariantViolation)


@pytest.mark.parametrize("kind,id_", [
    (OutputPrefixType.RAW, None),
    (OutputPrefixType.TINK, 0),
    (OutputPrefixType.LEGACY, 2**32 - 1),
])
def test_dict_and_json_roundtrip(kind, id_):
    s = ProtoKeySerialization.create(TYPE_URL, VALUE, KeyMaterialType.ASYMMETRIC_PRIVATE, kind, id_)
    d = s.to_dict()
    assert d["value"] == "CgsM"
    assert d["output_prefix_type"] == kind.name
    assert ProtoKeySerialization.from_dict(d) == s
    assert ProtoKeySerialization.from_json(s.to_json()) == s


def test_from_dict_rejects_broken_records():
    d = ProtoKeySerialization.create(
        TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 9
    ).to_dict()

    tampered = dict(d, id_requirement=None)
    with pytest.raises(InvariantViolation):
        ProtoKeySerialization.from_dict(tampered)

    missing = {k: v for k, v in d.items() if k != "type_url"}
    with pytest.raises(InvalidParameter):
        ProtoKeySerialization.from_dict(missing)

    with pytest.raises(InvalidParameter):
        ProtoKeySerialization.from_dict(dict(d, value="not base64!"))

    with pytest.raises(UnknownVariant):
        ProtoKeySerialization.from_dict(dict(d, output_prefix_type="SOMETHING"))

    with pytest.raises(InvalidParameter):
        ProtoKeySerialization.from_json("[1, 2]")
    with pytest.raises(InvalidParameter):
        ProtoKeySerialization.from_json("{not json")


def test_to_json_is_canonical():
    s = ProtoKeySerialization.create(TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.RAW, None)
    assert list(json.loads(s.to_json()).keys()) == sorted(s.to_dict().keys())
    assert " " not in s.to_json()


def test_rejected_records_log_warning(caplog):
    d = ProtoKeySerialization.create(
        TYPE_URL, VALUE, KeyMaterialType.SYMMETRIC, OutputPrefixType.TINK, 9
    ).to_dict()
    for bad in (dict(d, id_requirement=None), dict(d, value="!!"), dict(d, key_material_type="X")):
        caplog.clear()
        with pytest.raises(KeysetError):
            ProtoKeySerialization.from_dict(bad)
        assert [r.levelname for r in caplog.records if r.name == "keyset.serialization"] == ["WARNING"]
