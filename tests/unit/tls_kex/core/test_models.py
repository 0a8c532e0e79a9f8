"""
Unit-тесты моделей данных: GroupKind, GroupParameter, KeyPair.
"""

import dataclasses

import pytest

from src.tls_kex.core.models import GroupKind, GroupParameter, KeyPair


def _x25519_param(**overrides: object) -> GroupParameter:
    values: dict = {
        "identifier": "x25519",
        "kind": GroupKind.MODERN_CURVE,
        "bits": 255,
        "curve_name": "X25519",
        "key_size": 32,
        "wire_id": 29,
    }
    values.update(overrides)
    return GroupParameter(**values)


# ==============================================================================
# GROUP KIND
# ==============================================================================


class TestGroupKind:
    def test_values_are_strings(self) -> None:
        assert GroupKind.FINITE_FIELD == "finite_field"
        assert GroupKind("elliptic_curve") is GroupKind.ELLIPTIC_CURVE

    @pytest.mark.parametrize("kind", list(GroupKind))
    def test_label_defined(self, kind: GroupKind) -> None:
        assert kind.label()


# ==============================================================================
# GROUP PARAMETER
# ==============================================================================


class TestGroupParameter:
    """Валидация и свойства GroupParameter."""

    def test_modern_curve(self) -> None:
        param = _x25519_param()

        assert param.is_tls13 is True
        assert param.is_modern_curve is True

    def test_finite_field_without_wire_id(self) -> None:
        param = GroupParameter(
            identifier="toy",
            kind=GroupKind.FINITE_FIELD,
            prime_hex="17",
            generator=5,
            bits=5,
        )

        assert param.is_tls13 is False
        assert param.is_modern_curve is False

    def test_prime_hidden_from_repr(self) -> None:
        param = GroupParameter(
            identifier="toy", kind=GroupKind.FINITE_FIELD, prime_hex="ABCDEF", generator=2
        )
        assert "ABCDEF" not in repr(param)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"identifier": ""},
            {"identifier": "   "},
            {"curve_name": None},
            {"key_size": 0},
            {"key_size": None},
            {"wire_id": -1},
            {"wire_id": 0x10000},
        ],
    )
    def test_invalid_curve_parameters(self, overrides: dict) -> None:
        with pytest.raises(ValueError):
            _x25519_param(**overrides)

    @pytest.mark.parametrize(
        "prime_hex, generator",
        [(None, 2), ("", 2), ("17", None), ("17", 1)],
    )
    def test_invalid_finite_field_parameters(self, prime_hex: object, generator: object) -> None:
        with pytest.raises(ValueError):
            GroupParameter(
                identifier="toy",
                kind=GroupKind.FINITE_FIELD,
                prime_hex=prime_hex,  # type: ignore[arg-type]
                generator=generator,  # type: ignore[arg-type]
            )

    def test_frozen(self) -> None:
        param = _x25519_param()
        with pytest.raises(dataclasses.FrozenInstanceError):
            param.bits = 1  # type: ignore[misc]

    def test_to_dict(self) -> None:
        data = _x25519_param().to_dict()

        assert data["identifier"] == "x25519"
        assert data["kind"] == "modern_curve"
        assert data["wire_id"] == 29
        assert "prime_hex" not in data


# ==============================================================================
# KEY PAIR
# ==============================================================================


class TestKeyPair:
    """Immutable пара ключей."""

    def test_basic(self) -> None:
        group = _x25519_param()
        pair = KeyPair(
            private_key=b"\x01" * 32,
            public_key=b"\x02" * 32,
            group=group,
            metadata={"bits": 255},
        )

        assert pair.group_name == "x25519"
        assert pair.bits == 255
        assert pair.metadata["bits"] == 255

    def test_private_key_hidden_from_repr(self) -> None:
        pair = KeyPair(private_key=b"secret-material", public_key=b"pub")

        assert "secret-material" not in repr(pair)
        assert "private_key=" not in repr(pair)

    def test_defaults(self) -> None:
        pair = KeyPair(private_key=b"a", public_key=b"b")

        assert pair.group is None
        assert pair.group_name is None
        assert pair.bits is None
        assert dict(pair.metadata) == {}

    def test_bits_falls_back_to_group(self) -> None:
        pair = KeyPair(private_key=b"a", public_key=b"b", group=_x25519_param())
        assert pair.bits == 255

    def test_metadata_read_only(self) -> None:
        pair = KeyPair(private_key=b"a", public_key=b"b", metadata={"group": "ffdhe2048"})

        with pytest.raises(TypeError):
            pair.metadata["group"] = "ffdhe4096"  # type: ignore[index]

    def test_metadata_copied(self) -> None:
        source = {"group": "ffdhe2048"}
        pair = KeyPair(private_key=b"a", public_key=b"b", metadata=source)

        source["group"] = "changed"

        assert pair.metadata["group"] == "ffdhe2048"

    def test_frozen(self) -> None:
        pair = KeyPair(private_key=b"a", public_key=b"b")
        with pytest.raises(dataclasses.FrozenInstanceError):
            pair.public_key = b"c"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "private_key, public_key",
        [("a", b"b"), (b"a", "b"), (bytearray(b"a"), b"b"), (None, b"b")],
    )
    def test_rejects_non_bytes(self, private_key: object, public_key: object) -> None:
        with pytest.raises(TypeError):
            KeyPair(private_key=private_key, public_key=public_key)  # type: ignore[arg-type]
