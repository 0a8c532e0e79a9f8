"""
Unit-тесты типизированных опций обмена ключами.
"""

import pytest

from src.tls_kex.config import (
    DEFAULT_CURVE,
    DEFAULT_DH_GROUP,
    DEFAULT_HASH,
    KeyPairOptions,
    SecretOptions,
)
from src.tls_kex.core.exceptions import InvalidParameterError


def test_defaults() -> None:
    assert DEFAULT_DH_GROUP == "ffdhe2048"
    assert DEFAULT_CURVE == "secp256r1"
    assert DEFAULT_HASH == "sha256"


class TestKeyPairOptions:
    def test_none_gives_defaults(self) -> None:
        opts = KeyPairOptions.from_mapping(None)

        assert opts.group is None
        assert opts.curve is None
        assert opts.group_or_default == "ffdhe2048"
        assert opts.curve_or_default == "secp256r1"

    def test_from_mapping(self) -> None:
        opts = KeyPairOptions.from_mapping({"group": "ffdhe3072", "curve": "secp384r1"})

        assert opts.group_or_default == "ffdhe3072"
        assert opts.curve_or_default == "secp384r1"

    def test_instance_passthrough(self) -> None:
        opts = KeyPairOptions(curve="secp521r1")
        assert KeyPairOptions.from_mapping(opts) is opts

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            KeyPairOptions.from_mapping({"group": "ffdhe2048", "size": 2048, "bits": 1})

        assert exc_info.value.message == "Unrecognized key pair option(s): bits, size"
        assert exc_info.value.context["allowed"] == "curve, group"

    @pytest.mark.parametrize("value", ["", "   ", 2048, b"ffdhe2048"])
    def test_invalid_value(self, value: object) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            KeyPairOptions.from_mapping({"group": value})

        assert exc_info.value.parameter == "group"

    @pytest.mark.parametrize("options", [["group"], "ffdhe2048", 42])
    def test_not_a_mapping(self, options: object) -> None:
        with pytest.raises(InvalidParameterError, match="must be a mapping"):
            KeyPairOptions.from_mapping(options)  # type: ignore[arg-type]


class TestSecretOptions:
    def test_default_hash(self) -> None:
        assert SecretOptions.from_mapping(None).hash_or_default == "sha256"
        assert SecretOptions.from_mapping({}).hash_or_default == "sha256"

    def test_explicit_hash(self) -> None:
        assert SecretOptions.from_mapping({"hash": "sha512"}).hash == "sha512"

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(InvalidParameterError, match="Unrecognized secret option"):
            SecretOptions.from_mapping({"kdf": "hkdf"})

    def test_empty_hash_rejected(self) -> None:
        with pytest.raises(InvalidParameterError):
            SecretOptions(hash="")

    def test_not_a_mapping(self) -> None:
        with pytest.raises(InvalidParameterError, match="must be a mapping"):
            SecretOptions.from_mapping(("hash", "sha256"))  # type: ignore[arg-type]
