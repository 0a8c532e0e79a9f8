"""
Unit-тесты SecretDerivation (пост-обработка сырого общего значения).
"""

import hashlib
import sys

import pytest

from src.tls_kex.algorithms.derivation import (
    SUPPORTED_HASHES,
    SecretDerivation,
)
from src.tls_kex.core.exceptions import (
    InvalidParameterError,
    UnsupportedOperationError,
)

try:
    import blake3  # noqa: F401

    BLAKE3_AVAILABLE = True
except ImportError:
    BLAKE3_AVAILABLE = False


RAW = b"raw shared value from key agreement"


# ==============================================================================
# CONSTRUCTION
# ==============================================================================


class TestConstruction:
    def test_default_is_sha256(self) -> None:
        assert SecretDerivation().hash_name == "sha256"

    def test_name_normalized(self) -> None:
        assert SecretDerivation("  SHA384 ").hash_name == "sha384"

    @pytest.mark.parametrize("name", ["md5", "sha1", "", "sha3_256", None])
    def test_unsupported_hash(self, name: object) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            SecretDerivation(name)  # type: ignore[arg-type]

        assert exc_info.value.parameter == "hash"
        assert "Available:" in exc_info.value.message

    def test_from_options(self) -> None:
        assert SecretDerivation.from_options({"hash": "sha512"}).hash_name == "sha512"
        assert SecretDerivation.from_options(None).hash_name == "sha256"

    def test_from_options_rejects_unknown_key(self) -> None:
        with pytest.raises(InvalidParameterError):
            SecretDerivation.from_options({"salt": "x"})

    def test_supported_hashes(self) -> None:
        assert SecretDerivation.supported_hashes() == list(SUPPORTED_HASHES)
        assert "blake3" in SUPPORTED_HASHES

    def test_repr(self) -> None:
        assert repr(SecretDerivation("blake2s")) == "SecretDerivation(hash_name='blake2s')"


# ==============================================================================
# DERIVE
# ==============================================================================


class TestDerive:
    @pytest.mark.parametrize(
        "name, hashlib_name, size",
        [
            ("sha256", "sha256", 32),
            ("sha384", "sha384", 48),
            ("sha512", "sha512", 64),
            ("sha3-256", "sha3_256", 32),
            ("sha3-512", "sha3_512", 64),
            ("blake2b", "blake2b", 64),
            ("blake2s", "blake2s", 32),
        ],
    )
    def test_matches_hashlib(self, name: str, hashlib_name: str, size: int) -> None:
        derivation = SecretDerivation(name)
        secret = derivation.derive(RAW)

        assert secret == hashlib.new(hashlib_name, RAW).digest()
        assert len(secret) == size
        assert derivation.digest_size == size

    def test_deterministic(self) -> None:
        derivation = SecretDerivation()
        assert derivation.derive(RAW) == derivation.derive(RAW)

    def test_length_independent_of_input(self) -> None:
        derivation = SecretDerivation("sha384")

        assert len(derivation.derive(b"\x01")) == 48
        assert len(derivation.derive(b"\x01" * 1024)) == 48

    def test_empty_input_rejected(self) -> None:
        with pytest.raises(InvalidParameterError, match="empty input"):
            SecretDerivation().derive(b"")

    @pytest.mark.parametrize("raw", ["text", bytearray(b"abc"), None, 123])
    def test_non_bytes_rejected(self, raw: object) -> None:
        with pytest.raises(TypeError):
            SecretDerivation().derive(raw)  # type: ignore[arg-type]


@pytest.mark.skipif(not BLAKE3_AVAILABLE, reason="blake3 not installed")
class TestBlake3:
    def test_matches_reference(self) -> None:
        import blake3

        derivation = SecretDerivation("blake3")

        assert derivation.derive(RAW) == blake3.blake3(RAW).digest()
        assert derivation.digest_size == 32


def test_blake3_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Без пакета blake3 → UnsupportedOperationError."""
    monkeypatch.setitem(sys.modules, "blake3", None)

    with pytest.raises(UnsupportedOperationError) as exc_info:
        SecretDerivation("blake3").derive(RAW)

    assert exc_info.value.reason == "blake3 library not installed"
