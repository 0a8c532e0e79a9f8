"""
Unit-тесты X25519 и placeholder X448.

Включает официальный test vector RFC 7748 §6.1.
"""

import pytest
from cryptography.hazmat.primitives.asymmetric import x25519

from src.tls_kex.algorithms.modern_curve import (
    X448_UNSUPPORTED_MESSAGE,
    X25519Exchange,
    X448Exchange,
)
from src.tls_kex.core.exceptions import (
    InvalidKeyError,
    InvalidParameterError,
    KeyExchangeFailedError,
    UnsupportedOperationError,
)
from src.tls_kex.core.protocols import KeyExchangeProtocol


@pytest.fixture
def kex() -> X25519Exchange:
    return X25519Exchange()


# ==============================================================================
# X25519
# ==============================================================================


class TestX25519:
    def test_implements_protocol(self, kex: X25519Exchange) -> None:
        assert isinstance(kex, KeyExchangeProtocol)

    def test_key_sizes(self, kex: X25519Exchange) -> None:
        pair = kex.generate_keypair()

        assert len(pair.private_key) == 32
        assert len(pair.public_key) == 32
        assert pair.group_name == "x25519"
        assert pair.bits == 255

    def test_public_key_matches_provider(self, kex: X25519Exchange) -> None:
        pair = kex.generate_keypair()
        expected = (
            x25519.X25519PrivateKey.from_private_bytes(pair.private_key)
            .public_key()
            .public_bytes_raw()
        )
        assert pair.public_key == expected

    def test_symmetry(self, kex: X25519Exchange) -> None:
        alice, bob = kex.generate_keypair(), kex.generate_keypair()

        secret_a = kex.compute_shared_secret(alice.private_key, bob.public_key)
        secret_b = kex.compute_shared_secret(bob.private_key, alice.public_key)

        assert secret_a == secret_b
        assert len(secret_a) == 32

    def test_distinct_keys_and_secrets(self, kex: X25519Exchange) -> None:
        alice, carol, bob = kex.generate_keypair(), kex.generate_keypair(), kex.generate_keypair()

        assert alice.private_key != carol.private_key
        assert kex.compute_shared_secret(
            alice.private_key, bob.public_key
        ) != kex.compute_shared_secret(carol.private_key, bob.public_key)

    def test_rfc7748_vector(self, kex: X25519Exchange) -> None:
        """RFC 7748 Section 6.1: секрет возвращается без хеширования."""
        alice_private = bytes.fromhex(
            "77076d0a7318a57d3c16c17251b26645df4c2f87ebc0992ab177fba51db92c2a"
        )
        alice_public = bytes.fromhex(
            "8520f0098930a754748b7ddcb43ef75a0dbf3a0d26381af4eba4a98eaa9b4e6a"
        )
        bob_private = bytes.fromhex(
            "5dab087e624a8a4b79e17f8b83800ee66f3bb1292618b6fd1c2f8b27ff88e0eb"
        )
        bob_public = bytes.fromhex(
            "de9edb7d7b7dc1b4d35b61c2ece435373f8343c85b78674dadfc7e146f882b4f"
        )
        expected = bytes.fromhex(
            "4a5d9d5ba4ce2de1728e3bf480350f25e07e21c947d19e3376f09b3c1e161742"
        )

        assert kex.compute_shared_secret(alice_private, bob_public) == expected
        assert kex.compute_shared_secret(bob_private, alice_public) == expected

    def test_hash_option_ignored(self, kex: X25519Exchange) -> None:
        alice, bob = kex.generate_keypair(), kex.generate_keypair()

        plain = kex.compute_shared_secret(alice.private_key, bob.public_key)
        hashed = kex.compute_shared_secret(alice.private_key, bob.public_key, {"hash": "sha512"})

        assert plain == hashed

    def test_unknown_secret_option(self, kex: X25519Exchange) -> None:
        alice, bob = kex.generate_keypair(), kex.generate_keypair()
        with pytest.raises(InvalidParameterError):
            kex.compute_shared_secret(alice.private_key, bob.public_key, {"salt": "x"})

    def test_unknown_keypair_option(self, kex: X25519Exchange) -> None:
        with pytest.raises(InvalidParameterError):
            kex.generate_keypair({"seed": "x"})

    @pytest.mark.parametrize("size", [0, 31, 33, 56])
    def test_wrong_private_key_size(self, kex: X25519Exchange, size: int) -> None:
        with pytest.raises(InvalidKeyError) as exc_info:
            kex.compute_shared_secret(b"\x01" * size, b"\x09" + b"\x00" * 31)

        assert exc_info.value.expected_size == 32
        assert exc_info.value.actual_size == size
        assert exc_info.value.message == f"X25519 private_key must be 32 bytes, got {size} bytes"

    def test_wrong_public_key_size(self, kex: X25519Exchange) -> None:
        pair = kex.generate_keypair()
        with pytest.raises(InvalidKeyError, match="public_key must be 32 bytes"):
            kex.compute_shared_secret(pair.private_key, b"\x09" * 16)

    def test_low_order_point(self, kex: X25519Exchange) -> None:
        """Нулевая точка даёт нулевой секрет, провайдер его отклоняет."""
        pair = kex.generate_keypair()
        with pytest.raises(KeyExchangeFailedError):
            kex.compute_shared_secret(pair.private_key, b"\x00" * 32)

    def test_non_bytes(self, kex: X25519Exchange) -> None:
        with pytest.raises(TypeError):
            kex.compute_shared_secret(b"\x01" * 32, "peer")  # type: ignore[arg-type]


# ==============================================================================
# X448
# ==============================================================================


class TestX448Placeholder:
    """Обе операции детерминированно не поддерживаются."""

    def test_implements_protocol(self) -> None:
        assert isinstance(X448Exchange(), KeyExchangeProtocol)

    def test_generate_keypair_unsupported(self) -> None:
        with pytest.raises(UnsupportedOperationError) as exc_info:
            X448Exchange().generate_keypair()

        assert exc_info.value.message == X448_UNSUPPORTED_MESSAGE
        assert exc_info.value.algorithm == "x448"

    def test_compute_unsupported(self) -> None:
        with pytest.raises(UnsupportedOperationError, match="not supported yet"):
            X448Exchange().compute_shared_secret(b"\x01" * 56, b"\x02" * 56)

    def test_repeatable(self) -> None:
        kex = X448Exchange()
        messages = []
        for _ in range(3):
            with pytest.raises(UnsupportedOperationError) as exc_info:
                kex.generate_keypair()
            messages.append(str(exc_info.value))

        assert len(set(messages)) == 1
