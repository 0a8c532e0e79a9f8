"""
DHE — ephemeral finite-field Diffie-Hellman.

Группы: RFC 3526 MODP (2048/3072/4096 бит, g = 2), доступные под
именами ffdhe2048, ffdhe3072, ffdhe4096.

Policy:
    Неизвестная группа НЕ является ошибкой: generate_keypair() молча
    подставляет группу по умолчанию (DEFAULT_DH_GROUP) и сообщает
    фактически использованную группу в KeyPair.metadata.

Ключи:
    - private_key: PEM, PKCS#8
    - public_key: PEM, SubjectPublicKeyInfo

Общий секрет — сырой результат DH, захешированный SecretDerivation
(по умолчанию SHA-256, 32 байта).

Example:
    >>> kex = FiniteFieldExchange()
    >>> alice = kex.generate_keypair({"group": "ffdhe2048"})
    >>> bob = kex.generate_keypair({"group": "ffdhe2048"})
    >>> kex.compute_shared_secret(alice.private_key, bob.public_key) == \\
    ...     kex.compute_shared_secret(bob.private_key, alice.public_key)
    True
"""

from __future__ import annotations

import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dh

from src.tls_kex.algorithms.base import _KeyExchangeBase, _ensure_bytes
from src.tls_kex.algorithms.derivation import SecretDerivation
from src.tls_kex.config import DEFAULT_DH_GROUP, KeyPairOptions
from src.tls_kex.core.exceptions import (
    InvalidCurveError,
    InvalidKeyError,
    KeyExchangeFailedError,
    KeyGenerationError,
)
from src.tls_kex.core.models import GroupKind, GroupParameter, KeyPair
from src.tls_kex.core.protocols import KeyPairOptionsLike, SecretOptionsLike

logger = logging.getLogger(__name__)


class FiniteFieldExchange(_KeyExchangeBase):
    """
    Finite-field Diffie-Hellman (DHE).

    Stateless: один экземпляр безопасно использовать из нескольких потоков.
    """

    name = "dhe"

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def _resolve_group(self, requested: str) -> GroupParameter:
        group = self._registry.resolve(requested)
        if group is not None and group.kind is GroupKind.FINITE_FIELD:
            return group

        self._logger.info(
            f"Unknown DH group '{requested}', falling back to {DEFAULT_DH_GROUP}"
        )
        return self._registry.require(DEFAULT_DH_GROUP, algorithm=self.name)

    def _parameters(self, group: GroupParameter) -> dh.DHParameters:
        if group.generator is None:
            raise InvalidCurveError(
                f"{group.identifier} has no generator",
                algorithm=self.name,
                requested=group.identifier,
            )
        numbers = dh.DHParameterNumbers(
            self._registry.prime_int(group.identifier), group.generator
        )
        return numbers.parameters()

    def _group_label(self, numbers: dh.DHParameterNumbers) -> str:
        for identifier in self._registry.names(GroupKind.FINITE_FIELD):
            if self._registry.prime_int(identifier) == numbers.p:
                return identifier
        return f"{numbers.p.bit_length()}-bit group"

    # ------------------------------------------------------------------
    # ExchangeContract
    # ------------------------------------------------------------------

    def generate_keypair(self, options: KeyPairOptionsLike = None) -> KeyPair:
        """
        Сгенерировать DH пару ключей в выбранной группе.

        Args:
            options: {"group": "ffdhe3072"}; неизвестная группа → ffdhe2048

        Returns:
            KeyPair с metadata {"group": <фактическая группа>, "bits": <длина>}

        Raises:
            InvalidParameterError: Неизвестный ключ в options
            KeyGenerationError: Провайдер не смог создать или экспортировать ключ
        """
        opts = KeyPairOptions.from_mapping(options)
        group = self._resolve_group(opts.group_or_default)
        parameters = self._parameters(group)

        try:
            private_key_obj = parameters.generate_private_key()

            private_bytes = private_key_obj.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
            public_bytes = private_key_obj.public_key().public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )

        except Exception as exc:
            self._logger.error(
                f"DH key generation failed for {group.identifier}: {exc}", exc_info=True
            )
            raise KeyGenerationError(
                f"Failed to generate DH key pair for {group.identifier}",
                algorithm=self.name,
            ) from exc

        self._logger.debug(
            f"Generated DH keypair ({group.identifier}): "
            f"private={len(private_bytes)}B, public={len(public_bytes)}B"
        )

        return KeyPair(
            private_key=private_bytes,
            public_key=public_bytes,
            group=group,
            metadata={"group": group.identifier, "bits": group.bits},
        )

    def compute_shared_secret(
        self,
        private_key: bytes,
        peer_public_key: bytes,
        options: SecretOptionsLike = None,
    ) -> bytes:
        """
        Вычислить общий секрет DH и захешировать его.

        Публичное значение собеседника (y) извлекается из его ключа и
        комбинируется в группе локального приватного ключа. Группы обоих
        ключей должны совпадать.

        Raises:
            TypeError: Если ключи не являются bytes
            InvalidParameterError: Неизвестный хеш или ключ в options
            InvalidKeyError: Ключ не загружается или не является DH ключом
            InvalidCurveError: Ключи принадлежат разным группам
            KeyExchangeFailedError: Провайдер отклонил комбинацию
        """
        _ensure_bytes(private_key, "private_key")
        _ensure_bytes(peer_public_key, "peer_public_key")
        derivation = SecretDerivation.from_options(options)

        private_key_obj = self._load_private_key(private_key)
        peer_key_obj = self._load_public_key(peer_public_key)

        local_numbers = private_key_obj.parameters().parameter_numbers()
        peer_numbers = peer_key_obj.parameters().parameter_numbers()
        if (local_numbers.p, local_numbers.g) != (peer_numbers.p, peer_numbers.g):
            expected = self._group_label(local_numbers)
            actual = self._group_label(peer_numbers)
            raise InvalidCurveError(
                f"DH group mismatch: private uses {expected}, public uses {actual}",
                algorithm=self.name,
                expected=expected,
                actual=actual,
            )

        try:
            peer_value = peer_key_obj.public_numbers().y
            peer = dh.DHPublicNumbers(peer_value, local_numbers).public_key()
            raw = private_key_obj.exchange(peer)

        except Exception as exc:
            self._logger.error(f"DH key exchange failed: {exc}", exc_info=True)
            raise KeyExchangeFailedError(
                "DH key exchange failed", algorithm=self.name
            ) from exc

        self._logger.debug(f"DH: combined {len(raw)}B raw value")
        return derivation.derive(raw)

    # ------------------------------------------------------------------
    # Key loading
    # ------------------------------------------------------------------

    def _load_private_key(self, data: bytes) -> dh.DHPrivateKey:
        try:
            key = serialization.load_pem_private_key(data, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(
                "Failed to load DH private key", algorithm=self.name
            ) from exc

        if not isinstance(key, dh.DHPrivateKey):
            raise InvalidKeyError(
                f"Private key must be a DH private key, got {type(key).__name__}",
                algorithm=self.name,
            )
        return key

    def _load_public_key(self, data: bytes) -> dh.DHPublicKey:
        try:
            key = serialization.load_pem_public_key(data)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(
                "Failed to load DH public key", algorithm=self.name
            ) from exc

        if not isinstance(key, dh.DHPublicKey):
            raise InvalidKeyError(
                f"Public key must be a DH public key, got {type(key).__name__}",
                algorithm=self.name,
            )
        return key


__all__ = [
    "FiniteFieldExchange",
]
