"""
TLS 1.3 key share (RFC 8446 §4.2.8).

Единое пространство групп с 16-битными wire ID:

    secp256r1 → 23, secp384r1 → 24, secp521r1 → 25, x25519 → 29, x448 → 30

Диспетчеризация:
    - x25519 / x448 → modern-curve путь (X25519Exchange / X448Exchange)
    - secp* → EC путь (X9.62 uncompressed point)

Общий секрет — сырой результат обмена. В TLS 1.3 он подаётся в
HKDF-Extract key schedule, поэтому хеш здесь не применяется.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from src.tls_kex.algorithms import ec_points
from src.tls_kex.algorithms.base import _KeyExchangeBase, _ensure_bytes
from src.tls_kex.algorithms.modern_curve import (
    X25519_KEY_SIZE,
    X448_KEY_SIZE,
    X25519Exchange,
    X448Exchange,
)
from src.tls_kex.config import DEFAULT_CURVE, KeyPairOptions, SecretOptions
from src.tls_kex.core.exceptions import (
    InvalidCurveError,
    InvalidKeyError,
    InvalidParameterError,
)
from src.tls_kex.core.models import GroupParameter, KeyPair
from src.tls_kex.core.protocols import KeyPairOptionsLike, SecretOptionsLike
from src.tls_kex.core.registry import GroupRegistry
from src.tls_kex.wire import encode_key_share_entry

logger = logging.getLogger(__name__)

# X9.62 uncompressed point: 0x04 || X || Y
_UNCOMPRESSED_POINT_TAG = 0x04
_POINT_SIZES: Dict[int, str] = {
    65: "secp256r1",
    97: "secp384r1",
    133: "secp521r1",
}


def _group_of_key_share(key_share: bytes) -> Optional[str]:
    """
    Группа по форме key share или None, если форма не распознана.

    Нераспознанный share отклоняется позже, при декодировании.
    """
    if len(key_share) == X25519_KEY_SIZE:
        return "x25519"
    if len(key_share) == X448_KEY_SIZE:
        return "x448"
    if key_share and key_share[0] == _UNCOMPRESSED_POINT_TAG:
        return _POINT_SIZES.get(len(key_share))
    return None


class TLS13KeyExchange(_KeyExchangeBase):
    """
    Обмен ключами TLS 1.3 через key share.

    Два способа использования:

    1. Stateful сессия клиента (один экземпляр на handshake):

        >>> session = TLS13KeyExchange()
        >>> session.set_key_share_parameters("x25519", server_share)
        >>> client_share = session.generate_key_share()
        >>> secret = session.compute_shared_secret()
        >>> extension = session.format_key_share_extension()

    2. ExchangeContract (stateless):

        >>> kex = TLS13KeyExchange()
        >>> alice = kex.generate_keypair({"group": "secp384r1"})
        >>> bob = kex.generate_keypair({"group": "secp384r1"})
        >>> kex.compute_shared_secret(alice.private_key, bob.public_key) == \\
        ...     kex.compute_shared_secret(bob.private_key, alice.public_key)
        True

    Private keys: raw scalar для x25519, DER PKCS#8 для кривых NIST.
    """

    name = "tls13"

    def __init__(self, registry: Optional[GroupRegistry] = None) -> None:
        super().__init__(registry)
        self._modern: Dict[str, Union[X25519Exchange, X448Exchange]] = {
            "x25519": X25519Exchange(self._registry),
            "x448": X448Exchange(self._registry),
        }
        self._group = ""
        self._server_key_share = b""
        self._client_private_key = b""
        self._client_key_share = b""
        self._shared_secret = b""

    # ------------------------------------------------------------------
    # Group dispatch
    # ------------------------------------------------------------------

    def _resolve_group(self, group: str, message: str) -> GroupParameter:
        resolved = self._registry.resolve(group)
        if resolved is None or resolved.wire_id is None:
            raise InvalidCurveError(message, algorithm=self.name, requested=str(group))
        return resolved

    def _generate(self, group: GroupParameter) -> tuple[bytes, bytes]:
        modern = self._modern.get(group.identifier)
        if modern is not None:
            key_pair = modern.generate_keypair()
            return key_pair.private_key, key_pair.public_key
        return ec_points.generate_point_key(group.identifier, algorithm=self.name)

    def _combine(self, group: GroupParameter, private_key: bytes, peer_share: bytes) -> bytes:
        modern = self._modern.get(group.identifier)
        if modern is not None:
            return modern.compute_shared_secret(private_key, peer_share)
        return ec_points.derive_from_point(
            group.identifier, private_key, peer_share, algorithm=self.name
        )

    # ------------------------------------------------------------------
    # Session API
    # ------------------------------------------------------------------

    def set_key_share_parameters(self, group: str, server_key_share: bytes) -> None:
        """
        Задать группу и key share сервера.

        Raises:
            InvalidCurveError: Группа не поддерживается в TLS 1.3
            TypeError: Если server_key_share не является bytes
        """
        resolved = self._resolve_group(group, f"Unsupported key share group: {group}")
        _ensure_bytes(server_key_share, "server_key_share")

        self._group = resolved.identifier
        self._server_key_share = server_key_share

    def get_group(self) -> str:
        return self._group

    def get_server_key_share(self) -> bytes:
        return self._server_key_share

    def generate_key_share(self) -> bytes:
        """
        Сгенерировать key share клиента для выбранной группы.

        Raises:
            InvalidParameterError: Группа не задана
            UnsupportedOperationError: Группа x448
            KeyGenerationError: Провайдер не смог создать ключ
        """
        if not self._group:
            raise InvalidParameterError("Key share group not set", algorithm=self.name)

        group = self._registry.require(self._group, algorithm=self.name)
        self._client_private_key, self._client_key_share = self._generate(group)
        return self._client_key_share

    def compute_shared_secret(
        self,
        private_key: Optional[bytes] = None,
        peer_public_key: Optional[bytes] = None,
        options: SecretOptionsLike = None,
    ) -> bytes:
        """
        Вычислить общий секрет.

        Без аргументов работает как шаг сессии: комбинирует сгенерированный
        key share клиента с key share сервера и сохраняет результат.
        С аргументами (private_key, peer_public_key) работает как
        stateless ExchangeContract.

        Raises:
            InvalidParameterError: Нет клиентского ключа или key share сервера
            InvalidKeyError: Key share не декодируется
            KeyExchangeFailedError: Провайдер отклонил комбинацию
        """
        if private_key is not None or peer_public_key is not None:
            return self._compute_stateless(private_key, peer_public_key, options)

        if not self._client_private_key or not self._server_key_share:
            raise InvalidParameterError(
                "Missing parameters for computing shared secret", algorithm=self.name
            )

        group = self._registry.require(self._group, algorithm=self.name)
        self._shared_secret = self._combine(
            group, self._client_private_key, self._server_key_share
        )
        self._logger.debug(
            f"Computed {len(self._shared_secret)}B shared secret ({self._group})"
        )
        return self._shared_secret

    def get_pre_master_secret(self) -> bytes:
        """Общий секрет TLS 1.3 или b"" если он ещё не вычислен."""
        return self._shared_secret

    def get_client_key_share(self) -> bytes:
        return self._client_key_share

    def format_key_share_extension(self) -> bytes:
        """
        Закодировать KeyShareEntry клиента: [group: u16][length: u16][share].

        Raises:
            InvalidParameterError: Key share клиента не сгенерирован
        """
        if not self._client_key_share:
            raise InvalidParameterError(
                "Client key share not generated", algorithm=self.name
            )
        return encode_key_share_entry(
            self.get_group_id(self._group, self._registry), self._client_key_share
        )

    @staticmethod
    def get_group_id(group: str, registry: Optional[GroupRegistry] = None) -> int:
        """
        16-битный NamedGroup ID группы.

        Args:
            group: Имя группы или alias
            registry: Реестр групп (по умолчанию process-wide экземпляр)

        Raises:
            InvalidCurveError: Группа неизвестна или не имеет wire ID
        """
        if registry is None:
            registry = GroupRegistry.get_instance()
        resolved = registry.resolve(group)
        if resolved is None or resolved.wire_id is None:
            raise InvalidCurveError(
                f"Unknown group: {group}", algorithm="tls13", requested=str(group)
            )
        return resolved.wire_id

    # ------------------------------------------------------------------
    # ExchangeContract
    # ------------------------------------------------------------------

    def generate_keypair(self, options: KeyPairOptionsLike = None) -> KeyPair:
        """
        Сгенерировать пару (private, key share) для группы TLS 1.3.

        Группа берётся из options["group"], затем options["curve"],
        по умолчанию DEFAULT_CURVE.

        Raises:
            InvalidParameterError: Неизвестный ключ в options
            InvalidCurveError: Группа не поддерживается в TLS 1.3
            UnsupportedOperationError: Группа x448
        """
        opts = KeyPairOptions.from_mapping(options)
        requested = opts.group or opts.curve or DEFAULT_CURVE
        group = self._resolve_group(requested, f"Unsupported key share group: {requested}")

        private_key, key_share = self._generate(group)
        return KeyPair(
            private_key=private_key,
            public_key=key_share,
            group=group,
            metadata={"group": group.identifier, "wire_id": group.wire_id},
        )

    def _compute_stateless(
        self,
        private_key: Optional[bytes],
        peer_public_key: Optional[bytes],
        options: SecretOptionsLike,
    ) -> bytes:
        if private_key is not None:
            _ensure_bytes(private_key, "private_key")
        if peer_public_key is not None:
            _ensure_bytes(peer_public_key, "peer_public_key")
        if private_key is None or peer_public_key is None:
            raise InvalidParameterError(
                "Missing parameters for computing shared secret", algorithm=self.name
            )
        SecretOptions.from_mapping(options)

        local = self._group_of_private_key(private_key)
        peer = _group_of_key_share(peer_public_key)
        if peer is not None and peer != local:
            raise InvalidCurveError(
                f"Key share group mismatch: private uses {local}, public uses {peer}",
                algorithm=self.name,
                expected=local,
                actual=peer,
            )

        group = self._registry.require(local, algorithm=self.name)
        return self._combine(group, private_key, peer_public_key)

    def _group_of_private_key(self, private_key: bytes) -> str:
        if len(private_key) == X25519_KEY_SIZE:
            return "x25519"
        if len(private_key) == X448_KEY_SIZE:
            return "x448"

        try:
            key = serialization.load_der_private_key(private_key, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise InvalidKeyError(
                "Failed to load key share private key", algorithm=self.name
            ) from exc
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise InvalidKeyError(
                "Key share private key must be an EC key", algorithm=self.name
            )
        return key.curve.name

    def __repr__(self) -> str:
        return f"TLS13KeyExchange(group={self._group!r})"


__all__ = [
    "TLS13KeyExchange",
]
