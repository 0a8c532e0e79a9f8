# -*- coding: utf-8 -*-
"""
RU: Типизированные опции операций обмена ключами и значения по умолчанию.
EN: Typed per-operation options for key exchange with documented defaults.

Policy: unrecognized option keys are rejected with InvalidParameterError.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Final, Mapping, Optional, Union

from src.tls_kex.core.exceptions import InvalidParameterError

# Finite-field group used when the requested one is unknown
DEFAULT_DH_GROUP: Final[str] = "ffdhe2048"

DEFAULT_CURVE: Final[str] = "secp256r1"

# Hash used to post-process raw DHE/ECDHE output
DEFAULT_HASH: Final[str] = "sha256"


def _check_value(key: str, value: Any) -> None:
    if value is None:
        return
    if not isinstance(value, str) or not value.strip():
        raise InvalidParameterError(
            f"Option '{key}' must be a non-empty string",
            parameter=key,
        )


def _unknown_keys(mapping: Mapping[str, Any], allowed: frozenset[str]) -> list[str]:
    return sorted(str(key) for key in mapping if key not in allowed)


@dataclass(frozen=True)
class KeyPairOptions:
    """
    Options for generate_keypair().

    Attributes:
        group: Finite-field group name (DHE). None means DEFAULT_DH_GROUP.
        curve: Elliptic curve name (ECDHE). None means DEFAULT_CURVE.

    Examples:
        >>> KeyPairOptions.from_mapping({"group": "ffdhe3072"}).group
        'ffdhe3072'
        >>> KeyPairOptions.from_mapping({"size": 2048})
        Traceback (most recent call last):
        ...
        InvalidParameterError: Unrecognized key pair option(s): size ...
    """

    group: Optional[str] = None
    curve: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate parameters."""
        _check_value("group", self.group)
        _check_value("curve", self.curve)

    @property
    def group_or_default(self) -> str:
        return self.group if self.group is not None else DEFAULT_DH_GROUP

    @property
    def curve_or_default(self) -> str:
        return self.curve if self.curve is not None else DEFAULT_CURVE

    @classmethod
    def from_mapping(
        cls, options: Union["KeyPairOptions", Mapping[str, Any], None]
    ) -> "KeyPairOptions":
        """
        Build options from a loose mapping.

        Args:
            options: None, a mapping with keys {"group", "curve"}, or an instance.

        Raises:
            InvalidParameterError: On unknown keys, wrong types or empty values.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise InvalidParameterError(
                f"Key pair options must be a mapping, got {type(options).__name__}"
            )

        unknown = _unknown_keys(options, _KEYPAIR_KEYS)
        if unknown:
            raise InvalidParameterError(
                f"Unrecognized key pair option(s): {', '.join(unknown)}",
                context={"allowed": ", ".join(sorted(_KEYPAIR_KEYS))},
            )
        return cls(group=options.get("group"), curve=options.get("curve"))


@dataclass(frozen=True)
class SecretOptions:
    """
    Options for compute_shared_secret().

    Attributes:
        hash: Derivation hash name (see SecretDerivation). None means DEFAULT_HASH.
    """

    hash: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate parameters."""
        _check_value("hash", self.hash)

    @property
    def hash_or_default(self) -> str:
        return self.hash if self.hash is not None else DEFAULT_HASH

    @classmethod
    def from_mapping(
        cls, options: Union["SecretOptions", Mapping[str, Any], None]
    ) -> "SecretOptions":
        """
        Build options from a loose mapping.

        Raises:
            InvalidParameterError: On unknown keys, wrong types or empty values.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise InvalidParameterError(
                f"Secret options must be a mapping, got {type(options).__name__}"
            )

        unknown = _unknown_keys(options, _SECRET_KEYS)
        if unknown:
            raise InvalidParameterError(
                f"Unrecognized secret option(s): {', '.join(unknown)}",
                context={"allowed": ", ".join(sorted(_SECRET_KEYS))},
            )
        return cls(hash=options.get("hash"))


_KEYPAIR_KEYS: Final[frozenset[str]] = frozenset(f.name for f in fields(KeyPairOptions))
_SECRET_KEYS: Final[frozenset[str]] = frozenset(f.name for f in fields(SecretOptions))


__all__ = [
    "DEFAULT_DH_GROUP",
    "DEFAULT_CURVE",
    "DEFAULT_HASH",
    "KeyPairOptions",
    "SecretOptions",
]
