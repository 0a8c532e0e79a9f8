"""
TLS 1.3 key_share wire codec (RFC 8446 §4.2.8).

KeyShareEntry:

    struct {
        NamedGroup group;                 // uint16, big-endian
        opaque key_exchange<0..2^16-1>;   // uint16 length + bytes
    } KeyShareEntry;

ClientHello:

    struct {
        KeyShareEntry client_shares<0..2^16-1>;   // uint16 vector length
    } KeyShareClientHello;

Декодирование строгое: усечённые данные, лишние байты в конце и
повторяющиеся группы отклоняются InvalidParameterError.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from src.tls_kex.core.exceptions import InvalidParameterError
from src.tls_kex.core.models import MAX_WIRE_GROUP_ID
from src.tls_kex.core.registry import GroupRegistry

logger = logging.getLogger(__name__)


_ENTRY_HEADER = struct.Struct(">HH")
_VECTOR_LENGTH = struct.Struct(">H")

MAX_KEY_SHARE_LENGTH = 0xFFFF


@dataclass(frozen=True)
class KeyShareEntry:
    """
    Одна запись key_share: группа + opaque key_exchange.

    Attributes:
        group_id: 16-битный NamedGroup ID
        key_exchange: Публичный ключ в кодировке группы

    Raises:
        TypeError: Если key_exchange не является bytes
        InvalidParameterError: group_id вне 0..65535 или payload длиннее 65535
    """

    group_id: int
    key_exchange: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.group_id, bool) or not isinstance(self.group_id, int):
            raise InvalidParameterError(
                f"group_id must be int, got {type(self.group_id).__name__}",
                parameter="group_id",
            )
        if not 0 <= self.group_id <= MAX_WIRE_GROUP_ID:
            raise InvalidParameterError(
                f"group_id must be in 0..{MAX_WIRE_GROUP_ID}, got {self.group_id}",
                parameter="group_id",
            )
        if not isinstance(self.key_exchange, bytes):
            raise TypeError(
                f"key_exchange must be bytes, got {type(self.key_exchange).__name__}"
            )
        if len(self.key_exchange) > MAX_KEY_SHARE_LENGTH:
            raise InvalidParameterError(
                f"key_exchange must be at most {MAX_KEY_SHARE_LENGTH} bytes, "
                f"got {len(self.key_exchange)}",
                parameter="key_exchange",
            )

    @property
    def group_name(self) -> Optional[str]:
        """Имя группы из реестра или None для неизвестного ID."""
        group = GroupRegistry.get_instance().by_wire_id(self.group_id)
        return group.identifier if group is not None else None

    def encode(self) -> bytes:
        return (
            _ENTRY_HEADER.pack(self.group_id, len(self.key_exchange)) + self.key_exchange
        )


# ==============================================================================
# SINGLE ENTRY
# ==============================================================================


def encode_key_share_entry(group_id: int, key_exchange: bytes) -> bytes:
    """
    Закодировать [group_id: u16][length: u16][key_exchange].

    Example:
        >>> encode_key_share_entry(29, b"\\x01\\x02").hex()
        '001d00020102'
    """
    return KeyShareEntry(group_id, key_exchange).encode()


def _read_entry(data: bytes, offset: int) -> Tuple[KeyShareEntry, int]:
    end_of_header = offset + _ENTRY_HEADER.size
    if end_of_header > len(data):
        raise InvalidParameterError(
            f"Truncated key share entry header at offset {offset}",
            context={"available": len(data) - offset},
        )

    group_id, length = _ENTRY_HEADER.unpack_from(data, offset)
    end = end_of_header + length
    if end > len(data):
        raise InvalidParameterError(
            f"Truncated key share payload: declared {length} bytes, "
            f"got {len(data) - end_of_header}",
            context={"group_id": group_id},
        )

    return KeyShareEntry(group_id, bytes(data[end_of_header:end])), end


def decode_key_share_entry(data: bytes) -> KeyShareEntry:
    """
    Декодировать ровно одну запись key_share.

    Raises:
        TypeError: Если data не является bytes
        InvalidParameterError: Усечённые данные или лишние байты в конце
    """
    if not isinstance(data, bytes):
        raise TypeError(f"data must be bytes, got {type(data).__name__}")

    entry, end = _read_entry(data, 0)
    if end != len(data):
        raise InvalidParameterError(
            f"Trailing {len(data) - end} bytes after key share entry"
        )
    return entry


# ==============================================================================
# CLIENT SHARES VECTOR
# ==============================================================================


def encode_client_key_shares(entries: Iterable[KeyShareEntry]) -> bytes:
    """
    Закодировать вектор client_shares для ClientHello.

    Raises:
        InvalidParameterError: Повторяющаяся группа или вектор длиннее 65535
    """
    seen: Set[int] = set()
    body = bytearray()
    for entry in entries:
        if entry.group_id in seen:
            raise InvalidParameterError(
                f"Duplicate key share group: {entry.group_id}",
                context={"group_id": entry.group_id},
            )
        seen.add(entry.group_id)
        body += entry.encode()

    if len(body) > MAX_KEY_SHARE_LENGTH:
        raise InvalidParameterError(
            f"client_shares vector must be at most {MAX_KEY_SHARE_LENGTH} bytes, "
            f"got {len(body)}"
        )

    logger.debug(f"Encoded {len(seen)} key share entries ({len(body)}B)")
    return _VECTOR_LENGTH.pack(len(body)) + bytes(body)


def decode_client_key_shares(data: bytes) -> List[KeyShareEntry]:
    """
    Декодировать вектор client_shares.

    Raises:
        TypeError: Если data не является bytes
        InvalidParameterError: Усечённые данные, несовпадение длины вектора
            или повторяющаяся группа
    """
    if not isinstance(data, bytes):
        raise TypeError(f"data must be bytes, got {type(data).__name__}")

    if len(data) < _VECTOR_LENGTH.size:
        raise InvalidParameterError("Truncated client_shares length prefix")

    (declared,) = _VECTOR_LENGTH.unpack_from(data, 0)
    actual = len(data) - _VECTOR_LENGTH.size
    if declared != actual:
        raise InvalidParameterError(
            f"client_shares length mismatch: declared {declared}, got {actual}"
        )

    entries: List[KeyShareEntry] = []
    seen: Set[int] = set()
    offset = _VECTOR_LENGTH.size
    while offset < len(data):
        entry, offset = _read_entry(data, offset)
        if entry.group_id in seen:
            raise InvalidParameterError(
                f"Duplicate key share group: {entry.group_id}",
                context={"group_id": entry.group_id},
            )
        seen.add(entry.group_id)
        entries.append(entry)

    return entries


__all__ = [
    "MAX_KEY_SHARE_LENGTH",
    "KeyShareEntry",
    "encode_key_share_entry",
    "decode_key_share_entry",
    "encode_client_key_shares",
    "decode_client_key_shares",
]
