"""Checksums used in YSF frames: CCITT-16 and the simple additive byte sum."""

from __future__ import annotations


def _build_ccitt16_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte << 8
        for _ in range(8):
            crc = ((crc << 1) ^ 0x1021) if crc & 0x8000 else (crc << 1)
        table.append(crc & 0xFFFF)
    return tuple(table)


_CCITT16_TABLE = _build_ccitt16_table()


def _ccitt16(payload: bytes) -> int:
    crc = 0
    for byte in payload:
        crc = ((crc << 8) & 0xFFFF) ^ _CCITT16_TABLE[(crc >> 8) ^ byte]
    return ~crc & 0xFFFF


def _check_length(data: bytes) -> None:
    if len(data) <= 2:
        raise ValueError("data must be longer than the two CRC bytes")


def add_ccitt16(data: bytes) -> bytes:
    """Return ``data`` with its last two bytes replaced by the CCITT-16 of the rest."""
    _check_length(data)
    payload = bytes(data[:-2])
    return payload + _ccitt16(payload).to_bytes(2, "big")


def check_ccitt16(data: bytes) -> bool:
    """Tell whether the last two bytes of ``data`` hold the CCITT-16 of the rest."""
    _check_length(data)
    return _ccitt16(bytes(data[:-2])) == int.from_bytes(bytes(data[-2:]), "big")


def add_crc(data: bytes) -> int:
    """Return the sum of all bytes modulo 256."""
    return sum(data) & 0xFF