"""Decoding of GPS positions carried in the data channel of YSF voice frames."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from .crc import add_crc
from .defines import (
    YSF_CALLSIGN_LENGTH,
    YSF_DT_VD_MODE1,
    YSF_DT_VD_MODE2,
    YSF_FI_COMMUNICATIONS,
)

logger = logging.getLogger(__name__)

SHORT_GPS = bytes((0x22, 0x62))
LONG_GPS = bytes((0x47, 0x64))

_END_MARKER = 0x03
_BUFFER_SIZE = 300

_RADIO_NAMES = {
    0x20: "DR-2X",
    0x24: "FT-1D",
    0x25: "FTM-400D",
    0x26: "DR-1X",
    0x28: "FT-2D",
    0x29: "FTM-100D",
    0x31: "FTM-300D",
    0x30: "FT-3D",
    0x33: "FT-5D",
}


class PositionWriter(Protocol):
    def write(self, source, type_name: str, radio: int, latitude: float, longitude: float) -> None:
        ...


@dataclass(frozen=True)
class GPSFix:
    """A decoded position; north and east are positive."""

    latitude: float
    longitude: float
    radio: int

    @property
    def radio_name(self) -> str:
        return radio_name(self.radio)


def radio_name(code: int) -> str:
    """Model name of a Yaesu radio code, or the code in hex when unknown."""
    return _RADIO_NAMES.get(code, "0x%02X" % code)


def find_end_marker(buffer: bytes, length: int) -> int | None:
    """Index of the last end marker at or below ``length`` if its checksum is valid."""
    for index in range(length, 0, -1):
        if buffer[index] == _END_MARKER:
            return index if add_crc(buffer[:index + 1]) == buffer[index + 1] else None
    return None


def _digits(high: int, low: int, max_units: int, max_value: int) -> int | None:
    tens = high & 0x0F
    units = low & 0x0F
    value = tens * 10 + units
    if tens > 9 or units > max_units or value > max_value:
        return None
    return value


def _longitude_degrees(selector: int, code: int) -> int | None:
    if selector == 0x50:
        if 0x76 <= code <= 0x7F:
            return code - 0x76
        if 0x6C <= code <= 0x75:
            return 100 + (code - 0x6C)
        if 0x26 <= code <= 0x6B:
            return 110 + (code - 0x26)
        return None
    if selector == 0x30 and 0x26 <= code <= 0x7F:
        return 10 + (code - 0x26)
    return None


def _longitude_minutes(code: int) -> int | None:
    if 0x58 <= code <= 0x61:
        return code - 0x58
    if 0x26 <= code <= 0x57:
        return 10 + (code - 0x26)
    return None


def decode_position(buffer: bytes) -> GPSFix | None:
    """Decode the position in a GPS data block, or None if it is malformed."""
    if len(buffer) < 14:
        raise ValueError("a GPS block needs at least 14 bytes")

    if any(byte & 0xF0 not in (0x50, 0x30) for byte in buffer[5:11]):
        return None

    lat_deg = _digits(buffer[5], buffer[6], 9, 89)
    lat_min = _digits(buffer[7], buffer[8], 9, 59)
    # Some radios send a units digit of 10 here.
    lat_min_frac = _digits(buffer[9], buffer[10], 10, 99)
    if lat_deg is None or lat_min is None or lat_min_frac is None:
        return None

    lat_dir = 1 if buffer[8] & 0xF0 == 0x50 else -1

    lon_deg = _longitude_degrees(buffer[9] & 0xF0, buffer[11])
    lon_min = _longitude_minutes(buffer[12])
    if lon_deg is None or lon_min is None:
        return None
    if not 0x1C <= buffer[13] <= 0x7F:
        return None
    lon_min_frac = buffer[13] - 0x1C

    lon_dir = 1 if buffer[10] & 0xF0 == 0x30 else -1

    latitude = lat_dir * (lat_deg + (lat_min + lat_min_frac * 0.01) / 60.0)
    longitude = lon_dir * (lon_deg + (lon_min + lon_min_frac * 0.01) / 60.0)
    return GPSFix(latitude=latitude, longitude=longitude, radio=buffer[4])


def _as_bytes(source: bytes | str) -> bytes:
    return source.encode("latin-1") if isinstance(source, str) else bytes(source)


class GPS:
    """Collects the data blocks of one transmission and reports the GPS position once."""

    def __init__(self, writer: PositionWriter) -> None:
        if writer is None:
            raise ValueError("a position writer is required")
        self.writer = writer
        self._buffer = bytearray(_BUFFER_SIZE)
        self.sent = False

    def data(
        self,
        source: bytes | str,
        fi: int,
        dt: int,
        fn: int,
        ft: int,
        block: bytes | None,
    ) -> None:
        """Take the decoded data block of frame ``fn`` of ``ft``; None means it failed to decode."""
        if self.sent or fi != YSF_FI_COMMUNICATIONS:
            return

        if dt == YSF_DT_VD_MODE1:
            if fn < 3:
                return
            size, offset, length = 20, (fn - 3) * 20, (fn - 2) * 20
        elif dt == YSF_DT_VD_MODE2:
            if fn not in (6, 7):
                return
            size, offset, length = 10, (fn - 6) * 10, (fn - 5) * 10
        else:
            return

        if block is None:
            return
        chunk = bytes(block[:size])
        if len(chunk) < size:
            raise ValueError(f"data block needs {size} bytes, got {len(chunk)}")
        self._buffer[offset:offset + size] = chunk

        if fn != ft:
            return
        if find_end_marker(self._buffer, length) is None:
            return

        header = bytes(self._buffer[1:3])
        if header == SHORT_GPS:
            logger.debug("Short GPS data received: %s", self._buffer[:length].hex(" "))
            self._transmit(source)
        if header == LONG_GPS:
            logger.debug("Long GPS data received: %s", self._buffer[:length].hex(" "))
            self._transmit(source)
        self.sent = True

    def reset(self) -> None:
        """Allow the next transmission's position to be reported."""
        self.sent = False

    def _transmit(self, source: bytes | str) -> None:
        raw = _as_bytes(source)
        if raw[:YSF_CALLSIGN_LENGTH] == b" " * YSF_CALLSIGN_LENGTH:
            return

        fix = decode_position(self._buffer)
        if fix is None:
            return

        name = fix.radio_name
        logger.info(
            "GPS Position from %10.10s of radio=%s lat=%f long=%f",
            raw.decode("latin-1"), name, fix.latitude, fix.longitude,
        )
        self.writer.write(source, name, fix.radio, fix.latitude, fix.longitude)
        self.sent = True