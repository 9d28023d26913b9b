"""APRS-IS reporting of GPS positions heard on RF and of the gateway's own station."""

from __future__ import annotations

import logging
import math
import socket
from itertools import takewhile

from .defines import YSF_CALLSIGN_LENGTH

logger = logging.getLogger(__name__)

_CALLSIGN_CHARS = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789")

_RADIO_SYMBOLS = {
    0x24: "[",
    0x28: "[",
    0x30: "[",
    0x33: "[",
    0x25: ">",
    0x29: ">",
    0x31: ">",
    0x20: "r",
    0x26: "r",
}

_FIRST_ID_SECONDS = 60
_ID_INTERVAL_SECONDS = 20 * 60


def band_name(tx_frequency: int) -> str:
    """Name of the amateur band that ``tx_frequency`` (Hz) lies in."""
    if tx_frequency >= 1_200_000_000:
        return "23cm/1.2GHz"
    if tx_frequency >= 420_000_000:
        return "70cm`"
    if tx_frequency >= 144_000_000:
        return "2m"
    if tx_frequency >= 50_000_000:
        return "6m"
    if tx_frequency >= 28_000_000:
        return "10m"
    return "4m"


def _degrees_minutes(value: float) -> float:
    magnitude = math.fabs(value)
    degrees = math.floor(magnitude)
    return (magnitude - degrees) * 60.0 + degrees * 100.0


def format_latitude(latitude: float) -> str:
    """Latitude as APRS ``DDMM.mm`` without the hemisphere letter."""
    return "%07.2f" % _degrees_minutes(latitude)


def format_longitude(longitude: float) -> str:
    """Longitude as APRS ``DDDMM.mm`` without the hemisphere letter."""
    return "%08.2f" % _degrees_minutes(longitude)


def radio_symbol(radio: int) -> str:
    """APRS symbol for a Yaesu radio model code."""
    return _RADIO_SYMBOLS.get(radio, "-")


def _hemisphere(value: float, negative: str, positive: str) -> str:
    return negative if value < 0.0 else positive


def _source_callsign(source: bytes | str) -> str:
    if isinstance(source, str):
        source = source.encode("latin-1")
    text = bytes(source[:YSF_CALLSIGN_LENGTH]).decode("latin-1")
    return "".join(takewhile(lambda ch: ch in _CALLSIGN_CHARS, text))


def position_report(
    source: bytes | str,
    suffix: str,
    gateway_callsign: str,
    type_name: str,
    radio: int,
    latitude: float,
    longitude: float,
) -> str:
    """The APRS-IS line reporting a position heard from ``source`` on RF."""
    callsign = _source_callsign(source)
    if suffix:
        callsign += "-" + suffix[:1]
    return (
        f"{callsign}>APDPRS,C4FM*,qAR,{gateway_callsign}:!"
        f"{format_latitude(latitude)}{_hemisphere(latitude, 'S', 'N')}/"
        f"{format_longitude(longitude)}{_hemisphere(longitude, 'W', 'E')}"
        f"{radio_symbol(radio)} {type_name} via MMDVM\r\n"
    )


def station_description(tx_frequency: int, rx_frequency: int, desc: str) -> str:
    """The free-text comment describing the gateway's station."""
    extra = f", {desc}" if desc else ""
    if tx_frequency == 0:
        return f"MMDVM Voice (C4FM){extra}"
    offset = (rx_frequency - tx_frequency) / 1_000_000.0
    sign = "-" if offset < 0.0 else "+"
    return (
        f"MMDVM Voice (C4FM) {tx_frequency / 1_000_000.0:.5f}MHz "
        f"{sign}{math.fabs(offset):.4f}MHz{extra}"
    )


def id_frame(
    callsign: str,
    tx_frequency: int,
    rx_frequency: int,
    desc: str,
    symbol: str,
    latitude: float,
    longitude: float,
    height: int,
) -> str | None:
    """The station identification line, or None when no location is configured."""
    if latitude == 0.0 and longitude == 0.0:
        return None

    server = callsign + ("S" if "-" in callsign else "-S")
    symbol = symbol or "D&"
    table, code = symbol[0], symbol[1:2]

    return (
        f"{callsign}>APDG03,TCPIP*,qAC,{server}:!"
        f"{format_latitude(latitude)}{_hemisphere(latitude, 'S', 'N')}{table}"
        f"{format_longitude(longitude)}{_hemisphere(longitude, 'W', 'E')}{code}"
        f"/A={height * 3.28:06.0f}{band_name(tx_frequency)} "
        f"{station_description(tx_frequency, rx_frequency, desc)}\r\n"
    )


class _SecondsTimer:
    def __init__(self) -> None:
        self.timeout_ms = 0
        self.elapsed_ms = 0
        self.running = False

    def start(self, seconds: int | None = None) -> None:
        if seconds is not None:
            self.timeout_ms = seconds * 1000
        self.elapsed_ms = 0
        self.running = True

    def clock(self, ms: int) -> None:
        if self.running:
            self.elapsed_ms += ms

    @property
    def expired(self) -> bool:
        return self.running and self.timeout_ms > 0 and self.elapsed_ms >= self.timeout_ms


class APRSWriter:
    """Sends position reports and periodic station identification to an APRS gateway."""

    def __init__(
        self,
        callsign: str,
        rpt_suffix: str,
        address: str,
        port: int,
        suffix: str,
        debug: bool,
    ) -> None:
        if not callsign:
            raise ValueError("callsign must not be empty")
        if not address:
            raise ValueError("address must not be empty")
        if port <= 0:
            raise ValueError("port must be positive")

        self.callsign = callsign + ("-" + rpt_suffix[:1] if rpt_suffix else "")
        self.suffix = suffix
        self.debug = debug
        self.tx_frequency = 0
        self.rx_frequency = 0
        self.desc = ""
        self.symbol = ""
        self.latitude = 0.0
        self.longitude = 0.0
        self.height = 0

        self._timer = _SecondsTimer()
        self._socket: socket.socket | None = None
        try:
            info = socket.getaddrinfo(address, port, type=socket.SOCK_DGRAM)
        except OSError:
            info = []
        if info:
            family, _, _, _, sockaddr = info[0]
            self._family: int | None = family
            self._addr = sockaddr
        else:
            self._family = None
            self._addr = None

    def set_info(self, tx_frequency: int, rx_frequency: int, desc: str, symbol: str) -> None:
        self.tx_frequency = tx_frequency
        self.rx_frequency = rx_frequency
        self.desc = desc
        self.symbol = symbol

    def set_static_location(self, latitude: float, longitude: float, height: int) -> None:
        self.latitude = latitude
        self.longitude = longitude
        self.height = height

    def open(self) -> bool:
        """Open the socket to the APRS gateway; return whether it succeeded."""
        if self._addr is None or self._family is None:
            logger.error("Unable to lookup the adress of the APRS-IS server")
            return False
        try:
            self._socket = socket.socket(self._family, socket.SOCK_DGRAM)
        except OSError as exc:
            logger.error("Cannot open the APRS socket: %s", exc)
            return False

        logger.info("Opened connection to the APRS Gateway")
        self._timer.start(_FIRST_ID_SECONDS)
        return True

    def write(
        self,
        source: bytes | str,
        type_name: str,
        radio: int,
        latitude: float,
        longitude: float,
    ) -> None:
        """Report a position heard from ``source``."""
        self._send(
            position_report(
                source, self.suffix, self.callsign, type_name, radio, latitude, longitude
            )
        )

    def clock(self, ms: int) -> None:
        """Advance the identification timer and send the ID frame when it is due."""
        self._timer.clock(ms)
        if self._timer.expired:
            self._send_id_frame()
            self._timer.start(_ID_INTERVAL_SECONDS)

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def _send_id_frame(self) -> None:
        frame = id_frame(
            self.callsign,
            self.tx_frequency,
            self.rx_frequency,
            self.desc,
            self.symbol,
            self.latitude,
            self.longitude,
            self.height,
        )
        if frame is not None:
            self._send(frame)

    def _send(self, line: str) -> None:
        if self.debug:
            logger.debug("APRS ==> %s", line)
        if self._socket is None or self._addr is None:
            return
        try:
            self._socket.sendto(line.encode("latin-1"), self._addr)
        except OSError as exc:
            logger.error("Error sending APRS data: %s", exc)