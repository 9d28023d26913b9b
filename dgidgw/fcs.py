"""Connection to an FCS reflector, reached through one DG-ID."""

from __future__ import annotations

import logging
import socket

from .defines import FCS_PORT
from .network import DGIdNetwork, DGIdStatus
from .ringbuffer import RingBuffer, RingBufferOverflow

logger = logging.getLogger(__name__)

FCS_VERSION = "MMDVM"

_BUFFER_LENGTH = 200
_INFO_LENGTH = 100
_INFO_TEXT_LENGTH = 43
_PING_LENGTH = 25
_DATA_LENGTH = 130
_FRAME_LENGTH = 155
_PAYLOAD_LENGTH = 120
_POLL_REPLY_LENGTHS = (7, 10)
_CLOSE = b"CLOSE      "

_SEND_POLL_MS = 800
_RECV_POLL_MS = 60_000
_RESET_MS = 1_000


def build_info(rx_frequency: int, tx_frequency: int, locator: str, node_id: int) -> bytes:
    """The 100-byte station information packet sent once a link is made."""
    text = "%9d%9d%-6.6s%-12.12s%7d" % (
        rx_frequency & 0xFFFFFFFF,
        tx_frequency & 0xFFFFFFFF,
        locator,
        FCS_VERSION,
        node_id & 0xFFFFFFFF,
    )
    return text.encode("latin-1")[:_INFO_TEXT_LENGTH].ljust(_INFO_LENGTH, b" ")


def build_ping(callsign: str, reflector: str) -> bytes:
    """The 25-byte poll packet naming the station and the reflector room."""
    return (
        b"PING"
        + callsign.encode("latin-1")[:6].ljust(6, b" ")
        + reflector.encode("latin-1")[:8].ljust(8, b"\x00")
        + bytes(_PING_LENGTH - 18)
    )


class _Timer:
    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        self.elapsed_ms = 0
        self.running = False

    def start(self) -> None:
        self.elapsed_ms = 0
        self.running = True

    def stop(self) -> None:
        self.running = False

    def clock(self, ms: int) -> None:
        if self.running:
            self.elapsed_ms += ms

    @property
    def expired(self) -> bool:
        return self.running and self.timeout_ms > 0 and self.elapsed_ms >= self.timeout_ms


def _resolve(host: str, port: int) -> tuple[int, tuple] | None:
    try:
        info = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    except OSError:
        return None
    if not info:
        return None
    family, _, _, _, sockaddr = info[0]
    return family, sockaddr


def _dump(title: str, data: bytes) -> None:
    logger.debug("%s (%d bytes): %s", title, len(data), data.hex(" "))


class FCSNetwork(DGIdNetwork):
    """A link to one room of an FCS reflector."""

    def __init__(
        self,
        reflector: str,
        port: int,
        callsign: str,
        rx_frequency: int,
        tx_frequency: int,
        locator: str,
        node_id: int,
        static: bool,
        debug: bool,
    ) -> None:
        super().__init__()
        self.static = static
        self.debug = debug
        self.reflector = reflector
        self.local_port = port
        self._info = build_info(rx_frequency, tx_frequency, locator, node_id)
        self._ping = build_ping(callsign, reflector)
        self._print = reflector[:6] + "-" + reflector[6:]
        self._buffer: RingBuffer[int] = RingBuffer(1000, "FCS Network Buffer")
        self._n = 0
        self._send_poll = _Timer(_SEND_POLL_MS)
        self._recv_poll = _Timer(_RECV_POLL_MS)
        self._reset = _Timer(_RESET_MS)
        self._state = DGIdStatus.NOTOPEN
        self._socket: socket.socket | None = None

        resolved = _resolve(f"{reflector[:6]}.xreflector.net", FCS_PORT)
        self._family, self._addr = resolved if resolved else (None, None)

    def describe(self, dg_id: int) -> str:
        return "FCS: " + self.reflector

    def network_dg_id(self) -> int:
        return 0

    def open(self) -> bool:
        if self._addr is None or self._family is None:
            logger.error("Unable to resolve the address of %s", self.reflector)
            self._state = DGIdStatus.NOTOPEN
            return False

        logger.info("Opening FCS network connection")
        bind_host = "::" if self._family == socket.AF_INET6 else ""
        try:
            sock = socket.socket(self._family, socket.SOCK_DGRAM)
            try:
                sock.bind((bind_host, self.local_port))
                sock.setblocking(False)
            except OSError:
                sock.close()
                raise
        except OSError as exc:
            logger.error("Cannot open the FCS socket: %s", exc)
            self._state = DGIdStatus.NOTOPEN
            return False

        self._socket = sock
        self._state = DGIdStatus.NOTLINKED
        return True

    def status(self) -> DGIdStatus:
        return self._state

    def write(self, dg_id: int, data: bytes) -> None:
        if self._state != DGIdStatus.LINKED:
            return
        if len(data) < _FRAME_LENGTH:
            raise ValueError(f"a frame needs {_FRAME_LENGTH} bytes, got {len(data)}")

        packet = (
            bytes(data[35:35 + _PAYLOAD_LENGTH])
            + bytes(data[34:35])
            + self.reflector.encode("latin-1")[:8].ljust(8, b"\x00")
        )
        if self.debug:
            _dump("FCS Network Data Sent", packet)
        self._send(packet)

    def link(self) -> None:
        if self._state != DGIdStatus.NOTLINKED:
            return
        self._state = DGIdStatus.LINKING
        self._send_poll.start()
        self._recv_poll.start()
        self._write_poll()

    def unlink(self) -> None:
        if self._state != DGIdStatus.LINKED:
            return
        self._send(_CLOSE)
        self._send_poll.stop()
        self._recv_poll.stop()
        logger.info("Unlinked from %s", self._print)
        self._state = DGIdStatus.NOTLINKED

    def clock(self, ms: int) -> None:
        if self._state == DGIdStatus.NOTOPEN:
            return

        self._recv_poll.clock(ms)
        if self._recv_poll.expired:
            if self.static:
                self._state = DGIdStatus.LINKING
            else:
                self._state = DGIdStatus.NOTLINKED
                self._send_poll.stop()
            logger.info("Lost link to %s", self._print)
            self._recv_poll.stop()

        self._send_poll.clock(ms)
        if self._send_poll.expired:
            self._write_poll()
            self._send_poll.start()

        self._reset.clock(ms)
        if self._reset.expired:
            self._n = 0
            self._reset.stop()

        received = self._receive()
        if received is None:
            return
        packet, addr = received

        if self.debug:
            _dump("FCS Network Data Received", packet)

        if self._state == DGIdStatus.NOTLINKED:
            return
        if self._addr is None or tuple(addr[:2]) != tuple(self._addr[:2]):
            return

        if len(packet) in _POLL_REPLY_LENGTHS:
            self._recv_poll.start()
            if self._state == DGIdStatus.LINKING:
                logger.info("Linked to %s", self._print)
                self._state = DGIdStatus.LINKED
                if self.debug:
                    _dump("FCS Network Data Sent", self._info)
                self._send(self._info)

        if len(packet) == _DATA_LENGTH:
            self._recv_poll.start()
            try:
                self._buffer.add_data([len(packet)])
                self._buffer.add_data(packet)
            except RingBufferOverflow as exc:
                logger.error("%s", exc)

    def read(self, dg_id: int) -> bytes | None:
        if self._buffer.is_empty():
            return None

        (length,) = self._buffer.get_data(1)
        self._reset.start()
        payload = bytes(self._buffer.get_data(length))

        frame = bytearray(b" " * 35)
        frame[0:4] = b"YSFD"
        frame[4:13] = self._print.encode("latin-1")[:9].ljust(9, b"\x00")
        frame[34] = self._n
        frame += payload[:_PAYLOAD_LENGTH]
        self._n = (self._n + 2) & 0xFF
        return bytes(frame)

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None
        logger.info("Closing FCS network connection")
        self._state = DGIdStatus.NOTOPEN

    def _write_poll(self) -> None:
        if self._state not in (DGIdStatus.LINKING, DGIdStatus.LINKED):
            return
        if self.debug:
            _dump("FCS Network Data Sent", self._ping)
        self._send(self._ping)

    def _send(self, packet: bytes) -> None:
        if self._socket is None or self._addr is None:
            return
        try:
            self._socket.sendto(packet, self._addr)
        except OSError as exc:
            logger.error("Error sending FCS data: %s", exc)

    def _receive(self) -> tuple[bytes, tuple] | None:
        if self._socket is None:
            return None
        try:
            return self._socket.recvfrom(_BUFFER_LENGTH)
        except (BlockingIOError, InterruptedError):
            return None
        except OSError as exc:
            logger.error("Error reading FCS data: %s", exc)
            return None