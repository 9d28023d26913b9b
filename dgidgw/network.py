"""Common interface of the networks a DG-ID can be routed to."""

from __future__ import annotations

import abc
import enum

from .defines import (
    YSF_DT_DATA_FR_MODE,
    YSF_DT_VD_MODE1,
    YSF_DT_VD_MODE2,
    YSF_DT_VOICE_FR_MODE,
)


class DGIdStatus(enum.IntEnum):
    NOTOPEN = 0
    NOTLINKED = 1
    LINKING = 2
    LINKED = 3


class Mode(enum.IntFlag):
    """Frame modes a network accepts from the repeater."""

    VD_MODE1 = 0x01
    VD_MODE2 = 0x02
    VOICE_FR = 0x04
    DATA_FR = 0x08
    ALL = VD_MODE1 | VD_MODE2 | VOICE_FR | DATA_FR


_DATA_TYPE_MODES = {
    YSF_DT_VD_MODE1: Mode.VD_MODE1,
    YSF_DT_DATA_FR_MODE: Mode.DATA_FR,
    YSF_DT_VD_MODE2: Mode.VD_MODE2,
    YSF_DT_VOICE_FR_MODE: Mode.VOICE_FR,
}


class DGIdNetwork(abc.ABC):
    """A network reachable through one DG-ID."""

    def __init__(self) -> None:
        self.modes: Mode = Mode.ALL
        self.static: bool = False
        self.rf_hang_time: int = 60
        self.net_hang_time: int = 60

    def allows(self, mode: int) -> bool:
        """Tell whether frames of YSF data type ``mode`` may pass to this network."""
        flag = _DATA_TYPE_MODES.get(mode)
        return flag is not None and bool(self.modes & flag)

    @abc.abstractmethod
    def describe(self, dg_id: int) -> str:
        """Human-readable name of what is on ``dg_id``."""

    @abc.abstractmethod
    def network_dg_id(self) -> int:
        """DG-ID to put into frames sent to this network."""

    @abc.abstractmethod
    def open(self) -> bool:
        """Open the connection; return whether it succeeded."""

    @abc.abstractmethod
    def link(self) -> None:
        """Start linking."""

    @abc.abstractmethod
    def status(self) -> DGIdStatus:
        """Current link state."""

    @abc.abstractmethod
    def write(self, dg_id: int, data: bytes) -> None:
        """Send a repeater frame to the network."""

    @abc.abstractmethod
    def read(self, dg_id: int) -> bytes | None:
        """Return the next frame from the network, or None if there is none."""

    @abc.abstractmethod
    def clock(self, ms: int) -> None:
        """Advance timers by ``ms`` milliseconds and service the socket."""

    @abc.abstractmethod
    def unlink(self) -> None:
        """Drop the link."""

    @abc.abstractmethod
    def close(self) -> None:
        """Close the connection."""