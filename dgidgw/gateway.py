"""Decision logic of the DG-ID gateway: locator, pips and command line."""

from __future__ import annotations

import logging
import math
import os
import sys
from typing import Sequence

from .defines import VERSION
from .network import DGIdStatus

logger = logging.getLogger(__name__)

DEFAULT_INI_FILE = "DGIdGateway.ini" if os.name == "nt" else "/etc/DGIdGateway.ini"

USAGE = "Usage: DGIdGateway [-v|--version] [filename]"

_UNKNOWN_LOCATOR = "AA00AA"


class UsageError(ValueError):
    """Raised when the command line holds an unknown option."""

    def __init__(self, option: str) -> None:
        super().__init__(f"unknown option {option!r}\n{USAGE}")
        self.option = option


def calculate_locator(latitude: float, longitude: float) -> str:
    """Maidenhead locator (six characters) of a position, or AA00AA if out of range."""
    if latitude < -90.0 or latitude > 90.0:
        return _UNKNOWN_LOCATOR
    if longitude < -360.0 or longitude > 360.0:
        return _UNKNOWN_LOCATOR

    latitude += 90.0
    if longitude > 180.0:
        longitude -= 360.0
    if longitude < -180.0:
        longitude += 360.0
    longitude += 180.0

    locator = []
    for lon_step, lat_step, base in ((20.0, 10.0, "A"), (2.0, 1.0, "0"), (2.0 / 24.0, 1.0 / 24.0, "A")):
        lon = math.floor(longitude / lon_step)
        lat = math.floor(latitude / lat_step)
        locator.append(chr(ord(base) + lon))
        locator.append(chr(ord(base) + lat))
        longitude -= lon * lon_step
        latitude -= lat * lat_step

    return "".join(locator)


def next_pips(
    from_rf: bool,
    state: DGIdStatus,
    net_state: DGIdStatus | None,
    is_static: bool,
) -> int | None:
    """Number of pips to queue after a state check, or None to leave it unchanged.

    ``net_state`` is the status of the current DG-ID's network, or None when no
    network is selected.
    """
    if not from_rf:
        return None

    if net_state is None:
        return 2 if state != DGIdStatus.NOTLINKED else None

    if state != DGIdStatus.LINKED and net_state != DGIdStatus.LINKED and is_static:
        return 3
    if state != DGIdStatus.LINKED and net_state == DGIdStatus.LINKED:
        return 1
    if state == DGIdStatus.LINKED and net_state != DGIdStatus.LINKED:
        return 3
    return None


def parse_arguments(argv: Sequence[str] | None = None) -> tuple[str, bool]:
    """Return the configuration file to use and whether the version was asked for."""
    if argv is None:
        argv = sys.argv[1:]

    ini_file = DEFAULT_INI_FILE
    for arg in argv:
        if arg in ("-v", "--version"):
            return ini_file, True
        if arg.startswith("-"):
            raise UsageError(arg)
        ini_file = arg
    return ini_file, False


def version_line() -> str:
    """The text printed for ``--version``."""
    return f"DGIdGateway version {VERSION}"


def announce_pips(count: int, bleep: bool) -> str | None:
    """Log the pips being sent and return the message, or None when nothing is sent."""
    if count == 0 or not bleep:
        return None
    message = f"*** {count} bleep!"
    logger.info("%s", message)
    return message