"""Reading of the gateway's INI-style configuration file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from os import PathLike
from typing import Iterable

_KEY_DELIMITERS = " \t=\r\n"
_LINE_ENDS = "\r\n"

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _uint(text: str) -> int:
    return _atoi(text) & 0xFFFFFFFF


def _ushort(text: str) -> int:
    return _atoi(text) & 0xFFFF


def _flag(text: str) -> bool:
    return _atoi(text) == 1


@dataclass
class IMRSDestination:
    """A remote IMRS repeater and the DG-ID it is reached on."""

    dg_id: int
    address: str


@dataclass
class DGIdData:
    """The settings of one ``[DGId=n]`` section."""

    dg_id: int
    type: str = ""
    static: bool = False
    name: str = ""
    address: str = ""
    port: int = 0
    local: int = 0
    net_dg_id: int = 0
    destinations: list[IMRSDestination] = field(default_factory=list)
    rf_hang_time: int = 60
    net_hang_time: int = 60
    debug: bool = False


@dataclass
class Config:
    """All settings of the gateway."""

    # General
    callsign: str = ""
    suffix: str = ""
    id: int = 0
    rpt_address: str = ""
    rpt_port: int = 0
    my_address: str = ""
    my_port: int = 0
    rf_hang_time: int = 60
    net_hang_time: int = 60
    bleep: bool = True
    debug: bool = False
    daemon: bool = False

    # Info
    rx_frequency: int = 0
    tx_frequency: int = 0
    power: int = 0
    latitude: float = 0.0
    longitude: float = 0.0
    height: int = 0
    description: str = ""

    # Log
    log_display_level: int = 0
    log_file_level: int = 0
    log_file_path: str = ""
    log_file_root: str = ""
    log_file_rotate: bool = True

    # APRS
    aprs_enabled: bool = False
    aprs_address: str = ""
    aprs_port: int = 0
    aprs_suffix: str = ""
    aprs_description: str = ""
    aprs_symbol: str = ""

    # YSF Network
    ysf_net_hosts: str = ""

    # DG-ID sections, in file order
    dgid_data: list[DGIdData] = field(default_factory=list)

    # GPSD
    gpsd_enabled: bool = False
    gpsd_address: str = ""
    gpsd_port: str = ""


_SECTIONS = (
    ("[General]", "general"),
    ("[Info]", "info"),
    ("[Log]", "log"),
    ("[APRS]", "aprs"),
    ("[YSF Network]", "ysf"),
    ("[FCS Network]", "fcs"),
    ("[IMRS Network]", "imrs"),
    ("[DGId=", "dgid"),
    ("[GPSD]", "gpsd"),
)


def _split_line(line: str) -> tuple[str, str] | None:
    """Split a line into key and raw value the way the file format expects."""
    stripped = line.lstrip(_KEY_DELIMITERS)
    if not stripped:
        return None
    end = next((i for i, ch in enumerate(stripped) if ch in _KEY_DELIMITERS), None)
    if end is None:
        return None
    key = stripped[:end]
    rest = stripped[end + 1:].lstrip(_LINE_ENDS)
    if not rest:
        return None
    value = re.split(r"[\r\n]", rest, maxsplit=1)[0]
    return key, value


def _clean_value(value: str) -> str:
    if len(value) > 1 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value.split("#", 1)[0].rstrip(" \t")


def _parse_destination(value: str) -> IMRSDestination:
    text = value.lstrip(",")
    if "," not in text:
        raise ValueError(f"IMRS destination needs 'dgid,address': {value!r}")
    first, rest = text.split(",", 1)
    address = rest.lstrip(_LINE_ENDS)
    if not address:
        raise ValueError(f"IMRS destination has no address: {value!r}")
    return IMRSDestination(dg_id=_uint(first), address=address)


class _Parser:
    def __init__(self) -> None:
        self.config = Config()
        self.section: str | None = None
        self.current: DGIdData | None = None
        self.ysf_rf_hang_time = 60
        self.ysf_net_hang_time = 60
        self.ysf_debug = False
        self.fcs_rf_hang_time = 60
        self.fcs_net_hang_time = 60
        self.fcs_debug = False
        self.imrs_rf_hang_time = 240
        self.imrs_net_hang_time = 240
        self.imrs_debug = False

    def feed(self, line: str) -> None:
        if line.startswith("#"):
            return
        if line.startswith("["):
            self._start_section(line)
            return
        parts = _split_line(line)
        if parts is None:
            return
        key, raw = parts
        value = _clean_value(raw)
        handler = getattr(self, f"_{self.section}", None) if self.section else None
        if handler is not None:
            handler(key, value)

    def _start_section(self, line: str) -> None:
        self.section = next(
            (name for prefix, name in _SECTIONS if line.startswith(prefix)), None
        )
        if self.section == "dgid":
            cfg = self.config
            self.current = DGIdData(
                dg_id=_uint(line[6:]),
                rf_hang_time=cfg.rf_hang_time,
                net_hang_time=cfg.net_hang_time,
            )
            cfg.dgid_data.append(self.current)

    def _general(self, key: str, value: str) -> None:
        cfg = self.config
        if key == "Callsign":
            cfg.callsign = value.upper()
        elif key == "Suffix":
            cfg.suffix = value.upper()
        elif key == "Id":
            cfg.id = _uint(value)
        elif key == "RptAddress":
            cfg.rpt_address = value
        elif key == "RptPort":
            cfg.rpt_port = _ushort(value)
        elif key == "LocalAddress":
            cfg.my_address = value
        elif key == "LocalPort":
            cfg.my_port = _ushort(value)
        elif key == "RFHangTime":
            hang = _uint(value)
            self.ysf_rf_hang_time = self.fcs_rf_hang_time = cfg.rf_hang_time = hang
        elif key == "NetHangTime":
            hang = _uint(value)
            self.ysf_net_hang_time = self.fcs_net_hang_time = cfg.net_hang_time = hang
        elif key == "Bleep":
            cfg.bleep = _flag(value)
        elif key == "Debug":
            cfg.debug = _flag(value)
        elif key == "Daemon":
            cfg.daemon = _flag(value)

    def _info(self, key: str, value: str) -> None:
        cfg = self.config
        if key == "TXFrequency":
            cfg.tx_frequency = _uint(value)
        elif key == "RXFrequency":
            cfg.rx_frequency = _uint(value)
        elif key == "Power":
            cfg.power = _uint(value)
        elif key == "Latitude":
            cfg.latitude = _atof(value)
        elif key == "Longitude":
            cfg.longitude = _atof(value)
        elif key == "Height":
            cfg.height = _atoi(value)
        elif key == "Description":
            cfg.description = value

    def _log(self, key: str, value: str) -> None:
        cfg = self.config
        if key == "FilePath":
            cfg.log_file_path = value
        elif key == "FileRoot":
            cfg.log_file_root = value
        elif key == "FileLevel":
            cfg.log_file_level = _uint(value)
        elif key == "DisplayLevel":
            cfg.log_display_level = _uint(value)
        elif key == "FileRotate":
            cfg.log_file_rotate = _flag(value)

    def _aprs(self, key: str, value: str) -> None:
        cfg = self.config
        if key == "Enable":
            cfg.aprs_enabled = _flag(value)
        elif key == "Address":
            cfg.aprs_address = value
        elif key == "Port":
            cfg.aprs_port = _ushort(value)
        elif key == "Suffix":
            cfg.aprs_suffix = value
        elif key == "Description":
            cfg.aprs_description = value
        elif key == "Symbol":
            cfg.aprs_symbol = value

    def _ysf(self, key: str, value: str) -> None:
        if key == "Hosts":
            self.config.ysf_net_hosts = value
        elif key == "RFHangTime":
            self.ysf_rf_hang_time = _uint(value)
        elif key == "NetHangTime":
            self.ysf_net_hang_time = _uint(value)
        elif key == "Debug":
            self.ysf_debug = _flag(value)

    def _fcs(self, key: str, value: str) -> None:
        if key == "RFHangTime":
            self.fcs_rf_hang_time = _uint(value)
        elif key == "NetHangTime":
            self.fcs_net_hang_time = _uint(value)
        elif key == "Debug":
            self.fcs_debug = _flag(value)

    def _imrs(self, key: str, value: str) -> None:
        if key == "RFHangTime":
            self.imrs_rf_hang_time = _uint(value)
        elif key == "NetHangTime":
            self.imrs_net_hang_time = _uint(value)
        elif key == "Debug":
            self.imrs_debug = _flag(value)

    def _type_defaults(self, kind: str) -> tuple[int, int, bool]:
        if kind == "YSF":
            return self.ysf_rf_hang_time, self.ysf_net_hang_time, self.ysf_debug
        if kind == "FCS":
            return self.fcs_rf_hang_time, self.fcs_net_hang_time, self.fcs_debug
        if kind == "IMRS":
            return self.imrs_rf_hang_time, self.imrs_net_hang_time, self.imrs_debug
        return self.config.rf_hang_time, self.config.net_hang_time, False

    def _dgid(self, key: str, value: str) -> None:
        data = self.current
        assert data is not None
        if key == "Type":
            data.type = value
            data.static = False
            data.rf_hang_time, data.net_hang_time, data.debug = self._type_defaults(value)
        elif key == "RFHangTime":
            data.rf_hang_time = _uint(value)
        elif key == "NetHangTime":
            data.net_hang_time = _uint(value)
        elif key == "Static":
            data.static = _flag(value)
        elif key == "Address":
            data.address = value
        elif key == "Name":
            data.name = value
        elif key == "Port":
            data.port = _ushort(value)
        elif key == "Local":
            data.local = _ushort(value)
        elif key == "DGId":
            data.net_dg_id = _uint(value)
        elif key == "Destination":
            data.destinations.append(_parse_destination(value))
        elif key == "Debug":
            data.debug = _flag(value)

    def _gpsd(self, key: str, value: str) -> None:
        cfg = self.config
        if key == "Enable":
            cfg.gpsd_enabled = _flag(value)
        elif key == "Address":
            cfg.gpsd_address = value
        elif key == "Port":
            cfg.gpsd_port = value


def parse_config(lines: Iterable[str]) -> Config:
    """Build a Config from the lines of a configuration file."""
    parser = _Parser()
    for line in lines:
        parser.feed(line)
    return parser.config


def read_config(path: str | PathLike[str]) -> Config:
    """Read and parse the configuration file at ``path``; OSError if it cannot be opened."""
    with open(path, encoding="utf-8", errors="replace") as handle:
        return parse_config(handle)