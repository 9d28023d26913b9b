import logging
import re

import pytest

from dgidgw.gateway import (
    DEFAULT_INI_FILE,
    UsageError,
    announce_pips,
    calculate_locator,
    next_pips,
    parse_arguments,
)
from dgidgw.network import DGIdStatus


def _locator_bounds(locator):
    lon = (ord(locator[0]) - ord("A")) * 20.0
    lat = (ord(locator[1]) - ord("A")) * 10.0
    lon += int(locator[2]) * 2.0
    lat += int(locator[3]) * 1.0
    lon += (ord(locator[4]) - ord("A")) * (2.0 / 24.0)
    lat += (ord(locator[5]) - ord("A")) * (1.0 / 24.0)
    return lon - 180.0, lat - 90.0


def test_locator_of_origin():
    assert calculate_locator(0.0, 0.0) == "JJ00AA"


@pytest.mark.parametrize("lat, lon", [(91.0, 0.0), (-90.5, 10.0), (0.0, 361.0), (0.0, -400.0)])
def test_locator_out_of_range(lat, lon):
    assert calculate_locator(lat, lon) == "AA00AA"


@pytest.mark.parametrize(
    "lat, lon",
    [(51.5, -0.12), (-33.87, 151.21), (40.71, -74.01), (35.68, 139.69), (-12.3, 45.6)],
)
def test_locator_contains_position(lat, lon):
    locator = calculate_locator(lat, lon)
    assert re.fullmatch(r"[A-R]{2}[0-9]{2}[A-X]{2}", locator)
    west, south = _locator_bounds(locator)
    assert west <= lon < west + 2.0 / 24.0 + 1e-9
    assert south <= lat < south + 1.0 / 24.0 + 1e-9


def test_locator_wraps_longitude():
    assert calculate_locator(20.0, 190.0) == calculate_locator(20.0, -170.0)
    assert calculate_locator(20.0, -200.0) == calculate_locator(20.0, 160.0)


def test_pips_not_from_rf():
    assert next_pips(False, DGIdStatus.NOTLINKED, DGIdStatus.LINKED, True) is None
    assert next_pips(False, DGIdStatus.LINKED, None, False) is None


def test_pips_static_not_linked():
    assert next_pips(True, DGIdStatus.NOTLINKED, DGIdStatus.LINKING, True) == 3


def test_pips_newly_linked():
    assert next_pips(True, DGIdStatus.LINKING, DGIdStatus.LINKED, False) == 1


def test_pips_link_lost():
    assert next_pips(True, DGIdStatus.LINKED, DGIdStatus.NOTLINKED, False) == 3


def test_pips_unchanged_when_still_linked():
    assert next_pips(True, DGIdStatus.LINKED, DGIdStatus.LINKED, True) is None
    assert next_pips(True, DGIdStatus.NOTLINKED, DGIdStatus.LINKING, False) is None


def test_pips_no_network():
    assert next_pips(True, DGIdStatus.LINKED, None, False) == 2
    assert next_pips(True, DGIdStatus.NOTLINKED, None, False) is None


def test_arguments_default():
    assert parse_arguments([]) == (DEFAULT_INI_FILE, False)


def test_arguments_file():
    assert parse_arguments(["my.ini"]) == ("my.ini", False)
    assert parse_arguments(["a.ini", "b.ini"]) == ("b.ini", False)


@pytest.mark.parametrize("flag", ["-v", "--version"])
def test_arguments_version(flag):
    _, show_version = parse_arguments([flag])
    assert show_version is True


def test_arguments_unknown_option():
    with pytest.raises(UsageError) as info:
        parse_arguments(["-x"])
    assert info.value.option == "-x"


def test_announce_pips(caplog):
    with caplog.at_level(logging.INFO, logger="dgidgw.gateway"):
        assert announce_pips(2, True) == "*** 2 bleep!"
    assert "*** 2 bleep!" in caplog.text


def test_announce_nothing():
    assert announce_pips(0, True) is None
    assert announce_pips(3, False) is None