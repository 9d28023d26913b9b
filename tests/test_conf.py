import pytest

from dgidgw.conf import Config, DGIdData, IMRSDestination, parse_config, read_config

SAMPLE = """\
# a comment line
[General]
Callsign=g4klx
Suffix=rpt
Id=1234567
RptAddress=127.0.0.1
RptPort=3200
LocalAddress=127.0.0.1
LocalPort=4200
Bleep=0
Debug=1
Daemon=0

[Info]
RXFrequency=430475000
TXFrequency=439475000
Power=1
Latitude=51.5
Longitude=-1.25
Height=12
Description="Multi-Mode Repeater"

[Log]
DisplayLevel=1
FileLevel=2
FilePath=.
FileRoot=DGIdGateway
FileRotate=0

[APRS]
Enable=1
Address=127.0.0.1
Port=8673
Description=APRS Description   # trailing comment
Suffix=Y
Symbol=D&

[YSF Network]
Hosts=./YSFHosts.txt

[GPSD]
Enable=1
Address=127.0.0.1
Port=2947
"""


def test_general_section():
    cfg = parse_config(SAMPLE.splitlines(keepends=True))
    assert cfg.callsign == "G4KLX"
    assert cfg.suffix == "RPT"
    assert cfg.id == 1234567
    assert cfg.rpt_address == "127.0.0.1"
    assert cfg.rpt_port == 3200
    assert cfg.my_port == 4200
    assert cfg.bleep is False
    assert cfg.debug is True
    assert cfg.daemon is False


def test_info_log_aprs_gpsd_sections():
    cfg = parse_config(SAMPLE.splitlines(keepends=True))
    assert cfg.rx_frequency == 430475000
    assert cfg.tx_frequency == 439475000
    assert cfg.latitude == 51.5
    assert cfg.longitude == -1.25
    assert cfg.height == 12
    assert cfg.description == "Multi-Mode Repeater"
    assert cfg.log_display_level == 1
    assert cfg.log_file_level == 2
    assert cfg.log_file_root == "DGIdGateway"
    assert cfg.log_file_rotate is False
    assert cfg.aprs_enabled is True
    assert cfg.aprs_port == 8673
    assert cfg.aprs_description == "APRS Description"
    assert cfg.aprs_suffix == "Y"
    assert cfg.aprs_symbol == "D&"
    assert cfg.ysf_net_hosts == "./YSFHosts.txt"
    assert cfg.gpsd_enabled is True
    assert cfg.gpsd_port == "2947"


def test_defaults_when_empty():
    cfg = parse_config([])
    assert cfg == Config()
    assert cfg.bleep is True
    assert cfg.log_file_rotate is True
    assert cfg.rf_hang_time == 60
    assert cfg.dgid_data == []


def test_dgid_type_defaults_follow_network_sections():
    text = """\
[General]
RFHangTime=30
NetHangTime=45
[IMRS Network]
Debug=1
[DGId=0]
Type=YSF
[DGId=1]
Type=FCS
[DGId=2]
Type=IMRS
[DGId=3]
Type=Parrot
"""
    cfg = parse_config(text.splitlines())
    kinds = {d.dg_id: d for d in cfg.dgid_data}
    assert (kinds[0].rf_hang_time, kinds[0].net_hang_time) == (30, 45)
    assert (kinds[1].rf_hang_time, kinds[1].net_hang_time) == (30, 45)
    assert (kinds[2].rf_hang_time, kinds[2].net_hang_time) == (240, 240)
    assert kinds[2].debug is True
    assert (kinds[3].rf_hang_time, kinds[3].net_hang_time, kinds[3].debug) == (30, 45, False)


def test_dgid_section_fields_and_order():
    text = """\
[DGId=10]
Type=Gateway
Static=1
Address=127.0.0.1
Port=42000
Local=42013
RFHangTime=7
NetHangTime=9
DGId=5
[DGId=20]
Type=IMRS
Name=Group
Destination=1,10.0.0.1
Destination=2,10.0.0.2
"""
    cfg = parse_config(text.splitlines())
    assert [d.dg_id for d in cfg.dgid_data] == [10, 20]
    gateway = cfg.dgid_data[0]
    assert gateway.type == "Gateway"
    assert gateway.static is True
    assert gateway.address == "127.0.0.1"
    assert gateway.port == 42000
    assert gateway.local == 42013
    assert gateway.rf_hang_time == 7
    assert gateway.net_hang_time == 9
    assert gateway.net_dg_id == 5
    imrs = cfg.dgid_data[1]
    assert imrs.name == "Group"
    assert imrs.destinations == [
        IMRSDestination(dg_id=1, address="10.0.0.1"),
        IMRSDestination(dg_id=2, address="10.0.0.2"),
    ]


def test_type_resets_static():
    cfg = parse_config(["[DGId=4]\n", "Static=1\n", "Type=YSF\n"])
    assert cfg.dgid_data[0].static is False
    assert cfg.dgid_data[0].type == "YSF"


def test_destination_without_address_raises():
    with pytest.raises(ValueError):
        parse_config(["[DGId=1]\n", "Type=IMRS\n", "Destination=5\n"])


def test_quoted_value_keeps_hash():
    cfg = parse_config(["[Info]\n", 'Description="Room #1"\n'])
    assert cfg.description == "Room #1"


def test_unquoted_value_strips_comment_and_trailing_blanks():
    cfg = parse_config(["[Info]\n", "Description=Room \t# hidden\n"])
    assert cfg.description == "Room"


def test_lines_without_value_are_ignored():
    cfg = parse_config(["[General]\n", "Callsign\n", "Callsign=\n", "   \n"])
    assert cfg.callsign == ""


def test_unknown_section_keys_ignored():
    cfg = parse_config(["[Other]\n", "Callsign=M0ABC\n", "[General]\n", "Id=7\n"])
    assert cfg.callsign == ""
    assert cfg.id == 7


def test_numeric_prefix_parsing_and_flags():
    cfg = parse_config(["[General]\n", "Id=42abc\n", "Bleep=2\n", "Debug=x\n"])
    assert cfg.id == 42
    assert cfg.bleep is False
    assert cfg.debug is False


def test_general_hang_time_applies_to_later_ysf_dgid_only_via_type():
    cfg = parse_config(
        ["[General]\n", "RFHangTime=15\n", "[YSF Network]\n", "RFHangTime=99\n",
         "[DGId=9]\n", "Type=YSF\n"]
    )
    data = cfg.dgid_data[0]
    assert data.rf_hang_time == 99
    assert data.net_hang_time == 60
    assert cfg.rf_hang_time == 15


def test_read_config_from_file(tmp_path):
    path = tmp_path / "gateway.ini"
    path.write_text(SAMPLE + "[DGId=3]\nType=YSF\nName=Room\n", encoding="utf-8")
    cfg = read_config(path)
    assert cfg.callsign == "G4KLX"
    assert cfg.dgid_data[-1].name == "Room"
    assert isinstance(cfg.dgid_data[-1], DGIdData) and cfg.dgid_data[-1].dg_id == 3


def test_read_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_config(tmp_path / "absent.ini")