# dgidgw

Building blocks for a DG-ID gateway for Yaesu System Fusion (YSF)
repeaters. In such a gateway each DG-ID value (0–99) selected on a radio
is routed to its own network. This package provides the configuration
reader, the common network interface, a link to FCS reflectors, decoding
of the GPS data Yaesu radios send, and APRS reporting of positions.

## What is in the package

- `dgidgw.defines` – frame lengths, FICH field values (`YSF_FI_*`,
  `YSF_DT_*`, …), `FCS_PORT`, `IMRS_PORT` and `VERSION`.
- `dgidgw.crc` – `add_ccitt16(data)` returns `data` with its last two
  bytes replaced by the CCITT-16 of the rest, `check_ccitt16(data)`
  verifies them (both raise `ValueError` for data of two bytes or less),
  and `add_crc(data)` returns the byte sum modulo 256 used in GPS blocks.
- `dgidgw.ringbuffer` – `RingBuffer(length, name)`, a fixed-size FIFO
  that keeps one slot free. `add_data` raises `RingBufferOverflow` when
  the data does not fit; `get_data` and `peek` raise
  `RingBufferUnderflow` when asked for more than it holds.
- `dgidgw.network` – `DGIdStatus` (`NOTOPEN`, `NOTLINKED`, `LINKING`,
  `LINKED`), the `Mode` flags, and the abstract `DGIdNetwork` base class
  with `describe`, `network_dg_id`, `open`, `link`, `status`, `write`,
  `read`, `clock`, `unlink` and `close`. `allows(data_type)` tells whether
  frames of a YSF data type may pass to the network.
- `dgidgw.conf` – `read_config(path)` and `parse_config(lines)` return a
  `Config` holding the General, Info, Log, APRS, YSF Network, GPSD and
  `[DGId=n]` settings. Each `[DGId=n]` section becomes a `DGIdData`;
  `Destination=dgid,address` lines become `IMRSDestination` entries.
  The `Type` key takes its hang times and debug flag from the matching
  `[YSF Network]`, `[FCS Network]` or `[IMRS Network]` section.
- `dgidgw.aprs` – APRS-IS line formatting (`position_report`, `id_frame`,
  `station_description`, `band_name`, `radio_symbol`, `format_latitude`,
  `format_longitude`) and `APRSWriter`, which sends position reports over
  UDP and, when a static location is set, an identification frame 60
  seconds after `open()` and every twenty minutes after that.
- `dgidgw.fcs` – `FCSNetwork`, a `DGIdNetwork` that links to a room of
  an FCS reflector (`<name>.xreflector.net`, port 62500), polls it every
  800 ms and drops the link after 60 s without a reply. `build_ping` and
  `build_info` build the poll and station-information packets.
- `dgidgw.gps` – `GPS`, which collects the data blocks of one
  transmission and hands the position to a writer once;
  `decode_position` turns Yaesu's encoding into a `GPSFix`;
  `radio_name` maps radio codes to model names.
- `dgidgw.gateway` – `calculate_locator`, `next_pips`, `announce_pips`,
  `parse_arguments` (raising `UsageError` for unknown options),
  `version_line` and `DEFAULT_INI_FILE`.

## Configuration

The configuration file uses the familiar MMDVM layout:

```ini
[General]
Callsign=N0CALL
Suffix=ND
Id=1234567
RptAddress=127.0.0.1
RptPort=42025
LocalAddress=127.0.0.1
LocalPort=42026
Bleep=1

[Info]
RXFrequency=430475000
TXFrequency=439475000
Latitude=0.0
Longitude=0.0

[APRS]
Enable=0

[DGId=0]
Type=Gateway
Static=1
Address=127.0.0.1
Port=42013
Local=42022

[DGId=10]
Type=FCS
Name=FCS00290
Local=42001
```

Read it with:

```python
from dgidgw.conf import read_config

config = read_config("DGIdGateway.ini")
config.dgid_data[1].type      # "FCS"
```

A missing file raises an `OSError`; unknown keys and sections are ignored,
as are lines starting with `#`. Unquoted values lose everything from `#`
on and trailing blanks; values in double quotes are kept as written.

## Small examples

```python
from dgidgw.gateway import calculate_locator

calculate_locator(0.0, 0.0)   # "JJ00AA"
```

```python
from dgidgw.ringbuffer import RingBuffer

buf = RingBuffer(16, "example")
buf.add_data(b"\x01\x02\x03")
buf.get_data(2)               # [1, 2]
```

## What the package does not do

- There is no command and no running gateway: nothing reads frames from
  the repeater, selects a network by DG-ID and forwards traffic.
  `dgidgw.gateway` holds only the decisions such a loop makes.
- `FCSNetwork` is the only `DGIdNetwork` provided. There are no YSF
  reflector, local gateway, parrot, bridge or IMRS networks, and no
  reflector host list; their settings are parsed but nothing uses them.
- FICH and payload decoding are not included: `GPS.data` expects the
  frame information, data type, frame numbers and the decoded data block
  to be supplied by the caller.
- Positions from a GPS daemon are not supported; the GPSD settings are
  read but `APRSWriter` only beacons a static location.
- Daemon mode and log-file handling are not provided; the modules log
  through the standard `logging` module.

## Tests

The tests use pytest and are installed with the `test` extra.