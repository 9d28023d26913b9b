"""Building blocks of a DG-ID gateway for System Fusion repeaters: configuration, FCS link, GPS decoding and APRS reporting."""

__version__ = "20230212"