"""Constants of the System Fusion (YSF) air and network protocol."""

VERSION = "20230212"

YSF_FRAME_LENGTH_BYTES = 120

YSF_SYNC_BYTES = bytes((0xD4, 0x71, 0xC9, 0x63, 0x4D))
YSF_SYNC_LENGTH_BYTES = 5

YSF_FICH_LENGTH_BYTES = 25

YSF_SYNC_OK = 0x01

YSF_CALLSIGN_LENGTH = 10

# Frame information (FI)
YSF_FI_HEADER = 0x00
YSF_FI_COMMUNICATIONS = 0x01
YSF_FI_TERMINATOR = 0x02
YSF_FI_TEST = 0x03

# Data type (DT)
YSF_DT_VD_MODE1 = 0x00
YSF_DT_DATA_FR_MODE = 0x01
YSF_DT_VD_MODE2 = 0x02
YSF_DT_VOICE_FR_MODE = 0x03

# Call mode (CM)
YSF_CM_GROUP1 = 0x00
YSF_CM_GROUP2 = 0x01
YSF_CM_INDIVIDUAL = 0x03

# Message route (MR)
YSF_MR_NOT_BUSY = 0x01
YSF_MR_BUSY = 0x02

FCS_PORT = 62500

IMRS_PORT = 21110