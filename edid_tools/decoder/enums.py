"""
Constants, enums, and label tables for EDID / CTA-861 decoding.

:author: Doug Skrypa
"""

from __future__ import annotations

from enum import Enum, IntEnum

__all__ = [
    'EDID_BLOCK_LENGTH', 'DTD_LENGTH', 'EDID_HEADER', 'CTA_EXTENSION_TAG', 'DISPLAYID_EXTENSION_TAG',
    'DataBlockTag', 'ExtendedTag', 'IeeeOui', 'SyncType', 'ExtensionType', 'COLOR_GAMUTS',
    'XY_PIXEL_RATIOS', 'DIGITAL_COLOR_SPACES', 'AUDIO_CODECS', 'SAD_SAMPLE_RATES', 'SAD_BIT_DEPTHS', 'SPEAKERS',
    'OVERSCAN_BEHAVIOR', 'EOTF_LABELS', 'STATIC_METADATA_DESCRIPTORS', 'DYNAMIC_METADATA_TYPES', 'FRL_RATES',
    'ROOM_TYPES', 'PQ_EOTF', 'STATIC_METADATA_TYPE_1',
]

# fmt: off
EDID_BLOCK_LENGTH = 128
DTD_LENGTH = 18
EDID_HEADER = b'\x00\xff\xff\xff\xff\xff\xff\x00'
CTA_EXTENSION_TAG = 0x02
DISPLAYID_EXTENSION_TAG = 0x70
# fmt: on


class DataBlockTag(IntEnum):
    RESERVED = 0
    AUDIO = 1
    VIDEO = 2
    VENDOR_SPECIFIC = 3
    SPEAKER_ALLOCATION = 4
    EXTENDED_TAG = 7


class ExtendedTag(IntEnum):
    # fmt: off
    VIDEO_CAPABILITY = 0
    VENDOR_SPECIFIC_VIDEO = 1
    VESA_VIDEO_DISPLAY_DEVICE = 2
    VESA_VIDEO_TIMING_BLOCK = 3
    RESERVED_HDMI_VIDEO = 4
    COLORIMETRY = 5
    HDR_STATIC_METADATA = 6
    HDR_DYNAMIC_METADATA = 7
    NATIVE_VIDEO_RESOLUTION = 8
    VIDEO_FORMAT_PREFERENCE = 13
    YCBCR420_VIDEO = 14
    YCBCR420_CAPABILITY_MAP = 15
    MISC_AUDIO_FIELDS = 16
    VENDOR_SPECIFIC_AUDIO = 17
    HDMI_AUDIO = 18
    ROOM_CONFIGURATION = 19
    SPEAKER_LOCATION = 20
    INFOFRAME_DATA = 32
    PRODUCT_INFORMATION = 33
    HDMI_FORUM_SCDB = 0x79
    # fmt: on


class IeeeOui(IntEnum):
    """
    IEEE OUIs that identify vendor-specific payloads.  The HDMI Forum OUI is shared by the older HDMI 2.0 payload
    shape and the richer HDMI Forum payload shape; which one applies is decided by the payload length.
    """
    HDMI14 = 0x000C03
    HDMI_FORUM = 0xC45DD8
    HDR10_PLUS = 0x90848B
    DOLBY_VISION = 0x00D046


class SyncType(IntEnum):
    ANALOG_COMPOSITE = 0x00
    BIPOLAR_ANALOG_COMPOSITE = 0x01
    DIGITAL_COMPOSITE = 0x02
    DIGITAL_SEPARATE = 0x03


class ExtensionType(Enum):
    CTA_861 = 'cta-861'
    DISPLAYID = 'displayid'
    UNKNOWN = 'unknown'


COLOR_GAMUTS = ('srgb', 'display_p3', 'adobe_rgb', 'rec_2020')  # Canonical output order

XY_PIXEL_RATIOS = ('16:10', '4:3', '5:4', '16:9')

DIGITAL_COLOR_SPACES = (
    'RGB 4:4:4',
    'RGB 4:4:4 + YCrCb 4:4:4',
    'RGB 4:4:4 + YCrCb 4:2:2',
    'RGB 4:4:4 + YCrCb 4:4:4 + YCrCb 4:2:2',
)

AUDIO_CODECS = (
    'RESERVED', 'LPCM', 'AC-3', 'MPEG-1', 'MP3', 'MPEG2', 'AAC LC', 'DTS', 'ATRAC', 'DSD', 'E-AC-3', 'DTS-HD', 'MLP',
    'DST', 'WMA Pro',
)
SAD_SAMPLE_RATES = ('32 kHz', '44.1 kHz', '48 kHz', '88.2 kHz', '96 kHz', '176.4 kHz', '192 kHz')
SAD_BIT_DEPTHS = ('16 bit', '20 bit', '24 bit')

SPEAKERS = (
    'Front Left/Front Right (FL/FR)',
    'Low Frequency Effort (LFE)',
    'Front Center (FC)',
    'Rear Left/Rear Right (RL/RR)',
    'Rear Center (RC)',
    'Front Left Center/Front Right Center (FLC/FRC)',
    'Rear Left Center/Rear Right Center (RLC/RRC)',
    'Front Left Wide/Front Right Wide (FLW/FRW)',
    'Front Left High/Frong Right High (FLH/FRH)',
    'Top Center (TC)',
    'Front Center High (FCH)',
)

OVERSCAN_BEHAVIOR = ('No data', 'Always overscanned', 'Always underscanned', 'Supports both overscan and underscan')

PQ_EOTF = 'SMPTE ST2084 (PQ)'
STATIC_METADATA_TYPE_1 = 'Static Metadata Type 1'
EOTF_LABELS = (
    'Traditional gamma - SDR luminance range',
    'Traditional gamma - HDR luminance range',
    PQ_EOTF,
    'Hybrid Log-Gamma (HLG)',
)
STATIC_METADATA_DESCRIPTORS = (STATIC_METADATA_TYPE_1,)

# Type 1 is the carrier for Dolby's metadata and type 4 is the carrier for Samsung's, but neither implies support for
# Dolby Vision or HDR10+ on its own.
DYNAMIC_METADATA_TYPES = {1: 'SMPTE ST 2094-10', 2: 'SMPTE ST 2094-20', 3: 'SMPTE ST 2094-30', 4: 'SMPTE ST 2094-40'}

FRL_RATES = (
    'Not Supported',
    '3 lanes @ 3 Gbps',
    '3 lanes @ 6 Gbps',
    '4 lanes @ 6 Gbps',
    '4 lanes @ 8 Gbps',
    '4 lanes @ 10 Gbps',
    '4 lanes @ 12 Gbps',
)

ROOM_TYPES = ('Not indicated', 'Front Height', 'Rear Height', 'Reserved')
