"""
Vendor-Specific Data Blocks (VSDBs), dispatched on the 24-bit IEEE OUI that starts each payload.

The HDMI Forum OUI is used by two payload layouts; the longer HDMI Forum layout is used when the payload is at least
8 bytes long, and the older HDMI 2.0 layout is used otherwise.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Type

from .data_blocks import DataBlock
from .enums import DataBlockTag, IeeeOui, FRL_RATES
from .utils import Record

if TYPE_CHECKING:
    from .data_blocks import ExtensionParseContext
    from .reader import BlockReader

__all__ = [
    'HdmiForumFeatures', 'VendorDataBlock', 'DolbyVisionVendorDataBlock', 'Hdmi14VendorDataBlock',
    'Hdmi20VendorDataBlock', 'HdmiForumVendorDataBlock', 'read_payload', 'frl_rate_label', 'vrr_range', 'read_oui',
]
log = logging.getLogger(__name__)

VENDOR_BLOCK_TYPES: dict[int, list[tuple[int, Type[VendorDataBlock]]]] = {}

# fmt: off
_SCDC_FLAGS = (
    'is_scdc_present', 'is_scdc_read_request_capable', 'supports_cable_status',
    'supports_color_content_bits_per_component', 'supports_scrambling_340_mcsc', 'supports_3d_independent_view',
    'supports_3d_dual_view', 'supports_3d_osd_disparity',
)
_FRL_FLAGS = (
    'supports_fapa_end_extended', 'supports_qms', 'supports_m_delta', 'supports_cinema_vrr',
    'supports_negative_mvrr', 'supports_fast_v_active', 'supports_allm', 'supports_fapa_in_blanking',
)
_DSC_FLAGS = (
    'supports_vesa_dsc_1_2a', 'supports_compressed_video_420', 'supports_qms_tfr_max', 'supports_qms_tfr_min',
    'supports_compressed_video_any_bpp', 'supports_16bpc_compressed_video', 'supports_12bpc_compressed_video',
    'supports_10bpc_compressed_video',
)
# fmt: on


@dataclass
class HdmiForumFeatures(Record):
    """Capability flags shared by the HDMI Forum VSDB and the HDMI Forum Sink Capability Data Structure"""

    is_scdc_present: bool = False
    is_scdc_read_request_capable: bool = False
    supports_cable_status: bool = False
    supports_color_content_bits_per_component: bool = False
    supports_scrambling_340_mcsc: bool = False
    supports_3d_independent_view: bool = False
    supports_3d_dual_view: bool = False
    supports_3d_osd_disparity: bool = False
    supports_fapa_end_extended: bool = False
    supports_qms: bool = False
    supports_m_delta: bool = False
    supports_cinema_vrr: bool = False
    supports_negative_mvrr: bool = False
    supports_fast_v_active: bool = False
    supports_allm: bool = False
    supports_fapa_in_blanking: bool = False
    supports_vesa_dsc_1_2a: bool = False
    supports_compressed_video_420: bool = False
    supports_qms_tfr_max: bool = False
    supports_qms_tfr_min: bool = False
    supports_compressed_video_any_bpp: bool = False
    supports_16bpc_compressed_video: bool = False
    supports_12bpc_compressed_video: bool = False
    supports_10bpc_compressed_video: bool = False

    def _set_flags(self, value: int, names: tuple[str, ...]):
        # names are ordered from the most significant bit to the least significant bit
        for i, name in enumerate(names):
            if value & (0x80 >> i):
                setattr(self, name, True)

    def set_scdc_flags(self, value: int):
        self._set_flags(value, _SCDC_FLAGS)

    def set_frl_flags(self, value: int):
        self._set_flags(value, _FRL_FLAGS)

    def set_dsc_flags(self, value: int):
        self._set_flags(value, _DSC_FLAGS)


def read_payload(reader: BlockReader, start: int, length: int) -> list[int]:
    """Read ``length`` bytes starting at ``start``, with missing bytes treated as 0."""
    return [reader.u8_or_zero(start + i) for i in range(length)]


def frl_rate_label(value: int) -> str:
    """Decode the max Fixed Rate Link rate from the upper nibble of the given byte."""
    try:
        return FRL_RATES[(value & 0xF0) >> 4]
    except IndexError:
        return 'Unknown'


def vrr_range(first: int, second: int) -> tuple[Optional[int], Optional[int]]:
    """VRR min is 6 bits; VRR max is 10 bits with its 2 most significant bits in the top of the first byte"""
    vrr_min = first & 0x3F
    vrr_max = (first & 0xC0) << 2 | second
    return (vrr_min or None), (vrr_max or None)


def read_oui(reader: BlockReader, start: int) -> int:
    """Read the 3-byte little-endian OUI at ``start``"""
    u8 = reader.u8_or_zero
    return u8(start + 2) << 16 | u8(start + 1) << 8 | u8(start)


@dataclass
class VendorDataBlock(DataBlock, tag=DataBlockTag.VENDOR_SPECIFIC):
    ieee_oui: int = 0

    def __init_subclass__(cls, oui: IeeeOui = None, min_length: int = 0, **kwargs):
        super().__init_subclass__(**kwargs)
        if oui is not None:
            layouts = VENDOR_BLOCK_TYPES.setdefault(oui, [])
            layouts.append((min_length, cls))
            layouts.sort(key=lambda layout: layout[0], reverse=True)

    @classmethod
    def parse(cls, reader: BlockReader, start: int, length: int, context: ExtensionParseContext) -> VendorDataBlock:
        oui = read_oui(reader, start)
        block_cls = next((bc for min_len, bc in VENDOR_BLOCK_TYPES.get(oui, ()) if length >= min_len), VendorDataBlock)
        block = block_cls(length, oui)
        block.parse_payload(reader, start - 1, length)
        return block

    def parse_payload(self, reader: BlockReader, header: int, length: int):
        """
        :param reader: A reader for the extension block that contains this data block
        :param header: The offset of this data block's header byte; the OUI occupies the 3 bytes that follow it
        :param length: The payload length
        """
        pass

    @property
    def oui_name(self) -> Optional[str]:
        try:
            return IeeeOui(self.ieee_oui).name
        except ValueError:
            return None


@dataclass
class DolbyVisionVendorDataBlock(VendorDataBlock, oui=IeeeOui.DOLBY_VISION):
    supports_dolby_vision: bool = True


@dataclass
class Hdmi14VendorDataBlock(VendorDataBlock, oui=IeeeOui.HDMI14):
    physical_address: int = 0
    supports_ai: Optional[bool] = None
    supports_deep_color_48: Optional[bool] = None
    supports_deep_color_36: Optional[bool] = None
    supports_deep_color_30: Optional[bool] = None
    supports_deep_color_y444: Optional[bool] = None
    supports_dual_link_dvi: Optional[bool] = None
    max_tmds_rate_mhz: Optional[int] = None
    are_progressive_latency_fields_present: Optional[bool] = None
    are_interlaced_latency_fields_present: Optional[bool] = None
    supports_game_content_type: bool = False
    progressive_video_latency_ms: Optional[int] = None
    progressive_audio_latency_ms: Optional[int] = None
    interlaced_video_latency_ms: Optional[int] = None
    interlaced_audio_latency_ms: Optional[int] = None

    @property
    def physical_address_str(self) -> str:
        address = self.physical_address
        return '.'.join(str((address >> shift) & 0x0F) for shift in (12, 8, 4, 0))

    def parse_payload(self, reader: BlockReader, header: int, length: int):
        u8 = reader.u8_or_zero
        self.physical_address = u8(header + 4) << 8 | u8(header + 5)
        if length >= 6:
            flags = u8(header + 6)
            self.supports_ai = bool(flags & 0x80)
            self.supports_deep_color_48 = bool(flags & 0x40)
            self.supports_deep_color_36 = bool(flags & 0x20)
            self.supports_deep_color_30 = bool(flags & 0x10)
            self.supports_deep_color_y444 = bool(flags & 0x08)
            self.supports_dual_link_dvi = bool(flags & 0x01)
        if length >= 7:
            self.max_tmds_rate_mhz = u8(header + 7) * 5
        if length >= 8:
            flags = u8(header + 8)
            progressive = bool(flags & 0x80)
            # Interlaced latency fields are only meaningful when progressive latency fields are also present
            self.are_progressive_latency_fields_present = progressive
            self.are_interlaced_latency_fields_present = progressive and bool(flags & 0x40)
            if flags & 0x20 and flags & 0x08:
                self.supports_game_content_type = True
        if self.are_progressive_latency_fields_present and length >= 10:
            self.progressive_video_latency_ms = (u8(header + 9) - 1) * 2
            self.progressive_audio_latency_ms = (u8(header + 10) - 1) * 2
        if self.are_interlaced_latency_fields_present and length >= 12:
            self.interlaced_video_latency_ms = (u8(header + 11) - 1) * 2
            self.interlaced_audio_latency_ms = (u8(header + 12) - 1) * 2


@dataclass
class Hdmi20VendorDataBlock(VendorDataBlock, oui=IeeeOui.HDMI_FORUM, min_length=0):
    payload_version: int = 0
    max_tmds_rate_mhz: int = 0
    supports_scdc: bool = False
    supports_scdc_rr: bool = False
    supports_lte_340_scramble: bool = False
    supports_3d_iv: bool = False
    supports_3d_dv: bool = False
    supports_3d_osd: bool = False
    supports_deep_color_y420_48: bool = False
    supports_deep_color_y420_36: bool = False
    supports_deep_color_y420_30: bool = False

    def parse_payload(self, reader: BlockReader, header: int, length: int):
        u8 = reader.u8_or_zero
        self.payload_version = u8(header + 4)
        self.max_tmds_rate_mhz = u8(header + 5) * 5
        flags = u8(header + 6)
        self.supports_scdc = bool(flags & 0x80)
        self.supports_scdc_rr = bool(flags & 0x40)
        self.supports_lte_340_scramble = bool(flags & 0x08)
        self.supports_3d_iv = bool(flags & 0x04)
        self.supports_3d_dv = bool(flags & 0x02)
        self.supports_3d_osd = bool(flags & 0x01)
        flags = u8(header + 7)
        self.supports_deep_color_y420_48 = bool(flags & 0x04)
        self.supports_deep_color_y420_36 = bool(flags & 0x02)
        self.supports_deep_color_y420_30 = bool(flags & 0x01)


@dataclass
class HdmiForumVendorDataBlock(VendorDataBlock, oui=IeeeOui.HDMI_FORUM, min_length=8):
    hf_payload_version: int = 0
    max_tmds_character_rate_mhz: int = 0
    supports_scdc: bool = False
    supports_scdc_rr: bool = False
    max_fixed_rate_link: str = FRL_RATES[0]
    vrr_min_hz: Optional[int] = None
    vrr_max_hz: Optional[int] = None
    hdmi_forum_features: HdmiForumFeatures = field(default_factory=HdmiForumFeatures)

    def parse_payload(self, reader: BlockReader, header: int, length: int):
        data = read_payload(reader, header + 1, length)
        data.extend(0 for _ in range(11 - len(data)))  # Fields beyond the payload are treated as 0
        features = self.hdmi_forum_features
        self.hf_payload_version = data[3]
        self.max_tmds_character_rate_mhz = data[4] * 5
        features.set_scdc_flags(data[5])
        self.supports_scdc = features.is_scdc_present
        self.supports_scdc_rr = features.is_scdc_read_request_capable
        self.max_fixed_rate_link = frl_rate_label(data[6])
        features.set_frl_flags(data[7])
        if length > 8:
            self.vrr_min_hz, self.vrr_max_hz = vrr_range(data[8], data[9])
        if length > 10:
            features.set_dsc_flags(data[10])
