"""
CTA-861 extended tag data blocks.  The first payload byte of a data block with tag 7 holds the extended tag code,
which determines how the rest of the payload is decoded.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Type

from .data_blocks import DataBlock, ShortVideoDescriptor, read_short_video_descriptors
from .enums import DataBlockTag, ExtendedTag, IeeeOui
from .enums import OVERSCAN_BEHAVIOR, EOTF_LABELS, STATIC_METADATA_DESCRIPTORS, DYNAMIC_METADATA_TYPES, ROOM_TYPES
from .enums import FRL_RATES, PQ_EOTF, STATIC_METADATA_TYPE_1
from .utils import Record
from .vendor_blocks import HdmiForumFeatures, read_payload, frl_rate_label, vrr_range, read_oui

if TYPE_CHECKING:
    from .data_blocks import ExtensionParseContext
    from .reader import BlockReader

__all__ = [
    'ExtendedTagDataBlock', 'VideoCapabilityDataBlock', 'VendorSpecificVideoDataBlock', 'ColorimetryDataBlock',
    'HdrStaticMetadataDataBlock', 'HdrDynamicMetadataDataBlock', 'VideoFormatPreference',
    'VideoFormatPreferenceDataBlock', 'YCbCr420VideoDataBlock', 'YCbCr420CapabilityMapDataBlock',
    'RoomConfigurationDataBlock', 'HdmiForumScdb', 'UnknownExtendedTagBlock',
]
log = logging.getLogger(__name__)

EXTENDED_TAG_TYPES: dict[ExtendedTag, Type[ExtendedTagDataBlock]] = {}


def _bit_labels(value: int, labels) -> list[str]:
    return [label for i, label in enumerate(labels) if value & (1 << i)]


@dataclass
class ExtendedTagDataBlock(DataBlock, tag=DataBlockTag.EXTENDED_TAG):
    extended_tag: int = 0
    error: Optional[str] = None

    def __init_subclass__(cls, extended_tag: ExtendedTag = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if extended_tag is not None:
            EXTENDED_TAG_TYPES[extended_tag] = cls

    @classmethod
    def parse(
        cls, reader: BlockReader, start: int, length: int, context: ExtensionParseContext
    ) -> ExtendedTagDataBlock:
        """
        :param reader: A reader for the extension block that contains this data block
        :param start: The offset of the extended tag code byte
        :param length: The payload length from the header byte, including the extended tag code byte
        :param context: Shared state for the extension being decoded
        :return: The decoded data block
        """
        code = reader.u8_or_zero(start)
        try:
            block_cls = EXTENDED_TAG_TYPES[ExtendedTag(code)]
        except (KeyError, ValueError):
            log.debug(f'Unhandled extended tag code={code} at offset={start} in block={reader.block_index}')
            return UnknownExtendedTagBlock(length, code)

        block = block_cls(length, code)
        block.parse_payload(reader, start, length, context)
        return block

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        pass

    @property
    def extended_tag_name(self) -> Optional[str]:
        try:
            return ExtendedTag(self.extended_tag).name
        except ValueError:
            return None

    def __serializable__(self):
        return {'extended_tag_name': self.extended_tag_name, **super().__serializable__()}


@dataclass
class VideoCapabilityDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.VIDEO_CAPABILITY):
    supports_quantization_range_ycc: bool = False
    supports_quantization_range_rgb: bool = False
    overscan_pt: str = OVERSCAN_BEHAVIOR[0]
    overscan_it: str = OVERSCAN_BEHAVIOR[0]
    overscan_ce: str = OVERSCAN_BEHAVIOR[0]
    supports_qms: bool = False
    supports_vrr: bool = False
    supports_cinema_vrr: bool = False
    supports_negative_mrr: bool = False
    supports_fva: bool = False
    supports_allm: bool = False

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        flags = reader.u8_or_zero(start + 1)
        self.supports_quantization_range_ycc = bool(flags & 0x80)
        self.supports_quantization_range_rgb = bool(flags & 0x40)
        self.overscan_pt = OVERSCAN_BEHAVIOR[(flags & 0x30) >> 4]
        self.overscan_it = OVERSCAN_BEHAVIOR[(flags & 0x0C) >> 2]
        self.overscan_ce = OVERSCAN_BEHAVIOR[flags & 0x03]
        if length > 2:
            flags = reader.u8_or_zero(start + 2)
            self.supports_qms = bool(flags & 0x80)
            self.supports_vrr = bool(flags & 0x40)
            self.supports_cinema_vrr = bool(flags & 0x20)
            self.supports_negative_mrr = bool(flags & 0x10)
            self.supports_fva = bool(flags & 0x08)
            self.supports_allm = bool(flags & 0x04)

    @property
    def signals_hdmi_21(self) -> bool:
        """Some displays signal HDMI 2.1 features here without an HDMI Forum VSDB"""
        flags = (self.supports_qms, self.supports_cinema_vrr, self.supports_negative_mrr, self.supports_fva)
        return any(flags) or self.supports_allm


@dataclass
class VendorSpecificVideoDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.VENDOR_SPECIFIC_VIDEO):
    vendor_specific_video_oui: Optional[int] = None
    supports_hdr10_plus: bool = False
    supports_dolby_vision: bool = False

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        if length < 4:
            self.error = 'Vendor-Specific Video Data Block too short'
            return

        self.vendor_specific_video_oui = oui = read_oui(reader, start + 1)
        if oui == IeeeOui.HDR10_PLUS:
            self.supports_hdr10_plus = True
        elif oui == IeeeOui.DOLBY_VISION:
            self.supports_dolby_vision = True


@dataclass
class ColorimetryDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.COLORIMETRY):
    supports_bt2020_rgb: bool = False
    supports_bt2020_ycc: bool = False
    supports_bt2020_cycc: bool = False
    supports_adobe_rgb: bool = False
    supports_adobe_ycc601: bool = False
    supports_sycc601: bool = False
    supports_xvycc709: bool = False
    supports_xvycc601: bool = False
    # The gamut metadata profile flags are 0 / 1 rather than bools
    gamut_md3: int = 0
    gamut_md2: int = 0
    gamut_md1: int = 0
    gamut_md0: int = 0
    supports_ictcp: Optional[bool] = None
    supports_st2094_40: Optional[bool] = None
    supports_st2094_10: Optional[bool] = None
    supports_bt2100_ictcp: Optional[bool] = None

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        u8 = reader.u8_or_zero
        flags = u8(start + 1)
        self.supports_bt2020_rgb = bool(flags & 0x80)
        self.supports_bt2020_ycc = bool(flags & 0x40)
        self.supports_bt2020_cycc = bool(flags & 0x20)
        self.supports_adobe_rgb = bool(flags & 0x10)
        self.supports_adobe_ycc601 = bool(flags & 0x08)
        self.supports_sycc601 = bool(flags & 0x04)
        self.supports_xvycc709 = bool(flags & 0x02)
        self.supports_xvycc601 = bool(flags & 0x01)

        flags = u8(start + 2)
        self.gamut_md3 = (flags >> 3) & 1
        self.gamut_md2 = (flags >> 2) & 1
        self.gamut_md1 = (flags >> 1) & 1
        self.gamut_md0 = flags & 1

        if length > 3:
            flags = u8(start + 3)
            self.supports_ictcp = bool(flags & 0x80)
            self.supports_st2094_40 = bool(flags & 0x40)
            self.supports_st2094_10 = bool(flags & 0x20)
            self.supports_bt2100_ictcp = bool(flags & 0x10)

    @property
    def supports_bt2020(self) -> bool:
        return self.supports_bt2020_rgb or self.supports_bt2020_ycc or self.supports_bt2020_cycc


@dataclass
class HdrStaticMetadataDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.HDR_STATIC_METADATA):
    supported_eotfs: Optional[list[str]] = None
    supported_static_metadata_descriptors: Optional[list[str]] = None
    desired_content_max_luminance_code: Optional[int] = None
    desired_content_max_frame_average_luminance_code: Optional[int] = None
    desired_content_min_luminance_code: Optional[int] = None
    supports_hdr10: bool = False

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        if length < 2:
            self.error = 'Empty Data Block'
            return

        self.supported_eotfs = _bit_labels(reader.u8_or_zero(start + 1), EOTF_LABELS)
        if length > 2:
            descriptors = _bit_labels(reader.u8_or_zero(start + 2), STATIC_METADATA_DESCRIPTORS)
        else:
            descriptors = []
        self.supported_static_metadata_descriptors = descriptors

        if length >= 4:
            self.desired_content_max_luminance_code = reader.u8(start + 3)
            self.desired_content_max_frame_average_luminance_code = reader.u8(start + 4)
        if length >= 5:
            self.desired_content_min_luminance_code = reader.u8(start + 5)

        self.supports_hdr10 = PQ_EOTF in self.supported_eotfs and STATIC_METADATA_TYPE_1 in descriptors


@dataclass
class HdrDynamicMetadataDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.HDR_DYNAMIC_METADATA):
    """
    Metadata type 1 (ST 2094-10) is authored by Dolby and type 4 (ST 2094-40) by Samsung, but a display can support
    them without supporting Dolby Vision / HDR10+, so neither is treated as a signal for those formats.
    """

    supported_dynamic_metadata_types: Optional[list[str]] = None
    dynamic_hdr_metadata_type_id: Optional[int] = None
    dynamic_hdr_metadata_version_number: Optional[int] = None

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        if length < 3:
            self.error = 'Data Block too short'
            return

        self.dynamic_hdr_metadata_type_id = type_id = reader.u8_or_zero(start + 1)
        if label := DYNAMIC_METADATA_TYPES.get(type_id):
            self.supported_dynamic_metadata_types = [label]
        else:
            self.supported_dynamic_metadata_types = []
        self.dynamic_hdr_metadata_version_number = reader.u8_or_zero(start + 2)


@dataclass
class VideoFormatPreference(Record):
    svr_code: int
    frr_code: int


@dataclass
class VideoFormatPreferenceDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.VIDEO_FORMAT_PREFERENCE):
    video_format_preferences: Optional[list[VideoFormatPreference]] = None

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        if length < 1:
            self.error = 'Empty Data Block'
            return

        self.video_format_preferences = [
            VideoFormatPreference(value & 0x3F, (value & 0xC0) >> 6)
            for value in (reader.u8_or_zero(start + i) for i in range(1, length))
        ]


@dataclass
class YCbCr420VideoDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.YCBCR420_VIDEO):
    """Video formats that are only supported with YCbCr 4:2:0 sampling"""

    ycbcr420_only_short_video_descriptors: list[ShortVideoDescriptor] = field(default_factory=list)

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        self.ycbcr420_only_short_video_descriptors = read_short_video_descriptors(reader, start + 1, length - 1)


@dataclass
class YCbCr420CapabilityMapDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.YCBCR420_CAPABILITY_MAP):
    """
    A bitmap over the SVDs in the most recently decoded video data block, indicating which of those formats also
    support YCbCr 4:2:0 sampling.  Bit ``j`` of payload byte ``k`` refers to SVD ``8k + j``.  Set bits that refer to
    SVDs that do not exist are represented by None.
    """

    ycbcr420_capable_short_video_descriptors: Optional[list[Optional[ShortVideoDescriptor]]] = None

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        if (video_block := context.last_video_block) is None:
            return

        svds = video_block.short_video_descriptors
        capable = []
        for i in range(1, length):
            if (value := reader.u8(start + i)) is None:
                break
            for bit in range(8):
                if value & (1 << bit):
                    index = (i - 1) * 8 + bit
                    capable.append(svds[index] if index < len(svds) else None)

        self.ycbcr420_capable_short_video_descriptors = capable


@dataclass
class RoomConfigurationDataBlock(ExtendedTagDataBlock, extended_tag=ExtendedTag.ROOM_CONFIGURATION):
    speaker_count: Optional[int] = None
    room_type_code: Optional[int] = None
    room_type_string: Optional[str] = None

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        if length < 1:
            self.error = 'Empty Data Block'
            return

        config = reader.u8_or_zero(start + 1)
        self.speaker_count = (config & 0x1F) + 1
        self.room_type_code = (config & 0x60) >> 5
        self.room_type_string = ROOM_TYPES[self.room_type_code]


@dataclass
class HdmiForumScdb(ExtendedTagDataBlock, extended_tag=ExtendedTag.HDMI_FORUM_SCDB):
    """HDMI Forum Sink Capability Data Structure"""

    hf_scdb_version: Optional[int] = None
    max_tmds_character_rate_mhz: Optional[int] = None
    max_fixed_rate_link: Optional[str] = None
    vrr_min_hz: Optional[int] = None
    vrr_max_hz: Optional[int] = None
    hdmi_forum_features: Optional[HdmiForumFeatures] = None

    def parse_payload(self, reader: BlockReader, start: int, length: int, context: ExtensionParseContext):
        if length < 3:
            self.error = 'HDMI Forum SCDB too short'
            return

        data = read_payload(reader, start, length)
        data.extend(0 for _ in range(9 - len(data)))  # Fields beyond the payload are treated as 0
        self.hf_scdb_version = data[1]
        self.max_tmds_character_rate_mhz = data[2] * 5
        self.hdmi_forum_features = features = HdmiForumFeatures()
        if length > 3:
            features.set_scdc_flags(data[3])
        if length > 4:
            self.max_fixed_rate_link = frl_rate_label(data[4])
            features.set_frl_flags(data[5])
        if length > 6:
            self.vrr_min_hz, self.vrr_max_hz = vrr_range(data[6], data[7])
        if length > 8:
            features.set_dsc_flags(data[8])

    @property
    def signals_hdmi_21(self) -> bool:
        return self.hdmi_forum_features is not None or (
            self.max_fixed_rate_link is not None and self.max_fixed_rate_link != FRL_RATES[0]
        )


@dataclass
class UnknownExtendedTagBlock(ExtendedTagDataBlock):
    """An extended tag block with an unrecognized extended tag code; the raw code is preserved in ``extended_tag``."""
