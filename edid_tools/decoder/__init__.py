"""
Decoder for EDID (Extended Display Identification Data) blobs, including CTA-861 and DisplayID extension blocks.

Decoding never raises - anomalies in the data are reported as :class:`EdidWarning` entries on the result.

:author: Doug Skrypa
"""

from .base_block import BaseBlock, BasicDisplayParams, Chromaticity, ProductInfo, StandardDisplayMode
from .data_blocks import DataBlock, AudioDataBlock, VideoDataBlock, SpeakerDataBlock
from .descriptors import MonitorDescriptors, SpwgData
from .enums import DataBlockTag, ExtendedTag, ExtensionType, IeeeOui
from .extended_tags import ExtendedTagDataBlock, HdmiForumScdb, HdrStaticMetadataDataBlock, UnknownExtendedTagBlock
from .extensions import ExtensionBlock, CtaExtensionBlock, DisplayIdExtensionBlock, UnknownExtensionBlock
from .features import FeatureSupport
from .hex_dump import parse_hex_dump
from .parser import ParsedEdid, decode, parse_edid
from .reader import EdidWarning, WarningCode, calc_checksum
from .timing import Dtd, NativeResolution
from .vendor_blocks import VendorDataBlock

__all__ = [
    'decode', 'parse_edid', 'parse_hex_dump', 'calc_checksum', 'ParsedEdid', 'EdidWarning', 'WarningCode',
    'BaseBlock', 'BasicDisplayParams', 'Chromaticity', 'ProductInfo', 'StandardDisplayMode', 'MonitorDescriptors',
    'SpwgData', 'Dtd', 'NativeResolution', 'ExtensionBlock', 'CtaExtensionBlock', 'DisplayIdExtensionBlock',
    'UnknownExtensionBlock', 'DataBlock', 'AudioDataBlock', 'VideoDataBlock', 'SpeakerDataBlock', 'VendorDataBlock',
    'ExtendedTagDataBlock', 'HdmiForumScdb', 'HdrStaticMetadataDataBlock', 'UnknownExtendedTagBlock',
    'FeatureSupport', 'DataBlockTag', 'ExtendedTag', 'ExtensionType', 'IeeeOui',
]
