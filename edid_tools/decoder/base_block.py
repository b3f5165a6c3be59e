"""
The 128-byte EDID base block.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .descriptors import MonitorDescriptors, SpwgData, get_monitor_descriptors
from .enums import DIGITAL_COLOR_SPACES, EDID_HEADER, XY_PIXEL_RATIOS
from .reader import WarningCode, valid_checksum
from .timing import Dtd, get_dtds
from .utils import Record, diagonal_inches

if TYPE_CHECKING:
    from .reader import BlockReader

__all__ = [
    'BasicDisplayParams', 'Chromaticity', 'StandardDisplayMode', 'BaseBlock', 'ProductInfo', 'parse_base_block',
    'get_vendor_id', 'get_basic_display_params', 'get_chromaticity', 'get_standard_display_modes',
]
log = logging.getLogger(__name__)

VENDOR_ID_CHARS = ' ABCDEFGHIJKLMNOPQRSTUVWXYZ'
KNOWN_EDID_1_REVISIONS = range(5)
DESCRIPTOR_START, DESCRIPTOR_END = 54, 126


@dataclass
class BasicDisplayParams(Record):
    is_digital: bool
    is_vesa_dfp_compatible: Optional[bool] = None
    white_sync_levels: Optional[int] = None
    is_blank_to_black: Optional[bool] = None
    is_separate_sync_supported: Optional[bool] = None
    is_composite_sync_supported: Optional[bool] = None
    is_sync_on_green: Optional[bool] = None
    is_vsync_serrated: Optional[bool] = None
    physical_width_mm: int = 0
    physical_height_mm: int = 0
    diagonal_inches: Optional[float] = None
    display_gamma: float = 1.0
    supports_dpms_standby: bool = False
    supports_dpms_suspend: bool = False
    supports_dpms_active_off: bool = False
    display_type_code: int = 0
    is_standard_srgb: bool = False
    is_preferred_timing: bool = False
    is_gtf_supported: bool = False

    @property
    def digital_color_spaces(self) -> Optional[str]:
        """The supported color encodings for digital inputs, from the display type bits of the features byte"""
        return DIGITAL_COLOR_SPACES[self.display_type_code] if self.is_digital else None


@dataclass
class Chromaticity(Record):
    """Raw 10-bit CIE 1931 coordinates.  The ``*_coords`` properties normalize them to the 0-1 range."""

    red_x: int
    red_y: int
    green_x: int
    green_y: int
    blue_x: int
    blue_y: int
    white_x: int
    white_y: int

    @property
    def red_x_coords(self) -> float:
        return self.red_x / 1024

    @property
    def red_y_coords(self) -> float:
        return self.red_y / 1024

    @property
    def green_x_coords(self) -> float:
        return self.green_x / 1024

    @property
    def green_y_coords(self) -> float:
        return self.green_y / 1024

    @property
    def blue_x_coords(self) -> float:
        return self.blue_x / 1024

    @property
    def blue_y_coords(self) -> float:
        return self.blue_y / 1024

    @property
    def white_x_coords(self) -> float:
        return self.white_x / 1024

    @property
    def white_y_coords(self) -> float:
        return self.white_y / 1024

    def primaries(self) -> tuple[float, float, float, float, float, float]:
        """The normalized red / green / blue (x, y) coordinates, in that order"""
        return (
            self.red_x_coords,
            self.red_y_coords,
            self.green_x_coords,
            self.green_y_coords,
            self.blue_x_coords,
            self.blue_y_coords,
        )

    def __serializable__(self):
        data = super().__serializable__()
        for key in list(data):
            data[f'{key}_coords'] = getattr(self, f'{key}_coords')
        return data


@dataclass
class StandardDisplayMode(Record):
    x_resolution_px: int
    xy_pixel_ratio: int
    vert_freq_hz: int

    @property
    def xy_pixel_ratio_label(self) -> str:
        return XY_PIXEL_RATIOS[self.xy_pixel_ratio]

    def __serializable__(self):
        return {**super().__serializable__(), 'xy_pixel_ratio_label': self.xy_pixel_ratio_label}


@dataclass
class BaseBlock(Record):
    raw_bytes: bytes = field(repr=False)
    is_header_valid: bool
    vendor_id: str
    product_code: int
    serial_number: int
    manufacture_week: int
    manufacture_year: int
    edid_version: int
    edid_revision: int
    basic_display_params: BasicDisplayParams
    chromaticity: Chromaticity
    timing_bitmap: int
    standard_display_modes: list[StandardDisplayMode]
    descriptors: MonitorDescriptors
    dtds: list[Dtd]
    number_of_extensions: int
    checksum: int
    is_checksum_valid: Optional[bool]

    @property
    def header_validity(self) -> str:
        return 'OK' if self.is_header_valid else 'ERROR'

    @property
    def edid_version_string(self) -> str:
        return f'{self.edid_version}.{self.edid_revision}'

    @property
    def spwg(self) -> Optional[SpwgData]:
        return self.descriptors.spwg

    def __serializable__(self):
        data = {'header_validity': self.header_validity, 'edid_version_string': self.edid_version_string}
        data.update(super().__serializable__())
        return data


@dataclass
class ProductInfo(Record):
    product_code: int
    model_name: Optional[str]
    serial_number_int: int
    serial_number_str: Optional[str]
    unspecified_strings: Optional[list[str]]
    manufacture_week: int
    manufacture_year: int

    @classmethod
    def from_base_block(cls, block: BaseBlock) -> ProductInfo:
        descriptors = block.descriptors
        return cls(
            product_code=block.product_code,
            model_name=descriptors.model_name or None,
            serial_number_int=block.serial_number,
            serial_number_str=descriptors.serial_number,
            unspecified_strings=descriptors.unspecified_strings or None,
            manufacture_week=block.manufacture_week,
            manufacture_year=block.manufacture_year,
        )


def get_vendor_id(reader: BlockReader) -> str:
    """
    Decode the 3-letter PNP vendor ID that is packed into bytes 8-9 as three 5-bit letter codes (1=A ... 26=Z).
    Codes outside that range do not contribute a character.
    """
    hi, lo = reader.u8_or_zero(8), reader.u8_or_zero(9)
    codes = ((hi >> 2) & 0x1F, (hi & 0x03) << 3 | (lo >> 5) & 0x07, lo & 0x1F)
    return ''.join(VENDOR_ID_CHARS[code] for code in codes if 0 < code < len(VENDOR_ID_CHARS))


def get_basic_display_params(reader: BlockReader) -> BasicDisplayParams:
    u8 = reader.u8_or_zero
    video_input, features = u8(20), u8(24)
    width_mm, height_mm = u8(21) * 10, u8(22) * 10
    params = BasicDisplayParams(
        is_digital=bool(video_input & 0x80),
        physical_width_mm=width_mm,
        physical_height_mm=height_mm,
        diagonal_inches=diagonal_inches(width_mm, height_mm),
        display_gamma=u8(23) * (2.54 / 255) + 1,
        supports_dpms_standby=bool(features & 0x80),
        supports_dpms_suspend=bool(features & 0x40),
        supports_dpms_active_off=bool(features & 0x20),
        display_type_code=(features >> 3) & 0x03,
        is_standard_srgb=bool(features & 0x04),
        is_preferred_timing=bool(features & 0x02),
        is_gtf_supported=bool(features & 0x01),
    )
    if params.is_digital:
        params.is_vesa_dfp_compatible = bool(video_input & 0x01)
    else:
        params.white_sync_levels = (video_input >> 5) & 0x03
        params.is_blank_to_black = bool(video_input & 0x10)
        params.is_separate_sync_supported = bool(video_input & 0x08)
        params.is_composite_sync_supported = bool(video_input & 0x04)
        params.is_sync_on_green = bool(video_input & 0x02)
        params.is_vsync_serrated = bool(video_input & 0x01)
    return params


def get_chromaticity(reader: BlockReader) -> Chromaticity:
    u8 = reader.u8_or_zero
    red_green_lsb, blue_white_lsb = u8(25), u8(26)
    # fmt: off
    return Chromaticity(
        red_x=u8(27) << 2 | (red_green_lsb >> 6) & 0x03,
        red_y=u8(28) << 2 | (red_green_lsb >> 4) & 0x03,
        green_x=u8(29) << 2 | (red_green_lsb >> 2) & 0x03,
        green_y=u8(30) << 2 | red_green_lsb & 0x03,
        blue_x=u8(31) << 2 | (blue_white_lsb >> 6) & 0x03,
        blue_y=u8(32) << 2 | (blue_white_lsb >> 4) & 0x03,
        white_x=u8(33) << 2 | (blue_white_lsb >> 2) & 0x03,
        white_y=u8(34) << 2 | blue_white_lsb & 0x03,
    )
    # fmt: on


def get_standard_display_modes(reader: BlockReader) -> list[StandardDisplayMode]:
    modes = []
    for offset in range(38, 53, 2):
        if (first := reader.u8(offset)) is None or (second := reader.u8(offset + 1)) is None:
            break
        elif first == second == 0x01:
            continue
        modes.append(StandardDisplayMode((first + 31) * 8, (second >> 6) & 0x03, (second & 0x3F) + 60))
    return modes


def _is_header_valid(reader: BlockReader) -> bool:
    return all(reader.u8(i) == expected for i, expected in enumerate(EDID_HEADER))


def parse_base_block(reader: BlockReader) -> BaseBlock:
    u8 = reader.u8_or_zero
    version, revision = u8(18), u8(19)
    if version == 1 and revision not in KNOWN_EDID_1_REVISIONS:
        reader.warn(
            WarningCode.UNKNOWN_EDID_MINOR_VERSION,
            f'Unknown EDID minor version {revision}, assuming 1.4 conformance.',
            19,
            {'major_version': version, 'minor_revision': revision, 'assumed_conformance': 1.4},
        )

    return BaseBlock(
        raw_bytes=reader.raw_bytes,
        is_header_valid=_is_header_valid(reader),
        vendor_id=get_vendor_id(reader),
        product_code=u8(11) << 8 | u8(10),
        serial_number=u8(15) << 24 | u8(14) << 16 | u8(13) << 8 | u8(12),
        manufacture_week=u8(16),
        manufacture_year=u8(17) + 1990,
        edid_version=version,
        edid_revision=revision,
        basic_display_params=get_basic_display_params(reader),
        chromaticity=get_chromaticity(reader),
        timing_bitmap=u8(35) << 16 | u8(36) << 8 | u8(37),
        standard_display_modes=get_standard_display_modes(reader),
        descriptors=get_monitor_descriptors(reader, DESCRIPTOR_START, DESCRIPTOR_END),
        dtds=get_dtds(reader, DESCRIPTOR_START, DESCRIPTOR_END),
        number_of_extensions=u8(126),
        checksum=u8(127),
        is_checksum_valid=valid_checksum(reader.ctx, reader.block_index),
    )
