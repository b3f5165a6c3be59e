"""
Detailed Timing Descriptors (DTDs) and the refresh rates / native resolution derived from them.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .enums import DTD_LENGTH, SyncType
from .utils import Record, diagonal_mm, diagonal_inches, round_half_up

if TYPE_CHECKING:
    from .base_block import BasicDisplayParams
    from .reader import BlockReader

__all__ = ['Dtd', 'NativeResolution', 'parse_dtd', 'get_dtds', 'dtd_refresh_rate', 'get_native_resolution']
log = logging.getLogger(__name__)


@dataclass
class Dtd(Record):
    """
    An 18-byte Detailed Timing Descriptor.

    Exactly one of ``vsync_polarity`` / ``vsync_serrated`` and exactly one of ``hsync_polarity`` /
    ``sync_all_rgb_lines`` is populated; which one depends on ``sync_type_code``.
    """

    pixel_clock_mhz: float
    horizontal_active_pixels: int
    horizontal_blank_pixels: int
    vertical_active_lines: int
    vertical_blank_lines: int
    horizontal_sync_offset_pixels: int
    horizontal_sync_pulse_pixels: int
    vertical_sync_offset_lines: int
    vertical_sync_pulse_lines: int
    horizontal_display_size_mm: int
    vertical_display_size_mm: int
    diagonal_display_size_mm: Optional[float]
    horizontal_border_pixels: int
    vertical_border_lines: int
    is_interlaced: bool
    stereo_mode_code: int
    sync_type_code: int
    vsync_polarity: Optional[bool] = None
    vsync_serrated: Optional[bool] = None
    hsync_polarity: Optional[bool] = None
    sync_all_rgb_lines: Optional[bool] = None
    two_way_stereo: bool = False

    @property
    def sync_type(self) -> SyncType:
        return SyncType(self.sync_type_code)

    @property
    def refresh_rate_hz(self) -> Optional[float]:
        return dtd_refresh_rate(self)

    def __str__(self) -> str:
        scan = 'i' if self.is_interlaced else 'p'
        return f'{self.horizontal_active_pixels}x{self.vertical_active_lines}{scan} @ {self.pixel_clock_mhz} MHz'


@dataclass
class NativeResolution(Record):
    active_horizontal_pixels: int
    active_vertical_lines: int
    physical_width_mm: int
    physical_height_mm: int
    diagonal_inches: Optional[float]
    is_interlaced: bool
    refresh_rate_hz: int

    def __str__(self) -> str:
        scan = 'i' if self.is_interlaced else 'p'
        return f'{self.active_horizontal_pixels}x{self.active_vertical_lines}{scan} @ {self.refresh_rate_hz} Hz'


def parse_dtd(reader: BlockReader, offset: int) -> Optional[Dtd]:
    """
    :param reader: A reader for the block that contains the DTD
    :param offset: The offset of the first byte of the DTD, relative to the start of the block
    :return: The decoded DTD, or None if the pixel clock bytes are not available
    """
    if (clock_lo := reader.u8(offset)) is None or (clock_hi := reader.u8(offset + 1)) is None:
        return None

    u8 = reader.u8_or_zero
    b4, b7 = u8(offset + 4), u8(offset + 7)
    b10, b11 = u8(offset + 10), u8(offset + 11)
    b14, b17 = u8(offset + 14), u8(offset + 17)
    h_size = ((b14 >> 4) & 0x0F) << 8 | u8(offset + 12)
    v_size = (b14 & 0x0F) << 8 | u8(offset + 13)
    sync_type_code = (b17 >> 3) & 0x03

    dtd = Dtd(
        pixel_clock_mhz=(clock_hi << 8 | clock_lo) / 100,
        horizontal_active_pixels=((b4 >> 4) & 0x0F) << 8 | u8(offset + 2),
        horizontal_blank_pixels=(b4 & 0x0F) << 8 | u8(offset + 3),
        vertical_active_lines=((b7 >> 4) & 0x0F) << 8 | u8(offset + 5),
        vertical_blank_lines=(b7 & 0x0F) << 8 | u8(offset + 6),
        horizontal_sync_offset_pixels=((b11 >> 6) & 0x03) << 8 | u8(offset + 8),
        horizontal_sync_pulse_pixels=((b11 >> 4) & 0x03) << 8 | u8(offset + 9),
        vertical_sync_offset_lines=((b11 >> 2) & 0x03) << 4 | ((b10 >> 4) & 0x0F),
        vertical_sync_pulse_lines=(b11 & 0x03) << 4 | (b10 & 0x0F),
        horizontal_display_size_mm=h_size,
        vertical_display_size_mm=v_size,
        diagonal_display_size_mm=diagonal_mm(h_size, v_size),
        horizontal_border_pixels=u8(offset + 15),
        vertical_border_lines=u8(offset + 16),
        is_interlaced=bool(b17 & 0x80),
        stereo_mode_code=(b17 >> 5) & 0x03,
        sync_type_code=sync_type_code,
        two_way_stereo=bool(b17 & 0x01),
    )
    if sync_type_code == SyncType.DIGITAL_SEPARATE:
        dtd.vsync_polarity = bool(b17 & 0x04)
    else:
        dtd.vsync_serrated = bool(b17 & 0x04)

    if sync_type_code in (SyncType.ANALOG_COMPOSITE, SyncType.BIPOLAR_ANALOG_COMPOSITE):
        dtd.sync_all_rgb_lines = bool(b17 & 0x02)
    else:
        dtd.hsync_polarity = bool(b17 & 0x02)

    return dtd


def get_dtds(reader: BlockReader, start: int, end: int) -> list[Dtd]:
    """
    Decode every DTD in the 18-byte slots in ``[start, end)``.  Slots with a zero pixel clock hold monitor descriptors
    or padding, so they are skipped rather than treated as the end of the list.  Slots that do not fit entirely before
    ``end`` are ignored.
    """
    dtds = []
    for offset in range(start, end - DTD_LENGTH + 1, DTD_LENGTH):
        if (lo := reader.u8(offset)) is None or (hi := reader.u8(offset + 1)) is None:
            break
        elif lo == hi == 0:
            log.debug(f'Skipping non-DTD slot at offset={offset} in block={reader.block_index}')
            continue
        if dtd := parse_dtd(reader, offset):
            dtds.append(dtd)
    return dtds


def dtd_refresh_rate(dtd: Dtd) -> Optional[float]:
    """
    :param dtd: A decoded DTD
    :return: The unrounded refresh rate in Hz, or None if it cannot be computed
    """
    if dtd.horizontal_active_pixels <= 0 or dtd.vertical_active_lines <= 0:
        return None
    h_total = dtd.horizontal_active_pixels + dtd.horizontal_blank_pixels
    v_total = dtd.vertical_active_lines + dtd.vertical_blank_lines
    rate = dtd.pixel_clock_mhz * 1_000_000 / (h_total * v_total)
    return rate if rate > 0 else None


def get_native_resolution(dtds: list[Dtd], basic_display_params: BasicDisplayParams) -> Optional[NativeResolution]:
    """
    The native resolution is the first DTD, when the base block declares that the preferred timing mode is included
    in it.  None is returned if any of the fields needed to describe it are zero.
    """
    if not basic_display_params.is_preferred_timing or not dtds:
        return None

    dtd = dtds[0]
    required = (
        dtd.horizontal_active_pixels,
        dtd.vertical_active_lines,
        dtd.horizontal_display_size_mm,
        dtd.vertical_display_size_mm,
        dtd.pixel_clock_mhz,
    )
    if not all(required):
        return None

    h_total = dtd.horizontal_active_pixels + dtd.horizontal_blank_pixels
    v_total = dtd.vertical_active_lines + dtd.vertical_blank_lines
    return NativeResolution(
        active_horizontal_pixels=dtd.horizontal_active_pixels,
        active_vertical_lines=dtd.vertical_active_lines,
        physical_width_mm=dtd.horizontal_display_size_mm,
        physical_height_mm=dtd.vertical_display_size_mm,
        diagonal_inches=diagonal_inches(dtd.horizontal_display_size_mm, dtd.vertical_display_size_mm),
        is_interlaced=dtd.is_interlaced,
        refresh_rate_hz=round_half_up(dtd.pixel_clock_mhz * 1_000_000 / (h_total * v_total)),
    )
