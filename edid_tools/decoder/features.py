"""
Summarizes display capabilities by combining the signals found across the base block and every extension block.

Many capabilities can be signaled in more than one place, so every value here is a union / max over all of them.
Versions and bit depth are only ever raised, never lowered.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional

from .enums import COLOR_GAMUTS, DISPLAYID_EXTENSION_TAG
from .extended_tags import ColorimetryDataBlock, HdrStaticMetadataDataBlock, HdmiForumScdb
from .extended_tags import VendorSpecificVideoDataBlock, VideoCapabilityDataBlock
from .timing import dtd_refresh_rate
from .utils import Record, round_half_up
from .vendor_blocks import DolbyVisionVendorDataBlock, Hdmi14VendorDataBlock, Hdmi20VendorDataBlock
from .vendor_blocks import HdmiForumVendorDataBlock

if TYPE_CHECKING:
    from .base_block import BaseBlock, BasicDisplayParams, Chromaticity
    from .data_blocks import DataBlock
    from .extensions import ExtensionBlock
    from .timing import NativeResolution

__all__ = ['FeatureSupport', 'build_feature_support', 'infer_color_gamut', 'parse_display_id_version']
log = logging.getLogger(__name__)

# fmt: off
# Red x, red y, green x, green y, blue x, blue y
CANONICAL_GAMUTS = {
    'srgb':       (0.64, 0.33, 0.3, 0.6, 0.15, 0.06),
    'display_p3': (0.68, 0.32, 0.265, 0.69, 0.15, 0.06),
    'adobe_rgb':  (0.64, 0.33, 0.21, 0.71, 0.15, 0.06),
    'rec_2020':   (0.708, 0.292, 0.17, 0.797, 0.131, 0.046),
}
DISPLAYID_REVISIONS = {0x01: 1.3, 0x02: 2.0, 0x03: 2.1}
# fmt: on


@dataclass(frozen=True)
class FeatureSupport(Record):
    color_gamuts: list[str]
    max_input_signal_bit_depth: int
    supports_hdr10: bool
    supports_hdr10_plus: bool
    supports_dolby_vision: bool
    min_srr_hz: int
    max_srr_hz: int
    supports_vrr: bool
    min_vrr_hz: Optional[int]
    max_vrr_hz: Optional[int]
    supports_game_mode: bool
    supports_allm: bool
    hdmi_version: Optional[float]
    edid_version: Optional[float]
    display_id_version: Optional[float]


def infer_color_gamut(chromaticity: Optional[Chromaticity]) -> Optional[str]:
    """
    :param chromaticity: The base block's chromaticity coordinates
    :return: The name of the canonical gamut whose primaries are closest to the given coordinates (by sum of squared
      distances), or None if no coordinates were provided
    """
    if chromaticity is None:
        return None

    primaries = chromaticity.primaries()
    closest, closest_distance = None, math.inf
    for gamut, canonical in CANONICAL_GAMUTS.items():
        distance = sum((a - b) ** 2 for a, b in zip(primaries, canonical))
        if distance < closest_distance:
            closest, closest_distance = gamut, distance
    return closest


def parse_display_id_version(revision: int) -> Optional[float]:
    """
    Revisions 1-3 are well-known values.  Otherwise, the upper nibble is the major version and the lower nibble is the
    minor version.
    """
    if revision <= 0 or revision > 0xFF:
        return None
    elif version := DISPLAYID_REVISIONS.get(revision):
        return version

    major, minor = (revision >> 4) & 0x0F, revision & 0x0F
    if major == 0 or minor > 9:
        return None
    return round(major + minor / 10, 1)


def _parse_edid_version(major: int, minor: int) -> float:
    # Multi-digit revisions are not padded, so 1.10 becomes 1.1
    return float(f'{major}.{minor}')


def _valid_rate(rate_hz: Optional[float]) -> Optional[int]:
    if rate_hz is None or not math.isfinite(rate_hz) or rate_hz <= 0:
        return None
    return rounded if (rounded := round_half_up(rate_hz)) > 0 else None


@dataclass
class _FeatureAccumulator:
    gamuts: set[str] = field(default_factory=set)
    bit_depth: int = 8
    hdr10: bool = False
    hdr10_plus: bool = False
    dolby_vision: bool = False
    vrr: bool = False
    game_mode: bool = False
    allm: bool = False
    min_vrr: Optional[int] = None
    max_vrr: Optional[int] = None
    hdmi_version: Optional[float] = None
    display_id_version: Optional[float] = None
    min_srr: float = math.inf
    max_srr: int = 0

    def add_srr(self, rate_hz: Optional[float]):
        if (rate := _valid_rate(rate_hz)) is not None:
            self.min_srr = min(self.min_srr, rate)
            self.max_srr = max(self.max_srr, rate)

    def add_vrr_range(self, min_hz: Optional[int], max_hz: Optional[int]):
        if min_hz is not None or max_hz is not None:
            self.vrr = True
        if (rate := _valid_rate(min_hz)) is not None:
            self.min_vrr = rate if self.min_vrr is None else min(self.min_vrr, rate)
        if (rate := _valid_rate(max_hz)) is not None:
            self.max_vrr = rate if self.max_vrr is None else max(self.max_vrr, rate)

    def add_bit_depth(self, depth: int, *signals: Optional[bool]):
        if any(signals):
            self.bit_depth = max(self.bit_depth, depth)

    def add_hdmi_version(self, version: float):
        if self.hdmi_version is None or version > self.hdmi_version:
            self.hdmi_version = version

    def add_display_id_version(self, version: float):
        if self.display_id_version is None or version > self.display_id_version:
            self.display_id_version = version

    def add_data_block(self, block: DataBlock):
        if isinstance(block, Hdmi14VendorDataBlock):
            self.add_hdmi_version(1.4)
            self.game_mode |= block.supports_game_content_type
            self.add_bit_depth(10, block.supports_deep_color_30)
            self.add_bit_depth(12, block.supports_deep_color_36)
            self.add_bit_depth(16, block.supports_deep_color_48)
        elif isinstance(block, Hdmi20VendorDataBlock):
            self.add_hdmi_version(2.0)
            self.add_bit_depth(10, block.supports_deep_color_y420_30)
            self.add_bit_depth(12, block.supports_deep_color_y420_36)
            self.add_bit_depth(16, block.supports_deep_color_y420_48)
        elif isinstance(block, HdmiForumVendorDataBlock):
            self.add_hdmi_version(2.1)
            features = block.hdmi_forum_features
            self.add_bit_depth(10, features.supports_10bpc_compressed_video)
            self.add_bit_depth(12, features.supports_12bpc_compressed_video)
            self.add_bit_depth(16, features.supports_16bpc_compressed_video)
            self.vrr |= features.supports_cinema_vrr or features.supports_negative_mvrr
            self.allm |= features.supports_allm
            self.add_vrr_range(block.vrr_min_hz, block.vrr_max_hz)
        elif isinstance(block, DolbyVisionVendorDataBlock):
            self.dolby_vision = True
        elif isinstance(block, HdmiForumScdb):
            self.add_hdmi_version(2.1 if block.signals_hdmi_21 else 2.0)
            if block.hdmi_forum_features is not None:
                self.allm |= block.hdmi_forum_features.supports_allm
            self.add_vrr_range(block.vrr_min_hz, block.vrr_max_hz)
        elif isinstance(block, VideoCapabilityDataBlock):
            if block.signals_hdmi_21:
                self.add_hdmi_version(2.1)
            self.vrr |= block.supports_vrr or block.supports_cinema_vrr or block.supports_negative_mrr
            self.allm |= block.supports_allm
        elif isinstance(block, HdrStaticMetadataDataBlock):
            self.hdr10 |= block.supports_hdr10
        elif isinstance(block, VendorSpecificVideoDataBlock):
            self.hdr10_plus |= block.supports_hdr10_plus
            self.dolby_vision |= block.supports_dolby_vision
        elif isinstance(block, ColorimetryDataBlock):
            if block.supports_adobe_rgb:
                self.gamuts.add('adobe_rgb')
            if block.supports_bt2020:
                self.gamuts.add('rec_2020')

    def finalize(self, edid_version: Optional[float]) -> FeatureSupport:
        # The VRR range is folded into the static refresh rate range
        min_srr, max_srr = self.min_srr, self.max_srr
        if self.min_vrr is not None and min_srr > self.min_vrr:
            min_srr = self.min_vrr
        if self.max_vrr is not None and max_srr < self.max_vrr:
            max_srr = self.max_vrr

        if math.isinf(min_srr):
            min_srr = next((v for v in (self.min_vrr, self.max_vrr) if v is not None), 0)
        if max_srr == 0:
            max_srr = self.max_vrr if self.max_vrr is not None else min_srr
        if max_srr < min_srr:
            max_srr = min_srr

        return FeatureSupport(
            color_gamuts=[gamut for gamut in COLOR_GAMUTS if gamut in self.gamuts],
            max_input_signal_bit_depth=self.bit_depth,
            supports_hdr10=self.hdr10,
            supports_hdr10_plus=self.hdr10_plus,
            supports_dolby_vision=self.dolby_vision,
            min_srr_hz=min_srr,
            max_srr_hz=max_srr,
            supports_vrr=self.vrr or self.min_vrr is not None or self.max_vrr is not None,
            min_vrr_hz=self.min_vrr,
            max_vrr_hz=self.max_vrr,
            supports_game_mode=self.game_mode,
            supports_allm=self.allm,
            hdmi_version=self.hdmi_version,
            edid_version=edid_version,
            display_id_version=self.display_id_version,
        )


def _iter_dtd_rates(dtds) -> Iterable[Optional[float]]:
    return (dtd_refresh_rate(dtd) for dtd in dtds)


def build_feature_support(
    base_block: BaseBlock,
    extensions: list[ExtensionBlock],
    basic_display_params: BasicDisplayParams = None,
    native_resolution: NativeResolution = None,
) -> FeatureSupport:
    """
    :param base_block: The decoded base block
    :param extensions: The decoded extension blocks
    :param basic_display_params: The base block's basic display parameters
    :param native_resolution: The native resolution, if one could be determined
    :return: The capabilities summary
    """
    acc = _FeatureAccumulator()
    if basic_display_params is not None and basic_display_params.is_standard_srgb:
        acc.gamuts.add('srgb')
    if inferred_gamut := infer_color_gamut(base_block.chromaticity):
        # Wide gamut displays are assumed to also support sRGB
        acc.gamuts.update((inferred_gamut, 'srgb'))

    if native_resolution is not None:
        acc.add_srr(native_resolution.refresh_rate_hz)
    for mode in base_block.standard_display_modes:
        acc.add_srr(mode.vert_freq_hz)
    for rate in _iter_dtd_rates(base_block.dtds):
        acc.add_srr(rate)

    for extension in extensions:
        if extension.ext_tag_byte == DISPLAYID_EXTENSION_TAG:
            if (version := parse_display_id_version(extension.revision_number)) is not None:
                acc.add_display_id_version(version)
        for rate in _iter_dtd_rates(extension.dtds):
            acc.add_srr(rate)
        for block in extension.iter_data_blocks():
            acc.add_data_block(block)

    return acc.finalize(_parse_edid_version(base_block.edid_version, base_block.edid_revision))
