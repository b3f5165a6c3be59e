#!/usr/bin/env python

import logging
import sys
from pathlib import Path

sys.path.append(Path(__file__).parents[1].as_posix())
from edid_tools.decoder import decode
from edid_tools.decoder.features import infer_color_gamut, parse_display_id_version
from edid_tools.test_common import TestCaseBase, main

from edid_samples import base_block, build_edid, cta_block, display_id_block, dtd, data_block, extended_block
from edid_samples import vendor_block, HDMI14_OUI, HDMI_FORUM_OUI, HDR10_PLUS_OUI, DOLBY_VISION_OUI
from edid_samples import REC_2020_CHROMATICITY, UNUSED_DESCRIPTOR

log = logging.getLogger(__name__)


def _features(*data_blocks, base=None, dtds=()):
    base = base_block() if base is None else base
    return decode(build_edid(base, cta_block(data_blocks, dtds=dtds))).feature_support


class BaseBlockFeatureTest(TestCaseBase):
    def test_minimal(self):
        features = decode(build_edid()).feature_support
        self.assertEqual(['srgb'], features.color_gamuts)
        self.assertEqual(8, features.max_input_signal_bit_depth)
        self.assertFalse(features.supports_hdr10)
        self.assertFalse(features.supports_hdr10_plus)
        self.assertFalse(features.supports_dolby_vision)
        self.assertEqual((60, 60), (features.min_srr_hz, features.max_srr_hz))
        self.assertFalse(features.supports_vrr)
        self.assertIsNone(features.min_vrr_hz)
        self.assertIsNone(features.max_vrr_hz)
        self.assertFalse(features.supports_game_mode)
        self.assertFalse(features.supports_allm)
        self.assertIsNone(features.hdmi_version)
        self.assertEqual(1.4, features.edid_version)
        self.assertIsNone(features.display_id_version)

    def test_edid_version(self):
        self.assertEqual(1.3, decode(build_edid(base_block(version=(1, 3)))).feature_support.edid_version)

    def test_wide_gamut_chromaticity(self):
        base = base_block(chromaticity=REC_2020_CHROMATICITY, features=0x02)
        features = decode(build_edid(base)).feature_support
        self.assertEqual(['srgb', 'rec_2020'], features.color_gamuts)

    def test_standard_mode_refresh_rates(self):
        base = base_block(standard_modes=[(0xD1, 0xCF), (0x81, 0x80)])
        features = decode(build_edid(base)).feature_support
        self.assertEqual((60, 75), (features.min_srr_hz, features.max_srr_hz))

    def test_no_refresh_rates(self):
        base = base_block(descriptors=[UNUSED_DESCRIPTOR], features=0x00)
        features = decode(build_edid(base)).feature_support
        self.assertEqual((0, 0), (features.min_srr_hz, features.max_srr_hz))

    def test_infer_color_gamut(self):
        self.assertIsNone(infer_color_gamut(None))
        self.assertEqual('srgb', infer_color_gamut(decode(build_edid()).base_block.chromaticity))

    def test_display_id_versions(self):
        cases = {0x01: 1.3, 0x02: 2.0, 0x03: 2.1, 0x12: 1.2, 0x20: 2.0, 0: None, 0x0A: None, 0x1A: None, 0x100: None}
        for revision, expected in cases.items():
            with self.subTest(revision=revision):
                self.assertEqual(expected, parse_display_id_version(revision))

    def test_highest_display_id_version(self):
        edid = decode(build_edid(base_block(), display_id_block(0x12), display_id_block(0x02)))
        self.assertEqual(2.0, edid.feature_support.display_id_version)


class ExtensionFeatureTest(TestCaseBase):
    def test_hdmi14_deep_color_and_game_mode(self):
        features = _features(vendor_block(HDMI14_OUI, 0x10, 0x00, 0x70, 0x3C, 0x28))
        self.assertEqual(1.4, features.hdmi_version)
        self.assertEqual(16, features.max_input_signal_bit_depth)
        self.assertTrue(features.supports_game_mode)

    def test_hdmi14_30_bit(self):
        features = _features(vendor_block(HDMI14_OUI, 0x10, 0x00, 0x10))
        self.assertEqual(10, features.max_input_signal_bit_depth)
        self.assertFalse(features.supports_game_mode)

    def test_hdmi_version_is_maximum(self):
        features = _features(
            vendor_block(HDMI14_OUI, 0x10, 0x00), vendor_block(HDMI_FORUM_OUI, 0x01, 0x78, 0x00, 0x01)
        )
        self.assertEqual(2.0, features.hdmi_version)
        self.assertEqual(10, features.max_input_signal_bit_depth)

    def test_hdmi_forum_vsdb(self):
        features = _features(vendor_block(HDMI_FORUM_OUI, 0x01, 0x78, 0x80, 0x30, 0x02, 0x30, 0x78, 0x01))
        self.assertEqual(2.1, features.hdmi_version)
        self.assertTrue(features.supports_allm)
        self.assertTrue(features.supports_vrr)
        self.assertEqual((48, 120), (features.min_vrr_hz, features.max_vrr_hz))
        self.assertEqual((48, 120), (features.min_srr_hz, features.max_srr_hz))
        self.assertEqual(10, features.max_input_signal_bit_depth)

    def test_hdmi_forum_scdb(self):
        features = _features(extended_block(0x79, 0x01, 0x78, 0x80, 0x00, 0x02, 0x30, 0x78))
        self.assertEqual(2.1, features.hdmi_version)
        self.assertTrue(features.supports_allm)
        self.assertEqual((48, 120), (features.min_vrr_hz, features.max_vrr_hz))

    def test_video_capability_signals(self):
        features = _features(extended_block(0x00, 0xC0, 0x44))
        self.assertEqual(2.1, features.hdmi_version)
        self.assertTrue(features.supports_vrr)
        self.assertTrue(features.supports_allm)
        self.assertIsNone(features.min_vrr_hz)

    def test_hdr10(self):
        self.assertTrue(_features(extended_block(0x06, 0x0C, 0x01, 0x78, 0x5A, 0x1E)).supports_hdr10)
        self.assertFalse(_features(extended_block(0x06, 0x08, 0x01)).supports_hdr10)

    def test_hdr10_plus(self):
        features = _features(extended_block(0x01, *HDR10_PLUS_OUI, 0x01))
        self.assertTrue(features.supports_hdr10_plus)
        self.assertFalse(features.supports_dolby_vision)

    def test_dolby_vision(self):
        self.assertTrue(_features(vendor_block(DOLBY_VISION_OUI, 0x01)).supports_dolby_vision)
        self.assertTrue(_features(extended_block(0x01, *DOLBY_VISION_OUI, 0x01)).supports_dolby_vision)

    def test_colorimetry_gamuts(self):
        features = _features(extended_block(0x05, 0xD0, 0x00))
        self.assertEqual(['srgb', 'adobe_rgb', 'rec_2020'], features.color_gamuts)

    def test_extension_dtd_refresh_rates(self):
        features = _features(dtds=[dtd(74.25, 1280, 700, 720, 30)])
        self.assertEqual((50, 60), (features.min_srr_hz, features.max_srr_hz))

    def test_audio_only_extension(self):
        features = _features(data_block(1, 0x09, 0x07, 0x07))
        self.assertIsNone(features.hdmi_version)
        self.assertEqual(8, features.max_input_signal_bit_depth)


if __name__ == '__main__':
    main()
