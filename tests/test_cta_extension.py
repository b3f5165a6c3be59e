#!/usr/bin/env python

import logging
import sys
from pathlib import Path

sys.path.append(Path(__file__).parents[1].as_posix())
from edid_tools.decoder import decode, WarningCode
from edid_tools.decoder.data_blocks import AudioDataBlock, VideoDataBlock, SpeakerDataBlock
from edid_tools.decoder.data_blocks import parse_short_video_descriptor
from edid_tools.decoder.extended_tags import VideoCapabilityDataBlock, VendorSpecificVideoDataBlock
from edid_tools.decoder.extended_tags import ColorimetryDataBlock, HdrStaticMetadataDataBlock, HdmiForumScdb
from edid_tools.decoder.extended_tags import HdrDynamicMetadataDataBlock, VideoFormatPreferenceDataBlock
from edid_tools.decoder.extended_tags import YCbCr420VideoDataBlock, YCbCr420CapabilityMapDataBlock
from edid_tools.decoder.extended_tags import RoomConfigurationDataBlock, UnknownExtendedTagBlock
from edid_tools.decoder.extensions import CtaExtensionBlock, DisplayIdExtensionBlock
from edid_tools.decoder.vendor_blocks import VendorDataBlock, DolbyVisionVendorDataBlock, Hdmi14VendorDataBlock
from edid_tools.decoder.vendor_blocks import Hdmi20VendorDataBlock, HdmiForumVendorDataBlock
from edid_tools.test_common import TestCaseBase, main

from edid_samples import base_block, build_edid, cta_block, display_id_block, dtd, fix_checksum
from edid_samples import data_block, extended_block, vendor_block
from edid_samples import HDMI14_OUI, HDMI_FORUM_OUI, HDR10_PLUS_OUI, DOLBY_VISION_OUI

log = logging.getLogger(__name__)


def _decode_cta(*data_blocks, **kwargs):
    return decode(build_edid(base_block(), cta_block(data_blocks, **kwargs)))


def _data_blocks(*data_blocks):
    edid = _decode_cta(*data_blocks)
    return edid.extensions[0].data_block_collection


class CtaHeaderTest(TestCaseBase):
    def test_header_fields(self):
        edid = _decode_cta(dtds=[dtd(74.25, 1280, 370, 720, 30)], flags=0xD0)
        ext = edid.extensions[0]
        self.assertIsInstance(ext, CtaExtensionBlock)
        self.assertEqual('cta-861', ext.extension_type.value)
        self.assertEqual(1, ext.block_number)
        self.assertEqual(0x02, ext.ext_tag_byte)
        self.assertEqual(3, ext.revision_number)
        self.assertEqual(4, ext.dtd_start)
        self.assertEqual(1, ext.num_dtds)
        self.assertTrue(ext.supports_underscan)
        self.assertTrue(ext.supports_basic_audio)
        self.assertFalse(ext.supports_ycbcr444)
        self.assertTrue(ext.supports_ycbcr422)
        self.assertTrue(ext.is_checksum_valid)
        self.assertEqual([], edid.warnings)

    def test_no_data_blocks(self):
        ext = _decode_cta(dtds=[dtd(74.25, 1280, 370, 720, 30)]).extensions[0]
        self.assertIsNone(ext.data_block_collection)
        self.assertEqual(1, len(ext.dtds))
        self.assertEqual(720, ext.dtds[0].vertical_active_lines)
        self.assertAlmostEqual(60.0, ext.dtds[0].refresh_rate_hz)

    def test_negative_collection_length(self):
        ext = cta_block()
        ext[2] = 2
        edid = decode(build_edid(base_block(), fix_checksum(ext)))
        self.assert_warning_codes(edid, WarningCode.PARSE_ERROR)
        warning = edid.warnings[0]
        self.assertEqual((1, 4), (warning.block_index, warning.offset))
        self.assertEqual({'dtd_start': 2}, warning.detail)
        self.assertEqual([], edid.extensions[0].data_block_collection)
        self.assertEqual([], edid.extensions[0].dtds)

    def test_dtd_start_past_checksum(self):
        ext = cta_block()
        ext[2] = 0xFF
        edid = decode(build_edid(base_block(), fix_checksum(ext)))
        self.assert_no_warning(edid, WarningCode.OUT_OF_RANGE_READ)
        self.assertEqual([], edid.extensions[0].dtds)

    def test_unknown_data_block(self):
        edid = _decode_cta(data_block(0), data_block(2, 0x10))
        self.assert_warning_codes(edid, WarningCode.UNKNOWN_DATA_BLOCK)
        warning = edid.warnings[0]
        self.assertEqual((1, 4), (warning.block_index, warning.offset))
        self.assertEqual({'tag_code': 0, 'length': 0}, warning.detail)
        blocks = edid.extensions[0].data_block_collection
        self.assertEqual(1, len(blocks))
        self.assertIsInstance(blocks[0], VideoDataBlock)

    def test_display_id_extension(self):
        edid = decode(build_edid(base_block(), display_id_block(0x12)))
        ext = edid.extensions[0]
        self.assertIsInstance(ext, DisplayIdExtensionBlock)
        self.assertEqual('displayid', ext.extension_type.value)
        self.assertEqual([], edid.warnings)
        self.assertEqual(1.2, edid.feature_support.display_id_version)


class AudioVideoSpeakerTest(TestCaseBase):
    def test_audio(self):
        (block,) = _data_blocks(data_block(1, 0x09, 0x07, 0x07, 0x15, 0x07, 0x50, 0xFF))
        self.assertIsInstance(block, AudioDataBlock)
        self.assertEqual(7, block.data_length)
        self.assertEqual(2, len(block.short_audio_descriptors))
        lpcm, ac3 = block.short_audio_descriptors
        self.assertEqual('LPCM', lpcm.codec)
        self.assertEqual(2, lpcm.max_channel_count)
        self.assertEqual(['32 kHz', '44.1 kHz', '48 kHz'], lpcm.sample_rates)
        self.assertEqual(['16 bit', '20 bit', '24 bit'], lpcm.bit_depths)
        self.assertEqual('AC-3', ac3.codec)
        self.assertEqual(6, ac3.max_channel_count)
        self.assertEqual(640, ac3.bit_rate_kbps)
        self.assertIsNone(ac3.bit_depths)

    def test_audio_trailing_partial_descriptor(self):
        edid = _decode_cta(data_block(1, 0x09, 0x07, 0x07, 0x15, 0x07, 0x50, 0xFF))
        self.assertEqual(2, len(edid.extensions[0].data_block_collection[0].short_audio_descriptors))
        warning = edid.warnings_by_code(WarningCode.PARSE_ERROR)[0]
        self.assertEqual('Audio data block length is not a multiple of 3 bytes.', warning.message)
        self.assertEqual((1, 11), (warning.block_index, warning.offset))
        self.assertEqual({'data_length': 7, 'descriptors': 2, 'trailing_bytes': 1}, warning.detail)

    def test_audio_whole_descriptors(self):
        self.assert_no_warning(_decode_cta(data_block(1, 0x09, 0x07, 0x07)), WarningCode.PARSE_ERROR)

    def test_short_video_descriptors(self):
        for value, expected in ((0x90, (16, True)), (0x04, (4, False)), (0x61, (97, False)), (0xC1, (193, False))):
            with self.subTest(value=value):
                svd = parse_short_video_descriptor(value)
                self.assertEqual(expected, (svd.vic, svd.is_native_resolution))

    def test_video_blocks_are_merged(self):
        blocks = _data_blocks(data_block(2, 0x90, 0x04), data_block(4, 0x01, 0x00, 0x00), data_block(2, 0x61))
        self.assertEqual(2, len(blocks))
        video, speakers = blocks
        self.assertIsInstance(video, VideoDataBlock)
        self.assertEqual([16, 4, 97], [svd.vic for svd in video.short_video_descriptors])
        self.assertEqual(3, video.data_length)
        self.assertIsInstance(speakers, SpeakerDataBlock)

    def test_speakers(self):
        (block,) = _data_blocks(data_block(4, 0x03, 0x00, 0x00))
        self.assertEqual(0x03, block.layout_bitmask)
        self.assertEqual(['Front Left/Front Right (FL/FR)', 'Low Frequency Effort (LFE)'], block.speakers)
        self.assertEqual(block.speakers, block.__serializable__()['speakers'])


class VendorBlockTest(TestCaseBase):
    def test_hdmi14(self):
        (block,) = _data_blocks(vendor_block(HDMI14_OUI, 0x10, 0x00, 0x70, 0x3C, 0x28))
        self.assertIsInstance(block, Hdmi14VendorDataBlock)
        self.assertEqual(0x000C03, block.ieee_oui)
        self.assertEqual('HDMI14', block.oui_name)
        self.assertEqual('1.0.0.0', block.physical_address_str)
        self.assertTrue(block.supports_deep_color_48)
        self.assertTrue(block.supports_deep_color_36)
        self.assertTrue(block.supports_deep_color_30)
        self.assertFalse(block.supports_deep_color_y444)
        self.assertEqual(300, block.max_tmds_rate_mhz)
        self.assertTrue(block.supports_game_content_type)
        self.assertFalse(block.are_progressive_latency_fields_present)
        self.assertIsNone(block.progressive_video_latency_ms)

    def test_hdmi14_latency(self):
        (block,) = _data_blocks(vendor_block(HDMI14_OUI, 0x10, 0x00, 0x00, 0x3C, 0xC0, 11, 6, 21, 11))
        self.assertTrue(block.are_progressive_latency_fields_present)
        self.assertTrue(block.are_interlaced_latency_fields_present)
        self.assertEqual(20, block.progressive_video_latency_ms)
        self.assertEqual(10, block.progressive_audio_latency_ms)
        self.assertEqual(40, block.interlaced_video_latency_ms)
        self.assertEqual(20, block.interlaced_audio_latency_ms)
        self.assertFalse(block.supports_game_content_type)

    def test_hdmi14_minimal(self):
        (block,) = _data_blocks(vendor_block(HDMI14_OUI, 0x21, 0x00))
        self.assertEqual('2.1.0.0', block.physical_address_str)
        self.assertIsNone(block.supports_deep_color_30)
        self.assertIsNone(block.max_tmds_rate_mhz)

    def test_hdmi20_layout(self):
        (block,) = _data_blocks(vendor_block(HDMI_FORUM_OUI, 0x01, 0x78, 0x80, 0x07))
        self.assertIsInstance(block, Hdmi20VendorDataBlock)
        self.assertEqual(1, block.payload_version)
        self.assertEqual(600, block.max_tmds_rate_mhz)
        self.assertTrue(block.supports_scdc)
        self.assertTrue(block.supports_deep_color_y420_48)
        self.assertTrue(block.supports_deep_color_y420_30)

    def test_hdmi_forum_layout(self):
        (block,) = _data_blocks(vendor_block(HDMI_FORUM_OUI, 0x01, 0x78, 0x80, 0x30, 0x02, 0x30, 0x78, 0x01))
        self.assertIsInstance(block, HdmiForumVendorDataBlock)
        self.assertEqual(1, block.hf_payload_version)
        self.assertEqual(600, block.max_tmds_character_rate_mhz)
        self.assertTrue(block.supports_scdc)
        self.assertFalse(block.supports_scdc_rr)
        self.assertEqual('4 lanes @ 6 Gbps', block.max_fixed_rate_link)
        self.assertEqual(48, block.vrr_min_hz)
        self.assertEqual(120, block.vrr_max_hz)
        features = block.hdmi_forum_features
        self.assertTrue(features.supports_allm)
        self.assertFalse(features.supports_cinema_vrr)
        self.assertTrue(features.supports_10bpc_compressed_video)
        self.assertFalse(features.supports_16bpc_compressed_video)

    def test_vrr_max_high_bits(self):
        (block,) = _data_blocks(vendor_block(HDMI_FORUM_OUI, 0x01, 0x78, 0x80, 0x00, 0x00, 0x70, 0x20))
        self.assertEqual(48, block.vrr_min_hz)
        self.assertEqual(288, block.vrr_max_hz)

    def test_dolby_vision(self):
        (block,) = _data_blocks(vendor_block(DOLBY_VISION_OUI, 0x01))
        self.assertIsInstance(block, DolbyVisionVendorDataBlock)
        self.assertTrue(block.supports_dolby_vision)

    def test_unknown_oui(self):
        (block,) = _data_blocks(vendor_block((0x01, 0x02, 0x03), 0xAA))
        self.assertIs(VendorDataBlock, type(block))
        self.assertEqual(0x030201, block.ieee_oui)
        self.assertIsNone(block.oui_name)


class ExtendedTagTest(TestCaseBase):
    def test_video_capability(self):
        (block,) = _data_blocks(extended_block(0x00, 0xC5, 0x44))
        self.assertIsInstance(block, VideoCapabilityDataBlock)
        self.assertEqual('VIDEO_CAPABILITY', block.extended_tag_name)
        self.assertTrue(block.supports_quantization_range_ycc)
        self.assertTrue(block.supports_quantization_range_rgb)
        self.assertTrue(block.supports_vrr)
        self.assertTrue(block.supports_allm)
        self.assertFalse(block.supports_qms)
        self.assertTrue(block.signals_hdmi_21)

    def test_video_capability_without_hdmi21_flags(self):
        (block,) = _data_blocks(extended_block(0x00, 0xC5))
        self.assertFalse(block.supports_allm)
        self.assertFalse(block.signals_hdmi_21)

    def test_hdr10_plus(self):
        (block,) = _data_blocks(extended_block(0x01, *HDR10_PLUS_OUI, 0x01))
        self.assertIsInstance(block, VendorSpecificVideoDataBlock)
        self.assertTrue(block.supports_hdr10_plus)
        self.assertFalse(block.supports_dolby_vision)

    def test_vendor_specific_video_dolby_vision(self):
        (block,) = _data_blocks(extended_block(0x01, *DOLBY_VISION_OUI, 0x01))
        self.assertTrue(block.supports_dolby_vision)

    def test_vendor_specific_video_too_short(self):
        (block,) = _data_blocks(extended_block(0x01, 0x8B, 0x84))
        self.assertEqual('Vendor-Specific Video Data Block too short', block.error)
        self.assertIsNone(block.vendor_specific_video_oui)

    def test_colorimetry(self):
        (block,) = _data_blocks(extended_block(0x05, 0xD0, 0x05))
        self.assertIsInstance(block, ColorimetryDataBlock)
        self.assertTrue(block.supports_bt2020)
        self.assertTrue(block.supports_adobe_rgb)
        self.assertFalse(block.supports_bt2020_cycc)
        self.assertEqual((0, 1, 0, 1), (block.gamut_md3, block.gamut_md2, block.gamut_md1, block.gamut_md0))
        self.assertIsNone(block.supports_ictcp)

    def test_hdr_static_metadata(self):
        (block,) = _data_blocks(bytes([0xE6, 0x06, 0x0C, 0x01, 0x78, 0x5A, 0x1E]))
        self.assertIsInstance(block, HdrStaticMetadataDataBlock)
        self.assertEqual(['SMPTE ST2084 (PQ)', 'Hybrid Log-Gamma (HLG)'], block.supported_eotfs)
        self.assertEqual(['Static Metadata Type 1'], block.supported_static_metadata_descriptors)
        self.assertEqual(0x78, block.desired_content_max_luminance_code)
        self.assertEqual(0x5A, block.desired_content_max_frame_average_luminance_code)
        self.assertEqual(0x1E, block.desired_content_min_luminance_code)
        self.assertTrue(block.supports_hdr10)

    def test_hdr_static_metadata_without_pq(self):
        (block,) = _data_blocks(bytes([0xE3, 0x06, 0x08, 0x01]))
        self.assertEqual(['Hybrid Log-Gamma (HLG)'], block.supported_eotfs)
        self.assertFalse(block.supports_hdr10)

    def test_hdr_static_metadata_empty(self):
        (block,) = _data_blocks(extended_block(0x06))
        self.assertEqual('Empty Data Block', block.error)
        self.assertFalse(block.supports_hdr10)

    def test_hdr_dynamic_metadata(self):
        (block,) = _data_blocks(extended_block(0x07, 0x04, 0x01))
        self.assertIsInstance(block, HdrDynamicMetadataDataBlock)
        self.assertEqual(4, block.dynamic_hdr_metadata_type_id)
        self.assertEqual(1, block.dynamic_hdr_metadata_version_number)
        self.assertEqual(1, len(block.supported_dynamic_metadata_types))

    def test_video_format_preference(self):
        (block,) = _data_blocks(extended_block(0x0D, 0x81, 0x10))
        self.assertIsInstance(block, VideoFormatPreferenceDataBlock)
        prefs = [(pref.svr_code, pref.frr_code) for pref in block.video_format_preferences]
        self.assertEqual([(1, 2), (16, 0)], prefs)

    def test_ycbcr420_video(self):
        (block,) = _data_blocks(extended_block(0x0E, 0x61, 0x60))
        self.assertIsInstance(block, YCbCr420VideoDataBlock)
        self.assertEqual([97, 96], [svd.vic for svd in block.ycbcr420_only_short_video_descriptors])

    def test_ycbcr420_capability_map(self):
        video, cap_map = _data_blocks(data_block(2, 0x90, 0x04, 0x03), extended_block(0x0F, 0x05))
        self.assertIsInstance(cap_map, YCbCr420CapabilityMapDataBlock)
        capable = cap_map.ycbcr420_capable_short_video_descriptors
        self.assertEqual([16, 3], [svd.vic for svd in capable])

    def test_ycbcr420_capability_map_beyond_svds(self):
        _video, cap_map = _data_blocks(data_block(2, 0x90), extended_block(0x0F, 0x81))
        capable = cap_map.ycbcr420_capable_short_video_descriptors
        self.assertEqual(16, capable[0].vic)
        self.assertIsNone(capable[1])

    def test_ycbcr420_capability_map_in_later_extension(self):
        edid = decode(
            build_edid(base_block(), cta_block([data_block(2, 0x90, 0x04)]), cta_block([extended_block(0x0F, 0x02)]))
        )
        (cap_map,) = edid.extensions[1].data_block_collection
        self.assertEqual([4], [svd.vic for svd in cap_map.ycbcr420_capable_short_video_descriptors])

    def test_ycbcr420_capability_map_without_video_block(self):
        (cap_map,) = _data_blocks(extended_block(0x0F, 0xFF))
        self.assertIsNone(cap_map.ycbcr420_capable_short_video_descriptors)

    def test_room_configuration(self):
        (block,) = _data_blocks(extended_block(0x13, 0x25))
        self.assertIsInstance(block, RoomConfigurationDataBlock)
        self.assertEqual(6, block.speaker_count)
        self.assertEqual(1, block.room_type_code)
        self.assertEqual('Front Height', block.room_type_string)

    def test_hdmi_forum_scdb(self):
        (block,) = _data_blocks(extended_block(0x79, 0x01, 0x78, 0x80, 0x00, 0x02, 0x30, 0x78))
        self.assertIsInstance(block, HdmiForumScdb)
        self.assertEqual(1, block.hf_scdb_version)
        self.assertEqual(600, block.max_tmds_character_rate_mhz)
        self.assertEqual('Not Supported', block.max_fixed_rate_link)
        self.assertEqual((48, 120), (block.vrr_min_hz, block.vrr_max_hz))
        self.assertTrue(block.hdmi_forum_features.is_scdc_present)
        self.assertTrue(block.hdmi_forum_features.supports_allm)
        self.assertTrue(block.signals_hdmi_21)

    def test_hdmi_forum_scdb_too_short(self):
        (block,) = _data_blocks(extended_block(0x79, 0x01))
        self.assertEqual('HDMI Forum SCDB too short', block.error)
        self.assertIsNone(block.hdmi_forum_features)
        self.assertFalse(block.signals_hdmi_21)

    def test_misaligned_hdmi_forum_scdb_is_recovered(self):
        # The speaker block claims 5 bytes but only has 3, so the normal scan starts mid-way through the SCDB
        misaligned = bytes([0x85, 0x01, 0x00, 0x00])
        scdb = extended_block(0x79, 0x01, 0x78, 0x80, 0x00, 0x02, 0x30, 0x78)
        blocks = _data_blocks(misaligned, scdb)
        recovered = [block for block in blocks if isinstance(block, HdmiForumScdb)]
        self.assertEqual(1, len(recovered))
        self.assertEqual((48, 120), (recovered[0].vrr_min_hz, recovered[0].vrr_max_hz))

    def test_unknown_extended_tag(self):
        (block,) = _data_blocks(extended_block(0x30, 0x01, 0x02))
        self.assertIsInstance(block, UnknownExtendedTagBlock)
        self.assertEqual(0x30, block.extended_tag)
        self.assertEqual(3, block.data_length)
        self.assertIsNone(block.extended_tag_name)


if __name__ == '__main__':
    main()
