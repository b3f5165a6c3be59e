#!/usr/bin/env python

import json
import logging
import sys
from pathlib import Path

import yaml

sys.path.append(Path(__file__).parents[1].as_posix())
from edid_tools.core.serialization import json_dump, yaml_dump, to_plain
from edid_tools.decoder import decode
from edid_tools.decoder.enums import DataBlockTag, ExtensionType
from edid_tools.decoder.reader import WarningCode
from edid_tools.test_common import TestCaseBase, main

from edid_samples import base_block, build_edid, cta_block, data_block, extended_block, vendor_block, HDMI14_OUI

log = logging.getLogger(__name__)


def _sample_edid():
    ext = cta_block([data_block(2, 0x90, 0x04), vendor_block(HDMI14_OUI, 0x10, 0x00), extended_block(0x79, 0x01)])
    return decode(build_edid(base_block(version=(1, 9)), ext))


class ToPlainTest(TestCaseBase):
    def test_enums(self):
        self.assertEqual('AUDIO', to_plain(DataBlockTag.AUDIO))
        self.assertEqual('cta-861', to_plain(ExtensionType.CTA_861))
        self.assertEqual('too_short', to_plain(WarningCode.TOO_SHORT))

    def test_containers(self):
        data = {'a': (1, 2), 'b': {3, 1}, 'c': b'\x00\xff', 'd': Path('/tmp')}
        self.assertEqual({'a': [1, 2], 'b': [1, 3], 'c': '00ff', 'd': str(Path('/tmp'))}, to_plain(data))

    def test_records(self):
        edid = _sample_edid()
        plain = to_plain(edid)
        self.assertNotIn('raw_bytes', plain)
        self.assertEqual('OK', plain['base_block']['header_validity'])
        self.assertEqual('1.9', plain['base_block']['edid_version_string'])
        self.assertNotIn('raw_bytes', plain['base_block'])
        blocks = plain['extensions'][0]['data_block_collection']
        self.assertEqual(['VIDEO', 'VENDOR_SPECIFIC', 'EXTENDED_TAG'], [block['tag'] for block in blocks])
        self.assertEqual('HDMI_FORUM_SCDB', blocks[2]['extended_tag_name'])
        self.assertEqual('unknown_edid_minor_version', plain['warnings'][0]['code'])


class DumpTest(TestCaseBase):
    def test_json(self):
        edid = _sample_edid()
        data = json.loads(json_dump(edid.as_dict()))
        self.assertEqual(edid.raw_bytes.hex(), data['raw_bytes'])
        self.assertEqual('SAM', data['vendor_info']['vid'])
        self.assertEqual(2.0, data['feature_support']['hdmi_version'])
        self.assertEqual(16, data['extensions'][0]['data_block_collection'][0]['short_video_descriptors'][0]['vic'])

    def test_json_of_records(self):
        data = json.loads(json_dump(_sample_edid().warnings))
        self.assertEqual('unknown_edid_minor_version', data[0]['code'])
        self.assertEqual(19, data[0]['offset'])

    def test_yaml(self):
        edid = _sample_edid()
        dumped = yaml_dump(edid.as_dict(include_raw=False), indent_nested_lists=True)
        self.assertTrue(dumped.startswith('---\n'))
        data = yaml.safe_load(dumped)
        self.assertEqual(edid.as_dict(include_raw=False), data)
        self.assertEqual('Samsung', data['vendor_info']['good_name'])

    def test_yaml_key_order(self):
        dumped = yaml_dump({'warnings': [], 'base_block': {}})
        self.assertLess(dumped.index('warnings'), dumped.index('base_block'))


if __name__ == '__main__':
    main()
