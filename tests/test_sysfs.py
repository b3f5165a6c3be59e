#!/usr/bin/env python

import logging
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

sys.path.append(Path(__file__).parents[1].as_posix())
from edid_tools.exceptions import EdidSourceError, EdidPermissionError
from edid_tools.sysfs import DrmConnector, iter_connectors, read_edid_file
from edid_tools.test_common import TestCaseBase, main

from edid_samples import build_edid

log = logging.getLogger(__name__)


class SysfsTest(TestCaseBase):
    def setUp(self):
        super().setUp()
        self._tmp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp_dir.name)
        self._add_connector('card0-HDMI-A-1', build_edid(), 'connected')
        self._add_connector('card0-DP-1', b'', 'disconnected')
        self.root.joinpath('version').write_text('drm 1.1.0\n')

    def tearDown(self):
        self._tmp_dir.cleanup()
        super().tearDown()

    def _add_connector(self, name: str, edid: bytes, status: str):
        path = self.root.joinpath(name)
        path.mkdir()
        path.joinpath('edid').write_bytes(edid)
        path.joinpath('status').write_text(f'{status}\n')

    def test_iter_connectors(self):
        connectors = list(iter_connectors(self.root))
        self.assertEqual(['card0-HDMI-A-1'], [c.name for c in connectors])
        connector = connectors[0]
        self.assertEqual('HDMI-A-1', connector.connector)
        self.assertEqual('connected', connector.status)
        self.assertTrue(connector.is_connected)
        self.assertIsNone(connector.enabled)
        self.assertEqual('SAM', connector.edid.base_block.vendor_id)

    def test_include_empty(self):
        connectors = list(iter_connectors(self.root, include_empty=True))
        self.assertEqual(['card0-DP-1', 'card0-HDMI-A-1'], [c.name for c in connectors])
        self.assertFalse(connectors[0].is_connected)
        self.assertEqual(b'', connectors[0].edid_bytes)

    def test_missing_root(self):
        with self.assertRaises(EdidSourceError):
            list(iter_connectors(self.root.joinpath('missing')))

    def test_from_path(self):
        connector = DrmConnector.from_path(self.root.joinpath('card0-HDMI-A-1'))
        self.assertEqual(build_edid(), connector.edid_bytes)

    def test_read_errors(self):
        with self.assertRaises(EdidSourceError):
            read_edid_file(self.root.joinpath('missing', 'edid'))

        path = self.root.joinpath('card0-HDMI-A-1', 'edid')
        with patch.object(Path, 'read_bytes', side_effect=PermissionError):
            with self.assertRaises(EdidPermissionError) as ctx:
                read_edid_file(path)
        self.assertEqual(path, ctx.exception.path)
        self.assertTrue(str(ctx.exception).startswith(f'Permission error for {path}'))


class PermissionErrorTest(TestCaseBase):
    def test_missing_path_has_no_suggestions(self):
        path = Path(tempfile.gettempdir(), 'edid-tools-missing', 'edid')
        self.assertEqual(f'Permission error for {path}', str(EdidPermissionError(path)))


if __name__ == '__main__':
    main()
