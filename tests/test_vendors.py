#!/usr/bin/env python

import logging
import sys
import tempfile
from pathlib import Path

sys.path.append(Path(__file__).parents[1].as_posix())
from edid_tools.exceptions import EdidSourceError
from edid_tools.test_common import TestCaseBase, main
from edid_tools.vendors import VendorDatabase, NotableVendor, NOTABLE_VENDORS, lookup_vendor

log = logging.getLogger(__name__)

PNP_IDS = """
# Comment lines and blank lines are ignored
SAM\tSamsung Electric Company
DEL\tDell Inc.
xyz\tLowercase Vendor
TOOLONG\tIgnored
NOTAB Ignored
ABC\t
"""


class NotableVendorTest(TestCaseBase):
    def test_short_names(self):
        for vid, name in (('SAM', 'Samsung'), ('GSM', 'LG'), ('DEL', 'Dell'), ('ACR', 'Acer'), ('APP', 'Apple')):
            with self.subTest(vid=vid):
                info = lookup_vendor(vid)
                self.assertEqual(name, info.good_name)
                self.assertEqual(name, info.short_brand_name)
                self.assertIsNone(info.hwdata_name)

    def test_unknown_vendor(self):
        info = lookup_vendor('ZZZ')
        self.assertEqual('ZZZ', info.vid)
        self.assertEqual('ZZZ', info.good_name)
        self.assertIsNone(info.short_brand_name)

    def test_table_is_keyed_by_vid(self):
        for vid, vendor in NOTABLE_VENDORS.items():
            with self.subTest(vid=vid):
                self.assertEqual(vid, vendor.vid)
                self.assertEqual(3, len(vid))
                self.assertTrue(vendor.roles)

    def test_notes(self):
        self.assertIsNotNone(NOTABLE_VENDORS['BBK'].notes)


class VendorDatabaseTest(TestCaseBase):
    def test_add_pnp_ids(self):
        db = VendorDatabase()
        self.assertEqual(3, db.add_pnp_ids(PNP_IDS))
        self.assertEqual({'SAM', 'DEL', 'XYZ'}, set(db.hwdata))

    def test_name_priority(self):
        db = VendorDatabase()
        db.add_pnp_ids(PNP_IDS)
        samsung = db.lookup('SAM')
        self.assertEqual('Samsung', samsung.good_name)
        self.assertEqual('Samsung Electric Company', samsung.hwdata_name)
        xyz = db['XYZ']
        self.assertEqual('Lowercase Vendor', xyz.good_name)
        self.assertIsNone(xyz.short_brand_name)
        self.assertEqual('QQQ', db.lookup('QQQ').good_name)

    def test_custom_notable_table(self):
        db = VendorDatabase({'TST': NotableVendor('TST', 'Test', 'Test Corp.', ('consumer_brand',))})
        self.assertEqual('Test', db.lookup('TST').good_name)
        self.assertEqual('SAM', db.lookup('SAM').good_name)

    def test_load_pnp_ids(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir, 'pnp.ids')
            path.write_text(PNP_IDS, 'utf-8')
            db = VendorDatabase.with_pnp_ids(path)
            self.assertEqual('Dell Inc.', db.lookup('DEL').hwdata_name)
            self.assertEqual('<VendorDatabase[notable={}, hwdata=3]>'.format(len(NOTABLE_VENDORS)), repr(db))

    def test_missing_pnp_ids(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            with self.assertRaises(EdidSourceError):
                VendorDatabase().load_pnp_ids(Path(tmp_dir, 'missing.ids'))


if __name__ == '__main__':
    main()
