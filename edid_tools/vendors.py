"""
Vendor (PNP) ID lookup.

A built-in table of notable display vendors provides short, UI-friendly brand names.  The much larger ``hwdata`` PNP ID
list that ships with most Linux distributions may optionally be merged in; it is only loaded when explicitly requested.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .exceptions import EdidSourceError

__all__ = ['VendorInfo', 'NotableVendor', 'VendorDatabase', 'lookup_vendor', 'NOTABLE_VENDORS', 'DEFAULT_PNP_IDS_PATH']
log = logging.getLogger(__name__)

DEFAULT_PNP_IDS_PATH = Path('/usr/share/hwdata/pnp.ids')


@dataclass(frozen=True)
class NotableVendor:
    vid: str
    short_name: str
    company_name: str
    roles: tuple[str, ...]
    notes: Optional[str] = None


@dataclass(frozen=True)
class VendorInfo:
    """
    :param vid: The 3-letter EDID vendor ID (PNP ID)
    :param good_name: The best available name: the notable short name, then the hwdata name, then the VID itself
    :param short_brand_name: The short brand name, if this is a notable vendor
    :param hwdata_name: The name from the hwdata PNP ID list, if it was loaded and contains this VID
    """

    vid: str
    good_name: str
    short_brand_name: Optional[str] = None
    hwdata_name: Optional[str] = None


# fmt: off
_NOTABLE_VENDOR_ROWS = [
    ('ABO', 'Acer', 'Acer Inc.', ('consumer_brand',)),
    ('ACE', 'Acer', 'Acer Inc.', ('consumer_brand',)),
    ('ACI', 'Asus', 'ASUSTeK Computer Inc.', ('consumer_brand',)),
    ('ACR', 'Acer', 'Acer Inc.', ('consumer_brand',)),
    ('ACT', 'Acer', 'Acer Inc.', ('consumer_brand',)),
    ('AOC', 'AOC', 'AOC International', ('panel_manufacturer',)),
    ('API', 'Acer', 'Acer Inc.', ('consumer_brand',)),
    ('APP', 'Apple', 'Apple Computer Inc.', ('consumer_brand', 'panel_manufacturer')),
    ('ASU', 'Asus', 'ASUSTeK Computer Inc.', ('consumer_brand',)),
    ('AUO', 'AUO', 'AUO Corporation', ('panel_manufacturer',)),
    ('AUS', 'Asus', 'ASUSTeK Computer Inc.', ('consumer_brand',)),
    ('BBK', 'BBK', 'BBK Electronics Corporation', ('consumer_brand',), 'Historical parent company of brands like Oppo and Vivo'),
    ('BBY', 'Best Buy', 'Best Buy Co., Inc.', ('consumer_brand',)),
    ('BNQ', 'BenQ', 'BenQ Corporation', ('consumer_brand',)),
    ('BOE', 'BOE', 'BOE Technology Group Co., Ltd.', ('panel_manufacturer',)),
    ('CHE', 'Acer', 'Acer Inc.', ('consumer_brand',)),
    ('CMN', 'InnoLux', 'Chimei Innolux Corporation', ('panel_manufacturer',)),
    ('CMO', 'Chi Mei', 'Chi Mei Optoelectronics Corp.', ('panel_manufacturer',)),
    ('CSW', 'CSOT', 'China Star Optoelectronics Technology Co., Ltd.', ('panel_manufacturer',), 'Subsidiary of TCL'),
    ('CTX', 'CTX', 'CTX International', ('consumer_brand',), 'Chuntex Electronic Co., Ltd.'),
    ('DEL', 'Dell', 'Dell Technologies Inc.', ('consumer_brand',)),
    ('DWE', 'Daewoo', 'Daewoo Electronics', ('consumer_brand', 'panel_manufacturer')),
    ('EIZ', 'Eizo', 'EIZO Nanao Corporation', ('consumer_brand',), 'High-end monitors'),
    ('GBT', 'Gigabyte', 'Gigabyte Technology', ('consumer_brand',)),
    ('GSM', 'LG', 'LG (GoldStar Technology)', ('consumer_brand', 'panel_manufacturer')),
    ('HCE', 'Hitachi', 'Hitachi Consumer Electronics', ('consumer_brand', 'panel_manufacturer')),
    ('HEC', 'Hisense', 'Hisense Group Co., Ltd.', ('consumer_brand', 'panel_manufacturer')),
    ('HPC', 'HP', 'Hewlett-Packard / HP Inc.', ('consumer_brand',)),
    ('HPD', 'HP', 'Hewlett-Packard / HP Inc.', ('consumer_brand',)),
    ('HPN', 'HP', 'Hewlett-Packard / HP Inc.', ('consumer_brand',)),
    ('HPQ', 'HP', 'Hewlett-Packard / HP Inc.', ('consumer_brand',)),
    ('HRE', 'Haier', 'Qingdao Haier Electronics', ('consumer_brand',)),
    ('HSD', 'HANNspree', 'HannStar Display Corporation', ('consumer_brand',)),
    ('HSP', 'HannStar', 'HannStar Display Corporation', ('panel_manufacturer',)),
    ('HWP', 'HP', 'Hewlett-Packard / HP Inc.', ('consumer_brand',)),
    ('HWV', 'Huawei', 'Huawei Corporation', ('consumer_brand',)),
    ('IBM', 'IBM', 'International Business Machines Corporation', ('consumer_brand',)),
    ('INL', 'InnoLux', 'InnoLux Display Corporation', ('panel_manufacturer',)),
    ('IOC', 'InnoCN', 'Innovation China', ('consumer_brand',), 'Subsidiary of Guangxi Century Innovation Display Electronics'),
    ('IVM', 'iiyama', 'iiyama Corporation', ('consumer_brand',)),
    ('IVO', 'InfoVision', 'InfoVision Optoelectronics (Kunshan) Co., Ltd.', ('panel_manufacturer',)),
    ('JDI', 'JDI', 'Japan Display Inc.', ('panel_manufacturer',)),
    ('JVC', 'JVC', 'Victor Company of Japan, Ltd. (JVC)', ('consumer_brand',)),
    ('LCA', 'LaCie', 'LaCie', ('consumer_brand',)),
    ('LCD', 'Toshiba Matsushita', 'Toshiba Matsushita Display Technology Co., Ltd.', ('panel_manufacturer',), 'Historical joint venture'),
    ('LEN', 'Lenovo', 'Lenovo', ('consumer_brand',)),
    ('LGD', 'LG', 'LG Display', ('consumer_brand', 'panel_manufacturer')),
    ('LGE', 'Samsung', 'Samsung', ('consumer_brand', 'panel_manufacturer')),
    ('LGP', 'LG Philips', 'LG.Philips Displays', ('panel_manufacturer',), 'Historical joint venture'),
    ('LGS', 'LG', 'LG Semicom Co., Ltd.', ('consumer_brand', 'panel_manufacturer')),
    ('LNV', 'Lenovo', 'Lenovo', ('consumer_brand',)),
    ('LPL', 'LG Philips', 'LG.Philips Displays', ('panel_manufacturer',), 'Historical joint venture'),
    ('MEI', 'Panasonic', 'Panasonic', ('consumer_brand',)),
    ('MSI', 'MSI', 'Micro-Star International', ('consumer_brand',)),
    ('NEC', 'NEC', 'NEC Corporation', ('consumer_brand',), 'Major historical display brand'),
    ('ONK', 'Onkyo', 'ONKYO Corporation', ('audio_video',), 'A/V receivers, amplifiers, and consumer audio gear'),
    ('ONN', 'onn', 'Walmart onn', ('consumer_brand',), 'Walmart private label brand'),
    ('OPP', 'Oppo', 'OPPO Digital, Inc.', ('audio_video',), 'Blu-ray / media players and consumer A/V gear'),
    ('OWC', 'OWC', 'Other World Computing', ('audio_video',), 'Docks and video adapters (USB-C to HDMI via DisplayLink, etc.)'),
    ('PHL', 'Philips', 'Philips Consumer Electronics Company', ('consumer_brand',)),
    ('QDS', 'Quanta', 'Quanta Display Inc.', ('panel_manufacturer',)),
    ('SAC', 'Samsung', 'Samsung', ('consumer_brand', 'panel_manufacturer')),
    ('SAM', 'Samsung', 'Samsung Electric Company', ('consumer_brand', 'panel_manufacturer')),
    ('SDC', 'Samsung', 'Samsung Display Corp.', ('consumer_brand', 'panel_manufacturer')),
    ('SEC', 'Samsung', 'Samsung Electronics Company Ltd.', ('consumer_brand', 'panel_manufacturer')),
    ('SEM', 'Samsung', 'Samsung Electronics Company Ltd.', ('consumer_brand', 'panel_manufacturer')),
    ('SHP', 'Sharp', 'Sharp', ('consumer_brand', 'panel_manufacturer')),
    ('SIM', 'Samsung', 'Samsung Electronics Company Ltd.', ('consumer_brand', 'panel_manufacturer')),
    ('SNY', 'Sony', 'Sony Corporation', ('consumer_brand',)),
    ('SPT', 'Sceptre', 'Sceptre Inc.', ('consumer_brand',)),
    ('STN', 'Samsung', 'Samsung', ('consumer_brand', 'panel_manufacturer')),
    ('TCL', 'TCL', 'TCL Corporation', ('consumer_brand', 'panel_manufacturer')),
    ('TOL', 'TCL', 'TCL Corporation', ('consumer_brand', 'panel_manufacturer')),
    ('TPV', 'TPV', 'Top Victory Electronics (Fujian) Company Ltd.', ('consumer_brand', 'panel_manufacturer'), 'Major TV/monitor OEM, widely associated with Philips/AOC ecosystem'),
    ('TSB', 'Toshiba', 'Toshiba', ('consumer_brand', 'panel_manufacturer')),
    ('VIZ', 'Vizio', 'VIZIO, Inc.', ('consumer_brand',)),
    ('VSC', 'ViewSonic', 'ViewSonic', ('consumer_brand',)),
    ('WDE', 'Westinghouse', 'Westinghouse Digital Electronics', ('consumer_brand',)),
    ('WOR', 'Dell', 'Dell', ('consumer_brand',)),
    ('WWW', 'Asus', 'ASUSTeK Computer Inc.', ('consumer_brand',)),
]
# fmt: on

NOTABLE_VENDORS: dict[str, NotableVendor] = {row[0]: NotableVendor(*row) for row in _NOTABLE_VENDOR_ROWS}


class VendorDatabase:
    """
    Resolves vendor IDs to names.  The notable vendor table is always available; names from an hwdata ``pnp.ids`` file
    are added via :meth:`load_pnp_ids`.
    """

    def __init__(self, notable: dict[str, NotableVendor] = None):
        self.notable = NOTABLE_VENDORS if notable is None else notable
        self.hwdata: dict[str, str] = {}

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[notable={len(self.notable)}, hwdata={len(self.hwdata)}]>'

    @classmethod
    def with_pnp_ids(cls, path: Union[str, Path, None] = None) -> VendorDatabase:
        """
        :param path: Path to a ``pnp.ids`` file.  If not specified, the default hwdata location is used if it exists.
        :return: A database that includes the names from the given file
        """
        db = cls()
        if path is not None:
            db.load_pnp_ids(path)
        elif DEFAULT_PNP_IDS_PATH.exists():
            db.load_pnp_ids(DEFAULT_PNP_IDS_PATH)
        else:
            log.debug(f'Skipping hwdata vendor names - {DEFAULT_PNP_IDS_PATH} does not exist')
        return db

    def load_pnp_ids(self, path: Union[str, Path]) -> int:
        """
        Load vendor names from a tab-separated ``VID<TAB>Name`` file.  Blank lines, comments, and malformed lines are
        skipped.

        :param path: Path to a ``pnp.ids`` file
        :return: The number of vendor names that were loaded
        """
        path = Path(path).expanduser()
        try:
            text = path.read_text('utf-8', errors='replace')
        except OSError as e:
            raise EdidSourceError(f'Unable to read PNP IDs from {path}: {e}') from e

        loaded = self.add_pnp_ids(text)
        log.debug(f'Loaded {loaded} vendor names from {path}')
        return loaded

    def add_pnp_ids(self, text: str) -> int:
        loaded = 0
        for line in text.splitlines():
            if not line.strip() or line.startswith('#'):
                continue
            try:
                vid, name = line.split('\t', 1)
            except ValueError:
                continue
            if len(vid := vid.strip().upper()) == 3 and (name := name.strip()):
                self.hwdata[vid] = name
                loaded += 1
        return loaded

    def lookup(self, vid: str) -> VendorInfo:
        notable = self.notable.get(vid)
        short_name = notable.short_name if notable else None
        hwdata_name = self.hwdata.get(vid)
        return VendorInfo(vid, short_name or hwdata_name or vid, short_name, hwdata_name)

    __getitem__ = lookup


_default_db = VendorDatabase()


def lookup_vendor(vid: str) -> VendorInfo:
    """Resolve the given vendor ID using only the built-in notable vendor table."""
    return _default_db.lookup(vid)
