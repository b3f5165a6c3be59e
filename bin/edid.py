#!/usr/bin/env python

import logging
import sys

from cli_command_parser import Command, SubCommand, Positional, Option, Flag, Counter, main

from edid_tools.__version__ import __version__  # noqa
from edid_tools.exceptions import EdidError

log = logging.getLogger(__name__)

FORMATS = ('summary', 'yaml', 'json')


class Edid(Command, description='Decode EDID data from files, hex dumps, or connected displays'):
    action = SubCommand()
    verbose = Counter('-v', help='Increase logging verbosity (can specify multiple times)')

    def _init_command_(self):
        from edid_tools.logging import init_logging

        init_logging(self.verbose, log_path=None)


class Decode(Edid, help='Decode an EDID'):
    path = Positional(nargs='?', help='A file containing a raw EDID or a hex dump of one, or - to read from stdin')
    hex = Option('-x', nargs='+', help='The EDID as one or more hex strings (instead of a path)')
    format = Option('-f', default='summary', choices=FORMATS, help='Output format')
    warnings = Flag('-w', help='Only show the warnings that were encountered while decoding')
    raw = Flag('-r', help='Include the raw EDID bytes in yaml/json output')

    def main(self):
        from edid_tools.decoder import decode
        from edid_tools.input import load_edid, edid_from_hex_strings

        if not self.hex and not self.path:
            log.error('A path or --hex is required', extra={'color': 'red'})
            sys.exit(1)

        try:
            data = edid_from_hex_strings(self.hex) if self.hex else load_edid(self.path)
        except EdidError as e:
            log.error(e, extra={'color': 'red'})
            sys.exit(1)

        edid = decode(data)
        if self.warnings:
            print_warnings(edid, self.format)
        else:
            print_edid(edid, self.format, self.raw)


class List(Edid, help='List connected displays'):
    all = Flag('-a', help='Include connectors that do not have an attached display')
    format = Option('-f', default='summary', choices=FORMATS, help='Output format')

    def main(self):
        from edid_tools.output.summary import one_line_summary
        from edid_tools.sysfs import iter_connectors

        try:
            connectors = list(iter_connectors(include_empty=self.all))
        except EdidError as e:
            log.error(e, extra={'color': 'red'})
            sys.exit(1)

        if not connectors:
            log.warning('No displays were found')
        for connector in connectors:
            if self.format != 'summary':
                print_edid(connector.edid, self.format, False)
            elif connector.edid_bytes:
                print(f'{connector.name} [{connector.status}]: {one_line_summary(connector.edid)}')
            else:
                print(f'{connector.name} [{connector.status}]: (no EDID)')


class Vendor(Edid, help='Look up the names of vendors by their 3-letter PNP ID'):
    vid = Positional(nargs='+', help='One or more vendor IDs')
    pnp_ids = Option('-p', metavar='PATH', help='Path to an hwdata pnp.ids file (default: /usr/share/hwdata/pnp.ids)')

    def main(self):
        from edid_tools.vendors import VendorDatabase

        try:
            db = VendorDatabase.with_pnp_ids(self.pnp_ids)
        except EdidError as e:
            log.error(e, extra={'color': 'red'})
            sys.exit(1)

        for vid in self.vid:
            info = db.lookup(vid.upper())
            if info.hwdata_name and info.hwdata_name != info.good_name:
                print(f'{info.vid}: {info.good_name} (hwdata: {info.hwdata_name})')
            else:
                print(f'{info.vid}: {info.good_name}')


def print_edid(edid, format: str, include_raw: bool):
    if format == 'summary':
        from edid_tools.output import format_summary

        print(format_summary(edid, color=sys.stdout.isatty()))
    elif format == 'json':
        from edid_tools.core.serialization import json_dump

        print(json_dump(edid.as_dict(include_raw)))
    else:
        from edid_tools.core.serialization import yaml_dump

        print(yaml_dump(edid.as_dict(include_raw), indent_nested_lists=True))


def print_warnings(edid, format: str):
    if format == 'summary':
        from edid_tools.output import format_warnings

        if edid.warnings:
            print(format_warnings(edid.warnings, color=sys.stdout.isatty()))
        else:
            log.info('No warnings')
    elif format == 'json':
        from edid_tools.core.serialization import json_dump

        print(json_dump(edid.warnings))
    else:
        from edid_tools.core.serialization import yaml_dump

        print(yaml_dump({'warnings': edid.warnings}, indent_nested_lists=True))


if __name__ == '__main__':
    main()
