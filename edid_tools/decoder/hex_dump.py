"""
Extracts EDID bytes from text, such as the output of ``edid-decode`` or a hex dump copied from a log.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import re

from ..exceptions import InvalidHexDump

__all__ = ['parse_hex_dump', 'extract_hex_section']
log = logging.getLogger(__name__)

SECTION_START = 'edid-decode (hex):'
SECTION_END = '----------------'

_hex_byte_finditer = re.compile(r'(?<![0-9a-fA-F])([0-9a-fA-F]{2})(?![0-9a-fA-F])').finditer
_continuous_hex_match = re.compile(r'^(?:[0-9a-fA-F]{2})+$').match


def extract_hex_section(text: str) -> str | None:
    """
    :param text: Text that may contain an ``edid-decode (hex):`` section
    :return: The content of that section, up to the line of dashes that follows it (or the end of the text), or None
      if the text does not contain one
    """
    if (start := text.find(SECTION_START)) == -1:
        return None
    start += len(SECTION_START)
    if (end := text.find(SECTION_END, start)) == -1:
        end = len(text)
    return text[start:end]


def parse_hex_dump(text: str) -> bytes:
    """
    Extract bytes from the given text.  If it contains an ``edid-decode (hex):`` section, then only that section is
    used.  A single unbroken string of hex digits is also accepted.  Otherwise, every standalone 2-digit hex token
    becomes one byte, so offsets like ``0x0010`` or ``000080:`` are ignored.

    :param text: The text to parse
    :return: The extracted bytes
    :raises: :class:`InvalidHexDump` if no bytes could be found
    """
    if (section := extract_hex_section(text)) is not None:
        text = section
    elif _continuous_hex_match(compact := text.strip()) and len(compact) > 2:
        return bytes.fromhex(compact)

    data = bytes(int(m.group(1), 16) for m in _hex_byte_finditer(text))
    if not data:
        raise InvalidHexDump('No hex bytes were found')
    log.debug(f'Extracted {len(data)} bytes from hex dump')
    return data
