"""
Monitor descriptors stored in the base block's 18-byte DTD slots.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .enums import DTD_LENGTH
from .utils import Record

if TYPE_CHECKING:
    from .reader import BlockReader

__all__ = [
    'SpwgDescriptor3', 'SpwgDescriptor4', 'SpwgData', 'MonitorDescriptors', 'get_monitor_descriptors',
    'sanitize_descriptor_text', 'is_spwg_descriptor_4', 'decode_spwg_part_number',
]
log = logging.getLogger(__name__)

# fmt: off
SERIAL_NUMBER = 0xFF
UNSPECIFIED_TEXT = 0xFE
MONITOR_NAME = 0xFC
TEXT_TAGS = (SERIAL_NUMBER, UNSPECIFIED_TEXT, MONITOR_NAME)

TEXT_OFFSET = 5
TEXT_LENGTH = 13
NUL, LINE_FEED, SPACE = 0x00, 0x0A, 0x20
MULTIPLICATION_SIGN = 0xD7
# fmt: on

# Cleanup rules for vendor-supplied text, applied in order.  Examples are from the linuxhw/EDID corpus.
_CLEANUP_RULES = (
    (re.compile(r'^.*<'), ''),                      # "0<56HGA-EA3" -> "56HGA-EA3" (Lenovo LEN9051)
    (re.compile(r'\^.*$'), ''),                     # "AUO^" -> "AUO" (AU Optronics AUO4100)
    (re.compile(r'\*+$'), ''),                      # "KDC*" -> "KDC", "M101NWT2 R3 *" -> "M101NWT2 R3 "
    (re.compile(r'\b(\d+)\*(\d+)\b'), r'\1x\2'),    # "1920*1080" -> "1920x1080" (CS_5211)
)
_starts_alnum = re.compile(r'^[a-zA-Z0-9]').match
_has_weird_chars = re.compile(r'[|\\`]').search


@dataclass
class SpwgDescriptor3(Record):
    pc_maker_part_number: str
    lcd_supplier_eedid_revision: int
    manufacturer_part_number: str


@dataclass
class SpwgDescriptor4(Record):
    smbus_values: list[int]
    lvds_channels: int
    is_panel_self_test_present: bool


@dataclass
class SpwgData(Record):
    """Panel module info from a pair of consecutive unspecified-text descriptors, as used in many laptop panels"""

    module_revision: int
    descriptor_3: SpwgDescriptor3
    descriptor_4: SpwgDescriptor4


@dataclass
class MonitorDescriptors(Record):
    serial_number: Optional[str] = None
    model_name: Optional[str] = None
    unspecified_strings: list[str] = field(default_factory=list)
    spwg: Optional[SpwgData] = None


def _descriptor_payload(reader: BlockReader, offset: int) -> bytes:
    return bytes(reader.u8_or_zero(offset + TEXT_OFFSET + i) for i in range(TEXT_LENGTH))


def _descriptor_text_bytes(reader: BlockReader, offset: int) -> bytes:
    chars = bytearray()
    for i in range(TEXT_LENGTH):
        byte = reader.u8_or_zero(offset + TEXT_OFFSET + i)
        if byte in (LINE_FEED, NUL):
            break
        chars.append(byte)
    return bytes(chars).rstrip(b' ')


def sanitize_descriptor_text(data: bytes) -> list[str]:
    """
    Split raw descriptor text on non-printable bytes, collapse runs of spaces, and apply the cleanup rules.  Fragments
    that are shorter than 3 characters, that do not start with an alphanumeric character, or that contain pipes,
    backslashes, or backticks are discarded.

    :param data: Descriptor text bytes
    :return: The list of cleaned text fragments
    """
    parts = []
    chars = []

    def push_part():
        text = ''.join(chars).rstrip(' ')
        chars.clear()
        if text:
            parts.append(text)

    for byte in data:
        if byte == MULTIPLICATION_SIGN:
            chars.append('x')
        elif byte < 0x20 or byte > 0x7E:
            push_part()
        elif byte == SPACE and (not chars or chars[-1] == ' '):
            continue
        else:
            chars.append(chr(byte))

    push_part()

    cleaned = []
    for part in parts:
        for pattern, replacement in _CLEANUP_RULES:
            part = pattern.sub(replacement, part)
        part = part.strip()
        if len(part) >= 3 and _starts_alnum(part) and not _has_weird_chars(part):
            cleaned.append(part)

    return cleaned


def decode_spwg_part_number(payload: bytes, start: int, end: int) -> str:
    """Decode the printable ASCII in ``payload[start:end]``, ignoring trailing spaces / NULs / line feeds."""
    while end > start and payload[end - 1] in (SPACE, NUL, LINE_FEED):
        end -= 1

    text = []
    for byte in payload[start:end]:
        if byte in (LINE_FEED, NUL):
            break
        elif 0x20 <= byte <= 0x7E:
            text.append(chr(byte))
    return ''.join(text)


def is_spwg_descriptor_4(payload: bytes) -> bool:
    """
    The second descriptor of an SPWG pair holds 8 bytes of SMBus values, the LVDS channel count (1 or 2), panel self
    test flags (only bit 0 may be set), and a line feed.  At least one SMBus byte must be non-printable, which is what
    distinguishes it from ordinary text.
    """
    if payload[8] not in (1, 2):
        return False
    elif payload[9] & 0xFE:
        return False
    elif payload[10] != LINE_FEED:
        return False
    return any(b < 0x20 or b > 0x7E for b in payload[:8])


def _is_descriptor_header(reader: BlockReader, offset: int, tag: int) -> bool:
    header = [reader.u8(offset + i) for i in range(5)]
    return header[:3] == [0, 0, 0] and header[3] == tag and header[4] == 0


def _parse_spwg_pair(reader: BlockReader, offset: int, end: int) -> Optional[SpwgData]:
    next_offset = offset + DTD_LENGTH
    if next_offset >= end or not _is_descriptor_header(reader, next_offset, UNSPECIFIED_TEXT):
        return None

    payload_3 = _descriptor_payload(reader, offset)
    payload_4 = _descriptor_payload(reader, next_offset)
    if not is_spwg_descriptor_4(payload_4):
        return None

    pc_maker_part_number = decode_spwg_part_number(payload_3, 0, 5)
    manufacturer_part_number = decode_spwg_part_number(payload_3, 6, 13)
    if not pc_maker_part_number or not manufacturer_part_number:
        return None
    elif (module_revision := reader.u8(offset - 1)) is None:
        return None

    return SpwgData(
        module_revision=module_revision,
        descriptor_3=SpwgDescriptor3(pc_maker_part_number, payload_3[5], manufacturer_part_number),
        descriptor_4=SpwgDescriptor4(list(payload_4[:8]), payload_4[8], bool(payload_4[9] & 0x01)),
    )


def get_monitor_descriptors(reader: BlockReader, start: int = 54, end: int = 126) -> MonitorDescriptors:
    """
    Scan the 18-byte slots in ``[start, end)`` for serial number, unspecified text, and model name descriptors.  The
    first pair of consecutive unspecified text descriptors that matches the SPWG layout is decoded as panel info
    (consuming both slots) instead of text.
    """
    descriptors = MonitorDescriptors()
    offset = start
    while offset < end:
        header = [reader.u8(offset + i) for i in range(5)]
        if None in header:
            break

        tag = header[3]
        if header[:3] == [0, 0, 0] and header[4] == 0 and tag in TEXT_TAGS:
            if tag == UNSPECIFIED_TEXT and descriptors.spwg is None:
                if spwg := _parse_spwg_pair(reader, offset, end):
                    log.debug(f'Found SPWG descriptor pair at offset={offset}')
                    descriptors.spwg = spwg
                    offset += DTD_LENGTH * 2
                    continue

            if parts := sanitize_descriptor_text(_descriptor_text_bytes(reader, offset)):
                if tag == SERIAL_NUMBER:
                    descriptors.serial_number = ' '.join(parts)
                elif tag == UNSPECIFIED_TEXT:
                    descriptors.unspecified_strings.extend(parts)
                else:
                    descriptors.model_name = ' '.join(parts)

        offset += DTD_LENGTH

    return descriptors
