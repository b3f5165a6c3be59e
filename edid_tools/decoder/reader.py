"""
Bounds-checked byte access for EDID decoding.

Reads never raise - reading beyond the end of the available data records an ``out_of_range_read`` warning on the
:class:`ReadContext` and returns None (or 0 via :meth:`BlockReader.u8_or_zero`).

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .enums import EDID_BLOCK_LENGTH
from .utils import Record

__all__ = ['WarningCode', 'EdidWarning', 'ReadContext', 'BlockReader', 'calc_checksum', 'valid_checksum']
log = logging.getLogger(__name__)


class WarningCode(Enum):
    TOO_SHORT = 'too_short'
    LENGTH_NOT_MULTIPLE_OF_128 = 'length_not_multiple_of_128'
    INVALID_HEADER = 'invalid_header'
    CHECKSUM_FAILED = 'checksum_failed'
    EXTENSION_COUNT_MISMATCH = 'extension_count_mismatch'
    UNKNOWN_EDID_MINOR_VERSION = 'unknown_edid_minor_version'
    UNKNOWN_EXTENSION_TAG = 'unknown_extension_tag'
    UNKNOWN_DATA_BLOCK = 'unknown_data_block'
    PARSE_ERROR = 'parse_error'
    OUT_OF_RANGE_READ = 'out_of_range_read'


@dataclass(frozen=True)
class EdidWarning(Record):
    code: WarningCode
    message: str
    block_index: Optional[int] = None
    offset: Optional[int] = None
    detail: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        location = []
        if self.block_index is not None:
            location.append(f'block={self.block_index}')
        if self.offset is not None:
            location.append(f'offset={self.offset}')
        location = f' ({", ".join(location)})' if location else ''
        return f'[{self.code.value}]{location} {self.message}'


class ReadContext:
    """Holds the immutable EDID bytes being decoded and the warnings accumulated during a single decode pass."""

    __slots__ = ('data', 'warnings')

    def __init__(self, data: bytes):
        self.data = data
        self.warnings: list[EdidWarning] = []

    def __len__(self) -> int:
        return len(self.data)

    def warn(
        self,
        code: WarningCode,
        message: str,
        block_index: int = None,
        offset: int = None,
        detail: dict[str, Any] = None,
    ):
        warning = EdidWarning(code, message, block_index, offset, detail)
        log.debug(f'EDID decode warning: {warning}')
        self.warnings.append(warning)

    def u8(self, offset: int, block_index: int = None, relative_offset: int = None) -> Optional[int]:
        if offset < 0 or offset >= len(self.data):
            self.warn(
                WarningCode.OUT_OF_RANGE_READ,
                'Attempted to read beyond available EDID bytes.',
                block_index,
                offset if relative_offset is None else relative_offset,
                {'absolute_offset': offset, 'length': len(self.data)},
            )
            return None
        return self.data[offset]

    def block_reader(self, block_index: int) -> BlockReader:
        return BlockReader(self, block_index, block_index * EDID_BLOCK_LENGTH)

    def block_bytes(self, block_index: int) -> bytes:
        start = block_index * EDID_BLOCK_LENGTH
        return self.data[start : start + EDID_BLOCK_LENGTH]


class BlockReader:
    """Reads bytes relative to the start of one 128-byte block."""

    __slots__ = ('ctx', 'block_index', 'block_offset')

    def __init__(self, ctx: ReadContext, block_index: int, block_offset: int):
        self.ctx = ctx
        self.block_index = block_index
        self.block_offset = block_offset

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[block={self.block_index}, offset={self.block_offset}]>'

    def u8(self, offset: int) -> Optional[int]:
        return self.ctx.u8(self.block_offset + offset, self.block_index, offset)

    def u8_or_zero(self, offset: int) -> int:
        """Short reads are treated as zero-filled, as CTA-861 does."""
        value = self.ctx.u8(self.block_offset + offset, self.block_index, offset)
        return 0 if value is None else value

    def warn(self, code: WarningCode, message: str, offset: int = None, detail: dict[str, Any] = None):
        self.ctx.warn(code, message, self.block_index, offset, detail)

    @property
    def raw_bytes(self) -> bytes:
        return self.ctx.data[self.block_offset : self.block_offset + EDID_BLOCK_LENGTH]


def calc_checksum(data: bytes, block: int) -> Optional[int]:
    """
    :param data: The full EDID byte sequence
    :param block: The index of the 128-byte block for which the checksum should be calculated
    :return: The value that the block's final byte must have for the sum of the block's bytes to be 0 mod 256, or None
      if the block is truncated
    """
    start = block * EDID_BLOCK_LENGTH
    end = start + EDID_BLOCK_LENGTH - 1
    if len(data) < end + 1:
        return None
    return (256 - sum(data[start:end]) % 256) % 256


def valid_checksum(ctx: ReadContext, block: int) -> Optional[bool]:
    """
    :param ctx: The read context for the EDID being decoded
    :param block: The index of the block to check
    :return: True if the block's checksum byte is correct, False if it is incorrect, or None if it could not be checked
    """
    checksum = ctx.u8((block + 1) * EDID_BLOCK_LENGTH - 1, block, EDID_BLOCK_LENGTH - 1)
    if checksum is None:
        return None
    elif (expected := calc_checksum(ctx.data, block)) is None:
        return None
    return checksum == expected
