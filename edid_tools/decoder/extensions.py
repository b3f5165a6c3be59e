"""
EDID extension blocks, and the CTA-861 Data Block Collection.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Type

from .data_blocks import DataBlock, VideoDataBlock, ExtensionParseContext
from .enums import EDID_BLOCK_LENGTH, CTA_EXTENSION_TAG, DISPLAYID_EXTENSION_TAG, DataBlockTag, ExtendedTag
from .enums import ExtensionType
from .extended_tags import ExtendedTagDataBlock, HdmiForumScdb
from .reader import WarningCode, valid_checksum
from .timing import Dtd, get_dtds
from .utils import Record

if TYPE_CHECKING:
    from .reader import BlockReader, ReadContext

__all__ = [
    'ExtensionBlock', 'CtaExtensionBlock', 'DisplayIdExtensionBlock', 'UnknownExtensionBlock',
    'parse_data_block_collection', 'parse_extensions',
]
log = logging.getLogger(__name__)

EXTENSION_TYPES: dict[int, Type[ExtensionBlock]] = {}

DATA_BLOCK_COLLECTION_START = 4
DTD_END = 126
CHECKSUM_OFFSET = EDID_BLOCK_LENGTH - 1


@dataclass
class ExtensionBlock(Record):
    raw_bytes: bytes = field(repr=False)
    block_number: int
    ext_tag_byte: int
    revision_number: int
    dtd_start: int
    num_dtds: int = 0
    supports_underscan: bool = False
    supports_basic_audio: bool = False
    supports_ycbcr444: bool = False
    supports_ycbcr422: bool = False
    data_block_collection: Optional[list[DataBlock]] = None
    dtds: list[Dtd] = field(default_factory=list)
    checksum: int = 0
    is_checksum_valid: Optional[bool] = None

    extension_type = ExtensionType.UNKNOWN

    def __init_subclass__(cls, ext_tag: int = None, extension_type: ExtensionType = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if ext_tag is not None:
            EXTENSION_TYPES[ext_tag] = cls
        if extension_type is not None:
            cls.extension_type = extension_type

    @classmethod
    def parse(cls, reader: BlockReader, context: ExtensionParseContext) -> ExtensionBlock:
        """Decode the extension block in the given reader, using the class registered for its tag byte."""
        block_cls = EXTENSION_TYPES.get(reader.u8_or_zero(0), UnknownExtensionBlock)
        return block_cls._parse(reader, context)

    @classmethod
    def _parse(cls, reader: BlockReader, context: ExtensionParseContext) -> ExtensionBlock:
        block = cls._from_header(reader)
        block.checksum = reader.u8(CHECKSUM_OFFSET) or 0
        block.is_checksum_valid = valid_checksum(reader.ctx, reader.block_index)
        return block

    @classmethod
    def _from_header(cls, reader: BlockReader) -> ExtensionBlock:
        u8 = reader.u8_or_zero
        flags = u8(3)
        return cls(
            raw_bytes=reader.raw_bytes,
            block_number=reader.block_index,
            ext_tag_byte=u8(0),
            revision_number=u8(1),
            dtd_start=u8(2),
            num_dtds=flags & 0x0F,
            supports_underscan=bool(flags & 0x80),
            supports_basic_audio=bool(flags & 0x40),
            supports_ycbcr444=bool(flags & 0x20),
            supports_ycbcr422=bool(flags & 0x10),
        )

    def iter_data_blocks(self):
        yield from self.data_block_collection or ()

    def __serializable__(self):
        return {'extension_type': self.extension_type.value, **super().__serializable__()}


class CtaExtensionBlock(ExtensionBlock, ext_tag=CTA_EXTENSION_TAG, extension_type=ExtensionType.CTA_861):
    @classmethod
    def _parse(cls, reader: BlockReader, context: ExtensionParseContext) -> CtaExtensionBlock:
        block = super()._parse(reader, context)
        dtd_start = block.dtd_start
        # A DTD offset of 4 means there are no data blocks
        if dtd_start != DATA_BLOCK_COLLECTION_START:
            block.data_block_collection = parse_data_block_collection(reader, dtd_start, context)
        if dtd_start >= DATA_BLOCK_COLLECTION_START:
            block.dtds = get_dtds(reader, dtd_start, DTD_END)
        return block


class DisplayIdExtensionBlock(ExtensionBlock, ext_tag=DISPLAYID_EXTENSION_TAG, extension_type=ExtensionType.DISPLAYID):
    """Only the DisplayID section header is decoded; its revision is used to report the DisplayID version."""

    @classmethod
    def _from_header(cls, reader: BlockReader) -> DisplayIdExtensionBlock:
        u8 = reader.u8_or_zero
        return cls(
            raw_bytes=reader.raw_bytes,
            block_number=reader.block_index,
            ext_tag_byte=u8(0),
            revision_number=u8(1),
            dtd_start=min(CHECKSUM_OFFSET, 5 + u8(2)),  # byte 2 is the section payload length
        )


class UnknownExtensionBlock(ExtensionBlock):
    @classmethod
    def _parse(cls, reader: BlockReader, context: ExtensionParseContext) -> UnknownExtensionBlock:
        block = super()._parse(reader, context)
        reader.warn(
            WarningCode.UNKNOWN_EXTENSION_TAG,
            'Encountered an unsupported extension tag.',
            0,
            {'tag': block.ext_tag_byte},
        )
        return block


def _parse_data_block(reader: BlockReader, index: int, context: ExtensionParseContext) -> Optional[DataBlock]:
    header = reader.u8_or_zero(index)
    tag, length = (header >> 5) & 0x07, header & 0x1F
    if block_cls := DataBlock.for_tag(tag):
        return block_cls.parse(reader, index + 1, length, context)

    reader.warn(
        WarningCode.UNKNOWN_DATA_BLOCK,
        'Encountered an unknown CTA data block tag.',
        index,
        {'tag_code': tag, 'length': length},
    )
    return None


def _find_misaligned_scdb(
    reader: BlockReader, start: int, end: int, context: ExtensionParseContext
) -> Optional[HdmiForumScdb]:
    """
    Some EDIDs have data blocks with incorrect lengths, which causes the blocks that follow them to be misaligned.  The
    HDMI Forum SCDB is important enough to search for byte by byte when it was not found during the normal scan.
    """
    for index in range(start, end):
        if (header := reader.u8(index)) is None:
            break
        elif (header >> 5) & 0x07 != DataBlockTag.EXTENDED_TAG or not (length := header & 0x1F):
            continue
        elif index + 1 + length > end:
            continue
        elif reader.u8_or_zero(index + 1) != ExtendedTag.HDMI_FORUM_SCDB:
            continue

        log.debug(f'Recovered misaligned HDMI Forum SCDB at offset={index} in block={reader.block_index}')
        return ExtendedTagDataBlock.parse(reader, index + 1, length, context)

    return None


def parse_data_block_collection(reader: BlockReader, dtd_start: int, context: ExtensionParseContext) -> list[DataBlock]:
    """
    Decode the data blocks in ``[4, dtd_start)``.  Each block starts with a header byte that holds a 3-bit tag and a
    5-bit payload length.  Multiple video data blocks are merged into the first one, and blocks with unknown tags are
    skipped with a warning.

    :param reader: A reader for the CTA-861 extension block
    :param dtd_start: The offset of the first DTD in the extension block
    :param context: Shared state for the extensions being decoded
    :return: The list of decoded data blocks
    """
    start = DATA_BLOCK_COLLECTION_START
    if dtd_start < start:
        message = 'CTA data block collection length is negative.'
        reader.warn(WarningCode.PARSE_ERROR, message, start, {'dtd_start': dtd_start})
        return []

    end = min(dtd_start, CHECKSUM_OFFSET)
    blocks = []
    primary_video_block = None
    index = start
    while index < end:
        if (header := reader.u8(index)) is None:
            break

        block = _parse_data_block(reader, index, context)
        if isinstance(block, VideoDataBlock):
            if primary_video_block is None:
                primary_video_block = block
                blocks.append(block)
            else:
                primary_video_block.merge(block)
                context.last_video_block = primary_video_block
        elif block is not None:
            blocks.append(block)

        index += (header & 0x1F) + 1

    if not any(isinstance(block, HdmiForumScdb) for block in blocks):
        if scdb := _find_misaligned_scdb(reader, start, end, context):
            blocks.append(scdb)

    return blocks


def parse_extensions(ctx: ReadContext, count: int, context: ExtensionParseContext = None) -> list[ExtensionBlock]:
    """
    Decode up to ``count`` extension blocks, starting with block 1.  A failure while decoding any single extension is
    recorded as a warning, and that block is represented as an :class:`UnknownExtensionBlock` instead.
    """
    if context is None:
        context = ExtensionParseContext()

    extensions = []
    for block_index in range(1, count + 1):
        reader = ctx.block_reader(block_index)
        if reader.u8(0) is None:
            break

        try:
            extensions.append(ExtensionBlock.parse(reader, context))
        except Exception as e:
            log.debug(f'Error parsing extension block={block_index}:', exc_info=True)
            detail = {'name': type(e).__name__, 'message': str(e)}
            reader.warn(WarningCode.PARSE_ERROR, 'Failed to parse extension block.', 0, detail)
            extensions.append(UnknownExtensionBlock._parse(reader, context))

    return extensions
