"""
CTA-861 data blocks: the base class that dispatches on the 3-bit block tag, plus the audio, video, and speaker
allocation blocks.

Vendor-specific blocks live in :mod:`.vendor_blocks`, and extended tag blocks live in :mod:`.extended_tags`.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Type

from .enums import DataBlockTag, AUDIO_CODECS, SAD_SAMPLE_RATES, SAD_BIT_DEPTHS, SPEAKERS
from .reader import WarningCode
from .utils import Record

if TYPE_CHECKING:
    from .reader import BlockReader

__all__ = [
    'DataBlock', 'ExtensionParseContext', 'ShortAudioDescriptor', 'ShortVideoDescriptor', 'AudioDataBlock',
    'VideoDataBlock', 'SpeakerDataBlock', 'parse_short_video_descriptor',
]
log = logging.getLogger(__name__)

DATA_BLOCK_TYPES: dict[DataBlockTag, Type[DataBlock]] = {}

SHORT_AUDIO_DESCRIPTOR_LENGTH = 3


@dataclass
class ExtensionParseContext:
    """
    State shared by the data blocks of every extension in one EDID, since a 4:2:0 capability map may refer to a video
    block from an earlier extension.
    """

    last_video_block: Optional[VideoDataBlock] = None


@dataclass
class DataBlock(Record):
    data_length: int

    def __init_subclass__(cls, tag: DataBlockTag = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if tag is not None:
            DATA_BLOCK_TYPES[tag] = cls
            cls.tag = tag

    @classmethod
    def for_tag(cls, tag: int) -> Optional[Type[DataBlock]]:
        try:
            return DATA_BLOCK_TYPES[DataBlockTag(tag)]
        except (KeyError, ValueError):
            return None

    @classmethod
    def parse(cls, reader: BlockReader, start: int, length: int, context: ExtensionParseContext) -> DataBlock:
        """
        :param reader: A reader for the extension block that contains this data block
        :param start: The offset of the first byte after the data block's header byte
        :param length: The payload length from the header byte
        :param context: Shared state for the extension being decoded
        :return: The decoded data block
        """
        raise NotImplementedError

    def __serializable__(self):
        return {'tag': self.tag.name, **super().__serializable__()}


# region Audio


@dataclass
class ShortAudioDescriptor(Record):
    standard_codec_id: int
    max_channel_count: int
    sample_rates_bitmask: int
    bit_depth_bitmask: Optional[int] = None
    bit_rate_kbps: Optional[int] = None
    audio_format_code: Optional[int] = None
    codec_profile_or_level: Optional[int] = None
    extended_codec_id: Optional[int] = None

    @property
    def codec(self) -> str:
        try:
            return AUDIO_CODECS[self.standard_codec_id]
        except IndexError:
            return 'Extended' if self.standard_codec_id == 15 else 'Unknown'

    @property
    def sample_rates(self) -> list[str]:
        return [rate for i, rate in enumerate(SAD_SAMPLE_RATES) if self.sample_rates_bitmask & (1 << i)]

    @property
    def bit_depths(self) -> Optional[list[str]]:
        if self.bit_depth_bitmask is None:
            return None
        return [depth for i, depth in enumerate(SAD_BIT_DEPTHS) if self.bit_depth_bitmask & (1 << i)]

    @classmethod
    def parse(cls, reader: BlockReader, offset: int) -> ShortAudioDescriptor:
        b0, b1, b2 = reader.u8_or_zero(offset), reader.u8_or_zero(offset + 1), reader.u8_or_zero(offset + 2)
        sad = cls((b0 >> 3) & 0x0F, (b0 & 0x07) + 1, b1 & 0x7F)
        # The meaning of the 3rd byte depends on the codec
        codec = sad.standard_codec_id
        if codec <= 1:
            sad.bit_depth_bitmask = b2 & 0x07
        elif codec <= 8:
            sad.bit_rate_kbps = b2 * 8
        elif codec <= 13:
            sad.audio_format_code = b2
        elif codec <= 14:
            sad.codec_profile_or_level = b2 & 0x07
        else:
            sad.extended_codec_id = (b2 >> 3) & 0x1F
        return sad


@dataclass
class AudioDataBlock(DataBlock, tag=DataBlockTag.AUDIO):
    short_audio_descriptors: list[ShortAudioDescriptor] = field(default_factory=list)

    @classmethod
    def parse(cls, reader: BlockReader, start: int, length: int, context: ExtensionParseContext) -> AudioDataBlock:
        count, remainder = divmod(length, SHORT_AUDIO_DESCRIPTOR_LENGTH)
        if remainder:
            # A trailing partial descriptor is dropped
            message = 'Audio data block length is not a multiple of 3 bytes.'
            detail = {'data_length': length, 'descriptors': count, 'trailing_bytes': remainder}
            reader.warn(WarningCode.PARSE_ERROR, message, start + count * SHORT_AUDIO_DESCRIPTOR_LENGTH, detail)
        return cls(
            length,
            [
                ShortAudioDescriptor.parse(reader, start + i * SHORT_AUDIO_DESCRIPTOR_LENGTH)
                for i in range(count)
            ],
        )


# endregion

# region Video


@dataclass
class ShortVideoDescriptor(Record):
    vic: int
    is_native_resolution: bool = False

    def __str__(self) -> str:
        return f'VIC {self.vic}{" (native)" if self.is_native_resolution else ""}'


def parse_short_video_descriptor(value: int) -> ShortVideoDescriptor:
    """VICs 1-64 use the low 6 bits with bit 7 as the native flag; bit 6 set means the whole byte is the VIC."""
    if value & 0x40:
        return ShortVideoDescriptor(value, False)
    return ShortVideoDescriptor(value & 0x3F, bool(value & 0x80))


def read_short_video_descriptors(reader: BlockReader, start: int, count: int) -> list[ShortVideoDescriptor]:
    svds = []
    for offset in range(start, start + count):
        if (value := reader.u8(offset)) is None:
            break
        svds.append(parse_short_video_descriptor(value))
    return svds


@dataclass
class VideoDataBlock(DataBlock, tag=DataBlockTag.VIDEO):
    short_video_descriptors: list[ShortVideoDescriptor] = field(default_factory=list)

    @classmethod
    def parse(cls, reader: BlockReader, start: int, length: int, context: ExtensionParseContext) -> VideoDataBlock:
        block = cls(length, read_short_video_descriptors(reader, start, length))
        context.last_video_block = block
        return block

    def merge(self, other: VideoDataBlock):
        """Multiple video data blocks are allowed; their SVDs form a single list."""
        self.short_video_descriptors.extend(other.short_video_descriptors)
        self.data_length += other.data_length


# endregion


@dataclass
class SpeakerDataBlock(DataBlock, tag=DataBlockTag.SPEAKER_ALLOCATION):
    layout_bitmask: int = 0

    @property
    def speakers(self) -> list[str]:
        return [speaker for i, speaker in enumerate(SPEAKERS) if self.layout_bitmask & (1 << i)]

    @classmethod
    def parse(cls, reader: BlockReader, start: int, length: int, context: ExtensionParseContext) -> SpeakerDataBlock:
        u8 = reader.u8_or_zero
        return cls(length, u8(start + 2) << 16 | u8(start + 1) << 8 | u8(start))

    def __serializable__(self):
        return {**super().__serializable__(), 'speakers': self.speakers}
