"""
Top-level EDID decoding.

:func:`decode` never raises - every problem with the input is reported via the ``warnings`` on the returned
:class:`ParsedEdid`, and decoding continues with whatever data is available.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Union

from ..vendors import VendorInfo, lookup_vendor
from .base_block import BaseBlock, BasicDisplayParams, ProductInfo, parse_base_block
from .data_blocks import ExtensionParseContext
from .enums import EDID_BLOCK_LENGTH
from .extensions import ExtensionBlock, parse_extensions
from .features import FeatureSupport, build_feature_support
from .reader import ReadContext, EdidWarning, WarningCode
from .timing import NativeResolution, get_native_resolution
from .utils import Record

__all__ = ['ParsedEdid', 'decode', 'parse_edid']
log = logging.getLogger(__name__)

EdidData = Union[bytes, bytearray, memoryview, Iterable[int]]
VendorLookup = Callable[[str], VendorInfo]


@dataclass(frozen=True)
class ParsedEdid(Record):
    raw_bytes: bytes = field(repr=False)
    warnings: list[EdidWarning]
    is_header_valid: bool
    is_checksum_valid: Optional[bool]
    expected_extension_count: int
    actual_extension_count: int
    base_block: BaseBlock
    extensions: list[ExtensionBlock]
    feature_support: FeatureSupport
    vendor_info: VendorInfo
    product_info: ProductInfo
    basic_display_params: BasicDisplayParams
    native_resolution: Optional[NativeResolution]

    def __str__(self) -> str:
        vendor, model = self.vendor_info.good_name, self.product_info.model_name or self.product_info.product_code
        return f'<{self.__class__.__name__}[{vendor} {model}, blocks={1 + self.actual_extension_count}]>'

    def warnings_by_code(self, code: WarningCode) -> list[EdidWarning]:
        return [warning for warning in self.warnings if warning.code == code]

    def as_dict(self, include_raw: bool = True) -> dict[str, Any]:
        """
        :param include_raw: Whether the raw EDID bytes should be included (as a hex string)
        :return: The decoded EDID as nested dicts / lists, suitable for JSON or YAML output
        """
        from ..core.serialization import to_plain

        data = {'raw_bytes': self.raw_bytes.hex()} if include_raw else {}
        data.update(to_plain(self))
        return data


def _clamp_byte(value) -> int:
    """Convert one element the way an 8-bit clamped array would: NaN becomes 0, then clamp, then round half to even."""
    if isinstance(value, int):
        return min(255, max(0, value))
    value = float(value)
    if math.isnan(value):
        return 0
    return round(min(255.0, max(0.0, value)))


def _to_bytes(data: EdidData) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    return bytes(_clamp_byte(value) for value in data)


def decode(data: EdidData, vendor_lookup: VendorLookup = lookup_vendor) -> ParsedEdid:
    """
    Decode the given EDID.  The input is copied before decoding, so it may be safely modified after this returns.

    :param data: The raw EDID bytes, including any extension blocks
    :param vendor_lookup: Function that resolves a 3-letter vendor ID to a :class:`VendorInfo`
    :return: The decoded EDID
    """
    try:
        raw, conversion_error = _to_bytes(data), None
    except (TypeError, ValueError, OverflowError) as e:
        raw, conversion_error = b'', e

    ctx = ReadContext(raw)
    if conversion_error is not None:
        message = 'EDID data could not be converted to bytes.'
        ctx.warn(WarningCode.PARSE_ERROR, message, detail={'error': str(conversion_error)})
    length = len(ctx)
    if length < EDID_BLOCK_LENGTH:
        ctx.warn(WarningCode.TOO_SHORT, 'EDID data is shorter than a single 128-byte block.', detail={'length': length})
    if length % EDID_BLOCK_LENGTH:
        ctx.warn(
            WarningCode.LENGTH_NOT_MULTIPLE_OF_128,
            'EDID length is not a multiple of 128 bytes.',
            detail={'length': length},
        )

    base_block = parse_base_block(ctx.block_reader(0))
    if not base_block.is_header_valid:
        ctx.warn(WarningCode.INVALID_HEADER, 'EDID header is invalid.', 0, 0)
    if base_block.is_checksum_valid is False:
        ctx.warn(WarningCode.CHECKSUM_FAILED, 'Base block checksum failed.', 0, EDID_BLOCK_LENGTH - 1)

    expected_count = base_block.number_of_extensions
    actual_count = max(0, length // EDID_BLOCK_LENGTH - 1)
    if expected_count != actual_count:
        ctx.warn(
            WarningCode.EXTENSION_COUNT_MISMATCH,
            'Extension count does not match available blocks.',
            detail={'expected': expected_count, 'actual': actual_count},
        )

    extensions = parse_extensions(ctx, actual_count, ExtensionParseContext())
    for extension in extensions:
        if extension.is_checksum_valid is False:
            ctx.warn(
                WarningCode.CHECKSUM_FAILED,
                'Extension block checksum failed.',
                extension.block_number,
                EDID_BLOCK_LENGTH - 1,
            )

    basic_display_params = base_block.basic_display_params
    native_resolution = get_native_resolution(base_block.dtds, basic_display_params)
    feature_support = build_feature_support(base_block, extensions, basic_display_params, native_resolution)
    log.debug(f'Decoded EDID with {len(extensions)} extension(s) and {len(ctx.warnings)} warning(s)')
    return ParsedEdid(
        raw_bytes=ctx.data,
        warnings=ctx.warnings,
        is_header_valid=base_block.is_header_valid,
        is_checksum_valid=base_block.is_checksum_valid,
        expected_extension_count=expected_count,
        actual_extension_count=actual_count,
        base_block=base_block,
        extensions=extensions,
        feature_support=feature_support,
        vendor_info=vendor_lookup(base_block.vendor_id),
        product_info=ProductInfo.from_base_block(base_block),
        basic_display_params=basic_display_params,
        native_resolution=native_resolution,
    )


parse_edid = decode
