"""
Human-readable summaries of decoded EDIDs.

:author: Doug Skrypa
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from .color import colored

if TYPE_CHECKING:
    from ..decoder.parser import ParsedEdid
    from ..decoder.reader import EdidWarning

__all__ = ['format_summary', 'format_warnings', 'one_line_summary']


def _yes_no(value: bool) -> str:
    return colored('yes', 'green') if value else colored('no', 'red')


def _format_rows(rows: Iterable[tuple[str, Any]], color: bool = True) -> str:
    rows = [(key, value) for key, value in rows if value is not None]
    width = max(len(key) for key, _ in rows)
    if color:
        return '\n'.join(f'{colored(key.ljust(width), "cyan")}  {value}' for key, value in rows)
    return '\n'.join(f'{key.ljust(width)}  {value}' for key, value in rows)


def _hz_range(low, high) -> str | None:
    if low is None and high is None:
        return None
    return f'{low if low is not None else "?"}-{high if high is not None else "?"} Hz'


def one_line_summary(edid: ParsedEdid) -> str:
    product = edid.product_info
    name = ' '.join(filter(None, (edid.vendor_info.good_name, product.model_name)))
    parts = [name or edid.base_block.vendor_id, f'EDID {edid.base_block.edid_version_string}']
    if (native := edid.native_resolution) is not None:
        parts.append(str(native))
    if edid.warnings:
        parts.append(f'{len(edid.warnings)} warning(s)')
    return ', '.join(filter(None, parts))


def format_summary(edid: ParsedEdid, color: bool = True) -> str:
    """
    :param edid: A decoded EDID
    :param color: Whether ANSI colors should be used
    :return: A multi-line summary of the most commonly needed information in the given EDID
    """
    base, product, features = edid.base_block, edid.product_info, edid.feature_support
    bdp, native = edid.basic_display_params, edid.native_resolution
    yes_no = _yes_no if color else (lambda v: 'yes' if v else 'no')
    gamuts = ', '.join(features.color_gamuts) or None
    hdr_formats = {
        'HDR10': features.supports_hdr10,
        'HDR10+': features.supports_hdr10_plus,
        'Dolby Vision': features.supports_dolby_vision,
    }
    hdr = [name for name, supported in hdr_formats.items() if supported]

    rows = [
        ('Vendor', f'{edid.vendor_info.good_name} ({base.vendor_id})'),
        ('Model', product.model_name),
        ('Product Code', f'0x{product.product_code:04X}'),
        ('Serial Number', product.serial_number_str or (product.serial_number_int or None)),
        ('Manufactured', f'{product.manufacture_year} week {product.manufacture_week}'),
        ('EDID Version', base.edid_version_string),
        ('Header', base.header_validity),
        ('Input', 'digital' if bdp.is_digital else 'analog'),
        ('Color Formats', bdp.digital_color_spaces),
        ('Native Resolution', str(native) if native else None),
        ('Diagonal', f'{bdp.diagonal_inches}"' if bdp.diagonal_inches else None),
        ('Color Gamuts', gamuts),
        ('Max Bit Depth', features.max_input_signal_bit_depth),
        ('HDR', ', '.join(hdr) if hdr else yes_no(False)),
        ('Refresh Rates', _hz_range(features.min_srr_hz, features.max_srr_hz)),
        ('VRR', _hz_range(features.min_vrr_hz, features.max_vrr_hz) if features.supports_vrr else yes_no(False)),
        ('ALLM', yes_no(features.supports_allm)),
        ('Game Mode', yes_no(features.supports_game_mode)),
        ('HDMI Version', features.hdmi_version),
        ('DisplayID Version', features.display_id_version),
        ('Extensions', ', '.join(ext.extension_type.value for ext in edid.extensions) or None),
        ('Warnings', len(edid.warnings)),
    ]
    return _format_rows(rows, color)


def format_warnings(warnings: Iterable[EdidWarning], color: bool = True) -> str:
    if color:
        return '\n'.join(colored(str(warning), 'yellow') for warning in warnings)
    return '\n'.join(map(str, warnings))
