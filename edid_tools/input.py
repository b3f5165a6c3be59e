"""
Loads EDID bytes from files, stdin, or hex strings.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Union

from .decoder.enums import EDID_HEADER
from .decoder.hex_dump import parse_hex_dump
from .exceptions import EdidSourceError, EdidPermissionError

__all__ = ['load_edid', 'looks_like_text', 'edid_from_hex_strings']
log = logging.getLogger(__name__)

_TEXT_BYTES = frozenset(b'\t\n\r\x0c') | frozenset(range(0x20, 0x7F))


def looks_like_text(data: bytes) -> bool:
    """Raw EDIDs begin with a binary header and always contain non-printable bytes; hex dumps contain neither."""
    if data.startswith(EDID_HEADER):
        return False
    return all(b in _TEXT_BYTES for b in data)


def _read_bytes(path: Union[str, Path]) -> bytes:
    if path == '-':
        return sys.stdin.buffer.read()

    path = Path(path).expanduser()
    try:
        return path.read_bytes()
    except PermissionError as e:
        raise EdidPermissionError(path) from e
    except OSError as e:
        raise EdidSourceError(f'Unable to read {path}: {e}') from e


def load_edid(path: Union[str, Path]) -> bytes:
    """
    :param path: Path to a file containing either raw EDID bytes or a hex dump, or ``-`` to read from stdin
    :return: The EDID bytes
    """
    data = _read_bytes(path)
    if data and looks_like_text(data):
        log.debug(f'Parsing {path} as a hex dump')
        return parse_hex_dump(data.decode('ascii'))
    return data


def edid_from_hex_strings(values: Iterable[str]) -> bytes:
    """Unbroken hex strings are concatenated; anything else is treated as one hex dump with whitespace between values"""
    values = list(values)
    compact = [''.join(value.split()) for value in values]
    if all(_is_hex(value) for value in compact):
        return parse_hex_dump(''.join(compact))
    return parse_hex_dump(' '.join(values))


def _is_hex(value: str) -> bool:
    try:
        bytes.fromhex(value)
    except ValueError:
        return False
    return bool(value)
