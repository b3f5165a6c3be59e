"""
Exceptions for errors that occur while obtaining EDID data.

Decoding itself never raises; problems with the data are reported as warnings on the decoded result instead.

:author: Doug Skrypa
"""

from __future__ import annotations

from functools import cached_property
from getpass import getuser
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

__all__ = ['EdidError', 'EdidSourceError', 'EdidPermissionError', 'InvalidHexDump']


class EdidError(Exception):
    """Base EDID tools exception"""


class EdidSourceError(EdidError):
    """Error while reading EDID data from a file, device, or other source"""


class EdidPermissionError(EdidSourceError):
    """Error due to insufficient permissions"""

    def __init__(self, path: Path):
        self.path = path

    @cached_property
    def _suggestions(self) -> str:
        try:
            stat = self.path.stat()
        except OSError:
            return ''

        if stat.st_uid == 0 and stat.st_gid == 0:
            return ' - it is owned by root; try running this command with sudo'

        name = _get_group_name(stat.st_gid)
        desc = f'group={name!r}' if name else f'the group with gid={stat.st_gid}'
        return (
            f' - it is owned by {desc}, but you are not a member'
            f' - you can become a member by running `sudo usermod -a -G {name or stat.st_gid} {getuser()}`,'
            f' followed by `newgrp {name or stat.st_gid}` to log in to it without restarting'
        )

    def __str__(self) -> str:
        return f'Permission error for {self.path}{self._suggestions}'


def _get_group_name(gid: int) -> str | None:
    try:
        from grp import getgrgid

        return getgrgid(gid).gr_name
    except (ImportError, KeyError):  # grp is unavailable on Windows
        return None


class InvalidHexDump(EdidSourceError):
    """Raised when text that was expected to contain a hex dump of EDID bytes does not contain any"""
