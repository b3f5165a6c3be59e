"""
Reads EDID data for connected displays from the Linux DRM subsystem via sysfs.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional

from .exceptions import EdidSourceError, EdidPermissionError

if TYPE_CHECKING:
    from .decoder.parser import ParsedEdid

__all__ = ['DrmConnector', 'iter_connectors', 'read_edid_file', 'DRM_ROOT']
log = logging.getLogger(__name__)

DRM_ROOT = Path('/sys/class/drm')


def read_edid_file(path: Path) -> bytes:
    """
    :param path: Path to a file containing raw EDID bytes
    :return: The bytes in the given file
    :raises: :class:`EdidPermissionError` if the file could not be read due to permissions, or
      :class:`EdidSourceError` if any other error occurred
    """
    try:
        return path.read_bytes()
    except PermissionError as e:
        raise EdidPermissionError(path) from e
    except OSError as e:
        raise EdidSourceError(f'Unable to read EDID from {path}: {e}') from e


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text().strip()
    except OSError:
        return None


@dataclass
class DrmConnector:
    """A DRM connector, such as ``card0-HDMI-A-1``, and its EDID."""

    path: Path
    edid_bytes: bytes = field(repr=False, default=b'')

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def connector(self) -> str:
        """The connector name without the card prefix, e.g. ``HDMI-A-1``"""
        return self.name.split('-', 1)[-1]

    @cached_property
    def status(self) -> Optional[str]:
        return _read_text(self.path.joinpath('status'))

    @cached_property
    def enabled(self) -> Optional[str]:
        return _read_text(self.path.joinpath('enabled'))

    @property
    def is_connected(self) -> bool:
        return self.status == 'connected'

    @cached_property
    def edid(self) -> ParsedEdid:
        from .decoder.parser import decode

        return decode(self.edid_bytes)

    @classmethod
    def from_path(cls, path: Path) -> DrmConnector:
        return cls(path, read_edid_file(path.joinpath('edid')))


def iter_connectors(root: Path = DRM_ROOT, include_empty: bool = False) -> Iterator[DrmConnector]:
    """
    :param root: The DRM sysfs directory
    :param include_empty: Whether connectors with an empty EDID (usually because nothing is attached) should be
      included
    :return: Iterator that yields a :class:`DrmConnector` for each connector that exposes an ``edid`` file
    """
    if not root.exists():
        raise EdidSourceError(f'DRM sysfs directory does not exist: {root}')

    for edid_path in sorted(root.glob('*/edid')):
        connector = DrmConnector.from_path(edid_path.parent)
        if connector.edid_bytes or include_empty:
            yield connector
        else:
            log.debug(f'Skipping {connector.name} - its EDID is empty')
