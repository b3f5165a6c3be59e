"""
Output formatting package.

:author: Doug Skrypa
"""

from .color import colored
from .summary import format_summary, format_warnings

__all__ = ['colored', 'format_summary', 'format_warnings']
