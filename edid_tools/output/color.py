"""
ANSI Color Handling

:author: Doug Skrypa
"""

from typing import Union, Any, Iterable

__all__ = ['colored', 'InvalidAnsiCode']

C = Union[str, int]
Attrs = Union[C, Iterable[C]]
Bool = Union[bool, Any]

FG_PREFIX = '38;5;'
BG_PREFIX = '48;5;'

# fmt: off
ANSI_COLORS = {
    'black': 0, 'red': 1, 'green': 2, 'yellow': 3, 'blue': 4, 'magenta': 5, 'cyan': 6, 'light_grey': 7,
    'dark_grey': 8, 'light_red': 9, 'light_green': 10, 'light_yellow': 11, 'light_blue': 12, 'light_magenta': 13,
    'light_cyan': 14, 'white': 15, 'orange': 208, 'grey': 244,
}
ANSI_ATTRS = {
    'bold': '\x1b[1m', 'dim': '\x1b[2m', 'italic': '\x1b[3m', 'underlined': '\x1b[4m', 'blink': '\x1b[5m',
    'reverse': '\x1b[7m', 'hidden': '\x1b[8m', 'reset': '\x1b[0m',
}
# fmt: on


def colored(
    text: Any, color: C = None, bg_color: C = None, attrs: Attrs = None, reset: Bool = True, *, prefix: C = None
) -> str:
    """
    :param text: The text to be colored
    :param color: A foreground color name from :data:`ANSI_COLORS` or a 256-color code
    :param bg_color: A background color name from :data:`ANSI_COLORS` or a 256-color code
    :param attrs: One or more attribute names from :data:`ANSI_ATTRS`
    :param reset: Whether the reset code should be appended
    :param prefix: A raw ANSI code to be included before all other codes
    :return: The text, wrapped in the requested ANSI escape codes
    """
    if not text:
        return ''
    if color is bg_color is attrs is prefix is None:
        return text
    parts = (
        f'\x1b[{prefix}m' if prefix else '',
        ansi_color_code(color, FG_PREFIX) if color is not None else '',
        ansi_color_code(bg_color, BG_PREFIX) if bg_color is not None else '',
        attr_code(attrs) if attrs is not None else '',
        str(text) if not isinstance(text, str) else text,
        '\x1b[0m' if reset else '',
    )
    return ''.join(parts)


def attr_code(attr: Attrs) -> str:
    try:
        if isinstance(attr, (str, int)):
            return ANSI_ATTRS[attr]
        return ''.join(ANSI_ATTRS[a] for a in attr)
    except (KeyError, TypeError) as e:
        raise InvalidAnsiCode(attr) from e


def ansi_color_code(color: C, base: str) -> str:
    if isinstance(color, int) or (isinstance(color, str) and color.isdigit()):
        if 0 <= (color_num := int(color)) < 256:
            return f'\x1b[{base}{color_num}m'
        raise InvalidAnsiCode(color)

    try:
        color_num = ANSI_COLORS[color.lower()]
    except (KeyError, AttributeError) as e:
        raise InvalidAnsiCode(color) from e
    else:
        return f'\x1b[{base}{color_num}m'


class InvalidAnsiCode(ValueError):
    """Exception to be raised when an invalid ANSI color/attribute code is selected"""
