"""
Configures loggers for the EDID tools CLI.  Library code only creates loggers; handlers are only added here.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from logging import LogRecord, Logger, Filter, Formatter
from pathlib import Path
from typing import Optional, Union, Collection, Iterable, Callable

from tzlocal import get_localzone

from .output.color import colored

__all__ = ['init_logging', 'create_filter', 'DatetimeFormatter', 'ColorLogFormatter', 'ENTRY_FMT_DETAILED']
log = logging.getLogger(__name__)

ENTRY_FMT_DETAILED = '%(asctime)s %(levelname)s %(name)s %(lineno)d %(message)s'
DATE_FMT = '%Y-%m-%d %H:%M:%S %Z'

_NotSet = object()

PathLike = Union[Path, str]
Names = Union[str, Collection[str], None]


def init_logging(
    verbosity: int = 0,
    *,
    log_path: PathLike | None = None,
    names: Names = _NotSet,
    entry_fmt: str = None,
    fix_sigpipe: bool = True,
    replace_handlers: bool = True,
    streams: bool = True,
) -> Optional[Path]:
    """
    Send INFO and lower to stdout and WARNING and higher to stderr.  Each ``-v`` lowers the stdout threshold: 0 is
    INFO, 1 is VERBOSE (19), 2 is DEBUG, and 3 also switches to :data:`ENTRY_FMT_DETAILED`.

    :param verbosity: Higher values increase stdout output verbosity
    :param log_path: A file that should receive every log entry at DEBUG and above, or None to skip file logging
    :param names: The loggers to configure.  None means the root logger.  By default, the ``edid_tools`` and
      ``__main__`` loggers are configured.
    :param entry_fmt: The stream handler log message format
    :param fix_sigpipe: Restore the default SIGPIPE handler so piping output to ``| head`` does not raise
    :param replace_handlers: Remove any existing handlers from the configured loggers first
    :param streams: Add the stdout and stderr handlers
    :return: The path to which logs are being written, or None if no file handler was configured.
    """
    if fix_sigpipe:
        import signal

        try:
            signal.signal(signal.SIGPIPE, signal.SIG_DFL)
        except AttributeError:
            pass  # Windows

    if logging.getLevelName(19) != 'VERBOSE':
        logging.addLevelName(19, 'VERBOSE')

    loggers = _get_loggers(names, replace_handlers)
    root_logger = logging.getLogger()
    if root_logger in loggers:
        root_logger.addHandler(logging.NullHandler())
    root_logger.setLevel(logging.NOTSET)

    if streams:
        _add_stream_handlers(loggers, verbosity or 0, entry_fmt)
    if log_path is not None:
        log_path = Path(log_path).expanduser()
        _add_file_handler(loggers, log_path)
    return log_path


def _get_loggers(names: Names, replace_handlers: bool) -> list[Logger]:
    if names is _NotSet:
        names = (__name__.split('.')[0], '__main__')
    elif names is None or isinstance(names, str):
        names = (names,)

    loggers = [logging.getLogger(name) for name in set(names)]
    for logger in loggers:
        logger.setLevel(logging.NOTSET)  # handlers filter by level
        if replace_handlers:
            logger.handlers = []
    return loggers


def _add_stream_handlers(loggers: Iterable[Logger], verbosity: int, entry_fmt: Optional[str]):
    formatter = ColorLogFormatter(entry_fmt or (ENTRY_FMT_DETAILED if verbosity > 2 else '%(message)s'), DATE_FMT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.name = 'stdout'
    stdout_handler.setLevel(logging.DEBUG + 2 - verbosity if verbosity else logging.INFO)
    stdout_handler.addFilter(create_filter(lambda r: r.levelno < logging.WARNING))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.name = 'stderr'
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.addFilter(create_filter(lambda r: r.levelno >= logging.WARNING))

    for handler in (stdout_handler, stderr_handler):
        handler.setFormatter(formatter)
        for logger in loggers:
            logger.addHandler(handler)


def _add_file_handler(loggers: Iterable[Logger], log_path: Path):
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path.as_posix(), encoding='utf-8')
    file_handler.name = log_path.as_posix()
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(DatetimeFormatter(ENTRY_FMT_DETAILED, DATE_FMT))
    for logger in loggers:
        logger.addHandler(file_handler)
    log.debug(f'Logging to {log_path}')


def create_filter(filter_fn: Callable[[LogRecord], bool]) -> Filter:
    """
    :param filter_fn: A function that takes 1 parameter (record) and returns True if the record should be logged
    :return: A :class:`logging.Filter` that uses the given function
    """

    class CustomLogFilter(Filter):
        def filter(self, record: LogRecord) -> bool:
            return filter_fn(record)

    return CustomLogFilter()


class DatetimeFormatter(Formatter):
    """Formats timestamps in the local timezone, so ``%Z`` in the date format shows its name."""

    _local_tz = get_localzone()

    def formatTime(self, record: LogRecord, datefmt: str = None) -> str:
        dt = datetime.fromtimestamp(record.created, self._local_tz)
        return dt.strftime(datefmt or DATE_FMT)


class ColorLogFormatter(DatetimeFormatter):
    """
    Colors a log entry when the ``extra`` dict passed when logging has a ``color`` key, for example::\n
        log.error('Unable to read EDID', extra={'color': 'red'})

    The value may be a color name or number, or a dict of keyword arguments for :func:`.colored`.
    """

    def format(self, record: LogRecord) -> str:
        formatted = super().format(record)
        if color := getattr(record, 'color', None):
            if isinstance(color, dict):
                return colored(formatted, **color)
            return colored(formatted, color)
        return formatted
