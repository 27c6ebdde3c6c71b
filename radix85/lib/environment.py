#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
A common interface to all radix85 configuration settings available via environment variables.
This module is also host to the logging configuration.
"""
from __future__ import annotations

import logging
import os
import sys

from enum import IntEnum
from typing import Generic, Optional, TypeVar

import colorama

_T = TypeVar('_T')

Logger = logging.Logger


class LogLevel(IntEnum):
    """
    An enumeration representing the current log level:
    """
    DETACHED = logging.CRITICAL + 100
    """
    This unit is not attached to a terminal but has been instantiated in
    code. This means that the only way to communicate problems is to throw
    an exception.
    """
    NONE = logging.CRITICAL + 50

    @classmethod
    def FromVerbosity(cls, verbosity: int):
        if verbosity < 0:
            return cls.DETACHED
        return {
            0: cls.WARNING,
            1: cls.INFO,
            2: cls.DEBUG
        }.get(verbosity, cls.DEBUG)

    NOTSET   = logging.NOTSET    # noqa
    CRITICAL = logging.CRITICAL  # noqa
    FATAL    = logging.FATAL     # noqa
    ERROR    = logging.ERROR     # noqa
    WARNING  = logging.WARNING   # noqa
    WARN     = logging.WARN      # noqa
    INFO     = logging.INFO      # noqa
    DEBUG    = logging.DEBUG     # noqa

    @property
    def verbosity(self) -> int:
        if self.value >= LogLevel.DETACHED:
            return -1
        if self.value >= LogLevel.WARNING:
            return +0
        if self.value >= LogLevel.INFO:
            return +1
        if self.value >= LogLevel.DEBUG:
            return +2
        else:
            return -1


class Radix85Formatter(logging.Formatter):

    NAMES = {
        logging.CRITICAL : 'failure',
        logging.ERROR    : 'failure',
        logging.WARNING  : 'warning',
        logging.INFO     : 'comment',
        logging.DEBUG    : 'verbose',
    }

    COLORS = {
        logging.CRITICAL : colorama.Fore.LIGHTRED_EX,
        logging.ERROR    : colorama.Fore.LIGHTRED_EX,
        logging.WARNING  : colorama.Fore.LIGHTYELLOW_EX,
        logging.INFO     : colorama.Fore.LIGHTBLUE_EX,
        logging.DEBUG    : colorama.Fore.LIGHTBLACK_EX,
    }

    def __init__(self, format, colored=False, **kwargs):
        super().__init__(format, **kwargs)
        self.colored = colored

    def formatMessage(self, record: logging.LogRecord) -> str:
        name = self.NAMES.get(record.levelno, record.levelname.lower())
        if self.colored:
            color = self.COLORS.get(record.levelno, '')
            name = F'{color}{name}{colorama.Style.RESET_ALL}'
        record.custom_level_name = name
        return super().formatMessage(record)


def _stderr_is_terminal() -> bool:
    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


def logger(name: str) -> logging.Logger:
    """
    Obtain a logger which is configured with the default radix85 format.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        colored = not environment.colorless.value and _stderr_is_terminal()
        if colored:
            stream = logging.StreamHandler(colorama.AnsiToWin32(sys.stderr).stream)
        else:
            stream = logging.StreamHandler()
        stream.setFormatter(Radix85Formatter(
            '({asctime}) {custom_level_name} in {name}: {message}',
            colored=colored,
            style='{',
            datefmt='%H:%M:%S',
        ))
        logger.addHandler(stream)
    logger.propagate = False
    return logger


class EnvironmentVariableSetting(Generic[_T]):
    key: str
    value: Optional[_T]

    def __init__(self, name: str):
        self.key = F'RADIX85_{name}'
        self.value = self.read()

    def read(self) -> _T:
        return None


class EVBool(EnvironmentVariableSetting[bool]):
    def read(self):
        value = os.environ.get(self.key, None)
        if value is None:
            return False
        else:
            value = value.lower().strip()
        if not value:
            return False
        if value.isdigit():
            return bool(int(value))
        return value not in {'no', 'off', 'false'}


class EVInt(EnvironmentVariableSetting[int]):
    def read(self):
        try:
            return int(os.environ[self.key], 0)
        except (KeyError, ValueError):
            return 0


class EVLog(EnvironmentVariableSetting[Optional[LogLevel]]):
    def read(self):
        try:
            loglevel = os.environ[self.key]
        except KeyError:
            return None
        if loglevel.isdigit():
            return LogLevel.FromVerbosity(int(loglevel))
        try:
            loglevel = LogLevel[loglevel.upper()]
        except KeyError:
            levels = ', '.join(ll.name for ll in LogLevel)
            logging.getLogger(__name__).warning(
                F'ignoring unknown verbosity {loglevel!r}; pick from: {levels}')
            return None
        else:
            return loglevel


class environment:
    verbosity = EVLog('VERBOSITY')
    term_size = EVInt('TERM_SIZE')
    colorless = EVBool('COLORLESS')
    buffer_size = EVInt('BUFFER_SIZE')
