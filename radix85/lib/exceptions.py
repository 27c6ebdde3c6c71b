"""
Exceptions raised by the radix85 library and the process exit codes they map to. Library code
only ever raises these; turning them into log output and exit codes is the job of
`radix85.units.Unit.run`.
"""
from __future__ import annotations

from enum import IntEnum

from radix85.lib.tools import printable_symbol


class ExitCode(IntEnum):
    """
    Process exit codes used by all units. The values are stable.
    """
    SUCCESS = 0
    USAGE = 2
    FILE = 3
    IO = 4
    DECODE = 5
    INTERRUPTED = 130


class Radix85Exception(Exception):
    """
    Base class for all exceptions raised by radix85.
    """
    exit_code: ExitCode = ExitCode.IO


class ArgumentError(Radix85Exception, ValueError):
    """
    A malformed or out-of-range option value.
    """
    exit_code = ExitCode.USAGE


class FileError(Radix85Exception):
    """
    The input path does not exist, is a directory, or cannot be opened.
    """
    exit_code = ExitCode.FILE

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(F'{path}: {reason}')


class StreamError(Radix85Exception):
    """
    A read, write, or flush on an already open stream has failed.
    """
    exit_code = ExitCode.IO


class InputLimitExceeded(StreamError):
    """
    The input is larger than the configured maximum input size.
    """
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(F'input exceeds the maximum input size of {limit} bytes')


class Interrupted(Radix85Exception):
    """
    Raised when the cooperative interrupt flag was observed at a group boundary.
    """
    exit_code = ExitCode.INTERRUPTED

    def __init__(self, position: int):
        self.position = position
        super().__init__(F'interrupted after {position} input bytes')


class DecodeError(Radix85Exception, ValueError):
    """
    Base class for all structural violations found in an encoded stream. The `position` is the
    offset of the offending symbol in the input, or `None` if it is unknown.
    """
    exit_code = ExitCode.DECODE

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        if position is not None:
            message = F'{message} at offset {position}'
        super().__init__(message)


class InvalidSymbol(DecodeError):
    def __init__(self, symbol: int, position: int | None = None):
        self.symbol = symbol
        super().__init__(F'invalid character in input: {printable_symbol(symbol)}', position)


class MisplacedToken(DecodeError):
    def __init__(self, symbol: int, position: int | None = None):
        self.symbol = symbol
        super().__init__(F'compression character {chr(symbol)!r} in middle of group', position)


class GroupOverflow(DecodeError):
    def __init__(self, group: bytes, position: int | None = None):
        self.group = group
        super().__init__(F'group {group.decode("latin1")!r} exceeds the 32-bit range', position)


class IncompleteGroup(DecodeError):
    def __init__(self, position: int | None = None):
        super().__init__('invalid input: incomplete final group', position)


class MissingEndMarker(DecodeError):
    def __init__(self, position: int | None = None):
        super().__init__('the end-of-data marker ~> is missing', position)
