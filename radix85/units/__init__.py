"""
This package contains all radix85 units. A unit is a class inheriting from `radix85.units.Unit`
that implements `radix85.units.Unit.process` to transform an input stream into an output stream.
If the operation should be reversible, the unit also implements `radix85.units.Unit.reverse`;
for the codec units, `process` encodes and `reverse` decodes.

### Command Line Parameters

The command line parameters of a unit are declared as the parameters of its `__init__` routine.
Each parameter can be annotated with a `radix85.units.Arg` to control how it is exposed by the
argument parser. For example:

    from radix85.units import Arg, Unit
    from radix85.lib.types import Param

    class upper(Unit):
        def __init__(self, skip: Param[bool, Arg.Switch('-s', help='Do nothing.')] = False):
            super().__init__(skip=skip)

        def process(self, source, target):
            data = source.read()
            target.write(data if self.args.skip else data.upper())

When the `__init__` routine of a unit accepts arbitrary keywords, it inherits all arguments of
its base class. All parameters are available as attributes of the `args` member after
initialization.

### Units in Code

Units can be used in Python code in nearly the same way as on the command line:

- Combining a unit from the left with a byte string or binary stream feeds it into the unit.
- Unary negation of a reversible unit is equivalent to using the `-d` switch for decode mode.
- Combining a unit from the right with `bytes`, `bytearray`, or `str` returns the output in
  that type; combining it with a writable binary stream writes the output to that stream.

Examples:

    >>> from radix85 import a85
    >>> B'Binary' | a85(wrap=0) | str
    '6>:=GEd7\\n'
    >>> B'6>:=GEd7' | -a85 | bytes
    b'Binary'

When a unit is instantiated in code, it is detached from its logger and all errors are raised as
exceptions. When it is executed from the command line via `radix85.units.Unit.run`, errors are
logged and converted to the exit codes of `radix85.lib.exceptions.ExitCode`.
"""
from __future__ import annotations

import abc
import copy
import errno
import inspect
import io
import os
import sys

from abc import ABCMeta
from argparse import OPTIONAL, Namespace
from collections import OrderedDict
from contextlib import ExitStack
from typing import TYPE_CHECKING, Any, Callable, Mapping, cast

from radix85.lib.argformats import number
from radix85.lib.argparser import ArgparseError, ArgumentParserWithKeywordHooks
from radix85.lib.environment import Logger, LogLevel, environment, logger
from radix85.lib.exceptions import ExitCode, FileError, Radix85Exception
from radix85.lib.tools import (
    documentation,
    exception_to_string,
    normalize_to_display,
    normalize_to_identifier,
    skipfirst,
)
from radix85.lib.types import BinaryIO, isbuffer, isstream, typename

if TYPE_CHECKING:
    from typing import Self


class Entry:
    """
    An empty class marker. Any entry point unit (i.e. any unit that can be executed
    via the command line) is an instance of this class.
    """


class Argument:
    """
    This class implements an abstract argument to a Python function, including positional
    and keyword arguments. Passing an `Argument` to a Python function can be done via the
    matrix multiplication operator: The syntax `function @ Argument(a, b, kwd=c)` is
    equivalent to the call `function(a, b, kwd=c)`.
    """
    __slots__ = 'args', 'kwargs'

    args: list[Any]
    kwargs: dict[str, Any]

    def __init__(self, *args, **kwargs):
        self.args = list(args)
        self.kwargs = kwargs

    def __rmatmul__(self, method):
        return method(*self.args, **self.kwargs)

    def __repr__(self):
        arglist = [repr(a) for a in self.args]
        arglist.extend(F'{key!s}={value!r}' for key, value in self.kwargs.items())
        return ', '.join(arglist)


class Arg(Argument):
    """
    This class is specifically an argument for the `add_argument` method of an `ArgumentParser`
    from the `argparse` module. It is used as an annotation for the parameters of a unit's
    constructor to control the argument parser of that unit's command line interface.
    """

    class omit:
        """
        A sentinel class to mark arguments as omitted for the argument parser.
        """

    args: list[str]

    __slots__ = 'args', 'kwargs'

    def __init__(
        self, *args: str,
        action   : type[omit] | str              = omit,  # noqa
        choices  : type[omit] | Any              = omit,  # noqa
        default  : type[omit] | Any              = omit,  # noqa
        dest     : type[omit] | str              = omit,  # noqa
        help     : type[omit] | str              = omit,  # noqa
        metavar  : type[omit] | str              = omit,  # noqa
        nargs    : type[omit] | int | str        = omit,  # noqa
        type     : type[omit] | type | Callable  = omit,  # noqa
    ) -> None:
        kwargs = dict(action=action, choices=choices, default=default, dest=dest,
            help=help, metavar=metavar, nargs=nargs, type=type)
        kwargs = {key: value for key, value in kwargs.items() if value is not self.omit}
        super().__init__(*args, **kwargs)

    @classmethod
    def Switch(
        cls,
        *args   : str, off=False,
        help    : type[omit] | str = omit,
        dest    : type[omit] | str = omit,
    ):
        """
        A convenience method to add argparse arguments that change a boolean value from True to
        False or vice versa. By default, a switch will have a False default and change it to True
        when specified.
        """
        return cls(*args, help=help, dest=dest, action='store_false' if off else 'store_true')

    @classmethod
    def Number(
        cls,
        *args   : str,
        bound   : type[omit] | tuple[int | None, int | None] = omit,
        help    : type[omit] | str = omit,
        dest    : type[omit] | str = omit,
        metavar : type[omit] | str = omit,
    ):
        """
        Used to add argparse arguments that contain a number. The optional `bound` is a tuple of
        inclusive lower and upper bounds, either of which may be `None`.
        """
        nt = number
        if bound is not cls.omit:
            assert isinstance(bound, tuple)
            lower, upper = bound
            nt = nt[lower:upper]
        if metavar is cls.omit:
            metavar = 'N'
        return cls(*args, help=help, dest=dest, type=nt, metavar=metavar)

    @property
    def destination(self) -> str:
        """
        The name of the variable where the contents of this parsed argument will be stored.
        """
        for a in self.args:
            if a[0] != '-':
                return a
        try:
            return self.kwargs['dest']
        except KeyError:
            for a in self.args:
                if a.startswith('--'):
                    dest = normalize_to_identifier(a)
                    if dest.isidentifier():
                        return dest
            raise AttributeError(F'The argument with these values has no destination: {self!r}')

    @classmethod
    def Infer(cls, pt: inspect.Parameter, module: str | None = None) -> Arg:
        """
        This class method infers the argparse argument for a parameter of a unit constructor. The
        guess is based on the annotation, name, and default value.
        """
        name = normalize_to_display(pt.name, False)
        annotation = pt.annotation
        default = pt.default

        if isinstance(annotation, str):
            symbols = None if module is None else vars(sys.modules[module])
            try:
                annotation = eval(annotation, symbols)
            except Exception:
                annotation = pt.empty

        if isinstance(annotation, Arg):
            arg = copy.copy(annotation)
        else:
            arg = cls()
        if arg.kwargs.get('dest', pt.name) != pt.name:
            raise ValueError(
                F'Incompatible argument destination specified; parameter {pt.name} '
                F'was annotated with {annotation!r}.')
        if not any(a.startswith('--') for a in arg.args):
            arg.args.append(F'--{name}')
        arg.kwargs['dest'] = pt.name
        if default is not pt.empty:
            if isinstance(default, bool):
                arg.kwargs.setdefault('action', F'store_{not default!s}'.lower())
            elif arg.kwargs.get('action', 'store') == 'store':
                arg.kwargs.setdefault('default', default)
                if isinstance(default, int):
                    arg.kwargs.setdefault('type', number)
        return arg

    def __copy__(self):
        cls = self.__class__
        clone = cls.__new__(cls)
        clone.kwargs = dict(self.kwargs)
        clone.args = list(self.args)
        return clone

    def __repr__(self) -> str:
        return F'{self.__class__.__name__}({super().__repr__()})'


class ArgumentSpecification(OrderedDict):
    """
    A container object that stores `radix85.units.Arg` specifications.
    """

    def merge(self, argument: Arg):
        """
        Insert or update the specification with the given argument.
        """
        dest = argument.destination
        if dest in self:
            known: Arg = self[dest]
            known.kwargs.update(argument.kwargs)
            if any(a.startswith('-') and not a.startswith('--') for a in argument.args):
                known.args = argument.args
            return
        self[dest] = argument


class MissingFunction:
    """
    A singleton class that represents a missing function. Used internally to
    indicate that a unit does not implement a reverse operation.
    """
    def __init__(self, *_):
        pass

    def __call__(*_, **__):
        raise NotImplementedError('A non-invertible unit was operated in reverse.')


class Executable(ABCMeta):
    """
    This is the metaclass for radix85 units. A class which is of this type is
    required to implement a method `run()`. If the class is created in the
    currently executing module, then the class is immediately executed via
    its `run()` method.
    """

    Entry = None
    """
    This variable stores the executable entry point. If more than one entry point
    are present, only the first one is executed.
    """

    _argument_specification: ArgumentSpecification

    def __new__(mcs, name: str, bases: tuple[type, ...], nmspc: dict[str, Any], abstract=False):
        if not abstract and Entry not in bases:
            for b in bases:
                try:
                    if b.is_reversible:
                        break
                except AttributeError:
                    pass
            else:
                nmspc.setdefault('reverse', MissingFunction())
            bases = bases + (Entry,)
        nmspc.setdefault('__doc__', '')
        return super().__new__(mcs, name, bases, nmspc)

    def __init__(cls, name: str, bases: tuple[type, ...], nmspc: dict[str, Any], abstract=False):
        super().__init__(name, bases, nmspc)
        cls._argument_specification = args = ArgumentSpecification()
        parameters = inspect.signature(cls.__init__).parameters
        has_keyword = any(p.kind == p.VAR_KEYWORD for p in parameters.values())

        for base in bases:
            try:
                spec: ArgumentSpecification = base._argument_specification
            except AttributeError:
                continue
            for key, value in spec.items():
                if key in parameters or has_keyword:
                    args[key] = copy.copy(value)

        for pt in skipfirst(parameters.values()):
            if pt.kind in (pt.VAR_KEYWORD, pt.VAR_POSITIONAL):
                continue
            args.merge(Arg.Infer(pt, cls.__module__))

        if not abstract and sys.modules[cls.__module__].__name__ == '__main__':
            if not Executable.Entry:
                Executable.Entry = cls.name
                sys.exit(cast('type[Unit]', cls).run())

    def __or__(cls, other):
        return cls().__or__(other)

    def __pos__(cls):
        return cls()

    def __neg__(cls):
        unit: Unit = cls()
        unit.args.decode = True
        return unit

    def __ror__(cls, other) -> Unit:
        return cls().__ror__(other)

    @property
    def is_reversible(cls) -> bool:
        """
        This property is `True` if and only if the unit has a member function named `reverse`. By
        convention, this member function implements the inverse of `radix85.units.Unit.process`.
        """
        r = cast('type[Unit]', cls).reverse
        if isinstance(r, MissingFunction):
            return False
        return not getattr(r, '__isabstractmethod__', False)

    @property
    def codec(cls) -> str:
        """
        The codec for converting output to text; hardcoded to `UTF8`.
        """
        return 'UTF8'

    @property
    def name(cls) -> str:
        """
        The name of the unit as it would be used on the command line.
        """
        return normalize_to_display(cls.__name__)

    @property
    def logger(cls) -> Logger:
        """
        The debug logger instance for the unit.
        """
        try:
            return cls.__dict__['_logger']
        except KeyError:
            pass
        cls._logger = _logger = logger(cls.name)
        return _logger


class Unit(metaclass=Executable, abstract=True):
    """
    The base class for all radix85 units. It implements a small set of globally available
    options and the plumbing between input streams, the unit, and output streams.
    """

    EPILOG = '\n'.join((
        'exit status:',
        *(F'  {code.value:<4d}{normalize_to_display(code.name.lower())}' for code in ExitCode),
    ))

    _source: Any
    console: bool

    def __init__(self, **keywords):
        self._source = None
        self.console = False
        for key, value in dict(
            decode=False,
            quiet=False,
            verbose=0,
            file=None,
        ).items():
            keywords.setdefault(key, value)
        self.args = Namespace(**keywords)
        self.log_detach()

    @abc.abstractmethod
    def process(self, source: BinaryIO, target: BinaryIO, /):
        """
        This routine is overridden by children of `radix85.units.Unit` to define how the unit
        transforms the data read from `source`, writing the result to `target`.
        """

    reverse: Callable[[BinaryIO, BinaryIO], Any] = MissingFunction()
    """
    If this routine is overridden by children of `radix85.units.Unit`, then it must implement
    an operation that reverses the `radix85.units.Unit.process` operation.
    """

    @property
    def is_reversible(self) -> bool:
        """
        Proxy to `radix85.units.Executable.is_reversible`.
        """
        return self.__class__.is_reversible

    @property
    def codec(self) -> str:
        return self.__class__.codec

    @property
    def logger(self) -> Logger:
        return self.__class__.logger

    @property
    def name(self) -> str:
        return self.__class__.name

    @property
    def is_quiet(self) -> bool:
        """
        Returns whether the global `--quiet` flag is set, indicating that the unit should not
        generate any log output.
        """
        return getattr(self.args, 'quiet', False)

    @property
    def log_level(self) -> LogLevel:
        """
        Returns the current log level as an element of `radix85.lib.environment.LogLevel`.
        """
        if self.is_quiet:
            return LogLevel.NONE
        return LogLevel(self.logger.getEffectiveLevel())

    @log_level.setter
    def log_level(self, value: int | LogLevel) -> None:
        if not isinstance(value, LogLevel):
            value = LogLevel.FromVerbosity(value)
        self.logger.setLevel(value)

    def log_detach(self) -> Self:
        """
        Detach the unit from its logger. A detached unit does not produce log output, and errors
        are only communicated by raising exceptions to the caller.
        """
        self.log_level = LogLevel.DETACHED
        return self

    @classmethod
    def log_fail(cls, *messages) -> bool:
        """
        Log the message if and only if the current log level is at least `radix85.lib.environment.LogLevel.ERROR`.
        """
        rv = cls.logger.isEnabledFor(LogLevel.ERROR)
        if rv and messages:
            cls.logger.error(cls._output(*messages))
        return rv

    @classmethod
    def log_warn(cls, *messages) -> bool:
        """
        Log the message if and only if the current log level is at least `radix85.lib.environment.LogLevel.WARNING`.
        """
        rv = cls.logger.isEnabledFor(LogLevel.WARNING)
        if rv and messages:
            cls.logger.warning(cls._output(*messages))
        return rv

    @classmethod
    def log_info(cls, *messages) -> bool:
        """
        Log the message if and only if the current log level is at least `radix85.lib.environment.LogLevel.INFO`.
        """
        rv = cls.logger.isEnabledFor(LogLevel.INFO)
        if rv and messages:
            cls.logger.info(cls._output(*messages))
        return rv

    @classmethod
    def log_debug(cls, *messages) -> bool:
        """
        Log the message if and only if the current log level is at least `radix85.lib.environment.LogLevel.DEBUG`.
        """
        rv = cls.logger.isEnabledFor(LogLevel.DEBUG)
        if rv and messages:
            cls.logger.debug(cls._output(*messages))
        return rv

    @classmethod
    def _output(cls, *messages) -> str:
        def transform(message):
            if callable(message):
                message = message()
            if isinstance(message, BaseException):
                message = exception_to_string(message)
            return str(message)
        return ' '.join(transform(msg) for msg in messages)

    def act(self, source: BinaryIO, target: BinaryIO):
        """
        Apply either `radix85.units.Unit.process` or `radix85.units.Unit.reverse`, depending on
        whether the unit operates in decode mode.
        """
        if self.args.decode:
            if not self.is_reversible:
                raise NotImplementedError(F'the unit {self.name} cannot be operated in reverse')
            return self.reverse(source, target)
        return self.process(source, target)

    @property
    def source(self):
        """
        The binary stream or unit that has been attached to this unit as its source of input data.
        """
        return self._source

    @source.setter
    def source(self, stream):
        if isinstance(stream, Executable):
            stream = stream()
        if not isinstance(stream, Unit) and not isstream(stream):
            raise TypeError(F'Cannot connect object of type {typename(stream)} to unit.')
        self._source = stream

    def __copy__(self):
        cls = self.__class__
        clone: Unit = cls.__new__(cls)
        clone.__dict__.update(self.__dict__)
        clone.args = Namespace(**vars(self.args))
        return clone

    def __pos__(self):
        return self

    def __neg__(self) -> Unit:
        clone = copy.copy(self)
        clone.args.decode = not self.args.decode
        return clone

    def __ror__(self, stream: Unit | BinaryIO | bytes | bytearray | memoryview | str | None):
        if stream is None:
            return self
        if isinstance(stream, str):
            stream = stream.encode(self.codec)
        if isbuffer(stream):
            stream = io.BytesIO(stream)
        self.source = stream
        return self

    def __or__(self, target):
        if isinstance(target, (Unit, Executable)):
            if isinstance(target, Executable):
                target = target()
            return target.__ror__(self)
        if target is None:
            self.act(self._open_source(), io.BytesIO())
            return None
        if isinstance(target, type):
            output = io.BytesIO()
            self.act(self._open_source(), output)
            result = output.getvalue()
            if issubclass(target, str):
                return result.decode(self.codec, 'surrogateescape')
            return target(result)
        if not hasattr(target, 'write'):
            raise TypeError(F'Cannot connect unit to object of type {typename(target)}.')
        self.act(self._open_source(), target)
        return target

    def __bytes__(self):
        return self | bytes

    def __str__(self):
        return self | str

    def _open_source(self) -> BinaryIO:
        source = self._source
        if source is None:
            return io.BytesIO()
        if isinstance(source, Unit):
            return io.BytesIO(source | bytes)
        return source

    @staticmethod
    def open_input(path: str) -> BinaryIO:
        """
        Open the given input file for reading. Any failure is raised as a
        `radix85.lib.exceptions.FileError` that carries the operating system's error string.
        """
        if os.path.isdir(path):
            raise FileError(path, os.strerror(errno.EISDIR))
        try:
            return open(path, 'rb')
        except OSError as error:
            raise FileError(path, error.strerror or str(error)) from error

    @classmethod
    def _interface(cls, argp: ArgumentParserWithKeywordHooks) -> ArgumentParserWithKeywordHooks:
        """
        Receives a reference to an argument parser. This parser will be used to parse
        the command line for this unit into the member variable called `args`.
        """
        from radix85 import __version__

        base = argp.add_argument_group('generic options')

        base.set_defaults(decode=False)
        base.add_argument('-h', '--help', action='help', help='Show this help message and exit.')
        base.add_argument('--version', action='version', version=F'{cls.name} {__version__}',
            help='Show version information and exit.')
        base.add_argument('-Q', '--quiet', action='store_true', help='Disables all log output.')
        base.add_argument('-v', '--verbose', action='count', default=0,
            help='Specify up to two times to increase log level.')

        if cls.is_reversible:
            base.add_argument('-d', '--decode', action='store_true',
                help='Decode the input rather than encoding it.')

        for argument in cls._argument_specification.values():
            try:
                _ = argp.add_argument @ argument
            except Exception as E:
                raise TypeError(F'Failed to queue argument: {argument!s}; {E!s}')

        argp.add_argument('file', metavar='FILE', nargs=OPTIONAL, default='-',
            help='The input file; read standard input if omitted or if FILE is -.')

        return argp

    @classmethod
    def argparser(cls, **keywords):
        argp = ArgumentParserWithKeywordHooks(
            keywords, prog=cls.name, description=documentation(cls), epilog=cls.EPILOG, add_help=False)
        return cls._interface(argp)

    @classmethod
    def assemble(cls, *_args: str, **keywords):
        """
        Creates a unit from the given arguments and keywords. The given keywords are used to
        overwrite any previously specified defaults for the argument parser of the unit, then this
        modified parser is used to parse the given list of arguments as though they were given on
        the command line. The parser results are used to construct an instance of the unit.
        """
        argp = cls.argparser(**keywords)
        args = argp.parse_args_with_keywords(_args)
        parsed: Mapping[str, Any] = vars(args)

        try:
            unit = cls(**{key: parsed[key] for key in cls._argument_specification})
        except ValueError as E:
            argp.error(str(E))
        else:
            unit.args.quiet = args.quiet
            unit.args.verbose = args.verbose
            unit.args.decode = args.decode
            unit.args.file = args.file

            if args.quiet:
                unit.log_level = LogLevel.NONE
            else:
                unit.log_level = args.verbose

            return unit

    @classmethod
    def run(cls, argv=None, stream=None, output=None) -> int:
        """
        Implements command line execution and returns the process exit code. When no `stream` is
        given, the input is read from the file argument or from standard input; when no `output`
        is given, the result is written to standard output. Standard streams and streams passed
        by the caller are never closed.
        """
        argv = argv if argv is not None else sys.argv[1:]

        try:
            unit = cls.assemble(*argv)
        except ArgparseError as ap:
            ap.parser.error_commandline(str(ap))

        loglevel = environment.verbosity.value
        if loglevel and not unit.is_quiet:
            unit.log_level = loglevel

        unit.console = True

        try:
            with ExitStack() as stack:
                if stream is None:
                    path = unit.args.file
                    if path and path != '-':
                        stream = stack.enter_context(cls.open_input(path))
                        unit.log_debug('reading input from', path)
                    else:
                        stream = sys.stdin.buffer
                if output is None:
                    output = sys.stdout.buffer
                _ = stream | unit | output
        except KeyboardInterrupt:
            unit.log_warn('aborting due to keyboard interrupt')
            return ExitCode.INTERRUPTED
        except Radix85Exception as E:
            unit.log_fail(E)
            return E.exit_code
        except OSError as E:
            unit.log_fail(F'I/O error: {E.strerror or E}')
            return ExitCode.IO
        else:
            return ExitCode.SUCCESS
