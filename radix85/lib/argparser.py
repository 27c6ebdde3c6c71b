"""
Provides a customized argument parser that is used by all radix85 `radix85.units.Unit`s.
"""
from __future__ import annotations

import sys

from argparse import (
    Action,
    ArgumentError,
    ArgumentParser,
    ArgumentTypeError,
    RawDescriptionHelpFormatter,
)
from typing import Any, Sequence

from radix85.lib import exceptions
from radix85.lib.exceptions import ExitCode
from radix85.lib.tools import get_terminal_size, terminalfit


class ArgparseError(exceptions.ArgumentError):
    """
    This custom exception type is thrown from the custom argument parser of
    `radix85.units.Unit` rather than terminating program execution immediately.
    The `parser` parameter is a reference to the argument parser that threw
    the original argument parsing exception with the given `message`.
    """
    def __init__(self, parser, message):
        self.parser = parser
        super().__init__(message)


class LineWrapRawTextHelpFormatter(RawDescriptionHelpFormatter):
    """
    The help text formatter uses the full width of the terminal and prints argument options only
    once after the long name of the option.
    """

    def __init__(self, prog, indent_increment=2, max_help_position=30, width=None):
        super().__init__(prog, indent_increment, max_help_position, width=get_terminal_size(80))

    def add_text(self, text):
        if isinstance(text, str):
            text = terminalfit(text, width=get_terminal_size(80))
        return super().add_text(text)

    def _format_action_invocation(self, action):
        if not action.option_strings:
            metavar, = self._metavar_formatter(action, action.dest)(1)
            return metavar
        parts = []
        if action.nargs == 0:
            parts.extend(action.option_strings)
        else:
            default = action.dest.upper()
            args_string = self._format_args(action, default)
            for option_string in action.option_strings:
                parts.append(str(option_string))
            parts[-1] += F' {args_string}'
        switches = ', '.join(parts)
        if all(opt.startswith('--') for opt in action.option_strings):
            switches = '\x20' * 4 + switches
        return switches


class ArgumentParserWithKeywordHooks(ArgumentParser):
    """
    The radix85 argument parser can be initialized with a given set of keywords which will be
    parsed as if they had been passed as keyword arguments on the command line. Parse errors do
    not terminate the process; they raise `radix85.lib.argparser.ArgparseError` instead.
    """

    keywords: dict[str, Any]

    def __init__(self, keywords, prog=None, description=None, epilog=None, add_help=True):
        super().__init__(
            prog=prog,
            description=description,
            epilog=epilog,
            add_help=add_help,
            formatter_class=LineWrapRawTextHelpFormatter,
        )
        if sys.version_info >= (3, 14):
            self.color = False
        self.keywords = keywords

    def _add_action(self, action: Action):
        keywords = self.keywords
        if action.dest in keywords:
            action.required = False
            atype = getattr(action, 'type', None)
            if callable(atype):
                value = keywords[action.dest]
                if value is not None and isinstance(value, str) and atype is not str:
                    keywords[action.dest] = atype(value)
        return super()._add_action(action)

    def error_commandline(self, message):
        """
        Print the usage and the error message, then terminate with the usage exit code.
        """
        self.print_usage(sys.stderr)
        self.exit(ExitCode.USAGE, F'{self.prog}: error: {message}\n'
            F"Try '{self.prog} --help' for more information.\n")

    def error(self, message):
        raise ArgparseError(self, message)

    def parse_args_with_keywords(self, args: Sequence[str], namespace=None):
        args = list(args)
        keywords = self.keywords
        self.set_defaults(**keywords)
        try:
            parsed = self.parse_args(args=args, namespace=namespace)
        except (ArgumentError, ArgumentTypeError, ArgparseError) as e:
            self.error(str(e))
        for name in keywords:
            param = getattr(parsed, name, None)
            if param != keywords[name]:
                self.error(
                    F'parameter "{name}" duplicated with conflicting '
                    F'values {param} and {keywords[name]}'
                )
        return parsed
