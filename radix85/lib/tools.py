"""
Miscellaneous helper functions.
"""
from __future__ import annotations

import inspect
import os
import re
import sys
import textwrap


def get_terminal_size(default=0):
    """
    Returns the size of the currently attached terminal. If the environment variable
    `RADIX85_TERM_SIZE` is set to an integer value, it takes prescedence. If the width of the
    terminal cannot be determined or if the width is less than 2 characters, the function
    returns the default.
    """
    from radix85.lib.environment import environment
    ev_terminal_size = environment.term_size.value
    if ev_terminal_size and ev_terminal_size > 0:
        return ev_terminal_size
    width = default
    for stream in (sys.stderr, sys.stdout):
        try:
            tty = stream.isatty()
        except (AttributeError, ValueError):
            continue
        if tty:
            try:
                width = os.get_terminal_size(stream.fileno()).columns
            except Exception:
                width = default
            else:
                break
    return default if width < 2 else width - 1


def terminalfit(text: str, delta: int = 0, width: int = 0, parsep: str = '\n\n', **kw) -> str:
    """
    Reformats text to fit the given width while not mangling bullet point lists or indented
    paragraphs.
    """
    width = width or get_terminal_size(80)
    width = width - delta

    def isul(t: str):
        return t.startswith('-') or t.startswith('*')

    def fitted(paragraphs):
        for p in paragraphs:
            if p.startswith(' '):
                yield p
                continue
            if isul(p):
                items = re.split(r'\n(?=[-*]\s)', p)
                yield '\n'.join(
                    '\n'.join(textwrap.wrap(item, width, subsequent_indent='  ', **kw))
                    for item in items)
                continue
            yield '\n'.join(textwrap.wrap(re.sub(r'\s+', ' ', p), width, **kw))

    text = text.replace('\r', '')
    return parsep.join(fitted(text.split(parsep)))


def documentation(unit):
    """
    Return the documentation string of a given unit as it should be displayed on the command line.
    Reference strings in backticks are reduced to their last component.
    """
    docs = inspect.getdoc(unit) or ''
    docs = re.sub(R'`radix85\.(?:\w+\.)*(\w+)`', R'\1', docs)
    return docs.replace('`', '')


def exception_to_string(exception: BaseException, default=None) -> str:
    """
    Attempts to convert a given exception to a good description that can be exposed to the user.
    """
    if not exception.args:
        return exception.__class__.__name__
    it = (a for a in exception.args if isinstance(a, str))
    if default is None:
        default = str(exception)
    return max(it, key=len, default=default).strip()


def normalize_word_separators(words: str, unified_separator: str, strip: bool = True):
    """
    For a sequence of words separated by whitespace, punctuation, slashes, dashes or underscores,
    normalize all occurrences of one or more of these separators to one given symbol. Leading and
    trailing occurrences of separators are removed.
    """
    normalized = re.sub('[-\\s_.,;:/\\\\]+', unified_separator, words)
    if strip:
        normalized = normalized.strip(unified_separator)
    return normalized


def normalize_to_display(words: str, strip: bool = True):
    """
    Normalizes all separators to dashes.
    """
    return normalize_word_separators(words, '-', strip)


def normalize_to_identifier(words: str, strip: bool = True):
    """
    Normalizes all separators to underscores.
    """
    return normalize_word_separators(words, '_', strip)


def skipfirst(iterable):
    """
    Returns an interable where the first element of the input iterable was skipped.
    """
    it = iter(iterable)
    next(it, None)
    yield from it


def printable_symbol(byte: int) -> str:
    """
    Renders a single byte for use in an error message.
    """
    if 0x20 < byte < 0x7F:
        return F'{chr(byte)!r} (0x{byte:02X})'
    return F'0x{byte:02X}'
