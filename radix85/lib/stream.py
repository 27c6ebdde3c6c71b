"""
Buffered stream drivers for radix-85 encoding and decoding. The encoder reads its input in large
chunks, regroups it into groups of four bytes, and writes the encoded symbols through a
`radix85.lib.stream.LineWriter` that applies the line wrapping policy. The decoder skips
whitespace, collects five alphabet symbols at a time, and handles compression tokens, garbage
bytes, the Adobe framing markers, and the partial trailing group.

All settings for one pass are held by an immutable `radix85.lib.stream.CodecConfig`. The drivers
own nothing but their private column counter and group buffer; streams passed to them are never
closed.
"""
from __future__ import annotations

import io

from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional

from radix85.lib.alphabet import ASCII85, Alphabet
from radix85.lib.exceptions import (
    DecodeError,
    InputLimitExceeded,
    Interrupted,
    InvalidSymbol,
    MisplacedToken,
    MissingEndMarker,
    StreamError,
)
from radix85.lib.group import GROUP_BYTES, GROUP_SYMBOLS, decode_group, encode_group
from radix85.lib.types import BinaryIO, Interrupt, buf

DEFAULT_WRAP = 76
MAX_WRAP = 1_000_000
DEFAULT_BUFFER_SIZE = 0x10000
MAX_BUFFER_SIZE = 0x4000000

WHITESPACE = B'\x20\t\r\n\v\f'

ADOBE_PREFIX = B'<~'
ADOBE_SUFFIX = B'~>'

_IS_WHITESPACE = tuple(b in WHITESPACE for b in range(0x100))

__all__ = [
    'CodecConfig',
    'Transfer',
    'LineWriter',
    'encode_stream',
    'decode_stream',
    'encode_bytes',
    'decode_bytes',
]


@dataclass(frozen=True)
class CodecConfig:
    """
    The complete configuration for one encoding or decoding pass.

    - `alphabet`: the radix-85 alphabet to use.
    - `wrap`: insert a line break after this many output symbols; zero disables wrapping.
    - `zero_compress`, `space_compress`: emit compression tokens for complete groups of four
      zero bytes or four spaces while encoding.
    - `ignore_garbage`: skip bytes that are not part of the alphabet while decoding.
    - `buffer_size`: the size of each read from the input stream.
    - `max_input`: the maximum number of input bytes that will be accepted; zero means that
      there is no limit.
    - `adobe`: frame the encoded data with `<~` and `~>`.
    - `interrupt`: a callable that is polled at group boundaries; when it returns true, the
      pass is aborted.
    """
    alphabet: Alphabet = ASCII85
    wrap: int = DEFAULT_WRAP
    zero_compress: bool = False
    space_compress: bool = False
    ignore_garbage: bool = False
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_input: int = 0
    adobe: bool = False
    interrupt: Optional[Interrupt] = None

    def __post_init__(self):
        if not 0 <= self.wrap <= MAX_WRAP:
            raise ValueError(F'the wrap width must be between 0 and {MAX_WRAP}, got {self.wrap}')
        if not 0 < self.buffer_size <= MAX_BUFFER_SIZE:
            raise ValueError(F'the buffer size must be between 1 and {MAX_BUFFER_SIZE}, got {self.buffer_size}')
        if self.max_input < 0:
            raise ValueError(F'the maximum input size must not be negative, got {self.max_input}')
        if self.zero_compress and self.alphabet.zero_token is None:
            raise ValueError(F'the {self.alphabet.name} alphabet does not support zero compression')
        if self.space_compress and self.alphabet.space_token is None:
            raise ValueError(F'the {self.alphabet.name} alphabet does not support space compression')
        if self.adobe and self.alphabet is not ASCII85:
            raise ValueError(F'the {self.alphabet.name} alphabet cannot be framed with <~ and ~>')


class Transfer(NamedTuple):
    """
    The result of one pass: the number of bytes read from the source, the number of bytes
    written to the target, and the number of garbage bytes that were skipped.
    """
    read: int
    written: int
    skipped: int = 0


def _write_all(target: BinaryIO, data: bytes) -> int:
    total = len(data)
    try:
        while data:
            count = target.write(data)
            if count is None or count <= 0:
                raise StreamError(F'short write: {len(data)} bytes could not be written')
            data = data[count:]
    except OSError as error:
        raise StreamError(F'write error: {error.strerror or error}') from error
    return total


def _flush(target: BinaryIO):
    try:
        target.flush()
    except OSError as error:
        raise StreamError(F'write error: {error.strerror or error}') from error


class LineWriter:
    """
    A buffered sink for encoded symbols. After every `wrap` symbols, a line break is inserted and
    the column counter is reset, so that `0 <= column < wrap` holds at all times. The buffer is
    written to the target whenever it grows beyond `buffer_size`. Calling `close` writes the final
    line break unless the last byte written was already a wrap break, then flushes the target.
    """

    def __init__(self, target: BinaryIO, wrap: int = DEFAULT_WRAP, buffer_size: int = DEFAULT_BUFFER_SIZE):
        self.target = target
        self.wrap = wrap
        self.buffer_size = buffer_size
        self.column = 0
        self.written = 0
        self._buffer = bytearray()
        self._on_break = False

    def write(self, symbols: buf):
        if not symbols:
            return
        buffer = self._buffer
        width = self.wrap
        if not width:
            buffer.extend(symbols)
            self._on_break = False
        else:
            cursor = 0
            end = len(symbols)
            while cursor < end:
                room = width - self.column
                piece = symbols[cursor:cursor + room]
                buffer.extend(piece)
                cursor += len(piece)
                self.column += len(piece)
                if self.column == width:
                    buffer.append(0x0A)
                    self.column = 0
                    self._on_break = True
                else:
                    self._on_break = False
        if len(buffer) >= self.buffer_size:
            self.drain()

    def drain(self):
        """
        Write all buffered output to the target.
        """
        if self._buffer:
            data = bytes(self._buffer)
            self._buffer.clear()
            self.written += _write_all(self.target, data)

    def flush(self):
        self.drain()
        _flush(self.target)

    def close(self):
        if not self._on_break:
            self._buffer.append(0x0A)
            self._on_break = True
            self.column = 0
        self.flush()


def _read_chunks(source: BinaryIO, config: CodecConfig) -> Iterator[bytes]:
    size = config.buffer_size
    limit = config.max_input
    total = 0
    while True:
        try:
            chunk = source.read(size)
        except OSError as error:
            raise StreamError(F'read error: {error.strerror or error}') from error
        if not chunk:
            return
        if isinstance(chunk, str):
            raise StreamError('the input stream must be opened in binary mode')
        total += len(chunk)
        if limit and total > limit:
            raise InputLimitExceeded(limit)
        yield chunk


def encode_stream(source: BinaryIO, target: BinaryIO, config: CodecConfig) -> Transfer:
    """
    Encode all data from `source` and write the symbols to `target`.
    """
    writer = LineWriter(target, config.wrap, config.buffer_size)
    alphabet = config.alphabet
    interrupt = config.interrupt
    zc = config.zero_compress
    sc = config.space_compress
    carry = bytearray()
    total = 0

    def interrupted(position: int, pending: buf = B''):
        writer.write(pending)
        writer.flush()
        return Interrupted(position)

    if config.adobe:
        writer.write(ADOBE_PREFIX)
    for chunk in _read_chunks(source, config):
        carry.extend(chunk)
        end = len(carry) - len(carry) % GROUP_BYTES
        output = bytearray()
        for k in range(0, end, GROUP_BYTES):
            if interrupt is not None and interrupt():
                raise interrupted(total + k, output)
            output.extend(encode_group(carry[k:k + GROUP_BYTES], alphabet, zc, sc))
        writer.write(output)
        total += end
        del carry[:end]
    if carry:
        if interrupt is not None and interrupt():
            raise interrupted(total)
        writer.write(encode_group(carry, alphabet, zc, sc))
        total += len(carry)
    if config.adobe:
        writer.write(ADOBE_SUFFIX)
    writer.close()
    return Transfer(total, writer.written)


class _GroupDecoder:
    """
    The decoding state machine. Symbols are collected in `group` until five of them are present;
    compression tokens are only accepted when the group is empty. With Adobe framing enabled, the
    `prefix` state tracks whether the optional leading `<~` is still expected (`PREFIX_OPEN`),
    whether a `<` has been seen that might start it (`PREFIX_HALF`), or whether it is no longer
    possible (`PREFIX_DONE`).
    """
    PREFIX_OPEN = 0
    PREFIX_HALF = 1
    PREFIX_DONE = 2

    def __init__(self, target: BinaryIO, config: CodecConfig):
        self.config = config
        self.target = target
        self.group = bytearray()
        self.output = bytearray()
        self.start = 0
        self.position = 0
        self.skipped = 0
        self.written = 0
        self.done = False
        self.prefix = self.PREFIX_OPEN if config.adobe else self.PREFIX_DONE
        self.prefix_at = 0
        self.tilde = False

    def flush(self):
        if self.output:
            data = bytes(self.output)
            self.output.clear()
            self.written += _write_all(self.target, data)

    def feed(self, chunk: bytes):
        config = self.config
        alphabet = config.alphabet
        decoder = alphabet.decoder
        tokens = alphabet.tokens
        whitespace = _IS_WHITESPACE

        for position, byte in enumerate(chunk, self.position):
            if whitespace[byte]:
                continue
            if self.tilde:
                if byte != ADOBE_SUFFIX[1]:
                    raise DecodeError('the character ~ is not followed by >', position)
                self.tilde = False
                self.done = True
                self.position = position + 1
                return
            if self.prefix != self.PREFIX_DONE:
                if self.prefix == self.PREFIX_OPEN and byte == ADOBE_PREFIX[0]:
                    self.prefix = self.PREFIX_HALF
                    self.prefix_at = position
                    continue
                if self.prefix == self.PREFIX_HALF:
                    self.prefix = self.PREFIX_DONE
                    if byte == ADOBE_PREFIX[1]:
                        continue
                    self.symbol(ADOBE_PREFIX[0], self.prefix_at)
                self.prefix = self.PREFIX_DONE
            if decoder[byte] >= 0:
                self.symbol(byte, position)
                continue
            if byte in tokens:
                if self.group:
                    raise MisplacedToken(byte, position)
                self.boundary(position)
                self.output.extend(tokens[byte])
                continue
            if config.adobe and byte == ADOBE_SUFFIX[0]:
                self.tilde = True
                continue
            if config.ignore_garbage:
                self.skipped += 1
                continue
            raise InvalidSymbol(byte, position)

        self.position += len(chunk)
        if len(self.output) >= config.buffer_size:
            self.flush()

    def boundary(self, position: int):
        interrupt = self.config.interrupt
        if interrupt is not None and interrupt():
            self.flush()
            _flush(self.target)
            raise Interrupted(position)

    def symbol(self, byte: int, position: int):
        group = self.group
        if not group:
            self.boundary(position)
            self.start = position
        group.append(byte)
        if len(group) == GROUP_SYMBOLS:
            self.output.extend(decode_group(group, self.config.alphabet, self.start))
            group.clear()

    def close(self):
        if self.prefix == self.PREFIX_HALF:
            self.prefix = self.PREFIX_DONE
            self.symbol(ADOBE_PREFIX[0], self.prefix_at)
        if self.tilde:
            raise DecodeError('the character ~ is not followed by >', self.position)
        if self.config.adobe and not self.done:
            raise MissingEndMarker(self.position)
        if self.group:
            self.output.extend(decode_group(self.group, self.config.alphabet, self.start))
            self.group.clear()
        self.flush()
        _flush(self.target)


def decode_stream(source: BinaryIO, target: BinaryIO, config: CodecConfig) -> Transfer:
    """
    Decode all data from `source` and write the result to `target`. Invalid symbols raise a
    `radix85.lib.exceptions.DecodeError` unless `ignore_garbage` is set; compression tokens in
    the middle of a group, group overflows, and an incomplete final group always do.
    """
    decoder = _GroupDecoder(target, config)
    try:
        for chunk in _read_chunks(source, config):
            decoder.feed(chunk)
            if decoder.done:
                break
        decoder.close()
    except DecodeError:
        decoder.flush()
        raise
    return Transfer(decoder.position, decoder.written, decoder.skipped)


def encode_bytes(data: buf, config: CodecConfig) -> bytes:
    """
    Encode a buffer in memory, using the same driver as `radix85.lib.stream.encode_stream`.
    """
    output = io.BytesIO()
    encode_stream(io.BytesIO(data), output, config)
    return output.getvalue()


def decode_bytes(data: buf, config: CodecConfig) -> bytes:
    """
    Decode a buffer in memory, using the same driver as `radix85.lib.stream.decode_stream`.
    """
    output = io.BytesIO()
    decode_stream(io.BytesIO(data), output, config)
    return output.getvalue()
