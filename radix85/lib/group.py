"""
Conversion between a single group of up to four bytes and a single group of up to five radix-85
symbols. A full group of four bytes is read as a big-endian 32-bit integer and written as five
digits, most significant first. A short group of `L` bytes is padded with zero bytes on the right
and only the first `L + 1` digits are kept. When decoding a short group of `N` symbols, the
missing digits are filled with the largest digit value 84, and the most significant `N - 1`
bytes of the result are returned. Both directions therefore preserve the length relation between
byte groups and symbol groups exactly.
"""
from __future__ import annotations

from radix85.lib.alphabet import RADIX, Alphabet
from radix85.lib.exceptions import GroupOverflow, IncompleteGroup, InvalidSymbol
from radix85.lib.types import buf

GROUP_BYTES = 4
GROUP_SYMBOLS = 5
UINT32_MAX = 0xFFFFFFFF

_MAX_DIGIT = RADIX - 1
_ALL_SPACES = 0x20202020

__all__ = [
    'encode_group',
    'decode_group',
    'GROUP_BYTES',
    'GROUP_SYMBOLS',
]


def encode_group(
    group: buf,
    alphabet: Alphabet,
    zero_compress: bool = False,
    space_compress: bool = False,
) -> bytes:
    """
    Encode a group of one to four bytes. If the group is complete and compression is enabled for
    its value, the corresponding single token is returned instead of five symbols.
    """
    size = len(group)
    if not 0 < size <= GROUP_BYTES:
        raise ValueError(F'a byte group must contain between 1 and {GROUP_BYTES} bytes, got {size}')
    value = int.from_bytes(group, 'big') << (8 * (GROUP_BYTES - size))
    if size == GROUP_BYTES:
        if zero_compress and value == 0:
            token = alphabet.zero_token
            if token is None:
                raise ValueError(F'the {alphabet.name} alphabet has no zero compression token')
            return bytes((token,))
        if space_compress and value == _ALL_SPACES:
            token = alphabet.space_token
            if token is None:
                raise ValueError(F'the {alphabet.name} alphabet has no space compression token')
            return bytes((token,))
    symbols = alphabet.symbols
    digits = bytearray(GROUP_SYMBOLS)
    for k in range(GROUP_SYMBOLS - 1, -1, -1):
        value, digit = divmod(value, RADIX)
        digits[k] = symbols[digit]
    del digits[size + 1:]
    return bytes(digits)


def decode_group(symbols: buf, alphabet: Alphabet, position: int | None = None) -> bytes:
    """
    Decode a group of one to five symbols. A single symbol is only valid if it is a compression
    token of the alphabet. The `position` is the stream offset of the first symbol of the group
    and is only used for error reporting.
    """
    size = len(symbols)
    if not 0 < size <= GROUP_SYMBOLS:
        raise ValueError(F'a symbol group must contain between 1 and {GROUP_SYMBOLS} symbols, got {size}')
    if size == 1:
        try:
            return alphabet.tokens[symbols[0]]
        except KeyError:
            raise IncompleteGroup(position)
    decoder = alphabet.decoder
    value = 0
    for k, symbol in enumerate(symbols):
        digit = decoder[symbol]
        if digit < 0:
            raise InvalidSymbol(symbol, None if position is None else position + k)
        value = value * RADIX + digit
        if value > UINT32_MAX:
            raise GroupOverflow(bytes(symbols), position)
    for _ in range(size, GROUP_SYMBOLS):
        value = value * RADIX + _MAX_DIGIT
        if value > UINT32_MAX:
            raise GroupOverflow(bytes(symbols), position)
    return value.to_bytes(GROUP_BYTES, 'big')[:size - 1]
