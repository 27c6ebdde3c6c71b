"""
Alphabets for radix-85 codecs. An `radix85.lib.alphabet.Alphabet` is a fixed bijection between
the digit values 0 to 84 and 85 printable ASCII characters, together with a dense reverse table
that maps every byte value to its digit value, or to -1 if the byte is not a member. Some
alphabets additionally reserve compression tokens: single symbols outside the alphabet which
stand for an entire group of four bytes.

Two alphabets are provided:

- `ASCII85` uses the printable range from `!` to `u` in order, with the tokens `z` for four zero
  bytes and `y` for four spaces.
- `Z85` uses the ZeroMQ ordering: digits, lowercase letters, uppercase letters, and then the
  characters `.-:+=^!/*?&<>()[]{}@%$#`. It has no compression tokens.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from radix85.lib.types import buf

RADIX = 85

__all__ = ['Alphabet', 'ASCII85', 'Z85', 'RADIX']


class Alphabet:
    """
    An immutable radix-85 alphabet with an optional set of compression tokens.
    """
    __slots__ = 'name', 'symbols', 'decoder', 'tokens'

    name: str
    symbols: bytes
    decoder: tuple[int, ...]
    tokens: Mapping[int, bytes]

    def __init__(self, name: str, symbols: buf, tokens: Mapping[int, buf] | None = None):
        symbols = bytes(symbols)
        if len(symbols) != RADIX:
            raise ValueError(F'an alphabet requires exactly {RADIX} symbols, got {len(symbols)}')
        if len(set(symbols)) != RADIX:
            raise ValueError('the given alphabet contains duplicate symbols')
        if any(not 0x20 < s < 0x7F for s in symbols):
            raise ValueError('alphabet symbols must be printable 7-bit characters')
        decoder = [-1] * 0x100
        for index, symbol in enumerate(symbols):
            decoder[symbol] = index
        expansions = {}
        for token, expansion in (tokens or {}).items():
            if not 0x20 < token < 0x7F:
                raise ValueError('compression tokens must be printable 7-bit characters')
            if decoder[token] >= 0:
                raise ValueError(F'the token {chr(token)!r} is also a member of the alphabet')
            if len(expansion) != 4:
                raise ValueError('a compression token must expand to exactly four bytes')
            expansions[token] = bytes(expansion)
        setattr = object.__setattr__
        setattr(self, 'name', name)
        setattr(self, 'symbols', symbols)
        setattr(self, 'decoder', tuple(decoder))
        setattr(self, 'tokens', MappingProxyType(expansions))

    def __setattr__(self, name, value):
        raise AttributeError(F'{self.__class__.__name__} objects are immutable')

    def __repr__(self):
        return F'<Alphabet {self.name}>'

    def __len__(self):
        return RADIX

    def __contains__(self, symbol: int):
        return self.index_of(symbol) is not None

    def symbol_at(self, index: int) -> int:
        """
        Return the symbol for the given digit value.
        """
        if not 0 <= index < RADIX:
            raise IndexError(F'digit value {index} is out of range')
        return self.symbols[index]

    def index_of(self, symbol: int) -> int | None:
        """
        Return the digit value of the given byte, or `None` if it is not a member of the alphabet.
        """
        if not 0 <= symbol <= 0xFF:
            raise ValueError(F'the value {symbol} is not a byte')
        index = self.decoder[symbol]
        return None if index < 0 else index

    def token_for(self, expansion: buf) -> int | None:
        for token, value in self.tokens.items():
            if value == expansion:
                return token
        return None

    @property
    def zero_token(self) -> int | None:
        """
        The token that represents four zero bytes, if any.
        """
        return self.token_for(bytes(4))

    @property
    def space_token(self) -> int | None:
        """
        The token that represents four space characters, if any.
        """
        return self.token_for(B'\x20' * 4)


ASCII85 = Alphabet('ascii85', bytes(range(0x21, 0x76)), {
    0x7A: bytes(4),
    0x79: B'\x20' * 4,
})

Z85 = Alphabet('z85', (
    B'0123456789abcdefghijklmnopqrstuvwxyz'
    B'ABCDEFGHIJKLMNOPQRSTUVWXYZ.-:+=^!/*?&<>()[]{}@%$#'
))
