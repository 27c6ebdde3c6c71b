R"""
This is the radix85 package documentation. The package provides streaming codecs for the two
common radix-85 encodings:

- `radix85.a85`: Ascii85, as used by btoa and in PostScript and PDF documents, including the
  `z` and `y` compression tokens and the optional Adobe framing with `<~` and `~>`.
- `radix85.z85`: Z85, the variant with the alphabet defined by ZeroMQ.

Both are `radix85.units.Unit`s and can be used as shell commands or from Python code:

    >>> from radix85 import a85, z85
    >>> B'Hello' | z85 | str
    'nm=QNzV\\n'

The codec machinery is available without the unit layer in the following library modules:

1. `radix85.lib.alphabet`: the alphabets and their compression tokens
2. `radix85.lib.group`: conversion of a single group of bytes or symbols
3. `radix85.lib.stream`: buffered stream drivers and the `radix85.lib.stream.CodecConfig`
"""
from __future__ import annotations

__version__ = '0.1.0'
__distribution__ = 'radix85'

from radix85.units import Arg, Unit
from radix85.units.encoding.a85 import a85, ascii85
from radix85.units.encoding.z85 import z85

__all__ = [
    'a85',
    'ascii85',
    'z85',
    'Arg',
    'Unit',
    '__version__',
    '__distribution__',
]
