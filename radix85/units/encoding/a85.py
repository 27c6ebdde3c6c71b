#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

from radix85.lib.alphabet import ASCII85
from radix85.lib.types import Param
from radix85.units import Arg
from radix85.units.encoding import Radix85Unit


class a85(Radix85Unit):
    """
    Ascii85 encoding and decoding. The alphabet consists of the printable characters from `!` to
    `u`. Optionally, a complete group of four zero bytes can be abbreviated as `z` and a complete
    group of four spaces can be abbreviated as `y`. When decoding, both tokens are always accepted
    at the start of a group, regardless of these options.
    """
    _alphabet = ASCII85

    def __init__(
        self,
        zero_compress: Param[bool, Arg.Switch('-z', help=(
            'Encode a complete group of four zero bytes as the single character z.'))] = False,
        space_compress: Param[bool, Arg.Switch('-y', help=(
            'Encode a complete group of four spaces as the single character y.'))] = False,
        adobe: Param[bool, Arg.Switch('-a', help=(
            'Frame the encoded data with the Adobe markers <~ and ~>. When decoding, the end '
            'marker is required and all input after it is ignored.'))] = False,
        **keywords
    ):
        super().__init__(zero_compress=zero_compress, space_compress=space_compress, adobe=adobe, **keywords)

    def _settings(self) -> dict:
        return dict(
            zero_compress=self.args.zero_compress,
            space_compress=self.args.space_compress,
            adobe=self.args.adobe,
        )


ascii85 = a85
