#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

from radix85.lib.alphabet import Z85
from radix85.units.encoding import Radix85Unit


class z85(Radix85Unit):
    """
    Z85 encoding and decoding, the radix-85 variant with the alphabet defined by ZeroMQ. It
    contains no quote or backslash characters, so the output can be embedded in source code
    strings. Unlike Ascii85, this variant has no compression tokens.
    """
    _alphabet = Z85
