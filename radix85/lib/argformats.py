#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Argument types for the command line parsers of radix85 units. The only one that is required so
far is `radix85.lib.argformats.number`, which parses integers in decimal or hexadecimal notation
and can be restricted to a range of admissible values.
"""
from __future__ import annotations

from argparse import ArgumentTypeError


class number:
    """
    An argument type for integers. The singleton instance `radix85.lib.argformats.number` can be
    slice accessed to create new number parsers with bounds; for example, `number[0:100]` will
    refuse to parse negative integers or integers greater than 100. Both bounds are inclusive.
    """
    __name__ = 'number'

    def __init__(self, min=None, max=None):
        self.min = min
        self.max = max

    def __getitem__(self, bounds: slice):
        return self.__class__(bounds.start, bounds.stop)

    def __call__(self, value) -> int:
        if isinstance(value, str):
            expression = value.strip().replace('_', '')
            try:
                value = int(expression, 10 if expression.isdigit() else 0)
            except ValueError:
                match = expression.upper()
                if not match.endswith('H'):
                    raise ArgumentTypeError(F'invalid number: {value!r}')
                try:
                    value = int(match[:-1], 16)
                except ValueError:
                    raise ArgumentTypeError(F'invalid number: {value!r}')
        elif not isinstance(value, int) or isinstance(value, bool):
            raise ArgumentTypeError(F'invalid number: {value!r}')
        if self.min is not None and value < self.min:
            raise ArgumentTypeError(F'the value {value} is less than the minimum {self.min}')
        if self.max is not None and value > self.max:
            raise ArgumentTypeError(F'the value {value} is greater than the maximum {self.max}')
        return value

    def __repr__(self):
        return F'number[{self.min}:{self.max}]'


number = number()
"""
The singleton instance of `radix85.lib.argformats.number` without any bounds.
"""
