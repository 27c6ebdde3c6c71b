#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Contains the radix-85 codec units. Both of them encode by default and decode when the `-d` switch
is given; they share the options for line wrapping, garbage handling, and input buffering.
"""
from __future__ import annotations

from radix85.lib.alphabet import Alphabet
from radix85.lib.environment import environment
from radix85.lib.stream import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_WRAP,
    MAX_BUFFER_SIZE,
    MAX_WRAP,
    CodecConfig,
    Transfer,
    decode_stream,
    encode_stream,
)
from radix85.lib.types import BinaryIO, Param
from radix85.units import Arg, Unit


class Radix85Unit(Unit, abstract=True):
    """
    Base class for radix-85 codec units. Child classes set the class variable `_alphabet` and may
    contribute additional settings to the `radix85.lib.stream.CodecConfig` by overriding the
    `_settings` method.
    """

    _alphabet: Alphabet

    def __init__(
        self,
        wrap: Param[int, Arg.Number('-w', metavar='COLS', bound=(0, MAX_WRAP), help=(
            'Wrap encoded lines after COLS characters, default is %(default)s. Use 0 to disable line wrapping.'))] = DEFAULT_WRAP,
        ignore_garbage: Param[bool, Arg.Switch('-i', help=(
            'When decoding, ignore all characters that are neither part of the alphabet nor whitespace.'))] = False,
        buffer: Param[int, Arg.Number('-b', metavar='SIZE', bound=(0, MAX_BUFFER_SIZE), help=(
            'The number of input bytes to read at once, at most 0x4000000. The default is 0, which means that the '
            'RADIX85_BUFFER_SIZE environment variable or a built-in default is used.'))] = 0,
        max_input: Param[int, Arg.Number('-m', metavar='SIZE', bound=(0, None), help=(
            'Fail when the input is larger than SIZE bytes. The default is 0, which means unlimited.'))] = 0,
        **keywords
    ):
        super().__init__(wrap=wrap, ignore_garbage=ignore_garbage, buffer=buffer, max_input=max_input, **keywords)
        _ = self.config

    def _settings(self) -> dict:
        return {}

    @property
    def buffer_size(self) -> int:
        """
        The effective read size: the `buffer` argument if it is nonzero, otherwise the value of the
        `RADIX85_BUFFER_SIZE` environment variable if that is positive, and the built-in default
        otherwise.
        """
        if self.args.buffer > 0:
            return self.args.buffer
        if environment.buffer_size.value > 0:
            return min(environment.buffer_size.value, MAX_BUFFER_SIZE)
        return DEFAULT_BUFFER_SIZE

    @property
    def config(self) -> CodecConfig:
        """
        The `radix85.lib.stream.CodecConfig` that corresponds to the current arguments.
        """
        return CodecConfig(
            alphabet=self._alphabet,
            wrap=self.args.wrap,
            ignore_garbage=self.args.ignore_garbage,
            buffer_size=self.buffer_size,
            max_input=self.args.max_input,
            **self._settings(),
        )

    def _report(self, action: str, transfer: Transfer):
        self.log_debug(F'{action} {transfer.read} bytes into {transfer.written} bytes')
        if transfer.skipped:
            self.log_info(F'skipped {transfer.skipped} garbage bytes in the input')

    def process(self, source: BinaryIO, target: BinaryIO):
        self._report('encoded', encode_stream(source, target, self.config))

    def reverse(self, source: BinaryIO, target: BinaryIO):
        self._report('decoded', decode_stream(source, target, self.config))
