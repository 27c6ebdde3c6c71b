#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import base64
import io

from radix85.lib.alphabet import ASCII85, Z85
from radix85.lib.exceptions import (
    DecodeError,
    GroupOverflow,
    IncompleteGroup,
    InputLimitExceeded,
    Interrupted,
    InvalidSymbol,
    MisplacedToken,
    MissingEndMarker,
    StreamError,
)
from radix85.lib.stream import (
    MAX_BUFFER_SIZE,
    MAX_WRAP,
    CodecConfig,
    LineWriter,
    decode_bytes,
    decode_stream,
    encode_bytes,
    encode_stream,
)

from .. import TestBase


class BrokenStream(io.RawIOBase):

    def readable(self):
        return True

    def writable(self):
        return True

    def readinto(self, buffer):
        raise OSError(5, 'Input/output error')

    def write(self, data):
        raise OSError(28, 'No space left on device')


class StalledStream(io.RawIOBase):

    def writable(self):
        return True

    def write(self, data):
        return None


class RecordingStream(io.BytesIO):

    def __init__(self):
        super().__init__()
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


class TestCodecConfig(TestBase):

    def test_defaults(self):
        config = CodecConfig()
        self.assertIs(config.alphabet, ASCII85)
        self.assertEqual(config.wrap, 76)
        self.assertEqual(config.buffer_size, 0x10000)
        self.assertEqual(config.max_input, 0)

    def test_wrap_bounds(self):
        CodecConfig(wrap=0)
        CodecConfig(wrap=MAX_WRAP)
        with self.assertRaises(ValueError):
            CodecConfig(wrap=-1)
        with self.assertRaises(ValueError):
            CodecConfig(wrap=MAX_WRAP + 1)

    def test_invalid_settings(self):
        with self.assertRaises(ValueError):
            CodecConfig(buffer_size=0)
        with self.assertRaises(ValueError):
            CodecConfig(buffer_size=MAX_BUFFER_SIZE + 1)
        self.assertEqual(CodecConfig(buffer_size=MAX_BUFFER_SIZE).buffer_size, MAX_BUFFER_SIZE)
        with self.assertRaises(ValueError):
            CodecConfig(max_input=-1)
        with self.assertRaises(ValueError):
            CodecConfig(alphabet=Z85, zero_compress=True)
        with self.assertRaises(ValueError):
            CodecConfig(alphabet=Z85, space_compress=True)

    def test_immutable(self):
        config = CodecConfig()
        with self.assertRaises(AttributeError):
            config.wrap = 10


class TestLineWriter(TestBase):

    def test_column_invariant(self):
        output = io.BytesIO()
        writer = LineWriter(output, 7, 3)
        for piece in (B'abc', B'defghij', B'k', B'', B'lmnopqrstu'):
            writer.write(piece)
            self.assertGreaterEqual(writer.column, 0)
            self.assertLess(writer.column, 7)
        writer.close()
        self.assertEqual(output.getvalue(), B'abcdefg\nhijklmn\nopqrstu\n')

    def test_no_double_newline(self):
        output = io.BytesIO()
        writer = LineWriter(output, 4)
        writer.write(B'abcd')
        writer.close()
        self.assertEqual(output.getvalue(), B'abcd\n')

    def test_no_wrapping(self):
        output = io.BytesIO()
        writer = LineWriter(output, 0)
        writer.write(B'x' * 200)
        writer.close()
        self.assertEqual(output.getvalue(), B'x' * 200 + B'\n')

    def test_write_error(self):
        writer = LineWriter(BrokenStream(), 10)
        writer.write(B'abc')
        with self.assertRaises(StreamError):
            writer.close()

    def test_stalled_write_is_an_error(self):
        writer = LineWriter(StalledStream(), 10)
        writer.write(B'abc')
        with self.assertRaises(StreamError):
            writer.close()
        with self.assertRaises(StreamError):
            encode_stream(io.BytesIO(B'Binary'), StalledStream(), CodecConfig(wrap=0))


class TestEncoding(TestBase):

    def test_empty_input(self):
        self.assertEqual(encode_bytes(B'', CodecConfig()), B'\n')
        self.assertEqual(encode_bytes(B'', CodecConfig(wrap=0)), B'\n')
        self.assertEqual(decode_bytes(B'\n', CodecConfig()), B'')
        self.assertEqual(decode_bytes(B'', CodecConfig()), B'')

    def test_matches_standard_library(self):
        config = CodecConfig(wrap=0, zero_compress=True)
        for size in (1, 2, 3, 4, 5, 17, 100, 1023):
            data = self.generate_random_buffer(size)
            encoded = encode_bytes(data, config)
            self.assertEqual(encoded[-1:], B'\n')
            self.assertEqual(base64.a85decode(encoded[:-1]), data)
            if size % 4 == 0:
                self.assertEqual(encoded[:-1], base64.a85encode(data))

    def test_output_length(self):
        config = CodecConfig(wrap=0)
        for size in range(0, 40):
            data = self.generate_random_buffer(size)
            encoded = encode_bytes(data, config)
            expected = 5 * (size // 4) + (size % 4 + 1 if size % 4 else 0)
            self.assertEqual(len(encoded) - 1, expected)

    def test_wrapped_output(self):
        data = self.generate_random_buffer(1000)
        encoded = encode_bytes(data, CodecConfig(wrap=20))
        lines = encoded.split(B'\n')
        self.assertEqual(lines[-1], B'')
        for line in lines[:-2]:
            self.assertEqual(len(line), 20)
        self.assertLessEqual(len(lines[-2]), 20)
        self.assertEqual(decode_bytes(encoded, CodecConfig()), data)

    def test_small_buffers_give_same_result(self):
        data = self.generate_random_buffer(777)
        expected = encode_bytes(data, CodecConfig(wrap=13))
        for buffer_size in (1, 2, 3, 5, 64):
            config = CodecConfig(wrap=13, buffer_size=buffer_size)
            self.assertEqual(encode_bytes(data, config), expected)
            self.assertEqual(decode_bytes(expected, config), data)

    def test_compression(self):
        config = CodecConfig(wrap=0, zero_compress=True, space_compress=True)
        self.assertEqual(encode_bytes(bytes(4), config), B'z\n')
        self.assertEqual(encode_bytes(B'    ', config), B'y\n')
        self.assertEqual(encode_bytes(B'    ', CodecConfig(wrap=0)), B'+<VdL\n')
        self.assertEqual(encode_bytes(bytes(4), CodecConfig(wrap=0)), B'!!!!!\n')
        self.assertEqual(encode_bytes(bytes(10), config), B'zz!!!\n')

    def test_transfer_counts(self):
        source = io.BytesIO(B'Binary')
        target = io.BytesIO()
        transfer = encode_stream(source, target, CodecConfig(wrap=0))
        self.assertEqual(transfer.read, 6)
        self.assertEqual(transfer.written, len(target.getvalue()))
        self.assertEqual(target.getvalue(), B'6>:=GEd7\n')

    def test_adobe_framing(self):
        config = CodecConfig(wrap=0, adobe=True)
        self.assertEqual(encode_bytes(B'Binary', config), B'<~6>:=GEd7~>\n')
        self.assertEqual(encode_bytes(B'', config), B'<~~>\n')
        with self.assertRaises(ValueError):
            CodecConfig(alphabet=Z85, adobe=True)

    def test_z85(self):
        config = CodecConfig(alphabet=Z85, wrap=0)
        data = bytes.fromhex('864FD26FB559F75B')
        self.assertEqual(encode_bytes(data, config), B'HelloWorld\n')
        self.assertEqual(decode_bytes(B'HelloWorld\n', config), data)

    def test_input_limit(self):
        config = CodecConfig(max_input=10, buffer_size=4)
        self.assertEqual(decode_bytes(encode_bytes(bytes(10), config), CodecConfig()), bytes(10))
        with self.assertRaises(InputLimitExceeded):
            encode_bytes(bytes(11), config)

    def test_read_error(self):
        with self.assertRaises(StreamError):
            encode_stream(BrokenStream(), io.BytesIO(), CodecConfig())

    def test_round_trip_with_tokens_and_wrapping(self):
        data = bytes(4) + B'    ' + bytes(3) + B'abc' + bytes(8) + B'    x'
        for size in range(len(data) + 1):
            chunk = data[:size]
            for wrap in (0, 1, 76):
                for zc, sc in ((False, False), (True, False), (False, True), (True, True)):
                    config = CodecConfig(wrap=wrap, zero_compress=zc, space_compress=sc)
                    encoded = encode_bytes(chunk, config)
                    self.assertEqual(encoded[-1:], B'\n')
                    self.assertNotIn(B'\n\n', encoded)
                    lines = encoded.split(B'\n')[:-1]
                    if wrap:
                        for line in lines[:-1]:
                            self.assertEqual(len(line), wrap)
                        self.assertLessEqual(len(lines[-1]), wrap)
                    else:
                        self.assertEqual(len(lines), 1)
                    if size >= 4:
                        self.assertEqual(B'z' in encoded, zc)
                    if size >= 8:
                        self.assertEqual(B'y' in encoded, sc)
                    self.assertEqual(decode_bytes(encoded, CodecConfig()), chunk)

    def test_text_stream_is_rejected(self):
        with self.assertRaises(StreamError):
            encode_stream(io.StringIO('text'), io.BytesIO(), CodecConfig())

    def test_interrupt(self):
        calls = 0

        def interrupt():
            nonlocal calls
            calls += 1
            return calls > 3

        target = io.BytesIO()
        with self.assertRaises(Interrupted) as context:
            encode_stream(io.BytesIO(bytes(range(40))), target, CodecConfig(wrap=0, interrupt=interrupt))
        self.assertEqual(context.exception.position, 12)
        self.assertEqual(len(target.getvalue()), 15)


class TestDecoding(TestBase):

    def test_whitespace_is_ignored(self):
        data = self.generate_random_buffer(200)
        encoded = encode_bytes(data, CodecConfig(wrap=0))
        spaced = B'\x20\t\r\n\v\f'.join(encoded[k:k + 3] for k in range(0, len(encoded), 3))
        self.assertEqual(decode_bytes(spaced, CodecConfig()), data)

    def test_tokens(self):
        config = CodecConfig()
        self.assertEqual(decode_bytes(B'z', config), bytes(4))
        self.assertEqual(decode_bytes(B'y', config), B'    ')
        self.assertEqual(decode_bytes(B'zz!!!', config), bytes(10))

    def test_misplaced_token(self):
        for token in B'zy':
            with self.assertRaises(MisplacedToken) as context:
                decode_bytes(B'!!' + bytes((token,)) + B'!!', CodecConfig())
            self.assertEqual(context.exception.position, 2)

    def test_misplaced_token_with_garbage_ignored(self):
        with self.assertRaises(MisplacedToken):
            decode_bytes(B'!!z!!', CodecConfig(ignore_garbage=True))

    def test_invalid_symbol(self):
        with self.assertRaises(InvalidSymbol) as context:
            decode_bytes(B'!!!!!\x80', CodecConfig())
        self.assertEqual(context.exception.position, 5)

    def test_garbage_is_skipped(self):
        data = B'Binary'
        source = io.BytesIO(B'6>:=\x80GE{d7}')
        target = io.BytesIO()
        transfer = decode_stream(source, target, CodecConfig(ignore_garbage=True))
        self.assertEqual(target.getvalue(), data)
        self.assertEqual(transfer.skipped, 3)

    def test_incomplete_final_group(self):
        with self.assertRaises(IncompleteGroup):
            decode_bytes(B'6>:=G6', CodecConfig())

    def test_output_flushed_before_error(self):
        target = io.BytesIO()
        with self.assertRaises(DecodeError):
            decode_stream(io.BytesIO(B'6>:=G6'), target, CodecConfig())
        self.assertEqual(target.getvalue(), B'Bina')

    def test_overflow(self):
        with self.assertRaises(GroupOverflow):
            decode_bytes(B'!!!!!uuuuu', CodecConfig())

    def test_z_is_a_symbol_in_z85(self):
        config = CodecConfig(alphabet=Z85)
        self.assertEqual(len(decode_bytes(B'zzzzz', config)), 4)

    def test_adobe_framing(self):
        config = CodecConfig(adobe=True)
        self.assertEqual(decode_bytes(B'<~6>:=GEd7~>', config), B'Binary')
        self.assertEqual(decode_bytes(B'6>:=GEd7~>', config), B'Binary')
        self.assertEqual(decode_bytes(B'  <~ 6>:=G\nEd7 ~\n> trailing junk', config), B'Binary')
        self.assertEqual(decode_bytes(B'<~~>', config), B'')

    def test_adobe_half_prefix_is_data(self):
        encoded = encode_bytes(B'UUUU', CodecConfig(wrap=0))
        self.assertEqual(encoded[:1], B'<')
        config = CodecConfig(adobe=True)
        self.assertEqual(decode_bytes(encoded[:-1] + B'~>', config), B'UUUU')

    def test_adobe_errors(self):
        config = CodecConfig(adobe=True)
        with self.assertRaises(MissingEndMarker):
            decode_bytes(B'<~6>:=GEd7', config)
        with self.assertRaises(DecodeError):
            decode_bytes(B'<~6>:=GEd7~', config)
        with self.assertRaises(DecodeError):
            decode_bytes(B'<~6>:=GEd7~x', config)
        with self.assertRaises(InvalidSymbol):
            decode_bytes(B'6>:=GEd7~>', CodecConfig())

    def test_interrupt(self):
        encoded = encode_bytes(bytes(range(1, 41)), CodecConfig(wrap=0))
        calls = 0

        def interrupt():
            nonlocal calls
            calls += 1
            return calls > 2

        target = io.BytesIO()
        with self.assertRaises(Interrupted) as context:
            decode_stream(io.BytesIO(encoded), target, CodecConfig(interrupt=interrupt))
        self.assertEqual(context.exception.position, 10)
        self.assertEqual(target.getvalue(), bytes(range(1, 9)))

    def test_interrupt_flushes_target(self):
        encoded = encode_bytes(bytes(range(1, 41)), CodecConfig(wrap=0))
        target = RecordingStream()
        with self.assertRaises(Interrupted):
            decode_stream(io.BytesIO(encoded), target, CodecConfig(interrupt=lambda: True))
        self.assertEqual(target.flushes, 1)

    def test_bytes_read_stop_at_end_marker(self):
        source = io.BytesIO(B'<~6>:=GEd7~> trailing junk')
        target = io.BytesIO()
        transfer = decode_stream(source, target, CodecConfig(adobe=True))
        self.assertEqual(target.getvalue(), B'Binary')
        self.assertEqual(transfer.read, 12)
