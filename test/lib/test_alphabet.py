#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from radix85.lib.alphabet import ASCII85, Z85, RADIX, Alphabet

from .. import TestBase


class TestAlphabet(TestBase):

    def test_alphabets_are_bijective(self):
        for alphabet in (ASCII85, Z85):
            self.assertEqual(len(alphabet.symbols), RADIX)
            for index in range(RADIX):
                self.assertEqual(alphabet.index_of(alphabet.symbol_at(index)), index)

    def test_reverse_table_is_dense(self):
        for alphabet in (ASCII85, Z85):
            self.assertEqual(len(alphabet.decoder), 0x100)
            members = sum(1 for value in alphabet.decoder if value >= 0)
            self.assertEqual(members, RADIX)

    def test_ascii85_ordering(self):
        self.assertEqual(ASCII85.symbol_at(0), ord('!'))
        self.assertEqual(ASCII85.symbol_at(84), ord('u'))
        self.assertIsNone(ASCII85.index_of(ord('v')))
        self.assertIsNone(ASCII85.index_of(ord(' ')))

    def test_z85_ordering(self):
        self.assertEqual(Z85.symbol_at(0), ord('0'))
        self.assertEqual(Z85.symbol_at(10), ord('a'))
        self.assertEqual(Z85.symbol_at(36), ord('A'))
        self.assertEqual(Z85.symbol_at(62), ord('.'))
        self.assertEqual(Z85.symbol_at(84), ord('#'))
        for character in B'"\',;\\_`|~':
            self.assertNotIn(character, Z85)

    def test_tokens(self):
        self.assertEqual(ASCII85.zero_token, ord('z'))
        self.assertEqual(ASCII85.space_token, ord('y'))
        self.assertEqual(ASCII85.tokens[ord('z')], bytes(4))
        self.assertEqual(ASCII85.tokens[ord('y')], B'    ')
        self.assertIsNone(Z85.zero_token)
        self.assertIsNone(Z85.space_token)
        self.assertIn(ord('z'), Z85)

    def test_index_of_rejects_non_bytes(self):
        with self.assertRaises(ValueError):
            ASCII85.index_of(0x100)
        with self.assertRaises(ValueError):
            ASCII85.index_of(-1)
        with self.assertRaises(IndexError):
            ASCII85.symbol_at(85)

    def test_immutable(self):
        with self.assertRaises(AttributeError):
            ASCII85.symbols = Z85.symbols
        with self.assertRaises(TypeError):
            ASCII85.tokens[0x7E] = bytes(4)

    def test_invalid_alphabets(self):
        with self.assertRaises(ValueError):
            Alphabet('short', bytes(range(0x21, 0x75)))
        with self.assertRaises(ValueError):
            Alphabet('duplicate', bytes(range(0x21, 0x75)) + B'!')
        with self.assertRaises(ValueError):
            Alphabet('unprintable', bytes(range(0x20, 0x75)))
        with self.assertRaises(ValueError):
            Alphabet('member-token', bytes(range(0x21, 0x76)), {0x21: bytes(4)})
        with self.assertRaises(ValueError):
            Alphabet('short-token', bytes(range(0x21, 0x76)), {0x7A: bytes(3)})
        with self.assertRaises(ValueError):
            Alphabet('wide-token', bytes(range(0x21, 0x76)), {0x100: bytes(4)})
