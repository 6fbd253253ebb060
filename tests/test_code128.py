"""
Tests for the Code 128 (set B) encoder
"""
from unittest import TestCase

from labelcodes.code128 import PATTERNS, STOP, BarRect, encode_barcode, encode_values, sanitize


class PatternTableTests(TestCase):
    def test_table_size(self):
        self.assertEqual(len(PATTERNS), 107)

    def test_every_symbol_is_eleven_modules(self):
        for value, pattern in enumerate(PATTERNS[:STOP]):
            self.assertEqual(len(pattern), 6, value)
            self.assertEqual(sum(int(d) for d in pattern), 11, value)
        self.assertEqual(sum(int(d) for d in PATTERNS[STOP]), 13)


class ValueTests(TestCase):
    def test_abc_checksum(self):
        """104 + 33*1 + 34*2 + 35*3 = 310, 310 mod 103 = 1"""
        self.assertEqual(encode_values("ABC"), [104, 33, 34, 35, 1, 106])

    def test_empty_string(self):
        self.assertEqual(encode_values(""), [104, 1, 106])

    def test_control_character_replaced_with_question_mark(self):
        self.assertEqual(sanitize("A\x01B"), "A?B")
        values = encode_values("A\x01B")
        self.assertEqual(values[1:4], [33, ord("?") - 32, 34])

    def test_non_ascii_replaced(self):
        self.assertEqual(sanitize("peça\t~"), "pe?a?~")
        self.assertEqual(sanitize(" ~"), " ~")
        self.assertEqual(sanitize("\x7f"), "?")


class BarcodeTests(TestCase):
    def test_abc_bars(self):
        barcode = encode_barcode("ABC")
        self.assertEqual(barcode.total_width, 68)
        self.assertEqual(len(barcode.bars), 3 * 5 + 4)
        self.assertEqual(barcode.bars[:3], (BarRect(0, 2), BarRect(3, 1), BarRect(6, 1)))
        self.assertEqual(barcode.bars[-4:], (BarRect(55, 2), BarRect(60, 3), BarRect(64, 1), BarRect(66, 2)))

    def test_width_law(self):
        for text in ("", "A", "SKU-000123", "Caixa 12 / Rua B"):
            self.assertEqual(encode_barcode(text).total_width, 11 * (len(text) + 3) + 2)

    def test_bars_are_ordered_and_disjoint(self):
        bars = encode_barcode("PICK 42").bars
        for left, right in zip(bars, bars[1:]):
            self.assertLess(left.x + left.width, right.x + 1)

    def test_empty_input_still_has_start_checksum_and_stop(self):
        barcode = encode_barcode("")
        self.assertEqual(len(barcode.bars), 10)
        self.assertEqual(barcode.total_width, 35)

    def test_pure_function(self):
        self.assertEqual(encode_barcode("BIN-7"), encode_barcode("BIN-7"))
