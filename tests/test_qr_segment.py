from unittest import TestCase

from labelcodes.qr_segment import Mode, QrSegment, get_total_bits, make_segments, to_utf8_bytes


class Utf8Tests(TestCase):
    def test_matches_standard_codec_inside_bmp(self):
        for text in ("HELLO", "Caixa 3 - prateleira B", "peça", "€ 12,50", "日本"):
            self.assertEqual(to_utf8_bytes(text), text.encode("utf-8"))

    def test_two_and_three_byte_forms(self):
        self.assertEqual(to_utf8_bytes("é"), b"\xc3\xa9")
        self.assertEqual(to_utf8_bytes("€"), b"\xe2\x82\xac")

    def test_astral_code_point_written_as_surrogate_halves(self):
        expected = "\ud83d\ude00".encode("utf-8", "surrogatepass")
        self.assertEqual(to_utf8_bytes("\U0001F600"), expected)
        self.assertEqual(len(expected), 6)


class QrSegmentTests(TestCase):
    def test_make_bytes(self):
        seg = QrSegment.make_bytes(b"HELLO")
        self.assertIs(seg.mode, Mode.BYTE)
        self.assertEqual(seg.mode.mode_bits, 4)
        self.assertEqual(seg.num_chars, 5)
        self.assertEqual(len(seg.bit_data), 40)
        self.assertEqual(seg.bit_data[:8], (0, 1, 0, 0, 1, 0, 0, 0))

    def test_make_segments_counts_utf8_bytes(self):
        (seg,) = make_segments("peça")
        self.assertEqual(seg.num_chars, 5)

    def test_num_chars_bits_by_version_band(self):
        seg = QrSegment.make_bytes(b"x")
        self.assertEqual([seg.num_chars_bits(v) for v in (1, 9, 10, 26, 27, 40)], [8, 8, 16, 16, 16, 16])

    def test_total_bits(self):
        seg = QrSegment.make_bytes(b"HELLO")
        self.assertEqual(get_total_bits([seg], 1), 4 + 8 + 40)
        self.assertEqual(get_total_bits([seg], 10), 4 + 16 + 40)
        self.assertEqual(get_total_bits([seg, seg], 1), 2 * (4 + 8 + 40))

    def test_total_bits_signals_count_overflow(self):
        seg = QrSegment.make_bytes(b"x" * 256)
        self.assertIsNone(get_total_bits([seg], 9))
        self.assertEqual(get_total_bits([seg], 10), 4 + 16 + 256 * 8)
        self.assertIsNotNone(get_total_bits([QrSegment.make_bytes(b"x" * 255)], 9))
