from unittest import TestCase

from labelcodes.code128 import encode_barcode
from labelcodes.qr_code import Ecc, encode_text
from labelcodes.render import barcode_to_image, barcode_to_svg, image_to_png_bytes, qr_to_image, qr_to_svg


class QrRenderTests(TestCase):
    def setUp(self):
        self.qr = encode_text("HELLO", Ecc.LOW)
        self.dark = sum(1 for row in self.qr.modules for cell in row if cell)

    def test_svg_has_background_plus_one_rect_per_dark_module(self):
        svg = qr_to_svg(self.qr, size=58, quiet_zone=4)
        self.assertTrue(svg.startswith("<svg"))
        self.assertEqual(svg.count("<rect"), self.dark + 1)
        self.assertIn('viewBox="0 0 58 58"', svg)
        # 58 units over 21 + 8 modules puts the first finder module at (8, 8)
        self.assertIn('<rect x="8" y="8" width="2" height="2" fill="#111"/>', svg)

    def test_svg_rejects_bad_arguments(self):
        with self.assertRaises(ValueError):
            qr_to_svg(self.qr, size=0)
        with self.assertRaises(ValueError):
            qr_to_svg(self.qr, quiet_zone=-1)

    def test_svg_rejects_non_finite_sizes(self):
        for value in (float("inf"), float("nan")):
            with self.assertRaises(ValueError):
                qr_to_svg(self.qr, size=value)
            with self.assertRaises(ValueError):
                barcode_to_svg(encode_barcode("A"), min_bar_width=value)

    def test_image_geometry(self):
        img = qr_to_image(self.qr, box_size=10, border=4)
        self.assertEqual(img.size, (290, 290))
        self.assertEqual(img.getpixel((5, 5)), (255, 255, 255))
        self.assertEqual(img.getpixel((45, 45)), (17, 17, 17))
        self.assertEqual(img.getpixel((40 + 15, 40 + 15)), (255, 255, 255))

    def test_image_rejects_bad_box_size(self):
        with self.assertRaises(ValueError):
            qr_to_image(self.qr, box_size=0)

    def test_png_bytes(self):
        data = image_to_png_bytes(qr_to_image(self.qr, box_size=2))
        self.assertTrue(data.startswith(b"\x89PNG\r\n\x1a\n"))


class BarcodeRenderTests(TestCase):
    def setUp(self):
        self.barcode = encode_barcode("ABC")

    def test_svg_one_rect_per_bar(self):
        svg = barcode_to_svg(self.barcode, height=40, min_bar_width=2)
        self.assertEqual(svg.count("<rect"), len(self.barcode.bars))
        # 68 modules scaled by 2 is wider than the 100 unit minimum
        self.assertIn('viewBox="0 0 136 40"', svg)
        self.assertIn('<rect x="0" y="0" width="4" height="40" fill="#111"/>', svg)

    def test_svg_minimum_view_width(self):
        svg = barcode_to_svg(self.barcode)
        self.assertIn('viewBox="0 0 100 48"', svg)

    def test_image_geometry(self):
        img = barcode_to_image(self.barcode, module_width=2, height=30, quiet_zone=10)
        self.assertEqual(img.size, ((68 + 20) * 2, 30))
        self.assertEqual(img.getpixel((0, 0)), (255, 255, 255))
        self.assertEqual(img.getpixel((20, 15)), (17, 17, 17))
        self.assertEqual(img.getpixel((24, 15)), (255, 255, 255))

    def test_image_rejects_bad_height(self):
        with self.assertRaises(ValueError):
            barcode_to_image(self.barcode, height=0)
