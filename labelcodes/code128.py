"""
Code 128 (Code Set B) barcodes for shelf, bin and pick-list labels.

The output is renderer agnostic: an ordered list of bars in abstract module
units. ``labelcodes.render`` turns it into SVG or a Pillow image.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

START_B = 104
STOP = 106
CHECKSUM_MODULUS = 103

# Bar/space run widths for values 0-106, starting with a bar.
# The stop symbol carries its two module termination bar, hence seven digits.
PATTERNS = (
    "212222", "222122", "222221", "121223", "121322", "131222", "122213", "122312",
    "132212", "221213", "221312", "231212", "112232", "122132", "122231", "113222",
    "123122", "123221", "223211", "221132", "221231", "213212", "223112", "312131",
    "311222", "321122", "321221", "312212", "322112", "322211", "212123", "212321",
    "232121", "111323", "131123", "131321", "112313", "132113", "132311", "211313",
    "231113", "231311", "112133", "112331", "132131", "113123", "113321", "133121",
    "313121", "211331", "231131", "213113", "213311", "213131", "311123", "311321",
    "331121", "312113", "312311", "332111", "314111", "221411", "431111", "111224",
    "111422", "121124", "121421", "141122", "141221", "112214", "112412", "122114",
    "122411", "142112", "142211", "241211", "221114", "413111", "241112", "134111",
    "111242", "121142", "121241", "114212", "124112", "124211", "411212", "421112",
    "421211", "212141", "214121", "412121", "111143", "111341", "131141", "114113",
    "114311", "411113", "411311", "113141", "114131", "311141", "411131", "211412",
    "211214", "211232", "2331112",
)

SUBSTITUTE = "?"


@dataclass(frozen=True)
class BarRect:
    x: int
    width: int


@dataclass(frozen=True)
class Barcode:
    bars: Tuple[BarRect, ...]
    total_width: int


def sanitize(text: str) -> str:
    """Replace anything outside printable ASCII with '?'."""
    return "".join(ch if 0x20 <= ord(ch) <= 0x7E else SUBSTITUTE for ch in text)


def encode_values(text: str) -> List[int]:
    values = [ord(ch) - 32 for ch in sanitize(text)]
    checksum = START_B
    for position, value in enumerate(values, 1):
        checksum += value * position
    return [START_B] + values + [checksum % CHECKSUM_MODULUS, STOP]


def encode_barcode(text: str) -> Barcode:
    bars = []
    x = 0
    for value in encode_values(text):
        for index, digit in enumerate(PATTERNS[value]):
            width = int(digit)
            if index % 2 == 0:
                bars.append(BarRect(x, width))
            x += width
    return Barcode(bars=tuple(bars), total_width=max(x, 1))
