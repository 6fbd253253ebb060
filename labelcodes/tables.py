"""
Per-version constants for QR symbols, versions 1 through 10.

Rows are indexed by ``Ecc.ordinal`` (L, M, Q, H) and columns by version;
column 0 is unused.
"""

from __future__ import annotations

from typing import List

MIN_VERSION = 1
MAX_VERSION = 10

ECC_CODEWORDS_PER_BLOCK = [
    [-1, 7, 10, 15, 20, 26, 18, 20, 24, 30, 18],
    [-1, 10, 16, 26, 18, 24, 16, 18, 22, 22, 26],
    [-1, 13, 22, 18, 26, 18, 24, 18, 22, 20, 24],
    [-1, 17, 28, 22, 16, 22, 28, 26, 26, 24, 28],
]

NUM_ERROR_CORRECTION_BLOCKS = [
    [-1, 1, 1, 1, 1, 1, 2, 2, 2, 2, 4],
    [-1, 1, 1, 1, 2, 2, 4, 4, 4, 5, 5],
    [-1, 1, 1, 2, 2, 4, 4, 6, 6, 8, 8],
    [-1, 1, 1, 2, 4, 4, 4, 5, 6, 8, 8],
]


def _check_version(version: int) -> None:
    if not (MIN_VERSION <= version <= MAX_VERSION):
        raise ValueError(f"Version fuera de rango: {version}")


def num_raw_data_modules(version: int) -> int:
    # Modules left once every function pattern is drawn (remainder bits included).
    _check_version(version)
    result = (16 * version + 128) * version + 64
    if version >= 2:
        num_align = version // 7 + 2
        result -= (25 * num_align - 10) * num_align - 55
        if version >= 7:
            result -= 36
    return result


def num_data_codewords(version: int, ecc_ordinal: int) -> int:
    return (
        num_raw_data_modules(version) // 8
        - ECC_CODEWORDS_PER_BLOCK[ecc_ordinal][version] * NUM_ERROR_CORRECTION_BLOCKS[ecc_ordinal][version]
    )


def alignment_positions(version: int) -> List[int]:
    _check_version(version)
    if version == 1:
        return []
    num = version // 7 + 2
    step = (version * 4 + num * 2 + 1) // (num * 2 - 2) * 2
    positions = [6]
    pos = version * 4 + 10
    for _ in range(num - 1):
        positions.insert(1, pos)
        pos -= step
    return positions
