"""
Arithmetic in GF(2^8) with the QR reduction polynomial x^8 + x^4 + x^3 + x^2 + 1.
"""

from __future__ import annotations

from typing import List, Tuple

PRIMITIVE_POLY = 0x11D


def _build_tables() -> Tuple[List[int], List[int]]:
    exp = [0] * 256
    log = [0] * 256
    x = 1
    for i in range(255):
        exp[i] = x
        log[x] = i
        x <<= 1
        if x & 0x100:
            x ^= PRIMITIVE_POLY
    return exp, log


EXP_TABLE, LOG_TABLE = _build_tables()


def multiply(x: int, y: int) -> int:
    if x == 0 or y == 0:
        return 0
    return EXP_TABLE[(LOG_TABLE[x] + LOG_TABLE[y]) % 255]
