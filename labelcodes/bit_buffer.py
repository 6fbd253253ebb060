from __future__ import annotations

from typing import List


class BitBuffer(list):
    """Append-only list of 0/1 ints, most significant bit first."""

    def append_bits(self, value: int, length: int) -> None:
        for i in range(length - 1, -1, -1):
            self.append((value >> i) & 1)

    def pad_to_byte(self) -> None:
        while len(self) % 8 != 0:
            self.append(0)

    def to_codewords(self) -> List[int]:
        result = [0] * ((len(self) + 7) // 8)
        for i, bit in enumerate(self):
            result[i >> 3] |= bit << (7 - (i & 7))
        return result
