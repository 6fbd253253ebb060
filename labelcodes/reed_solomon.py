from __future__ import annotations

from functools import lru_cache
from typing import List, Sequence, Tuple

from labelcodes.galois import EXP_TABLE, multiply


@lru_cache(maxsize=None)
def generator(degree: int) -> Tuple[int, ...]:
    """
    Product of (x - a^i) for i in [0, degree), highest power first.

    The leading coefficient is always 1, so the result has degree + 1 entries.
    """
    result = [1]
    for i in range(degree):
        nxt = result + [0]
        for j in range(len(result)):
            nxt[j + 1] ^= multiply(result[j], EXP_TABLE[i])
        result = nxt
    return tuple(result)


def compute_ecc(data: Sequence[int], ecc_len: int) -> List[int]:
    """Remainder of data * x^ecc_len divided by the generator of that degree."""
    divisor = generator(ecc_len)
    result = [0] * ecc_len
    for b in data:
        factor = b ^ result[0]
        result = result[1:] + [0]
        if factor == 0:
            continue
        for i in range(ecc_len):
            result[i] ^= multiply(divisor[i + 1], factor)
    return result
