from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from labelcodes.bit_buffer import BitBuffer


def _utf16_units(text: str) -> Iterator[int]:
    for ch in text:
        c = ord(ch)
        if c > 0xFFFF:
            c -= 0x10000
            yield 0xD800 | (c >> 10)
            yield 0xDC00 | (c & 0x3FF)
        else:
            yield c


def to_utf8_bytes(text: str) -> bytes:
    """
    Direct UTF-8 expansion of each UTF-16 code unit into one to three bytes.

    There is no four byte form: a code point above 0xFFFF is split into its
    surrogate pair and each half is written as three bytes.
    """
    out = bytearray()
    for c in _utf16_units(text):
        if c < 0x80:
            out.append(c)
        elif c < 0x800:
            out.append(0xC0 | (c >> 6))
            out.append(0x80 | (c & 0x3F))
        else:
            out.append(0xE0 | (c >> 12))
            out.append(0x80 | ((c >> 6) & 0x3F))
            out.append(0x80 | (c & 0x3F))
    return bytes(out)


@dataclass(frozen=True)
class Mode:
    mode_bits: int
    num_bits_char_count: Tuple[int, int, int]

    def num_chars_bits(self, version: int) -> int:
        return self.num_bits_char_count[0 if version <= 9 else 1 if version <= 26 else 2]


Mode.BYTE = Mode(4, (8, 16, 16))


@dataclass(frozen=True)
class QrSegment:
    mode: Mode
    num_chars: int
    bit_data: Tuple[int, ...]

    @staticmethod
    def make_bytes(data: bytes) -> "QrSegment":
        bb = BitBuffer()
        for b in data:
            bb.append_bits(b, 8)
        return QrSegment(Mode.BYTE, len(data), tuple(bb))

    def num_chars_bits(self, version: int) -> int:
        return self.mode.num_chars_bits(version)

    def write(self, bit_buffer: BitBuffer, version: int) -> None:
        bit_buffer.append_bits(self.mode.mode_bits, 4)
        bit_buffer.append_bits(self.num_chars, self.num_chars_bits(version))
        bit_buffer.extend(self.bit_data)


def get_total_bits(segs: Sequence[QrSegment], version: int) -> Optional[int]:
    """Bits needed for ``segs`` at ``version``, or None if a count field overflows."""
    result = 0
    for seg in segs:
        ccbits = seg.num_chars_bits(version)
        if seg.num_chars >= (1 << ccbits):
            return None
        result += 4 + ccbits + len(seg.bit_data)
    return result


def make_segments(text: str) -> List[QrSegment]:
    return [QrSegment.make_bytes(to_utf8_bytes(text))]
