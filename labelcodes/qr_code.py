"""
QR code encoder for inventory and picking labels, byte mode only.

The block layout, placement walk and format/version drawing follow Nayuki's
qrcodegen (MIT License): https://www.nayuki.io/page/qr-code-generator-library
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from labelcodes import tables
from labelcodes.bit_buffer import BitBuffer
from labelcodes.qr_segment import QrSegment, get_total_bits, make_segments
from labelcodes.reed_solomon import compute_ecc

logger = logging.getLogger(__name__)

Grid = List[List[bool]]

MIN_VERSION = tables.MIN_VERSION
MAX_VERSION = tables.MAX_VERSION

PENALTY_N1 = 3
PENALTY_N2 = 3
PENALTY_N3 = 40
PENALTY_N4 = 10

_FINDER_LIKE = (
    (True, False, True, True, True, False, True, False, False, False, False),
    (False, False, False, False, True, False, True, True, True, False, True),
)


@dataclass(frozen=True)
class Ecc:
    ordinal: int
    format_bits: int
    name: str


Ecc.LOW = Ecc(0, 1, "L")       # 7% error correction
Ecc.MEDIUM = Ecc(1, 0, "M")    # 15% error correction
Ecc.QUARTILE = Ecc(2, 3, "Q")  # 25% error correction
Ecc.HIGH = Ecc(3, 2, "H")      # 30% error correction

ECC_LEVELS = (Ecc.LOW, Ecc.MEDIUM, Ecc.QUARTILE, Ecc.HIGH)

_ECC_NAMES = {
    "L": Ecc.LOW,
    "LOW": Ecc.LOW,
    "M": Ecc.MEDIUM,
    "MEDIUM": Ecc.MEDIUM,
    "Q": Ecc.QUARTILE,
    "QUARTILE": Ecc.QUARTILE,
    "H": Ecc.HIGH,
    "HIGH": Ecc.HIGH,
}


def ecc_from_name(name: str) -> Ecc:
    try:
        return _ECC_NAMES[name.strip().upper()]
    except KeyError:
        raise ValueError(f"Nivel de correccion desconocido: {name!r}") from None


class PayloadTooLarge(ValueError):
    """No version up to MAX_VERSION holds the payload at the requested ECC level."""

    def __init__(self, num_bytes: int, ecc: Ecc):
        super().__init__(
            f"Datos demasiado largos: {num_bytes} bytes no caben en un QR de version {MAX_VERSION} "
            f"con nivel de correccion {ecc.name}"
        )
        self.num_bytes = num_bytes
        self.ecc = ecc


@dataclass(frozen=True)
class QrCode:
    version: int
    size: int
    ecc: Ecc
    mask: int
    modules: Tuple[Tuple[bool, ...], ...]

    def get_module(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size and self.modules[y][x]


def encode_text(text: str, ecc: Ecc = Ecc.LOW) -> QrCode:
    return encode_segments(make_segments(text), ecc)


def encode_binary(data: bytes, ecc: Ecc = Ecc.LOW) -> QrCode:
    return encode_segments([QrSegment.make_bytes(data)], ecc)


def encode_segments(segs: Sequence[QrSegment], ecc: Ecc, mask: Optional[int] = None) -> QrCode:
    """
    Encode ``segs`` in the smallest version that holds them at ``ecc``.

    With ``mask`` left as None all eight masks are tried and the one with the
    lowest penalty is kept; otherwise the given mask is used as is.
    Raises PayloadTooLarge when nothing up to MAX_VERSION fits.
    """
    if mask is not None and not (0 <= mask <= 7):
        raise ValueError(f"Mascara fuera de rango: {mask}")
    version, capacity_bits = _select_version(segs, ecc)

    bb = BitBuffer()
    for seg in segs:
        seg.write(bb, version)
    bb.append_bits(0, min(4, capacity_bits - len(bb)))
    bb.pad_to_byte()
    pad_byte = 0xEC
    while len(bb) < capacity_bits:
        bb.append_bits(pad_byte, 8)
        pad_byte ^= 0xEC ^ 0x11

    codewords = add_ecc_and_interleave(bb.to_codewords(), version, ecc)
    template = build_function_template(version)

    best_mask = -1
    best_modules: Grid = []
    best_penalty = 0
    for candidate in (range(8) if mask is None else (mask,)):
        modules, _ = build_candidate(version, ecc, codewords, candidate, template)
        penalty = penalty_score(modules)
        if best_mask == -1 or penalty < best_penalty:
            best_mask = candidate
            best_modules = modules
            best_penalty = penalty
    logger.debug("QR version %d, correccion %s: mascara %d (penalizacion %d)", version, ecc.name, best_mask, best_penalty)

    return QrCode(
        version=version,
        size=len(best_modules),
        ecc=ecc,
        mask=best_mask,
        modules=tuple(tuple(row) for row in best_modules),
    )


def _select_version(segs: Sequence[QrSegment], ecc: Ecc) -> Tuple[int, int]:
    for version in range(MIN_VERSION, MAX_VERSION + 1):
        capacity_bits = tables.num_data_codewords(version, ecc.ordinal) * 8
        used_bits = get_total_bits(segs, version)
        if used_bits is not None and used_bits <= capacity_bits:
            return version, capacity_bits
    raise PayloadTooLarge(sum(seg.num_chars for seg in segs), ecc)


def add_ecc_and_interleave(data: Sequence[int], version: int, ecc: Ecc) -> List[int]:
    if len(data) != tables.num_data_codewords(version, ecc.ordinal):
        raise ValueError("Numero de codewords de datos incorrecto para la version y el nivel de correccion")
    num_blocks = tables.NUM_ERROR_CORRECTION_BLOCKS[ecc.ordinal][version]
    block_ecc_len = tables.ECC_CODEWORDS_PER_BLOCK[ecc.ordinal][version]
    raw_codewords = tables.num_raw_data_modules(version) // 8
    num_short_blocks = num_blocks - raw_codewords % num_blocks
    short_block_len = raw_codewords // num_blocks

    data_blocks = []
    ecc_blocks = []
    k = 0
    for i in range(num_blocks):
        dat_len = short_block_len - block_ecc_len + (0 if i < num_short_blocks else 1)
        dat = list(data[k:k + dat_len])
        k += dat_len
        data_blocks.append(dat)
        ecc_blocks.append(compute_ecc(dat, block_ecc_len))

    result = []
    for i in range(short_block_len - block_ecc_len + 1):
        for block in data_blocks:
            if i < len(block):
                result.append(block[i])
    for i in range(block_ecc_len):
        for block in ecc_blocks:
            result.append(block[i])
    return result


# ---- Matrix construction ----

def _new_grid(size: int) -> Grid:
    return [[False] * size for _ in range(size)]


def _set_function(modules: Grid, is_function: Grid, x: int, y: int, dark: bool) -> None:
    modules[y][x] = dark
    is_function[y][x] = True


def build_function_template(version: int) -> Tuple[Grid, Grid]:
    """
    Grid with every function pattern drawn, plus the matching reserved-cell grid.

    Format cells are reserved here with placeholder zeros and overwritten once
    the mask is known.
    """
    size = version * 4 + 17
    modules = _new_grid(size)
    is_function = _new_grid(size)
    _draw_finder(modules, is_function, 0, 0)
    _draw_finder(modules, is_function, size - 7, 0)
    _draw_finder(modules, is_function, 0, size - 7)
    _draw_timing_patterns(modules, is_function)
    _draw_alignment_patterns(modules, is_function, version)
    _set_function(modules, is_function, 8, size - 8, True)
    _draw_format_bits(modules, is_function, 0)
    _draw_version(modules, is_function, version)
    return modules, is_function


def build_candidate(
    version: int,
    ecc: Ecc,
    codewords: Sequence[int],
    mask: int,
    template: Optional[Tuple[Grid, Grid]] = None,
) -> Tuple[Grid, Grid]:
    if template is None:
        template = build_function_template(version)
    modules = [row[:] for row in template[0]]
    is_function = [row[:] for row in template[1]]
    _draw_codewords(modules, is_function, codewords, mask)
    _draw_format_bits(modules, is_function, format_bits(ecc, mask))
    return modules, is_function


def _draw_finder(modules: Grid, is_function: Grid, x: int, y: int) -> None:
    # 7x7 finder with its top-left corner at (x, y), plus a one module separator.
    size = len(modules)
    for dy in range(-1, 8):
        for dx in range(-1, 8):
            xx = x + dx
            yy = y + dy
            if 0 <= xx < size and 0 <= yy < size:
                dist = max(abs(dx - 3), abs(dy - 3))
                _set_function(modules, is_function, xx, yy, dist not in (2, 4))


def _draw_timing_patterns(modules: Grid, is_function: Grid) -> None:
    for i in range(len(modules)):
        if not is_function[6][i]:
            _set_function(modules, is_function, i, 6, i % 2 == 0)
        if not is_function[i][6]:
            _set_function(modules, is_function, 6, i, i % 2 == 0)


def _draw_alignment_patterns(modules: Grid, is_function: Grid, version: int) -> None:
    positions = tables.alignment_positions(version)
    last = len(positions) - 1
    for i, y in enumerate(positions):
        for j, x in enumerate(positions):
            if (i == 0 and j == 0) or (i == 0 and j == last) or (i == last and j == 0):
                continue
            for dy in range(-2, 3):
                for dx in range(-2, 3):
                    _set_function(modules, is_function, x + dx, y + dy, max(abs(dx), abs(dy)) != 1)


def format_bits(ecc: Ecc, mask: int) -> int:
    data = (ecc.format_bits << 3 | mask) & 0x1F
    rem = data
    for _ in range(10):
        rem = (rem << 1) ^ ((rem >> 9) * 0x537)
    return ((data << 10) | rem) ^ 0x5412


def _draw_format_bits(modules: Grid, is_function: Grid, bits: int) -> None:
    size = len(modules)

    def bit(i: int) -> bool:
        return ((bits >> i) & 1) != 0

    # Around the top-left finder
    for i in range(6):
        _set_function(modules, is_function, 8, i, bit(i))
    _set_function(modules, is_function, 8, 7, bit(6))
    _set_function(modules, is_function, 8, 8, bit(7))
    _set_function(modules, is_function, 7, 8, bit(8))
    for i in range(9, 15):
        _set_function(modules, is_function, 14 - i, 8, bit(i))

    # Split between the top-right and bottom-left finders
    for i in range(8):
        _set_function(modules, is_function, size - 1 - i, 8, bit(i))
    for i in range(8, 15):
        _set_function(modules, is_function, 8, size - 15 + i, bit(i))


def _draw_version(modules: Grid, is_function: Grid, version: int) -> None:
    if version < 7:
        return
    size = len(modules)
    rem = version
    for _ in range(12):
        rem = (rem << 1) ^ ((rem >> 11) * 0x1F25)
    bits = (version << 12) | rem
    for i in range(18):
        dark = ((bits >> i) & 1) != 0
        a = size - 11 + (i % 3)
        b = i // 3
        _set_function(modules, is_function, a, b, dark)
        _set_function(modules, is_function, b, a, dark)


def mask_bit(mask: int, x: int, y: int) -> bool:
    if mask == 0:
        return (x + y) % 2 == 0
    if mask == 1:
        return y % 2 == 0
    if mask == 2:
        return x % 3 == 0
    if mask == 3:
        return (x + y) % 3 == 0
    if mask == 4:
        return (x // 3 + y // 2) % 2 == 0
    if mask == 5:
        return (x * y) % 2 + (x * y) % 3 == 0
    if mask == 6:
        return ((x * y) % 2 + (x * y) % 3) % 2 == 0
    if mask == 7:
        return ((x + y) % 2 + (x * y) % 3) % 2 == 0
    raise ValueError(f"Mascara fuera de rango: {mask}")


def _draw_codewords(modules: Grid, is_function: Grid, codewords: Sequence[int], mask: int) -> None:
    size = len(modules)
    total_bits = len(codewords) * 8
    i = 0
    right = size - 1
    while right > 0:
        if right == 6:
            right -= 1
        upward = ((right + 1) & 2) == 0
        for vert in range(size):
            y = size - 1 - vert if upward else vert
            for x in (right, right - 1):
                if is_function[y][x]:
                    continue
                bit = False
                if i < total_bits:
                    bit = ((codewords[i >> 3] >> (7 - (i & 7))) & 1) != 0
                    i += 1
                modules[y][x] = bit != mask_bit(mask, x, y)
        right -= 2


# ---- Penalty ----

def penalty_score(modules: Sequence[Sequence[bool]]) -> int:
    size = len(modules)
    result = 0
    columns = [[modules[y][x] for y in range(size)] for x in range(size)]
    for line in itertools.chain(modules, columns):
        result += _run_penalty(line)
        result += _finder_like_penalty(line)

    for y in range(size - 1):
        for x in range(size - 1):
            color = modules[y][x]
            if color == modules[y][x + 1] == modules[y + 1][x] == modules[y + 1][x + 1]:
                result += PENALTY_N2

    dark = sum(1 for row in modules for color in row if color)
    total = size * size
    result += abs(dark * 20 - total * 10) // total * PENALTY_N4
    return result


def _run_penalty(line: Sequence[bool]) -> int:
    result = 0
    run_color = None
    run_length = 0
    for color in line:
        if color == run_color:
            run_length += 1
            if run_length == 5:
                result += PENALTY_N1
            elif run_length > 5:
                result += 1
        else:
            run_color = color
            run_length = 1
    return result


def _finder_like_penalty(line: Sequence[bool]) -> int:
    line = tuple(line)
    result = 0
    for i in range(len(line) - 10):
        if line[i:i + 11] in _FINDER_LIKE:
            result += PENALTY_N3
    return result
