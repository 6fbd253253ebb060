"""
Symbol encoders for warehouse labels: QR codes and Code 128 barcodes.
"""

__version__ = "1.0.0"

from labelcodes.code128 import BarRect, Barcode, encode_barcode, encode_values, sanitize
from labelcodes.qr_code import (
    ECC_LEVELS,
    MAX_VERSION,
    MIN_VERSION,
    Ecc,
    PayloadTooLarge,
    QrCode,
    ecc_from_name,
    encode_binary,
    encode_segments,
    encode_text,
)
from labelcodes.qr_segment import QrSegment

__all__ = [
    "BarRect",
    "Barcode",
    "ECC_LEVELS",
    "Ecc",
    "MAX_VERSION",
    "MIN_VERSION",
    "PayloadTooLarge",
    "QrCode",
    "QrSegment",
    "ecc_from_name",
    "encode_barcode",
    "encode_binary",
    "encode_segments",
    "encode_text",
    "encode_values",
    "sanitize",
]
