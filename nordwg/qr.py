"""
QR raster encoder.

Payload is UTF-8 encoded and stored in a single byte-mode segment, so the
capacity is the byte-mode limit of version 40 at the fixed EC level.
Output is an 8-bit grayscale PNG, one MODULE_SIZE x MODULE_SIZE block per
module, with the standard 4-module quiet zone.
"""

from __future__ import annotations

import io

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError
from qrcode.util import MODE_8BIT_BYTE, QRData

from .errors import PayloadTooLarge

ERROR_CORRECTION = ERROR_CORRECT_M
MAX_PAYLOAD_BYTES = 2331  # version 40-M, byte mode
MODULE_SIZE = 8
QUIET_ZONE = 4

DARK = 0
LIGHT = 255


def build_matrix(payload: str):
    """Module matrix (quiet zone included), True = dark."""
    data = payload.encode("utf-8")
    if len(data) > MAX_PAYLOAD_BYTES:
        raise PayloadTooLarge(len(data), MAX_PAYLOAD_BYTES)

    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECTION,
        box_size=MODULE_SIZE,
        border=QUIET_ZONE,
    )
    qr.add_data(QRData(data, mode=MODE_8BIT_BYTE))
    try:
        qr.make(fit=True)
    except DataOverflowError as exc:
        raise PayloadTooLarge(len(data), MAX_PAYLOAD_BYTES) from exc
    return qr.get_matrix()


def render_png(matrix) -> bytes:
    size = len(matrix)
    pixels = bytes(DARK if dark else LIGHT for row in matrix for dark in row)
    image = Image.frombytes("L", (size, size), pixels)
    image = image.resize(
        (size * MODULE_SIZE, size * MODULE_SIZE),
        resample=Image.Resampling.NEAREST,
    )

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def encode(payload: str) -> bytes:
    """PNG bytes for payload; raises PayloadTooLarge past symbol capacity."""
    return render_png(build_matrix(payload))
