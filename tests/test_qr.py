"""Tests for nordwg.qr: capacity limits, raster format, decode round-trip."""

import io

import pytest
from PIL import Image

from nordwg.errors import EncodingError, PayloadTooLarge
from nordwg.qr import MAX_PAYLOAD_BYTES, MODULE_SIZE, QUIET_ZONE, build_matrix, encode

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def _image(png: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(png))
    img.load()
    return img


def _payload(n: int) -> str:
    alphabet = "abcdefghijklmnopqrstuvwxyz0123456789 =/+\n"
    return "".join(alphabet[i % len(alphabet)] for i in range(n))


def test_png_is_grayscale_square():
    png = encode("hello")
    assert png.startswith(PNG_MAGIC)

    img = _image(png)
    assert img.format == "PNG"
    assert img.mode == "L"
    assert img.width == img.height
    assert img.width % MODULE_SIZE == 0
    assert set(img.tobytes()) <= {0, 255}


@pytest.mark.parametrize(
    "size,modules",
    [
        (1, 21),    # version 1
        (14, 21),   # version 1-M byte capacity
        (15, 25),   # spills into version 2
    ],
)
def test_smallest_version_is_chosen(size, modules):
    matrix = build_matrix("x" * size)
    assert len(matrix) == modules + 2 * QUIET_ZONE
    assert _image(encode("x" * size)).width == (modules + 2 * QUIET_ZONE) * MODULE_SIZE


def test_quiet_zone_is_light():
    img = _image(encode("quiet"))
    border_px = QUIET_ZONE * MODULE_SIZE
    top = img.crop((0, 0, img.width, border_px))
    left = img.crop((0, 0, border_px, img.height))
    assert set(top.tobytes()) == {255}
    assert set(left.tobytes()) == {255}


def test_pixels_follow_module_matrix():
    payload = "[Interface]\nPrivateKey = abc\n"
    matrix = build_matrix(payload)
    img = _image(encode(payload))

    half = MODULE_SIZE // 2
    for y, row in enumerate(matrix):
        for x, dark in enumerate(row):
            px = img.getpixel((x * MODULE_SIZE + half, y * MODULE_SIZE + half))
            assert px == (0 if dark else 255)


def test_deterministic():
    payload = _payload(500)
    assert encode(payload) == encode(payload)


def test_max_capacity_fits():
    img = _image(encode(_payload(MAX_PAYLOAD_BYTES)))
    assert img.width == (177 + 2 * QUIET_ZONE) * MODULE_SIZE  # version 40


def test_one_byte_over_capacity():
    with pytest.raises(PayloadTooLarge) as excinfo:
        encode(_payload(MAX_PAYLOAD_BYTES + 1))
    assert excinfo.value.size == MAX_PAYLOAD_BYTES + 1
    assert excinfo.value.limit == MAX_PAYLOAD_BYTES
    assert isinstance(excinfo.value, EncodingError)


def test_capacity_counts_utf8_bytes():
    # 2 bytes per char
    encode("é" * (MAX_PAYLOAD_BYTES // 2))
    with pytest.raises(PayloadTooLarge):
        encode("é" * (MAX_PAYLOAD_BYTES // 2 + 1))


@pytest.mark.parametrize("size", [1, 14, 15, 100, 1000, MAX_PAYLOAD_BYTES])
def test_decode_round_trip(size):
    zxingcpp = pytest.importorskip("zxingcpp")

    payload = _payload(size)
    results = zxingcpp.read_barcodes(_image(encode(payload)))
    assert [r.text for r in results] == [payload]


def test_decode_round_trip_non_ascii():
    zxingcpp = pytest.importorskip("zxingcpp")

    payload = "# Configuration for br12.nordvpn.com - São Paulo, Brasil é"
    results = zxingcpp.read_barcodes(_image(encode(payload)))
    assert [r.text for r in results] == [payload]
