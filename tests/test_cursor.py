import pytest

from mca_chunk_reader.cursor import ByteCursor
from mca_chunk_reader.errors import InvalidEncoding, UnexpectedEnd


@pytest.mark.parametrize(
    "method, data, expected",
    [
        ("read_ubyte", b"\xff", 255),
        ("read_byte", b"\xff", -1),
        ("read_ushort", b"\xff\xfe", 65534),
        ("read_short", b"\xff\xfe", -2),
        ("read_int", b"\x00\x00\x01\x00", 256),
        ("read_long", b"\xff" * 8, -1),
        ("read_float", b"\x3f\xc0\x00\x00", 1.5),
        ("read_double", b"\x40\x09\x21\xfb\x54\x44\x2d\x18", 3.141592653589793),
    ],
)
def test_read_primitive(method, data, expected):
    cursor = ByteCursor(data)
    assert getattr(cursor, method)() == expected
    assert cursor.pos == len(data)
    assert cursor.remaining == 0


@pytest.mark.parametrize(
    "method, data",
    [
        ("read_ubyte", b""),
        ("read_short", b"\x01"),
        ("read_int", b"\x01\x02\x03"),
        ("read_long", b"\x00" * 7),
        ("read_double", b"\x00" * 4),
    ],
)
def test_short_buffer_raises(method, data):
    with pytest.raises(UnexpectedEnd):
        getattr(ByteCursor(data), method)()


def test_read_string():
    cursor = ByteCursor(b"\x00\x05hello!")
    assert cursor.read_string() == "hello"
    assert cursor.pos == 7


def test_read_string_multibyte():
    encoded = "blé".encode("utf-8")
    cursor = ByteCursor(len(encoded).to_bytes(2, "big") + encoded)
    assert cursor.read_string() == "blé"


def test_read_string_truncated():
    with pytest.raises(UnexpectedEnd):
        ByteCursor(b"\x00\x05hel").read_string()


def test_read_string_invalid_utf8():
    with pytest.raises(InvalidEncoding) as excinfo:
        ByteCursor(b"\x00\x02\xc3\x28").read_string()
    assert excinfo.value.position == 0


def test_read_array():
    cursor = ByteCursor(b"\x00\x00\x00\x01\xff\xff\xff\xff\x99")
    assert cursor.read_array("i", 2) == [1, -1]
    assert cursor.remaining == 1


def test_read_array_no_partial_read():
    cursor = ByteCursor(b"\x00" * 12)
    with pytest.raises(UnexpectedEnd):
        cursor.read_array("q", 2)


def test_read_returns_exact_slice():
    cursor = ByteCursor(b"abcdef")
    cursor.read(2)
    assert bytes(cursor.read(3)) == b"cde"
    with pytest.raises(UnexpectedEnd):
        cursor.read(2)
