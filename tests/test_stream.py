import io

import pytest

from nsmbcourse import DecodeError, TruncatedRead
from nsmbcourse.stream import ByteCursor


def test_reads_little_endian_and_advances():
    cursor = ByteCursor(bytes.fromhex('01 0203 04050607'))

    assert cursor.read_u8() == 0x01
    assert cursor.position() == 1
    assert cursor.read_u16() == 0x0302
    assert cursor.position() == 3
    assert cursor.read_u32() == 0x07060504
    assert cursor.position() == 7


def test_big_endian():
    cursor = ByteCursor(bytes.fromhex('0102 03040506'), endianness='>')

    assert cursor.read_u16() == 0x0102
    assert cursor.read_u32() == 0x03040506


def test_size_of_file_object():
    stream = io.BytesIO(bytes(10))
    stream.seek(4)

    cursor = ByteCursor(stream)

    assert cursor.size() == 10
    assert cursor.position() == 4


def test_read_past_end():
    cursor = ByteCursor(b'\x01\x02\x03')
    cursor.read_u16()

    with pytest.raises(TruncatedRead):
        cursor.read_u16()


def test_truncated_read_is_a_decode_error():
    with pytest.raises(DecodeError):
        ByteCursor(b'').read_u8()
    with pytest.raises(ValueError):
        ByteCursor(b'').read_u8()


def test_seek_and_skip():
    cursor = ByteCursor(bytes(range(8)))

    cursor.seek(5)
    assert cursor.read_u8() == 5

    cursor.skip(-4)
    assert cursor.read_u8() == 2

    cursor.seek(8)
    assert cursor.position() == cursor.size()


def test_seek_out_of_range():
    cursor = ByteCursor(bytes(8))

    with pytest.raises(TruncatedRead):
        cursor.seek(9)
    with pytest.raises(TruncatedRead):
        cursor.skip(-1)
    with pytest.raises(TruncatedRead):
        cursor.skip(9)


def test_fixed_string_stops_at_null_and_consumes_field():
    cursor = ByteCursor(b'Pa0_jyotyu\0junk' + bytes(17) + b'\x2A')

    assert cursor.read_fixed_string(32) == 'Pa0_jyotyu'
    assert cursor.position() == 32
    assert cursor.read_u8() == 0x2A


def test_fixed_string_strips_space_padding():
    assert ByteCursor(b'Nohara  \0\0\0\0').read_fixed_string(12) == 'Nohara'
    assert ByteCursor(b'Nohara      ').read_fixed_string(12) == 'Nohara'


def test_fixed_string_filling_the_whole_field():
    assert ByteCursor(b'ABCDEFGH').read_fixed_string(8) == 'ABCDEFGH'


def test_empty_fixed_string():
    assert ByteCursor(bytes(32)).read_fixed_string(32) == ''
