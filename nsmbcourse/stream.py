# Copyright 2019 RoadrunnerWMC
#
# This file is part of nsmbcourse.
#
# nsmbcourse is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# nsmbcourse is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with nsmbcourse.  If not, see <https://www.gnu.org/licenses/>.
"""
A positioned reader over a binary stream.
"""

import io
import os
import struct

from . import TruncatedRead
from . import _common


class ByteCursor:
    """
    Reads fixed-width integers and fixed-length strings from a binary
    stream, keeping track of the current position.
    Reading or seeking past the end of the stream raises TruncatedRead.
    """

    def __init__(self, stream, endianness='<'):
        """
        stream can be a binary file-like object (which must be seekable)
        or any bytes-like object.
        """
        if isinstance(stream, (bytes, bytearray, memoryview)):
            stream = io.BytesIO(stream)

        self.stream = stream
        self.endianness = endianness

        start = stream.tell()
        self._size = stream.seek(0, os.SEEK_END)
        stream.seek(start)


    def size(self):
        return self._size


    def position(self):
        return self.stream.tell()


    def seek(self, offset):
        """
        Move to an absolute offset
        """
        if not 0 <= offset <= self._size:
            raise TruncatedRead(f'Attempted to seek to 0x{offset:X}, but the data is only 0x{self._size:X} bytes long')
        self.stream.seek(offset)


    def skip(self, amount):
        """
        Move forward (or backward, if negative) by some number of bytes
        """
        self.seek(self.position() + amount)


    def read(self, length):
        """
        Read exactly length bytes
        """
        offset = self.position()
        data = self.stream.read(length)
        if len(data) != length:
            raise TruncatedRead(
                f'Attempted to read 0x{length:X} bytes at 0x{offset:X}, but the data is only 0x{self._size:X} bytes long')
        return data


    def _unpack(self, format_char):
        format_string = self.endianness + format_char
        value, = struct.unpack(format_string, self.read(struct.calcsize(format_string)))
        return value


    def read_u8(self):
        return self._unpack('B')

    def read_u16(self):
        return self._unpack('H')

    def read_u32(self):
        return self._unpack('I')


    def read_fixed_string(self, length, encoding='latin-1'):
        """
        Read a string occupying a fixed-length field of length bytes.
        The whole field is consumed, even if the string is shorter.
        """
        return _common.decode_fixed_string(self.read(length), encoding)
