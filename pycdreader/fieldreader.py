# Copyright (C) 2015-2020  Chris Lalancette <clalancette@gmail.com>

# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation;
# version 2.1 of the License.

# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.

# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301  USA

"""
A cursor that decodes the fixed-width fields used by ISO9660.

There are a number of specific ways that numerical data is stored in the
ISO9660/Ecma-119 standard.  In the text these are referenced by the section
number they are stored in.  A brief synopsis:

 7.1.1 - 8-bit number
 7.2.1 - 16-bit number, little-endian
 7.2.2 - 16-bit number, big-endian
 7.2.3 - 16-bit number, stored first as little-endian then as big-endian
 7.3.1 - 32-bit number, little-endian
 7.3.2 - 32-bit number, big-endian
 7.3.3 - 32-bit number, stored first as little-endian then as big-endian
"""

import struct

from typing import Any, Tuple  # NOQA pylint: disable=unused-import

from pycdreader import pycdreaderexception


class FieldReader(object):
    """
    A class that reads ISO9660 fields one after another from any object with a
    read(n) method.  Sources may return short reads; the reader keeps asking
    until each field is complete.
    """
    __slots__ = ('_source', 'consumed')

    def __init__(self, source):
        # type: (Any) -> None
        self._source = source
        self.consumed = 0

    def read_bytes(self, length):
        # type: (int) -> bytes
        """
        Read exactly length raw bytes.

        Parameters:
         length - The number of bytes to read.
        Returns:
         The bytes read.
        """
        if length < 0:
            raise pycdreaderexception.PyCdreaderInternalError('Cannot read a negative number of bytes')

        chunks = []
        left = length
        while left > 0:
            data = self._source.read(left)
            if not data:
                raise pycdreaderexception.PyCdreaderTruncatedISO('Expected %d bytes, but only %d were available' % (length, length - left))
            chunks.append(data)
            left -= len(data)

        self.consumed += length
        return b''.join(chunks)

    def skip(self, length):
        # type: (int) -> None
        """
        Skip over length bytes.

        Parameters:
         length - The number of bytes to skip.
        Returns:
         Nothing.
        """
        self.read_bytes(length)

    def _unpack(self, fmt):
        # type: (str) -> Any
        """
        An internal method to read and unpack a single struct field.

        Parameters:
         fmt - The struct format of the field.
        Returns:
         The unpacked value.
        """
        return struct.unpack(fmt, self.read_bytes(struct.calcsize(fmt)))[0]

    def read_uint8(self):
        # type: () -> int
        """Read an 8-bit number (7.1.1)."""
        return self._unpack('=B')

    def read_uint16_le(self):
        # type: () -> int
        """Read a little-endian 16-bit number (7.2.1)."""
        return self._unpack('<H')

    def read_uint16_be(self):
        # type: () -> int
        """Read a big-endian 16-bit number (7.2.2)."""
        return self._unpack('>H')

    def read_uint32_le(self):
        # type: () -> int
        """Read a little-endian 32-bit number (7.3.1)."""
        return self._unpack('<L')

    def read_uint32_be(self):
        # type: () -> int
        """Read a big-endian 32-bit number (7.3.2)."""
        return self._unpack('>L')

    def read_both_uint16(self):
        # type: () -> Tuple[int, int]
        """
        Read a both-byte-order 16-bit number (7.2.3).

        Parameters:
         None.
        Returns:
         A tuple of the little-endian and big-endian values.
        """
        le = self.read_uint16_le()
        be = self.read_uint16_be()
        return (le, be)

    def read_both_uint32(self):
        # type: () -> Tuple[int, int]
        """
        Read a both-byte-order 32-bit number (7.3.3).

        Parameters:
         None.
        Returns:
         A tuple of the little-endian and big-endian values.
        """
        le = self.read_uint32_le()
        be = self.read_uint32_be()
        return (le, be)

    def read_string(self, length):
        # type: (int) -> str
        """
        Read a fixed-length ASCII string, removing any trailing space or NUL
        padding.

        Parameters:
         length - The number of bytes the string occupies.
        Returns:
         The decoded string.
        """
        data = self.read_bytes(length)
        return data.rstrip(b' \x00').decode('ascii', 'replace')
