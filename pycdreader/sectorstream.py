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
Classes to read logical sectors out of plain ISOs and raw CD dumps.

A plain ISO stores logical sector N at byte N * block_size.  A raw CD dump
stores whole physical sectors (usually 2352 bytes), each of which starts with a
16-byte header that comes before the logical payload.
"""

import io
import logging
import os

from typing import Any, BinaryIO, Union  # NOQA pylint: disable=unused-import

from pycdreader import pycdreaderexception

_logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 2048


class SectorLayout(object):
    """
    A class that holds the byte source for an ISO along with the parameters
    that map a logical sector to a physical offset in that source.
    """
    __slots__ = ('_fp', 'raw_sector_size')

    RAW_HEADER_SIZE = 16

    def __init__(self, fp, raw_sector_size=0):
        # type: (BinaryIO, int) -> None
        if raw_sector_size < 0:
            raise pycdreaderexception.PyCdreaderInvalidInput('The raw sector size must not be negative')
        if 0 < raw_sector_size <= self.RAW_HEADER_SIZE:
            raise pycdreaderexception.PyCdreaderInvalidInput('The raw sector size must be larger than the %d byte raw header' % (self.RAW_HEADER_SIZE))

        self._fp = fp
        self.raw_sector_size = raw_sector_size

    def is_raw(self):
        # type: () -> bool
        """
        A method to determine whether this layout is a raw CD dump.

        Parameters:
         None.
        Returns:
         True if the source holds raw CD sectors, False for a plain ISO.
        """
        return self.raw_sector_size > 0

    def sector_offset(self, sector, block_size):
        # type: (int, int) -> int
        """
        A method to compute the physical offset of the logical payload of a
        sector.

        Parameters:
         sector - The logical sector number.
         block_size - The logical block size in use.
        Returns:
         The absolute offset into the byte source.
        """
        if self.raw_sector_size > 0:
            return self.raw_sector_size * sector + self.RAW_HEADER_SIZE
        return block_size * sector

    def length(self):
        # type: () -> int
        """
        A method to get the total length of the byte source.

        Parameters:
         None.
        Returns:
         The length of the byte source in bytes.
        """
        return self._fp.seek(0, os.SEEK_END)

    def read_at(self, offset, length):
        # type: (int, int) -> bytes
        """
        A method to read up to length bytes at an absolute offset.  Fewer bytes
        are returned if the source ends first.

        Parameters:
         offset - The absolute offset to read from.
         length - The maximum number of bytes to read.
        Returns:
         The bytes read.
        """
        left = self.length() - offset
        if left <= 0:
            return b''
        self._fp.seek(offset)
        return self._fp.read(min(length, left))

    def stream_at(self, sector, block_size=DEFAULT_BLOCK_SIZE):
        # type: (int, int) -> SectorStream
        """
        A method to create a new Sector Stream positioned at a logical sector.

        Parameters:
         sector - The logical sector to start reading at.
         block_size - The logical block size in use.
        Returns:
         A new SectorStream object.
        """
        return SectorStream(self, sector, block_size)


class SectorStream(io.RawIOBase):
    """
    A sequential reader that yields the logical payload of consecutive sectors.
    The stream holds one logical block in memory; a read never crosses a
    refill, so reads may return fewer bytes than requested.

    Every refill seeks the shared byte source, so two streams over the same
    source may be used one after the other but not interleaved from different
    threads.
    """

    def __init__(self, layout, sector, block_size=DEFAULT_BLOCK_SIZE):
        # type: (SectorLayout, int, int) -> None
        super(SectorStream, self).__init__()  # pylint: disable=super-with-arguments
        if block_size <= 0:
            raise pycdreaderexception.PyCdreaderInvalidInput('The block size must be positive')
        self._layout = layout
        self._block_size = block_size
        self._buffer = bytearray(block_size)
        self._position = block_size
        self._sector = sector
        self._current_sector = -1

    def _ensure(self):
        # type: () -> bool
        """
        An internal method to load the next sector into the buffer once the
        current one is used up.

        Parameters:
         None.
        Returns:
         True if there is data in the buffer, False if the source has ended.
        """
        if self._position < self._block_size:
            return True

        data = self._layout.read_at(self._layout.sector_offset(self._sector, self._block_size),
                                    self._block_size)
        if not data:
            _logger.debug('Sector %d is past the end of the source', self._sector)
            return False

        # A sector cut short by the end of the source is zero-filled.
        self._buffer[:] = bytes(self._block_size)
        self._buffer[:len(data)] = data
        self._position = 0
        self._current_sector = self._sector
        self._sector += 1
        return True

    def readinto(self, b):
        # type: (Union[bytearray, memoryview]) -> int
        if not self._ensure():
            return 0

        m = memoryview(b).cast('B')
        readsize = min(len(m), self._block_size - self._position)
        m[:readsize] = self._buffer[self._position:self._position + readsize]
        self._position += readsize
        return readsize

    def read_byte(self):
        # type: () -> int
        """
        Read a single byte.

        Parameters:
         None.
        Returns:
         The byte as an integer.
        """
        if not self._ensure():
            raise pycdreaderexception.PyCdreaderTruncatedISO('Sector %d is past the end of the ISO' % (self._sector))

        ret = self._buffer[self._position]
        self._position += 1
        return ret

    def available(self):
        # type: () -> int
        """
        Return the number of unread bytes left in the current buffer.

        Parameters:
         None.
        Returns:
         The number of bytes that can be read without a refill.
        """
        return self._block_size - self._position

    def set_sector(self, sector):
        # type: (int) -> None
        """
        Reposition the stream at a new logical sector, discarding whatever is
        left in the buffer.

        Parameters:
         sector - The logical sector to continue reading from.
        Returns:
         Nothing.
        """
        self._sector = sector
        self._position = self._block_size

    def tell_sector(self):
        # type: () -> int
        """
        Return the logical sector currently held in the buffer.

        Parameters:
         None.
        Returns:
         The sector number, or -1 if nothing has been read yet.
        """
        return self._current_sector

    def readable(self):
        # type: () -> bool
        return True

    def seekable(self):
        # type: () -> bool
        return False
