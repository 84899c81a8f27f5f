# Copyright (C) 2018-2019  Chris Lalancette <clalancette@gmail.com>

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

"""PyCdreaderIO class."""

import io

from typing import Optional, Union  # NOQA pylint: disable=unused-import

from pycdreader import dr  # NOQA pylint: disable=unused-import
from pycdreader import fieldreader
from pycdreader import pycdreaderexception
from pycdreader import sectorstream


class PyCdreaderIO(io.RawIOBase):
    """
    The class that implements the user-facing python io-style context manager
    for the data of one file on the ISO.  Since ISOs are only read, this is
    only a readable context manager.
    """

    def __init__(self, layout, rec, logical_block_size):
        # type: (sectorstream.SectorLayout, dr.DirectoryRecord, int) -> None
        super(PyCdreaderIO, self).__init__()  # pylint: disable=super-with-arguments
        # _extent is the first logical sector of the file and _length its
        # length in bytes.  _offset is the logical offset into the file, and
        # _stream the sector stream positioned at _offset, if there is one.
        self._layout = layout
        self._extent = rec.extent_location
        self._length = rec.data_length
        self._logical_block_size = logical_block_size
        self._offset = 0
        self._stream = None  # type: Optional[sectorstream.SectorStream]
        self._open = True

    def _check_open(self):
        # type: () -> None
        """
        An internal method to make sure this file has not been closed.

        Parameters:
         None.
        Returns:
         Nothing.
        """
        if not self._open:
            raise pycdreaderexception.PyCdreaderInvalidInput('I/O operation on closed file.')

    def _read_data(self, readsize):
        # type: (int) -> bytes
        """
        An internal method to read data at the current offset.

        Parameters:
         readsize - The number of bytes to read; must not run past the end.
        Returns:
         The data read.
        """
        if self._stream is None:
            sector, skip = divmod(self._offset, self._logical_block_size)
            self._stream = self._layout.stream_at(self._extent + sector,
                                                  self._logical_block_size)
            fieldreader.FieldReader(self._stream).skip(skip)

        data = fieldreader.FieldReader(self._stream).read_bytes(readsize)
        self._offset += readsize
        return data

    def read(self, size=None):
        # type: (Optional[int]) -> bytes
        """
        Read and return up to size bytes.

        Parameters:
         size - Optional parameter to read size number of bytes; if None or
                negative, all remaining bytes in the file will be read
        Returns:
         The number of bytes requested or the rest of the data left in the file,
         whichever is smaller.  If the file is at or past EOF, returns an empty
         bytestring.
        """
        self._check_open()

        if self._offset >= self._length:
            return b''

        if size is None or size < 0:
            return self.readall()

        return self._read_data(min(self._length - self._offset, size))

    def readall(self):
        # type: () -> bytes
        """
        Read and return the remaining bytes in the file.

        Parameters:
         None.
        Returns:
         The rest of the data left in the file.  If the file is at or past EOF,
         returns an empty bytestring.
        """
        self._check_open()

        readsize = self._length - self._offset
        if readsize <= 0:
            return b''

        return self._read_data(readsize)

    def readinto(self, b):
        # type: (Union[bytearray, memoryview]) -> int
        self._check_open()

        m = memoryview(b).cast('B')
        readsize = min(self._length - self._offset, len(m))
        if readsize <= 0:
            return 0

        data = self._read_data(readsize)
        m[:readsize] = data
        return readsize

    def seek(self, offset, whence=0):
        # type: (int, int) -> int
        """
        Change the stream position to byte offset offset.  The offset is
        interpreted relative to the position indicated by whence.  Valid values
        for whence are:

        * 0 -- start of stream (the default); offset should be zero or positive
        * 1 -- current stream position; offset may be negative
        * 2 -- end of stream; offset is usually negative

        Parameters:
         offset - The byte offset to seek to.
         whence - The position in the file to start from (0 for start, 1 for
                  current, 2 for end)
        Returns:
         The new absolute position.
        """
        self._check_open()

        if isinstance(offset, float):
            raise pycdreaderexception.PyCdreaderInvalidInput('an integer is required')

        if whence == 0:
            newoffset = offset
        elif whence == 1:
            newoffset = self._offset + offset
        elif whence == 2:
            newoffset = self._length + offset
        else:
            raise pycdreaderexception.PyCdreaderInvalidInput('Invalid value for whence (options are 0, 1, and 2)')

        if newoffset < 0:
            raise pycdreaderexception.PyCdreaderInvalidInput('Invalid offset value (cannot seek before start of file)')

        if newoffset != self._offset:
            self._stream = None
        self._offset = newoffset

        return self._offset

    def tell(self):
        # type: () -> int
        """
        Return the current stream position.

        Parameters:
         None.
        Returns:
         The current stream position.
        """
        self._check_open()
        return self._offset

    def length(self):
        # type: () -> int
        """
        Return the length of the current file.

        Parameters:
         None.
        Returns:
         The length of the file.
        """
        self._check_open()
        return self._length

    def readable(self):
        # type: () -> bool
        self._check_open()
        return True

    def seekable(self):
        # type: () -> bool
        self._check_open()
        return True

    def close(self):
        # type: () -> None
        """
        Close this file stream.

        Parameters:
         None.
        Returns:
         Nothing.
        """
        self._open = False
        self._stream = None
        super(PyCdreaderIO, self).close()  # pylint: disable=super-with-arguments
