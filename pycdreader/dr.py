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
The classes to support ISO9660 Directory Records.
"""

import collections
import logging

from typing import Iterator, List, Optional  # NOQA pylint: disable=unused-import

from pycdreader import fieldreader
from pycdreader import headervd  # NOQA pylint: disable=unused-import
from pycdreader import path_table_record  # NOQA pylint: disable=unused-import
from pycdreader import pycdreaderexception
from pycdreader import sectorstream  # NOQA pylint: disable=unused-import
from pycdreader import utils

_logger = logging.getLogger(__name__)


class DirectoryRecord(object):
    """A class that represents an ISO9660 directory record."""
    __slots__ = ('_initialized', 'dr_len', 'xattr_len', 'extent_location',
                 'data_length', 'date', 'file_flags', 'file_unit_size',
                 'interleave_gap_size', 'seqnum', 'len_fi', 'file_ident')

    FILE_FLAG_DIRECTORY_BIT = 1
    FILE_FLAG_MULTI_EXTENT_BIT = 7

    # Everything up to and including the length of the file identifier.
    FIXED_LENGTH = 33

    def __init__(self):
        # type: () -> None
        self._initialized = False

    def parse(self, dr_len, reader):
        # type: (int, fieldreader.FieldReader) -> None
        """
        Parse a directory record out of a field reader.  The length byte has
        already been consumed by the caller, since a zero length means there
        is no record at all.

        Parameters:
         dr_len - The length of the whole record, as read from its first byte.
         reader - The FieldReader positioned just after the length byte.
        Returns:
         Nothing.
        """
        if self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Directory Record already initialized')

        if dr_len < self.FIXED_LENGTH:
            raise pycdreaderexception.PyCdreaderCorruptISO('Directory record length %d is shorter than the fixed fields' % (dr_len))

        xattr_len = reader.read_uint8()
        extent_location_le, extent_location_be = reader.read_both_uint32()
        if extent_location_le != extent_location_be:
            raise pycdreaderexception.PyCdreaderCorruptISO('Little-endian (%d) and big-endian (%d) extent location disagree' % (extent_location_le, extent_location_be))

        data_length_le, data_length_be = reader.read_both_uint32()
        if data_length_le != data_length_be:
            raise pycdreaderexception.PyCdreaderCorruptISO('Little-endian (%d) and big-endian (%d) data length disagree' % (data_length_le, data_length_be))

        date = reader.read_bytes(7)
        file_flags = reader.read_uint8()
        file_unit_size = reader.read_uint8()
        interleave_gap_size = reader.read_uint8()

        seqnum_le, seqnum_be = reader.read_both_uint16()
        if seqnum_le != seqnum_be:
            raise pycdreaderexception.PyCdreaderCorruptISO('Little-endian (%d) and big-endian (%d) seqnum disagree' % (seqnum_le, seqnum_be))

        len_fi = reader.read_uint8()
        read = self.FIXED_LENGTH + len_fi
        if read > dr_len:
            raise pycdreaderexception.PyCdreaderCorruptISO('Directory record length %d cannot hold an identifier of length %d' % (dr_len, len_fi))
        file_ident = reader.read_bytes(len_fi)

        # The padding field is only present when it makes the record even.
        if len_fi % 2 == 0 and read < dr_len:
            reader.skip(1)
            read += 1

        # System Use area, which we have no use for.
        if read < dr_len:
            reader.skip(dr_len - read)

        self.dr_len = dr_len
        self.xattr_len = xattr_len
        self.extent_location = extent_location_le
        self.data_length = data_length_le
        self.date = date
        self.file_flags = file_flags
        self.file_unit_size = file_unit_size
        self.interleave_gap_size = interleave_gap_size
        self.seqnum = seqnum_le
        self.len_fi = len_fi
        self.file_ident = file_ident
        self._initialized = True

    def is_dir(self):
        # type: () -> bool
        """
        A method to determine whether this Directory Record is a directory.

        Parameters:
         None.
        Returns:
         True if this DirectoryRecord object is a directory, False otherwise.
        """
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Directory Record not initialized')
        return bool(self.file_flags & (1 << self.FILE_FLAG_DIRECTORY_BIT))

    def is_file(self):
        # type: () -> bool
        """
        A method to determine whether this Directory Record is a file.

        Parameters:
         None.
        Returns:
         True if this DirectoryRecord object is a file, False otherwise.
        """
        return not self.is_dir()

    def is_not_final(self):
        # type: () -> bool
        """
        A method to determine whether this record is followed by another
        record for the same file.  Nothing in this library joins such records.

        Parameters:
         None.
        Returns:
         True if the multi-extent bit is set, False otherwise.
        """
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Directory Record not initialized')
        return bool(self.file_flags & (1 << self.FILE_FLAG_MULTI_EXTENT_BIT))

    def is_dot(self):
        # type: () -> bool
        """
        A method to determine whether this Directory Record is a 'dot' entry.

        Parameters:
         None.
        Returns:
         True if this DirectoryRecord object is a 'dot' entry, False otherwise.
        """
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Directory Record not initialized')
        return self.file_ident in (b'', b'\x00')

    def is_dotdot(self):
        # type: () -> bool
        """
        A method to determine whether this Directory Record is a 'dotdot' entry.

        Parameters:
         None.
        Returns:
         True if this DirectoryRecord object is a 'dotdot' entry, False otherwise.
        """
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Directory Record not initialized')
        return self.file_ident == b'\x01'

    def file_identifier(self):
        # type: () -> str
        """
        A method to get the name of this Directory Record.

        Parameters:
         None.
        Returns:
         '.' or '..' for the special entries, the ASCII identifier otherwise.
        """
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Directory Record not initialized')
        if self.is_dot():
            return '.'
        if self.is_dotdot():
            return '..'
        return self.file_ident.decode('ascii', 'replace')

    def __repr__(self):
        # type: () -> str
        if not self._initialized:
            return 'DirectoryRecord(<uninitialized>)'
        return 'DirectoryRecord(name=%r, flags=%s, extent=%d, data_length=%d)' % (
            self.file_identifier(), format(self.file_flags, '08b'),
            self.extent_location, self.data_length)


DirectoryEvent = collections.namedtuple('DirectoryEvent', ['kind', 'record'])


class DirectoryReader(object):
    """
    A class that walks the records of one directory.  A directory may span
    several logical blocks, and each block ends either with a zero length byte
    or by running out of room; the reader then moves on to the next block
    until all of the blocks covered by the directory's data length are read.
    """
    __slots__ = ('_stream', '_reader', '_extent', '_log_block_size',
                 '_block_current', '_block_max', '_block_start', '_state')

    STATE_READING_BLOCK = 0
    STATE_BLOCK_BOUNDARY = 1
    STATE_DONE = 2

    RECORD = 'record'
    END_OF_BLOCK = 'end-of-block'
    END_OF_DIRECTORY = 'end-of-directory'

    def __init__(self, layout, extent, log_block_size):
        # type: (sectorstream.SectorLayout, int, int) -> None
        self._stream = layout.stream_at(extent, log_block_size)
        self._reader = fieldreader.FieldReader(self._stream)
        self._extent = extent
        self._log_block_size = log_block_size
        self._block_current = 0
        self._block_max = None  # type: Optional[int]
        self._block_start = 0
        self._state = self.STATE_READING_BLOCK

    def _read_record(self):
        # type: () -> Optional[DirectoryRecord]
        """
        An internal method to read the next record of the current block.

        Parameters:
         None.
        Returns:
         The next DirectoryRecord, or None if the current block has no more.
        """
        offset = self._reader.consumed - self._block_start
        if offset >= self._log_block_size:
            return None

        dr_len = self._reader.read_uint8()
        if dr_len == 0:
            return None

        if offset + dr_len > self._log_block_size:
            raise pycdreaderexception.PyCdreaderCorruptISO('Directory record at offset %d of extent %d crosses a block boundary' % (offset, self._extent + self._block_current))

        rec = DirectoryRecord()
        rec.parse(dr_len, self._reader)
        return rec

    def next_event(self):
        # type: () -> DirectoryEvent
        """
        A method to advance the walk by one step.

        Parameters:
         None.
        Returns:
         A DirectoryEvent whose kind is RECORD (with the record),
         END_OF_BLOCK, or END_OF_DIRECTORY.
        """
        if self._state == self.STATE_DONE:
            return DirectoryEvent(self.END_OF_DIRECTORY, None)

        if self._state == self.STATE_BLOCK_BOUNDARY:
            if self._block_max is None or self._block_current >= self._block_max:
                self._state = self.STATE_DONE
                return DirectoryEvent(self.END_OF_DIRECTORY, None)
            self._block_current += 1
            _logger.debug('Continuing directory at extent %d into block %d of %d',
                          self._extent, self._block_current, self._block_max)
            self._stream.set_sector(self._extent + self._block_current)
            self._block_start = self._reader.consumed
            self._state = self.STATE_READING_BLOCK

        rec = self._read_record()
        if rec is None:
            if self._block_max is None:
                raise pycdreaderexception.PyCdreaderCorruptISO('Directory at extent %d has no records' % (self._extent))
            self._state = self.STATE_BLOCK_BOUNDARY
            return DirectoryEvent(self.END_OF_BLOCK, None)

        if self._block_max is None:
            # The first record is the directory itself, and its data length
            # tells us how many blocks the directory covers.  This rounds up
            # rather than down, so a length that is not a whole number of
            # blocks still reaches its trailing partial block.
            self._block_max = max(utils.ceiling_div(rec.data_length, self._log_block_size) - 1, 0)

        return DirectoryEvent(self.RECORD, rec)

    def __iter__(self):
        # type: () -> Iterator[DirectoryRecord]
        while True:
            event = self.next_event()
            if event.kind == self.END_OF_DIRECTORY:
                return
            if event.kind == self.RECORD:
                yield event.record


def read_dir_entries(layout, ptr, params, out=None):
    # type: (sectorstream.SectorLayout, path_table_record.PathTableRecord, headervd.VolumeParameters, Optional[List[DirectoryRecord]]) -> List[DirectoryRecord]
    """
    A function to read every record of the directory described by a path
    table record.  The '.' and '..' records are included.

    Parameters:
     layout - The SectorLayout of the ISO.
     ptr - The PathTableRecord of the directory to read.
     params - The VolumeParameters from the Primary Volume Descriptor.
     out - An optional list to append the records to.
    Returns:
     The list the records were appended to.
    """
    if out is None:
        out = []
    for rec in DirectoryReader(layout, ptr.extent_location, params.log_block_size):
        out.append(rec)
    return out
