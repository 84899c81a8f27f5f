# Copyright (C) 2015-2017  Chris Lalancette <clalancette@gmail.com>

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

'''
Class to support ISO9660 Path Table Records.
'''

import io
import logging

from typing import List  # NOQA pylint: disable=unused-import

from pycdreader import fieldreader
from pycdreader import headervd  # NOQA pylint: disable=unused-import
from pycdreader import pycdreaderexception
from pycdreader import sectorstream  # NOQA pylint: disable=unused-import

_logger = logging.getLogger(__name__)


class PathTableRecord(object):
    '''
    A class that represents a single ISO9660 Path Table Record.
    '''
    __slots__ = ('_initialized', 'len_di', 'xattr_length', 'extent_location',
                 'parent_directory_num', 'directory_identifier', 'path')

    # len_di, xattr_length, extent_location, parent_directory_num
    HEADER_LENGTH = 8

    def __init__(self):
        # type: () -> None
        self._initialized = False

    def parse(self, reader):
        # type: (fieldreader.FieldReader) -> None
        '''
        A method to parse an ISO9660 Path Table Record out of a field reader.

        Parameters:
         reader - The FieldReader positioned at the start of the record.
        Returns:
         Nothing.
        '''
        if self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Path Table Record already initialized')

        self.len_di = reader.read_uint8()
        self.xattr_length = reader.read_uint8()
        self.extent_location = reader.read_uint32_le()
        self.parent_directory_num = reader.read_uint16_le()
        self.directory_identifier = reader.read_string(self.len_di)
        if self.len_di % 2 != 0:
            reader.skip(1)  # padding
        self.path = self.directory_identifier
        self._initialized = True

    def resolve_path(self, table):
        # type: (List[PathTableRecord]) -> None
        '''
        A method to compute the full path of this record.  The record must
        already be the last entry in the table.  A parent has to come earlier
        in the table than its child; a record that violates this keeps its
        bare identifier as its path.

        Parameters:
         table - The path table records parsed so far, including this one.
        Returns:
         Nothing.
        '''
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Path Table Record not initialized')

        index = len(table)
        if 1 < self.parent_directory_num < index:
            self.path = table[self.parent_directory_num - 1].path + '/' + self.directory_identifier
        else:
            self.path = self.directory_identifier
            if index > 1 and self.parent_directory_num != 1:
                _logger.warning('Path table record %d (%r) has parent %d, which is not earlier in the table',
                                index, self.directory_identifier, self.parent_directory_num)

    def is_root(self):
        # type: () -> bool
        '''
        A method to determine whether this is the root directory's record.

        Parameters:
         None.
        Returns:
         True if this record has an empty identifier, False otherwise.
        '''
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('Path Table Record not initialized')

        return self.directory_identifier == ''

    @classmethod
    def record_length(cls, len_di):
        # type: (int) -> int
        '''
        A class method to calculate the length of a Path Table Record.

        Parameters:
         len_di - The length of the name for this Path Directory Record.
        Returns:
         The total length that a Path Directory Record with this name would occupy.
        '''
        return cls.HEADER_LENGTH + len_di + (len_di % 2)

    def __repr__(self):
        # type: () -> str
        return 'PathTableRecord(path=%r, extent=%d, parent=%d)' % (self.path, self.extent_location,
                                                                  self.parent_directory_num)


def read_path_table(layout, params):
    # type: (sectorstream.SectorLayout, headervd.VolumeParameters) -> List[PathTableRecord]
    '''
    A function to read the little-endian path table of an ISO.  The whole
    table is read into memory first, so decoding stops exactly where the
    declared table size ends.

    Parameters:
     layout - The SectorLayout of the ISO.
     params - The VolumeParameters from the Primary Volume Descriptor.
    Returns:
     The list of Path Table Records, in table order.
    '''
    stream = layout.stream_at(params.path_table_location, params.log_block_size)
    data = fieldreader.FieldReader(stream).read_bytes(params.path_table_size)

    table_fp = io.BytesIO(data)
    reader = fieldreader.FieldReader(table_fp)
    out = []  # type: List[PathTableRecord]
    while reader.consumed < params.path_table_size:
        ptr = PathTableRecord()
        ptr.parse(reader)
        out.append(ptr)
        ptr.resolve_path(out)

    _logger.debug('Read %d path table records from sector %d', len(out), params.path_table_location)
    return out
