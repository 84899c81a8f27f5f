# Copyright (C) 2015-2018  Chris Lalancette <clalancette@gmail.com>

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
Implementation of the Primary Volume Descriptor for Ecma-119/ISO9660.
'''

import collections
import logging

from pycdreader import fieldreader
from pycdreader import pycdreaderexception
from pycdreader import sectorstream

_logger = logging.getLogger(__name__)

VOLUME_DESCRIPTOR_TYPE_PRIMARY = 1

# Ecma-119, 6.2.1 says that the System Area occupies logical sectors 0 to 15,
# so the first volume descriptor is always at sector 16.
PVD_SECTOR = 16

VolumeParameters = collections.namedtuple('VolumeParameters',
                                          ['log_block_size', 'path_table_size',
                                           'path_table_location',
                                           'optional_path_table_location',
                                           'path_table_location_be',
                                           'optional_path_table_location_be',
                                           'space_size', 'set_size', 'seqnum',
                                           'system_identifier',
                                           'volume_identifier'])


class PrimaryVD(object):
    '''
    A class representing the Primary Volume Descriptor of an ISO.  This is the
    first thing on the ISO that is parsed, and it tells us the logical block
    size along with where the path table lives.
    '''
    __slots__ = ('_initialized', 'descriptor_type', 'version',
                 'system_identifier', 'volume_identifier', 'space_size',
                 'set_size', 'seqnum', 'log_block_size', 'path_tbl_size',
                 'path_table_location_le', 'optional_path_table_location_le',
                 'path_table_location_be', 'optional_path_table_location_be')

    def __init__(self):
        # type: () -> None
        self._initialized = False

    def parse(self, reader):
        # type: (fieldreader.FieldReader) -> None
        '''
        Parse a Primary Volume Descriptor out of a field reader positioned at
        its first byte.

        Parameters:
         reader - The FieldReader to read the descriptor from.
        Returns:
         Nothing.
        '''
        if self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('This Primary Volume Descriptor is already initialized')

        self.descriptor_type = reader.read_uint8()
        identifier = reader.read_bytes(5)
        self.version = reader.read_uint8()
        reader.read_uint8()  # unused

        # According to Ecma-119, 8.4.2, the identifier should be 'CD001'.
        if identifier != b'CD001':
            raise pycdreaderexception.PyCdreaderInvalidISO('invalid CD isoIdentification')
        # According to Ecma-119, 8.4.1 and 8.4.3, both the type and the
        # version should be 1.  Only the identifier is enforced.
        if self.descriptor_type != VOLUME_DESCRIPTOR_TYPE_PRIMARY:
            _logger.warning('Volume descriptor type is %d, expected %d', self.descriptor_type, VOLUME_DESCRIPTOR_TYPE_PRIMARY)
        if self.version != 1:
            _logger.warning('Volume descriptor version is %d, expected 1', self.version)

        self.system_identifier = reader.read_string(32)
        self.volume_identifier = reader.read_string(32)

        reader.read_uint32_le()  # unused
        reader.read_uint32_le()  # unused

        # The space size, set size and sequence number are not needed to
        # find anything on the ISO, so a disagreement is only reported.
        space_size_le, space_size_be = reader.read_both_uint32()
        if space_size_le != space_size_be:
            _logger.warning('Little-endian (%d) and big-endian (%d) space size disagree', space_size_le, space_size_be)
        self.space_size = space_size_le

        reader.skip(32)  # escape sequences

        set_size_le, set_size_be = reader.read_both_uint16()
        if set_size_le != set_size_be:
            _logger.warning('Little-endian (%d) and big-endian (%d) set size disagree', set_size_le, set_size_be)
        self.set_size = set_size_le

        seqnum_le, seqnum_be = reader.read_both_uint16()
        if seqnum_le != seqnum_be:
            _logger.warning('Little-endian (%d) and big-endian (%d) seqnum disagree', seqnum_le, seqnum_be)
        self.seqnum = seqnum_le

        logical_block_size_le, logical_block_size_be = reader.read_both_uint16()
        if logical_block_size_le != logical_block_size_be:
            raise pycdreaderexception.PyCdreaderCorruptISO('Little-endian (%d) and big-endian (%d) logical block size disagree' % (logical_block_size_le, logical_block_size_be))
        if logical_block_size_le == 0:
            raise pycdreaderexception.PyCdreaderCorruptISO('Logical block size is zero')
        self.log_block_size = logical_block_size_le

        path_table_size_le, path_table_size_be = reader.read_both_uint32()
        if path_table_size_le != path_table_size_be:
            raise pycdreaderexception.PyCdreaderCorruptISO('Little-endian (%d) and big-endian (%d) path table size disagree' % (path_table_size_le, path_table_size_be))
        self.path_tbl_size = path_table_size_le

        self.path_table_location_le = reader.read_uint32_le()
        self.optional_path_table_location_le = reader.read_uint32_le()
        self.path_table_location_be = reader.read_uint32_be()
        self.optional_path_table_location_be = reader.read_uint32_be()

        self._initialized = True

    def volume_parameters(self):
        # type: () -> VolumeParameters
        '''
        A method to get the values the rest of the ISO is decoded with.

        Parameters:
         None.
        Returns:
         An immutable VolumeParameters object.
        '''
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInternalError('This Primary Volume Descriptor is not yet initialized')

        return VolumeParameters(log_block_size=self.log_block_size,
                                path_table_size=self.path_tbl_size,
                                path_table_location=self.path_table_location_le,
                                optional_path_table_location=self.optional_path_table_location_le,
                                path_table_location_be=self.path_table_location_be,
                                optional_path_table_location_be=self.optional_path_table_location_be,
                                space_size=self.space_size,
                                set_size=self.set_size,
                                seqnum=self.seqnum,
                                system_identifier=self.system_identifier,
                                volume_identifier=self.volume_identifier)


def read_volume_descriptor(layout):
    # type: (sectorstream.SectorLayout) -> VolumeParameters
    '''
    A function to read the Primary Volume Descriptor at sector 16.

    Parameters:
     layout - The SectorLayout of the ISO.
    Returns:
     The VolumeParameters of the ISO.
    '''
    pvd = PrimaryVD()
    pvd.parse(fieldreader.FieldReader(layout.stream_at(PVD_SECTOR)))
    params = pvd.volume_parameters()
    _logger.debug('Volume %r: block size %d, path table of %d bytes at sector %d',
                  params.volume_identifier, params.log_block_size,
                  params.path_table_size, params.path_table_location)
    return params
