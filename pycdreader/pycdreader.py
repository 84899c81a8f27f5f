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

"""Main PyCdreader class."""

import logging

from typing import BinaryIO, Generator, List, Optional, Tuple  # NOQA pylint: disable=unused-import

from pycdreader import dr
from pycdreader import headervd
from pycdreader import path_table_record
from pycdreader import pycdreaderexception
from pycdreader import pycdreaderio
from pycdreader import sectorstream
from pycdreader import utils

_logger = logging.getLogger(__name__)


class PyCdreader(object):
    """The main class for reading ISOs."""
    __slots__ = ('_initialized', '_cdfp', '_managing_fp', '_layout', 'pvd',
                 '_path_table')

    def _initialize(self):
        # type: () -> None
        """
        An internal method to re-initialize the object.  Called from
        both __init__ and close.

        Parameters:
         None.
        Returns:
         Nothing.
        """
        self._cdfp = None  # type: Optional[BinaryIO]
        self._managing_fp = False
        self._layout = None  # type: Optional[sectorstream.SectorLayout]
        self.pvd = None  # type: Optional[headervd.VolumeParameters]
        self._path_table = None  # type: Optional[List[path_table_record.PathTableRecord]]
        self._initialized = False

    def __init__(self):
        # type: () -> None
        self._initialize()

    def _check_initialized(self):
        # type: () -> None
        """
        An internal method to make sure an ISO has been opened.

        Parameters:
         None.
        Returns:
         Nothing.
        """
        if not self._initialized:
            raise pycdreaderexception.PyCdreaderInvalidInput('This object is not initialized; call open() to read an ISO')

    def _open_fp(self, fp, raw_sector_size):
        # type: (BinaryIO, int) -> None
        """
        An internal method to open an existing ISO for inspection.  Note that
        the file object passed in here must stay open for the lifetime of this
        object, as the PyCdreader class uses it internally for every read.

        Parameters:
         fp - The file object containing the ISO to open up.
         raw_sector_size - The physical sector size of a raw CD dump, or 0 for
                           a plain ISO.
        Returns:
         Nothing.
        """
        if not utils.file_object_supports_binary(fp):
            raise pycdreaderexception.PyCdreaderInvalidInput("The file to open must be in binary mode (add 'b' to the open flags)")

        self._layout = sectorstream.SectorLayout(fp, raw_sector_size)
        if self._layout.is_raw():
            _logger.debug('Reading raw dump with %d byte sectors', raw_sector_size)
        self._cdfp = fp
        self.pvd = headervd.read_volume_descriptor(self._layout)
        self._initialized = True

    def open(self, filename, raw_sector_size=0):
        # type: (str, int) -> None
        """
        Open up an existing ISO for inspection.

        Parameters:
         filename - The filename containing the ISO to open up.
         raw_sector_size - The physical sector size of a raw CD dump (usually
                           2352), or 0 for a plain ISO.
        Returns:
         Nothing.
        """
        if self._initialized:
            raise pycdreaderexception.PyCdreaderInvalidInput('This object already has an ISO; either close it or create a new object')

        fp = open(filename, 'rb')  # pylint: disable=consider-using-with
        try:
            self._open_fp(fp, raw_sector_size)
        except Exception:
            fp.close()
            self._initialize()
            raise
        self._managing_fp = True

    def open_fp(self, fp, raw_sector_size=0):
        # type: (BinaryIO, int) -> None
        """
        Open up an existing ISO for inspection.  Note that the file object
        passed in here must stay open for the lifetime of this object.  To have
        PyCdreader manage this automatically, use 'open' instead.

        Parameters:
         fp - The file object containing the ISO to open up.
         raw_sector_size - The physical sector size of a raw CD dump (usually
                           2352), or 0 for a plain ISO.
        Returns:
         Nothing.
        """
        if self._initialized:
            raise pycdreaderexception.PyCdreaderInvalidInput('This object already has an ISO; either close it or create a new object')

        try:
            self._open_fp(fp, raw_sector_size)
        except Exception:
            self._initialize()
            raise

    def read_volume_descriptor(self):
        # type: () -> headervd.VolumeParameters
        """
        Read the Primary Volume Descriptor of the ISO again.

        Parameters:
         None.
        Returns:
         The VolumeParameters of the ISO.
        """
        self._check_initialized()
        self.pvd = headervd.read_volume_descriptor(self._layout)
        return self.pvd

    def read_path_table(self):
        # type: () -> List[path_table_record.PathTableRecord]
        """
        Read the little-endian path table of the ISO, with the full path of
        every directory resolved.

        Parameters:
         None.
        Returns:
         The list of Path Table Records, root first.
        """
        self._check_initialized()
        self._path_table = path_table_record.read_path_table(self._layout, self.pvd)
        return self._path_table

    def read_dir_entries(self, ptr, out=None):
        # type: (path_table_record.PathTableRecord, Optional[List[dr.DirectoryRecord]]) -> List[dr.DirectoryRecord]
        """
        Read all of the Directory Records of one directory, including the
        '.' and '..' entries.

        Parameters:
         ptr - The Path Table Record of the directory to read.
         out - An optional list to append the records to.
        Returns:
         The list the records were appended to.
        """
        self._check_initialized()
        return dr.read_dir_entries(self._layout, ptr, self.pvd, out)

    def _path_table_records(self):
        # type: () -> List[path_table_record.PathTableRecord]
        """
        An internal method to get the path table, reading it on first use.

        Parameters:
         None.
        Returns:
         The list of Path Table Records.
        """
        if self._path_table is None:
            self.read_path_table()
        return self._path_table  # type: ignore

    def get_path_table_record(self, path):
        # type: (str) -> path_table_record.PathTableRecord
        """
        Find the Path Table Record of a directory.

        Parameters:
         path - The slash-separated path of the directory; '' and '/' are the
                root.
        Returns:
         The Path Table Record of the directory.
        """
        self._check_initialized()
        path = utils.normalize_dir_path(path)
        for ptr in self._path_table_records():
            if ptr.path == path:
                return ptr
        raise pycdreaderexception.PyCdreaderInvalidInput('Could not find directory %s' % (path))

    def list_children(self, path):
        # type: (str) -> List[dr.DirectoryRecord]
        """
        List the Directory Records of the directory at a path.

        Parameters:
         path - The slash-separated path of the directory; '' and '/' are the
                root.
        Returns:
         The records of the directory, '.' and '..' included.
        """
        return self.read_dir_entries(self.get_path_table_record(path))

    def walk(self):
        # type: () -> Generator[Tuple[str, List[str], List[dr.DirectoryRecord]], None, None]
        """
        Walk every directory of the ISO in path table order.  Unlike
        os.walk(), the directory list cannot be modified to prune the walk,
        since the path table already lists every directory.

        Parameters:
         None.
        Yields:
         A tuple of (path, list of subdirectory names, list of file records)
         for each directory.
        """
        self._check_initialized()
        for ptr in self._path_table_records():
            dirs = []
            files = []
            for rec in self.read_dir_entries(ptr):
                if rec.is_dot() or rec.is_dotdot():
                    continue
                if rec.is_dir():
                    dirs.append(rec.file_identifier())
                else:
                    files.append(rec)
            yield ptr.path, dirs, files

    def get_file_from_iso_fp(self, outfp, rec, blocksize=8192):
        # type: (BinaryIO, dr.DirectoryRecord, int) -> None
        """
        Copy the data of a file on the ISO into a file object.

        Parameters:
         outfp - The file object to write the data to.
         rec - The Directory Record of the file.
         blocksize - The number of bytes to copy at a time.
        Returns:
         Nothing.
        """
        self._check_initialized()
        if rec.is_dir():
            raise pycdreaderexception.PyCdreaderInvalidInput('Cannot fetch the data of a directory')

        with self.open_file_from_iso(rec) as infp:
            utils.copy_data(rec.data_length, blocksize, infp, outfp)

    def get_file_from_iso(self, local_path, rec, blocksize=8192):
        # type: (str, dr.DirectoryRecord, int) -> None
        """
        Copy the data of a file on the ISO into a local file.

        Parameters:
         local_path - The path of the local file to write.
         rec - The Directory Record of the file.
         blocksize - The number of bytes to copy at a time.
        Returns:
         Nothing.
        """
        with open(local_path, 'wb') as fp:
            self.get_file_from_iso_fp(fp, rec, blocksize)

    def open_file_from_iso(self, rec):
        # type: (dr.DirectoryRecord) -> pycdreaderio.PyCdreaderIO
        """
        Open a file on the ISO for reading as a file-like object.

        Parameters:
         rec - The Directory Record of the file.
        Returns:
         A PyCdreaderIO object for the data of the file.
        """
        self._check_initialized()
        return pycdreaderio.PyCdreaderIO(self._layout, rec, self.pvd.log_block_size)

    def close(self):
        # type: () -> None
        """
        Close the PyCdreader object, and re-initialize the object to the
        defaults.  The object can then be re-used to read another ISO.

        Parameters:
         None.
        Returns:
         Nothing.
        """
        self._check_initialized()

        if self._managing_fp:
            self._cdfp.close()

        self._initialize()
