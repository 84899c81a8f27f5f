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

"""Various utilities for PyCdreader."""

import io

from typing import BinaryIO  # NOQA pylint: disable=unused-import

from pycdreader import pycdreaderexception


def ceiling_div(numer, denom):
    # type: (int, int) -> int
    """
    A function to do ceiling division; that is, dividing numerator by denominator
    and taking the ceiling.

    Parameters:
     numer - The numerator for the division.
     denom - The denominator for the division.
    Returns:
     The ceiling after dividing numerator by denominator.
    """
    # Upside-down floor division gives the ceiling.
    return -(-numer // denom)


def copy_data(data_length, blocksize, infp, outfp):
    # type: (int, int, BinaryIO, BinaryIO) -> None
    """
    A utility function to copy data from the input file object to the output
    file object.

    Parameters:
     data_length - The amount of data to copy.
     blocksize - How much data to copy per iteration.
     infp - The file object to copy data from.
     outfp - The file object to copy data to.
    Returns:
     Nothing.
    """
    left = data_length
    readsize = blocksize
    while left > 0:
        if left < readsize:
            readsize = left
        data = infp.read(readsize)
        if not data:
            raise pycdreaderexception.PyCdreaderTruncatedISO('Expected %d more bytes of data, but the ISO ended' % (left))
        outfp.write(data)
        left -= len(data)


def file_object_supports_binary(fp):
    # type: (BinaryIO) -> bool
    """
    A function to check whether a file-like object supports binary mode.

    Parameters:
     fp - The file-like object to check for binary mode support.
    Returns:
     True if the file-like object supports binary mode, False otherwise.
    """
    if hasattr(fp, 'mode'):
        return 'b' in fp.mode

    return isinstance(fp, (io.RawIOBase, io.BufferedIOBase))


def normalize_dir_path(path):
    # type: (str) -> str
    """
    A function to turn a user-supplied directory path into the slash-joined,
    root-relative form used by path table records.  Both '' and '/' name the
    root directory.

    Parameters:
     path - The path to normalize.
    Returns:
     The path without leading, trailing, or doubled slashes.
    """
    return '/'.join([comp for comp in path.split('/') if comp])


def strip_file_version(name):
    # type: (str) -> str
    """
    A function to remove the ';1' style version suffix, and the trailing dot
    left behind on extension-less names, from an ISO9660 file identifier.

    Parameters:
     name - The file identifier to strip.
    Returns:
     The file identifier without its version.
    """
    name = name.split(';')[0]
    if name.endswith('.'):
        name = name[:-1]
    return name
