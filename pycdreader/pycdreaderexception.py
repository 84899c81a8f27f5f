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

"""Exceptions raised by PyCdreader."""


class PyCdreaderException(Exception):
    """The custom Exception class for PyCdreader."""


class PyCdreaderInvalidISO(PyCdreaderException):
    """
    The custom Exception class for invalid ISOs in PyCdreader.  This is raised
    when the volume descriptor does not identify an ISO9660 volume.
    """


class PyCdreaderCorruptISO(PyCdreaderInvalidISO):
    """
    The custom Exception class for corrupt ISOs in PyCdreader.  This is raised
    when the little-endian and big-endian copies of a field disagree, since
    there is no way to know which of the two is the damaged one.
    """


class PyCdreaderTruncatedISO(PyCdreaderInvalidISO, IOError):
    """
    The custom Exception class for ISOs that end before a structure they
    declare.
    """


class PyCdreaderInvalidInput(PyCdreaderException):
    """The custom Exception class for invalid input to PyCdreader."""


class PyCdreaderInternalError(PyCdreaderException):
    """The custom Exception class for internal errors in PyCdreader."""
