#!/usr/bin/python3

# Copyright (C) 2018  Chris Lalancette <clalancette@gmail.com>

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
The main code for the pycdreader-extract-files tool, which can list or extract
the files of an ISO or raw CD dump.
'''

import argparse
import logging
import os
import sys

import pycdreader
from pycdreader import pycdreaderexception
from pycdreader import utils


def parse_arguments():
    '''
    A function to parse all of the arguments passed to the executable.

    Parameters:
     None.
    Returns:
     An ArgumentParser object with the parsed command-line arguments.
    '''
    parser = argparse.ArgumentParser()
    parser.add_argument('-raw-sector-size', help='Physical sector size of a raw CD dump (usually 2352); 0 for a plain ISO', action='store', type=int, default=0)
    parser.add_argument('-list', help='Only list the files, do not extract them', action='store_true')
    parser.add_argument('-keep-versions', help='Keep the ;1 version suffix on extracted file names', action='store_true')
    parser.add_argument('-outdir', help='Directory to extract into', action='store', default='.')
    parser.add_argument('-verbose', help='Print debugging information', action='store_true')
    parser.add_argument('iso', help='ISO to open', action='store')
    return parser.parse_args()


def is_safe_component(name):
    '''
    A function to check that a name taken from the ISO can be used as one
    component of a local path without leaving the output directory.

    Parameters:
     name - The directory or file name to check.
    Returns:
     True if the name is safe to join onto a local path, False otherwise.
    '''
    if name in ('', '.', '..'):
        return False
    if '/' in name or os.sep in name:
        return False
    if os.altsep is not None and os.altsep in name:
        return False
    return True


def main():
    '''
    The main function for this executable that does the work of extracting
    files from an ISO given the parameters specified by the user.
    '''
    args = parse_arguments()

    logging.basicConfig(format='%(levelname)s:%(name)s:%(message)s',
                        level=logging.DEBUG if args.verbose else logging.WARNING)

    iso = pycdreader.PyCdreader()
    print('Opening %s' % (args.iso))
    try:
        iso.open(args.iso, args.raw_sector_size)
    except (pycdreaderexception.PyCdreaderException, IOError) as err:
        print('Failed to open %s: %s' % (args.iso, err))
        return 1

    try:
        for path, dirs_unused, files in iso.walk():
            components = path.split('/') if path else []
            print('/' + path)
            if not args.list:
                for comp in components:
                    if not is_safe_component(comp):
                        print('Refusing to extract directory /%s: unsafe name %r' % (path, comp))
                        return 3
            local_dir = os.path.join(args.outdir, *components)
            if not args.list and not os.path.isdir(local_dir):
                os.makedirs(local_dir)
            for rec in files:
                name = rec.file_identifier()
                if not args.keep_versions:
                    name = utils.strip_file_version(name)
                print('/' + '/'.join([comp for comp in (path, name) if comp]))
                if not args.list:
                    if not is_safe_component(name):
                        print('Refusing to extract file /%s: unsafe name %r' % (path, name))
                        return 3
                    iso.get_file_from_iso(os.path.join(local_dir, name), rec)
    except pycdreaderexception.PyCdreaderException as err:
        print('Failed to read %s: %s' % (args.iso, err))
        return 2
    finally:
        iso.close()

    return 0


if __name__ == '__main__':
    sys.exit(main())
