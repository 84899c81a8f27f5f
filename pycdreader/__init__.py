"""
Pycdreader is a pure python library to read ISO9660 filesystems, from plain
ISO images or from raw CD dumps.
"""
from .pycdreader import PyCdreader  # NOQA
