import pytest
import os
import sys
from io import BytesIO

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import common
import pycdreader.fieldreader
import pycdreader.pycdreaderexception
import pycdreader.sectorstream

class ShortReader(object):
    # A source that hands out at most 3 bytes per read.
    def __init__(self, data):
        self.fp = BytesIO(data)

    def read(self, n):
        return self.fp.read(min(n, 3))

def test_read_integers():
    data = b'\x7f' + b'\x34\x12' + b'\x12\x34' + b'\x78\x56\x34\x12' + b'\x12\x34\x56\x78'
    reader = pycdreader.fieldreader.FieldReader(BytesIO(data))
    assert(reader.read_uint8() == 0x7f)
    assert(reader.read_uint16_le() == 0x1234)
    assert(reader.read_uint16_be() == 0x1234)
    assert(reader.read_uint32_le() == 0x12345678)
    assert(reader.read_uint32_be() == 0x12345678)
    assert(reader.consumed == len(data))

def test_read_both():
    reader = pycdreader.fieldreader.FieldReader(BytesIO(common.both16(2048) + common.both32(10, 11)))
    assert(reader.read_both_uint16() == (2048, 2048))
    assert(reader.read_both_uint32() == (10, 11))

def test_read_string_trims_padding():
    reader = pycdreader.fieldreader.FieldReader(BytesIO(b'CDROM   ' + b'ROOT\x00\x00' + b'\x00'))
    assert(reader.read_string(8) == 'CDROM')
    assert(reader.read_string(6) == 'ROOT')
    assert(reader.read_string(1) == '')

def test_read_bytes_and_skip():
    reader = pycdreader.fieldreader.FieldReader(BytesIO(b'abcdef'))
    reader.skip(2)
    assert(reader.read_bytes(3) == b'cde')
    assert(reader.consumed == 5)

def test_read_loops_over_short_reads():
    reader = pycdreader.fieldreader.FieldReader(ShortReader(b'\x01\x02\x03\x04\x05\x06\x07\x08'))
    assert(reader.read_bytes(8) == b'\x01\x02\x03\x04\x05\x06\x07\x08')

def test_read_across_sector_boundary():
    data = b'\x00' * 2046 + b'\x78\x56' + b'\x34\x12' + b'\x00' * 2044
    layout = pycdreader.sectorstream.SectorLayout(BytesIO(data))
    reader = pycdreader.fieldreader.FieldReader(layout.stream_at(0))
    reader.skip(2046)
    assert(reader.read_uint32_le() == 0x12345678)

def test_truncated():
    reader = pycdreader.fieldreader.FieldReader(BytesIO(b'\x01\x02'))
    with pytest.raises(pycdreader.pycdreaderexception.PyCdreaderTruncatedISO) as excinfo:
        reader.read_uint32_le()
    assert(str(excinfo.value) == 'Expected 4 bytes, but only 2 were available')

def test_truncated_is_ioerror():
    reader = pycdreader.fieldreader.FieldReader(BytesIO(b''))
    with pytest.raises(IOError):
        reader.read_uint8()

def test_negative_length():
    reader = pycdreader.fieldreader.FieldReader(BytesIO(b''))
    with pytest.raises(pycdreader.pycdreaderexception.PyCdreaderInternalError):
        reader.read_bytes(-1)
