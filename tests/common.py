import os
import struct
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

################################ ENCODING HELPERS #############################

def both16(le, be=None):
    if be is None:
        be = le
    return struct.pack('<H', le) + struct.pack('>H', be)

def both32(le, be=None):
    if be is None:
        be = le
    return struct.pack('<L', le) + struct.pack('>L', be)

def pad(data, length):
    assert(len(data) <= length)
    return data + b'\x00' * (length - len(data))

def make_pvd(ptbl_size, ptbl_location, log_block_size=2048, space_size=32,
             identifier=b'CD001', descriptor_type=1,
             log_block_size_be=None, ptbl_size_be=None, space_size_be=None,
             set_size_be=None, seqnum_be=None, ptbl_location_be=0,
             sys_ident=b'LINUX', vol_ident=b'CDROM'):
    vd = struct.pack('=B5sBB', descriptor_type, identifier, 1, 0)
    vd += sys_ident.ljust(32, b' ')
    vd += vol_ident.ljust(32, b' ')
    vd += b'\x00' * 8
    vd += both32(space_size, space_size_be)
    vd += b'\x00' * 32
    vd += both16(1, set_size_be)
    vd += both16(1, seqnum_be)
    vd += both16(log_block_size, log_block_size_be)
    vd += both32(ptbl_size, ptbl_size_be)
    vd += struct.pack('<L', ptbl_location)
    vd += struct.pack('<L', 0)
    vd += struct.pack('>L', ptbl_location_be)
    vd += struct.pack('>L', 0)
    # The root directory record and the rest of the descriptor are not read.
    return pad(vd, 2048)

def make_vdst():
    return pad(struct.pack('=B5sB', 255, b'CD001', 1), 2048)

def make_ptr(name, extent, parent):
    rec = struct.pack('<BBLH', len(name), 0, extent, parent) + name
    if len(name) % 2 != 0:
        rec += b'\x00'
    return rec

def make_dr(name, extent, length, isdir=False, flags=None, system_use=b'',
            extent_be=None, length_be=None, seqnum_be=None):
    if flags is None:
        flags = 0x02 if isdir else 0x00
    dr_len = 33 + len(name) + (1 - len(name) % 2) + len(system_use)
    rec = struct.pack('=BB', dr_len, 0)
    rec += both32(extent, extent_be)
    rec += both32(length, length_be)
    rec += b'\x76\x01\x02\x03\x04\x05\x00'
    rec += struct.pack('=BBB', flags, 0, 0)
    rec += both16(1, seqnum_be)
    rec += struct.pack('=B', len(name)) + name
    if len(name) % 2 == 0:
        rec += b'\x00'
    rec += system_use
    assert(len(rec) == dr_len)
    return rec

def dir_blocks(records, log_block_size=2048):
    # Pack records so that none of them crosses a block boundary.
    blocks = []
    current = b''
    for rec in records:
        if len(current) + len(rec) > log_block_size:
            blocks.append(pad(current, log_block_size))
            current = b''
        current += rec
    blocks.append(pad(current, log_block_size))
    return blocks

################################ IMAGE BUILDERS ###############################

def build_image(sectors, log_block_size=2048):
    num_sectors = max(sectors) + 1
    out = b''
    for i in range(0, num_sectors):
        out += pad(sectors.get(i, b''), log_block_size)
    return out

def to_raw(plain, raw_sector_size=2352, log_block_size=2048):
    out = b''
    for i in range(0, len(plain) // log_block_size):
        header = b'\x00' + b'\xff' * 10 + b'\x00' + struct.pack('=BBBB', 0, 2, i % 75, 1)
        data = plain[i * log_block_size:(i + 1) * log_block_size]
        out += pad(header + data, raw_sector_size)
    return out

FOO_DATA = b'foo\n'
BAR_DATA = b'bar\n' * 1000

def simple_iso_sectors():
    # Sector layout:
    #  16 - PVD, 17 - terminator, 20 - path table, 21 - root directory,
    #  22 - DATA directory, 23 - FOO.TXT;1, 24-25 - DATA/BAR.;1
    ptbl = make_ptr(b'\x00', 21, 1) + make_ptr(b'DATA', 22, 1)
    root = [make_dr(b'\x00', 21, 2048, isdir=True),
            make_dr(b'\x01', 21, 2048, isdir=True),
            make_dr(b'DATA', 22, 2048, isdir=True),
            make_dr(b'FOO.TXT;1', 23, len(FOO_DATA))]
    data = [make_dr(b'\x00', 22, 2048, isdir=True),
            make_dr(b'\x01', 21, 2048, isdir=True),
            make_dr(b'BAR.;1', 24, len(BAR_DATA))]
    return {
        16: make_pvd(len(ptbl), 20, space_size=26),
        17: make_vdst(),
        20: ptbl,
        21: dir_blocks(root)[0],
        22: dir_blocks(data)[0],
        23: FOO_DATA,
        24: BAR_DATA[:2048],
        25: BAR_DATA[2048:],
    }

def simple_iso():
    return build_image(simple_iso_sectors())

def file_names(count):
    return [('FILE%04d.;1' % i).encode('ascii') for i in range(0, count)]

def multiblock_iso(num_files):
    # A root directory with enough files to need more than one block.  The
    # files have no data.
    records = [make_dr(b'\x00', 21, 0, isdir=True),
               make_dr(b'\x01', 21, 0, isdir=True)]
    for name in file_names(num_files):
        records.append(make_dr(name, 0, 0))
    blocks = dir_blocks(records)
    length = len(blocks) * 2048
    # Now that the size is known, rewrite the dot and dotdot entries.
    records[0] = make_dr(b'\x00', 21, length, isdir=True)
    records[1] = make_dr(b'\x01', 21, length, isdir=True)
    blocks = dir_blocks(records)

    ptbl = make_ptr(b'\x00', 21, 1)
    sectors = {
        16: make_pvd(len(ptbl), 20),
        17: make_vdst(),
        20: ptbl,
    }
    for i, block in enumerate(blocks):
        sectors[21 + i] = block
    return build_image(sectors), len(blocks)
