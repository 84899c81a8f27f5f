import os
import subprocess
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import common

pycdreader_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
pycdreader_exe = os.path.join(pycdreader_root, 'tools', 'pycdreader-extract-files.py')


class ProcessException(Exception):
    def __init__(self, msg):
        Exception.__init__(self, msg)


def run_process(cmdline, cwd):
    process = subprocess.Popen(cmdline,
                               cwd=cwd,
                               env={
                                   'PATH': os.environ['PATH'],
                                   'PYTHONPATH': pycdreader_root,
                               },
                               stdout=subprocess.PIPE,
                               stderr=subprocess.PIPE)
    (stdout, stderr) = process.communicate()
    return (process.returncode, stdout.decode('utf-8'), stderr.decode('utf-8'))


def write_iso(tmpdir, name, data):
    path = str(tmpdir.join(name))
    with open(path, 'wb') as fp:
        fp.write(data)
    return path


def test_extract_files(tmpdir):
    isofile = write_iso(tmpdir, 'simple.iso', common.simple_iso())
    outdir = str(tmpdir.mkdir('out'))
    (ret, stdout, stderr) = run_process([sys.executable, pycdreader_exe, '-outdir', outdir, isofile], str(tmpdir))
    if ret != 0:
        raise ProcessException(stdout + stderr)

    with open(os.path.join(outdir, 'FOO.TXT'), 'rb') as fp:
        assert(fp.read() == common.FOO_DATA)
    with open(os.path.join(outdir, 'DATA', 'BAR'), 'rb') as fp:
        assert(fp.read() == common.BAR_DATA)


def test_extract_files_raw_keep_versions(tmpdir):
    isofile = write_iso(tmpdir, 'simple.bin', common.to_raw(common.simple_iso()))
    outdir = str(tmpdir.mkdir('out'))
    (ret, stdout, stderr) = run_process([sys.executable, pycdreader_exe, '-raw-sector-size', '2352',
                                         '-keep-versions', '-outdir', outdir, isofile], str(tmpdir))
    if ret != 0:
        raise ProcessException(stdout + stderr)

    with open(os.path.join(outdir, 'DATA', 'BAR.;1'), 'rb') as fp:
        assert(fp.read() == common.BAR_DATA)


def test_list_files(tmpdir):
    isofile = write_iso(tmpdir, 'simple.iso', common.simple_iso())
    (ret, stdout, stderr) = run_process([sys.executable, pycdreader_exe, '-list', isofile], str(tmpdir))
    assert(ret == 0)
    assert(stdout.splitlines()[1:] == ['/', '/FOO.TXT', '/DATA', '/DATA/BAR'])
    assert(not os.path.exists(str(tmpdir.join('FOO.TXT'))))


def test_invalid_iso(tmpdir):
    isofile = write_iso(tmpdir, 'bad.iso', b'\x00' * 2048 * 17)
    (ret, stdout, stderr) = run_process([sys.executable, pycdreader_exe, '-list', isofile], str(tmpdir))
    assert(ret == 1)
    assert('invalid CD isoIdentification' in stdout)


def test_extract_refuses_file_outside_outdir(tmpdir):
    sectors = common.simple_iso_sectors()
    root = [common.make_dr(b'\x00', 21, 2048, isdir=True),
            common.make_dr(b'\x01', 21, 2048, isdir=True),
            common.make_dr(b'DATA', 22, 2048, isdir=True),
            common.make_dr(b'../../EVIL.;1', 23, len(common.FOO_DATA))]
    sectors[21] = common.dir_blocks(root)[0]
    isofile = write_iso(tmpdir, 'evil.iso', common.build_image(sectors))
    outdir = str(tmpdir.mkdir('a').mkdir('b').mkdir('out'))
    (ret, stdout, stderr) = run_process([sys.executable, pycdreader_exe, '-outdir', outdir, isofile], str(tmpdir))
    assert(ret == 3)
    assert("Refusing to extract file /: unsafe name '../../EVIL'" in stdout)
    assert(not os.path.exists(str(tmpdir.join('a', 'EVIL'))))
    assert(not os.path.exists(str(tmpdir.join('EVIL'))))


def test_extract_refuses_directory_outside_outdir(tmpdir):
    ptbl = common.make_ptr(b'\x00', 21, 1) + common.make_ptr(b'..', 22, 1)
    sectors = common.simple_iso_sectors()
    sectors[16] = common.make_pvd(len(ptbl), 20, space_size=26)
    sectors[20] = ptbl
    isofile = write_iso(tmpdir, 'evil.iso', common.build_image(sectors))
    outdir = str(tmpdir.mkdir('a').mkdir('out'))
    (ret, stdout, stderr) = run_process([sys.executable, pycdreader_exe, '-outdir', outdir, isofile], str(tmpdir))
    assert(ret == 3)
    assert("Refusing to extract directory /..: unsafe name '..'" in stdout)
    assert(not os.path.exists(str(tmpdir.join('a', 'BAR'))))


def test_list_allows_unusual_names(tmpdir):
    ptbl = common.make_ptr(b'\x00', 21, 1) + common.make_ptr(b'..', 22, 1)
    sectors = common.simple_iso_sectors()
    sectors[16] = common.make_pvd(len(ptbl), 20, space_size=26)
    sectors[20] = ptbl
    isofile = write_iso(tmpdir, 'evil.iso', common.build_image(sectors))
    (ret, stdout, stderr) = run_process([sys.executable, pycdreader_exe, '-list', isofile], str(tmpdir))
    assert(ret == 0)
    assert('/../BAR' in stdout.splitlines())
