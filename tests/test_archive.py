import ndspy.fnt
import ndspy.lz10
import ndspy.narc
import pytest

from nsmbcourse import UnsupportedArchive
from nsmbcourse import archive

from . import builders as b


CONTENTS = {
    'course': {
        'course1.bin': b'header 1',
        'course1_bgdatL1.bin': b'layer 1',
    },
    'readme.txt': b'hello',
}


def test_archive_filesystem():
    fs = archive.ArchiveFilesystem(CONTENTS)

    assert fs.exists('course/course1.bin')
    assert fs.exists('/course/course1.bin')
    assert not fs.exists('course/course2.bin')
    assert not fs.exists('course')
    assert not fs.exists('readme.txt/x')

    with fs.open('/course/course1_bgdatL1.bin') as f:
        assert f.read() == b'layer 1'


def test_archive_filesystem_missing_file():
    with pytest.raises(FileNotFoundError):
        archive.ArchiveFilesystem(CONTENTS).open('course/course2.bin')


def test_directory_filesystem(tmp_path):
    (tmp_path / 'Unit').mkdir()
    (tmp_path / 'Unit' / 'Pa0_jyotyu.sarc').write_bytes(b'tileset')

    fs = archive.DirectoryFilesystem(tmp_path)

    assert fs.exists('/Unit/Pa0_jyotyu.sarc')
    assert not fs.exists('Unit')
    assert not fs.exists('Unit/Pa1_nohara.sarc')
    with fs.open('Unit/Pa0_jyotyu.sarc') as f:
        assert f.read() == b'tileset'


def test_load_sarc():
    assert archive.load_sarc(b.pack_sarc(CONTENTS)) == CONTENTS


def test_load_big_endian_sarc():
    assert archive.load_sarc(b.pack_sarc(CONTENTS, endianness='>')) == CONTENTS


def test_load_narc():
    course = ndspy.fnt.Folder(files=['course1.bin', 'course1_bgdatL1.bin'], firstID=0)
    root = ndspy.fnt.Folder(folders=[('course', course)], files=['readme.txt'], firstID=2)
    narc = ndspy.narc.NARC.fromFilesAndNames([b'header 1', b'layer 1', b'hello'], root)

    assert archive.load_narc(narc.save()) == CONTENTS


def test_open_archive_sarc():
    fs = archive.open_archive(b.pack_sarc(CONTENTS))

    with fs.open('course/course1.bin') as f:
        assert f.read() == b'header 1'


def test_open_archive_compressed():
    fs = archive.open_archive(ndspy.lz10.compress(b.pack_sarc(CONTENTS)))

    assert fs.exists('readme.txt')


def test_open_archive_unknown_format():
    with pytest.raises(UnsupportedArchive):
        archive.open_archive(b'U\xAA8-' + bytes(28))
