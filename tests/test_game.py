import pytest

from nsmbcourse import MissingCourse, MissingHeader
from nsmbcourse import archive
from nsmbcourse import game
from nsmbcourse import level

from . import builders as b


def make_game():
    course_archive = b.pack_sarc({'course': {
        'course1.bin': b.pack_course({
            0: b.tilesets_block('Pa0_jyotyu', 'Pa1_deleted'),
            1: b.area_settings_block(300),
        }),
        'course1_bgdatL1.bin': b.bgdat_object(1, 0, 0, 2, 2) + b.BGDAT_END,
    }})

    return game.Game(archive.ArchiveFilesystem({
        'Course': {'1-1.sarc': course_archive},
        'Unit': {'Pa0_jyotyu.sarc': b'tileset'},
    }))


def test_resolve_tileset():
    g = make_game()

    assert g.resolve_tileset('Pa0_jyotyu') == game.TilesetRef('Pa0_jyotyu', 'Unit/Pa0_jyotyu.sarc')
    assert g.resolve_tileset('Pa0_jyotyu.sarc') == game.TilesetRef('Pa0_jyotyu.sarc', 'Unit/Pa0_jyotyu.sarc')
    assert g.resolve_tileset('Pa1_deleted') is None


def test_course_archive_path():
    assert make_game().course_archive_path(3, 12) == 'Course/3-12.sarc'


def test_load_area():
    course = make_game().load_area(1, 1, 1)

    assert course.tilesets == (
        level.TilesetSlot('Pa0_jyotyu', game.TilesetRef('Pa0_jyotyu', 'Unit/Pa0_jyotyu.sarc')),
        None,
        None,
        None,
    )
    assert course.area_settings.time_limit == 300
    assert course.objects[0] == (level.BgdatObject(1, 0, 0, 40, 40),)


def test_load_area_custom_resolver():
    course = make_game().load_area(1, 1, 1, resolve_tileset=lambda name: name.upper())

    assert course.tileset_names == ['Pa0_jyotyu', 'Pa1_deleted', None, None]
    assert course.tilesets[1].handle == 'PA1_DELETED'


def test_missing_level():
    with pytest.raises(MissingCourse):
        make_game().load_area(1, 2, 1)


def test_missing_area():
    with pytest.raises(MissingHeader):
        make_game().load_area(1, 1, 2)


def test_from_directory(tmp_path):
    (tmp_path / 'Unit').mkdir()
    (tmp_path / 'Unit' / 'Pa0_jyotyu.sarc').write_bytes(b'')

    g = game.Game.from_directory(tmp_path)

    assert g.resolve_tileset('Pa0_jyotyu') is not None


def test_load_area_from_sarc_on_disk(tmp_path):
    (tmp_path / 'Course').mkdir()
    (tmp_path / 'Course' / '1-1.sarc').write_bytes(b.pack_sarc({'course': {
        'course1.bin': b.pack_course({1: b.area_settings_block(300)}),
    }}))

    course = game.Game.from_directory(tmp_path).load_area(1, 1, 1)

    assert course.area_settings.time_limit == 300
    assert course.tilesets == (None, None, None, None)
