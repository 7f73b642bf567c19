# Copyright 2019 RoadrunnerWMC
#
# This file is part of nsmbcourse.
#
# nsmbcourse is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# nsmbcourse is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with nsmbcourse.  If not, see <https://www.gnu.org/licenses/>.
"""
Access to the course and tileset files in an extracted game.
"""

import typing

from . import MissingCourse
from . import archive
from . import level


TILESET_FOLDER = 'Unit'
COURSE_FOLDER = 'Course'
ARCHIVE_EXTENSION = '.sarc'


class TilesetRef(typing.NamedTuple):
    """
    A tileset found in the game's files
    """
    name: str
    path: str


def _with_extension(name):
    if not name.endswith(ARCHIVE_EXTENSION):
        name += ARCHIVE_EXTENSION
    return name


class Game:
    """
    A game's files, accessed through a filesystem (see the archive
    module)
    """

    def __init__(self, fs):
        self.fs = fs


    @classmethod
    def from_directory(cls, path):
        return cls(archive.DirectoryFilesystem(path))


    def tileset_path(self, name):
        return f'{TILESET_FOLDER}/{_with_extension(name)}'


    def resolve_tileset(self, name):
        """
        Return a TilesetRef for the named tileset, or None if the game
        doesn't have it
        """
        path = self.tileset_path(name)
        if not self.fs.exists(path):
            return None
        return TilesetRef(name, path)


    def course_archive_path(self, world, level_num):
        return f'{COURSE_FOLDER}/{world}-{level_num}{ARCHIVE_EXTENSION}'


    def open_course_archive(self, world, level_num):
        """
        Open the archive holding all areas of a level
        """
        path = self.course_archive_path(world, level_num)
        if not self.fs.exists(path):
            raise MissingCourse(f'Level {world}-{level_num} not found ({path})')

        with self.fs.open(path) as f:
            return archive.open_archive(f.read())


    def load_area(self, world, level_num, area, **kwargs):
        """
        Load one area of a level, resolving its tilesets against this
        game's files.
        Keyword arguments are passed on to level.decode_course_file().
        """
        kwargs.setdefault('resolve_tileset', self.resolve_tileset)
        return level.load_area(self.open_course_archive(world, level_num), area, **kwargs)
