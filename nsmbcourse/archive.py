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
Named-file access for course data: archives (SARC, NARC) and folders
on disk.

Every filesystem class here provides the same two methods:

    exists(path) -> bool
    open(path) -> binary file-like object (usable as a context manager)

Paths use "/" as a separator, and leading slashes are ignored.
"""

import io
import pathlib
from typing import Dict, Union

import ndspy.lz10
import ndspy.narc
import SarcLib

from . import UnsupportedArchive


SARC_MAGIC = b'SARC'
NARC_MAGIC = b'NARC'
LZ10_MAGIC = 0x10

ArchiveFolder = Dict
PathLike = Union[str, 'pathlib.Path']


def _split_path(path):
    return [part for part in str(path).split('/') if part]


class ArchiveFilesystem:
    """
    Filesystem backed by an in-memory folder tree: a dict mapping names
    to either bytes (files) or more dicts (folders)
    """
    contents: ArchiveFolder

    def __init__(self, contents=None):
        self.contents = contents if contents is not None else {}

    def _lookup(self, path):
        node = self.contents
        for part in _split_path(path):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def exists(self, path):
        return isinstance(self._lookup(path), (bytes, bytearray))

    def open(self, path):
        node = self._lookup(path)
        if not isinstance(node, (bytes, bytearray)):
            raise FileNotFoundError(path)
        return io.BytesIO(node)


class DirectoryFilesystem:
    """
    Filesystem backed by a folder on disk (for example, an extracted
    game root)
    """
    root: pathlib.Path

    def __init__(self, root: PathLike):
        self.root = pathlib.Path(root)

    def _resolve(self, path):
        return self.root.joinpath(*_split_path(path))

    def exists(self, path):
        return self._resolve(path).is_file()

    def open(self, path):
        return open(self._resolve(path), 'rb')


def load_sarc(data: bytes) -> ArchiveFolder:
    """
    Read a SARC archive and return its contents as a dict.
    """
    # Byte-order mark at 0x06
    endianness = '>' if data[6:8] == b'\xFE\xFF' else '<'
    arc = SarcLib.SARC_Archive(data, endianness)

    def convert_folder(folder) -> ArchiveFolder:
        contents = {}
        for item in folder.contents:
            if isinstance(item, SarcLib.File):
                contents[item.name] = bytes(item.data)
            else:
                contents[item.name] = convert_folder(item)
        return contents

    return convert_folder(arc)


def load_narc(data: bytes) -> ArchiveFolder:
    """
    Read a NARC archive and return its contents as a dict.
    """
    narc = ndspy.narc.NARC(data)

    def convert_folder(folder) -> ArchiveFolder:
        contents = {}
        for i, name in enumerate(folder.files):
            contents[name] = narc.files[folder.firstID + i]
        for name, subfolder in folder.folders:
            contents[name] = convert_folder(subfolder)
        return contents

    return convert_folder(narc.filenames)


def open_archive(data: bytes) -> ArchiveFilesystem:
    """
    Detect the archive format of data (SARC or NARC, optionally
    LZ10-compressed) and return a filesystem for its contents.
    """
    if data[:1] == bytes([LZ10_MAGIC]):
        data = ndspy.lz10.decompress(data)

    if data.startswith(SARC_MAGIC):
        return ArchiveFilesystem(load_sarc(data))
    elif data.startswith(NARC_MAGIC):
        return ArchiveFilesystem(load_narc(data))

    raise UnsupportedArchive(f'Unknown archive format (starts with {data[:4]})')
