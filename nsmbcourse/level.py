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
Support for course files (area header + bgdat layers).
"""

import contextlib
import enum
import logging
import struct
import typing

from . import MissingHeader
from . import units
from ._common import MixinPosition, MixinPositionAndSize
from .stream import ByteCursor


log = logging.getLogger(__name__)


NUM_BLOCKS = 17
NUM_TILESET_SLOTS = 4
TILESET_NAME_LENGTH = 32
BACKGROUND_NAME_LENGTH = 16
NUM_LAYERS = 3
NUM_LAYER_FILES = 2

SENTINEL = 0xFFFF
BGDAT_SCALE = 20

ENTRANCE_LENGTH = 24
ZONE_LENGTH = 28
LOCATION_LENGTH = 12
PATH_LENGTH = 12
PATH_NODE_LENGTH = 20
PROGRESS_PATH_LENGTH = 12
PROGRESS_PATH_NODE_LENGTH = 20

COURSE_HEADER_PATH = 'course/course{area}.bin'
BGDAT_PATH = 'course/course{area}_bgdatL{layer}.bin'


class Block(enum.IntEnum):
    """
    Indices of the blocks in a course header that we know how to read
    """
    TILESETS = 0
    AREA_SETTINGS = 1
    ZONE_BOUNDS = 2
    BACKGROUND = 4
    ENTRANCES = 6
    SPRITES = 7
    ZONES = 9
    LOCATIONS = 10
    PATHS = 13
    PATH_NODES = 14
    PROGRESS_PATHS = 15
    PROGRESS_PATH_NODES = 16


########################################################################
############################### Level items ############################
########################################################################


class BlockEntry(typing.NamedTuple):
    """
    One entry of the block directory at the start of a course header
    """
    offset: int
    size: int


class TilesetSlot(typing.NamedTuple):
    """
    A tileset referenced by the course. handle is whatever the tileset
    resolver returned for name.
    """
    name: str
    handle: typing.Any = None


class AreaSettings(typing.NamedTuple):
    time_limit: int


class ZoneBounds(typing.NamedTuple):
    upper: int
    lower: int
    upper_2: int
    lower_2: int
    id: int
    unk_12: int


class Background(typing.NamedTuple):
    id: int
    x_scroll_rate: int
    y_scroll_rate: int
    x: int
    y: int
    name: str
    unk_18: int


class Rect(typing.NamedTuple('Rect', [('x', int), ('y', int), ('width', int), ('height', int)]),
           MixinPositionAndSize):
    """
    A rectangle, in editor units
    """
    __slots__ = ()


class Entrance(typing.NamedTuple('Entrance', [
        ('x', int), ('y', int),
        ('camera_x', int), ('camera_y', int),
        ('unk_08', int), ('destination_area', int), ('destination_id', int), ('type', int),
        ('id', int)]),
        MixinPosition):
    """
    An entrance. id is the entrance's index in the course file.
    """
    __slots__ = ()


class Sprite(typing.NamedTuple('Sprite', [
        ('type', int), ('x', int), ('y', int), ('data', bytes), ('rect', typing.Optional[Rect])]),
        MixinPosition):
    """
    A sprite. data holds the eight settings bytes; rect is the area the
    sprite covers, as given by the sprite size lookup.
    """
    __slots__ = ()


class Zone(typing.NamedTuple('Zone', [('x', int), ('y', int), ('width', int), ('height', int), ('id', int)]),
           MixinPositionAndSize):
    """
    A zone. id is the zone's index in the course file.
    """
    __slots__ = ()


class Location(typing.NamedTuple('Location', [('x', int), ('y', int), ('width', int), ('height', int), ('id', int)]),
               MixinPositionAndSize):
    __slots__ = ()


class PathNode(typing.NamedTuple('PathNode', [('x', int), ('y', int), ('speed', int), ('acceleration', int)]),
               MixinPosition):
    """
    A path node. speed and acceleration are kept as the raw 32-bit
    values; the game treats them as floats.
    """
    __slots__ = ()

    @property
    def speed_float(self):
        return struct.unpack('<f', struct.pack('<I', self.speed))[0]

    @property
    def acceleration_float(self):
        return struct.unpack('<f', struct.pack('<I', self.acceleration))[0]


class Path(typing.NamedTuple):
    id: int
    num_nodes: int
    start_node_index: int
    nodes: typing.Tuple[PathNode, ...]


class ProgressPathNode(typing.NamedTuple('ProgressPathNode', [('x', int), ('y', int)]), MixinPosition):
    __slots__ = ()


class ProgressPath(typing.NamedTuple):
    id: int
    num_nodes: int
    start_node_index: int
    nodes: typing.Tuple[ProgressPathNode, ...]


class BgdatObject(typing.NamedTuple('BgdatObject', [('id', int), ('x', int), ('y', int), ('width', int), ('height', int)]),
                  MixinPositionAndSize):
    """
    An object in a bgdat file. Position and size are in editor units.
    """
    __slots__ = ()

    @property
    def tileset_id(self):
        return self.id >> 12

    @property
    def type(self):
        return self.id & 0xFFF


def default_sprite_rect(sprite):
    """
    Sprite size lookup used when no sprite size table is available: one
    tile at the sprite's position.
    """
    return Rect(sprite.x, sprite.y, 20, 20)


def sprite_rect_from_table(table, default=default_sprite_rect):
    """
    Build a sprite size lookup from a dict mapping sprite types to
    (x offset, y offset, width, height) tuples. Sprite types missing
    from the table are passed to default.
    """
    def sprite_rect(sprite):
        if sprite.type not in table:
            return default(sprite)
        x_offset, y_offset, width, height = table[sprite.type]
        return Rect(sprite.x + x_offset, sprite.y + y_offset, width, height)

    return sprite_rect


########################################################################
############################# Block reading ############################
########################################################################


def read_block_directory(cursor):
    """
    Read the (offset, size) pairs for all blocks from the start of a
    course header.
    """
    cursor.seek(0)
    return tuple(BlockEntry(cursor.read_u32(), cursor.read_u32()) for _ in range(NUM_BLOCKS))


def read_sequential_records(cursor, entry, record_length, read_record):
    """
    Read size // record_length records back-to-back from the start of
    the block. read_record(cursor, index) reads one record's fields;
    whatever it leaves unread of the record is skipped.
    """
    if not entry.size:
        return ()

    cursor.seek(entry.offset)

    records = []
    for i in range(entry.size // record_length):
        start = cursor.position()
        records.append(read_record(cursor, i))
        cursor.skip(record_length - (cursor.position() - start))

    return tuple(records)


def read_indexed_records(cursor, entry, record_length, read_record):
    """
    Read size // record_length records, seeking to each one's offset
    before calling read_record(cursor, index) on it.
    """
    records = []
    for i in range(entry.size // record_length):
        cursor.seek(entry.offset + i * record_length)
        records.append(read_record(cursor, i))

    return tuple(records)


def iter_until_sentinel(cursor, read_record, *, stop_at_end=False):
    """
    Read records in sequence from the current position until one starts
    with a 0xFFFF u16. read_record(cursor, first_u16) reads the rest of
    the record.
    If stop_at_end is True, also stop upon reaching the end of the data.
    """
    while True:
        if stop_at_end and cursor.position() >= cursor.size():
            return

        first = cursor.read_u16()
        if first == SENTINEL:
            return

        yield read_record(cursor, first)


def read_tileset_slots(cursor, entry, resolve_tileset=None):
    """
    Read the four tileset names.
    Empty names become None. If resolve_tileset is given, it's called
    with each name and should return a handle for the tileset, or None
    if it can't be found (raising LookupError, OSError or ValueError
    counts as not found); unresolved tilesets also become None.
    """
    if not entry.size:
        return (None,) * NUM_TILESET_SLOTS

    slots = []
    for slot in range(NUM_TILESET_SLOTS):
        cursor.seek(entry.offset + slot * TILESET_NAME_LENGTH)
        name = cursor.read_fixed_string(TILESET_NAME_LENGTH)

        if not name:
            slots.append(None)
            continue

        if resolve_tileset is None:
            slots.append(TilesetSlot(name))
            continue

        try:
            handle = resolve_tileset(name)
        except (LookupError, OSError, ValueError):
            handle = None

        if handle is None:
            log.debug('Tileset %s not found', name)
            slots.append(None)
        else:
            slots.append(TilesetSlot(name, handle))

    return tuple(slots)


def read_area_settings(cursor, entry):
    if not entry.size:
        return None

    cursor.seek(entry.offset)
    cursor.skip(10)
    settings = AreaSettings(cursor.read_u16())

    log.debug('Time limit: %d', settings.time_limit)
    return settings


def read_zone_bounds(cursor, entry):
    if not entry.size:
        return None

    cursor.seek(entry.offset)
    bounds = ZoneBounds(
        cursor.read_u32(), cursor.read_u32(), cursor.read_u32(), cursor.read_u32(),
        cursor.read_u16(), cursor.read_u16())
    cursor.skip(8)

    log.debug('Zone bounds: %r', bounds)
    return bounds


def read_background(cursor, entry):
    if not entry.size:
        return None

    cursor.seek(entry.offset)
    id = cursor.read_u16()
    x_scroll_rate, y_scroll_rate, x, y = (cursor.read_u8() for _ in range(4))
    cursor.skip(2)
    name = cursor.read_fixed_string(BACKGROUND_NAME_LENGTH)
    unk_18 = cursor.read_u16()
    cursor.skip(2)

    background = Background(id, x_scroll_rate, y_scroll_rate, x, y, name, unk_18)
    log.debug('Background: %r', background)
    return background


def read_entrances(cursor, entry, transform=units.to_20):
    """
    Read the entrances block. The last 12 bytes of each entrance
    (including its ID) aren't loaded; entrances are numbered by index
    instead.
    """
    def read_entrance(cursor, index):
        x, y = transform(cursor.read_u16()), transform(cursor.read_u16())
        camera_x, camera_y = cursor.read_u16(), cursor.read_u16()
        unk_08, destination_area, destination_id, type_ = (cursor.read_u8() for _ in range(4))

        entrance = Entrance(x, y, camera_x, camera_y, unk_08, destination_area, destination_id, type_, index)
        log.debug('Entrance %d at (%d, %d)', index, x, y)
        return entrance

    return read_sequential_records(cursor, entry, ENTRANCE_LENGTH, read_entrance)


def iter_sprites(cursor, entry, transform=units.to_20, sprite_rect=default_sprite_rect):
    """
    Lazily read the sprites block, which is terminated by a sprite of
    type 0xFFFF rather than by the block size.
    """
    if not entry.size:
        return

    def read_sprite(cursor, type_):
        x, y = transform(cursor.read_u16()), transform(cursor.read_u16())
        data = cursor.read(8)
        cursor.skip(10)

        sprite = Sprite(type_, x, y, data, None)
        return sprite._replace(rect=sprite_rect(sprite))

    cursor.seek(entry.offset)
    yield from iter_until_sentinel(cursor, read_sprite)


def read_zones(cursor, entry, transform=units.to_20):
    """
    Read the zones block. Zones are numbered by index.
    """
    def read_zone(cursor, index):
        x, y, width, height = (transform(cursor.read_u16()) for _ in range(4))

        zone = Zone(x, y, width, height, index)
        log.debug('Zone %d: x=%d y=%d width=%d height=%d', index, x, y, width, height)
        return zone

    return read_sequential_records(cursor, entry, ZONE_LENGTH, read_zone)


def read_locations(cursor, entry, transform=units.to_20):
    def read_location(cursor, index):
        x, y, width, height = (transform(cursor.read_u16()) for _ in range(4))
        id = cursor.read_u8()

        log.debug('Location %d: x=%d y=%d width=%d height=%d', id, x, y, width, height)
        return Location(x, y, width, height, id)

    return read_sequential_records(cursor, entry, LOCATION_LENGTH, read_location)


def read_paths(cursor, entry, nodes_entry, transform=units.to_20):
    """
    Read the paths block, along with each path's nodes from the path
    nodes block.
    """
    def read_node(cursor, index):
        x, y = transform(cursor.read_u16()), transform(cursor.read_u16())
        return PathNode(x, y, cursor.read_u32(), cursor.read_u32())

    def read_path(cursor, index):
        id = cursor.read_u8()
        cursor.skip(1)
        num_nodes = cursor.read_u16()
        start_node_index = cursor.read_u16()

        log.debug('Path %d: %d nodes, starting at node %d', id, num_nodes, start_node_index)

        nodes_start = nodes_entry.offset + start_node_index * PATH_NODE_LENGTH
        nodes = read_indexed_records(
            cursor, BlockEntry(nodes_start, num_nodes * PATH_NODE_LENGTH), PATH_NODE_LENGTH, read_node)

        return Path(id, num_nodes, start_node_index, nodes)

    return read_indexed_records(cursor, entry, PATH_LENGTH, read_path)


def read_progress_paths(cursor, entry, nodes_entry, transform=units.to_20):
    """
    Read the progress paths block, along with each progress path's nodes
    from the progress path nodes block.
    """
    def read_node(cursor, index):
        return ProgressPathNode(transform(cursor.read_u16()), transform(cursor.read_u16()))

    def read_progress_path(cursor, index):
        id = cursor.read_u16()
        num_nodes = cursor.read_u16()
        start_node_index = cursor.read_u16()

        log.debug('Progress path %d: %d nodes, starting at node %d', id, num_nodes, start_node_index)

        nodes_start = nodes_entry.offset + start_node_index * PROGRESS_PATH_NODE_LENGTH
        nodes = read_indexed_records(
            cursor, BlockEntry(nodes_start, num_nodes * PROGRESS_PATH_NODE_LENGTH), PROGRESS_PATH_NODE_LENGTH, read_node)

        return ProgressPath(id, num_nodes, start_node_index, nodes)

    return read_indexed_records(cursor, entry, PROGRESS_PATH_LENGTH, read_progress_path)


def iter_bgdat_objects(cursor):
    """
    Lazily read objects from a bgdat file, stopping at the 0xFFFF
    terminator or the end of the data, whichever comes first.
    """
    def read_object(cursor, id):
        x, y, width, height = (cursor.read_u16() * BGDAT_SCALE for _ in range(4))
        cursor.skip(6)
        return BgdatObject(id, x, y, width, height)

    cursor.seek(0)
    yield from iter_until_sentinel(cursor, read_object, stop_at_end=True)


########################################################################
########################### Course file class ##########################
########################################################################


class CourseFile(typing.NamedTuple):
    """
    Everything loaded from one area's course header and bgdat files
    """
    area: int
    tilesets: typing.Tuple[typing.Optional[TilesetSlot], ...]
    area_settings: typing.Optional[AreaSettings]
    zone_bounds: typing.Optional[ZoneBounds]
    background: typing.Optional[Background]
    entrances: typing.Tuple[Entrance, ...]
    sprites: typing.Tuple[Sprite, ...]
    zones: typing.Tuple[Zone, ...]
    locations: typing.Tuple[Location, ...]
    paths: typing.Tuple[Path, ...]
    progress_paths: typing.Tuple[ProgressPath, ...]
    objects: typing.Tuple[typing.Tuple[BgdatObject, ...], ...]

    @property
    def tileset_names(self):
        return [None if slot is None else slot.name for slot in self.tilesets]


    def map_position_to_zone(self, x, y):
        """
        Return the Zone containing or nearest the specified position
        (in editor units).
        If the position is within multiple zones, return the first one.
        If there are no zones at all, return None.
        """
        # Zones containing the position are at distance 0, so the first
        # of those wins
        return min(self.zones, key=lambda z: z.distance_to(x, y), default=None)


def decode_course_file(header, layers=(), area=1, *,
        resolve_tileset=None, transform=units.to_20, sprite_rect=default_sprite_rect, endianness='<'):
    """
    Decode one area from its course header and up to two bgdat layers.

    header and each entry of layers can be a seekable binary file-like
    object or a bytes-like object. Missing layers can be None.
    transform converts positions from the file's units to editor units.
    """
    if header is None:
        raise MissingHeader(f'Area {area} has no course header')
    if len(layers) > NUM_LAYER_FILES:
        raise ValueError(f'Expected at most {NUM_LAYER_FILES} bgdat layers, got {len(layers)}')

    cursor = ByteCursor(header, endianness)
    blocks = read_block_directory(cursor)

    tilesets = read_tileset_slots(cursor, blocks[Block.TILESETS], resolve_tileset)
    area_settings = read_area_settings(cursor, blocks[Block.AREA_SETTINGS])
    zone_bounds = read_zone_bounds(cursor, blocks[Block.ZONE_BOUNDS])
    background = read_background(cursor, blocks[Block.BACKGROUND])
    entrances = read_entrances(cursor, blocks[Block.ENTRANCES], transform)
    sprites = tuple(iter_sprites(cursor, blocks[Block.SPRITES], transform, sprite_rect))
    zones = read_zones(cursor, blocks[Block.ZONES], transform)
    locations = read_locations(cursor, blocks[Block.LOCATIONS], transform)
    paths = read_paths(cursor, blocks[Block.PATHS], blocks[Block.PATH_NODES], transform)
    progress_paths = read_progress_paths(
        cursor, blocks[Block.PROGRESS_PATHS], blocks[Block.PROGRESS_PATH_NODES], transform)

    # The third layer is never stored in a bgdat file we read here
    objects = [()] * NUM_LAYERS
    for i, layer in enumerate(layers):
        if layer is not None:
            objects[i] = tuple(iter_bgdat_objects(ByteCursor(layer, endianness)))

    return CourseFile(
        area, tilesets, area_settings, zone_bounds, background, entrances, sprites,
        zones, locations, paths, progress_paths, tuple(objects))


def load_area(fs, area, **kwargs):
    """
    Load an area from a filesystem (see the archive module) containing
    course/courseN.bin and, optionally, course/courseN_bgdatL1.bin and
    course/courseN_bgdatL2.bin.
    Keyword arguments are passed on to decode_course_file().
    """
    header_path = COURSE_HEADER_PATH.format(area=area)
    if not fs.exists(header_path):
        raise MissingHeader(f'Area {area} has no course header ({header_path})')

    with contextlib.ExitStack() as stack:
        header = stack.enter_context(fs.open(header_path))

        layers = []
        for layer in range(1, NUM_LAYER_FILES + 1):
            path = BGDAT_PATH.format(area=area, layer=layer)
            if fs.exists(path):
                layers.append(stack.enter_context(fs.open(path)))
            else:
                layers.append(None)

        return decode_course_file(header, layers, area, **kwargs)
