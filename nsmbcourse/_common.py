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
Functions and classes that don't need their own modules.
"""

import math


def decode_fixed_string(data, encoding='latin-1'):
    """
    Decode a string stored in a fixed-length field: everything up to the
    first null byte, without trailing space padding.
    """
    return bytes(data).split(b'\0', 1)[0].decode(encoding).rstrip(' ')


class MixinPosition:
    """
    Mixin that adds a position property to a class with x and y
    attributes
    """
    __slots__ = ()

    @property
    def position(self):
        return (self.x, self.y)


class MixinPositionAndSize(MixinPosition):
    """
    Mixin that adds position, size, and dimensions properties to a class
    with x, y, width and height attributes
    """
    __slots__ = ()

    @property
    def size(self):
        return (self.width, self.height)

    @property
    def dimensions(self):
        return (self.x, self.y, self.width, self.height)

    def distance_to(self, x, y):
        """
        Distance from the point to the nearest point of this rectangle
        (0 if it's inside)
        """
        dx = max(self.x - x, 0, x - (self.x + self.width))
        dy = max(self.y - y, 0, y - (self.y + self.height))
        return math.hypot(dx, dy)
