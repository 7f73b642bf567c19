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
Conversions between the game's coordinate units and the editor's.

Course files measure positions in 16ths of a tile. The editor draws
tiles 20 pixels wide, so positions are scaled by 20/16 on load.
"""


def to_20(value):
    """
    Convert a position from 16-units-per-tile to 20-units-per-tile
    """
    return value * 20 // 16


def to_16(value):
    """
    Convert a position from 20-units-per-tile back to 16-units-per-tile
    """
    return value * 16 // 20
