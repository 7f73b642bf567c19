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
Library for reading course (level area) files from the New Super Mario
Bros. series.

Exceptions shared by all modules are defined here.
"""

import logging


logging.getLogger(__name__).addHandler(logging.NullHandler())


class DecodeError(ValueError):
    """
    Base class for errors raised while decoding course data
    """


class MissingHeader(DecodeError):
    """
    The course header file for the requested area doesn't exist
    """


class TruncatedRead(DecodeError):
    """
    A read or seek went past the end of the data
    """


class MissingCourse(DecodeError):
    """
    The course archive for the requested level doesn't exist
    """


class UnsupportedArchive(DecodeError):
    """
    The data isn't in any archive format we know how to open
    """
