#
# sha1dir - order-independent checksum of a directory tree
# Copyright (C) 2018  Chris Jerdonek
#
# This file is part of sha1dir.
#
# sha1dir is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
#

"""
The exceptions raised while computing directory checksums.

Only main() catches these, to report them and set the exit status.
"""


class Sha1dirError(Exception):

    """
    Base class for all errors raised by sha1dir.
    """


class ConfigError(Sha1dirError):

    """
    The configuration file is invalid (unknown key, wrong value type, etc).
    """


class PathError(Sha1dirError):

    """
    An error associated with a particular filesystem path.

    Attributes:
      path: the offending path, as given or discovered.
      reason: a short description of what went wrong (e.g. the
        underlying OSError).
    """

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f'{path}: {reason}')


class InputError(PathError):

    """
    A root path does not exist or is not a directory.

    This is reported per root and does not stop other roots from being
    processed.
    """


class TreeReadError(PathError):

    """
    Reading the tree failed (file content, link target, directory
    listing, or lstat).  No checksum is emitted for the root.
    """


class EncodingOverflowError(TreeReadError):

    """
    A value does not fit in the 4-byte field reserved for it.
    """


class UnsupportedFileTypeError(TreeReadError):

    """
    An entry is neither a file, symlink, directory, nor socket.
    """


def os_error_reason(exc):
    """
    Return the reason to report for an OSError, without the file name
    the OSError's own message includes.
    """
    if exc.strerror:
        return exc.strerror

    return str(exc)
