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
Enumerating the entries of a directory tree.
"""

import logging
import os
from pathlib import Path
import stat

from sha1dir.encoding import (DIRECTORY, Entry, FILE, ROOT_REL_PATH, SOCKET,
    SYMLINK)
from sha1dir.errors import (InputError, TreeReadError, UnsupportedFileTypeError,
    os_error_reason)
import sha1dir.utils as utils


_log = logging.getLogger(__name__)


def _lstat(path):
    try:
        return os.lstat(path)
    except OSError as exc:
        raise TreeReadError(path, os_error_reason(exc)) from exc


def list_dir(dir_path, reverse=False):
    """
    Return the paths of the children of a directory, sorted by name.

    Args:
      dir_path: a Path object.
      reverse: whether to reverse the order.  The checksum does not
        depend on the order, and this makes that easy to check.
    """
    try:
        names = os.listdir(dir_path)
    except OSError as exc:
        raise TreeReadError(dir_path, os_error_reason(exc)) from exc

    names.sort(reverse=reverse)

    return [dir_path / name for name in names]


def make_root_entry(root):
    """
    Return the Entry for the root directory itself.

    The root is stat'ed following symlinks, so a symlink to a directory
    can be given as the root.

    Raises InputError if the root does not exist or is not a directory.
    """
    try:
        st = os.stat(root)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise InputError(root, exc.strerror) from exc
    except OSError as exc:
        raise TreeReadError(root, os_error_reason(exc)) from exc

    if not stat.S_ISDIR(st.st_mode):
        raise InputError(root, 'Not a directory')

    return Entry(DIRECTORY, ROOT_REL_PATH, st.st_mode, source=root, is_root=True)


def make_entry(root, path, ignore_unknown_filetypes=False):
    """
    Return the Entry for a path inside the tree, or None if the entry
    should be skipped.

    Symlinks are never followed.

    Args:
      root: the tree root, as a Path object.
      path: a Path object inside the root.
      ignore_unknown_filetypes: whether to skip entries that are not a
        file, symlink, directory, or socket.  Otherwise they raise
        UnsupportedFileTypeError.
    """
    st = _lstat(path)
    mode = st.st_mode
    rel_path = utils.to_path_bytes(path.relative_to(root))

    if stat.S_ISREG(mode):
        return Entry(FILE, rel_path, mode, source=path)

    if stat.S_ISLNK(mode):
        try:
            target = os.readlink(path)
        except OSError as exc:
            raise TreeReadError(path, os_error_reason(exc)) from exc
        return Entry(SYMLINK, rel_path, mode, link_target=os.fsencode(target),
                     source=path)

    if stat.S_ISDIR(mode):
        return Entry(DIRECTORY, rel_path, mode, source=path)

    if stat.S_ISSOCK(mode):
        return Entry(SOCKET, rel_path, mode, source=path)

    if ignore_unknown_filetypes:
        _log.warning(f'skipping entry with unsupported file type: {path}')
        return None

    raise UnsupportedFileTypeError(path, 'Unsupported file type')


def walk_tree(root, ignore_unknown_filetypes=False, reverse=False):
    """
    Yield an Entry for every filesystem object in a tree, starting with
    the root itself.

    Directories are visited using an explicit stack rather than
    recursion, so deep trees don't exhaust the call stack.  Entries are
    yielded as they are discovered and nothing is retained.

    Args:
      root: a path-like object.
      ignore_unknown_filetypes: see make_entry().
      reverse: see list_dir().
    """
    root = Path(root)
    yield make_root_entry(root)

    pending = [root]
    while pending:
        dir_path = pending.pop()
        _log.debug(f'listing directory: {dir_path}')
        for path in list_dir(dir_path, reverse=reverse):
            entry = make_entry(root, path, ignore_unknown_filetypes=ignore_unknown_filetypes)
            if entry is None:
                continue
            if entry.kind == DIRECTORY:
                pending.append(path)

            yield entry
