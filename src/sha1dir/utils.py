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
Simple helper functions.
"""

from contextlib import contextmanager
import logging
import os
from pathlib import Path, PurePath

import yaml


_log = logging.getLogger(__name__)

UTF8_ENCODING = 'utf-8'

# The buffer size to use when reading file contents for hashing.
HASH_BYTES = 2 ** 16  # 64K

# The separator to use between path components in an entry's relative
# path, on every platform.
PATH_SEP = b'/'

# Limit the default number of workers to avoid thrashing the disk.
MAX_DEFAULT_JOBS = 8


def truncate(obj):
    """
    Return an object representation guaranteed not to exceed a reasonable
    length.  This is useful e.g. for logging.

    >>> truncate('abc')
    "'abc'"
    """
    if type(obj) != str:
        obj = repr(obj)
    if len(obj) > 40:
        # Add an ellipsis to indicate that a truncation occurred.
        return f'{obj[:40]!r}...'

    return repr(obj)


@contextmanager
def changing_cwd(dir_path):
    """
    Temporarily change the current working directory.
    """
    initial_cwd = os.getcwd()
    try:
        os.chdir(dir_path)
        yield
    finally:
        # Change back.
        os.chdir(initial_cwd)


def default_jobs():
    """
    Return the number of worker threads to use when none is configured.
    """
    cpu_count = os.cpu_count() or 1

    return min(cpu_count, MAX_DEFAULT_JOBS)


def to_path_bytes(rel_path):
    """
    Convert a relative path to the bytes used in an entry's encoding.

    The OS name bytes are passed through unchanged (via os.fsencode()),
    and the components are joined with "/" regardless of platform.

    Args:
      rel_path: a path-like object relative to the tree root.

    >>> to_path_bytes(Path('sub') / 'b.txt')
    b'sub/b.txt'
    """
    if not isinstance(rel_path, PurePath):
        rel_path = Path(rel_path)
    parts = rel_path.parts
    if not parts:
        return b'.'

    return PATH_SEP.join(os.fsencode(part) for part in parts)


def iter_file_chunks(path, chunk_size=None):
    """
    Yield the contents of a file as a sequence of byte strings.

    Args:
      path: a path-like object.
      chunk_size: the maximum number of bytes per chunk.  Defaults to
        HASH_BYTES.
    """
    if chunk_size is None:
        chunk_size = HASH_BYTES

    with open(path, mode='rb') as f:
        while True:
            data = f.read(chunk_size)
            if not data:
                break
            yield data


def read_yaml(path):
    """
    Read the specified YAML file into a python data structure.
    """
    _log.debug(f'read_yaml({path})')
    with open(path, encoding=UTF8_ENCODING) as f:
        data = yaml.safe_load(f)

    return data
