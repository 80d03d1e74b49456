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
The canonical byte encoding ("body") of a single filesystem entry.

Every body starts with the same header:

    kind (1 byte) | len(rel_path) (4 bytes, LE) | rel_path | mode (4 bytes, LE)

followed by the file content (files), the link target (symlinks), or
nothing (directories and sockets).  The link target has no length prefix
since it is always the remainder of the body.

Path bytes are taken from the OS as-is (see utils.to_path_bytes()), so
names that are not valid UTF-8 are encoded byte for byte.
"""

from collections import namedtuple
import os
import struct

from sha1dir.errors import EncodingOverflowError, TreeReadError, os_error_reason
import sha1dir.utils as utils


FILE = b'f'
SYMLINK = b'l'
DIRECTORY = b'd'
SOCKET = b's'

KINDS = (FILE, SYMLINK, DIRECTORY, SOCKET)

MAX_UINT32 = 2 ** 32 - 1

_UINT32 = struct.Struct('<I')

ROOT_REL_PATH = b'.'

# Attributes:
#   kind: one of FILE, SYMLINK, DIRECTORY, or SOCKET.
#   rel_path: the path relative to the tree root, as bytes, using "/" as
#     the separator.  This is ROOT_REL_PATH for the root itself.
#   mode: the st_mode reported by lstat().
#   content: for files, optionally the content as bytes.  If None, the
#     content is read from `source` when the body is generated.
#   link_target: for symlinks, the target path as bytes.
#   source: the path on disk, used for reading content and for error
#     messages.
#   is_root: whether the entry is the tree root.
Entry = namedtuple('Entry', 'kind, rel_path, mode, content, link_target, source, is_root',
                   defaults=(None, None, None, False))


def describe(entry):
    """
    Return a path for the entry suitable for error messages.
    """
    if entry.source is not None:
        return entry.source

    return os.fsdecode(entry.rel_path)


def pack_uint32(value, entry, field):
    """
    Encode a value as a 4-byte little-endian unsigned integer.

    Raises EncodingOverflowError rather than truncating.

    Args:
      field: the name of the value, for the error message.
    """
    if not 0 <= value <= MAX_UINT32:
        msg = f'{field} does not fit in 4 bytes: {value}'
        raise EncodingOverflowError(describe(entry), msg)

    return _UINT32.pack(value)


def encode_header(entry, exclude_root_mode=False):
    """
    Return the part of the body shared by all kinds of entry.

    Args:
      exclude_root_mode: whether to leave out the mode if the entry is
        the tree root.  This lets trees copied with differing root
        permissions produce the same checksum.
    """
    if entry.kind not in KINDS:
        raise ValueError(f'invalid entry kind: {entry.kind!r}')

    rel_path = entry.rel_path
    parts = [
        entry.kind,
        pack_uint32(len(rel_path), entry, field='path length'),
        rel_path,
    ]
    if not (exclude_root_mode and entry.is_root):
        parts.append(pack_uint32(entry.mode, entry, field='mode'))

    return b''.join(parts)


def _iter_content(entry):
    if entry.content is not None:
        yield entry.content
        return

    path = entry.source
    if path is None:
        raise ValueError(f'file entry has neither content nor source: {entry.rel_path!r}')
    try:
        yield from utils.iter_file_chunks(path)
    except OSError as exc:
        raise TreeReadError(path, os_error_reason(exc)) from exc


def iter_body(entry, exclude_root_mode=False):
    """
    Yield the body of an entry as a sequence of byte strings.

    File content is yielded in chunks, so the body of a large file is
    never held in memory at once.
    """
    yield encode_header(entry, exclude_root_mode=exclude_root_mode)

    if entry.kind == FILE:
        yield from _iter_content(entry)
    elif entry.kind == SYMLINK:
        if entry.link_target is None:
            raise ValueError(f'symlink entry has no target: {entry.rel_path!r}')
        yield entry.link_target


def encode_entry(entry, exclude_root_mode=False):
    """
    Return the full body of an entry, as bytes.
    """
    return b''.join(iter_body(entry, exclude_root_mode=exclude_root_mode))
