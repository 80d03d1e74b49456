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
Digesting entries and combining the digests into a tree checksum.

The checksum of a tree is the XOR of the SHA-1 digests of the bodies of
all its entries.  XOR is commutative and associative, so the result does
not depend on the order in which entries are visited, and partial
results computed separately can be merged at the end.

Since XOR is its own inverse, two entries with identical bodies cancel
each other out.
"""

from functools import reduce
import hashlib

import sha1dir.encoding as encoding


DIGEST_SIZE = 20

# The starting value of the accumulator, and the checksum of nothing.
ZERO_CHECKSUM = bytes(DIGEST_SIZE)


def new_hasher():
    return hashlib.sha1()


def digest_entry(entry, exclude_root_mode=False):
    """
    Return the SHA-1 digest of an entry's body, as 20 bytes.
    """
    hasher = new_hasher()
    for chunk in encoding.iter_body(entry, exclude_root_mode=exclude_root_mode):
        hasher.update(chunk)

    return hasher.digest()


def accumulate(running, digest):
    """
    Combine a digest into a running checksum, and return the new value.

    >>> accumulate(ZERO_CHECKSUM, bytes(19) + b'\\x05').hex()[-2:]
    '05'
    """
    if len(running) != DIGEST_SIZE or len(digest) != DIGEST_SIZE:
        raise ValueError(f'expected {DIGEST_SIZE}-byte values, got: '
                         f'{len(running)} and {len(digest)}')

    return bytes(x ^ y for x, y in zip(running, digest))


def combine(digests):
    """
    Reduce an iterable of digests (or partial checksums) to a checksum.
    """
    return reduce(accumulate, digests, ZERO_CHECKSUM)


def checksum_entries(entries, exclude_root_mode=False):
    """
    Digest each entry in turn and return the combined checksum.
    """
    digests = (digest_entry(entry, exclude_root_mode=exclude_root_mode)
               for entry in entries)

    return combine(digests)


def format_checksum(checksum):
    """
    Return a checksum as 40 lowercase hexadecimal characters.

    >>> format_checksum(ZERO_CHECKSUM)
    '0000000000000000000000000000000000000000'
    """
    return checksum.hex()
