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
Helper script to check that a directory was copied without corruption,
by comparing the checksums of the original and the copy.

Usage: python scripts/compare-directories.py [--exclude-rootdir-metadata] DIR1 DIR2

Prints both checksums to stdout, and exits with status 1 if they differ.
Use --exclude-rootdir-metadata if the copy's root directory was created
with different permissions (e.g. `cp -r` into an existing directory).
"""

import logging
import sys

import sha1dir.checksum as checksum
import sha1dir.configlib as configlib
import sha1dir.main as sha1dir_main


EXCLUDE_FLAG = '--exclude-rootdir-metadata'


def compare_directories(dir_path1, dir_path2, exclude_rootdir_metadata=False):
    """
    Return the two checksums, as hex strings.
    """
    options = configlib.make_tree_options(exclude_rootdir_metadata=exclude_rootdir_metadata)
    return tuple(
        checksum.format_checksum(sha1dir_main.checksum_tree(path, options=options))
        for path in (dir_path1, dir_path2)
    )


def main():
    logging.basicConfig(level=logging.INFO)

    args = sys.argv[1:]
    exclude_rootdir_metadata = EXCLUDE_FLAG in args
    paths = [arg for arg in args if arg != EXCLUDE_FLAG]

    if len(paths) != 2:
        raise RuntimeError(f'expected two directory paths, got: {paths}')

    dir_path1, dir_path2 = paths
    hex1, hex2 = compare_directories(dir_path1, dir_path2,
                                     exclude_rootdir_metadata=exclude_rootdir_metadata)

    print(f'{hex1}  {dir_path1}')
    print(f'{hex2}  {dir_path2}')

    if hex1 != hex2:
        print('checksums differ', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
