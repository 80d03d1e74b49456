#!/usr/bin/env python3
# -*- coding: utf-8 -*-
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
Program to compute an order-independent checksum of a directory tree.
"""

import argparse
import logging
import sys

import sha1dir.checksum as checksum
import sha1dir.configlib as configlib
from sha1dir.errors import ConfigError, Sha1dirError
import sha1dir.parallel as parallel
from sha1dir.utils import MAX_DEFAULT_JOBS
import sha1dir.walking as walking


_log = logging.getLogger(__name__)

VERSION = '0.0.1'     # Program version

PROG = 'sha1dir'

CURRENT_DIR = '.'


#--- Command line arguments: ---

DESCRIPTION = """\
Compute checksum of directory.

Prints one line per directory: the SHA-1 based checksum of the whole
tree, as 40 hex characters, followed by the directory as given.  If no
directory is given, the current directory is checksummed and only the
checksum is printed.

The checksum covers the name, mode, and contents of every file, symlink,
directory, and socket in the tree, and does not depend on the order in
which they are read.
"""

def positive_int(text):
    """
    Parse a command-line value that must be a positive integer.
    """
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'invalid int value: {text!r}')

    if value < 1:
        raise argparse.ArgumentTypeError(f'must be positive: {value}')

    return value


def parse_args(args=None):
    """
    Parse sys.argv (or the given list of arguments), and return a
    Namespace object.
    """
    parser = argparse.ArgumentParser(prog=PROG, description=DESCRIPTION,
                    formatter_class=argparse.RawDescriptionHelpFormatter)

    parser.add_argument('--version', action='version', version='%(prog)s '+VERSION)
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable verbose info printout')
    parser.add_argument('--debug', action='store_true', help='enable debug printout')
    parser.add_argument('--config-path', '-c', dest='config_path', metavar='PATH',
                        help='path to the configuration file to use')
    parser.add_argument('-j', '--jobs', metavar='N', type=positive_int,
                        help=('number of hashes to compute in parallel. '
                              f'Defaults to the number of CPUs, up to {MAX_DEFAULT_JOBS}.'))
    parser.add_argument('--exclude-rootdir-metadata', action='store_true', default=None,
                        help=("leave the root directory's own mode out of the "
                              'checksum (e.g. for trees copied with differing root '
                              'permissions).'))
    parser.add_argument('--ignore-unknown-filetypes', action='store_true', default=None,
                        help=('skip entries that are not a file, symlink, directory, '
                              'or socket, instead of failing.'))
    parser.add_argument('dirs', metavar='DIR', nargs='*', help='directories to hash')

    ns = parser.parse_args(args)

    return ns


def get_log_level(ns, default_log_level=None):
    """
    Return the log level to use for the parsed command-line arguments.

    The default is WARNING so that skipped entries are reported even
    without --verbose.
    """
    if default_log_level is None:
        default_log_level = logging.WARNING

    if ns.debug:
        return logging.DEBUG
    if ns.verbose:
        return logging.INFO

    return default_log_level


#--- Top level processing: ---

def checksum_tree(root, options=None):
    """
    Compute the checksum of the directory tree at the given path, and
    return it as 20 bytes.

    Raises InputError if the root is missing or not a directory, and
    TreeReadError if any part of the tree can't be read.

    Args:
      root: a path-like object.
      options: a configlib.TreeOptions object.  Defaults to the values
        returned by configlib.make_tree_options().
    """
    if options is None:
        options = configlib.make_tree_options()

    entries = walking.walk_tree(root, ignore_unknown_filetypes=options.ignore_unknown_filetypes)
    value = parallel.checksum_parallel(entries, jobs=options.jobs,
                                       exclude_root_mode=options.exclude_rootdir_metadata)

    return value


def format_line(value, label=None):
    """
    Return the output line for a checksum, without the trailing newline.

    Args:
      value: a checksum, as bytes.
      label: the directory as given on the command line, or None.
    """
    hex_checksum = checksum.format_checksum(value)
    if label is None:
        return hex_checksum

    return f'{hex_checksum}  {label}'


def report_error(error):
    print(f'{PROG}: {error}', file=sys.stderr)


def run(dirs=None, options=None):
    """
    Print the checksum of each directory, and return the exit status.

    An error in one directory is reported to stderr and processing
    continues with the next directory, but no line is printed for the
    failed directory.

    Args:
      dirs: a list of directory paths, as strings.  If empty, the current
        directory is used.
      options: a configlib.TreeOptions object.

    Returns: 0 if every directory succeeded, otherwise 1.
    """
    if options is None:
        options = configlib.make_tree_options()

    if dirs:
        labeled_dirs = [(path, path) for path in dirs]
    else:
        labeled_dirs = [(CURRENT_DIR, None)]

    status = 0
    for path, label in labeled_dirs:
        _log.info(f'computing checksum of: {path}')
        try:
            value = checksum_tree(path, options=options)
        except Sha1dirError as exc:
            _log.debug(f'checksum failed for {path}', exc_info=True)
            report_error(exc)
            status = 1
            continue

        print(format_line(value, label=label))

    return status


def main(args=None):
    ns = parse_args(args)

    logging.basicConfig(level=get_log_level(ns))

    try:
        config = configlib.Config(ns.config_path)
    except ConfigError as exc:
        report_error(exc)
        sys.exit(2)

    options = configlib.make_tree_options(config, jobs=ns.jobs,
                exclude_rootdir_metadata=ns.exclude_rootdir_metadata,
                ignore_unknown_filetypes=ns.ignore_unknown_filetypes)
    _log.debug(f'using options: {options}')

    status = run(ns.dirs, options=options)

    sys.exit(status)


if __name__ == '__main__':
    main()
