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
Test the sha1dir.checksum module.
"""

import hashlib
from itertools import permutations
from unittest import TestCase

import sha1dir.checksum as checksum
from sha1dir.checksum import ZERO_CHECKSUM
import sha1dir.encoding as encoding
from sha1dir.encoding import DIRECTORY, Entry, FILE, SYMLINK
from sha1dir.tests.testhelpers import xor_bytes


def make_entries():
    return [
        Entry(DIRECTORY, b'.', 0o40755, is_root=True),
        Entry(FILE, b'a', 0o100644, content=b'aaa'),
        Entry(DIRECTORY, b'sub', 0o40700),
        Entry(SYMLINK, b'sub/ln', 0o120777, link_target=b'../a'),
    ]


class ChecksumModuleTest(TestCase):

    """
    Test the functions in sha1dir.checksum.
    """

    def test_digest_entry(self):
        for entry in make_entries():
            with self.subTest(entry=entry):
                expected = hashlib.sha1(encoding.encode_entry(entry)).digest()
                actual = checksum.digest_entry(entry)
                self.assertEqual(actual, expected)
                self.assertEqual(len(actual), checksum.DIGEST_SIZE)

    def test_digest_entry__exclude_root_mode(self):
        entry = Entry(DIRECTORY, b'.', 0o40755, is_root=True)
        expected = hashlib.sha1(b'd\x01\x00\x00\x00.').digest()
        actual = checksum.digest_entry(entry, exclude_root_mode=True)
        self.assertEqual(actual, expected)

    def test_accumulate(self):
        digest = hashlib.sha1(b'abc').digest()
        other = hashlib.sha1(b'def').digest()
        cases = [
            # Zero is the identity.
            ((ZERO_CHECKSUM, digest), digest),
            # Every value is its own inverse.
            ((digest, digest), ZERO_CHECKSUM),
            ((digest, other), xor_bytes(digest, other)),
        ]
        for (running, value), expected in cases:
            with self.subTest(running=running, value=value):
                actual = checksum.accumulate(running, value)
                self.assertEqual(actual, expected)

    def test_accumulate__wrong_size(self):
        with self.assertRaises(ValueError):
            checksum.accumulate(ZERO_CHECKSUM, b'abc')

    def test_combine__empty(self):
        self.assertEqual(checksum.combine([]), ZERO_CHECKSUM)

    def test_checksum_entries__order_independent(self):
        entries = make_entries()
        expected = checksum.checksum_entries(entries)
        self.assertNotEqual(expected, ZERO_CHECKSUM)
        for ordering in permutations(entries):
            with self.subTest(ordering=ordering):
                actual = checksum.checksum_entries(ordering)
                self.assertEqual(actual, expected)

    def test_checksum_entries__partials_merge(self):
        """
        Check that merging partial checksums gives the same result.
        """
        entries = make_entries()
        expected = checksum.checksum_entries(entries)
        partials = [checksum.checksum_entries(entries[:1]),
                    checksum.checksum_entries(entries[1:])]
        actual = checksum.combine(partials)
        self.assertEqual(actual, expected)

    def test_checksum_entries__duplicates_cancel(self):
        """
        Check that two entries with identical bodies contribute nothing.
        """
        entries = make_entries()
        duplicate = Entry(FILE, b'dup', 0o100644, content=b'same')
        expected = checksum.checksum_entries(entries)
        actual = checksum.checksum_entries(entries + [duplicate, duplicate])
        self.assertEqual(actual, expected)

        self.assertEqual(checksum.checksum_entries([duplicate, duplicate]), ZERO_CHECKSUM)

    def test_checksum_entries__sensitivity(self):
        """
        Check that changing any part of any entry changes the checksum.
        """
        entries = make_entries()
        base = checksum.checksum_entries(entries)
        file_entry = entries[1]
        link_entry = entries[3]
        changed_entries = [
            (1, file_entry._replace(content=b'aab')),
            (1, file_entry._replace(mode=0o100600)),
            (1, file_entry._replace(rel_path=b'b')),
            (1, file_entry._replace(kind=SYMLINK, link_target=b'aaa')),
            (3, link_entry._replace(link_target=b'../b')),
            (2, entries[2]._replace(mode=0o40755)),
        ]
        for index, changed in changed_entries:
            with self.subTest(changed=changed):
                new_entries = list(entries)
                new_entries[index] = changed
                actual = checksum.checksum_entries(new_entries)
                self.assertNotEqual(actual, base)

    def test_format_checksum(self):
        value = bytes(range(20))
        actual = checksum.format_checksum(value)
        self.assertEqual(actual, '000102030405060708090a0b0c0d0e0f10111213')
