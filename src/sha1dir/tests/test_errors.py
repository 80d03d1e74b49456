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
Test the sha1dir.errors module.
"""

from unittest import TestCase

import sha1dir.errors as errors
from sha1dir.errors import TreeReadError


class ErrorsModuleTest(TestCase):

    """
    Test the functions and classes in sha1dir.errors.
    """

    def test_os_error_reason(self):
        cases = [
            (PermissionError(13, 'Permission denied', '/x/a'), 'Permission denied'),
            # Test an OSError without an errno or strerror.
            (OSError('something broke'), 'something broke'),
        ]
        for exc, expected in cases:
            with self.subTest(exc=exc):
                actual = errors.os_error_reason(exc)
                self.assertEqual(actual, expected)

    def test_tree_read_error(self):
        err = TreeReadError('/x/a', 'Permission denied')
        self.assertEqual(err.path, '/x/a')
        self.assertEqual(err.reason, 'Permission denied')
        self.assertEqual(str(err), '/x/a: Permission denied')
