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
Digesting the entries of a tree with a pool of worker threads.

Each task digests a batch of entries into a partial checksum.  Partial
checksums are merged on the calling thread as tasks complete, which is
the only point where the workers' results meet.
"""

from collections import deque
from concurrent.futures import ThreadPoolExecutor
from itertools import islice
import logging

import sha1dir.checksum as checksum
from sha1dir.checksum import ZERO_CHECKSUM


_log = logging.getLogger(__name__)

# The number of entries digested by a single task.
DEFAULT_BATCH_SIZE = 32

# The number of tasks allowed in flight per worker.  This bounds how far
# the tree walk can get ahead of the digesting.
PENDING_PER_WORKER = 4

THREAD_NAME_PREFIX = 'sha1dir'


def iter_batches(entries, batch_size):
    """
    Yield the items of an iterable as lists of at most batch_size items.

    >>> list(iter_batches(range(5), 2))
    [[0, 1], [2, 3], [4]]
    """
    if batch_size < 1:
        raise ValueError(f'batch_size must be positive: {batch_size}')

    entries = iter(entries)
    while True:
        batch = list(islice(entries, batch_size))
        if not batch:
            break
        yield batch


def digest_batch(batch, exclude_root_mode=False):
    """
    Return the partial checksum of a list of entries.
    """
    return checksum.checksum_entries(batch, exclude_root_mode=exclude_root_mode)


def checksum_parallel(entries, jobs, exclude_root_mode=False, batch_size=None):
    """
    Return the checksum of an iterable of entries, digesting them with
    up to `jobs` worker threads.

    If jobs is 1 or less, the entries are digested on the calling thread.
    The first error raised by the iterable or by any task is re-raised,
    after cancelling the tasks that haven't started.

    Args:
      entries: an iterable of Entry objects, e.g. from walk_tree().
      jobs: the number of worker threads.
    """
    if batch_size is None:
        batch_size = DEFAULT_BATCH_SIZE

    if jobs <= 1:
        _log.debug('digesting entries sequentially')
        return checksum.checksum_entries(entries, exclude_root_mode=exclude_root_mode)

    max_pending = jobs * PENDING_PER_WORKER
    total = ZERO_CHECKSUM
    pending = deque()

    _log.debug(f'digesting entries using {jobs} threads')
    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix=THREAD_NAME_PREFIX) as executor:
        try:
            for batch in iter_batches(entries, batch_size):
                future = executor.submit(digest_batch, batch,
                                         exclude_root_mode=exclude_root_mode)
                pending.append(future)
                if len(pending) >= max_pending:
                    total = checksum.accumulate(total, pending.popleft().result())

            while pending:
                total = checksum.accumulate(total, pending.popleft().result())
        except BaseException:
            for future in pending:
                future.cancel()
            raise

    return total
