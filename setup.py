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
This file lets the project be installed locally using `pip install`.
"""

from pathlib import Path
import sys

from setuptools import setup, find_packages


def _log(msg):
    # Print to stderr instead of using the logging module because using
    # the logging module is probably overkill for this simple case.
    print(f'setup.py: {msg}', file=sys.stderr)


def parse_install_requires():
    """
    Parse requirements.in, and return the list to pass as the
    install_requires argument to setup().
    """
    path = Path(__file__).parent / 'requirements.in'
    text = path.read_text()
    reqs = [line.strip() for line in text.splitlines()
            if line.strip() and not line.startswith('#')]

    _log(f'parsed install_requires from requirements.in: {reqs}')

    return reqs


setup(
    name='sha1dir',
    # TODO: DRY up with sha1dir.main.VERSION.
    version='0.0.1',
    description='order-independent checksum of a directory tree',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.7',
    ],
    python_requires='>=3.7',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    install_requires=parse_install_requires(),
    entry_points={
        'console_scripts': [
            'sha1dir=sha1dir.main:main',
        ],
    },
)
