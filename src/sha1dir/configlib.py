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
Contains functions to help configure sha1dir.

A configuration file is a YAML mapping, for example:

    jobs: 4
    exclude_rootdir_metadata: true
    include_config: common.yaml
"""

from collections import namedtuple
import logging
from pathlib import Path

import yaml

from sha1dir.errors import ConfigError
import sha1dir.utils as utils


_log = logging.getLogger(__name__)

INCLUDE_KEY = 'include_config'

# The type each configuration value must have.
CONFIG_TYPES = {
    'jobs': int,
    'exclude_rootdir_metadata': bool,
    'ignore_unknown_filetypes': bool,
}

DEFAULTS = {
    # None means utils.default_jobs().
    'jobs': None,
    'exclude_rootdir_metadata': False,
    'ignore_unknown_filetypes': False,
}

# The options used when checksumming each tree.
TreeOptions = namedtuple('TreeOptions',
    'jobs, exclude_rootdir_metadata, ignore_unknown_filetypes')


def check_value(key, value):
    """
    Raise ConfigError if the value is not valid for the given key.
    """
    try:
        expected_type = CONFIG_TYPES[key]
    except KeyError:
        raise ConfigError(f'unknown configuration key: {utils.truncate(key)}')

    # Check the type exactly since bool is a subclass of int.
    if type(value) is not expected_type:
        raise ConfigError(f'{key} must be of type {expected_type.__name__}: '
                          f'{utils.truncate(value)}')

    if key == 'jobs' and value < 1:
        raise ConfigError(f'jobs must be positive: {value}')


class Config:

    """
    Configuration values loaded from one or more YAML files.

    Values are stored as attributes.  Files named by the "include_config"
    key are loaded after the file that names them, and only supply values
    that aren't already set.
    """

    def __init__(self, config_path=None):
        """
        Args:
          config_path: optional path to the YAML configuration file to
            load, as a path-like object.
        """
        # Collect other include files to merge.
        self.include_config = []
        # The resolved paths of the files loaded so far.
        self._loaded_paths = set()

        if config_path is None:
            return

        self.overlay_config_file(config_path)

        while len(self.include_config) > 0:
            path = self.include_config.pop(0)
            self.overlay_config_file(path)

    def load_config_file(self, filepath):
        """
        Load the parsed contents of the specified file.

        Returns: the parsed data, as a dict.

        Raises ConfigError if the file is not present or is invalid.

        Args:
          filepath: the path of the file to load.
        """
        _log.info(f'loading config data from {filepath}')
        try:
            config = utils.read_yaml(filepath)
        except OSError as exc:
            raise ConfigError(f'error reading config file {filepath}: {exc}') from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f'invalid config file {filepath}: {exc}') from exc

        if config is None:
            # Then the file is empty.
            return {}

        if not isinstance(config, dict):
            raise ConfigError(f'config file must contain a mapping: {filepath}')

        return config

    def overlay_config(self, newconfig, replace=False, base_dir=None):
        """
        Overlay a configuration dict onto the configuration data, either
        replacing any existing values or setting values only if not
        already defined.

        Args:
          newconfig: parsed configuration data dict, or None to skip.
          replace: if true, replace defined entries, otherwise not.
          base_dir: the directory against which to resolve relative
            include paths, as a Path object.
        """
        if newconfig is None:
            return

        for key, value in newconfig.items():
            if key == INCLUDE_KEY:
                # Push the whitespace-separated list of config files.
                paths = [Path(path) for path in str(value).split()]
                if base_dir is not None:
                    paths = [base_dir / path for path in paths]
                self.include_config += paths
                continue

            check_value(key, value)

            if not replace and hasattr(self, key):
                continue

            _log.debug(f'set Config.{key}={value!r}')
            setattr(self, key, value)

    def overlay_config_file(self, filepath, replace=False):
        """
        Shorthand combination of load_config_file() and overlay_config().
        """
        filepath = Path(filepath)
        resolved = filepath.resolve()
        if resolved in self._loaded_paths:
            # Then the file was already included, possibly by itself.
            _log.info(f'skipping config file already loaded: {filepath}')
            return
        self._loaded_paths.add(resolved)

        self.overlay_config(self.load_config_file(filepath), replace=replace,
                            base_dir=filepath.parent)

    def get(self, key):
        """
        Return a configuration value, falling back to its default.
        """
        return getattr(self, key, DEFAULTS[key])


def make_tree_options(config=None, jobs=None, exclude_rootdir_metadata=None,
    ignore_unknown_filetypes=None):
    """
    Return a TreeOptions object.

    Arguments that aren't None (e.g. from the command line) take
    precedence over the config, which takes precedence over DEFAULTS.

    Args:
      config: an optional Config object.
    """
    if config is None:
        config = Config()

    if jobs is None:
        jobs = config.get('jobs')
    if jobs is None:
        jobs = utils.default_jobs()

    if exclude_rootdir_metadata is None:
        exclude_rootdir_metadata = config.get('exclude_rootdir_metadata')
    if ignore_unknown_filetypes is None:
        ignore_unknown_filetypes = config.get('ignore_unknown_filetypes')

    options = TreeOptions(jobs=jobs, exclude_rootdir_metadata=exclude_rootdir_metadata,
                          ignore_unknown_filetypes=ignore_unknown_filetypes)

    return options
