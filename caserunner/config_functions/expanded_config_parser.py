########################################################################################################################
# Copyright 2024 the authors (see AUTHORS file for full list).                                                         #
#                                                                                                                      #
#                                                                                                                      #
# This file is part of CaseRunner.                                                                                     #
#                                                                                                                      #
#                                                                                                                      #
# CaseRunner is free software: you can redistribute it and/or modify it under the terms of the GNU Lesser General      #
# Public License as published by the Free Software Foundation,either version 2.1 of the License, or (at your option)   #
# any later version.                                                                                                   #
#                                                                                                                      #
# CaseRunner is distributed in the hope that it will be useful, but WITHOUT ANY WARRANTY; without even the implied     #
# warranty of MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.                                                     #
# See the GNU Lesser General Public License for more details.                                                          #
#                                                                                                                      #
# You should have received a copy of the GNU Lesser General Public License along with CaseRunner. If not, see          #
# <https://www.gnu.org/licenses/>.                                                                                     #
########################################################################################################################

r"""
This file contains the modified ConfigParser along with any relevant helper functions.
"""

import configparser
import os
from os.path import isfile
from typing import Dict, List, Optional, Type, TypeVar


T = TypeVar('T', bool, str, int, float)
"""Used only for type hints."""

DEFAULT_BASHRC = '/usr/lib/openfoam/openfoam2312/etc/bashrc'
"""Toolkit environment script sourced inside the container when ML_CFD_BASHRC is not set."""


def environment_defaults() -> Dict:
    """
    Build the defaults which are taken from the process environment.

    These are evaluated when a ConfigParser is created rather than at import time so that changes
    to the environment made by the caller, e.g. setting ML_CFD_IMAGE, are picked up.

    Returns
    -------
    * Defaults for the ENVIRONMENT section.
    """
    return {'image':             os.environ.get('ML_CFD_IMAGE', ''),
            'bashrc':            os.environ.get('ML_CFD_BASHRC', DEFAULT_BASHRC),
            'container_runtime': 'apptainer',
            'bind_to_none':      bool(os.environ.get('OMPI_BIND_TO_NONE')),
            'mpirun':            'mpirun',
            'foam_dictionary':   'foamDictionary'}


config_defaults: Dict = {
    'CASE': {'case_directory': './',
             'decompose_par_dict': 'system/decomposeParDict',
             'control_dict': 'system/controlDict'},
    'RUN': {'steps': ''},
}
"""
Default values for the various options available in CaseRunner.
If a default is used while loading a config file, CaseRunner outputs a message in the terminal.
"""


def split_list(raw: str) -> List[str]:
    """
    Split a list entry on commas and newlines, leaving separators inside single or double quotes in place,
    e.g. `setFields -dict "system/a,b"` stays a single entry.
    """
    params = []
    current = []
    quote = None
    for char in raw:
        if quote:
            if char == quote:
                quote = None
        elif char in '\'"':
            quote = char
        elif char in ',\n':
            params.append(''.join(current).strip())
            current = []
            continue
        current.append(char)
    params.append(''.join(current).strip())

    return params


class ConfigParser(configparser.ConfigParser):
    """
    CaseRunner's modified ConfigParser extended to have several useful functions added to it.

    The parser replaces the process-wide environment variables (ML_CFD_IMAGE, ML_CFD_BASHRC, OMPI_BIND_TO_NONE)
    as the single source of run configuration and is passed explicitly to every function that needs it.
    """

    def __init__(self, config_file_path: Optional[str] = None) -> None:
        """
        Only initializer to use.

        Parameters
        ----------
        * config_file_path: The path to the config file to load, relative to run directory.
                            If None, the configuration is made up only of defaults and the environment.
        """
        super().__init__()
        # Keep the case of keys, e.g. decomposeParDict, as they are used as file names
        self.optionxform = str

        if config_file_path is not None:
            if not isfile(config_file_path):
                raise FileNotFoundError('The given config file \"{}\" does not exist.'.format(config_file_path))
            self.read(config_file_path)

        verbose = config_file_path is not None
        defaults = dict(config_defaults, ENVIRONMENT=environment_defaults())
        for key, sub_dict in defaults.items():
            if key not in self:
                self.add_section(key)
            for key_sub, val_sub in sub_dict.items():
                if key_sub not in self[key]:
                    if verbose:
                        print(f'Using the default value of {val_sub} for {key}, {key_sub}.')
                    self[key][key_sub] = str(val_sub)

        if not self['CASE']['case_directory'].endswith('/'):
            self['CASE']['case_directory'] += '/'

        runtime = self.get_item(['ENVIRONMENT', 'container_runtime'], str)
        if not runtime:
            raise ValueError('ENVIRONMENT, container_runtime can not be empty.')

    def get_list(self, config_keys: List[str], val_type: Type[T]) -> List[T]:
        """
        Function to load a list of parameters from the config file.

        Entries are separated by commas or newlines, see `split_list` for quoted separators.
        Empty values give an empty list.

        Parameters
        ----------
        * config_keys:  The keys needed to access the parameters from the config file.
        * val_type:     The type that each parameter is supposed to be, and to which it will be converted.

        Returns
        -------
        * List of the parameters from the config file, converted to the specified type.
        """
        section, key = config_keys
        try:
            raw = self[section][key]
        except KeyError:
            raise ValueError(f"Need to specify a value for {section}, {key}")

        ret_list = []
        for param in split_list(raw):
            if not param:
                continue
            if val_type == bool:
                ret_list.append(param == 'True')
            else:
                ret_list.append(val_type(param))

        return ret_list

    def get_item(self, config_keys: List[str], val_type: Type[T]) -> T:
        """
        Function to load a parameter from the config file.

        Parameters
        ----------
        * config_keys:  The keys needed to access the parameters from the config file.
        * val_type:     The type that the parameter is supposed to be, and to which it will be converted.

        Returns
        -------
        * The parameter from the config file converted to the specified type.
        """
        section, key = config_keys
        try:
            param = self[section][key]
        except KeyError:
            raise ValueError(f"Need to specify a value for {section}, {key}")

        if val_type == bool:
            return param.lower() == 'true'
        else:
            return val_type(param)

    def case_path(self, relative_path: str = '') -> str:
        """
        Convert a path relative to the case directory into one relative to the running directory.

        Absolute paths are returned unchanged.

        Parameters
        ----------
        * relative_path: Path inside the case, e.g. `system/decomposeParDict`.

        Returns
        -------
        * The path as seen from the running directory.
        """
        if os.path.isabs(relative_path):
            return relative_path
        return self['CASE']['case_directory'] + relative_path
