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
Helpers describing the on-disk layout of an OpenFOAM case: time directories, processor directories and log files.
"""

import os
import re
from typing import List, Optional

import numpy as np


TIME_NAME_PATTERN = re.compile(r'^-?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$')
"""Names of time directories, e.g. `0`, `0.005`, `-0.001`, `100`, `1e-05`."""

PROCESSOR_PATTERN = re.compile(r'^processor(\d+)$')
"""Names of the partition directories written by decomposePar."""


def is_time_name(name: str) -> bool:
    """True if `name` parses as a time step in any of the formats OpenFOAM writes."""
    return TIME_NAME_PATTERN.match(name) is not None


def is_zero_time_name(name: str) -> bool:
    """True for `0` and its padded forms such as `0.000`."""
    return is_time_name(name) and float(name) == 0


def list_time_directories(case_directory: str) -> List[str]:
    """
    Find the time directories of a case, or of one of its processor directories.

    Parameters
    ----------
    * case_directory: The directory to search.

    Returns
    -------
    * time_names: The names of the time directories sorted by increasing time value.
    """
    names = [name for name in os.listdir(case_directory)
             if is_time_name(name) and os.path.isdir(os.path.join(case_directory, name))]
    if not names:
        return []

    times = np.array([float(name) for name in names])
    return [names[i] for i in np.argsort(times, kind='stable')]


def latest_time(case_directory: str) -> Optional[str]:
    """Name of the time directory with the largest time value, None if there are no time directories."""
    time_names = list_time_directories(case_directory)
    return time_names[-1] if time_names else None


def list_processor_directories(case_directory: str) -> List[str]:
    """
    Find the `processorN` partition directories of a case.

    Parameters
    ----------
    * case_directory: The case to search.

    Returns
    -------
    * processor_names: Directory names sorted by their partition number.
    """
    found = []
    for name in os.listdir(case_directory):
        match = PROCESSOR_PATTERN.match(name)
        if match and os.path.isdir(os.path.join(case_directory, name)):
            found.append((int(match.group(1)), name))
    return [name for _, name in sorted(found)]


def is_parallel_case(case_directory: str) -> bool:
    """A case is decomposed once `processor0` exists."""
    return os.path.isdir(os.path.join(case_directory, 'processor0'))


def log_file_name(command: str, suffix: Optional[str] = None) -> str:
    """
    Name of the log file an application writes to.

    Parameters
    ----------
    * command:  The application, either a bare name or a path to it.
    * suffix:   Optional suffix to distinguish several runs of the same application.

    Returns
    -------
    * `log.<application>` or `log.<application>.<suffix>`.
    """
    name = 'log.' + os.path.basename(command)
    if suffix:
        name += '.' + suffix
    return name
