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
Restoring the initial conditions of a case from its pristine copy in `0.orig/`.
"""

import shutil
import sys
from os.path import isdir, join

from ..io import list_processor_directories


def restore_0_dir(case_directory: str = '.', processor: bool = False) -> bool:
    """
    Replace `0/` with a fresh copy of `0.orig/`.

    Parameters
    ----------
    * case_directory:   The case to restore.
    * processor:        Restore `0/` inside every `processorN` directory instead of at the case root.

    Returns
    -------
    * True if `0/` was restored, False if there is no `0.orig/`.
    """
    orig_dir = join(case_directory, '0.orig')
    if not isdir(orig_dir):
        print(f"No 0.orig/ directory to restore in {case_directory}", file=sys.stderr)
        return False

    if processor:
        print("Restore 0/ from 0.orig/ for processor directories")
        targets = [join(case_directory, name, '0') for name in list_processor_directories(case_directory)]
    else:
        print("Restore 0/ from 0.orig/")
        targets = [join(case_directory, '0')]

    for target in targets:
        if isdir(target):
            shutil.rmtree(target)
        shutil.copytree(orig_dir, target, symlinks=True)

    return True
