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
Cloning cases, either serial cases or decomposed (parallel) cases, into a new directory.
"""

import os
import shutil
import sys
from os.path import isdir, join

from ..io import is_parallel_case, latest_time, list_processor_directories

LATEST_TIME = 'latestTime'
"""Time selector standing for the last time directory of each partition."""


def _check_clone_preconditions(src: str, dst: str) -> bool:
    """The destination must not exist and the source must be a directory."""
    if os.path.exists(dst):
        print(f"Case already cloned: remove case directory {dst} to clone", file=sys.stderr)
        return False
    if not isdir(src):
        print(f"Error: no directory {src} to clone from", file=sys.stderr)
        return False
    return True


def _copy_required(src: str, dst: str) -> bool:
    """Copy a directory tree which the clone can not do without. Failures are reported and give False."""
    try:
        shutil.copytree(src, dst, symlinks=True)
    except (OSError, shutil.Error) as error:
        print(f"Error: could not copy {src}: {error}", file=sys.stderr)
        return False
    return True


def _copy_if_present(src: str, dst: str) -> None:
    """Copy a directory tree if it exists. Failures are reported but do not stop the clone."""
    if not isdir(src):
        return
    try:
        shutil.copytree(src, dst, symlinks=True)
    except (OSError, shutil.Error) as error:
        print(f"Warning: could not copy {src}: {error}", file=sys.stderr)


def _discard_incomplete_clone(dst: str) -> None:
    """Remove a clone which is missing a required directory, so that cloning can be retried."""
    print(f"Removing incomplete clone {dst}", file=sys.stderr)
    shutil.rmtree(dst, ignore_errors=True)


def clone_case(src: str, dst: str) -> bool:
    """
    Clone a serial case: `constant/`, `system/` and whichever of `0/` and `0.orig/` exist.

    An existing destination is never touched.
    If `constant/` or `system/` can not be copied the partial clone is removed again.

    Parameters
    ----------
    * src:  The case to clone.
    * dst:  The new case directory, must not exist.

    Returns
    -------
    * True if the case was cloned, False if a precondition failed or a required directory could not be copied.
    """
    if not _check_clone_preconditions(src, dst):
        return False

    print(f"Cloning {dst} case from {src}")
    os.makedirs(dst)

    # Both are attempted so that every missing directory is reported
    copied = [_copy_required(join(src, sub_dir), join(dst, sub_dir)) for sub_dir in ('constant', 'system')]
    if not all(copied):
        _discard_incomplete_clone(dst)
        return False

    # Usually only one of these exists
    for sub_dir in ('0', '0.orig'):
        _copy_if_present(join(src, sub_dir), join(dst, sub_dir))

    return True


def clone_parallel_case(src: str, dst: str, *times: str) -> bool:
    """
    Clone a decomposed case.

    Without `times` every `processorN` directory is copied in full.
    With `times` each partition gets its `constant/` directory and only those of the requested time directories
    which exist in the source partition; missing times are skipped.
    The time `latestTime` stands for the last time directory of each partition.

    Parameters
    ----------
    * src:      The decomposed case to clone.
    * dst:      The new case directory, must not exist.
    * times:    Names of the time directories to copy, e.g. '0', '100', 'latestTime'.

    Returns
    -------
    * True if the case was cloned, False if a precondition failed or `system/` could not be copied.
    """
    if not _check_clone_preconditions(src, dst):
        return False
    if not is_parallel_case(src):
        print(f"Error: {src} is not a parallel case, no processor0 directory", file=sys.stderr)
        return False

    print(f"Cloning {dst} case from {src} in parallel")
    os.makedirs(dst)

    if not _copy_required(join(src, 'system'), join(dst, 'system')):
        _discard_incomplete_clone(dst)
        return False
    _copy_if_present(join(src, 'constant'), join(dst, 'constant'))

    for processor in list_processor_directories(src):
        src_proc = join(src, processor)
        dst_proc = join(dst, processor)

        if not times:
            shutil.copytree(src_proc, dst_proc, symlinks=True)
            continue

        os.makedirs(dst_proc)
        _copy_if_present(join(src_proc, 'constant'), join(dst_proc, 'constant'))
        for time in times:
            time = str(time)
            if time == LATEST_TIME:
                time = latest_time(src_proc)
                if time is None:
                    continue
            _copy_if_present(join(src_proc, time), join(dst_proc, time))

    return True


def clone_mesh(src: str, dst: str) -> bool:
    """
    Copy the mesh of one case into another existing case, replacing any mesh there.

    Both the serial mesh, `constant/polyMesh`, and the per-partition meshes, `processorN/constant/polyMesh`,
    are copied when present.

    Parameters
    ----------
    * src:  The case holding the mesh.
    * dst:  The existing case to receive it.

    Returns
    -------
    * True if a mesh was copied, False if the destination is missing or the source has no mesh.
    """
    if not isdir(dst):
        print(f"Error: no case directory {dst} to copy the mesh into", file=sys.stderr)
        return False

    mesh_dirs = [join('constant', 'polyMesh')]
    if isdir(src):
        mesh_dirs += [join(processor, 'constant', 'polyMesh') for processor in list_processor_directories(src)]
    mesh_dirs = [mesh_dir for mesh_dir in mesh_dirs if isdir(join(src, mesh_dir))]

    if not mesh_dirs:
        print(f"Error: no mesh found in {src}", file=sys.stderr)
        return False

    print(f"Copying mesh from {src} to {dst}")
    for mesh_dir in mesh_dirs:
        target = join(dst, mesh_dir)
        if isdir(target):
            shutil.rmtree(target)
        shutil.copytree(join(src, mesh_dir), target, symlinks=True)

    return True
