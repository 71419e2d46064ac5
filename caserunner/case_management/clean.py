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
Removal of generated files from a case, returning it to the state it was in before it was run.

All functions are idempotent: entries which do not exist are ignored. Names are matched against the entries of a
directory listing with `fnmatch` patterns or explicit predicates, not through a shell.
"""

import os
import shutil
import sys
from fnmatch import fnmatch
from os.path import exists, isdir, islink, join
from typing import Callable, Iterable

from ..io import is_time_name, is_zero_time_name


def _remove(path: str) -> None:
    """Remove a file, link or directory tree."""
    if isdir(path) and not islink(path):
        shutil.rmtree(path)
    elif exists(path) or islink(path):
        os.remove(path)


def _remove_if(directory: str, predicate: Callable[[str], bool]) -> None:
    """Remove every entry of `directory` whose name satisfies `predicate`."""
    if not isdir(directory):
        return
    for name in os.listdir(directory):
        if predicate(name):
            _remove(join(directory, name))


def _remove_matching(directory: str, patterns: Iterable[str]) -> None:
    """Remove every entry of `directory` whose name matches one of the `fnmatch` patterns."""
    patterns = list(patterns)
    _remove_if(directory, lambda name: any(fnmatch(name, pattern) for pattern in patterns))


def _holds_legacy_block_mesh_dict(mesh_dir: str) -> bool:
    return exists(join(mesh_dir, 'blockMeshDict')) or exists(join(mesh_dir, 'blockMeshDict.m4'))


def clean_time_directories(case_directory: str = '.') -> None:
    """
    Remove all time directories except the initial one.

    `0` and zero-padded forms of it such as `0.000` are kept, every other numeric entry
    (e.g. `1`, `0.5`, `-0.001`, `1e-05`) is removed.
    """
    print("Cleaning case time directories")
    _remove_if(case_directory, lambda name: is_time_name(name) and not is_zero_time_name(name))


def clean_auxiliary(case_directory: str = '.') -> None:
    """Remove log files, visualisation lock/session files and markers."""
    _remove_matching(case_directory, ['log', 'log.*', 'log-*', 'logSummary.*',
                                      '.fxLock', '*.xml', 'ParaView*', 'paraFoam*',
                                      '*.OpenFOAM', '*.blockMesh', '.setSet'])


def clean_adios_output(case_directory: str = '.') -> None:
    if isdir(join(case_directory, 'system')):
        _remove(join(case_directory, 'adiosData'))


def clean_dynamic_code(case_directory: str = '.') -> None:
    """Remove code compiled at run time for coded boundary conditions and function objects."""
    if isdir(join(case_directory, 'system')):
        _remove(join(case_directory, 'dynamicCode'))


def clean_optimisation(case_directory: str = '.') -> None:
    _remove(join(case_directory, 'optimisation'))
    _remove(join(case_directory, 'constant', 'controlPoints'))


def clean_post_processing(case_directory: str = '.') -> None:
    """Remove function object output and converted visualisation data."""
    _remove_matching(case_directory, ['Ensight', 'EnSight', 'ensightWrite', 'insitu', 'VTK',
                                      'postProcessing', 'postProcessing-*',
                                      'cuttingPlane', 'surfaceSampling'])


def clean_poly_mesh(case_directory: str = '.') -> None:
    """
    Remove the volume mesh, `constant/polyMesh`, and the files derived from it in `constant/`.

    Old cases keep `blockMeshDict` inside `constant/polyMesh` instead of `system/`. Such a directory is the only
    definition of the mesh and is kept, with a warning.
    """
    mesh_dir = join(case_directory, 'constant', 'polyMesh')
    if _holds_legacy_block_mesh_dict(mesh_dir):
        print("Warning: not removing constant/polyMesh/\n"
              "  It contains a 'blockMeshDict' or 'blockMeshDict.m4' file.\n"
              "  Relocate the file(s) to system/ to avoid this warning", file=sys.stderr)
        return

    _remove(mesh_dir)
    _remove_matching(join(case_directory, 'constant'),
                     ['cellDecomposition', 'cellToRegion', 'cellLevel*', 'pointLevel*', 'tetDualMesh'])


def clean_fa_mesh(case_directory: str = '.') -> None:
    """
    Remove the finite-area mesh, `constant/faMesh`, unless it holds the legacy `faMeshDefinition`.
    """
    mesh_dir = join(case_directory, 'constant', 'faMesh')
    if exists(join(mesh_dir, 'faMeshDefinition')):
        print("Warning: not removing constant/faMesh/\n"
              "  It contains a 'faMeshDefinition' file.\n"
              "  Relocate the file(s) to system/ to avoid this warning", file=sys.stderr)
        return

    _remove(mesh_dir)


def clean_snappy_files(case_directory: str = '.') -> None:
    """Remove the refinement data written by snappyHexMesh."""
    refinement_patterns = ['cellLevel*', 'pointLevel*', 'refinementHistory*', 'surfaceIndex*']

    mesh_dir = join(case_directory, 'constant', 'polyMesh')
    if not _holds_legacy_block_mesh_dict(mesh_dir):
        _remove_matching(mesh_dir, refinement_patterns)
    _remove_matching(join(case_directory, 'constant'), refinement_patterns)
    _remove_matching(join(case_directory, '0'), ['cellLevel*', 'pointLevel*', 'cellDist'])


def clean_samples(case_directory: str = '.') -> None:
    _remove_matching(case_directory, ['sets', 'samples', 'sampleSurfaces'])


def clean_case(case_directory: str = '.') -> None:
    """
    Remove everything a run generates while keeping the case definition: mesh and field definitions, dictionaries
    and the initial conditions.
    """
    clean_time_directories(case_directory)
    clean_adios_output(case_directory)
    clean_auxiliary(case_directory)
    clean_dynamic_code(case_directory)
    clean_optimisation(case_directory)
    clean_post_processing(case_directory)

    clean_fa_mesh(case_directory)
    clean_poly_mesh(case_directory)
    clean_snappy_files(case_directory)

    _remove_matching(case_directory, ['processor*', 'TDAC', 'probes*', 'forces*', 'graphs*', 'sets',
                                      'gdbCommands', 'mpirun.schema'])
    _remove(join(case_directory, 'system', 'machines'))

    # blockMeshDict generated from its m4 template
    if exists(join(case_directory, 'system', 'blockMeshDict.m4')):
        _remove(join(case_directory, 'system', 'blockMeshDict'))


def clean_case0(case_directory: str = '.') -> None:
    """
    `clean_case` followed by removal of the `0/` directory.

    Only safe for cases which keep their initial conditions in `0.orig/`.
    """
    clean_case(case_directory)
    _remove(join(case_directory, '0'))


def remove_case(case_directory: str) -> None:
    """Remove the whole case directory."""
    print(f"Removing case {case_directory}")
    _remove(case_directory)
