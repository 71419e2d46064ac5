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

import shutil
from pathlib import Path

import pytest

from caserunner import run, ConfigParser
from caserunner.case_management import clean_case0, clone_case, clone_parallel_case

path_to_examples = Path(__file__).parents[1] / 'examples'

requires_toolkit = pytest.mark.skipif(
    any(shutil.which(tool) is None for tool in ('blockMesh', 'decomposePar', 'foamDictionary', 'mpirun')),
    reason="requires the OpenFOAM applications and MPI on PATH")


def clone_and_run(example: str, working_directory: Path) -> Path:
    case_directory = working_directory / example
    assert clone_case(str(path_to_examples / example), str(case_directory))

    configparser = ConfigParser(str(path_to_examples / example / 'CONFIG'))
    configparser['CASE']['case_directory'] = str(case_directory) + '/'
    run(configparser)
    return case_directory


@requires_toolkit
def test_cavity(tmp_path):
    case_directory = clone_and_run('cavity', tmp_path)

    for log in ('log.blockMesh', 'log.decomposePar', 'log.icoFoam', 'log.reconstructPar'):
        assert (case_directory / log).exists()
    assert (case_directory / 'processor1' / 'constant' / 'polyMesh').is_dir()
    assert (case_directory / '0.5' / 'U').exists()

    assert clone_parallel_case(str(case_directory), str(tmp_path / 'cavityRestart'), '0.5')
    assert (tmp_path / 'cavityRestart' / 'processor0' / '0.5').is_dir()

    clean_case0(str(case_directory))
    assert sorted(p.name for p in case_directory.iterdir()) == ['0.orig', 'constant', 'system']
