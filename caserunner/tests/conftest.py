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

import os
import stat
from pathlib import Path

import pytest

from caserunner import ConfigParser

FAKE_FOAM_DICTIONARY = """#!/bin/sh
# Stand-in for: foamDictionary -entry <keyword> -value <file>
[ -f "$4" ] || { echo "Cannot open file $4" 1>&2; exit 1; }
awk -v key="$2" '$1 == key { v = $2; sub(/;$/, "", v); print v }' "$4"
"""


def write_file(path: Path, content: str = '') -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Tests must not pick up an image or binding setting from the machine running them."""
    for variable in ('ML_CFD_IMAGE', 'ML_CFD_BASHRC', 'OMPI_BIND_TO_NONE'):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture
def fake_foam_dictionary(tmp_path) -> str:
    script = write_file(tmp_path / 'bin' / 'foamDictionary', FAKE_FOAM_DICTIONARY)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)


@pytest.fixture
def serial_case(tmp_path) -> Path:
    """A case as authored by a user, before any application was run."""
    case = tmp_path / 'cavity'
    write_file(case / 'system' / 'controlDict', 'application     icoFoam;\nendTime 0.5;\n')
    write_file(case / 'system' / 'blockMeshDict', 'scale 0.1;\n')
    write_file(case / 'system' / 'decomposeParDict', 'numberOfSubdomains 4;\nmethod scotch;\n')
    write_file(case / 'constant' / 'transportProperties', 'nu 0.01;\n')
    write_file(case / '0' / 'U', 'internalField uniform (0 0 0);\n')
    write_file(case / '0' / 'p', 'internalField uniform 0;\n')
    return case


@pytest.fixture
def parallel_case(serial_case) -> Path:
    """The serial case after decomposition into two partitions and a run writing times 0.1 and 0.2."""
    for n in range(2):
        processor = serial_case / f'processor{n}'
        write_file(processor / 'constant' / 'polyMesh' / 'points', f'points of {n}\n')
        for time in ('0', '0.1', '0.2'):
            write_file(processor / time / 'U', f'U at {time} on {n}\n')
    return serial_case


@pytest.fixture
def config_parser(serial_case, fake_foam_dictionary) -> ConfigParser:
    config_parser = ConfigParser()
    config_parser['CASE']['case_directory'] = str(serial_case) + os.sep
    config_parser['ENVIRONMENT']['foam_dictionary'] = fake_foam_dictionary
    config_parser['ENVIRONMENT']['mpirun'] = 'echo'
    return config_parser
