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

import filecmp
import shutil

from caserunner.case_management import clone_case, clone_mesh, clone_parallel_case

from conftest import write_file


def same_tree(a, b) -> bool:
    comparison = filecmp.dircmp(a, b)
    if comparison.left_only or comparison.right_only or comparison.diff_files or comparison.funny_files:
        return False
    return all(same_tree(a / sub_dir, b / sub_dir) for sub_dir in comparison.common_dirs)


def test_clone_case(serial_case, tmp_path):
    write_file(serial_case / 'log.blockMesh', 'done\n')
    (serial_case / '0.5').mkdir()
    dst = tmp_path / 'cavityClone'

    assert clone_case(str(serial_case), str(dst))

    assert sorted(p.name for p in dst.iterdir()) == ['0', 'constant', 'system']
    for sub_dir in ('0', 'constant', 'system'):
        assert same_tree(serial_case / sub_dir, dst / sub_dir)


def test_clone_case_with_0_orig(serial_case, tmp_path):
    (serial_case / '0').rename(serial_case / '0.orig')
    dst = tmp_path / 'cavityClone'

    assert clone_case(str(serial_case), str(dst))

    assert sorted(p.name for p in dst.iterdir()) == ['0.orig', 'constant', 'system']


def test_clone_case_without_initial_conditions(serial_case, tmp_path):
    for field in (serial_case / '0').iterdir():
        field.unlink()
    (serial_case / '0').rmdir()
    dst = tmp_path / 'cavityClone'

    assert clone_case(str(serial_case), str(dst))

    assert sorted(p.name for p in dst.iterdir()) == ['constant', 'system']


def test_clone_case_never_overwrites(serial_case, tmp_path, capsys):
    dst = tmp_path / 'existing'
    write_file(dst / 'notes.txt', 'keep me\n')

    assert not clone_case(str(serial_case), str(dst))
    assert not clone_parallel_case(str(serial_case), str(dst))

    assert [p.name for p in dst.iterdir()] == ['notes.txt']
    assert (dst / 'notes.txt').read_text() == 'keep me\n'
    assert 'already cloned' in capsys.readouterr().err


def test_clone_missing_source(tmp_path):
    dst = tmp_path / 'dst'

    assert not clone_case(str(tmp_path / 'missing'), str(dst))
    assert not clone_parallel_case(str(tmp_path / 'missing'), str(dst))
    assert not dst.exists()


def test_clone_parallel_case_requires_processor0(serial_case, tmp_path, capsys):
    dst = tmp_path / 'dst'

    assert not clone_parallel_case(str(serial_case), str(dst))
    assert not dst.exists()
    assert 'not a parallel case' in capsys.readouterr().err


def test_clone_parallel_case_all_times(parallel_case, tmp_path):
    dst = tmp_path / 'dst'

    assert clone_parallel_case(str(parallel_case), str(dst))

    for n in range(2):
        assert same_tree(parallel_case / f'processor{n}', dst / f'processor{n}')
    assert same_tree(parallel_case / 'system', dst / 'system')
    assert not (dst / '0').exists()


def test_clone_parallel_case_selected_times(parallel_case, tmp_path):
    dst = tmp_path / 'dst'

    assert clone_parallel_case(str(parallel_case), str(dst), '0.1', '0.3')

    processors = sorted(p.name for p in dst.iterdir() if p.name.startswith('processor'))
    assert processors == ['processor0', 'processor1']
    for n in range(2):
        processor = dst / f'processor{n}'
        assert sorted(p.name for p in processor.iterdir()) == ['0.1', 'constant']
        assert (processor / 'constant' / 'polyMesh' / 'points').read_text() == f'points of {n}\n'
        assert (processor / '0.1' / 'U').read_text() == f'U at 0.1 on {n}\n'


def test_clone_mesh(parallel_case, tmp_path):
    write_file(parallel_case / 'constant' / 'polyMesh' / 'points', 'serial points\n')
    dst = tmp_path / 'dst'
    write_file(dst / 'constant' / 'polyMesh' / 'points', 'old points\n')
    write_file(dst / 'constant' / 'polyMesh' / 'faces', 'old faces\n')

    assert clone_mesh(str(parallel_case), str(dst))

    assert same_tree(parallel_case / 'constant' / 'polyMesh', dst / 'constant' / 'polyMesh')
    assert (dst / 'processor1' / 'constant' / 'polyMesh' / 'points').read_text() == 'points of 1\n'


def test_clone_mesh_without_mesh(serial_case, tmp_path):
    dst = tmp_path / 'dst'
    dst.mkdir()

    assert not clone_mesh(str(serial_case), str(dst))
    assert not clone_mesh(str(serial_case), str(tmp_path / 'missing'))


def test_clone_case_without_constant(serial_case, tmp_path, capsys):
    shutil.rmtree(serial_case / 'constant')
    dst = tmp_path / 'cavityClone'

    assert not clone_case(str(serial_case), str(dst))

    assert not dst.exists()
    assert 'could not copy' in capsys.readouterr().err

    # Once the source is complete the clone can be made
    write_file(serial_case / 'constant' / 'transportProperties', 'nu 0.01;\n')
    assert clone_case(str(serial_case), str(dst))
    assert sorted(p.name for p in dst.iterdir()) == ['0', 'constant', 'system']


def test_clone_parallel_case_without_system(parallel_case, tmp_path):
    (parallel_case / 'system').rename(parallel_case / 'system.bak')
    dst = tmp_path / 'dst'

    assert not clone_parallel_case(str(parallel_case), str(dst))
    assert not dst.exists()


def test_clone_parallel_case_latest_time(parallel_case, tmp_path):
    write_file(parallel_case / 'processor1' / '0.3' / 'U', 'U at 0.3 on 1\n')
    dst = tmp_path / 'dst'

    assert clone_parallel_case(str(parallel_case), str(dst), 'latestTime')

    assert sorted(p.name for p in (dst / 'processor0').iterdir()) == ['0.2', 'constant']
    assert sorted(p.name for p in (dst / 'processor1').iterdir()) == ['0.3', 'constant']
