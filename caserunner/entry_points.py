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
CaseRunner's console scripts:
1. `caserunner CONFIG_FILE_PATH` runs the steps listed in a config file.
2. `runApplication [-a] [-o] [-s SUFFIX] [-decomposeParDict DICT] APPLICATION [ARGS...]`
3. `runParallel [-a] [-o] [-s SUFFIX] [-n NPROCS] [-decomposeParDict DICT] APPLICATION [ARGS...]`
4. `cloneCase SRC DST` and `cloneParallelCase SRC DST [TIMES...]`
5. `cleanCase [CASE]`, `cleanCase0 [CASE]` and `restore0Dir [-processor] [CASE]`
6. `caserunner-tests` for running the provided pytests.

All of them exit with 0 on success or when an application was already run, and with 1 when a precondition
was not met. The exit status of the applications themselves is not passed on.
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from .run import run
from .config_functions import ConfigParser
from .case_management import clean_case, clean_case0, clone_case, clone_parallel_case, restore_0_dir
from .execution import parse_run_options, run_application, run_parallel


def _args(argv: Optional[List[str]]) -> List[str]:
    return sys.argv[1:] if argv is None else argv


def run_caserunner(argv: Optional[List[str]] = None) -> int:
    """
    Function for running CaseRunner using entry points.
    Invoked as `caserunner CONFIG_FILE_PATH`.

    Parameters (from command line)
    ----------
    * config_file_path: Filename of the config file to load. Required parameter.
    """
    args = _args(argv)
    if len(args) == 0:
        print("ERROR: Provide configuration file path. "
              "Usage: caserunner CONFIG_FILE_PATH", file=sys.stderr)
        return 1
    elif len(args) > 1:
        print("ERROR: More than one argument was provided. "
              "Usage: caserunner CONFIG_FILE_PATH", file=sys.stderr)
        return 1

    run(args[0])
    return 0


def _run(argv: Optional[List[str]], parallel: bool) -> int:
    name = 'runParallel' if parallel else 'runApplication'
    try:
        options, application, app_args = parse_run_options(_args(argv), parallel=parallel)
    except ValueError as error:
        print(f"ERROR: {error} Usage: {name} [OPTIONS] APPLICATION [ARGS...]", file=sys.stderr)
        return 1

    config_parser = ConfigParser()
    if parallel:
        run_parallel(config_parser, options, application, *app_args)
    else:
        run_application(config_parser, options, application, *app_args)
    return 0


def run_application_cli(argv: Optional[List[str]] = None) -> int:
    """Invoked as `runApplication [OPTIONS] APPLICATION [ARGS...]` from inside the case directory."""
    return _run(argv, parallel=False)


def run_parallel_cli(argv: Optional[List[str]] = None) -> int:
    """Invoked as `runParallel [OPTIONS] APPLICATION [ARGS...]` from inside the case directory."""
    return _run(argv, parallel=True)


def clone_case_cli(argv: Optional[List[str]] = None) -> int:
    args = _args(argv)
    if len(args) != 2:
        print("ERROR: Usage: cloneCase SRC DST", file=sys.stderr)
        return 1
    return 0 if clone_case(args[0], args[1]) else 1


def clone_parallel_case_cli(argv: Optional[List[str]] = None) -> int:
    args = _args(argv)
    if len(args) < 2:
        print("ERROR: Usage: cloneParallelCase SRC DST [TIMES... | latestTime]", file=sys.stderr)
        return 1
    return 0 if clone_parallel_case(args[0], args[1], *args[2:]) else 1


def clean_case_cli(argv: Optional[List[str]] = None) -> int:
    """Invoked as `cleanCase [CASE]`, the case defaults to the current directory."""
    args = _args(argv)
    clean_case(args[0] if args else '.')
    return 0


def clean_case0_cli(argv: Optional[List[str]] = None) -> int:
    """Invoked as `cleanCase0 [CASE]`, the case defaults to the current directory."""
    args = _args(argv)
    clean_case0(args[0] if args else '.')
    return 0


def restore_0_dir_cli(argv: Optional[List[str]] = None) -> int:
    args = _args(argv)
    processor = '-processor' in args
    args = [arg for arg in args if arg != '-processor']
    return 0 if restore_0_dir(args[0] if args else '.', processor=processor) else 1


def run_tests():
    """
    Main function for running all unit tests.
    Should only be used for the `caserunner-tests` entry-point.
    """
    print("Starting unit tests, this should take a few seconds.")

    pyinterp = sys.executable
    tests_dir = os.path.join(Path(__file__).parents[0], 'tests')

    # automatically find and run all unit tests using pytest's built-in discovery feature
    return subprocess.call([pyinterp, '-B', '-m', 'pytest', '-v'], cwd=tests_dir)
