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
Parallel runs: discovering the number of subdomains and launching an application through MPI.
"""

import sys
from typing import List, Optional, Tuple

from .command import Command
from .image import wrap_command
from .process import RunOptions, RunResult, execute_logged
from ..config_functions import ConfigParser

NO_APPLICATION = 'false'
"""Returned by `get_application` when the application could not be found."""


def query_dictionary(config_parser:     ConfigParser,
                     entry:             str,
                     dictionary_path:   str,
                     case_directory:    str) -> List[str]:
    """
    Ask the toolkit for the value of a dictionary entry.

    Parameters
    ----------
    * config_parser:    The CaseRunner ConfigParser.
    * entry:            The keyword to look up.
    * dictionary_path:  The dictionary file, relative to the case directory.
    * case_directory:   The case directory.

    Returns
    -------
    * tokens: The whitespace separated tokens of the value, empty if the lookup failed.
    """
    foam_dictionary = config_parser.get_item(['ENVIRONMENT', 'foam_dictionary'], str)
    argv = [foam_dictionary, '-entry', entry, '-value', dictionary_path]

    output = Command(wrap_command(config_parser, argv), cwd=case_directory).run_captured()
    if output.return_code != 0:
        return []
    return output.stdout.split()


def get_number_of_processors(config_parser:         ConfigParser,
                             decompose_par_dict:    Optional[str] = None,
                             case_directory:        Optional[str] = None) -> Tuple[int, bool]:
    """
    Read `numberOfSubdomains` from a decomposition dictionary.

    Parameters
    ----------
    * config_parser:        The CaseRunner ConfigParser.
    * decompose_par_dict:   The dictionary to read, defaults to CASE, decompose_par_dict.
    * case_directory:       The case, defaults to CASE, case_directory.

    Returns
    -------
    * n_procs:  The number of subdomains, 1 if the value could not be read.
    * success:  Whether the value was read.
    """
    if decompose_par_dict is None:
        decompose_par_dict = config_parser.get_item(['CASE', 'decompose_par_dict'], str)
    if case_directory is None:
        case_directory = config_parser.case_path()

    tokens = query_dictionary(config_parser, 'numberOfSubdomains', decompose_par_dict, case_directory)
    if len(tokens) == 1 and tokens[0].isdigit() and int(tokens[0]) > 0:
        return int(tokens[0]), True

    print(f"Error retrieving 'numberOfSubdomains' from {decompose_par_dict}", file=sys.stderr)
    return 1, False


def get_application(config_parser:     ConfigParser,
                    case_directory:     Optional[str] = None) -> Tuple[str, bool]:
    """
    Read the `application` entry of the case's control dictionary.

    Returns
    -------
    * application:  The application name, NO_APPLICATION if it could not be read.
    * success:      Whether the value was read.
    """
    control_dict = config_parser.get_item(['CASE', 'control_dict'], str)
    if case_directory is None:
        case_directory = config_parser.case_path()

    tokens = query_dictionary(config_parser, 'application', control_dict, case_directory)
    if len(tokens) == 1:
        return tokens[0], True

    print(f"Error retrieving 'application' from {control_dict}", file=sys.stderr)
    return NO_APPLICATION, False


def parallel_command_line(config_parser:    ConfigParser,
                          n_procs:          int,
                          options:          RunOptions,
                          application:      str,
                          app_args:         List[str]) -> List[str]:
    """Build `mpirun -np N [--bind-to none] application -parallel [-decomposeParDict path] args`."""
    argv = [config_parser.get_item(['ENVIRONMENT', 'mpirun'], str), '-np', str(n_procs)]

    # Without a resource manager, several jobs on one host would otherwise be bound to the same cores
    if config_parser.get_item(['ENVIRONMENT', 'bind_to_none'], bool):
        argv += ['--bind-to', 'none']

    argv += [application, '-parallel']
    if options.decompose_par_dict:
        argv += ['-decomposeParDict', options.decompose_par_dict]
    return argv + list(app_args)


def run_parallel(config_parser:     ConfigParser,
                 options:           RunOptions,
                 application:       str,
                 *app_args:         str,
                 case_directory:    Optional[str] = None) -> RunResult:
    """
    Run an application in parallel, logging to `log.<application>[.<suffix>]`.

    The number of processes is, in order of precedence, `options.n_procs`, the `numberOfSubdomains` of
    `options.decompose_par_dict`, or that of the case's default decomposition dictionary.
    A failed lookup falls back to a single process.

    Parameters
    ----------
    * config_parser:    The CaseRunner ConfigParser.
    * options:          RunOptions for the run.
    * application:      The application to run.
    * app_args:         Arguments passed to the application.
    * case_directory:   The case to run in, defaults to CASE, case_directory.

    Returns
    -------
    * The RunResult.
    """
    if case_directory is None:
        case_directory = config_parser.case_path()

    n_procs = options.n_procs
    if n_procs is None:
        n_procs, _ = get_number_of_processors(config_parser, options.decompose_par_dict, case_directory)

    argv = parallel_command_line(config_parser, n_procs, options, application, list(app_args))
    return execute_logged(config_parser, options, application, argv, case_directory)
