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
Running a single toolkit application with its output sent to a log file in the case directory.

A log file doubles as the record that an application has been run: if `log.<application>` exists the application
is not run again unless appending or overwriting is requested.
"""

import os
import sys
from os.path import abspath, isfile
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .command import Command
from .image import wrap_command
from ..config_functions import ConfigParser
from ..io import log_file_name


class RunOptions:
    """
    The options which control how an application is run.
    """

    def __init__(self,
                 append:             bool = False,
                 overwrite:          bool = False,
                 suffix:             Optional[str] = None,
                 n_procs:            Optional[int] = None,
                 decompose_par_dict: Optional[str] = None) -> None:
        """
        Parameters
        ----------
        * append:               Run even if the log file exists, appending to it.
        * overwrite:            Run even if the log file exists, truncating it.
        * suffix:               Suffix added to the log file name, `log.<application>.<suffix>`.
        * n_procs:              Number of processes for a parallel run. Looked up from the decomposition
                                dictionary when not given.
        * decompose_par_dict:   Alternative decomposition dictionary, passed on to the application.
        """
        if n_procs is not None and n_procs < 1:
            raise ValueError(f"Number of processes must be positive, got {n_procs}.")

        self.append             = append
        self.overwrite          = overwrite
        self.suffix             = suffix
        self.n_procs            = n_procs
        self.decompose_par_dict = decompose_par_dict

    def __repr__(self) -> str:
        return (f"RunOptions(append={self.append}, overwrite={self.overwrite}, suffix={self.suffix!r}, "
                f"n_procs={self.n_procs}, decompose_par_dict={self.decompose_par_dict!r})")


class RunResult(NamedTuple):
    """
    Outcome of a call to `run_application` or `run_parallel`.

    The return code is recorded for the caller's information only, a failed run still leaves its log file behind
    and is therefore skipped on the next call.
    """
    application: str
    log_file: str
    skipped: bool
    return_code: Optional[int]


def parse_run_options(argv: Sequence[str], parallel: bool = False) -> Tuple[RunOptions, str, List[str]]:
    """
    Split a command line into run options, the application and the application's own arguments.

    Options are only recognized before the application name, everything after it is passed on verbatim.

    Parameters
    ----------
    * argv:     The command line without the program name.
    * parallel: Whether the process count options `-n`/`-np` are accepted.

    Returns
    -------
    * options:      The parsed RunOptions.
    * application:  The application to run.
    * app_args:     The arguments for the application.
    """
    def value_for(i: int) -> str:
        if i + 1 >= len(argv):
            raise ValueError(f"Option {argv[i]} needs a value.")
        return argv[i + 1]

    options = RunOptions()
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ('-a', '-append'):
            options.append = True
        elif arg in ('-o', '-overwrite'):
            options.overwrite = True
        elif arg in ('-s', '-suffix'):
            options.suffix = value_for(i)
            i += 1
        elif parallel and arg in ('-n', '-np'):
            value = value_for(i)
            if not value.isdigit() or int(value) < 1:
                raise ValueError(f"Invalid number of processes: {value}")
            options.n_procs = int(value)
            i += 1
        elif arg == '-decomposeParDict':
            options.decompose_par_dict = value_for(i)
            i += 1
        else:
            break
        i += 1

    if i >= len(argv):
        raise ValueError("No application specified.")

    return options, argv[i], list(argv[i + 1:])


def execute_logged(config_parser:   ConfigParser,
                   options:         RunOptions,
                   application:     str,
                   argv:            Sequence[str],
                   case_directory:  str) -> RunResult:
    """
    Shared implementation of serial and parallel runs: idempotency check, logging and execution.

    Parameters
    ----------
    * config_parser:    The CaseRunner ConfigParser, used for the container settings.
    * options:          RunOptions for append/overwrite/suffix.
    * application:      The application whose name the log file takes.
    * argv:             The full command line to execute.
    * case_directory:   The case in which to run and in which the log file is written.

    Returns
    -------
    * The RunResult.
    """
    app_name = os.path.basename(application)
    log_file = os.path.join(case_directory, log_file_name(application, options.suffix))

    if isfile(log_file) and not (options.append or options.overwrite):
        print(f"{app_name} already run on {abspath(case_directory)}: remove log file '{log_file}' to re-run")
        return RunResult(app_name, log_file, True, None)

    print(f"Running {app_name} on {abspath(case_directory)}")
    command = Command(wrap_command(config_parser, argv), cwd=case_directory)
    return_code = command.run_logged(log_file, append=options.append)
    if return_code != 0:
        print(f"{app_name} exited with status {return_code}, see '{log_file}'", file=sys.stderr)

    return RunResult(app_name, log_file, False, return_code)


def run_application(config_parser:  ConfigParser,
                    options:        RunOptions,
                    application:    str,
                    *app_args:      str,
                    case_directory: Optional[str] = None) -> RunResult:
    """
    Run an application serially, logging to `log.<application>[.<suffix>]`.

    Parameters
    ----------
    * config_parser:    The CaseRunner ConfigParser.
    * options:          RunOptions controlling the log file handling.
    * application:      The application to run.
    * app_args:         Arguments passed to the application.
    * case_directory:   The case to run in, defaults to CASE, case_directory.

    Returns
    -------
    * The RunResult.
    """
    if case_directory is None:
        case_directory = config_parser.case_path()

    argv = [application]
    if options.decompose_par_dict:
        argv += ['-decomposeParDict', options.decompose_par_dict]
    argv += list(app_args)

    return execute_logged(config_parser, options, application, argv, case_directory)
