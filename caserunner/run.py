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

import shlex
from time import perf_counter_ns
from typing import Dict, Union

from .config_functions import ConfigParser
from .case_management import restore_0_dir
from .execution import get_application, parse_run_options, run_application, run_parallel

APPLICATION_PLACEHOLDER = 'application'
"""Step token replaced by the application named in the case's controlDict."""


def run(config_parser_or_file: Union[ConfigParser, str]) -> Dict[str, int]:
    """
    The main function of the CaseRunner package. Sequentially goes through each step listed under RUN, steps,
    running each one in the case directory.

    Steps are separated by commas or newlines; a comma inside quotes is part of its step.
    Each step is an application command line, optionally preceded by run options, e.g. `-s fine blockMesh`.
    Steps starting with `parallel` are run with `run_parallel`, and `restore0Dir [-processor]` restores the
    initial conditions.
    The word `application` stands for the solver named in the case's controlDict.

    Parameters
    ----------
    * config_parser_or_file: A CaseRunner ConfigParser, or the path of a config file to load one from.

    Returns
    -------
    * timing_dict: Mapping between each step and the time, in ns, that the step took.
    """
    if type(config_parser_or_file) is ConfigParser:
        config_parser = config_parser_or_file
    else:
        config_parser = ConfigParser(config_parser_or_file)

    steps = config_parser.get_list(['RUN', 'steps'], str)
    if not steps:
        print("No steps to run.")

    timing_dict = {}
    for step in steps:
        tokens = shlex.split(step)

        start = perf_counter_ns()
        if tokens[0] == 'restore0Dir':
            restore_0_dir(config_parser.case_path(), processor='-processor' in tokens[1:])
        else:
            parallel = tokens[0] == 'parallel'
            if parallel:
                tokens = tokens[1:]
            options, application, app_args = parse_run_options(tokens, parallel=parallel)

            if application == APPLICATION_PLACEHOLDER:
                application, found = get_application(config_parser)
                if not found:
                    raise ValueError(f"Could not determine the application for step \"{step}\".")

            if parallel:
                run_parallel(config_parser, options, application, *app_args)
            else:
                run_application(config_parser, options, application, *app_args)
        timing_dict[step] = perf_counter_ns() - start

    print("End RUN")
    return timing_dict
