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
Typed process invocation used for every call to an external toolkit application.

Commands are executed from an argument list, never through a shell string, so arguments with spaces or
shell metacharacters reach the application unchanged.
"""

import subprocess
from typing import List, NamedTuple, Optional, Sequence

COMMAND_NOT_FOUND = 127
"""Exit status reported when the executable could not be started, same as a POSIX shell."""


class CapturedOutput(NamedTuple):
    """Result of a command whose standard output was captured."""
    return_code: int
    stdout: str


class Command:
    """
    An external command: argument list plus the directory it runs in.
    """

    def __init__(self, argv: Sequence[str], cwd: Optional[str] = None) -> None:
        """
        Parameters
        ----------
        * argv: The executable followed by its arguments.
        * cwd:  Working directory for the process, None for the current directory.
        """
        if len(argv) == 0:
            raise ValueError('A command needs at least an executable.')

        self.argv: List[str] = [str(arg) for arg in argv]
        self.cwd = cwd

    def __repr__(self) -> str:
        return f"Command({self.argv!r}, cwd={self.cwd!r})"

    def run_logged(self, log_file_path: str, append: bool = False) -> int:
        """
        Run the command with stdout and stderr combined into a log file.

        The call blocks until the process exits. Standard input is closed so that a parallel launcher
        can not wait on the terminal.

        Parameters
        ----------
        * log_file_path:    The log file, relative to the current directory (not to `cwd`).
        * append:           Append to the log file instead of truncating it.

        Returns
        -------
        * return_code: The exit status of the process, 127 if it could not be started.
        """
        with open(log_file_path, 'a' if append else 'w') as log:
            try:
                completed = subprocess.run(self.argv, cwd=self.cwd, stdin=subprocess.DEVNULL,
                                           stdout=log, stderr=subprocess.STDOUT)
            except OSError as error:
                log.write(f"{self.argv[0]}: {error.strerror}\n")
                return COMMAND_NOT_FOUND
        return completed.returncode

    def run_captured(self) -> CapturedOutput:
        """
        Run the command and capture its standard output. Standard error is discarded.

        Returns
        -------
        * The exit status and the decoded standard output.
        """
        try:
            completed = subprocess.run(self.argv, cwd=self.cwd, stdin=subprocess.DEVNULL,
                                       stdout=subprocess.PIPE, stderr=subprocess.DEVNULL, text=True)
        except OSError:
            return CapturedOutput(COMMAND_NOT_FOUND, '')
        return CapturedOutput(completed.returncode, completed.stdout)
