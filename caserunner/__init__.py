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
CaseRunner: running, cloning and cleaning OpenFOAM-style simulation cases.
"""

from .config_functions import ConfigParser
from .run import run
