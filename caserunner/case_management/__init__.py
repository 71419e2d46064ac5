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
The case_management module contains the functions which create, reset and remove case directories.
"""

from .clone import clone_case, clone_parallel_case, clone_mesh
from .clean import clean_time_directories, clean_auxiliary, clean_adios_output, clean_dynamic_code, \
                   clean_optimisation, clean_post_processing, clean_poly_mesh, clean_fa_mesh, clean_snappy_files, \
                   clean_samples, clean_case, clean_case0, remove_case
from .restore import restore_0_dir
