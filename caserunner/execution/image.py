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
Locating the container image in which the toolkit applications are run.
"""

import shlex
import sys
from os.path import isfile
from typing import List, Sequence

from ..config_functions import ConfigParser


def image_found(config_parser: ConfigParser) -> bool:
    """True iff an image is configured and the file it points to exists."""
    image = config_parser.get_item(['ENVIRONMENT', 'image'], str)
    return bool(image) and isfile(image)


def set_image(config_parser: ConfigParser, path: str) -> bool:
    """
    Make `path` the active container image.

    Parameters
    ----------
    * config_parser:    The CaseRunner ConfigParser to update.
    * path:             Path to the image file.

    Returns
    -------
    * True if the image was set, False if the file does not exist, in which case the configuration is unchanged.
    """
    if not isfile(path):
        print(f"Error: image file '{path}' does not exist", file=sys.stderr)
        return False

    config_parser['ENVIRONMENT']['image'] = path
    return True


def wrap_command(config_parser: ConfigParser, argv: Sequence[str]) -> List[str]:
    """
    Route a command through the container image when one is available.

    Inside the container the toolkit environment script is sourced before the command is run.

    Parameters
    ----------
    * config_parser:    The CaseRunner ConfigParser holding the image settings.
    * argv:             The command to run.

    Returns
    -------
    * The argument list to execute, `argv` itself when no image is found.
    """
    if not image_found(config_parser):
        return list(argv)

    runtime = config_parser.get_item(['ENVIRONMENT', 'container_runtime'], str)
    image   = config_parser.get_item(['ENVIRONMENT', 'image'],             str)
    bashrc  = config_parser.get_item(['ENVIRONMENT', 'bashrc'],            str)

    script = '. {} && {}'.format(shlex.quote(bashrc), shlex.join(argv))
    return [runtime, 'exec', image, 'bash', '-c', script]
