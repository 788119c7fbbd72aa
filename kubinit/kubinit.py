"""
kubinit
=======

The main entry point for rendering user data.
Don't use it directly, instead install the package with setup.py.
It automatically creates an executable in your path.

"""
import argparse
import sys

from mach import mach1

from . import __version__
from .cli import (read_config, init_request, join_request, worker_request,
                  userdata_path, write_userdata)
from .provision.cloud_init import (new_init_control_plane,
                                   new_join_control_plane, new_join_worker)
from .provision.render import RenderError
from .util.logger import Logger, level_from_name

LOGGER = Logger(__name__)


def render(config, output, kind, make_request, builder):
    """
    Read config, render the user data and write it to output.

    Exits with status 1 on any error.
    """
    try:
        config_dict = read_config(config)
        request = make_request(config_dict)
        userdata = builder(request)
    except (ValueError, RenderError, OSError) as err:
        LOGGER.error(f"Error: {err}")
        sys.exit(1)

    write_userdata(userdata, output or userdata_path(config, kind))


@mach1()
class Kubinit:  # pylint: disable=no-self-use
    """
    The main entry point for the program. This class does the CLI parsing
    and decides which user data is rendered
    """
    def __init__(self):
        self.parser.add_argument(  # pylint: disable=no-member
            "--version", action="store_true",
            help="show version and exit",
            default=argparse.SUPPRESS)

        verbosity_help = "".join([
            "set the verbosity level (",
            "0 = quiet, ",
            "1 = error, ",
            "2 = warning, ",
            "3 = info, ",
            "4 = debug)"])
        self.parser.add_argument("--verbosity",  # pylint: disable=no-member
                                 "-v",
                                 help=verbosity_help,
                                 choices=['0', '1', '2', '3', '4', 'quiet',
                                          'error', 'warning', 'info', 'debug'],
                                 type=str,
                                 default=3)

    def _get_version(self):
        print("%s version: %s" % (self.__class__.__name__, __version__))

    def init(self, config: str, output: str = ""):
        """
        Render user data for the node bootstrapping the cluster

        config - configuration file
        output - where to write the user data, - for STDOUT
        """
        render(config, output, "init", init_request, new_init_control_plane)

    def join(self, config: str, output: str = ""):
        """
        Render user data for a control plane node joining the cluster

        config - configuration file
        output - where to write the user data, - for STDOUT
        """
        render(config, output, "join", join_request, new_join_control_plane)

    def worker(self, config: str, output: str = ""):
        """
        Render user data for a worker node joining the cluster

        config - configuration file
        output - where to write the user data, - for STDOUT
        """
        render(config, output, "worker", worker_request, new_join_worker)


def main():
    """
    run and execute kubinit
    """
    k = Kubinit()

    # pylint: disable=no-member
    k.parser.description = 'Render cloud-init user data for MicroK8s '\
                           'machines from a YAML configuration file.'

    # Setting verbosity level
    level = level_from_name(k.parser.parse_args().verbosity)
    Logger.LOG_LEVEL = level
    LOGGER.level = level

    # the mach decorator analyzes the methods in the class and dynamically
    # creates the CLI parser. It also adds the method run to the class.
    k.run()  # pylint: disable=no-member
