"""This module defines logging capabilities for kubinit."""

import logging
import sys
import time

# pylint: disable=no-name-in-module
from huepy import (bad, red, info as infomsg, yellow, run, grey,
                   good, green)

LOG_LEVELS = list(range(5))
DEFAULT_LOG_LEVEL = 3

LEVEL_NAMES = {
    'quiet': 0,
    'error': 1,
    'warning': 2,
    'info': 3,
    'debug': 4}

# kubinit verbosity -> python logging level
PYTHON_LEVELS = {
    1: logging.ERROR,
    2: logging.WARNING,
    3: logging.INFO,
    4: logging.DEBUG}


def get_logger(name):
    """Returns a Python logger writing plain messages to STDOUT.

    Only a single handler is ever attached, calling this repeatedly with
    the same name does not duplicate the output.

    Args:
        name (str): The name of the Logger.

    Returns:
        A Python Logger.
    """

    log = logging.getLogger(name)
    set_level(log, Logger.LOG_LEVEL)

    if not log.handlers:
        sh = logging.StreamHandler(sys.stdout)
        sh.setFormatter(logging.Formatter("%(message)s"))
        log.addHandler(sh)

    return log


def set_level(logger, level):
    """Sets the logging level.

    Level 0 disables the logger, 1 to 4 map to ERROR, WARNING, INFO
    and DEBUG.

    Args:
        logger: A Python logger object.
        level (int): The kubinit verbosity level.

    Raises:
        ValueError if log level is unsupported.
    """

    if level not in LOG_LEVELS:
        raise ValueError(f"log level {level} is not supported")

    if level == 0:
        logger.disabled = True
        return

    logger.disabled = False
    logger.setLevel(PYTHON_LEVELS[level])


def level_from_name(level):
    """Convert a verbosity given on the command line to an int.

    Args:
        level (str or int): ``"debug"``, ``"4"``, ``4`` ...

    Returns:
        int
    """
    try:
        return LEVEL_NAMES[level]
    except KeyError:
        return int(level)


class Singleton(type):
    """Metaclass returning the same instance for every instantiation.

    Re-instantiating calls ``__init__`` again on the existing object, so
    ``Logger("a")`` followed by ``Logger("b")`` yields one object that
    proxies the logger named ``b``. Only use this for logging.
    """
    _instances = {}

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super(Singleton, cls).__call__(*args, **kwargs)
        else:
            cls._instances[cls].__init__(*args, **kwargs)

        return cls._instances[cls]


class Logger(metaclass=Singleton):
    """Colored logging for kubinit.

    A singleton proxy to :class:`logging.Logger`. Set
    ``Logger.LOG_LEVEL`` before instantiating to change the verbosity:

    .. code:: shell

        * 0 - quiet (no output)
        * 1 - error
        * 2 - warning
        * 3 - info
        * 4 - debug

    All methods accept ``%``-style arguments.

    Example:
        >>> log = Logger(__name__)
        >>> log.info("rendering %s", "InitControlplane")
        [~] rendering InitControlplane

    Attributes:
        LOG_LEVEL (int): The log level to be used across the application.

    Args:
        name (str): The name of the logger.
    """

    LOG_LEVEL = DEFAULT_LOG_LEVEL

    def __init__(self, name):
        self.logger = get_logger(name)

    @property
    def level(self):
        """Returns the Python log level equivalent, 0 if disabled."""
        if not self.logger:
            return None

        if self.logger.disabled:
            return 0

        return self.logger.level

    @level.setter
    def level(self, level):
        set_level(self.logger, level_from_name(level))

    def error(self, msg, *args, color=True, **kwargs):
        """Logs a message on error level, red with ``[-]``."""

        if color:
            msg = bad(red(msg))

        self.logger.error(msg, *args, **kwargs)

    def warning(self, msg, *args, color=True, **kwargs):
        """Logs a message on warning level, yellow with ``[!]``."""

        if color:
            msg = infomsg(yellow(msg))

        self.logger.warning(msg, *args, **kwargs)

    def info(self, msg, *args, color=True, **kwargs):
        """Logs a message on info level, grey with ``[~]``."""

        if color:
            msg = run(grey(msg))

        self.logger.info(msg, *args, **kwargs)

    def debug(self, msg, *args, color=True, **kwargs):
        """Logs a message on debug level.

        Colored messages are prefixed with the current timestamp, e.g.
        ``[20190426-155611] rendering JoinControlplane``.
        """

        if color:
            now = time.strftime("%Y%m%d-%H%M%S")
            msg = grey(f"[{now}] {msg}")

        self.logger.debug(msg, *args, **kwargs)

    def success(self, msg, *args, color=True, **kwargs):
        """Logs a success on info level, green with ``[+]``."""

        if color:
            msg = good(green(msg))

        self.logger.info(msg, *args, **kwargs)
