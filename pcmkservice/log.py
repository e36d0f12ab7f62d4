# -*- coding: utf-8 -*-

import os
import sys
import logging
import logging.config
import logging.handlers
import typing
from contextlib import contextmanager

from . import constants
from . import utils

PCMKSERVICE_LOG_FILE = "/var/log/pcmkservice/pcmkservice.log"


class ConsoleCustomHandler(logging.StreamHandler):
    """
    A custom handler for console

    Redirect ERROR/WARNING/DEBUG message to sys.stderr
    Redirect INFO message to sys.stdout
    """

    def emit(self, record):
        if record.levelno == logging.INFO:
            stream = sys.stdout
        else:
            stream = sys.stderr
        msg = self.format(record)
        stream.write(msg)
        stream.write(self.terminator)


class NoBacktraceFormatter(logging.Formatter):
    """Suppress backtrace unless option debug is set."""
    def format(self, record):
        if record.exc_info or record.stack_info:
            from pcmkservice import config
            if config.core.debug:
                return super().format(record)
            else:
                record.message = record.getMessage()
                if self.usesTime():
                    record.asctime = self.formatTime(record, self.datefmt)
            return self.formatMessage(record)
        else:
            return super().format(record)


class ConsoleColoredFormatter(NoBacktraceFormatter):
    """Print levelname with colors and suppress backtrace."""
    COLORS = {
        logging.WARNING: constants.YELLOW,
        logging.INFO: constants.GREEN,
        logging.ERROR: constants.RED
    }
    FORMAT = "%(levelname)s: %(message)s"

    def __init__(self, fmt=None):
        if not fmt:
            fmt = self.FORMAT
        super().__init__(fmt)
        self._colored_formatter: typing.Mapping[int, logging.Formatter] = {
            level: NoBacktraceFormatter(fmt.replace('%(levelname)s', f'{color}%(levelname)s{constants.END}'))
            for level, color in self.COLORS.items()
        }

    def format(self, record):
        colored_formatter = self._colored_formatter.get(record.levelno)
        if colored_formatter is not None:
            return colored_formatter.format(record)
        else:
            return super().format(record)


class DebugCustomFilter(logging.Filter):
    """
    A custom filter for debug messages
    """
    def filter(self, record):
        from .config import core
        if record.levelno == logging.DEBUG:
            return core.debug
        return True


class GroupWriteRotatingFileHandler(logging.handlers.RotatingFileHandler):
    """
    A custom rotating file handler which keeps log files group writable after rotating
    Ownership is left to whoever created the file
    """
    def _open(self):
        rtv = super()._open()
        try:
            os.fchmod(rtv.fileno(), 0o664)
        except PermissionError:
            # The file has been open, and FileHandler can write to it.
            pass
        return rtv


LOGGING_CFG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "console": {
            "()": ConsoleColoredFormatter,
            "fmt": "%(levelname)s: %(message)s",
        },
        "file": {
            "format": "%(asctime)s {} %(name)s: %(levelname)s: %(message)s".format(utils.this_node()),
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        }
    },
    "filters": {
        "filter": {
            "()": DebugCustomFilter
        },
    },
    "handlers": {
        'null': {
            'class': 'logging.NullHandler'
        },
        "console": {
            "()": ConsoleCustomHandler,
            "formatter": "console",
            "filters": ["filter"]
        },
        "file": {
            "()": GroupWriteRotatingFileHandler,
            "filename": PCMKSERVICE_LOG_FILE,
            "formatter": "file",
            "filters": ["filter"],
            "maxBytes": 1*1024*1024,
            "backupCount": 10
        }
    },
    "loggers": {
        "pcmkservice": {
            "handlers": ["null", "file", "console"],
            "level": "DEBUG"
        },
    }
}


class LoggerUtils(object):
    """
    A class to keep some helpers related with logger
    """
    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @contextmanager
    def status_long(self, msg):
        """
        To wait and mark something finished, start with BEGIN msg, end of END msg
        """
        self.logger.info("BEGIN %s", msg)
        try:
            yield
        except Exception:
            self.logger.error("FAIL %s", msg)
            raise
        else:
            self.logger.info("END %s", msg)


def setup_logging(log_file=PCMKSERVICE_LOG_FILE):
    """
    Setup log file and loading logging config dict
    """
    LOGGING_CFG["handlers"]["file"]["filename"] = log_file
    # dirname(log_file) should be created by package manager during installation
    try:
        with open(log_file, 'a'):
            pass
    except (PermissionError, FileNotFoundError) as e:
        print('{}WARNING:{} Failed to open log file: {}'.format(constants.YELLOW, constants.END, e), file=sys.stderr)
        LOGGING_CFG["handlers"]["file"] = {'class': 'logging.NullHandler'}
    logging.config.dictConfig(LOGGING_CFG)


def setup_logger(name):
    """
    Get the logger
    name could be any module name
    should assign parent's handlers for inherit
    """
    logger = logging.getLogger(name)
    if logger.parent is not None and logger.parent.name == "pcmkservice":
        logger.handlers = logger.parent.handlers
        logger.propagate = False
    return logger
