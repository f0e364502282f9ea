import logging
import os
import sys


def getLogger(name):
    return logging.getLogger(name)


def setup(logDir, debugLogFileName, debug=False):
    """
    Configure the root logger.

    debug may be False (errors to stderr), True (debug log in logDir) or
    the path of a file to write the debug log to.
    """
    fmt = (
        '+%(process)-6d %(levelname)-9s '
        '%(name)-20s %(filename)20s:%(lineno)-5d '
        '[%(asctime)s] %(message)s')
    if debug:
        if debug is True:
            logFileName = os.path.join(logDir, debugLogFileName + ".log")
        else:
            logFileName = os.path.expanduser(debug)
        logging.basicConfig(
            filename=logFileName,
            level=logging.DEBUG,
            format=fmt)
    else:
        logging.basicConfig(stream=sys.stderr, level=logging.ERROR, format=fmt)
