import logging
import sys
from collections.abc import Collection
from logging import Formatter, StreamHandler


def setup_logging(
    level: int = logging.INFO,
    level_others: int = logging.WARNING,
    loggers: Collection[str] | None = None
) -> None:
    """
    Parameters
    ----------
    level
        The log level for the loggers in `loggers`.

    level_others
        The log level for the root logger, and thereby for every logger not in `loggers`.

    loggers
        Logger names set to `level`. The loggers of the executed script and of this package are always included.
    """
    names = set(loggers) if loggers is not None else set()
    # executed script and current package are always included
    names |= {'__main__', __name__.split('.')[0]}

    for name in names:
        logging.getLogger(name).setLevel(level)

    _setup_root_logger(level_others)


def _setup_root_logger(loglevel: int):
    """Configures the root logger with formatter, handlers, and exception handling."""
    rootlog = logging.getLogger()
    rootlog.setLevel(loglevel)

    # configure formatter
    formatter = Formatter('[%(asctime)s %(levelname)s]: %(message)s', '%H:%M:%S')

    # configure stream handler
    stream_handler = StreamHandler()
    stream_handler.setFormatter(formatter)
    rootlog.addHandler(stream_handler)

    # configure level names
    logging.addLevelName(logging.DEBUG, 'DBUG')
    logging.addLevelName(logging.INFO, 'INFO')
    logging.addLevelName(logging.WARNING, 'WARN')
    logging.addLevelName(logging.ERROR, ' ERR')
    logging.addLevelName(logging.CRITICAL, 'CRIT')

    # log uncaught errors
    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            rootlog.info('Keyboard interrupt')
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        rootlog.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception
