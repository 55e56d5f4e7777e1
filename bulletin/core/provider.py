import inspect
import logging.config
import typing as t

from .logging import TRACE, TraceLogLevelLogger


class LoggingProvider(object):
    """Configures stdlib logging from the ``logging`` settings document.

    Constructed once, as a container resource, before anything logs.
    """

    def __init__(self, config: dict[str, t.Any], debug: bool):
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.addLevelName(TRACE, "TRACE")
        logging.config.dictConfig(config)
        # surface Decimal and SQLAlchemy warnings while developing
        logging.captureWarnings(debug)

    @staticmethod
    def get_logger(name: str | None = None) -> TraceLogLevelLogger:
        """Logger named after the calling module unless a name is given."""
        if name is None:
            frame = inspect.stack()[1].frame
            name = frame.f_globals["__name__"]
        return t.cast(TraceLogLevelLogger, logging.getLogger(name))
