from logging import FileHandler, Formatter, Handler, Logger, StreamHandler, getLogger

from spaify.config import LogConfig

LOGGER_NAME = "spaify"


def _create_handler(config: LogConfig) -> Handler:
    if config.output:
        handler = FileHandler(config.output, encoding="utf-8")
    else:
        # stdout is reserved for the messages shown to the user
        handler = StreamHandler()

    handler.setFormatter(Formatter(config.format))
    handler.setLevel(config.level)
    return handler


def setup(config: LogConfig, force: bool = False):
    """
    Set up logging based on the current configuration.

    All Spaify modules log under the `spaify` logger, which gets a single
    handler writing either to the configured file or to stderr.

    The method is idempotent unless `force` is set to True,
    in which case it will reconfigure the logging.
    """
    logger = getLogger(LOGGER_NAME)
    if logger.handlers and not force:
        return

    while logger.handlers:
        handler = logger.handlers[0]
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(config.level)
    logger.addHandler(_create_handler(config))
    logger.propagate = False


def get_logger(name) -> Logger:
    """
    Get log function for a given (module) name

    :return: Logger instance
    """
    return getLogger(name)


__all__ = ["setup", "get_logger"]
