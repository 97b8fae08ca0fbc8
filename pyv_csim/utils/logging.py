import logging

LOGGER_NAME = "pyv-csim"


def get_logger(name: str = LOGGER_NAME, level: int = logging.INFO):
    """Returns a package logger; records go to stderr so stdout stays parseable."""
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return logging.getLogger(name)
