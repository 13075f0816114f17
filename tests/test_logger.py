from __future__ import annotations

import logging

from utils import configure_package_logging, get_logger
from utils.logger import PACKAGE_LOGGERS, ROOT_LOGGER_NAME


def _reset(names) -> None:
    for name in names:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


def test_package_loggers_share_root_handlers() -> None:
    names = (ROOT_LOGGER_NAME,) + PACKAGE_LOGGERS
    _reset(names)
    try:
        root = configure_package_logging(level=logging.WARNING, use_rich=False)
        configure_package_logging(level=logging.WARNING, use_rich=False)

        assert root is get_logger()
        assert len(root.handlers) == 1
        for name in PACKAGE_LOGGERS:
            package_logger = logging.getLogger(name)
            assert package_logger.handlers == root.handlers
            assert package_logger.propagate is False
            assert package_logger.level == logging.WARNING
    finally:
        _reset(names)
