# coding=utf-8
import logging
import os
import sys
from logging.handlers import RotatingFileHandler


def init_logger(level=logging.WARNING, log_filename=None, logger=None):
    """Set up the probe logger. stdout is kept for the result record."""
    if logger is None:
        logger = logging.getLogger('py_mysql_probe')
    # drop handlers from an earlier call so lines are not written twice
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    fmt = logging.Formatter('%(asctime)s %(levelname)s [%(process)d] %(filename)s %(message)s ')

    if log_filename:
        log_dir = os.path.dirname(os.path.abspath(log_filename))
        if not os.path.isdir(log_dir):
            os.makedirs(log_dir)

        # 10M per file
        file_handler = RotatingFileHandler(log_filename, mode='a', maxBytes=10240000, backupCount=100,
                                           encoding="utf8")
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(fmt)
    logger.addHandler(stderr_handler)
    logger.setLevel(level)

    return logger
