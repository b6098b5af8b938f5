import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler

ROOT_LOGGER = "sg_sync"
FORMATTER = logging.Formatter("%(asctime)s — %(name)s — %(levelname)s — %(message)s")
QUIET_LOGGERS = ("botocore", "boto3", "urllib3")


def get_console_handler():
    # stdout is reserved for the run summary
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(FORMATTER)
    return console_handler


def get_file_handler(name):
    file_handler = TimedRotatingFileHandler(name, when="midnight")
    file_handler.setFormatter(FORMATTER)
    return file_handler


def debug_enabled():
    return os.environ.get("DEBUG", default="false").lower() == "true"


def get_logger(logger_name=None):
    if not logger_name:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{logger_name}")


def setup_logging(debug=None):
    if debug is None:
        debug = debug_enabled()
    aws_env = os.environ.get("AWS_EXECUTION_ENV", "").lower() != ""

    logger = logging.getLogger(ROOT_LOGGER)
    had_handler = logger.hasHandlers()

    # Remove existing handlers to avoid duplicate logs
    logger.handlers.clear()
    logger.propagate = False

    logger.addHandler(get_console_handler())
    if debug and not aws_env:
        log_dir = ".logs"
        if not os.path.exists(log_dir):
            os.mkdir(log_dir)
        logger.addHandler(get_file_handler(os.path.join(log_dir, f"{ROOT_LOGGER}.log")))

    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if not had_handler:
        logger.debug("Logger %s initialized with debug: %s, aws_env: %s", ROOT_LOGGER, debug, aws_env)

    return logger
