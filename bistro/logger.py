import logging
import os
import typing

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname) - 8s %(name)s:%(lineno)d %(message)s"
DEFAULT_LOG_FILENAME = "logs/debug.log"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_LIBRARIES_LIST = ["asyncio", "pymongo", "motor"]
DEFAULT_LOG_LIBRARIES_LEVEL = "WARN"


def configure_logging(
    log_level: str = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    console: bool = True,
    file: bool = False,
    filename: str = DEFAULT_LOG_FILENAME,
    lib_list: typing.List = DEFAULT_LOG_LIBRARIES_LIST,
    lib_level: str = DEFAULT_LOG_LIBRARIES_LEVEL,
) -> None:
    """Configures the root logger with the given format and handler(s).
       Libraries in lib_list get their own level so a DEBUG root does not drown in driver chatter.

    Args:
        log_level (str, optional): The log_level for the root logger. Defaults to DEFAULT_LOG_LEVEL.
        log_format (str, optional): The format of the log records. Defaults to DEFAULT_LOG_FORMAT.
        console (bool, optional): Whether to enable the console handler. Defaults to True.
        file (bool, optional): Whether to enable the file-based handler. Defaults to False.
        filename (str, optional): Log file used by the file-based handler. Defaults to DEFAULT_LOG_FILENAME.
        lib_list (typing.List, optional): List of libraries/packages name. Defaults to DEFAULT_LOG_LIBRARIES_LIST.
        lib_level (str, optional): The log level for the libraries in lib_list. Defaults to DEFAULT_LOG_LIBRARIES_LEVEL.
    """
    log_level = log_level.upper()
    lib_level = lib_level.upper()

    # Clear existing handlers so repeated calls (reload, tests) do not duplicate output
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.handlers.clear()

    root_logger.setLevel(log_level)
    formatter = logging.Formatter(log_format)

    if console:
        _add_handler(root_logger, logging.StreamHandler(), log_level, formatter)
    if file:
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        _add_handler(root_logger, logging.FileHandler(filename), log_level, formatter)

    for lib_name in lib_list:
        logging.getLogger(lib_name).setLevel(lib_level)

    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        logging.getLogger(logger_name).setLevel(log_level)


def _add_handler(
    root_logger: logging.Logger,
    handler: logging.Handler,
    log_level: str,
    formatter: logging.Formatter,
) -> None:
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
