import logging
import os
import sys
from datetime import datetime
from logging import Logger
from colorama import init, Fore, Style
init(autoreset=True)


LOG_FILE_PREFIX = "strategy_builder_"


def create_log_directory(log_folder: str = None):
    """
    Ensures that the log directory exists. If not, it creates it.

    Args:
        log_folder: Optional path to log folder. If None, uses platform-specific location.
    """
    if log_folder is None:
        from strategy_builder.utils.paths import get_logs_dir
        log_folder = str(get_logs_dir())

    if not os.path.exists(log_folder):
        os.makedirs(log_folder)
    return log_folder


def get_log_file_path(log_folder: str = None) -> str:
    """
    Returns a log file path with a timestamp in the name.
    Format: logs/strategy_builder_YYYY-mm-dd_HHMMSS.log

    Args:
        log_folder: Optional path to log folder. If None, uses platform-specific location.
    """
    if log_folder is None:
        from strategy_builder.utils.paths import get_logs_dir
        log_folder = str(get_logs_dir())

    timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    return os.path.join(log_folder, f"{LOG_FILE_PREFIX}{timestamp}.log")


def purge_old_logs(log_folder: str, keep: int = 10):
    """
    Removes older log files, keeping only the most recent 'keep' files.
    Log names embed a sortable timestamp, so lexicographical order is chronological.
    """
    all_logs = [f for f in os.listdir(log_folder)
                if f.startswith(LOG_FILE_PREFIX) and f.endswith(".log")]
    all_logs.sort()

    logs_to_remove = all_logs[:-keep] if keep > 0 else all_logs
    for old_file in logs_to_remove:
        os.remove(os.path.join(log_folder, old_file))


class ColorFormatter(logging.Formatter):
    """
    A formatter that colorizes log level names using colorama.
    """
    color_map = {
        logging.DEBUG: Fore.BLUE,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.LIGHTRED_EX,
    }

    def format(self, record):
        color = self.color_map.get(record.levelno, Fore.WHITE)
        # Copy so other handlers keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{Style.RESET_ALL}"
        return super().format(record)


def init_logger(
    name: str = "StrategyBuilderLogger",
    log_folder: str = None,
    console_logging: bool = True,
    file_logging: bool = False,
    level: int = logging.INFO
) -> Logger:
    """
    Initializes and configures the logger with the specified settings.
    :param name: The logger's name.
    :param log_folder: The folder where log files should go. If None, uses platform-specific location.
    :param console_logging: Whether to log to the console.
    :param file_logging: Whether to log to a file.
    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    :return: A configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Calling init_logger twice must not stack handlers
    if not logger.handlers:
        if file_logging:
            log_folder = create_log_directory(log_folder)
            purge_old_logs(log_folder, keep=10)
            file_handler = logging.FileHandler(get_log_file_path(log_folder), encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(
                fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        if console_logging:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(ColorFormatter(
                fmt="%(asctime)s | %(levelname)s | %(message)s",
                datefmt="%H:%M:%S"
            ))
            logger.addHandler(console_handler)

    return logger


class RepetitiveMessageFilter(logging.Filter):
    """
    Filter to suppress repetitive DEBUG messages that clutter the console.
    Editors re-validate on every gesture, so per-pass chatter is dropped here.
    """

    FILTER_PATTERNS = [
        "StrategyValidator: Validated",
        "ConnectionValidator: Checked",
        "BlockCatalog: Lookup",
    ]

    def filter(self, record):
        """Return False to filter out the message, True to allow it"""
        if record.levelno > logging.DEBUG:
            return True

        message = record.getMessage().lower()
        for pattern in self.FILTER_PATTERNS:
            if pattern.lower() in message:
                return False
        return True


class Log:
    """
    Thin facade over Python's logging so call sites stay one-liners
    (Log.info(...), Log.warning(...)).
    """
    _logger: Logger = init_logger()
    _repetitive_filter: RepetitiveMessageFilter | None = None

    @classmethod
    def set_logger(cls, logger: Logger):
        """Replace the logger at runtime (e.g. after settings are loaded)."""
        cls._logger = logger

    @classmethod
    def get_logger(cls) -> Logger:
        return cls._logger

    @classmethod
    def set_level(cls, level: str | int):
        """
        Set the logging level dynamically.

        Args:
            level: Log level as string ("DEBUG", "INFO", "WARNING", "ERROR") or int
        """
        if isinstance(level, str):
            level_map = {
                "DEBUG": logging.DEBUG,
                "INFO": logging.INFO,
                "WARNING": logging.WARNING,
                "ERROR": logging.ERROR,
                "CRITICAL": logging.CRITICAL,
            }
            level = level_map.get(level.upper(), logging.INFO)

        cls._logger.setLevel(level)
        for handler in cls._logger.handlers:
            handler.setLevel(level)

    @classmethod
    def enable_repetitive_filter(cls, enable: bool = True):
        """
        Enable or disable filtering of repetitive DEBUG messages.
        """
        if enable:
            if cls._repetitive_filter is None:
                cls._repetitive_filter = RepetitiveMessageFilter()
            for handler in cls._logger.handlers:
                handler.addFilter(cls._repetitive_filter)
        elif cls._repetitive_filter is not None:
            for handler in cls._logger.handlers:
                handler.removeFilter(cls._repetitive_filter)

    @classmethod
    def debug(cls, text: str):
        cls._logger.debug(text)

    @classmethod
    def info(cls, text: str):
        cls._logger.info(text)

    @classmethod
    def warning(cls, text: str, exc_info: bool = False):
        cls._logger.warning(text, exc_info=exc_info)

    @classmethod
    def error(cls, text: str):
        cls._logger.error(text)
