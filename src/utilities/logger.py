"""Tagged console and file logging for the device firmware."""

import time


class LogLevel:
    DEBUG = 0
    INFO = 1
    NOTE = 2
    WARNING = 3
    ERROR = 4

    NAMES = {"DEBUG": DEBUG, "INFO": INFO, "NOTE": NOTE, "WARNING": WARNING, "ERROR": ERROR}

    @classmethod
    def from_name(cls, name, default=INFO):
        """Map a config string like "debug" to a level, falling back to default."""
        if isinstance(name, int):
            return name
        if not isinstance(name, str):
            return default
        return cls.NAMES.get(name.upper(), default)


class DeviceLogger:
    """Class-level logger shared by every module on the device.

    Lines read ``[ 12.345][INFO][SRC ][TAG ] message``: uptime, level,
    the device (source) and the subsystem (tag) that logged it.
    """

    LEVEL = LogLevel.INFO
    SOURCE = "DEV"
    PRINT_TO_CONSOLE = True
    WRITE_TO_FILE = False
    LOG_FILE_PATH = "/device_log.txt"

    RESET = "\033[0m"
    # level -> (tag, ANSI color)
    STYLES = {
        LogLevel.DEBUG: ("DBUG", "\033[90m"),
        LogLevel.INFO: ("INFO", "\033[94m"),
        LogLevel.NOTE: ("NOTE", "\033[96m"),
        LogLevel.WARNING: ("WARN", "\033[93m"),
        LogLevel.ERROR: ("!ERR", "\033[91m"),
    }

    @classmethod
    def set_level(cls, level):
        cls.LEVEL = LogLevel.from_name(level, cls.LEVEL)

    @classmethod
    def set_source(cls, source):
        cls.SOURCE = source

    @classmethod
    def enable_file_logging(cls, enable=True, path=None):
        """The filesystem must be writable by code.py for this to take effect on hardware."""
        cls.WRITE_TO_FILE = enable
        if path:
            cls.LOG_FILE_PATH = path

    @classmethod
    def configure(cls, config):
        """Apply the logging keys of a loaded config dict."""
        cls.set_level(config.get("log_level", "INFO"))
        cls.set_source(config.get("log_source", config.get("device_name", cls.SOURCE))[:4].upper())
        cls.enable_file_logging(config.get("log_to_file", False), config.get("log_file_path"))

    @classmethod
    def _emit(cls, level, tag, msg, src=None, file=None):
        if level < cls.LEVEL:
            return
        lvl_tag, color = cls.STYLES[level]
        line = f"[{time.monotonic():>8.3f}][{lvl_tag}][{src or cls.SOURCE:<4}][{tag:<4}] {msg}"

        if cls.PRINT_TO_CONSOLE:
            print(f"{color}{line}{cls.RESET}")

        target = file or (cls.LOG_FILE_PATH if cls.WRITE_TO_FILE else None)
        if target is None:
            return
        try:
            with open(target, "a") as f:
                f.write(line + "\n")
        except OSError as e:
            if cls.PRINT_TO_CONSOLE:
                print(f"{cls.STYLES[LogLevel.ERROR][1]}Logger OS Error: {e}{cls.RESET}")

    @classmethod
    def debug(cls, tag, msg, src=None, file=None):
        cls._emit(LogLevel.DEBUG, tag, msg, src, file)

    @classmethod
    def info(cls, tag, msg, src=None, file=None):
        cls._emit(LogLevel.INFO, tag, msg, src, file)

    @classmethod
    def note(cls, tag, msg, src=None, file=None):
        cls._emit(LogLevel.NOTE, tag, msg, src, file)

    @classmethod
    def warning(cls, tag, msg, src=None, file=None):
        cls._emit(LogLevel.WARNING, tag, msg, src, file)

    @classmethod
    def error(cls, tag, msg, src=None, file=None):
        cls._emit(LogLevel.ERROR, tag, msg, src, file)
