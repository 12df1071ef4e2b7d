import logging


class ColorFormatter(logging.Formatter):
    """
    按日志级别着色的格式化器
    """
    grey = "\x1b[37;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    dark_grey = "\x1b[30;1m"
    reset = "\x1b[0m"
    fmt = "[%(levelname)s] %(asctime)s %(name)s - %(message)s"

    FORMATS = {
        logging.DEBUG: dark_grey + fmt + reset,
        logging.INFO: grey + fmt + reset,
        logging.WARNING: yellow + fmt + reset,
        logging.ERROR: red + fmt + reset,
        logging.CRITICAL: bold_red + fmt + reset,
    }

    def format(self, record):
        formatter = logging.Formatter(self.FORMATS.get(record.levelno, self.fmt))
        return formatter.format(record)


class Logx:
    """
    项目统一日志入口：
    - 包一层标准库 logger，业务代码只 import 这里的 logger
    - is_debug(True) 可以在调试某个模块时临时打开 DEBUG
    """

    def __init__(self, name: str = "groupboard", level: int = logging.INFO):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(ColorFormatter())
            self._logger.addHandler(handler)

    def set_level(self, level: str | int) -> None:
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
        self._logger.setLevel(level)

    def is_debug(self, flag: bool = True) -> None:
        self._logger.setLevel(logging.DEBUG if flag else logging.INFO)

    def debug(self, msg, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def exception(self, msg, *args, **kwargs):
        self._logger.exception(msg, *args, **kwargs)


logger = Logx()
