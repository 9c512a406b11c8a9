import re
from logging import FileHandler, LogRecord
from typing import override

import colorlog


class DecoloringFileHandler(FileHandler):
    """File handler that strips the ANSI colors StructLog messages carry."""

    ansi_escape: re.Pattern[str]

    def __init__(self, filename, mode="a", encoding=None, delay=False):
        super().__init__(filename, mode, encoding, delay)
        self.ansi_escape = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")

    @override
    def format(self, record: LogRecord) -> str:
        return self.ansi_escape.sub("", super().format(record))


class ColoredFormatter(colorlog.ColoredFormatter):
    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style="%",
        *,
        color: bool = True,
        **kwargs,
    ) -> None:
        super().__init__(fmt, datefmt, style, no_color=not color, **kwargs)
