import inspect
import logging
import string
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

import bulletin.lib.json as json

from .style import LogStyle

ReservedKeys = {
    "args",
    "asctime",
    "color_message",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "message",
    "module",
    "msecs",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


class ExtraFormatter(logging.Formatter):
    """Wraps a base formatter and appends the record's ``extra`` fields as JSON.

    ``logger.info("generated report cards", extra={"created": 3})`` renders as
    the base line followed by ``{"created": 3}``, highlighted when the handler
    writes to a terminal.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None,
        datefmt: str | None = None,
        indent: bool = False,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        no_color: bool = False,
        *,
        defaults: t.Any = None,
        **kwargs: t.Any,
    ):
        self.base = base(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults, **kwargs)
        self.pyg_style = pyg_style
        self.handler: logging.Handler | None = None
        self.indent = indent
        self.no_color = no_color

    def format(self, record: logging.LogRecord) -> str:
        d = record.__dict__
        extra = {k: d[k] for k in set(d.keys()) - ReservedKeys}

        self._align_continuation_lines(record)
        message = self.base.format(record)

        if not extra:
            return message

        js = json.dumps(extra, sort_keys=True, indent=(4 if self.indent else None), default=self._encode)
        if self._is_tty() and not self.no_color:
            hl = pygments.highlight  # pyright: ignore [reportUnknownMemberType, reportUnknownVariableType]
            js = hl(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style), None)
        return message + " " + js.strip()

    def _align_continuation_lines(self, record: logging.LogRecord) -> None:
        """Indent the lines of a multi-line message to where its first line starts."""
        msg = record.getMessage()
        if "\n" not in msg:
            return
        formatted = self.base.format(record)
        prefix = formatted[: formatted.find(msg)]
        indent = " " * sum(1 for c in prefix if c in string.printable)
        line, *lines = msg.splitlines()
        body = textwrap.indent("\n".join(lines), prefix=indent)
        record.msg = record.message = f"{line}\n{body}"
        record.args = None

    @staticmethod
    def _encode(obj: t.Any) -> t.Any:
        try:
            return json.JSONEncoder().default(obj)
        except TypeError:
            return repr(obj)

    def _is_tty(self) -> bool:
        if self.handler is None:
            # the handler is not known at construction; find the one calling us
            frame = inspect.currentframe()
            while frame is not None:
                caller = frame.f_locals.get("self")
                if isinstance(caller, logging.Handler):
                    self.handler = caller
                    break
                frame = frame.f_back
        stream = getattr(self.handler, "stream", None)
        return bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())

    def __getattr__(self, name: str) -> t.Any:
        if name == "base":
            raise AttributeError(name)
        return getattr(self.base, name)
