"""structlog setup for slidecode.

Everything goes through stdlib logging so third-party records (Pillow,
asyncio, PyMuPDF) end up in the same handlers as our own. A batch run gets
a quiet console and a DEBUG log file of its own under ``log_dir``.
"""

import logging
import sys
import uuid
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from structlog.typing import EventDict, WrappedLogger

import structlog
from rich.console import Console

_console: Console | None = None
_log_output: TextIO = sys.stderr

_NOISY_LOGGERS = ["PIL", "asyncio", "fitz", "pymupdf"]

# Event-dict keys that are not user context
_RESERVED_KEYS = {"event", "level", "timestamp", "_record", "_from_structlog"}

_MAX_VALUE_LENGTH = 500
_LOG_BACKUP_DAYS = 7


class SafeStreamHandler(logging.StreamHandler):
    """Stream handler that degrades unencodable characters to ``?``.

    Deck names are often non-ASCII and a legacy console code page must not
    turn a log line about them into a logging error.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record) + self.terminator
            try:
                self.stream.write(line)
            except UnicodeEncodeError:
                encoding = self.stream.encoding or "utf-8"
                self.stream.write(line.encode(encoding, errors="replace").decode(encoding))
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def get_console() -> Console:
    """Shared Rich console; progress bars and log lines both write to stderr."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def set_log_output(output: TextIO) -> None:
    """Redirect the console log handler created by the next ``setup_logging``."""
    global _log_output
    _log_output = output


def _truncate_values(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    for key, value in list(event_dict.items()):
        if isinstance(value, str) and len(value) > _MAX_VALUE_LENGTH:
            event_dict[key] = value[:_MAX_VALUE_LENGTH] + f"... [{len(value)} chars total]"
        elif isinstance(value, (bytes, bytearray)):
            event_dict[key] = f"[BINARY DATA: {len(value)} bytes]"
    return event_dict


def _separate_context(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    """``File failed | file=a.pptx``: a bar between message and context."""
    if "event" in event_dict and any(k not in _RESERVED_KEYS for k in event_dict):
        event_dict["event"] = f"{event_dict['event']} |"
    return event_dict


def _level(name: str | None, default: int) -> int:
    return getattr(logging, name.upper(), default) if name else default


def _formatter(
    pre_chain: list[structlog.types.Processor], json_format: bool, colors: bool
) -> structlog.stdlib.ProcessorFormatter:
    if json_format:
        render: list[structlog.types.Processor] = [structlog.processors.JSONRenderer()]
    else:
        render = [
            _separate_context,
            structlog.dev.ConsoleRenderer(
                colors=colors,
                exception_formatter=structlog.dev.plain_traceback,
                pad_event_to=0,
                pad_level=False,
            ),
        ]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
    )


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_format: bool = False,
    console_level: str | None = None,
    file_level: str | None = None,
) -> None:
    """Route structlog through stdlib logging.

    Args:
        level: Root log level
        log_file: Optional log file, rotated at midnight
        json_format: Render JSON lines instead of key=value text
        console_level: Console handler level (default: ``level``)
        file_level: File handler level (default: ``level``)
    """
    root_level = _level(level, logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _truncate_values,
    ]

    console_handler = SafeStreamHandler(_log_output)
    console_handler.setLevel(_level(console_level, root_level))
    console_handler.setFormatter(_formatter(pre_chain, json_format, colors=True))
    root.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            backupCount=_LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(_level(file_level, root_level))
        file_handler.setFormatter(_formatter(pre_chain, json_format, colors=False))
        root.addHandler(file_handler)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # setup_logging may run again (one task log per CLI run)
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def create_task_log_path(log_dir: str | Path, prefix: str = "task") -> tuple[str, Path]:
    """Pick ``<log_dir>/<prefix>_<YYYYmmdd_HHMMSS>_<task_id>.log`` for one run.

    The directory is created; the file is left to the log handler.
    """
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    task_id = uuid.uuid4().hex[:8]
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return task_id, directory / f"{prefix}_{timestamp}_{task_id}.log"


def setup_task_logging(
    log_dir: str | Path,
    prefix: str = "task",
    verbose: bool = False,
) -> tuple[str, Path]:
    """Open a DEBUG log file for one CLI run.

    The console stays at WARNING unless ``verbose`` so the progress bar is
    not interleaved with per-file INFO lines.

    Returns:
        ``(task_id, log_path)``
    """
    task_id, log_path = create_task_log_path(log_dir, prefix)
    setup_logging(
        level="DEBUG",
        log_file=str(log_path),
        console_level="DEBUG" if verbose else "WARNING",
        file_level="DEBUG",
    )
    return task_id, log_path
