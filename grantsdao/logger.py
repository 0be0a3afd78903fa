"""
GrantsDAO logging.

Every module logs through ``get_logger(__name__)``. The first call installs
handlers on the root logger: a rich console handler (or a plain stream
handler when highlighting is disabled) and, if enabled in ``.env``, a
rotating file under ``logs/``.

    >>> from grantsdao.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Proposal #1 created")
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
    LOG_DATE_FORMAT,
    LOG_FILE_OUTPUT,
    LOG_FORMAT,
    LOG_LEVEL,
    LOG_MAX_FILE_SIZE,
)

LOG_FILE_PATH = Path(__file__).resolve().parent.parent / "logs" / "grantsdao.log"

GOVERNANCE_THEME = Theme({
    "grantsdao.address":   "cyan",
    "grantsdao.amount":    "bold white",
    "grantsdao.arrow":     "bold yellow",
    "grantsdao.proposal":  "bold magenta",
    "grantsdao.status":    "bold green",
    "grantsdao.level_debug":    "dim",
    "grantsdao.level_info":     "green",
    "grantsdao.level_warning":  "yellow",
    "grantsdao.level_error":    "bold red",
    "grantsdao.level_critical": "bold red reverse",
    "grantsdao.timestamp": "cyan",
})


def _numeric_level(level) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)


class GovernanceLogHighlighter(RegexHighlighter):
    """Colours addresses, amounts, proposal numbers and status changes."""

    base_style = "grantsdao."
    highlights = [
        r"(?P<timestamp>^\S+ UTC)",
        r"(?P<level_debug>\bDEBUG\b)",
        r"(?P<level_info>\bINFO\b)",
        r"(?P<level_warning>\bWARNING\b)",
        r"(?P<level_error>\bERROR\b)",
        r"(?P<level_critical>\bCRITICAL\b)",
        r"(?P<address>\b0x[0-9a-fA-F]{40}\b)",
        r"(?P<amount>\bamount=\d+)",
        r"(?P<proposal>Proposal #\d+)",
        r"(?P<status>\b(?:ACTIVE|EXECUTED|DELETED)\b)",
        r"(?P<arrow>→)",
    ]


class TerminalSafeFormatter(logging.Formatter):
    """
    Formatter that strips terminal escape sequences from the rendered line.

    Receivers and member ids reach log messages straight from callers.
    """

    _escapes = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b[@-Z\\-_]")
    _controls = re.compile(r"[\x00-\x08\x0B-\x1F\x7F]")

    @classmethod
    def sanitize(cls, text: str) -> str:
        if not text:
            return text
        return cls._controls.sub("", cls._escapes.sub("", text))

    def format(self, record: logging.LogRecord) -> str:
        return self.sanitize(super().format(record))


class LogManager:
    """
    Process-wide owner of the root logger's handlers.

    A single instance exists; ``configure`` runs once and later calls are
    no-ops, while ``set_level`` may be called at any time.
    """

    _instance: Optional["LogManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "LogManager":
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._configured = False
                instance._handlers = []
                cls._instance = instance
        return cls._instance

    @staticmethod
    def validate_log_format(log_format) -> str:
        """Return *log_format* if a record renders with it, else the default format."""
        fallback = str(LOG_FORMAT.default())
        if not log_format:
            return fallback
        sample = logging.LogRecord("sample", logging.INFO, __file__, 0, "sample", (), None)
        try:
            logging.Formatter(str(log_format)).format(sample)
        except (ValueError, KeyError, TypeError) as e:
            sys.stderr.write(f"grantsdao.logger: bad LOG_FORMAT ({e}), using default\n")
            return fallback
        return str(log_format)

    def _formatter(self) -> TerminalSafeFormatter:
        datefmt = str(LOG_DATE_FORMAT) or str(LOG_DATE_FORMAT.default())
        formatter = TerminalSafeFormatter(
            fmt=self.validate_log_format(LOG_FORMAT), datefmt=f"{datefmt} UTC"
        )
        formatter.converter = time.gmtime
        return formatter

    @staticmethod
    def _console_handler() -> logging.Handler:
        if not LOG_CONSOLE_HIGHLIGHTING:
            return logging.StreamHandler(sys.stdout)
        return RichHandler(
            console=Console(theme=GOVERNANCE_THEME, highlight=False),
            highlighter=GovernanceLogHighlighter(),
            keywords=[],
            markup=False,
            rich_tracebacks=True,
            show_level=False,
            show_path=False,
            show_time=False,
        )

    @staticmethod
    def _file_handler(path: Path) -> logging.Handler:
        path.parent.mkdir(parents=True, exist_ok=True)
        return logging.handlers.RotatingFileHandler(
            str(path),
            maxBytes=LOG_MAX_FILE_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )

    def configure(
        self,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
        console_output: bool = True,
        file_output: Optional[bool] = None,
    ) -> None:
        """
        Install handlers on the root logger.

        Args:
            log_level:      Level name; defaults to LOG_LEVEL from ``.env``
            log_file:       Rotating log file path; defaults to ``logs/grantsdao.log``
            console_output: Log to stdout
            file_output:    Log to *log_file*; defaults to LOG_FILE_OUTPUT from ``.env``
        """
        with self._lock:
            if self._configured:
                return

            handlers: List[logging.Handler] = []
            if console_output:
                handlers.append(self._console_handler())
            if bool(LOG_FILE_OUTPUT) if file_output is None else file_output:
                handlers.append(self._file_handler(log_file or LOG_FILE_PATH))

            formatter = self._formatter()
            root = logging.getLogger()
            root.handlers.clear()
            for handler in handlers:
                handler.setFormatter(formatter)
                root.addHandler(handler)
            self._handlers = handlers
            self._configured = True

        self.set_level(log_level or LOG_LEVEL)

    def set_level(self, log_level: str) -> None:
        """Apply *log_level* to the root logger and the handlers installed here."""
        level = _numeric_level(log_level)
        logging.getLogger().setLevel(level)
        for handler in self._handlers:
            handler.setLevel(level)

    def get_logger(self, name: str) -> logging.Logger:
        if not self._configured:
            self.configure()
        return logging.getLogger(name)


_manager = LogManager()
_manager.configure()


def get_logger(name: str) -> logging.Logger:
    """Named logger, with the root handlers already installed."""
    return _manager.get_logger(name)


def set_log_level(log_level: str) -> None:
    _manager.set_level(log_level)
