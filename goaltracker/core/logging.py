"""
Structured logging for report generation.

Every logger belongs to a channel so a noisy stage can be isolated:

    PIPELINE    engine and pass orchestration
    EXTRACT     goal-information fields
    RESOLVE     tracker column and subject rows
    SYNTHESIZE  transcript sections and captures
    RENDER      report composition
    SYSTEM      document loading, CLI, web

Verbosity is one of silent, info, verbose or debug. Defaults come from
GOALTRACKER_LOG_LEVEL, GOALTRACKER_LOG_FORMAT (console/json) and
GOALTRACKER_LOG_CHANNELS (comma separated) when not passed explicitly.

Output always goes to stderr; stdout is reserved for the report.
"""

import logging
import os
import sys
import time
from enum import Enum, IntEnum
from typing import Any, Iterable, Optional, Union

import structlog


class LogLevel(IntEnum):
    SILENT = 0
    INFO = 1
    VERBOSE = 2
    DEBUG = 3

    @classmethod
    def from_string(cls, s: str) -> "LogLevel":
        """Unknown names (and stdlib's warning/error) fall back to INFO."""
        try:
            return cls[s.strip().upper()]
        except KeyError:
            return cls.INFO


class LogChannel(str, Enum):
    PIPELINE = "PIPELINE"
    EXTRACT = "EXTRACT"
    RESOLVE = "RESOLVE"
    SYNTHESIZE = "SYNTHESIZE"
    RENDER = "RENDER"
    SYSTEM = "SYSTEM"

    @classmethod
    def all(cls) -> list["LogChannel"]:
        return list(cls)

    @classmethod
    def from_string(cls, s: str) -> Optional["LogChannel"]:
        try:
            return cls(s.strip().upper())
        except ValueError:
            return None


# Stdlib threshold for each verbosity; SILENT sits above CRITICAL
_STDLIB_LEVELS = {
    LogLevel.SILENT: logging.CRITICAL + 10,
    LogLevel.INFO: logging.INFO,
    LogLevel.VERBOSE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
}

_state: dict[str, Any] = {
    "level": LogLevel.INFO,
    "format": "console",
    "channels": frozenset(LogChannel),
    "configured": False,
}


def _channels_from(values: Iterable[Union[LogChannel, str]]) -> frozenset:
    found = set()
    for value in values:
        channel = value if isinstance(value, LogChannel) else LogChannel.from_string(value)
        if channel is not None:
            found.add(channel)
    return frozenset(found)


def _renderer(fmt: str):
    if fmt == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(
    level: Union[LogLevel, str, None] = None,
    format: Optional[str] = None,
    channels: Optional[list[Union[LogChannel, str]]] = None,
    force: bool = False,
) -> None:
    """
    Set verbosity, output format and enabled channels.

    Only the first call takes effect unless ``force`` is set. An empty or
    fully unrecognised channel list from the environment enables all
    channels; an explicit list is taken as given.
    """
    if _state["configured"] and not force:
        return

    if level is None:
        level = os.environ.get("GOALTRACKER_LOG_LEVEL", "info")
    if isinstance(level, str):
        level = LogLevel.from_string(level)

    fmt = format or os.environ.get("GOALTRACKER_LOG_FORMAT", "console")

    if channels is None:
        enabled = _channels_from(os.environ.get("GOALTRACKER_LOG_CHANNELS", "").split(","))
        enabled = enabled or frozenset(LogChannel)
    else:
        enabled = _channels_from(channels)

    _state.update(level=level, format=fmt, channels=enabled)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=_STDLIB_LEVELS[level],
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(fmt),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _state["configured"] = True


def get_current_config() -> dict:
    """Snapshot of the active settings, for tests and ``--log-level debug`` dumps."""
    return {
        "level": _state["level"].name,
        "format": _state["format"],
        "channels": sorted(ch.value for ch in _state["channels"]),
    }


class ChannelLogger:
    """
    A structlog logger tagged with its channel (and pass, when bound to one).

    info/verbose/debug are gated on both verbosity and the channel filter.
    warning and error ignore the channel filter and are dropped only when
    logging is silent.
    """

    def __init__(self, channel: LogChannel, name: Optional[str] = None, pass_name: Optional[str] = None):
        self.channel = channel
        self.pass_name = pass_name
        self.name = name or f"goaltracker.{channel.value.lower()}"
        self._logger = structlog.get_logger(self.name)

    def _should_log(self, msg_level: LogLevel) -> bool:
        return self.channel in _state["channels"] and _state["level"] >= msg_level

    def _fields(self, kwargs: dict) -> dict:
        fields = {"channel": self.channel.value}
        if self.pass_name:
            fields["pass"] = self.pass_name
        fields.update(kwargs)
        return fields

    def info(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.INFO):
            self._logger.info(event, **self._fields(kwargs))

    def verbose(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.VERBOSE):
            self._logger.debug(event, verbosity="verbose", **self._fields(kwargs))

    def debug(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.DEBUG):
            self._logger.debug(event, verbosity="debug", **self._fields(kwargs))

    def warning(self, event: str, **kwargs: Any) -> None:
        if _state["level"] != LogLevel.SILENT:
            self._logger.warning(event, **self._fields(kwargs))

    def error(self, event: str, **kwargs: Any) -> None:
        if _state["level"] != LogLevel.SILENT:
            self._logger.error(event, **self._fields(kwargs))


def get_logger(channel: Union[LogChannel, str] = LogChannel.SYSTEM) -> ChannelLogger:
    configure_logging()
    if isinstance(channel, str) and not isinstance(channel, LogChannel):
        channel = LogChannel.from_string(channel) or LogChannel.SYSTEM
    return ChannelLogger(channel)


# Pass number prefix -> channel
_PASS_CHANNELS = {
    "p10": LogChannel.EXTRACT,
    "p20": LogChannel.RESOLVE,
    "p25": LogChannel.RESOLVE,
    "p30": LogChannel.SYNTHESIZE,
    "p70": LogChannel.RENDER,
}


def get_pass_logger(pass_name: str, channel: Optional[LogChannel] = None) -> ChannelLogger:
    """Logger for a ``pNN_name`` pass; the channel follows the pass number."""
    configure_logging()
    return ChannelLogger(
        channel or _PASS_CHANNELS.get(pass_name[:3], LogChannel.PIPELINE),
        name=f"goaltracker.{pass_name}",
        pass_name=pass_name,
    )


def bind_request_context(**kwargs: Any) -> None:
    """Attach fields (request id, student) to every record on this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


class ReportLogger:
    """
    Timing and outcome logging for a single report request.

    Binds ``request_id`` for the lifetime of the request and clears it
    again in ``report_complete``.
    """

    def __init__(self, request_id: str, student: Optional[str] = None):
        self.request_id = request_id
        self._log = get_logger(LogChannel.PIPELINE)
        self._started = time.perf_counter()
        self._pass_started: dict[str, float] = {}
        bind_request_context(request_id=request_id)
        if student:
            self._log.verbose("report_started", student=student)

    @staticmethod
    def _ms_since(start: float) -> float:
        return round((time.perf_counter() - start) * 1000, 2)

    def pass_start(self, pass_name: str) -> None:
        self._pass_started[pass_name] = time.perf_counter()
        self._log.verbose("pass_started", pass_name=pass_name)

    def pass_end(self, pass_name: str, **metrics: Any) -> None:
        start = self._pass_started.pop(pass_name, time.perf_counter())
        self._log.verbose("pass_completed", pass_name=pass_name, duration_ms=self._ms_since(start), **metrics)

    def pass_error(self, pass_name: str, error: Exception) -> None:
        self._log.error(
            "pass_failed",
            pass_name=pass_name,
            error=str(error),
            error_type=type(error).__name__,
        )

    def report_complete(self, status: str, **metrics: Any) -> None:
        self._log.info(
            "report_complete",
            status=status,
            total_duration_ms=self._ms_since(self._started),
            **metrics,
        )
        clear_request_context()
