"""
TaskLogger: leveled, multi-destination logger for many concurrent callers.

Each message is routed by its LogContext either to the shared default
destination or to a per-identifier file. The whole of emit() runs inside a
single SpinLock critical section, so one caller writes at a time no matter
how many destinations exist, and the per-destination banner suppression
state is never raced.

The level gate runs before the lock: a suppressed call does no work.
Destination I/O is best-effort. Failures go to the optional error sink and
never reach the caller.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import IO, Any, Callable, Iterable, Optional

from tasklog.config import LoggerConfig
from tasklog.errors import ResourceFailure
from tasklog.logger.context import LogContext
from tasklog.logger.formatters import BannerFormatter, elapsed_label
from tasklog.logger.records import (
    CRITICAL_BANNER,
    LogLevel,
    level_name,
    resolve_level,
)
from tasklog.logger.registry import Destination, DestinationRegistry
from tasklog.sync.spinlock import SpinLock

ErrorSink = Callable[[str, BaseException], None]

SHUTDOWN_MARKER = "EXCEPTION CAUGHT"


class TaskLogger:
    """
    Usage:
        log = TaskLogger(LoggerConfig(log_directory="logs"))
        ctx = LogContext().with_frame("main")
        log.debug("Starting", 6, "tasks", context=ctx)
        log.log("Ending", context=ctx)
        log.shutdown()

    Not a singleton: construct one and pass it to whoever logs.
    """

    DEVEL = LogLevel.DEVEL
    DEBUG = LogLevel.DEBUG
    WARNING = LogLevel.WARNING
    RUNTIME = LogLevel.RUNTIME

    def __init__(
        self,
        config: LoggerConfig | None = None,
        console: IO[str] | None = None,
        error_sink: ErrorSink | None = None,
        **overrides: Any,
    ) -> None:
        config = config or LoggerConfig()
        if overrides:
            config = LoggerConfig.model_validate({**config.model_dump(), **overrides})
        self._config = config
        self._threshold: int = config.debug_threshold
        self.flush_every_write: bool = config.flush_every_write
        self.mirror_all_to_console: bool = config.mirror_all_to_console
        self._formatter = BannerFormatter(config.max_columns, config.indent_width)
        self._registry = DestinationRegistry(
            log_directory=config.log_directory,
            default_file_name=config.default_file_name,
            console=console,
        )
        self._lock = SpinLock()
        self._error_sink = error_sink
        self._start_time = time.monotonic()

    # ── Configuration ─────────────────────────────────────────────

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def threshold(self) -> int:
        return self._threshold

    @threshold.setter
    def threshold(self, value: int | str) -> None:
        self._threshold = resolve_level(value)

    @property
    def max_columns(self) -> int:
        return self._formatter.max_columns

    @property
    def indent_width(self) -> int:
        return self._formatter.indent_width

    @property
    def registry(self) -> DestinationRegistry:
        return self._registry

    @property
    def lock(self) -> SpinLock:
        return self._lock

    @property
    def error_sink(self) -> ErrorSink | None:
        return self._error_sink

    @error_sink.setter
    def error_sink(self, sink: ErrorSink | None) -> None:
        self._error_sink = sink

    def elapsed(self) -> float:
        """Seconds since construction."""
        return time.monotonic() - self._start_time

    # ── Level-gated entry points ──────────────────────────────────

    def debug(self, *parts: Any, context: LogContext | None = None) -> None:
        if self._passes(LogLevel.DEBUG):
            self.emit(parts, LogLevel.DEBUG, "DEBUG", context)

    def warning(self, *parts: Any, context: LogContext | None = None) -> None:
        if self._passes(LogLevel.WARNING):
            self.emit(parts, LogLevel.WARNING, "WARNING", context)

    def log(self, *parts: Any, context: LogContext | None = None) -> None:
        if self._passes(LogLevel.RUNTIME):
            self.emit(parts, LogLevel.RUNTIME, "RUNTIME", context)

    def devel(self, *parts: Any, context: LogContext | None = None) -> None:
        """Only visible when the threshold is exactly DEVEL."""
        if self._threshold == LogLevel.DEVEL:
            self.emit(parts, LogLevel.DEVEL, "DEVEL", context)

    def critical(self, *parts: Any, context: LogContext | None = None) -> None:
        """Always fires, at whatever the current threshold is."""
        self.emit(parts, self._threshold, CRITICAL_BANNER, context)

    def header(self, *parts: Any, context: LogContext | None = None) -> None:
        """Single-line banner-style message: no timestamp, no breadcrumb block."""
        context = context or LogContext()
        context = replace(context, show_timestamp=False, header_already_shown=True)
        self.emit(parts, self._threshold, level_name(self._threshold), context, header_style=True)

    def _passes(self, level: int) -> bool:
        # DEVEL is a developer mode: the ordinary levels stay quiet
        if self._threshold == LogLevel.DEVEL:
            return False
        return self._threshold <= level

    # ── Emission ──────────────────────────────────────────────────

    def emit(
        self,
        parts: Iterable[Any],
        level: int,
        banner_name: str,
        context: LogContext | None = None,
        header_style: bool = False,
    ) -> None:
        """
        Write one message under the lock. No level gate is applied here:
        `level` is recorded on the destination, `banner_name` is what the
        level banner shows.

        The caller's context is never modified: the elapsed-time label is
        stamped on a copy.
        """
        parts = [str(p) for p in parts]
        context = context or LogContext()

        self._lock.acquire_checked()
        try:
            context = replace(context, elapsed_time_label=elapsed_label(self.elapsed()))
            default = self._open_default()
            if context.is_default:
                if default is not None:
                    self._write_message(default, parts, level, banner_name, context, header_style)
                return

            dest = self._resolve(context)
            if dest is not None:
                self._write_message(dest, parts, level, banner_name, context, header_style)
                if self.flush_every_write:
                    self._guarded(dest.key, dest.flush_and_sync)
            if self.mirror_all_to_console and default is not None:
                self._write_message(default, parts, level, banner_name, context, header_style)
        finally:
            self._lock.release_checked()

    def _open_default(self) -> Optional[Destination]:
        try:
            return self._registry.default()
        except ResourceFailure as exc:
            self._report(exc.key, exc)
            return None

    def _resolve(self, context: LogContext) -> Optional[Destination]:
        try:
            return self._registry.resolve(
                context.channel_key, context.destination_name, context.task_tag
            )
        except ResourceFailure as exc:
            self._report(exc.key, exc)
            return None

    def _write_message(
        self,
        dest: Destination,
        parts: list[str],
        level: int,
        banner_name: str,
        context: LogContext,
        header_style: bool,
    ) -> None:
        text = ""
        if banner_name != dest.last_level_banner:
            text += self._formatter.level_banner(banner_name)
            dest.last_level_banner = banner_name
        dest.last_level = level

        if not context.header_already_shown:
            path = context.rendered_path()
            if context.frames and path != dest.last_context_path:
                text += self._formatter.context_banner(context)
            dest.last_context_path = path

        text += self._formatter.message_body(parts, context, header_style)
        self._guarded(dest.key, dest.write, text)
        # Keys sharing a file each hold a stream; flushing keeps the file in emit order
        self._guarded(dest.key, dest.flush)

    def _guarded(self, key: str, action: Callable[..., None], *args: Any) -> None:
        try:
            action(*args)
        except Exception as exc:
            # Never let destination I/O fail the caller
            self._report(key, exc)

    def _report(self, key: str, exc: BaseException) -> None:
        if self._error_sink is None:
            return
        try:
            self._error_sink(key, exc)
        except Exception:
            pass

    # ── Status ────────────────────────────────────────────────────

    def status(self) -> dict:
        return {
            "threshold": self._threshold,
            "threshold_name": level_name(self._threshold),
            "flush_every_write": self.flush_every_write,
            "mirror_all_to_console": self.mirror_all_to_console,
            "max_columns": self.max_columns,
            "indent_width": self.indent_width,
            "elapsed": self.elapsed(),
            "destinations": {
                dest.key: {
                    "path": str(dest.path) if dest.path else None,
                    "is_default": dest.is_default,
                    "is_open": dest.is_open,
                    "last_level": dest.last_level,
                    "last_level_banner": dest.last_level_banner,
                    "last_context_path": dest.last_context_path,
                }
                for dest in self._registry
            },
        }

    # ── Cleanup ───────────────────────────────────────────────────

    def flush(self) -> None:
        """Flush every open destination."""
        with self._lock:
            for dest in self._registry:
                self._guarded(dest.key, dest.flush)

    def shutdown(self) -> None:
        """
        Exit routine: append the marker line to every destination, then close
        and sync it. Failures are reported and the next destination is closed.
        Callers must make sure nothing else is mid-emit.
        """
        with self._lock:
            for dest in self._registry:
                self._guarded(dest.key, dest.write, f"{SHUTDOWN_MARKER}\n")
                self._guarded(dest.key, dest.close)
            self._registry.clear()

    close = shutdown

    def __enter__(self) -> "TaskLogger":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()
