"""
Destination registry: lazily-opened, key-addressed output channels.

One Destination per channel key, created on first use and reused until
shutdown. The default destination is either the console or
<log_directory>/<default_file_name>; a named destination X lives at
<log_directory>/X.log.

Not thread-safe on its own. TaskLogger only touches it while holding its
SpinLock, which is what keeps two callers from opening the same key twice.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import IO, Iterator, Optional

from tasklog.errors import ResourceFailure
from tasklog.logger.records import DEFAULT_DESTINATION


class Destination:
    """
    One output sink plus its banner suppression state.

    path is None for the console. File streams can be closed after a
    write (flush_and_sync) and are reopened for append on the next write.
    """

    def __init__(
        self,
        key: str,
        path: Path | None = None,
        console: IO[str] | None = None,
        is_default: bool = False,
    ):
        self.key = key
        self.path = path
        self.is_default = is_default
        self.last_level: Optional[int] = None
        self.last_level_banner: Optional[str] = None
        self.last_context_path: Optional[str] = None
        self._console = console
        self._stream: IO[str] | None = None

    @property
    def is_console(self) -> bool:
        return self.path is None

    @property
    def stream(self) -> IO[str] | None:
        if self.is_console:
            return self._console or sys.stdout
        return self._stream

    @property
    def is_open(self) -> bool:
        return self.is_console or self._stream is not None

    def open(self) -> None:
        """Open the file for append, creating parent directories. No-op if open."""
        if self.is_open:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = open(self.path, "a", encoding="utf-8")
        except OSError as exc:
            raise ResourceFailure(self.key, f"cannot open {self.path}: {exc}") from exc

    reopen = open

    def write(self, text: str) -> None:
        self.open()
        try:
            self.stream.write(text)
        except (OSError, ValueError) as exc:
            raise ResourceFailure(self.key, f"write failed: {exc}") from exc

    def flush(self) -> None:
        if not self.is_open:
            return
        try:
            self.stream.flush()
        except (OSError, ValueError) as exc:
            raise ResourceFailure(self.key, f"flush failed: {exc}") from exc

    def flush_and_sync(self) -> None:
        """Flush, fsync and close a file stream. The console is only flushed."""
        if self.is_console:
            self.flush()
            return
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            stream.flush()
            os.fsync(stream.fileno())
        except (OSError, ValueError) as exc:
            raise ResourceFailure(self.key, f"sync failed: {exc}") from exc
        finally:
            stream.close()

    close = flush_and_sync

    def __repr__(self) -> str:
        where = "console" if self.is_console else str(self.path)
        return f"Destination({self.key!r}, {where})"


class DestinationRegistry:
    """
    Channel key -> Destination.

    Usage:
        registry = DestinationRegistry(log_directory="logs")
        default = registry.default()
        dest = registry.resolve("worker-3", "worker-3", task_tag=140213)
    """

    def __init__(
        self,
        log_directory: str | Path | None = None,
        default_file_name: str | None = None,
        console: IO[str] | None = None,
    ):
        self.log_directory = Path(log_directory) if log_directory else None
        self.default_file_name = default_file_name
        self._console = console
        self._entries: dict[str, Destination] = {}

    def path_for(self, destination_name: str) -> Path | None:
        """File path of a destination name. None means the console."""
        if destination_name == DEFAULT_DESTINATION:
            if not self.default_file_name:
                return None
            file_name = self.default_file_name
        else:
            file_name = f"{destination_name}.log"
        if self.log_directory is None:
            return Path(file_name)
        return self.log_directory / file_name

    def default(self) -> Destination:
        """The shared default destination, created on first call."""
        dest = self._entries.get(DEFAULT_DESTINATION)
        if dest is None:
            dest = Destination(
                DEFAULT_DESTINATION,
                path=self.path_for(DEFAULT_DESTINATION),
                console=self._console,
                is_default=True,
            )
            dest.open()
            self._entries[DEFAULT_DESTINATION] = dest
        return dest

    def resolve(
        self,
        key: str,
        destination_name: str,
        task_tag: int | str = "",
    ) -> Destination:
        """
        Existing entry for `key`, reopened if its stream was closed after a
        sync, or a new one written with the identification banner.
        Nothing is registered when opening fails. The default channel key
        cannot name a file destination.
        """
        if key == DEFAULT_DESTINATION and destination_name != DEFAULT_DESTINATION:
            raise ValueError(
                f"Channel key '{DEFAULT_DESTINATION}' is reserved for the default destination, "
                f"not '{destination_name}'"
            )

        dest = self._entries.get(key)
        if dest is not None:
            dest.reopen()
            return dest

        if destination_name == DEFAULT_DESTINATION:
            return self.default()

        dest = Destination(key, path=self.path_for(destination_name), console=self._console)
        dest.open()
        try:
            dest.write(f"TASK: {task_tag} ID: {key}\n\n")
        except ResourceFailure:
            try:
                dest.close()
            except ResourceFailure:
                pass
            raise
        self._entries[key] = dest
        return dest

    # ── Inspection ────────────────────────────────────────────────

    def get(self, key: str) -> Destination | None:
        return self._entries.get(key)

    def keys(self) -> list[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[Destination]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
