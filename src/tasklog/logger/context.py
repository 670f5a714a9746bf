"""
LogContext: the breadcrumb carried alongside every log call.

frames is a tuple, so a context never shares a mutable frame list with
another one. with_frame() and `+` return a new context, and `+=` rebinds
only the caller's name. push_frame() changes the instance it is called on,
which every holder of that instance sees: use it on a copy you own.

Usage:
    ctx = LogContext().with_frame("main")
    worker_ctx = ctx + f"worker {i}"
    ctx += "shutdown"
"""

import threading
from dataclasses import dataclass, field, replace

from tasklog.logger.records import DEFAULT_DESTINATION

ELLIPSIS = ".."
BYTE_SIZE_OVERHEAD = 64


@dataclass
class LogContext:
    frames: tuple[str, ...] = ()
    max_display_depth: int = 4
    separator: str = "//"
    destination_name: str = DEFAULT_DESTINATION
    channel_key: str = ""  # empty: same as destination_name
    task_tag: int | str = field(default_factory=threading.get_ident)
    elapsed_time_label: str = ""
    header_already_shown: bool = False
    show_timestamp: bool = True

    def __post_init__(self) -> None:
        self.frames = tuple(self.frames)
        if self.max_display_depth < 1:
            raise ValueError(f"max_display_depth must be >= 1, got {self.max_display_depth}")
        if not self.channel_key:
            self.channel_key = self.destination_name
        if self.channel_key == DEFAULT_DESTINATION and self.destination_name != DEFAULT_DESTINATION:
            raise ValueError(
                f"channel_key '{DEFAULT_DESTINATION}' is reserved for the default destination"
            )

    # ── Frames ────────────────────────────────────────────────────

    def with_frame(self, frame: str) -> "LogContext":
        """Return a copy with `frame` appended. The receiver is unchanged."""
        return replace(self, frames=self.frames + (str(frame),))

    append = with_frame

    def push_frame(self, frame: str) -> None:
        """
        Append `frame` to this instance in place.

        Anyone holding a reference to the same instance sees the new frame,
        so call it only on a context you own (e.g. after copy()). `+=` and
        with_frame() leave every other holder untouched.
        """
        self.frames = self.frames + (str(frame),)

    def __add__(self, frame: str) -> "LogContext":
        return self.with_frame(frame)

    def __iadd__(self, frame: str) -> "LogContext":
        # Rebinds the caller's name; any other holder keeps the old context
        return self.with_frame(frame)

    def copy(self) -> "LogContext":
        return replace(self)

    def for_destination(self, name: str, channel_key: str | None = None) -> "LogContext":
        """Copy targeting a named destination file. The key defaults to the name."""
        return replace(self, destination_name=name, channel_key=channel_key or name)

    @property
    def is_default(self) -> bool:
        return self.destination_name == DEFAULT_DESTINATION

    # ── Rendering ─────────────────────────────────────────────────

    def rendered_path(self) -> str:
        """
        Join the last max_display_depth frames with the separator.
        Truncated paths are prefixed by the ellipsis marker and a separator.
        """
        shown = self.frames[-self.max_display_depth:]
        path = self.separator.join(shown)
        if len(self.frames) > self.max_display_depth:
            return f"{ELLIPSIS}{self.separator}{path}"
        return path

    def inline_prefix(self) -> str:
        """Single-line rendering used in front of header-style messages."""
        out = ""
        if self.show_timestamp and self.elapsed_time_label:
            out += f"{self.elapsed_time_label} - "
        if not self.header_already_shown and self.frames:
            out += f"{self.rendered_path()}{self.separator} "
        return out

    def estimated_byte_size(self) -> int:
        """Advisory size estimate. Not used for correctness."""
        return (
            sum(len(f) for f in self.frames)
            + len(self.separator) * len(self.frames)
            + BYTE_SIZE_OVERHEAD
        )
