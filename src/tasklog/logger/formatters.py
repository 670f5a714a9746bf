"""
Banner and message formatting.

Every formatter method returns complete text including the trailing
newline, so a destination write is one call per block.

  level banner:   "///// DEBUG ////////..."            (exactly max_columns wide)
  breadcrumb:     "\\n      main//worker 3//\\n\\n"
  body:           "     0000001.25 - Starting 6 tasks"  (word-wrapped)
"""

from typing import Iterable

from tasklog.logger.context import LogContext

FILLER = "/"
LEAD_FILLERS = 5
BREADCRUMB_INDENT = 6


def elapsed_label(seconds: float) -> str:
    """Fixed-width elapsed-seconds rendering: 10 chars, zero-padded, 2 decimals."""
    return f"{seconds:010.2f}"


class BannerFormatter:
    """
    Renders level banners, breadcrumb banners and message bodies.

    Usage:
        fmt = BannerFormatter(max_columns=80, indent_width=4)
        fmt.level_banner("DEBUG")
        fmt.message_body(["Starting", "6 tasks"], ctx, header_style=False)
    """

    def __init__(self, max_columns: int = 160, indent_width: int = 5):
        self.max_columns = max_columns
        self.indent_width = indent_width

    @property
    def indent(self) -> str:
        return " " * self.indent_width

    @property
    def continuation_indent(self) -> str:
        return " " * (2 * self.indent_width)

    def level_banner(self, level_name: str) -> str:
        head = f"{FILLER * LEAD_FILLERS} {level_name} "
        return head + FILLER * max(0, self.max_columns - len(head)) + "\n"

    def context_banner(self, context: LogContext) -> str:
        return f"\n{' ' * BREADCRUMB_INDENT}{context.rendered_path()}{context.separator}\n\n"

    def message_body(
        self,
        parts: Iterable[str],
        context: LogContext,
        header_style: bool = False,
    ) -> str:
        parts = [str(p) for p in parts]
        if header_style:
            return context.inline_prefix() + " ".join(parts) + "\n"
        return "\n".join(self._wrap(parts, context)) + "\n"

    def _wrap(self, parts: list[str], context: LogContext) -> list[str]:
        current = self.indent
        if context.show_timestamp and context.elapsed_time_label:
            current += f"{context.elapsed_time_label} - "

        lines: list[str] = []
        fresh = True
        for part in parts:
            for token in part.split():
                if fresh:
                    current += token
                elif len(current) + 1 + len(token) > self.max_columns:
                    lines.append(current)
                    current = self.continuation_indent + token
                else:
                    current += " " + token
                fresh = False
        lines.append(current)
        return lines
