"""Error types with formatted source context."""

from __future__ import annotations

from multicall.tokens import Position, Span


def _snippet(
    message: str,
    filename: str,
    source: str,
    start: Position,
    underline_len: int,
) -> str:
    lines = source.splitlines(keepends=True)
    line_idx = start.line - 1
    col = start.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.rs") -> str:
        return _snippet(self.message, filename, self.source, self.position, 1)


class ExpandError(Exception):
    """Raised when a multicall block cannot be expanded.

    The expander only sees tokens, so the caller attaches the source text
    (see attach_source) before formatting. Synthesised tokens have no span;
    such errors format without a snippet.
    """

    def __init__(self, message: str, span: Span | None = None) -> None:
        self.message = message
        self.span = span
        self.source = ""
        super().__init__(message)

    def attach_source(self, source: str) -> ExpandError:
        self.source = source
        return self

    def format(self, filename: str = "input.rs") -> str:
        source = self.source
        if self.span is None:
            return f"error: {self.message}"
        if not source:
            start = self.span.start
            return f"error: {self.message}\n  --> {filename}:{start.line}:{start.column}"

        lines = source.splitlines()
        line_idx = self.span.start.line - 1
        col = self.span.start.column
        line_len = len(lines[line_idx]) if 0 <= line_idx < len(lines) else 0

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, line_len - col + 1)

        return _snippet(self.message, filename, source, self.span.start, underline_len)


class MissingSeparator(ExpandError):
    """The receiver header has no top-level ':'."""


class UnterminatedStatement(ExpandError):
    """A statement in the block body lacks its terminating ';'."""


class InvalidPlaceholder(ValueError):
    """The placeholder marker is empty or clashes with the binding name."""
