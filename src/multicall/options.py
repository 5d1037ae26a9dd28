"""Expansion options shared by the header parser, rewriter and expander."""

from __future__ import annotations

from dataclasses import dataclass

from multicall.errors import InvalidPlaceholder
from multicall.tokens import is_ident_char, is_ident_start

DEFAULT_BINDING = "__multicall_item__"
DEFAULT_PLACEHOLDER = "#"
CAPTURE_KEYWORD = "set"
PASSTHROUGH_KEYWORD = "exec"


@dataclass(frozen=True, slots=True)
class ExpandOptions:
    """Names and markers used while expanding a block.

    The binding must not collide with identifiers in the input; this is not
    checked.
    """

    binding: str = DEFAULT_BINDING
    placeholder: str = DEFAULT_PLACEHOLDER
    capture_keyword: str = CAPTURE_KEYWORD
    passthrough_keyword: str = PASSTHROUGH_KEYWORD

    def __post_init__(self) -> None:
        if not self.placeholder:
            raise InvalidPlaceholder("placeholder marker must not be empty")
        if self.placeholder in self.binding:
            raise InvalidPlaceholder(
                f"binding {self.binding!r} contains the placeholder {self.placeholder!r}"
            )
        if not self.binding or not is_ident_start(self.binding[0]) or not all(
            is_ident_char(ch) for ch in self.binding
        ):
            raise ValueError(f"binding must be an identifier, got {self.binding!r}")
