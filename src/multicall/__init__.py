"""multicall — apply many operations to one receiver without repeating its name."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from multicall.options import ExpandOptions

__version__ = "0.1.0"


def expand_source(
    source: str,
    filename: str = "input.rs",
    options: ExpandOptions | None = None,
    *,
    block: bool = False,
) -> str:
    """Expand every multicall invocation in source and render the result."""
    from multicall.host import expand_source as _expand_source

    return _expand_source(source, filename, options, block=block)
