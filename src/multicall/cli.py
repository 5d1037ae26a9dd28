"""Command-line interface for multicall."""

from __future__ import annotations

import argparse
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from multicall.errors import ExpandError, LexError
from multicall.host import DEFAULT_MACRO_NAME
from multicall.options import DEFAULT_BINDING, DEFAULT_PLACEHOLDER, ExpandOptions

CONFIG_NAME = "multicall.toml"

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    expand: ExpandOptions
    macro_name: str
    block: bool
    pretty: bool
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="multicall",
        description="Expand multicall blocks into fully-qualified statements",
    )
    p.add_argument("input", help="Input source file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--binding", metavar="NAME", help=f"Binding name (default: {DEFAULT_BINDING})")
    p.add_argument(
        "--placeholder",
        metavar="MARKER",
        help=f"Receiver placeholder (default: {DEFAULT_PLACEHOLDER})",
    )
    p.add_argument(
        "--macro",
        metavar="NAME",
        help=f"Invocation name to expand (default: {DEFAULT_MACRO_NAME})",
    )
    p.add_argument(
        "--block",
        action="store_true",
        help="Treat the whole input as the body of one invocation",
    )
    p.add_argument(
        "--compact",
        action="store_true",
        help="Render output on as few lines as possible",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-expand")
    p.add_argument("--debug", action="store_true", help="Dump expanded token trees to stderr")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Log expansion progress")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def config_settings(config: dict[str, Any]) -> dict[str, str]:
    """Pick binding, placeholder and macro name out of a loaded config.

    Missing keys and values of the wrong type fall back to the defaults.
    """
    settings = {
        "binding": DEFAULT_BINDING,
        "placeholder": DEFAULT_PLACEHOLDER,
        "macro": DEFAULT_MACRO_NAME,
    }
    for table, keys in (("expand", ("binding", "placeholder")), ("host", ("macro",))):
        cfg_table = config.get(table)
        if not isinstance(cfg_table, dict):
            continue
        for key in keys:
            value = cfg_table.get(key)
            if isinstance(value, str):
                settings[key] = value
    return settings


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        settings = config_settings(load_config(config_path, input_dir))
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc
    if args.binding is not None:
        settings["binding"] = args.binding
    if args.placeholder is not None:
        settings["placeholder"] = args.placeholder
    if args.macro is not None:
        settings["macro"] = args.macro

    try:
        expand_options = ExpandOptions(
            binding=settings["binding"], placeholder=settings["placeholder"]
        )
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        expand=expand_options,
        macro_name=settings["macro"],
        block=args.block,
        pretty=not args.compact,
        watch=args.watch,
        debug=args.debug,
    )


def expand_file(options: CliOptions) -> str:
    """Read, lex, expand, and render a source file."""
    from multicall.debug import dump_tokens
    from multicall.host import expand_tokens
    from multicall.lexer import tokenize
    from multicall.render import render

    source = options.input_file.read_text(encoding="utf-8")
    tokens = tokenize(source, str(options.input_file))
    try:
        tokens = expand_tokens(tokens, options.expand, options.macro_name, block=options.block)
    except ExpandError as exc:
        raise exc.attach_source(source)
    logger.info("expanded %s", options.input_file)

    if options.debug:
        dump_tokens(tokens)

    return render(tokens, pretty=options.pretty) + "\n"


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-expand on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    text = expand_file(options)
                    if options.output_file:
                        options.output_file.write_text(text, encoding="utf-8")
                    else:
                        sys.stdout.write(text)
                        sys.stdout.flush()
                    print(f"Expanded {options.input_file}", file=sys.stderr)
                except (LexError, ExpandError) as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        text = expand_file(options)
    except (LexError, ExpandError) as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return 0
