"""Command-line interface for spanlex."""

from __future__ import annotations

import argparse
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from spanlex.errors import LanguageError, ScanError
from spanlex.language import LanguageSpec
from spanlex.languages import DEFAULT_REGISTRY, LanguageRegistry, language_for_path

DEFAULT_LANGUAGE = "javascript"
CONFIG_NAME = "spanlex.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    output_file: Path | None
    language: str
    registry: LanguageRegistry
    line_numbers: bool
    standalone: bool
    escape: bool
    list_languages: bool
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="spanlex",
        description="Syntax-highlight source code as HTML span markup",
    )
    p.add_argument("input", nargs="?", help="Input source file (default: stdin)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-l",
        "--language",
        metavar="NAME",
        help="Language name or alias (default: from extension, config, or javascript)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--line-numbers",
        action="store_true",
        default=None,
        help="Wrap output in a <pre> block with a line-number gutter",
    )
    p.add_argument(
        "--standalone",
        action="store_true",
        default=None,
        help="Emit a complete HTML page with a default stylesheet",
    )
    p.add_argument(
        "--no-escape",
        dest="escape",
        action="store_false",
        default=None,
        help="Input is already HTML-escaped; tokenize it as-is",
    )
    p.add_argument(
        "--list-languages", action="store_true", help="List known languages and exit"
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-highlight")
    p.add_argument("--debug", action="store_true", help="Dump tokens and debug log to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _config_flag(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise argparse.ArgumentTypeError(f"config [highlight] {key} must be true or false")
    return value


def build_registry(config: dict[str, Any]) -> LanguageRegistry:
    """Extend the default registry with [languages.*] and [aliases] from config."""
    cfg_languages = config.get("languages", {})
    if not isinstance(cfg_languages, dict):
        raise argparse.ArgumentTypeError("config [languages] must be a table")
    specs: dict[str, LanguageSpec] = {}
    for name, data in cfg_languages.items():
        if not isinstance(data, dict):
            raise LanguageError("language definition must be a table", str(name))
        specs[str(name)] = LanguageSpec.from_dict(str(name), data)

    cfg_aliases = config.get("aliases", {})
    if not isinstance(cfg_aliases, dict):
        raise argparse.ArgumentTypeError("config [aliases] must be a table")
    aliases = {str(k): str(v) for k, v in cfg_aliases.items()}

    if not specs and not aliases:
        return DEFAULT_REGISTRY
    return DEFAULT_REGISTRY.extend(specs, aliases)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags. The language falls back to the
    input's extension, then the config default, then javascript.
    """
    input_file = Path(args.input) if args.input and args.input != "-" else None
    if input_file is not None:
        input_dir = input_file.parent
        if not input_dir.parts:
            input_dir = Path(".")
    else:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    highlight = config.get("highlight", {})
    if not isinstance(highlight, dict):
        raise argparse.ArgumentTypeError("config [highlight] must be a table")

    language = args.language
    if language is None and input_file is not None:
        language = language_for_path(input_file)
    if language is None:
        cfg_language = highlight.get("language")
        if cfg_language is not None and not isinstance(cfg_language, str):
            raise argparse.ArgumentTypeError("config [highlight] language must be a string")
        language = cfg_language or DEFAULT_LANGUAGE

    line_numbers = _config_flag(highlight, "line_numbers", False)
    if args.line_numbers is not None:
        line_numbers = args.line_numbers
    standalone = _config_flag(highlight, "standalone", False)
    if args.standalone is not None:
        standalone = args.standalone
    escape = _config_flag(highlight, "escape", True)
    if args.escape is not None:
        escape = args.escape

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        language=language,
        registry=build_registry(config),
        line_numbers=line_numbers,
        standalone=standalone,
        escape=escape,
        list_languages=args.list_languages,
        watch=args.watch,
        debug=args.debug,
    )


def highlight_file(options: CliOptions) -> str:
    """Read the input, tokenize it, and render the requested HTML form."""
    from spanlex.debug import dump_tokens
    from spanlex.render import escape_source, render_block, render_page, render_tokens
    from spanlex.scanner import tokenize

    if options.input_file is not None:
        source = options.input_file.read_text(encoding="utf-8")
    else:
        source = sys.stdin.read()

    text = escape_source(source) if options.escape else source
    canonical = options.registry.canonical_name(options.language)

    if canonical is None:
        print(
            f"warning: no such language '{options.language}'; output left unhighlighted",
            file=sys.stderr,
        )
        fragment = text
    else:
        tokens = tokenize(text, options.registry[canonical])
        if options.debug:
            dump_tokens(tokens, file=sys.stderr)
        fragment = render_tokens(tokens)

    if not options.line_numbers and not options.standalone:
        return fragment

    block = render_block(fragment, source, canonical, options.line_numbers)
    if options.standalone:
        title = options.input_file.name if options.input_file is not None else "stdin"
        return render_page(block, title)
    return block


def print_languages(registry: LanguageRegistry) -> None:
    """Print each language with its aliases, one per line."""
    for name in sorted(registry):
        aliases = sorted(a for a, target in registry.aliases.items() if target == name)
        if aliases:
            print(f"{name} ({', '.join(aliases)})")
        else:
            print(name)


def _write(options: CliOptions, html: str) -> None:
    if options.output_file:
        options.output_file.write_text(html, encoding="utf-8")
    else:
        sys.stdout.write(html)
        sys.stdout.flush()


def watch_loop(options: CliOptions, input_file: Path) -> None:
    """Poll input file for changes, re-highlight on each modification."""
    last_mtime = 0.0
    print(f"Watching {input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    _write(options, highlight_file(options))
                    print(f"Highlighted {input_file}", file=sys.stderr)
                except OSError as exc:
                    print(f"error: {exc}", file=sys.stderr)
                except ScanError as exc:
                    print(str(exc), file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(name)s: %(message)s",
        )

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except LanguageError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if options.list_languages:
        print_languages(options.registry)
        return 0

    if options.watch:
        if options.input_file is None:
            print("error: --watch needs an input file", file=sys.stderr)
            return 2
        watch_loop(options, options.input_file)
        return 0

    try:
        html = highlight_file(options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ScanError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    _write(options, html)
    return 0
