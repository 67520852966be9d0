#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Command-line interface for blogmd post import and export.

Export a stored post (editor JSON) to markdown, import markdown back into
editor JSON, or show what the math preprocessor does to a file.

Configuration
-------------
Defaults are read from ``BLOGMD_CONFIG``, or from the first ``.blogmd.toml``,
``.blogmd.yaml``, ``.blogmd.yml``, ``.blogmd.json`` or ``pyproject.toml``
(``[tool.blogmd]``) found from the current directory upward. Command-line
flags always override the configuration file.

Examples
--------
Export a post with storage image URLs relativized::

    $ blogmd export post.json -o post.md --rewrite-images

Import markdown as indented JSON::

    $ blogmd import post.md --indent 2

Read from stdin::

    $ cat post.md | blogmd import -

"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any, Optional

from blogmd.cli.config import CONFIG_ENV_VAR, load_config_with_priority
from blogmd.exceptions import BlogMdError
from blogmd.logging_utils import configure_logging
from blogmd.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2

STDIN_MARKER = "-"


def _add_options_arguments(parser: argparse.ArgumentParser, options_cls: type) -> None:
    """Add one flag per options field, driven by the field metadata.

    Boolean fields that default to True get a ``--no-...`` flag. Flags are
    left out of the namespace unless given, so configuration values are
    only overridden explicitly.
    """
    group = parser.add_argument_group(f"{options_cls.__name__} options")
    for field in fields(options_cls):
        metadata = field.metadata
        if metadata.get("exclude_from_cli"):
            continue
        flag_name = field.name.replace("_", "-")
        help_text = metadata.get("help")

        if isinstance(field.default, bool):
            if field.default:
                flag = "--" + metadata.get("cli_name", f"no-{flag_name}")
            else:
                flag = f"--{flag_name}"
            group.add_argument(
                flag,
                dest=field.name,
                action="store_const",
                const=not field.default,
                default=argparse.SUPPRESS,
                help=help_text,
            )
            continue

        kwargs: dict[str, Any] = {"dest": field.name, "default": argparse.SUPPRESS, "help": help_text}
        if "choices" in metadata:
            kwargs["choices"] = metadata["choices"]
        if "type" in metadata:
            kwargs["type"] = metadata["type"]
        group.add_argument(f"--{flag_name}", **kwargs)


def _options_from_args(options_cls: type, parsed_args: argparse.Namespace, config: dict[str, Any]) -> Any:
    """Build options from configuration values overlaid with explicit flags.

    Raises
    ------
    argparse.ArgumentTypeError
        If a value is rejected by the options class

    """
    values: dict[str, Any] = {}
    for field in fields(options_cls):
        if config.get(field.name) is not None:
            values[field.name] = config[field.name]
        if hasattr(parsed_args, field.name):
            values[field.name] = getattr(parsed_args, field.name)
    try:
        return options_cls(**values)
    except (TypeError, ValueError) as e:
        raise argparse.ArgumentTypeError(f"Invalid {options_cls.__name__}: {e}") from e


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the export, import and preprocess commands."""
    from blogmd import __version__

    parser = argparse.ArgumentParser(
        prog="blogmd",
        description="Convert blog posts between editor JSON and markdown with $math$.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help=f"Configuration file (default: ${CONFIG_ENV_VAR} or auto-discovery)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (default: from config, else WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Shortcut for --log-level DEBUG")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    export_parser = commands.add_parser("export", help="Serialize editor JSON to markdown")
    export_parser.add_argument("input", help=f"Editor JSON file, or {STDIN_MARKER} for stdin")
    export_parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    export_parser.add_argument(
        "--rewrite-images",
        action="store_const",
        const=True,
        default=None,
        help="Rewrite storage image URLs (e.g. /images/a.jpg?w=1 -> ./images/a.jpg)",
    )
    export_parser.add_argument("--images-prefix", dest="export_images_prefix", help="Storage URL prefix to rewrite")
    export_parser.add_argument("--images-target", dest="export_images_target", help="Replacement prefix")
    _add_options_arguments(export_parser, MarkdownRendererOptions)

    import_parser = commands.add_parser("import", help="Parse markdown into editor JSON")
    import_parser.add_argument("input", help=f"Markdown file, or {STDIN_MARKER} for stdin")
    import_parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    import_parser.add_argument("--indent", type=int, help="Indent JSON output by this many spaces")
    _add_options_arguments(import_parser, MarkdownParserOptions)

    preprocess_parser = commands.add_parser("preprocess", help="Show markdown after math preprocessing")
    preprocess_parser.add_argument("input", help=f"Markdown file, or {STDIN_MARKER} for stdin")
    preprocess_parser.add_argument("-o", "--output", help="Output file (default: stdout)")

    return parser


def _setup_logging_level(parsed_args: argparse.Namespace, config: dict[str, Any]) -> None:
    # --trace takes precedence, then --verbose, then --log-level, then config
    if parsed_args.trace or parsed_args.verbose:
        log_level: int | str = logging.DEBUG
    else:
        log_level = parsed_args.log_level or str(config.get("log_level") or "WARNING")
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_input(source: str) -> str:
    from blogmd.utils.encoding import read_text_with_encoding_detection

    if source == STDIN_MARKER:
        return read_text_with_encoding_detection(sys.stdin.buffer.read())
    return read_text_with_encoding_detection(Path(source).read_bytes())


def _write_output(content: str, destination: Optional[str]) -> None:
    if not content.endswith("\n"):
        content += "\n"
    if destination:
        Path(destination).write_text(content, encoding="utf-8")
        logger.info("Wrote %s", destination)
    else:
        sys.stdout.write(content)


def _run_export(parsed_args: argparse.Namespace, config: dict[str, Any]) -> None:
    from blogmd.ast.serialization import json_to_ast
    from blogmd.renderers.markdown import serialize
    from blogmd.utils.images import make_export_image_rewriter

    options: MarkdownRendererOptions = _options_from_args(MarkdownRendererOptions, parsed_args, config)

    rewrite_images = parsed_args.rewrite_images if parsed_args.rewrite_images is not None else config["rewrite_images"]
    if rewrite_images:
        rewriter = make_export_image_rewriter(
            prefix=parsed_args.export_images_prefix or config["export_images_prefix"],
            target=parsed_args.export_images_target or config["export_images_target"],
        )
        options = options.create_updated(rewrite_image_src=rewriter)

    try:
        tree = json_to_ast(_read_input(parsed_args.input))
    except ValueError as e:
        raise BlogMdError(f"{parsed_args.input} is not an editor document: {e}", original_error=e) from e
    _write_output(serialize(tree, options), parsed_args.output)


def _run_import(parsed_args: argparse.Namespace, config: dict[str, Any]) -> None:
    from blogmd.ast.serialization import ast_to_json
    from blogmd.parsers.markdown import parse_sync

    options: MarkdownParserOptions = _options_from_args(MarkdownParserOptions, parsed_args, config)
    indent = parsed_args.indent if parsed_args.indent is not None else config.get("indent")

    tree = parse_sync(_read_input(parsed_args.input), options)
    _write_output(ast_to_json(tree, indent=indent), parsed_args.output)


def _run_preprocess(parsed_args: argparse.Namespace, config: dict[str, Any]) -> None:
    from blogmd.preprocessing.math import preprocess_math

    _write_output(preprocess_math(_read_input(parsed_args.input)), parsed_args.output)


COMMANDS = {
    "export": _run_export,
    "import": _run_import,
    "preprocess": _run_preprocess,
}


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the process exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    try:
        config = load_config_with_priority(parsed_args.config, os.environ.get(CONFIG_ENV_VAR))
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    _setup_logging_level(parsed_args, config)

    try:
        COMMANDS[parsed_args.command](parsed_args, config)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except BlogMdError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_SUCCESS


__all__ = ["main", "create_parser"]
