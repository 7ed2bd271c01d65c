"""Main CLI entry point for the tagtree command-line tool.

Provides commands to render, edit and inspect line-oriented markup files.
Edit commands print the edited document (or write it with ``--output``).

Exit codes: 0 on success, 1 when an edit reports that its target was not
found, 2 when the input, script or configuration cannot be used.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from tagtree import __version__
from tagtree.api import DOMTree
from tagtree.shared import (
    ConfigError,
    EditResult,
    TreeConfig,
    configure_logging,
    get_logger,
)
from tagtree.tree import TreeParseError

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INPUT_ERROR = 2

PRESETS: Dict[str, Callable[[], TreeConfig]] = {
    "default": TreeConfig.default,
    "lenient": TreeConfig.lenient,
    "strict": TreeConfig.strict,
}


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self, tree_config: Optional[TreeConfig] = None):
        self.tree_config = tree_config or TreeConfig.default()
        self.encoding = "utf-8"
        self.verbose = False
        self.quiet = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load a TreeConfig JSON file.

        Raises:
            ConfigValidationError: If the file content is not a valid configuration
            OSError: If the file cannot be read
        """
        return cls(TreeConfig.from_json(config_path.read_text(encoding="utf-8")))

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "CLIConfig":
        """Build the configuration for a command from parsed arguments.

        A configuration file takes precedence over ``--preset``.
        """
        if args.config is not None:
            config = cls.from_file(args.config)
        else:
            config = cls(PRESETS[args.preset]())
        config.encoding = args.encoding
        config.verbose = args.verbose
        config.quiet = args.quiet
        return config

    def logging_level(self) -> str:
        """Resolve the logging level from flags and configuration."""
        if self.verbose:
            return "DEBUG"
        if self.quiet:
            return "ERROR"
        return self.tree_config.global_.logging_level


# Edit operations available to ``apply`` scripts: name -> (DOMTree method, arg types)
SCRIPT_OPERATIONS: Dict[str, Any] = {
    "replace": ("replace_tag", (str, str)),
    "bold-row": ("bold_row", (int,)),
    "remove": ("remove_tag", (str,)),
    "add-tag": ("add_tag", (str, str)),
}


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "file",
        type=Path,
        help="Markup file to read"
    )
    subparser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    subparser.add_argument(
        "--encoding",
        default="utf-8",
        help="Text encoding of input and output files (default: utf-8)"
    )
    subparser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (TreeConfig JSON)"
    )
    subparser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="default",
        help="Configuration preset used when no configuration file is given"
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="tagtree",
        description="Parse, edit and render line-oriented markup documents"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Parse and re-render a document")
    _add_common_arguments(render_parser)

    replace_parser = subparsers.add_parser("replace", help="Replace every occurrence of a label")
    _add_common_arguments(replace_parser)
    replace_parser.add_argument("old", help="Label to replace")
    replace_parser.add_argument("new", help="Replacement label")

    bold_parser = subparsers.add_parser("bold-row", help="Bold every cell of a table row")
    _add_common_arguments(bold_parser)
    bold_parser.add_argument("row", type=int, help="Row number, first row is 1")

    remove_parser = subparsers.add_parser("remove", help="Remove a tag, keeping its content")
    _add_common_arguments(remove_parser)
    remove_parser.add_argument("tag", help="Tag to remove")

    add_parser = subparsers.add_parser("add-tag", help="Wrap a word in a new tag")
    _add_common_arguments(add_parser)
    add_parser.add_argument("word", help="Word to look for (case-insensitive)")
    add_parser.add_argument("tag", help="Tag to wrap the word in")

    stats_parser = subparsers.add_parser("stats", help="Show document statistics")
    _add_common_arguments(stats_parser)
    stats_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    apply_parser = subparsers.add_parser("apply", help="Apply a JSON script of edits")
    _add_common_arguments(apply_parser)
    apply_parser.add_argument(
        "script",
        type=Path,
        help='JSON list of edits, e.g. [{"op": "remove", "args": ["em"]}]'
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_script(script_path: Path) -> List[Dict[str, Any]]:
    """Load and validate an edit script.

    Raises:
        ValueError: If the script is not a list of known operations with
            arguments of the right count and type
    """
    try:
        steps = json.loads(script_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid script JSON: {e}") from e

    if not isinstance(steps, list):
        raise ValueError("Script must be a JSON list of operations")

    validated = []
    for index, step in enumerate(steps, start=1):
        if not isinstance(step, dict) or step.get("op") not in SCRIPT_OPERATIONS:
            raise ValueError(
                f"Step {index}: 'op' must be one of {sorted(SCRIPT_OPERATIONS)}"
            )
        method_name, arg_types = SCRIPT_OPERATIONS[step["op"]]
        args = step.get("args", [])
        if not isinstance(args, list) or len(args) != len(arg_types):
            raise ValueError(
                f"Step {index}: '{step['op']}' takes {len(arg_types)} argument(s)"
            )
        for value, expected in zip(args, arg_types):
            # bool is an int subclass but never a row number
            if not isinstance(value, expected) or isinstance(value, bool):
                raise ValueError(
                    f"Step {index}: argument {value!r} must be {expected.__name__}"
                )
        validated.append({"op": step["op"], "method": method_name, "args": args})
    return validated


def format_statistics(file_path: Path, tree: DOMTree, format_type: str) -> str:
    """Format document statistics for output."""
    stats = tree.statistics["tree"]
    parse_stats = tree.parse_statistics

    if format_type == "json":
        return json.dumps(
            {
                "file": str(file_path),
                "tree": stats,
                "parse": {
                    "lines_read": parse_stats.lines_read,
                    "blank_lines_skipped": parse_stats.blank_lines_skipped,
                    "elements_opened": parse_stats.elements_opened,
                    "text_nodes": parse_stats.text_nodes,
                },
            },
            indent=2,
        )

    lines = [
        f"File: {file_path}",
        "-" * 40,
        f"Nodes: {stats['node_count']}",
        f"Elements: {stats['element_count']}",
        f"Text leaves: {stats['leaf_count']}",
        f"Max depth: {stats['max_depth']}",
        f"Lines read: {parse_stats.lines_read} "
        f"({parse_stats.blank_lines_skipped} blank)",
        "Labels:",
    ]
    for label, count in sorted(stats["label_counts"].items()):
        lines.append(f"   {label}: {count}")
    return "\n".join(lines)


def _emit(text: str, args: argparse.Namespace, config: CLIConfig) -> None:
    if args.output:
        with args.output.open("w", encoding=config.encoding, newline="") as handle:
            handle.write(text)
        if not config.quiet:
            print(f"Output written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(text)


def _report(results: List[EditResult], config: CLIConfig) -> int:
    detail_level = config.tree_config.global_.diagnostic_detail_level
    exit_code = EXIT_OK
    for result in results:
        if result.found:
            continue
        exit_code = EXIT_NOT_FOUND
        if config.quiet:
            continue
        if detail_level == "minimal":
            print(f"Warning: {result.operation} found nothing to edit", file=sys.stderr)
            continue
        for diag in result.summary(detail_level)["diagnostics"]:
            line = f"Warning: {diag['message']}"
            if detail_level == "detailed":
                details = json.dumps(diag["details"], sort_keys=True)
                line += f" [{diag['component']}] {details}"
            print(line, file=sys.stderr)
    return exit_code


def _load_document(args: argparse.Namespace, config: CLIConfig) -> DOMTree:
    tree = DOMTree(config=config.tree_config)
    tree.build(args.file, encoding=config.encoding)
    return tree


def cmd_render(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle render command."""
    tree = _load_document(args, config)
    _emit(tree.get_html(), args, config)
    return EXIT_OK


def cmd_edit(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle the single-edit commands."""
    tree = _load_document(args, config)

    if args.command == "replace":
        result = tree.replace_tag(args.old, args.new)
    elif args.command == "bold-row":
        result = tree.bold_row(args.row)
    elif args.command == "remove":
        result = tree.remove_tag(args.tag)
    else:
        result = tree.add_tag(args.word, args.tag)

    _emit(tree.get_html(), args, config)
    return _report([result], config)


def cmd_stats(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle stats command."""
    tree = _load_document(args, config)
    _emit(format_statistics(args.file, tree, args.format) + "\n", args, config)
    return EXIT_OK


def cmd_apply(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle apply command."""
    steps = load_script(args.script)
    tree = _load_document(args, config)

    for step in steps:
        getattr(tree, step["method"])(*step["args"])

    _emit(tree.get_html(), args, config)
    return _report(tree.history, config)


COMMANDS: Dict[str, Callable[[argparse.Namespace, CLIConfig], int]] = {
    "render": cmd_render,
    "replace": cmd_edit,
    "bold-row": cmd_edit,
    "remove": cmd_edit,
    "add-tag": cmd_edit,
    "stats": cmd_stats,
    "apply": cmd_apply,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_INPUT_ERROR

    logger = get_logger(__name__, None, "cli")
    try:
        config = CLIConfig.from_args(args)
        configure_logging(config.logging_level())
        return COMMANDS[args.command](args, config)

    except TreeParseError as e:
        print(f"Parse error in {args.file}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except OSError as e:
        logger.error("File operation failed", extra={"error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
