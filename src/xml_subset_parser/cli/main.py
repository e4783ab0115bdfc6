"""Main CLI entry point for the xml-subset-parser command-line tool.

Reads one document and prints its tokens, its tree, or both.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from xml_subset_parser import __version__
from xml_subset_parser.character import read_source
from xml_subset_parser.shared import (
    DanglingEntityPolicy,
    InputDecodingError,
    ParseError,
    ParserConfig,
    TokenizationConfig,
    configure_logging,
    get_logger,
)
from xml_subset_parser.tokenization import Token, XMLTokenizer
from xml_subset_parser.tree import Document, XMLTreeBuilder

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_UNREADABLE_INPUT = 2

logger = get_logger(__name__, None, "cli")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-subset-parser",
        description="Tokenize and parse documents written in a small XML subset"
    )

    parser.add_argument("--version", action="version", version=__version__)

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output (debug logging)"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output (errors only)"
    )

    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "file",
        type=Path,
        help="Document to read"
    )
    common.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    common.add_argument(
        "--encoding",
        help="Input encoding (default: BOM detection, then UTF-8)"
    )
    common.add_argument(
        "--self-closing",
        action="store_true",
        help="Accept <name/> as an element with no children"
    )
    common.add_argument(
        "--expand-attribute-entities",
        action="store_true",
        help="Expand entity references inside attribute values"
    )
    common.add_argument(
        "--dangling-entities",
        choices=[policy.name.lower() for policy in DanglingEntityPolicy],
        default=DanglingEntityPolicy.PRESERVE.name.lower(),
        help="What to do with an entity left open at end of text (default: preserve)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser(
        "parse", parents=[common], help="Print the token stream, then the tree"
    )
    subparsers.add_parser(
        "tokens", parents=[common], help="Print the token stream only"
    )
    subparsers.add_parser(
        "tree", parents=[common], help="Print the document tree only"
    )

    return parser


def build_config(args: argparse.Namespace) -> ParserConfig:
    """Translate command-line flags into a parser configuration."""
    tokenization = TokenizationConfig(
        self_closing_tags=args.self_closing,
        expand_attribute_entities=args.expand_attribute_entities,
        dangling_entity_policy=DanglingEntityPolicy[args.dangling_entities.upper()],
    )
    if args.verbose:
        logging_level = "DEBUG"
    elif args.quiet:
        logging_level = "ERROR"
    else:
        logging_level = "WARNING"
    return ParserConfig(
        tokenization=tokenization,
        logging_level=logging_level,
        name="cli",
    )


def format_tokens(tokens: List[Token], format_type: str) -> str:
    """Format a token stream for output."""
    if format_type == "json":
        return json.dumps([token.to_dict() for token in tokens], indent=2)
    return "\n".join(str(token) for token in tokens)


def format_document(document: Document, format_type: str) -> str:
    """Format a document tree for output."""
    if format_type == "json":
        return json.dumps(document.to_dict(), indent=2)
    return document.pretty()


def format_error(error: ParseError) -> str:
    """One-line error report: kind, location when known, message."""
    location = f" at {error.location}" if error.location else ""
    return f"error: {error.kind.name}{location}: {error.message}"


def _run(args: argparse.Namespace, config: ParserConfig) -> int:
    try:
        text = read_source(args.file, args.encoding).text
    except InputDecodingError as e:
        print(f"error: cannot decode {args.file}: {e}", file=sys.stderr)
        return EXIT_UNREADABLE_INPUT
    except OSError as e:
        print(f"error: cannot read {args.file}: {e.strerror or e}", file=sys.stderr)
        return EXIT_UNREADABLE_INPUT

    tokens: List[Token] = []
    try:
        tokenization_result = XMLTokenizer(config.tokenization).tokenize(text)
        tokens = tokenization_result.tokens

        document = None
        if args.command != "tokens":
            document = XMLTreeBuilder(config.tree).build(tokenization_result)
    except ParseError as e:
        # Tree errors arrive after a complete token stream
        if args.command == "parse" and tokens and args.format == "text":
            print(format_tokens(tokens, args.format))
        print(format_error(e), file=sys.stderr)
        logger.debug("Parse failed", extra={"file": str(args.file), "kind": e.kind.name})
        return EXIT_PARSE_ERROR

    if args.format == "json":
        output: Dict[str, Any] = {}
        if args.command in ("parse", "tokens"):
            output["tokens"] = [token.to_dict() for token in tokens]
        if document is not None:
            output["document"] = document.to_dict()
        print(json.dumps(output, indent=2))
        return EXIT_OK

    if args.command in ("parse", "tokens"):
        print(format_tokens(tokens, args.format))
    if args.command == "parse":
        print()
    if document is not None:
        print(format_document(document, args.format))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_PARSE_ERROR

    config = build_config(args)
    configure_logging(config.logging_level)

    try:
        return _run(args, config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
