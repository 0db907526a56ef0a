#!/usr/bin/env python3
"""
loaderkit CLI: content hashes, output names and portable requests.

Commands:
  hash:           Print content digests of files
  interpolate:    Expand a name pattern such as "[name].[hash:8].[ext]" for files
  stringify:      Turn a loader request chain into a portable string literal
  url-to-request: Convert a stylesheet/template URL into a module request
  parse-query:    Parse a loader query string and print it as JSON
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

from config import config
from errors import LoaderKitError
from naming import interpolate_name
from query import parse_query
from request_utils import stringify_request, url_to_request
from utils.hash_utils import get_hash_digest

logger = logging.getLogger(__name__)

# Show a progress bar only when there is more than this many files
PROGRESS_MIN_FILES = 1


def configure_logging(level: int | None = None) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=level if level is not None else config.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _iter_files(files: list[Path], desc: str):
    return tqdm(files, desc=desc, disable=len(files) <= PROGRESS_MIN_FILES, file=sys.stderr)


def cmd_hash(args: argparse.Namespace) -> int:
    """Hash command: print `<digest>  <file>` for each file.

    Args:
        args: Parsed arguments with files, algorithm, encoding, length

    Returns:
        Exit code (0 on success, 1 if any file failed)
    """
    algorithm = args.algorithm or config.HASH_ALGORITHM
    encoding = args.encoding or config.DIGEST_ENCODING
    rc = 0

    for path in _iter_files(args.files, "Hashing"):
        try:
            digest = get_hash_digest(path.read_bytes(), algorithm, encoding, args.length)
        except OSError as e:
            tqdm.write(f"Error: Cannot read {path}: {e}", file=sys.stderr)
            rc = 1
            continue
        except LoaderKitError as e:
            tqdm.write(f"Error: {e}", file=sys.stderr)
            return 1
        tqdm.write(f"{digest}  {path}")

    return rc


def cmd_interpolate(args: argparse.Namespace) -> int:
    """Interpolate command: expand the name pattern for each file.

    Args:
        args: Parsed arguments with pattern, files, context, regexp, json

    Returns:
        Exit code (0 on success, 1 on failure)
    """
    pattern = args.pattern or config.NAME_PATTERN
    context = args.context or config.CONTEXT_DIR
    results: list[dict[str, Any]] = []

    for path in _iter_files(args.files, "Interpolating"):
        resource_path = str(path.resolve())
        options: dict[str, Any] = {"context": context, "regexp": args.regexp}
        try:
            options["content"] = path.read_bytes()
            name = interpolate_name(pattern, resource_path, options)
        except OSError as e:
            print(f"Error: Cannot read {path}: {e}", file=sys.stderr)
            return 1
        except LoaderKitError as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            return 1

        logger.info("Interpolated %s -> %s", resource_path, name)
        if args.json:
            results.append({"source_path": resource_path, "name": name})
        else:
            tqdm.write(name)

    if args.json:
        print(json.dumps(results, indent=2, ensure_ascii=False))
    return 0


def cmd_stringify(args: argparse.Namespace) -> int:
    """Stringify command: print the request as a string literal."""
    context = args.context or config.CONTEXT_DIR
    print(stringify_request(context, args.request))
    return 0


def cmd_url_to_request(args: argparse.Namespace) -> int:
    """url-to-request command: print the module request for a URL."""
    root: str | bool | None = args.root
    if args.keep_root:
        root = True
    print(url_to_request(args.url, root))
    return 0


def cmd_parse_query(args: argparse.Namespace) -> int:
    """parse-query command: print the parsed query as JSON."""
    try:
        parsed = parse_query(args.query)
    except LoaderKitError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(parsed, indent=2, ensure_ascii=False, default=str))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser with subcommands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="loaderkit",
        description="loaderkit CLI: hash, interpolate, stringify, url-to-request, parse-query",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (overrides LOG_LEVEL from config)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # hash subcommand
    hash_parser = subparsers.add_parser("hash", help="Print content digests of files")
    hash_parser.add_argument("files", type=Path, nargs="+", help="Files to hash")
    hash_parser.add_argument(
        "--algorithm",
        type=str,
        default=None,
        help="hashlib algorithm (default: HASH_ALGORITHM from config, md5)",
    )
    hash_parser.add_argument(
        "--encoding",
        type=str,
        default=None,
        help="hex, base64, base26..base62, base64safe or a custom alphabet (default: DIGEST_ENCODING, hex)",
    )
    hash_parser.add_argument("--length", type=int, default=None, help="Keep only this many leading characters")
    hash_parser.epilog = (
        "Examples:\n"
        "  loaderkit hash app.js\n"
        "  loaderkit hash --algorithm sha512 --encoding base64 --length 8 *.png\n"
    )

    # interpolate subcommand
    interpolate_parser = subparsers.add_parser("interpolate", help="Expand a name pattern for files")
    interpolate_parser.add_argument(
        "pattern",
        type=str,
        help="Name pattern, e.g. '[path][name].[contenthash:8].[ext]' (empty: NAME_PATTERN from config)",
    )
    interpolate_parser.add_argument("files", type=Path, nargs="+", help="Resource files")
    interpolate_parser.add_argument(
        "--context",
        type=str,
        default=None,
        help="Directory [path] is relative to (overrides CONTEXT_DIR from config)",
    )
    interpolate_parser.add_argument(
        "--regexp",
        type=str,
        default=None,
        help="Regular expression matched against the resource path; groups fill [0], [1], ...",
    )
    interpolate_parser.add_argument("--json", action="store_true", help="Output JSON")
    interpolate_parser.epilog = (
        "Examples:\n"
        "  loaderkit interpolate '[name].[hash:8].[ext]' src/logo.png\n"
        "  loaderkit interpolate '[path][name].[ext]' --context /abs/project/src src/img/*.png --json\n"
    )

    # stringify subcommand
    stringify_parser = subparsers.add_parser("stringify", help="Turn a request chain into a string literal")
    stringify_parser.add_argument("request", type=str, help="'!'-delimited loader request chain")
    stringify_parser.add_argument(
        "--context",
        type=str,
        default=None,
        help="Directory absolute paths are made relative to (overrides CONTEXT_DIR from config)",
    )

    # url-to-request subcommand
    url_parser = subparsers.add_parser("url-to-request", help="Convert a URL into a module request")
    url_parser.add_argument("url", type=str, help="URL as written in the stylesheet or template")
    root_group = url_parser.add_mutually_exclusive_group()
    root_group.add_argument("--root", type=str, default=None, help="Directory or ~module prefix for /urls")
    root_group.add_argument("--keep-root", action="store_true", help="Keep root-relative urls unchanged")

    # parse-query subcommand
    query_parser = subparsers.add_parser("parse-query", help="Parse a loader query string")
    query_parser.add_argument("query", type=str, help="Query string starting with '?'")

    return parser


def main() -> None:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args()

    level = None
    if args.log_level:
        level = logging.getLevelName(args.log_level.upper())
        if not isinstance(level, int):
            parser.error(f"unknown log level: {args.log_level}")
    configure_logging(level)

    if args.command == "hash":
        rc = cmd_hash(args)
    elif args.command == "interpolate":
        rc = cmd_interpolate(args)
    elif args.command == "stringify":
        rc = cmd_stringify(args)
    elif args.command == "url-to-request":
        rc = cmd_url_to_request(args)
    elif args.command == "parse-query":
        rc = cmd_parse_query(args)
    else:
        parser.print_help()
        rc = 2

    sys.exit(rc)


if __name__ == "__main__":
    main()
