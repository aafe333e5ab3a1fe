"""Command line interface for the harvest filter."""

import argparse
import logging
import os
import sys
from pathlib import Path
from .errors import HarvestFilterError
from .filter import PathFilter
from .walk import walk

PRODUCT_NAME = "Harvest Filter"
__version__ = "0.1.0"


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="List the files a harvest filter definition keeps in a directory."
    )
    parser.add_argument(
        "definition",
        help="filter definition file, optionally as path;fragment",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="base directory to walk (default: current directory)",
    )
    parser.add_argument(
        "-f",
        "--fragment",
        help="fragment id to load (overrides a ;fragment suffix)",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="also show excluded entries, prefixed with '.' (included: 'I')",
    )
    parser.add_argument(
        "--case-sensitive",
        action="store_true",
        help="match patterns case-sensitively",
    )
    parser.add_argument(
        "--version", action="version", version=f"{PRODUCT_NAME} v{__version__}"
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", help="enable debug output"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    directory = Path(args.directory)

    if not directory.is_dir():
        print(f"Error: {directory} is not a directory", file=sys.stderr)
        sys.exit(1)

    path_filter = PathFilter(ignore_case=not args.case_sensitive)
    try:
        if args.fragment is not None:
            definition = args.definition.partition(";")[0]
            path_filter.load(os.path.abspath(definition), directory, args.fragment)
        else:
            path_filter.load_spec(args.definition, directory)
    except (HarvestFilterError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.getLogger(__name__).debug(
        "filter mode %s with %d rules", path_filter.mode.name, len(path_filter.rules)
    )

    base = Path(os.path.abspath(directory))
    for entry in walk(path_filter, base):
        rel_path = Path(entry.path).relative_to(base).as_posix()
        if entry.is_dir:
            rel_path += "/"
        if args.all:
            status = "I" if entry.included else "."
            print(f"{status} {rel_path}")
        elif entry.included and not entry.is_dir:
            print(rel_path)


if __name__ == "__main__":
    main()
