"""
Command-line interface for wordnet-ris.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import yaml

from . import __version__
from .config import Settings, load_settings, parse_cache_size
from .exceptions import ConfigurationError, WordnetRisError
from .index import SynonymIndex

PROG = "wordnet-ris"

_LMF_SUFFIXES = (".xml", ".xml.gz", ".xml.xz", ".lmf")


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the wordnet-ris CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        sys.stderr.write(f"{PROG}: ERROR: missing command\n")
        parser.print_help(sys.stderr)
        return 1

    try:
        settings = _resolve_settings(args)
        return args.func(args, settings)
    except (WordnetRisError, FileNotFoundError) as e:
        sys.stderr.write(f"{PROG}: {args.command}: ERROR: {e}\n")
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="WordNet Reduced Information Set: compact synonym lookups",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "--database", "-d",
        type=Path,
        help="Compressed JSON database file",
    )
    parser.add_argument(
        "--cache-size",
        type=str,
        help="Number of lookup results to keep cached",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML settings file",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # import command
    import_parser = subparsers.add_parser(
        "import",
        help="Import a WN-LMF database into the compact JSON database",
    )
    import_parser.add_argument(
        "source",
        help="WN-LMF XML file, wn SQLite file, or '@' prefixed path",
    )
    import_parser.add_argument(
        "--format",
        choices=["lmf", "sqlite", "wn"],
        help="Source format (default: guessed from the file suffix)",
    )
    import_parser.add_argument(
        "--lexicon",
        type=str,
        help="Only import this lexicon specifier (id:version)",
    )
    import_parser.set_defaults(func=cmd_import)

    # lookup command
    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Look up the synonyms of one lemma",
    )
    lookup_parser.add_argument(
        "lemma",
        help="One lemma/word to look up",
    )
    lookup_parser.add_argument(
        "--format", "-f",
        choices=["json", "yaml"],
        default="yaml",
        help="Output format (default: yaml)",
    )
    lookup_parser.add_argument(
        "--output", "-o",
        default="-",
        help="Output file (default: stdout)",
    )
    lookup_parser.add_argument(
        "--nocase", "-i",
        action="store_true",
        help="Match the lemma case-insensitively",
    )
    lookup_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Bypass the lookup cache",
    )
    lookup_parser.set_defaults(func=cmd_lookup)

    # manifest command
    manifest_parser = subparsers.add_parser(
        "manifest",
        help="List all lemmas in the database",
    )
    manifest_parser.add_argument(
        "--output", "-o",
        default="-",
        help="Output file (default: stdout)",
    )
    manifest_parser.set_defaults(func=cmd_manifest)

    return parser


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    if args.database is not None:
        settings = replace(settings, database=args.database)
    if args.cache_size is not None:
        settings = replace(
            settings, cache_size=parse_cache_size(args.cache_size, "--cache-size")
        )
    return settings


def _open_index(settings: Settings) -> SynonymIndex:
    return SynonymIndex(settings.database, cache_size=settings.cache_size)


def _write_output(text: str, output: str) -> None:
    if output == "-":
        sys.stdout.write(text)
    else:
        Path(output).write_text(text, encoding="utf-8")


def _guess_format(source: str) -> str:
    if source.lower().endswith(_LMF_SUFFIXES):
        return "lmf"
    return "sqlite"


def cmd_import(args: argparse.Namespace, settings: Settings) -> int:
    """Handle import command."""
    source = args.source[1:] if args.source.startswith("@") else args.source
    fmt = args.format or _guess_format(source)
    if settings.database is None:
        raise ConfigurationError("No database file configured")

    index = _open_index(settings)
    if fmt == "lmf":
        index.import_lmf(source)
    elif fmt == "sqlite":
        index.import_sqlite(source, lexicon=args.lexicon)
    else:
        index.import_wn(args.lexicon or source)

    print(
        f"Imported {len(index.database)} lemmas, "
        f"{len(index.database.synsets)} synsets into {settings.database}",
        file=sys.stderr,
    )
    return 0


def cmd_lookup(args: argparse.Namespace, settings: Settings) -> int:
    """Handle lookup command."""
    index = _open_index(settings)
    result = index.lookup(
        args.lemma,
        case_insensitive=args.nocase,
        use_cache=not args.no_cache,
    )
    if result is None:
        sys.stderr.write(f"{PROG}: lookup: ERROR: lemma \"{args.lemma}\" not found\n")
        return 1

    data = result.to_dict()
    if args.format == "json":
        output = json.dumps(data, indent=4, ensure_ascii=False) + "\n"
    else:
        output = yaml.safe_dump(
            data, indent=4, sort_keys=False, allow_unicode=True
        )
    _write_output(output, args.output)
    return 0


def cmd_manifest(args: argparse.Namespace, settings: Settings) -> int:
    """Handle manifest command."""
    index = _open_index(settings)
    lemmas = index.manifest()
    _write_output("".join(f"{lemma}\n" for lemma in lemmas), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
