#!/usr/bin/env python3
"""regexfilter — route each input line to the file of the first regex it matches."""

import argparse
import logging
import os
import sys

from regexfilter.builder import ConfigBuilder
from regexfilter.config import load_rules_file, load_settings
from regexfilter.engine import dispatch
from regexfilter.errors import RegexFilterError
from regexfilter.options import apply_option, apply_rules, read_options, require_filters
from regexfilter.stats import format_stats_text

logger = logging.getLogger(__name__)

EPILOG = """\
options:
  match <pattern> <file>    (m) send lines matching <pattern> to <file>;
                            repeatable, the first matching filter wins
  infile <file>             (i) read from <file> instead of standard input
  remainder file <file>     (r) send unmatched lines to <file>
  remainder discard         (r) drop unmatched lines

Unmatched lines go to standard output unless 'remainder' is given.
Use '-' as a file name for standard input/output.
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="regexfilter",
        description="Route each input line to the file of the first pattern it matches.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        help="YAML rules file with filters, input and remainder",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress and a dispatch summary to stderr",
    )
    parser.add_argument(
        "tokens",
        nargs=argparse.REMAINDER,
        metavar="OPTION",
        help="match/infile/remainder options (see below)",
    )
    return parser


def run(args, parser: argparse.ArgumentParser, flush_each_record: bool = False) -> int:
    if not args.tokens and not args.config:
        parser.error("no options given")

    with ConfigBuilder() as builder:
        try:
            rules = load_rules_file(args.config) if args.config else None
            options = read_options(args.tokens)
            require_filters(options, rules)
            if rules is not None:
                apply_rules(rules, builder)
            for option in options:
                apply_option(option, builder)
            config = builder.finalize()
        except RegexFilterError as exc:
            parser.error(str(exc))

        logger.info(
            "Routing %s through %d filter(s), remainder -> %s",
            config.source.name, len(config.filters), config.remainder.name,
        )
        stats = dispatch(config, flush_each_record=flush_each_record)

    logger.info("Summary:\n%s", format_stats_text(stats))
    return 0


def _silence_stdout() -> None:
    """Point stdout at devnull so the interpreter's final flush cannot fail again."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s [regexfilter] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    settings = load_settings()
    logging.getLogger().setLevel(logging.INFO if args.verbose else settings.log_level)

    try:
        return run(args, parser, flush_each_record=settings.flush_each_record)
    except KeyboardInterrupt:
        return 130
    except BrokenPipeError:
        _silence_stdout()
        return 0


if __name__ == "__main__":
    sys.exit(main())
