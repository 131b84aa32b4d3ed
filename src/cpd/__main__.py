from __future__ import annotations
import argparse, logging, re, sys
from typing import Dict, List, Tuple

from . import config as CFG
from .config import MatchConfig
from .engine import Engine
from .errors import ConfigError, CorpusReadError
from .report import format_details, write_report

BANNER = """CPD, Copy Paste Detective

  USAGE: cpd [-n LINES] [-# REGEX] [-r] PATTERN
     OR: cpd [-n LINES] [-# REGEX] [-r] PATH/PATTERN

  EXAMPLES

     cpd -r *.md -n 3 -1 "```.*bash"
     cpd -r ~/src/book-of-ai/*.md"""

# "-1 REGEX", "-2 REGEX", ...: regex for that 1-based window offset
_OFFSET_FLAG = re.compile(r"^-(\d+)$")


def _extract_offset_flags(argv: List[str]) -> Tuple[List[str], Dict[int, str]]:
    """
    Pull the numeric offset flags out of argv before argparse sees them
    (argparse would take "-1" for a negative number).
    """
    rest: List[str] = []
    patterns: Dict[int, str] = {}
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            rest.extend(argv[i:])
            break
        m = _OFFSET_FLAG.match(arg)
        prev = argv[i - 1] if i else ""
        if m and prev not in ("-n", "--lines", "--workers") and i + 1 < len(argv):
            patterns[int(m.group(1))] = argv[i + 1]
            i += 2
            continue
        rest.append(arg)
        i += 1
    return rest, patterns


def _parse_pattern_opts(values: List[str]) -> Dict[int, str]:
    patterns: Dict[int, str] = {}
    for v in values:
        offset, sep, regex = v.partition("=")
        if not sep:
            raise ConfigError(f"expected OFFSET=REGEX, got {v!r}")
        try:
            patterns[int(offset)] = regex
        except ValueError:
            raise ConfigError(f"pattern offset must be an integer, got {offset!r}") from None
    return patterns


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cpd", description="Copy Paste Detective: find duplicated line windows")
    p.add_argument("patterns", nargs="*", metavar="PATTERN", help="File glob, optionally DIR/PATTERN")
    p.add_argument("-n", "--lines", type=int, default=CFG.WINDOW_SIZE, help="Lines per window")
    p.add_argument("-p", "--pattern", action="append", default=[], metavar="OFFSET=REGEX",
                   help="Regex both lines at OFFSET must match (same as -OFFSET REGEX)")
    p.add_argument("-r", "--recursive", action="store_true", help="Search subdirectories")
    p.add_argument("--json", action="store_true", help="Emit JSON groups")
    p.add_argument("--details", action="store_true", help="List every match instead of groups (text only)")
    p.add_argument("--descending", action="store_true", help="Most repeated first")
    p.add_argument("--workers", type=int, default=None, help="Threads for matching")
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    argv, numbered = _extract_offset_flags(argv)
    # file specs may sit on either side of the options ("a.md -n 3 b.md")
    args = build_parser().parse_intermixed_args(argv)

    if args.verbose or CFG.VERBOSE:
        logging.basicConfig(level=logging.INFO)

    if not args.patterns:
        print(BANNER)
        return 1

    try:
        patterns = _parse_pattern_opts(args.pattern)
        patterns.update(numbered)
        cfg = MatchConfig.create(args.lines, patterns)
        if args.details and (args.json or args.descending):
            raise ConfigError("--details cannot be combined with --json or --descending")
    except ConfigError as e:
        print(f"cpd: error: {e}", file=sys.stderr)
        return 2

    eng = Engine(cfg)
    try:
        eng.build(args.patterns, recursive=args.recursive)
        if args.details:
            matches = eng.window_matches(workers=args.workers)
            if matches:
                print(format_details(eng.corpus, eng.index, matches, cfg.window_size))
            return 0
        groups = eng.find_duplicates(descending=args.descending, workers=args.workers)
        write_report(groups, sys.stdout, as_json=args.json)
        return 0
    except CorpusReadError as e:
        print(f"cpd: error: {e}", file=sys.stderr)
        return 1
    finally:
        eng.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
