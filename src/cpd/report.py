from __future__ import annotations
import json
from typing import Iterable, List, Sequence, TextIO

from .index import LineIndex
from .models import Corpus, MatchGroup, WindowMatch


def format_summary(groups: Iterable[MatchGroup]) -> str:
    """
    Grouped report, one block per MatchGroup:

        -----
            2
        [   2] foo
        [   3] bar
        -----
        a.md(1)
        b.md(2)
    """
    out: List[str] = []
    for g in groups:
        out.append("-----")
        out.append(f"{g.count:5}")
        for text, n in zip(g.lines, g.line_counts):
            out.append(f"[{n:4}] {text}")
        out.append("-----")
        for path, line_no in g.locations:
            out.append(f"{path}({line_no})")
        out.append("\n")
    return "\n".join(out)


def format_details(corpus: Corpus, index: LineIndex,
                   matches: Sequence[WindowMatch], window_size: int) -> str:
    """Ungrouped listing: every anchor's window with per-line counts and locations."""
    out: List[str] = []
    for m in matches:
        out.append("-----")
        out.append(f"{len(m.peers) + 1}")
        for rec in corpus.window(m.anchor, window_size):
            out.append(f"[{index.count(rec.key):4}] {rec.path}({rec.line_no}): {rec.text}")
    return "\n".join(out)


def to_json(groups: Iterable[MatchGroup], indent: int | None = 2) -> str:
    return json.dumps([g.to_dict() for g in groups], ensure_ascii=False, indent=indent)


def write_report(groups: Sequence[MatchGroup], stream: TextIO, *, as_json: bool = False) -> None:
    if as_json:
        print(to_json(groups), file=stream)
    elif not groups:
        print("(no duplicates)", file=stream)
    else:
        print(format_summary(groups), file=stream)
