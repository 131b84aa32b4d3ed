"""
Window matcher.

For every candidate anchor line with a full N-line window inside its own
file, find every other place in the corpus where the same N lines occur:

    1. look the anchor's key up in the LineIndex,
    2. walk anchor and candidate chains side by side for N steps,
    3. keep the candidate only if every step has equal keys and, where an
       offset pattern is configured, both raw lines satisfy it.

Windows are independent per anchor, so a 3-line duplicate with N=2 gives
two overlapping matches. Anchors share nothing mutable, which lets
find_window_matches spread files over a thread pool; the merged output is
identical to a sequential run.
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from . import config as CFG
from .config import MatchConfig
from .errors import CpdError
from .index import LineIndex, active_files
from .models import Corpus, LineRecord, WindowMatch

log = logging.getLogger(__name__)


def has_full_window(corpus: Corpus, rec: LineRecord, size: int) -> bool:
    """True when rec is followed by at least size-1 lines of the same file."""
    cur: Optional[LineRecord] = rec
    for _ in range(size - 1):
        cur = corpus.next_line(cur)
        if cur is None:
            return False
    return True


def windows_match(corpus: Corpus, a: Optional[LineRecord], b: Optional[LineRecord],
                  cfg: MatchConfig) -> bool:
    """Walk both windows for cfg.window_size steps; any failed step rejects the pair."""
    for i in range(cfg.window_size):
        if a is None or b is None:
            return False
        if a.key != b.key:
            return False
        pattern = cfg.pattern_for(i + 1)
        # each line must satisfy the pattern on its own
        if pattern is not None and (not pattern.search(a.text) or not pattern.search(b.text)):
            return False
        a = corpus.next_line(a)
        b = corpus.next_line(b)
    return True


def match_anchor(corpus: Corpus, index: LineIndex, anchor: LineRecord,
                 cfg: MatchConfig) -> Optional[WindowMatch]:
    """
    The WindowMatch for one anchor, or None when it has no full window or no
    peer. Peers keep index order (file order, then line order).
    """
    if not has_full_window(corpus, anchor, cfg.window_size):
        return None

    occurrences = index.occurrences(anchor.key)
    if not occurrences:
        raise CpdError(f"internal: line {anchor.path}({anchor.line_no}) is missing from the index")

    peers = [
        other for other in occurrences
        if other.id != anchor.id and windows_match(corpus, anchor, other, cfg)
    ]
    if not peers:
        return None
    return WindowMatch(anchor=anchor, peers=tuple(peers))


def _match_file(corpus: Corpus, index: LineIndex, lines: Sequence[LineRecord],
                cfg: MatchConfig) -> List[WindowMatch]:
    out: List[WindowMatch] = []
    for rec in lines:
        m = match_anchor(corpus, index, rec, cfg)
        if m is not None:
            out.append(m)
    return out


def find_window_matches(
    corpus: Corpus,
    index: LineIndex,
    cfg: MatchConfig,
    *,
    active: Optional[Dict[str, List[LineRecord]]] = None,
    workers: Optional[int] = None,
) -> List[WindowMatch]:
    """
    Every WindowMatch in the corpus, in file order then anchor line order.

    Args:
        corpus: the loaded corpus.
        index: LineIndex built from the same corpus.
        cfg: window size and offset patterns.
        active: candidate anchors per file; defaults to active_files(corpus, index).
            Passing every line of every file gives the same result, only slower.
        workers: >1 spreads files over a thread pool (default config.MATCH_WORKERS).
    """
    if active is None:
        active = active_files(corpus, index)
    workers = workers or CFG.MATCH_WORKERS
    per_file = list(active.values())

    if workers > 1 and len(per_file) > 1:
        with ThreadPoolExecutor(max_workers=min(workers, len(per_file))) as ex:
            chunks = list(ex.map(lambda lines: _match_file(corpus, index, lines, cfg), per_file))
    else:
        chunks = [_match_file(corpus, index, lines, cfg) for lines in per_file]

    matches = [m for chunk in chunks for m in chunk]
    log.info("Window matches: %d (window=%d, patterns=%d)",
             len(matches), cfg.window_size, len(cfg.offset_patterns))
    return matches
