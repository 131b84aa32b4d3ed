"""
Line index for duplicate detection.

Maps every normalized line key to all of its occurrences in the corpus, in
corpus order. The matcher uses it to jump straight from an anchor line to the
other places the same text appears, which keeps matching roughly linear in
corpus size instead of comparing every line against every other line.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from typing import Dict, Iterator, List, Sequence

from .models import Corpus, LineRecord

log = logging.getLogger(__name__)


class LineIndex:
    """
    Normalized key -> ordered list of LineRecords.
    Built once by build(); treat as read-only afterwards (the matcher may read
    it from several threads).
    """
    def __init__(self) -> None:
        self._occurrences: Dict[str, List[LineRecord]] = {}

    # ---- Build (once) ----
    def build(self, corpus: Corpus) -> "LineIndex":
        buckets: Dict[str, List[LineRecord]] = defaultdict(list)
        for rec in corpus:
            buckets[rec.key].append(rec)
        # plain dict: missing keys must not grow the index during lookups
        self._occurrences = dict(buckets)
        log.info("Line index built: keys=%d lines=%d", len(self._occurrences), len(corpus))
        return self

    # ---- Query ----
    def occurrences(self, key: str) -> Sequence[LineRecord]:
        """Every record whose key equals ``key``, in corpus order (empty if none)."""
        return self._occurrences.get(key, ())

    def count(self, key: str) -> int:
        return len(self._occurrences.get(key, ()))

    def is_duplicated(self, key: str) -> bool:
        return self.count(key) > 1

    def __contains__(self, key: object) -> bool:
        return key in self._occurrences

    def __len__(self) -> int:
        return len(self._occurrences)

    def __iter__(self) -> Iterator[str]:
        return iter(self._occurrences)


def build_index(corpus: Corpus) -> LineIndex:
    return LineIndex().build(corpus)


def active_files(corpus: Corpus, index: LineIndex) -> Dict[str, List[LineRecord]]:
    """
    Restrict the search to lines that recur somewhere in the corpus.

    Returns file identifier -> that file's duplicated lines, in corpus order.
    A file whose every line is unique corpus-wide is left out entirely. Only
    performance depends on this: a unique line cannot anchor a match.
    """
    by_file: Dict[str, List[LineRecord]] = {}
    for rec in corpus:
        if index.is_duplicated(rec.key):
            by_file.setdefault(rec.path, []).append(rec)
    log.info("Active files: %d of %d", len(by_file), len(corpus.files))
    return by_file
