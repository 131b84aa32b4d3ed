# cpd/engine.py
from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Tuple

from . import config as CFG
from .config import MatchConfig
from .grouper import group_matches
from .index import LineIndex, active_files, build_index
from .loader import find_files, load_corpus, read_sources
from .matcher import find_window_matches
from .models import Corpus, LineRecord, MatchGroup, WindowMatch

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - corpus loading (loader.find_files / read_sources / load_corpus),
      - the line index and active-file filter (index),
      - window matching (matcher) and grouping (grouper).

    Public API (used by CLI/Flask):
      * build(specs, ...):         discover + read files -> corpus -> index
      * build_from_sources(pairs): same, from in-memory (path, text) pairs
      * window_matches():          every WindowMatch, discovery order
      * find_duplicates():         MatchGroups ordered by occurrence count
      * shutdown():                drop everything

    The MatchConfig is validated when the Engine is created, so a bad
    window size or pattern fails before any file is touched.
    """

    # ------------- lifecycle -------------

    def __init__(self, config: Optional[MatchConfig] = None) -> None:
        self.config: MatchConfig = config or MatchConfig()
        self.corpus: Optional[Corpus] = None
        self.index: Optional[LineIndex] = None
        self._active: Optional[dict[str, List[LineRecord]]] = None
        self._matches: Optional[List[WindowMatch]] = None

    # /* ~~~ Discover and read files, then build the line index ~~~ */
    def build(
        self,
        specs: Iterable[str],
        *,
        recursive: bool = False,
        workers: Optional[int] = None,         # file-reading threads
        verbose: bool = False,
    ) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)

        specs = list(specs)
        if not specs:
            raise ValueError("build(): at least one file pattern is required")

        log.info("Finding files for %s (recursive=%s)", specs, recursive)
        paths = find_files(specs, recursive=recursive)
        self.build_from_sources(read_sources(paths, workers=workers))

    # /* ~~~ Build from (path, text) pairs that are already in memory ~~~ */
    def build_from_sources(self, sources: Iterable[Tuple[str, str]]) -> None:
        corpus = load_corpus(sources)
        index = build_index(corpus)

        # Commit engine state
        self.corpus = corpus
        self.index = index
        self._active = active_files(corpus, index)
        self._matches = None
        log.info("Engine build() complete: files=%d lines=%d", len(corpus.files), len(corpus))

    # ------------- query -------------

    def window_matches(self, *, workers: Optional[int] = None) -> List[WindowMatch]:
        self._require_built()
        if self._matches is None:
            self._matches = find_window_matches(
                self.corpus, self.index, self.config,
                active=self._active, workers=workers,
            )
        return self._matches

    # /* ~~~ Group matches into the result set handed to reporters ~~~ */
    def find_duplicates(self, *, descending: bool = False,
                        workers: Optional[int] = None) -> List[MatchGroup]:
        matches = self.window_matches(workers=workers)
        return group_matches(
            self.corpus, self.index, matches, self.config.window_size, descending=descending,
        )

    def stats(self) -> dict[str, int]:
        self._require_built()
        return {
            "files": len(self.corpus.files),
            "lines": len(self.corpus),
            "active_files": len(self._active),
        }

    # ------------- teardown -------------

    def shutdown(self) -> None:
        self.corpus = None
        self.index = None
        self._active = None
        self._matches = None
        log.info("Engine shutdown complete")

    # ------------- internals -------------

    def _require_built(self) -> None:
        if self.corpus is None or self.index is None:
            raise RuntimeError("Engine not initialized. Call build() or build_from_sources() first.")


def detect_duplicates(
    sources: Iterable[Tuple[str, str]],
    window_size: int = CFG.WINDOW_SIZE,
    patterns: Optional[Mapping[int, str]] = None,
    *,
    descending: bool = False,
) -> List[MatchGroup]:
    """
    One-shot API: (path, text) pairs in, ordered MatchGroups out.

    Example:
        >>> groups = detect_duplicates([("a", "foo\\nbar\\nbaz"), ("b", "xxx\\nfoo\\nbar")])
        >>> [(g.content, g.count, g.locations) for g in groups]
        [(('foo', 'bar'), 2, (('a', 1), ('b', 2)))]
    """
    eng = Engine(MatchConfig.create(window_size, patterns))
    eng.build_from_sources(sources)
    try:
        return eng.find_duplicates(descending=descending)
    finally:
        eng.shutdown()
