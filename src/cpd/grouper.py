from __future__ import annotations
import logging
from typing import Dict, List, Sequence, Tuple

from .index import LineIndex
from .models import Corpus, MatchGroup, WindowMatch

log = logging.getLogger(__name__)


def window_content(corpus: Corpus, m: WindowMatch, size: int) -> Tuple[str, ...]:
    """The normalized keys of the anchor's window; the grouping key."""
    return tuple(rec.key for rec in corpus.window(m.anchor, size))


def group_matches(
    corpus: Corpus,
    index: LineIndex,
    matches: Sequence[WindowMatch],
    window_size: int,
    *,
    descending: bool = False,
) -> List[MatchGroup]:
    """
    Collapse window matches into one MatchGroup per distinct window content.

    The first match seen for a content is the group's representative: its
    anchor and peers are the reported locations, and its peer count + 1 is the
    occurrence count. Groups come back sorted by count, ascending unless
    ``descending``; equal counts keep first-seen order.
    """
    reps: Dict[Tuple[str, ...], WindowMatch] = {}
    for m in matches:
        reps.setdefault(window_content(corpus, m, window_size), m)

    groups: List[MatchGroup] = []
    for content, rep in reps.items():
        window = corpus.window(rep.anchor, window_size)
        groups.append(MatchGroup(
            content=content,
            lines=tuple(rec.text for rec in window),
            line_counts=tuple(index.count(rec.key) for rec in window),
            locations=(rep.anchor.location,) + tuple(p.location for p in rep.peers),
        ))

    # stable sort; reverse=True keeps ties in first-seen order
    groups = sorted(groups, key=lambda g: g.count, reverse=descending)
    log.info("Match groups: %d", len(groups))
    return groups
