# src/cpd/models.py
"""
Data models for the duplicate detector.

- LineRecord: one physical line of one file, linked to its same-file neighbours.
- Corpus: every LineRecord of the run, stored as an arena indexed by id.
- WindowMatch: an anchor line plus the anchors of every matching window.
- MatchGroup: one reported equivalence class of identical windows.

The classes hold no matching logic; the index, matcher and grouper modules
work on them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class LineRecord:
    """
    One physical line, immutable once read.

    Attributes
    ----------
    id : int
        Position in the corpus arena. Never reused within a run.
    path : str
        Identifier of the owning file, as produced by discovery.
    line_no : int
        1-based line number within the file.
    text : str
        Raw line text without the line terminator.
    key : str
        The normalized key (text trimmed); two lines are equal iff keys are equal.
    prev_id, next_id : Optional[int]
        Arena ids of the adjacent lines of the SAME file, None at file start/end.
    """
    id: int
    path: str
    line_no: int
    text: str
    key: str
    prev_id: Optional[int] = None
    next_id: Optional[int] = None

    @property
    def location(self) -> Tuple[str, int]:
        return self.path, self.line_no


@dataclass(slots=True)
class Corpus:
    """
    All lines of the run, in file order then line order.

    Attributes
    ----------
    lines : List[LineRecord]
        The arena; ``lines[r.id] is r`` for every record.
    files : List[str]
        File identifiers in read order, including files with no lines.
    """
    lines: List[LineRecord] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    @classmethod
    def from_records(cls, records: Iterable[LineRecord], files: Iterable[str] = ()) -> "Corpus":
        corpus = cls(files=list(files))
        seen = set(corpus.files)
        for rec in records:
            if rec.id != len(corpus.lines):
                raise ValueError(f"record id {rec.id} out of arena order")
            corpus.lines.append(rec)
            if rec.path not in seen:
                seen.add(rec.path)
                corpus.files.append(rec.path)
        return corpus

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[LineRecord]:
        return iter(self.lines)

    def next_line(self, rec: LineRecord) -> Optional[LineRecord]:
        return None if rec.next_id is None else self.lines[rec.next_id]

    def prev_line(self, rec: LineRecord) -> Optional[LineRecord]:
        return None if rec.prev_id is None else self.lines[rec.prev_id]

    def nth_line(self, rec: Optional[LineRecord], n: int) -> Optional[LineRecord]:
        """Follow ``next`` n times; None once the file runs out."""
        cur = rec
        for _ in range(n):
            if cur is None:
                return None
            cur = self.next_line(cur)
        return cur

    def window(self, rec: LineRecord, size: int) -> List[LineRecord]:
        """Up to ``size`` lines starting at rec (shorter at the end of a file)."""
        out: List[LineRecord] = []
        cur: Optional[LineRecord] = rec
        while cur is not None and len(out) < size:
            out.append(cur)
            cur = self.next_line(cur)
        return out


@dataclass(frozen=True, slots=True)
class WindowMatch:
    """An anchor line and the anchors of the other windows equal to its window."""
    anchor: LineRecord
    peers: Tuple[LineRecord, ...]


@dataclass(frozen=True, slots=True)
class MatchGroup:
    """
    One equivalence class of identical N-line windows, ready for reporting.

    Attributes
    ----------
    content : Tuple[str, ...]
        The normalized keys of the window, one per line.
    lines : Tuple[str, ...]
        Raw text of the representative window (what the reporter shows).
    line_counts : Tuple[int, ...]
        Corpus-wide occurrence count of each window line's key.
    locations : Tuple[Tuple[str, int], ...]
        (path, line_no) of the representative anchor followed by its peers.
    """
    content: Tuple[str, ...]
    lines: Tuple[str, ...]
    line_counts: Tuple[int, ...]
    locations: Tuple[Tuple[str, int], ...]

    @property
    def count(self) -> int:
        """Total occurrences of the window across the corpus."""
        return len(self.locations)

    def to_dict(self) -> Dict[str, object]:
        return {
            "count": self.count,
            "lines": [
                {"text": text, "occurrences": n}
                for text, n in zip(self.lines, self.line_counts)
            ],
            "locations": [{"path": p, "line": ln} for p, ln in self.locations],
        }
