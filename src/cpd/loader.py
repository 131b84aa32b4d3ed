"""
File discovery and corpus loading.

Turns command-line style file specs (``*.md``, ``docs/*.txt``) into an ordered
list of files, reads them, and produces the LineRecords of the corpus with
their same-file prev/next links.

Key Functions:
    find_files(specs, recursive): resolve specs to file identifiers
    read_sources(paths): read every file, in order, on a thread pool
    iter_line_records(sources): lazily yield linked LineRecords
    load_corpus(sources): materialize a Corpus from (path, text) pairs

Any file that cannot be read aborts the whole load with CorpusReadError:
a partial corpus would silently under- or over-report duplicates.
"""

from __future__ import annotations
import fnmatch
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from . import config as CFG
from .errors import ConfigError, CorpusReadError
from .models import Corpus, LineRecord
from .normalize import key_from_text, split_lines

log = logging.getLogger(__name__)

PROGRESS_EVERY_FILES = 500

_SEPARATORS = {"/", os.sep}


def _split_spec(spec: str) -> Tuple[str, str]:
    """
    Split a file spec at its last path separator into (directory, pattern).

    Example:
        >>> _split_spec("docs/*.md")
        ('docs', '*.md')
        >>> _split_spec("*.md")
        ('.', '*.md')
    """
    at = max(spec.rfind(sep) for sep in _SEPARATORS)
    if at < 0:
        return ".", spec
    base = spec[:at] or spec[:1]   # "/x.md" -> ("/", "x.md")
    return base, spec[at + 1:]


def _iter_matches(base: str, pattern: str, recursive: bool) -> Iterator[str]:
    if not recursive:
        with os.scandir(base) as it:
            for entry in it:
                if entry.is_file() and fnmatch.fnmatch(entry.name, pattern):
                    yield os.path.join(base, entry.name)
        return

    for dirpath, dirnames, filenames in os.walk(base):
        # prune in place so os.walk never descends into excluded folders
        dirnames[:] = [d for d in dirnames if d.lower() not in CFG.EXCLUDE_DIRS]
        for fn in filenames:
            if fnmatch.fnmatch(fn, pattern):
                yield os.path.join(dirpath, fn)


def find_files(specs: Iterable[str], recursive: bool = False) -> List[str]:
    """
    Resolve file specs to an ordered, duplicate-free list of file identifiers.

    Args:
        specs: ``PATTERN`` (searched in the current directory) or
               ``DIR/PATTERN``; patterns are shell globs.
        recursive: also search subdirectories of each base directory.

    Returns:
        List[str]: matches sorted per spec, specs kept in the given order;
        a file reached by two specs (under any spelling) appears once, at its
        first position and with its first spelling.

    Raises:
        CorpusReadError: a base directory is missing or cannot be listed.
    """
    files: List[str] = []
    seen = set()
    for spec in specs:
        base, pattern = _split_spec(spec)
        if not os.path.isdir(base):
            raise CorpusReadError(base, "no such directory")
        try:
            found = sorted(os.path.normpath(p) for p in _iter_matches(base, pattern, recursive))
        except OSError as e:
            raise CorpusReadError(base, e.strerror or str(e)) from e
        log.debug("spec %r matched %d file(s) under %s", spec, len(found), base)
        for path in found:
            # one file may be reached through different spellings (relative, absolute, symlink)
            real = os.path.realpath(path)
            if real not in seen:
                seen.add(real)
                files.append(path)
    return files


def read_text(path: str) -> Tuple[str, str]:
    """Read one file as text: UTF-8 (leading BOM dropped) first, latin-1 if that fails to decode."""
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise CorpusReadError(path, e.strerror or str(e)) from e
    try:
        text = raw.decode(CFG.ENCODING)
    except UnicodeDecodeError:
        text = raw.decode(CFG.FALLBACK_ENCODING)
    return path, text


def read_sources(paths: Sequence[str], workers: Optional[int] = None) -> List[Tuple[str, str]]:
    """Read every path on a thread pool. Output order is input order."""
    if not paths:
        return []
    workers = workers or CFG.READ_WORKERS
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(paths)))) as ex:
        sources = list(ex.map(read_text, paths))
    log.info("Read %d file(s)", len(sources))
    return sources


def iter_line_records(sources: Iterable[Tuple[str, str]], start_id: int = 0) -> Iterator[LineRecord]:
    """
    Yield LineRecords for (path, text) pairs, file by file.

    Lines of one file are chained through prev_id/next_id; the first line of
    a file never points back into the previous file.
    """
    rid = start_id
    file_count = 0
    for path, text in sources:
        lines = split_lines(text)
        last = len(lines) - 1
        for i, raw in enumerate(lines):
            yield LineRecord(
                id=rid,
                path=path,
                line_no=i + 1,
                text=raw,
                key=key_from_text(raw),
                prev_id=rid - 1 if i > 0 else None,
                next_id=rid + 1 if i < last else None,
            )
            rid += 1

        file_count += 1
        if CFG.VERBOSE and file_count % PROGRESS_EVERY_FILES == 0:
            log.info("[scanned] files=%s lines=%s", f"{file_count:,}", f"{rid - start_id:,}")


def load_corpus(sources: Iterable[Tuple[str, str]]) -> Corpus:
    """
    Materialize the corpus from (file identifier, full text) pairs.

    Files with no lines still show up in ``Corpus.files``. The same identifier
    given twice raises ConfigError: its lines would match themselves.
    """
    sources = list(sources)
    seen = set()
    for path, _ in sources:
        if path in seen:
            raise ConfigError(f"file {path!r} was given more than once")
        seen.add(path)
    corpus = Corpus.from_records(iter_line_records(sources), files=[p for p, _ in sources])
    log.info("Corpus loaded: files=%d lines=%d", len(corpus.files), len(corpus))
    return corpus


def load_paths(specs: Iterable[str], recursive: bool = False,
               workers: Optional[int] = None) -> Corpus:
    """find_files + read_sources + load_corpus in one call."""
    return load_corpus(read_sources(find_files(specs, recursive=recursive), workers=workers))
