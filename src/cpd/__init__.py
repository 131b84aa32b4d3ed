"""
CPD, the Copy Paste Detective

Finds runs of N consecutive lines that appear, after trimming, in more than
one place across a set of text files. Works on any line-based text: source
code, Markdown, configuration.

The package is split along the pipeline:
- loader: file discovery and reading into a linked line corpus
- index: normalized line -> occurrences, plus the active-file filter
- matcher: N-line window matching with optional per-offset regexes
- grouper: equivalence classes of identical windows, ordered by count
- engine: orchestration used by the CLI and the web view

Main Functions:
    detect_duplicates(sources, window_size, patterns): one-shot detection
    Engine(config).build(specs) / .find_duplicates(): reusable pipeline

Example Usage:
    from cpd import detect_duplicates

    groups = detect_duplicates([("a.md", text_a), ("b.md", text_b)], window_size=3)
    for g in groups:
        print(g.count, g.locations)
"""

# src/cpd/__init__.py
from .config import MatchConfig
from .engine import Engine, detect_duplicates  # re-export
from .errors import ConfigError, CorpusReadError, CpdError
from .models import MatchGroup

__version__ = "1.0.0"
__all__ = [
    "Engine",
    "MatchConfig",
    "MatchGroup",
    "detect_duplicates",
    "CpdError",
    "ConfigError",
    "CorpusReadError",
]
