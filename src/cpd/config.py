from __future__ import annotations
import os
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigError

# number of consecutive lines per match window
WINDOW_SIZE: int = 2

# reading
ENCODING: str = "utf-8-sig"      # tolerates a leading BOM
FALLBACK_ENCODING: str = "latin-1"

# folders to skip during recursive discovery
EXCLUDE_DIRS = {".git", ".hg", ".svn", ".idea", ".vscode", "node_modules", "__pycache__"}

# workers
_cpu = os.cpu_count() or 4
READ_WORKERS: int = _cpu * 2     # I/O-bound
MATCH_WORKERS: int = 1           # 1 = sequential matching

# Progress logging (set CPD_VERBOSE=1 to enable)
VERBOSE: bool = os.environ.get("CPD_VERBOSE") == "1"


@dataclass(frozen=True)
class MatchConfig:
    """
    Immutable settings handed to the window matcher.

    window_size : int
        N, the number of consecutive lines compared per window (>= 1).
    offset_patterns : Mapping[int, re.Pattern]
        Optional 1-based offset -> compiled regex. When present for offset i,
        both lines at that offset must satisfy the regex on their own, on top
        of being textually equal.
    """
    window_size: int = WINDOW_SIZE
    offset_patterns: Mapping[int, re.Pattern] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.window_size, bool) or not isinstance(self.window_size, int):
            raise ConfigError(f"window size must be an integer, got {self.window_size!r}")
        if self.window_size < 1:
            raise ConfigError(f"window size must be >= 1, got {self.window_size}")
        for offset in self.offset_patterns:
            if not 1 <= offset <= self.window_size:
                raise ConfigError(
                    f"pattern offset {offset} is outside the window [1, {self.window_size}]"
                )
        # read-only view
        object.__setattr__(self, "offset_patterns", MappingProxyType(dict(self.offset_patterns)))

    @classmethod
    def create(cls, window_size: int = WINDOW_SIZE,
               patterns: Mapping[int, str] | None = None) -> "MatchConfig":
        """Build a config from raw regex strings, compiling each one."""
        compiled: dict[int, re.Pattern] = {}
        for offset, text in (patterns or {}).items():
            try:
                offset = int(offset)
            except (TypeError, ValueError):
                raise ConfigError(f"pattern offset must be an integer, got {offset!r}") from None
            try:
                compiled[offset] = re.compile(text)
            except re.error as e:
                raise ConfigError(f"bad pattern for offset {offset}: {text!r} ({e})") from e
        return cls(window_size=window_size, offset_patterns=compiled)

    def pattern_for(self, offset: int) -> re.Pattern | None:
        return self.offset_patterns.get(offset)
