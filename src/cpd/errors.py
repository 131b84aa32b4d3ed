from __future__ import annotations


class CpdError(Exception):
    """Base class for everything the detector raises on purpose."""


class ConfigError(CpdError, ValueError):
    """Bad window size, pattern offset or regex. Raised before any file is read."""


class CorpusReadError(CpdError, OSError):
    """A selected file (or search directory) could not be read. Fatal for the run."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason
