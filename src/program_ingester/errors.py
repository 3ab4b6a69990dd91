"""Error types raised while ingesting feature records."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


class IngestError(Exception):
    """Base class for every failure surfaced by the ingester."""


class InvalidInput(IngestError, ValueError):
    """A line does not have the expected six-field shape."""

    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line


class InvalidTimestamp(IngestError, ValueError):
    """A start/end field is not an RFC 3339 timestamp."""

    def __init__(self, value: str, reason: str, lineno: int | None = None) -> None:
        message = f"The timestamp {value!r} could not be parsed: {reason}"
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)
        self.value = value
        self.reason = reason
        self.lineno = lineno


class IoFailure(IngestError, OSError):
    """The line source could not be read."""


class CyclicReference(IngestError):
    """A feature is (transitively) its own ancestor."""

    def __init__(self, path: Sequence[str]) -> None:
        self.path = tuple(path)
        super().__init__("Cyclic feature reference: " + " -> ".join(self.path))


class DepthLimitExceeded(IngestError):
    """A feature subtree nests deeper than the configured limit."""

    def __init__(self, feature_id: str, max_depth: int) -> None:
        super().__init__(f"Feature {feature_id!r} exceeds the maximum depth of {max_depth}")
        self.feature_id = feature_id
        self.max_depth = max_depth


class DanglingParent(IngestError):
    """Features reference parents that were never ingested as records."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(sorted(missing))
        super().__init__("Parent features never defined: " + ", ".join(self.missing))


class ConfigError(IngestError, ValueError):
    """An ingest configuration file is invalid."""


__all__ = [
    "ConfigError",
    "CyclicReference",
    "DanglingParent",
    "DepthLimitExceeded",
    "IngestError",
    "InvalidInput",
    "InvalidTimestamp",
    "IoFailure",
]
