"""Public API for downstream modules."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .config import IngestConfig, load_ingest_config, save_ingest_config
from .graph import ProgramGraph
from .ingest import Ingester
from .render import dump_graph

__all__ = [
    "IngestConfig",
    "ProgramGraph",
    "dump_graph",
    "ingest_lines",
    "ingest_path",
    "load_config",
    "save_config",
]


def load_config(path: str | Path | None = None) -> IngestConfig:
    """Read an ingest config from disk, or return the defaults."""
    if path is None:
        return IngestConfig()
    return load_ingest_config(path)


def save_config(config: IngestConfig, path: str | Path) -> None:
    """Persist an ingest config to disk."""
    save_ingest_config(config, path)


def ingest_lines(lines: Iterable[str], config: IngestConfig | None = None) -> ProgramGraph:
    """Parse ``lines`` and resolve them into a program graph."""
    config = config or IngestConfig()
    ingester = Ingester.from_lines(lines)
    return ingester.graph(max_depth=config.max_depth, strict_parents=config.strict_parents)


def ingest_path(
    path: str | Path | None,
    config: IngestConfig | None = None,
) -> ProgramGraph:
    """Entry point used by the CLI: read a file (or stdin when ``path`` is None)."""
    config = config or IngestConfig()
    ingester = Ingester.from_stdin() if path is None else Ingester.from_path(path)
    return ingester.graph(max_depth=config.max_depth, strict_parents=config.strict_parents)
