"""Reading feature records from files, streams and stdin."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from .errors import InvalidInput, InvalidTimestamp, IoFailure
from .graph import DEFAULT_MAX_DEPTH, ProgramGraph, resolve_graph
from .records import Record, parse_record

logger = logging.getLogger(__name__)


@dataclass
class Ingester:
    """A parsed batch of feature records."""

    records: list[Record] = field(default_factory=list)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> Ingester:
        """Parse every line; the first malformed line aborts the batch."""
        records = []
        lines = iter(lines)
        lineno = 0
        while True:
            try:
                raw = next(lines)
            except StopIteration:
                break
            except (OSError, UnicodeDecodeError) as exc:
                raise IoFailure(f"Failed to read line {lineno + 1}: {exc}") from exc
            lineno += 1
            line = raw.rstrip("\r\n")
            try:
                records.append(parse_record(line))
            except InvalidInput as exc:
                raise InvalidInput(f"line {lineno}: {exc}", line=line) from exc
            except InvalidTimestamp as exc:
                raise InvalidTimestamp(exc.value, exc.reason, lineno=lineno) from exc
        logger.info("ingested %d feature records", len(records))
        return cls(records=records)

    @classmethod
    def from_stream(cls, stream: TextIO) -> Ingester:
        return cls.from_lines(stream)

    @classmethod
    def from_path(cls, path: str | Path) -> Ingester:
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as handle:
                return cls.from_stream(handle)
        except IoFailure:
            raise
        except (OSError, UnicodeDecodeError) as exc:
            raise IoFailure(f"Failed to read {path}: {exc}") from exc

    @classmethod
    def from_stdin(cls) -> Ingester:
        return cls.from_stream(sys.stdin)

    def graph(
        self,
        *,
        max_depth: int | None = DEFAULT_MAX_DEPTH,
        strict_parents: bool = False,
    ) -> ProgramGraph:
        return resolve_graph(self.records, max_depth=max_depth, strict_parents=strict_parents)
