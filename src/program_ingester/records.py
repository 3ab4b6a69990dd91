"""Parsing of single feature log lines into typed records.

A line carries six space-separated fields::

    2023-01-01T00:00:00.000Z 2023-06-30T00:00:00.000Z program_1 Complete Team_B Suite->Email

start, end, program id, progress status, assigned team and the relation
token ``<parent>-><id>`` where the parent is the literal ``null`` for roots.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

from pydantic import AwareDatetime, BaseModel

from .errors import InvalidInput, InvalidTimestamp

FIELD_COUNT = 6
RELATION_SEPARATOR = "->"
NULL_PARENT = "null"
RFC3339_PATTERN = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]+)?(Z|[+-][0-9]{2}:[0-9]{2})"
)


class Record(BaseModel):
    """One ingested feature, exactly as it appeared in the input."""

    id: str
    # None marks a root feature
    parent_id: str | None = None
    program_id: str
    status: str
    team: str
    start: AwareDatetime
    # may be later than child features when those run asynchronously
    end: AwareDatetime

    model_config = {"frozen": True}

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @classmethod
    def from_line(cls, line: str) -> Record:
        return parse_record(line)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp, e.g. ``2023-01-01T00:00:00.000Z``."""
    if RFC3339_PATTERN.fullmatch(value) is None:
        raise InvalidTimestamp(value, "expected YYYY-MM-DDTHH:MM:SS[.fraction](Z|+HH:MM)")
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise InvalidTimestamp(value, str(exc)) from exc


def parse_record(line: str) -> Record:
    """Turn one feature log line into a :class:`Record`."""
    parts = line.strip().split(" ")
    if len(parts) != FIELD_COUNT:
        raise InvalidInput(
            f"The feature {line!r} needs {FIELD_COUNT} space-separated parts: "
            "start, end, program, progress_status, assigned_team, feature-relation",
            line=line,
        )
    start_raw, end_raw, program_id, status, team, relation = parts
    feature_ids = relation.split(RELATION_SEPARATOR)
    if len(feature_ids) != 2:
        raise InvalidInput(
            f"The feature-relation {relation!r} must look like <parent>{RELATION_SEPARATOR}<id>",
            line=line,
        )
    parent_raw, ident = feature_ids
    return Record(
        id=ident,
        parent_id=None if parent_raw == NULL_PARENT else parent_raw,
        program_id=program_id,
        status=status,
        team=team,
        start=parse_timestamp(start_raw),
        end=parse_timestamp(end_raw),
    )


def format_timestamp(value: datetime) -> str:
    text = value.isoformat()
    if value.utcoffset() == timedelta(0):
        text = text.removesuffix("+00:00") + "Z"
    return text


def format_record(record: Record) -> str:
    """Render a record back into the line form accepted by :func:`parse_record`."""
    parent = record.parent_id if record.parent_id is not None else NULL_PARENT
    return " ".join(
        [
            format_timestamp(record.start),
            format_timestamp(record.end),
            record.program_id,
            record.status,
            record.team,
            f"{parent}{RELATION_SEPARATOR}{record.id}",
        ]
    )
