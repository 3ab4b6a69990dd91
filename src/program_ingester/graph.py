"""Resolution of ingested records into per-program feature trees."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from pydantic import AwareDatetime, BaseModel, Field

from .errors import CyclicReference, DanglingParent, DepthLimitExceeded
from .records import Record

logger = logging.getLogger(__name__)

FeatureID = str

# nested levels, root included
DEFAULT_MAX_DEPTH = 256


@dataclass
class Node:
    """Build-time entry: the record for an id (once seen) and its child ids."""

    data: Record | None = None
    children: list[FeatureID] = field(default_factory=list)


FeatureMap = dict[FeatureID, Node]


class Feature(BaseModel):
    """A resolved feature with its nested subfeatures."""

    id: str = Field(alias="feature")
    status: str = Field(alias="progress_status")
    team: str = Field(alias="assigned_team")
    start: AwareDatetime
    end: AwareDatetime
    children: tuple[Feature, ...] = Field(default=(), alias="subfeatures")

    model_config = {"frozen": True, "populate_by_name": True}

    def walk(self) -> Iterable[Feature]:
        """Yield this feature and all descendants depth-first."""
        stack = [self]
        while stack:
            feature = stack.pop()
            yield feature
            stack.extend(reversed(feature.children))


class Program(BaseModel):
    id: str
    root: Feature

    model_config = {"frozen": True}


class ProgramGraph(BaseModel):
    """All programs found in one batch of records."""

    programs: tuple[Program, ...] = ()

    model_config = {"frozen": True}

    def get(self, program_id: str) -> Program | None:
        return next((p for p in self.programs if p.id == program_id), None)

    def feature_count(self) -> int:
        return sum(1 for program in self.programs for _ in program.root.walk())


def _order_key(feature: Feature) -> tuple:
    return (feature.start, feature.id)


def build_feature_map(records: Iterable[Record]) -> FeatureMap:
    """Index records by id and collect child ids under their parent's entry.

    Each record upserts its own entry (last record for an id wins) and then
    upserts its parent's entry, appending itself as a child. Parents may
    appear after their children; children lists only ever grow.
    """
    mappings: FeatureMap = {}
    for record in records:
        node = mappings.get(record.id)
        if node is None:
            mappings[record.id] = Node(data=record)
        else:
            if node.data is not None:
                logger.debug("feature %s redefined, keeping the later record", record.id)
            node.data = record
        if record.parent_id is not None:
            parent = mappings.setdefault(record.parent_id, Node())
            parent.children.append(record.id)
    return mappings


def find_roots(mappings: FeatureMap) -> list[Record]:
    """Return the records of every entry that is defined and parentless."""
    return [
        node.data for node in mappings.values() if node.data is not None and node.data.is_root
    ]


def dangling_parents(mappings: FeatureMap) -> list[FeatureID]:
    """Ids referenced as parents but never ingested as records."""
    return [ident for ident, node in mappings.items() if node.data is None]


def _to_feature(record: Record, children: list[Feature]) -> Feature:
    return Feature(
        id=record.id,
        status=record.status,
        team=record.team,
        start=record.start,
        end=record.end,
        children=tuple(sorted(children, key=_order_key)),
    )


def _resolve_feature(root: Record, mappings: FeatureMap, max_depth: int | None) -> Feature:
    """Resolve the subtree under ``root`` depth-first with an explicit stack.

    Each stack frame holds a record, its not yet visited child ids and the
    subfeatures built so far; a frame becomes a Feature once its children
    are exhausted.
    """
    path = [root.id]
    on_path = {root.id}
    stack: list[tuple[Record, Iterator[FeatureID], list[Feature]]] = [
        (root, iter(dict.fromkeys(mappings[root.id].children)), [])
    ]
    while True:
        record, pending, built = stack[-1]
        child_id = next(pending, None)
        if child_id is None:
            stack.pop()
            path.pop()
            on_path.discard(record.id)
            feature = _to_feature(record, built)
            if not stack:
                return feature
            stack[-1][2].append(feature)
            continue
        child = mappings[child_id].data
        if child is None:
            logger.debug("no record found for feature %s", child_id)
            continue
        if child_id in on_path:
            raise CyclicReference([*path, child_id])
        if max_depth is not None and len(path) >= max_depth:
            raise DepthLimitExceeded(child_id, max_depth)
        path.append(child_id)
        on_path.add(child_id)
        stack.append((child, iter(dict.fromkeys(mappings[child_id].children)), []))


def resolve_graph(
    records: Iterable[Record],
    *,
    max_depth: int | None = DEFAULT_MAX_DEPTH,
    strict_parents: bool = False,
) -> ProgramGraph:
    """Build the program graph for a complete batch of records.

    Every defined parentless record becomes a program. Parents that are
    referenced but never defined are dropped along with their subtrees,
    unless ``strict_parents`` is set, in which case :class:`DanglingParent`
    is raised. ``max_depth`` bounds the number of nested levels, root
    included; ``None`` lifts the bound.
    """
    mappings = build_feature_map(records)
    missing = dangling_parents(mappings)
    if missing:
        if strict_parents:
            raise DanglingParent(missing)
        logger.debug("dropping undefined parent features: %s", ", ".join(sorted(missing)))

    programs = []
    for root in find_roots(mappings):
        feature = _resolve_feature(root, mappings, max_depth)
        programs.append(Program(id=root.program_id, root=feature))
    programs.sort(key=lambda program: _order_key(program.root))
    logger.info(
        "resolved %d features into %d programs", len(mappings) - len(missing), len(programs)
    )
    return ProgramGraph(programs=tuple(programs))
