from __future__ import annotations

# Events -> arrows, then the implicit waiting arrows between them.

import bisect

from rwgraph.log import get_logger
from rwgraph.types import (
    Arrow,
    ArrowArena,
    ArrowKind,
    Event,
    EventKind,
    Process,
    TimelineMark,
)
from rwgraph.validate import UnknownProcessError

_log = get_logger(__name__)


class TimelineInvariantError(AssertionError):
    pass


def _mark_at(marks: list[TimelineMark], instant: int) -> TimelineMark:
    instants = [m.instant for m in marks]
    i = bisect.bisect_left(instants, instant)
    if i < len(marks) and marks[i].instant == instant:
        return marks[i]
    mark = TimelineMark(instant=instant)
    marks.insert(i, mark)
    return mark


def build_arrows(
    *,
    events: tuple[Event, ...] | list[Event],
    processes: dict[str, Process],
    arena: ArrowArena,
) -> tuple[dict[str, list[int]], list[TimelineMark], int | None]:
    """Turn compute events into EXECUTING/CRITICAL arrows.

    Returns the per-process handle lists (roster order), the marks sorted by
    instant and the latest arrow end (None when no arrow was created).
    """

    columns: dict[str, list[int]] = {name: [] for name in processes}
    marks: list[TimelineMark] = []
    terminated: set[str] = set()
    max_time: int | None = None

    for e in events:
        owner = processes.get(e.process_name)
        if owner is None:
            raise UnknownProcessError(f"unknown process name '{e.process_name}'")

        if e.kind is EventKind.TERMINATE:
            terminated.add(owner.name)
            continue

        if owner.name in terminated:
            raise TimelineInvariantError(
                f"process '{owner.name}' computes at {e.offset_ms} ms after terminating"
            )

        start = e.offset_ms
        end = e.end_ms
        if end <= start:
            continue

        kind = ArrowKind.CRITICAL if e.resources_held > 0 else ArrowKind.EXECUTING
        handle = arena.add(Arrow(start=start, end=end, kind=kind, owner=owner))
        columns[owner.name].append(handle)
        _mark_at(marks, end).add(handle)

        if max_time is None or end > max_time:
            max_time = end

    _log.debug("built %d arrows and %d marks", len(arena), len(marks))
    return columns, marks, max_time


def infer_waiting(
    *,
    columns: dict[str, list[int]],
    marks: list[TimelineMark],
    arena: ArrowArena,
) -> int:
    """Insert a WAITING arrow into every gap between consecutive arrows.

    A waiting arrow joins every mark strictly inside its interval. Returns the
    number of arrows synthesized.
    """

    created = 0
    for name, handles in columns.items():
        filled: list[int] = []
        for i, h in enumerate(handles):
            if i > 0:
                a = arena[handles[i - 1]]
                b = arena[h]
                if b.start < a.end:
                    raise TimelineInvariantError(
                        f"process '{name}' has overlapping intervals "
                        f"[{a.start}, {a.end}] and [{b.start}, {b.end}]"
                    )
                if a.end < b.start:
                    wait = arena.add(
                        Arrow(start=a.end, end=b.start, kind=ArrowKind.WAITING, owner=a.owner)
                    )
                    filled.append(wait)
                    created += 1
                    for m in marks:
                        if a.end < m.instant < b.start:
                            m.add(wait)
            filled.append(h)
        columns[name] = filled

    _log.debug("inferred %d waiting arrows", created)
    return created
