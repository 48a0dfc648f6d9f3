from __future__ import annotations

"""Event log -> annotated timeline.

Runs the reconstruction stages in order: arrows from events, inferred waiting
arrows, mark alignment, and finally the per-mark permit/waiting state. Pure
and deterministic; nothing here reads the clock or draws randomness.
"""

from rwgraph.align import align_marks
from rwgraph.arrows import TimelineInvariantError, build_arrows, infer_waiting
from rwgraph.config import DEFAULT_TOLERANCE_MS
from rwgraph.log import get_logger
from rwgraph.model import EventLog, permits_for_roster
from rwgraph.state import annotate_mark
from rwgraph.types import ArrowArena, Event, Process, Timeline
from rwgraph.validate import roster_index

__all__ = ["TimelineInvariantError", "reconstruct", "reconstruct_log"]

_log = get_logger(__name__)


def _check_arrows(arena: ArrowArena, stage: str) -> None:
    for h in arena.live_handles():
        a = arena[h]
        if a.start > a.end:
            raise TimelineInvariantError(
                f"{stage}: {a.kind.value} arrow of '{a.owner.name}' "
                f"ends before it starts ({a.start} > {a.end})"
            )


def reconstruct(
    *,
    events: tuple[Event, ...] | list[Event],
    processes: tuple[Process, ...] | list[Process],
    permits: int | None = None,
    tolerance_ms: int = DEFAULT_TOLERANCE_MS,
) -> Timeline:
    roster = tuple(processes)
    index = roster_index(roster)
    p = permits if permits is not None else permits_for_roster(roster)

    arena = ArrowArena()
    columns, marks, max_time = build_arrows(events=events, processes=index, arena=arena)
    _check_arrows(arena, "build")

    infer_waiting(columns=columns, marks=marks, arena=arena)
    _check_arrows(arena, "infer")

    before = len(marks)
    marks = align_marks(
        marks=marks, columns=columns, arena=arena, tolerance_ms=tolerance_ms
    )
    _check_arrows(arena, "align")
    _log.debug("alignment kept %d of %d marks (tolerance %d ms)", len(marks), before, tolerance_ms)

    for m in marks:
        annotate_mark(m, [arena[h] for h in m.arrows], p)

    return Timeline(
        roster=roster,
        permits=p,
        arena=arena,
        columns=columns,
        marks=marks,
        max_time=max_time,
    )


def reconstruct_log(log: EventLog, *, tolerance_ms: int = DEFAULT_TOLERANCE_MS) -> Timeline:
    return reconstruct(
        events=log.events,
        processes=log.processes,
        permits=log.permits,
        tolerance_ms=tolerance_ms,
    )
