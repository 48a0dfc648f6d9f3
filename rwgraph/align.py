from __future__ import annotations

# Merges marks that are too close together to tell apart on the diagram.

from rwgraph.log import get_logger
from rwgraph.types import ArrowArena, ArrowKind, TimelineMark

_log = get_logger(__name__)


def _drop_arrow(
    handle: int,
    *,
    arena: ArrowArena,
    columns: dict[str, list[int]],
    marks: list[TimelineMark],
) -> None:
    arrow = arena[handle]
    arena.drop(handle)
    column = columns.get(arrow.owner.name, [])
    if handle in column:
        column.remove(handle)
    for m in marks:
        if handle in m.arrows:
            m.arrows.remove(handle)
    _log.debug(
        "dropped waiting arrow %s [%d, %d]", arrow.owner.name, arrow.start, arrow.end
    )


def move_mark(
    mark: TimelineMark,
    instant: int,
    *,
    tolerance_ms: int,
    arena: ArrowArena,
    columns: dict[str, list[int]],
    marks: list[TimelineMark],
) -> None:
    """Move `mark` to `instant`, dragging the arrows that end on it.

    A waiting arrow that would start within tolerance of the new instant is
    too short to show and is dropped everywhere; one that ends within
    tolerance is snapped. Executing and critical arrows always end here.
    """

    mark.instant = instant
    for handle in list(mark.arrows):
        if arena.is_dropped(handle):
            continue
        arrow = arena[handle]
        if arrow.kind is ArrowKind.WAITING:
            if abs(arrow.start - instant) <= tolerance_ms:
                _drop_arrow(handle, arena=arena, columns=columns, marks=marks)
            elif abs(arrow.end - instant) <= tolerance_ms:
                arrow.end = instant
        else:
            arrow.end = instant
            # An arrow shorter than the snap collapses to [instant, instant].
            if arrow.start > instant:
                arrow.start = instant


def align_marks(
    *,
    marks: list[TimelineMark],
    columns: dict[str, list[int]],
    arena: ArrowArena,
    tolerance_ms: int,
) -> list[TimelineMark]:
    """One left-to-right pass over adjacent marks; returns the surviving marks.

    Pairs closer than `tolerance_ms` meet at the floored midpoint and the
    later mark is folded into the earlier one. A merged mark is not paired
    again in the same pass.
    """

    merged: set[int] = set()
    i = 0
    while i < len(marks) - 1:
        a = marks[i]
        b = marks[i + 1]
        if b.instant != a.instant and b.instant - a.instant <= tolerance_ms:
            d = (a.instant + b.instant) // 2
            _log.debug("merging marks %d and %d at %d", a.instant, b.instant, d)

            move_mark(a, d, tolerance_ms=tolerance_ms, arena=arena, columns=columns, marks=marks)
            move_mark(b, d, tolerance_ms=tolerance_ms, arena=arena, columns=columns, marks=marks)

            for handle in b.arrows:
                a.add(handle)
            b.arrows.clear()
            merged.add(i + 1)
            i += 2
        else:
            i += 1

    return [m for k, m in enumerate(marks) if k not in merged]
