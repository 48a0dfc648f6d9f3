from __future__ import annotations

from rwgraph.align import align_marks, move_mark
from rwgraph.timeline import reconstruct
from rwgraph.types import Arrow, ArrowArena, ArrowKind, Event, Process, Role, TimelineMark

A0 = Process("A0", Role.READER)
A1 = Process("A1", Role.READER)
B0 = Process("B0", Role.WRITER)


def _c(name: str, offset: int, dur: int, held: int = 0) -> Event:
    return Event.compute(name, offset_ms=offset, duration_ms=dur, resources_held=held)


def test_close_marks_merge_at_floored_midpoint_dropping_short_waits() -> None:
    tl = reconstruct(
        events=[
            _c("B0", 0, 40),
            _c("A0", 0, 100),
            _c("B0", 60, 42, held=1),
            _c("A0", 150, 10, held=1),
        ],
        processes=[A0, B0],
        tolerance_ms=3,
    )

    assert [m.instant for m in tl.marks] == [40, 101, 160]

    a0 = tl.arrows_of("A0")
    # The wait [100, 150] started within tolerance of 101 and is gone.
    assert [(a.start, a.end, a.kind) for a in a0] == [
        (0, 101, ArrowKind.EXECUTING),
        (150, 160, ArrowKind.CRITICAL),
    ]
    crit = [a for a in tl.arrows_of("B0") if a.kind is ArrowKind.CRITICAL]
    assert [(a.start, a.end) for a in crit] == [(60, 101)]

    merged = tl.mark_at(101)
    assert merged is not None
    assert sorted(a.owner.name for a in tl.arrows_at(merged)) == ["A0", "B0"]
    assert all(a.kind is not ArrowKind.WAITING for a in tl.arrows_at(merged))


def test_merge_is_a_single_pass_without_re_pairing() -> None:
    tl = reconstruct(
        events=[_c("A0", 0, 10), _c("A1", 0, 12), _c("B0", 0, 14)],
        processes=[A0, A1, B0],
        tolerance_ms=3,
    )
    assert [m.instant for m in tl.marks] == [11, 14]
    assert [a.end for a in tl.arrows_of("A0")] == [11]
    assert [a.end for a in tl.arrows_of("A1")] == [11]
    assert [a.end for a in tl.arrows_of("B0")] == [14]


def test_marks_further_apart_than_tolerance_are_untouched() -> None:
    tl = reconstruct(
        events=[_c("A0", 0, 10), _c("A1", 0, 14)],
        processes=[A0, A1],
        tolerance_ms=3,
    )
    assert [m.instant for m in tl.marks] == [10, 14]


def test_merged_membership_has_no_duplicate_arrows() -> None:
    tl = reconstruct(
        events=[
            _c("A0", 0, 10),
            _c("A1", 0, 20),
            _c("B0", 0, 22),
            _c("A0", 50, 10, held=1),
        ],
        processes=[A0, A1, B0],
        tolerance_ms=3,
    )
    merged = tl.mark_at(21)
    assert merged is not None
    assert len(merged.arrows) == len(set(merged.arrows)) == 3

    waits = [a for a in tl.arrows_of("A0") if a.kind is ArrowKind.WAITING]
    assert [(a.start, a.end) for a in waits] == [(10, 50)]


def test_move_rule_snaps_far_end_of_waiting_and_pulls_short_arrows() -> None:
    arena = ArrowArena()
    wait = arena.add(Arrow(start=80, end=102, kind=ArrowKind.WAITING, owner=A0))
    exe = arena.add(Arrow(start=102, end=103, kind=ArrowKind.EXECUTING, owner=A1))
    columns = {"A0": [wait], "A1": [exe]}
    mark = TimelineMark(instant=103, arrows=[wait, exe])

    move_mark(mark, 101, tolerance_ms=3, arena=arena, columns=columns, marks=[mark])

    assert mark.instant == 101
    assert (arena[wait].start, arena[wait].end) == (80, 101)
    # Ending before its start is not allowed; the arrow collapses onto the mark.
    assert (arena[exe].start, arena[exe].end) == (101, 101)


def test_align_marks_keeps_order_and_distinct_instants() -> None:
    arena = ArrowArena()
    handles = [
        arena.add(Arrow(start=0, end=t, kind=ArrowKind.EXECUTING, owner=A0))
        for t in (5, 7, 20, 21, 40)
    ]
    marks = [TimelineMark(instant=arena[h].end, arrows=[h]) for h in handles]

    kept = align_marks(marks=marks, columns={"A0": list(handles)}, arena=arena, tolerance_ms=3)

    instants = [m.instant for m in kept]
    assert instants == [6, 20, 40]
    assert instants == sorted(set(instants))
    assert [len(m.arrows) for m in kept] == [2, 2, 1]
