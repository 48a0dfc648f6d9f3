from __future__ import annotations

# Reconstructs the permit value and waiting list shown next to each mark.

from rwgraph.types import Arrow, ArrowKind, MarkState, Role, TimelineMark


def classify(arrows: list[Arrow]) -> tuple[MarkState, list[str]]:
    critical_writer = False
    critical_readers = 0
    waiting_readers = 0
    waiting_writers = 0
    waiting: list[str] = []

    for a in arrows:
        if a.kind is ArrowKind.CRITICAL:
            if a.owner.role is Role.WRITER:
                critical_writer = True
            else:
                critical_readers += 1
        elif a.kind is ArrowKind.WAITING:
            if a.owner.role is Role.WRITER:
                waiting_writers += 1
            else:
                waiting_readers += 1
            waiting.append(a.owner.name)

    state = MarkState(
        critical_writer=critical_writer,
        critical_reader_count=critical_readers,
        waiting_reader_count=waiting_readers,
        waiting_writer_count=waiting_writers,
    )
    return state, waiting


def permit_value(state: MarkState, permits: int) -> int:
    """Displayed permit value for a mark.

    A critical writer holds every permit, and each queued reader pushes the
    value further below zero. Critical readers take one permit each; a writer
    queued behind them counts as a whole budget of deficit.
    """

    if state.critical_writer:
        return 0 - state.waiting_reader_count
    if state.critical_reader_count > 0:
        return (
            permits
            - state.critical_reader_count
            - state.waiting_writer_count * permits
        )
    return permits


def annotate_mark(mark: TimelineMark, arrows: list[Arrow], permits: int) -> None:
    state, waiting = classify(arrows)
    mark.state = state
    mark.permit_value = permit_value(state, permits)
    # Nobody is shown waiting on a free resource; clustering can leave a
    # momentary waiting arrow on such a mark.
    mark.waiting_processes = [] if mark.permit_value == permits else waiting
