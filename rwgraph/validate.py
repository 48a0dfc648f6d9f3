from __future__ import annotations

from rwgraph.model import EventLog
from rwgraph.types import EventKind, Process


class EventLogValidationError(ValueError):
    pass


class UnknownProcessError(EventLogValidationError):
    pass


def roster_index(roster: tuple[Process, ...] | list[Process]) -> dict[str, Process]:
    """Name -> process lookup; duplicate or empty names are rejected."""

    index: dict[str, Process] = {}
    for p in roster:
        if not p.name:
            raise EventLogValidationError("process names must be non-empty")
        if p.name in index:
            raise EventLogValidationError(f"duplicate process name '{p.name}'")
        index[p.name] = p
    return index


def validate_log(log: EventLog) -> None:
    if log.permits < 1:
        raise EventLogValidationError(f"permits must be >= 1 (got {log.permits})")

    index = roster_index(log.processes)
    terminated: set[str] = set()

    for i, e in enumerate(log.events):
        if e.process_name not in index:
            raise UnknownProcessError(
                f"event #{i} references unknown process '{e.process_name}'"
            )
        if e.process_name in terminated:
            raise EventLogValidationError(
                f"event #{i} ({e.process_name}) follows the process's terminate event"
            )
        if e.kind is EventKind.TERMINATE:
            terminated.add(e.process_name)
        if e.offset_ms < 0:
            raise EventLogValidationError(
                f"event #{i} ({e.process_name}) offset_ms must be >= 0 (got {e.offset_ms})"
            )
        if e.kind is EventKind.COMPUTE:
            if e.duration_ms < 0:
                raise EventLogValidationError(
                    f"event #{i} ({e.process_name}) duration_ms must be >= 0 "
                    f"(got {e.duration_ms})"
                )
            if e.resources_held < 0:
                raise EventLogValidationError(
                    f"event #{i} ({e.process_name}) resources_held must be >= 0 "
                    f"for compute events (got {e.resources_held})"
                )
