from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rwgraph.types import Event, EventKind, Process, Role


def permits_for_roster(roster: tuple[Process, ...] | list[Process]) -> int:
    """One permit per reader; a roster without readers still gets one."""

    readers = sum(1 for p in roster if p.role is Role.READER)
    return max(1, readers)


def _parse_role(raw: Any) -> Role:
    text = str(raw).strip().lower()
    # Script letters are accepted too: L(ector) / E(scritor), R(eader) / W(riter).
    aliases = {"r": Role.READER, "l": Role.READER, "w": Role.WRITER, "e": Role.WRITER}
    if text in aliases:
        return aliases[text]
    return Role(text)


@dataclass(frozen=True)
class EventLog:
    processes: tuple[Process, ...]
    events: tuple[Event, ...]
    permits: int

    @staticmethod
    def from_json(obj: dict[str, Any]) -> "EventLog":
        processes: list[Process] = []
        for p in obj.get("processes", []):
            if "role" not in p:
                raise ValueError(f"process {p.get('name')!r} is missing 'role'")
            processes.append(Process(name=str(p["name"]), role=_parse_role(p["role"])))

        events: list[Event] = []
        for e in obj.get("events", []):
            kind = EventKind(str(e["kind"]).lower())
            if kind is EventKind.TERMINATE:
                events.append(
                    Event.terminate(str(e["process"]), offset_ms=int(e["offset_ms"]))
                )
            else:
                events.append(
                    Event.compute(
                        str(e["process"]),
                        offset_ms=int(e["offset_ms"]),
                        duration_ms=int(e["duration_ms"]),
                        resources_held=int(e.get("resources_held", 0)),
                    )
                )

        permits_raw = obj.get("permits")
        permits = (
            int(permits_raw)
            if permits_raw is not None
            else permits_for_roster(processes)
        )
        return EventLog(processes=tuple(processes), events=tuple(events), permits=permits)

    def to_json(self) -> dict[str, Any]:
        events: list[dict[str, Any]] = []
        for e in self.events:
            item: dict[str, Any] = {
                "process": e.process_name,
                "kind": e.kind.value,
                "offset_ms": e.offset_ms,
            }
            if e.kind is EventKind.COMPUTE:
                item["duration_ms"] = e.duration_ms
                item["resources_held"] = e.resources_held
            events.append(item)

        return {
            "permits": self.permits,
            "processes": [{"name": p.name, "role": p.role.value} for p in self.processes],
            "events": events,
        }
