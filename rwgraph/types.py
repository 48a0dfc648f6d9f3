from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    READER = "reader"
    WRITER = "writer"


class EventKind(str, Enum):
    COMPUTE = "compute"
    TERMINATE = "terminate"


class ArrowKind(str, Enum):
    EXECUTING = "executing"
    WAITING = "waiting"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Process:
    name: str
    role: Role

    @property
    def is_writer(self) -> bool:
        return self.role is Role.WRITER


@dataclass(frozen=True)
class Event:
    process_name: str
    kind: EventKind
    offset_ms: int
    duration_ms: int = 0
    resources_held: int = -1  # -1 for TERMINATE

    @staticmethod
    def compute(
        process_name: str, *, offset_ms: int, duration_ms: int, resources_held: int
    ) -> "Event":
        return Event(
            process_name=process_name,
            kind=EventKind.COMPUTE,
            offset_ms=int(offset_ms),
            duration_ms=int(duration_ms),
            resources_held=int(resources_held),
        )

    @staticmethod
    def terminate(process_name: str, *, offset_ms: int) -> "Event":
        return Event(
            process_name=process_name,
            kind=EventKind.TERMINATE,
            offset_ms=int(offset_ms),
            duration_ms=0,
            resources_held=-1,
        )

    @property
    def end_ms(self) -> int:
        return self.offset_ms + self.duration_ms


@dataclass
class Arrow:
    start: int
    end: int
    kind: ArrowKind
    owner: Process


@dataclass(frozen=True)
class MarkState:
    critical_writer: bool
    critical_reader_count: int
    waiting_reader_count: int
    waiting_writer_count: int


@dataclass
class TimelineMark:
    instant: int
    arrows: list[int] = field(default_factory=list)  # arena handles
    permit_value: int = 0
    waiting_processes: list[str] = field(default_factory=list)
    state: MarkState | None = None

    def add(self, handle: int) -> None:
        if handle not in self.arrows:
            self.arrows.append(handle)

    def waiting_label(self) -> str:
        return ", ".join(self.waiting_processes)


class ArrowArena:
    """Owns every arrow; everything else refers to arrows by integer handle.

    An arrow is shared between its owner's column and any number of marks, so
    mutating it through the arena is visible from all of them.
    """

    def __init__(self) -> None:
        self._arrows: list[Arrow] = []
        self._dropped: set[int] = set()

    def add(self, arrow: Arrow) -> int:
        self._arrows.append(arrow)
        return len(self._arrows) - 1

    def __getitem__(self, handle: int) -> Arrow:
        return self._arrows[handle]

    def __len__(self) -> int:
        return len(self._arrows)

    def drop(self, handle: int) -> None:
        self._dropped.add(handle)

    def is_dropped(self, handle: int) -> bool:
        return handle in self._dropped

    def live_handles(self) -> list[int]:
        return [h for h in range(len(self._arrows)) if h not in self._dropped]


@dataclass
class Timeline:
    roster: tuple[Process, ...]
    permits: int
    arena: ArrowArena
    columns: dict[str, list[int]]  # process name -> handles, roster order
    marks: list[TimelineMark]
    max_time: int | None

    def arrows_of(self, process_name: str) -> list[Arrow]:
        return [self.arena[h] for h in self.columns[process_name]]

    def arrows_at(self, mark: TimelineMark) -> list[Arrow]:
        return [self.arena[h] for h in mark.arrows]

    def mark_at(self, instant: int) -> TimelineMark | None:
        for m in self.marks:
            if m.instant == instant:
                return m
        return None
