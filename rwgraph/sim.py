from __future__ import annotations

# Virtual-clock readers-writers simulation producing an event log.
#
# Readers take one permit of the shared resource, writers take the whole
# budget at once. Waiters are served FIFO. Optional jitter (seeded NumPy
# generator) stretches each compute step to mimic scheduling noise.

import heapq

import numpy as np

from rwgraph.config import DEFAULT_MAX_STEPS
from rwgraph.log import get_logger
from rwgraph.model import EventLog, permits_for_roster
from rwgraph.scripts import Command, ProcessScript
from rwgraph.types import Event, Process, Role

_log = get_logger(__name__)

RESOURCE_ID = 0


class SimulationError(RuntimeError):
    pass


def simulate(
    scripts: list[ProcessScript],
    *,
    permits: int | None = None,
    seed: int = 0,
    jitter_ms: int = 0,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> EventLog:
    roster = tuple(Process(name=s.name, role=s.role) for s in scripts)
    budget = permits if permits is not None else permits_for_roster(roster)
    if budget < 1:
        raise SimulationError(f"permits must be >= 1 (got {budget})")
    if jitter_ms < 0:
        raise SimulationError(f"jitter_ms must be >= 0 (got {jitter_ms})")

    rng = np.random.default_rng(seed)

    def _jitter() -> int:
        if jitter_ms == 0:
            return 0
        return int(rng.integers(0, jitter_ms + 1))

    def _amount(idx: int) -> int:
        return budget if roster[idx].role is Role.WRITER else 1

    pc = [0] * len(scripts)
    held = [0] * len(scripts)
    available = budget
    waiters: list[int] = []  # FIFO of blocked process indexes
    events: list[Event] = []

    # (time_ms, seq, process index); seq keeps same-time wakeups in order.
    ready: list[tuple[int, int, int]] = []
    seq = 0

    def _wake(idx: int, at_ms: int) -> None:
        nonlocal seq
        heapq.heappush(ready, (at_ms, seq, idx))
        seq += 1

    for idx in range(len(scripts)):
        _wake(idx, 0)

    steps = 0
    while ready:
        t, _, idx = heapq.heappop(ready)
        script = scripts[idx]
        name = script.name

        while pc[idx] < len(script.instructions):
            steps += 1
            if steps > max_steps:
                raise SimulationError(f"max_steps exceeded ({max_steps})")

            instr = script.instructions[pc[idx]]
            if instr.command is Command.COMPUTE:
                events.append(
                    Event.compute(
                        name,
                        offset_ms=t,
                        duration_ms=instr.value,
                        resources_held=held[idx],
                    )
                )
                pc[idx] += 1
                _wake(idx, t + instr.value + _jitter())
                break

            if instr.command is Command.HALT:
                events.append(Event.terminate(name, offset_ms=t))
                # Anything scripted after the halt never runs.
                pc[idx] = len(script.instructions)
                break

            if instr.value != RESOURCE_ID:
                raise SimulationError(f"{name}: unknown resource {instr.value}")

            if instr.command is Command.REQUIRE:
                if not waiters and available >= _amount(idx):
                    available -= _amount(idx)
                    held[idx] += 1
                    pc[idx] += 1
                    continue
                _log.debug("%s waits for the resource at %d ms", name, t)
                waiters.append(idx)
                break

            # FREE
            if held[idx] <= 0:
                raise SimulationError(f"{name}: frees resource {instr.value} it does not hold")
            available += _amount(idx)
            held[idx] -= 1
            pc[idx] += 1
            while waiters and available >= _amount(waiters[0]):
                w = waiters.pop(0)
                available -= _amount(w)
                held[w] += 1
                pc[w] += 1
                _log.debug("%s acquires the resource at %d ms", scripts[w].name, t)
                _wake(w, t)

    if waiters:
        blocked = ", ".join(scripts[w].name for w in waiters)
        raise SimulationError(f"deadlock: still waiting for the resource: {blocked}")

    _log.info("simulated %d processes, %d events", len(scripts), len(events))
    return EventLog(processes=roster, events=tuple(events), permits=budget)
