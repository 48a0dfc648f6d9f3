from __future__ import annotations

"""Per-process instruction scripts.

One command per line; the first letter of the first token decides:

    L        the process is a reader      E   the process is a writer
    C <ms>   compute for <ms>             R <n>  require resource <n>
    F <n>    free resource <n>            H      halt

Blank lines and lines starting with '#' are ignored. Only resource 0 exists.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rwgraph.types import Role


class ScriptParseError(ValueError):
    pass


class Command(str, Enum):
    COMPUTE = "C"
    REQUIRE = "R"
    FREE = "F"
    HALT = "H"


@dataclass(frozen=True)
class Instruction:
    command: Command
    value: int = -1


@dataclass(frozen=True)
class ProcessScript:
    name: str
    role: Role
    instructions: tuple[Instruction, ...]


def _int_arg(tokens: list[str], *, source: str, lineno: int) -> int:
    if len(tokens) < 2:
        raise ScriptParseError(f"{source}:{lineno}: '{tokens[0]}' requires a value")
    try:
        value = int(tokens[1])
    except ValueError:
        raise ScriptParseError(
            f"{source}:{lineno}: expected an integer, got {tokens[1]!r}"
        ) from None
    if value < 0:
        raise ScriptParseError(f"{source}:{lineno}: value must be >= 0 (got {value})")
    return value


def parse_script(text: str, *, name: str, source: str = "<string>") -> ProcessScript:
    role: Role | None = None
    instructions: list[Instruction] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        tokens = line.split()
        head = tokens[0][0].upper()

        if head == "E":
            role = Role.WRITER
        elif head == "L":
            role = Role.READER
        elif head == "C":
            instructions.append(
                Instruction(Command.COMPUTE, _int_arg(tokens, source=source, lineno=lineno))
            )
        elif head == "R":
            instructions.append(
                Instruction(Command.REQUIRE, _int_arg(tokens, source=source, lineno=lineno))
            )
        elif head == "F":
            instructions.append(
                Instruction(Command.FREE, _int_arg(tokens, source=source, lineno=lineno))
            )
        elif head == "H":
            instructions.append(Instruction(Command.HALT))
        else:
            raise ScriptParseError(f"{source}:{lineno}: unknown command {tokens[0]!r}")

    if role is None:
        raise ScriptParseError(f"{source}: no process type (expected an 'L' or 'E' line)")

    return ProcessScript(name=name, role=role, instructions=tuple(instructions))


def load_script(path: Path, *, name: str | None = None) -> ProcessScript:
    return parse_script(
        path.read_text(encoding="utf-8"),
        name=name or path.stem,
        source=str(path),
    )


def load_scripts(paths: list[Path], names: list[str] | None = None) -> list[ProcessScript]:
    if names and len(names) != len(paths):
        raise ScriptParseError(
            f"got {len(names)} names for {len(paths)} scripts"
        )
    return [
        load_script(p, name=names[i] if names else None) for i, p in enumerate(paths)
    ]
