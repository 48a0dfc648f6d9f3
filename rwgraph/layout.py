from __future__ import annotations

"""Timeline -> pixel geometry.

The diagram is laid out left to right as: waiting-list column, permit-value
column, one column per process (roster order) and the legend. Time runs
downwards. Everything here is integer arithmetic so the same timeline always
yields the same geometry; painting it is the renderer's job.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rwgraph.config import LayoutConfig
from rwgraph.types import ArrowKind, Role, Timeline


class NothingToRenderError(ValueError):
    pass


class DrawKind(str, Enum):
    ARROW = "arrow"
    DOTTED = "dotted"
    THICK_ARROW = "thick_arrow"


_DRAW_KIND = {
    ArrowKind.EXECUTING: DrawKind.ARROW,
    ArrowKind.WAITING: DrawKind.DOTTED,
    ArrowKind.CRITICAL: DrawKind.THICK_ARROW,
}

HEADER_WAITING = "Waiting processes"
HEADER_PERMITS = "Permit value"
LEGEND_TITLE = "Legend"
LEGEND_LABELS = {
    DrawKind.ARROW: "Executing",
    DrawKind.DOTTED: "Waiting",
    DrawKind.THICK_ARROW: "Executing with resource",
}


@dataclass(frozen=True)
class TextItem:
    text: str
    x: int
    y: int


@dataclass(frozen=True)
class Glyph:
    kind: DrawKind
    x: int
    y1: int
    y2: int


@dataclass(frozen=True)
class GuideLine:
    instant: int
    y: int
    x1: int
    x2: int
    permit: TextItem
    waiting: TextItem


@dataclass(frozen=True)
class Column:
    process_name: str
    header: TextItem
    glyphs: tuple[Glyph, ...]


@dataclass(frozen=True)
class Legend:
    frame: tuple[int, int, int, int]  # x1, y1, x2, y2
    title: TextItem
    samples: tuple[tuple[Glyph, TextItem], ...]


@dataclass(frozen=True)
class Diagram:
    width: int
    height: int
    config: LayoutConfig
    headers: tuple[TextItem, ...]
    guide_lines: tuple[GuideLine, ...]
    columns: tuple[Column, ...]
    legend: Legend
    meta: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        def _text(t: TextItem) -> dict[str, Any]:
            return {"text": t.text, "x": t.x, "y": t.y}

        def _glyph(g: Glyph) -> dict[str, Any]:
            return {"kind": g.kind.value, "x": g.x, "y1": g.y1, "y2": g.y2}

        return {
            "width": self.width,
            "height": self.height,
            "headers": [_text(t) for t in self.headers],
            "guide_lines": [
                {
                    "instant": g.instant,
                    "y": g.y,
                    "x1": g.x1,
                    "x2": g.x2,
                    "permit": _text(g.permit),
                    "waiting": _text(g.waiting),
                }
                for g in self.guide_lines
            ],
            "columns": [
                {
                    "process": c.process_name,
                    "header": _text(c.header),
                    "glyphs": [_glyph(g) for g in c.glyphs],
                }
                for c in self.columns
            ],
            "legend": {
                "frame": list(self.legend.frame),
                "title": _text(self.legend.title),
                "samples": [
                    {"glyph": _glyph(g), "label": _text(t)} for g, t in self.legend.samples
                ],
            },
            "meta": dict(self.meta),
        }


@dataclass(frozen=True)
class LayoutScaler:
    config: LayoutConfig
    process_count: int
    max_time: int | None

    def __post_init__(self) -> None:
        if not self.max_time:
            raise NothingToRenderError("nothing to render: no intervals with positive duration")

    def y(self, t: int) -> int:
        c = self.config
        return t * (c.height - c.margin_top - c.margin_bottom) // self.max_time + c.margin_top

    @property
    def waiting_width(self) -> int:
        c = self.config
        return max(self.process_count * c.waiting_name_width, c.min_waiting_width)

    @property
    def width(self) -> int:
        c = self.config
        return (
            self.process_count * c.process_width
            + self.waiting_width
            + c.permit_width
            + c.legend_width
            + c.margin_x
        )

    def column_centers(self) -> list[int]:
        half = self.config.process_width // 2
        x = self.waiting_width + self.config.permit_width
        centers: list[int] = []
        for _ in range(self.process_count):
            x += half
            centers.append(x)
            x += half
        return centers


def _glyph_span(scaler: LayoutScaler, start: int, end: int, margin: int) -> tuple[int, int]:
    y1 = scaler.y(start) + margin
    y2 = scaler.y(end) - margin
    if y1 > y2:
        # Too short for its margins; draw it unpadded.
        return scaler.y(start), scaler.y(end)
    return y1, y2


def _legend(scaler: LayoutScaler, x: int) -> Legend:
    c = scaler.config
    x += 2 * c.margin_x
    y = c.height // 8

    frame = (
        x - 2 * c.arrow_head,
        y - c.legend_arrow_margin,
        x + c.legend_width - 2 * c.margin_x + c.arrow_head // 2,
        y + 3 * (c.legend_arrow_margin + c.legend_arrow_height) + c.legend_arrow_margin,
    )
    title = TextItem(LEGEND_TITLE, x + 3 * c.legend_arrow_margin, y)

    samples: list[tuple[Glyph, TextItem]] = []
    y += c.legend_arrow_margin
    for kind in (DrawKind.ARROW, DrawKind.DOTTED, DrawKind.THICK_ARROW):
        glyph = Glyph(kind=kind, x=x, y1=y, y2=y + c.legend_arrow_height)
        label = TextItem(
            LEGEND_LABELS[kind], x + c.legend_arrow_margin, y + c.legend_arrow_height // 2
        )
        samples.append((glyph, label))
        y += c.legend_arrow_margin + c.legend_arrow_height

    return Legend(frame=frame, title=title, samples=tuple(samples))


def layout_timeline(timeline: Timeline, config: LayoutConfig | None = None) -> Diagram:
    c = config or LayoutConfig()
    scaler = LayoutScaler(config=c, process_count=len(timeline.roster), max_time=timeline.max_time)
    width = scaler.width
    waiting_width = scaler.waiting_width

    guide_lines: list[GuideLine] = []
    for m in timeline.marks:
        text_y = scaler.y(m.instant - 1)
        guide_lines.append(
            GuideLine(
                instant=m.instant,
                y=scaler.y(m.instant),
                x1=c.margin_x,
                x2=width - c.legend_width - c.margin_x,
                permit=TextItem(
                    str(m.permit_value), waiting_width + int(c.permit_width / 1.5), text_y
                ),
                waiting=TextItem(
                    m.waiting_label(), c.margin_x + c.min_waiting_width // 5, text_y
                ),
            )
        )

    headers = (
        TextItem(HEADER_PERMITS, waiting_width + int(c.permit_width / 2.9), c.header_y),
        TextItem(HEADER_WAITING, int(waiting_width / 3.4), c.header_y),
    )

    columns: list[Column] = []
    centers = scaler.column_centers()
    for proc, x in zip(timeline.roster, centers):
        suffix = " (W)" if proc.role is Role.WRITER else " (R)"
        glyphs: list[Glyph] = []
        for a in timeline.arrows_of(proc.name):
            kind = _DRAW_KIND[a.kind]
            margin = c.dotted_margin if kind is DrawKind.DOTTED else c.arrow_margin
            y1, y2 = _glyph_span(scaler, a.start, a.end, margin)
            glyphs.append(Glyph(kind=kind, x=x, y1=y1, y2=y2))
        columns.append(
            Column(
                process_name=proc.name,
                header=TextItem(proc.name + suffix, x - 7, c.header_y),
                glyphs=tuple(glyphs),
            )
        )

    legend_x = waiting_width + c.permit_width + len(timeline.roster) * 2 * (c.process_width // 2)
    return Diagram(
        width=width,
        height=c.height,
        config=c,
        headers=headers,
        guide_lines=tuple(guide_lines),
        columns=tuple(columns),
        legend=_legend(scaler, legend_x),
        meta={
            "permits": timeline.permits,
            "max_time_ms": timeline.max_time,
            "processes": len(timeline.roster),
        },
    )
