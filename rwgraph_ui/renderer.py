"""Paints a `rwgraph.layout.Diagram` onto a QImage.

All geometry comes precomputed from the core; this module only decides pens,
colours and how each glyph kind is stroked.
"""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QCoreApplication, Qt
from PySide6.QtGui import QColor, QFont, QImage, QPainter, QPen
from PySide6.QtWidgets import QApplication

from rwgraph.layout import Diagram, DrawKind, Glyph, TextItem

DEFAULT_IMAGE_NAME = "grafica.png"

_WHITE = QColor(Qt.GlobalColor.white)
_BLACK = QColor(Qt.GlobalColor.black)
_GRAY = QColor(Qt.GlobalColor.gray)
_LIGHT_GRAY = QColor(Qt.GlobalColor.lightGray)

_THICK_WIDTH = 4
_FRAME_WIDTH = 2


_app: QApplication | None = None


def _ensure_gui_app() -> None:
    # Text rendering needs a GUI application object, even off screen. A widgets
    # application is created so the viewer can still open a window later.
    global _app
    if QCoreApplication.instance() is None:
        _app = QApplication([])


def _pen(color: QColor, width: int = 1) -> QPen:
    pen = QPen(color)
    pen.setWidth(width)
    return pen


def _dashed_h(p: QPainter, x1: int, x2: int, y: int, dash: int) -> None:
    x = x1
    while x - x1 < x2 - x1:
        p.drawLine(x, y, x + dash, y)
        x += 2 * dash


def _dashed_v(p: QPainter, x: int, y1: int, y2: int, dash: int) -> None:
    y = y1
    while y - y1 < y2 - y1:
        p.drawLine(x, y, x, y + dash)
        y += 2 * dash


def _arrow(p: QPainter, x: int, y1: int, y2: int, head: int) -> None:
    p.drawLine(x, y1, x, y2)
    p.drawLine(x, y2, x - head, y2 - head)
    p.drawLine(x, y2, x + head, y2 - head)


def draw_glyph(p: QPainter, glyph: Glyph, *, color: QColor, head: int, dash: int) -> None:
    if glyph.kind is DrawKind.ARROW:
        p.setPen(_pen(color))
        _arrow(p, glyph.x, glyph.y1, glyph.y2, head)
    elif glyph.kind is DrawKind.DOTTED:
        p.setPen(_pen(color))
        _dashed_v(p, glyph.x, glyph.y1, glyph.y2, dash)
    elif glyph.kind is DrawKind.THICK_ARROW:
        p.setPen(_pen(color, _THICK_WIDTH))
        _arrow(p, glyph.x + 1, glyph.y1, glyph.y2, head)
        p.setPen(_pen(color))
    else:
        raise AssertionError(f"unhandled glyph kind: {glyph.kind}")


def _text(p: QPainter, item: TextItem) -> None:
    if item.text:
        p.drawText(item.x, item.y, item.text)


def render_diagram(diagram: Diagram) -> QImage:
    _ensure_gui_app()
    c = diagram.config

    img = QImage(diagram.width, diagram.height, QImage.Format.Format_RGB32)
    img.fill(_WHITE)

    p = QPainter(img)
    try:
        font = QFont(c.font_family)
        font.setPixelSize(c.font_size)
        p.setFont(font)

        for line in diagram.guide_lines:
            p.setPen(_pen(_LIGHT_GRAY))
            _dashed_h(p, line.x1, line.x2, line.y, c.dash_px)
            _text(p, line.permit)
            p.setPen(_pen(_GRAY))
            _text(p, line.waiting)

        p.setPen(_pen(_BLACK))
        for header in diagram.headers:
            _text(p, header)

        for column in diagram.columns:
            p.setPen(_pen(_BLACK))
            _text(p, column.header)
            for glyph in column.glyphs:
                draw_glyph(p, glyph, color=_BLACK, head=c.arrow_head, dash=c.dash_px)

        legend = diagram.legend
        x1, y1, x2, y2 = legend.frame
        p.setPen(_pen(_GRAY, _FRAME_WIDTH))
        p.drawLine(x1, y1, x1, y2)
        p.drawLine(x1, y2, x2, y2)
        p.drawLine(x2, y2, x2, y1)
        p.drawLine(x2, y1, x1, y1)
        p.setPen(_pen(_GRAY))
        _text(p, legend.title)
        for glyph, label in legend.samples:
            draw_glyph(p, glyph, color=_GRAY, head=c.arrow_head, dash=c.dash_px)
            _text(p, label)
    finally:
        p.end()

    return img


def save_diagram(diagram: Diagram, path: Path | None = None) -> Path:
    """Render and encode once; the format follows the file suffix."""

    out = Path(path) if path is not None else Path(DEFAULT_IMAGE_NAME)
    out.parent.mkdir(parents=True, exist_ok=True)
    img = render_diagram(diagram)
    if not img.save(str(out)):
        raise OSError(f"could not write image {out}")
    return out
