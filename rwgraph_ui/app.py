from __future__ import annotations

import sys

from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QScrollArea, QWidget

from rwgraph.layout import Diagram
from rwgraph_ui.renderer import render_diagram


class DiagramWindow(QMainWindow):
    """Scrollable view of one rendered diagram."""

    def __init__(self, diagram: Diagram, *, title: str = "rwgraph", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)

        self._image = render_diagram(diagram)

        self._label = QLabel(self)
        self._label.setObjectName("diagram_image")
        self._label.setPixmap(QPixmap.fromImage(self._image))

        self._scroll = QScrollArea(self)
        self._scroll.setObjectName("diagram_scroll")
        self._scroll.setWidget(self._label)
        self.setCentralWidget(self._scroll)

    def image_size(self) -> tuple[int, int]:
        return self._image.width(), self._image.height()


def run_app(diagram: Diagram, *, title: str = "rwgraph", argv: list[str] | None = None) -> int:
    app = QApplication.instance()
    if app is None:
        app = QApplication(argv if argv is not None else sys.argv)
    elif not isinstance(app, QApplication):
        raise RuntimeError(f"the viewer needs a QApplication, found {type(app).__name__}")
    app.setApplicationName("rwgraph")

    window = DiagramWindow(diagram, title=title)
    window.resize(min(diagram.width + 40, 1400), min(diagram.height + 40, 900))
    window.show()

    return app.exec()
