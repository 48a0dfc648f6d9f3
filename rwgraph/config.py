from __future__ import annotations

from dataclasses import dataclass

DEFAULT_HEIGHT = 800
DEFAULT_TOLERANCE_MS = 3
DEFAULT_MAX_STEPS = 200_000


@dataclass(frozen=True)
class LayoutConfig:
    """Pixel constants of the diagram.

    Column widths:
      waiting_name_width   approximate width of one name in the waiting list
      min_waiting_width    floor for the "Waiting processes" column
      permit_width         "Permit value" column
      process_width        one column per process
      legend_width         legend column
      margin_x             gap between the image border and any drawing

    Heights / vertical margins:
      margin_top, margin_bottom   bounds of the area arrows are scaled into
      arrow_margin                gap kept between consecutive arrows
      dotted_margin               same, for waiting (dotted) lines
      legend_arrow_height         length of the sample arrows in the legend
      legend_arrow_margin         spacing between legend samples
    """

    height: int = DEFAULT_HEIGHT

    waiting_name_width: int = 33
    min_waiting_width: int = 200
    permit_width: int = 150
    process_width: int = 100
    legend_width: int = 240
    margin_x: int = 30

    margin_top: int = 60
    margin_bottom: int = 30
    arrow_margin: int = 5
    dotted_margin: int = 5
    legend_arrow_height: int = 40
    legend_arrow_margin: int = 20

    header_y: int = 40
    arrow_head: int = 10
    dash_px: int = 5
    font_family: str = "Sans Serif"
    font_size: int = 15
