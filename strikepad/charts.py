"""Bar-chart layout and drawing of per-zone averages."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from strikepad.analysis import zone_averages

Color = tuple[int, int, int]

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)
IMPACT_COLOR: Color = (65, 105, 225)
TIME_COLOR: Color = (60, 179, 113)
IMPACT_TITLE = "Средняя сила удара"
TIME_TITLE = "Среднее время реакции (сек)"


def _cdiv(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


@dataclass(frozen=True)
class Rect:
    """Integer rectangle whose right and bottom edges are inclusive."""

    x: int
    y: int
    width: int
    height: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width - 1

    @property
    def bottom(self) -> int:
        return self.y + self.height - 1

    def adjusted(self, dx1: int, dy1: int, dx2: int, dy2: int) -> Rect:
        return Rect(
            self.x + dx1,
            self.y + dy1,
            self.width + dx2 - dx1,
            self.height + dy2 - dy1,
        )


@dataclass(frozen=True)
class Bar:
    """One drawn bar with its value caption and zone caption."""

    zone: int
    value: float
    rect: Rect
    label_rect: Rect

    @property
    def value_text(self) -> str:
        return f"{self.value:.2f}"

    @property
    def zone_text(self) -> str:
        return f"Зона {self.zone}"


class Canvas(Protocol):
    def fill(self, rect: Rect, color: Color) -> None: ...

    def text(self, rect: Rect, text: str, align: str) -> None: ...

    def line(self, start: tuple[int, int], end: tuple[int, int], color: Color) -> None: ...

    def rectangle(self, rect: Rect, color: Color) -> None: ...


def _plot_area(rect: Rect) -> Rect:
    return rect.adjusted(40, 30, -20, -30)


def layout_bar_chart(rect: Rect, values: Sequence[float]) -> list[Bar]:
    """Place one bar per non-zero value, scaled to the largest value."""
    if not values:
        raise ValueError("a bar chart needs at least one value")
    max_value = max(values) or 1
    area = _plot_area(rect)
    bar_width = _cdiv(area.width, len(values))
    bars = []
    for index, value in enumerate(values):
        if value == 0:
            continue
        bar_height = int(value / max_value * area.height)
        left = area.left + index * bar_width
        bars.append(
            Bar(
                zone=index + 1,
                value=value,
                rect=Rect(left + 5, area.bottom - bar_height, bar_width - 10, bar_height),
                label_rect=Rect(left, area.bottom + 5, bar_width, 20),
            )
        )
    return bars


def split_chart_area(rect: Rect) -> tuple[Rect, Rect]:
    """Upper area for impact, lower area for time, with a 20-pixel gap."""
    half = _cdiv(rect.height, 2)
    upper = Rect(rect.x, rect.y, rect.width, half - 10)
    lower = Rect(rect.x, rect.y + half + 10, rect.width, half - 10)
    return upper, lower


def _draw_bar_chart(
    canvas: Canvas, rect: Rect, values: Sequence[float], title: str, color: Color
) -> None:
    canvas.text(rect, title, "top-center")
    area = _plot_area(rect)
    canvas.line((area.left, area.bottom), (area.right, area.bottom), BLACK)
    canvas.line((area.left, area.bottom), (area.left, area.top), BLACK)
    for bar in layout_bar_chart(rect, values):
        canvas.rectangle(bar.rect, color)
        canvas.text(bar.rect, bar.value_text, "center")
        canvas.text(bar.label_rect, bar.zone_text, "top-center")


def draw_charts(canvas: Canvas, rect: Rect, trainings: Sequence[Mapping]) -> None:
    """Draw average impact and average time per zone onto the canvas."""
    canvas.fill(rect, WHITE)
    impacts, times = zone_averages(trainings)
    impact_rect, time_rect = split_chart_area(rect)
    _draw_bar_chart(canvas, impact_rect, impacts, IMPACT_TITLE, IMPACT_COLOR)
    _draw_bar_chart(canvas, time_rect, times, TIME_TITLE, TIME_COLOR)