import pytest

from strikepad.charts import IMPACT_COLOR, WHITE, Rect, draw_charts
from strikepad.client import DEFAULT_HOST, DEFAULT_PORT, format_zone_result
from strikepad.gui import (
    _TkCanvas,
    _hex,
    _parse_args,
    _selected_caption,
    _text_position,
    _zone_caption,
    _zone_captions,
    validate_username,
)


class _RecordingCanvas:
    def __init__(self):
        self.calls = []

    def create_rectangle(self, *args, **kwargs):
        self.calls.append(("rectangle", args, kwargs))

    def create_text(self, *args, **kwargs):
        self.calls.append(("text", args, kwargs))

    def create_line(self, *args, **kwargs):
        self.calls.append(("line", args, kwargs))


def test_validate_username_returns_trimmed_name():
    assert validate_username("  boxer  ") == "boxer"


def test_validate_username_plain_name():
    assert validate_username("alice") == "alice"


def test_validate_username_rejects_empty():
    with pytest.raises(ValueError, match="Введите имя пользователя"):
        validate_username("")


def test_validate_username_blank_input_accepted_but_trimmed():
    assert validate_username("   ") == ""


def test_zone_and_selected_captions():
    assert _zone_caption(3) == "Зона 3"
    assert _selected_caption(5) == "Лампа 5\nВыбрана"


def test_zone_captions_fill_every_zone():
    captions = _zone_captions({2: (120, 0.5)})
    assert sorted(captions) == list(range(1, 8))
    assert captions[2] == format_zone_result(120, 0.5)
    assert captions[1] == "Зона 1"
    assert captions[7] == "Зона 7"


def test_zone_captions_ignore_unknown_zone():
    captions = _zone_captions({9: (1, 1.0)})
    assert all(text == f"Зона {zone}" for zone, text in captions.items())


def test_hex_colors():
    assert _hex(WHITE) == "#ffffff"
    assert _hex(IMPACT_COLOR) == "#4169e1"


def test_text_position_alignments():
    rect = Rect(10, 20, 100, 40)
    x, y, anchor = _text_position(rect, "top-center")
    assert (y, anchor) == (rect.y, "n")
    cx, cy, centre_anchor = _text_position(rect, "center")
    assert cx == x
    assert centre_anchor == "center"
    assert rect.y < cy < rect.y + rect.height


def test_text_position_rejects_unknown_alignment():
    with pytest.raises(ValueError):
        _text_position(Rect(0, 0, 10, 10), "left")


def test_canvas_rectangle_covers_inclusive_edges():
    fake = _RecordingCanvas()
    rect = Rect(1, 2, 10, 5)
    _TkCanvas(fake).rectangle(rect, IMPACT_COLOR)
    kind, args, kwargs = fake.calls[0]
    assert kind == "rectangle"
    assert args[2] - args[0] == rect.width
    assert args[3] - args[1] == rect.height
    assert kwargs["fill"] == _hex(IMPACT_COLOR)


def test_canvas_line_passes_coordinates():
    fake = _RecordingCanvas()
    _TkCanvas(fake).line((1, 2), (3, 4), WHITE)
    assert fake.calls == [("line", (1, 2, 3, 4), {"fill": _hex(WHITE)})]


def test_draw_charts_through_adapter_draws_bars_and_titles():
    fake = _RecordingCanvas()
    trainings = [{"zones": {"zone1": {"impact": 100, "time": 0.5}}}]
    draw_charts(_TkCanvas(fake), Rect(0, 0, 800, 500), trainings)
    texts = [kwargs["text"] for kind, _, kwargs in fake.calls if kind == "text"]
    assert "Средняя сила удара" in texts
    assert "Среднее время реакции (сек)" in texts
    assert texts.count("Зона 1") == 2
    assert "Зона 2" not in texts


def test_parse_args_defaults():
    args = _parse_args([])
    assert (args.host, args.port) == (DEFAULT_HOST, DEFAULT_PORT)


def test_parse_args_overrides():
    args = _parse_args(["--host", "10.0.0.2", "--port", "8080"])
    assert (args.host, args.port) == ("10.0.0.2", 8080)