"""Tkinter front end: login dialog, lamp buttons and statistics window."""

from __future__ import annotations

import argparse
import logging
import tkinter as tk
from collections.abc import Mapping, Sequence
from tkinter import messagebox

from strikepad.analysis import analyze_training, build_analysis_message
from strikepad.charts import Color, Rect, draw_charts
from strikepad.client import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    EspClient,
    EspError,
    format_zone_result,
)
from strikepad.session import SessionError, TrainingSession
from strikepad.training import ZONE_COUNT

log = logging.getLogger(__name__)

POLL_INTERVAL_MS = 1000
HIGHLIGHT_MS = 500
HIGHLIGHT_COLOR = "#45a049"


def validate_username(text: str) -> str:
    """Accept any non-empty input and return it without surrounding blanks."""
    if not text:
        raise ValueError("Введите имя пользователя")
    return text.strip()


def _zone_caption(zone: int) -> str:
    return f"Зона {zone}"


def _selected_caption(lamp: int) -> str:
    return f"Лампа {lamp}\nВыбрана"


def _zone_captions(results: Mapping[int, tuple[int, float]]) -> dict[int, str]:
    """Caption of every lamp button after a poll of the receiver."""
    captions = {zone: _zone_caption(zone) for zone in range(1, ZONE_COUNT + 1)}
    for zone, (impact, time) in results.items():
        if zone in captions:
            captions[zone] = format_zone_result(impact, time)
    return captions


def _hex(color: Color) -> str:
    red, green, blue = color
    return f"#{red:02x}{green:02x}{blue:02x}"


def _text_position(rect: Rect, align: str) -> tuple[int, int, str]:
    centre_x = rect.x + rect.width // 2
    if align == "center":
        return centre_x, rect.y + rect.height // 2, "center"
    if align == "top-center":
        return centre_x, rect.y, "n"
    raise ValueError(f"unknown alignment: {align!r}")


class _TkCanvas:
    """Adapter that lets the chart code draw on a tkinter canvas."""

    def __init__(self, canvas) -> None:
        self._canvas = canvas

    def fill(self, rect: Rect, color: Color) -> None:
        self._canvas.create_rectangle(
            rect.x, rect.y, rect.x + rect.width, rect.y + rect.height,
            fill=_hex(color), outline="",
        )

    def text(self, rect: Rect, text: str, align: str) -> None:
        x, y, anchor = _text_position(rect, align)
        self._canvas.create_text(x, y, text=text, anchor=anchor, fill="black")

    def line(self, start: tuple[int, int], end: tuple[int, int], color: Color) -> None:
        self._canvas.create_line(*start, *end, fill=_hex(color))

    def rectangle(self, rect: Rect, color: Color) -> None:
        self._canvas.create_rectangle(
            rect.left, rect.top, rect.right + 1, rect.bottom + 1,
            fill=_hex(color), outline="black",
        )


class LoginDialog(tk.Toplevel):
    """Asks for the user name; ``username`` stays None if the dialog is closed."""

    def __init__(self, master) -> None:
        super().__init__(master)
        self.title("Вход в аккаунт")
        self.username: str | None = None
        self._entry = tk.Entry(self, width=30)
        self._entry.pack(padx=10, pady=(10, 5))
        tk.Button(self, text="Войти", command=self.submit).pack(padx=10, pady=(5, 10))
        self._entry.bind("<Return>", lambda _event: self.submit())
        self._entry.focus_set()
        self.transient(master)

    def submit(self) -> None:
        try:
            username = validate_username(self._entry.get())
        except ValueError as exc:
            messagebox.showwarning("Ошибка", str(exc), parent=self)
            return
        self.username = username
        self.destroy()


class MainWindow:
    """Lamp buttons and training controls bound to a training session."""

    def __init__(self, root, session: TrainingSession) -> None:
        self.root = root
        self.session = session
        self._poll_job = None
        self._trainings: list = []
        root.title("Тренировка")

        grid = tk.Frame(root)
        grid.pack(padx=10, pady=10)
        self.buttons: dict[int, tk.Button] = {}
        for zone in range(1, ZONE_COUNT + 1):
            button = tk.Button(
                grid, width=14, height=3,
                command=lambda lamp=zone: self._on_lamp(lamp),
            )
            row, column = divmod(zone - 1, 4)
            button.grid(row=row, column=column, padx=4, pady=4)
            self.buttons[zone] = button
        self._default_bg = next(iter(self.buttons.values())).cget("background")

        controls = tk.Frame(root)
        controls.pack(padx=10, pady=(0, 10))
        for text, command in (
            ("Создать тренировку", self._on_create_training),
            ("Начать тренировку", self._on_start_training),
            ("Быстрая тренировка", self._on_fast_training),
            ("Статистика", self.show_statistics),
        ):
            tk.Button(controls, text=text, command=command).pack(side=tk.LEFT, padx=4)

        self.reset_button_texts()

    def reset_button_texts(self) -> None:
        for zone, button in self.buttons.items():
            button.configure(text=_zone_caption(zone))

    def _start_polling(self) -> None:
        if self._poll_job is not None:
            self.root.after_cancel(self._poll_job)
        self._poll_job = self.root.after(POLL_INTERVAL_MS, self._poll_tick)

    def _poll_tick(self) -> None:
        self._poll_job = self.root.after(POLL_INTERVAL_MS, self._poll_tick)
        try:
            results = self.session.poll()
        except EspError as exc:
            log.debug("poll failed: %s", exc)
            return
        for zone, caption in _zone_captions(results).items():
            button = self.buttons[zone]
            button.configure(text=caption)
            if zone in results:
                button.configure(background=HIGHLIGHT_COLOR)
                self.root.after(
                    HIGHLIGHT_MS,
                    lambda b=button: b.configure(background=self._default_bg),
                )

    def _on_lamp(self, lamp: int) -> None:
        if self.session.press_lamp(lamp):
            self.buttons[lamp].configure(text=_selected_caption(lamp))

    def _on_create_training(self) -> None:
        if self.session.toggle_recording():
            self.reset_button_texts()

    def _on_start_training(self) -> None:
        self.reset_button_texts()
        try:
            self.session.start_training()
        except SessionError as exc:
            log.debug("%s", exc)
            return
        except EspError as exc:
            log.debug("sending the sequence failed: %s", exc)
        self._start_polling()

    def _on_fast_training(self) -> None:
        self.reset_button_texts()
        try:
            self.session.fast_training()
        except EspError as exc:
            log.debug("sending the sequence failed: %s", exc)
        self._start_polling()

    def show_statistics(self) -> None:
        try:
            trainings = self.session.load_statistics()
        except SessionError as exc:
            messagebox.showwarning("Ошибка", str(exc), parent=self.root)
            return
        if not trainings:
            messagebox.showinfo("Статистика", "Нет данных о тренировках", parent=self.root)
            return
        self._open_statistics_window(trainings)

    def _open_statistics_window(self, trainings: Sequence[Mapping]) -> None:
        self._trainings = list(trainings)
        dialog = tk.Toplevel(self.root)
        dialog.title("Статистика тренировок - " + self.session.username)
        dialog.geometry("800x650")

        canvas = tk.Canvas(dialog, background="white", highlightthickness=0)
        canvas.pack(fill=tk.BOTH, expand=True)

        def redraw(event) -> None:
            canvas.delete("all")
            draw_charts(_TkCanvas(canvas), Rect(0, 0, event.width, event.height), self._trainings)

        canvas.bind("<Configure>", redraw)

        text = tk.Text(dialog, height=8, font=("TkDefaultFont", 14), wrap=tk.WORD)
        text.insert("1.0", build_analysis_message(trainings, analyze_training(trainings)))
        text.configure(state=tk.DISABLED)
        text.pack(fill=tk.BOTH)

        dialog.transient(self.root)
        dialog.grab_set()
        self.root.wait_window(dialog)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Strike-pad training console.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="receiver address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="receiver port")
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT, help="request timeout in seconds"
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    client = EspClient(args.host, args.port, args.timeout)

    root = tk.Tk()
    root.withdraw()
    dialog = LoginDialog(root)
    root.wait_window(dialog)

    username = dialog.username or ""
    if dialog.username is not None:
        log.debug("user: %s", username)
        try:
            reply = client.login(username)
            log.debug("login reply: %r", reply)
        except EspError as exc:
            log.debug("login failed: %s", exc)

    session = TrainingSession(client, username)
    root.deiconify()
    MainWindow(root, session)
    root.mainloop()
    return 0