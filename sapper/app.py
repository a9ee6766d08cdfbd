"""Desktop window for the game, built on tkinter."""

from __future__ import annotations

import argparse
import queue
import threading
from dataclasses import dataclass
from typing import Any

from .board import Cell
from .game import Difficulty, GameSession
from .network import DEFAULT_PORT, NetworkManager
from .stats import Stats, default_stats_path

MINE_GLYPH = "✹"
FLAG_GLYPH = "⚑"
CLOSED_BACKGROUND = "#c0c0c0"
EMPTY_BACKGROUND = "#e0e0e0"
NUMBER_BACKGROUND = "lightgray"
DEFAULT_FOREGROUND = "black"
NUMBER_COLOURS = (
    DEFAULT_FOREGROUND,
    "#0000ff",
    "#008000",
    "#ff0000",
    "#000080",
    "#800000",
    "#008080",
    "#000000",
    "#808080",
)
CELL_SIZE = 32
_POLL_MS = 50
_LCD_FONT = ("Courier", 18, "bold")


@dataclass(frozen=True)
class CellAppearance:
    """How one board button is drawn."""

    text: str
    background: str
    foreground: str
    enabled: bool
    bold: bool = False


def cell_appearance(cell: Cell) -> CellAppearance:
    """Describe the button for ``cell`` in its current state."""
    if not cell.is_revealed:
        return CellAppearance(
            text=FLAG_GLYPH if cell.is_flagged else "",
            background=CLOSED_BACKGROUND,
            foreground=DEFAULT_FOREGROUND,
            enabled=True,
        )
    background = EMPTY_BACKGROUND if cell.adjacent_mines == 0 else NUMBER_BACKGROUND
    if cell.has_mine:
        return CellAppearance(MINE_GLYPH, background, DEFAULT_FOREGROUND, False)
    if cell.adjacent_mines > 0:
        return CellAppearance(
            text=str(cell.adjacent_mines),
            background=background,
            foreground=NUMBER_COLOURS[cell.adjacent_mines],
            enabled=False,
            bold=True,
        )
    return CellAppearance("", background, DEFAULT_FOREGROUND, False)


class MinesweeperApp:
    """Main window: menus, counters, the board and the network link."""

    def __init__(self, root: Any) -> None:
        import tkinter as tk
        from tkinter import messagebox, simpledialog

        self._tk = tk
        self._messagebox = messagebox
        self._simpledialog = simpledialog
        self.root = root
        self.stats_path = default_stats_path()
        self.session = GameSession(self._load_stats())
        self.network = NetworkManager()
        self._events: queue.Queue[tuple[str, Any]] = queue.Queue()
        self._buttons: list[list[Any]] = []
        self._timer_job: str | None = None

        root.title("Сапер")
        root.configure(bg="silver")
        root.protocol("WM_DELETE_WINDOW", self._close)

        self._create_menu()
        self._create_top_panel()
        self._board_frame = tk.Frame(root, bg="gray", bd=2, relief="sunken", padx=5, pady=5)
        self._board_frame.pack(padx=10, pady=10)

        self._connect_session()
        self._connect_network()
        self.session.change_mode(Difficulty.BEGINNER)
        root.after(_POLL_MS, self._poll_network)

    def _load_stats(self) -> Stats:
        try:
            return Stats.load(self.stats_path)
        except (OSError, ValueError):
            return Stats()

    def _create_menu(self) -> None:
        tk = self._tk
        menubar = tk.Menu(self.root)

        game_menu = tk.Menu(menubar, tearoff=False)
        game_menu.add_command(label="Новая игра", command=self.session.restart)
        game_menu.add_separator()
        for difficulty in Difficulty:
            game_menu.add_command(
                label=difficulty.label,
                command=lambda d=difficulty: self.session.change_mode(d),
            )
        menubar.add_cascade(label="Игра", menu=game_menu)

        extra_menu = tk.Menu(menubar, tearoff=False)
        extra_menu.add_command(label="Статистика", command=self._show_stats)
        extra_menu.add_command(label="Coming soon...", state="disabled")
        menubar.add_cascade(label="Дополнительно", menu=extra_menu)

        network_menu = tk.Menu(menubar, tearoff=False)
        network_menu.add_command(label="Создать игру (Сервер)", command=self._start_server)
        network_menu.add_command(
            label="Присоединиться к игре (Клиент)", command=self._connect_to_server
        )
        menubar.add_cascade(label="Сетевая игра", menu=network_menu)

        self.root.config(menu=menubar)

    def _create_top_panel(self) -> None:
        tk = self._tk
        panel = tk.Frame(self.root, bg="gray", bd=2, relief="sunken", padx=5, pady=5)
        panel.pack(fill="x", padx=10, pady=(10, 0))
        self._mine_counter = tk.Label(
            panel, text="010", font=_LCD_FONT, bg="black", fg="red", width=3
        )
        self._mine_counter.pack(side="left")
        self._timer_label = tk.Label(
            panel, text="000", font=_LCD_FONT, bg="black", fg="red", width=3
        )
        self._timer_label.pack(side="right")
        self._face = tk.Button(
            panel, text="🙂", bg="lightgray", relief="raised", bd=2,
            command=self.session.restart,
        )
        self._face.pack(side="top")

    def _connect_session(self) -> None:
        s = self.session
        s.board_changed.connect(self._build_board)
        s.restarted.connect(self._on_restarted)
        s.cell_updated.connect(self._update_cell)
        s.game_over.connect(self._on_game_over)
        s.counter_changed.connect(lambda text: self._mine_counter.config(text=text))
        s.timer_changed.connect(lambda text: self._timer_label.config(text=text))
        s.turn_changed.connect(lambda mine: self._face.config(text="▶" if mine else "⏸"))
        s.message.connect(
            lambda title, text: self._messagebox.showinfo(title, text, parent=self.root)
        )
        s.outgoing.connect(self._send)

    def _connect_network(self) -> None:
        n = self.network
        n.connected.connect(lambda: self._events.put(("connected", None)))
        n.disconnected.connect(lambda: self._events.put(("disconnected", None)))
        n.data_received.connect(lambda data: self._events.put(("data", data)))
        n.error_occurred.connect(lambda text: self._events.put(("error", text)))

    def _build_board(self) -> None:
        tk = self._tk
        for child in self._board_frame.winfo_children():
            child.destroy()
        self._cancel_timer()
        self._buttons = []
        for row in range(self.session.rows):
            line = []
            for col in range(self.session.cols):
                button = tk.Button(
                    self._board_frame, width=2, height=1, bd=2, relief="raised",
                    bg=CLOSED_BACKGROUND, font=("TkDefaultFont", 8),
                )
                button.grid(row=row, column=col, padx=0, pady=0)
                button.bind("<Button-1>", lambda _e, r=row, c=col: self._on_left(r, c))
                button.bind("<Button-3>", lambda _e, r=row, c=col: self._on_right(r, c))
                line.append(button)
            self._buttons.append(line)
        width = self.session.cols * CELL_SIZE + 40
        height = self.session.rows * CELL_SIZE + 150
        self.root.minsize(width, height)
        self.root.geometry(f"{width}x{height}")

    def _on_restarted(self) -> None:
        self._cancel_timer()
        for line in self._buttons:
            for button in line:
                button.config(
                    state="normal", text="", relief="raised", bg=CLOSED_BACKGROUND,
                    fg=DEFAULT_FOREGROUND, font=("TkDefaultFont", 8),
                )
        self._face.config(bg="lightgray")

    def _update_cell(self, row: int, col: int) -> None:
        look = cell_appearance(self.session.board.cell(row, col))
        font = ("TkDefaultFont", 16, "bold") if look.bold else ("TkDefaultFont", 8)
        self._buttons[row][col].config(
            text=look.text,
            bg=look.background,
            fg=look.foreground,
            disabledforeground=look.foreground,
            state="normal" if look.enabled else "disabled",
            relief="raised" if look.enabled else "sunken",
            font=font,
        )

    def _on_left(self, row: int, col: int) -> str:
        if self._buttons[row][col]["state"] != "disabled":
            self.session.left_click(row, col)
            self._ensure_timer()
        return "break"

    def _on_right(self, row: int, col: int) -> str:
        if not self.session.is_over:
            self.session.right_click(row, col)
        return "break"

    def _ensure_timer(self) -> None:
        if self.session.timer_running and self._timer_job is None:
            self._timer_job = self.root.after(1000, self._on_timer)

    def _on_timer(self) -> None:
        self._timer_job = None
        if self.session.timer_running:
            self.session.tick()
            self._timer_job = self.root.after(1000, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer_job is not None:
            self.root.after_cancel(self._timer_job)
            self._timer_job = None

    def _on_game_over(self, won: bool) -> None:
        self._cancel_timer()
        for row, col, cell in self.session.board:
            button = self._buttons[row][col]
            if cell.has_mine and not cell.is_flagged:
                button.config(text=MINE_GLYPH)
            button.config(state="disabled")
        self._face.config(bg="lightgreen" if won else "red")
        try:
            self.session.stats.save(self.stats_path)
        except OSError as exc:
            self._messagebox.showerror("Статистика", str(exc), parent=self.root)

    def _show_stats(self) -> None:
        tk = self._tk
        dialog = tk.Toplevel(self.root)
        dialog.title("Статистика")
        dialog.geometry("300x200")
        dialog.resizable(False, False)
        for line in self.session.stats.lines():
            tk.Label(dialog, text=line, anchor="w").pack(fill="x", padx=10, pady=4)
        dialog.transient(self.root)
        dialog.grab_set()
        self.root.wait_window(dialog)

    def _send(self, data: bytes) -> None:
        if self.network.is_connected():
            self.network.send_data(data)

    def _poll_network(self) -> None:
        while True:
            try:
                kind, payload = self._events.get_nowait()
            except queue.Empty:
                break
            if kind == "connected":
                self._messagebox.showinfo(
                    "Подключено", "Вы успешно подключились к серверу.", parent=self.root
                )
                self.session.begin_network_game(my_turn=False)
            elif kind == "disconnected":
                self._messagebox.showwarning(
                    "Отключено", "Соединение потеряно.", parent=self.root
                )
                self.session.end_network_game()
                self.network.stop_server()
            elif kind == "data":
                self.session.handle_remote_data(payload)
            elif kind == "error":
                self._messagebox.showerror("Ошибка сети", payload, parent=self.root)
        self.root.after(_POLL_MS, self._poll_network)

    def _ask_port(self, prompt: str) -> int | None:
        return self._simpledialog.askinteger(
            "Порт сервера", prompt, parent=self.root,
            initialvalue=DEFAULT_PORT, minvalue=1024, maxvalue=65535,
        )

    def _start_server(self) -> None:
        port = self._ask_port("Введите порт для сервера:")
        if port is None:
            return
        try:
            self.network.start_server(port)
        except (OSError, RuntimeError):
            return
        self.session.begin_network_game(my_turn=True)
        self._messagebox.showinfo(
            "Сервер запущен", f"Сервер запущен на порту {port}", parent=self.root
        )

    def _connect_to_server(self) -> None:
        host = self._simpledialog.askstring(
            "Подключение к серверу", "Введите IP сервера:",
            parent=self.root, initialvalue="127.0.0.1",
        )
        if not host:
            return
        port = self._ask_port("Введите порт сервера:")
        if port is None:
            return
        threading.Thread(target=self._connect, args=(host, port), daemon=True).start()

    def _connect(self, host: str, port: int) -> None:
        try:
            self.network.connect_to_host(host, port)
        except OSError:
            pass  # reported through error_occurred

    def _close(self) -> None:
        self.network.stop_server()
        self.root.destroy()


def main(argv: list[str] | None = None) -> int:
    """Open the game window and run until it is closed."""
    parser = argparse.ArgumentParser(
        prog="sapper", description="Minesweeper with a two-player network mode."
    )
    parser.parse_args(argv)

    import tkinter as tk

    root = tk.Tk()
    MinesweeperApp(root)
    root.mainloop()
    return 0